"""
Configuration system for the Rock Plugin Tool.
"""

from .models import ToolConfig, ScaffoldConfiguration
from .manager import ConfigManager

__all__ = ['ToolConfig', 'ScaffoldConfiguration', 'ConfigManager']

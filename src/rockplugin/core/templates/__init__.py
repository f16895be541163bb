"""
Template processing for project scaffolding.

Provides the Jinja2-based renderer used to turn the bundled project
templates into concrete files.
"""

from .renderer import TemplateRenderer

__all__ = ['TemplateRenderer']

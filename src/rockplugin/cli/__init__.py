"""
Command line interface for the Rock Plugin Tool.
"""

from rockplugin import __version__

__all__ = ['__version__']

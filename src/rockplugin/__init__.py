"""
Rock Plugin Tool

Scaffolds Rock RMS plugin projects from templates and keeps package manifest
versions in line with Directory.Build.props.
"""

__version__ = "1.16.2"

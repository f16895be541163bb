"""
Core systems for the Rock Plugin Tool: errors, configuration, file
operations and template rendering.
"""

"""
Subcommands of the rockplugin CLI.
"""

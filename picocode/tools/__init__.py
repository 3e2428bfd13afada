"""
Tool system for picocode.

This package provides the tool base class, the registry and the builtin
file, search and shell tools.
"""

"""
Safety layer for picocode.

This package provides lexical path containment and the confirmation guard
wrapped around destructive tools.
"""

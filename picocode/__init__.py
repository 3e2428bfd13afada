"""
Core package for the picocode coding assistant.

This package provides the trust layer between a language model and the
tools it may call: a lexical path sandbox, a confirmation guard with
session-wide approval, a bounded multi-turn tool-calling loop and the
configuration, provider and terminal plumbing around them.
"""

__version__ = "0.2.0"

"""
System prompt and personas for picocode.
"""

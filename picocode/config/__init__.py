"""
Configuration loading and schema for picocode.
"""

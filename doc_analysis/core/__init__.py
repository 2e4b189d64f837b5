"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: REST paths, header names, polling defaults
- exceptions: Custom exception hierarchy
"""

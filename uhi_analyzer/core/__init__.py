"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named constants (radius range, supported years, tick interval)
- exceptions: Custom exception hierarchy
"""

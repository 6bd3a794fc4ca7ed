"""
Utility functions and helpers.

Modules:
- files: Reading input documents and writing extracted output
"""

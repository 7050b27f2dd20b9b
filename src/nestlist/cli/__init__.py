"""
Nestlist Command-Line Interface
===============================

- **nestlist tokens**: print the token stream of an input
- **nestlist check**: recognize an input with a chosen parser

Implemented as a Click command group with help and error reporting.
"""

__all__ = ["main"]

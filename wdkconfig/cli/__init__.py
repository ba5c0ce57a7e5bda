"""
wdkconfig CLI module.

This module provides the build-step entry point.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]

"""
wdkconfig - build-time configuration for Windows Driver Kit bindings.

Discovers installed kits, resolves include/library paths and preprocessor
definitions for a driver configuration, emits build orchestrator directives
and drives the header-binding generator.
"""

__version__ = "0.1.0"

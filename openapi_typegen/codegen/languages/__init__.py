"""
Language-specific code generators.

This module contains generators for the supported target languages.
"""

from .typescript import TypeScriptGenerator

__all__ = ["TypeScriptGenerator"]

"""
Engine API

LayoutEngine is the facade hosts embed: programmatic edits, pointer
events, viewport notifications and layout import/export.
"""

from .engine import LayoutEngine

__all__ = ["LayoutEngine"]

"""
Review Context Builder

This module builds trimmed file excerpts around modified ranges
for review prompts.
"""

from .context import ContextWindowBuilder, DEFAULT_MARGIN, SKIP_MARKER

__all__ = ['ContextWindowBuilder', 'DEFAULT_MARGIN', 'SKIP_MARKER']

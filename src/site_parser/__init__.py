"""Readers for generated documentation sites.

This package turns a statically generated site into a page tree and
provides the body element of each page for transformation.
"""

from .antora_parser import AntoraParser
from .base import Parser
from .errors import (
    ResolutionError,
    NavigationError,
    SourceReadError,
    TransformError,
)

__all__ = [
    'AntoraParser',
    'Parser',
    'ResolutionError',
    'NavigationError',
    'SourceReadError',
    'TransformError',
]

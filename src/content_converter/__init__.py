"""Content conversion module for HTML → Confluence storage format.

This module provides the StorageTransformer which rewrites a page body
into Confluence storage format and collects the attachments it references.
"""

from .base import Transformer
from .storage_transformer import StorageTransformer

__all__ = ['StorageTransformer', 'Transformer']

"""Data models for the page tree, remote pages and transformation results."""

from src.models.config import PublishConfig, SpaceMapping
from src.models.page_tree import PageNode, PageTree, PageTreeError, TreeFrozenError
from src.models.remote_page import RemotePageRecord, RemoteSpace
from src.models.transform_result import Attachment, TransformResult

__all__ = [
    'Attachment',
    'PageNode',
    'PageTree',
    'PageTreeError',
    'PublishConfig',
    'RemotePageRecord',
    'RemoteSpace',
    'SpaceMapping',
    'TransformResult',
    'TreeFrozenError',
]

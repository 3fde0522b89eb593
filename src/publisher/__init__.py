"""Publish workflow: reconciles resolved page trees with Confluence spaces."""

from .models import MappingReport, PublishReport, SyncStats
from .publisher import Publisher, dump_tree
from .sync_engine import SyncEngine, SyncPass

__all__ = [
    'MappingReport',
    'Publisher',
    'PublishReport',
    'SyncEngine',
    'SyncPass',
    'SyncStats',
    'dump_tree',
]

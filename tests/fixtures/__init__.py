"""Test fixtures for the wiki publisher.

This module provides a sample Antora generated site that tests write to
a temporary directory.
"""

from .antora_site import (
    SAMPLE_NAV,
    SAMPLE_INDEX,
    SAMPLE_INTRO,
    SAMPLE_INSTALL,
    SAMPLE_FIRST_STEPS,
    SAMPLE_REFERENCE,
    SAMPLE_IMAGE,
    page,
    write_site,
    write_index,
)

__all__ = [
    "SAMPLE_NAV",
    "SAMPLE_INDEX",
    "SAMPLE_INTRO",
    "SAMPLE_INSTALL",
    "SAMPLE_FIRST_STEPS",
    "SAMPLE_REFERENCE",
    "SAMPLE_IMAGE",
    "page",
    "write_site",
    "write_index",
]

"""Root pytest configuration for all tests."""

import logging

# atlassian-python-api logs expected lookup failures (missing space or page)
# at ERROR level. Only show actual warnings.
logging.getLogger("atlassian").setLevel(logging.WARNING)

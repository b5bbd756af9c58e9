"""
photoport - Replays exported photo albums into destination services.

This package holds the OAuth2 provider descriptors used by a generic OAuth2
client and the Daybook album importer, together with the idempotent executor
that makes album imports safe to retry.
"""

__version__ = "0.1.0"

from photoport.config import Settings
from photoport.executor import IdempotentImportExecutor, get_result_store

__all__ = [
    "__version__",
    "Settings",
    "IdempotentImportExecutor",
    "get_result_store",
]

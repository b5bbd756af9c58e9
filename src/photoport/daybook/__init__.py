"""
Daybook integration.

Replays exported photo albums against the Daybook REST API.
"""

from photoport.daybook.importer import DaybookPhotosImporter

__all__ = [
    "DaybookPhotosImporter",
]

"""
Persistence adapters.

Each entity store keeps an ordered list of records in memory and mirrors it to
one JSON file. Services depend on RecordStore instead of touching the files.
"""

from .json_storage import RecordStore

__all__ = ["RecordStore"]

from .base import RecordStore
from .factory import build_record_store

__all__ = ["RecordStore", "build_record_store"]

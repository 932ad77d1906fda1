"""Record serialization adapter package."""

from __future__ import annotations

from .denormalizer import RecordDenormalizer
from .documents import decode_documents, load_records
from .schema import RecordEnvelope, SyncMetadata

__all__ = [
    "RecordDenormalizer",
    "RecordEnvelope",
    "SyncMetadata",
    "decode_documents",
    "load_records",
]

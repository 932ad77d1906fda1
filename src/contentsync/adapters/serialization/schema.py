"""Pydantic models for the reserved blocks of a decoded record."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ContentSyncBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class SyncMetadata(ContentSyncBaseModel):
    """The ``_content_sync`` block naming what a record describes."""

    entity_type: str | None = None
    uuid: str | None = None
    bundle: str | None = None


class RecordEnvelope(ContentSyncBaseModel):
    """A decoded record: reserved blocks plus field values kept as extras."""

    content_sync: SyncMetadata | None = Field(default=None, alias="_content_sync")
    translations: dict[str, Any] | None = Field(default=None, alias="_translations")

    @property
    def entity_type(self) -> str | None:
        return self.content_sync.entity_type if self.content_sync else None

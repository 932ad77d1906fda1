"""Decoding of YAML export documents into records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

import yaml

from contentsync.domain.errors import DenormalizationError

if TYPE_CHECKING:
    from pathlib import Path


def decode_documents(text: str) -> list[dict[str, Any]]:
    """Decode every YAML document in ``text``; empty documents are skipped."""

    try:
        documents = list(yaml.safe_load_all(text))
    except yaml.YAMLError as exc:
        raise DenormalizationError(f"Invalid YAML: {exc}") from exc

    records: list[dict[str, Any]] = []
    for position, document in enumerate(documents, start=1):
        if document is None:
            continue
        if not isinstance(document, dict):
            raise DenormalizationError(
                f"Document {position} is a {type(document).__name__}, expected a mapping"
            )
        records.append(cast(dict[str, Any], document))
    return records


def load_records(path: Path) -> list[dict[str, Any]]:
    with path.open(encoding="utf-8") as handle:
        return decode_documents(handle.read())

"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING, Any

from contentsync.adapters.serialization import RecordDenormalizer, load_records
from contentsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyContentUnitOfWork,
    is_started,
    startup,
)
from contentsync.config import get_importer_config
from contentsync.domain.errors import TranslationMergeError
from contentsync.domain.importer import ContentImporter
from contentsync.domain.model import default_registry
from contentsync.domain.ports.unit_of_work import ContentUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from contentsync.config import ImporterConfig
    from contentsync.domain.context import ImportContext
    from contentsync.domain.model import EntityKindRegistry

UnitOfWorkFactory = Callable[[], ContentUnitOfWork]


log = getLogger(__name__)


@dataclass(slots=True)
class ImportResult:
    """Counters for one batch import.

    ``translation_failures`` maps the uuid of an imported entity to the languages
    whose translation merge failed and the error message for each.
    """

    imported: int = 0
    skipped: int = 0
    rejected: int = 0
    translation_failures: dict[str, dict[str, str]] = field(
        default_factory=dict[str, dict[str, str]]
    )


def import_records(
    records: Iterable[Mapping[str, Any]],
    *,
    context: ImportContext | Mapping[str, object] | None = None,
    config: ImporterConfig | None = None,
    registry: EntityKindRegistry | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ImportResult:
    """Import decoded records, committing one unit of work per record.

    Store failures roll the current record back and propagate. A record whose
    translations partly failed is still committed and reported in the result.
    """

    effective_config = config or get_importer_config()
    effective_registry = registry or default_registry()
    if unit_of_work_factory is None and not is_started():
        startup()
    effective_uow = unit_of_work_factory or partial(SqlAlchemyContentUnitOfWork, effective_registry)
    denormalizer = RecordDenormalizer(effective_registry, formats=(effective_config.format,))
    result = ImportResult()

    for record in records:
        with effective_uow() as uow:
            importer = ContentImporter(
                denormalizer=denormalizer,
                registry=effective_registry,
                store=uow.repositories.entities,
                config=effective_config,
            )
            if importer.resolve_entity_type(record, context) is None:
                log.warning("Skipping record without entity type")
                result.skipped += 1
                continue
            try:
                entity = importer.import_entity(record, context)
            except TranslationMergeError as exc:
                uow.commit()
                result.imported += 1
                result.translation_failures[str(exc.entity.uuid)] = {
                    langcode: str(error) for langcode, error in exc.failures.items()
                }
                continue
            if entity is None:
                result.rejected += 1
                continue
            uow.commit()
            result.imported += 1

    log.info(
        "Finished import: imported=%s, skipped=%s, rejected=%s, translation_failures=%s",
        result.imported,
        result.skipped,
        result.rejected,
        len(result.translation_failures),
    )
    return result


def import_files(
    paths: Iterable[Path],
    *,
    context: ImportContext | Mapping[str, object] | None = None,
    config: ImporterConfig | None = None,
    registry: EntityKindRegistry | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ImportResult:
    """Decode YAML files and import their records in file order."""

    records: list[dict[str, Any]] = []
    for path in paths:
        loaded = load_records(path)
        log.info("Loaded %d records from %s", len(loaded), path)
        records.extend(loaded)
    return import_records(
        records,
        context=context,
        config=config,
        registry=registry,
        unit_of_work_factory=unit_of_work_factory,
    )

"""Orchestration of the load, resolve, classify and aggregate stages."""

import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from apistats.aggregate import aggregate, filter_excluded
from apistats.aggregation_row import AggregationRow
from apistats.classify_item import Classification, ClassifiedItem, classify_items
from apistats.document import Document
from apistats.errors import CyclicReExportError
from apistats.grouping import Grouping, parse_grouping
from apistats.load_config import load_config
from apistats.load_document import load_document, load_document_file
from apistats.resolve_paths import Resolution, resolve_paths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyzedDocument:
    """One document together with its resolution and classification."""

    document: Document
    resolution: Resolution
    classification: Classification


@dataclass
class AnalysisResult:
    """Everything a report needs from one analysis run."""

    rows: list[AggregationRow]
    grouping: Grouping
    items: list[ClassifiedItem] = field(default_factory=list)
    warnings: list[CyclicReExportError] = field(default_factory=list)
    excluded: int = 0
    documents: list[AnalyzedDocument] = field(default_factory=list)

    @property
    def unrecognized(self) -> dict[str, int]:
        """Raw kind tags counted as Other, across all documents."""
        total: Counter[str] = Counter()
        for d in self.documents:
            total.update(d.classification.unrecognized)
        return dict(sorted(total.items()))

    @property
    def deprecated(self) -> list[ClassifiedItem]:
        """Kept items carrying deprecation metadata."""
        return [i for i in self.items if i.is_deprecated]


def analyze_document(
    document: Document, config: dict[str, Any] | None = None
) -> AnalyzedDocument:
    """Resolve and classify a single loaded document."""
    resolution = resolve_paths(document, config)
    classification = classify_items(document, resolution, config)
    return AnalyzedDocument(document, resolution, classification)


def run_analysis(
    sources: Sequence[Path | str | bytes],
    grouping: Grouping | str = Grouping.CATEGORY,
    config: dict[str, Any] | None = None,
) -> AnalysisResult:
    """Execute the full pipeline over one or more API indexes.

    Paths are read from disk; str and bytes are taken as index content.
    Each document is analyzed on its own before rows are aggregated together.
    """
    config = config if config is not None else load_config()
    grouping = parse_grouping(grouping)

    analyzed = [analyze_document(_load(src), config) for src in sources]

    classified: list[ClassifiedItem] = []
    warnings: list[CyclicReExportError] = []
    for a in analyzed:
        classified.extend(a.classification.items)
        warnings.extend(a.resolution.warnings)
        logger.info(
            "Analyzed crate %s: %d items, %d warnings",
            a.document.crate_name,
            len(a.classification.items),
            len(a.resolution.warnings),
        )

    kept, excluded = filter_excluded(classified, config.get("exclude_paths") or [])
    if excluded:
        logger.info("Excluded %d items by path prefix", excluded)

    return AnalysisResult(
        rows=aggregate(kept, grouping),
        grouping=grouping,
        items=kept,
        warnings=warnings,
        excluded=excluded,
        documents=analyzed,
    )


def _load(source: Path | str | bytes) -> Document:
    if isinstance(source, Path):
        logger.debug("Loading %s", source)
        return load_document_file(source)
    return load_document(source)

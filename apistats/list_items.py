"""Logic for building per-item listings of the main API items."""

from collections.abc import Sequence
from dataclasses import dataclass

from apistats.aggregate import filter_excluded
from apistats.category import Category
from apistats.classify_item import Classification
from apistats.document import Document
from apistats.signature import format_signature

LISTED_CATEGORIES = {
    Category.TRAIT,
    Category.STRUCT,
    Category.ENUM,
    Category.UNION,
    Category.FUNCTION,
    Category.METHOD,
    Category.REQUIRED_METHOD,
    Category.PROVIDED_METHOD,
    Category.TRAIT_IMPL,
}


@dataclass(frozen=True)
class ItemListing:
    """One line of an item listing."""

    kind: str
    path: str
    signature: str
    generics: int
    stability: str
    methods: int


def list_items(
    classification: Classification,
    document: Document,
    exclude_paths: Sequence[str] = (),
) -> list[ItemListing]:
    """List traits, types, functions and trait impls with their signatures.

    Items under an excluded path prefix are left out, as in the aggregate rows.
    """
    kept, _ = filter_excluded(classification.items, exclude_paths)
    out = []
    for c in kept:
        if c.category not in LISTED_CATEGORIES:
            continue
        out.append(
            ItemListing(
                kind=c.category.value,
                path=c.path,
                signature=format_signature(document.items[c.id]),
                generics=c.generic_count,
                stability=c.stability.value,
                methods=c.method_count,
            )
        )
    out.sort(key=lambda li: (li.kind, li.path, li.signature))
    return out

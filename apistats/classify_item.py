"""Logic for classifying resolved items into categories with comparable attributes."""

import logging
from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from apistats.category import Category
from apistats.document import Document
from apistats.item import DEFAULT, PUBLIC, Item, Visibility
from apistats.item_kind import ItemKind, is_type_kind
from apistats.resolve_paths import Resolution
from apistats.stability import DEFAULT_UNSTABLE_MARKERS, StabilityTier, parse_stability

logger = logging.getLogger(__name__)

_DIRECT: dict[ItemKind, Category] = {
    ItemKind.MODULE: Category.MODULE,
    ItemKind.EXTERN_CRATE: Category.EXTERN_CRATE,
    ItemKind.USE: Category.RE_EXPORT,
    ItemKind.UNION: Category.UNION,
    ItemKind.STRUCT: Category.STRUCT,
    ItemKind.STRUCT_FIELD: Category.FIELD,
    ItemKind.ENUM: Category.ENUM,
    ItemKind.VARIANT: Category.VARIANT,
    ItemKind.TRAIT: Category.TRAIT,
    ItemKind.TRAIT_ALIAS: Category.TRAIT_ALIAS,
    ItemKind.TYPE_ALIAS: Category.TYPE_ALIAS,
    ItemKind.CONSTANT: Category.CONSTANT,
    ItemKind.ASSOC_CONST: Category.CONSTANT,
    ItemKind.STATIC: Category.STATIC,
    ItemKind.EXTERN_TYPE: Category.FOREIGN_TYPE,
    ItemKind.MACRO: Category.MACRO,
    ItemKind.PROC_MACRO: Category.MACRO,
    ItemKind.PRIMITIVE: Category.PRIMITIVE,
    ItemKind.ASSOC_TYPE: Category.ASSOC_TYPE,
    ItemKind.OTHER: Category.OTHER,
}


@dataclass(frozen=True)
class ClassifiedItem:
    """Normalized attribute record for one item."""

    id: str
    name: str | None
    category: Category
    raw_kind: str
    path: str
    module: str
    crate: str
    visibility: str
    is_public: bool
    stability: StabilityTier
    deprecation_note: str | None = None
    generic_count: int = 0
    has_docs: bool = False
    is_reexport: bool = False
    is_const: bool = False
    is_async: bool = False
    is_unsafe: bool = False
    method_count: int = 0

    @property
    def is_deprecated(self) -> bool:
        """Return True when the item carries deprecation metadata."""
        return self.stability is StabilityTier.DEPRECATED


@dataclass(frozen=True)
class Classification:
    """Classified items of one document plus the raw tags that fell back to Other."""

    items: tuple[ClassifiedItem, ...]
    unrecognized: Mapping[str, int] = field(default_factory=dict)


def classify_items(
    document: Document,
    resolution: Resolution,
    config: dict[str, Any] | None = None,
) -> Classification:
    """Classify every item of a document in identifier order."""
    config = config or {}
    classified = []
    unrecognized: Counter[str] = Counter()
    for uid in document.sorted_ids():
        c = classify_item(document.items[uid], document, resolution, config)
        if c.category is Category.OTHER:
            if c.raw_kind not in unrecognized:
                logger.warning(
                    "Unrecognized item kind %r (first seen on id %s); counted as Other",
                    c.raw_kind,
                    uid,
                )
            unrecognized[c.raw_kind] += 1
        classified.append(c)
    return Classification(
        items=tuple(classified),
        unrecognized=MappingProxyType(dict(sorted(unrecognized.items()))),
    )


def classify_item(
    item: Item,
    document: Document,
    resolution: Resolution,
    config: dict[str, Any] | None = None,
) -> ClassifiedItem:
    """Return the category and normalized attributes of a resolved item."""
    config = config or {}
    resolved = resolution.paths.get(item.id)
    parent_id = resolved.parent if resolved else item.parent
    parent = document.items.get(parent_id) if parent_id else None

    visibility = effective_visibility(item, document, resolution)
    markers = (config.get("stability") or {}).get(
        "unstable_markers", DEFAULT_UNSTABLE_MARKERS
    )
    generics_cfg = config.get("generics") or {}

    return ClassifiedItem(
        id=item.id,
        name=item.name,
        category=categorize(item, parent),
        raw_kind=item.raw_kind,
        path=resolution.path_of(item.id),
        module=resolution.module_of(item.id),
        crate=document.crate_of(item.id),
        visibility=visibility.level,
        is_public=visibility.is_public,
        stability=item_stability(item, document, markers),
        deprecation_note=item.deprecation.note if item.deprecation else None,
        generic_count=count_generics(
            item,
            count_lifetimes=bool(generics_cfg.get("count_lifetimes", False)),
            count_synthetic=bool(generics_cfg.get("count_synthetic", False)),
        ),
        has_docs=item.has_docs,
        is_reexport=bool(resolved and resolved.is_reexport),
        is_const=item.is_const,
        is_async=item.is_async,
        is_unsafe=item.is_unsafe,
        method_count=count_methods(item, document),
    )


def item_stability(
    item: Item, document: Document, markers: Sequence[str] = DEFAULT_UNSTABLE_MARKERS
) -> StabilityTier:
    """Return the stability tier; impls of unstable local traits are unstable."""
    tier = parse_stability(item, markers)
    if tier is not StabilityTier.STABLE or item.kind is not ItemKind.IMPL:
        return tier
    trait = document.items.get(item.trait_id) if item.trait_id else None
    # external traits are assumed stable
    if trait is not None and parse_stability(trait, markers) is StabilityTier.UNSTABLE:
        return StabilityTier.UNSTABLE
    return tier


def categorize(item: Item, parent: Item | None) -> Category:
    """Map a raw kind plus its container onto a Category."""
    if item.kind is ItemKind.FUNCTION:
        if parent is not None and parent.kind is ItemKind.TRAIT:
            if item.has_body:
                return Category.PROVIDED_METHOD
            return Category.REQUIRED_METHOD
        if parent is not None and parent.kind is ItemKind.IMPL:
            return Category.METHOD
        return Category.FUNCTION
    if item.kind is ItemKind.IMPL:
        if item.trait_id is not None or item.trait_name:
            return Category.TRAIT_IMPL
        return Category.INHERENT_IMPL
    return _DIRECT.get(item.kind, Category.OTHER)


def effective_visibility(
    item: Item, document: Document, resolution: Resolution
) -> Visibility:
    """Resolve 'default' visibility by inheriting from the nearest container."""
    seen = {item.id}
    cur: Item | None = item
    while cur is not None and cur.visibility.level == DEFAULT:
        resolved = resolution.paths.get(cur.id)
        parent_id = resolved.parent if resolved else cur.parent
        if parent_id is None or parent_id in seen:
            return Visibility(PUBLIC)
        seen.add(parent_id)
        cur = document.items.get(parent_id)
    return cur.visibility if cur is not None else Visibility(PUBLIC)


def count_generics(
    item: Item, *, count_lifetimes: bool = False, count_synthetic: bool = False
) -> int:
    """Count the generic parameters of an item."""
    n = 0
    for p in item.generics:
        if p.kind == "lifetime" and not count_lifetimes:
            continue
        if p.is_synthetic and not count_synthetic:
            continue
        n += 1
    return n


def count_methods(item: Item, document: Document) -> int:
    """Count methods of a trait, or of a type's inherent impls."""
    items = document.items
    if item.kind is ItemKind.TRAIT:
        return sum(
            1
            for c in item.children
            if c in items and items[c].kind is ItemKind.FUNCTION
        )
    if not is_type_kind(item.kind):
        return 0
    count = 0
    for impl_id in item.impls:
        impl = items.get(impl_id)
        # Only inherent impls count.
        if impl is None or impl.kind is not ItemKind.IMPL:
            continue
        if impl.trait_id is not None or impl.trait_name:
            continue
        if impl.is_synthetic or impl.is_blanket:
            continue
        count += sum(
            1
            for c in impl.children
            if c in items and items[c].kind is ItemKind.FUNCTION
        )
    return count

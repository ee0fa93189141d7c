"""Data models for representing items of an API index."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from apistats.item_kind import ItemKind

PUBLIC = "public"
RESTRICTED = "restricted"
PRIVATE = "private"
DEFAULT = "default"  # inherits the container's visibility


@dataclass(frozen=True)
class Visibility:
    """Declared visibility of an item."""

    level: str
    path: str | None = None  # restricted-to path, e.g. crate::io
    parent: str | None = None  # id of the restricting module, when known

    @property
    def is_public(self) -> bool:
        """Return True for items visible outside their crate."""
        return self.level == PUBLIC


@dataclass(frozen=True)
class Deprecation:
    """Deprecation metadata attached to an item."""

    since: str | None = None
    note: str | None = None


@dataclass(frozen=True)
class GenericParam:
    """One generic parameter of an item."""

    name: str
    kind: str  # lifetime/type/const
    is_synthetic: bool = False


@dataclass(frozen=True)
class Item:
    """Represents one declared entity (type, function, trait, impl, ...)."""

    id: str
    kind: ItemKind
    raw_kind: str
    name: str | None
    crate_id: str
    visibility: Visibility
    parents: tuple[str, ...] = ()
    children: tuple[str, ...] = ()
    attrs: tuple[str, ...] = ()
    deprecation: Deprecation | None = None
    generics: tuple[GenericParam, ...] = ()
    has_docs: bool = False
    reexport_target: str | None = None
    trait_id: str | None = None
    trait_name: str | None = None
    impls: tuple[str, ...] = ()
    has_body: bool = True
    is_const: bool = False
    is_async: bool = False
    is_unsafe: bool = False
    is_synthetic: bool = False
    is_blanket: bool = False
    inner: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @property
    def parent(self) -> str | None:
        """Return the first owning container, or None for the crate root."""
        return self.parents[0] if self.parents else None

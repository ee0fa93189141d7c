"""Resolve every item of a Document to one canonical fully-qualified path.

Paths are built by walking owning-container links up to the crate root.
Re-exports (``use`` items) resolve to the path of the item they expose, found
by following the re-export chain to its defining location.

When an item is listed by several containers, the container yielding the
shortest path wins; ties go to the lexicographically smallest joined path and
then to the smallest container id. An impl block listed both by a module and by
the `impls` of a struct, enum or union belongs to that type, so its members are
named under the type. The choice does not depend on the order of the input
document.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any

from apistats.document import Document, id_sort_key
from apistats.errors import CyclicReExportError
from apistats.item import Item
from apistats.item_kind import ItemKind, is_type_kind

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = "::"


@dataclass(frozen=True)
class ResolvedPath:
    """Canonical location of an item."""

    segments: tuple[str, ...]
    is_reexport: bool = False
    is_external: bool = False
    parent: str | None = None  # canonical owning container
    module: str | None = None  # nearest enclosing module

    def dotted(self, separator: str = DEFAULT_SEPARATOR) -> str:
        """Join the segments into a single qualified name."""
        return separator.join(self.segments)


@dataclass(frozen=True)
class Resolution:
    """Resolved paths for every local item of a Document."""

    paths: Mapping[str, ResolvedPath]
    warnings: tuple[CyclicReExportError, ...] = ()
    separator: str = DEFAULT_SEPARATOR

    def path_of(self, uid: str) -> str:
        """Return the qualified path of an item, or '' when unknown."""
        resolved = self.paths.get(uid)
        return resolved.dotted(self.separator) if resolved else ""

    def module_of(self, uid: str) -> str:
        """Return the qualified path of the module enclosing an item."""
        resolved = self.paths.get(uid)
        if resolved is None or resolved.module is None:
            return ""
        return self.path_of(resolved.module)


def resolve_paths(
    document: Document, config: dict[str, Any] | None = None
) -> Resolution:
    """Resolve all items of a document."""
    separator = (config or {}).get("path_separator") or DEFAULT_SEPARATOR
    return PathResolver(document, separator).resolve_all()


def leaf_segment(item: Item) -> str:
    """Return the segment an item contributes as the last part of its own path."""
    if item.name:
        return item.name
    if item.kind is ItemKind.IMPL:
        return f"<impl {item.trait_name}>" if item.trait_name else "<impl>"
    return f"<{item.raw_kind}>"


class PathResolver:
    """Walks containment and re-export links, memoized by identifier."""

    def __init__(self, document: Document, separator: str = DEFAULT_SEPARATOR) -> None:
        """Prepare empty memo tables for a document."""
        self.document = document
        self.separator = separator

        # uid -> segments of the containing location (without the item itself)
        self._base: dict[str, tuple[str, ...]] = {}
        self._parent: dict[str, str | None] = {}
        self._module: dict[str, str | None] = {}
        self._reexports: dict[str, ResolvedPath] = {}
        self.warnings: list[CyclicReExportError] = []
        self._cycles: set[frozenset[str]] = set()

    def resolve_all(self) -> Resolution:
        """Resolve every local item in identifier order."""
        paths: dict[str, ResolvedPath] = {}
        for uid in self.document.sorted_ids():
            paths[uid] = self.resolve(uid)
        return Resolution(
            paths=MappingProxyType(paths),
            warnings=tuple(self.warnings),
            separator=self.separator,
        )

    def resolve(self, uid: str) -> ResolvedPath:
        """Resolve a single item to its canonical path."""
        item = self.document.items[uid]
        location = self.location(uid)
        if item.kind is not ItemKind.USE:
            return location
        try:
            target = self._follow_reexport(uid)
        except CyclicReExportError as e:
            self._warn(e)
            return replace(location, is_reexport=True)
        return replace(
            target,
            is_reexport=True,
            parent=location.parent,
            module=location.module,
        )

    def location(self, uid: str) -> ResolvedPath:
        """Return where an item is declared, ignoring re-exports."""
        self._walk_containers(uid)
        item = self.document.items[uid]
        return ResolvedPath(
            segments=(*self._base[uid], leaf_segment(item)),
            parent=self._parent[uid],
            module=self._module[uid],
        )

    def _prefix(self, uid: str) -> tuple[str, ...]:
        """Segments a container contributes to the paths of its members."""
        if not self.document.is_local(uid):
            return self.document.paths[uid].segments
        name = self.document.items[uid].name
        return (*self._base[uid], name) if name else self._base[uid]

    def _walk_containers(self, uid: str) -> None:
        """Compute base segments for an item and all its ancestors, iteratively."""
        items = self.document.items
        stack = [uid]
        on_stack = {uid}
        while stack:
            cur = stack[-1]
            if cur in self._base:
                stack.pop()
                on_stack.discard(cur)
                continue
            pending = [
                p for p in items[cur].parents if p in items and p not in self._base
            ]
            if pending:
                nxt = pending[0]
                if nxt in on_stack:
                    self._break_cycle(nxt, [*stack[stack.index(nxt) :], nxt])
                    continue
                stack.append(nxt)
                on_stack.add(nxt)
                continue
            self._settle(cur)
            stack.pop()
            on_stack.discard(cur)

    def _settle(self, uid: str) -> None:
        """Choose the canonical container once all candidates are resolved."""
        item = self.document.items[uid]
        candidates = [
            (self._prefix(p), p)
            for p in item.parents
            if p in self.document.items or p in self.document.paths
        ]
        if not candidates:
            base = () if uid == self.document.root else (self.document.crate_name,)
            self._base[uid] = base
            self._parent[uid] = None
            self._module[uid] = None
            return

        # impl blocks stay with the type they implement
        owners = [c for c in candidates if self._implements_on(c[1], uid)]
        if owners:
            candidates = owners
        prefix, parent = min(
            candidates,
            key=lambda c: (len(c[0]), self.separator.join(c[0]), id_sort_key(c[1])),
        )
        self._base[uid] = prefix
        self._parent[uid] = parent
        owner = self.document.items.get(parent)
        if owner is None:
            self._module[uid] = None
        elif owner.kind is ItemKind.MODULE:
            self._module[uid] = parent
        else:
            self._module[uid] = self._module.get(parent)

    def _break_cycle(self, uid: str, chain: list[str]) -> None:
        """Report a containment cycle and anchor its entry at the crate root."""
        self._warn(CyclicReExportError(uid, chain))
        self._base[uid] = (self.document.crate_name,)
        self._parent[uid] = None
        self._module[uid] = None

    def _follow_reexport(self, uid: str) -> ResolvedPath:
        """Follow a chain of re-exports to the defining location."""
        if uid in self._reexports:
            return self._reexports[uid]
        chain = [uid]
        seen = {uid}
        cur = uid
        while True:
            if cur in self._reexports:
                result = self._reexports[cur]
                break
            if self.document.is_external(cur):
                summary = self.document.paths[cur]
                result = ResolvedPath(segments=summary.segments, is_external=True)
                break
            item = self.document.items[cur]
            if item.kind is not ItemKind.USE:
                result = self.location(cur)
                break
            target = item.reexport_target
            if target is None:
                result = self.location(cur)
                break
            if target in seen:
                raise CyclicReExportError(uid, [*chain, target])
            chain.append(target)
            seen.add(target)
            cur = target

        for link in chain:
            linked = self.document.items.get(link)
            if linked is not None and linked.kind is ItemKind.USE:
                self._reexports.setdefault(link, result)
        return result

    def _implements_on(self, parent: str, uid: str) -> bool:
        """Check whether `uid` is one of the impl blocks of type `parent`."""
        owner = self.document.items.get(parent)
        return owner is not None and is_type_kind(owner.kind) and uid in owner.impls

    def _warn(self, error: CyclicReExportError) -> None:
        """Record a cycle once, however many of its members run into it."""
        start = error.chain.index(error.chain[-1])
        key = frozenset(error.chain[start:])
        if key in self._cycles:
            logger.debug("%s (already reported)", error)
            return
        self._cycles.add(key)
        logger.warning("%s", error)
        self.warnings.append(error)

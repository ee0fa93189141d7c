"""The immutable document model produced by the loader."""

from collections.abc import Mapping
from dataclasses import dataclass

from apistats.item import Item


@dataclass(frozen=True)
class PathSummary:
    """Cross-crate reference summary: owning crate, path segments, coarse kind."""

    crate_id: str
    segments: tuple[str, ...]
    kind: str


@dataclass(frozen=True)
class Document:
    """A loaded API index. Read-only after construction."""

    format_version: int
    root: str
    crate_name: str
    items: Mapping[str, Item]
    paths: Mapping[str, PathSummary]
    external_crates: Mapping[str, str]

    def is_local(self, uid: str) -> bool:
        """Check whether the identifier is defined in this index."""
        return uid in self.items

    def is_external(self, uid: str) -> bool:
        """Check whether the identifier is only known through a path summary."""
        return uid not in self.items and uid in self.paths

    def crate_of(self, uid: str) -> str:
        """Return the crate name owning an identifier."""
        item = self.items.get(uid)
        crate_id = item.crate_id if item else None
        if crate_id is None:
            summary = self.paths.get(uid)
            crate_id = summary.crate_id if summary else None
        if crate_id is None or crate_id == self.local_crate_id:
            return self.crate_name
        return self.external_crates.get(crate_id, crate_id)

    @property
    def local_crate_id(self) -> str:
        """Return the crate id of the root module."""
        return self.items[self.root].crate_id

    def sorted_ids(self) -> list[str]:
        """Return the local identifiers in a stable order."""
        return sorted(self.items, key=id_sort_key)


def id_sort_key(uid: str) -> tuple[int, int, str]:
    """Order identifiers numerically when they are numbers, else textually."""
    if uid.isdigit():
        return (0, int(uid), "")
    return (1, 0, uid)

"""Logic for loading rustdoc JSON API indexes into a Document."""

import json
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from types import MappingProxyType
from typing import Any

from apistats.document import Document, PathSummary, id_sort_key
from apistats.errors import (
    DanglingReferenceError,
    FormatError,
    UnsupportedVersionError,
)
from apistats.item import (
    DEFAULT,
    PRIVATE,
    PUBLIC,
    RESTRICTED,
    Deprecation,
    GenericParam,
    Item,
    Visibility,
)
from apistats.item_kind import ItemKind, parse_item_kind

logger = logging.getLogger(__name__)

MIN_FORMAT_VERSION = 15
MAX_FORMAT_VERSION = 60


def load_document_file(path: Path) -> Document:
    """Load and parse an API index from a file."""
    return load_document(path.read_bytes())


def load_document(content: str | bytes) -> Document:
    """Parse raw API index content into an immutable Document."""
    raw = _parse_json(content)
    version = _check_version(raw)

    index = raw.get("index")
    if not isinstance(index, dict):
        msg = "missing or malformed 'index' object"
        raise FormatError(msg)

    paths = _build_paths(raw.get("paths") or {})
    external_crates = _build_external_crates(raw.get("external_crates") or {})

    records: dict[str, tuple[str, Any, dict[str, Any]]] = {}
    for key, rec in index.items():
        if not isinstance(rec, dict):
            msg = f"index entry {key!r} is not an object"
            raise FormatError(msg, str(key))
        tag, payload = _split_inner(rec)
        records[str(key)] = (tag, payload, rec)

    if raw.get("root") is None:
        msg = "missing 'root' identifier"
        raise FormatError(msg)
    root = str(raw["root"])
    if root not in records:
        raise DanglingReferenceError(root, "<document>", "crate root")

    _check_references(records, paths)

    containers = _collect_containers(records)
    items: dict[str, Item] = {}
    for uid, (tag, payload, rec) in records.items():
        if uid == root:
            parents: tuple[str, ...] = ()
        elif rec.get("parent") is not None:
            parents = (str(rec["parent"]),)
        else:
            parents = tuple(sorted(set(containers.get(uid, [])), key=id_sort_key))
        items[uid] = _build_item(uid, tag, payload, rec, parents)

    crate_name = items[root].name or "crate"
    logger.debug(
        "Loaded %d items from crate %s (format version %d)",
        len(items),
        crate_name,
        version,
    )
    return Document(
        format_version=version,
        root=root,
        crate_name=crate_name,
        items=MappingProxyType(items),
        paths=MappingProxyType(paths),
        external_crates=MappingProxyType(external_crates),
    )


def _parse_json(content: str | bytes) -> dict[str, Any]:
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError as e:
            msg = f"input is not valid UTF-8: {e}"
            raise FormatError(msg) from e
    try:
        raw = json.loads(content)
    except json.JSONDecodeError as e:
        msg = f"input is not well-formed JSON: {e}"
        raise FormatError(msg) from e
    if not isinstance(raw, dict):
        msg = "top level of an API index must be an object"
        raise FormatError(msg)
    return raw


def _check_version(raw: dict[str, Any]) -> int:
    version = raw.get("format_version")
    # bool is an int subclass; reject it explicitly
    if not isinstance(version, int) or isinstance(version, bool):
        msg = f"missing or non-integer 'format_version': {version!r}"
        raise FormatError(msg)
    if not MIN_FORMAT_VERSION <= version <= MAX_FORMAT_VERSION:
        raise UnsupportedVersionError(version, MIN_FORMAT_VERSION, MAX_FORMAT_VERSION)
    return version


def _build_paths(raw_paths: Any) -> dict[str, PathSummary]:
    if not isinstance(raw_paths, dict):
        msg = "'paths' must be an object"
        raise FormatError(msg)
    paths: dict[str, PathSummary] = {}
    for key, summary in raw_paths.items():
        if not isinstance(summary, dict) or not isinstance(summary.get("path"), list):
            msg = f"malformed path summary for {key!r}"
            raise FormatError(msg, str(key))
        paths[str(key)] = PathSummary(
            crate_id=str(summary.get("crate_id", 0)),
            segments=tuple(str(s) for s in summary["path"]),
            kind=str(summary.get("kind") or ""),
        )
    return paths


def _build_external_crates(raw_crates: Any) -> dict[str, str]:
    if not isinstance(raw_crates, dict):
        msg = "'external_crates' must be an object"
        raise FormatError(msg)
    return {
        str(k): str(v.get("name") if isinstance(v, dict) else v)
        for k, v in raw_crates.items()
    }


def _split_inner(rec: dict[str, Any]) -> tuple[str, Any]:
    """Return (raw kind tag, kind payload) for either item layout."""
    # Legacy layout: {"kind": "struct", "inner": {...}}
    if isinstance(rec.get("kind"), str):
        return rec["kind"], rec.get("inner") or {}
    inner = rec.get("inner")
    if isinstance(inner, dict) and len(inner) == 1:
        tag, payload = next(iter(inner.items()))
        return str(tag), payload
    if isinstance(inner, str):
        return inner, {}
    return "unknown", {}


def _as_id(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


def _ids(values: Any) -> list[str]:
    if not isinstance(values, list):
        return []
    return [uid for uid in (_as_id(v) for v in values) if uid is not None]


def _member_ids(tag: str, payload: Any) -> list[str]:
    """Ids a container lists as its members (fields, variants, items)."""
    if not isinstance(payload, dict):
        return []
    kind = parse_item_kind(tag)
    if kind in {ItemKind.MODULE, ItemKind.TRAIT, ItemKind.IMPL}:
        return _ids(payload.get("items"))
    if kind is ItemKind.ENUM:
        return _ids(payload.get("variants"))
    if kind in {ItemKind.STRUCT, ItemKind.UNION, ItemKind.VARIANT}:
        if "fields" in payload:
            return _ids(payload.get("fields"))
        shape = payload.get("kind")
        if isinstance(shape, dict):
            if "plain" in shape:
                return _ids((shape["plain"] or {}).get("fields"))
            if "struct" in shape:
                return _ids((shape["struct"] or {}).get("fields"))
            if "tuple" in shape:
                return _ids(shape["tuple"])
    return []


def _impl_ids(payload: Any) -> list[str]:
    if not isinstance(payload, dict):
        return []
    return _ids(payload.get("impls"))


def _iter_references(
    tag: str, payload: Any, rec: dict[str, Any]
) -> Iterator[tuple[str, str]]:
    """Yield (identifier, role) for every cross-reference an item makes."""
    if rec.get("parent") is not None:
        yield str(rec["parent"]), "owning module"
    for uid in _member_ids(tag, payload):
        yield uid, "member"
    for uid in _impl_ids(payload):
        yield uid, "implementation"
    if isinstance(payload, dict):
        kind = parse_item_kind(tag)
        if kind is ItemKind.IMPL and isinstance(payload.get("trait"), dict):
            trait_id = _as_id(payload["trait"].get("id"))
            if trait_id is not None:
                yield trait_id, "implemented trait"
        if kind is ItemKind.USE:
            target = _as_id(payload.get("id"))
            if target is not None:
                yield target, "re-export target"
    vis = rec.get("visibility")
    if isinstance(vis, dict) and isinstance(vis.get("restricted"), dict):
        scope = _as_id(vis["restricted"].get("parent"))
        if scope is not None:
            yield scope, "visibility scope"


def _check_references(
    records: dict[str, tuple[str, Any, dict[str, Any]]],
    paths: dict[str, PathSummary],
) -> None:
    for uid in sorted(records, key=id_sort_key):
        tag, payload, rec = records[uid]
        for ref, role in _iter_references(tag, payload, rec):
            if ref not in records and ref not in paths:
                raise DanglingReferenceError(ref, uid, role)


def _collect_containers(
    records: dict[str, tuple[str, Any, dict[str, Any]]],
) -> dict[str, list[str]]:
    containers: dict[str, list[str]] = {}
    for uid, (tag, payload, _rec) in records.items():
        for child in [*_member_ids(tag, payload), *_impl_ids(payload)]:
            containers.setdefault(child, []).append(uid)
    return containers


def _parse_visibility(raw: Any) -> Visibility:
    if raw is None or raw == DEFAULT:
        return Visibility(DEFAULT)
    if raw == PUBLIC:
        return Visibility(PUBLIC)
    if raw == "crate":
        return Visibility(RESTRICTED, path="crate")
    if isinstance(raw, dict) and isinstance(raw.get("restricted"), dict):
        restricted = raw["restricted"]
        return Visibility(
            RESTRICTED,
            path=str(restricted.get("path") or ""),
            parent=_as_id(restricted.get("parent")),
        )
    return Visibility(PRIVATE)


def _parse_deprecation(raw: Any) -> Deprecation | None:
    if not isinstance(raw, dict):
        return None
    since = raw.get("since")
    note = raw.get("note")
    return Deprecation(
        since=str(since) if since is not None else None,
        note=str(note) if note is not None else None,
    )


def _parse_generics(payload: Any) -> tuple[GenericParam, ...]:
    if not isinstance(payload, dict) or not isinstance(payload.get("generics"), dict):
        return ()
    params = []
    for p in payload["generics"].get("params") or []:
        if not isinstance(p, dict):
            continue
        kind = p.get("kind")
        if isinstance(kind, dict) and kind:
            kind_tag, detail = next(iter(kind.items()))
        else:
            kind_tag, detail = str(kind or "type"), {}
        detail = detail if isinstance(detail, dict) else {}
        params.append(
            GenericParam(
                name=str(p.get("name") or ""),
                kind=str(kind_tag),
                is_synthetic=bool(
                    detail.get("is_synthetic", detail.get("synthetic", False))
                ),
            )
        )
    return tuple(params)


def _header_flags(payload: dict[str, Any]) -> tuple[bool, bool, bool]:
    header = payload.get("header") or {}
    if isinstance(header, list):
        # Some older versions list qualifiers as plain strings.
        quals = {str(q) for q in header}
        return "const" in quals, "async" in quals, "unsafe" in quals
    return (
        bool(header.get("is_const", header.get("const_", False))),
        bool(header.get("is_async", header.get("async_", False))),
        bool(header.get("is_unsafe", header.get("unsafe_", False))),
    )


def _attr_text(attr: Any) -> str:
    if isinstance(attr, str):
        return attr
    if isinstance(attr, dict) and isinstance(attr.get("other"), str):
        return attr["other"]
    return json.dumps(attr, sort_keys=True)


def _trait_name(trait: dict[str, Any] | None) -> str | None:
    if not trait:
        return None
    # older formats call it "name"
    name = trait.get("path") or trait.get("name")
    return str(name) if name else None


def _build_item(
    uid: str,
    tag: str,
    payload: Any,
    rec: dict[str, Any],
    parents: Iterable[str],
) -> Item:
    kind = parse_item_kind(tag)
    body = payload if isinstance(payload, dict) else {}
    name = rec.get("name")
    if name is None and kind is ItemKind.USE:
        name = body.get("name")

    is_const = is_async = is_unsafe = False
    if kind is ItemKind.FUNCTION:
        is_const, is_async, is_unsafe = _header_flags(body)
    elif kind in {ItemKind.TRAIT, ItemKind.IMPL}:
        is_unsafe = bool(body.get("is_unsafe", False))

    trait = body.get("trait") if kind is ItemKind.IMPL else None
    trait = trait if isinstance(trait, dict) else None

    return Item(
        id=uid,
        kind=kind,
        raw_kind=tag,
        name=str(name) if name is not None else None,
        crate_id=str(rec.get("crate_id", 0)),
        visibility=_parse_visibility(rec.get("visibility")),
        parents=tuple(parents),
        children=tuple(_member_ids(tag, payload)),
        attrs=tuple(_attr_text(a) for a in rec.get("attrs") or []),
        deprecation=_parse_deprecation(rec.get("deprecation")),
        generics=_parse_generics(payload),
        has_docs=bool(str(rec.get("docs") or "").strip()),
        reexport_target=_as_id(body.get("id")) if kind is ItemKind.USE else None,
        trait_id=_as_id(trait.get("id")) if trait else None,
        trait_name=_trait_name(trait),
        impls=tuple(_impl_ids(payload)),
        has_body=bool(body.get("has_body", True)),
        is_const=is_const,
        is_async=is_async,
        is_unsafe=is_unsafe,
        is_synthetic=bool(body.get("is_synthetic", body.get("synthetic", False))),
        is_blanket=body.get("blanket_impl") is not None,
        inner=MappingProxyType(body),
    )

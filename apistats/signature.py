"""Render short declaration signatures from raw rustdoc payloads."""

from collections.abc import Mapping
from typing import Any

from apistats.item import Item
from apistats.item_kind import ItemKind


def format_signature(item: Item) -> str:
    """Return a one-line declaration for an item."""
    name = item.name or ""
    inner = item.inner
    generics = inner.get("generics") if isinstance(inner.get("generics"), dict) else {}
    params = format_generic_params(generics.get("params") or [])
    where = format_where(generics.get("where_predicates") or [])

    if item.kind is ItemKind.FUNCTION:
        return format_function(item, params, where)
    if item.kind is ItemKind.TRAIT:
        unsafe = "unsafe " if inner.get("is_unsafe") else ""
        auto = "auto " if inner.get("is_auto") else ""
        bounds = format_bounds(inner.get("bounds") or [])
        supertraits = f": {bounds}" if bounds else ""
        return f"{unsafe}{auto}trait {name}{params}{supertraits}{where} {{ .. }}"
    if item.kind in {ItemKind.STRUCT, ItemKind.ENUM, ItemKind.UNION}:
        return f"{item.kind.value} {name}{params}{where} {{ .. }}"
    if item.kind is ItemKind.IMPL:
        unsafe = "unsafe " if item.is_unsafe else ""
        trait = f"{item.trait_name} for " if item.trait_name else ""
        for_type = format_type(inner.get("for"))
        return f"{unsafe}impl{params} {trait}{for_type}{where} {{ .. }}"
    if item.kind is ItemKind.TYPE_ALIAS:
        return f"type {name}{params} = {format_type(inner.get('type'))};"
    if item.kind in {ItemKind.CONSTANT, ItemKind.STATIC}:
        keyword = "const" if item.kind is ItemKind.CONSTANT else "static"
        return f"{keyword} {name}: {format_type(inner.get('type'))};"
    return f"{item.raw_kind} {name}".strip()


def format_function(item: Item, params: str, where: str) -> str:
    """Render a function or method declaration."""
    qualifiers = "".join(
        q
        for q, on in (
            ("const ", item.is_const),
            ("async ", item.is_async),
            ("unsafe ", item.is_unsafe),
        )
        if on
    )
    sig = item.inner.get("sig") or item.inner.get("decl") or {}
    args = ", ".join(
        f"{arg[0]}: {format_type(arg[1])}"
        for arg in sig.get("inputs") or []
        if isinstance(arg, list) and len(arg) == 2  # noqa: PLR2004
    )
    output = sig.get("output")
    ret = f" -> {format_type(output)}" if output else ""
    body = " { .. }" if item.has_body else ";"
    return f"{qualifiers}fn {item.name}{params}({args}){ret}{where}{body}"


def format_generic_params(params: list[Any]) -> str:
    """Render type and const parameters; lifetimes and synthetic params are left out."""
    out = []
    for p in params:
        if not isinstance(p, dict) or not isinstance(p.get("kind"), dict):
            continue
        name = p.get("name", "")
        kind = p["kind"]
        if "type" in kind:
            detail = kind["type"] or {}
            if detail.get("is_synthetic") or detail.get("synthetic"):
                continue
            bounds = format_bounds(detail.get("bounds") or [])
            text = f"{name}: {bounds}" if bounds else name
            if detail.get("default") is not None:
                text += f" = {format_type(detail['default'])}"
            out.append(text)
        elif "const" in kind:
            detail = kind["const"] or {}
            out.append(f"const {name}: {format_type(detail.get('type'))}")
    return f"<{', '.join(out)}>" if out else ""


def format_bounds(bounds: list[Any]) -> str:
    """Render trait bounds joined with '+'."""
    out = []
    for b in bounds:
        if isinstance(b, dict) and isinstance(b.get("trait_bound"), dict):
            tb = b["trait_bound"]
            modifier = {"maybe": "?", "maybe_const": "~const "}.get(
                str(tb.get("modifier") or "none"), ""
            )
            out.append(f"{modifier}{_path_name(tb.get('trait'))}")
        elif isinstance(b, dict) and "outlives" in b:
            out.append(str(b["outlives"]))
    return " + ".join(out)


def format_where(predicates: list[Any]) -> str:
    """Render a where clause, or '' when there are no predicates."""
    out = []
    for pred in predicates:
        if not isinstance(pred, dict):
            continue
        if isinstance(pred.get("bound_predicate"), dict):
            bp = pred["bound_predicate"]
            bounds = format_bounds(bp.get("bounds") or [])
            out.append(f"{format_type(bp.get('type'))}: {bounds}")
        elif isinstance(pred.get("eq_predicate"), dict):
            eq = pred["eq_predicate"]
            rhs = eq.get("rhs")
            rhs_type = rhs.get("type") if isinstance(rhs, dict) else rhs
            out.append(f"{format_type(eq.get('lhs'))} = {format_type(rhs_type)}")
    return f" where {', '.join(out)}" if out else ""


def format_type(ty: Any) -> str:
    """Render a rustdoc type tree."""
    if ty is None:
        return "()"
    if isinstance(ty, str):
        return "_" if ty == "infer" else ty
    if not isinstance(ty, Mapping) or len(ty) != 1:
        return "_"
    tag, v = next(iter(ty.items()))
    if tag in {"generic", "primitive"}:
        return str(v)
    if tag == "resolved_path":
        return _path_name(v)
    if tag in {"tuple", "impl_trait"}:
        v = v if isinstance(v, list) else []
    elif tag != "slice" and not isinstance(v, Mapping):
        return "_"
    if tag == "borrowed_ref":
        lifetime = f"{v['lifetime']} " if v.get("lifetime") else ""
        mutable = "mut " if v.get("is_mutable", v.get("mutable")) else ""
        return f"&{lifetime}{mutable}{format_type(v.get('type'))}"
    if tag == "raw_pointer":
        mutable = "mut" if v.get("is_mutable", v.get("mutable")) else "const"
        return f"*{mutable} {format_type(v.get('type'))}"
    if tag == "tuple":
        return f"({', '.join(format_type(t) for t in v)})"
    if tag == "slice":
        return f"[{format_type(v)}]"
    if tag == "array":
        return f"[{format_type(v.get('type'))}; {v.get('len')}]"
    if tag == "impl_trait":
        return f"impl {format_bounds(v)}"
    if tag == "dyn_trait":
        traits = [
            _path_name(t.get("trait"))
            for t in v.get("traits") or []
            if isinstance(t, Mapping)
        ]
        return f"dyn {' + '.join(traits)}"
    if tag == "qualified_path":
        self_type = format_type(v.get("self_type"))
        if v.get("trait"):
            return f"<{self_type} as {_path_name(v['trait'])}>::{v.get('name')}"
        return f"{self_type}::{v.get('name')}"
    if tag == "function_pointer":
        return "fn(..)"
    return "_"


def _path_name(path: Any) -> str:
    """Render a path reference with its angle-bracketed type arguments."""
    if not isinstance(path, Mapping):
        return "_"
    name = str(path.get("path") or path.get("name") or "_")
    args = path.get("args")
    if isinstance(args, Mapping) and isinstance(args.get("angle_bracketed"), Mapping):
        rendered = []
        for a in args["angle_bracketed"].get("args") or []:
            if isinstance(a, Mapping) and "type" in a:
                rendered.append(format_type(a["type"]))
            elif isinstance(a, Mapping) and "lifetime" in a:
                rendered.append(str(a["lifetime"]))
        if rendered:
            name += f"<{', '.join(rendered)}>"
    return name

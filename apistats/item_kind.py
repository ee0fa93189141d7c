"""Raw item kinds found in rustdoc JSON indexes."""

from enum import Enum


class ItemKind(Enum):
    """Known rustdoc item kinds, with OTHER for anything newer or unexpected."""

    MODULE = "module"
    EXTERN_CRATE = "extern_crate"
    USE = "use"
    UNION = "union"
    STRUCT = "struct"
    STRUCT_FIELD = "struct_field"
    ENUM = "enum"
    VARIANT = "variant"
    FUNCTION = "function"
    TRAIT = "trait"
    TRAIT_ALIAS = "trait_alias"
    IMPL = "impl"
    TYPE_ALIAS = "type_alias"
    CONSTANT = "constant"
    STATIC = "static"
    EXTERN_TYPE = "extern_type"
    MACRO = "macro"
    PROC_MACRO = "proc_macro"
    PRIMITIVE = "primitive"
    ASSOC_CONST = "assoc_const"
    ASSOC_TYPE = "assoc_type"
    OTHER = "other"


# Older format versions used different tags for the same kinds.
LEGACY_ALIASES: dict[str, ItemKind] = {
    "import": ItemKind.USE,
    "typedef": ItemKind.TYPE_ALIAS,
    "foreign_type": ItemKind.EXTERN_TYPE,
    "method": ItemKind.FUNCTION,
    "opaque_ty": ItemKind.TYPE_ALIAS,
}

_BY_TAG = {k.value: k for k in ItemKind if k is not ItemKind.OTHER}


def parse_item_kind(tag: str) -> ItemKind:
    """Map a raw kind tag onto an ItemKind, falling back to OTHER."""
    t = tag.strip().lower()
    return _BY_TAG.get(t) or LEGACY_ALIASES.get(t) or ItemKind.OTHER


def is_type_kind(kind: ItemKind) -> bool:
    """Check if the kind declares a nominal type that can carry impls."""
    return kind in {ItemKind.STRUCT, ItemKind.ENUM, ItemKind.UNION}

"""Semantic categories assigned to every item by the classifier."""

from enum import Enum


class Category(Enum):
    """Closed classification of items. Every item maps to exactly one."""

    MODULE = "Module"
    STRUCT = "Struct"
    ENUM = "Enum"
    UNION = "Union"
    VARIANT = "Variant"
    FIELD = "Field"
    TRAIT = "Trait"
    TRAIT_ALIAS = "TraitAlias"
    FUNCTION = "Function"
    METHOD = "Method"
    REQUIRED_METHOD = "RequiredMethod"
    PROVIDED_METHOD = "ProvidedMethod"
    INHERENT_IMPL = "InherentImpl"
    TRAIT_IMPL = "TraitImpl"
    MACRO = "Macro"
    CONSTANT = "Constant"
    STATIC = "Static"
    TYPE_ALIAS = "TypeAlias"
    ASSOC_TYPE = "AssocType"
    RE_EXPORT = "ReExport"
    EXTERN_CRATE = "ExternCrate"
    PRIMITIVE = "Primitive"
    FOREIGN_TYPE = "ForeignType"
    OTHER = "Other"

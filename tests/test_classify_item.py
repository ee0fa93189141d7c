"""Tests for item classification."""

import logging

import pytest
from index_builder import IndexBuilder, generics

from apistats.category import Category
from apistats.classify_item import Classification, classify_items
from apistats.load_document import load_document
from apistats.resolve_paths import resolve_paths
from apistats.stability import StabilityTier


def _classify(builder: IndexBuilder, config: dict | None = None) -> Classification:
    doc = load_document(builder.text())
    return classify_items(doc, resolve_paths(doc), config)


def _by_id(classification: Classification) -> dict:
    return {c.id: c for c in classification.items}


def test_every_item_gets_exactly_one_category(builder: IndexBuilder) -> None:
    """Verify classification covers each item once."""
    builder.struct("S")
    builder.function("f")
    builder.enum("E", ["A", "B"])
    result = _classify(builder)
    ids = [c.id for c in result.items]
    assert len(ids) == len(set(ids)) == 6  # noqa: PLR2004


def test_trait_methods_required_and_provided(builder: IndexBuilder) -> None:
    """Verify trait functions split by whether they have a default body."""
    t = builder.trait("Shape")
    req = builder.function("area", module=t, has_body=False, visibility="default")
    prov = builder.function("describe", module=t, visibility="default")
    items = _by_id(_classify(builder))
    assert items[t].category is Category.TRAIT
    assert items[req].category is Category.REQUIRED_METHOD
    assert items[prov].category is Category.PROVIDED_METHOD
    assert items[t].method_count == 2  # noqa: PLR2004


def test_impls_and_methods(builder: IndexBuilder) -> None:
    """Verify impl blocks split into inherent and trait impls."""
    s = builder.struct("Point")
    inherent = builder.impl(s)
    m = builder.function("new", module=inherent)
    builder.function("len", module=inherent)
    t = builder.trait("Shape")
    trait_impl = builder.impl(s, trait=t, trait_name="Shape")
    tm = builder.function("area", module=trait_impl, visibility="default")
    items = _by_id(_classify(builder))
    assert items[inherent].category is Category.INHERENT_IMPL
    assert items[trait_impl].category is Category.TRAIT_IMPL
    assert items[m].category is Category.METHOD
    assert items[tm].category is Category.METHOD
    # trait impl methods are not counted on the type
    assert items[s].method_count == 2  # noqa: PLR2004


def test_plain_kinds(builder: IndexBuilder) -> None:
    """Verify direct kind mappings."""
    m = builder.module("m")
    e = builder.enum("E", ["A"])
    const = builder.raw("constant", "MAX", {"type": {"primitive": "u32"}})
    mac = builder.raw("macro", "make", "macro_rules! make {}")
    alias = builder.raw("type_alias", "Res", {"type": {"primitive": "u8"}})
    items = _by_id(_classify(builder))
    assert items["0"].category is Category.MODULE
    assert items[m].category is Category.MODULE
    assert items[e].category is Category.ENUM
    assert items[const].category is Category.CONSTANT
    assert items[mac].category is Category.MACRO
    assert items[alias].category is Category.TYPE_ALIAS
    variant = next(i for i in items.values() if i.name == "A")
    assert variant.category is Category.VARIANT


def test_use_is_reexport(builder: IndexBuilder) -> None:
    """Verify use items are re-exports that carry the target path."""
    s = builder.struct("S")
    u = builder.use(s, "Alias")
    items = _by_id(_classify(builder))
    assert items[u].category is Category.RE_EXPORT
    assert items[u].is_reexport
    assert items[u].path == "demo::S"


def test_unknown_kind_counts_as_other(
    builder: IndexBuilder, caplog: pytest.LogCaptureFixture
) -> None:
    """Verify unrecognized tags become Other with one warning per tag."""
    builder.raw("hologram", "A")
    builder.raw("hologram", "B")
    with caplog.at_level(logging.WARNING):
        result = _classify(builder)
    others = [c for c in result.items if c.category is Category.OTHER]
    assert len(others) == 2  # noqa: PLR2004
    assert dict(result.unrecognized) == {"hologram": 2}
    assert sum("hologram" in r.message for r in caplog.records) == 1


def test_default_visibility_is_inherited(builder: IndexBuilder) -> None:
    """Verify 'default' visibility takes the owning container's visibility."""
    private = builder.enum("Hidden", ["X"], visibility="crate")
    public = builder.enum("Shown", ["Y"])
    items = _by_id(_classify(builder))
    x = next(c for c in items.values() if c.name == "X")
    y = next(c for c in items.values() if c.name == "Y")
    assert not items[private].is_public
    assert not x.is_public
    assert y.is_public
    assert items[public].visibility == "public"


def test_stability_tiers(builder: IndexBuilder) -> None:
    """Verify deprecation beats attributes and markers mark instability."""
    stable = builder.function("a")
    unstable = builder.function(
        "b", attrs=['#[unstable(feature = "x", issue = "1")]']
    )
    both = builder.function(
        "c",
        attrs=["#[unstable(feature = \"y\")]"],
        deprecation={"since": "1.0", "note": "gone"},
    )
    items = _by_id(_classify(builder))
    assert items[stable].stability is StabilityTier.STABLE
    assert items[unstable].stability is StabilityTier.UNSTABLE
    assert items[both].stability is StabilityTier.DEPRECATED
    assert items[both].is_deprecated
    assert items[both].deprecation_note == "gone"


def test_custom_unstable_markers(builder: IndexBuilder) -> None:
    """Verify configured markers replace the default one."""
    f = builder.function("f", attrs=["#[doc(hidden)]"])
    config = {"stability": {"unstable_markers": ["#[doc(hidden)"]}}
    items = _by_id(_classify(builder, config))
    assert items[f].stability is StabilityTier.UNSTABLE


def test_generic_count_excludes_lifetimes(builder: IndexBuilder) -> None:
    """Verify lifetimes are not counted unless configured."""
    s = builder.struct("S")
    builder.inner(s)["generics"] = generics(count=2, lifetimes=1)
    default = _by_id(_classify(builder))
    with_lifetimes = _by_id(
        _classify(builder, {"generics": {"count_lifetimes": True}})
    )
    assert default[s].generic_count == 2  # noqa: PLR2004
    assert with_lifetimes[s].generic_count == 3  # noqa: PLR2004


def test_synthetic_params_are_skipped(builder: IndexBuilder) -> None:
    """Verify impl-trait argument params are not counted by default."""
    f = builder.function("f", n_generics=1)
    params = builder.inner(f)["generics"]["params"]
    params[0]["kind"]["type"]["is_synthetic"] = True
    items = _by_id(_classify(builder))
    assert items[f].generic_count == 0


def test_const_and_async_flags(builder: IndexBuilder) -> None:
    """Verify function qualifiers are carried onto classified items."""
    f = builder.function("f", is_const=True)
    g = builder.function("g", is_async=True)
    items = _by_id(_classify(builder))
    assert items[f].is_const
    assert items[g].is_async
    assert items[f].crate == "demo"


def test_impl_of_unstable_trait_is_unstable(builder: IndexBuilder) -> None:
    """Verify impls inherit instability from a local trait."""
    s = builder.struct("Point")
    t = builder.trait("Shape", attrs=['#[unstable(feature = "shapes")]'])
    local = builder.impl(s, trait=t, trait_name="Shape")
    display = builder.external("900", ["core", "fmt", "Display"])
    foreign = builder.impl(s, trait=display, trait_name="Display")
    items = _by_id(_classify(builder))
    assert items[local].stability is StabilityTier.UNSTABLE
    assert items[foreign].stability is StabilityTier.STABLE
    assert items[s].stability is StabilityTier.STABLE


def test_newer_layout_fields_feed_classification(builder: IndexBuilder) -> None:
    """Verify structured attributes and renamed flags reach the counts."""
    attrs = [{"other": '#[unstable(feature = "x")]'}]
    f = builder.function("f", attrs=attrs)
    builder.inner(f)["header"] = {"const_": True, "async_": True}
    builder.inner(f)["generics"]["params"] = [
        {"name": "impl Copy", "kind": {"type": {"synthetic": True}}}
    ]
    items = _by_id(_classify(builder))
    assert items[f].stability is StabilityTier.UNSTABLE
    assert items[f].generic_count == 0
    assert items[f].is_const
    assert items[f].is_async

import pytest

from bubbleapp.context import Ctx
from bubbleapp.provider import (
    Context,
    ProviderProps,
    context_provider,
    new_provider,
    use_context,
)


def _reader(context):
    def child(c):
        return c.render_with_name(
            lambda c, _p: str(use_context(c, context)), None, "Reader"
        )

    return child


def test_context_ids_are_unique_and_increasing():
    first = Context(1)
    second = Context(2)
    assert second.id > first.id


def test_use_context_without_provider_returns_initial_value():
    c = Ctx()
    ctx_obj = Context("fallback")
    assert use_context(c, ctx_obj) == "fallback"


def test_provider_supplies_value_to_child():
    c = Ctx()
    ctx_obj = Context("fallback")
    comp = new_provider(c, ctx_obj, "hello", _reader(ctx_obj))
    assert str(comp) == "hello"


def test_value_is_removed_after_render():
    c = Ctx()
    ctx_obj = Context("fallback")
    new_provider(c, ctx_obj, "hello", _reader(ctx_obj))
    assert c.context_values == {}
    assert use_context(c, ctx_obj) == "fallback"


def test_nested_provider_innermost_wins():
    c = Ctx()
    ctx_obj = Context("fallback")

    def outer_child(c):
        return new_provider(c, ctx_obj, "inner", _reader(ctx_obj))

    comp = new_provider(c, ctx_obj, "outer", outer_child)
    assert str(comp) == "inner"


def test_provider_component_named_after_value_type():
    c = Ctx()
    ctx_obj = Context(0)
    new_provider(c, ctx_obj, 5, _reader(ctx_obj))
    assert c.ids[0] == "CtxProvider{int}[0]"
    assert str(c.components[c.ids[0]]) == "5"


def test_new_provider_without_context_raises():
    c = Ctx()
    with pytest.raises(ValueError):
        new_provider(c, None, 1, lambda c: None)


def test_context_provider_rejects_other_props():
    c = Ctx()
    with pytest.raises(TypeError):
        context_provider(c, {"value": 1})


def test_context_provider_rejects_missing_context():
    c = Ctx()
    props = ProviderProps(context=None, value=1, child=lambda c: None)
    with pytest.raises(ValueError):
        context_provider(c, props)


def test_use_context_without_context_raises():
    with pytest.raises(ValueError):
        use_context(Ctx(), None)


def test_type_mismatch_raises():
    c = Ctx()
    ctx_obj = Context("text")
    c.push_context_value(ctx_obj.id, 3)
    with pytest.raises(TypeError):
        use_context(c, ctx_obj)


def test_value_popped_even_when_child_fails():
    c = Ctx()
    ctx_obj = Context("fallback")

    def failing(c):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        new_provider(c, ctx_obj, "value", failing)
    assert ctx_obj.id not in c.context_values
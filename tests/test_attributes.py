"""Tests for attribute declaration and attribute method dispatch."""

import pytest

from recordkit.attributes import AttributeRegistry
from recordkit.exceptions import (
    ModelDefinitionError,
    OverlappingAttributeMethodPatternError,
)


# =============================================================================
# Fixtures
# =============================================================================


class Target:
    """Stand-in for a record receiving dispatched calls."""


@pytest.fixture
def calls():
    return []


@pytest.fixture
def recorder(calls):
    def handler(target, attribute, *args, **kwargs):
        calls.append((target, attribute, args, kwargs))
        return f"handled {attribute}"

    return handler


@pytest.fixture
def registry():
    reg = AttributeRegistry()
    reg.declare_attributes(["name", "age"])
    return reg


# =============================================================================
# Declaration
# =============================================================================


class TestDeclaration:
    def test_declares_in_order(self, registry):
        assert registry.attribute_names() == ("name", "age")

    def test_redeclare_is_noop(self, registry):
        registry.declare_attributes(["age", "email"])
        assert registry.attribute_names() == ("name", "age", "email")

    @pytest.mark.parametrize("bad", ["", "first name", "1st", "na-me"])
    def test_rejects_invalid_names(self, bad):
        reg = AttributeRegistry()
        with pytest.raises(ModelDefinitionError, match="Invalid attribute name"):
            reg.declare_attribute(bad)

    def test_defaults(self):
        reg = AttributeRegistry()
        reg.declare_attribute("age", 0)
        reg.declare_attribute("name")
        assert reg.defaults() == {"age": 0, "name": None}

    def test_has_attribute(self, registry):
        assert registry.has_attribute("name")
        assert not registry.has_attribute("email")

    def test_alias(self, registry):
        registry.alias_attribute("full_name", "name")
        assert registry.has_attribute("full_name")
        assert registry.resolve_alias("full_name") == "name"
        assert registry.resolve_alias("age") == "age"
        assert registry.aliases() == {"full_name": "name"}

    def test_alias_to_unknown_attribute(self, registry):
        with pytest.raises(ModelDefinitionError, match="undeclared"):
            registry.alias_attribute("nick", "nickname")

    def test_alias_colliding_with_attribute(self, registry):
        with pytest.raises(ModelDefinitionError, match="collides"):
            registry.alias_attribute("age", "name")


# =============================================================================
# Dispatch
# =============================================================================


class TestDispatch:
    def test_prefix(self, registry, recorder, calls):
        registry.define_prefix_method("clear_", recorder)
        target = Target()

        result = registry.dispatch(target, "clear_name", 1, flag=True)

        assert result == "handled name"
        assert calls == [(target, "name", (1,), {"flag": True})]

    def test_suffix(self, registry, recorder, calls):
        registry.define_suffix_method("_upcased", recorder)
        registry.dispatch(Target(), "age_upcased")
        assert calls[0][1] == "age"

    def test_affix(self, registry, recorder, calls):
        registry.define_affix_method("reset_", "_to_default", recorder)
        registry.dispatch(Target(), "reset_name_to_default")
        assert calls[0][1] == "name"

    def test_alias_resolves_to_attribute(self, registry, recorder, calls):
        registry.alias_attribute("full_name", "name")
        registry.define_prefix_method("clear_", recorder)
        registry.dispatch(Target(), "clear_full_name")
        assert calls[0][1] == "name"

    def test_patterns_apply_to_later_attributes(self, registry, recorder, calls):
        registry.define_prefix_method("clear_", recorder)
        registry.declare_attribute("email")
        registry.dispatch(Target(), "clear_email")
        assert calls[0][1] == "email"

    def test_no_match(self, registry, recorder):
        registry.define_prefix_method("clear_", recorder)
        assert registry.match("clear_email") is None
        with pytest.raises(AttributeError, match="no attribute method 'clear_email'"):
            registry.dispatch(Target(), "clear_email")

    def test_match_details(self, registry, recorder):
        registry.define_suffix_method("_changed", recorder)
        found = registry.match("age_changed")
        assert found.attribute == "age"
        assert found.method_name == "age_changed"
        assert found.pattern.suffix == "_changed"

    def test_attribute_method_names(self, registry, recorder):
        registry.define_prefix_method("clear_", recorder)
        assert registry.attribute_method_names() == ["clear_age", "clear_name"]

    def test_bind(self, registry, recorder, calls):
        registry.define_prefix_method("clear_", recorder)
        target = Target()
        bound = registry.bind(target, "clear_age")
        bound("x")
        assert calls == [(target, "age", ("x",), {})]


# =============================================================================
# Overlapping patterns
# =============================================================================


class TestOverlap:
    def test_same_prefix_twice(self, registry, recorder):
        registry.define_prefix_method("clear_", recorder)
        with pytest.raises(OverlappingAttributeMethodPatternError) as exc_info:
            registry.define_prefix_method("clear_", recorder)
        assert exc_info.value.method_name in ("clear_name", "clear_age")

    def test_rejected_pattern_is_not_registered(self, recorder):
        reg = AttributeRegistry()
        reg.declare_attributes(["set_x", "reset"])
        reg.define_prefix_method("re", recorder)

        # "re" + "set_x" and "reset" + "_x" both generate "reset_x"
        with pytest.raises(OverlappingAttributeMethodPatternError, match="reset_x"):
            reg.define_suffix_method("_x", recorder)

        assert reg.match("set_x_x") is None
        assert reg.match("reset_x").pattern.prefix == "re"

    def test_declaration_creating_a_tie_is_rejected(self, recorder):
        reg = AttributeRegistry()
        reg.declare_attribute("set_x")
        reg.define_prefix_method("re", recorder)
        reg.define_suffix_method("_x", recorder)

        with pytest.raises(OverlappingAttributeMethodPatternError):
            reg.declare_attribute("reset")
        assert not reg.has_attribute("reset")

    def test_longest_affix_wins(self, recorder):
        reg = AttributeRegistry()
        reg.declare_attributes(["b_c", "c"])
        reg.define_prefix_method("a_", recorder)
        reg.define_prefix_method("a_b_", recorder)

        found = reg.match("a_b_c")
        assert found.attribute == "c"
        assert found.pattern.prefix == "a_b_"

    def test_error_is_a_definition_error(self, registry, recorder):
        registry.define_suffix_method("_was", recorder)
        with pytest.raises(ModelDefinitionError):
            registry.define_suffix_method("_was", recorder)

    def test_empty_affix_rejected(self, registry, recorder):
        with pytest.raises(ModelDefinitionError, match="prefix or suffix"):
            registry.define_affix_method("", "", recorder)

    def test_handler_must_be_callable(self, registry):
        with pytest.raises(ModelDefinitionError, match="not callable"):
            registry.define_prefix_method("clear_", "nope")


# =============================================================================
# Freezing
# =============================================================================


class TestFreeze:
    def test_frozen_rejects_declarations(self, registry, recorder):
        registry.freeze()
        assert registry.frozen
        with pytest.raises(ModelDefinitionError, match="frozen"):
            registry.declare_attribute("email")
        with pytest.raises(ModelDefinitionError, match="frozen"):
            registry.define_prefix_method("clear_", recorder)
        with pytest.raises(ModelDefinitionError, match="frozen"):
            registry.alias_attribute("full_name", "name")

    def test_frozen_still_dispatches(self, registry, recorder, calls):
        registry.define_prefix_method("clear_", recorder)
        registry.freeze()
        registry.dispatch(Target(), "clear_name")
        assert len(calls) == 1

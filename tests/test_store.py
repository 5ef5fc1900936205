"""Tests for PatternStore construction, freezing and lookups."""

import pytest
from mpn_mcp.categories import ComponentCategory
from mpn_mcp.rules import Rule
from mpn_mcp.store import PatternStore, PatternStoreFrozenError

C = ComponentCategory


def _rule(pattern: str, category: ComponentCategory, provider_id: str = "acme") -> Rule:
    return Rule(pattern=pattern, category=category, provider_id=provider_id)


class TestRegister:
    """Construction-phase validation."""

    def test_register_and_lookup(self):
        store = PatternStore()
        rules = (_rule(r"^AB[0-9]+$", C.IC), _rule(r"^CD[0-9]+$", C.IC))
        store.register("acme", rules)
        assert store.rules_for(C.IC) == rules
        assert "acme" in store
        assert len(store) == 2

    def test_rules_kept_in_registration_order(self):
        store = PatternStore()
        first = _rule(r"^AB[0-9]+$", C.IC, "first")
        second = _rule(r"^AB[0-9]+$", C.IC, "second")
        store.register("first", [first])
        store.register("second", [second])
        assert store.rules_for(C.IC) == (first, second)
        assert [reg.provider_id for reg in store.providers()] == ["first", "second"]
        assert [reg.order for reg in store.providers()] == [0, 1]
        assert store.all_rules() == (first, second)

    def test_rule_owned_by_other_provider_rejected(self):
        store = PatternStore()
        with pytest.raises(ValueError, match="owned by"):
            store.register("acme", [_rule(r"^AB$", C.IC, "other")])

    def test_undeclared_category_rejected(self):
        store = PatternStore()
        with pytest.raises(ValueError, match="does not declare"):
            store.register("acme", [_rule(r"^AB$", C.MOSFET)], supported_categories={C.IC})

    def test_qualified_without_base_rejected(self):
        store = PatternStore()
        with pytest.raises(ValueError, match="base category MOSFET"):
            store.register("acme", [_rule(r"^AB$", C.MOSFET_ST)])

    def test_qualified_with_base_accepted(self):
        store = PatternStore()
        store.register("acme", [_rule(r"^AB$", C.MOSFET), _rule(r"^AB$", C.MOSFET_ST)])
        assert store.categories() == frozenset({C.MOSFET, C.MOSFET_ST})

    def test_empty_provider_id_rejected(self):
        store = PatternStore()
        with pytest.raises(ValueError):
            store.register("", [])

    def test_identical_reregistration_is_noop(self):
        store = PatternStore()
        rules = [_rule(r"^AB$", C.IC)]
        store.register("acme", rules)
        store.register("acme", rules)
        assert len(store) == 1
        assert len(store.providers()) == 1

    def test_conflicting_reregistration_rejected(self):
        store = PatternStore()
        store.register("acme", [_rule(r"^AB$", C.IC)])
        with pytest.raises(ValueError, match="already registered"):
            store.register("acme", [_rule(r"^CD$", C.IC)])


class TestFreeze:
    """Frozen stores reject registration."""

    def test_register_after_freeze_raises(self):
        store = PatternStore()
        store.register("acme", [_rule(r"^AB$", C.IC)])
        store.freeze()
        assert store.frozen
        with pytest.raises(PatternStoreFrozenError):
            store.register("late", [_rule(r"^CD$", C.IC, "late")])

    def test_frozen_error_is_runtime_error(self):
        assert issubclass(PatternStoreFrozenError, RuntimeError)

    def test_freeze_is_idempotent(self):
        store = PatternStore()
        store.freeze()
        store.freeze()
        assert store.frozen

    def test_lookups_survive_freeze(self):
        store = PatternStore()
        rule = _rule(r"^AB$", C.IC)
        store.register("acme", [rule])
        store.freeze()
        assert store.rules_for(C.IC) == (rule,)
        assert store.registration("acme").rules == (rule,)


class TestLookups:
    """Lookups never raise."""

    def test_unknown_category_is_empty(self):
        store = PatternStore()
        store.register("acme", [_rule(r"^AB$", C.IC)])
        assert store.rules_for(C.CRYSTAL) == ()

    def test_none_category_is_empty(self):
        assert PatternStore().rules_for(None) == ()

    def test_unknown_registration(self):
        assert PatternStore().registration("nobody") is None
        assert "nobody" not in PatternStore()

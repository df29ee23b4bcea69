"""Tests for signin_capabilities.capability — Capability and validation helpers."""
from __future__ import annotations

import pytest

from signin_capabilities.capability import Capability, validate_actions, validate_resource
from signin_capabilities.errors import InvalidActionError, InvalidResourceError


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


class TestValidateActions:
    def test_returns_deduplicated_set(self) -> None:
        assert validate_actions(["get", "list", "get"]) == {"get", "list"}

    def test_bare_string_is_single_action(self) -> None:
        assert validate_actions("present") == {"present"}

    def test_empty_iterable_is_empty_set(self) -> None:
        assert validate_actions([]) == set()

    def test_empty_action_raises(self) -> None:
        with pytest.raises(InvalidActionError):
            validate_actions(["get", ""])

    def test_non_string_action_raises(self) -> None:
        with pytest.raises(InvalidActionError) as exc_info:
            validate_actions(["get", 3])  # type: ignore[list-item]
        assert exc_info.value.action == 3


class TestValidateResource:
    def test_valid_resource_returned(self) -> None:
        assert validate_resource("kepler:ens:example.eth://default/kv") == (
            "kepler:ens:example.eth://default/kv"
        )

    def test_empty_resource_raises(self) -> None:
        with pytest.raises(InvalidResourceError):
            validate_resource("")


# ---------------------------------------------------------------------------
# Capability mutation
# ---------------------------------------------------------------------------


class TestCapabilityMutation:
    def test_new_capability_is_empty(self) -> None:
        assert Capability().is_empty()

    def test_add_default_actions_unions(self) -> None:
        cap = Capability()
        cap.add_default_actions(["get"])
        cap.add_default_actions(["get", "list"])
        assert cap.default_actions == {"get", "list"}
        assert not cap.is_empty()

    def test_add_targeted_actions_unions_per_resource(self) -> None:
        cap = Capability()
        cap.add_targeted_actions("res1", ["get"])
        cap.add_targeted_actions("res1", ["put"])
        cap.add_targeted_actions("res2", ["get"])
        assert cap.targeted_actions == {"res1": {"get", "put"}, "res2": {"get"}}

    def test_targeted_resource_not_recorded_without_actions(self) -> None:
        cap = Capability()
        cap.add_targeted_actions("res1", [])
        assert cap.targeted_actions == {}
        assert cap.is_empty()

    def test_add_targeted_actions_rejects_empty_resource(self) -> None:
        with pytest.raises(InvalidResourceError):
            Capability().add_targeted_actions("", ["get"])

    def test_targeted_actions_keep_first_declaration_order(self) -> None:
        cap = Capability()
        for resource in ["zeta", "alpha", "mid"]:
            cap.add_targeted_actions(resource, ["get"])
        assert list(cap.targeted_actions) == ["zeta", "alpha", "mid"]


# ---------------------------------------------------------------------------
# merge()
# ---------------------------------------------------------------------------


class TestCapabilityMerge:
    def _cap(self, defaults: list[str], targeted: dict[str, list[str]]) -> Capability:
        cap = Capability()
        cap.add_default_actions(defaults)
        for resource, actions in targeted.items():
            cap.add_targeted_actions(resource, actions)
        return cap

    def test_merge_unions_defaults_and_resources(self) -> None:
        left = self._cap(["get"], {"res1": ["get"]})
        right = self._cap(["list"], {"res1": ["put"], "res2": ["get"]})
        left.merge(right)
        assert left.default_actions == {"get", "list"}
        assert left.targeted_actions == {"res1": {"get", "put"}, "res2": {"get"}}

    def test_merge_is_commutative(self) -> None:
        a = self._cap(["get"], {"res1": ["get"]})
        b = self._cap(["list"], {"res2": ["put"]})
        ab = a.copy()
        ab.merge(b)
        ba = b.copy()
        ba.merge(a)
        assert ab == ba

    def test_merge_is_idempotent(self) -> None:
        a = self._cap(["get"], {"res1": ["get", "put"]})
        merged = a.copy()
        merged.merge(a)
        assert merged == a

    def test_merge_does_not_alias_other(self) -> None:
        a = Capability()
        b = self._cap([], {"res1": ["get"]})
        a.merge(b)
        a.add_targeted_actions("res1", ["put"])
        assert b.targeted_actions == {"res1": {"get"}}

    def test_merge_rejects_empty_default_action(self) -> None:
        target = self._cap(["get"], {})
        with pytest.raises(InvalidActionError):
            target.merge(Capability(default_actions={""}))
        assert target == self._cap(["get"], {})

    def test_merge_rejects_empty_resource(self) -> None:
        target = self._cap(["get"], {"res1": ["get"]})
        bad = Capability(default_actions={"list"}, targeted_actions={"": {"get"}})
        with pytest.raises(InvalidResourceError):
            target.merge(bad)
        assert target == self._cap(["get"], {"res1": ["get"]})

    def test_merge_rejects_non_string_targeted_action(self) -> None:
        target = Capability()
        bad = Capability(targeted_actions={"res1": {"get", 3}})  # type: ignore[arg-type]
        with pytest.raises(InvalidActionError):
            target.merge(bad)
        assert target.is_empty()


# ---------------------------------------------------------------------------
# Query / serialization
# ---------------------------------------------------------------------------


class TestCapabilityQuery:
    def test_actions_for_includes_defaults(self) -> None:
        cap = Capability()
        cap.add_default_actions(["present"])
        cap.add_targeted_actions("type:type1", ["revoke"])
        assert cap.actions_for("type:type1") == frozenset({"present", "revoke"})
        assert cap.actions_for("unknown") == frozenset({"present"})

    def test_copy_is_independent(self) -> None:
        cap = Capability()
        cap.add_targeted_actions("res1", ["get"])
        duplicate = cap.copy()
        duplicate.add_targeted_actions("res1", ["put"])
        assert cap.targeted_actions == {"res1": {"get"}}

    def test_equality_ignores_declaration_order(self) -> None:
        first = Capability()
        first.add_targeted_actions("a", ["x"])
        first.add_targeted_actions("b", ["y"])
        second = Capability()
        second.add_targeted_actions("b", ["y"])
        second.add_targeted_actions("a", ["x"])
        assert first == second

    def test_to_dict_is_sorted(self) -> None:
        cap = Capability()
        cap.add_default_actions(["put", "get"])
        cap.add_targeted_actions("zeta", ["b", "a"])
        cap.add_targeted_actions("alpha", ["c"])
        data = cap.to_dict()
        assert data["default_actions"] == ["get", "put"]
        assert data["targeted_actions"] == {"alpha": ["c"], "zeta": ["a", "b"]}
        assert list(data["targeted_actions"]) == ["alpha", "zeta"]  # type: ignore[arg-type]

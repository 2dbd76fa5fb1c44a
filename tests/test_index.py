"""Tests for MultiKeyIndex: lookup, mutation and lifecycle."""

from __future__ import annotations

import pytest
from conftest import Token, make_test_index, make_user

from multikey_index import MultiKeyIndex


class TestConstruction:
    def test_requires_extractors(self):
        with pytest.raises(ValueError, match="at least one extractor"):
            MultiKeyIndex([])

    def test_rejects_non_callable_extractor(self):
        with pytest.raises(TypeError, match="not callable"):
            MultiKeyIndex([lambda v: v, "username"])

    def test_rejects_unknown_duplicate_mode(self):
        with pytest.raises(ValueError, match="on_duplicate"):
            MultiKeyIndex([lambda v: v], on_duplicate="ignore")

    def test_accepts_any_iterable_of_extractors(self):
        index = MultiKeyIndex(f for f in [str.upper, str.lower])
        assert len(index.extractors) == 2

    def test_starts_empty(self):
        index = make_test_index()
        assert index.size == 0
        assert len(index) == 0
        assert list(index.values()) == []
        assert repr(index) == "MultiKeyIndex(size=0, facets=3)"


class TestReferenceScenario:
    def test_add_replace_delete(self):
        index = make_test_index()
        user = make_user()
        index.add(user)
        assert index.get("john.doe") is user
        assert index.get("123-45-6789") is user
        assert index.get(user.token) is user

        user.username = "john.doe.1"
        assert index.replace("john.doe", user) is True
        assert index.get("john.doe") is None
        assert index.get("john.doe.1") is user
        assert index.get("123-45-6789") is user
        assert index.get(user.token) is user
        assert index.size == 1

        assert index.delete_by_key("john.doe.1") is True
        assert index.get("john.doe.1") is None
        assert index.get("123-45-6789") is None
        assert index.get(user.token) is None
        assert index.size == 0


class TestLookup:
    def test_every_facet_finds_the_value(self):
        index = make_test_index()
        user = make_user()
        index.add(user)
        for extract in index.extractors:
            assert index.get(extract(user)) is user

    def test_get_missing_returns_default(self):
        index = make_test_index()
        assert index.get("nobody") is None
        assert index.get("nobody", "fallback") == "fallback"

    def test_has_and_contains(self):
        index = make_test_index()
        user = make_user()
        index.add(user)
        assert index.has("john.doe") is True
        assert "123-45-6789" in index
        assert index.has("jane.doe") is False
        assert Token("john.doe") not in index

    def test_getitem(self):
        index = make_test_index()
        user = make_user()
        index.add(user)
        assert index["john.doe"] is user
        with pytest.raises(KeyError):
            index["jane.doe"]

    def test_keys_for(self):
        index = make_test_index()
        user = make_user()
        index.add(user)
        assert index.keys_for(user) == ("123-45-6789", "john.doe", user.token)
        assert index.keys_for(make_user()) is None

    def test_unhashable_lookup_is_a_miss(self):
        index = make_test_index()
        index.add(make_user())
        assert index.get(["john.doe"]) is None
        assert index.get({"ssn": 1}, "fallback") == "fallback"
        assert index.has(["john.doe"]) is False
        assert ["john.doe"] not in index
        with pytest.raises(KeyError):
            index[["john.doe"]]

    def test_heterogeneous_keys_share_one_namespace(self):
        index = MultiKeyIndex([lambda r: r["id"], lambda r: r["name"]])
        record = {"id": 7, "name": "seven"}
        index.add(record)
        assert index.get(7) is record
        assert index.get("seven") is record
        assert index.get("7") is None


class TestIdentity:
    def test_equal_values_are_distinct_entries(self):
        index = make_test_index()
        token = Token("shared")
        first = make_user("a", "1", token)
        second = make_user("b", "2", token)
        twin = make_user("a", "1", token)
        assert first == twin

        index.add(first)
        index.add(second)
        assert index.delete_by_value(twin) is False
        assert index.size == 2

    def test_delete_by_value_uses_identity(self):
        index = make_test_index()
        user = make_user()
        index.add(user)
        assert index.delete_by_value(make_user()) is False
        assert index.delete_by_value(user) is True
        assert index.size == 0

    def test_stale_keys_survive_in_place_mutation(self):
        index = make_test_index()
        user = make_user()
        index.add(user)
        user.username = "renamed"
        assert index.get("john.doe") is user
        assert index.get("renamed") is None


class TestAdd:
    def test_size_counts_values_not_keys(self):
        index = make_test_index()
        for i in range(5):
            index.add(make_user(f"user{i}", f"ssn{i}"))
        assert index.size == 5

    def test_readding_live_value_rederives_keys(self):
        index = make_test_index()
        user = make_user()
        index.add(user)
        user.username = "john.doe.2"
        index.add(user)
        assert index.size == 1
        assert index.get("john.doe") is None
        assert index.get("john.doe.2") is user

    def test_extractor_error_leaves_index_unchanged(self):
        index = make_test_index()
        user = make_user()
        index.add(user)
        with pytest.raises(AttributeError):
            index.add(object())
        assert index.size == 1
        assert index.get("john.doe") is user

    def test_unhashable_key_leaves_index_unchanged(self):
        index = MultiKeyIndex([lambda r: r["id"], lambda r: r["tags"]])
        with pytest.raises(TypeError):
            index.add({"id": 1, "tags": ["a", "b"]})
        assert index.size == 0
        assert index.get(1) is None


class TestDelete:
    def test_delete_by_value_removes_all_keys(self):
        index = make_test_index()
        user = make_user()
        index.add(user)
        assert index.delete_by_value(user) is True
        assert index.get("john.doe") is None
        assert index.get("123-45-6789") is None
        assert index.get(user.token) is None

    def test_delete_by_any_key_removes_all_keys(self):
        index = make_test_index()
        user = make_user()
        index.add(user)
        assert index.delete_by_key(user.token) is True
        assert index.has("john.doe") is False
        assert index.has("123-45-6789") is False

    def test_delete_missing_returns_false(self):
        index = make_test_index()
        assert index.delete_by_key("nobody") is False
        assert index.delete_by_value(make_user()) is False

    def test_second_delete_returns_false(self):
        index = make_test_index()
        user = make_user()
        index.add(user)
        assert index.delete_by_key("john.doe") is True
        assert index.delete_by_key("john.doe") is False
        assert index.delete_by_value(user) is False

    def test_delete_leaves_other_values(self):
        index = make_test_index()
        alice = make_user("alice", "111")
        bob = make_user("bob", "222")
        index.add(alice)
        index.add(bob)
        index.delete_by_value(alice)
        assert index.get("bob") is bob
        assert index.get("222") is bob
        assert index.size == 1


class TestReplace:
    def test_replace_missing_key_changes_nothing(self):
        index = make_test_index()
        user = make_user()
        index.add(user)
        other = make_user("jane", "999")
        assert index.replace("nobody", other) is False
        assert index.size == 1
        assert index.get("jane") is None

    def test_replace_with_new_object_drops_old_owner(self):
        index = make_test_index()
        old = make_user("old.name", "123")
        new = make_user("new.name", "123")
        index.add(old)
        assert index.replace("old.name", new) is True
        assert index.size == 1
        assert index.get("old.name") is None
        assert index.get(old.token) is None
        assert index.get("new.name") is new
        assert index.get("123") is new
        assert index.delete_by_value(old) is False

    def test_replace_by_secondary_key(self):
        index = make_test_index()
        user = make_user()
        index.add(user)
        user.ssn = "000-00-0000"
        user.username = "jd"
        assert index.replace(user.token, user) is True
        assert index.keys_for(user) == ("000-00-0000", "jd", user.token)
        assert index.get("123-45-6789") is None
        assert index.get("john.doe") is None

    def test_replace_with_value_live_elsewhere(self):
        index = make_test_index()
        alice = make_user("alice", "111")
        bob = make_user("bob", "222")
        index.add(alice)
        index.add(bob)
        bob.ssn = "333"
        assert index.replace("alice", bob) is True
        assert index.size == 1
        assert index.get("alice") is None
        assert index.get("111") is None
        assert index.get("222") is None
        assert index.get("333") is bob
        assert index.get("bob") is bob

    def test_size_after_mixed_operations(self):
        index = make_test_index()
        users = [make_user(f"u{i}", f"s{i}") for i in range(4)]
        for user in users:
            index.add(user)
        index.delete_by_key("u0")
        index.delete_by_value(users[1])
        index.replace("u2", make_user("u2b", "s2b"))
        assert index.size == 2


class TestClear:
    def test_clear_is_idempotent(self):
        index = make_test_index()
        users = [make_user(f"u{i}", f"s{i}") for i in range(3)]
        for user in users:
            index.add(user)
        index.clear()
        index.clear()
        assert index.size == 0
        for user in users:
            assert index.get(user.username) is None
            assert index.get(user.ssn) is None
            assert index.get(user.token) is None

    def test_index_is_usable_after_clear(self):
        index = make_test_index()
        index.add(make_user())
        index.clear()
        user = make_user()
        index.add(user)
        assert index.get("john.doe") is user
        assert index.size == 1

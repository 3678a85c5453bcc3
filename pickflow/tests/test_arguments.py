"""
Tests for the tri-state argument store.

Tests:
- UNSET / SKIPPED / SET transitions
- Submission payload excludes skipped entries
- Change channel
"""

from ..engine_core.arguments import ArgStatus, ArgumentStore, SKIPPED, UNSET


class TestArgumentStates:
    """Tests for reading and writing argument states."""

    def test_missing_name_is_unset(self):
        """Names never written read as UNSET and need input."""
        store = ArgumentStore()
        assert store.get("piece") == UNSET
        assert store.needs_input("piece")
        assert "piece" not in store

    def test_skip_satisfies_selection(self):
        """SKIPPED is distinct from UNSET and does not need input."""
        store = ArgumentStore()
        store.skip("bonus")
        assert store.get("bonus") == SKIPPED
        assert not store.needs_input("bonus")
        assert not store.is_set("bonus")

    def test_set_none_is_still_set(self):
        """A None value is an answer, not a skip."""
        store = ArgumentStore()
        store.set("target", None)
        entry = store.get("target")
        assert entry.status == ArgStatus.SET
        assert entry.value is None
        assert not store.needs_input("target")

    def test_unset_returns_to_needing_input(self):
        store = ArgumentStore({"piece": 7})
        store.unset("piece")
        assert store.needs_input("piece")
        assert len(store) == 0

    def test_initial_values_are_set(self):
        store = ArgumentStore({"piece": 7, "square": "e4"})
        assert store.value_of("piece") == 7
        assert store.value_of("missing", "default") == "default"
        assert sorted(store) == ["piece", "square"]

    def test_resolved_values_drop_skipped(self):
        """Only SET entries are sent anywhere."""
        store = ArgumentStore({"piece": 7})
        store.skip("bonus")
        assert store.resolved_values() == {"piece": 7}

    def test_last_write_wins(self):
        store = ArgumentStore()
        store.set("piece", 7)
        store.set("piece", 8)
        assert store.value_of("piece") == 8


class TestChangeChannel:
    """Tests for argument change notifications."""

    def test_listener_sees_previous_and_current(self):
        store = ArgumentStore()
        changes = []
        store.subscribe(changes.append)

        store.set("piece", 7)
        store.skip("piece")

        assert [c.name for c in changes] == ["piece", "piece"]
        assert changes[0].previous == UNSET
        assert changes[0].current.value == 7
        assert changes[1].previous.value == 7
        assert changes[1].current == SKIPPED

    def test_unsubscribe_stops_notifications(self):
        store = ArgumentStore()
        changes = []
        unsubscribe = store.subscribe(changes.append)

        store.set("a", 1)
        unsubscribe()
        store.set("b", 2)

        assert len(changes) == 1

    def test_reset_publishes_every_entry(self):
        """Reset is observable so mirrored surfaces clear too."""
        store = ArgumentStore({"a": 1, "b": 2})
        changes = []
        store.subscribe(changes.append)

        store.reset()

        assert {c.name for c in changes} == {"a", "b"}
        assert all(c.current == UNSET for c in changes)
        assert len(store) == 0

    def test_unset_of_missing_name_is_silent(self):
        store = ArgumentStore()
        changes = []
        store.subscribe(changes.append)
        store.unset("never-written")
        assert changes == []

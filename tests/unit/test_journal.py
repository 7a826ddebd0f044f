"""Tests for the undo journal."""

import pytest

from cpamm.journal import Journal


class Box:
    """Plain attribute holder for assign tests."""

    def __init__(self, value: int) -> None:
        self.value = value


class TestRecording:
    """Tests for when undo records are kept."""

    def test_outside_checkpoint_nothing_kept(self, journal):
        """Mutations outside a checkpoint apply without records."""
        box = Box(1)
        journal.assign(box, "value", 2)
        assert box.value == 2
        assert journal.pending == 0
        assert journal.depth == 0

    def test_inside_checkpoint_records(self, journal):
        """Each mutation inside a checkpoint adds a record."""
        box = Box(1)
        mapping: dict[str, int] = {}
        with journal.atomic():
            journal.assign(box, "value", 2)
            journal.put(mapping, "k", 3)
            assert journal.pending == 2
            assert journal.depth == 1

    def test_commit_clears_records(self, journal):
        """Leaving the outermost checkpoint drops all records."""
        box = Box(1)
        with journal.atomic():
            journal.assign(box, "value", 2)
        assert box.value == 2
        assert journal.pending == 0
        assert journal.depth == 0


class TestRevert:
    """Tests for rollback on error."""

    def test_assign_reverted(self, journal):
        """Attributes return to their previous values."""
        box = Box(1)
        with pytest.raises(ValueError):
            with journal.atomic():
                journal.assign(box, "value", 2)
                journal.assign(box, "value", 3)
                raise ValueError("boom")
        assert box.value == 1

    def test_put_reverted(self, journal):
        """Inserted keys vanish, overwritten and deleted keys come back."""
        mapping = {"keep": 1, "drop": 2}
        with pytest.raises(ValueError):
            with journal.atomic():
                journal.put(mapping, "keep", 10)
                journal.put(mapping, "drop", None)
                journal.put(mapping, "new", 5)
                raise ValueError("boom")
        assert mapping == {"keep": 1, "drop": 2}

    def test_put_none_deletes(self, journal):
        """None removes the key."""
        mapping = {"k": 1}
        journal.put(mapping, "k", None)
        assert mapping == {}

    def test_custom_record(self, journal):
        """Arbitrary undo callables run in reverse order."""
        log: list[int] = []
        items: list[str] = []
        with pytest.raises(KeyError):
            with journal.atomic():
                items.append("a")
                journal.record("append a", lambda: log.append(1))
                items.append("b")
                journal.record("append b", lambda: log.append(2))
                raise KeyError("boom")
        assert log == [2, 1]


class TestNesting:
    """Tests for nested checkpoints."""

    def test_inner_failure_caught_keeps_outer(self, journal):
        """A caught inner failure only reverts the inner changes."""
        box = Box(0)
        mapping: dict[str, int] = {}
        with journal.atomic():
            journal.assign(box, "value", 1)
            try:
                with journal.atomic():
                    journal.put(mapping, "inner", 1)
                    raise RuntimeError("inner")
            except RuntimeError:
                pass
            assert journal.depth == 1
        assert box.value == 1
        assert mapping == {}

    def test_propagating_failure_reverts_everything(self, journal):
        """An escaping inner failure reverts outer changes too."""
        box = Box(0)
        with pytest.raises(RuntimeError):
            with journal.atomic():
                journal.assign(box, "value", 1)
                with journal.atomic():
                    journal.assign(box, "value", 2)
                    raise RuntimeError("inner")
        assert box.value == 0
        assert journal.depth == 0
        assert journal.pending == 0

    def test_inner_success_reverted_by_outer_failure(self):
        """Committed inner changes are still undone by the outer checkpoint."""
        journal = Journal()
        box = Box(0)
        with pytest.raises(RuntimeError):
            with journal.atomic():
                with journal.atomic():
                    journal.assign(box, "value", 5)
                assert journal.pending == 1
                raise RuntimeError("outer")
        assert box.value == 0

"""Undo journal giving pool calls all-or-nothing semantics.

Stateful components (pool state, claim ledger, in-memory assets, event log)
share one Journal. Every mutation made while a checkpoint is open records how
to restore the previous value. If the call raises, the journal replays those
records in reverse, so the pool, the claims and the assets all look exactly
as they did before the call.

Checkpoints nest: a re-entrant call opens an inner checkpoint, and a failure
there only rewinds the inner call's changes unless the exception keeps
propagating outward.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, MutableMapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, TypeVar

import structlog

logger = structlog.get_logger()

K = TypeVar("K")
V = TypeVar("V")

_MISSING = object()


@dataclass(frozen=True)
class StateChange:
    """Record of a single mutation and how to undo it."""

    label: str
    undo: Callable[[], None]


class Journal:
    """Stack of undo records scoped by nested checkpoints."""

    def __init__(self) -> None:
        self._changes: list[StateChange] = []
        self._depth = 0

    @property
    def depth(self) -> int:
        """Number of open checkpoints (0 outside any pool call)."""
        return self._depth

    @property
    def pending(self) -> int:
        """Number of undo records held for the open checkpoints."""
        return len(self._changes)

    def record(self, label: str, undo: Callable[[], None]) -> None:
        """Register an undo action for a mutation that just happened.

        Outside a checkpoint there is nothing to roll back to, so the
        record is dropped.
        """
        if self._depth == 0:
            return
        self._changes.append(StateChange(label=label, undo=undo))

    def assign(self, target: object, attr: str, value: Any) -> None:
        """Set ``target.attr = value`` and journal the previous value."""
        previous = getattr(target, attr)
        setattr(target, attr, value)
        self.record(f"{type(target).__name__}.{attr}", lambda: setattr(target, attr, previous))

    def put(self, mapping: MutableMapping[K, V], key: K, value: V | None) -> None:
        """Set ``mapping[key] = value`` (or delete when value is None), journaled."""
        previous = mapping.get(key, _MISSING)  # type: ignore[arg-type]
        if value is None:
            mapping.pop(key, None)
        else:
            mapping[key] = value

        def undo() -> None:
            if previous is _MISSING:
                mapping.pop(key, None)
            else:
                mapping[key] = previous  # type: ignore[assignment]

        self.record(f"mapping[{key!r}]", undo)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Open a checkpoint; revert everything recorded inside it on error."""
        mark = len(self._changes)
        self._depth += 1
        try:
            yield
        except BaseException:
            self._revert_to(mark)
            raise
        finally:
            self._depth -= 1
            if self._depth == 0:
                self._changes.clear()

    def _revert_to(self, mark: int) -> None:
        reverted = len(self._changes) - mark
        while len(self._changes) > mark:
            change = self._changes.pop()
            change.undo()
        logger.debug("journal_reverted", changes=reverted, depth=self._depth)

"""Pool events and the event log.

Events are the pool's observable output. Each event mirrors the Solidity
log an indexer would read and can ABI-encode its data the same way.
Emission is journaled: a reverted call leaves no events behind.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import asdict, dataclass
from typing import Any, ClassVar

import structlog
from eth_abi import encode  # type: ignore[attr-defined]

from cpamm.journal import Journal

logger = structlog.get_logger()


def _address_bytes(address: str) -> bytes:
    return bytes.fromhex(address[2:])


@dataclass(frozen=True)
class PoolEvent:
    """Base class for events emitted by the pool."""

    NAME: ClassVar[str] = ""
    ABI_TYPES: ClassVar[tuple[str, ...]] = ()

    @property
    def signature(self) -> str:
        """Solidity event signature, e.g. ``Swap(address,...)``."""
        return f"{self.NAME}({','.join(self.ABI_TYPES)})"

    def abi_values(self) -> list[Any]:
        values: list[Any] = []
        for abi_type, value in zip(self.ABI_TYPES, asdict(self).values(), strict=True):
            values.append(_address_bytes(value) if abi_type == "address" else value)
        return values

    def encode_data(self) -> str:
        """ABI-encode the event fields as 0x-prefixed hex."""
        return "0x" + encode(list(self.ABI_TYPES), self.abi_values()).hex()

    def to_dict(self) -> dict[str, Any]:
        return {"event": self.NAME, **asdict(self)}


@dataclass(frozen=True)
class SwapEvent(PoolEvent):
    """A completed swap. ``amount_in`` is the measured amount received."""

    NAME: ClassVar[str] = "Swap"
    ABI_TYPES: ClassVar[tuple[str, ...]] = ("address", "address", "address", "uint256", "uint256")

    caller: str
    asset_in: str
    asset_out: str
    amount_in: int
    amount_out: int


@dataclass(frozen=True)
class AddLiquidityEvent(PoolEvent):
    """A deposit and the claims issued for it."""

    NAME: ClassVar[str] = "AddLiquidity"
    ABI_TYPES: ClassVar[tuple[str, ...]] = ("address", "uint256", "uint256", "uint256")

    caller: str
    amount_a: int
    amount_b: int
    claims_issued: int


@dataclass(frozen=True)
class RemoveLiquidityEvent(PoolEvent):
    """A withdrawal and the claims burned for it."""

    NAME: ClassVar[str] = "RemoveLiquidity"
    ABI_TYPES: ClassVar[tuple[str, ...]] = ("address", "uint256", "uint256", "uint256")

    caller: str
    amount_a: int
    amount_b: int
    claims_burned: int


class EventLog:
    """Ordered, journaled record of emitted events."""

    def __init__(self, journal: Journal | None = None) -> None:
        self.journal = journal or Journal()
        self._events: list[PoolEvent] = []

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[PoolEvent]:
        return iter(list(self._events))

    def emit(self, event: PoolEvent) -> None:
        self._events.append(event)
        self.journal.record(f"event:{event.NAME}", self._events.pop)
        logger.debug("event_emitted", name=event.NAME)

    def since(self, index: int) -> list[PoolEvent]:
        """Events emitted at or after position ``index``."""
        return self._events[index:]

    def of_type(self, event_type: type[PoolEvent]) -> list[PoolEvent]:
        return [e for e in self._events if isinstance(e, event_type)]

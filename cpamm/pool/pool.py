"""Two-asset constant-product pool.

Pool is the entry point: it owns the PoolState, the claim ledger and the
event log, and routes each call to the swap or liquidity engine inside a
journal checkpoint. Every mutating call commits its state before the final
outbound transfer, and (with ``PoolConfig.atomic``) a failure anywhere
reverts the whole call.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from cpamm.assets.adapter import AssetAdapter
from cpamm.assets.base import AssetToken, ClaimLedgerLike
from cpamm.claims import ClaimLedger
from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.events import EventLog
from cpamm.journal import Journal
from cpamm.models.types import normalize_address
from cpamm.pool.liquidity import AddLiquidityResult, LiquidityEngine, RemoveLiquidityResult
from cpamm.pool.state import PoolState
from cpamm.pool.swap import SwapEngine

logger = structlog.get_logger()


def compute_pool_address(asset_a: str, asset_b: str) -> str:
    """Deterministic custody address for a canonically ordered pair."""
    digest = hashlib.sha256(f"cpamm:{asset_a}:{asset_b}".encode()).hexdigest()
    return "0x" + digest[:40]


class Pool:
    """Constant-product pool over two asset collaborators.

    Args:
        asset_x: One asset of the pair (order does not matter)
        asset_y: The other asset
        address: Custody address; derived from the pair if None
        claims: Claim ledger; a bundled ClaimLedger if None
        journal: Journal shared with journal-aware collaborators; the
            asset's own journal (or a new one) if None
        config: Behavior flags
    """

    def __init__(
        self,
        asset_x: AssetToken,
        asset_y: AssetToken,
        *,
        address: str | None = None,
        claims: ClaimLedgerLike | None = None,
        journal: Journal | None = None,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> None:
        self.journal = journal or getattr(asset_x, "journal", None) or Journal()
        self.config = config
        self.state = PoolState.for_pair(asset_x.address, asset_y.address, self.journal)
        self.address = normalize_address(
            address or compute_pool_address(self.state.asset_a, self.state.asset_b), validate=True
        )
        self.assets: dict[str, AssetToken] = {
            normalize_address(asset_x.address): asset_x,
            normalize_address(asset_y.address): asset_y,
        }
        self.claims = claims if claims is not None else ClaimLedger(self.journal)
        self.events = EventLog(self.journal)

        adapter = AssetAdapter(self.address, self.journal)
        self.swap_engine = SwapEngine(adapter, self.assets, self.events, config=config)
        self.liquidity_engine = LiquidityEngine(adapter, self.assets, self.claims, self.events, config=config)

        logger.debug("pool_created", address=self.address, asset_a=self.state.asset_a, asset_b=self.state.asset_b)

    def __repr__(self) -> str:
        return (
            f"Pool({self.state.asset_a}/{self.state.asset_b}, "
            f"reserves=({self.state.reserve_a}, {self.state.reserve_b}), claims={self.state.total_claims})"
        )

    # --- Mutating entry points ---

    def swap(self, caller: str, asset_in: str, asset_out: str, amount_in: int) -> int:
        """Swap exact input; returns the amount of ``asset_out`` paid to caller."""
        with self._call("swap"):
            return self.swap_engine.swap(self.state, caller, asset_in, asset_out, amount_in)

    def add_liquidity(self, caller: str, amount_a_wanted: int, amount_b_wanted: int) -> tuple[int, int, int]:
        """Deposit both assets; returns (actual_a, actual_b, claims_issued)."""
        with self._call("add_liquidity"):
            result = self.liquidity_engine.add_liquidity(self.state, caller, amount_a_wanted, amount_b_wanted)
        return result.amount_a, result.amount_b, result.claims_issued

    def remove_liquidity(self, caller: str, claims_in: int) -> tuple[int, int]:
        """Burn claims; returns (amount_a, amount_b) paid to caller."""
        with self._call("remove_liquidity"):
            result = self.liquidity_engine.remove_liquidity(self.state, caller, claims_in)
        return result.amount_a, result.amount_b

    # --- Quotes ---

    def quote_swap(self, asset_in: str, asset_out: str, amount_in: int) -> int:
        return self.swap_engine.quote(self.state, asset_in, asset_out, amount_in)

    def quote_add_liquidity(self, amount_a_wanted: int, amount_b_wanted: int) -> AddLiquidityResult:
        return self.liquidity_engine.quote_add(self.state, amount_a_wanted, amount_b_wanted)

    def quote_remove_liquidity(self, claims_in: int) -> RemoveLiquidityResult:
        return self.liquidity_engine.quote_remove(self.state, claims_in)

    # --- Query surface ---

    def get_reserves(self) -> tuple[int, int]:
        return self.state.reserve_a, self.state.reserve_b

    def get_asset_a(self) -> str:
        return self.state.asset_a

    def get_asset_b(self) -> str:
        return self.state.asset_b

    @property
    def total_claims(self) -> int:
        return self.state.total_claims

    def claims_of(self, holder: str) -> int:
        return self.claims.balance_of(holder)

    def asset(self, address: str) -> AssetToken:
        """Look up a pool asset collaborator by address.

        Raises:
            KeyError: If the address is not one of the pool's assets
        """
        return self.assets[normalize_address(address)]

    @contextmanager
    def _call(self, operation: str) -> Iterator[None]:
        if not self.config.atomic:
            yield
            return
        try:
            with self.journal.atomic():
                yield
        except Exception as err:
            logger.debug("pool_call_reverted", operation=operation, error=type(err).__name__)
            raise

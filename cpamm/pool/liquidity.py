"""Liquidity engine: deposits for claims and claims for withdrawals.

First deposit (no claims outstanding):
    claims = floor(sqrt(actual_a * actual_b))

Later deposits are trimmed to the pool ratio and earn
    claims = min(actual_a * total / reserve_a, actual_b * total / reserve_b)

Withdrawals pay
    amount_x = claims * reserve_x / total
computed against the total before the burn.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

import structlog

from cpamm.assets.adapter import AssetAdapter
from cpamm.assets.base import AssetToken, ClaimLedgerLike
from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.errors import (
    InsufficientLiquidity,
    InvariantViolation,
    PoolError,
    TransferFailed,
    ZeroAmount,
    ZeroClaims,
)
from cpamm.events import AddLiquidityEvent, EventLog, RemoveLiquidityEvent
from cpamm.models.types import normalize_address
from cpamm.pool.math import ConstantProductMath, constant_product
from cpamm.pool.state import PoolState

logger = structlog.get_logger()


@dataclass(frozen=True)
class AddLiquidityResult:
    """Outcome of a deposit."""

    amount_a: int
    amount_b: int
    claims_issued: int


@dataclass(frozen=True)
class RemoveLiquidityResult:
    """Outcome of a withdrawal."""

    amount_a: int
    amount_b: int
    claims_burned: int


class LiquidityEngine:
    """Issues and redeems claims against a PoolState.

    Args:
        adapter: Adapter moving assets in and out of custody
        assets: Asset collaborators keyed by normalized address
        claims: Claim ledger (bundled or external)
        events: Log receiving liquidity events
        math: Curve math (defaults to the constant-product singleton)
        config: Behavior flags
    """

    def __init__(
        self,
        adapter: AssetAdapter,
        assets: Mapping[str, AssetToken],
        claims: ClaimLedgerLike,
        events: EventLog,
        math: ConstantProductMath = constant_product,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> None:
        self.adapter = adapter
        self.assets = assets
        self.claims = claims
        self.events = events
        self.math = math
        self.config = config

    # --- Quotes ---

    def quote_add(self, state: PoolState, amount_a_wanted: int, amount_b_wanted: int) -> AddLiquidityResult:
        """Preview a deposit assuming both assets arrive in full."""
        amount_a, amount_b = self._deposit_amounts(state, amount_a_wanted, amount_b_wanted)
        claims = self._claims_for(state, amount_a, amount_b)
        return AddLiquidityResult(amount_a=amount_a, amount_b=amount_b, claims_issued=claims)

    def quote_remove(self, state: PoolState, claims_in: int) -> RemoveLiquidityResult:
        """Preview the assets ``claims_in`` would redeem now."""
        if claims_in == 0:
            raise ZeroClaims("claims to burn must be non-zero")
        if claims_in > state.total_claims:
            raise InsufficientLiquidity(
                f"cannot redeem {claims_in} claims, only {state.total_claims} outstanding"
            )
        amount_a, amount_b = self.math.redeem_amounts(
            claims_in, state.reserve_a, state.reserve_b, state.total_claims
        )
        return RemoveLiquidityResult(amount_a=amount_a, amount_b=amount_b, claims_burned=claims_in)

    # --- Mutations ---

    def add_liquidity(
        self,
        state: PoolState,
        caller: str,
        amount_a_wanted: int,
        amount_b_wanted: int,
    ) -> AddLiquidityResult:
        """Deposit up to the wanted amounts and issue claims to ``caller``.

        Raises:
            ZeroAmount: If a wanted amount, or its ratio-matched amount, is zero
            InsufficientLiquidity: If the deposit would earn no claims
            TransferFailed: If pulling either asset fails
        """
        caller = normalize_address(caller)
        pull_a, pull_b = self._deposit_amounts(state, amount_a_wanted, amount_b_wanted)

        actual_a = self.adapter.transfer_in(self.assets[state.asset_a], caller, pull_a)
        actual_b = self.adapter.transfer_in(self.assets[state.asset_b], caller, pull_b)

        claims = self._claims_for(state, actual_a, actual_b)

        state.apply_deposit(actual_a, actual_b, claims)
        self._ledger_call("issue", caller, claims)
        self._verify(state)

        self.events.emit(
            AddLiquidityEvent(caller=caller, amount_a=actual_a, amount_b=actual_b, claims_issued=claims)
        )
        logger.info(
            "liquidity_added",
            caller=caller,
            amount_a=actual_a,
            amount_b=actual_b,
            claims_issued=claims,
            total_claims=state.total_claims,
        )
        return AddLiquidityResult(amount_a=actual_a, amount_b=actual_b, claims_issued=claims)

    def remove_liquidity(self, state: PoolState, caller: str, claims_in: int) -> RemoveLiquidityResult:
        """Burn ``claims_in`` of ``caller``'s claims and pay out both assets.

        Raises:
            ZeroClaims: If claims_in is zero
            InsufficientLiquidity: If caller holds too few claims, or the
                claims redeem nothing
            TransferFailed: If either payout fails
        """
        caller = normalize_address(caller)
        if claims_in == 0:
            raise ZeroClaims("claims to burn must be non-zero")
        held = self.claims.balance_of(caller)
        if held < claims_in:
            raise InsufficientLiquidity(f"{caller} holds {held} claims, cannot burn {claims_in}")

        result = self.quote_remove(state, claims_in)
        if result.amount_a == 0 or result.amount_b == 0:
            raise InsufficientLiquidity(
                f"{claims_in} claims redeem ({result.amount_a}, {result.amount_b}); both sides must be positive"
            )

        state.apply_withdrawal(result.amount_a, result.amount_b, claims_in)
        self._ledger_call("transfer", caller, self.adapter.custody, claims_in)
        self._ledger_call("burn", self.adapter.custody, claims_in)
        self._verify(state)

        self.events.emit(
            RemoveLiquidityEvent(
                caller=caller,
                amount_a=result.amount_a,
                amount_b=result.amount_b,
                claims_burned=claims_in,
            )
        )

        # Interactions last: reserves and claims are already final
        self.adapter.transfer_out(self.assets[state.asset_a], caller, result.amount_a)
        self.adapter.transfer_out(self.assets[state.asset_b], caller, result.amount_b)

        logger.info(
            "liquidity_removed",
            caller=caller,
            amount_a=result.amount_a,
            amount_b=result.amount_b,
            claims_burned=claims_in,
            total_claims=state.total_claims,
        )
        return result

    # --- Helpers ---

    def _deposit_amounts(self, state: PoolState, amount_a_wanted: int, amount_b_wanted: int) -> tuple[int, int]:
        if amount_a_wanted == 0 or amount_b_wanted == 0:
            raise ZeroAmount(f"deposit amounts must be non-zero: ({amount_a_wanted}, {amount_b_wanted})")
        if state.is_empty:
            return amount_a_wanted, amount_b_wanted

        matched = self.math.match_deposit(amount_a_wanted, amount_b_wanted, state.reserve_a, state.reserve_b)
        if matched.amount_a == 0 or matched.amount_b == 0:
            raise ZeroAmount(
                f"deposit ({amount_a_wanted}, {amount_b_wanted}) rounds to "
                f"({matched.amount_a}, {matched.amount_b}) at the pool ratio"
            )
        return matched.amount_a, matched.amount_b

    def _claims_for(self, state: PoolState, amount_a: int, amount_b: int) -> int:
        if state.is_empty:
            claims = self.math.initial_claims(amount_a, amount_b)
        else:
            claims = self.math.proportional_claims(
                amount_a, amount_b, state.reserve_a, state.reserve_b, state.total_claims
            )
        if claims == 0:
            raise InsufficientLiquidity(f"deposit ({amount_a}, {amount_b}) earns no claims")
        return claims

    def _ledger_call(self, method: str, *args: object) -> None:
        try:
            getattr(self.claims, method)(*args)
        except PoolError:
            raise
        except Exception as err:
            raise TransferFailed(f"claim ledger {method} failed: {err}") from err

    def _verify(self, state: PoolState) -> None:
        if not self.config.verify_invariants:
            return
        state.check_invariants()
        issued = self.claims.total_issued()
        if issued != state.total_claims:
            raise InvariantViolation(f"claim ledger total {issued} != pool total {state.total_claims}")

"""Swap engine: exact-input trades against the constant-product curve."""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from cpamm.assets.adapter import AssetAdapter
from cpamm.assets.base import AssetToken
from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.errors import InsufficientOutput, InvalidAsset, InvariantViolation, ZeroAmount
from cpamm.events import EventLog, SwapEvent
from cpamm.models.types import normalize_address
from cpamm.pool.math import ConstantProductMath, constant_product
from cpamm.pool.state import PoolState

logger = structlog.get_logger()


class SwapEngine:
    """Prices and settles swaps on a PoolState.

    The engine owns no state; the pool passes its PoolState into each call.

    Args:
        adapter: Adapter moving assets in and out of custody
        assets: Asset collaborators keyed by normalized address
        events: Log receiving Swap events
        math: Curve math (defaults to the constant-product singleton)
        config: Behavior flags
    """

    def __init__(
        self,
        adapter: AssetAdapter,
        assets: Mapping[str, AssetToken],
        events: EventLog,
        math: ConstantProductMath = constant_product,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> None:
        self.adapter = adapter
        self.assets = assets
        self.events = events
        self.math = math
        self.config = config

    def validate(self, state: PoolState, asset_in: str, asset_out: str, amount_in: int) -> tuple[str, str]:
        """Check swap arguments before anything moves.

        Returns:
            Normalized (asset_in, asset_out)

        Raises:
            InvalidAsset: If an asset is not in the pool or both are the same
            ZeroAmount: If amount_in is zero
        """
        asset_in = normalize_address(asset_in)
        asset_out = normalize_address(asset_out)
        if not state.has_asset(asset_in):
            raise InvalidAsset(f"Asset {asset_in} not in pool")
        if not state.has_asset(asset_out):
            raise InvalidAsset(f"Asset {asset_out} not in pool")
        if asset_in == asset_out:
            raise InvalidAsset(f"Cannot swap {asset_in} for itself")
        if amount_in == 0:
            raise ZeroAmount("amount_in must be non-zero")
        return asset_in, asset_out

    def quote(self, state: PoolState, asset_in: str, asset_out: str, amount_in: int) -> int:
        """Output a swap would yield now, assuming the full input arrives."""
        asset_in, _ = self.validate(state, asset_in, asset_out, amount_in)
        reserve_in, reserve_out = state.get_reserves(asset_in)
        return self.math.get_amount_out(amount_in, reserve_in, reserve_out)

    def swap(self, state: PoolState, caller: str, asset_in: str, asset_out: str, amount_in: int) -> int:
        """Swap ``amount_in`` of ``asset_in`` from ``caller`` for ``asset_out``.

        Args:
            state: Pool state to trade against
            caller: Party paying in and receiving out
            asset_in: Asset sold
            asset_out: Asset bought
            amount_in: Amount requested to be pulled from caller

        Returns:
            Amount of asset_out sent to caller

        Raises:
            InvalidAsset, ZeroAmount: On bad arguments
            InsufficientOutput: If the output rounds down to zero
            TransferFailed: If pulling input or paying output fails
        """
        asset_in, asset_out = self.validate(state, asset_in, asset_out, amount_in)
        caller = normalize_address(caller)

        actual_in = self.adapter.transfer_in(self.assets[asset_in], caller, amount_in)

        # Reserves do not include actual_in yet
        reserve_in, reserve_out = state.get_reserves(asset_in)
        amount_out = self.math.get_amount_out(actual_in, reserve_in, reserve_out)
        if amount_out == 0:
            raise InsufficientOutput(
                f"swap of {actual_in} {asset_in} yields no output "
                f"(reserves {reserve_in}/{reserve_out})"
            )

        product_before = state.product
        state.apply_swap(asset_in, actual_in, amount_out)
        if self.config.verify_invariants and state.product < product_before:
            raise InvariantViolation(f"constant product fell: {product_before} -> {state.product}")

        self.events.emit(
            SwapEvent(
                caller=caller,
                asset_in=asset_in,
                asset_out=asset_out,
                amount_in=actual_in,
                amount_out=amount_out,
            )
        )

        # Interaction last: reserves are already final when control leaves
        self.adapter.transfer_out(self.assets[asset_out], caller, amount_out)

        logger.info(
            "swap_executed",
            caller=caller,
            asset_in=asset_in,
            asset_out=asset_out,
            amount_in=actual_in,
            amount_out=amount_out,
        )
        return amount_out

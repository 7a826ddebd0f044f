"""Transfer-and-verify adapter between the pool and its asset collaborators.

The adapter never trusts a requested amount. ``transfer_in`` reads the
pool's custody balance, asks the asset to pull the funds, reads the balance
again and returns the difference. Fee-on-transfer and rounding assets are
therefore credited with what actually arrived.

A hostile asset may call back into the pool while ``transfer_from`` is
running. Anything the adapter itself moves for the same asset during that
window (a nested deposit or payout) shows up in the balance difference, so
the adapter tracks its own nested movements and subtracts them: a nested
deposit is credited to the nested call only.
"""

from __future__ import annotations

from collections import defaultdict

import structlog

from cpamm.assets.base import AssetToken
from cpamm.errors import TransferFailed, ZeroAmount
from cpamm.journal import Journal
from cpamm.models.types import normalize_address

logger = structlog.get_logger()


class AssetAdapter:
    """Moves assets in and out of the custody address of one pool.

    Args:
        custody: Address holding the pool's assets
        journal: Journal of the owning pool; nested movements recorded by a
            call that is later reverted are taken back out of the frames
    """

    def __init__(self, custody: str, journal: Journal | None = None) -> None:
        self.custody = normalize_address(custody)
        self.journal = journal or Journal()
        # One frame per in-flight transfer_in: net custody movement per asset
        # made by the adapter while that transfer was running.
        self._frames: list[defaultdict[str, int]] = []

    def custody_balance(self, asset: AssetToken) -> int:
        """Live custody balance of ``asset`` (not used for pricing)."""
        return asset.balance_of(self.custody)

    def transfer_in(self, asset: AssetToken, payer: str, requested_amount: int) -> int:
        """Pull ``requested_amount`` from ``payer`` and return what arrived.

        Args:
            asset: Asset collaborator
            payer: Holder that approved the custody address
            requested_amount: Amount to pull

        Returns:
            Measured increase of custody balance attributable to this transfer

        Raises:
            ZeroAmount: If requested_amount is zero
            TransferFailed: If the asset refuses, raises, or custody shrinks
        """
        if requested_amount == 0:
            raise ZeroAmount("transfer amount must be non-zero")

        key = normalize_address(asset.address)
        before = self.custody_balance(asset)
        self._frames.append(defaultdict(int))
        try:
            ok = _call_asset(asset.transfer_from, self.custody, payer, self.custody, requested_amount)
        finally:
            nested = self._frames.pop()[key]
        after = self.custody_balance(asset)

        observed = after - before
        actual = observed - nested
        if not ok:
            raise TransferFailed(f"{asset.address} refused transfer_from of {requested_amount} from {payer}")
        if actual < 0:
            raise TransferFailed(
                f"custody balance of {asset.address} fell during transfer_in: {before} -> {after}"
            )

        self._note(key, observed)
        if actual != requested_amount:
            logger.debug(
                "transfer_in_amount_differs",
                asset=asset.address,
                requested=requested_amount,
                received=actual,
                nested=nested,
            )
        return actual

    def transfer_out(self, asset: AssetToken, recipient: str, amount: int) -> None:
        """Send ``amount`` from custody to ``recipient``.

        Raises:
            TransferFailed: If the asset refuses or raises
        """
        if amount == 0:
            return
        key = normalize_address(asset.address)
        # Record before the call: hooks run inside transfer and may re-enter
        self._note(key, -amount)
        ok = _call_asset(asset.transfer, self.custody, recipient, amount)
        if not ok:
            raise TransferFailed(f"{asset.address} refused transfer of {amount} to {recipient}")

    def _note(self, key: str, delta: int) -> None:
        if not self._frames:
            return
        frame = self._frames[-1]
        frame[key] += delta
        self.journal.record(f"adapter_frame:{key}", lambda: frame.__setitem__(key, frame[key] - delta))


def _call_asset(method, *args) -> bool:  # type: ignore[no-untyped-def]
    """Invoke a collaborator method, turning any exception into TransferFailed."""
    try:
        return bool(method(*args))
    except TransferFailed:
        raise
    except Exception as err:
        raise TransferFailed(f"asset call {getattr(method, '__name__', method)} raised: {err}") from err

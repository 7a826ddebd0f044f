"""Pool state: the reserve pair and the claims counter.

Reserves are the pool's own bookkeeping. They move only through swaps and
liquidity events, never from the live custody balance, so assets sent to the
pool outside those paths cannot shift prices or claim math.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from cpamm.errors import InvalidAsset, InvariantViolation
from cpamm.journal import Journal
from cpamm.models.types import address_sort_key, is_valid_address, normalize_address
from cpamm.safe_int import S, SafeInt


@dataclass
class PoolState:
    """Reserves of a two-asset pool, assets in canonical order.

    Build with ``PoolState.for_pair`` so the assets are validated and sorted.
    """

    asset_a: str
    asset_b: str
    reserve_a: int = 0
    reserve_b: int = 0
    total_claims: int = 0
    journal: Journal = field(default_factory=Journal, repr=False, compare=False)

    @classmethod
    def for_pair(cls, asset_x: str, asset_y: str, journal: Journal | None = None) -> PoolState:
        """Create empty state for an unordered asset pair.

        The lower address (by byte value) becomes ``asset_a``, so both
        argument orders yield the same state.

        Raises:
            InvalidAsset: If an address is malformed or both are the same
        """
        for asset in (asset_x, asset_y):
            if not asset or not is_valid_address(normalize_address(asset)):
                raise InvalidAsset(f"Invalid asset address: {asset!r}")
        asset_x = normalize_address(asset_x)
        asset_y = normalize_address(asset_y)
        if asset_x == asset_y:
            raise InvalidAsset(f"Pool assets must differ: {asset_x}")
        if address_sort_key(asset_x) > address_sort_key(asset_y):
            asset_x, asset_y = asset_y, asset_x
        return cls(asset_a=asset_x, asset_b=asset_y, journal=journal or Journal())

    @property
    def is_empty(self) -> bool:
        return self.total_claims == 0

    @property
    def product(self) -> int:
        """Constant-product value reserve_a * reserve_b."""
        return self.reserve_a * self.reserve_b

    def has_asset(self, asset: str) -> bool:
        return normalize_address(asset) in (self.asset_a, self.asset_b)

    def get_reserves(self, asset_in: str) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out)."""
        asset_in = normalize_address(asset_in)
        if asset_in == self.asset_a:
            return self.reserve_a, self.reserve_b
        elif asset_in == self.asset_b:
            return self.reserve_b, self.reserve_a
        else:
            raise InvalidAsset(f"Asset {asset_in} not in pool")

    def get_asset_out(self, asset_in: str) -> str:
        """Get the counterpart of ``asset_in``."""
        asset_in = normalize_address(asset_in)
        if asset_in == self.asset_a:
            return self.asset_b
        elif asset_in == self.asset_b:
            return self.asset_a
        else:
            raise InvalidAsset(f"Asset {asset_in} not in pool")

    # --- Journaled mutations ---

    def apply_swap(self, asset_in: str, amount_in: int, amount_out: int) -> None:
        """Credit ``amount_in`` to the input side, debit ``amount_out`` from the other."""
        if normalize_address(asset_in) == self.asset_a:
            self._set_reserves(S(self.reserve_a) + S(amount_in), S(self.reserve_b) - S(amount_out))
        else:
            self._set_reserves(S(self.reserve_a) - S(amount_out), S(self.reserve_b) + S(amount_in))

    def apply_deposit(self, amount_a: int, amount_b: int, claims: int) -> None:
        self._set_reserves(S(self.reserve_a) + S(amount_a), S(self.reserve_b) + S(amount_b))
        self.journal.assign(self, "total_claims", (S(self.total_claims) + S(claims)).value)

    def apply_withdrawal(self, amount_a: int, amount_b: int, claims: int) -> None:
        self._set_reserves(S(self.reserve_a) - S(amount_a), S(self.reserve_b) - S(amount_b))
        self.journal.assign(self, "total_claims", (S(self.total_claims) - S(claims)).value)

    def _set_reserves(self, reserve_a: SafeInt, reserve_b: SafeInt) -> None:
        self.journal.assign(self, "reserve_a", reserve_a.value)
        self.journal.assign(self, "reserve_b", reserve_b.value)

    # --- Invariants ---

    def check_invariants(self) -> None:
        """Verify the emptiness invariant.

        Raises:
            InvariantViolation: If reserves and claims disagree about emptiness
        """
        reserves_empty = self.reserve_a == 0 and self.reserve_b == 0
        if reserves_empty != (self.total_claims == 0):
            raise InvariantViolation(
                f"reserves ({self.reserve_a}, {self.reserve_b}) inconsistent with "
                f"total_claims {self.total_claims}"
            )

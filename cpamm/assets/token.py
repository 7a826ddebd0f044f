"""In-memory fungible asset.

InMemoryAsset implements the AssetToken protocol with ERC20-style balances
and allowances. It is the asset the bundled service runs on, and it can
imitate the awkward assets a pool meets in practice:
- ``transfer_fee_bps`` burns a share of every transfer (fee-on-transfer)
- ``frozen`` makes every transfer return False
- ``on_transfer`` hooks run after a balance change and may call back into
  the pool (reentrancy)

All balance and allowance changes go through the shared Journal, so a
reverted pool call also rewinds the asset.
"""

from __future__ import annotations

from collections.abc import Callable

from cpamm.journal import Journal
from cpamm.models.types import normalize_address
from cpamm.safe_int import S

# Hook signature: (asset, sender, recipient, amount_received)
TransferHook = Callable[["InMemoryAsset", str, str, int], None]

BPS_DENOMINATOR = 10_000


class InMemoryAsset:
    """ERC20-like asset with journaled balances."""

    def __init__(
        self,
        address: str,
        symbol: str = "",
        journal: Journal | None = None,
        transfer_fee_bps: int = 0,
    ) -> None:
        if not 0 <= transfer_fee_bps < BPS_DENOMINATOR:
            raise ValueError(f"transfer_fee_bps must be in [0, {BPS_DENOMINATOR}): {transfer_fee_bps}")
        self.address = normalize_address(address, validate=True)
        self.symbol = symbol
        self.journal = journal or Journal()
        self.transfer_fee_bps = transfer_fee_bps
        self.frozen = False
        self.total_supply = 0
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}
        self._hooks: list[TransferHook] = []

    def __repr__(self) -> str:
        return f"InMemoryAsset({self.symbol or self.address})"

    # --- Views ---

    def balance_of(self, holder: str) -> int:
        return self._balances.get(normalize_address(holder), 0)

    def allowance(self, owner: str, operator: str) -> int:
        return self._allowances.get((normalize_address(owner), normalize_address(operator)), 0)

    # --- Mutations ---

    def on_transfer(self, hook: TransferHook) -> None:
        """Register a hook run after every successful transfer."""
        self._hooks.append(hook)

    def mint(self, holder: str, amount: int) -> None:
        """Create ``amount`` new units for ``holder``."""
        holder = normalize_address(holder)
        self._set_balance(holder, (S(self.balance_of(holder)) + S(amount)).value)
        self.journal.assign(self, "total_supply", (S(self.total_supply) + S(amount)).value)

    def approve(self, owner: str, operator: str, amount: int) -> bool:
        """Allow ``operator`` to move up to ``amount`` of ``owner``'s balance."""
        key = (normalize_address(owner), normalize_address(operator))
        self.journal.put(self._allowances, key, S(amount).value or None)
        return True

    def transfer(self, owner: str, recipient: str, amount: int) -> bool:
        if self.frozen:
            return False
        return self._move(normalize_address(owner), normalize_address(recipient), amount)

    def transfer_from(self, operator: str, owner: str, recipient: str, amount: int) -> bool:
        if self.frozen:
            return False
        owner = normalize_address(owner)
        operator = normalize_address(operator)
        allowed = self.allowance(owner, operator)
        if allowed < amount:
            return False
        self.journal.put(self._allowances, (owner, operator), (S(allowed) - S(amount)).value or None)
        return self._move(owner, normalize_address(recipient), amount)

    def _move(self, sender: str, recipient: str, amount: int) -> bool:
        balance = self.balance_of(sender)
        if balance < amount:
            return False

        fee = (S(amount) * S(self.transfer_fee_bps)) // S(BPS_DENOMINATOR)
        received = (S(amount) - fee).value

        self._set_balance(sender, balance - amount)
        self._set_balance(recipient, (S(self.balance_of(recipient)) + S(received)).value)
        if fee:
            # Fee-on-transfer assets burn the difference
            self.journal.assign(self, "total_supply", (S(self.total_supply) - fee).value)

        for hook in list(self._hooks):
            hook(self, sender, recipient, received)
        return True

    def _set_balance(self, holder: str, amount: int) -> None:
        self.journal.put(self._balances, holder, amount or None)

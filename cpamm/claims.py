"""Claim token balances for a pool.

Claims are the pool's liquidity-provider shares. The ledger keeps a sparse
holder -> amount table (zero balances are dropped) and the total issued.
Only the liquidity engine issues and burns; holders may transfer freely.
"""

from __future__ import annotations

from cpamm.errors import InsufficientLiquidity
from cpamm.journal import Journal
from cpamm.models.types import normalize_address
from cpamm.safe_int import S


class ClaimLedger:
    """Journaled fungible accounting for claims."""

    def __init__(self, journal: Journal | None = None) -> None:
        self.journal = journal or Journal()
        self._balances: dict[str, int] = {}
        self._total = 0

    def __repr__(self) -> str:
        return f"ClaimLedger({len(self._balances)} holders, total={self._total})"

    def balance_of(self, holder: str) -> int:
        """Claims owned by ``holder``. Returns 0 if not found."""
        return self._balances.get(normalize_address(holder), 0)

    def total_issued(self) -> int:
        return self._total

    def holders(self) -> dict[str, int]:
        """Return all non-zero balances."""
        return dict(self._balances)

    def issue(self, holder: str, amount: int) -> None:
        holder = normalize_address(holder)
        self._set(holder, (S(self.balance_of(holder)) + S(amount)).value)
        self.journal.assign(self, "_total", (S(self._total) + S(amount)).value)

    def burn(self, holder: str, amount: int) -> None:
        """Destroy claims.

        Raises:
            InsufficientLiquidity: If ``holder`` owns fewer than ``amount``
        """
        holder = normalize_address(holder)
        balance = self.balance_of(holder)
        if balance < amount:
            raise InsufficientLiquidity(f"{holder} holds {balance} claims, cannot burn {amount}")
        self._set(holder, balance - amount)
        self.journal.assign(self, "_total", (S(self._total) - S(amount)).value)

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Move claims between holders.

        Raises:
            InsufficientLiquidity: If ``sender`` owns fewer than ``amount``
        """
        sender = normalize_address(sender)
        recipient = normalize_address(recipient)
        balance = self.balance_of(sender)
        if balance < amount:
            raise InsufficientLiquidity(f"{sender} holds {balance} claims, cannot transfer {amount}")
        self._set(sender, balance - amount)
        self._set(recipient, (S(self.balance_of(recipient)) + S(amount)).value)

    def verify_total(self) -> bool:
        """Check that the balances add up to the total issued."""
        return sum(self._balances.values()) == self._total

    def _set(self, holder: str, amount: int) -> None:
        self.journal.put(self._balances, holder, amount or None)

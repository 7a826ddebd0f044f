"""Collaborator interfaces the pool talks to.

The pool never trusts these collaborators: every transfer result is checked
and every inbound amount is re-measured from balances. Python has no implicit
message sender, so the acting party is always passed explicitly.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class AssetToken(Protocol):
    """Fungible asset held in custody by the pool.

    Implementations may charge transfer fees, round amounts, call back into
    the pool, or fail. The pool tolerates all of these.
    """

    address: str

    def balance_of(self, holder: str) -> int:
        """Current balance of ``holder``."""
        ...

    def transfer_from(self, operator: str, owner: str, recipient: str, amount: int) -> bool:
        """Move ``amount`` from ``owner`` to ``recipient`` on ``operator``'s allowance.

        Returns:
            True on success, False if the asset refused the transfer
        """
        ...

    def transfer(self, owner: str, recipient: str, amount: int) -> bool:
        """Move ``amount`` of ``owner``'s own balance to ``recipient``.

        Returns:
            True on success, False if the asset refused the transfer
        """
        ...


@runtime_checkable
class ClaimLedgerLike(Protocol):
    """Fungible accounting for pool claim tokens."""

    def issue(self, holder: str, amount: int) -> None:
        """Create ``amount`` claims owned by ``holder``."""
        ...

    def burn(self, holder: str, amount: int) -> None:
        """Destroy ``amount`` of ``holder``'s claims."""
        ...

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        """Move claims between holders."""
        ...

    def balance_of(self, holder: str) -> int:
        """Claims owned by ``holder``."""
        ...

    def total_issued(self) -> int:
        """Total outstanding claims."""
        ...

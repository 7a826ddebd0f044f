"""Pool error classes.

Each error carries a stable ``code`` that the API returns to callers, so
clients can tell which precondition was violated without parsing messages.
"""


class PoolError(Exception):
    """Base error for pool operations."""

    code = "pool_error"


class InvalidAsset(PoolError):
    """Asset is not one of the pool's two assets, or equals its counterpart."""

    code = "invalid_asset"


class ZeroAmount(PoolError):
    """A caller-supplied (or ratio-derived) amount is zero."""

    code = "zero_amount"


class InsufficientOutput(PoolError):
    """Computed swap output is zero: trade too small relative to reserves."""

    code = "insufficient_output"


class InsufficientLiquidity(PoolError):
    """Claims to burn exceed the holder's balance, or a deposit would mint none."""

    code = "insufficient_liquidity"


class TransferFailed(PoolError):
    """An asset or claim-ledger collaborator reported failure or raised."""

    code = "transfer_failed"


class InvariantViolation(PoolError):
    """A pool post-condition did not hold after an operation."""

    code = "invariant_violation"


class ZeroClaims(InsufficientLiquidity, ZeroAmount):
    """Zero claims offered for redemption."""

    code = "insufficient_liquidity"

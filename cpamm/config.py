"""Pool configuration."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PoolConfig:
    """Behavior flags for a pool.

    Attributes:
        atomic: If True, every entry point runs inside a journal checkpoint
            and any failure (including a rejected final transfer) reverts
            the whole call. If False, state committed before a failing
            outbound transfer stays committed.
        verify_invariants: If True, check the constant-product and
            emptiness invariants after each mutation and raise
            InvariantViolation when they do not hold.
    """

    atomic: bool = True
    verify_invariants: bool = True


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()

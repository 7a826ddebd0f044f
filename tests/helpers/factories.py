"""Factory functions for creating test pools and funded holders.

Usage:
    from tests.helpers import make_pool, fund

    pool, asset_a, asset_b = make_pool()
    fund(pool, asset_a, ALICE, 1000)
"""

from cpamm.assets.token import InMemoryAsset
from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.journal import Journal
from cpamm.pool import Pool
from tests.helpers.constants import TOKEN_A, TOKEN_B


def make_pool(
    fee_bps_a: int = 0,
    fee_bps_b: int = 0,
    config: PoolConfig = DEFAULT_POOL_CONFIG,
) -> tuple[Pool, InMemoryAsset, InMemoryAsset]:
    """Create an empty pool over two fresh in-memory assets.

    Args:
        fee_bps_a: Transfer fee of asset A in basis points (default: none)
        fee_bps_b: Transfer fee of asset B in basis points (default: none)
        config: Pool behavior flags

    Returns:
        (pool, asset_a, asset_b), all sharing one journal
    """
    journal = Journal()
    asset_a = InMemoryAsset(TOKEN_A, "TKA", journal=journal, transfer_fee_bps=fee_bps_a)
    asset_b = InMemoryAsset(TOKEN_B, "TKB", journal=journal, transfer_fee_bps=fee_bps_b)
    pool = Pool(asset_a, asset_b, journal=journal, config=config)
    return pool, asset_a, asset_b


def fund(pool: Pool, asset: InMemoryAsset, holder: str, amount: int) -> None:
    """Mint ``amount`` to ``holder`` and raise its allowance for the pool by as much."""
    asset.mint(holder, amount)
    asset.approve(holder, pool.address, asset.allowance(holder, pool.address) + amount)


def seed(pool: Pool, asset_a: InMemoryAsset, asset_b: InMemoryAsset, holder: str, amount_a: int, amount_b: int) -> int:
    """Fund ``holder`` and make the first deposit; returns claims issued."""
    fund(pool, asset_a, holder, amount_a)
    fund(pool, asset_b, holder, amount_b)
    _, _, claims = pool.add_liquidity(holder, amount_a, amount_b)
    return claims

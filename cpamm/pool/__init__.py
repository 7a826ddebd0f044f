"""Pool state, math and engines."""

from cpamm.pool.liquidity import AddLiquidityResult, LiquidityEngine, RemoveLiquidityResult
from cpamm.pool.math import ConstantProductMath, DepositAmounts, constant_product
from cpamm.pool.pool import Pool, compute_pool_address
from cpamm.pool.state import PoolState
from cpamm.pool.swap import SwapEngine

__all__ = [
    # Facade
    "Pool",
    "compute_pool_address",
    # State
    "PoolState",
    # Math
    "ConstantProductMath",
    "DepositAmounts",
    "constant_product",
    # Engines
    "SwapEngine",
    "LiquidityEngine",
    "AddLiquidityResult",
    "RemoveLiquidityResult",
]

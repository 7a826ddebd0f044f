"""Constant-product AMM pool - Python Implementation."""

from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.pool import Pool
from cpamm.service import PoolService, get_default_service

__version__ = "0.1.0"
__all__ = ["Pool", "PoolConfig", "DEFAULT_POOL_CONFIG", "PoolService", "get_default_service", "__version__"]

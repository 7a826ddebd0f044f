"""Pool service: one pool over in-memory assets, shared by the API.

The service builds the journal, the two InMemoryAsset instances and the
Pool on top of them, and serializes mutating calls with a lock because
FastAPI runs sync endpoints on a thread pool.
"""

from __future__ import annotations

import os
import threading
from typing import Any

import structlog

from cpamm.assets.token import InMemoryAsset
from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.constants import DEFAULT_SYMBOLS, USDC, WETH
from cpamm.errors import InvalidAsset
from cpamm.events import PoolEvent
from cpamm.journal import Journal
from cpamm.models.types import normalize_address
from cpamm.pool import Pool

logger = structlog.get_logger()


class FaucetDisabled(PermissionError):
    """Minting was requested while the faucet is switched off."""

    pass


class PoolService:
    """Owns a pool, its assets and the journal they share.

    Args:
        asset_a: Address of one asset
        asset_b: Address of the other asset
        symbols: Optional address -> symbol map for display
        faucet_enabled: Allow ``mint`` (for local and test deployments)
        config: Pool behavior flags
    """

    def __init__(
        self,
        asset_a: str = WETH,
        asset_b: str = USDC,
        *,
        symbols: dict[str, str] | None = None,
        faucet_enabled: bool = False,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> None:
        symbols = {normalize_address(k): v for k, v in (symbols or DEFAULT_SYMBOLS).items()}
        self.journal = Journal()
        asset_x = InMemoryAsset(asset_a, symbols.get(normalize_address(asset_a), ""), journal=self.journal)
        asset_y = InMemoryAsset(asset_b, symbols.get(normalize_address(asset_b), ""), journal=self.journal)
        self.pool = Pool(asset_x, asset_y, journal=self.journal, config=config)
        self._assets: dict[str, InMemoryAsset] = {asset.address: asset for asset in (asset_x, asset_y)}
        self.faucet_enabled = faucet_enabled
        self._lock = threading.Lock()

    def asset(self, address: str) -> InMemoryAsset:
        """Look up one of the pool's assets.

        Raises:
            InvalidAsset: If the address is not a pool asset
        """
        try:
            return self._assets[normalize_address(address)]
        except KeyError:
            raise InvalidAsset(f"Asset {address} not in pool") from None

    # --- Asset operations ---

    def approve(self, owner: str, asset: str, amount: int) -> None:
        """Let the pool pull up to ``amount`` of ``asset`` from ``owner``."""
        with self._lock:
            self.asset(asset).approve(owner, self.pool.address, amount)

    def mint(self, holder: str, asset: str, amount: int) -> None:
        """Faucet: create ``amount`` of ``asset`` for ``holder``.

        Raises:
            FaucetDisabled: If the faucet is switched off
        """
        if not self.faucet_enabled:
            raise FaucetDisabled("faucet is disabled")
        with self._lock:
            self.asset(asset).mint(holder, amount)
        logger.info("faucet_mint", holder=holder, asset=asset, amount=amount)

    def balance_of(self, holder: str, asset: str) -> int:
        with self._lock:
            return self.asset(asset).balance_of(holder)

    # --- Pool operations ---

    def swap(self, caller: str, asset_in: str, asset_out: str, amount_in: int) -> int:
        with self._lock:
            return self.pool.swap(caller, asset_in, asset_out, amount_in)

    def add_liquidity(self, caller: str, amount_a: int, amount_b: int) -> tuple[int, int, int]:
        with self._lock:
            return self.pool.add_liquidity(caller, amount_a, amount_b)

    def remove_liquidity(self, caller: str, claims: int) -> tuple[int, int]:
        with self._lock:
            return self.pool.remove_liquidity(caller, claims)

    def quote_swap(self, asset_in: str, asset_out: str, amount_in: int) -> int:
        with self._lock:
            return self.pool.quote_swap(asset_in, asset_out, amount_in)

    def claims_of(self, holder: str) -> int:
        with self._lock:
            return self.pool.claims_of(holder)

    def events_since(self, index: int) -> list[PoolEvent]:
        """Committed events from position ``index``; never sees a call still in flight."""
        with self._lock:
            return self.pool.events.since(index)

    def snapshot(self) -> dict[str, Any]:
        """Current pool view for the API."""
        with self._lock:
            reserve_a, reserve_b = self.pool.get_reserves()
            return {
                "address": self.pool.address,
                "asset_a": self.pool.get_asset_a(),
                "asset_b": self.pool.get_asset_b(),
                "reserve_a": reserve_a,
                "reserve_b": reserve_b,
                "total_claims": self.pool.total_claims,
            }


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


def _create_default_service() -> PoolService:
    """Create the service from environment variables.

    - CPAMM_ASSET_A / CPAMM_ASSET_B: pair addresses (default WETH/USDC)
    - CPAMM_FAUCET_ENABLED: allow minting through the API (default false)
    """
    asset_a = os.environ.get("CPAMM_ASSET_A", WETH)
    asset_b = os.environ.get("CPAMM_ASSET_B", USDC)
    service = PoolService(asset_a, asset_b, faucet_enabled=_env_flag("CPAMM_FAUCET_ENABLED"))
    logger.info(
        "pool_service_created",
        pool=service.pool.address,
        asset_a=service.pool.get_asset_a(),
        asset_b=service.pool.get_asset_b(),
        faucet_enabled=service.faucet_enabled,
    )
    return service


_default_service: PoolService | None = None


def get_default_service() -> PoolService:
    """Return the process-wide service, creating it on first use."""
    global _default_service
    if _default_service is None:
        _default_service = _create_default_service()
    return _default_service

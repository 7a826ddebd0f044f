"""Pytest configuration and fixtures."""

import pytest
import structlog

from cpamm.assets.token import InMemoryAsset
from cpamm.journal import Journal
from cpamm.pool import Pool
from tests.helpers import ALICE, make_pool, seed


@pytest.fixture(autouse=True)
def default_logging():
    """Run every test under structlog's default configuration."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


@pytest.fixture
def journal() -> Journal:
    """A fresh journal with no open checkpoint."""
    return Journal()


@pytest.fixture
def pool_and_assets() -> tuple[Pool, InMemoryAsset, InMemoryAsset]:
    """An empty pool over TOKEN_A / TOKEN_B."""
    return make_pool()


@pytest.fixture
def pool(pool_and_assets) -> Pool:
    return pool_and_assets[0]


@pytest.fixture
def asset_a(pool_and_assets) -> InMemoryAsset:
    return pool_and_assets[1]


@pytest.fixture
def asset_b(pool_and_assets) -> InMemoryAsset:
    return pool_and_assets[2]


@pytest.fixture
def seeded_pool(pool, asset_a, asset_b) -> Pool:
    """Pool bootstrapped by ALICE with (1000, 4000), holding 2000 claims."""
    seed(pool, asset_a, asset_b, ALICE, 1000, 4000)
    return pool


# =============================================================================
# Collaborators for failure injection
# =============================================================================


class ExplodingAsset:
    """AssetToken whose transfers raise instead of returning a result.

    Usage:
        asset = ExplodingAsset(TOKEN_A)
        adapter.transfer_in(asset, ALICE, 1)  # -> TransferFailed
    """

    def __init__(self, address: str) -> None:
        self.address = address

    def balance_of(self, holder: str) -> int:
        return 0

    def transfer_from(self, operator: str, owner: str, recipient: str, amount: int) -> bool:
        raise RuntimeError("asset exploded")

    def transfer(self, owner: str, recipient: str, amount: int) -> bool:
        raise RuntimeError("asset exploded")


class ShrinkingAsset(InMemoryAsset):
    """Asset that reports success but takes funds out of the recipient."""

    def transfer_from(self, operator: str, owner: str, recipient: str, amount: int) -> bool:
        self._set_balance(recipient, self.balance_of(recipient) - 1)
        return True


class ExplodingLedger:
    """Claim ledger that fails on issue (and tracks nothing)."""

    def __init__(self) -> None:
        self.issue_calls = 0

    def issue(self, holder: str, amount: int) -> None:
        self.issue_calls += 1
        raise RuntimeError("ledger offline")

    def burn(self, holder: str, amount: int) -> None:
        raise RuntimeError("ledger offline")

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        raise RuntimeError("ledger offline")

    def balance_of(self, holder: str) -> int:
        return 0

    def total_issued(self) -> int:
        return 0


@pytest.fixture
def exploding_asset_cls() -> type[ExplodingAsset]:
    return ExplodingAsset


@pytest.fixture
def shrinking_asset_cls() -> type[ShrinkingAsset]:
    return ShrinkingAsset


@pytest.fixture
def exploding_ledger() -> ExplodingLedger:
    return ExplodingLedger()

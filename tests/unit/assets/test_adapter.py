"""Tests for the transfer-and-verify adapter."""

import pytest

from cpamm.assets.adapter import AssetAdapter
from cpamm.assets.token import InMemoryAsset
from cpamm.errors import TransferFailed, ZeroAmount
from cpamm.journal import Journal
from tests.helpers import ALICE, BOB, CAROL, CUSTODY, TOKEN_A


@pytest.fixture
def adapter() -> AssetAdapter:
    return AssetAdapter(CUSTODY)


def funded_asset(fee_bps: int = 0, **balances: int) -> InMemoryAsset:
    """Asset where each named holder has ``amount`` approved for CUSTODY."""
    names = {"alice": ALICE, "bob": BOB}
    asset = InMemoryAsset(TOKEN_A, transfer_fee_bps=fee_bps)
    for name, amount in balances.items():
        asset.mint(names[name], amount)
        asset.approve(names[name], CUSTODY, amount)
    return asset


class TestTransferIn:
    """Tests for measured inbound transfers."""

    def test_returns_received_amount(self, adapter):
        """A plain asset delivers the requested amount."""
        asset = funded_asset(alice=1000)
        assert adapter.transfer_in(asset, ALICE, 400) == 400
        assert adapter.custody_balance(asset) == 400

    def test_fee_on_transfer_measured(self, adapter):
        """Fee-on-transfer assets are credited with what arrived."""
        asset = funded_asset(fee_bps=100, alice=1000)
        assert adapter.transfer_in(asset, ALICE, 1000) == 990

    def test_zero_amount(self, adapter):
        """Zero requests are rejected before calling the asset."""
        with pytest.raises(ZeroAmount):
            adapter.transfer_in(funded_asset(alice=1), ALICE, 0)

    def test_refused_transfer(self, adapter):
        """An asset returning False raises TransferFailed."""
        asset = funded_asset(alice=10)
        with pytest.raises(TransferFailed):
            adapter.transfer_in(asset, ALICE, 11)

    def test_raising_asset(self, adapter, exploding_asset_cls):
        """Exceptions from the asset become TransferFailed."""
        with pytest.raises(TransferFailed) as exc_info:
            adapter.transfer_in(exploding_asset_cls(TOKEN_A), ALICE, 1)
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_custody_shrinks(self, adapter, shrinking_asset_cls):
        """A 'successful' transfer that lowers custody is rejected."""
        asset = shrinking_asset_cls(TOKEN_A)
        asset.mint(CUSTODY, 10)
        with pytest.raises(TransferFailed):
            adapter.transfer_in(asset, ALICE, 1)


class TestNestedMovements:
    """Tests for re-entrant movements during transfer_in."""

    def test_nested_deposit_not_double_counted(self, adapter):
        """A deposit made from inside the asset call is credited once."""
        asset = funded_asset(alice=1000, bob=1000)
        nested = []

        def reenter(token, sender, recipient, amount):
            if sender == ALICE and not nested:
                nested.append(adapter.transfer_in(token, BOB, 50))

        asset.on_transfer(reenter)
        assert adapter.transfer_in(asset, ALICE, 100) == 100
        assert nested == [50]
        assert adapter.custody_balance(asset) == 150

    def test_nested_payout_not_charged_to_payer(self, adapter):
        """A payout made from inside the asset call does not shrink the credit."""
        asset = funded_asset(alice=1000)
        asset.mint(CUSTODY, 500)
        paid = []

        def reenter(token, sender, recipient, amount):
            if sender == ALICE and not paid:
                paid.append(True)
                adapter.transfer_out(token, CAROL, 30)

        asset.on_transfer(reenter)
        assert adapter.transfer_in(asset, ALICE, 100) == 100
        assert asset.balance_of(CAROL) == 30
        assert adapter.custody_balance(asset) == 570

    def test_reverted_nested_deposit_forgotten(self):
        """A nested deposit rolled back by its own call is not subtracted from the outer one."""
        journal = Journal()
        adapter = AssetAdapter(CUSTODY, journal)
        asset = InMemoryAsset(TOKEN_A, journal=journal)
        for holder in (ALICE, BOB):
            asset.mint(holder, 1000)
            asset.approve(holder, CUSTODY, 1000)
        tried = []

        def reenter(token, sender, recipient, amount):
            if sender == ALICE and not tried:
                tried.append(True)
                try:
                    with journal.atomic():
                        adapter.transfer_in(token, BOB, 50)
                        raise TransferFailed("second leg refused")
                except TransferFailed:
                    pass

        asset.on_transfer(reenter)
        with journal.atomic():
            assert adapter.transfer_in(asset, ALICE, 100) == 100
        assert asset.balance_of(BOB) == 1000
        assert adapter.custody_balance(asset) == 100


class TestTransferOut:
    """Tests for outbound transfers."""

    def test_pays_recipient(self, adapter):
        """Custody funds go to the recipient."""
        asset = funded_asset()
        asset.mint(CUSTODY, 100)
        adapter.transfer_out(asset, BOB, 60)
        assert asset.balance_of(BOB) == 60
        assert adapter.custody_balance(asset) == 40

    def test_zero_is_noop(self, adapter, exploding_asset_cls):
        """Nothing is sent for a zero amount."""
        adapter.transfer_out(exploding_asset_cls(TOKEN_A), BOB, 0)

    def test_refused(self, adapter):
        """A frozen asset raises TransferFailed."""
        asset = funded_asset()
        asset.mint(CUSTODY, 100)
        asset.frozen = True
        with pytest.raises(TransferFailed):
            adapter.transfer_out(asset, BOB, 1)

    def test_raising_asset(self, adapter, exploding_asset_cls):
        """Exceptions from the asset become TransferFailed."""
        with pytest.raises(TransferFailed):
            adapter.transfer_out(exploding_asset_cls(TOKEN_A), BOB, 1)

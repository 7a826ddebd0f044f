"""Tests for constant-product pool math."""

import pytest

from cpamm.pool.math import ConstantProductMath, DepositAmounts, constant_product
from cpamm.safe_int import UINT256_MAX, Uint256Overflow


@pytest.fixture
def cp() -> ConstantProductMath:
    return constant_product


class TestGetAmountOut:
    """Tests for the swap output formula."""

    def test_reference_trade(self, cp):
        """100 in against (1000, 4000) pays 363."""
        assert cp.get_amount_out(100, 1000, 4000) == 363

    def test_reverse_direction(self, cp):
        """400 in against (4000, 1000) pays 90."""
        assert cp.get_amount_out(400, 4000, 1000) == 90

    def test_zero_input_or_reserves(self, cp):
        """Zero input or an empty side yields nothing."""
        assert cp.get_amount_out(0, 1000, 4000) == 0
        assert cp.get_amount_out(100, 0, 4000) == 0
        assert cp.get_amount_out(100, 1000, 0) == 0

    def test_tiny_trade_rounds_to_zero(self, cp):
        """1 unit against a 1000-deep side pays nothing."""
        assert cp.get_amount_out(1, 4000, 1000) == 0

    def test_output_below_reserve(self, cp):
        """Even a huge input cannot drain the output side."""
        assert cp.get_amount_out(10**30, 1000, 4000) < 4000

    @pytest.mark.parametrize(
        "amount_in,reserve_in,reserve_out",
        [
            (1, 1, 1),
            (100, 1000, 4000),
            (999, 1000, 1000),
            (10**18, 5 * 10**20, 10**12),
            (7, 3, 10**6),
        ],
    )
    def test_product_never_decreases(self, cp, amount_in, reserve_in, reserve_out):
        """(reserve_in + in) * (reserve_out - out) >= reserve_in * reserve_out."""
        out = cp.get_amount_out(amount_in, reserve_in, reserve_out)
        assert (reserve_in + amount_in) * (reserve_out - out) >= reserve_in * reserve_out

    def test_monotonic_in_input(self, cp):
        """More input never pays less."""
        outs = [cp.get_amount_out(a, 1000, 4000) for a in range(1, 200)]
        assert outs == sorted(outs)

    def test_overflow_raises(self, cp):
        """Products past uint256 raise instead of wrapping."""
        with pytest.raises(Uint256Overflow):
            cp.get_amount_out(UINT256_MAX, UINT256_MAX, 2)


class TestClaimsMath:
    """Tests for claim issuance and redemption."""

    def test_initial_claims_geometric_mean(self, cp):
        """First deposit earns floor(sqrt(a * b))."""
        assert cp.initial_claims(1000, 4000) == 2000
        assert cp.initial_claims(2, 3) == 2
        assert cp.initial_claims(9900, 40000) == 19899

    def test_match_deposit_caps_each_side(self, cp):
        """Wanted amounts are trimmed to the pool ratio."""
        assert cp.match_deposit(100, 1000, 1000, 4000) == DepositAmounts(100, 400)
        assert cp.match_deposit(1000, 400, 1000, 4000) == DepositAmounts(100, 400)
        assert cp.match_deposit(110, 1000, 1100, 3637) == DepositAmounts(110, 363)

    def test_match_deposit_can_round_to_zero(self, cp):
        """A dust deposit on the cheap side matches to zero."""
        assert cp.match_deposit(1, 1, 1000, 4000).amount_a == 0

    def test_proportional_claims_takes_smaller_share(self, cp):
        """Claims follow the side giving fewer claims."""
        assert cp.proportional_claims(100, 400, 1000, 4000, 2000) == 200
        assert cp.proportional_claims(110, 363, 1100, 3637, 2000) == 199

    def test_redeem_amounts(self, cp):
        """Redemption is pro rata against the pre-burn total."""
        assert cp.redeem_amounts(2000, 1100, 3637, 2000) == (1100, 3637)
        assert cp.redeem_amounts(1000, 1100, 3637, 2000) == (550, 1818)

    def test_redeem_with_no_claims_raises(self, cp):
        """Dividing by a zero total is an arithmetic error."""
        with pytest.raises(ArithmeticError):
            cp.redeem_amounts(1, 10, 10, 0)

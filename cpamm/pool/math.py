"""Constant-product pool math.

The pool keeps reserve_a * reserve_b from decreasing on every trade, with no
fee. All formulas are integer-only, multiply before dividing and round
down, so rounding always favors the pool.
"""

from __future__ import annotations

from dataclasses import dataclass

from cpamm.safe_int import S, mul_div


@dataclass(frozen=True)
class DepositAmounts:
    """Amounts a deposit pulls in, matched to the pool ratio."""

    amount_a: int
    amount_b: int


class ConstantProductMath:
    """Swap output and claim issuance/redemption formulas.

    Swap: amount_out = reserve_out * amount_in / (reserve_in + amount_in)
    """

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate output amount using constant product formula.

        Args:
            amount_in: Input amount actually received
            reserve_in: Reserve of input asset before the trade
            reserve_out: Reserve of output asset before the trade

        Returns:
            Output amount, 0 if the input or either reserve is zero
        """
        if amount_in <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return 0

        numerator = S(reserve_out) * S(amount_in)
        denominator = S(reserve_in) + S(amount_in)

        return (numerator // denominator).value

    def initial_claims(self, amount_a: int, amount_b: int) -> int:
        """Claims for the first deposit: floor(sqrt(amount_a * amount_b)).

        The geometric mean makes the claim unit independent of the ratio the
        first depositor picks.
        """
        return (S(amount_a) * S(amount_b)).sqrt().value

    def match_deposit(
        self,
        amount_a_wanted: int,
        amount_b_wanted: int,
        reserve_a: int,
        reserve_b: int,
    ) -> DepositAmounts:
        """Trim a deposit to the current pool ratio.

        Each side is capped by what the other side is worth at the pool
        ratio:
            a' = min(a_wanted, b_wanted * reserve_a / reserve_b)
            b' = min(b_wanted, a_wanted * reserve_b / reserve_a)
        """
        amount_a = S(amount_a_wanted).min(mul_div(amount_b_wanted, reserve_a, reserve_b))
        amount_b = S(amount_b_wanted).min(mul_div(amount_a_wanted, reserve_b, reserve_a))
        return DepositAmounts(amount_a=amount_a.value, amount_b=amount_b.value)

    def proportional_claims(
        self,
        amount_a: int,
        amount_b: int,
        reserve_a: int,
        reserve_b: int,
        total_claims: int,
    ) -> int:
        """Claims for a deposit into a non-empty pool.

        The smaller of the two per-side shares, so rounding on one side
        never mints more than the deposit's true share.
        """
        share_a = mul_div(amount_a, total_claims, reserve_a)
        share_b = mul_div(amount_b, total_claims, reserve_b)
        return share_a.min(share_b).value

    def redeem_amounts(
        self,
        claims: int,
        reserve_a: int,
        reserve_b: int,
        total_claims: int,
    ) -> tuple[int, int]:
        """Assets owed for burning ``claims`` against pre-burn ``total_claims``."""
        amount_a = mul_div(claims, reserve_a, total_claims)
        amount_b = mul_div(claims, reserve_b, total_claims)
        return amount_a.value, amount_b.value


# Singleton instance
constant_product = ConstantProductMath()

import pytest
import numpy as np
from cashflows.analysis import Compounding, IrrObjective, discount_factors, irr, npv


def make_bond(coupon=5.0, years=3):
    """Annual coupon bond with 100 redemption"""
    times = np.arange(1.0, years + 1.0)
    amounts = np.full(years, coupon)
    amounts[-1] += 100.0
    return amounts, times


class TestNpv:

    def test_zero_rate_is_plain_sum(self):
        amounts, times = make_bond()
        assert npv(amounts, times, 0.0) == pytest.approx(115.0)

    def test_par_bond(self):
        amounts, times = make_bond(coupon=5.0)
        assert npv(amounts, times, 0.05) == pytest.approx(100.0, abs=1e-10)

    def test_past_flows_ignored(self):
        assert npv([10.0, 100.0], [-0.5, 1.0], 0.0) == pytest.approx(100.0)

    def test_discount_factor_conventions(self):
        t = np.array([2.0])
        assert discount_factors(0.05, t, Compounding.SIMPLE)[0] == pytest.approx(1.0 / 1.1)
        assert discount_factors(0.04, t, Compounding.COMPOUNDED, 2)[0] == pytest.approx(1.02 ** -4)
        assert discount_factors(0.03, t, Compounding.CONTINUOUS)[0] == pytest.approx(np.exp(-0.06))

    def test_mismatched_lengths(self):
        with pytest.raises(ValueError, match="same length"):
            npv([1.0, 2.0], [1.0], 0.05)


class TestIrr:
    """Internal rate of return through the guess + step search"""

    @pytest.mark.parametrize("rate", [0.01, 0.06, 0.12])
    def test_recovers_rate(self, rate):
        amounts, times = make_bond()
        price = npv(amounts, times, rate)
        y = irr(amounts, times, price)
        print(f"price {price:.6f} -> irr {y:.12f}")
        assert y == pytest.approx(rate, abs=1e-10)

    @pytest.mark.parametrize("compounding, frequency", [
        (Compounding.SIMPLE, 1),
        (Compounding.COMPOUNDED, 2),
        (Compounding.CONTINUOUS, 1),
    ])
    def test_compounding_conventions(self, compounding, frequency):
        amounts, times = make_bond(coupon=4.0, years=5)
        price = npv(amounts, times, 0.045, compounding, frequency)
        y = irr(amounts, times, price, compounding, frequency)
        assert y == pytest.approx(0.045, abs=1e-10)

    def test_single_flow_simple(self):
        assert irr([110.0], [2.0], 100.0, Compounding.SIMPLE) == pytest.approx(0.05, abs=1e-12)

    @pytest.mark.parametrize("method", ["newton_safe", "ridder", "bisection"])
    def test_other_methods(self, method):
        amounts, times = make_bond()
        price = npv(amounts, times, 0.08)
        assert irr(amounts, times, price, method=method) == pytest.approx(0.08, abs=1e-10)

    def test_negative_yield(self):
        amounts, times = make_bond(coupon=1.0)
        price = npv(amounts, times, -0.01)
        assert irr(amounts, times, price) == pytest.approx(-0.01, abs=1e-10)

    def test_no_sign_change(self):
        with pytest.raises(ValueError, match="due to their sign"):
            irr([5.0, 105.0], [1.0, 2.0], -10.0)

    def test_derivative_matches_finite_difference(self):
        amounts, times = make_bond()
        for compounding in Compounding:
            f = IrrObjective(amounts, times, 100.0, compounding, 2)
            h = 1e-6
            fd = (f(0.05 + h) - f(0.05 - h)) / (2 * h)
            assert f.derivative(0.05) == pytest.approx(fd, rel=1e-6)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

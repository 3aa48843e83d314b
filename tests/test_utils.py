import math

import pytest

from hapscore.utils import (
    LOG10_2,
    approx_log_sum_exp10,
    exact_log_sum_exp10,
    log_mean_exp10,
)


@pytest.mark.parametrize("x", [-300.0, -12.5, -1.0, 0.0, 3.0, 250.0])
def test_log_sum_exp10_of_equal_terms(x: float) -> None:
    assert exact_log_sum_exp10(x, x) == pytest.approx(x + math.log10(2.0))


def test_log_sum_exp10_commutative() -> None:
    for a, b in [(-1.0, -2.0), (-0.3, -7.9), (5.0, -5.0)]:
        assert exact_log_sum_exp10(a, b) == exact_log_sum_exp10(b, a)


def test_log_sum_exp10_matches_direct_formula() -> None:
    a, b = -1.2, -0.4
    assert exact_log_sum_exp10(a, b) == pytest.approx(math.log10(10**a + 10**b))


def test_log_sum_exp10_large_magnitudes_do_not_overflow() -> None:
    # 10**400 overflows a double; the stabilised form must not.
    assert exact_log_sum_exp10(400.0, 400.0) == pytest.approx(400.0 + LOG10_2)
    assert exact_log_sum_exp10(-400.0, -400.0) == pytest.approx(-400.0 + LOG10_2)
    assert exact_log_sum_exp10(1000.0, 0.0) == pytest.approx(1000.0)


def test_log_sum_exp10_with_impossible_terms() -> None:
    assert exact_log_sum_exp10(-math.inf, -2.0) == -2.0
    assert exact_log_sum_exp10(-math.inf, -math.inf) == -math.inf


def test_approx_is_exact() -> None:
    assert approx_log_sum_exp10(-3.0, -4.5) == exact_log_sum_exp10(-3.0, -4.5)


def test_log_mean_exp10() -> None:
    assert log_mean_exp10(-1.0, -1.0) == -1.0
    assert log_mean_exp10(-2.0, -3.0) == pytest.approx(exact_log_sum_exp10(-2.0, -3.0) - LOG10_2)

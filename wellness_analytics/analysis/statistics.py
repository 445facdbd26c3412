"""Numeric primitives shared by the mood and goal analyses.

Every function is total: empty or degenerate input returns a neutral value
(0, r=0 / p=1, R-squared 0) instead of raising or producing NaN.
"""

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np
import pandas as pd
from scipy import stats


@dataclass(frozen=True)
class PearsonResult:
    r: float
    p_value: float
    n: int


@dataclass(frozen=True)
class RegressionResult:
    slope: float
    intercept: float
    r_squared: float


def mean(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=float)))


def variance(values: Sequence[float]) -> float:
    """Population variance."""
    if len(values) == 0:
        return 0.0
    return float(np.var(np.asarray(values, dtype=float)))


def stddev(values: Sequence[float]) -> float:
    return float(np.sqrt(variance(values)))


def coefficient_of_variation(values: Sequence[float]) -> float:
    """stddev / mean; 1.0 when the mean is not positive."""
    avg = mean(values)
    if avg <= 0:
        return 1.0
    return stddev(values) / avg


def t_test_p_value(t: float, df: float) -> float:
    """Two-tailed p-value for Student's t with ``df`` degrees of freedom.

    Equivalent to the regularized incomplete beta I_x(df/2, 1/2) with
    x = df / (df + t^2).
    """
    if df <= 0:
        return 1.0
    if np.isinf(t):
        return 0.0
    return float(min(1.0, 2 * stats.t.sf(abs(t), df)))


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> PearsonResult:
    """Pearson product-moment correlation with a two-tailed significance test.

    Fewer than three pairs, unequal lengths or a constant series give r=0, p=1.
    """
    n = len(x)
    if n < 3 or len(y) != n:
        return PearsonResult(r=0.0, p_value=1.0, n=n)

    x_arr = np.asarray(x, dtype=float)
    y_arr = np.asarray(y, dtype=float)

    if np.ptp(x_arr) == 0 or np.ptp(y_arr) == 0:
        return PearsonResult(r=0.0, p_value=1.0, n=n)

    corr_coef, _ = stats.pearsonr(x_arr, y_arr)
    r = float(np.clip(corr_coef, -1.0, 1.0))

    if abs(r) >= 1.0:
        return PearsonResult(r=r, p_value=0.0, n=n)

    t = abs(r) * np.sqrt((n - 2) / (1 - r * r))
    return PearsonResult(r=r, p_value=t_test_p_value(t, n - 2), n=n)


def linear_regression(x: Sequence[float], y: Sequence[float]) -> RegressionResult:
    """Ordinary least squares fit of y on x.

    R-squared is defined as 0 when y is constant. A constant x gives a flat
    line through mean(y).
    """
    n = min(len(x), len(y))
    if n == 0:
        return RegressionResult(slope=0.0, intercept=0.0, r_squared=0.0)

    x_arr = np.asarray(x[:n], dtype=float)
    y_arr = np.asarray(y[:n], dtype=float)

    y_mean = y_arr.mean()
    if np.ptp(x_arr) == 0:
        return RegressionResult(slope=0.0, intercept=float(y_mean), r_squared=0.0)

    slope, intercept = np.polyfit(x_arr, y_arr, 1)

    predicted = slope * x_arr + intercept
    ss_res = np.sum((y_arr - predicted) ** 2)
    ss_tot = np.sum((y_arr - y_mean) ** 2)
    r_squared = 0.0 if ss_tot == 0 else 1 - ss_res / ss_tot

    return RegressionResult(slope=float(slope), intercept=float(intercept), r_squared=float(r_squared))


def moving_average(values: Sequence[float], window: int = 3) -> List[float]:
    """Trailing simple moving average; the first points use a partial window."""
    if window < 1:
        raise ValueError(f"window must be at least 1, got {window}")
    if len(values) == 0:
        return []
    series = pd.Series(values, dtype=float)
    return series.rolling(window=window, min_periods=1).mean().tolist()

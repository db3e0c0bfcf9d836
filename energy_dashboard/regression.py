"""OLS fit of renewable production against GDP."""

import logging
import warnings
from dataclasses import dataclass

import numpy as np
import pandas as pd
import statsmodels.api as sm

logger = logging.getLogger(__name__)


class InsufficientDataError(ValueError):
    """Raised when the input cannot support a linear fit."""


@dataclass(frozen=True)
class RegressionResult:
    slope: float
    intercept: float
    slope_stderr: float
    intercept_stderr: float
    slope_pvalue: float
    intercept_pvalue: float
    r_squared: float
    n_obs: int
    summary: str

    def predict(self, x):
        return self.intercept + self.slope * np.asarray(x, dtype=float)


def fit_regression(gdp, production):
    """
    Fit ``production = intercept + slope * gdp`` by ordinary least squares.

    Pairs where either value is missing or infinite are ignored. Fewer than
    two remaining pairs, or a single distinct GDP value, raise
    InsufficientDataError.
    """
    x = np.asarray(gdp, dtype=float)
    y = np.asarray(production, dtype=float)
    if x.shape != y.shape:
        raise ValueError(f"gdp and production must have the same length, got {len(x)} and {len(y)}")

    finite = np.isfinite(x) & np.isfinite(y)
    x, y = x[finite], y[finite]

    if len(x) < 2:
        logger.debug("Regression skipped: %d usable observations", len(x))
        raise InsufficientDataError(f"Insufficient data for regression: {len(x)} observation(s), need at least 2")
    if np.unique(x).size < 2:
        logger.debug("Regression skipped: all GDP values identical")
        raise InsufficientDataError("Insufficient data for regression: all GDP values are identical")

    X_const = sm.add_constant(pd.DataFrame({'GDP': x}))
    model = sm.OLS(pd.Series(y, name='RenewableProduction'), X_const).fit()

    # Normality diagnostics in the summary warn on small samples
    with warnings.catch_warnings():
        warnings.simplefilter('ignore')
        summary = model.summary(title='RenewableProduction ~ GDP').as_text()

    return RegressionResult(
        slope=float(model.params['GDP']),
        intercept=float(model.params['const']),
        slope_stderr=float(model.bse['GDP']),
        intercept_stderr=float(model.bse['const']),
        slope_pvalue=float(model.pvalues['GDP']),
        intercept_pvalue=float(model.pvalues['const']),
        r_squared=float(model.rsquared),
        n_obs=int(model.nobs),
        summary=summary,
    )

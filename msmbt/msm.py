import numpy as np
import pandas as pd
from typing import Optional

from msmbt.config import MAX_K
from msmbt.estimation import EstimationOptions, FitResult, MSMEstimator
from msmbt.forecasting import ForecastResult, MSMForecaster
from msmbt.model import msm_likelihood
from msmbt.simulation import MSMSimulator
from msmbt.utils import msm_check_returns


class MSM:
    """
    MSM-BT: Markov Switching Multifractal model with one free switching
    probability per component
    -----------
    ret : numpy.ndarray
        Input time series of returns (T,).
    kbar : int
        Number of binary volatility components; the model has 2^kbar states.
    fit_result : FitResult
        Estimates (m0, s0, sorted gamma), attained negative log-likelihood
        and optimizer diagnostics.
    results : dict
        - LL: Log-likelihood at the optimum.
        - LLs: Vector of log-likelihood contributions per time step.
        - filtered_probabilities: P(state_t | data_{1:t}) (T x 2^kbar).
        - transition_matrix: Transition matrix A at the optimum.
        - state_volatilities: Volatility of each joint state.
    """
    def __init__(self, ret, kbar=1, options: Optional[EstimationOptions] = None,
                 seed=None, rng: Optional[np.random.Generator] = None, max_k=MAX_K):
        """
        Parameters:
        -----------
        ret : array-like
            Vector or Series of (de-meaned) returns.
        kbar : int, optional
            Number of volatility components, default is 1.
        options : EstimationOptions, optional
            Optimizer settings.
        seed : int, optional
            Seed for a fresh generator; ignored when rng is given.
        rng : numpy.random.Generator, optional
            Generator used for start points, simulation and prediction.
        max_k : int, optional
            Ceiling on kbar.
        """
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.ret = msm_check_returns(ret, min_obs=2)
        self.estimator = MSMEstimator(kbar, options=options, rng=self.rng, max_k=max_k)
        self.kbar = kbar
        self.k_states = 2 ** kbar

        self.fit_result: Optional[FitResult] = None
        self.results = {}
        self._fit()

    def _fit(self):
        self.fit_result = self.estimator.estimate(self.ret)

        # Filter output is evaluated at the optimizer's own point; gamma in
        # fit_result is sorted for reporting only.
        details = msm_likelihood(self.fit_result.x, self.ret, self.kbar, self.estimator.M)

        self.results = {
            "LL": -details["LL"],
            "LLs": details["LLs"],
            "filtered_probabilities": details["pmat"][1:, :],
            "transition_matrix": details["A"],
            "state_volatilities": details["sigma"],
            "optim_message": self.fit_result.message,
            "optim_convergence": self.fit_result.converged,
            "optim_iter": self.fit_result.n_iterations,
            "optim_fev": self.fit_result.n_evaluations
        }

    @property
    def parameters(self):
        return self.fit_result.parameters

    @property
    def log_likelihood(self):
        return self.results["LL"]

    def summary(self):
        fit = self.fit_result
        names = ["m0", "s0"] + [f"p{i + 1}" for i in range(self.kbar)]
        summary_df = pd.DataFrame({"Estimate": fit.parameters}, index=names)

        print("*" * 76)
        print(f"  Markov Switching Multifractal Model (MSM-BT) - kbar={self.kbar}")
        print("*" * 76)
        print(f"  Log-Likelihood: {self.log_likelihood:.4f}")
        print(f"  Observations:   {len(self.ret)}")
        print(f"  Optimization:   Converged={fit.converged}, Iterations={fit.n_iterations}, "
              f"Evaluations={fit.n_evaluations}")
        print("-" * 76)
        print(summary_df.round(4))
        print("-" * 76)

        return summary_df

    def predict(self, window=30, n_paths=200, initial="row0", verbose=False) -> ForecastResult:
        """
        Monte-Carlo volatility forecast over `window` periods.

        Returns:
        --------
        ForecastResult
            mean and standard error of the simulated path volatilities
        """
        forecaster = MSMForecaster(self.parameters, rng=self.rng, initial=initial)
        return forecaster.forecast(window=window, n_paths=n_paths, verbose=verbose)

    def simulate(self, n_periods, initial="row0"):
        return MSMSimulator(self.parameters, rng=self.rng, initial=initial).simulate(n_periods)

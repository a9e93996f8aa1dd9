"""
MSM-BT Simulation Module
Generate synthetic return paths from fitted MSM-BT parameters
"""

import numpy as np
from typing import Optional

from msmbt.utils import msm_A, msm_sigma, msm_states, msm_stationary

INITIAL_MODES = ("row0", "stationary")


class MSMSimulator:
    """
    Simulate data from an MSM-BT model

    Parameters
    ----------
    params : array-like
        Natural parameters [m0, s0, gamma_1 .. gamma_kbar]. Closed bounds
        (m0 = 1, gamma = 0 or 1) are allowed for degenerate models.
    rng : np.random.Generator, optional
        Random generator; all draws come from it
    initial : str
        'row0' draws the first state from row 0 of the transition matrix,
        'stationary' from the stationary distribution
    """

    def __init__(self, params, rng: Optional[np.random.Generator] = None,
                 initial: str = "row0"):
        params = np.asarray(params, dtype=float).ravel()
        if params.size < 3:
            raise ValueError("params must be [m0, s0, gamma_1, ...] with at least one gamma.")
        if initial not in INITIAL_MODES:
            raise ValueError(f"initial must be one of {INITIAL_MODES}, got {initial!r}")

        m0, s0, gamma = params[0], params[1], params[2:]
        if not 1.0 <= m0 <= 2.0:
            raise ValueError(f"m0 must lie in [1, 2], got {m0}")
        if not s0 > 0:
            raise ValueError(f"s0 must be positive, got {s0}")
        if np.any(gamma < 0) or np.any(gamma > 1):
            raise ValueError("Switching probabilities must lie in [0, 1].")

        self.params = params
        self.kbar = gamma.size
        self.n_states = 2 ** self.kbar
        self.rng = rng if rng is not None else np.random.default_rng()
        self.initial = initial

        self.A = msm_A(gamma)
        self.sigma = msm_sigma(m0, s0, self.kbar, msm_states(self.kbar))
        self._cdf = np.cumsum(self.A, axis=1)

        if initial == "row0":
            self.p0 = self.A[0, :]
        else:
            self.p0 = msm_stationary(self.A)
        self._cdf0 = np.cumsum(self.p0)

    def _draw(self, cdf: np.ndarray, u: float) -> int:
        # Categorical draw by inverse cdf; clip guards rows summing to 1 - eps
        return min(int(np.searchsorted(cdf, u, side='right')), self.n_states - 1)

    def simulate_states(self, n_periods: int) -> np.ndarray:
        """Simulate a path of joint states"""
        u = self.rng.random(n_periods)
        states = np.zeros(n_periods, dtype=int)

        states[0] = self._draw(self._cdf0, u[0])
        for t in range(1, n_periods):
            states[t] = self._draw(self._cdf[states[t - 1]], u[t])

        return states

    def simulate(self, n_periods: int, return_states: bool = False):
        """
        Simulate one return path

        Parameters
        ----------
        n_periods : int
            Path length
        return_states : bool
            Also return the hidden state sequence

        Returns
        -------
        np.ndarray or (np.ndarray, np.ndarray)
            returns (n_periods,), optionally with states (n_periods,)
        """
        if n_periods < 1:
            raise ValueError("n_periods must be positive")

        states = self.simulate_states(n_periods)
        returns = self.rng.standard_normal(n_periods) * self.sigma[states]

        if return_states:
            return returns, states
        return returns

    def simulate_multiple_paths(self, n_paths: int, n_periods: int) -> np.ndarray:
        """Independent paths, shape (n_paths, n_periods)"""
        if n_paths < 1:
            raise ValueError("n_paths must be positive")

        paths = np.zeros((n_paths, n_periods))
        for i in range(n_paths):
            paths[i] = self.simulate(n_periods)

        return paths


def simulate(params, n_periods: int, rng: Optional[np.random.Generator] = None,
             initial: str = "row0") -> np.ndarray:
    return MSMSimulator(params, rng=rng, initial=initial).simulate(n_periods)


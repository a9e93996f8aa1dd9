"""
MSM-BT Forecasting Module
Monte-Carlo volatility forecast from simulated return paths
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, Optional

from msmbt.config import validate_positive_count
from msmbt.simulation import MSMSimulator


@dataclass
class ForecastResult:
    """Mean and standard error of simulated path volatilities"""
    mean: float
    std_error: float
    n_paths: int
    window: int
    path_vols: Optional[np.ndarray] = None

    def to_record(self) -> Dict[str, float]:
        return {"volmean": self.mean, "volsd": self.std_error}


class MSMForecaster:
    """
    Forecast volatility over a window by simulation

    Each path is simulated independently from the fitted parameters; the
    forecast is the mean of the per-path sample standard deviations, with
    standard error sd(path vols) / sqrt(n_paths).
    """

    def __init__(self, params, rng: Optional[np.random.Generator] = None,
                 initial: str = "row0"):
        self.simulator = MSMSimulator(params, rng=rng, initial=initial)

    def forecast(self, window: int = 30, n_paths: int = 200,
                 keep_paths: bool = False, verbose: bool = False) -> ForecastResult:
        validate_positive_count("window", window)
        validate_positive_count("n_paths", n_paths)

        paths = self.simulator.simulate_multiple_paths(n_paths, window)
        vols = np.std(paths, axis=1, ddof=1)

        result = ForecastResult(
            mean=float(np.mean(vols)),
            std_error=float(np.std(vols, ddof=1) / np.sqrt(n_paths)),
            n_paths=n_paths,
            window=window,
            path_vols=vols if keep_paths else None
        )

        if verbose:
            print("-------------- Vol prediction ---------------")
            print(f"Estimate:\t{result.mean:.4f}")
            print(f"Std Error:\t{result.std_error:.4f}")
            print("----------------------------------------------")

        return result


def predict_volatility(params, n_paths: int = 200, window: int = 30,
                       rng: Optional[np.random.Generator] = None) -> ForecastResult:
    return MSMForecaster(params, rng=rng).forecast(window=window, n_paths=n_paths)

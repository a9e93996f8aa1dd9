import numpy as np
import time
import warnings
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from scipy.optimize import minimize

from msmbt.config import ConfigurationError, MAX_K, validate_dimension
from msmbt.model import msm_ll, work_to_nat
from msmbt.utils import msm_check_returns, msm_states


class EstimationError(RuntimeError):
    """Raised when no optimizer start produced a result"""


@dataclass
class EstimationOptions:
    """Options for MSM-BT estimation"""
    maxiter: int = 5000  # Maximum simplex iterations
    maxfev: int = 10000  # Maximum likelihood evaluations
    xatol: float = 1e-6  # Simplex size tolerance
    fatol: float = 1e-8  # Objective tolerance
    n_starts: int = 1  # Number of random starts
    adaptive: bool = False  # Dimension-adapted Nelder-Mead coefficients
    verbose: bool = False  # Print progress

    def __post_init__(self):
        if self.maxiter < 1 or self.maxfev < 1:
            raise ConfigurationError("maxiter and maxfev must be positive.")
        if self.n_starts < 1:
            raise ConfigurationError("n_starts must be positive.")


@dataclass
class FitResult:
    """Container for MSM-BT estimation results"""
    m0: float
    s0: float
    gamma: np.ndarray  # Switching probabilities, sorted ascending
    nll: float
    kbar: int
    converged: bool
    status: int
    message: str
    n_iterations: int
    n_evaluations: int
    x: np.ndarray  # Unconstrained optimum, in optimizer order
    starts: List[float] = field(default_factory=list)  # Objective value of each start

    @property
    def parameters(self) -> np.ndarray:
        """Natural parameters [m0, s0, gamma_1 .. gamma_kbar]"""
        return np.concatenate([[self.m0, self.s0], self.gamma])

    @property
    def log_likelihood(self) -> float:
        return -self.nll

    def to_record(self) -> Dict[str, float]:
        record = {"m0": self.m0, "s0": self.s0}
        for i, g in enumerate(self.gamma):
            record[f"p{i + 1}"] = g
        record["nll"] = self.nll
        record["k"] = self.kbar
        return record


class MSMEstimator:
    """
    Maximum likelihood estimation of the MSM-BT model

    The likelihood is minimised over the unconstrained working parameters
    with the Nelder-Mead simplex, restarted from `n_starts` random points.
    """

    def __init__(self, kbar: int, options: Optional[EstimationOptions] = None,
                 rng: Optional[np.random.Generator] = None, max_k: int = MAX_K):
        validate_dimension(kbar, max_k)

        self.kbar = kbar
        self.options = options if options is not None else EstimationOptions()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.M = msm_states(kbar)

    def initial_params(self, dat: np.ndarray) -> np.ndarray:
        """Standard normal draw, with the s0 coordinate set to log(sample std)"""
        para0 = self.rng.standard_normal(self.kbar + 2)
        para0[1] = np.log(np.std(dat, ddof=1))
        return para0

    def objective(self, para_tilde: np.ndarray, dat: np.ndarray) -> float:
        return msm_ll(para_tilde, dat, self.kbar, self.M)

    def estimate(self, ret, para0: Optional[np.ndarray] = None) -> FitResult:
        """
        Fit the model to a return series

        Parameters
        ----------
        ret : array-like
            Returns (T,), T >= 2
        para0 : np.ndarray, optional
            Unconstrained start for the first run; remaining starts are random

        Returns
        -------
        FitResult
        """
        dat = msm_check_returns(ret, min_obs=2)
        if np.std(dat, ddof=1) <= 0:
            raise ValueError("Returns have zero variance; s0 cannot be initialised.")
        if para0 is not None and np.size(para0) != self.kbar + 2:
            raise ValueError(f"para0 must have {self.kbar + 2} entries, got {np.size(para0)}.")

        opts = self.options
        best_result = None
        starts = []
        t0 = time.time()

        for i in range(opts.n_starts):
            if i == 0 and para0 is not None:
                x0 = np.asarray(para0, dtype=float)
            else:
                x0 = self.initial_params(dat)

            if opts.verbose and opts.n_starts > 1:
                print(f"Starting optimization {i + 1}/{opts.n_starts}...")

            try:
                result = minimize(
                    self.objective,
                    x0,
                    args=(dat,),
                    method='Nelder-Mead',
                    options={
                        'maxiter': opts.maxiter,
                        'maxfev': opts.maxfev,
                        'xatol': opts.xatol,
                        'fatol': opts.fatol,
                        'adaptive': opts.adaptive,
                        'disp': False
                    }
                )
            except (ValueError, ArithmeticError) as e:
                warnings.warn(f"Optimization {i + 1} failed: {e}", RuntimeWarning)
                continue

            starts.append(float(result.fun))
            if best_result is None or result.fun < best_result.fun:
                best_result = result

        if best_result is None:
            raise EstimationError("All optimization attempts failed")

        if not best_result.success:
            warnings.warn(f"Optimization did not converge: {best_result.message}", RuntimeWarning)

        fit = self._process_result(best_result, starts)

        if opts.verbose:
            print("---------- MSM-BT Model Fit Results ----------")
            print(f"MLE took {time.time() - t0:.2f} seconds")
            print(f"Number of func evals: {fit.n_evaluations}")
            print(f"Status:\t{fit.status} ({fit.message})")
            print(f"Loglik:\t{fit.nll:.4f}")
            print("-------------- Model parameters --------------")
            print(f"m0:\t{fit.m0:.4f}")
            print(f"s0:\t{fit.s0:.4f}")
            for i, g in enumerate(fit.gamma):
                print(f"p{i + 1}:\t{g:.4f}")

        return fit

    def _process_result(self, opt_result, starts: List[float]) -> FitResult:
        para = work_to_nat(opt_result.x)

        return FitResult(
            m0=float(para[0]),
            s0=float(para[1]),
            gamma=np.sort(para[2:]),
            nll=float(opt_result.fun),
            kbar=self.kbar,
            converged=bool(opt_result.success),
            status=int(opt_result.status),
            message=str(opt_result.message),
            n_iterations=int(opt_result.nit),
            n_evaluations=int(opt_result.nfev),
            x=np.asarray(opt_result.x, dtype=float),
            starts=starts
        )


def fit(ret, kbar: int, options: Optional[EstimationOptions] = None,
        rng: Optional[np.random.Generator] = None) -> FitResult:
    """Fit an MSM-BT model of dimension kbar to a return series"""
    return MSMEstimator(kbar, options=options, rng=rng).estimate(ret)

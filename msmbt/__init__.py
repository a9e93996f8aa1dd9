from msmbt.config import ConfigurationError, MSMConfig, MAX_K
from msmbt.estimation import EstimationError, EstimationOptions, FitResult, MSMEstimator, fit
from msmbt.forecasting import ForecastResult, MSMForecaster, predict_volatility
from msmbt.model import LL_PENALTY, msm_likelihood, msm_ll, nat_to_work, work_to_nat
from msmbt.msm import MSM
from msmbt.simulation import MSMSimulator, simulate
from msmbt.utils import msm_A, msm_sigma, msm_states, msm_stationary

__version__ = "0.1.0"

import warnings
from dataclasses import dataclass
from typing import Optional

# Filter cost is O(T * 2^k) per likelihood call; beyond this a fit takes hours.
MAX_K = 12

MIN_WINDOW = 30
MIN_SAMPLES = 100


class ConfigurationError(ValueError):
    """Invalid model dimension, forecast window or number of simulated paths"""


@dataclass(frozen=True)
class MSMConfig:
    """Run configuration for one fit + forecast"""
    k: int  # Number of binary volatility components
    window: int = 30  # Forecast horizon in bars
    samples: int = 200  # Number of simulated paths
    seed: Optional[int] = None  # Seed for the random generator
    max_k: int = MAX_K  # Practical ceiling on k

    def __post_init__(self):
        validate_dimension(self.k, self.max_k)
        validate_positive_count("window", self.window, MIN_WINDOW)
        validate_positive_count("samples", self.samples, MIN_SAMPLES)


def validate_positive_count(name, value, advised=None):
    """
    Check a window/sample count: at least 2 (a sample std dev needs two points)
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 2:
        raise ConfigurationError(f"{name} must be an integer >= 2, got {value!r}.")

    if advised is not None and value < advised:
        warnings.warn(f"{name}={value} is below the advised minimum of {advised}.", UserWarning)


def validate_dimension(k, max_k=MAX_K):
    """
    Check the model dimension: an integer in [1, max_k]
    """
    if isinstance(k, bool) or not isinstance(k, int) or k < 1:
        raise ConfigurationError(f"k (model dimension) must be a positive integer, got {k!r}.")
    if k > max_k:
        raise ConfigurationError(
            f"k={k} exceeds the practical ceiling max_k={max_k} "
            f"(state space of 2^{k} states)."
        )

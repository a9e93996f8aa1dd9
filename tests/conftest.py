import os
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np
import pytest

from msmbt.simulation import simulate


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture(scope="session")
def k1_returns():
    """2000 returns from m0=1.3, s0=0.02, p1=0.1"""
    ret = simulate([1.3, 0.02, 0.1], 2000, rng=np.random.default_rng(20240101))
    return ret - ret.mean()

import numpy as np
import pandas as pd
import warnings


def msm_states(kbar):
    """
    Enumerate joint states as their number of "on" components
    :param kbar: number of binary components
    :return: int vector (2^kbar,), element i is the popcount of i
    """
    k2 = 2 ** kbar
    M = np.zeros(k2, dtype=int)

    for i in range(k2):
        M[i] = bin(i).count("1")

    return M


def msm_A(gamma):
    """
    Calculate transition matrix
    :param gamma: switching probability of each component, in parameter order
    :return: transition matrix (2^kbar x 2^kbar)
    """
    A = np.ones((1, 1))

    for g in np.asarray(gamma, dtype=float).ravel():
        a = np.array([
            [1.0 - 0.5 * g, 0.5 * g],
            [0.5 * g, 1.0 - 0.5 * g]
        ])
        # Kronecker product
        A = np.kron(A, a)

    return A


def msm_sigma(m0, s0, kbar, M):
    """
    Calculate the volatility of each joint state
    :param m0: multiplier of an "off" component
    :param s0: volatility scale
    :param kbar: number of components
    :param M: active counts from msm_states()
    :return: state volatilities (2^kbar,)
    """
    m1 = 2.0 - m0
    M = np.asarray(M)

    return s0 * np.sqrt(m1 ** M * m0 ** (kbar - M))


def msm_stationary(A):
    """
    Stationary distribution of a row-stochastic matrix

    When eigenvalue 1 is repeated (e.g. all switching probabilities are 0,
    so A is the identity) the chain is reducible and has no unique
    stationary law. The result is then the eigenvector numpy lists first,
    which for the identity is a point mass on state 0.

    :param A: transition matrix (k x k)
    :return: probability vector (k,)
    """
    eigval, eigvec = np.linalg.eig(A.T)
    idx = np.argmin(np.abs(eigval - 1.0))

    pi = np.abs(np.real(eigvec[:, idx]))
    return pi / np.sum(pi)


def msm_check_returns(dat, min_obs=1):
    """
    Validate a return series and return it as a flat float array
    """
    if isinstance(dat, (pd.DataFrame, pd.Series)):
        dat = dat.values

    dat = np.asarray(dat, dtype=float)

    if dat.ndim == 2 and dat.shape[1] > 1:
        warnings.warn("Input data has multiple columns. Using the first column for returns.", UserWarning)
        dat = dat[:, 0]

    dat = dat.ravel()

    if dat.size < min_obs:
        raise ValueError(f"At least {min_obs} return observation(s) required, got {dat.size}.")

    if not np.all(np.isfinite(dat)):
        raise ValueError("Input data contains NaN or infinite values.")

    return dat

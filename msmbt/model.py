import numpy as np
import warnings

from msmbt.utils import msm_A, msm_sigma

LL_PENALTY = 1e12


def _sigmoid(x):
    return 1.0 / (1.0 + np.exp(-x))


def work_to_nat(para_tilde):
    """
    Transform working parameters to natural parameters
    :param para_tilde: unconstrained vector [u_m0, u_s0, u_1 .. u_kbar]
    :return: natural vector [m0, s0, gamma_1 .. gamma_kbar]
    """
    para_tilde = np.asarray(para_tilde, dtype=float)
    if para_tilde.ndim != 1 or para_tilde.size < 2:
        raise ValueError("Parameter vector must be 1-d with at least 2 entries [m0, s0, ...].")

    para = np.empty_like(para_tilde)

    with np.errstate(over='ignore'):
        para[0] = 1.0 + _sigmoid(para_tilde[0])  # m0 in (1, 2)
        para[1] = np.exp(para_tilde[1])  # s0 > 0
        para[2:] = _sigmoid(para_tilde[2:])  # gamma_k in (0, 1)

    return para


def nat_to_work(para):
    """
    Transform natural parameters to working parameters
    :param para: natural vector [m0, s0, gamma_1 .. gamma_kbar]
    :return: unconstrained vector
    """
    para = np.asarray(para, dtype=float)
    if para.ndim != 1 or para.size < 2:
        raise ValueError("Parameter vector must be 1-d with at least 2 entries [m0, s0, ...].")

    para_tilde = np.empty_like(para)

    para_tilde[0] = np.log((para[0] - 1.0) / (2.0 - para[0]))  # m0
    para_tilde[1] = np.log(para[1])  # s0
    para_tilde[2:] = np.log(para[2:] / (1.0 - para[2:]))  # gamma_k

    return para_tilde


def _model_components(para_tilde, kbar, M):
    para = work_to_nat(para_tilde)
    if para.size != kbar + 2:
        raise ValueError(f"Expected {kbar + 2} parameters for kbar={kbar}, got {para.size}.")

    A = msm_A(para[2:])
    s = msm_sigma(para[0], para[1], kbar, M)

    return para, A, s


def _densities(dat, s):
    """Zero-mean normal densities, (T x k2)"""
    with np.errstate(divide='ignore', over='ignore', invalid='ignore', under='ignore'):
        z = dat[:, None] / s[None, :]
        return np.exp(-0.5 * z * z) / (np.sqrt(2.0 * np.pi) * s[None, :])


def msm_likelihood(para_tilde, dat, kbar, M):
    """
    Hamilton filter with full output
    :param para_tilde: unconstrained parameter vector (kbar + 2,)
    :param dat: returns (T,)
    :param kbar: number of components
    :param M: active counts from msm_states()
    :return: dict of negative log likelihood (LL), log-likelihood
             contributions (LLs), filtered probs (pmat, T+1 x k2 incl. the
             uniform prior), transition matrix (A), state vols (sigma) and
             natural parameters (para)
    """
    dat = np.asarray(dat, dtype=float).ravel()
    para, A, s = _model_components(para_tilde, kbar, M)

    k2 = A.shape[0]
    T = dat.shape[0]

    omega_t = _densities(dat, s)

    pmat = np.zeros((T + 1, k2))
    LLs = np.full(T, np.nan)
    pmat[0, :] = 1.0 / k2
    degenerate = not np.all(np.isfinite(s)) or np.any(s <= 0)

    for t in range(T):
        if degenerate:
            break

        piA = pmat[t, :] @ A
        pinum = omega_t[t, :] * piA
        sw = np.sum(pinum)

        if not np.isfinite(sw) or sw <= 0:
            warnings.warn(f"Marginal likelihood degenerate ({sw}) at t={t + 1}.", RuntimeWarning)
            degenerate = True
            break

        LLs[t] = np.log(sw)
        pmat[t + 1, :] = pinum / sw

    neg_ll = LL_PENALTY if degenerate else -np.sum(LLs)
    if not np.isfinite(neg_ll):
        warnings.warn(f"Log-likelihood is not finite ({neg_ll}).", RuntimeWarning)
        neg_ll = LL_PENALTY

    return {
        "LL": neg_ll,
        "LLs": LLs,
        "pmat": pmat,
        "A": A,
        "sigma": s,
        "para": para,
        "degenerate": degenerate
    }


def msm_ll(para_tilde, dat, kbar, M):
    """
    Negative log likelihood for the optimizer
    :param para_tilde: unconstrained parameter vector (kbar + 2,)
    :param dat: returns (T,)
    :param kbar: number of components
    :param M: active counts from msm_states()
    :return: -sum(log p(x_t | x_1..x_{t-1})), or LL_PENALTY on numerical breakdown
    """
    _, A, s = _model_components(para_tilde, kbar, M)
    dat = np.asarray(dat, dtype=float).ravel()

    if not np.all(np.isfinite(s)) or np.any(s <= 0):
        return LL_PENALTY

    omega_t = _densities(dat, s)

    B = np.full(A.shape[0], 1.0 / A.shape[0])
    ll = 0.0

    for w in omega_t:
        pinum = w * (B @ A)
        sw = pinum.sum()

        if not (0.0 < sw < np.inf):
            return LL_PENALTY

        ll += np.log(sw)
        B = pinum / sw

    if not np.isfinite(ll):
        return LL_PENALTY

    return -ll

"""
Markov utilities and the plug-in entropy rate in bits/step.

This module provides:
- Transition counts over a full (possibly composite) state enumeration and
  row normalization that leaves unvisited rows all-zero instead of NaN.
- Two stationary-distribution estimators: the empirical state frequencies,
  and the eigenvector of P^T for the eigenvalue closest to 1. The eigen
  estimator returns a tagged StationaryResult (found / degenerate /
  ambiguous) so finite-sample degeneracies are visible to the caller.
- The Markov entropy rate H = -sum_{i,j} pi_i P_ij log2 P_ij with
  0 log 0 = 0 by masking.
- A Markov chain sampler seeded from the eigen stationary distribution.
"""

from __future__ import annotations
import enum
import logging
from dataclasses import dataclass, field
from typing import Hashable, List, Sequence, Tuple
import numpy as np

from .errors import (
    AmbiguousStationaryDistribution,
    DegenerateStationaryDistribution,
    InsufficientData,
)
from .states import embed_sequence, expand_state_space, index_sequence

LOGGER = logging.getLogger(__name__)


def transition_counts(indices: Sequence[int], k: int) -> np.ndarray:
    """Count one-step transitions of an integer index sequence into a kxk matrix."""
    x = np.asarray(indices, dtype=np.int64)
    C = np.zeros((k, k), dtype=np.int64)
    if len(x) < 2:
        return C
    np.add.at(C, (x[:-1], x[1:]), 1)
    return C


def _embedded_indices(
    event_seq: Sequence[Hashable],
    state_space: Sequence[Hashable],
    mc_order: int,
) -> Tuple[np.ndarray, List[Hashable]]:
    states = expand_state_space(state_space, mc_order)
    base = index_sequence(event_seq, list(state_space))
    if mc_order == 1:
        return base, states
    return index_sequence(embed_sequence(event_seq, mc_order), states), states


def count_transitions(
    event_seq: Sequence[Hashable],
    state_space: Sequence[Hashable],
    mc_order: int = 1,
) -> Tuple[np.ndarray, List[Hashable]]:
    """Transition counts of the order-m embedded sequence.

    Returns (counts, states) where states is the full composite enumeration,
    so rows/columns exist for states that never occur.
    """
    idx, states = _embedded_indices(event_seq, state_space, mc_order)
    return transition_counts(idx, len(states)), states


def transition_matrix(counts: np.ndarray) -> np.ndarray:
    """Row-normalize counts; rows with no observations stay all-zero."""
    C = np.asarray(counts, dtype=float)
    if C.ndim != 2 or C.shape[0] != C.shape[1]:
        raise ValueError(f"counts must be a square matrix, got shape {C.shape}")
    rs = C.sum(axis=1, keepdims=True)
    rs[rs == 0.0] = 1.0
    return C / rs


def empirical_stationary(
    event_seq: Sequence[Hashable],
    state_space: Sequence[Hashable],
    mc_order: int = 1,
) -> np.ndarray:
    """Relative frequency of each (composite) state in the embedded sequence."""
    idx, states = _embedded_indices(event_seq, state_space, mc_order)
    if len(idx) == 0:
        raise InsufficientData(
            f"empirical stationary distribution needs at least {mc_order} symbols, "
            f"got {len(event_seq)}"
        )
    freq = np.bincount(idx, minlength=len(states)).astype(float)
    return freq / float(len(idx))


class StationaryStatus(enum.Enum):
    FOUND = "found"
    DEGENERATE = "degenerate"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True)
class StationaryResult:
    """Outcome of the eigen stationary estimator.

    vector is the stationary distribution when status is FOUND and a zero
    vector otherwise. For AMBIGUOUS results, candidates holds one vector per
    eigenvalue tied for closest to 1.
    """
    status: StationaryStatus
    vector: np.ndarray
    eigenvalue: complex | None = None
    candidates: Tuple[np.ndarray, ...] = field(default_factory=tuple)

    @property
    def found(self) -> bool:
        return self.status is StationaryStatus.FOUND


def _normalize_eigvec(v: np.ndarray, tol: float = 1e-12) -> np.ndarray:
    s = v.sum()
    if abs(s) <= tol:
        return np.real(v)
    return np.real(v / s)


def eigen_stationary(P: np.ndarray, decimals: int = 10, strict: bool = False) -> StationaryResult:
    """Stationary distribution from the eigen-decomposition of P^T.

    A row-stochastic P has an eigenvalue of modulus 1. If none rounds to
    modulus 1 at `decimals` places the result is DEGENERATE with a zero
    vector. Otherwise the eigenvalue(s) minimizing |lambda - 1| are chosen;
    a unique choice gives FOUND with the eigenvector normalized to sum 1,
    several give AMBIGUOUS with every candidate attached. With strict=True
    the two sentinel outcomes raise instead.
    """
    P = np.asarray(P, dtype=float)
    if P.ndim != 2 or P.shape[0] != P.shape[1]:
        raise ValueError(f"transition matrix must be square, got shape {P.shape}")
    k = P.shape[0]
    vals, vecs = np.linalg.eig(P.T)
    zero = np.zeros(k, dtype=float)
    if not np.any(np.round(np.abs(vals), decimals) == 1.0):
        LOGGER.debug("no unit-modulus eigenvalue among %s", np.round(vals, 6))
        if strict:
            raise DegenerateStationaryDistribution(
                "no eigenvalue of the transition matrix has modulus 1"
            )
        return StationaryResult(StationaryStatus.DEGENERATE, zero)
    dist = np.round(np.abs(vals - 1.0), decimals)
    tied = np.flatnonzero(dist == dist.min())
    if len(tied) > 1:
        candidates = tuple(_normalize_eigvec(vecs[:, j]) for j in tied)
        LOGGER.debug("%d eigenvalues tie for closest to 1: %s", len(tied), vals[tied])
        if strict:
            raise AmbiguousStationaryDistribution(
                f"{len(tied)} eigenvalues tie for closest to 1; "
                "the chain has several stationary distributions"
            )
        return StationaryResult(StationaryStatus.AMBIGUOUS, zero, complex(vals[tied[0]]), candidates)
    j = int(tied[0])
    return StationaryResult(StationaryStatus.FOUND, _normalize_eigvec(vecs[:, j]), complex(vals[j]))


def markov_entropy_rate(P: np.ndarray, pi: np.ndarray) -> float:
    """Entropy rate in bits/step: H = -sum_{i,j} pi_i P_ij log2 P_ij.

    Zero entries of P contribute exactly 0.
    """
    P = np.asarray(P, dtype=float)
    pi = np.asarray(pi, dtype=float).ravel()
    if P.ndim != 2 or P.shape[0] != P.shape[1]:
        raise ValueError(f"transition matrix must be square, got shape {P.shape}")
    if pi.shape[0] != P.shape[0]:
        raise ValueError(
            f"stationary vector has {pi.shape[0]} entries for a {P.shape[0]}-state matrix"
        )
    logP = np.zeros_like(P)
    mask = P > 0
    logP[mask] = np.log2(P[mask])
    return -float(np.sum(pi[:, None] * P * logP)) + 0.0


def simulate_markov_chain(
    P: np.ndarray,
    n: int,
    state_space: Sequence[Hashable] | None = None,
    init: np.ndarray | None = None,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """Sample a length-n path by forward sampling from the rows of P.

    The first state is drawn from the eigen stationary distribution of P.
    When that is not found, `init` is used, and failing that the uniform
    distribution. States are labelled 0..k-1 unless state_space is given.
    """
    P = np.asarray(P, dtype=float)
    if P.ndim != 2 or P.shape[0] != P.shape[1]:
        raise ValueError(f"transition matrix must be square, got shape {P.shape}")
    if np.any(P < 0) or not np.allclose(P.sum(axis=1), 1.0):
        raise ValueError("every row of the transition matrix must be a probability vector")
    n = int(n)
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    if rng is None:
        rng = np.random.default_rng()
    k = P.shape[0]
    labels = np.arange(k) if state_space is None else np.asarray(list(state_space), dtype=object)
    if len(labels) != k:
        raise ValueError(f"state space has {len(labels)} labels for a {k}-state matrix")

    res = eigen_stationary(P)
    if res.found:
        pi = np.clip(res.vector, 0.0, None)
    elif init is not None:
        LOGGER.info("stationary distribution %s; using supplied initial distribution", res.status.value)
        pi = np.asarray(init, dtype=float)
    else:
        LOGGER.warning("stationary distribution %s; drawing initial state uniformly", res.status.value)
        pi = np.ones(k, dtype=float)
    s = float(pi.sum())
    pi = (pi / s) if s > 0 else np.ones(k) / k

    cum = np.cumsum(P, axis=1)
    cum[:, -1] = 1.0
    u = rng.random(n)
    x = np.zeros(n, dtype=np.int64)
    x[0] = rng.choice(np.arange(k), p=pi)
    for t in range(1, n):
        x[t] = int(np.searchsorted(cum[x[t - 1]], u[t], side="right"))
    return labels[x]

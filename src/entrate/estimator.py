"""
Single entry point for entropy-rate estimation.

estimate_entropy_rate dispatches on the method:
- "Markov": order-m embedding -> transition counts -> transition matrix ->
  stationary distribution ("Empirical" or "Eigen") -> plug-in entropy rate.
- "SWLZ": sliding-window Lempel-Ziv match lengths (embedding order unused).

Any other method raises InvalidMethod; nothing falls back silently.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Hashable, List, Sequence
import numpy as np

from .errors import InsufficientData, InvalidMethod
from .markov import (
    StationaryStatus,
    count_transitions,
    eigen_stationary,
    empirical_stationary,
    markov_entropy_rate,
    transition_matrix,
)
from .swlz import SWLZResult, ValidityPolicy, swlz_entropy_rate

LOGGER = logging.getLogger(__name__)

METHODS = ("Markov", "SWLZ")
STAT_METHODS = ("Empirical", "Eigen")


@dataclass(frozen=True)
class EstimatorConfig:
    method: str = "Markov"
    mc_order: int = 1
    stat_method: str = "Empirical"
    policy: ValidityPolicy = field(default_factory=ValidityPolicy)

    def validate(self) -> "EstimatorConfig":
        if self.method not in METHODS:
            raise InvalidMethod(
                f"not a valid entropy rate estimation method: {self.method!r}; "
                f'choose "Markov" or "SWLZ"'
            )
        if self.stat_method not in STAT_METHODS:
            raise ValueError(
                f"not a valid stationary distribution method: {self.stat_method!r}; "
                f'choose "Empirical" or "Eigen"'
            )
        if int(self.mc_order) < 1:
            raise ValueError(f"mc_order must be >= 1, got {self.mc_order}")
        return self


@dataclass(frozen=True)
class MarkovEstimate:
    states: List[Hashable]
    counts: np.ndarray
    transition_matrix: np.ndarray
    stationary: np.ndarray
    stationary_status: StationaryStatus
    entropy_rate: float


def _estimate_markov(event_seq: Sequence[Hashable], state_space: Sequence[Hashable], config: EstimatorConfig) -> MarkovEstimate:
    m = int(config.mc_order)
    n_eff = len(event_seq) - m + 1
    if n_eff < 2:
        raise InsufficientData(
            f"order-{m} Markov estimate needs at least {m + 1} symbols, got {len(event_seq)}"
        )
    counts, states = count_transitions(event_seq, state_space, m)
    P = transition_matrix(counts)
    if config.stat_method == "Empirical":
        pi = empirical_stationary(event_seq, state_space, m)
        status = StationaryStatus.FOUND
    else:
        res = eigen_stationary(P)
        pi, status = res.vector, res.status
        if not res.found:
            LOGGER.warning(
                "eigen stationary distribution is %s for %d states; entropy rate uses a zero vector",
                status.value, len(states),
            )
    H = markov_entropy_rate(P, pi)
    LOGGER.debug("Markov(order=%d, %s): n=%d states=%d H=%.6g", m, config.stat_method, len(event_seq), len(states), H)
    return MarkovEstimate(states, counts, P, pi, status, H)


def estimate_entropy_rate(
    event_seq: Sequence[Hashable],
    state_space: Sequence[Hashable],
    method: str = "Markov",
    mc_order: int = 1,
    stat_method: str = "Empirical",
    policy: ValidityPolicy | None = None,
    full_output: bool = False,
    config: EstimatorConfig | None = None,
) -> float | MarkovEstimate | SWLZResult:
    """Estimate the entropy rate (bits/symbol) of event_seq.

    Keyword arguments build an EstimatorConfig unless `config` is given.
    Returns the scalar estimate, or the MarkovEstimate / SWLZResult
    diagnostics when full_output is True.
    """
    if config is None:
        config = EstimatorConfig(
            method=method,
            mc_order=mc_order,
            stat_method=stat_method,
            policy=policy if policy is not None else ValidityPolicy(),
        )
    config.validate()
    if config.method == "Markov":
        est = _estimate_markov(event_seq, state_space, config)
        return est if full_output else est.entropy_rate
    if int(config.mc_order) != 1:
        LOGGER.info("mc_order=%s is not used by the SWLZ estimator", config.mc_order)
    return swlz_entropy_rate(event_seq, state_space, return_data=full_output, policy=config.policy)

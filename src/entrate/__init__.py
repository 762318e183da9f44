"""
Entropy-rate estimation for finite-state processes observed as one sequence.

Two independent estimators, both in bits/symbol:

Markov Functions:
- count_transitions / transition_matrix: order-m transition statistics over
  the full composite state space (unvisited rows stay all-zero)
- empirical_stationary / eigen_stationary: stationary distributions; the
  eigen estimator returns a tagged StationaryResult
- markov_entropy_rate: H = -sum pi_i P_ij log2 P_ij
- simulate_markov_chain: forward sampling seeded from the stationary law

SWLZ Functions:
- swlz_entropy_rate: log2(max_n) / mean longest-previous-match length
- match_records: per-position MatchRecords from an exact match engine

estimate_entropy_rate dispatches between the two ("Markov" | "SWLZ").
"""

from .errors import (
    EntropyRateError,
    InvalidMethod,
    InsufficientData,
    InvalidStateLabel,
    DegenerateStationaryDistribution,
    AmbiguousStationaryDistribution,
)
from .states import (
    composite_key,
    expand_state_space,
    embed_sequence,
    index_sequence,
    OrderEmbedding,
)
from .markov import (
    transition_counts,
    count_transitions,
    transition_matrix,
    empirical_stationary,
    eigen_stationary,
    StationaryResult,
    StationaryStatus,
    markov_entropy_rate,
    simulate_markov_chain,
)
from .swlz import (
    MatchRecord,
    ValidityPolicy,
    SuffixAutomatonMatcher,
    NaiveMatcher,
    SWLZResult,
    match_records,
    swlz_entropy_rate,
)
from .estimator import EstimatorConfig, MarkovEstimate, estimate_entropy_rate

__all__ = [
    "EntropyRateError",
    "InvalidMethod",
    "InsufficientData",
    "InvalidStateLabel",
    "DegenerateStationaryDistribution",
    "AmbiguousStationaryDistribution",
    "composite_key",
    "expand_state_space",
    "embed_sequence",
    "index_sequence",
    "OrderEmbedding",
    "transition_counts",
    "count_transitions",
    "transition_matrix",
    "empirical_stationary",
    "eigen_stationary",
    "StationaryResult",
    "StationaryStatus",
    "markov_entropy_rate",
    "simulate_markov_chain",
    "MatchRecord",
    "ValidityPolicy",
    "SuffixAutomatonMatcher",
    "NaiveMatcher",
    "SWLZResult",
    "match_records",
    "swlz_entropy_rate",
    "EstimatorConfig",
    "MarkovEstimate",
    "estimate_entropy_rate",
]

"""
Error taxonomy for the entropy-rate estimators.

All errors derive from EntropyRateError, itself a ValueError, so callers that
only catch ValueError for bad arguments keep working.

Numeric degeneracies of the eigen stationary estimator are normally returned
as tagged sentinel results (see markov.StationaryResult); the two stationary
errors are raised only when a caller asks for strict behaviour.
"""

from __future__ import annotations


class EntropyRateError(ValueError):
    """Base class for estimator errors."""


class InvalidMethod(EntropyRateError):
    """Unsupported estimator selector."""


class InsufficientData(EntropyRateError):
    """Sequence too short to produce a transition or a valid match record."""


class InvalidStateLabel(EntropyRateError):
    """Symbol outside the declared state space."""


class DegenerateStationaryDistribution(EntropyRateError):
    """No eigenvalue of the transition matrix is numerically equal to 1."""


class AmbiguousStationaryDistribution(EntropyRateError):
    """Several eigenvalues tie for closest to 1."""

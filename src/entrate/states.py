"""
State spaces and order-m embeddings.

An order-m Markov dependency is represented as a first-order chain over
m-tuples of base symbols:
- expand_state_space enumerates the composite states in lexicographic order
  over the base ordering, so matrices from different calls line up by index.
- embed_sequence slides an m-window over an event sequence.
- OrderEmbedding packages both as a transform acting on (sequence, alphabet).
- index_sequence maps labels to integer indices and rejects unknown labels.
"""

from __future__ import annotations
import itertools
from typing import Dict, Hashable, List, Sequence, Tuple
import numpy as np

from .errors import InvalidStateLabel

KEY_SEP = ":"


def composite_key(symbols: Sequence[Hashable]) -> str:
    """Serialize an ordered tuple of symbols, e.g. (1, 3) -> "1:3"."""
    return KEY_SEP.join(str(s) for s in symbols)


def validate_state_space(state_space: Sequence[Hashable]) -> List[Hashable]:
    """Return the state space as a list; reject empty spaces and duplicates."""
    states = list(state_space)
    if not states:
        raise ValueError("state space must contain at least one state")
    seen = set()
    for s in states:
        if s in seen:
            raise ValueError(f"duplicate state label {s!r} in state space")
        seen.add(s)
    return states


def expand_state_space(state_space: Sequence[Hashable], order: int = 1) -> List[Hashable]:
    """Enumerate the k**order composite states for an order-m embedding.

    For order 1 the base labels are returned unchanged. Otherwise the
    Cartesian product is taken with the last position varying fastest and
    each tuple is serialized with composite_key.
    """
    order = int(order)
    if order < 1:
        raise ValueError(f"embedding order must be >= 1, got {order}")
    states = validate_state_space(state_space)
    if order == 1:
        return states
    keys = [composite_key(c) for c in itertools.product(states, repeat=order)]
    if len(set(keys)) != len(keys):
        raise ValueError(
            f"state labels {states} produce colliding composite keys; "
            f"labels must not contain {KEY_SEP!r}"
        )
    return keys


def embed_sequence(event_seq: Sequence[Hashable], order: int = 1) -> List[Hashable]:
    """Slide an order-m window across event_seq (n - m + 1 keys; identity for m=1)."""
    order = int(order)
    if order < 1:
        raise ValueError(f"embedding order must be >= 1, got {order}")
    x = list(event_seq)
    if order == 1:
        return x
    return [composite_key(x[t : t + order]) for t in range(0, len(x) - order + 1)]


def index_sequence(seq: Sequence[Hashable], states: Sequence[Hashable]) -> np.ndarray:
    """Map labels to their index in states; fail on the first unknown label."""
    lookup: Dict[Hashable, int] = {s: i for i, s in enumerate(states)}
    out = np.empty(len(seq), dtype=np.int64)
    for t, s in enumerate(seq):
        try:
            out[t] = lookup[s]
        except (KeyError, TypeError):
            raise InvalidStateLabel(
                f"symbol {s!r} at position {t + 1} is not in the state space "
                f"({len(states)} states)"
            ) from None
    return out


class OrderEmbedding:
    """Order-m embedding as a transform on (sequence, alphabet) pairs."""
    def __init__(self, order: int = 1):
        self.order = int(order)
        if self.order < 1:
            raise ValueError(f"embedding order must be >= 1, got {self.order}")

    def apply(self, seq: Sequence[Hashable], alphabet: Sequence[Hashable]) -> Tuple[List[Hashable], List[Hashable]]:
        states = expand_state_space(alphabet, self.order)
        index_sequence(seq, list(alphabet))
        return embed_sequence(seq, self.order), states

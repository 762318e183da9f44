"""
Sliding-window Lempel-Ziv (SWLZ) entropy-rate estimation.

For every position i the match length L_i is the length of the longest run
starting at i that also occurs entirely inside the history x[0:i]. With
include = positions holding a valid match, max_n the (1-indexed) position of
the last of them and M the mean of their L_i, the estimate is

    H = log2(max_n) / M   bits/symbol.

Match lengths come from a MatchEngine:
- SuffixAutomatonMatcher grows a suffix automaton of the history one symbol
  at a time and carries the current match from position to position
  (L_{i+1} >= L_i - 1), giving exact lengths in amortized linear time.
- NaiveMatcher compares every earlier start directly; it is the reference
  the automaton is checked against.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Dict, Hashable, Iterator, List, NamedTuple, Optional, Protocol, Sequence, Tuple
import numpy as np

from .errors import InsufficientData
from .states import index_sequence, validate_state_space

LOGGER = logging.getLogger(__name__)


class MatchRecord(NamedTuple):
    position: int
    match_length: int
    valid: bool


@dataclass(frozen=True)
class ValidityPolicy:
    """Which match records enter the entropy estimate.

    - min_history: positions with fewer earlier symbols are invalid.
    - drop_censored: a match that runs into the end of the sequence cannot be
      confirmed maximal and is marked invalid.
    """
    min_history: int = 1
    drop_censored: bool = True

    def __post_init__(self):
        if int(self.min_history) < 1:
            raise ValueError(f"min_history must be >= 1, got {self.min_history}")

    def is_valid(self, start: int, length: int, n: int) -> bool:
        """Validity of the match of `length` symbols starting at 0-based `start`."""
        if length < 1 or start < self.min_history:
            return False
        if self.drop_censored and start + length >= n:
            return False
        return True


class MatchEngine(Protocol):
    def match_lengths(self, symbols: Sequence[Hashable]) -> np.ndarray:
        """Longest previous match length for every 0-based position."""
        ...


class SuffixAutomaton:
    """Online suffix automaton over hashable symbols."""
    def __init__(self):
        self.next: List[Dict[Hashable, int]] = [{}]
        self.link: List[int] = [-1]
        self.length: List[int] = [0]
        self.last = 0

    def __len__(self) -> int:
        return len(self.length)

    def _new_state(self, length: int, link: int, trans: Dict[Hashable, int]) -> int:
        self.next.append(trans)
        self.link.append(link)
        self.length.append(length)
        return len(self.length) - 1

    def extend(self, c: Hashable) -> Optional[Tuple[int, int]]:
        """Append symbol c. Returns (q, clone) when state q was split, else None."""
        cur = self._new_state(self.length[self.last] + 1, -1, {})
        p = self.last
        while p != -1 and c not in self.next[p]:
            self.next[p][c] = cur
            p = self.link[p]
        split = None
        if p == -1:
            self.link[cur] = 0
        else:
            q = self.next[p][c]
            if self.length[p] + 1 == self.length[q]:
                self.link[cur] = q
            else:
                clone = self._new_state(self.length[p] + 1, self.link[q], dict(self.next[q]))
                while p != -1 and self.next[p].get(c) == q:
                    self.next[p][c] = clone
                    p = self.link[p]
                self.link[q] = clone
                self.link[cur] = clone
                split = (q, clone)
        self.last = cur
        return split


class SuffixAutomatonMatcher:
    """Exact longest-previous-match lengths in amortized O(n)."""
    def match_lengths(self, symbols: Sequence[Hashable]) -> np.ndarray:
        x = list(symbols)
        n = len(x)
        out = np.zeros(n, dtype=np.int64)
        sam = SuffixAutomaton()
        # (v, l): state of the automaton spelling x[i:i+l]
        v, l = 0, 0
        for i in range(n):
            while i + l < n:
                nxt = sam.next[v].get(x[i + l])
                if nxt is None:
                    break
                v = nxt
                l += 1
            out[i] = l
            split = sam.extend(x[i])
            if split is not None and v == split[0] and l <= sam.length[split[1]]:
                v = split[1]
            if l > 0:
                l -= 1
                if l <= sam.length[sam.link[v]]:
                    v = sam.link[v]
        return out


class NaiveMatcher:
    """Direct comparison against every earlier start; quadratic or worse."""
    def match_lengths(self, symbols: Sequence[Hashable]) -> np.ndarray:
        x = list(symbols)
        n = len(x)
        out = np.zeros(n, dtype=np.int64)
        for i in range(n):
            best = 0
            for j in range(i):
                m = 0
                while i + m < n and j + m < i and x[j + m] == x[i + m]:
                    m += 1
                best = max(best, m)
            out[i] = best
        return out


def match_records(
    symbols: Sequence[Hashable],
    engine: MatchEngine | None = None,
    policy: ValidityPolicy | None = None,
) -> Iterator[MatchRecord]:
    """Yield a MatchRecord for each position (1-indexed) in order."""
    engine = engine if engine is not None else SuffixAutomatonMatcher()
    policy = policy if policy is not None else ValidityPolicy()
    x = list(symbols)
    n = len(x)
    lengths = engine.match_lengths(x)
    for i in range(n):
        L = int(lengths[i])
        yield MatchRecord(i + 1, L, policy.is_valid(i, L, n))


@dataclass(frozen=True)
class SWLZResult:
    entropy_rate: float
    max_n: int
    mean_match_length: float
    records: Tuple[MatchRecord, ...]

    @property
    def n_included(self) -> int:
        return sum(1 for r in self.records if r.valid)


def swlz_entropy_rate(
    event_seq: Sequence[Hashable],
    state_space: Sequence[Hashable] | None = None,
    return_data: bool = False,
    engine: MatchEngine | None = None,
    policy: ValidityPolicy | None = None,
) -> float | SWLZResult:
    """SWLZ entropy-rate estimate in bits/symbol.

    When state_space is given, symbols are validated and matched by their
    index in it. Raises InsufficientData when no valid match exists, the last
    included position is <= 1, or the mean match length is 0. With
    return_data=True the full SWLZResult (records included) is returned.
    """
    if state_space is not None:
        symbols: Sequence[Hashable] = index_sequence(event_seq, validate_state_space(state_space)).tolist()
    else:
        symbols = list(event_seq)
    records = tuple(match_records(symbols, engine=engine, policy=policy))
    include = [r for r in records if r.valid]
    if not include:
        raise InsufficientData(
            f"no valid match records in a sequence of length {len(records)}"
        )
    max_n = include[-1].position
    mean_len = sum(r.match_length for r in include) / len(include)
    if max_n <= 1 or mean_len == 0:
        raise InsufficientData(
            f"SWLZ estimate undefined (max_n={max_n}, mean match length={mean_len})"
        )
    H = math.log2(max_n) / mean_len
    LOGGER.debug(
        "SWLZ: n=%d included=%d max_n=%d mean_L=%.4f H=%.6g",
        len(records), len(include), max_n, mean_len, H,
    )
    if return_data:
        return SWLZResult(H, max_n, mean_len, records)
    return H

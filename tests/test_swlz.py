import math
import types
import numpy as np
import pytest
from entrate.errors import InsufficientData, InvalidStateLabel
from entrate.swlz import (
    MatchRecord,
    NaiveMatcher,
    SuffixAutomaton,
    SuffixAutomatonMatcher,
    SWLZResult,
    ValidityPolicy,
    match_records,
    swlz_entropy_rate,
)

OBS_SEQ = [1, 3, 1, 3, 1, 2, 1, 3, 2, 3, 2, 3, 3, 1, 3, 1, 3, 3, 3, 2]
OBS_LENGTHS = [0, 0, 2, 2, 1, 0, 2, 1, 1, 2, 2, 1, 4, 4, 3, 2, 2, 2, 2, 1]


class TestSuffixAutomaton:
    def test_accepts_exactly_the_substrings(self):
        text = "abcbc"
        sam = SuffixAutomaton()
        for c in text:
            sam.extend(c)
        subs = {text[i:j] for i in range(len(text)) for j in range(i + 1, len(text) + 1)}
        for s in subs:
            v = 0
            for c in s:
                v = sam.next[v][c]
        for s in ("ca", "cc", "bb", "abcbcb"):
            v = 0
            ok = True
            for c in s:
                if c not in sam.next[v]:
                    ok = False
                    break
                v = sam.next[v][c]
            assert not ok

    def test_state_count_is_linear(self):
        sam = SuffixAutomaton()
        for c in "abracadabra" * 10:
            sam.extend(c)
        assert len(sam) <= 2 * 110


class TestMatchEngines:
    def test_literal_sequence(self):
        np.testing.assert_array_equal(SuffixAutomatonMatcher().match_lengths(OBS_SEQ), OBS_LENGTHS)
        np.testing.assert_array_equal(NaiveMatcher().match_lengths(OBS_SEQ), OBS_LENGTHS)

    def test_constant_sequence(self):
        # Source must end before i: L_i = min(i, n - i)
        x = [7] * 10
        expected = [0, 1, 2, 3, 4, 5, 4, 3, 2, 1]
        np.testing.assert_array_equal(SuffixAutomatonMatcher().match_lengths(x), expected)
        np.testing.assert_array_equal(NaiveMatcher().match_lengths(x), expected)

    def test_automaton_matches_naive_on_random_sequences(self):
        rng = np.random.default_rng(42)
        sam, naive = SuffixAutomatonMatcher(), NaiveMatcher()
        for k, n in ((2, 300), (3, 250), (5, 200), (8, 150)):
            x = rng.integers(0, k, size=n).tolist()
            np.testing.assert_array_equal(sam.match_lengths(x), naive.match_lengths(x))

    def test_automaton_matches_naive_on_repetitive_sequences(self):
        sam, naive = SuffixAutomatonMatcher(), NaiveMatcher()
        for x in (
            [0, 1] * 40,
            [0, 0, 1] * 30 + [2] + [0, 0, 1] * 10,
            list("abaababaabaab" * 6),
            [1, 2, 3, 1, 2, 1, 2, 3, 3, 1] * 8,
        ):
            np.testing.assert_array_equal(sam.match_lengths(x), naive.match_lengths(x))

    def test_multi_character_labels_are_single_symbols(self):
        # Joining 10,1,0 as text would create spurious matches
        x = [10, 1, 0, 10, 1]
        np.testing.assert_array_equal(SuffixAutomatonMatcher().match_lengths(x), [0, 0, 0, 2, 1])

    def test_empty_and_single(self):
        assert len(SuffixAutomatonMatcher().match_lengths([])) == 0
        np.testing.assert_array_equal(SuffixAutomatonMatcher().match_lengths([4]), [0])

    def test_long_sequence(self):
        rng = np.random.default_rng(0)
        x = rng.integers(0, 4, size=20_000).tolist()
        L = SuffixAutomatonMatcher().match_lengths(x)
        assert L.shape == (20_000,)
        # Typical match length grows like log_k(i) for an iid source
        assert 4.0 < L[10_000:].mean() < 10.0


class TestValidityPolicy:
    def test_defaults(self):
        policy = ValidityPolicy()
        assert policy.is_valid(start=2, length=2, n=20)
        assert not policy.is_valid(start=0, length=0, n=20)
        assert not policy.is_valid(start=5, length=0, n=20)
        # Match reaching the end of the sequence is censored
        assert not policy.is_valid(start=18, length=2, n=20)

    def test_keep_censored(self):
        policy = ValidityPolicy(drop_censored=False)
        assert policy.is_valid(start=18, length=2, n=20)

    def test_min_history(self):
        policy = ValidityPolicy(min_history=3)
        assert not policy.is_valid(start=2, length=2, n=20)
        assert policy.is_valid(start=3, length=2, n=20)
        with pytest.raises(ValueError):
            ValidityPolicy(min_history=0)


def test_match_records_is_lazy_and_ordered():
    gen = match_records(OBS_SEQ)
    assert isinstance(gen, types.GeneratorType)
    records = list(gen)
    assert [r.position for r in records] == list(range(1, 21))
    assert [r.match_length for r in records] == OBS_LENGTHS
    assert records[0] == MatchRecord(1, 0, False)
    assert records[2] == MatchRecord(3, 2, True)
    assert records[5].valid is False  # symbol 2 first seen here
    assert records[17].valid is True
    assert records[18].valid is False and records[19].valid is False


def test_swlz_literal_sequence():
    H = swlz_entropy_rate(OBS_SEQ)
    assert abs(H - math.log2(18) * 15 / 31) < 1e-12


def test_swlz_return_data():
    res = swlz_entropy_rate(OBS_SEQ, return_data=True)
    assert isinstance(res, SWLZResult)
    assert res.max_n == 18
    assert res.n_included == 15
    assert abs(res.mean_match_length - 31 / 15) < 1e-12
    assert len(res.records) == len(OBS_SEQ)
    assert abs(res.entropy_rate - swlz_entropy_rate(OBS_SEQ)) < 1e-15


def test_swlz_deterministic():
    a = swlz_entropy_rate(OBS_SEQ, return_data=True)
    b = swlz_entropy_rate(list(OBS_SEQ), return_data=True)
    assert a == b
    assert a.records == b.records
    assert a.max_n == b.max_n


def test_swlz_policies():
    H = swlz_entropy_rate(OBS_SEQ, policy=ValidityPolicy(drop_censored=False))
    assert abs(H - math.log2(20) / 2.0) < 1e-12

    H = swlz_entropy_rate(OBS_SEQ, policy=ValidityPolicy(min_history=3))
    assert abs(H - math.log2(18) * 14 / 29) < 1e-12


def test_swlz_engines_agree():
    rng = np.random.default_rng(9)
    x = rng.integers(0, 3, size=400).tolist()
    h1 = swlz_entropy_rate(x, engine=SuffixAutomatonMatcher())
    h2 = swlz_entropy_rate(x, engine=NaiveMatcher())
    assert h1 == h2


def test_swlz_constant_sequence():
    res = swlz_entropy_rate([7] * 10, return_data=True)
    assert res.max_n == 5
    assert abs(res.entropy_rate - math.log2(5) / 2.5) < 1e-12


def test_swlz_state_space():
    seq = ["a", "c", "a", "c", "a", "b", "a", "c", "b", "c"]
    H_labels = swlz_entropy_rate(seq, state_space=["a", "b", "c"])
    H_raw = swlz_entropy_rate(seq)
    assert H_labels == H_raw

    with pytest.raises(InvalidStateLabel):
        swlz_entropy_rate(["a", "d"], state_space=["a", "b"])


def test_swlz_insufficient_data():
    for seq in ([], [1], [1, 2], [1, 1], [1, 2, 3, 4]):
        with pytest.raises(InsufficientData):
            swlz_entropy_rate(seq)

    # Keeping censored matches makes [1, 1] usable: max_n = 2, M = 1
    assert swlz_entropy_rate([1, 1], policy=ValidityPolicy(drop_censored=False)) == 1.0


def test_swlz_iid_estimate_near_log_k():
    # Slow convergence; only a coarse check on a uniform 4-symbol source
    rng = np.random.default_rng(1)
    x = rng.integers(0, 4, size=20_000).tolist()
    H = swlz_entropy_rate(x)
    assert 1.5 < H < 2.8

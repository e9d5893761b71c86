from __future__ import annotations

import numpy as np
from domain.stitch import MatchResult, ncc_fft_1d, ncc_scores


def _signal(n: int = 300, seed: int = 11) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return np.convolve(rng.normal(size=n + 8), np.ones(8) / 8, mode="valid")[:n]


def test_finds_template_position():
    search = _signal()
    res = ncc_fft_1d(search[37:77], search)
    assert res.offset == 37
    assert res.confidence > 0.999


def test_scores_are_bounded_and_sized():
    search = _signal()
    scores = ncc_scores(search[100:140], search)
    assert scores.shape == (300 - 40 + 1,)
    assert scores.max() <= 1.0 and scores.min() >= -1.0
    assert int(np.argmax(scores)) == 100


def test_invariant_to_gain_and_bias():
    search = _signal()
    template = search[210:250] * 3.0 + 40.0
    assert ncc_fft_1d(template, search).offset == 210


def test_flat_windows_score_zero():
    search = np.concatenate([np.full(60, 5.0), _signal(100)])
    scores = ncc_scores(_signal(100)[:20], search)
    assert np.all(scores[:41] == 0.0)


def test_degenerate_inputs():
    assert ncc_fft_1d(np.array([]), _signal()) == MatchResult(offset=0, confidence=0.0)
    assert ncc_fft_1d(_signal(50), _signal(20)) == MatchResult(offset=0, confidence=0.0)
    assert ncc_scores(np.ones(5), np.ones(3)).size == 0

"""Frequency-domain normalized cross-correlation for 1-D signals.

Used as an alternative matching kernel for the scroll detector: instead of
scoring every candidate offset with a strip SAD, the per-row luminance
profile of the reference strip is correlated against the candidate frame's
profile in one FFT pass.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

__all__ = ["MatchResult", "ncc_scores", "ncc_fft_1d"]


@dataclass(frozen=True)
class MatchResult:
    offset: int
    confidence: float  # 0.0 .. 1.0


def _next_pow2(n: int) -> int:
    return 1 << max(n - 1, 0).bit_length()


def ncc_scores(template: np.ndarray, search: np.ndarray) -> np.ndarray:
    """Zero-mean NCC of ``template`` at every valid position inside ``search``.

    Returns an array of length ``len(search) - len(template) + 1`` with values
    in [-1, 1]; index ``i`` scores ``search[i : i + len(template)]``. Flat
    windows (no variance) score 0.
    """
    t = np.asarray(template, dtype=np.float64).ravel()
    s = np.asarray(search, dtype=np.float64).ravel()
    m, n = t.size, s.size
    if m == 0 or m > n:
        return np.empty(0, dtype=np.float64)

    t0 = t - t.mean()
    size = _next_pow2(n + m - 1)

    # correlation == convolution with the time-reversed template
    spectrum = np.fft.rfft(t0[::-1], size) * np.fft.rfft(s, size)
    corr = np.fft.irfft(spectrum, size)[m - 1 : n]

    c1 = np.concatenate(([0.0], np.cumsum(s)))
    c2 = np.concatenate(([0.0], np.cumsum(s * s)))
    win_sum = c1[m:] - c1[:-m]
    win_sq = c2[m:] - c2[:-m]
    win_var = np.maximum(win_sq - win_sum * win_sum / m, 0.0)

    denom = np.sqrt(win_var * float(np.dot(t0, t0)))
    safe = np.where(denom > 1e-9, denom, 1.0)
    scores = np.where(denom > 1e-9, corr / safe, 0.0)
    return np.clip(scores, -1.0, 1.0)


def ncc_fft_1d(template: np.ndarray, search: np.ndarray) -> MatchResult:
    """Best position of ``template`` within ``search`` plus its confidence."""
    scores = ncc_scores(template, search)
    if scores.size == 0:
        return MatchResult(offset=0, confidence=0.0)
    idx = int(np.argmax(scores))
    return MatchResult(offset=idx, confidence=float(np.clip(scores[idx], 0.0, 1.0)))

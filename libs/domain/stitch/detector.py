# libs/domain/stitch/detector.py
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Final, Literal

import numpy as np
from ports.input import Sign
from ports.vision import Raster

from .ncc import ncc_scores

LOG: Final = logging.getLogger("stitch.detector")

Kernel = Literal["sad", "ncc"]


@dataclass(frozen=True)
class DetectorParams:
    min_height: int = 40
    strip_height: int = 40
    search_ceiling: int = 300
    min_delta: int = 10
    coarse_step: int = 8
    refine_radius: int = 8
    column_step: int = 2
    # averages are per strip pixel (w * strip_height) on a 0..255 luma scale
    identical_threshold: float = 5.0
    improvement_ratio: float = 2.0
    match_ceiling: float = 30.0
    verify_ceiling: float = 40.0
    kernel: Kernel = "sad"


class DeltaDetector:
    """Measures the vertical scroll between two equal-sized frames.

    ``detect`` returns 0 for "no scroll" and otherwise a signed pixel offset:
    positive when the candidate reveals content below the reference (a row
    at ``y`` in the reference sits at ``y - offset`` in the candidate),
    negative for content above.
    """

    def __init__(self, params: DetectorParams | None = None) -> None:
        self.params = params or DetectorParams()

    def detect(
        self,
        reference: Raster,
        candidate: Raster,
        expected_direction: Sign | None = None,
        max_magnitude: int | None = None,
    ) -> int:
        p = self.params
        if reference.size() != candidate.size():
            return 0
        w, h = reference.size()
        if h < max(p.min_height, p.strip_height):
            return 0

        prev = reference.luminance
        curr = candidate.luminance
        template_y = h // 2 - p.strip_height // 2
        pixel_count = float(w * p.strip_height)

        baseline = self._strip_sad(prev, curr, template_y, template_y) / pixel_count
        if baseline < p.identical_threshold:
            return 0

        search_range = min(h // 2, p.search_ceiling)
        if max_magnitude is not None:
            search_range = min(search_range, int(max_magnitude))
        if search_range < p.min_delta:
            return 0

        directions: tuple[int, ...] = (1, -1) if expected_direction is None else (expected_direction,)
        if p.kernel == "ncc":
            found = self._search_ncc(prev, curr, template_y, search_range, directions)
        else:
            found = self._search_sad(prev, curr, template_y, search_range, directions)
        if found is None:
            return 0
        offset, score = found

        match_avg = score / pixel_count
        improvement = baseline / max(match_avg, 0.001)
        if improvement < p.improvement_ratio or match_avg > p.match_ceiling:
            LOG.debug(
                "reject offset=%d: baseline=%.2f match=%.2f improvement=%.2f",
                offset,
                baseline,
                match_avg,
                improvement,
            )
            return 0

        verify_avg = self._verify(prev, curr, template_y, offset) / pixel_count
        if verify_avg > p.verify_ceiling:
            LOG.debug("reject offset=%d: verify strip avg %.2f", offset, verify_avg)
            return 0
        return offset

    # --- scoring ------------------------------------------------------------

    def _strip_sad(self, prev: np.ndarray, curr: np.ndarray, prev_y: int, curr_y: int) -> float:
        sh, step = self.params.strip_height, self.params.column_step
        a = prev[prev_y : prev_y + sh, ::step]
        b = curr[curr_y : curr_y + sh, ::step]
        return float(np.abs(a - b).sum(dtype=np.float64))

    def _score(self, prev: np.ndarray, curr: np.ndarray, template_y: int, offset: int) -> float | None:
        curr_y = template_y - offset
        if curr_y < 0 or curr_y + self.params.strip_height > curr.shape[0]:
            return None
        return self._strip_sad(prev, curr, template_y, curr_y)

    def _search_sad(
        self,
        prev: np.ndarray,
        curr: np.ndarray,
        template_y: int,
        search_range: int,
        directions: Iterable[int],
    ) -> tuple[int, float] | None:
        p = self.params
        directions = tuple(directions)
        best: tuple[int, float] | None = None

        for mag in range(p.min_delta, search_range + 1, p.coarse_step):
            for sign in directions:
                score = self._score(prev, curr, template_y, sign * mag)
                if score is not None and (best is None or score < best[1]):
                    best = (sign * mag, score)
        if best is None:
            return None

        sign = 1 if best[0] > 0 else -1
        lo = max(abs(best[0]) - p.refine_radius, p.min_delta)
        hi = min(abs(best[0]) + p.refine_radius, search_range)
        for mag in range(lo, hi + 1):
            score = self._score(prev, curr, template_y, sign * mag)
            if score is not None and score < best[1]:
                best = (sign * mag, score)
        return best

    def _search_ncc(
        self,
        prev: np.ndarray,
        curr: np.ndarray,
        template_y: int,
        search_range: int,
        directions: Iterable[int],
    ) -> tuple[int, float] | None:
        p = self.params
        h = curr.shape[0]
        step = p.column_step
        prev_profile = prev[:, ::step].mean(axis=1)
        curr_profile = curr[:, ::step].mean(axis=1)

        template = prev_profile[template_y : template_y + p.strip_height]
        band_start = max(0, template_y - search_range)
        band_end = min(h, template_y + search_range + p.strip_height)
        scores = ncc_scores(template, curr_profile[band_start:band_end])
        if scores.size == 0:
            return None

        offsets = template_y - (band_start + np.arange(scores.size))
        mags = np.abs(offsets)
        valid = (mags >= p.min_delta) & (mags <= search_range)
        valid &= np.isin(np.sign(offsets), list(directions))
        if not valid.any():
            return None
        idx = int(np.argmax(np.where(valid, scores, -np.inf)))
        offset = int(offsets[idx])
        score = self._score(prev, curr, template_y, offset)
        if score is None:
            return None
        return offset, score

    def _verify(self, prev: np.ndarray, curr: np.ndarray, template_y: int, offset: int) -> float:
        """SAD of a second, independent band at the proposed offset."""
        sh = self.params.strip_height
        h = curr.shape[0]
        if offset > 0:
            curr_y = max(0, min(h // 4, template_y - sh))
        else:
            curr_y = min(h - sh, max(h * 3 // 4, template_y + sh))
        prev_y = min(max(curr_y + offset, 0), h - sh)
        return self._strip_sad(prev, curr, prev_y, curr_y)


_default = DeltaDetector()


def detect(
    reference: Raster,
    candidate: Raster,
    expected_direction: Sign | None = None,
    max_magnitude: int | None = None,
) -> int:
    """Module-level shortcut using the default thresholds."""
    return _default.detect(reference, candidate, expected_direction, max_magnitude)

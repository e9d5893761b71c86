from . import finisher
from .detector import DeltaDetector, DetectorParams, detect
from .ncc import MatchResult, ncc_fft_1d, ncc_scores
from .preview import PREVIEW_MAX_HEIGHT, encode_data_url, make_preview, to_image
from .stitcher import stitch

__all__ = [
    "DeltaDetector",
    "DetectorParams",
    "detect",
    "MatchResult",
    "ncc_fft_1d",
    "ncc_scores",
    "stitch",
    "finisher",
    "PREVIEW_MAX_HEIGHT",
    "make_preview",
    "encode_data_url",
    "to_image",
]

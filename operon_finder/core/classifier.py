#!/usr/bin/env python3

"""
Threshold classification of transcripts and transcript pairs.

All comparisons are inclusive (>=) so boundary values are deterministic.
"""

import statistics
from typing import List, Tuple

from .config import BASELINE_METHODS, OperonConfig
from .data_structures import Transcript, OverlapResult, TranscriptStatus
from .exceptions import ConfigurationError


def baseline_coverage(transcripts: List[Transcript], method: str = 'unit') -> float:
    """
    Reference coverage that the threshold multiplier is applied to.

    'unit' is a fixed 1.0 (the threshold is then an absolute coverage floor);
    'median' and 'mean' are taken over the given transcripts.
    """
    if method not in BASELINE_METHODS:
        raise ConfigurationError(f"Unknown baseline method: {method}")
    if method == 'unit':
        return 1.0
    coverages = [t.coverage for t in transcripts]
    if not coverages:
        return 0.0
    if method == 'median':
        return float(statistics.median(coverages))
    return float(statistics.fmean(coverages))


class ThresholdClassifier:
    """Decide eligibility of transcripts and containment of pairs."""

    def __init__(self, config: OperonConfig):
        self.coverage_threshold = config.coverage_threshold
        self.min_overlap = config.min_overlap
        self.bp_overlap = config.bp_overlap
        self.baseline_method = config.baseline_method

    def minimum_coverage(self, baseline: float) -> float:
        return self.coverage_threshold * baseline

    def is_eligible(self, transcript: Transcript, baseline: float) -> bool:
        return transcript.coverage >= self.minimum_coverage(baseline)

    def split_eligible(self, transcripts: List[Transcript]) -> Tuple[float, List[Transcript], List[Transcript]]:
        """
        Partition a bucket into eligible and excluded transcripts.

        Returns:
            (baseline, eligible, excluded); statuses are updated in place
        """
        baseline = baseline_coverage(transcripts, self.baseline_method)
        eligible, excluded = [], []
        for transcript in transcripts:
            if self.is_eligible(transcript, baseline):
                transcript.status = TranscriptStatus.ELIGIBLE
                eligible.append(transcript)
            else:
                transcript.status = TranscriptStatus.EXCLUDED
                excluded.append(transcript)
        return baseline, eligible, excluded

    def is_contained(self, overlap: OverlapResult) -> bool:
        """Both the bp and the fractional overlap must reach their minimum."""
        return (overlap.overlap_bp >= self.bp_overlap and
                overlap.overlap_fraction >= self.min_overlap)

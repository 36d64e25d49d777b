#!/usr/bin/env python3

"""
Exonic overlap between neighbouring transcripts of one bucket.
"""

from typing import Iterator, List, Sequence

from intervaltree import IntervalTree

from .data_structures import Exon, Transcript, OverlapResult


def exon_overlap_bp(exons_a: Sequence[Exon], exons_b: Sequence[Exon]) -> int:
    """Total shared length of two sorted, non-overlapping exon lists."""
    total = 0
    i = j = 0
    while i < len(exons_a) and j < len(exons_b):
        a, b = exons_a[i], exons_b[j]
        total += a.overlap_length(b)
        # Advance whichever exon ends first
        if a.end < b.end:
            i += 1
        else:
            j += 1
    return total


def compute_overlap(a: Transcript, b: Transcript, index_a: int = -1, index_b: int = -1) -> OverlapResult:
    """
    Exonic overlap of two transcripts.

    The fraction is taken relative to the shorter exonic length; a zero
    shorter length yields 0.0.
    """
    overlap_bp = exon_overlap_bp(a.exons, b.exons)
    shorter = min(a.exonic_length, b.exonic_length)
    fraction = overlap_bp / shorter if shorter > 0 else 0.0
    return OverlapResult(
        transcript_a=a.id,
        transcript_b=b.id,
        overlap_bp=overlap_bp,
        overlap_fraction=min(fraction, 1.0),
        index_a=index_a,
        index_b=index_b,
    )


class OverlapEngine:
    """Compare each transcript with the later transcripts inside its candidate window."""

    def __init__(self, transcripts: List[Transcript]):
        # Must already be sorted by (start, end, id)
        self.transcripts = transcripts
        self.tree = IntervalTree()
        for index, transcript in enumerate(transcripts):
            # IntervalTree is half-open; GTF ends are inclusive
            self.tree.addi(transcript.start, transcript.end + 1, index)

    def candidates(self, index: int) -> List[int]:
        """Later positions whose start is <= the end of transcript `index`."""
        transcript = self.transcripts[index]
        hits = self.tree.overlap(transcript.start, transcript.end + 1)
        return sorted(interval.data for interval in hits if interval.data > index)

    def iter_overlaps(self) -> Iterator[OverlapResult]:
        """Yield an OverlapResult for every candidate pair, in sort order."""
        for i, transcript in enumerate(self.transcripts):
            for j in self.candidates(i):
                yield compute_overlap(transcript, self.transcripts[j], i, j)

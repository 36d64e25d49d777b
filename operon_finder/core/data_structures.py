#!/usr/bin/env python3

"""
Core data structures for the operon finder.

Defines the data classes for exons, transcripts, (chromosome, strand)
buckets, pairwise overlap results and operon groups.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple


VALID_STRANDS = ('+', '-')


class TranscriptStatus(Enum):
    """Lifecycle of a transcript during a run."""
    PARSED = 'parsed'
    BUCKETED = 'bucketed'
    ELIGIBLE = 'eligible'
    EXCLUDED = 'excluded'
    MERGED = 'merged'
    SINGLETON = 'singleton'


class GroupKind(Enum):
    OPERON = 'operon'
    SINGLETON = 'singleton'


@dataclass
class Exon:
    """Represents an exon (1-based GTF coordinates)."""
    start: int
    end: int

    def __post_init__(self):
        """Validate exon data after initialization."""
        if self.start > self.end:
            raise ValueError(f"Invalid exon coordinates: {self.start}-{self.end}")

    @property
    def length(self) -> int:
        """Distance covered by the exon, measured between its coordinates."""
        return self.end - self.start

    def overlap_length(self, other: 'Exon') -> int:
        """Length shared with another exon (0 when disjoint or touching)."""
        return max(0, min(self.end, other.end) - max(self.start, other.start))


def merge_intervals(intervals: List[Tuple[int, int]]) -> List[Tuple[int, int]]:
    """Merge overlapping (start, end) intervals into a sorted disjoint list."""
    merged: List[Tuple[int, int]] = []
    for start, end in sorted(intervals):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


@dataclass
class Transcript:
    """Represents a transcript with its exons and expression metrics."""
    id: str
    chrom: str
    strand: str
    start: int
    end: int
    coverage: float
    fpkm: float
    exons: List[Exon] = field(default_factory=list)
    gene_id: str = ""
    line_number: int = 0
    raw_lines: List[str] = field(default_factory=list)
    status: TranscriptStatus = TranscriptStatus.PARSED

    def __post_init__(self):
        """Validate transcript data after initialization."""
        if self.start > self.end:
            raise ValueError(f"Invalid transcript coordinates: {self.start}-{self.end}")
        if self.strand not in VALID_STRANDS:
            raise ValueError(f"Invalid strand: {self.strand}")
        if not self.id:
            raise ValueError("Transcript ID cannot be empty")

    @property
    def length(self) -> int:
        """Get genomic span length."""
        return self.end - self.start

    @property
    def exon_count(self) -> int:
        return len(self.exons)

    @property
    def exonic_length(self) -> int:
        """Get total length of all exons."""
        return sum(exon.length for exon in self.exons)

    @property
    def bucket_key(self) -> Tuple[str, str]:
        return self.chrom, self.strand

    @property
    def sort_key(self) -> Tuple[int, int, str]:
        return self.start, self.end, self.id

    def add_exon(self, exon: Exon) -> None:
        self.exons.append(exon)

    def normalize_exons(self) -> bool:
        """
        Sort exons and merge any that overlap, then widen the span to cover them.

        Returns:
            True if overlapping or duplicate exons had to be merged
        """
        before = len(self.exons)
        self.exons = [Exon(s, e) for s, e in merge_intervals([(x.start, x.end) for x in self.exons])]
        if self.exons:
            self.start = min(self.start, self.exons[0].start)
            self.end = max(self.end, max(exon.end for exon in self.exons))
        return len(self.exons) != before


@dataclass
class ChromosomeStrandBucket:
    """Transcripts of one (chromosome, strand) pair, ordered by start, end, id."""
    chrom: str
    strand: str
    transcripts: List[Transcript] = field(default_factory=list)

    @property
    def key(self) -> Tuple[str, str]:
        return self.chrom, self.strand

    def __len__(self) -> int:
        return len(self.transcripts)

    def sort(self) -> None:
        self.transcripts.sort(key=lambda t: t.sort_key)


@dataclass(frozen=True)
class OverlapResult:
    """Exonic overlap between two transcripts of the same bucket."""
    transcript_a: str
    transcript_b: str
    overlap_bp: int
    overlap_fraction: float
    index_a: int = -1
    index_b: int = -1


@dataclass
class OperonGroup:
    """A set of co-operonic transcripts; read-only once finalized."""
    chrom: str
    strand: str
    group_id: str = ""
    members: List[Transcript] = field(default_factory=list)
    start: Optional[int] = None
    end: Optional[int] = None
    finalized: bool = False
    _member_ids: Set[str] = field(default_factory=set, init=False, repr=False, compare=False)

    def __post_init__(self):
        self._member_ids = {member.id for member in self.members}

    def add_member(self, transcript: Transcript) -> None:
        """Grow the group by one transcript."""
        if self.finalized:
            raise ValueError(f"Operon group {self.group_id or '<unnamed>'} is finalized")
        if transcript.bucket_key != (self.chrom, self.strand):
            raise ValueError(
                f"Transcript {transcript.id} on {transcript.chrom}{transcript.strand} "
                f"cannot join a group on {self.chrom}{self.strand}"
            )
        if transcript.id in self._member_ids:
            raise ValueError(f"Transcript {transcript.id} already belongs to this group")

        self.members.append(transcript)
        self._member_ids.add(transcript.id)
        self.start = transcript.start if self.start is None else min(self.start, transcript.start)
        self.end = transcript.end if self.end is None else max(self.end, transcript.end)

    def finalize(self) -> None:
        if not self.members:
            raise ValueError("Cannot finalize an empty operon group")
        self.members.sort(key=lambda t: t.sort_key)
        self.finalized = True

    @property
    def kind(self) -> GroupKind:
        return GroupKind.OPERON if len(self.members) > 1 else GroupKind.SINGLETON

    @property
    def member_ids(self) -> List[str]:
        return [member.id for member in self.members]

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def exons(self) -> List[Tuple[int, int]]:
        """Union of the members' exonic structure as merged intervals."""
        return merge_intervals([(exon.start, exon.end) for member in self.members for exon in member.exons])

    @property
    def container_id(self) -> str:
        """Member with the widest genomic span (earliest start on ties)."""
        if not self.members:
            return ""
        return max(self.members, key=lambda t: (t.length, -t.start, t.id)).id

    @property
    def sort_key(self) -> Tuple[int, int, str]:
        return self.start, self.end, self.members[0].id if self.members else ""


@dataclass
class BucketResult:
    """Outcome of overlap, classification and clustering for one bucket."""
    chrom: str
    strand: str
    baseline_coverage: float
    groups: List[OperonGroup] = field(default_factory=list)
    excluded: List[Transcript] = field(default_factory=list)
    pairs_evaluated: int = 0
    contained_pairs: int = 0

    @property
    def key(self) -> Tuple[str, str]:
        return self.chrom, self.strand

    @property
    def operon_count(self) -> int:
        return sum(1 for group in self.groups if group.kind is GroupKind.OPERON)

    def statuses(self) -> Dict[str, TranscriptStatus]:
        """Terminal status of every transcript in the bucket."""
        status = {t.id: TranscriptStatus.EXCLUDED for t in self.excluded}
        for group in self.groups:
            terminal = TranscriptStatus.MERGED if group.kind is GroupKind.OPERON else TranscriptStatus.SINGLETON
            for member in group.members:
                status[member.id] = terminal
        return status


@dataclass
class OperonResult:
    """Combined result of a run, handed to the output writers."""
    groups: List[OperonGroup] = field(default_factory=list)
    excluded: List[Transcript] = field(default_factory=list)
    buckets: List[BucketResult] = field(default_factory=list)
    skipped_summary: Dict[str, int] = field(default_factory=dict)
    transcript_count: int = 0

    @property
    def operons(self) -> List[OperonGroup]:
        return [group for group in self.groups if group.kind is GroupKind.OPERON]

    @property
    def singletons(self) -> List[OperonGroup]:
        return [group for group in self.groups if group.kind is GroupKind.SINGLETON]

    def operon_size_summary(self) -> Dict[str, int]:
        """Count operons by number of member transcripts."""
        summary = {'2 genes': 0, '3 genes': 0, '4 genes': 0, '5 genes': 0, '>5 genes': 0}
        for group in self.operons:
            if group.member_count > 5:
                summary['>5 genes'] += 1
            else:
                summary[f'{group.member_count} genes'] += 1
        return summary

#!/usr/bin/env python3

"""
Operon clustering.

Contained pairs are edges between bucket positions; connected components of
that implicit graph become operon groups.
"""

import logging
from typing import Dict, Iterable, List, Tuple

from .classifier import ThresholdClassifier
from .config import OperonConfig
from .data_structures import (
    ChromosomeStrandBucket, Transcript, OperonGroup, BucketResult, GroupKind, TranscriptStatus
)
from .overlap import OverlapEngine


class DisjointSet:
    """Union-find over the indices 0..n-1 with path compression and union by rank."""

    def __init__(self, size: int):
        self.parent = list(range(size))
        self.rank = [0] * size

    def find(self, x: int) -> int:
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, a: int, b: int) -> bool:
        """Merge the sets of a and b; returns False if they were already joined."""
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return False
        if self.rank[ra] < self.rank[rb]:
            ra, rb = rb, ra
        self.parent[rb] = ra
        if self.rank[ra] == self.rank[rb]:
            self.rank[ra] += 1
        return True

    def components(self) -> List[List[int]]:
        """Index groups, each sorted, ordered by their smallest index."""
        groups: Dict[int, List[int]] = {}
        for index in range(len(self.parent)):
            groups.setdefault(self.find(index), []).append(index)
        return sorted(groups.values(), key=lambda members: members[0])


class OperonClusterer:
    """Build operon groups for one (chromosome, strand) bucket."""

    def __init__(self, config: OperonConfig):
        self.config = config
        self.classifier = ThresholdClassifier(config)

    def cluster_bucket(self, bucket: ChromosomeStrandBucket) -> BucketResult:
        baseline, eligible, excluded = self.classifier.split_eligible(bucket.transcripts)
        result = BucketResult(
            chrom=bucket.chrom,
            strand=bucket.strand,
            baseline_coverage=baseline,
            excluded=excluded,
        )

        # Eligible transcripts keep the bucket order, so indices are sort positions
        engine = OverlapEngine(eligible)
        edges: List[Tuple[int, int]] = []
        for overlap in engine.iter_overlaps():
            result.pairs_evaluated += 1
            if self.classifier.is_contained(overlap):
                edges.append((overlap.index_a, overlap.index_b))
        result.contained_pairs = len(edges)

        result.groups = self.build_groups(bucket.chrom, bucket.strand, eligible, edges)
        return result

    def build_groups(self, chrom: str, strand: str, transcripts: List[Transcript],
                     edges: Iterable[Tuple[int, int]]) -> List[OperonGroup]:
        """Connected components of `edges` over `transcripts` as finalized groups."""
        disjoint_set = DisjointSet(len(transcripts))
        for a, b in edges:
            disjoint_set.union(a, b)

        groups = []
        for component in disjoint_set.components():
            group = OperonGroup(chrom=chrom, strand=strand)
            for index in component:
                group.add_member(transcripts[index])
            group.finalize()

            terminal = TranscriptStatus.MERGED if group.kind is GroupKind.OPERON else TranscriptStatus.SINGLETON
            for member in group.members:
                member.status = terminal
            groups.append(group)

        groups.sort(key=lambda g: g.sort_key)
        return groups


def process_bucket(bucket: ChromosomeStrandBucket, config: OperonConfig) -> BucketResult:
    """Classify and cluster one bucket; safe to run in a worker process."""
    logging.info(f"Processing chromosome {bucket.chrom} strand {bucket.strand} ({len(bucket)} transcripts)...")
    result = OperonClusterer(config).cluster_bucket(bucket)
    logging.info(f"Chromosome {bucket.chrom} strand {bucket.strand}: {result.operon_count} putative operons, "
                 f"{len(result.excluded)} excluded transcripts")
    return result

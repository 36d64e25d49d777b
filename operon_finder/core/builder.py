#!/usr/bin/env python3

"""
Transcript model building.

Assembles parsed fragments into Transcript objects and partitions them into
(chromosome, strand) buckets ordered by start, end and identifier.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Tuple

from .data_structures import Transcript, Exon, ChromosomeStrandBucket, TranscriptStatus
from .diagnostics import DiagnosticsCollector
from .exceptions import MalformedRecordError, OrphanExonError
from .parsers import GTFRecord


class TranscriptModelBuilder:
    """Aggregate exon and transcript fragments under their transcript id."""

    def __init__(self, diagnostics: DiagnosticsCollector):
        self.diagnostics = diagnostics
        self.transcripts: Dict[str, Transcript] = {}
        self.pending_exons: Dict[str, List[GTFRecord]] = defaultdict(list)

    def add_record(self, record: GTFRecord) -> None:
        if record.is_transcript:
            self._add_transcript(record)
        elif record.is_exon:
            # Exons may precede their transcript line, so attach them in build()
            self.pending_exons[record.transcript_id].append(record)

    def _add_transcript(self, record: GTFRecord) -> None:
        if record.transcript_id in self.transcripts:
            first = self.transcripts[record.transcript_id]
            self.diagnostics.add(MalformedRecordError(
                f"duplicate declaration of transcript {record.transcript_id} "
                f"(first declared at line {first.line_number})",
                line_number=record.line_number,
                transcript_id=record.transcript_id,
            ))
            return

        self.transcripts[record.transcript_id] = Transcript(
            id=record.transcript_id,
            chrom=record.chrom,
            strand=record.strand,
            start=record.start,
            end=record.end,
            coverage=record.coverage,
            fpkm=record.fpkm,
            gene_id=record.gene_id,
            line_number=record.line_number,
            raw_lines=[record.raw_line],
        )

    def _attach_exons(self) -> None:
        for transcript_id, exon_records in self.pending_exons.items():
            transcript = self.transcripts.get(transcript_id)
            if transcript is None:
                first_line = min(r.line_number for r in exon_records)
                self.diagnostics.add(OrphanExonError(
                    f"{len(exon_records)} exon(s) reference undeclared transcript {transcript_id}",
                    transcript_id=transcript_id,
                    line_number=first_line,
                    exon_count=len(exon_records),
                ))
                continue

            for record in sorted(exon_records, key=lambda r: r.line_number):
                if (record.chrom, record.strand) != transcript.bucket_key:
                    self.diagnostics.add(MalformedRecordError(
                        f"exon on {record.chrom}{record.strand} does not match transcript "
                        f"{transcript_id} on {transcript.chrom}{transcript.strand}",
                        line_number=record.line_number,
                        transcript_id=transcript_id,
                    ))
                    continue
                transcript.add_exon(Exon(record.start, record.end))
                transcript.raw_lines.append(record.raw_line)

        self.pending_exons.clear()

    def build(self) -> List[ChromosomeStrandBucket]:
        """
        Finish the model and return buckets in (chromosome, strand) order.

        Every returned transcript has sorted, non-overlapping exons and is
        marked as bucketed.
        """
        self._attach_exons()

        buckets: Dict[Tuple[str, str], ChromosomeStrandBucket] = {}
        for transcript in self.transcripts.values():
            if transcript.normalize_exons():
                logging.debug(f"Merged overlapping exons of transcript {transcript.id}")
            if not transcript.exons:
                logging.debug(f"Transcript {transcript.id} has no exons")

            key = transcript.bucket_key
            if key not in buckets:
                buckets[key] = ChromosomeStrandBucket(chrom=key[0], strand=key[1])
            buckets[key].transcripts.append(transcript)
            transcript.status = TranscriptStatus.BUCKETED

        ordered = [buckets[key] for key in sorted(buckets)]
        for bucket in ordered:
            bucket.sort()

        logging.info(f"Built {len(self.transcripts)} transcripts in {len(ordered)} chromosome/strand buckets")
        return ordered

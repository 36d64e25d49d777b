#!/usr/bin/env python3

"""
GTF record parsing.

Turns raw annotation lines into typed transcript/exon fragments. Record-level
problems raise a ParseError subclass carrying the line number; the caller
decides whether to skip and continue.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from .data_structures import VALID_STRANDS
from .diagnostics import DiagnosticsCollector
from .exceptions import ParseError, MalformedRecordError, MissingExpressionDataError


TRANSCRIPT_FEATURE = 'transcript'
EXON_FEATURE = 'exon'


@dataclass
class GTFRecord:
    """One parsed GTF line."""
    line_number: int
    chrom: str
    source: str
    feature: str
    start: int
    end: int
    strand: str
    transcript_id: str
    attributes: Dict[str, str] = field(default_factory=dict)
    coverage: Optional[float] = None
    fpkm: Optional[float] = None
    raw_line: str = ""

    @property
    def gene_id(self) -> str:
        return self.attributes.get('gene_id', '')

    @property
    def is_transcript(self) -> bool:
        return self.feature == TRANSCRIPT_FEATURE

    @property
    def is_exon(self) -> bool:
        return self.feature == EXON_FEATURE


def parse_gtf_attributes(attr_string: str) -> Dict[str, str]:
    """Parse a GTF attribute column of `key "value";` pairs."""
    attributes = {}
    for attr in attr_string.split(';'):
        attr = attr.strip()
        if not attr:
            continue
        parts = attr.split(None, 1)
        key = parts[0]
        value = parts[1].strip() if len(parts) > 1 else ''
        if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
            value = value[1:-1]
        # First occurrence wins for repeated keys (e.g. tag)
        attributes.setdefault(key, value)
    return attributes


class GTFRecordParser:
    """Parse GTF lines with O(n) complexity."""

    def __init__(self, file_path: str = ""):
        self.file_path = file_path

    def parse_line(self, line: str, line_number: int = 0) -> Optional[GTFRecord]:
        """
        Parse one GTF line.

        Returns:
            GTFRecord, or None for blank and comment lines

        Raises:
            MalformedRecordError: missing fields or unusable coordinates/strand
            MissingExpressionDataError: transcript line without cov or FPKM
        """
        line = line.rstrip('\r\n')
        if not line.strip() or line.startswith('#'):
            return None

        parts = line.split('\t')
        if len(parts) != 9:
            raise self._malformed(f"expected 9 tab-separated fields, found {len(parts)}", line_number)

        chrom, source, feature, start, end, score, strand, frame, attr_string = parts
        chrom, feature, strand = chrom.strip(), feature.strip(), strand.strip()

        if not chrom:
            raise self._malformed("missing chromosome", line_number)
        if not feature:
            raise self._malformed("missing feature type", line_number)

        try:
            start, end = int(start), int(end)
        except ValueError:
            raise self._malformed(f"non-numeric coordinates: {start!r}-{end!r}", line_number)

        if start < 1:
            raise self._malformed(f"coordinates must be positive: {start}-{end}", line_number)
        if start > end:
            raise self._malformed(f"start is after end: {start}-{end}", line_number)
        if strand not in VALID_STRANDS:
            raise self._malformed(f"invalid or missing strand: {strand!r}", line_number)

        attributes = parse_gtf_attributes(attr_string)
        transcript_id = attributes.get('transcript_id', '')

        record = GTFRecord(
            line_number=line_number,
            chrom=chrom,
            source=source,
            feature=feature,
            start=start,
            end=end,
            strand=strand,
            transcript_id=transcript_id,
            attributes=attributes,
            raw_line=line,
        )

        if record.is_transcript or record.is_exon:
            if not transcript_id:
                raise self._malformed(f"{feature} line has no transcript_id", line_number)
            if record.is_transcript:
                record.coverage = self._expression_value(attributes, 'cov', line_number, transcript_id)
                record.fpkm = self._expression_value(attributes, 'FPKM', line_number, transcript_id)

        return record

    def parse_file(self, diagnostics: DiagnosticsCollector) -> Iterator[GTFRecord]:
        """
        Yield transcript and exon records from the whole file.

        Bad lines are handed to the diagnostics collector and skipped;
        other feature types are counted and ignored.
        """
        logging.info(f"Parsing GTF file: {self.file_path}")

        try:
            with open(self.file_path, 'r') as f:
                for line_number, line in enumerate(f, 1):
                    try:
                        record = self.parse_line(line, line_number)
                    except ParseError as e:
                        e.filename = self.file_path
                        diagnostics.add(e)
                        continue

                    if record is None:
                        continue
                    if record.is_transcript or record.is_exon:
                        yield record
                    else:
                        diagnostics.ignore_feature(record.feature)
        except FileNotFoundError:
            raise ParseError(f"GTF file not found: {self.file_path}")
        except OSError as e:
            raise ParseError(f"Cannot read GTF file: {e}", self.file_path)
        except UnicodeDecodeError as e:
            raise ParseError(f"GTF file is not valid text: {e}", self.file_path)

    def _expression_value(self, attributes: Dict[str, str], name: str,
                          line_number: int, transcript_id: str) -> float:
        """Look up an expression attribute by case-insensitive name and parse it."""
        lowered = name.lower()
        value = next((v for k, v in attributes.items() if k.lower() == lowered), None)
        if value is None or value == '':
            raise MissingExpressionDataError(
                f"transcript {transcript_id} has no {name} attribute",
                self.file_path, line_number, transcript_id,
            )
        try:
            return float(value)
        except ValueError:
            raise MalformedRecordError(
                f"transcript {transcript_id} has non-numeric {name}: {value!r}",
                self.file_path, line_number, transcript_id,
            )

    def _malformed(self, message: str, line_number: int) -> MalformedRecordError:
        return MalformedRecordError(message, self.file_path, line_number)

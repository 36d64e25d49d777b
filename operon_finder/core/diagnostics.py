#!/usr/bin/env python3

"""
Collector for skipped-record diagnostics.

Record-level errors are handed to a DiagnosticsCollector instead of being
written anywhere, so the caller decides how to report them.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List

from .exceptions import ParseError


@dataclass(frozen=True)
class SkippedRecord:
    """One skipped record and where it came from."""
    kind: str
    line_number: int
    transcript_id: str
    message: str


class DiagnosticsCollector:
    """Accumulate skipped records as data during a run."""

    def __init__(self, max_logged: int = 20):
        self.records: List[SkippedRecord] = []
        self.ignored_features: Counter = Counter()
        self.max_logged = max_logged

    def add(self, error: ParseError) -> None:
        """Record a non-fatal parse error."""
        record = SkippedRecord(
            kind=error.kind,
            line_number=error.line_number,
            transcript_id=error.transcript_id,
            message=error.message,
        )
        self.records.append(record)

        # Only the first few are logged individually; the summary covers the rest
        if len(self.records) <= self.max_logged:
            logging.warning(str(error))
        elif len(self.records) == self.max_logged + 1:
            logging.warning("Further skipped records will only appear in the summary")

    def ignore_feature(self, feature: str) -> None:
        self.ignored_features[feature] += 1

    @property
    def skipped_count(self) -> int:
        return len(self.records)

    def count(self, kind: str) -> int:
        return sum(1 for record in self.records if record.kind == kind)

    def summary(self) -> Dict[str, int]:
        """Skipped-record counts by error kind."""
        return dict(Counter(record.kind for record in self.records))

    def by_kind(self, kind: str) -> List[SkippedRecord]:
        return [record for record in self.records if record.kind == kind]

    def log_summary(self) -> None:
        if not self.records:
            logging.info("No records skipped")
            return
        logging.info(f"Skipped {self.skipped_count} records:")
        for kind, count in sorted(self.summary().items()):
            logging.info(f"  {kind}: {count}")

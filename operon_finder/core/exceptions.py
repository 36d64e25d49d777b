#!/usr/bin/env python3

"""
Custom exceptions for the operon finder.

Record-level errors (malformed lines, missing expression data, orphan exons)
are collected and skipped; configuration errors abort the run.
"""

class OperonFinderError(Exception):
    """Base exception for all operon finder errors."""
    pass


class ParseError(OperonFinderError):
    """Error occurred while reading the annotation file."""

    kind = "ParseError"

    def __init__(self, message: str, filename: str = "", line_number: int = 0,
                 transcript_id: str = ""):
        super().__init__(message)
        self.message = message
        self.filename = filename
        self.line_number = line_number
        self.transcript_id = transcript_id

    def __str__(self):
        if self.filename and self.line_number:
            return f"Parse error in {self.filename} at line {self.line_number}: {self.message}"
        elif self.line_number:
            return f"Parse error at line {self.line_number}: {self.message}"
        elif self.filename:
            return f"Parse error in {self.filename}: {self.message}"
        return self.message


class MalformedRecordError(ParseError):
    """A GTF line is missing mandatory fields or has unusable values."""
    kind = "MalformedRecord"


class MissingExpressionDataError(ParseError):
    """A transcript line lacks its cov or FPKM attribute."""
    kind = "MissingExpressionData"


class OrphanExonError(ParseError):
    """Exons reference a transcript that was never declared."""

    kind = "OrphanExon"

    def __init__(self, message: str, transcript_id: str, line_number: int = 0,
                 exon_count: int = 0, filename: str = ""):
        super().__init__(message, filename, line_number, transcript_id)
        self.exon_count = exon_count


class ConfigurationError(OperonFinderError):
    """Invalid operon finder configuration."""
    kind = "InvalidConfiguration"


class MemoryLimitError(OperonFinderError):
    """Memory usage exceeded limits."""

    def __init__(self, message: str, current_usage: float, limit: float):
        super().__init__(message)
        self.current_usage = current_usage
        self.limit = limit

    def __str__(self):
        return f"Memory error: {super().__str__()} (current: {self.current_usage:.1f}MB, limit: {self.limit:.1f}MB)"

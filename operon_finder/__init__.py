#!/usr/bin/env python3

"""
Operon Finder

Groups adjacent transcripts of a StringTie-style GTF annotation into
candidate polycistronic operons using exonic overlap, strand consistency and
coverage thresholds.

Modules:
- core: data structures, parsing, overlap, classification and clustering
- utils: performance monitoring
- tests: unit test suite
"""

__version__ = "1.0.0"

from .core.data_structures import (
    Exon, Transcript, ChromosomeStrandBucket, OverlapResult, OperonGroup,
    BucketResult, OperonResult, TranscriptStatus, GroupKind
)
from .core.exceptions import (
    OperonFinderError, ParseError, MalformedRecordError, MissingExpressionDataError,
    OrphanExonError, ConfigurationError, MemoryLimitError
)
from .core.config import OperonConfig, load_config
from .core.pipeline import OperonFinderPipeline, find_operons

__all__ = [
    # Main pipeline
    'OperonFinderPipeline', 'find_operons',
    # Data structures
    'Exon', 'Transcript', 'ChromosomeStrandBucket', 'OverlapResult', 'OperonGroup',
    'BucketResult', 'OperonResult', 'TranscriptStatus', 'GroupKind',
    # Exceptions
    'OperonFinderError', 'ParseError', 'MalformedRecordError', 'MissingExpressionDataError',
    'OrphanExonError', 'ConfigurationError', 'MemoryLimitError',
    # Configuration
    'OperonConfig', 'load_config'
]

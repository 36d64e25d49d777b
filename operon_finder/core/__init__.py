#!/usr/bin/env python3

"""
Core module for the operon finder.

Contains data structures, exception types, configuration, and the parsing,
overlap, classification and clustering components.
"""

from .data_structures import Exon, Transcript, ChromosomeStrandBucket, OverlapResult, OperonGroup
from .exceptions import (
    OperonFinderError, ParseError, MalformedRecordError, MissingExpressionDataError,
    OrphanExonError, ConfigurationError, MemoryLimitError
)
from .config import OperonConfig, load_config

__all__ = [
    'Exon', 'Transcript', 'ChromosomeStrandBucket', 'OverlapResult', 'OperonGroup',
    'OperonFinderError', 'ParseError', 'MalformedRecordError', 'MissingExpressionDataError',
    'OrphanExonError', 'ConfigurationError', 'MemoryLimitError',
    'OperonConfig', 'load_config'
]

#!/usr/bin/env python3

"""
Test suite for the operon finder.

Unit tests covering:
- Core data structures and configuration
- GTF parsing and transcript model building
- Exonic overlap, threshold classification and clustering
- End-to-end pipeline runs, output files and the command-line interface
"""

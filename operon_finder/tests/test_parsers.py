#!/usr/bin/env python3

"""
Unit tests for GTF record parsing.
"""

import os
import sys
import shutil
import tempfile
import unittest

# Add the parent directory to the path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from operon_finder.core.diagnostics import DiagnosticsCollector
from operon_finder.core.exceptions import ParseError, MalformedRecordError, MissingExpressionDataError
from operon_finder.core.parsers import GTFRecordParser, parse_gtf_attributes


def gtf_line(feature, start, end, attrs, chrom="chr1", strand="+"):
    return "\t".join([chrom, "StringTie", feature, str(start), str(end), "1000", strand, ".", attrs])


TRANSCRIPT_ATTRS = 'gene_id "G1"; transcript_id "T1"; cov "10.5"; FPKM "3.25"; TPM "4.0";'
EXON_ATTRS = 'gene_id "G1"; transcript_id "T1"; exon_number "1"; cov "10.5";'


class TestAttributeParsing(unittest.TestCase):

    def test_quoted_and_unquoted_values(self):
        attrs = parse_gtf_attributes('gene_id "G1"; transcript_id "T1"; exon_number 2; cov "1.5";')
        self.assertEqual(attrs, {"gene_id": "G1", "transcript_id": "T1", "exon_number": "2", "cov": "1.5"})

    def test_first_repeated_key_wins(self):
        attrs = parse_gtf_attributes('tag "basic"; tag "CCDS";')
        self.assertEqual(attrs["tag"], "basic")

    def test_empty_attributes(self):
        self.assertEqual(parse_gtf_attributes(""), {})


class TestGTFRecordParser(unittest.TestCase):
    """Test single-line parsing."""

    def setUp(self):
        self.parser = GTFRecordParser("test.gtf")

    def test_transcript_line(self):
        record = self.parser.parse_line(gtf_line("transcript", 100, 400, TRANSCRIPT_ATTRS), 3)

        self.assertTrue(record.is_transcript)
        self.assertEqual(record.line_number, 3)
        self.assertEqual(record.chrom, "chr1")
        self.assertEqual((record.start, record.end, record.strand), (100, 400, "+"))
        self.assertEqual(record.transcript_id, "T1")
        self.assertEqual(record.gene_id, "G1")
        self.assertEqual(record.coverage, 10.5)
        self.assertEqual(record.fpkm, 3.25)

    def test_exon_line_needs_no_expression(self):
        record = self.parser.parse_line(gtf_line("exon", 100, 200, 'transcript_id "T1";'), 4)
        self.assertTrue(record.is_exon)
        self.assertIsNone(record.fpkm)

    def test_lowercase_fpkm_is_accepted(self):
        record = self.parser.parse_line(
            gtf_line("transcript", 100, 400, 'transcript_id "T1"; cov "2"; fpkm "1.5";'), 1)
        self.assertEqual(record.fpkm, 1.5)

    def test_blank_and_comment_lines(self):
        self.assertIsNone(self.parser.parse_line("\n", 1))
        self.assertIsNone(self.parser.parse_line("# StringTie version 2.2.1\n", 2))

    def test_wrong_field_count(self):
        with self.assertRaises(MalformedRecordError) as ctx:
            self.parser.parse_line("chr1\tStringTie\texon\t100\t200", 7)
        self.assertEqual(ctx.exception.line_number, 7)
        self.assertIn("line 7", str(ctx.exception))

    def test_non_numeric_coordinates(self):
        with self.assertRaises(MalformedRecordError):
            self.parser.parse_line(gtf_line("exon", "abc", 200, EXON_ATTRS), 1)

    def test_start_after_end(self):
        with self.assertRaises(MalformedRecordError):
            self.parser.parse_line(gtf_line("exon", 300, 200, EXON_ATTRS), 1)

    def test_non_positive_start(self):
        with self.assertRaises(MalformedRecordError):
            self.parser.parse_line(gtf_line("exon", 0, 200, EXON_ATTRS), 1)

    def test_missing_chromosome(self):
        with self.assertRaises(MalformedRecordError):
            self.parser.parse_line(gtf_line("exon", 100, 200, EXON_ATTRS, chrom=""), 1)

    def test_missing_feature(self):
        with self.assertRaises(MalformedRecordError):
            self.parser.parse_line(gtf_line("", 100, 200, EXON_ATTRS), 1)

    def test_invalid_strand(self):
        for strand in (".", "", "x"):
            with self.assertRaises(MalformedRecordError):
                self.parser.parse_line(gtf_line("exon", 100, 200, EXON_ATTRS, strand=strand), 1)

    def test_missing_transcript_id(self):
        with self.assertRaises(MalformedRecordError):
            self.parser.parse_line(gtf_line("exon", 100, 200, 'gene_id "G1";'), 1)

    def test_missing_coverage(self):
        with self.assertRaises(MissingExpressionDataError) as ctx:
            self.parser.parse_line(gtf_line("transcript", 100, 400, 'transcript_id "T1"; FPKM "1.0";'), 9)
        self.assertEqual(ctx.exception.kind, "MissingExpressionData")
        self.assertEqual(ctx.exception.transcript_id, "T1")
        self.assertEqual(ctx.exception.line_number, 9)

    def test_missing_fpkm(self):
        with self.assertRaises(MissingExpressionDataError):
            self.parser.parse_line(gtf_line("transcript", 100, 400, 'transcript_id "T1"; cov "1.0";'), 1)

    def test_non_numeric_coverage(self):
        with self.assertRaises(MalformedRecordError):
            self.parser.parse_line(
                gtf_line("transcript", 100, 400, 'transcript_id "T1"; cov "high"; FPKM "1.0";'), 1)

    def test_other_features_are_returned_without_checks(self):
        record = self.parser.parse_line(gtf_line("CDS", 100, 200, 'gene_id "G1";'), 1)
        self.assertEqual(record.feature, "CDS")
        self.assertFalse(record.is_transcript or record.is_exon)


class TestParseFile(unittest.TestCase):
    """Test whole-file parsing with skip-and-continue."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.gtf_file = os.path.join(self.temp_dir, "sample.gtf")
        lines = [
            "# header",
            gtf_line("transcript", 100, 400, TRANSCRIPT_ATTRS),
            gtf_line("exon", 100, 200, EXON_ATTRS),
            "chr1\tbroken line",
            gtf_line("transcript", 500, 600, 'transcript_id "T2"; FPKM "1";'),
            gtf_line("CDS", 120, 180, EXON_ATTRS),
            gtf_line("exon", 300, 400, EXON_ATTRS),
        ]
        with open(self.gtf_file, "w") as f:
            f.write("\n".join(lines) + "\n")

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_bad_lines_are_skipped_and_reported(self):
        diagnostics = DiagnosticsCollector()
        records = list(GTFRecordParser(self.gtf_file).parse_file(diagnostics))

        self.assertEqual([r.line_number for r in records], [2, 3, 7])
        self.assertEqual(diagnostics.summary(), {"MalformedRecord": 1, "MissingExpressionData": 1})
        self.assertEqual([r.line_number for r in diagnostics.records], [4, 5])
        self.assertEqual(diagnostics.ignored_features["CDS"], 1)

    def test_raw_lines_are_kept(self):
        records = list(GTFRecordParser(self.gtf_file).parse_file(DiagnosticsCollector()))
        self.assertTrue(records[0].raw_line.startswith("chr1\tStringTie\ttranscript\t100\t400"))
        self.assertFalse(records[0].raw_line.endswith("\n"))

    def test_missing_file(self):
        parser = GTFRecordParser(os.path.join(self.temp_dir, "missing.gtf"))
        with self.assertRaises(ParseError):
            list(parser.parse_file(DiagnosticsCollector()))

    def test_unreadable_path(self):
        parser = GTFRecordParser(self.temp_dir)
        with self.assertRaises(ParseError):
            list(parser.parse_file(DiagnosticsCollector()))


if __name__ == '__main__':
    unittest.main()

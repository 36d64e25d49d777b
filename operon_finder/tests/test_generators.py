#!/usr/bin/env python3

"""
Tests for output file generation.
"""

import os
import sys
import shutil
import tempfile
import unittest

# Add the parent directory to the path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from operon_finder.core.config import OperonConfig
from operon_finder.core.exceptions import OperonFinderError
from operon_finder.core.generators import (
    OutputGenerator, TSV_HEADER, default_output_prefix, output_paths
)
from operon_finder.core.pipeline import OperonFinderPipeline
from operon_finder.tests.test_pipeline import transcript_lines


class TestOutputPaths(unittest.TestCase):

    def test_default_prefix_strips_extension(self):
        self.assertEqual(default_output_prefix("/data/run1/sample.gtf"), "/data/run1/sample")
        self.assertEqual(default_output_prefix("sample"), "sample")

    def test_paths_are_tagged_with_threshold(self):
        paths = output_paths("out/sample", 1.5)
        self.assertEqual(paths['table'], "out/sample_operons.t1.50.tsv")
        self.assertEqual(paths['operon_gtf'], "out/sample_Operons.t1.50.gtf")
        self.assertEqual(paths['singleton_gtf'], "out/sample_Singletons.t1.50.gtf")
        self.assertEqual(paths['excluded_gtf'], "out/sample_Excluded.t1.50.gtf")
        self.assertEqual(paths['report'], "out/sample_report.t1.50.txt")


class TestOutputGenerator(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.gtf_lines = (
            transcript_lines("T1", [(100, 200), (300, 400)], cov=10) +
            transcript_lines("T2", [(350, 450)], cov=8) +
            transcript_lines("T3", [(5000, 5200)], cov=6) +
            transcript_lines("LOW", [(9000, 9100)], cov=0.5)
        )
        gtf_file = os.path.join(self.temp_dir, "sample.gtf")
        with open(gtf_file, "w") as f:
            f.write("\n".join(self.gtf_lines) + "\n")

        self.config = OperonConfig()
        pipeline = OperonFinderPipeline(self.config)
        self.result = pipeline.run(gtf_file)
        self.performance = pipeline.monitor.get_performance_summary()
        self.prefix = os.path.join(self.temp_dir, "results", "sample")

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def _read_lines(self, path):
        with open(path) as f:
            return f.read().splitlines()

    def test_all_files_written(self):
        written = OutputGenerator(self.config).generate_outputs(self.result, self.prefix, self.performance)
        self.assertEqual(written, [
            f"{self.prefix}_operons.t1.00.tsv",
            f"{self.prefix}_Operons.t1.00.gtf",
            f"{self.prefix}_Singletons.t1.00.gtf",
            f"{self.prefix}_Excluded.t1.00.gtf",
            f"{self.prefix}_report.t1.00.txt",
        ])
        for path in written:
            self.assertTrue(os.path.exists(path))

    def test_table_rows(self):
        OutputGenerator(self.config).generate_outputs(self.result, self.prefix)
        rows = [line.split('\t') for line in self._read_lines(f"{self.prefix}_operons.t1.00.tsv")]

        self.assertEqual(rows[0], TSV_HEADER)
        self.assertEqual(rows[1], ["OPRN.1", "chr1", "+", "100", "450", "operon", "2", "T1", "T1,T2"])
        self.assertEqual(rows[2], ["SNGL.1", "chr1", "+", "5000", "5200", "singleton", "1", "T3", "T3"])
        self.assertEqual(rows[3], [".", "chr1", "+", "9000", "9100", "excluded", "1", "LOW", "LOW"])
        self.assertEqual(len(rows), 4)

    def test_gtf_subsets_keep_original_lines(self):
        OutputGenerator(self.config).generate_outputs(self.result, self.prefix)

        self.assertEqual(self._read_lines(f"{self.prefix}_Operons.t1.00.gtf"), self.gtf_lines[:5])
        self.assertEqual(self._read_lines(f"{self.prefix}_Singletons.t1.00.gtf"), self.gtf_lines[5:7])
        self.assertEqual(self._read_lines(f"{self.prefix}_Excluded.t1.00.gtf"), self.gtf_lines[7:])

    def test_report_contents(self):
        OutputGenerator(self.config).generate_outputs(self.result, self.prefix, self.performance)
        report = "\n".join(self._read_lines(f"{self.prefix}_report.t1.00.txt"))

        self.assertIn("Total transcripts: 4", report)
        self.assertIn("Operons: 1", report)
        self.assertIn("Operon transcripts: 2", report)
        self.assertIn("Excluded transcripts: 1", report)
        self.assertIn("2 genes: 1", report)
        self.assertIn("PHASE BREAKDOWN", report)
        self.assertIn("coverage_threshold: 1.0", report)

    def test_optional_outputs_can_be_disabled(self):
        config = OperonConfig(write_gtf_subsets=False, generate_reports=False)
        written = OutputGenerator(config).generate_outputs(self.result, self.prefix)

        self.assertEqual(written, [f"{self.prefix}_operons.t1.00.tsv"])
        self.assertFalse(os.path.exists(f"{self.prefix}_report.t1.00.txt"))

    def test_unwritable_destination(self):
        blocker = os.path.join(self.temp_dir, "blocker")
        with open(blocker, "w") as f:
            f.write("not a directory")

        with self.assertRaises(OperonFinderError):
            OutputGenerator(self.config).generate_outputs(self.result, os.path.join(blocker, "sample"))


if __name__ == '__main__':
    unittest.main()

#!/usr/bin/env python3

"""
Unit tests for threshold classification.
"""

import os
import sys
import unittest

# Add the parent directory to the path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from operon_finder.core.classifier import ThresholdClassifier, baseline_coverage
from operon_finder.core.config import OperonConfig
from operon_finder.core.data_structures import Exon, Transcript, OverlapResult, TranscriptStatus
from operon_finder.core.exceptions import ConfigurationError


def _tx(tx_id, coverage):
    return Transcript(id=tx_id, chrom="chr1", strand="+", start=1, end=100,
                      coverage=coverage, fpkm=1.0, exons=[Exon(1, 100)])


class TestBaselineCoverage(unittest.TestCase):

    def setUp(self):
        self.transcripts = [_tx("a", 2.0), _tx("b", 4.0), _tx("c", 12.0)]

    def test_unit_baseline(self):
        self.assertEqual(baseline_coverage(self.transcripts, 'unit'), 1.0)

    def test_median_baseline(self):
        self.assertEqual(baseline_coverage(self.transcripts, 'median'), 4.0)

    def test_mean_baseline(self):
        self.assertEqual(baseline_coverage(self.transcripts, 'mean'), 6.0)

    def test_empty_bucket(self):
        self.assertEqual(baseline_coverage([], 'median'), 0.0)

    def test_unknown_method(self):
        with self.assertRaises(ConfigurationError):
            baseline_coverage(self.transcripts, 'mode')


class TestThresholdClassifier(unittest.TestCase):

    def test_boundary_pair_is_contained(self):
        classifier = ThresholdClassifier(OperonConfig(bp_overlap=50, min_overlap=0.5))
        self.assertTrue(classifier.is_contained(OverlapResult("A", "B", 50, 0.5)))

    def test_both_conditions_are_required(self):
        classifier = ThresholdClassifier(OperonConfig(bp_overlap=50, min_overlap=0.5))
        self.assertFalse(classifier.is_contained(OverlapResult("A", "B", 49, 0.9)))
        self.assertFalse(classifier.is_contained(OverlapResult("A", "B", 500, 0.49)))
        self.assertTrue(classifier.is_contained(OverlapResult("A", "B", 500, 1.0)))

    def test_eligibility_is_inclusive(self):
        classifier = ThresholdClassifier(OperonConfig(coverage_threshold=2.0))
        self.assertTrue(classifier.is_eligible(_tx("a", 4.0), baseline=2.0))
        self.assertFalse(classifier.is_eligible(_tx("b", 3.99), baseline=2.0))

    def test_split_eligible_updates_status(self):
        classifier = ThresholdClassifier(OperonConfig(coverage_threshold=1.0, baseline_method='median'))
        transcripts = [_tx("a", 2.0), _tx("b", 4.0), _tx("c", 12.0)]
        baseline, eligible, excluded = classifier.split_eligible(transcripts)

        self.assertEqual(baseline, 4.0)
        self.assertEqual([t.id for t in eligible], ["b", "c"])
        self.assertEqual([t.id for t in excluded], ["a"])
        self.assertEqual(transcripts[0].status, TranscriptStatus.EXCLUDED)
        self.assertEqual(transcripts[1].status, TranscriptStatus.ELIGIBLE)

    def test_zero_threshold_keeps_everything(self):
        classifier = ThresholdClassifier(OperonConfig(coverage_threshold=0.0))
        _, eligible, excluded = classifier.split_eligible([_tx("a", 0.0), _tx("b", 0.5)])
        self.assertEqual(len(eligible), 2)
        self.assertEqual(excluded, [])


if __name__ == '__main__':
    unittest.main()

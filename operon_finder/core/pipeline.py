#!/usr/bin/env python3

"""
Main pipeline class for operon detection.

Runs parsing, model building and per-bucket clustering, and joins the
bucket results into one OperonResult for the output writers.
"""

import logging
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Dict, List, Optional, Tuple

from .builder import TranscriptModelBuilder
from .clusterer import process_bucket
from .config import OperonConfig
from .data_structures import ChromosomeStrandBucket, BucketResult, OperonResult, GroupKind, Transcript
from .diagnostics import DiagnosticsCollector
from .exceptions import OperonFinderError
from .parsers import GTFRecordParser
from ..utils.performance_monitor import PerformanceMonitor


class OperonFinderPipeline:
    """Coordinate all processing phases for one GTF file."""

    def __init__(self, config: OperonConfig):
        # Configuration errors are fatal before any parsing
        config.validate()
        self.config = config
        self.monitor = PerformanceMonitor(
            memory_limit_mb=config.memory_limit_mb,
            enabled=config.enable_memory_monitoring,
        )
        self.diagnostics = DiagnosticsCollector()
        self.transcripts: Dict[str, Transcript] = {}

    def run(self, gtf_file: str) -> OperonResult:
        """
        Detect operons in a GTF file.

        Args:
            gtf_file: Path to the input GTF file

        Returns:
            OperonResult with groups, excluded transcripts and skipped-record summary
        """
        logging.info("Starting operon detection")
        logging.info(f"Configuration: {self.config}")
        logging.info(f"Input GTF: {gtf_file}")

        buckets = self._build_model(gtf_file)
        bucket_results = self._cluster_buckets(buckets)
        result = self._join_results(bucket_results)

        self.diagnostics.log_summary()
        self._log_result(result)
        self.monitor.log_performance_report()
        return result

    def _build_model(self, gtf_file: str) -> List[ChromosomeStrandBucket]:
        parser = GTFRecordParser(gtf_file)
        builder = TranscriptModelBuilder(self.diagnostics)

        with self.monitor.phase_context("parsing") as metrics:
            for record in parser.parse_file(self.diagnostics):
                builder.add_record(record)
                metrics.operations_count += 1
                if metrics.operations_count % self.config.batch_size == 0:
                    self.monitor.check_memory_limit()

            logging.info(f"Parsed {metrics.operations_count} transcript/exon records "
                         f"({self.diagnostics.skipped_count} skipped)")
            for feature, count in sorted(self.diagnostics.ignored_features.items()):
                logging.debug(f"Ignored {count} '{feature}' records")

        with self.monitor.phase_context("model_building") as metrics:
            buckets = builder.build()
            self.transcripts = builder.transcripts
            metrics.operations_count = len(self.transcripts)

        return buckets

    def _cluster_buckets(self, buckets: List[ChromosomeStrandBucket]) -> List[BucketResult]:
        with self.monitor.phase_context("clustering") as metrics:
            if self.config.parallel_workers > 1 and len(buckets) > 1:
                results = self._cluster_parallel(buckets)
            else:
                results = [process_bucket(bucket, self.config) for bucket in buckets]

            metrics.operations_count = sum(r.pairs_evaluated for r in results)
            self.monitor.validate_complexity(len(self.transcripts), metrics.elapsed_time, "O(n log n)")

        return results

    def _cluster_parallel(self, buckets: List[ChromosomeStrandBucket]) -> List[BucketResult]:
        """One task per bucket; results are put back in bucket order."""
        workers = min(self.config.parallel_workers, len(buckets))
        logging.info(f"Clustering {len(buckets)} buckets with {workers} workers")

        results: Dict[Tuple[str, str], BucketResult] = {}
        with ProcessPoolExecutor(max_workers=workers) as executor:
            future_to_key = {
                executor.submit(process_bucket, bucket, self.config): bucket.key for bucket in buckets
            }
            for future in as_completed(future_to_key):
                key = future_to_key[future]
                try:
                    results[key] = future.result()
                except OperonFinderError:
                    raise
                except Exception as exc:
                    raise OperonFinderError(f"Clustering failed for {key[0]}{key[1]}: {exc}") from exc

        return [results[bucket.key] for bucket in buckets]

    def _join_results(self, bucket_results: List[BucketResult]) -> OperonResult:
        result = OperonResult(
            buckets=bucket_results,
            skipped_summary=self.diagnostics.summary(),
            transcript_count=len(self.transcripts),
        )

        operon_number = 0
        singleton_number = 0
        for bucket_result in bucket_results:
            for group in bucket_result.groups:
                if group.kind is GroupKind.OPERON:
                    operon_number += 1
                    group.group_id = f"OPRN.{operon_number}"
                else:
                    singleton_number += 1
                    group.group_id = f"SNGL.{singleton_number}"
                result.groups.append(group)
            result.excluded.extend(bucket_result.excluded)

            # Worker processes return copies; keep the main model in step
            for transcript_id, status in bucket_result.statuses().items():
                self.transcripts[transcript_id].status = status

        return result

    def _log_result(self, result: OperonResult) -> None:
        logging.info(f"Total number of operons found: {len(result.operons)}")
        logging.info(f"Total number of operon transcripts found: "
                     f"{sum(group.member_count for group in result.operons)}")
        logging.info(f"Singleton transcripts: {len(result.singletons)}")
        logging.info(f"Excluded (low coverage) transcripts: {len(result.excluded)}")
        logging.info("Summary of operons by gene number:")
        for category, count in result.operon_size_summary().items():
            logging.info(f"{category}: {count}")


def find_operons(gtf_file: str, config: Optional[OperonConfig] = None) -> OperonResult:
    """Convenience wrapper: run the pipeline with the given (or default) configuration."""
    return OperonFinderPipeline(config or OperonConfig()).run(gtf_file)

#!/usr/bin/env python3

"""
Output generation for operon detection results.

Writes the operon table, GTF subsets built from the original lines and a
plain-text processing report.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .config import OperonConfig
from .data_structures import OperonResult, Transcript
from .exceptions import OperonFinderError


TSV_HEADER = ['group_id', 'chrom', 'strand', 'start', 'end', 'classification',
              'member_count', 'container', 'members']


def default_output_prefix(gtf_file: str) -> str:
    """Input file path without its extension."""
    path = Path(gtf_file)
    return str(path.with_name(path.stem))


def output_paths(prefix: str, threshold: float) -> Dict[str, str]:
    """Paths of every output file for a prefix and coverage threshold."""
    tag = f"t{threshold:.2f}"
    return {
        'table': f"{prefix}_operons.{tag}.tsv",
        'operon_gtf': f"{prefix}_Operons.{tag}.gtf",
        'singleton_gtf': f"{prefix}_Singletons.{tag}.gtf",
        'excluded_gtf': f"{prefix}_Excluded.{tag}.gtf",
        'report': f"{prefix}_report.{tag}.txt",
    }


class OutputGenerator:
    """Write result files for one run."""

    def __init__(self, config: OperonConfig):
        self.config = config

    def generate_outputs(self, result: OperonResult, output_prefix: str,
                         performance: Optional[Dict] = None) -> List[str]:
        """
        Generate all output files.

        Returns:
            List of written file paths
        """
        paths = output_paths(output_prefix, self.config.coverage_threshold)
        written = []

        try:
            Path(paths['table']).parent.mkdir(parents=True, exist_ok=True)
            self.write_table(result, paths['table'])
            written.append(paths['table'])

            if self.config.write_gtf_subsets:
                self.write_gtf(paths['operon_gtf'], (m for g in result.operons for m in g.members))
                self.write_gtf(paths['singleton_gtf'], (m for g in result.singletons for m in g.members))
                self.write_gtf(paths['excluded_gtf'], result.excluded)
                written.extend([paths['operon_gtf'], paths['singleton_gtf'], paths['excluded_gtf']])

            if self.config.generate_reports:
                self.write_report(result, paths['report'], performance)
                written.append(paths['report'])
        except OSError as e:
            raise OperonFinderError(f"Failed to write output files: {e}")

        for file_path in written:
            logging.info(f"Created: {file_path}")
        return written

    def write_table(self, result: OperonResult, path: str) -> None:
        """One row per group, then one row per excluded transcript."""
        with open(path, 'w') as f:
            f.write('\t'.join(TSV_HEADER) + '\n')
            for group in result.groups:
                row = [group.group_id, group.chrom, group.strand, group.start, group.end,
                       group.kind.value, group.member_count, group.container_id,
                       ','.join(group.member_ids)]
                f.write('\t'.join(str(value) for value in row) + '\n')
            for transcript in result.excluded:
                row = ['.', transcript.chrom, transcript.strand, transcript.start, transcript.end,
                       'excluded', 1, transcript.id, transcript.id]
                f.write('\t'.join(str(value) for value in row) + '\n')

    def write_gtf(self, path: str, transcripts: Iterable[Transcript]) -> int:
        """Write the original GTF lines of the given transcripts in genomic order."""
        ordered = sorted(transcripts, key=lambda t: (t.chrom, t.start, t.end, t.strand, t.id))
        with open(path, 'w') as f:
            for transcript in ordered:
                for line in transcript.raw_lines:
                    f.write(line + '\n')
        return len(ordered)

    def write_report(self, result: OperonResult, path: str,
                     performance: Optional[Dict] = None) -> None:
        operon_members = sum(group.member_count for group in result.operons)

        with open(path, 'w') as f:
            f.write("Operon Finder - Processing Report\n")
            f.write("=" * 50 + "\n\n")

            f.write("INPUT STATISTICS\n")
            f.write("-" * 20 + "\n")
            f.write(f"Total transcripts: {result.transcript_count:,}\n")
            f.write(f"Chromosome/strand buckets: {len(result.buckets):,}\n")
            f.write(f"Skipped records: {sum(result.skipped_summary.values()):,}\n")
            for kind, count in sorted(result.skipped_summary.items()):
                f.write(f"  {kind}: {count:,}\n")
            f.write("\n")

            f.write("PROCESSING RESULTS\n")
            f.write("-" * 20 + "\n")
            f.write(f"Operons: {len(result.operons):,}\n")
            f.write(f"Operon transcripts: {operon_members:,}\n")
            f.write(f"Singleton transcripts: {len(result.singletons):,}\n")
            f.write(f"Excluded transcripts: {len(result.excluded):,}\n\n")

            f.write("OPERONS BY GENE NUMBER\n")
            f.write("-" * 20 + "\n")
            for category, count in result.operon_size_summary().items():
                f.write(f"{category}: {count}\n")
            f.write("\n")

            f.write("BUCKETS\n")
            f.write("-" * 20 + "\n")
            for bucket in result.buckets:
                f.write(f"{bucket.chrom}{bucket.strand}: baseline coverage {bucket.baseline_coverage:.2f}, "
                        f"{bucket.pairs_evaluated} pairs evaluated, {bucket.contained_pairs} contained, "
                        f"{bucket.operon_count} operons\n")

            if performance and performance.get('phases'):
                f.write("\nPHASE BREAKDOWN\n")
                f.write("-" * 20 + "\n")
                for phase_name, phase_data in performance['phases'].items():
                    f.write(f"{phase_name}: {phase_data['elapsed_time']:.2f}s ")
                    f.write(f"({phase_data['operations_count']} operations)\n")

            f.write("\nConfiguration used:\n")
            for key, value in self.config.to_dict().items():
                f.write(f"  {key}: {value}\n")

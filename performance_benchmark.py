#!/usr/bin/env python3

"""
Performance benchmark for the operon finder.
Checks that the overlap walk and clustering scale as O(n log n).
"""

import math
import os
import random
import shutil
import tempfile
import time

from operon_finder import OperonConfig, find_operons
from operon_finder.core.clusterer import OperonClusterer
from operon_finder.core.data_structures import ChromosomeStrandBucket, Exon, Transcript
from operon_finder.core.overlap import OverlapEngine


def generate_transcripts(size: int, seed: int = 1):
    """Two-exon transcripts packed along one strand, each overlapping a few neighbours."""
    rng = random.Random(seed)
    transcripts = []
    position = 1

    for i in range(size):
        position += rng.randint(50, 400)
        first_end = position + rng.randint(100, 600)
        second_start = first_end + rng.randint(50, 1000)
        second_end = second_start + rng.randint(100, 600)
        transcripts.append(Transcript(
            id=f"STRG.{i}.1",
            chrom="chr1",
            strand="+",
            start=position,
            end=second_end,
            coverage=rng.uniform(0.5, 50.0),
            fpkm=rng.uniform(0.1, 20.0),
            exons=[Exon(position, first_end), Exon(second_start, second_end)],
        ))

    return transcripts


def report_scaling(sizes, times, label: str) -> None:
    print("  Performance analysis:")
    for i, (size, time_taken) in enumerate(zip(sizes, times)):
        if i == 0 or times[0] <= 0:
            continue
        time_ratio = time_taken / times[0]
        size_ratio = size / sizes[0]
        expected_ratio = size_ratio * math.log2(size_ratio)

        print(f"    Size {size}: {time_ratio:.2f}x time, {size_ratio:.2f}x size")
        print(f"      Expected {label}: {expected_ratio:.2f}x, Actual: {time_ratio:.2f}x")
        if time_ratio < expected_ratio * 2:
            print(f"      OK for {label}")
        else:
            print(f"      WARNING: may be worse than {label}")


def benchmark_overlap_walk():
    """Candidate window walk plus exon sweeps."""
    print("Benchmarking overlap walk...")

    sizes = [2000, 10000, 40000]
    times = []

    for size in sizes:
        transcripts = sorted(generate_transcripts(size), key=lambda t: t.sort_key)

        start_time = time.time()
        pairs = sum(1 for _ in OverlapEngine(transcripts).iter_overlaps())
        elapsed = time.time() - start_time
        times.append(elapsed)

        print(f"  Size {size}: {elapsed:.4f}s, pairs evaluated: {pairs}")

    report_scaling(sizes, times, "O(n log n)")


def benchmark_clustering():
    """Eligibility, overlap and union-find for one bucket."""
    print("\nBenchmarking bucket clustering...")

    sizes = [2000, 10000, 40000]
    times = []
    clusterer = OperonClusterer(OperonConfig(coverage_threshold=2.0))

    for size in sizes:
        bucket = ChromosomeStrandBucket("chr1", "+", generate_transcripts(size))
        bucket.sort()

        start_time = time.time()
        result = clusterer.cluster_bucket(bucket)
        elapsed = time.time() - start_time
        times.append(elapsed)

        print(f"  Size {size}: {elapsed:.4f}s, operons: {result.operon_count}, "
              f"excluded: {len(result.excluded)}")

    report_scaling(sizes, times, "O(n log n)")


def benchmark_end_to_end(size: int = 20000):
    """Full pipeline run on a generated GTF file."""
    print("\nBenchmarking end-to-end run...")

    temp_dir = tempfile.mkdtemp()
    try:
        gtf_file = os.path.join(temp_dir, "benchmark.gtf")
        with open(gtf_file, 'w') as f:
            for transcript in generate_transcripts(size):
                attributes = f'gene_id "{transcript.id}"; transcript_id "{transcript.id}";'
                f.write(f"chr1\tStringTie\ttranscript\t{transcript.start}\t{transcript.end}\t1000\t+\t.\t"
                        f'{attributes} cov "{transcript.coverage:.3f}"; FPKM "{transcript.fpkm:.3f}";\n')
                for exon in transcript.exons:
                    f.write(f"chr1\tStringTie\texon\t{exon.start}\t{exon.end}\t1000\t+\t.\t{attributes}\n")

        start_time = time.time()
        result = find_operons(gtf_file, OperonConfig(enable_memory_monitoring=False))
        elapsed = time.time() - start_time

        print(f"  {size} transcripts in {elapsed:.2f}s")
        print(f"  Rate: {size / elapsed:.0f} transcripts/second")
        print(f"  Operons: {len(result.operons)}, singletons: {len(result.singletons)}, "
              f"excluded: {len(result.excluded)}")
    finally:
        shutil.rmtree(temp_dir)


def main():
    """Run all benchmarks."""
    print("Operon Finder - Performance Benchmark")
    print("=" * 60)

    benchmark_overlap_walk()
    benchmark_clustering()
    benchmark_end_to_end()

    print("\n" + "=" * 60)
    print("Benchmark completed!")


if __name__ == "__main__":
    main()

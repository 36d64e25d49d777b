#!/usr/bin/env python3

"""
Command-line interface for the operon finder.

Detects operons from a GTF file with coverage filtering and writes the
operon table, GTF subsets and a processing report.
"""

import argparse
import sys
import os
import logging
from pathlib import Path

from operon_finder.core.config import OperonConfig, BASELINE_METHODS, load_config
from operon_finder.core.exceptions import OperonFinderError
from operon_finder.core.generators import OutputGenerator, default_output_prefix
from operon_finder.core.pipeline import OperonFinderPipeline


def setup_logging(log_level: str = "INFO", log_file: str = "") -> None:
    """Set up logging to the console and, optionally, a log file."""
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=handlers,
        force=True
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        description="Detect operons from a GTF file with coverage filtering.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Basic usage
  operon-finder -f stringtie.gtf

  # Stricter overlap and a coverage floor of twice the bucket median
  operon-finder -f stringtie.gtf --min-overlap 0.8 --bp-overlap 100 --threshold 2 --baseline median -o results/sample1
        """
    )

    parser.add_argument(
        '-f', '--file',
        required=True,
        help='Input GTF file'
    )
    parser.add_argument(
        '-o', '--output',
        help='Output file prefix (default: input file name without extension)'
    )
    parser.add_argument(
        '--log',
        help='Log file path (default: <prefix>_operon_finder.log)'
    )

    # Thresholds; None means "use the configuration value"
    parser.add_argument(
        '--threshold',
        type=float,
        help='Coverage threshold multiplier (default: 1.0)'
    )
    parser.add_argument(
        '--min-overlap',
        type=float,
        help='Minimum exonic overlap as a fraction of the shorter transcript (default: 0.5)'
    )
    parser.add_argument(
        '--bp-overlap',
        type=int,
        help='Minimum exonic overlap in bp (default: 50)'
    )
    parser.add_argument(
        '--baseline',
        choices=BASELINE_METHODS,
        help='Baseline coverage the threshold is applied to (default: unit)'
    )

    parser.add_argument(
        '--config',
        help='Configuration file (JSON or YAML)'
    )
    parser.add_argument(
        '--workers',
        type=int,
        help='Worker processes for per-chromosome clustering (default: 1)'
    )
    parser.add_argument(
        '--memory-limit',
        type=int,
        help='Memory limit in MB (default: 4096)'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='INFO',
        help='Logging level (default: INFO)'
    )

    return parser


def apply_overrides(config: OperonConfig, args) -> OperonConfig:
    """Override configuration values with command line arguments."""
    overrides = {
        'coverage_threshold': args.threshold,
        'min_overlap': args.min_overlap,
        'bp_overlap': args.bp_overlap,
        'baseline_method': args.baseline,
        'parallel_workers': args.workers,
        'memory_limit_mb': args.memory_limit,
    }
    for field_name, value in overrides.items():
        if value is not None:
            setattr(config, field_name, value)

    # Re-validate after CLI overrides.
    config.validate()
    return config


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    output_prefix = args.output or default_output_prefix(args.file)
    log_file = args.log or f"{output_prefix}_operon_finder.log"

    setup_logging(args.log_level, log_file)
    logger = logging.getLogger(__name__)

    try:
        config = apply_overrides(load_config(config_path=args.config, use_env=True), args)

        if not os.path.exists(args.file):
            raise FileNotFoundError(f"GTF file not found: {args.file}")

        if config.debug_mode:
            logging.getLogger().setLevel(logging.DEBUG)

        logger.info(f"GTF file: {args.file}")
        logger.info(f"Output prefix: {output_prefix}")
        logger.info(f"Coverage threshold: {config.coverage_threshold} x {config.baseline_method} baseline")
        logger.info(f"Minimum overlap: {config.min_overlap} / {config.bp_overlap} bp")

        pipeline = OperonFinderPipeline(config)
        result = pipeline.run(args.file)

        generator = OutputGenerator(config)
        generator.generate_outputs(result, output_prefix, pipeline.monitor.get_performance_summary())

        logger.info("Operon detection completed successfully!")
        return 0

    except FileNotFoundError as e:
        logger.error(f"File error: {e}")
        return 1
    except OperonFinderError as e:
        logger.error(f"Operon finder error: {e}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        logger.debug("Full traceback:", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())

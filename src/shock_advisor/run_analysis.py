"""
AED shock advisor - command line entry point.

Reads a recorded trace (default: ecg.dat), checks signal quality, plots the
trace, derives the rhythm features and prints whether to shock.
"""

import logging
import sys
from typing import List, Optional

from .config.analysis_config import AnalysisConfig, load_config
from .pipeline import ShockAnalysisPipeline

logger = logging.getLogger(__name__)


def build_parser():
    import argparse

    parser = argparse.ArgumentParser(description='AED Shock Advisor')
    parser.add_argument('input', nargs='?', default=None,
                        help='ECG trace file (default: ecg.dat)')
    parser.add_argument('--config', type=str, default=None,
                        help='JSON configuration file')
    parser.add_argument('--plot', type=str, default=None,
                        help='Output path for the ECG plot')
    parser.add_argument('--no-plot', action='store_true',
                        help='Do not render the ECG plot')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable debug logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    config = load_config(args.config) if args.config else AnalysisConfig()
    if args.input:
        config.input_path = args.input
    if args.plot:
        config.plot_path = args.plot
    if args.no_plot:
        config.enable_plot = False

    print("** Starting AED Software **")
    print()

    pipeline = ShockAnalysisPipeline(config)
    try:
        report = pipeline.run_file()
    except FileNotFoundError:
        logger.error(f"Input file not found: {config.input_path}")
        print("ERROR: input file not found")
        return 0

    for line in report.format_lines():
        print(line)

    print()
    print("** Done **")
    return 0


if __name__ == '__main__':
    sys.exit(main())

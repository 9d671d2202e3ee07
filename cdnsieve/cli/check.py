"""Classify IPs read from stdin as CDN-fronted or real."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from ..ranges import CDNClassifier, OutputMode, create_range_aggregator, report, write_report
from ..settings import load_sieve_settings

logger = logging.getLogger(__name__)


def read_input_ips(stream: TextIO) -> List[str]:
    """Read one IP per line until end of stream, keeping order and blank lines.

    Raises:
        OSError: If the stream cannot be read
        UnicodeDecodeError: If the input is not valid text
    """
    return [line.removesuffix("\n").removesuffix("\r") for line in stream]


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s [%(levelname)s] %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the ``cdnsieve`` command."""
    parser = argparse.ArgumentParser(
        description="Split IPv4 addresses read from stdin into CDN and real (origin) addresses",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print addresses not served by any known CDN
  cat ips.txt | cdnsieve --real

  # Print CDN addresses, fetching provider ranges on 8 threads
  cat ips.txt | cdnsieve --cdn --workers 8
        """,
    )
    parser.add_argument("--real", action="store_true", help="print the real IPs, CDN IPs excluded")
    parser.add_argument("--cdn", action="store_true", help="print the CDN IPs")
    parser.add_argument("--workers", type=int, help="Concurrent range fetches (default: 1)")
    parser.add_argument("--timeout", type=float, help="HTTP timeout in seconds (default: 30)")
    parser.add_argument("--asn-lookup-url", help="ASN prefix lookup URL with an {asn} placeholder")
    parser.add_argument("--config", type=Path, help="Path to cdnsieve.toml")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    return parser


def main(
    argv: Optional[Iterable[str]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    """Run the classifier CLI and return an exit status."""
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    _configure_logging(args.verbose)

    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    try:
        settings = load_sieve_settings(
            config={
                "request_timeout": args.timeout,
                "workers": args.workers,
                "asn_lookup_url": args.asn_lookup_url,
            },
            config_path=args.config,
        )
    except ValueError as e:
        parser.error(str(e))

    try:
        ips = read_input_ips(stdin)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read input: {e}")
        return 1
    logger.info(f"Read {len(ips)} input IPs")

    aggregator = create_range_aggregator(settings)
    classifier = CDNClassifier(aggregator.build())
    classifications = classifier.bulk_classify(ips)

    mode = OutputMode.from_flags(real=args.real, cdn=args.cdn)
    if not mode:
        logger.warning("Neither --real nor --cdn given; nothing will be printed")
    write_report(report(classifications, mode), stdout)

    logger.info(f"Range sources: {aggregator.get_stats()}")
    logger.info(f"Classifier: {classifier.get_stats()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

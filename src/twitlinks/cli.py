from pathlib import Path
import argparse
import logging
import sys
from typing import List, Optional

from .config import Config
from .export import EXPORTERS
from .extraction import TwitLinksError
from .processor import AnalyticsProcessor
from .url_resolution import FailureReason

logger = logging.getLogger(__name__)

class ResolutionReporter:
    """Prints the end-of-run summary for a processing run."""

    FAILURE_LABELS = {
        FailureReason.LIMIT_EXCEEDED: "exceeded redirect limit",
        FailureReason.NETWORK_ERROR: "failed with a network error",
        FailureReason.MALFORMED_LOCATION: "had a malformed redirect location",
    }

    def __init__(self, processor: AnalyticsProcessor):
        self.processor = processor

    def print_overall_stats(self):
        summary = self.processor.summary()
        print("\nOverall Statistics:")
        print(f"Files processed: {summary['files']}")
        print(f"Tweets processed: {summary['tweets']}")
        print(f"Links found: {summary['links']}")
        print(f"Unique links resolved: {summary['resolved']} of {summary['total']}")

    def print_failure_stats(self):
        stats = self.processor.stats
        if not stats.failed:
            return
        print("\nUnresolved links:")
        for reason, label in self.FAILURE_LABELS.items():
            count = stats.failures(reason)
            if not count:
                continue
            if reason is FailureReason.LIMIT_EXCEEDED:
                label += f" (maximum={self.processor.config.max_redirects})"
            print(f"{count} links {label}")

    def print_shortener_stats(self):
        shorteners = self.processor.stats.shorteners
        if not shorteners:
            return
        print("\nResolved links still on a URL shortener:")
        for domain, count in shorteners.most_common():
            print(f"{count} links at {domain}")

    def print_outputs(self, written: List[Path]):
        if written:
            print("\nOutput written to:")
            for path in written:
                print(f"  {path}")

def setup_logging(debug: bool, log_file: Optional[Path] = None):
    """Configure logging for the application."""
    root = logging.getLogger()
    existing = list(root.handlers)
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    if not debug and log_file:
        # Per-hop detail goes to the file only
        for handler in root.handlers:
            if handler not in existing:
                handler.setLevel(logging.INFO)
        debug_handler = logging.FileHandler(log_file)
        debug_handler.setLevel(logging.DEBUG)
        debug_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(name)s - %(message)s'))
        root.addHandler(debug_handler)
        root.setLevel(logging.DEBUG)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='twitlinks',
        description="Resolve t.co links and extract mentions and hashtags from Twitter-analytics CSV exports",
    )
    parser.add_argument('files', nargs='+', type=Path, help="Analytics CSV exports to process")
    parser.add_argument('-e', '--encoding', help="Open source files using a specific encoding (default: UTF-8)")
    parser.add_argument('-o', '--output', type=Path, help="Combine results in a single output file")
    parser.add_argument('-f', '--format', dest='output_format', choices=sorted(EXPORTERS),
                        help="Output format (default: xlsx)")
    parser.add_argument('-r', '--redirects', dest='max_redirects', type=int,
                        help="Maximum redirects allowed per link (default: 5)")
    parser.add_argument('-t', '--truncate', action='store_true', default=None,
                        help="Overwrite output files if they exist")
    parser.add_argument('-v', '--verbose', action='store_true', default=None,
                        help="Display extra info during execution")
    parser.add_argument('--workers', type=int, help="Links resolved in parallel (default: 8)")
    parser.add_argument('--timeout', type=float, help="Read timeout per request in seconds (default: 10)")
    parser.add_argument('--insecure', action='store_true', help="Do not verify TLS certificates")
    parser.add_argument('--cache', dest='cache_file', type=Path, help="JSON file to reuse resolutions across runs")
    parser.add_argument('--config', type=Path, help="JSON config file (default: ~/.config/twitlinks/config.json)")
    parser.add_argument('--progress', action='store_true', default=None, help="Show a progress bar")
    return parser

def load_config(args: argparse.Namespace) -> Config:
    """Defaults, then the config file, then command-line options."""
    config = Config.load(args.config)
    config.update({
        'encoding': args.encoding,
        'output': args.output,
        'output_format': args.output_format,
        'max_redirects': args.max_redirects,
        'truncate': args.truncate,
        'verbose': args.verbose,
        'workers': args.workers,
        'read_timeout': args.timeout,
        'cache_file': args.cache_file,
        'progress': args.progress,
    })
    if args.insecure:
        config.verify_tls = False
    return config

def main(argv: Optional[List[str]] = None) -> int:
    """Command-line interface for link resolution."""
    parser = build_parser()
    args = parser.parse_args(argv)
    config = load_config(args)

    setup_logging(config.verbose, config.log_file)
    logger.debug(f"Running with {config.to_dict()}")

    try:
        if config.max_redirects is not None and config.max_redirects < 0:
            parser.error("--redirects must be non-negative")
        processor = AnalyticsProcessor(config)
    except (ValueError, TypeError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    try:
        written = processor.process(args.files)
    except TwitLinksError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130

    reporter = ResolutionReporter(processor)
    reporter.print_overall_stats()
    reporter.print_failure_stats()
    reporter.print_shortener_stats()
    reporter.print_outputs(written)
    return 0 if processor.files_processed else 1

if __name__ == '__main__':
    sys.exit(main())

from pathlib import Path
import logging
from typing import Dict, Iterable, List, Optional

import pandas as pd

from .config import Config
from .export import EXPORTERS, Exporter
from .extraction import TWITTER_COLS, ParsedTweet, check_columns, parse_tweet
from .models import TweetTables, LINKS_COLS, MENTIONS_COLS, HASHTAGS_COLS
from .url_resolution import BatchResolver, RedirectResolver, ResolutionCache, ResolutionResult

logger = logging.getLogger(__name__)

class AnalyticsProcessor:
    """Turns Twitter-analytics exports into tweet, link, mention and hashtag tables."""

    def __init__(self, config: Optional[Config] = None, resolver: Optional[RedirectResolver] = None):
        self.config = config or Config()
        if self.config.output_format not in EXPORTERS:
            raise ValueError(f"Unsupported format: {self.config.output_format}")

        self.cache = ResolutionCache(self.config.cache_file)
        self.resolver = resolver or RedirectResolver(self.config.resolver_config())
        self.batch = BatchResolver(
            self.resolver,
            cache=self.cache,
            workers=self.config.workers,
            progress=self.config.progress,
        )
        self.exporter: Exporter = EXPORTERS[self.config.output_format](truncate=self.config.truncate)

        self.files_processed = 0
        self.tweets_processed = 0
        self.links_found = 0

    @property
    def stats(self):
        return self.batch.stats

    def cancel(self) -> None:
        self.batch.cancel()

    def read_export(self, path: Path) -> pd.DataFrame:
        """Read one analytics CSV export as strings."""
        logger.info(f"Reading {path}...")
        df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding=self.config.encoding)
        check_columns(list(df.columns), str(path))
        return df

    def build_tables(self, df: pd.DataFrame) -> TweetTables:
        """Parse every row and resolve the links found in the tweet texts."""
        tweets = [parse_tweet(row) for row in df.to_dict('records')]
        links = [link for tweet in tweets for link in tweet.links]
        self.links_found += len(links)
        self.tweets_processed += len(tweets)

        results = self.batch.resolve_all(links)

        return TweetTables(
            tweets=pd.DataFrame([self._tweet_row(t) for t in tweets], columns=TWITTER_COLS),
            links=pd.DataFrame(
                [[t.id, self._target(results.get(link)), link] for t in tweets for link in t.links],
                columns=LINKS_COLS,
            ),
            mentions=pd.DataFrame([[t.id, m] for t in tweets for m in t.mentions], columns=MENTIONS_COLS),
            hashtags=pd.DataFrame([[t.id, h] for t in tweets for h in t.hashtags], columns=HASHTAGS_COLS),
        )

    def _tweet_row(self, tweet: ParsedTweet) -> Dict[str, str]:
        # Columns missing from the export stay empty
        row = {col: tweet.row.get(col, '') for col in TWITTER_COLS}
        row['Tweet id'] = tweet.id
        row['Tweet text'] = tweet.text
        return row

    @staticmethod
    def _target(result: Optional[ResolutionResult]) -> str:
        if result is None or not result.ok:
            return ''
        return result.uri

    def process_file(self, path: Path) -> Optional[TweetTables]:
        """Build tables for one export, or None if it cannot be read."""
        try:
            df = self.read_export(path)
        except (OSError, LookupError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            logger.error(f"Failed to read {path}: {e}")
            return None

        tables = self.build_tables(df)
        self.files_processed += 1
        return tables

    def process(self, paths: Iterable[Path]) -> List[Path]:
        """Process exports and write output; returns the files written."""
        written = []
        try:
            if self.config.output:
                combined = TweetTables()
                for path in paths:
                    if self.batch.cancelled:
                        break
                    tables = self.process_file(Path(path))
                    if tables is not None:
                        combined = combined.concat(tables)
                if self.files_processed:
                    output_path = Path(self.config.output)
                    logger.info(f"Writing {output_path}...")
                    self.exporter.export(combined, output_path)
                    written.append(output_path)
            else:
                for path in paths:
                    if self.batch.cancelled:
                        break
                    tables = self.process_file(Path(path))
                    if tables is None:
                        continue
                    output_path = self.exporter.output_path_for(Path(path))
                    logger.info(f"Writing {output_path}...")
                    self.exporter.export(tables, output_path)
                    written.append(output_path)
        finally:
            self.cache.save()

        if self.batch.cancelled:
            logger.warning("Run cancelled; output contains only the links resolved so far")
        return written

    def summary(self) -> Dict[str, int]:
        return {
            'files': self.files_processed,
            'tweets': self.tweets_processed,
            'links': self.links_found,
            **self.stats.to_dict(),
        }

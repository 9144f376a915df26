"""CSV exporter: enriched analytics rows plus one file per extracted table."""
import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from .base import Exporter
from ..models import TweetTables
from ..url_resolution.domain import DomainNormalizer

logger = logging.getLogger(__name__)

class CSVExporter(Exporter):
    """Write the analytics rows with a ``URL`` column for the first link's target.

    Links, mentions and hashtags go to ``<stem>_links.csv``,
    ``<stem>_mentions.csv`` and ``<stem>_hashtags.csv`` beside the main file.
    """

    suffix = '.csv'

    def __init__(self, truncate: bool = False, domain_normalizer: Optional[DomainNormalizer] = None):
        super().__init__(truncate)
        self.domain_normalizer = domain_normalizer or DomainNormalizer()

    def output_path_for(self, input_path: Path) -> Path:
        # Never overwrite the export being read
        input_path = Path(input_path)
        return input_path.with_name(f"{input_path.stem}_resolved{self.suffix}")

    def companion_path(self, output_path: Path, table: str) -> Path:
        output_path = Path(output_path)
        stem = output_path.stem
        if stem.endswith('_resolved'):
            stem = stem[:-len('_resolved')]
        return output_path.with_name(f"{stem}_{table}{self.suffix}")

    def export(self, tables: TweetTables, output_path: Path) -> None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        self._write(self.enrich(tables), output_path)
        for name in ('links', 'mentions', 'hashtags'):
            self._write(getattr(tables, name), self.companion_path(output_path, name))
        logger.info(f"Wrote {len(tables.tweets)} tweets to {output_path}")

    def enrich(self, tables: TweetTables) -> pd.DataFrame:
        """Analytics rows with the first link of each tweet resolved into ``URL``."""
        first_links = tables.links.drop_duplicates(subset='Tweet id', keep='first')
        targets = {
            tweet_id: self.domain_normalizer.describe_target(link)
            for tweet_id, link in zip(first_links['Tweet id'], first_links['link'])
        }
        enriched = tables.tweets.copy()
        enriched['URL'] = enriched['Tweet id'].map(lambda tweet_id: targets.get(tweet_id) or '')
        return enriched

    def _write(self, df: pd.DataFrame, path: Path) -> None:
        append = not self.truncate and path.exists()
        df.to_csv(path, mode='a' if append else 'w', header=not append, index=False)

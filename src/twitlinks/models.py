from dataclasses import dataclass, field
from typing import Dict, Iterator, Tuple

import pandas as pd

from .extraction import TWITTER_COLS

LINKS_COLS = ['Tweet id', 'link', 'original']
MENTIONS_COLS = ['Tweet id', 'mention']
HASHTAGS_COLS = ['Tweet id', 'hashtag']

TABLE_COLUMNS: Dict[str, list] = {
    'tweets': TWITTER_COLS,
    'links': LINKS_COLS,
    'mentions': MENTIONS_COLS,
    'hashtags': HASHTAGS_COLS,
}

SHEET_NAMES = {
    'tweets': 'From Twitter',
    'links': 'Links',
    'mentions': 'Mentions',
    'hashtags': 'Hashtags',
}


def _empty(name: str) -> pd.DataFrame:
    return pd.DataFrame(columns=TABLE_COLUMNS[name])


@dataclass
class TweetTables:
    """The four output tables built from one or more analytics exports."""
    tweets: pd.DataFrame = field(default_factory=lambda: _empty('tweets'))
    links: pd.DataFrame = field(default_factory=lambda: _empty('links'))
    mentions: pd.DataFrame = field(default_factory=lambda: _empty('mentions'))
    hashtags: pd.DataFrame = field(default_factory=lambda: _empty('hashtags'))

    def items(self) -> Iterator[Tuple[str, pd.DataFrame]]:
        for name in TABLE_COLUMNS:
            yield name, getattr(self, name)

    def concat(self, other: 'TweetTables') -> 'TweetTables':
        """Rows of ``self`` followed by rows of ``other``."""
        merged = {}
        for name, df in self.items():
            frames = [f for f in (df, getattr(other, name)) if not f.empty]
            merged[name] = pd.concat(frames, ignore_index=True) if frames else _empty(name)
        return TweetTables(**merged)

    @property
    def empty(self) -> bool:
        return all(df.empty for _, df in self.items())

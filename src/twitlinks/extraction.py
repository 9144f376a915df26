""" Functions to pull tweet ids, links, mentions and hashtags out of analytics rows """

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# Columns of a Twitter-analytics "tweet activity" export, in output order
TWITTER_COLS = ['Tweet id', 'Tweet permalink', 'Tweet text', 'time',
                'impressions', 'engagements', 'engagement rate', 'retweets',
                'replies', 'favorites', 'user profile clicks', 'url clicks',
                'hashtag clicks', 'detail expands', 'permalink clicks',
                'embedded media views', 'app opens', 'app installs', 'follows']
REQUIRED_COLS = ['Tweet permalink', 'Tweet text']

LINK_PATTERN = re.compile(r'https?://t\.co/\w+')
MENTION_PATTERN = re.compile(r'@(\w{1,15})')
HASHTAG_PATTERN = re.compile(r'#(\w+)')
TWEET_ID_PATTERN = re.compile(r'(\d+)/?$')


class TwitLinksError(ValueError):
    """Base error for input problems."""


class AnalyticsFormatError(TwitLinksError):
    """Raised when an export lacks the columns needed to process it."""


@dataclass
class ParsedTweet:
    """One analytics row with the pieces pulled out of its text."""
    id: str
    text: str
    row: Dict[str, Any]
    links: List[str] = field(default_factory=list)
    mentions: List[str] = field(default_factory=list)
    hashtags: List[str] = field(default_factory=list)


def sanitize_text(text: Optional[str]) -> str:
    """ strip carriage returns, which break CSV output """
    return (text or '').replace('\r', '')

def extract_links(text: str) -> List[str]:
    return LINK_PATTERN.findall(text or '')

def extract_mentions(text: str) -> List[str]:
    return MENTION_PATTERN.findall(text or '')

def extract_hashtags(text: str) -> List[str]:
    return HASHTAG_PATTERN.findall(text or '')

def parse_tweet_id(permalink: Optional[str]) -> Optional[str]:
    """ the id in the export is unreliable, so take it from the permalink """
    match = TWEET_ID_PATTERN.search((permalink or '').strip())
    return match.group(1) if match else None

def check_columns(columns: List[str], source: str = 'export') -> None:
    missing = [col for col in REQUIRED_COLS if col not in columns]
    if missing:
        raise AnalyticsFormatError(f"{source} is missing required column(s): {', '.join(missing)}")

def parse_tweet(row: Dict[str, Any]) -> ParsedTweet:
    """ parse a single analytics row """
    text = sanitize_text(row.get('Tweet text'))
    tweet_id = parse_tweet_id(row.get('Tweet permalink'))
    if tweet_id is None:
        tweet_id = str(row.get('Tweet id') or '')
        logger.warning(f"No tweet id in permalink {row.get('Tweet permalink')!r}, using {tweet_id!r}")

    return ParsedTweet(
        id=tweet_id,
        text=text,
        row=row,
        links=extract_links(text),
        mentions=extract_mentions(text),
        hashtags=extract_hashtags(text),
    )

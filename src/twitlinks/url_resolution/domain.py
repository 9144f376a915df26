import re
from typing import Optional
from urllib.parse import urlsplit


class DomainNormalizer:
    """Normalizes domain names and classifies resolved link targets."""

    TWITTER_DOMAINS = {'twitter.com', 'x.com', 'mobile.twitter.com', 'm.twitter.com'}

    # Media attached to a tweet resolves back to the tweet itself, e.g.
    # https://twitter.com/user/status/123/photo/1
    EMBEDDED_MEDIA_PATTERN = re.compile(
        r'^https?://(?:www\.|mobile\.|m\.)?(?:twitter|x)\.com/[^/]+/status/[0-9]+/(?P<media>[^/]+)(?:/|$)'
    )

    def __init__(self):
        # Known URL shortener domains
        self.shortener_domains = {
            't.co', 'bit.ly', 'goo.gl', 'tinyurl.com',
            'ow.ly', 'buff.ly', 'dlvr.it', 'is.gd',
            'tiny.cc', 'j.mp', 'ift.tt', 'amzn.to', 'fb.me'
        }

    def normalize(self, domain: str) -> str:
        """Normalize domain names."""
        domain = domain.lower().split(':', 1)[0]
        if domain.startswith('www.'):
            domain = domain[4:]
        if domain in self.TWITTER_DOMAINS or domain.endswith('.twitter.com'):
            return 'twitter.com'
        return domain

    def domain_of(self, uri: str) -> str:
        return self.normalize(urlsplit(uri).netloc)

    def is_shortener(self, domain: str) -> bool:
        """Check if domain is a known URL shortener."""
        return self.normalize(domain) in self.shortener_domains

    def embedded_media(self, uri: str) -> Optional[str]:
        """Return the media kind (``photo``, ``video``...) if ``uri`` is a tweet's own media page."""
        match = self.EMBEDDED_MEDIA_PATTERN.match(uri or '')
        return match.group('media') if match else None

    def describe_target(self, uri: Optional[str]) -> Optional[str]:
        """Label for a resolved target as shown in CSV output."""
        if not uri:
            return uri
        media = self.embedded_media(uri)
        if media:
            return f"<embedded {media} media>"
        return uri

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Dict, Any

DEFAULT_USER_AGENT = 'Mozilla/5.0 (compatible; twitlinks/0.1; +https://github.com/twitlinks)'


class FailureReason(str, Enum):
    """Why a link could not be resolved."""
    LIMIT_EXCEEDED = 'limit-exceeded'
    NETWORK_ERROR = 'network-error'
    MALFORMED_LOCATION = 'malformed-location'


@dataclass
class ResolverConfig:
    """Settings for a single RedirectResolver."""
    max_redirects: int = 5
    verify_tls: bool = True
    connect_timeout: float = 5.0
    read_timeout: float = 10.0
    retries: int = 2
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self):
        if self.max_redirects < 0:
            raise ValueError(f"max_redirects must be non-negative, got {self.max_redirects}")

    @property
    def timeout(self) -> Tuple[float, float]:
        return (self.connect_timeout, self.read_timeout)


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of resolving one link.

    Either ``uri`` holds the final absolute URI, or ``reason`` says why
    resolution failed. ``chain`` lists every URI visited, starting with the
    original one.
    """
    original: str
    uri: Optional[str] = None
    reason: Optional[FailureReason] = None
    chain: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.reason is None

    @classmethod
    def success(cls, original: str, uri: str, chain: Tuple[str, ...]) -> 'ResolutionResult':
        return cls(original=original, uri=uri, chain=tuple(chain))

    @classmethod
    def failure(cls, original: str, reason: FailureReason, chain: Tuple[str, ...] = ()) -> 'ResolutionResult':
        return cls(original=original, reason=reason, chain=tuple(chain))

    @property
    def hops(self) -> int:
        """Number of redirects followed."""
        return max(len(self.chain) - 1, 0)

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return {'ok': True, 'uri': self.uri}
        return {'ok': False, 'reason': self.reason.value}

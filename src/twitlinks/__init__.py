from .config import Config
from .processor import AnalyticsProcessor
from .models import TweetTables
from .url_resolution import (
    RedirectResolver,
    ResolverConfig,
    ResolutionResult,
    FailureReason,
    BatchResolver,
    ResolutionCache,
)

__all__ = [
    'Config',
    'AnalyticsProcessor',
    'TweetTables',
    'RedirectResolver',
    'ResolverConfig',
    'ResolutionResult',
    'FailureReason',
    'BatchResolver',
    'ResolutionCache',
]

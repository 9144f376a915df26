from .models import ResolverConfig, ResolutionResult, FailureReason
from .resolver import RedirectResolver, rebase, ensure_absolute
from .cache import ResolutionCache
from .batch import BatchResolver, ResolutionStats
from .domain import DomainNormalizer

__all__ = [
    'ResolverConfig',
    'ResolutionResult',
    'FailureReason',
    'RedirectResolver',
    'rebase',
    'ensure_absolute',
    'ResolutionCache',
    'BatchResolver',
    'ResolutionStats',
    'DomainNormalizer',
]

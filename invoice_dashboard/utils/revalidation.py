"""
Page-path scoped view cache

Data loaders behind a page are memoized with Flask-Caching and registered
under that page's path. ``revalidate_path`` drops every memoized result for
the path so the next request recomputes it.
"""

import logging
from collections import defaultdict

from invoice_dashboard import cache

logger = logging.getLogger(__name__)

# Filled at import time by the decorator; read-only afterwards
_loaders_by_path = defaultdict(list)


def cached_for_path(path, timeout=None):
    """Memoize a data loader and tie its cached results to ``path``."""
    def decorator(loader):
        memoized = cache.memoize(timeout=timeout)(loader)
        _loaders_by_path[path].append(memoized)
        return memoized
    return decorator


def revalidate_path(path):
    """Mark cached data for ``path`` as stale."""
    loaders = _loaders_by_path.get(path, ())
    for loader in loaders:
        cache.delete_memoized(loader)
    logger.debug(f'Revalidated {path} ({len(loaders)} loaders)')

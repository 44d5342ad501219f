"""Read-only cache access for ECS cluster records.

Backends: InMemoryCache, FileCache.
"""

from cluster_view.cache.client import EcsClusterCacheClient
from cluster_view.cache.store import Cache, CacheStoreError, FileCache, InMemoryCache

__all__ = [
    "Cache",
    "CacheStoreError",
    "EcsClusterCacheClient",
    "FileCache",
    "InMemoryCache",
]

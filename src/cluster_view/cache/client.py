"""Typed read view over cached ECS cluster records."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from cluster_view.cache.keys import CLUSTERS, get_cluster_key, parse_key
from cluster_view.cache.store import Cache
from cluster_view.models import CacheData, EcsCluster

logger = logging.getLogger(__name__)


class EcsClusterCacheClient:
    """Translates raw ``clusters`` namespace records into EcsCluster summaries.

    Reads are total: records that cannot be converted are skipped.
    """

    def __init__(self, cache: Cache) -> None:
        self._cache = cache

    def get_all(self) -> list[EcsCluster]:
        """Return every cached cluster, in the cache's enumeration order."""
        clusters: list[EcsCluster] = []
        for record in self._cache.get_all(CLUSTERS):
            cluster = convert(record)
            if cluster is not None:
                clusters.append(cluster)
        return clusters

    def get(self, account: str, region: str, cluster_name: str) -> EcsCluster | None:
        """Look up a single cluster by its cache key."""
        record = self._cache.get(CLUSTERS, get_cluster_key(account, region, cluster_name))
        if record is None:
            return None
        return convert(record)


def convert(record: CacheData) -> EcsCluster | None:
    """Build an EcsCluster from a cache record, or None if it is malformed.

    Attributes take precedence; missing account/region/name fall back
    to the parts encoded in the record id.
    """
    attributes: dict[str, Any] = record.attributes
    key_parts = parse_key(record.id) or {}
    try:
        return EcsCluster(
            name=attributes.get("clusterName") or key_parts.get("clusterName"),
            account=attributes.get("account") or key_parts.get("account"),
            region=attributes.get("region") or key_parts.get("region"),
            arn=attributes.get("clusterArn"),
        )
    except ValidationError:
        logger.debug("Skipping malformed cluster record %s", record.id)
        return None

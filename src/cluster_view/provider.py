"""EcsClusterProvider: cache-backed, batch-enriched ECS cluster view.

The provider:
1. Reads cluster summaries from the cache
2. Keeps those matching the requested account and region exactly
3. Resolves ECS credentials and a read-only client for the account
4. Splits the cluster names into batches of at most MAX_BATCH_SIZE
5. Describes each batch and merges the returned details

Failures are isolated per batch. A batch whose describe call raises or
returns no response is logged and left out of the result; the other
batches are unaffected. Only credential resolution errors reach the caller.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Protocol

from cluster_view.aws.ecs_client import RemoteClusterClient, validate_include
from cluster_view.cache.client import EcsClusterCacheClient
from cluster_view.cache.store import Cache
from cluster_view.credentials.repository import CredentialsRepository, resolve_ecs_credentials
from cluster_view.models import MAX_BATCH_SIZE, ClusterDetail, EcsCluster, EcsCredentials

logger = logging.getLogger(__name__)


class EcsClientFactory(Protocol):
    """Anything that can hand out an account/region-scoped describe client."""

    def get_amazon_ecs(
        self,
        credentials: EcsCredentials,
        region: str,
        read_only: bool = True,
    ) -> RemoteClusterClient: ...


class EcsClusterProvider:
    """Answers "which clusters exist, and what state are they in".

    ``max_workers`` bounds how many describe calls run at once. The
    default of 1 dispatches batches sequentially on the calling thread.
    """

    def __init__(
        self,
        cache: Cache,
        credentials_repository: CredentialsRepository,
        client_provider: EcsClientFactory,
        include: Sequence[str] | None = None,
        max_workers: int = 1,
    ) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._cache_client = EcsClusterCacheClient(cache)
        self._credentials = credentials_repository
        self._client_provider = client_provider
        self._include = validate_include(include)
        self._max_workers = max_workers

    def get_all_ecs_clusters(self) -> list[EcsCluster]:
        return self._cache_client.get_all()

    def get_all_ecs_cluster_details(
        self,
        account: str,
        region: str,
        cancel: threading.Event | None = None,
    ) -> list[ClusterDetail]:
        """Describe every cached cluster for *account* in *region*.

        Args:
            account: Account name, matched exactly.
            region: Region name, matched exactly.
            cancel: Optional event; once set, no further batches are sent.

        Returns:
            Details in batch order, then in response order within a batch.
            Batches that failed contribute nothing.

        Raises:
            ConfigurationError: If the account's credentials cannot be
                resolved or are not ECS-capable. Raised before any
                describe call is made.
        """
        cluster_names = [
            cluster.name
            for cluster in self._cache_client.get_all()
            if cluster.region == region and cluster.account == account
        ]
        client = self._get_amazon_ecs_client(account, region)

        batches = list(partition(cluster_names, MAX_BATCH_SIZE))
        if not batches:
            return []

        if self._max_workers == 1:
            results = self._describe_sequential(client, batches, account, region, cancel)
        else:
            results = self._describe_parallel(client, batches, account, region, cancel)

        clusters: list[ClusterDetail] = []
        for details in results:
            clusters.extend(details)
        return clusters

    # --- Private: client resolution ---

    def _get_amazon_ecs_client(self, account: str, region: str) -> RemoteClusterClient:
        credentials = resolve_ecs_credentials(self._credentials, account, region)
        return self._client_provider.get_amazon_ecs(credentials, region, read_only=True)

    # --- Private: batch dispatch ---

    def _describe_sequential(
        self,
        client: RemoteClusterClient,
        batches: list[list[str]],
        account: str,
        region: str,
        cancel: threading.Event | None,
    ) -> list[list[ClusterDetail]]:
        results: list[list[ClusterDetail]] = []
        for index, batch in enumerate(batches):
            if cancel is not None and cancel.is_set():
                logger.info(
                    "Describe for %s/%s cancelled after %d of %d batch(es)",
                    account, region, index, len(batches),
                )
                break
            results.append(self._describe_batch(client, batch, account, region))
        return results

    def _describe_parallel(
        self,
        client: RemoteClusterClient,
        batches: list[list[str]],
        account: str,
        region: str,
        cancel: threading.Event | None,
    ) -> list[list[ClusterDetail]]:
        def _run(batch: list[str]) -> list[ClusterDetail]:
            if cancel is not None and cancel.is_set():
                return []
            return self._describe_batch(client, batch, account, region)

        workers = min(self._max_workers, len(batches))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures: list[Future[list[ClusterDetail]]] = [
                pool.submit(_run, batch) for batch in batches
            ]
            return [future.result() for future in futures]

    def _describe_batch(
        self,
        client: RemoteClusterClient,
        cluster_names: list[str],
        account: str,
        region: str,
    ) -> list[ClusterDetail]:
        """Describe one batch. Never raises; failures yield an empty list."""
        try:
            result = client.describe_clusters(cluster_names, include=self._include or None)
        except Exception as exc:
            logger.error(
                "Describe Cluster call failed for %d cluster(s) in %s/%s: %s",
                len(cluster_names), account, region, exc,
            )
            return []

        if result is None:
            logger.error(
                "Describe Cluster call returned with empty response for %s/%s. "
                "Please check your inputs (account, region and cluster list)",
                account, region,
            )
            return []

        if result.failures:
            logger.error(
                "Describe Cluster call for %s/%s responded with failure(s): %s",
                account, region,
                [failure.model_dump(exclude_none=True) for failure in result.failures],
            )
        return _requested_only(result.clusters, cluster_names, account, region)


def _requested_only(
    details: list[ClusterDetail],
    cluster_names: list[str],
    account: str,
    region: str,
) -> list[ClusterDetail]:
    """Drop details for clusters that were not asked for in this batch."""
    requested = set(cluster_names)
    kept: list[ClusterDetail] = []
    extras: list[str] = []
    for detail in details:
        arn_name = (detail.cluster_arn or "").rpartition("/")[2]
        if (
            detail.cluster_name in requested
            or detail.cluster_arn in requested
            or arn_name in requested
        ):
            kept.append(detail)
        else:
            extras.append(detail.cluster_name)
    if extras:
        logger.warning(
            "Describe Cluster call for %s/%s returned %d unrequested cluster(s), ignored: %s",
            account, region, len(extras), extras,
        )
    return kept


def partition(names: Iterable[str], size: int) -> Iterator[list[str]]:
    """Yield consecutive batches of at most *size* names, preserving order.

    A batch is emitted as soon as it is full; a trailing partial batch is
    emitted once at the end. No names means no batches.
    """
    if size < 1:
        raise ValueError(f"Batch size must be >= 1, got {size}")
    batch: list[str] = []
    for name in names:
        batch.append(name)
        if len(batch) == size:
            yield batch
            batch = []
    if batch:
        yield batch

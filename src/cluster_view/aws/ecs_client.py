"""ECS describe client.

Wraps a boto3 ``ecs`` client and parses DescribeClusters responses into
cluster-view models. Errors raised by boto3 propagate to the caller.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from pydantic import ValidationError

from cluster_view.models import (
    MAX_BATCH_SIZE,
    ClusterDetail,
    DescribeClustersResult,
    DescribeFailure,
)

INVALID_RESPONSE = "INVALID_RESPONSE"

DESCRIBE_INCLUDE_FIELDS = frozenset({
    "ATTACHMENTS",
    "CONFIGURATIONS",
    "SETTINGS",
    "STATISTICS",
    "TAGS",
})


def validate_include(include: Sequence[str] | None) -> list[str]:
    """Normalize an ``include`` list, rejecting unknown fields."""
    if not include:
        return []
    normalized = [field.upper() for field in include]
    unknown = sorted(set(normalized) - DESCRIBE_INCLUDE_FIELDS)
    if unknown:
        msg = (
            f"Unknown DescribeClusters include field(s): {', '.join(unknown)}. "
            f"Available: {', '.join(sorted(DESCRIBE_INCLUDE_FIELDS))}"
        )
        raise ValueError(msg)
    return normalized


@runtime_checkable
class RemoteClusterClient(Protocol):
    """Protocol for account/region-scoped cluster describe clients."""

    def describe_clusters(
        self,
        cluster_names: Sequence[str],
        include: Sequence[str] | None = None,
    ) -> DescribeClustersResult | None:
        """Describe up to ``MAX_BATCH_SIZE`` clusters.

        Returns None if the service returned no response body.
        """
        ...


class EcsClient:
    """RemoteClusterClient backed by a boto3 ``ecs`` client."""

    def __init__(self, client: Any) -> None:
        self._client = client

    @property
    def client(self) -> Any:
        return self._client

    def describe_clusters(
        self,
        cluster_names: Sequence[str],
        include: Sequence[str] | None = None,
    ) -> DescribeClustersResult | None:
        if len(cluster_names) > MAX_BATCH_SIZE:
            msg = (
                f"DescribeClusters accepts at most {MAX_BATCH_SIZE} clusters, "
                f"got {len(cluster_names)}"
            )
            raise ValueError(msg)

        kwargs: dict[str, Any] = {"clusters": list(cluster_names)}
        if include:
            kwargs["include"] = list(include)

        response = self._client.describe_clusters(**kwargs)
        if not response:
            return None
        return _parse_response(response)


def _parse_response(response: dict[str, Any]) -> DescribeClustersResult:
    """Parse a DescribeClusters response one entry at a time.

    A cluster entry that does not validate becomes a failure with reason
    ``INVALID_RESPONSE``; the valid entries around it are kept.
    """
    clusters: list[ClusterDetail] = []
    failures: list[DescribeFailure] = []

    for entry in response.get("clusters") or []:
        try:
            clusters.append(ClusterDetail.model_validate(entry))
        except ValidationError as exc:
            failures.append(_invalid_entry(entry, exc))

    for entry in response.get("failures") or []:
        try:
            failures.append(DescribeFailure.model_validate(entry))
        except ValidationError as exc:
            failures.append(_invalid_entry(entry, exc))

    return DescribeClustersResult(clusters=clusters, failures=failures)


def _invalid_entry(entry: Any, exc: ValidationError) -> DescribeFailure:
    arn = None
    if isinstance(entry, dict):
        arn = entry.get("clusterArn") or entry.get("arn")
    return DescribeFailure(
        arn=arn if isinstance(arn, str) else None,
        reason=INVALID_RESPONSE,
        detail=f"{exc.error_count()} validation error(s): {exc.errors()[0]['msg']}",
    )

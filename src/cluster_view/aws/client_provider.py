"""AmazonClientProvider: builds account/region-scoped ECS clients.

Clients are cached per (account, region, read_only) so repeated requests
for the same account reuse the underlying boto3 client.
"""

from __future__ import annotations

import threading
from typing import Any

import boto3
from botocore.config import Config

from cluster_view.aws.ecs_client import EcsClient
from cluster_view.models import EcsCredentials

READ_ONLY_CONFIG = Config(
    retries={"max_attempts": 10, "mode": "standard"},
    connect_timeout=10,
    read_timeout=30,
)
MUTATING_CONFIG = Config(
    retries={"max_attempts": 3, "mode": "standard"},
    connect_timeout=10,
    read_timeout=60,
)


class AmazonClientProvider:
    """Factory for boto3-backed ECS clients.

    ``read_only`` selects the botocore retry and timeout policy. Describe
    calls always use the read-only policy.
    """

    def __init__(self, endpoint_url: str | None = None) -> None:
        self._endpoint_url = endpoint_url
        self._clients: dict[tuple[str, str, bool], EcsClient] = {}
        self._lock = threading.Lock()

    def get_amazon_ecs(
        self,
        credentials: EcsCredentials,
        region: str,
        read_only: bool = True,
    ) -> EcsClient:
        cache_key = (credentials.name, region, read_only)
        with self._lock:
            client = self._clients.get(cache_key)
            if client is None:
                client = EcsClient(self._get_client("ecs", credentials, region, read_only))
                self._clients[cache_key] = client
        return client

    def _get_client(
        self,
        service: str,
        credentials: EcsCredentials,
        region: str,
        read_only: bool,
    ) -> Any:
        """Get a boto3 service client."""
        session = boto3.Session(**credentials.session_kwargs(region))
        kwargs: dict[str, Any] = {
            "config": READ_ONLY_CONFIG if read_only else MUTATING_CONFIG,
        }
        if self._endpoint_url:
            kwargs["endpoint_url"] = self._endpoint_url
        return session.client(service, **kwargs)

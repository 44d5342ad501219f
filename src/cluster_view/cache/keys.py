"""Cache key layout for ECS records.

Keys have the form ``ecs;{namespace};{account};{region};{name}``.
"""

from __future__ import annotations

SEPARATOR = ";"
PROVIDER = "ecs"
CLUSTERS = "clusters"


def get_cluster_key(account: str, region: str, cluster_name: str) -> str:
    return SEPARATOR.join([PROVIDER, CLUSTERS, account, region, cluster_name])


def parse_key(key: str) -> dict[str, str] | None:
    """Split a cluster key into its parts.

    Returns None when the key is not an ECS cluster key.
    """
    parts = key.split(SEPARATOR)
    if len(parts) != 5 or parts[0] != PROVIDER or parts[1] != CLUSTERS:
        return None
    if not all(parts[2:]):
        return None
    return {
        "provider": parts[0],
        "type": parts[1],
        "account": parts[2],
        "region": parts[3],
        "clusterName": parts[4],
    }

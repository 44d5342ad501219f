"""cluster-view: a cache-backed, batch-enriched view of ECS clusters."""

__version__ = "0.1.0"

from cluster_view.aws.client_provider import AmazonClientProvider
from cluster_view.aws.ecs_client import EcsClient, RemoteClusterClient
from cluster_view.cache.client import EcsClusterCacheClient
from cluster_view.cache.store import Cache, CacheStoreError, FileCache, InMemoryCache
from cluster_view.config import ClusterViewConfig, find_config, load_config
from cluster_view.credentials.repository import (
    AccountsError,
    ConfigurationError,
    CredentialsNotFoundError,
    CredentialsRepository,
    InvalidCredentialsError,
    StaticCredentialsRepository,
    load_accounts,
)
from cluster_view.models import (
    MAX_BATCH_SIZE,
    AwsCredentials,
    CacheData,
    ClusterDetail,
    DescribeClustersResult,
    DescribeFailure,
    EcsCluster,
    EcsCredentials,
)
from cluster_view.provider import EcsClusterProvider, partition

__all__ = [
    "MAX_BATCH_SIZE",
    "AccountsError",
    "AmazonClientProvider",
    "AwsCredentials",
    "Cache",
    "CacheData",
    "CacheStoreError",
    "ClusterDetail",
    "ClusterViewConfig",
    "ConfigurationError",
    "CredentialsNotFoundError",
    "CredentialsRepository",
    "DescribeClustersResult",
    "DescribeFailure",
    "EcsClient",
    "EcsCluster",
    "EcsClusterCacheClient",
    "EcsClusterProvider",
    "EcsCredentials",
    "FileCache",
    "InMemoryCache",
    "InvalidCredentialsError",
    "RemoteClusterClient",
    "StaticCredentialsRepository",
    "find_config",
    "load_accounts",
    "load_config",
    "partition",
    "__version__",
]

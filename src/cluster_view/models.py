"""Core data models for cluster-view.

Defines the schemas for:
- Cached cluster summaries (what the cache knows exists)
- Cluster details (what ECS reports live)
- Describe results and inline failures
- Account credentials (which accounts can be described)
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

MAX_BATCH_SIZE = 100
"""Maximum number of cluster identifiers ECS accepts per DescribeClusters call."""


# --- Cache Schema ---


class CacheData(BaseModel):
    """A raw record read from a cache namespace."""

    id: str
    attributes: dict[str, Any] = Field(default_factory=dict)


class EcsCluster(BaseModel):
    """Lightweight cluster summary produced from the cache.

    Identity is the (account, region, name) triple.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    account: str = Field(min_length=1)
    region: str = Field(min_length=1)
    arn: str | None = None


# --- DescribeClusters Schema ---


class _AwsShape(BaseModel):
    """Base for models mirroring an AWS response structure."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class KeyValuePair(_AwsShape):
    name: str | None = None
    value: str | None = None


class Tag(_AwsShape):
    key: str | None = None
    value: str | None = None


class ClusterSetting(_AwsShape):
    name: str | None = None
    value: str | None = None


class ClusterDetail(_AwsShape):
    """Live cluster state returned by DescribeClusters.

    Fields follow the AWS response shape; anything AWS adds that is not
    modelled here is preserved as an extra field.
    """

    cluster_arn: str | None = Field(default=None, alias="clusterArn")
    cluster_name: str = Field(alias="clusterName")
    status: str | None = None
    registered_container_instances_count: int = Field(
        default=0, alias="registeredContainerInstancesCount",
    )
    running_tasks_count: int = Field(default=0, alias="runningTasksCount")
    pending_tasks_count: int = Field(default=0, alias="pendingTasksCount")
    active_services_count: int = Field(default=0, alias="activeServicesCount")
    statistics: list[KeyValuePair] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)
    settings: list[ClusterSetting] = Field(default_factory=list)
    capacity_providers: list[str] = Field(
        default_factory=list, alias="capacityProviders",
    )
    attachments_status: str | None = Field(default=None, alias="attachmentsStatus")


class DescribeFailure(_AwsShape):
    """A per-cluster failure reported inline by DescribeClusters."""

    arn: str | None = None
    reason: str | None = None
    detail: str | None = None


class DescribeClustersResult(BaseModel):
    """Parsed DescribeClusters response."""

    clusters: list[ClusterDetail] = Field(default_factory=list)
    failures: list[DescribeFailure] = Field(default_factory=list)


# --- Credentials Schema ---


class _BaseCredentials(BaseModel):
    """Fields shared by every account credential type."""

    name: str = Field(..., min_length=1)
    account_id: str = ""
    regions: list[str] = Field(default_factory=list)
    environment: str = ""


class AwsCredentials(_BaseCredentials):
    """Plain AWS account. Not usable for ECS describe calls."""

    type: Literal["aws"] = "aws"


class EcsCredentials(_BaseCredentials):
    """AWS account enabled for ECS.

    Key handling:
    - ``access_key_id`` and ``secret_access_key`` (optionally with
      ``session_token``) are passed to boto3 explicitly
    - ``profile_name`` selects a named AWS profile
    - Otherwise boto3's default credential chain is used
    """

    type: Literal["ecs"] = "ecs"
    access_key_id: str | None = None
    secret_access_key: str | None = Field(default=None, repr=False)
    session_token: str | None = Field(default=None, repr=False)
    profile_name: str | None = None

    def session_kwargs(self, region: str) -> dict[str, Any]:
        """Keyword arguments for ``boto3.Session`` scoped to *region*."""
        kwargs: dict[str, Any] = {"region_name": region}
        if self.access_key_id and self.secret_access_key:
            kwargs["aws_access_key_id"] = self.access_key_id
            kwargs["aws_secret_access_key"] = self.secret_access_key
            if self.session_token:
                kwargs["aws_session_token"] = self.session_token
        elif self.profile_name:
            kwargs["profile_name"] = self.profile_name
        return kwargs


AccountCredentials = Annotated[
    AwsCredentials | EcsCredentials,
    Field(discriminator="type"),
]

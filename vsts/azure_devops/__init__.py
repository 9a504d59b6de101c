"""VSTS REST API integration module."""

from .client import VstsClient, create_client
from .auth import VstsAuth
from .http_client import HttpClient, DefaultHttpClient
from .url_builder import VstsUrlBuilder, WORK_ITEMS_API_VERSION
from .work_items_client import WorkItemsClient
from .pr_client import PullRequestsClient
from .models import (
    CollectionResponse,
    IdentityRef,
    WorkItemsQuery,
    ColumnReference,
    WorkItemReference,
    WorkItemLink,
    WorkItemsQueryResult,
    FlatWorkItemsQueryResult,
    HierarchicalWorkItemsQueryResult,
    WorkItem,
    WorkItemUpdate,
    FieldChange,
    PullRequestQuery,
    PullRequestStatus,
    GitRepository,
    PullRequest,
    PullRequestIteration,
    PullRequestThread,
    ThreadStatus,
    Comment,
)

__all__ = [
    "VstsClient",
    "create_client",
    "VstsAuth",
    "HttpClient",
    "DefaultHttpClient",
    "VstsUrlBuilder",
    "WORK_ITEMS_API_VERSION",
    "WorkItemsClient",
    "PullRequestsClient",
    "CollectionResponse",
    "IdentityRef",
    "WorkItemsQuery",
    "ColumnReference",
    "WorkItemReference",
    "WorkItemLink",
    "WorkItemsQueryResult",
    "FlatWorkItemsQueryResult",
    "HierarchicalWorkItemsQueryResult",
    "WorkItem",
    "WorkItemUpdate",
    "FieldChange",
    "PullRequestQuery",
    "PullRequestStatus",
    "GitRepository",
    "PullRequest",
    "PullRequestIteration",
    "PullRequestThread",
    "ThreadStatus",
    "Comment",
]

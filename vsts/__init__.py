"""Client library for the VSTS work item and pull request REST APIs."""

from .config import Config, VstsConfig, load_config, load_config_from_env
from .azure_devops import (
    VstsClient,
    create_client,
    HttpClient,
    DefaultHttpClient,
    VstsUrlBuilder,
    WorkItemsQuery,
    PullRequestQuery,
    PullRequestStatus,
)

__version__ = "0.1.0"

__all__ = [
    "Config",
    "VstsConfig",
    "load_config",
    "load_config_from_env",
    "VstsClient",
    "create_client",
    "HttpClient",
    "DefaultHttpClient",
    "VstsUrlBuilder",
    "WorkItemsQuery",
    "PullRequestQuery",
    "PullRequestStatus",
]

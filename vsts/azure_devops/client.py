"""Main VSTS client combining work item and pull request operations."""

from typing import List, Optional

from ..config.config import Config, VstsConfig, DEFAULT_API_VERSION
from ..utils.logger import setup_logger, set_log_level
from .auth import VstsAuth
from .http_client import HttpClient, DefaultHttpClient
from .models import (
    PullRequest,
    PullRequestIteration,
    PullRequestQuery,
    PullRequestThread,
    WorkItem,
    WorkItemsQuery,
    WorkItemsQueryResult,
    WorkItemUpdate,
)
from .pr_client import PullRequestsClient
from .work_items_client import WorkItemsClient

logger = setup_logger(__name__)


class VstsClient:
    """
    Main client for VSTS operations.

    Delegates work item calls to WorkItemsClient and pull request calls to
    PullRequestsClient, both sharing one HttpClient.
    """

    def __init__(
        self,
        instance_name: str,
        http_client: HttpClient,
        api_version: str = DEFAULT_API_VERSION,
    ):
        """
        Initialize VSTS client.

        Args:
            instance_name: VSTS account name or base URL
            http_client: HTTP execution capability
            api_version: REST API version for every request
        """
        self.instance_name = instance_name
        self.http_client = http_client
        self.work_items_client = WorkItemsClient(instance_name, http_client, api_version)
        self.pr_client = PullRequestsClient(instance_name, http_client, api_version)

        logger.debug(f"Initialized VSTS client for {instance_name} (api-version {api_version})")

    @classmethod
    def get(cls, instance_name: str, access_token: str) -> "VstsClient":
        """
        Create a client authenticated with a personal access token.

        Args:
            instance_name: VSTS account name or base URL
            access_token: Personal access token

        Returns:
            Configured VstsClient
        """
        return create_client(VstsConfig(instance_name=instance_name, pat_token=access_token))

    def execute_query(self, project: str, query: WorkItemsQuery) -> Optional[WorkItemsQueryResult]:
        """Execute a WIQL query. See WorkItemsClient.execute_query."""
        return self.work_items_client.execute_query(project, query)

    def get_work_items(self, project: str, query: WorkItemsQuery) -> List[WorkItem]:
        """Execute a query and fetch its work items. See WorkItemsClient.get_work_items."""
        return self.work_items_client.get_work_items(project, query)

    def get_work_item_updates(self, work_item_id: int) -> List[WorkItemUpdate]:
        """Get the revision history of a work item."""
        return self.work_items_client.get_work_item_updates(work_item_id)

    def get_pull_requests(
        self,
        project: str,
        repository: str,
        query: Optional[PullRequestQuery] = None,
    ) -> List[PullRequest]:
        """Retrieve all pull requests matching the criteria."""
        return self.pr_client.get_pull_requests(project, repository, query)

    def get_pull_request_iterations(
        self, project: str, repository: str, pull_request_id: int
    ) -> List[PullRequestIteration]:
        """Get the iterations of a pull request."""
        return self.pr_client.get_pull_request_iterations(project, repository, pull_request_id)

    def get_pull_request_threads(
        self, project: str, repository: str, pull_request_id: int
    ) -> List[PullRequestThread]:
        """Get the comment threads of a pull request."""
        return self.pr_client.get_pull_request_threads(project, repository, pull_request_id)

    def close(self) -> None:
        """Close the client and release resources."""
        self.http_client.close()
        logger.debug("Closed VSTS client")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def create_client(config) -> VstsClient:
    """
    Helper function to create a VSTS client.

    Args:
        config: VstsConfig, or a full Config whose log level is applied

    Returns:
        Configured VstsClient
    """
    if isinstance(config, Config):
        set_log_level(config.log_level)
        config = config.vsts

    auth = VstsAuth(config)
    http_client = DefaultHttpClient(auth, timeout=config.timeout)
    return VstsClient(config.instance_name, http_client, config.api_version)

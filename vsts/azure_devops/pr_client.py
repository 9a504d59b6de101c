"""Pull request operations for VSTS."""

from datetime import datetime, timezone
from typing import List, Optional

from ..config.config import DEFAULT_API_VERSION
from ..utils.logger import setup_logger
from .http_client import HttpClient
from .models import (
    CollectionResponse,
    PullRequest,
    PullRequestIteration,
    PullRequestQuery,
    PullRequestThread,
)
from .url_builder import VstsUrlBuilder

logger = setup_logger(__name__)


def _require(value: Optional[str], name: str) -> None:
    if not value:
        raise ValueError(f"{name} cannot be null or empty.")


class PullRequestsClient:
    """Client for pull request operations."""

    def __init__(
        self,
        instance_name: str,
        http_client: HttpClient,
        api_version: str = DEFAULT_API_VERSION,
    ):
        """
        Initialize PR client.

        Args:
            instance_name: VSTS account name or base URL
            http_client: HTTP execution capability
            api_version: REST API version for every request
        """
        self.instance_name = instance_name
        self.http_client = http_client
        self.api_version = api_version

    def get_pull_requests(
        self,
        project: str,
        repository: str,
        query: Optional[PullRequestQuery] = None,
    ) -> List[PullRequest]:
        """
        Retrieve all pull requests matching the criteria, following pages.

        Pages are requested with ``$skip`` until the server returns an empty
        page. With ``created_after`` set, paging also stops after the first
        page whose oldest pull request was created before that moment.

        Args:
            project: Project ID or project name
            repository: Repository ID or name of the target branch
            query: Filter criteria (None = no criteria)

        Returns:
            List of PullRequest objects

        Raises:
            ValueError: If project or repository is empty
            requests.RequestException: On API errors
        """
        _require(project, "project")
        _require(repository, "repository")

        if query is None:
            query = PullRequestQuery.none()

        created_after = query.created_after
        if created_after is not None and created_after.tzinfo is None:
            created_after = created_after.replace(tzinfo=timezone.utc)

        all_pull_requests: List[PullRequest] = []
        skip = 0
        have_more = True

        while have_more:
            url = (
                VstsUrlBuilder.create(self.instance_name)
                .for_pull_requests(project, repository)
                .with_query_parameter_if_not_empty("searchCriteria.status", query.status)
                .with_query_parameter_if_not_empty("searchCriteria.reviewerId", query.reviewer_id)
                .with_query_parameter_if_not_empty("searchCriteria.creatorId", query.creator_id)
                .with_query_parameter("$skip", skip)
                .build(self.api_version)
            )

            logger.debug(f"Requesting {url}")

            response = self.http_client.execute_get(url, CollectionResponse.of(PullRequest))
            page = response.value if response is not None else []

            have_more = bool(page) and (
                created_after is None
                or not self._oldest_creation_date_reached(page, created_after)
            )

            pull_requests = page
            if created_after is not None:
                pull_requests = [
                    p for p in pull_requests
                    if p.creation_date is not None and p.creation_date >= created_after
                ]

            if query.custom_filter is not None:
                pull_requests = [p for p in pull_requests if query.custom_filter(p)]

            all_pull_requests.extend(pull_requests)
            skip += len(page)

        logger.info(f"Found {len(all_pull_requests)} pull requests in {project}/{repository}")
        return all_pull_requests

    def get_pull_request_iterations(
        self, project: str, repository: str, pull_request_id: int
    ) -> List[PullRequestIteration]:
        """
        Get the list of iterations for a pull request.

        Args:
            project: Project ID or project name
            repository: Repository ID or name
            pull_request_id: Pull request ID

        Returns:
            List of PullRequestIteration objects

        Raises:
            ValueError: If project or repository is empty
            requests.RequestException: On API errors
        """
        _require(project, "project")
        _require(repository, "repository")

        url = (
            VstsUrlBuilder.create(self.instance_name)
            .for_pull_requests(project, repository)
            .with_section(pull_request_id)
            .with_section("iterations")
            .build(self.api_version)
        )

        logger.debug(f"Requesting {url}")

        response = self.http_client.execute_get(url, CollectionResponse.of(PullRequestIteration))
        return response.value if response is not None else []

    def get_pull_request_threads(
        self, project: str, repository: str, pull_request_id: int
    ) -> List[PullRequestThread]:
        """
        Retrieve all comment threads of a pull request.

        Args:
            project: Project ID or project name
            repository: Repository ID or name
            pull_request_id: Pull request ID

        Returns:
            List of PullRequestThread objects

        Raises:
            ValueError: If project or repository is empty
            requests.RequestException: On API errors
        """
        _require(project, "project")
        _require(repository, "repository")

        url = (
            VstsUrlBuilder.create(self.instance_name)
            .for_pull_requests(project, repository)
            .with_section(pull_request_id)
            .with_section("threads")
            .build(self.api_version)
        )

        logger.debug(f"Requesting {url}")

        response = self.http_client.execute_get(url, CollectionResponse.of(PullRequestThread))
        return response.value if response is not None else []

    @staticmethod
    def _oldest_creation_date_reached(
        page: List[PullRequest], created_after: datetime
    ) -> bool:
        # Pull requests without a creation date never stop paging
        dates = [p.creation_date for p in page if p.creation_date is not None]
        if not dates:
            return False
        return min(dates) < created_after

"""Work item operations for VSTS."""

from typing import Iterable, List, Optional

from ..config.config import DEFAULT_API_VERSION
from ..utils.logger import setup_logger
from .http_client import HttpClient
from .models import (
    CollectionResponse,
    FlatWorkItemsQueryResult,
    HierarchicalWorkItemsQueryResult,
    WorkItem,
    WorkItemsQuery,
    WorkItemsQueryResult,
    WorkItemUpdate,
)
from .url_builder import VstsUrlBuilder

logger = setup_logger(__name__)

# Maximum number of IDs accepted by the work items list endpoint
WORK_ITEMS_BATCH_SIZE = 200


def _require(value: Optional[str], name: str) -> None:
    if not value:
        raise ValueError(f"{name} cannot be null or empty.")


class WorkItemsClient:
    """Client for work item queries and history."""

    def __init__(
        self,
        instance_name: str,
        http_client: HttpClient,
        api_version: str = DEFAULT_API_VERSION,
    ):
        """
        Initialize work items client.

        Args:
            instance_name: VSTS account name or base URL
            http_client: HTTP execution capability
            api_version: REST API version for every request
        """
        self.instance_name = instance_name
        self.http_client = http_client
        self.api_version = api_version

    def execute_query(self, project: str, query: WorkItemsQuery) -> Optional[WorkItemsQueryResult]:
        """
        Execute a WIQL query.

        Args:
            project: Project ID or project name
            query: Query to execute

        Returns:
            FlatWorkItemsQueryResult or HierarchicalWorkItemsQueryResult,
            depending on ``query.is_hierarchical``

        Raises:
            ValueError: If project, query, instance name or query text is empty
            requests.RequestException: On API errors
        """
        _require(project, "project")
        if query is None:
            raise ValueError("query cannot be null.")
        _require(self.instance_name, "instance_name")
        if not query.query:
            raise ValueError("Query cannot be empty.")

        url = VstsUrlBuilder.create(self.instance_name).for_wiql(project).build(self.api_version)

        logger.debug(f"Requesting {url}")

        if query.is_hierarchical:
            return self.http_client.execute_post(
                url, query.to_api(), HierarchicalWorkItemsQueryResult.from_api
            )

        return self.http_client.execute_post(url, query.to_api(), FlatWorkItemsQueryResult.from_api)

    def get_work_items(self, project: str, query: WorkItemsQuery) -> List[WorkItem]:
        """
        Execute a query and fetch the work items it returns.

        Only the fields selected as query columns are requested.

        Args:
            project: Project ID or project name
            query: Query to execute

        Returns:
            List of WorkItem objects

        Raises:
            TypeError: If the query result has an unsupported shape
            requests.RequestException: On API errors
        """
        query_result = self.execute_query(project, query)

        if not isinstance(
            query_result, (FlatWorkItemsQueryResult, HierarchicalWorkItemsQueryResult)
        ):
            raise TypeError("Query result is of not supported type.")

        ids = self.get_work_item_ids(query_result)

        if not ids:
            logger.info("Query returned no work items")
            return []

        fields = ",".join(c.reference_name for c in query_result.columns)

        work_items: List[WorkItem] = []
        for batch in _batches(ids, WORK_ITEMS_BATCH_SIZE):
            url = (
                VstsUrlBuilder.create(self.instance_name)
                .for_work_items_batch(batch, project)
                .with_query_parameter_if_not_empty("fields", fields)
                .build(self.api_version)
            )

            response = self.http_client.execute_get(url, CollectionResponse.of(WorkItem))
            if response is not None:
                work_items.extend(response.value)

        logger.info(f"Fetched {len(work_items)} work items")
        return work_items

    def get_work_item_updates(self, work_item_id: int) -> List[WorkItemUpdate]:
        """
        Get the revision history of a work item.

        Args:
            work_item_id: Work item ID

        Returns:
            List of WorkItemUpdate objects

        Raises:
            requests.RequestException: On API errors
        """
        url = (
            VstsUrlBuilder.create(self.instance_name)
            .for_work_items(work_item_id)
            .with_section("updates")
            .build(self.api_version)
        )

        logger.debug(f"Requesting {url}")

        response = self.http_client.execute_get(url, CollectionResponse.of(WorkItemUpdate))
        if response is None:
            return []

        return response.value

    @staticmethod
    def get_work_item_ids(query_result: WorkItemsQueryResult) -> List[int]:
        """
        Extract work item IDs from a query result.

        Flat results keep the server order. For tree results every source ID
        comes before every target ID, duplicates removed, first occurrence wins.
        """
        if isinstance(query_result, FlatWorkItemsQueryResult):
            return [w.id for w in query_result.work_items]

        if isinstance(query_result, HierarchicalWorkItemsQueryResult):
            links = query_result.work_item_relations
            refs = [link.source for link in links] + [link.target for link in links]
            return list(dict.fromkeys(ref.id for ref in refs if ref is not None))

        raise TypeError("Query result is of not supported type.")


def _batches(ids: List[int], size: int) -> Iterable[List[int]]:
    for start in range(0, len(ids), size):
        yield ids[start:start + size]

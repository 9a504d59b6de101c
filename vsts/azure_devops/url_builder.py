"""Composition of versioned VSTS REST endpoint URLs."""

from typing import Any, Iterable, List, Optional, Tuple
from urllib.parse import quote

from ..config.config import DEFAULT_API_VERSION

# Work item endpoints share the default version
WORK_ITEMS_API_VERSION = DEFAULT_API_VERSION


def instance_base_url(instance_name: Optional[str]) -> str:
    """
    Resolve the base address of a VSTS instance.

    Args:
        instance_name: Account name (``contoso`` for contoso.visualstudio.com)
            or an absolute http(s) URL such as ``https://dev.azure.com/contoso``

    Returns:
        Base URL without a trailing slash

    Raises:
        ValueError: If the instance name is empty
    """
    if not instance_name:
        raise ValueError("instance_name cannot be empty.")

    if instance_name.startswith(("http://", "https://")):
        return instance_name.rstrip("/")

    return f"https://{instance_name}.visualstudio.com"


class VstsUrlBuilder:
    """
    Fluent builder for VSTS REST URLs.

    Example:
        VstsUrlBuilder.create("contoso").for_wiql("Fabrikam").build()
        -> https://contoso.visualstudio.com/Fabrikam/_apis/wit/wiql?api-version=4.1
    """

    def __init__(self, instance_name: str):
        self.base_url = instance_base_url(instance_name)
        self._segments: List[str] = []
        self._params: List[Tuple[str, str]] = []

    @classmethod
    def create(cls, instance_name: str) -> "VstsUrlBuilder":
        """Start a new builder for the given instance."""
        return cls(instance_name)

    def for_wiql(self, project: str) -> "VstsUrlBuilder":
        """Target the WIQL query endpoint of a project."""
        return self._with_project(project)._with_path("_apis", "wit", "wiql")

    def for_work_items_batch(
        self, ids: Iterable[Any], project: Optional[str] = None
    ) -> "VstsUrlBuilder":
        """Target the work items list endpoint for a set of IDs."""
        ids_string = ids if isinstance(ids, str) else ",".join(str(i) for i in ids)
        return (
            self._with_project(project)
            ._with_path("_apis", "wit", "workitems")
            .with_query_parameter("ids", ids_string)
        )

    def for_work_items(
        self, work_item_id: Optional[int] = None, project: Optional[str] = None
    ) -> "VstsUrlBuilder":
        """Target the work items endpoint, optionally a single work item."""
        self._with_project(project)._with_path("_apis", "wit", "workitems")
        if work_item_id is not None:
            self.with_section(work_item_id)
        return self

    def for_pull_requests(self, project: str, repository: str) -> "VstsUrlBuilder":
        """Target the pull requests collection of a git repository."""
        return (
            self._with_project(project)
            ._with_path("_apis", "git", "repositories")
            .with_section(repository)
            .with_section("pullrequests")
        )

    def with_section(self, section: Any) -> "VstsUrlBuilder":
        """Append one path segment."""
        self._segments.append(quote(str(section), safe=""))
        return self

    def with_query_parameter(self, name: str, value: Any) -> "VstsUrlBuilder":
        """Add a query parameter."""
        self._params.append((name, str(value)))
        return self

    def with_query_parameter_if_not_empty(self, name: str, value: Any) -> "VstsUrlBuilder":
        """Add a query parameter unless the value is None or empty."""
        if value is None or str(value) == "":
            return self
        return self.with_query_parameter(name, value)

    def build(self, api_version: str = DEFAULT_API_VERSION) -> str:
        """
        Produce the final URL.

        Args:
            api_version: REST API version, always emitted as the last parameter

        Returns:
            Absolute URL string
        """
        path = "/".join(self._segments)
        params = self._params + [("api-version", api_version)]
        query = "&".join(
            f"{quote(name, safe='$.')}={quote(value, safe=',')}" for name, value in params
        )
        return f"{self.base_url}/{path}?{query}"

    def _with_project(self, project: Optional[str]) -> "VstsUrlBuilder":
        if project:
            self.with_section(project)
        return self

    def _with_path(self, *segments: str) -> "VstsUrlBuilder":
        for segment in segments:
            self.with_section(segment)
        return self

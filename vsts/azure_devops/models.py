"""Data models for VSTS API requests and responses."""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar

T = TypeVar("T")

_FRACTION_RE = re.compile(r"\.(\d+)")


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp returned by the service.

    The service emits up to seven fractional digits and a trailing ``Z``;
    both are normalised before parsing. Unparseable values yield None.
    """
    if not value or not isinstance(value, str):
        return None

    text = value.replace("Z", "+00:00")
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ===========================
# Common
# ===========================


@dataclass
class CollectionResponse(Generic[T]):
    """Envelope of list responses: ``{"count": n, "value": [...]}``."""

    count: int = 0
    value: List[T] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any], item_type: Type[Any]) -> "CollectionResponse":
        """Create CollectionResponse, parsing every item with ``item_type.from_api``."""
        items = [item_type.from_api(item) for item in data.get("value") or []]
        return cls(count=data.get("count", len(items)), value=items)

    @classmethod
    def of(cls, item_type: Type[Any]) -> Callable[[Dict[str, Any]], "CollectionResponse"]:
        """Return a parser producing a collection of ``item_type``."""

        def parse(data: Dict[str, Any]) -> "CollectionResponse":
            return cls.from_api(data, item_type)

        return parse


@dataclass
class IdentityRef:
    """A VSTS user or group."""

    id: str
    display_name: str
    unique_name: str = ""
    url: Optional[str] = None
    image_url: Optional[str] = None

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "IdentityRef":
        """Create IdentityRef from API response."""
        data = data or {}
        return cls(
            id=data.get("id", ""),
            display_name=data.get("displayName", ""),
            unique_name=data.get("uniqueName", ""),
            url=data.get("url"),
            image_url=data.get("imageUrl"),
        )


# ===========================
# Work items
# ===========================


@dataclass
class WorkItemsQuery:
    """A WIQL query to execute."""

    query: str
    is_hierarchical: bool = False

    def to_api(self) -> Dict[str, Any]:
        """Request body for the WIQL endpoint."""
        return {"query": self.query}


@dataclass
class ColumnReference:
    """A column (field) selected by a query."""

    name: str
    reference_name: str
    url: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ColumnReference":
        return cls(
            name=data.get("name", ""),
            reference_name=data.get("referenceName", ""),
            url=data.get("url"),
        )


@dataclass
class WorkItemReference:
    """Reference to a work item returned by a query."""

    id: int
    url: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "WorkItemReference":
        return cls(id=data.get("id", 0), url=data.get("url"))


@dataclass
class WorkItemLink:
    """
    A link between two work items in a tree query.

    ``source`` is None for the top-level rows of the tree.
    """

    source: Optional[WorkItemReference]
    target: Optional[WorkItemReference]
    rel: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "WorkItemLink":
        source = data.get("source")
        target = data.get("target")
        return cls(
            source=WorkItemReference.from_api(source) if source else None,
            target=WorkItemReference.from_api(target) if target else None,
            rel=data.get("rel"),
        )


@dataclass
class WorkItemsQueryResult:
    """Common part of WIQL query results."""

    query_type: Optional[str] = None
    query_result_type: Optional[str] = None
    as_of: Optional[datetime] = None
    columns: List[ColumnReference] = field(default_factory=list)

    @staticmethod
    def _common_fields(data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "query_type": data.get("queryType"),
            "query_result_type": data.get("queryResultType"),
            "as_of": parse_datetime(data.get("asOf")),
            "columns": [ColumnReference.from_api(c) for c in data.get("columns") or []],
        }


@dataclass
class FlatWorkItemsQueryResult(WorkItemsQueryResult):
    """Result of a flat (list) query."""

    work_items: List[WorkItemReference] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "FlatWorkItemsQueryResult":
        """Create FlatWorkItemsQueryResult from API response."""
        return cls(
            work_items=[WorkItemReference.from_api(w) for w in data.get("workItems") or []],
            **cls._common_fields(data),
        )


@dataclass
class HierarchicalWorkItemsQueryResult(WorkItemsQueryResult):
    """Result of a tree or one-hop links query."""

    work_item_relations: List[WorkItemLink] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "HierarchicalWorkItemsQueryResult":
        """Create HierarchicalWorkItemsQueryResult from API response."""
        return cls(
            work_item_relations=[
                WorkItemLink.from_api(r) for r in data.get("workItemRelations") or []
            ],
            **cls._common_fields(data),
        )


@dataclass
class WorkItem:
    """A work item with the requested fields."""

    id: int
    rev: int = 0
    fields: Dict[str, Any] = field(default_factory=dict)
    url: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "WorkItem":
        """Create WorkItem from API response."""
        return cls(
            id=data.get("id", 0),
            rev=data.get("rev", 0),
            fields=data.get("fields") or {},
            url=data.get("url"),
        )

    @property
    def title(self) -> Optional[str]:
        return self.fields.get("System.Title")

    @property
    def state(self) -> Optional[str]:
        return self.fields.get("System.State")

    @property
    def work_item_type(self) -> Optional[str]:
        return self.fields.get("System.WorkItemType")


@dataclass
class FieldChange:
    """Old and new value of a field in a work item update."""

    old_value: Any = None
    new_value: Any = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "FieldChange":
        return cls(old_value=data.get("oldValue"), new_value=data.get("newValue"))


@dataclass
class WorkItemUpdate:
    """One revision in the history of a work item."""

    id: int
    work_item_id: int
    rev: int = 0
    revised_by: Optional[IdentityRef] = None
    revised_date: Optional[datetime] = None
    fields: Dict[str, FieldChange] = field(default_factory=dict)
    url: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "WorkItemUpdate":
        """Create WorkItemUpdate from API response."""
        revised_by = data.get("revisedBy")
        fields = {
            name: FieldChange.from_api(change or {})
            for name, change in (data.get("fields") or {}).items()
        }
        return cls(
            id=data.get("id", 0),
            work_item_id=data.get("workItemId", 0),
            rev=data.get("rev", 0),
            revised_by=IdentityRef.from_api(revised_by) if revised_by else None,
            revised_date=parse_datetime(data.get("revisedDate")),
            fields=fields,
            url=data.get("url"),
        )


# ===========================
# Pull requests
# ===========================


class PullRequestStatus(Enum):
    """Status of a pull request."""
    ACTIVE = "active"
    ABANDONED = "abandoned"
    COMPLETED = "completed"
    ALL = "all"
    NOT_SET = "notSet"


class ThreadStatus(Enum):
    """Status of a comment thread."""
    ACTIVE = "active"
    FIXED = "fixed"
    WONT_FIX = "wontFix"
    CLOSED = "closed"
    BY_DESIGN = "byDesign"
    PENDING = "pending"
    UNKNOWN = "unknown"


def _enum_value(enum_type: Type[Enum], raw: Any, default: Enum) -> Any:
    # Service values are camelCase; compare case-insensitively
    if isinstance(raw, str):
        for member in enum_type:
            if member.value.lower() == raw.lower():
                return member
    return default


@dataclass
class PullRequestQuery:
    """
    Search criteria for listing pull requests.

    ``status``, ``reviewer_id`` and ``creator_id`` are sent to the server.
    ``created_after`` and ``custom_filter`` are applied to each page locally;
    ``created_after`` also stops paging once a page reaches older items.
    """

    status: Optional[Any] = None
    reviewer_id: Optional[str] = None
    creator_id: Optional[str] = None
    created_after: Optional[datetime] = None
    custom_filter: Optional[Callable[["PullRequest"], bool]] = None

    def __post_init__(self) -> None:
        if isinstance(self.status, PullRequestStatus):
            self.status = self.status.value
        if self.created_after is not None and self.created_after.tzinfo is None:
            self.created_after = self.created_after.replace(tzinfo=timezone.utc)

    @classmethod
    def none(cls) -> "PullRequestQuery":
        """Query without any criteria."""
        return cls()


@dataclass
class GitRepository:
    """Git repository information."""
    id: str
    name: str
    url: Optional[str] = None
    project_id: Optional[str] = None
    default_branch: Optional[str] = None

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "GitRepository":
        """Create GitRepository from API response."""
        data = data or {}
        project = data.get("project") or {}
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            url=data.get("url"),
            project_id=project.get("id"),
            default_branch=data.get("defaultBranch"),
        )


@dataclass
class PullRequest:
    """Represents a pull request."""
    pull_request_id: int
    title: str
    status: PullRequestStatus
    created_by: IdentityRef
    repository: GitRepository
    description: str = ""
    source_branch: str = ""
    target_branch: str = ""
    merge_status: Optional[str] = None
    is_draft: bool = False
    creation_date: Optional[datetime] = None
    closed_date: Optional[datetime] = None
    url: Optional[str] = None
    reviewers: List[IdentityRef] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PullRequest":
        """Create PullRequest from API response."""
        return cls(
            pull_request_id=data.get("pullRequestId", 0),
            title=data.get("title", ""),
            status=_enum_value(PullRequestStatus, data.get("status"), PullRequestStatus.NOT_SET),
            created_by=IdentityRef.from_api(data.get("createdBy")),
            repository=GitRepository.from_api(data.get("repository")),
            description=data.get("description", ""),
            source_branch=data.get("sourceRefName", ""),
            target_branch=data.get("targetRefName", ""),
            merge_status=data.get("mergeStatus"),
            is_draft=bool(data.get("isDraft", False)),
            creation_date=parse_datetime(data.get("creationDate")),
            closed_date=parse_datetime(data.get("closedDate")),
            url=data.get("url"),
            reviewers=[IdentityRef.from_api(r) for r in data.get("reviewers") or []],
        )

    @property
    def is_active(self) -> bool:
        """Check if PR is still active."""
        return self.status == PullRequestStatus.ACTIVE

    @property
    def is_completed(self) -> bool:
        """Check if PR is completed/merged."""
        return self.status == PullRequestStatus.COMPLETED


@dataclass
class PullRequestIteration:
    """One push of commits to a pull request."""
    id: int
    description: str = ""
    author: Optional[IdentityRef] = None
    created_date: Optional[datetime] = None
    updated_date: Optional[datetime] = None
    source_ref_commit: Optional[str] = None
    target_ref_commit: Optional[str] = None
    common_ref_commit: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PullRequestIteration":
        """Create PullRequestIteration from API response."""
        author = data.get("author")
        return cls(
            id=data.get("id", 0),
            description=data.get("description", ""),
            author=IdentityRef.from_api(author) if author else None,
            created_date=parse_datetime(data.get("createdDate")),
            updated_date=parse_datetime(data.get("updatedDate")),
            source_ref_commit=(data.get("sourceRefCommit") or {}).get("commitId"),
            target_ref_commit=(data.get("targetRefCommit") or {}).get("commitId"),
            common_ref_commit=(data.get("commonRefCommit") or {}).get("commitId"),
        )


@dataclass
class Comment:
    """A single comment in a thread."""
    id: int
    content: str
    author: IdentityRef
    parent_comment_id: int = 0
    published_date: Optional[datetime] = None
    last_updated_date: Optional[datetime] = None
    comment_type: str = "text"
    is_deleted: bool = False

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Comment":
        """Create Comment from API response."""
        return cls(
            id=data.get("id", 0),
            content=data.get("content", ""),
            author=IdentityRef.from_api(data.get("author")),
            parent_comment_id=data.get("parentCommentId", 0),
            published_date=parse_datetime(data.get("publishedDate")),
            last_updated_date=parse_datetime(data.get("lastUpdatedDate")),
            comment_type=data.get("commentType", "text"),
            is_deleted=bool(data.get("isDeleted", False)),
        )


@dataclass
class PullRequestThread:
    """A comment thread on a pull request."""
    id: int
    status: ThreadStatus
    file_path: Optional[str] = None
    line_number: Optional[int] = None
    comments: List[Comment] = field(default_factory=list)
    published_date: Optional[datetime] = None
    last_updated_date: Optional[datetime] = None
    is_deleted: bool = False
    properties: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PullRequestThread":
        """Create PullRequestThread from API response."""
        thread_context = data.get("threadContext") or {}
        right_file_start = thread_context.get("rightFileStart") or {}

        return cls(
            id=data.get("id", 0),
            status=_enum_value(ThreadStatus, data.get("status"), ThreadStatus.UNKNOWN),
            file_path=thread_context.get("filePath"),
            line_number=right_file_start.get("line"),
            comments=[Comment.from_api(c) for c in data.get("comments") or []],
            published_date=parse_datetime(data.get("publishedDate")),
            last_updated_date=parse_datetime(data.get("lastUpdatedDate")),
            is_deleted=bool(data.get("isDeleted", False)),
            properties=data.get("properties") or {},
        )

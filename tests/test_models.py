"""Unit tests for data models."""

from datetime import datetime, timezone

from vsts.azure_devops.models import (
    CollectionResponse,
    FlatWorkItemsQueryResult,
    HierarchicalWorkItemsQueryResult,
    IdentityRef,
    PullRequest,
    PullRequestQuery,
    PullRequestStatus,
    PullRequestThread,
    ThreadStatus,
    WorkItem,
    WorkItemsQuery,
    parse_datetime,
)


def test_parse_datetime_seven_fraction_digits():
    """Test timestamps with 100ns precision are accepted."""
    parsed = parse_datetime("2018-05-02T08:30:00.1234567Z")

    assert parsed == datetime(2018, 5, 2, 8, 30, 0, 123456, tzinfo=timezone.utc)


def test_parse_datetime_short_fraction():
    """Test short fractions are padded, not misread."""
    parsed = parse_datetime("2018-03-01T12:00:00.57Z")

    assert parsed.microsecond == 570000


def test_parse_datetime_invalid():
    """Test invalid or missing values give None."""
    assert parse_datetime("not a date") is None
    assert parse_datetime(None) is None
    assert parse_datetime("") is None


def test_identity_from_api():
    """Test IdentityRef creation from API data."""
    identity = IdentityRef.from_api(
        {"id": "user-123", "displayName": "John Doe", "uniqueName": "john.doe@example.com"}
    )

    assert identity.id == "user-123"
    assert identity.display_name == "John Doe"
    assert identity.unique_name == "john.doe@example.com"


def test_work_items_query_body():
    """Test WIQL request body."""
    query = WorkItemsQuery("SELECT [System.Id] FROM WorkItems")

    assert query.to_api() == {"query": "SELECT [System.Id] FROM WorkItems"}
    assert query.is_hierarchical is False


def test_flat_query_result_from_api():
    """Test flat query result parsing."""
    result = FlatWorkItemsQueryResult.from_api(
        {
            "queryType": "flat",
            "asOf": "2018-05-01T10:00:00Z",
            "columns": [{"referenceName": "System.Id", "name": "ID"}],
            "workItems": [{"id": 5, "url": "https://example/5"}],
        }
    )

    assert result.query_type == "flat"
    assert result.as_of.year == 2018
    assert result.columns[0].reference_name == "System.Id"
    assert result.work_items[0].id == 5


def test_hierarchical_query_result_from_api():
    """Test tree query result parsing."""
    result = HierarchicalWorkItemsQueryResult.from_api(
        {
            "queryType": "tree",
            "columns": [],
            "workItemRelations": [
                {"target": {"id": 1}},
                {"source": {"id": 1}, "target": {"id": 2}, "rel": "System.LinkTypes.Hierarchy-Forward"},
            ],
        }
    )

    relations = result.work_item_relations
    assert relations[0].source is None
    assert relations[0].target.id == 1
    assert relations[1].source.id == 1
    assert relations[1].rel == "System.LinkTypes.Hierarchy-Forward"


def test_work_item_field_helpers():
    """Test common field accessors."""
    item = WorkItem.from_api(
        {
            "id": 9,
            "rev": 3,
            "fields": {
                "System.Title": "Fix login",
                "System.State": "Active",
                "System.WorkItemType": "Bug",
            },
        }
    )

    assert item.title == "Fix login"
    assert item.state == "Active"
    assert item.work_item_type == "Bug"


def test_collection_response_parser():
    """Test collection envelope parsing."""
    parse = CollectionResponse.of(WorkItem)
    response = parse({"count": 2, "value": [{"id": 1}, {"id": 2}]})

    assert response.count == 2
    assert [w.id for w in response.value] == [1, 2]


def test_collection_response_without_value():
    """Test missing value gives an empty collection."""
    response = CollectionResponse.from_api({}, WorkItem)

    assert response.count == 0
    assert response.value == []


def test_pull_request_from_api(mock_pr_response):
    """Test PullRequest creation from API data."""
    pr = PullRequest.from_api(mock_pr_response)

    assert pr.pull_request_id == 123
    assert pr.status == PullRequestStatus.ACTIVE
    assert pr.is_active is True
    assert pr.created_by.display_name == "John Doe"
    assert pr.repository.project_id == "proj-123"
    assert pr.reviewers[0].display_name == "Jane Roe"
    assert pr.merge_status == "succeeded"
    assert pr.creation_date == datetime(2018, 5, 1, 10, 0, tzinfo=timezone.utc)


def test_pull_request_unknown_status(make_pull_request):
    """Test unknown status maps to NOT_SET."""
    pr = PullRequest.from_api(make_pull_request(1, status="weird"))

    assert pr.status == PullRequestStatus.NOT_SET


def test_thread_status_case_insensitive(mock_thread_response):
    """Test camelCase statuses are recognised."""
    mock_thread_response["status"] = "wontFix"
    thread = PullRequestThread.from_api(mock_thread_response)

    assert thread.status == ThreadStatus.WONT_FIX
    assert thread.published_date.microsecond == 123456


def test_thread_without_context():
    """Test general threads have no file position."""
    thread = PullRequestThread.from_api({"id": 3, "comments": []})

    assert thread.file_path is None
    assert thread.line_number is None
    assert thread.status == ThreadStatus.UNKNOWN


def test_pull_request_query_normalisation():
    """Test enum status and naive dates are normalised."""
    query = PullRequestQuery(status=PullRequestStatus.ABANDONED, created_after=datetime(2018, 1, 1))

    assert query.status == "abandoned"
    assert query.created_after.tzinfo == timezone.utc


def test_pull_request_query_none():
    """Test the empty query has no criteria."""
    query = PullRequestQuery.none()

    assert query.status is None
    assert query.created_after is None
    assert query.custom_filter is None

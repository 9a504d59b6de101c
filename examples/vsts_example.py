"""
Example script demonstrating the VSTS client.

This script shows how to:
1. Run a work item query and fetch the items
2. Read the history of a work item
3. List recent pull requests with their iterations and threads
"""

from datetime import datetime, timedelta, timezone

from vsts import create_client, load_config, WorkItemsQuery, PullRequestQuery
from vsts.utils import setup_logger

logger = setup_logger(__name__)

PROJECT = "MyProject"  # Replace with actual project
REPOSITORY = "MyRepo"  # Replace with actual repository


def main():
    """Main example function."""
    try:
        config = load_config("config.yaml")
    except FileNotFoundError:
        logger.error("config.yaml not found. Copy config.example.yaml and fill in your settings.")
        return
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return

    with create_client(config) as client:
        query = WorkItemsQuery(
            "SELECT [System.Id], [System.Title], [System.State] FROM WorkItems "
            "WHERE [System.TeamProject] = @project AND [System.State] = 'Active'"
        )

        logger.info(f"Querying active work items in {PROJECT}...")
        work_items = client.get_work_items(PROJECT, query)
        logger.info(f"Found {len(work_items)} work items")

        for item in work_items[:5]:
            logger.info(f"   #{item.id:<6} {item.state or '':10s} {item.title}")

        if work_items:
            updates = client.get_work_item_updates(work_items[0].id)
            logger.info(f"Work item #{work_items[0].id} has {len(updates)} revisions")

        since = datetime.now(timezone.utc) - timedelta(days=14)
        pr_query = PullRequestQuery(status="all", created_after=since)

        logger.info(f"Listing pull requests created since {since:%Y-%m-%d}...")
        pull_requests = client.get_pull_requests(PROJECT, REPOSITORY, pr_query)
        logger.info(f"Found {len(pull_requests)} pull requests")

        for pr in pull_requests[:5]:
            iterations = client.get_pull_request_iterations(PROJECT, REPOSITORY, pr.pull_request_id)
            threads = client.get_pull_request_threads(PROJECT, REPOSITORY, pr.pull_request_id)
            logger.info(
                f"   PR #{pr.pull_request_id} {pr.title} "
                f"({pr.status.value}, {len(iterations)} iterations, {len(threads)} threads)"
            )


if __name__ == "__main__":
    main()

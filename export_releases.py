"""Export per-repository release statistics to CSV."""
import asyncio
import csv
import sys
import logging
from typing import Any, List, Sequence
from release_dashboard.application.release_service import ReleaseDashboardService
from release_dashboard.domain.models import Repository
from release_dashboard.infrastructure.config import ConfigurationError, load_settings
from release_dashboard.infrastructure.github_client import GitHubGraphQLClient


logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

CSV_HEADER = [
    'full_name', 'url', 'language', 'star_count', 'updated_at',
    'total_releases', 'semantic_releases', 'latest_tag', 'latest_release_date',
    'latest_semantic_version', 'days_since_latest_release'
]


def repository_row(repo: Repository) -> List[Any]:
    """CSV row for a repository; release columns are blank without stats."""
    stats = repo.release_stats
    latest = stats.latest_release if stats else None

    return [
        repo.full_name,
        repo.url,
        repo.language or '',
        repo.star_count,
        repo.updated_at.isoformat(),
        stats.total_releases if stats else '',
        stats.semantic_releases if stats else '',
        latest.tag_name if latest else '',
        latest.date.isoformat() if latest else '',
        repo.latest_release_version() or '',
        stats.days_since_latest_release if stats and stats.days_since_latest_release is not None else '',
    ]


def write_csv(repositories: Sequence[Repository], output_file: str) -> int:
    """Write repositories to a CSV file and return the number of rows written."""
    with open(output_file, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)

        row_count = 0
        for repo in repositories:
            writer.writerow(repository_row(repo))
            row_count += 1

    return row_count


async def export_to_csv(output_file: str = "releases.csv"):
    """Fetch release statistics for the configured organization and export them.

    Args:
        output_file: Path to output CSV file
    """
    try:
        settings = load_settings()
        settings.validate()
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    service = ReleaseDashboardService(
        provider=GitHubGraphQLClient(
            settings.github_token,
            tags_per_repository=settings.tags_per_repository
        ),
        max_concurrency=settings.max_concurrency
    )

    try:
        repositories = await service.fetch_repositories(settings.github_org)
        row_count = write_csv(repositories, output_file)
        logger.info(f"Exported {row_count} repositories to {output_file}")
    except Exception as e:
        logger.error(f"Error exporting release statistics: {e}")
        sys.exit(1)
    finally:
        await service.close()


if __name__ == "__main__":
    output_file = sys.argv[1] if len(sys.argv) > 1 else "releases.csv"
    asyncio.run(export_to_csv(output_file))

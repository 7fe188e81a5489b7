"""Main entry point for the release dashboard.

Fetches an organization's repositories with their release statistics and
prints them as a console dashboard, or as JSON with ``--json``.
"""
import asyncio
import json
import sys
import logging
from release_dashboard.application.release_service import ReleaseDashboardService
from release_dashboard.infrastructure.config import ConfigurationError, load_settings
from release_dashboard.infrastructure.github_client import GitHubGraphQLClient
from release_dashboard.presentation.console import display_dashboard
from release_dashboard.presentation.serializers import repositories_payload


logger = logging.getLogger(__name__)


async def main(output_json: bool = False):
    """Build and print the dashboard."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )

    try:
        settings = load_settings()
        settings.validate()
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level)

    logger.info(f"Configuration: {settings.summary()}")

    # Initialize infrastructure components
    github_client = GitHubGraphQLClient(
        settings.github_token,
        tags_per_repository=settings.tags_per_repository
    )

    # Initialize application service
    service = ReleaseDashboardService(
        provider=github_client,
        max_concurrency=settings.max_concurrency
    )

    try:
        repositories = await service.fetch_repositories(
            settings.github_org,
            include_release_data=settings.include_release_data
        )

        if output_json:
            print(json.dumps(repositories_payload(repositories, settings.github_org), indent=2))
        else:
            display_dashboard(repositories, settings.github_org)

    except Exception as e:
        logger.error(f"Dashboard failed: {e}", exc_info=True)
        sys.exit(1)
    finally:
        await service.close()


if __name__ == "__main__":
    asyncio.run(main(output_json="--json" in sys.argv[1:]))

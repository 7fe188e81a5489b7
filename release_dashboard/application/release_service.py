"""Release dashboard service orchestrating repository listing and release enrichment."""
import asyncio
import logging
import time
from typing import List, Optional
from release_dashboard.domain.models import Repository
from release_dashboard.domain.release_calculator import ReleaseCalculator
from release_dashboard.domain.repository_provider import IRepositoryProvider


logger = logging.getLogger(__name__)


class ReleaseDashboardService:
    """Application service for building the release dashboard data.

    Lists an organization's repositories and enriches each one with release
    statistics. Enrichment runs concurrently; every repository is independent.
    """

    def __init__(
        self,
        provider: IRepositoryProvider,
        max_concurrency: Optional[int] = None
    ):
        """Initialize the service.

        Args:
            provider: Repository provider implementation
            max_concurrency: Upper bound on concurrent tag fetches (None or 0 for unbounded)
        """
        self._provider = provider
        self._semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    async def enrich_repository(self, repository: Repository) -> Repository:
        """Return a copy of the repository with release statistics attached.

        A failure to fetch or analyze tags never propagates: the original repository is
        returned unchanged so that it still shows up on the dashboard.

        Args:
            repository: Base repository to enrich

        Returns:
            Repository with release statistics, or the input repository on failure
        """
        logger.debug(f"Fetching release data for {repository.full_name}")

        try:
            if self._semaphore is None:
                tags = await self._provider.get_repository_tags(repository.owner, repository.name)
            else:
                async with self._semaphore:
                    tags = await self._provider.get_repository_tags(repository.owner, repository.name)

            releases = ReleaseCalculator.parse_tags(tags)
            release_stats = ReleaseCalculator.calculate_stats(releases)
        except Exception as e:
            logger.warning(
                f"Failed to fetch release data for {repository.full_name}, "
                f"returning repository without stats: {e}"
            )
            return repository

        return repository.with_release_stats(release_stats)

    async def fetch_repositories(
        self,
        org_name: str,
        include_release_data: bool = True
    ) -> List[Repository]:
        """Fetch an organization's repositories, optionally with release data.

        Args:
            org_name: GitHub organization name
            include_release_data: Whether to fetch release data for each repository

        Returns:
            Repositories in provider order
        """
        start_time = time.time()
        logger.info(
            f"Fetching repositories for {org_name} "
            f"(include_release_data={include_release_data})"
        )

        try:
            repositories = await self._provider.list_repositories(org_name)
        except Exception as e:
            logger.error(f"Failed to fetch repositories for {org_name}: {e}")
            raise

        logger.info(f"Fetched {len(repositories)} repositories for {org_name}")

        if not include_release_data:
            return repositories

        enriched = await asyncio.gather(
            *(self.enrich_repository(repository) for repository in repositories)
        )

        with_stats = sum(1 for repository in enriched if repository.release_stats is not None)
        duration = time.time() - start_time
        logger.info(
            f"Enriched {with_stats}/{len(enriched)} repositories with release data "
            f"in {duration:.2f} seconds"
        )

        return list(enriched)

    async def close(self) -> None:
        """Close connections."""
        await self._provider.close()

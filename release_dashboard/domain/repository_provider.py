"""Repository provider interface (port) for fetching repository and tag data.

This is the anti-corruption layer that shields the domain from GitHub API specifics.
"""
from abc import ABC, abstractmethod
from typing import List
from release_dashboard.domain.models import Repository, RepositoryTag


class IRepositoryProvider(ABC):
    """Abstract interface for repository data operations."""

    @abstractmethod
    async def list_repositories(self, org_name: str) -> List[Repository]:
        """List all repositories of an organization.

        Args:
            org_name: GitHub organization name

        Returns:
            Repository entities without release statistics
        """
        pass

    @abstractmethod
    async def get_repository_tags(self, owner: str, name: str) -> List[RepositoryTag]:
        """Get the tags of a single repository.

        Args:
            owner: Repository owner
            name: Repository name

        Returns:
            Tags in no particular order
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        pass

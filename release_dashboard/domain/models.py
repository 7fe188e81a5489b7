"""Domain models representing core business entities."""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import NamedTuple, Optional
from urllib.parse import urlparse

from release_dashboard.domain.release import ReleaseStats, days_since


VALID_URL_SCHEMES = ("http", "https")


class RepositoryValidationError(ValueError):
    """Raised when a Repository is built from invalid data."""
    pass


class RepositoryTag(NamedTuple):
    """A raw tag as supplied by a repository provider."""
    name: str
    date: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Repository:
    """Immutable domain entity representing a GitHub repository.

    Using frozen dataclass for immutability; enrichment with release
    statistics always produces a new instance (see with_release_stats).
    """
    name: str
    owner: str
    url: str
    description: Optional[str] = None
    language: Optional[str] = None
    star_count: int = 0
    updated_at: datetime = field(default_factory=_utcnow)
    release_stats: Optional[ReleaseStats] = None

    def __post_init__(self):
        if (
            not self.name or not self.name.strip()
            or not self.owner or not self.owner.strip()
            or not self.url
        ):
            raise RepositoryValidationError("Repository name, owner, and url are required")
        if urlparse(self.url).scheme not in VALID_URL_SCHEMES:
            raise RepositoryValidationError("Invalid repository URL")
        if self.star_count < 0:
            raise RepositoryValidationError("Star count cannot be negative")

    @property
    def full_name(self) -> str:
        """Returns the full repository name (owner/name)."""
        return f"{self.owner}/{self.name}"

    def with_release_stats(self, release_stats: ReleaseStats) -> 'Repository':
        """Returns a new Repository instance carrying the given release stats."""
        return Repository(
            name=self.name,
            owner=self.owner,
            url=self.url,
            description=self.description,
            language=self.language,
            star_count=self.star_count,
            updated_at=self.updated_at,
            release_stats=release_stats
        )

    def display_description(self) -> str:
        return self.description if self.has_description() else "No description available"

    def display_language(self) -> str:
        return self.language if self.has_language() else "Unknown"

    def has_description(self) -> bool:
        return self.description is not None and self.description.strip() != ""

    def has_language(self) -> bool:
        return self.language is not None

    def days_since_update(self) -> int:
        return days_since(self.updated_at)

    def is_recently_updated(self, days: int = 7) -> bool:
        """Checks if the repository was updated within the last ``days`` days."""
        cutoff = datetime.now(self.updated_at.tzinfo) - timedelta(days=days)
        return self.updated_at >= cutoff

    def has_release_stats(self) -> bool:
        return self.release_stats is not None and self.release_stats.has_releases()

    def latest_release_version(self) -> Optional[str]:
        """Version string of the latest non pre-release tag, if any."""
        if self.release_stats is None or self.release_stats.latest_semantic_release is None:
            return None
        version = self.release_stats.latest_semantic_release.version
        return str(version) if version is not None else None

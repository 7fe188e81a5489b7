"""Release value objects: semantic versions, releases and release statistics."""
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


# major.minor.patch with an optional lowercase 'v' and a verbatim pre-release suffix
_VERSION_PATTERN = re.compile(r"v?([0-9]+)\.([0-9]+)\.([0-9]+)(?:-(\S+))?")


def days_since(date: datetime) -> int:
    """Whole days between ``date`` and now, in either direction.

    ``now`` is taken in the same timezone as ``date`` so naive and aware
    datetimes both work.
    """
    now = datetime.now(date.tzinfo)
    return abs(now - date).days


@dataclass(frozen=True)
class SemanticVersion:
    """A parsed ``major.minor.patch[-preRelease]`` version."""
    major: int
    minor: int
    patch: int
    pre_release: Optional[str] = None

    @classmethod
    def parse(cls, version: str) -> Optional['SemanticVersion']:
        """Parse a tag name such as ``v1.2.3`` or ``1.2.3-beta``.

        Args:
            version: Tag name to parse

        Returns:
            SemanticVersion, or None when the tag is not a semantic version
        """
        match = _VERSION_PATTERN.fullmatch(version)
        if match is None:
            return None

        major, minor, patch, pre_release = match.groups()
        return cls(
            major=int(major),
            minor=int(minor),
            patch=int(patch),
            pre_release=pre_release
        )

    def is_semantic(self) -> bool:
        """True for a canonical release, False for a pre-release."""
        return self.pre_release is None

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre_release is not None:
            return f"{base}-{self.pre_release}"
        return base


@dataclass(frozen=True)
class Release:
    """A tag in a repository together with its commit date."""
    tag_name: str
    date: datetime
    version: Optional[SemanticVersion] = None

    def has_semantic_version(self) -> bool:
        """Pre-releases parse but are not counted as semantic releases."""
        return self.version is not None and self.version.is_semantic()

    def days_since(self) -> int:
        return days_since(self.date)


@dataclass(frozen=True)
class ReleaseStats:
    """Aggregate release statistics for one repository.

    Built by ReleaseCalculator.calculate_stats; holds no logic of its own
    beyond the two convenience checks.
    """
    total_releases: int
    semantic_releases: int
    latest_release: Optional[Release] = None
    latest_semantic_release: Optional[Release] = None
    days_since_latest_release: Optional[int] = None

    def has_releases(self) -> bool:
        return self.total_releases > 0

    def has_semantic_releases(self) -> bool:
        return self.semantic_releases > 0

"""Release statistics calculation.

Pure domain service: every method is a function of its arguments only, so it
is safe to call from any number of concurrent enrichment tasks.
"""
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, Tuple

from release_dashboard.domain.models import RepositoryTag
from release_dashboard.domain.release import Release, ReleaseStats, SemanticVersion, days_since


class ReleaseCalculator:
    """Service for turning repository tags into release statistics."""

    @staticmethod
    def parse_tags(tags: Iterable[RepositoryTag]) -> List[Release]:
        """Parse tags into Release objects.

        Args:
            tags: Tags with name and date, in any order

        Returns:
            Releases sorted by date, newest first. Tags sharing a date keep
            their input order.
        """
        releases = [
            Release(
                tag_name=tag.name,
                date=tag.date,
                version=SemanticVersion.parse(tag.name)
            )
            for tag in tags
        ]
        return sorted(releases, key=lambda release: release.date, reverse=True)

    @staticmethod
    def filter_semantic_versions(releases: Iterable[Release]) -> List[Release]:
        """Keep only non pre-release semantic versions, preserving order."""
        return [release for release in releases if release.has_semantic_version()]

    @staticmethod
    def calculate_stats(releases: Sequence[Release]) -> ReleaseStats:
        """Calculate statistics from a list of releases.

        The first release is taken as the latest one; the list is not
        re-sorted. Pass the output of parse_tags (newest first) to get the
        chronologically latest release, or a deliberately reordered or
        truncated list to get stats over that view.

        Args:
            releases: Releases sorted by date, newest first

        Returns:
            ReleaseStats for the given releases
        """
        if not releases:
            return ReleaseStats(
                total_releases=0,
                semantic_releases=0,
                latest_release=None,
                latest_semantic_release=None,
                days_since_latest_release=None
            )

        semantic = ReleaseCalculator.filter_semantic_versions(releases)
        latest_release = releases[0]

        return ReleaseStats(
            total_releases=len(releases),
            semantic_releases=len(semantic),
            latest_release=latest_release,
            latest_semantic_release=semantic[0] if semantic else None,
            days_since_latest_release=latest_release.days_since()
        )

    @staticmethod
    def calculate_days_since(date: datetime) -> int:
        return days_since(date)

    @staticmethod
    def get_latest_releases(releases: Sequence[Release], count: int) -> List[Release]:
        """First ``count`` releases of the input; no re-sorting happens."""
        return list(releases[:count])

    @staticmethod
    def is_recent_release(release: Release, days: int) -> bool:
        return release.days_since() <= days

    @staticmethod
    def count_by_month(
        releases: Iterable[Release],
        months: int = 12,
        now: Optional[datetime] = None
    ) -> List[Tuple[str, int]]:
        """Bucket releases by calendar month for charting.

        Args:
            releases: Releases in any order
            months: Number of months in the window, ending with the month of ``now``
            now: End of the window; defaults to the current UTC time

        Returns:
            (YYYY-MM, count) pairs, oldest month first, including empty months
        """
        if months < 1:
            return []

        now = now or datetime.now(timezone.utc)
        buckets = []
        year, month = now.year, now.month
        for _ in range(months):
            buckets.append(f"{year:04d}-{month:02d}")
            year, month = (year - 1, 12) if month == 1 else (year, month - 1)
        buckets.reverse()

        counts = dict.fromkeys(buckets, 0)
        for release in releases:
            key = f"{release.date.year:04d}-{release.date.month:02d}"
            if key in counts:
                counts[key] += 1

        return list(counts.items())

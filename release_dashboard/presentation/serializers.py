"""JSON-ready rendering of repositories and their release statistics.

Field names are camelCase to match the dashboard's wire format.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence
from release_dashboard.domain.models import Repository
from release_dashboard.domain.release import Release, ReleaseStats


def release_to_dict(release: Optional[Release]) -> Optional[Dict[str, Any]]:
    if release is None:
        return None
    return {
        "tagName": release.tag_name,
        "date": release.date.isoformat(),
        "version": str(release.version) if release.version is not None else None,
    }


def release_stats_to_dict(stats: Optional[ReleaseStats]) -> Optional[Dict[str, Any]]:
    if stats is None:
        return None
    return {
        "totalReleases": stats.total_releases,
        "semanticReleases": stats.semantic_releases,
        "latestRelease": release_to_dict(stats.latest_release),
        "latestSemanticRelease": release_to_dict(stats.latest_semantic_release),
        "daysSinceLatestRelease": stats.days_since_latest_release,
    }


def repository_to_dict(repository: Repository) -> Dict[str, Any]:
    return {
        "name": repository.name,
        "owner": repository.owner,
        "url": repository.url,
        "description": repository.description,
        "language": repository.language,
        "starCount": repository.star_count,
        "updatedAt": repository.updated_at.isoformat(),
        "releaseStats": release_stats_to_dict(repository.release_stats),
    }


def repositories_payload(
    repositories: Sequence[Repository],
    organization: str,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """Build the full dashboard response for an organization.

    Args:
        repositories: Repositories to render, in display order
        organization: Organization the repositories belong to
        now: Timestamp of the response; defaults to the current UTC time

    Returns:
        Dictionary with repositories, count, organization and timestamp
    """
    rendered: List[Dict[str, Any]] = [repository_to_dict(repo) for repo in repositories]
    return {
        "repositories": rendered,
        "count": len(rendered),
        "organization": organization,
        "timestamp": (now or datetime.now(timezone.utc)).isoformat(),
    }

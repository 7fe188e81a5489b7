"""Mappers from GitHub GraphQL payloads to domain objects.

All shape checks and coercion of the loosely-typed API data happen here so
that the domain only ever sees well-formed values.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional
from release_dashboard.domain.models import Repository, RepositoryTag


logger = logging.getLogger(__name__)


def parse_github_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp such as ``2024-01-01T12:00:00Z`` as aware UTC."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class RepositoryMapper:
    """Maps GitHub repository nodes to domain Repository entities."""

    @staticmethod
    def to_domain(node: Dict[str, Any]) -> Repository:
        owner = (node.get("owner") or {}).get("login") or "unknown"
        language = (node.get("primaryLanguage") or {}).get("name")

        return Repository(
            name=node.get("name") or "",
            owner=owner,
            url=node.get("url") or "",
            description=node.get("description") or None,
            language=language or None,
            star_count=node.get("stargazerCount") or 0,
            updated_at=parse_github_datetime(node.get("updatedAt")) or datetime.now(timezone.utc)
        )

    @classmethod
    def to_domain_list(cls, nodes: Iterable[Optional[Dict[str, Any]]]) -> List[Repository]:
        """Map repository nodes, skipping any that do not form a valid Repository."""
        repositories = []
        for node in nodes:
            if not node:
                continue
            try:
                repositories.append(cls.to_domain(node))
            except ValueError as e:
                logger.warning(f"Skipping invalid repository {node.get('name')!r}: {e}")
        return repositories


class ReleaseMapper:
    """Maps GitHub tag ref nodes to domain RepositoryTag records."""

    @staticmethod
    def tag_date(target: Optional[Dict[str, Any]]) -> Optional[datetime]:
        """Commit date of a tag target.

        Lightweight tags point straight at a commit. Annotated tags point at a
        Tag object whose own target is the commit; the tagger date is used when
        that commit date is unavailable.
        """
        if not target:
            return None

        if target.get("committedDate"):
            return parse_github_datetime(target["committedDate"])

        inner = target.get("target") or {}
        if inner.get("committedDate"):
            return parse_github_datetime(inner["committedDate"])

        tagger = target.get("tagger") or {}
        return parse_github_datetime(tagger.get("date"))

    @classmethod
    def map_tag(cls, node: Dict[str, Any]) -> RepositoryTag:
        date = cls.tag_date(node.get("target")) or datetime.now(timezone.utc)
        return RepositoryTag(name=node["name"], date=date)

    @classmethod
    def map_tags(cls, nodes: Iterable[Optional[Dict[str, Any]]]) -> List[RepositoryTag]:
        return [cls.map_tag(node) for node in nodes if node and node.get("name")]

"""Console rendering of the release dashboard."""
from datetime import datetime
from typing import Optional, Sequence
from release_dashboard.domain.models import Repository
from release_dashboard.domain.release_calculator import ReleaseCalculator
from release_dashboard.presentation.formatters import (
    format_date,
    format_days_ago,
    format_number,
    format_percentage,
)

RECENT_RELEASE_DAYS = 30
CHART_MONTHS = 12
CHART_WIDTH = 40


def print_section(title: str):
    """Print a section header."""
    print("\n" + "=" * 80)
    print(title)
    print("=" * 80)


def display_overview(repositories: Sequence[Repository], organization: str):
    print_section(f"Release Overview: {organization}")

    total = len(repositories)
    with_releases = [repo for repo in repositories if repo.has_release_stats()]
    with_semantic = [
        repo for repo in with_releases if repo.release_stats.has_semantic_releases()
    ]
    recent = [
        repo for repo in with_releases
        if ReleaseCalculator.is_recent_release(
            repo.release_stats.latest_release, RECENT_RELEASE_DAYS
        )
    ]

    print(f"Repositories: {total:,}")
    for label, subset in (
        ("With releases", with_releases),
        ("With semantic releases", with_semantic),
        (f"Released in last {RECENT_RELEASE_DAYS} days", recent),
    ):
        percentage = (len(subset) / total * 100) if total > 0 else 0
        print(f"{label + ':':<32} {len(subset):>6,} ({format_percentage(percentage)})")


def display_repositories(repositories: Sequence[Repository]):
    print_section("Repositories")

    print(f"{'Repository':<32} {'Stars':>7} {'Tags':>5} {'SemVer':>6} {'Latest':>12} {'Date':>12} {'Released':>14}")
    print("-" * 94)
    for repo in repositories:
        stats = repo.release_stats
        if stats is None or not stats.has_releases():
            print(
                f"{repo.full_name:<32} {format_number(repo.star_count):>7} "
                f"{'-':>5} {'-':>6} {'-':>12} {'-':>12} {'no releases':>14}"
            )
            continue

        version = repo.latest_release_version() or stats.latest_release.tag_name
        released_on = format_date(stats.latest_release.date)
        released = format_days_ago(stats.days_since_latest_release)
        print(
            f"{repo.full_name:<32} {format_number(repo.star_count):>7} "
            f"{stats.total_releases:>5} {stats.semantic_releases:>6} "
            f"{version:>12} {released_on:>12} {released:>14}"
        )


def display_monthly_chart(
    repositories: Sequence[Repository],
    months: int = CHART_MONTHS,
    now: Optional[datetime] = None
):
    """Bar chart of how many repositories had their latest release in each month."""
    print_section(f"Latest Releases per Month (last {months} months)")

    latest = [
        repo.release_stats.latest_release
        for repo in repositories
        if repo.has_release_stats()
    ]
    buckets = ReleaseCalculator.count_by_month(latest, months=months, now=now)
    peak = max((count for _, count in buckets), default=0)

    for month, count in buckets:
        bar = "#" * (round(count / peak * CHART_WIDTH) if peak else 0)
        print(f"{month:<10} {count:>4} {bar}")


def display_dashboard(
    repositories: Sequence[Repository],
    organization: str,
    now: Optional[datetime] = None
):
    """Print every dashboard section."""
    display_overview(repositories, organization)
    display_repositories(repositories)
    display_monthly_chart(repositories, now=now)

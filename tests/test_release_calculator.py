"""Tests for the release calculator domain service."""
from datetime import datetime, timedelta, timezone
import pytest
from release_dashboard.domain.models import RepositoryTag
from release_dashboard.domain.release import Release, SemanticVersion
from release_dashboard.domain.release_calculator import ReleaseCalculator


def utc(year, month, day):
    return datetime(year, month, day, tzinfo=timezone.utc)


def release(tag: str, date: datetime) -> Release:
    return Release(tag, date, SemanticVersion.parse(tag))


@pytest.fixture
def sample_tags():
    """Tags deliberately supplied out of date order."""
    return [
        RepositoryTag("v1.0.0", utc(2024, 1, 1)),
        RepositoryTag("v2.0.0", utc(2024, 3, 1)),
        RepositoryTag("v1.5.0-beta", utc(2024, 2, 1)),
    ]


def test_parse_tags_sorts_newest_first(sample_tags):
    releases = ReleaseCalculator.parse_tags(sample_tags)

    assert [r.tag_name for r in releases] == ["v2.0.0", "v1.5.0-beta", "v1.0.0"]
    assert releases[0].version == SemanticVersion(2, 0, 0)
    assert releases[1].version.pre_release == "beta"


def test_parse_tags_keeps_input_order_on_ties():
    date = utc(2024, 5, 5)
    tags = [RepositoryTag("a", date), RepositoryTag("b", date), RepositoryTag("c", date)]

    assert [r.tag_name for r in ReleaseCalculator.parse_tags(tags)] == ["a", "b", "c"]


def test_parse_tags_unparseable_names_have_no_version():
    releases = ReleaseCalculator.parse_tags([RepositoryTag("some-tag", utc(2024, 1, 1))])

    assert releases[0].version is None
    assert releases[0].tag_name == "some-tag"


def test_parse_tags_empty():
    assert ReleaseCalculator.parse_tags([]) == []


def test_calculate_stats_end_to_end(sample_tags):
    releases = ReleaseCalculator.parse_tags(sample_tags)

    stats = ReleaseCalculator.calculate_stats(releases)

    assert stats.total_releases == 3
    assert stats.semantic_releases == 2
    assert stats.latest_release.tag_name == "v2.0.0"
    assert stats.latest_semantic_release.tag_name == "v2.0.0"
    assert stats.days_since_latest_release >= 0
    assert stats.days_since_latest_release == releases[0].days_since()


def test_calculate_stats_empty():
    stats = ReleaseCalculator.calculate_stats([])

    assert stats.total_releases == 0
    assert stats.semantic_releases == 0
    assert stats.latest_release is None
    assert stats.latest_semantic_release is None
    assert stats.days_since_latest_release is None
    assert stats.has_releases() is False


def test_calculate_stats_without_semantic_tags():
    releases = ReleaseCalculator.parse_tags([
        RepositoryTag("some-tag", utc(2024, 1, 1)),
        RepositoryTag("another-tag", utc(2024, 2, 1)),
    ])

    stats = ReleaseCalculator.calculate_stats(releases)

    assert stats.total_releases == 2
    assert stats.semantic_releases == 0
    assert stats.latest_semantic_release is None
    assert stats.latest_release.tag_name == "another-tag"


def test_calculate_stats_pre_release_is_latest():
    releases = ReleaseCalculator.parse_tags([
        RepositoryTag("v1.2.3-beta", utc(2024, 6, 1)),
        RepositoryTag("v1.2.2", utc(2024, 5, 1)),
    ])

    stats = ReleaseCalculator.calculate_stats(releases)

    assert stats.latest_release.tag_name == "v1.2.3-beta"
    assert stats.latest_semantic_release.tag_name == "v1.2.2"
    assert stats.semantic_releases == 1
    assert stats.total_releases == 2


def test_calculate_stats_trusts_input_order():
    ascending = [release("v1.0.0", utc(2023, 1, 1)), release("v2.0.0", utc(2024, 1, 1))]

    stats = ReleaseCalculator.calculate_stats(ascending)

    assert stats.latest_release.tag_name == "v1.0.0"
    assert stats.latest_semantic_release.tag_name == "v1.0.0"


def test_latest_releases_share_object():
    releases = [release("v3.0.0", utc(2024, 3, 1))]

    stats = ReleaseCalculator.calculate_stats(releases)

    assert stats.latest_release is stats.latest_semantic_release


def test_filter_semantic_versions_preserves_order():
    releases = [
        release("v1.0.0", utc(2024, 1, 1)),
        release("nightly", utc(2024, 4, 1)),
        release("v3.0.0", utc(2024, 3, 1)),
        release("v2.0.0-rc.1", utc(2024, 2, 1)),
        release("v2.0.0", utc(2024, 2, 2)),
    ]

    filtered = ReleaseCalculator.filter_semantic_versions(releases)

    assert [r.tag_name for r in filtered] == ["v1.0.0", "v3.0.0", "v2.0.0"]


@pytest.mark.parametrize("tags", [
    [],
    ["v1.0.0"],
    ["x", "y", "z"],
    ["v1.0.0-a", "v1.0.0", "foo", "2.0.0", "2.0.0-b"],
])
def test_semantic_releases_never_exceed_total(tags):
    base = utc(2024, 1, 1)
    releases = ReleaseCalculator.parse_tags(
        [RepositoryTag(name, base + timedelta(days=i)) for i, name in enumerate(tags)]
    )

    stats = ReleaseCalculator.calculate_stats(releases)

    assert stats.semantic_releases <= stats.total_releases
    assert stats.total_releases == len(tags)


def test_calculate_days_since_now():
    assert ReleaseCalculator.calculate_days_since(datetime.now(timezone.utc)) == 0


def test_calculate_days_since_past_date():
    date = datetime.now(timezone.utc) - timedelta(days=42, minutes=5)

    assert ReleaseCalculator.calculate_days_since(date) == 42


def test_get_latest_releases_truncates():
    releases = [
        release("v3.0.0", utc(2024, 3, 1)),
        release("v2.0.0", utc(2024, 2, 1)),
        release("v1.0.0", utc(2024, 1, 1)),
    ]

    latest = ReleaseCalculator.get_latest_releases(releases, 2)

    assert [r.tag_name for r in latest] == ["v3.0.0", "v2.0.0"]
    assert ReleaseCalculator.get_latest_releases(releases, 10) == releases
    assert ReleaseCalculator.get_latest_releases(releases, 0) == []


def test_is_recent_release():
    now = datetime.now(timezone.utc)
    today = release("v2.0.0", now)
    ten_days_ago = release("v1.0.0", now - timedelta(days=10))

    assert ReleaseCalculator.is_recent_release(today, 7) is True
    assert ReleaseCalculator.is_recent_release(ten_days_ago, 7) is False
    assert ReleaseCalculator.is_recent_release(ten_days_ago, 15) is True
    assert ReleaseCalculator.is_recent_release(ten_days_ago, 10) is True


def test_count_by_month_includes_empty_months():
    releases = [
        release("v1.0.0", utc(2024, 1, 15)),
        release("v1.1.0", utc(2024, 1, 20)),
        release("v2.0.0", utc(2024, 3, 1)),
        release("v0.1.0", utc(2023, 6, 1)),
    ]

    buckets = ReleaseCalculator.count_by_month(releases, months=4, now=utc(2024, 3, 10))

    assert buckets == [("2023-12", 0), ("2024-01", 2), ("2024-02", 0), ("2024-03", 1)]


def test_count_by_month_defaults_to_twelve_months():
    buckets = ReleaseCalculator.count_by_month([], now=utc(2024, 5, 1))

    assert len(buckets) == 12
    assert buckets[0] == ("2023-06", 0)
    assert buckets[-1] == ("2024-05", 0)


def test_count_by_month_without_window():
    assert ReleaseCalculator.count_by_month([release("v1.0.0", utc(2024, 1, 1))], months=0) == []

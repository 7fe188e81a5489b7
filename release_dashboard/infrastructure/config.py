"""Environment configuration.

Values come from environment variables, optionally loaded from a ``.env``
(or ``env``) file with python-dotenv.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union
from dotenv import load_dotenv


logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes", "on")


class ConfigurationError(Exception):
    """Raised when the environment configuration is invalid."""
    pass


def _get_int(name: str, default: int, errors: List[str]) -> int:
    """Read an integer; a malformed value is recorded in ``errors`` and the default used."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        errors.append(f"{name} must be an integer, got {raw!r}")
        return default


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the release dashboard."""
    github_token: str
    github_org: str
    include_release_data: bool = True
    max_concurrency: int = 10
    tags_per_repository: int = 100
    log_level: str = "INFO"
    parse_errors: Tuple[str, ...] = field(default=(), repr=False)

    @classmethod
    def from_env(cls) -> 'Settings':
        """Build settings from the current process environment.

        Malformed values are kept in ``parse_errors`` and reported by validate().
        """
        errors: List[str] = []
        return cls(
            github_token=os.getenv("GITHUB_TOKEN", ""),
            github_org=os.getenv("GITHUB_ORG", ""),
            include_release_data=_get_bool("INCLUDE_RELEASE_DATA", True),
            max_concurrency=_get_int("MAX_CONCURRENCY", 10, errors),
            tags_per_repository=_get_int("TAGS_PER_REPOSITORY", 100, errors),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            parse_errors=tuple(errors)
        )

    def validate(self) -> None:
        """Check every setting and report all problems at once.

        Raises:
            ConfigurationError: If any setting is missing or out of range
        """
        errors = list(self.parse_errors)

        if not self.github_token:
            errors.append("GITHUB_TOKEN is required")
        if not self.github_org:
            errors.append("GITHUB_ORG is required")
        if self.max_concurrency < 0:
            errors.append("MAX_CONCURRENCY cannot be negative")
        if not 1 <= self.tags_per_repository <= 100:
            errors.append("TAGS_PER_REPOSITORY must be between 1 and 100")
        if not isinstance(logging.getLevelName(self.log_level), int):
            errors.append(f"LOG_LEVEL {self.log_level!r} is not a valid logging level")

        if errors:
            raise ConfigurationError(
                "Environment validation failed:\n" + "\n".join(errors)
            )

    def summary(self) -> Dict[str, Union[str, int, bool]]:
        """Configuration summary safe to log (no secrets)."""
        return {
            "github_org": self.github_org,
            "include_release_data": self.include_release_data,
            "max_concurrency": self.max_concurrency,
            "tags_per_repository": self.tags_per_repository,
            "log_level": self.log_level,
            "has_github_token": bool(self.github_token),
        }


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Load environment variables from .env or env file, then read settings."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv('.env') or load_dotenv('env')
    return Settings.from_env()

"""GitHub GraphQL API client implementation with retry logic."""
import asyncio
import logging
from typing import Any, Dict, List, Optional
import aiohttp
from gql import gql, Client
from gql.client import AsyncClientSession
from gql.transport.aiohttp import AIOHTTPTransport
from gql.transport.exceptions import TransportQueryError, TransportServerError
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type
)
from release_dashboard.domain.models import Repository, RepositoryTag
from release_dashboard.domain.repository_provider import IRepositoryProvider
from release_dashboard.infrastructure.mappers import ReleaseMapper, RepositoryMapper


logger = logging.getLogger(__name__)

GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"


class GitHubProviderError(Exception):
    """Base exception for GitHub data-fetching failures."""
    pass


class GitHubAuthenticationError(GitHubProviderError):
    """Exception raised when GitHub rejects the access token."""
    pass


class GitHubNotFoundError(GitHubProviderError):
    """Exception raised when an organization or repository does not exist."""
    pass


class TransientGitHubError(GitHubProviderError):
    """Exception raised for server-side failures worth retrying."""
    pass


class GitHubGraphQLClient(IRepositoryProvider):
    """GitHub GraphQL API client with retry mechanisms.

    Implements the IRepositoryProvider port, providing an anti-corruption layer
    between the domain and GitHub's API. A single session is shared by all
    concurrent queries.
    """

    # Organization repositories, most recently updated first
    REPOSITORIES_QUERY = gql("""
        query OrganizationRepositories($org: String!, $first: Int!, $cursor: String) {
            organization(login: $org) {
                repositories(
                    first: $first
                    after: $cursor
                    orderBy: {field: UPDATED_AT, direction: DESC}
                ) {
                    pageInfo {
                        hasNextPage
                        endCursor
                    }
                    nodes {
                        name
                        url
                        description
                        stargazerCount
                        updatedAt
                        owner {
                            login
                        }
                        primaryLanguage {
                            name
                        }
                    }
                }
            }
        }
    """)

    # Tag refs with the commit date of lightweight and annotated tags
    TAGS_QUERY = gql("""
        query RepositoryTags($owner: String!, $name: String!, $first: Int!) {
            repository(owner: $owner, name: $name) {
                refs(
                    refPrefix: "refs/tags/"
                    first: $first
                    orderBy: {field: TAG_COMMIT_DATE, direction: DESC}
                ) {
                    nodes {
                        name
                        target {
                            ... on Commit {
                                committedDate
                            }
                            ... on Tag {
                                tagger {
                                    date
                                }
                                target {
                                    ... on Commit {
                                        committedDate
                                    }
                                }
                            }
                        }
                    }
                }
            }
        }
    """)

    def __init__(
        self,
        access_token: str,
        tags_per_repository: int = 100,
        page_size: int = 100
    ):
        """Initialize GitHub client.

        Args:
            access_token: GitHub personal access token
            tags_per_repository: Number of tags to read per repository (max 100)
            page_size: Number of repositories to fetch per request (max 100)
        """
        self._access_token = access_token
        self._tags_per_repository = min(tags_per_repository, 100)  # GitHub max is 100
        self._page_size = min(page_size, 100)
        self._transport: Optional[AIOHTTPTransport] = None
        self._client: Optional[Client] = None
        self._session: Optional[AsyncClientSession] = None
        self._connect_lock = asyncio.Lock()

    async def _get_session(self) -> AsyncClientSession:
        """Connect the GraphQL client (lazy initialization)."""
        async with self._connect_lock:
            if self._session is None:
                headers = {"Authorization": f"Bearer {self._access_token}"}
                self._transport = AIOHTTPTransport(
                    url=GITHUB_GRAPHQL_URL,
                    headers=headers
                )
                self._client = Client(
                    transport=self._transport,
                    fetch_schema_from_transport=False
                )
                self._session = await self._client.connect_async(reconnecting=False)
            return self._session

    @retry(
        retry=retry_if_exception_type(
            (TransientGitHubError, asyncio.TimeoutError, aiohttp.ClientConnectionError)
        ),
        stop=stop_after_attempt(5),
        wait=wait_exponential(multiplier=1, min=4, max=60),
        reraise=True
    )
    async def _execute_query(self, query, variables: Dict[str, Any]) -> Dict[str, Any]:
        """Execute GraphQL query with retry logic.

        Args:
            query: Parsed GraphQL document
            variables: Query variables

        Returns:
            Query result dictionary

        Raises:
            GitHubAuthenticationError: When the token is rejected
            GitHubNotFoundError: When the queried object does not exist
            TransientGitHubError: When GitHub answers with a server error
        """
        session = await self._get_session()

        try:
            return await session.execute(query, variable_values=variables)
        except TransportServerError as e:
            if e.code == 401:
                raise GitHubAuthenticationError(
                    "GitHub authentication failed. Check your token."
                ) from e
            if e.code is not None and e.code >= 500:
                logger.warning(f"GitHub server error {e.code}, retrying: {e}")
                raise TransientGitHubError(str(e)) from e
            raise GitHubProviderError(str(e)) from e
        except TransportQueryError as e:
            errors = e.errors or []
            if any(error.get("type") == "NOT_FOUND" for error in errors):
                raise GitHubNotFoundError(str(e)) from e
            raise GitHubProviderError(str(e)) from e

    async def list_repositories(self, org_name: str) -> List[Repository]:
        """List all repositories of an organization.

        Follows pagination until every repository has been read.

        Args:
            org_name: GitHub organization name

        Returns:
            Repository domain entities, most recently updated first
        """
        if not org_name:
            raise GitHubProviderError("Organization name is required")

        repositories: List[Repository] = []
        cursor = None

        logger.info(f"Listing repositories for organization {org_name}")

        while True:
            try:
                result = await self._execute_query(
                    self.REPOSITORIES_QUERY,
                    {"org": org_name, "first": self._page_size, "cursor": cursor}
                )
            except GitHubNotFoundError as e:
                raise GitHubNotFoundError(f"Organization '{org_name}' not found") from e
            except GitHubProviderError:
                raise
            except Exception as e:
                raise GitHubProviderError(f"Failed to fetch repositories: {e}") from e

            organization = result.get("organization")
            if organization is None:
                raise GitHubNotFoundError(f"Organization '{org_name}' not found")

            connection = organization.get("repositories") or {}
            repositories.extend(RepositoryMapper.to_domain_list(connection.get("nodes") or []))

            page_info = connection.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break

            cursor = page_info.get("endCursor")
            logger.info(f"Fetched {len(repositories)} repositories so far")

        logger.info(f"Successfully fetched {len(repositories)} repositories for {org_name}")
        return repositories

    async def get_repository_tags(self, owner: str, name: str) -> List[RepositoryTag]:
        """Get the most recent tags of a repository.

        Args:
            owner: Repository owner
            name: Repository name

        Returns:
            Up to ``tags_per_repository`` tags
        """
        full_name = f"{owner}/{name}"

        try:
            result = await self._execute_query(
                self.TAGS_QUERY,
                {"owner": owner, "name": name, "first": self._tags_per_repository}
            )
        except GitHubNotFoundError as e:
            raise GitHubNotFoundError(f"Repository '{full_name}' not found") from e
        except GitHubProviderError:
            raise
        except Exception as e:
            raise GitHubProviderError(f"Failed to fetch tags for {full_name}: {e}") from e

        repository = result.get("repository")
        if repository is None:
            raise GitHubNotFoundError(f"Repository '{full_name}' not found")

        nodes = (repository.get("refs") or {}).get("nodes") or []
        tags = ReleaseMapper.map_tags(nodes)
        logger.debug(f"Fetched {len(tags)} tags for {full_name}")
        return tags

    async def close(self) -> None:
        """Close the GraphQL client and transport."""
        if self._client and self._session:
            await self._client.close_async()
        self._session = None
        self._client = None
        self._transport = None

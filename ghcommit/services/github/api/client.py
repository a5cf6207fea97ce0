"""
GitHub API client for making authenticated REST and GraphQL requests.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ghcommit.common.config.config import (
    GH_CONNECT_TIMEOUT,
    GH_REQUEST_TIMEOUT,
    GITHUB_API_URL,
    GITHUB_API_VERSION,
    GITHUB_GRAPHQL_URL,
    get_token,
)
from ghcommit.common.exception.exceptions import GitHubAPIError, GitHubErrorKind

logger = logging.getLogger(__name__)

_STATUS_KINDS = {
    401: GitHubErrorKind.UNAUTHORIZED,
    403: GitHubErrorKind.FORBIDDEN,
    404: GitHubErrorKind.NOT_FOUND,
    409: GitHubErrorKind.CONFLICT,
    422: GitHubErrorKind.VALIDATION,
}


def classify_error(status_code: int, message: str) -> GitHubErrorKind:
    """Map an error response onto a GitHubErrorKind.

    GitHub reports a missing ref on PATCH git/refs as a 422 with the message
    "Reference does not exist", and a duplicate on POST git/refs as a 422
    with "Reference already exists".
    """
    lowered = message.lower()
    if status_code == 422 and "reference does not exist" in lowered:
        return GitHubErrorKind.REFERENCE_NOT_FOUND
    if status_code == 422 and "reference already exists" in lowered:
        return GitHubErrorKind.REFERENCE_EXISTS
    return _STATUS_KINDS.get(status_code, GitHubErrorKind.UNKNOWN)


class GitHubAPIClient:
    """Base client for GitHub API interactions with bearer token authentication."""

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        graphql_url: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize GitHub API client.

        Args:
            token: GitHub API token (defaults to GITHUB_TOKEN / GH_TOKEN)
            base_url: REST API root (defaults to config)
            graphql_url: GraphQL endpoint (defaults to config)
            api_version: Value of the X-GitHub-Api-Version header
            timeout: Request timeout in seconds
        """
        self.token = token or get_token()
        self.base_url = (base_url or GITHUB_API_URL).rstrip("/")
        self.graphql_url = graphql_url or GITHUB_GRAPHQL_URL
        self.api_version = api_version or GITHUB_API_VERSION
        self.timeout = timeout or GH_REQUEST_TIMEOUT

        if not self.token:
            logger.warning("GitHub API client initialized without a token - write requests will fail")

    def _get_headers(self) -> Dict[str, str]:
        """Get headers for GitHub API requests."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.api_version,
            "Content-Type": "application/json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        url: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Make a GitHub API request.

        Args:
            method: HTTP method (GET, POST, PATCH)
            path: API path (without base URL)
            data: Request body data
            params: Query parameters
            url: Absolute URL overriding base_url/path

        Returns:
            Response data (empty dict for empty bodies)

        Raises:
            GitHubAPIError: If the request fails or the API rejects it
        """
        url = url or f"{self.base_url}/{path.lstrip('/')}"
        headers = self._get_headers()

        try:
            timeout_config = httpx.Timeout(self.timeout, connect=GH_CONNECT_TIMEOUT)
            response = await self._execute_http_request(
                method, url, headers, data, params, timeout_config
            )
        except httpx.RequestError as e:
            error_msg = f"GitHub API request error: {e}"
            logger.error(error_msg)
            raise GitHubAPIError(error_msg, kind=GitHubErrorKind.TRANSPORT) from e

        return self._process_response(response, method, url)

    async def _execute_http_request(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        data: Optional[Dict[str, Any]],
        params: Optional[Dict[str, Any]],
        timeout_config: httpx.Timeout,
    ) -> httpx.Response:
        """Execute HTTP request with method routing.

        Raises:
            ValueError: If HTTP method is unsupported
        """
        method_upper = method.upper()

        async with httpx.AsyncClient(timeout=timeout_config, trust_env=False) as client:
            if method_upper == "GET":
                return await client.get(url, headers=headers, params=params)
            elif method_upper == "POST":
                return await client.post(url, json=data, headers=headers, params=params)
            elif method_upper == "PATCH":
                return await client.patch(url, json=data, headers=headers, params=params)
            else:
                raise ValueError(f"Unsupported HTTP method: {method}")

    def _process_response(
        self, response: httpx.Response, method: str, url: str
    ) -> Dict[str, Any]:
        """Process HTTP response and extract data.

        Raises:
            GitHubAPIError: If response status indicates failure
        """
        if response.status_code in (200, 201, 204):
            logger.debug(
                f"GitHub API {method} request to {url} "
                f"successful (status: {response.status_code})"
            )
            if response.content:
                return response.json()
            return {}

        message = self._extract_message(response)
        kind = classify_error(response.status_code, message)
        error_msg = f"GitHub API {method} {url} failed (status {response.status_code}): {message}"
        logger.error(error_msg)
        raise GitHubAPIError(error_msg, status_code=response.status_code, kind=kind)

    @staticmethod
    def _extract_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return response.text

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Make a GET request."""
        return await self.request("GET", path, params=params)

    async def post(self, path: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Make a POST request."""
        return await self.request("POST", path, data=data)

    async def patch(self, path: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Make a PATCH request."""
        return await self.request("PATCH", path, data=data)

    async def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run a GraphQL query and return its "data" member.

        Args:
            query: GraphQL document
            variables: Query variables

        Returns:
            The response's data object

        Raises:
            GitHubAPIError: If the HTTP call fails or the response carries errors
        """
        response = await self.request(
            "POST",
            "graphql",
            data={"query": query, "variables": variables or {}},
            url=self.graphql_url,
        )

        errors = response.get("errors")
        if errors:
            messages = "; ".join(str(err.get("message", err)) for err in errors)
            error_msg = f"GitHub GraphQL query failed: {messages}"
            logger.error(error_msg)
            raise GitHubAPIError(error_msg, kind=GitHubErrorKind.GRAPHQL)

        return response.get("data") or {}

"""Thin REST client for the Strapi content API.

Plays the role of Strapi's entity service for scripts that run outside the
CMS process: list/find/create/update/delete records of a collection, with
Strapi's bracket query syntax for filters, populate and sort. Responses are
unwrapped from the conventional `data` envelope.
"""

from typing import Any, Dict, List, Optional, Tuple, Union

import requests

import config
from logger import get_logger

logger = get_logger(__name__)

Populate = Union[str, List[str], None]


class CMSRequestError(RuntimeError):
    """A failed call against the CMS API (HTTP error or transport failure)."""

    def __init__(self, status: Optional[int], message: str, details: Any = None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.details = details

    def __str__(self):
        if self.status is None:
            return self.message
        return f"HTTP {self.status}: {self.message}"


def _flatten(prefix: str, value: Any) -> List[Tuple[str, str]]:
    """Flatten nested dicts/lists into Strapi's `a[b][c]=v` pairs."""
    if isinstance(value, dict):
        pairs = []
        for key, sub in value.items():
            pairs.extend(_flatten(f"{prefix}[{key}]", sub))
        return pairs
    if isinstance(value, (list, tuple)):
        pairs = []
        for i, sub in enumerate(value):
            pairs.extend(_flatten(f"{prefix}[{i}]", sub))
        return pairs
    if isinstance(value, bool):
        return [(prefix, "true" if value else "false")]
    return [(prefix, str(value))]


def encode_query(filters: Optional[Dict[str, Any]] = None,
                 populate: Populate = None,
                 sort: Union[str, List[str], None] = None,
                 page_size: Optional[int] = None) -> List[Tuple[str, str]]:
    """Build the query string pairs for a Strapi list request."""
    params: List[Tuple[str, str]] = []
    if filters:
        params.extend(_flatten("filters", filters))
    if populate:
        if isinstance(populate, str):
            params.append(("populate", populate))
        else:
            params.extend(_flatten("populate", list(populate)))
    if sort:
        if isinstance(sort, str):
            params.append(("sort", sort))
        else:
            params.extend(_flatten("sort", list(sort)))
    if page_size:
        params.append(("pagination[pageSize]", str(page_size)))
    return params


def unwrap(body: Any) -> Any:
    """Return the `data` member of a Strapi response body."""
    if not isinstance(body, dict) or "data" not in body:
        raise CMSRequestError(None, "Response has no 'data' envelope", details=body)
    return body["data"]


class StrapiClient:
    """Session-bound client for one script run against the CMS."""

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None,
                 timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.base_url = (base_url or config.STRAPI_URL).rstrip("/")
        self.token = token if token is not None else config.STRAPI_API_TOKEN
        self.timeout = timeout or config.HTTP_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if self.token:
            self.session.headers.update({"Authorization": f"Bearer {self.token}"})

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        self.session.close()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api/{path.lstrip('/')}"

    def _request(self, method: str, path: str, params=None, json_body=None) -> requests.Response:
        url = self._url(path)
        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(
                method, url, params=params, json=json_body, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise CMSRequestError(None, f"{method} {url} failed: {e}") from e

        if not response.ok:
            raise self._error_from(response)
        return response

    @staticmethod
    def _error_from(response: requests.Response) -> CMSRequestError:
        """Translate Strapi's `{"error": {...}}` body into a CMSRequestError."""
        try:
            body = response.json()
        except ValueError:
            return CMSRequestError(response.status_code, response.reason or "Request failed",
                                   details=response.text or None)

        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            return CMSRequestError(
                error.get("status", response.status_code),
                error.get("message") or response.reason or "Request failed",
                details=error.get("details") or None,
            )
        return CMSRequestError(response.status_code, response.reason or "Request failed", details=body)

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise CMSRequestError(response.status_code, "Response is not JSON",
                                  details=response.text[:500]) from e

    # Raw access
    def get(self, path: str, params=None) -> Dict[str, Any]:
        """GET /api/<path> and return the decoded JSON body unchanged."""
        return self._decode(self._request("GET", path, params=params))

    # Entity operations
    def find_many(self, collection: str, filters: Optional[Dict[str, Any]] = None,
                  populate: Populate = None, sort: Union[str, List[str], None] = None,
                  page_size: Optional[int] = None) -> List[Dict[str, Any]]:
        params = encode_query(filters, populate, sort, page_size)
        data = unwrap(self.get(collection, params=params))
        return data or []

    def find_one(self, collection: str, document_id: Union[str, int],
                 populate: Populate = None) -> Optional[Dict[str, Any]]:
        params = encode_query(populate=populate)
        try:
            return unwrap(self.get(f"{collection}/{document_id}", params=params))
        except CMSRequestError as e:
            if e.status == 404:
                return None
            raise

    def create(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        response = self._request("POST", collection, json_body={"data": data})
        return unwrap(self._decode(response))

    def update(self, collection: str, document_id: Union[str, int],
               data: Dict[str, Any]) -> Dict[str, Any]:
        response = self._request("PUT", f"{collection}/{document_id}", json_body={"data": data})
        return unwrap(self._decode(response))

    def delete(self, collection: str, document_id: Union[str, int]) -> None:
        self._request("DELETE", f"{collection}/{document_id}")

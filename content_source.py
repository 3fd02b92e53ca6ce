"""
Notion content source - paginated database queries and page writes
Thin wrapper over the Notion REST API using requests
"""
import logging
from typing import Dict, Iterator, List, Optional

import requests

from config import NOTION_API

logger = logging.getLogger(__name__)


class ContentSourceError(Exception):
    """A remote call to the content source failed"""

    def __init__(self, message: str, status: Optional[int] = None, code: str = ""):
        super().__init__(message)
        self.status = status
        self.code = code


class NotionContentSource:
    """Read and write records in Notion databases

    Every call is sequential and awaited before the next one; there is no
    retry. Any failure is raised as ContentSourceError.
    """

    def __init__(self, token: str, timeout: int = NOTION_API["timeout"],
                 session: Optional[requests.Session] = None):
        self.base_url = NOTION_API["base_url"]
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Notion-Version": NOTION_API["version"],
            "Content-Type": "application/json",
        })

    def _request(self, method: str, path: str, payload: Optional[Dict] = None) -> Dict:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise ContentSourceError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 400:
            code = ""
            message = response.text
            try:
                body = response.json()
                code = body.get("code", "")
                message = body.get("message", message)
            except ValueError:
                pass
            raise ContentSourceError(
                f"{method} {path} returned {response.status_code}: {message}",
                status=response.status_code,
                code=code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ContentSourceError(f"{method} {path} returned invalid JSON") from e

    def query_database(self, database_id: str, start_cursor: Optional[str] = None,
                       filter: Optional[Dict] = None, page_size: Optional[int] = None) -> Dict:
        """Fetch one page of results: {results, next_cursor, has_more}"""
        payload: Dict = {}
        if start_cursor:
            payload["start_cursor"] = start_cursor
        if filter:
            payload["filter"] = filter
        if page_size:
            payload["page_size"] = page_size
        return self._request("POST", f"/databases/{database_id}/query", payload)

    def iter_database(self, database_id: str, filter: Optional[Dict] = None) -> Iterator[Dict]:
        """Yield every record, following the cursor until has_more is false"""
        cursor = None
        page_number = 0
        while True:
            page = self.query_database(database_id, start_cursor=cursor, filter=filter)
            page_number += 1
            results = page.get("results") or []
            logger.debug(f"Database {database_id}: page {page_number} with {len(results)} records")
            yield from results
            cursor = page.get("next_cursor") if page.get("has_more") else None
            if not cursor:
                break

    def fetch_all(self, database_id: str, filter: Optional[Dict] = None) -> List[Dict]:
        records = list(self.iter_database(database_id, filter=filter))
        logger.info(f"Fetched {len(records)} records from database {database_id}")
        return records

    def retrieve_database(self, database_id: str) -> Dict:
        """Fetch a database's schema (its properties map)"""
        return self._request("GET", f"/databases/{database_id}")

    def create_page(self, database_id: str, properties: Dict) -> Dict:
        return self._request("POST", "/pages", {
            "parent": {"database_id": database_id},
            "properties": properties,
        })

    def update_page(self, page_id: str, properties: Dict) -> Dict:
        return self._request("PATCH", f"/pages/{page_id}", {"properties": properties})

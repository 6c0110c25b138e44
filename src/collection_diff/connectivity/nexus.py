# src/collection_diff/connectivity/nexus.py

import threading
from typing import Any, Dict, List, Optional

import requests

from ..config import BotConfig
from ..exceptions import BadResponseError, RemoteError, RevisionNotFoundError
from ..models import Snapshot
from ..normalize import normalize_records
from .base import RevisionSource, logger
from .decorators import handle_api_errors

# viewAdultContent lets the API return collections flagged as adult; without it
# such collections fail with ADULT_CONTENT_BLOCKED.
REVISION_QUERY = """
query Revision($slug: String!, $revision: Int) {
  collectionRevision(slug: $slug, revision: $revision, viewAdultContent: true) {
    revisionNumber
    modFiles {
      fileId
      optional
      file {
        fileId
        name
        version
        mod {
          modId
          name
        }
      }
    }
  }
}
"""


class NexusModsClient(RevisionSource):
    """
    Fetches collection revisions from the Nexus Mods GraphQL API.

    Each worker thread gets its own requests.Session unless one is injected,
    since Session is not guaranteed thread-safe.
    """

    def __init__(self, config: BotConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.logger = logger
        self._shared_session = session
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        if self._shared_session is not None:
            return self._shared_session
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "apikey": self.config.nexus_api_key or "",
            "Application-Name": self.config.app_name,
            "Application-Version": self.config.app_version,
        }

    @handle_api_errors
    def fetch_revision_data(self, slug: str, revision: int) -> Dict[str, Any]:
        """
        Fetches the raw ``collectionRevision`` object for one revision.
        Endpoint: POST /graphql
        """
        payload = {"query": REVISION_QUERY, "variables": {"slug": slug, "revision": revision}}
        self.logger.info(f"Fetching revision {revision} of collection {slug}...")
        self.logger.debug(f"Request: POST {self.config.api_url} with variables {payload['variables']}")

        response = self.session.post(
            self.config.api_url,
            json=payload,
            headers=self._headers(),
            timeout=self.config.request_timeout,
        )
        response.raise_for_status()
        try:
            data = response.json()
        except ValueError as e:
            raise BadResponseError(f"Response is not valid JSON: {e}", response.text) from e

        if not isinstance(data, dict):
            raise BadResponseError(f"Unexpected response body type: {type(data).__name__}", data)

        if data.get("errors"):
            # Forwarded verbatim; the caller decides what the user sees.
            self.logger.error(
                f"Nexus Mods API error while fetching {slug} revision {revision}: {data['errors']}"
            )
            raise RemoteError(f"Nexus Mods API error for {slug} revision {revision}", data["errors"])

        body = data.get("data") or {}
        if not isinstance(body, dict):
            raise BadResponseError(f"Unexpected data field type: {type(body).__name__}", data)
        revision_data = body.get("collectionRevision")
        if revision_data is None:
            raise RevisionNotFoundError(f"Collection {slug} has no revision {revision}", data)
        if not isinstance(revision_data, dict):
            raise BadResponseError(
                f"Unexpected collectionRevision type: {type(revision_data).__name__}", data
            )
        if not isinstance(revision_data.get("modFiles"), list):
            raise BadResponseError(f"Revision {revision} of {slug} has no modFiles list", revision_data)

        self.logger.info(
            f"Successfully fetched revision {revision} of {slug} "
            f"({len(revision_data['modFiles'])} mod files)."
        )
        return revision_data

    def fetch_revision(self, slug: str, revision: int) -> Snapshot:
        revision_data = self.fetch_revision_data(slug, revision)
        return normalize_records(revision_data["modFiles"])

    def close(self) -> None:
        if self._shared_session is not None:
            self._shared_session.close()
        with self._lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()

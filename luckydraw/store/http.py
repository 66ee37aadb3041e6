import os
import logging
from urllib.parse import urljoin
from typing import Any, Mapping, Optional, Sequence

import requests
from dotenv import load_dotenv

from .base import DEFAULT_ACTIVITY_LIMIT, ActivitySummary
from ..draw.entities import Participant, Prize, WinnerRecord

logger = logging.getLogger(__name__)


def open_session(token: Optional[str] = None) -> requests.Session:
    """Create a requests session for the document service.

    Parameters
    ----------
    token : Optional[str]
        Bearer token attached to every request when given.

    Returns
    -------
    requests.Session
        Session with JSON ``Accept`` and, if applicable, ``Authorization``
        headers set.
    """
    session = requests.Session()
    session.headers.update({"Accept": "application/json"})
    if token:
        # Never log the token value
        session.headers["Authorization"] = f"Bearer {token}"
        logger.debug("Document store session configured with bearer token")
    return session


class HttpActivityStore:
    """Activity store talking to a JSON document service over HTTP.

    Collections are exposed per activity:

    - ``POST   /activities``                      create, returns ``{"id": ...}``
    - ``GET    /activities?limit=N``              newest first
    - ``DELETE /activities/{id}``
    - ``PUT    /activities/{id}/participants``    replace the list
    - ``GET    /activities/{id}/participants``
    - ``POST   /activities/{id}/winners``         append records
    - ``GET    /activities/{id}/winners``         ordered by timestamp
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        load_dotenv()
        url = base_url or os.getenv("LUCKYDRAW_STORE_URL")
        if not url:
            raise ValueError("Environment variable 'LUCKYDRAW_STORE_URL' is not set")

        self.base_url = url.rstrip("/")
        if timeout is None:
            timeout = float(os.getenv("LUCKYDRAW_STORE_TIMEOUT", "15"))
        self.timeout = timeout
        try:
            self.session = session or open_session(token or os.getenv("LUCKYDRAW_STORE_TOKEN"))
        except Exception as e:
            logger.critical(f"Error occurred while opening document store session: {e}")
            raise RuntimeError(f"Failed to open document store session: {e}") from e

    # -------- core request --------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict] = None,
        json: Any = None,
    ) -> Any:
        url = urljoin(self.base_url + "/", path.lstrip("/"))
        r = self.session.request(
            method=method.upper(),
            url=url,
            params=params,
            json=json,
            timeout=self.timeout,
        )
        r.raise_for_status()
        return r.json() if r.content else None

    @staticmethod
    def _items(payload: Any) -> list[Mapping[str, Any]]:
        # Accept both a bare list and a {"data": [...]} envelope.
        if payload is None:
            return []
        if isinstance(payload, Mapping):
            payload = payload.get("data") or []
        if not isinstance(payload, list):
            raise RuntimeError(f"Unexpected document store response: {payload!r}")
        return payload

    # -------- API callers --------
    def create_activity(self, name: str, prizes: Sequence[Prize]) -> str:
        response = self._request(
            "POST",
            "/activities",
            json={"name": name, "prizes": [p.to_record() for p in prizes]},
        )
        if not isinstance(response, Mapping) or not response.get("id"):
            raise RuntimeError(f"Unexpected create-activity response: {response!r}")
        return str(response["id"])

    def list_activities(self, limit: int = DEFAULT_ACTIVITY_LIMIT) -> list[ActivitySummary]:
        payload = self._request("GET", "/activities", params={"limit": limit})
        return [ActivitySummary.from_json(item) for item in self._items(payload)]

    def delete_activity(self, activity_id: str) -> None:
        self._request("DELETE", f"/activities/{activity_id}")

    def save_participants(self, activity_id: str, participants: Sequence[Participant]) -> None:
        self._request(
            "PUT",
            f"/activities/{activity_id}/participants",
            json=[p.to_record() for p in participants],
        )

    def load_participants(self, activity_id: str) -> list[Participant]:
        payload = self._request("GET", f"/activities/{activity_id}/participants")
        return [Participant.from_record(item) for item in self._items(payload)]

    def save_winner_records(self, activity_id: str, records: Sequence[WinnerRecord]) -> None:
        if not records:
            return
        self._request(
            "POST",
            f"/activities/{activity_id}/winners",
            json=[r.to_record() for r in records],
        )

    def load_winner_records(
        self, activity_id: str, known_prizes: Sequence[Prize]
    ) -> list[WinnerRecord]:
        payload = self._request("GET", f"/activities/{activity_id}/winners")
        return [WinnerRecord.from_record(item, known_prizes) for item in self._items(payload)]


__all__ = ["HttpActivityStore", "open_session"]

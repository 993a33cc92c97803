from __future__ import annotations

from typing import Optional

import requests

from ringfit.lib.errors import RecordError
from ringfit.lib.logger import get_logger
from ringfit.lib.settings import PixelaSettings
from ringfit.domain.ports.Metrics_recorder import Metrics_recorder


class PixelaRecorder(Metrics_recorder):
    """Writes one pixel per (graph, day) through the Pixela REST API.

    Uses ``PUT /v1/users/<user>/graphs/<graph>/<yyyyMMdd>`` so re-posting the
    same screenshot overwrites the day's value instead of failing.
    """

    def __init__(self, settings: PixelaSettings, timeout: float = 15.0, session: Optional[requests.Session] = None) -> None:
        self.settings = settings
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = get_logger("record")

    def _pixel_url(self, graph_id: str, date: str) -> str:
        base = self.settings.base_url.rstrip("/")
        return f"{base}/v1/users/{self.settings.user}/graphs/{graph_id}/{date}"

    def record(self, graph_id: str, date: str, value: str) -> None:
        if not graph_id:
            raise RecordError("graph id is not configured", graph_id=graph_id)

        try:
            resp = self.session.put(
                self._pixel_url(graph_id, date),
                json={"quantity": value},
                headers={"X-USER-TOKEN": self.settings.token},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RecordError(f"pixela request failed: {e}", graph_id=graph_id) from e

        if not resp.ok:
            message = resp.text
            try:
                message = resp.json().get("message", message)
            except ValueError:
                pass
            raise RecordError(f"pixela rejected {graph_id}/{date}: {resp.status_code} {message}", graph_id=graph_id)

        self.logger.info("updated: graph=%s date=%s quantity=%s", graph_id, date, value)

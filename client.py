import logging
from typing import List, Optional

import requests
from pydantic import ValidationError

from config import settings
from schemas import LaunchCreate, LaunchUpdate, LaunchResponse, MonthSummary

logger = logging.getLogger(__name__)


class LaunchClientError(Exception):
    """Any failed call to the ContAI API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class LaunchClient:
    """Thin wrapper over the /launches REST endpoints."""

    def __init__(self, base_url: Optional[str] = None, session: Optional[requests.Session] = None,
                 timeout: Optional[float] = None):
        self.base_url = (base_url or settings.API_URL).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}/launches{path}"
        logger.debug("%s %s %s", method, url, kwargs.get("params") or "")

        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
            resp.raise_for_status()
        except requests.exceptions.HTTPError as e:
            detail = _error_detail(e.response)
            logger.error("%s %s failed with %s: %s", method, url, e.response.status_code, detail)
            raise LaunchClientError(detail, status_code=e.response.status_code) from e
        except requests.exceptions.RequestException as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise LaunchClientError(str(e)) from e

        return resp

    def _parse(self, resp: requests.Response, schema, many: bool = False):
        try:
            body = resp.json()
            if many:
                return [schema.model_validate(item) for item in body]
            return schema.model_validate(body)
        except (ValueError, TypeError, ValidationError) as e:
            logger.error("Unexpected response from %s: %s", resp.url, e)
            raise LaunchClientError("Resposta inválida do servidor", status_code=resp.status_code) from e

    def list_launches(self) -> List[LaunchResponse]:
        resp = self._request("GET", "")
        return self._parse(resp, LaunchResponse, many=True)

    def get_launch(self, launch_id: int) -> LaunchResponse:
        resp = self._request("GET", f"/{launch_id}")
        return self._parse(resp, LaunchResponse)

    def create_launch(self, data: LaunchCreate) -> LaunchResponse:
        resp = self._request("POST", "", json=data.model_dump(mode="json"))
        return self._parse(resp, LaunchResponse)

    def update_launch(self, launch_id: int, data: LaunchUpdate) -> LaunchResponse:
        payload = data.model_dump(mode="json", exclude_none=True)
        resp = self._request("PUT", f"/{launch_id}", json=payload)
        return self._parse(resp, LaunchResponse)

    def delete_launch(self, launch_id: int) -> None:
        self._request("DELETE", f"/{launch_id}")

    def list_by_month(self, year: int, month: int) -> List[LaunchResponse]:
        resp = self._request("GET", "/by-month", params={"year": year, "month": month})
        return self._parse(resp, LaunchResponse, many=True)

    def get_summary(self, year: int, month: int) -> MonthSummary:
        resp = self._request("GET", "/summary", params={"year": year, "month": month})
        return self._parse(resp, MonthSummary)


def _error_detail(response: Optional[requests.Response]) -> str:
    if response is None:
        return "Erro desconhecido"
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason or "Erro desconhecido"
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return str(body)

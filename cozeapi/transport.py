"""HTTP plumbing shared by all API resources."""

from __future__ import annotations

import logging
from typing import Any, BinaryIO, Generator, Mapping

import httpx

from .auth import Auth
from .models import AUTHORIZATION_HEADER, COM_BASE_URL, HTTPResponse

logger = logging.getLogger("cozeapi")

JSONBody = dict[str, Any]


class CozeAPIError(Exception):
    """The API answered with an HTTP error or a non-zero business code."""

    def __init__(
        self,
        code: int,
        msg: str,
        log_id: str = "",
        status_code: int | None = None,
    ) -> None:
        self.code = code
        self.msg = msg
        self.log_id = log_id
        self.status_code = status_code
        super().__init__(f"code={code}, msg={msg}, logid={log_id}")


class BearerAuth(httpx.Auth):
    """Adds a bearer token taken from an :class:`Auth` to each request."""

    def __init__(self, auth: Auth) -> None:
        self._auth = auth

    def auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        try:
            access_token = self._auth.token()
        except Exception:
            logger.error("failed to get access token", exc_info=True)
            raise
        request.headers[AUTHORIZATION_HEADER] = f"Bearer {access_token}"
        yield request


def _to_http_response(response: httpx.Response) -> HTTPResponse:
    length = response.headers.get("content-length")
    return HTTPResponse(
        status_code=response.status_code,
        headers=response.headers,
        content_length=int(length) if length and length.isdigit() else -1,
    )


def _is_json(response: httpx.Response) -> bool:
    return "application/json" in response.headers.get("content-type", "")


def _check_body(body: Mapping[str, Any], response: httpx.Response) -> None:
    code = body.get("code") or 0
    if code != 0 or not response.is_success:
        msg = body.get("msg") or response.reason_phrase or ""
        raise CozeAPIError(
            code=code,
            msg=str(msg),
            log_id=_to_http_response(response).log_id(),
            status_code=response.status_code,
        )


def _raise_for_error(response: httpx.Response) -> None:
    """Raise if an already-read response reports a failure."""
    if _is_json(response):
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            _check_body(body, response)
            return
    if not response.is_success:
        raise CozeAPIError(
            code=response.status_code,
            msg=response.text or response.reason_phrase,
            log_id=_to_http_response(response).log_id(),
            status_code=response.status_code,
        )


def _clean_params(params: Mapping[str, Any] | None) -> dict[str, str]:
    cleaned: dict[str, str] = {}
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            cleaned[key] = "true" if value else "false"
        else:
            cleaned[key] = str(value)
    return cleaned


class Requester:
    """Sends authenticated requests to the API and checks their answers."""

    def __init__(
        self,
        auth: Auth | None = None,
        base_url: str = COM_BASE_URL,
        client: httpx.Client | None = None,
        timeout: float = 5.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client if client is not None else httpx.Client(timeout=timeout)
        self._auth = BearerAuth(auth) if auth is not None else None

    def _url(self, path: str) -> str:
        return self.base_url + path

    def _auth_kwargs(self) -> dict[str, Any]:
        return {"auth": self._auth} if self._auth is not None else {}

    def _send(
        self,
        method: str,
        path: str,
        json_body: Any,
        params: Mapping[str, Any] | None,
        stream: bool = False,
    ) -> httpx.Response:
        request = self._client.build_request(
            method,
            self._url(path),
            json=json_body,
            params=_clean_params(params),
        )
        logger.debug("%s %s", method, request.url)
        return self._client.send(request, stream=stream, **self._auth_kwargs())

    def _parse_json(self, response: httpx.Response) -> tuple[JSONBody, HTTPResponse]:
        http_response = _to_http_response(response)
        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            raise CozeAPIError(
                code=response.status_code,
                msg=f"unexpected response body: {response.text[:200]}",
                log_id=http_response.log_id(),
                status_code=response.status_code,
            )
        _check_body(body, response)
        return body, http_response

    def request(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        params: Mapping[str, Any] | None = None,
    ) -> tuple[JSONBody, HTTPResponse]:
        """Send a request and return the decoded JSON body with its HTTP response."""
        response = self._send(method, path, json_body, params)
        return self._parse_json(response)

    def raw_request(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        params: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a request and return the whole response when it is not an error."""
        response = self._send(method, path, json_body, params)
        _raise_for_error(response)
        return response

    def stream_request(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        params: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a request and return the open response for streaming; close it when done."""
        response = self._send(method, path, json_body, params, stream=True)
        if not response.is_success or _is_json(response):
            try:
                response.read()
                _raise_for_error(response)
            except BaseException:
                response.close()
                raise
        return response

    def upload_file(
        self,
        path: str,
        file: BinaryIO | bytes | None,
        filename: str,
        fields: Mapping[str, str] | None = None,
    ) -> tuple[JSONBody, HTTPResponse]:
        """POST a multipart form holding ``file`` and ``fields``; return the JSON answer."""
        if file is None:
            raise ValueError("file is required")
        logger.debug("POST %s (upload %s)", path, filename)
        response = self._client.post(
            self._url(path),
            files={"file": (filename, file)},
            data=dict(fields or {}),
            **self._auth_kwargs(),
        )
        return self._parse_json(response)
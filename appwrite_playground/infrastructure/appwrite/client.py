"""
Appwrite REST client (client-side API) built on requests.

Blocking: the async service wrappers in `services.py` push each call
onto a worker thread.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import requests

from appwrite_playground.domains.playground.errors import RemoteOperationFailure
from appwrite_playground.utils.config import PlaygroundConfig
from appwrite_playground.utils.logger import get_logger

logger = get_logger()

RESPONSE_FORMAT = "1.7.0"
SDK_NAME = "appwrite-playground"
CHUNK_SIZE = 5 * 1024 * 1024

ProgressCallback = Callable[[dict[str, Any]], None]


class AppwriteException(RemoteOperationFailure):
    """Error reported by the Appwrite API (or a transport failure reaching it)."""

    def __init__(
        self,
        message: str,
        code: int | None = None,
        type: str | None = None,
        response: str | None = None,
    ) -> None:
        super().__init__(message, code=code, type=type)
        self.response = response


def _flatten(data: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested params into Appwrite's `key[sub]` / `key[]` form for query strings."""
    out: dict[str, Any] = {}
    for key, value in data.items():
        name = f"{prefix}[{key}]" if prefix else key
        if value is None:
            continue
        if isinstance(value, dict):
            out.update(_flatten(value, name))
        elif isinstance(value, (list, tuple)):
            out[f"{name}[]"] = [str(v) for v in value]
        elif isinstance(value, bool):
            out[name] = "true" if value else "false"
        else:
            out[name] = value
    return out


class AppwriteClient:
    def __init__(
        self,
        endpoint: str,
        project_id: str,
        dev_key: str | None = None,
        self_signed: bool = False,
        timeout: int = 30,
        http: requests.Session | None = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.project_id = project_id
        self.timeout = timeout
        self._http = http or requests.Session()
        self._http.verify = not self_signed
        self._headers: dict[str, str] = {
            "X-Appwrite-Project": project_id,
            "X-Appwrite-Response-Format": RESPONSE_FORMAT,
            "X-SDK-Name": SDK_NAME,
            "X-SDK-Language": "python",
        }
        if dev_key:
            self._headers["X-Appwrite-Dev-Key"] = dev_key
        # Mirrors X-Fallback-Cookies for hosts where the session cookie is dropped.
        self._fallback_cookies: dict[str, str] = {}

    @classmethod
    def from_config(cls, config: PlaygroundConfig) -> "AppwriteClient":
        return cls(
            endpoint=config.endpoint,
            project_id=config.project_id,
            dev_key=config.dev_key or None,
            self_signed=config.self_signed,
            timeout=config.http_timeout,
        )

    @property
    def session_cookie_name(self) -> str:
        return f"a_session_{self.project_id}"

    def headers(self) -> dict[str, str]:
        h = dict(self._headers)
        if self._fallback_cookies:
            h["X-Fallback-Cookies"] = json.dumps(self._fallback_cookies)
        return h

    def cookie_names(self) -> list[str]:
        """Names of cookies held for this client; values stay private."""
        names = {c.name for c in self._http.cookies}
        names.update(self._fallback_cookies)
        return sorted(names)

    def session_secret(self) -> str | None:
        """Current session secret, used to authenticate the realtime socket."""
        name = self.session_cookie_name
        value = self._http.cookies.get(name) or self._fallback_cookies.get(name)
        return value or None

    def clear_session(self) -> None:
        """Forget local session state (cookies); the server session is untouched."""
        self._http.cookies.clear()
        self._fallback_cookies.clear()

    def close(self) -> None:
        self._http.close()

    def _remember_fallback_cookies(self, response: requests.Response) -> None:
        raw = response.headers.get("X-Fallback-Cookies")
        if not raw:
            return
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.debug("Ignoring malformed X-Fallback-Cookies header")
            return
        if isinstance(parsed, dict):
            self._fallback_cookies.update({str(k): str(v) for k, v in parsed.items()})

    def call(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        response_type: str = "json",
        files: dict[str, Any] | None = None,
    ) -> Any:
        """
        Perform one REST call.

        Args:
            method: HTTP verb.
            path: Path below the endpoint, e.g. "/account".
            params: Query params for GET, JSON body (or form fields with files) otherwise.
            headers: Extra headers for this call.
            response_type: "json", "text" or "bytes".
            files: Multipart files; sends params as form fields.

        Raises:
            AppwriteException: Non-2xx response or transport failure.
        """
        method = method.upper()
        url = f"{self.endpoint}{path}"
        req_headers = self.headers()
        if headers:
            req_headers.update(headers)
        params = {k: v for k, v in (params or {}).items() if v is not None}

        kwargs: dict[str, Any] = {"headers": req_headers, "timeout": self.timeout}
        if method == "GET":
            kwargs["params"] = _flatten(params)
        elif files:
            kwargs["data"] = _flatten(params)
            kwargs["files"] = files
        else:
            kwargs["json"] = params

        logger.debug("Appwrite %s %s", method, path)
        try:
            r = self._http.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.warning("Appwrite %s %s transport error: %s", method, path, e)
            raise AppwriteException(f"{type(e).__name__}: {e}") from e

        self._remember_fallback_cookies(r)
        status = getattr(r, "status_code", 0) or 0
        if status >= 400:
            raise self._error_from(r)

        if response_type == "bytes":
            return r.content or b""
        content_type = (r.headers.get("Content-Type") or "").lower()
        if response_type == "text" or "application/json" not in content_type:
            return r.text or ""
        if not r.content:
            return {}
        return r.json()

    def _error_from(self, r: requests.Response) -> AppwriteException:
        body = ""
        try:
            body = r.text or ""
        except Exception:
            body = ""
        try:
            data = r.json()
        except ValueError:
            data = None
        if isinstance(data, dict):
            return AppwriteException(
                data.get("message") or f"HTTP {r.status_code}",
                code=data.get("code") or r.status_code,
                type=data.get("type"),
                response=body,
            )
        return AppwriteException(body[:500] or f"HTTP {r.status_code}", code=r.status_code, response=body)

    def ping(self) -> str:
        """GET /ping; returns the server's text reply (\"Pong!\")."""
        return self.call("GET", "/ping", response_type="text")

    def upload(
        self,
        path: str,
        file_param: str,
        filename: str,
        data: bytes,
        mime_type: str,
        params: dict[str, Any],
        id_param: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> dict[str, Any]:
        """
        Multipart upload, split into CHUNK_SIZE pieces with Content-Range when large.

        `on_progress` receives {"$id", "progress", "sizeUploaded", "chunksTotal",
        "chunksUploaded"} after each chunk.
        """
        size = len(data)
        if size <= CHUNK_SIZE:
            result = self.call(
                "POST",
                path,
                params=params,
                files={file_param: (filename, data, mime_type)},
            )
            if on_progress:
                on_progress({
                    "$id": result.get("$id"),
                    "progress": 100.0,
                    "sizeUploaded": size,
                    "chunksTotal": 1,
                    "chunksUploaded": 1,
                })
            return result

        chunks_total = (size + CHUNK_SIZE - 1) // CHUNK_SIZE
        upload_id = params.get(id_param) if id_param else None
        result: dict[str, Any] = {}
        for index, offset in enumerate(range(0, size, CHUNK_SIZE)):
            end = min(offset + CHUNK_SIZE, size)
            headers = {"Content-Range": f"bytes {offset}-{end - 1}/{size}"}
            if index > 0 and upload_id:
                headers["X-Appwrite-Id"] = upload_id
            result = self.call(
                "POST",
                path,
                params=params,
                headers=headers,
                files={file_param: (filename, data[offset:end], mime_type)},
            )
            upload_id = upload_id or result.get("$id")
            if on_progress:
                on_progress({
                    "$id": result.get("$id"),
                    "progress": round(end / size * 100, 1),
                    "sizeUploaded": end,
                    "chunksTotal": chunks_total,
                    "chunksUploaded": index + 1,
                })
        return result

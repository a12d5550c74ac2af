"""
Async facades over the Appwrite client-side services.

Each method maps to one REST endpoint and returns the decoded JSON payload
(plain dicts, Appwrite field names such as "$id" and "$createdAt" untouched).
The blocking HTTP call runs on a worker thread so the event loop driving the
UI and realtime socket never waits on the network.
"""

from __future__ import annotations

import asyncio
from typing import Any, Mapping
from urllib.parse import quote, urlencode

from appwrite_playground.domains.playground.session import ServiceKind
from appwrite_playground.infrastructure.appwrite.client import AppwriteClient, ProgressCallback
from appwrite_playground.infrastructure.appwrite.realtime import Realtime
from appwrite_playground.utils.config import PlaygroundConfig


def _seg(value: str) -> str:
    return quote(str(value), safe="")


class _Service:
    def __init__(self, client: AppwriteClient) -> None:
        self._client = client

    async def _call(self, method: str, path: str, params: dict[str, Any] | None = None, **kwargs: Any) -> Any:
        return await asyncio.to_thread(self._client.call, method, path, params, **kwargs)


class Account(_Service):
    async def get(self) -> dict[str, Any]:
        return await self._call("GET", "/account")

    async def create(self, user_id: str, email: str, password: str, name: str | None = None) -> dict[str, Any]:
        return await self._call("POST", "/account", {
            "userId": user_id, "email": email, "password": password, "name": name,
        })

    async def create_email_password_session(self, email: str, password: str) -> dict[str, Any]:
        return await self._call("POST", "/account/sessions/email", {"email": email, "password": password})

    async def create_anonymous_session(self) -> dict[str, Any]:
        return await self._call("POST", "/account/sessions/anonymous")

    def create_oauth2_session_url(
        self,
        provider: str,
        success: str | None = None,
        failure: str | None = None,
        scopes: list[str] | None = None,
    ) -> str:
        """URL that starts the OAuth2 flow in a browser; no request is made here."""
        query: list[tuple[str, str]] = [("project", self._client.project_id)]
        if success:
            query.append(("success", success))
        if failure:
            query.append(("failure", failure))
        for scope in scopes or []:
            query.append(("scopes[]", scope))
        return f"{self._client.endpoint}/account/sessions/oauth2/{_seg(provider)}?{urlencode(query)}"

    async def create_jwt(self) -> dict[str, Any]:
        return await self._call("POST", "/account/jwts")

    async def update_name(self, name: str) -> dict[str, Any]:
        return await self._call("PATCH", "/account/name", {"name": name})

    async def update_email(self, email: str, password: str) -> dict[str, Any]:
        return await self._call("PATCH", "/account/email", {"email": email, "password": password})

    async def update_password(self, password: str, old_password: str | None = None) -> dict[str, Any]:
        return await self._call("PATCH", "/account/password", {"password": password, "oldPassword": old_password})

    async def update_prefs(self, prefs: Mapping[str, Any]) -> dict[str, Any]:
        return await self._call("PATCH", "/account/prefs", {"prefs": dict(prefs)})

    async def list_sessions(self) -> dict[str, Any]:
        return await self._call("GET", "/account/sessions")

    async def list_logs(self) -> dict[str, Any]:
        return await self._call("GET", "/account/logs")

    async def create_verification(self, url: str) -> dict[str, Any]:
        return await self._call("POST", "/account/verification", {"url": url})

    async def create_phone_verification(self) -> dict[str, Any]:
        return await self._call("POST", "/account/verification/phone")

    async def create_recovery(self, email: str, url: str) -> dict[str, Any]:
        return await self._call("POST", "/account/recovery", {"email": email, "url": url})

    async def update_status(self) -> dict[str, Any]:
        return await self._call("PATCH", "/account/status")

    async def delete_sessions(self) -> Any:
        return await self._call("DELETE", "/account/sessions")

    async def delete_session(self, session_id: str = "current") -> Any:
        return await self._call("DELETE", f"/account/sessions/{_seg(session_id)}")


class Databases(_Service):
    @staticmethod
    def _documents(database_id: str, collection_id: str) -> str:
        return f"/databases/{_seg(database_id)}/collections/{_seg(collection_id)}/documents"

    async def list_documents(self, database_id: str, collection_id: str, queries: list[str] | None = None) -> dict[str, Any]:
        return await self._call("GET", self._documents(database_id, collection_id), {"queries": queries})

    async def create_document(
        self,
        database_id: str,
        collection_id: str,
        document_id: str,
        data: Mapping[str, Any],
        permissions: list[str] | None = None,
    ) -> dict[str, Any]:
        return await self._call("POST", self._documents(database_id, collection_id), {
            "documentId": document_id, "data": dict(data), "permissions": permissions,
        })

    async def get_document(self, database_id: str, collection_id: str, document_id: str) -> dict[str, Any]:
        return await self._call("GET", f"{self._documents(database_id, collection_id)}/{_seg(document_id)}")

    async def update_document(
        self, database_id: str, collection_id: str, document_id: str, data: Mapping[str, Any]
    ) -> dict[str, Any]:
        return await self._call(
            "PATCH", f"{self._documents(database_id, collection_id)}/{_seg(document_id)}", {"data": dict(data)}
        )

    async def upsert_document(
        self, database_id: str, collection_id: str, document_id: str, data: Mapping[str, Any]
    ) -> dict[str, Any]:
        return await self._call(
            "PUT", f"{self._documents(database_id, collection_id)}/{_seg(document_id)}", {"data": dict(data)}
        )

    async def delete_document(self, database_id: str, collection_id: str, document_id: str) -> Any:
        return await self._call("DELETE", f"{self._documents(database_id, collection_id)}/{_seg(document_id)}")

    async def increment_document_attribute(
        self, database_id: str, collection_id: str, document_id: str, attribute: str,
        value: float = 1.0, max: float | None = None,
    ) -> dict[str, Any]:
        path = f"{self._documents(database_id, collection_id)}/{_seg(document_id)}/{_seg(attribute)}/increment"
        return await self._call("PATCH", path, {"value": value, "max": max})

    async def decrement_document_attribute(
        self, database_id: str, collection_id: str, document_id: str, attribute: str,
        value: float = 1.0, min: float | None = None,
    ) -> dict[str, Any]:
        path = f"{self._documents(database_id, collection_id)}/{_seg(document_id)}/{_seg(attribute)}/decrement"
        return await self._call("PATCH", path, {"value": value, "min": min})


class Storage(_Service):
    @staticmethod
    def _files(bucket_id: str) -> str:
        return f"/storage/buckets/{_seg(bucket_id)}/files"

    async def list_files(self, bucket_id: str, queries: list[str] | None = None) -> dict[str, Any]:
        return await self._call("GET", self._files(bucket_id), {"queries": queries})

    async def create_file(
        self,
        bucket_id: str,
        file_id: str,
        filename: str,
        data: bytes,
        mime_type: str = "application/octet-stream",
        on_progress: ProgressCallback | None = None,
    ) -> dict[str, Any]:
        return await asyncio.to_thread(
            self._client.upload,
            self._files(bucket_id),
            "file",
            filename,
            data,
            mime_type,
            {"fileId": file_id},
            "fileId",
            on_progress,
        )

    async def get_file(self, bucket_id: str, file_id: str) -> dict[str, Any]:
        return await self._call("GET", f"{self._files(bucket_id)}/{_seg(file_id)}")

    async def update_file(self, bucket_id: str, file_id: str, name: str | None = None) -> dict[str, Any]:
        return await self._call("PUT", f"{self._files(bucket_id)}/{_seg(file_id)}", {"name": name})

    async def get_file_download(self, bucket_id: str, file_id: str) -> bytes:
        return await self._call("GET", f"{self._files(bucket_id)}/{_seg(file_id)}/download", response_type="bytes")

    async def get_file_preview(
        self, bucket_id: str, file_id: str, width: int | None = None, height: int | None = None
    ) -> bytes:
        return await self._call(
            "GET",
            f"{self._files(bucket_id)}/{_seg(file_id)}/preview",
            {"width": width, "height": height},
            response_type="bytes",
        )

    async def delete_file(self, bucket_id: str, file_id: str) -> Any:
        return await self._call("DELETE", f"{self._files(bucket_id)}/{_seg(file_id)}")


class Functions(_Service):
    async def create_execution(
        self,
        function_id: str,
        body: str = "",
        is_async: bool = False,
        path: str | None = None,
        method: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        return await self._call("POST", f"/functions/{_seg(function_id)}/executions", {
            "body": body,
            "async": is_async,
            "path": path,
            "method": method,
            "headers": dict(headers) if headers else None,
        })

    async def list_executions(self, function_id: str) -> dict[str, Any]:
        return await self._call("GET", f"/functions/{_seg(function_id)}/executions")

    async def get_execution(self, function_id: str, execution_id: str) -> dict[str, Any]:
        return await self._call("GET", f"/functions/{_seg(function_id)}/executions/{_seg(execution_id)}")


class Teams(_Service):
    async def list_teams(self) -> dict[str, Any]:
        return await self._call("GET", "/teams")

    async def create(self, team_id: str, name: str, roles: list[str] | None = None) -> dict[str, Any]:
        return await self._call("POST", "/teams", {"teamId": team_id, "name": name, "roles": roles})

    async def get(self, team_id: str) -> dict[str, Any]:
        return await self._call("GET", f"/teams/{_seg(team_id)}")

    async def update_name(self, team_id: str, name: str) -> dict[str, Any]:
        return await self._call("PUT", f"/teams/{_seg(team_id)}", {"name": name})

    async def delete(self, team_id: str) -> Any:
        return await self._call("DELETE", f"/teams/{_seg(team_id)}")

    async def list_memberships(self, team_id: str) -> dict[str, Any]:
        return await self._call("GET", f"/teams/{_seg(team_id)}/memberships")

    async def create_membership(
        self, team_id: str, roles: list[str], email: str | None = None, url: str | None = None
    ) -> dict[str, Any]:
        return await self._call("POST", f"/teams/{_seg(team_id)}/memberships", {
            "roles": roles, "email": email, "url": url,
        })

    async def get_membership(self, team_id: str, membership_id: str) -> dict[str, Any]:
        return await self._call("GET", f"/teams/{_seg(team_id)}/memberships/{_seg(membership_id)}")

    async def update_membership(self, team_id: str, membership_id: str, roles: list[str]) -> dict[str, Any]:
        return await self._call(
            "PATCH", f"/teams/{_seg(team_id)}/memberships/{_seg(membership_id)}", {"roles": roles}
        )

    async def delete_membership(self, team_id: str, membership_id: str) -> Any:
        return await self._call("DELETE", f"/teams/{_seg(team_id)}/memberships/{_seg(membership_id)}")

    async def get_prefs(self, team_id: str) -> dict[str, Any]:
        return await self._call("GET", f"/teams/{_seg(team_id)}/prefs")

    async def update_prefs(self, team_id: str, prefs: Mapping[str, Any]) -> dict[str, Any]:
        return await self._call("PUT", f"/teams/{_seg(team_id)}/prefs", {"prefs": dict(prefs)})


class Locale(_Service):
    async def get(self) -> dict[str, Any]:
        return await self._call("GET", "/locale")

    async def list_codes(self) -> dict[str, Any]:
        return await self._call("GET", "/locale/codes")

    async def list_continents(self) -> dict[str, Any]:
        return await self._call("GET", "/locale/continents")

    async def list_countries(self) -> dict[str, Any]:
        return await self._call("GET", "/locale/countries")

    async def list_countries_eu(self) -> dict[str, Any]:
        return await self._call("GET", "/locale/countries/eu")

    async def list_countries_phones(self) -> dict[str, Any]:
        return await self._call("GET", "/locale/countries/phones")

    async def list_currencies(self) -> dict[str, Any]:
        return await self._call("GET", "/locale/currencies")

    async def list_languages(self) -> dict[str, Any]:
        return await self._call("GET", "/locale/languages")


def build_services(config: PlaygroundConfig) -> tuple[AppwriteClient, dict[ServiceKind, Any]]:
    """Session factory: one REST client shared by every service, plus realtime."""
    client = AppwriteClient.from_config(config)
    services: dict[ServiceKind, Any] = {
        ServiceKind.ACCOUNT: Account(client),
        ServiceKind.DOCUMENTS: Databases(client),
        ServiceKind.STORAGE: Storage(client),
        ServiceKind.FUNCTIONS: Functions(client),
        ServiceKind.TEAMS: Teams(client),
        ServiceKind.LOCALE: Locale(client),
        ServiceKind.REALTIME: Realtime(client, config.realtime_endpoint or None),
    }
    return client, services

"""
HTTP client for the TKMS API

GET responses are cached per (path, params) until a mutation touching the
same resource invalidates them, mirroring how the web frontend refetches.

    client = TkmsClient("http://localhost:8000")
    client.login("admin@tkms.local", "Password@123")
    client.list_attendance(start_date="2026-01-01")
"""
import logging
from typing import Any, Dict, Iterable, Optional, Tuple

import httpx

from tkms.core.constants import API_VERSION

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, Tuple[Tuple[str, Any], ...]]


class ApiError(Exception):
    """Non-2xx response; carries the status code and the server's error message"""

    def __init__(self, status_code: int, message: str, payload: Optional[dict] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}


def _clean_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {k: v for k, v in (params or {}).items() if v is not None}


class TkmsClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: Optional[str] = None,
        api_prefix: str = f"/api/{API_VERSION}",
        timeout: float = 20.0,
        client: Optional[httpx.Client] = None,
    ):
        self.token = token
        self.api_prefix = api_prefix.rstrip("/")
        self._owns_client = client is None
        self._http = client or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)
        self._cache: Dict[CacheKey, Any] = {}

    # -- plumbing -------------------------------------------------------

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        response = self._http.request(
            method,
            f"{self.api_prefix}{path}",
            params=_clean_params(params),
            json=json,
            headers=self._headers(),
        )
        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_error:
            message = body.get("error") if isinstance(body, dict) else None
            if not isinstance(message, str):
                message = response.reason_phrase or "Request failed"
            logger.debug(f"{method} {path} failed with {response.status_code}: {message}")
            raise ApiError(response.status_code, message, body if isinstance(body, dict) else None)
        return body

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        key = (path, tuple(sorted(_clean_params(params).items())))
        if key not in self._cache:
            self._cache[key] = self._request("GET", path, params=params)
        return self._cache[key]

    def _mutate(
        self,
        method: str,
        path: str,
        invalidates: Iterable[str],
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        try:
            return self._request(method, path, params=params, json=json)
        finally:
            self.invalidate(*invalidates)

    def invalidate(self, *resources: str) -> None:
        """Drop cached GETs for the given resource roots, or everything when none are given"""
        if not resources:
            self._cache.clear()
            return
        prefixes = tuple(f"/{r.strip('/')}" for r in resources)
        for key in [k for k in self._cache if k[0].startswith(prefixes)]:
            del self._cache[key]

    # -- auth -----------------------------------------------------------

    def login(self, email: str, password: str) -> Dict[str, Any]:
        body = self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.token = body["token"]
        self.invalidate()
        return body

    def logout(self) -> None:
        if self.token:
            self._request("POST", "/auth/logout")
        self.token = None
        self.invalidate()

    def register(self, **payload: Any) -> Dict[str, Any]:
        return self._request("POST", "/auth/register", json=payload)

    def forgot_password(self, email: str) -> Dict[str, Any]:
        return self._request("POST", "/auth/forgot-password", json={"email": email})

    def reset_password(self, token: str, new_password: str) -> Dict[str, Any]:
        return self._request("POST", "/auth/reset-password", json={"token": token, "newPassword": new_password})

    def me(self) -> Dict[str, Any]:
        return self._get("/auth/me")["user"]

    # -- users ----------------------------------------------------------

    def list_users(self, role: Optional[str] = None):
        return self._get("/users", {"role": role})["users"]

    def get_user(self, user_id: int):
        return self._get(f"/users/{user_id}")["user"]

    def create_user(self, **payload: Any):
        return self._mutate("POST", "/users", ["users", "dashboard"], json=payload)["user"]

    def update_user(self, user_id: int, **updates: Any):
        return self._mutate("PATCH", "/users", ["users", "auth", "dashboard"], params={"id": user_id}, json=updates)["user"]

    def delete_user(self, user_id: int) -> None:
        self._mutate("DELETE", "/users", ["users", "dashboard"], params={"id": user_id})

    def change_password(self, current_password: str, new_password: str) -> None:
        self._request(
            "POST",
            "/users/change-password",
            json={"currentPassword": current_password, "newPassword": new_password},
        )

    def set_password(self, user_id: int, new_password: str) -> None:
        self._request("POST", "/users/password", json={"userId": user_id, "newPassword": new_password})

    def upload_profile_photo(self, user_id: int, photo: str):
        return self._mutate("POST", f"/users/{user_id}/photo", ["users", "auth"], json={"photo": photo})["user"]

    # -- schedules ------------------------------------------------------

    def list_schedules(self, user_id: Optional[int] = None):
        return self._get("/schedules", {"userId": user_id})["schedules"]

    def create_schedule(self, **payload: Any):
        return self._mutate("POST", "/schedules", ["schedules"], json=payload)["schedule"]

    def update_schedule(self, schedule_id: int, **updates: Any):
        return self._mutate("PATCH", "/schedules", ["schedules"], params={"id": schedule_id}, json=updates)["schedule"]

    def delete_schedule(self, schedule_id: int) -> None:
        self._mutate("DELETE", "/schedules", ["schedules"], params={"id": schedule_id})

    # -- punches and attendance ----------------------------------------

    def list_time_entries(self, user_id: Optional[int] = None, start_date: Optional[str] = None, end_date: Optional[str] = None):
        params = {"userId": user_id, "startDate": start_date, "endDate": end_date}
        return self._get("/time-entries", params)["timeEntries"]

    def punch(self, entry_type: str, photo: str, location: Optional[Dict[str, float]] = None, notes: Optional[str] = None):
        payload = {"type": entry_type, "photo": photo, "location": location, "notes": notes}
        return self._mutate(
            "POST",
            "/time-entries",
            ["time-entries", "attendance", "dashboard", "notifications"],
            json={k: v for k, v in payload.items() if v is not None},
        )

    def time_in(self, photo: str, location: Optional[Dict[str, float]] = None):
        return self.punch("time-in", photo, location)

    def time_out(self, photo: str, location: Optional[Dict[str, float]] = None):
        return self.punch("time-out", photo, location)

    def review_time_entry(self, entry_id: int, status: str):
        return self._mutate(
            "PATCH", f"/time-entries/{entry_id}", ["time-entries", "attendance", "dashboard"], json={"status": status}
        )["timeEntry"]

    def list_attendance(self, user_id: Optional[int] = None, start_date: Optional[str] = None, end_date: Optional[str] = None):
        params = {"userId": user_id, "startDate": start_date, "endDate": end_date}
        return self._get("/attendance", params)["attendances"]

    def list_time_adjustments(self, user_id: Optional[int] = None):
        return self._get("/time-adjustments", {"userId": user_id})["adjustments"]

    def create_time_adjustment(self, **payload: Any):
        return self._mutate("POST", "/time-adjustments", ["time-adjustments", "attendance", "dashboard"], json=payload)["adjustment"]

    # -- absences and leave --------------------------------------------

    def list_absences(self, user_id: Optional[int] = None):
        return self._get("/absence", {"userId": user_id})["absences"]

    def mark_absence(self, **payload: Any):
        return self._mutate("POST", "/absence", ["absence", "attendance", "dashboard"], json=payload)["absence"]

    def list_leaves(self):
        return self._get("/leave")["leaves"]

    def file_leave(self, **payload: Any):
        return self._mutate("POST", "/leave", ["leave", "notifications"], json=payload)["leave"]

    def review_leave(self, leave_id: int, status: str, admin_notes: Optional[str] = None):
        return self._mutate(
            "PATCH",
            f"/leave/{leave_id}",
            ["leave", "attendance", "users", "auth", "dashboard", "notifications"],
            json={"status": status, "adminNotes": admin_notes},
        )["leave"]

    def cancel_leave(self, leave_id: int) -> None:
        self._mutate("DELETE", f"/leave/{leave_id}", ["leave"])

    # -- settings, notifications, uploads -------------------------------

    def get_system_settings(self):
        return self._get("/system-settings")["settings"]

    def update_system_settings(self, **changes: Any):
        return self._mutate("PATCH", "/system-settings", ["system-settings"], json=changes)["settings"]

    def list_notifications(self):
        return self._get("/notifications")

    def mark_all_notifications_read(self) -> None:
        self._mutate("PATCH", "/notifications/read-all", ["notifications"])

    def upload(self, filename: str, data: str) -> Dict[str, Any]:
        return self._request("POST", "/uploads", json={"filename": filename, "data": data})

    # -- reporting ------------------------------------------------------

    def dashboard_stats(self):
        return self._get("/dashboard/stats")["stats"]

    def audit_logs(self, **filters: Any) -> Dict[str, Any]:
        return self._get("/audit-logs", filters)

    def version(self) -> Dict[str, Any]:
        return self._request("GET", "/version")

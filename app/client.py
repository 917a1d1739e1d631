"""Small synchronous client for the tutoring API.

Keeps the session and CSRF cookies in the underlying ``httpx.Client`` and
sends the CSRF token header on every state-changing request.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

CSRF_HEADER = "x-csrf-token"
MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class ApiClientError(Exception):
    def __init__(self, message: str, status: int, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.details = details


class TutoringClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 10.0,
        http: Optional[httpx.Client] = None,
    ) -> None:
        self.http = http or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)
        self.csrf_token: Optional[str] = None

        self.login = _LoginApi(self)
        self.lessons = _LessonsApi(self)
        self.topics = _TopicsApi(self)
        self.students = _StudentsApi(self)

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "TutoringClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def fetch_csrf_token(self) -> str:
        data = self.request("GET", "/api/auth/csrf")
        self.csrf_token = data["csrfToken"]
        return self.csrf_token

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        skip_csrf: bool = False,
    ) -> Any:
        method = method.upper()
        headers = {}
        if method in MUTATING_METHODS and not skip_csrf:
            headers[CSRF_HEADER] = self.csrf_token or self.fetch_csrf_token()

        try:
            response = self.http.request(method, path, json=json, params=params, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("Request %s %s failed: %s", method, path, exc)
            raise ApiClientError(str(exc) or "Network error", 0) from exc

        data = _json_or_empty(response)
        if response.is_error:
            message = data.get("error") if isinstance(data, dict) else None
            details = data.get("details") if isinstance(data, dict) else None
            raise ApiClientError(message or f"HTTP {response.status_code}", response.status_code, details)
        return data

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None, skip_csrf: bool = False) -> Any:
        return self.request("POST", path, json=json, skip_csrf=skip_csrf)

    def put(self, path: str, json: Any = None, skip_csrf: bool = False) -> Any:
        return self.request("PUT", path, json=json, skip_csrf=skip_csrf)

    def delete(self, path: str, skip_csrf: bool = False) -> Any:
        return self.request("DELETE", path, skip_csrf=skip_csrf)


def _json_or_empty(response: httpx.Response) -> Any:
    if "application/json" not in response.headers.get("content-type", ""):
        return {}
    try:
        return response.json()
    except ValueError:
        return {}


class _Group:
    def __init__(self, client: TutoringClient) -> None:
        self.client = client


class _LoginApi(_Group):
    def teacher(self, email: str, password: str) -> Dict[str, Any]:
        return self.client.post("/api/auth/login", {"email": email, "password": password})

    def student(self, email: str, password: str) -> Dict[str, Any]:
        return self.client.post("/api/students/auth/login", {"email": email, "password": password})

    def logout(self) -> Dict[str, Any]:
        return self.client.post("/api/auth/logout")

    def me(self) -> Dict[str, Any]:
        return self.client.get("/api/auth/me")


class _LessonsApi(_Group):
    def list(self, exam_type: Optional[str] = None) -> List[Dict[str, Any]]:
        return self.client.get("/api/lessons", params={"type": exam_type} if exam_type else None)

    def get(self, lesson_id: str) -> Dict[str, Any]:
        return self.client.get(f"/api/lessons/{lesson_id}")

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.post("/api/lessons", data)

    def update(self, lesson_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.put(f"/api/lessons/{lesson_id}", data)

    def delete(self, lesson_id: str) -> Dict[str, Any]:
        return self.client.delete(f"/api/lessons/{lesson_id}")


class _TopicsApi(_Group):
    def list(self, lesson_id: Optional[str] = None) -> List[Dict[str, Any]]:
        return self.client.get("/api/topics", params={"lessonId": lesson_id} if lesson_id else None)

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.post("/api/topics", data)

    def update(self, topic_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.put(f"/api/topics/{topic_id}", data)

    def delete(self, topic_id: str) -> Dict[str, Any]:
        return self.client.delete(f"/api/topics/{topic_id}")

    def reorder(self, lesson_id: str, topic_ids: List[str]) -> Dict[str, Any]:
        return self.client.put("/api/topics/reorder", {"lessonId": lesson_id, "topicIds": topic_ids})


class _StudentsApi(_Group):
    def list(self, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        return self.client.get("/api/students", params={"page": page, "limit": limit})

    def get(self, student_id: str) -> Dict[str, Any]:
        return self.client.get(f"/api/students/{student_id}")

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.post("/api/students", data)

    def update(self, student_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.put(f"/api/students/{student_id}", data)

    def delete(self, student_id: str) -> Dict[str, Any]:
        return self.client.delete(f"/api/students/{student_id}")

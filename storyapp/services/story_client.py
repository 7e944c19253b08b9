"""
Story API Client
Authenticated HTTP client for the Story Spoiler endpoints.
"""
import json as jsonlib
import logging
import time
from typing import Optional, List, Dict, Any

import requests
from requests.auth import AuthBase
from pydantic import ValidationError

from storyapp.config import (
    STORY_CREATE_PATH, STORY_EDIT_PATH, STORY_ALL_PATH, STORY_DELETE_PATH
)
from storyapp.models import ApiEnvelope, Credentials, Story, StoryPayload
from storyapp.services.auth_service import get_jwt_token
from storyapp.services.errors import ResponseFormatError
from storyapp.services.logging_service import log_request

logger = logging.getLogger(__name__)


class BearerAuth(AuthBase):
    """Attach `Authorization: Bearer <token>` to every request"""

    def __init__(self, token: str):
        self.token = token

    def __call__(self, r):
        r.headers["Authorization"] = f"Bearer {self.token}"
        return r


class ApiResponse:
    """Status code and raw body of a single call."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body

    def __repr__(self) -> str:
        return f"ApiResponse(status_code={self.status_code}, body={self.body[:80]!r})"

    def json(self) -> Any:
        try:
            return jsonlib.loads(self.body)
        except ValueError as e:
            raise ResponseFormatError(
                f"Response body is not valid JSON (status {self.status_code})",
                status_code=self.status_code,
                body=self.body
            ) from e

    def envelope(self) -> ApiEnvelope:
        """Deserialize a {msg, storyId?} body."""
        data = self.json()
        if not isinstance(data, dict):
            raise ResponseFormatError(
                f"Expected a JSON object, got {type(data).__name__} (status {self.status_code})",
                status_code=self.status_code,
                body=self.body
            )
        try:
            return ApiEnvelope.model_validate(data)
        except ValidationError as e:
            raise ResponseFormatError(
                f"Response body is not a valid envelope (status {self.status_code}): {e.error_count()} field error(s)",
                status_code=self.status_code,
                body=self.body
            ) from e

    def stories(self) -> List[Story]:
        """Deserialize the array returned by GET /api/Story/All."""
        data = self.json()
        if not isinstance(data, list):
            raise ResponseFormatError(
                f"Expected a JSON array, got {type(data).__name__} (status {self.status_code})",
                status_code=self.status_code,
                body=self.body
            )
        try:
            return [Story.model_validate(item) for item in data]
        except ValidationError as e:
            raise ResponseFormatError(
                f"Response body is not a valid story list (status {self.status_code}): {e.error_count()} field error(s)",
                status_code=self.status_code,
                body=self.body
            ) from e


class StoryApiClient:
    """
    Reusable client bound to one base URL and one bearer token.

    Each call is attempted exactly once; transport errors from requests
    propagate to the caller unchanged.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None
    ):
        if not token:
            raise ValueError("A bearer token is required")
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.auth = BearerAuth(token)
        self.session.headers.update({"Accept": "application/json"})

    @classmethod
    def login(
        cls,
        base_url: str,
        credentials: Credentials,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None
    ) -> "StoryApiClient":
        """Authenticate and build a client around the returned token."""
        token = get_jwt_token(base_url, credentials, timeout=timeout)
        return cls(base_url, token, session=session, timeout=timeout)

    def __enter__(self) -> "StoryApiClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def execute(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None
    ) -> ApiResponse:
        """Send one request and return its status code and raw body."""
        url = f"{self.base_url}{path}"
        start = time.time()
        try:
            response = self.session.request(method, url, json=json, timeout=self.timeout)
        except requests.RequestException as e:
            log_request(method, path, None, (time.time() - start) * 1000, error=str(e))
            raise

        log_request(method, path, response.status_code, (time.time() - start) * 1000)
        return ApiResponse(response.status_code, response.text)

    def create_story(self, payload: StoryPayload) -> ApiResponse:
        return self.execute("POST", STORY_CREATE_PATH, json=payload.to_json())

    def edit_story(self, story_id: str, payload: StoryPayload) -> ApiResponse:
        return self.execute("PUT", STORY_EDIT_PATH.format(story_id=story_id), json=payload.to_json())

    def list_stories(self) -> ApiResponse:
        return self.execute("GET", STORY_ALL_PATH)

    def delete_story(self, story_id: str) -> ApiResponse:
        return self.execute("DELETE", STORY_DELETE_PATH.format(story_id=story_id))

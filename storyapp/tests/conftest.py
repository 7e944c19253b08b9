"""
Offline fixtures: an in-memory stand-in for the Story Spoiler API wired into
a real requests.Session, so the client and steps run without network access.
"""
import json
import uuid
from urllib.parse import urlsplit
from unittest.mock import MagicMock

import pytest
import requests

BASE_URL = "https://stories.test"
TEST_USERNAME = "test_user"
TEST_PASSWORD = "Test123!"


def build_response(status_code: int, payload=None, text: str = None):
    """Mock of requests.Response exposing status_code, text and json()."""
    response = MagicMock()
    response.status_code = status_code
    if text is None:
        text = json.dumps(payload) if payload is not None else ""
    response.text = text
    try:
        parsed = json.loads(text)
        response.json.return_value = parsed
    except ValueError as e:
        response.json.side_effect = ValueError(str(e))
    return response


class FakeStoryService:
    """Story API behaviour as observed on the real service."""

    def __init__(self):
        self.token = f"jwt_{uuid.uuid4().hex[:12]}"
        self.stories = {}
        self.calls = []
        self.session = None
        self.fail_with = None

    def bind(self, session: requests.Session) -> requests.Session:
        self.session = session
        session.request = self.handle
        return session

    def _authorized(self) -> bool:
        auth = getattr(self.session, "auth", None)
        return auth is not None and getattr(auth, "token", None) == self.token

    def handle(self, method, url, data=None, json=None, timeout=None, **kwargs):
        path = urlsplit(url).path
        self.calls.append({"method": method, "path": path, "json": json, "timeout": timeout})

        if self.fail_with is not None:
            raise self.fail_with

        if method == "POST" and path == "/api/User/Authentication":
            if json == {"username": TEST_USERNAME, "password": TEST_PASSWORD}:
                return build_response(200, {"accessToken": self.token})
            return build_response(401, {"msg": "Invalid username or password!"})

        if not self._authorized():
            return build_response(401, text="")

        parts = path.strip("/").split("/")

        if method == "POST" and path == "/api/Story/Create":
            if not json or not json.get("title") or not json.get("description"):
                return build_response(400, {"errors": {"Title": ["The Title field is required."]}})
            story_id = uuid.uuid4().hex
            self.stories[story_id] = dict(json)
            return build_response(201, {"msg": "Successfully created!", "storyId": story_id})

        if method == "PUT" and parts[:3] == ["api", "Story", "Edit"] and len(parts) == 4:
            if parts[3] not in self.stories:
                return build_response(404, {"msg": "No spoilers..."})
            self.stories[parts[3]].update(json or {})
            return build_response(200, {"msg": "Successfully edited"})

        if method == "GET" and path == "/api/Story/All":
            return build_response(200, [
                {"id": story_id, **story} for story_id, story in self.stories.items()
            ])

        if method == "DELETE" and parts[:3] == ["api", "Story", "Delete"] and len(parts) == 4:
            if self.stories.pop(parts[3], None) is None:
                return build_response(400, {"msg": "Unable to delete this story spoiler!"})
            return build_response(200, {"msg": "Deleted successfully!"})

        return build_response(404, text="Not Found")


@pytest.fixture
def fake_service():
    return FakeStoryService()


@pytest.fixture
def fake_session(fake_service):
    return fake_service.bind(requests.Session())


@pytest.fixture
def client(fake_service, fake_session):
    """StoryApiClient authenticated against the fake service"""
    from storyapp.services.story_client import StoryApiClient
    api_client = StoryApiClient(BASE_URL, fake_service.token, session=fake_session)
    yield api_client
    api_client.close()


@pytest.fixture
def base_url():
    return BASE_URL


@pytest.fixture
def credentials():
    from storyapp.models import Credentials
    return Credentials(username=TEST_USERNAME, password=TEST_PASSWORD)


@pytest.fixture
def make_response():
    return build_response

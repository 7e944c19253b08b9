"""Configuration for the Story Spoiler API test suite."""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, PositiveFloat, field_validator

ROOT_DIR = Path(__file__).resolve().parent.parent
load_dotenv(ROOT_DIR / '.env')

DEFAULT_BASE_URL = "https://d3s5nxhwblsjbi.cloudfront.net"
DEFAULT_USERNAME = "yoanipetrov"
DEFAULT_PASSWORD = "123456abv"

# Assumed absent on the remote fixture
DEFAULT_NON_EXISTING_ID = "358"

AUTH_PATH = "/api/User/Authentication"
STORY_CREATE_PATH = "/api/Story/Create"
STORY_EDIT_PATH = "/api/Story/Edit/{story_id}"
STORY_ALL_PATH = "/api/Story/All"
STORY_DELETE_PATH = "/api/Story/Delete/{story_id}"


class ApiSettings(BaseModel):
    """Resolved settings for one test run"""
    model_config = ConfigDict(frozen=True)

    base_url: str = DEFAULT_BASE_URL
    username: str = DEFAULT_USERNAME
    password: str = DEFAULT_PASSWORD
    non_existing_id: str = DEFAULT_NON_EXISTING_ID
    timeout: Optional[PositiveFloat] = None
    live: bool = False
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip('/')


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in {"1", "true", "yes", "on"}


def live_tests_enabled() -> bool:
    return _env_flag("STORY_API_LIVE")


def load_settings() -> ApiSettings:
    """Build settings from the environment (and .env, loaded at import).

    Raises pydantic.ValidationError for malformed values such as a
    non-numeric or non-positive STORY_API_TIMEOUT.
    """
    timeout = os.environ.get("STORY_API_TIMEOUT", "").strip()
    return ApiSettings(
        base_url=os.environ.get("STORY_API_BASE_URL", DEFAULT_BASE_URL),
        username=os.environ.get("STORY_API_USERNAME", DEFAULT_USERNAME),
        password=os.environ.get("STORY_API_PASSWORD", DEFAULT_PASSWORD),
        non_existing_id=os.environ.get("STORY_API_NON_EXISTING_ID", DEFAULT_NON_EXISTING_ID),
        timeout=timeout or None,
        live=live_tests_enabled(),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        log_format=os.environ.get("LOG_FORMAT", "json"),
    )

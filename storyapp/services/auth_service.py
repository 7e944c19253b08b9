"""
Authentication Service for the Story Spoiler API
Exchanges username/password for a JWT bearer token.
"""
import logging
from typing import Optional

import requests

from storyapp.config import AUTH_PATH
from storyapp.models import Credentials
from storyapp.services.errors import AuthenticationError

logger = logging.getLogger(__name__)


def get_jwt_token(
    base_url: str,
    credentials: Credentials,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None
) -> str:
    """
    Log in and return the `accessToken` from the response body.

    The login call goes out without an Authorization header. Any failure
    (transport, non-JSON body, missing or empty token) raises
    AuthenticationError so no client is ever built around a null token.
    """
    url = f"{base_url.rstrip('/')}{AUTH_PATH}"
    http = session or requests.Session()

    logger.info(f"Authenticating as {credentials.username}")
    try:
        response = http.post(
            url,
            json={"username": credentials.username, "password": credentials.password},
            timeout=timeout
        )
    except requests.RequestException as e:
        raise AuthenticationError(f"Login request to {url} failed: {e}") from e
    finally:
        if session is None:
            http.close()

    try:
        data = response.json()
    except ValueError as e:
        raise AuthenticationError(
            f"Login response is not valid JSON (status {response.status_code}): {response.text[:200]}"
        ) from e

    if not isinstance(data, dict):
        raise AuthenticationError(
            f"Login response is not a JSON object (status {response.status_code}): {response.text[:200]}"
        )

    token = data.get("accessToken")
    if not isinstance(token, str) or not token:
        raise AuthenticationError(
            f"Login response has no accessToken (status {response.status_code}): {response.text[:200]}"
        )

    logger.info("Authentication succeeded")
    return token

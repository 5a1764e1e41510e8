"""
Auth bootstrap - signs in through the Firebase Identity Toolkit REST API
"""
from typing import Optional

import httpx
from firebase_admin import auth as firebase_auth
from loguru import logger

from src import config
from src.db.firestore import initialize_app

IDENTITY_TOOLKIT_BASE_URL = "https://identitytoolkit.googleapis.com/v1"


class AuthError(RuntimeError):
    """Raised when a sign-in request fails."""


class AuthSession:
    """
    Session established once at startup.

    Exposes only a ready flag and the user ID. There is no retry and no
    token refresh.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        initial_auth_token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = config.FIREBASE_WEB_API_KEY if api_key is None else api_key
        self.initial_auth_token = (
            config.INITIAL_AUTH_TOKEN if initial_auth_token is None else initial_auth_token
        )
        self._client = client
        self.user_id: Optional[str] = None
        self.is_ready: bool = False

    async def _post(self, endpoint: str, body: dict) -> dict:
        if not self.api_key:
            raise AuthError("FIREBASE_WEB_API_KEY not set in environment variables")

        url = f"{IDENTITY_TOOLKIT_BASE_URL}/accounts:{endpoint}"
        params = {"key": self.api_key}

        try:
            if self._client is not None:
                response = await self._client.post(url, params=params, json=body)
            else:
                async with httpx.AsyncClient(timeout=config.HTTP_TIMEOUT_SEC) as client:
                    response = await client.post(url, params=params, json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise AuthError(f"{endpoint} failed with status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise AuthError(f"{endpoint} failed: {e}") from e

        return response.json()

    async def sign_in_anonymously(self) -> str:
        data = await self._post("signUp", {"returnSecureToken": True})
        return data["localId"]

    async def sign_in_with_custom_token(self, token: str) -> str:
        data = await self._post(
            "signInWithCustomToken",
            {"token": token, "returnSecureToken": True},
        )
        if data.get("localId"):
            return data["localId"]
        # The custom-token response carries no localId; read it off the ID token
        initialize_app()
        decoded = firebase_auth.verify_id_token(data["idToken"])
        return decoded["uid"]

    async def bootstrap(self) -> "AuthSession":
        """
        Sign in with the initial token if one is configured, else anonymously.

        Always ends ready; on failure the user ID stays unset.
        """
        try:
            if self.initial_auth_token:
                self.user_id = await self.sign_in_with_custom_token(self.initial_auth_token)
            else:
                self.user_id = await self.sign_in_anonymously()
            logger.info(f"Signed in as {self.user_id}")
        except Exception as e:
            logger.error(f"Error during anonymous sign-in or custom token sign-in: {e}")
        finally:
            self.is_ready = True
        return self

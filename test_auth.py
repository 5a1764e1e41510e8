"""
Tests for the auth bootstrap against a mocked Identity Toolkit.
"""
import json
import unittest
from unittest.mock import patch

import httpx

from src.auth import AuthError, AuthSession


class TestAuthBootstrap(unittest.IsolatedAsyncioTestCase):

    def make_session(self, handler, api_key="web-key", initial_auth_token=""):
        self.requests = []

        def recording_handler(request):
            self.requests.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(recording_handler))
        self.addAsyncCleanup(client.aclose)
        return AuthSession(api_key=api_key, initial_auth_token=initial_auth_token, client=client)

    async def test_anonymous_sign_in(self):
        session = self.make_session(
            lambda request: httpx.Response(200, json={"idToken": "tok", "localId": "anon-uid"})
        )

        await session.bootstrap()

        self.assertTrue(session.is_ready)
        self.assertEqual(session.user_id, "anon-uid")
        request = self.requests[0]
        self.assertTrue(request.url.path.endswith("/accounts:signUp"))
        self.assertEqual(request.url.params["key"], "web-key")
        self.assertEqual(json.loads(request.content), {"returnSecureToken": True})

    @patch("src.auth.initialize_app")
    @patch("src.auth.firebase_auth.verify_id_token", return_value={"uid": "custom-uid"})
    async def test_custom_token_sign_in(self, verify_id_token, initialize_app):
        session = self.make_session(
            lambda request: httpx.Response(200, json={"idToken": "id-token", "refreshToken": "r"}),
            initial_auth_token="custom-token",
        )

        await session.bootstrap()

        self.assertEqual(session.user_id, "custom-uid")
        verify_id_token.assert_called_once_with("id-token")
        request = self.requests[0]
        self.assertTrue(request.url.path.endswith("/accounts:signInWithCustomToken"))
        self.assertEqual(json.loads(request.content)["token"], "custom-token")

    async def test_failed_sign_in_is_still_ready(self):
        session = self.make_session(lambda request: httpx.Response(400, json={"error": {"message": "bad"}}))

        await session.bootstrap()

        self.assertTrue(session.is_ready)
        self.assertIsNone(session.user_id)

    async def test_missing_api_key(self):
        session = self.make_session(lambda request: httpx.Response(200), api_key="")

        with self.assertRaises(AuthError):
            await session.sign_in_anonymously()
        self.assertEqual(self.requests, [])


if __name__ == "__main__":
    unittest.main()

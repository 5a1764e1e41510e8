"""
Tests for application startup and shutdown: auth bootstrap, then the recipe subscription.
"""
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from fastapi.testclient import TestClient

import main


class TestLifespan(unittest.TestCase):

    def setUp(self):
        patchers = {
            "auth": patch("main.AuthSession"),
            "store": patch("main.RecipeStore"),
            "logging": patch("main.configure_logging"),
        }
        self.mocks = {name: p.start() for name, p in patchers.items()}
        for p in patchers.values():
            self.addCleanup(p.stop)

        self.store = self.mocks["store"].return_value
        self.store.recipes = []

    def bootstrap_as(self, user_id, is_ready=True):
        session = MagicMock(user_id=user_id, is_ready=is_ready)
        self.mocks["auth"].return_value.bootstrap = AsyncMock(return_value=session)

    def test_signed_in_user_subscribes(self):
        self.bootstrap_as("uid-1")

        with TestClient(main.app) as client:
            self.assertEqual(client.get("/").status_code, 200)
            self.mocks["store"].assert_called_once_with("uid-1")
            self.store.start.assert_called_once()
            self.store.stop.assert_not_called()

            controller = main.app.state.controller
            self.assertIs(controller.store, self.store)
            self.assertTrue(controller.is_auth_ready)

        self.store.stop.assert_called_once()
        self.mocks["logging"].assert_called_once()

    def test_no_user_skips_subscription(self):
        self.bootstrap_as(None)

        with TestClient(main.app):
            self.store.start.assert_not_called()
            self.assertTrue(main.app.state.controller.is_auth_ready)

        self.store.stop.assert_called_once()

    def test_failed_subscription_falls_back_to_one_read(self):
        self.bootstrap_as("uid-1")
        self.store.start.side_effect = RuntimeError("permission denied")

        with TestClient(main.app) as client:
            self.assertEqual(client.get("/api/health").status_code, 200)
            self.store.refresh.assert_called_once()

        self.store.stop.assert_called_once()

    def test_failed_fallback_read_still_starts(self):
        self.bootstrap_as("uid-1")
        self.store.start.side_effect = RuntimeError("permission denied")
        self.store.refresh.side_effect = RuntimeError("permission denied")

        with TestClient(main.app) as client:
            self.assertEqual(client.get("/").status_code, 200)

        self.store.stop.assert_called_once()


if __name__ == "__main__":
    unittest.main()

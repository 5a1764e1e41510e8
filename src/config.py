"""
Application settings loaded from the environment (and a local .env file)
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Firestore path prefix: artifacts/{APP_ID}/users/{user_id}/recipes
APP_ID = os.getenv("APP_ID", "default-app-id")

FIREBASE_SERVICE_ACCOUNT_PATH = os.getenv("FIREBASE_SERVICE_ACCOUNT_PATH")
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")
FIREBASE_WEB_API_KEY = os.getenv("FIREBASE_WEB_API_KEY")
INITIAL_AUTH_TOKEN = os.getenv("INITIAL_AUTH_TOKEN")

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

HTTP_TIMEOUT_SEC = float(os.getenv("HTTP_TIMEOUT_SEC", "30"))

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

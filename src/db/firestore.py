"""
Firestore database configuration and initialization
"""
import os
import firebase_admin
from firebase_admin import credentials, firestore
from loguru import logger

from src import config

_client = None


def initialize_app() -> firebase_admin.App:
    """
    Initialize the Firebase Admin app once per process.

    Returns:
        The default Firebase app
    """
    if firebase_admin._apps:
        return firebase_admin.get_app()

    service_account_path = config.FIREBASE_SERVICE_ACCOUNT_PATH

    if service_account_path and os.path.exists(service_account_path):
        logger.info(f"Initializing Firebase with service account: {service_account_path}")
        cred = credentials.Certificate(service_account_path)
        return firebase_admin.initialize_app(cred)

    logger.info("No service account found, trying default credentials...")
    if config.FIREBASE_PROJECT_ID:
        return firebase_admin.initialize_app(options={"projectId": config.FIREBASE_PROJECT_ID})
    return firebase_admin.initialize_app()


def initialize_firestore():
    """
    Initialize Firestore database connection.

    Returns:
        Firestore client instance
    """
    initialize_app()
    client = firestore.client()
    logger.info("Firestore initialized successfully")
    return client


def get_db():
    """Return the shared Firestore client, creating it on first use."""
    global _client
    if _client is None:
        _client = initialize_firestore()
    return _client

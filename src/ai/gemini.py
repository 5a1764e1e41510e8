"""
Thin client for the Gemini generateContent REST endpoint
"""
from typing import Optional

import httpx

from src import config

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


def gemini_url(model: Optional[str] = None) -> str:
    model = config.GEMINI_MODEL if model is None else model
    return f"{GEMINI_BASE_URL}/models/{model}:generateContent"


async def generate_content(
    payload: dict,
    *,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> httpx.Response:
    """
    POST a generateContent request and return the raw response.

    Status handling is left to the caller.
    """
    api_key = config.GEMINI_API_KEY if api_key is None else api_key
    url = gemini_url(model)
    params = {"key": api_key or ""}
    headers = {"Content-Type": "application/json"}

    if client is not None:
        return await client.post(url, params=params, json=payload, headers=headers)

    async with httpx.AsyncClient(timeout=config.HTTP_TIMEOUT_SEC) as http_client:
        return await http_client.post(url, params=params, json=payload, headers=headers)

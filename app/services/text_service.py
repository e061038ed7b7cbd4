"""Forward a text prompt to Gemini and return the generated text."""
import logging

import httpx

from app.config import settings
from app.services.upstream import post_json, require_api_key
from app.utils.exceptions import BadRequest, InternalError

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


async def generate_text(prompt: str | None, client: httpx.AsyncClient | None = None) -> str:
    api_key = require_api_key(settings.google_api_key, "GOOGLE_API_KEY")

    if not isinstance(prompt, str) or not prompt.strip():
        logger.warning("Bad Request: no valid prompt provided")
        raise BadRequest("A valid text prompt is required.")
    logger.info('Received prompt starting with: "%s..."', prompt[:80])

    data = await post_json(
        GEMINI_URL.format(model=settings.gemini_model),
        {"contents": [{"parts": [{"text": prompt}]}]},
        api_name="Gemini API",
        params={"key": api_key},
        client=client,
    )

    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        text = None
    if not text:
        feedback = data.get("promptFeedback") if isinstance(data, dict) else None
        block_reason = (feedback or {}).get("blockReason") or "Unknown reason (check server logs)"
        logger.error("Gemini returned no text content: %s", data)
        raise InternalError(f"The model's response was empty or blocked. Reason: {block_reason}")

    logger.info("Gemini returned %d characters", len(text))
    return text

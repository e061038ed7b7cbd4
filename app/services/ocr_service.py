"""Send a base64 PDF to Google Vision for document OCR."""
import logging

import httpx

from app.config import settings
from app.services.upstream import post_json, require_api_key
from app.utils.exceptions import BadRequest

logger = logging.getLogger(__name__)

VISION_URL = "https://vision.googleapis.com/v1/files:annotate"


def _annotate_request(pdf_data: str) -> dict:
    return {
        "requests": [{
            "inputConfig": {"content": pdf_data, "mimeType": "application/pdf"},
            "features": [{"type": "DOCUMENT_TEXT_DETECTION"}],
        }]
    }


async def extract_pdf_text(pdf_data: str | None, client: httpx.AsyncClient | None = None) -> dict:
    """Return the Vision ``files:annotate`` response unchanged."""
    api_key = require_api_key(settings.google_api_key, "GOOGLE_API_KEY")

    if not pdf_data:
        logger.warning("Bad Request: no PDF data in request body")
        raise BadRequest("No PDF data provided.")
    logger.info("Received PDF data of length: %d characters", len(pdf_data))

    return await post_json(
        VISION_URL,
        _annotate_request(pdf_data),
        api_name="Vision API",
        params={"key": api_key},
        client=client,
    )

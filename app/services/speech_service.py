import logging

import httpx

from app.config import settings
from app.services.upstream import INTERNAL_ERROR, require_api_key, upstream_message
from app.utils.exceptions import BadRequest, InternalError, UpstreamError

logger = logging.getLogger(__name__)


async def synthesize_speech(
    text: str | None, voice: str | None, http_client: httpx.AsyncClient | None = None
) -> bytes:
    """Generate MP3 audio for ``text`` with the OpenAI TTS API."""
    from openai import APIStatusError, AsyncOpenAI, OpenAIError

    api_key = require_api_key(settings.openai_api_key, "OPENAI_API_KEY")

    if not text or not voice:
        logger.warning("Bad Request: missing text or voice parameter")
        raise BadRequest("Missing required parameters: text and voice.")
    if len(text) > settings.max_tts_chars:
        logger.warning("Bad Request: input text is too long (%d characters)", len(text))
        raise BadRequest(
            f"Input text is too long. The maximum is {settings.max_tts_chars} characters, "
            f"but this chunk has {len(text)}."
        )
    logger.info("Generating audio for text chunk (length: %d) with voice: %s", len(text), voice)

    client = AsyncOpenAI(
        api_key=api_key,
        timeout=settings.upstream_timeout_seconds,
        max_retries=0,
        http_client=http_client,
    )
    try:
        response = await client.audio.speech.create(
            model=settings.openai_tts_model,
            input=text,
            voice=voice,
            response_format="mp3",
        )
    except APIStatusError as e:
        # the SDK puts the upstream "error" object in e.body; e.message is its own summary
        message = upstream_message({"error": e.body}, "OpenAI API")
        logger.error("OpenAI TTS error response (%d): %s", e.status_code, message)
        raise UpstreamError(f"OpenAI API request failed: {message}", status_code=e.status_code) from e
    except OpenAIError as e:
        logger.exception("OpenAI TTS request failed")
        raise InternalError(INTERNAL_ERROR) from e
    finally:
        await client.close()

    audio = response.content
    logger.info("Received audio data (size: %d bytes)", len(audio))
    return audio

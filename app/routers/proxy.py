from fastapi import APIRouter, Depends
from fastapi.responses import Response

from app.dependencies import verify_bearer_token
from app.schemas.proxy import AnalyzeRequest, AnalyzeResponse, AudioRequest, ExtractRequest
from app.services.ocr_service import extract_pdf_text
from app.services.speech_service import synthesize_speech
from app.services.text_service import generate_text

router = APIRouter(tags=["proxy"], dependencies=[Depends(verify_bearer_token)])


@router.post("/generate-audio")
async def generate_audio(request: AudioRequest | None = None):
    request = request or AudioRequest()
    audio = await synthesize_speech(request.text, request.voice)
    return Response(content=audio, media_type="audio/mpeg")


@router.post("/analyze-text")
async def analyze_text(request: AnalyzeRequest | None = None):
    request = request or AnalyzeRequest()
    text = await generate_text(request.prompt)
    return AnalyzeResponse(text=text).model_dump()


@router.post("/extract-text")
async def extract_text(request: ExtractRequest | None = None):
    request = request or ExtractRequest()
    return await extract_pdf_text(request.pdf_data)

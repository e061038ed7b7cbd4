from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.dependencies import get_auth_service
from app.schemas.auth import AuthRequest, RegisterResult
from app.services.auth_service import AuthService
from app.utils.response import message_response

router = APIRouter(tags=["auth"])


@router.post("/auth")
async def authenticate(
    request: AuthRequest | None = None,
    service: AuthService = Depends(get_auth_service),
):
    request = request or AuthRequest()
    result = await service.handle(request.action, request.username, request.password)

    if isinstance(result, RegisterResult):
        return JSONResponse(
            status_code=201,
            content=message_response("User registered successfully.", **result.model_dump(by_alias=True)),
        )
    return message_response("Login successful.", **result.model_dump(by_alias=True))

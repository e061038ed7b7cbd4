import logging
from functools import lru_cache

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import settings
from app.schemas.auth import TokenClaims
from app.services.auth_service import AuthService
from app.services.kv_store import RedisRestStore
from app.services.passwords import PasswordHasher
from app.services.tokens import InvalidTokenError, TokenIssuer
from app.utils.exceptions import ConfigurationError, Unauthorized

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


def _check_auth_settings() -> None:
    missing = settings.missing_auth_settings()
    if missing:
        raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")


@lru_cache
def get_token_issuer() -> TokenIssuer:
    _check_auth_settings()
    return TokenIssuer(settings.jwt_secret, expire_minutes=settings.jwt_expire_minutes)


@lru_cache
def get_auth_service() -> AuthService:
    _check_auth_settings()
    store = RedisRestStore(
        settings.kv_rest_api_url,
        settings.kv_rest_api_token,
        timeout=settings.kv_timeout_seconds,
    )
    return AuthService(store, PasswordHasher(settings.bcrypt_rounds), get_token_issuer())


async def verify_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> TokenClaims | None:
    if not settings.require_auth:
        return None
    if credentials is None:
        raise Unauthorized("Invalid or expired token.")
    try:
        return get_token_issuer().verify(credentials.credentials)
    except InvalidTokenError as e:
        logger.info("Rejected bearer token: %s", e)
        raise Unauthorized("Invalid or expired token.") from e

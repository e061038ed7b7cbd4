"""Registration and login against the key-value store.

Each user is one ``CredentialRecord`` under ``users:<username>``. Registration
writes with SET NX so two concurrent registrations of the same name cannot both
succeed; a per-username lock additionally serializes them inside this process.
"""
import asyncio
import logging
import uuid
import weakref

from pydantic import ValidationError

from app.models.credential import CredentialRecord, user_key
from app.schemas.auth import LoginResult, RegisterResult
from app.services.kv_store import KeyValueStore
from app.services.passwords import MAX_PASSWORD_BYTES, PasswordHasher
from app.services.tokens import TokenIssuer
from app.utils.exceptions import AppException, BadRequest, Conflict, InternalError, StoreError, Unauthorized

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS = "Username and password are required."
USER_EXISTS = "User already exists."
INVALID_CREDENTIALS = "Invalid username or password."
INVALID_ACTION = 'Invalid action specified. Use "register" or "login".'
PASSWORD_TOO_LONG = f"Password must be at most {MAX_PASSWORD_BYTES} bytes."
AUTH_FAILURE = "Internal server error during authentication."


class AuthService:
    def __init__(self, store: KeyValueStore, hasher: PasswordHasher, issuer: TokenIssuer):
        self._store = store
        self._hasher = hasher
        self._issuer = issuer
        self._register_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    async def handle(
        self, action: str | None, username: str | None, password: str | None
    ) -> RegisterResult | LoginResult:
        _require_credentials(username, password)
        try:
            if action == "register":
                return await self.register(username, password)
            if action == "login":
                return await self.login(username, password)
        except StoreError as e:
            raise InternalError(AUTH_FAILURE, details=e.details or e.message) from e
        except AppException:
            raise
        except Exception as e:
            logger.exception("Unexpected failure during %s for %s", action, username)
            # exception type only; messages may echo request data
            raise InternalError(AUTH_FAILURE, details=type(e).__name__) from e
        logger.warning("Rejected auth request with action=%r", action)
        raise BadRequest(INVALID_ACTION)

    async def register(self, username: str | None, password: str | None) -> RegisterResult:
        _require_credentials(username, password)
        if len(password.encode()) > MAX_PASSWORD_BYTES:
            raise BadRequest(PASSWORD_TOO_LONG)

        key = user_key(username)
        async with self._lock_for(username):
            if await self._store.get(key) is not None:
                logger.info("Registration refused, username taken: %s", username)
                raise Conflict(USER_EXISTS)

            password_hash = await asyncio.to_thread(self._hasher.hash, password)
            record = CredentialRecord(user_id=str(uuid.uuid4()), password_hash=password_hash)

            if not await self._store.set_if_absent(key, record.encode()):
                logger.warning("Registration lost a race for username %s", username)
                raise Conflict(USER_EXISTS)

        logger.info("Registered user %s (%s)", username, record.user_id)
        return RegisterResult(user_id=record.user_id)

    async def login(self, username: str | None, password: str | None) -> LoginResult:
        _require_credentials(username, password)

        raw = await self._store.get(user_key(username))
        if raw is None:
            logger.info("Login failed for %s", username)
            raise Unauthorized(INVALID_CREDENTIALS)

        record = _decode_record(raw, username)
        if not await asyncio.to_thread(self._hasher.verify, password, record.password_hash):
            logger.info("Login failed for %s", username)
            raise Unauthorized(INVALID_CREDENTIALS)

        token = self._issuer.issue(record.user_id, username)
        logger.info("Login succeeded for %s", username)
        return LoginResult(token=token, user_id=record.user_id)

    def _lock_for(self, username: str) -> asyncio.Lock:
        lock = self._register_locks.get(username)
        if lock is None:
            lock = asyncio.Lock()
            self._register_locks[username] = lock
        return lock


def _require_credentials(username: str | None, password: str | None) -> None:
    if not username or not password:
        raise BadRequest(MISSING_CREDENTIALS)


def _decode_record(raw: str, username: str) -> CredentialRecord:
    try:
        return CredentialRecord.decode(raw)
    except ValidationError as e:
        logger.error("Stored credential record for %s is corrupt", username)
        raise InternalError(AUTH_FAILURE, details="stored credential record is malformed") from e

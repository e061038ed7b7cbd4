from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AuthRequest(BaseModel):
    action: str | None = None
    username: str | None = None
    password: str | None = None


class RegisterResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(serialization_alias="userId")


class LoginResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    user_id: str = Field(serialization_alias="userId")


class TokenClaims(BaseModel):
    user_id: str
    username: str
    issued_at: datetime
    expires_at: datetime

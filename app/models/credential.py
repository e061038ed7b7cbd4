from pydantic import BaseModel, ConfigDict, Field

USER_KEY_PREFIX = "users:"


def user_key(username: str) -> str:
    return f"{USER_KEY_PREFIX}{username}"


class CredentialRecord(BaseModel):
    """Stored value under ``users:<username>``.

    Serialized as ``{"userId": ..., "hashedPassword": ...}`` so records written
    by earlier deployments stay readable.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user_id: str = Field(alias="userId", min_length=1)
    password_hash: str = Field(alias="hashedPassword", min_length=1)

    def encode(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def decode(cls, raw: str) -> "CredentialRecord":
        return cls.model_validate_json(raw)

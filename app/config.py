from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    kv_rest_api_url: str = ""
    kv_rest_api_token: str = ""
    kv_timeout_seconds: float = 10.0
    jwt_secret: str = ""
    jwt_expire_minutes: int = 60
    bcrypt_rounds: int = 10
    require_auth: bool = False  # false = proxy endpoints open (reference behavior)

    openai_api_key: str = ""
    openai_tts_model: str = "tts-1"
    google_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash-preview-05-20"
    upstream_timeout_seconds: float = 60.0
    max_tts_chars: int = 4096

    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def missing_auth_settings(self) -> list[str]:
        """Names of the env vars the auth flow cannot run without."""
        required = {
            "KV_REST_API_URL": self.kv_rest_api_url,
            "KV_REST_API_TOKEN": self.kv_rest_api_token,
            "JWT_SECRET": self.jwt_secret,
        }
        return [name for name, value in required.items() if not value]


settings = Settings()

from app.models.credential import CredentialRecord, user_key

__all__ = ["CredentialRecord", "user_key"]

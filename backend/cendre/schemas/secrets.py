from datetime import datetime

from pydantic import BaseModel, Field, StrictInt, field_serializer

from cendre.utils.formatters import format_rfc3339

# base64url alphabet, trailing padding tolerated
BASE64URL_PATTERN = r"^[A-Za-z0-9_-]+={0,2}$"


class SecretCreateRequest(BaseModel):
    ciphertext: str = Field(..., min_length=1, pattern=BASE64URL_PATTERN)
    iv: str = Field(..., min_length=1, pattern=BASE64URL_PATTERN)
    # No coercion: true, "300" and 300.0 are rejected
    ttl_secs: StrictInt


class SecretCreateResponse(BaseModel):
    id: str
    expires_at: datetime

    @field_serializer("expires_at")
    def serialize_expires_at(self, value: datetime) -> str:
        return format_rfc3339(value)


class SecretRevealResponse(BaseModel):
    ciphertext: str
    iv: str

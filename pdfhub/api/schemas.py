import json
import uuid
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from pdfhub.exceptions import NotFoundError, ValidationError
from pdfhub.transform.base import (
    DEFAULT_IMAGE_QUALITY,
    DEFAULT_WATERMARK_ANGLE,
    DEFAULT_WATERMARK_FONT_SIZE,
)

M = TypeVar("M", bound=BaseModel)


class RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RegisterRequest(RequestModel):
    full_name: str = Field(alias="fullName", min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class LoginRequest(RequestModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UpdateProfileRequest(RequestModel):
    full_name: str = Field(alias="fullName", min_length=1)


class ChangePasswordRequest(RequestModel):
    current_password: str = Field(alias="currentPassword", min_length=1)
    new_password: str = Field(alias="newPassword", min_length=1)


class ForgotPasswordRequest(RequestModel):
    email: str = Field(min_length=1)


class ResetPasswordRequest(RequestModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=1)


class FederatedLoginRequest(RequestModel):
    token: str | None = None
    access_token: str | None = Field(default=None, alias="accessToken")

    @property
    def assertion(self) -> str:
        return self.token or self.access_token or ""


class _PagesRequest(RequestModel):
    pages: list[int] = Field(min_length=1)

    @field_validator("pages", mode="before")
    @classmethod
    def _parse_pages(cls, v: object) -> object:
        """Accepts a list, a JSON array string '[1,2]', or a comma-separated string '1,2'."""
        if isinstance(v, list) and len(v) == 1 and isinstance(v[0], str):
            v = v[0]
        if isinstance(v, str):
            text = v.strip()
            if text.startswith("["):
                try:
                    return json.loads(text)
                except json.JSONDecodeError as exc:
                    raise ValueError("pages must be a list of page numbers") from exc
            return [s.strip() for s in text.split(",") if s.strip()]
        return v


class SplitRequest(_PagesRequest):
    pass


class RotateRequest(_PagesRequest):
    angle: int


class CompressRequest(RequestModel):
    image_quality: int = Field(default=DEFAULT_IMAGE_QUALITY, alias="imageQuality", ge=1, le=100)


class WatermarkRequest(RequestModel):
    text: str = Field(min_length=1)
    font_size: float = Field(default=DEFAULT_WATERMARK_FONT_SIZE, alias="fontSize", gt=0)
    angle: float = DEFAULT_WATERMARK_ANGLE


def parse_request(model: type[M], payload: Any) -> M:
    """Validate a request payload into its typed model.

    Raises:
        ValidationError: with the first problem found, e.g. "pages: Field required".
    """
    try:
        return model.model_validate(payload or {})
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        location = ".".join(str(part) for part in error["loc"])
        message = f"{location}: {error['msg']}" if location else error["msg"]
        raise ValidationError(message) from exc


def parse_id(value: str, not_found_message: str) -> str:
    """Canonical form of a UUID path parameter; anything else is a 404."""
    try:
        return str(uuid.UUID(value))
    except ValueError as exc:
        raise NotFoundError(not_found_message) from exc

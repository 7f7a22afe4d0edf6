import enum
import logging
from typing import Callable

import pydantic
from pydantic import BaseModel, EmailStr, field_validator

from .config import EmailConfig
from .errors import (
    ExpiredError,
    MismatchError,
    NotFoundError,
    UnknownOperationError,
    ValidationError,
)
from .verify import VerificationStore, VerifyStatus

logger = logging.getLogger(__name__)

Sender = Callable[[EmailConfig, str, str, float], None]


class Operation(str, enum.Enum):
    SEND_EMAIL_VERIFICATION = "send-email-verification"
    VERIFY_EMAIL_CODE = "verify-email-code"

    @classmethod
    def parse(cls, name: str | None) -> "Operation":
        try:
            return cls(name)
        except ValueError:
            raise UnknownOperationError() from None


class VerificationPayload(BaseModel):
    email: EmailStr | None = None
    code: str | None = None

    @field_validator("email", "code", mode="before")
    @classmethod
    def _blank_is_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @classmethod
    def parse(cls, body: bytes | str) -> "VerificationPayload":
        try:
            return cls.model_validate_json(body)
        except pydantic.ValidationError:
            raise ValidationError("Invalid payload format") from None


_failures = {
    VerifyStatus.NOT_FOUND: NotFoundError,
    VerifyStatus.EXPIRED: ExpiredError,
    VerifyStatus.MISMATCH: MismatchError,
}


def send_verification(
    payload: VerificationPayload,
    store: VerificationStore,
    config: EmailConfig,
    sender: Sender,
) -> dict:
    if not payload.email:
        raise ValidationError("Missing required field: email")
    code = store.issue(payload.email, payload.code)
    sender(config, payload.email, code, store.ttl_seconds)
    return {"success": True, "message": "Verification code sent successfully"}


def verify_email_code(payload: VerificationPayload, store: VerificationStore) -> dict:
    if not payload.email or not payload.code:
        raise ValidationError("Missing required fields: email and code")
    result = store.verify(payload.email, payload.code)
    if result is not VerifyStatus.SUCCESS:
        raise _failures[result]()
    return {"success": True, "verified": True, "message": "Email verified successfully"}


def dispatch(
    operation: str | None,
    body: bytes | str,
    store: VerificationStore,
    config: EmailConfig,
    sender: Sender,
) -> dict:
    payload = VerificationPayload.parse(body)
    op = Operation.parse(operation)
    logger.info("Running operation %s", op.value)
    if op is Operation.SEND_EMAIL_VERIFICATION:
        return send_verification(payload, store, config, sender)
    if op is Operation.VERIFY_EMAIL_CODE:
        return verify_email_code(payload, store)
    raise UnknownOperationError()

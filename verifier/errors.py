from fastapi import status


class VerificationError(Exception):
    """Base error; carries the HTTP status and the message sent to the client."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    verified: bool | None = None

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_payload(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.verified is not None:
            body["verified"] = self.verified
        return body


class ConfigurationError(VerificationError):
    def __init__(self, message: str = "Missing required environment variables"):
        super().__init__(message)


class DeliveryError(VerificationError):
    pass


class ValidationError(VerificationError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnknownOperationError(ValidationError):
    def __init__(self, message: str = "Unknown operation"):
        super().__init__(message)


class VerificationFailed(ValidationError):
    verified = False


class NotFoundError(VerificationFailed):
    def __init__(self, message: str = "No verification code found for this email"):
        super().__init__(message)


class ExpiredError(VerificationFailed):
    def __init__(self, message: str = "Verification code has expired"):
        super().__init__(message)


class MismatchError(VerificationFailed):
    def __init__(self, message: str = "Invalid verification code"):
        super().__init__(message)

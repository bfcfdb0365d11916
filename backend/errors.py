from typing import Dict, Optional


class PredictionError(Exception):
    """Base error for the prediction service; carries the HTTP status and a stable JSON body."""

    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details is not None:
            return f"{self.message}: {self.details}"
        return self.message

    def to_dict(self) -> Dict[str, str]:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(PredictionError):
    status_code = 400


class MethodNotAllowed(PredictionError):
    status_code = 405

    def __init__(self):
        super().__init__("Method Not Allowed")


class ProviderError(PredictionError):
    """External inference call failed, timed out, or returned a reply that does not match the schema."""

    status_code = 500

    def __init__(self, details: str):
        super().__init__("Prediction failed.", details=details)


PredictionFailure = ProviderError

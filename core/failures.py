from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, Optional


class FailureCategory(str, enum.Enum):
    MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"


@dataclass
class Failure:
    category: FailureCategory
    reason: str
    details: Optional[Dict[str, Any]] = None

    def to_payload(self) -> Dict[str, Any]:
        payload = {"category": self.category.value, "reason": self.reason}
        if self.details:
            payload["details"] = self.details
        return payload


class ExtractionError(RuntimeError):
    """Raised inside a provider path; carries the failure it collapses to."""

    category = FailureCategory.PROVIDER_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.failure = Failure(self.category, message, details)


class MissingCredentialError(ExtractionError):
    category = FailureCategory.MISSING_CREDENTIAL


class ProviderError(ExtractionError):
    category = FailureCategory.PROVIDER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        details = {"status_code": status_code} if status_code is not None else None
        super().__init__(message, details)
        self.status_code = status_code


class MalformedResponseError(ExtractionError):
    category = FailureCategory.MALFORMED_RESPONSE

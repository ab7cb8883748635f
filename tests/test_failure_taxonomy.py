from core.failures import (
    Failure,
    FailureCategory,
    MalformedResponseError,
    MissingCredentialError,
    ProviderError,
)


def test_failure_payload_structure():
    failure = Failure(FailureCategory.PROVIDER_ERROR, "timeout", details={"status_code": 504})
    payload = failure.to_payload()
    assert payload["category"] == "PROVIDER_ERROR"
    assert payload["details"]["status_code"] == 504


def test_failure_payload_omits_empty_details():
    payload = Failure(FailureCategory.MISSING_CREDENTIAL, "no key").to_payload()
    assert "details" not in payload


def test_errors_carry_their_category():
    assert MissingCredentialError("no key").failure.category is FailureCategory.MISSING_CREDENTIAL
    assert MalformedResponseError("prose").failure.category is FailureCategory.MALFORMED_RESPONSE

    error = ProviderError("boom", status_code=500)
    assert error.status_code == 500
    assert error.failure.category is FailureCategory.PROVIDER_ERROR
    assert error.failure.details == {"status_code": 500}
    assert str(error) == "boom"

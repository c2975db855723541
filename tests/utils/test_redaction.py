"""Tests for secret redaction utility."""


class TestRedactForLogging:

    def test_redacts_request_headers(self):
        from src.utils.redaction import redact_for_logging

        headers = {"Authorization": "Bearer abc123", "Accept": "application/json"}
        result = redact_for_logging(headers)
        assert result["Authorization"] == "***REDACTED***"
        assert result["Accept"] == "application/json"

    def test_redacts_api_key_variants(self):
        from src.utils.redaction import redact_for_logging

        data = {"X-API-KEY": "k1", "api_key": "k2", "apiKey": "k3", "carrier_id": 2}
        result = redact_for_logging(data)
        assert result == {
            "X-API-KEY": "***REDACTED***",
            "api_key": "***REDACTED***",
            "apiKey": "***REDACTED***",
            "carrier_id": 2,
        }

    def test_does_not_mutate_input(self):
        from src.utils.redaction import redact_for_logging

        data = {"token": "tok"}
        redact_for_logging(data)
        assert data == {"token": "tok"}

    def test_handles_nested_dict_and_lists(self):
        from src.utils.redaction import redact_for_logging

        data = {"outer": {"secret": "s", "name": "n"}, "items": [{"password": "p"}, 3]}
        result = redact_for_logging(data)
        assert result["outer"] == {"secret": "***REDACTED***", "name": "n"}
        assert result["items"] == [{"password": "***REDACTED***"}, 3]

    def test_custom_sensitive_keys(self):
        from src.utils.redaction import redact_for_logging

        data = {"order_ids": [1, 2], "name": "test"}
        result = redact_for_logging(data, sensitive_patterns=frozenset({"order"}))
        assert result["order_ids"] == "***REDACTED***"
        assert result["name"] == "test"


class TestMaskCredential:

    def test_keeps_edges_only(self):
        from src.utils.redaction import mask_credential

        assert mask_credential("abcd1234efgh5678") == "abcd...5678"

    def test_short_key_fully_masked(self):
        from src.utils.redaction import mask_credential

        assert mask_credential("short") == "*****"

    def test_missing_key(self):
        from src.utils.redaction import mask_credential

        assert mask_credential(None) == "<none>"
        assert mask_credential("") == "<none>"


class TestCredentialFingerprint:

    def test_stable_and_short(self):
        from src.utils.redaction import credential_fingerprint

        first = credential_fingerprint("my-secret-key")
        assert first == credential_fingerprint("my-secret-key")
        assert len(first) == 16
        assert "secret" not in first

    def test_distinct_keys_differ(self):
        from src.utils.redaction import credential_fingerprint

        assert credential_fingerprint("key-a") != credential_fingerprint("key-b")


class TestSanitizeErrorMessage:

    def test_strips_bearer_tokens(self):
        from src.utils.redaction import sanitize_error_message

        result = sanitize_error_message("rejected Bearer eyJhbGciOi.payload.sig for user")
        assert "eyJhbGciOi" not in result
        assert result == "rejected Bearer ***REDACTED*** for user"

    def test_truncates_long_messages(self):
        from src.utils.redaction import sanitize_error_message

        result = sanitize_error_message("x" * 1000, max_length=20)
        assert len(result) == 20
        assert result.endswith("...")

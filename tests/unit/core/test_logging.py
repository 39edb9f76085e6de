import pytest

from config.settings.base import mask_sensitive_data

pytestmark = pytest.mark.unit


class TestSensitiveDataMasking:
    def test_password_masked(self):
        event_dict = {"event": "test", "data": "password='s3cret123'"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_token_masked(self):
        event_dict = {"event": "test", "header": "token=abc123xyz"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc123xyz" not in result["header"]
        assert "***MASKED***" in result["header"]

    def test_sensitive_keys_masked(self):
        event_dict = {"event": "user.otp_sent", "otp": "48213", "new_password": "X1y2z3w4"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["otp"] == "***MASKED***"
        assert result["new_password"] == "***MASKED***"

    def test_api_key_masked(self):
        event_dict = {"event": "email", "detail": "api-key: xkeysib-123"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "xkeysib-123" not in result["detail"]

    def test_non_sensitive_data_unchanged(self):
        event_dict = {"event": "order.created", "tracking_number": "TRK1700000000000123"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["tracking_number"] == "TRK1700000000000123"
        assert result["event"] == "order.created"

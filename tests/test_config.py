"""
Lazy Controller Connector — Settings Tests
"""

import pytest
from pydantic import ValidationError

from lazyconnect.config import Settings


class TestSettings:
    def test_defaults(self):
        cfg = Settings()
        assert cfg.reference_separator == ":"
        assert cfg.method_separator == "|"
        assert cfg.default_http_method == "GET"
        assert cfg.thread_safe is True

    def test_log_level_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(log_level="LOUD")

    def test_default_method_must_be_single_verb(self):
        with pytest.raises(ValidationError):
            Settings(default_http_method="GET|POST")

    def test_namespace_prefix_trimmed(self):
        assert Settings(namespace_prefix=" admin. ").namespace_prefix == "admin"

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("LAZYCONNECT_METHOD_SEPARATOR", ",")
        monkeypatch.setenv("LAZYCONNECT_THREAD_SAFE", "false")

        cfg = Settings()

        assert cfg.method_separator == ","
        assert cfg.thread_safe is False

import pytest

from env_aware_props import (
    KeyValueSource,
    ResolvedStore,
    get_log_level,
    get_logger,
    mask_value,
    resolve,
    set_log_level,
    set_log_mask,
)
from env_aware_props.sensitive import is_sensitive_key, is_sensitive_value


@pytest.fixture
def debug_level():
    previous = get_log_level()
    set_log_level('debug')
    yield
    set_log_level(previous)


@pytest.fixture
def unmasked():
    set_log_mask(False)
    yield
    set_log_mask(True)


class TestMaskValue:
    def test_sensitive_keys(self):
        assert mask_value("db.password", "hunter2") == "[REDACTED]"
        assert mask_value("API_KEY", "abc") == "[REDACTED]"
        assert mask_value("auth.token", "abc") == "[REDACTED]"

    def test_sensitive_values(self):
        assert mask_value("header", "Bearer abc") == "[REDACTED]"
        assert mask_value("openai", "sk-123") == "[REDACTED]"

    def test_plain_values(self):
        assert mask_value("db.host", "localhost") == "localhost"
        assert mask_value("empty", "") == ""
        assert mask_value("x", None) == "[UNDEFINED]"

    def test_mask_disabled(self, unmasked):
        assert mask_value("db.password", "hunter2") == "hunter2"


class TestLogLevel:
    def test_set_and_get(self):
        previous = get_log_level()
        set_log_level('trace')
        assert get_log_level() == 'trace'
        set_log_level('bogus')
        assert get_log_level() == 'trace'
        set_log_level(previous)

    def test_unresolved_values_logged_at_debug(self, debug_level, capsys):
        ResolvedStore([KeyValueSource.primary("p", {"a": "${missing}", "secret.key": "${nope}"})])
        out = capsys.readouterr().out
        assert "[env-aware-props]" in out
        assert "unresolved: a = ${missing}" in out
        assert "unresolved: secret.key = [REDACTED]" in out

    def test_circular_reference_logged_at_debug(self, debug_level, capsys):
        resolve("${a}", {"a": "${b}", "b": "${a}"}, max_depth=5)
        assert "Circular reference" in capsys.readouterr().out

    def test_silent_by_default_for_debug(self, capsys):
        previous = get_log_level()
        set_log_level('warn')
        resolve("${a}", {"a": "${b}", "b": "${a}"}, max_depth=5)
        set_log_level(previous)
        assert capsys.readouterr().out == ""

    def test_warnings_go_to_stderr(self, capsys):
        previous = get_log_level()
        set_log_level('warn')
        get_logger().warn("careful")
        set_log_level(previous)
        captured = capsys.readouterr()
        assert captured.err.endswith(" careful\n")
        assert captured.out == ""


class TestSensitiveDetection:
    def test_key_patterns(self):
        assert is_sensitive_key("spring.datasource.password")
        assert is_sensitive_key("oauth.client.secret")
        assert not is_sensitive_key("server.port")

    def test_value_prefixes(self):
        assert is_sensitive_value("eyJhbGciOi")
        assert not is_sensitive_value("")
        assert not is_sensitive_value("plain")

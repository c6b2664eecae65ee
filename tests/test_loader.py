"""Tests for YAML configuration loading."""

import pytest

from deep_redact import ConfigurationError, Redactor
from deep_redact.core.loader import load_config, load_from_yaml

PROFILE = """
deep_redact:
  blacklisted_keys:
    - password
    - key: pin
      types: [int]
  paths:
    - 'user.address.*'
    - path: [items, '*', secret]
      remove: true
  string_tests:
    - '\\d{16}'
    - pattern: '[\\w.]+@[\\w.]+'
      rewriter: email_local_part
"""


@pytest.fixture
def profile_path(tmp_path):
    path = tmp_path / "redact.yaml"
    path.write_text(PROFILE, encoding="utf-8")
    return path


class TestLoadFromYaml:
    """Tests for file loading and error wrapping."""

    def test_loads_profile(self, profile_path) -> None:
        config = load_from_yaml(profile_path)

        assert len(config.blacklisted_keys) == 2
        assert len(config.paths) == 2
        assert len(config.string_tests) == 2

    def test_profile_redacts(self, profile_path) -> None:
        redactor = Redactor(load_from_yaml(str(profile_path)))
        data = {
            "password": "x",
            "pin": 1234,
            "user": {"address": {"city": "Y"}},
            "items": [{"secret": "s", "id": 1}],
            "note": "card 4111111111111111",
            "contact": "mail joe@example.com",
        }

        assert redactor.redact(data) == {
            "password": "[REDACTED]",
            "pin": "[REDACTED]",
            "user": {"address": {"city": "[REDACTED]"}},
            "items": [{"id": 1}],
            "note": "[REDACTED]",
            "contact": "mail ***@example.com",
        }

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            load_from_yaml(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="empty"):
            load_from_yaml(path)

    def test_invalid_yaml(self, tmp_path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("blacklisted_keys: [password\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="parse"):
            load_from_yaml(path)

    def test_invalid_configuration(self, tmp_path) -> None:
        path = tmp_path / "invalid.yaml"
        path.write_text("types: [string]\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Invalid"):
            load_from_yaml(path)


class TestLoadConfig:
    """Tests for mapping validation."""

    def test_top_level_fields(self) -> None:
        config = load_config({"blacklisted_keys": ["a"], "remove": True})
        assert config.remove is True

    def test_nested_section(self) -> None:
        assert load_config({"deep_redact": {"remove": True}}).remove is True

    def test_empty_section(self) -> None:
        assert load_config({"deep_redact": None}).blacklisted_keys == []

    @pytest.mark.parametrize("data", [["a"], {"deep_redact": ["a"]}])
    def test_non_mapping_is_rejected(self, data) -> None:
        with pytest.raises(ConfigurationError):
            load_config(data)

"""Unit tests for settings and config file loading."""

import json

import pytest
from pydantic import ValidationError

from personnel_registry.config.settings import Settings, load_settings


class TestSettings:
    """Test cases for the Settings class."""

    def test_defaults(self):
        """Test the built-in defaults."""
        settings = Settings()

        assert settings.use_in_memory_store is True
        assert settings.default_snapshot_path == "snapshot.jsonl"
        assert settings.tax_rates == {"DAY": 0.30, "NIGHT": 0.45}
        assert settings.search_result_limit == 200

    def test_tax_rate_keys_uppercased(self):
        """Test that rate keys are normalized to upper case."""
        settings = Settings(tax_rates={"night": 0.5, "Day": 0.2})

        assert settings.tax_rates == {"NIGHT": 0.5, "DAY": 0.2}

    def test_tax_rate_out_of_range(self):
        """Test that rates above one are rejected."""
        with pytest.raises(ValidationError):
            Settings(tax_rates={"DAY": 1.5})

    def test_search_limit_must_be_positive(self):
        """Test the lower bound on the search limit."""
        with pytest.raises(ValidationError):
            Settings(search_result_limit=0)

    def test_environment_override(self, monkeypatch):
        """Test that PERSONNEL_ variables are picked up."""
        monkeypatch.setenv("PERSONNEL_SEARCH_RESULT_LIMIT", "25")
        monkeypatch.setenv("PERSONNEL_LOG_LEVEL", "debug")

        settings = Settings()

        assert settings.search_result_limit == 25
        assert settings.log_level == "DEBUG"


class TestLoadSettings:
    """Test cases for load_settings."""

    def _write(self, tmp_path, content):
        path = tmp_path / "config.json"
        path.write_text(content, encoding="utf-8")
        return path

    def test_missing_file(self, tmp_path):
        """Test that a missing file falls back to defaults."""
        result = load_settings(tmp_path / "absent.json")

        assert result.status == "missing"
        assert result.error is None
        assert result.settings.tax_rates == {"DAY": 0.30, "NIGHT": 0.45}

    def test_legacy_keys(self, tmp_path):
        """Test the PascalCase keys of older config files."""
        path = self._write(
            tmp_path,
            json.dumps(
                {
                    "UseInMemory": True,
                    "TaxRates": {"DAY": 0.25, "NIGHT": 0.5},
                    "SearchLimit": 50,
                    "SnapshotPath": "crew.jsonl",
                }
            ),
        )

        result = load_settings(path)

        assert result.status == "loaded"
        assert result.settings.tax_rates == {"DAY": 0.25, "NIGHT": 0.5}
        assert result.settings.search_result_limit == 50
        assert result.settings.default_snapshot_path == "crew.jsonl"

    def test_camel_case_and_field_names(self, tmp_path):
        """Test camelCase keys alongside plain field names."""
        path = self._write(
            tmp_path,
            json.dumps({"taxRates": {"night": 0.4}, "max_suggestions": 2}),
        )

        result = load_settings(path)

        assert result.status == "loaded"
        assert result.settings.tax_rates == {"NIGHT": 0.4}
        assert result.settings.max_suggestions == 2

    def test_unknown_keys_ignored(self, tmp_path):
        """Test that unrelated keys do not invalidate the file."""
        path = self._write(tmp_path, json.dumps({"Theme": "dark", "SearchLimit": 10}))

        result = load_settings(path)

        assert result.status == "loaded"
        assert result.settings.search_result_limit == 10

    def test_invalid_json(self, tmp_path):
        """Test that malformed JSON falls back to defaults."""
        path = self._write(tmp_path, '{"TaxRates": {"DAY": 0.3,')

        result = load_settings(path)

        assert result.status == "invalid"
        assert result.error
        assert result.settings.search_result_limit == 200

    def test_invalid_values(self, tmp_path):
        """Test that out-of-range values fall back to defaults."""
        path = self._write(tmp_path, json.dumps({"TaxRates": {"DAY": 3}}))

        result = load_settings(path)

        assert result.status == "invalid"
        assert result.settings.tax_rates == {"DAY": 0.30, "NIGHT": 0.45}

    def test_non_object_root(self, tmp_path):
        """Test that a JSON array is rejected."""
        path = self._write(tmp_path, "[1, 2, 3]")

        result = load_settings(path)

        assert result.status == "invalid"
        assert "object" in result.error

    def test_invalid_environment_with_missing_file(self, tmp_path, monkeypatch):
        """Test that bad environment values fall back to the built-in defaults."""
        monkeypatch.setenv("PERSONNEL_SEARCH_RESULT_LIMIT", "0")

        result = load_settings(tmp_path / "missing.json")

        assert result.status == "invalid"
        assert result.error
        assert result.settings.search_result_limit == 200
        assert result.settings.tax_rates == {"DAY": 0.30, "NIGHT": 0.45}

    def test_invalid_environment_with_invalid_file(self, tmp_path, monkeypatch):
        """Test that a broken file and broken environment still yield defaults."""
        monkeypatch.setenv("PERSONNEL_SEARCH_RESULT_LIMIT", "abc")
        path = self._write(tmp_path, "{not json")

        result = load_settings(path)

        assert result.status == "invalid"
        assert result.settings.search_result_limit == 200

    def test_file_values_beat_environment(self, tmp_path, monkeypatch):
        """Test that config file values take priority over the environment."""
        monkeypatch.setenv("PERSONNEL_SEARCH_RESULT_LIMIT", "25")
        path = self._write(tmp_path, json.dumps({"SearchLimit": 7}))

        assert load_settings(path).settings.search_result_limit == 7

"""
Tests for service configuration: dotted updates, environment overrides
and JSON persistence.
"""

import json

import pytest
from pydantic import ValidationError

from app.services.pharmacogenomics.config import (
    get_config,
    get_llm_config,
    get_upload_config,
    load_config_from_file,
    reset_config,
    save_config_to_file,
    update_config,
)


class TestUpdateConfig:

    def test_defaults(self):
        assert get_upload_config().max_upload_bytes == 5 * 1024 * 1024
        assert get_upload_config().allowed_suffixes == [".vcf"]
        assert get_llm_config().enabled is True
        assert get_config().dev_endpoints_enabled is False

    def test_dotted_key(self):
        update_config(**{"llm.model": "llama-test", "upload.max_upload_bytes": 1024})

        assert get_llm_config().model == "llama-test"
        assert get_upload_config().max_upload_bytes == 1024

    def test_top_level_key(self):
        update_config(dev_endpoints_enabled=True)

        assert get_config().dev_endpoints_enabled is True

    def test_invalid_value_rejected(self):
        with pytest.raises(ValidationError):
            update_config(**{"upload.max_upload_bytes": 0})

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("GROQ_MODEL", "env-model")
        monkeypatch.setenv("PHARMAGUARD_DEV_ENDPOINTS", "true")
        monkeypatch.setenv("PHARMAGUARD_LOG_LEVEL", "DEBUG")

        config = reset_config()

        assert config.llm.model == "env-model"
        assert config.dev_endpoints_enabled is True
        assert config.logging.level == "DEBUG"


class TestConfigFile:

    def test_save_and_load_round_trip(self, tmp_path):
        path = tmp_path / "pharmaguard.json"
        update_config(**{"llm.enabled": False, "upload.max_upload_bytes": 2048})

        save_config_to_file(str(path))
        reset_config()
        assert get_upload_config().max_upload_bytes == 5 * 1024 * 1024

        loaded = load_config_from_file(str(path))

        assert loaded is get_config()
        assert get_llm_config().enabled is False
        assert get_upload_config().max_upload_bytes == 2048

    def test_saved_file_is_plain_json(self, tmp_path):
        path = tmp_path / "pharmaguard.json"

        save_config_to_file(str(path))

        data = json.loads(path.read_text())
        assert set(data) == {"upload", "llm", "logging", "dev_endpoints_enabled"}

    def test_partial_file_keeps_defaults(self, tmp_path):
        path = tmp_path / "partial.json"
        path.write_text(json.dumps({"llm": {"max_tokens": 50}}))

        load_config_from_file(str(path))

        assert get_llm_config().max_tokens == 50
        assert get_llm_config().temperature == 0.1
        assert get_upload_config().allowed_suffixes == [".vcf"]

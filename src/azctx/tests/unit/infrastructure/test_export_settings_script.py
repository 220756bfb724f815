"""Unit tests for scripts/export_settings.py."""

import importlib.util
import json
from pathlib import Path

import pytest

SCRIPT_PATH = Path(__file__).parents[5] / "scripts" / "export_settings.py"


@pytest.fixture
def export_script():
    spec = importlib.util.spec_from_file_location("export_settings", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestExportSettings:
    """Tests for the settings export script."""

    def test_writes_prefixed_env_vars(self, export_script, tmp_path):
        output = export_script.export_settings(tmp_path / "env-vars.json")

        data = json.loads(output.read_text())
        settings = data["settings"]["ProfileSettings"]
        env_vars = {p["env_var"]: p for p in settings["properties"]}

        assert settings["prefix"] == "AZCTX_"
        assert env_vars["AZCTX_MAX_CONCURRENT_TENANT_LOOKUPS"]["default"] == 1
        assert env_vars["AZCTX_DEFAULT_ENVIRONMENT"]["default"] == "AzureCloud"
        assert env_vars["AZCTX_CLIENT_ID"]["required"] is False

    def test_factory_defaults_are_rendered(self, export_script):
        metadata = export_script.get_model_metadata(
            export_script.ProfileSettings
        )

        cache_path = next(
            p for p in metadata["properties"]
            if p["env_var"] == "AZCTX_TOKEN_CACHE_PATH"
        )
        assert cache_path["default"].endswith("token_cache.bin")

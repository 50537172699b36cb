"""Tests for YAML config loading, schema validation and log redaction."""

from __future__ import annotations

import logging
import os

import pytest

from mealplanner.config.expand import expand_env_vars
from mealplanner.config.loader import find_config_file, load_config
from mealplanner.config.schema import MealPlannerConfig, StatusSettings, VaultSettings
from mealplanner.credentials.kinds import CredentialKind
from mealplanner.display.logging_config import SecretRedactionFilter, setup_logging
from mealplanner.errors import ConfigurationError

# ── Schema ───────────────────────────────────────────────────────────────


class TestSchemaDefaults:
    def test_defaults(self):
        cfg = MealPlannerConfig()
        assert cfg.version == "1"
        assert cfg.vault.backend == "keyring"
        assert cfg.vault.account == "api_key"
        assert cfg.vault.path is None
        assert cfg.logging.level == "info"
        assert cfg.logging.dir == "logs"
        assert cfg.status.kinds == [CredentialKind.USDA, CredentialKind.CLAUDE]

    def test_numeric_version_accepted(self):
        assert MealPlannerConfig.model_validate({"version": 1}).version == "1"

    def test_unknown_version(self):
        with pytest.raises(ValueError, match="Unsupported config version"):
            MealPlannerConfig.model_validate({"version": "2"})


class TestVaultSettings:
    def test_path_requires_file_backend(self):
        with pytest.raises(ValueError, match="only valid with the 'file'"):
            VaultSettings(backend="keyring", path="x.enc")

    def test_file_backend_with_path(self):
        assert VaultSettings(backend="file", path="x.enc").path == "x.enc"

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            VaultSettings(backend="s3")

    def test_empty_account(self):
        with pytest.raises(ValueError):
            VaultSettings(account="")


class TestStatusSettings:
    def test_short_names_parsed(self):
        s = StatusSettings(kinds=["openai", "usda"])
        assert s.kinds == [CredentialKind.OPENAI, CredentialKind.USDA]

    def test_duplicates_dropped(self):
        s = StatusSettings(kinds=["usda", "USDA", "claude"])
        assert s.kinds == [CredentialKind.USDA, CredentialKind.CLAUDE]

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown credential kind"):
            StatusSettings(kinds=["stripe"])

    def test_empty_list(self):
        with pytest.raises(ValueError, match="At least one"):
            StatusSettings(kinds=[])


# ── Loader ───────────────────────────────────────────────────────────────


class TestFindConfigFile:
    def test_explicit_wins(self, monkeypatch):
        monkeypatch.setenv("MEALPLANNER_CONFIG", "/env.yaml")
        assert find_config_file("/explicit.yaml") == "/explicit.yaml"

    def test_env_var(self, monkeypatch):
        monkeypatch.setenv("MEALPLANNER_CONFIG", "/env.yaml")
        assert find_config_file() == "/env.yaml"

    def test_cwd(self, tmp_path, monkeypatch):
        monkeypatch.delenv("MEALPLANNER_CONFIG", raising=False)
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config.yml").write_text("version: '1'\n")
        assert find_config_file() == os.path.join(str(tmp_path), "config.yml")

    def test_nothing_found(self, tmp_path, monkeypatch):
        monkeypatch.delenv("MEALPLANNER_CONFIG", raising=False)
        monkeypatch.chdir(tmp_path)
        assert find_config_file() is None


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("MEALPLANNER_CONFIG", raising=False)
        monkeypatch.chdir(tmp_path)
        assert load_config() == MealPlannerConfig()

    def test_loads_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "version: '1'\n"
            "vault:\n  backend: file\n  path: keys.enc\n"
            "logging:\n  level: DEBUG\n"
            "status:\n  kinds: [openai]\n"
        )
        cfg = load_config(str(path))
        assert cfg.vault.backend == "file"
        assert cfg.vault.path == "keys.enc"
        assert cfg.logging.level == "debug"
        assert cfg.status.kinds == [CredentialKind.OPENAI]

    def test_env_expansion(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MP_SECRETS", "/secure/keys.enc")
        path = tmp_path / "config.yaml"
        path.write_text("vault:\n  backend: file\n  path: ${MP_SECRETS}\n")
        assert load_config(str(path)).vault.path == "/secure/keys.enc"

    def test_empty_file_is_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(str(path)) == MealPlannerConfig()

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="does not exist"):
            load_config(str(tmp_path / "nope.yaml"))

    def test_wrong_extension(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{}")
        with pytest.raises(ConfigurationError, match="Unsupported config file extension"):
            load_config(str(path))

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="YAML mapping"):
            load_config(str(path))

    def test_all_validation_errors_reported(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("vault:\n  backend: s3\nlogging:\n  level: loud\n")
        with pytest.raises(ConfigurationError, match=r"2 error\(s\)") as exc_info:
            load_config(str(path))
        assert "vault → backend" in str(exc_info.value)
        assert "logging → level" in str(exc_info.value)


class TestExpandEnvVars:
    def test_nested(self, monkeypatch):
        monkeypatch.setenv("A", "1")
        assert expand_env_vars({"x": ["${A}", {"y": "${A}-${A}"}], "n": 3}) == {
            "x": ["1", {"y": "1-1"}],
            "n": 3,
        }

    def test_unset_left_alone(self, monkeypatch):
        monkeypatch.delenv("NOT_SET_ANYWHERE", raising=False)
        assert expand_env_vars("${NOT_SET_ANYWHERE}") == "${NOT_SET_ANYWHERE}"


# ── Logging ──────────────────────────────────────────────────────────────


class TestSecretRedactionFilter:
    def _record(self, msg, args=()):
        return logging.LogRecord("t", logging.INFO, __file__, 1, msg, args, None)

    def test_redacts_message_and_args(self):
        f = SecretRedactionFilter()
        f.register("sk-secret-1")
        rec = self._record("key %s and sk-secret-1", ("sk-secret-1",))
        assert f.filter(rec)
        assert rec.getMessage() == "key ***REDACTED*** and ***REDACTED***"

    def test_short_values_ignored(self):
        f = SecretRedactionFilter()
        f.register("abc")
        assert f.redact("abc") == "abc"

    def test_longest_first(self):
        f = SecretRedactionFilter()
        f.register("abcd")
        f.register("abcdefgh")
        assert f.redact("abcdefgh") == "***REDACTED***"

    def test_clear(self):
        f = SecretRedactionFilter()
        f.register("sk-secret-1")
        f.clear()
        assert f.redact("sk-secret-1") == "sk-secret-1"


class TestSetupLogging:
    def test_creates_log_file(self, tmp_path):
        log_dir = tmp_path / "logs"
        path, level = setup_logging("debug", log_dir=str(log_dir))
        assert level == "DEBUG"
        assert os.path.dirname(path) == str(log_dir)
        logging.getLogger("mealplanner.test").debug("hello")
        for handler in logging.getLogger("mealplanner").handlers:
            handler.flush()
        assert "hello" in open(path, encoding="utf-8").read()

    def test_writes_nothing_to_stdout(self, tmp_path, capsys):
        setup_logging("info", log_dir=str(tmp_path))
        assert capsys.readouterr().out == ""

    def test_invalid_level_falls_back(self, tmp_path):
        _, level = setup_logging("chatty", log_dir=str(tmp_path))
        assert level == "INFO"

    def test_stored_key_never_logged(self, tmp_path, store):
        path, _ = setup_logging("debug", log_dir=str(tmp_path))
        store.store(CredentialKind.CLAUDE, "sk-ant-topsecret")
        logging.getLogger("mealplanner.test").info("leak attempt: %s", "sk-ant-topsecret")
        for handler in logging.getLogger("mealplanner").handlers:
            handler.flush()
        content = open(path, encoding="utf-8").read()
        assert "sk-ant-topsecret" not in content
        assert "***REDACTED***" in content

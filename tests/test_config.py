import json
import pathlib
import pytest

from cookiesmanager.config import Config, Settings, load_rule_set
from cookiesmanager.exceptions import InvalidModeError
from cookiesmanager.rules import CookieRule, MergeMode, TokenRule


def test_load_rule_set(tmp_path: pathlib.Path) -> None:
    rules_file = tmp_path / "rules.json"
    rules_file.write_text(json.dumps({"adder": [{"name": "a", "value": "1", "secure": True}]}))

    rules = load_rule_set(rules_file)
    assert rules.adders == (CookieRule(name="a", value="1", secure=True),)
    assert load_rule_set(rules_file, mode="token").adders == (TokenRule(name="a", value="1"),)


def test_load_rule_set_missing_file(tmp_path: pathlib.Path) -> None:
    with pytest.raises(FileNotFoundError, match="Cookie rules file does not exist"):
        load_rule_set(tmp_path / "missing.json")


def test_settings_from_environ(tmp_path: pathlib.Path) -> None:
    rules_file = tmp_path / "rules.json"
    rules_file.write_text(json.dumps({"remover": [{"name": "a", "value": "x"}]}))
    config = Config(environ={"COOKIES_MANAGER_RULES_FILE": str(rules_file), "COOKIES_MANAGER_MODE": "token"})

    settings = Settings.from_config(config)
    assert settings == Settings(rules_file=rules_file, mode=MergeMode.TOKEN)
    assert settings.load_rules().removers == (TokenRule(name="a", value="x"),)


def test_settings_from_env_file(tmp_path: pathlib.Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("COOKIES_MANAGER_RULES_FILE=/etc/rules.json\nCOOKIES_MANAGER_NAME=edge\n")
    config = Config(env_files=[env_file, tmp_path / "missing.env"], environ={"HOME": "/"})

    settings = Settings.from_config(config)
    assert settings.rules_file == pathlib.Path("/etc/rules.json")
    assert settings.mode is None
    assert settings.name == "edge"


def test_settings_invalid_mode() -> None:
    config = Config(environ={"COOKIES_MANAGER_RULES_FILE": "rules.json", "COOKIES_MANAGER_MODE": "replace"})
    with pytest.raises(ValueError):
        Settings.from_config(config)


def test_invalid_mode_error_type() -> None:
    with pytest.raises(InvalidModeError):
        MergeMode.parse("replace")

import dataclasses
import json
import os
import pathlib
import typing

from starlette.config import Config as BaseConfig
from starlette.config import Environ

from cookiesmanager.rules import MergeMode, RuleSet, rule_set_from_dict

__all__ = ["Config", "Settings", "load_rule_set"]

ENV_PREFIX = "COOKIES_MANAGER_"


class Config(BaseConfig):
    def __init__(
        self,
        env_files: list[str | pathlib.Path] | None = None,
        env_prefix: str = ENV_PREFIX,
        environ: typing.Mapping[str, str] | None = None,
    ):
        env_files = env_files or []
        super().__init__(None, environ or Environ(), env_prefix)
        for env_file in env_files:
            if os.path.exists(env_file) and os.path.isfile(env_file):
                self.file_values.update(BaseConfig(env_file).file_values)


def load_rule_set(path: str | os.PathLike[str], mode: str | MergeMode | None = None) -> RuleSet:
    """Read a JSON rules document from a file."""
    file_name = pathlib.Path(path)
    if not file_name.exists():
        raise FileNotFoundError(f"Cookie rules file does not exist: {file_name}.")
    return rule_set_from_dict(json.loads(file_name.read_text()), mode=mode)


@dataclasses.dataclass(frozen=True)
class Settings:
    rules_file: pathlib.Path
    mode: MergeMode | None = None
    name: str = "cookiesmanager"

    @classmethod
    def from_config(cls, config: Config) -> "Settings":
        mode = config("MODE", cast=MergeMode.parse, default=None)
        return cls(
            rules_file=config("RULES_FILE", cast=pathlib.Path),
            mode=mode,
            name=config("NAME", default="cookiesmanager"),
        )

    def load_rules(self) -> RuleSet:
        return load_rule_set(self.rules_file, mode=self.mode)

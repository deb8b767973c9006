import os
from dataclasses import dataclass
from typing import Tuple

import msgspec

DEFAULT_PERMISSIONS = "rwX"


@dataclass
class ConfigFile:
    """The keys a single config.toml sets. Keys left out of the file stay None."""

    default_permissions: str | None = None
    allowed_roots: Tuple[str, ...] | None = None

    @classmethod
    def from_file(cls, path: os.PathLike | str) -> "ConfigFile":
        with open(path) as f:
            return cls.from_toml(f.read())

    @classmethod
    def from_toml(cls, toml: str) -> "ConfigFile":
        return msgspec.toml.decode(toml, type=cls)


@dataclass
class Config:
    default_permissions: str = DEFAULT_PERMISSIONS
    allowed_roots: Tuple[str, ...] = ()

    @classmethod
    def from_file(cls, path: os.PathLike | str) -> "Config":
        return cls.from_config_file(ConfigFile.from_file(path))

    @classmethod
    def from_toml(cls, toml: str) -> "Config":
        return cls.from_config_file(ConfigFile.from_toml(toml))

    @classmethod
    def from_config_file(cls, config_file: ConfigFile) -> "Config":
        config = cls()
        if config_file.default_permissions is not None:
            config.default_permissions = config_file.default_permissions
        if config_file.allowed_roots is not None:
            config.allowed_roots = config_file.allowed_roots
        return config

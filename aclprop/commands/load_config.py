import os
from itertools import chain
from pathlib import Path
from typing import Iterable, TypeVar

import msgspec
from platformdirs import PlatformDirs

from aclprop.acl.entry import PERMISSION_PATTERN
from aclprop.config import Config, ConfigFile
from aclprop.errors import InputError, NotFoundError

T = TypeVar("T")


def get_config_paths() -> list[Path]:
    dirs = PlatformDirs("aclprop", multipath=True)
    search_paths: Iterable[Path] = chain(
        reversed([Path(p) for p in dirs.site_config_dir.split(os.pathsep)]),
        reversed([Path(p) for p in dirs.user_config_dir.split(os.pathsep)]),
    )
    return [Path(path) / "config.toml" for path in search_paths]


def load_config(path: Path | None = None) -> Config:
    config_file: ConfigFile | None
    if path is not None:
        config_file = _try_load_config(path)
        if config_file is None:
            raise NotFoundError(f"ERROR: The config file '{path}' wasn't found!")
    else:
        config_file = None
        for config_path in get_config_paths():
            config_file = _merge(config_file, _try_load_config(config_path))
    return _validate(Config.from_config_file(config_file or ConfigFile()))


def _try_load_config(path: Path) -> ConfigFile | None:
    try:
        return ConfigFile.from_file(path)
    except FileNotFoundError:
        return None
    except OSError as e:
        raise InputError(f"ERROR: The config file '{path}' couldn't be read: {e.strerror}") from None
    except msgspec.DecodeError as e:
        raise InputError(f"ERROR: Invalid config file '{path}': {e}") from None


def _merge(base_config: ConfigFile | None, override_config: ConfigFile | None) -> ConfigFile | None:
    if base_config and override_config:
        return ConfigFile(
            default_permissions=_pick(override_config.default_permissions, base_config.default_permissions),
            allowed_roots=_pick(override_config.allowed_roots, base_config.allowed_roots),
        )
    return override_config or base_config


def _pick(override: T | None, base: T | None) -> T | None:
    return base if override is None else override


def _validate(config: Config) -> Config:
    if not PERMISSION_PATTERN.match(config.default_permissions):
        raise InputError(f"ERROR: Invalid default_permissions in config: {config.default_permissions}")
    return config

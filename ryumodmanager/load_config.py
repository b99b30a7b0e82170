from __future__ import annotations

import configparser
import io
from pathlib import Path
from typing import Any, Dict

from .constants import CURRENT_INI_VERSION

VERSION_SECTION = "Parless"
VERSION_KEY = "IniVersion"

# Versions at or below this value get RebuildMLO forced on when migrated.
FORCE_REBUILD_MLO_MAX_VERSION = 3

DEFAULT_SETTINGS: Dict[str, Dict[str, int]] = {
    "Parless": {
        "IniVersion": CURRENT_INI_VERSION,
        "ParlessEnabled": 1,
    },
    "Overrides": {
        "LooseFilesEnabled": 0,
        "RebuildMLO": 1,
    },
    "RyuModManager": {
        "Verbose": 0,
        "CheckForUpdates": 1,
        "ShowWarnings": 1,
        "LoadExternalModsOnly": 1,
    },
}

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off", ""}


class ConfigError(ValueError):
    """Raised when the config file exists but cannot be parsed."""


def _new_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(
        comment_prefixes=(";", "#"),
        interpolation=None,
        strict=False,
    )
    # Keys are written back with the casing the game loader expects.
    parser.optionxform = str
    return parser


def _to_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        try:
            return int(lowered) != 0
        except ValueError:
            return None
    return None


def _to_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _to_ini_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(int(value))
    return str(value)


class VersionedConfig:
    """Section/key-value INI settings file carrying an integer schema version.

    Every mutation is written back to disk before returning, so later reads in
    the same run always observe the latest state. Writes replace the whole
    file, so comments from a hand-edited file are not kept.
    """

    def __init__(self, path: Path, parser: configparser.ConfigParser | None = None) -> None:
        self.path = path
        self.parser = parser if parser is not None else _new_parser()
        self.created = False
        self.migrated_from: int | None = None

    @classmethod
    def load(cls, path: Path) -> "VersionedConfig":
        """Load the config at ``path``, creating or upgrading it when needed.

        A missing file is created from the defaults. A file without a version, or
        with a version older than ``CURRENT_INI_VERSION``, gets the missing
        sections and keys added and is rewritten at the current version. Versions
        up to ``FORCE_REBUILD_MLO_MAX_VERSION`` (or no version at all) also get
        ``Overrides.RebuildMLO`` forced on.
        """

        if not path.exists():
            config = cls(path)
            config._fill_defaults()
            config.created = True
            config.save()
            return config

        parser = _new_parser()
        try:
            parser.read_string(path.read_text(encoding="utf-8"), source=str(path))
        except configparser.Error as exc:
            raise ConfigError(f"Invalid config file: {path}") from exc

        config = cls(path, parser)
        version = config.version
        if version is None or version < CURRENT_INI_VERSION:
            config._upgrade(version)
        return config

    @property
    def version(self) -> int | None:
        return _to_int(self.get(VERSION_SECTION, VERSION_KEY))

    def _put(self, section: str, key: str, value: Any) -> None:
        if not self.parser.has_section(section):
            self.parser.add_section(section)
        self.parser.set(section, key, _to_ini_value(value))

    def _fill_defaults(self) -> None:
        for section, defaults in DEFAULT_SETTINGS.items():
            for key, value in defaults.items():
                if not self.has_key(section, key):
                    self._put(section, key, value)

    def _upgrade(self, old_version: int | None) -> None:
        self.migrated_from = old_version if old_version is not None else 0
        if old_version is None or old_version <= FORCE_REBUILD_MLO_MAX_VERSION:
            self._put("Overrides", "RebuildMLO", 1)

        self._fill_defaults()
        self._put(VERSION_SECTION, VERSION_KEY, CURRENT_INI_VERSION)
        self.save()

    @property
    def was_upgraded(self) -> bool:
        return self.migrated_from is not None

    def has_key(self, section: str, key: str) -> bool:
        return self.parser.has_section(section) and self.parser.has_option(section, key)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        if not self.has_key(section, key):
            return default
        return self.parser.get(section, key)

    def get_bool(self, section: str, key: str, default: bool = False) -> bool:
        value = _to_bool(self.get(section, key))
        return default if value is None else value

    def get_int(self, section: str, key: str, default: int = 0) -> int:
        value = _to_int(self.get(section, key))
        return default if value is None else value

    def set(self, section: str, key: str, value: Any) -> None:
        self._put(section, key, value)
        self.save()

    def save(self) -> None:
        buffer = io.StringIO()
        self.parser.write(buffer, space_around_delimiters=False)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(buffer.getvalue(), encoding="utf-8")

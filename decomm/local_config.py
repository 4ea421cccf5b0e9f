"""Local JSON settings file that persists values between runs."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Optional

from .helpers import (
    ERROR_CONSOLE_TEXT,
    INFO_CONSOLE_TEXT,
    LOG_CONSOLE_BOLD_TEXT,
    LOG_CONSOLE_TEXT,
    NORMAL_CONSOLE_TEXT,
    SUCCESS_CONSOLE_TEXT,
    remove_comments,
)

_MISSING_NUMBER = 0xFFFFFFFF


def _dump(data: Any) -> str:
    return json.dumps(data, separators=(",", ":"), sort_keys=True, ensure_ascii=False)


class LocalConfigFile:
    """A JSON object stored in a file, created empty when missing."""

    def __init__(self) -> None:
        self._path: Optional[Path] = None
        self._config: dict[str, Any] = {}

    @property
    def config_json(self) -> dict[str, Any]:
        """The parsed configuration object."""
        return self._config

    def init_config_file(self, file_url: str | Path) -> bool:
        """Load the file, creating it when missing. Return False if it did not parse."""
        self._config = {}
        self._path = Path(file_url)
        contents = self._read_file(self._path)
        return self._parse_data(contents)

    def apply(self) -> None:
        """Write the current configuration to the file."""
        self._write_file(self._require_path())

    def clear_file(self) -> None:
        """Empty the configuration and write it to the file."""
        self._config = {}
        self._write_file(self._require_path())

    def _require_path(self) -> Path:
        if self._path is None:
            raise RuntimeError("config file has not been initialised")
        return self._path

    def _write_file(self, path: Path) -> None:
        print(
            f"{LOG_CONSOLE_BOLD_TEXT}Write internal config file: {SUCCESS_CONSOLE_TEXT}"
            f"{path}{NORMAL_CONSOLE_TEXT} ....",
            end="",
        )
        try:
            path.write_text(_dump(self._config), encoding="utf-8")
        except OSError:
            print(f"{ERROR_CONSOLE_TEXT} FAILED {NORMAL_CONSOLE_TEXT}")
            raise
        print(f"{SUCCESS_CONSOLE_TEXT} succeeded {NORMAL_CONSOLE_TEXT}")

    def _read_file(self, path: Path) -> str:
        print(
            f"{LOG_CONSOLE_TEXT}Read internal config file: {SUCCESS_CONSOLE_TEXT}"
            f"{path}{NORMAL_CONSOLE_TEXT} ....",
            end="",
        )
        try:
            contents = path.read_text(encoding="utf-8")
        except OSError:
            print(f"{INFO_CONSOLE_TEXT} trying to create one {NORMAL_CONSOLE_TEXT}")
            self._write_file(path)
            return _dump(self._config)
        print(f"{SUCCESS_CONSOLE_TEXT} succeeded {NORMAL_CONSOLE_TEXT}")
        return contents

    def _parse_data(self, text: str) -> bool:
        try:
            self._config = json.loads(remove_comments(text))
        except ValueError as error:
            print(error, file=sys.stderr)
            return False
        return True

    def get_string_field(self, field: str) -> str:
        """Return a string field, or an empty string when it is absent."""
        if field not in self._config:
            return ""
        value = self._config[field]
        if not isinstance(value, str):
            raise TypeError(f"field {field!r} is not a string")
        return value

    def add_string_field(self, field: str, value: str) -> None:
        """Set a string field."""
        self._config[field] = str(value)

    def get_numeric_field(self, field: str) -> int:
        """Return a field as an unsigned 32-bit number, or 0xFFFFFFFF when absent."""
        if field not in self._config:
            return _MISSING_NUMBER
        value = self._config[field]
        if not isinstance(value, (int, float)):
            raise TypeError(f"field {field!r} is not a number")
        return int(value) & 0xFFFFFFFF

    def add_numeric_field(self, field: str, value: int) -> None:
        """Set an unsigned 32-bit numeric field."""
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValueError("value does not fit in an unsigned 32-bit number")
        self._config[field] = int(value)
"""Time, string, JSON and file utilities shared across the package."""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping

ERROR_CONSOLE_BOLD_TEXT = "\033[1;31m"
ERROR_CONSOLE_TEXT = "\033[0;31m"
SUCCESS_CONSOLE_BOLD_TEXT = "\033[1;32m"
SUCCESS_CONSOLE_TEXT = "\033[0;32m"
INFO_CONSOLE_TEXT = "\033[0;33m"
LOG_CONSOLE_TEXT = "\033[0;34m"
LOG_CONSOLE_BOLD_TEXT = "\033[1;34m"
TEXT_BOLD_HIGHLIGHTED = "\033[1;37m"
BOLD_CONSOLE_TEXT = "\033[1m"
NORMAL_CONSOLE_TEXT = "\033[0m"

SEC_M500 = 500_000
SEC_1 = 1_000_000
SEC_2 = 2_000_000
SEC_3 = 3_000_000
SEC_4 = 4_000_000
SEC_5 = 5_000_000
SEC_6 = 6_000_000
SEC_7 = 7_000_000
SEC_8 = 8_000_000
SEC_9 = 9_000_000
SEC_10 = 10_000_000
SEC_15 = 15_000_000
SEC_20 = 20_000_000
SEC_30 = 30_000_000

_U64_MASK = 0xFFFF_FFFF_FFFF_FFFF
_U32_MASK = 0xFFFF_FFFF
_ULONG_MAX = _U64_MASK

_HEX_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?)(0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]+)")
_COMMENT_RE = re.compile(r"//[^\n]*\n?|/\*.*?(?:\*/|\Z)", re.DOTALL)
_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


def get_time_string() -> str:
    """Return the local time formatted as ``YYYY_MM_DD_HH_MM_SS``."""
    return time.strftime("%Y_%m_%d_%H_%M_%S", time.localtime())


def get_time_usec() -> int:
    """Return the wall-clock time in microseconds since the epoch."""
    return time.time_ns() // 1000


@dataclass
class TimeBox:
    """A stored timestamp in microseconds, compared against the current time."""

    value: int = 0

    def _elapsed(self, now: int) -> int:
        return (now - self.value) & _U64_MASK

    def register(self) -> None:
        """Store the current time."""
        self.value = get_time_usec()

    def passed(self, diff_usec: int) -> bool:
        """True if at least ``diff_usec`` microseconds elapsed since the stored time."""
        return self._elapsed(get_time_usec()) >= diff_usec

    def less(self, diff_usec: int) -> bool:
        """True if at most ``diff_usec`` microseconds elapsed since the stored time."""
        return self._elapsed(get_time_usec()) <= diff_usec

    def passed_register(self, diff_usec: int) -> bool:
        """Like :meth:`passed`, and store the current time when it returns True."""
        now = get_time_usec()
        has_passed = self._elapsed(now) >= diff_usec
        if has_passed:
            self.value = now
        return has_passed


def wait_time_nsec(seconds: int, nano_seconds: int) -> None:
    """Sleep for the given seconds plus nanoseconds."""
    if seconds < 0 or not 0 <= nano_seconds <= 999_999_999:
        raise ValueError("invalid sleep interval")
    time.sleep(seconds + nano_seconds / 1e9)


def hex_string_to_uint32(hex_str: str) -> int:
    """Parse a hexadecimal string into an unsigned 32-bit value."""
    match = _HEX_RE.match(hex_str)
    if match is None:
        if hex_str == "":
            return 0
        raise ValueError(f"Invalid hexadecimal string: {hex_str}")
    if match.end() != len(hex_str):
        raise ValueError(f"Invalid hexadecimal string: {hex_str}")
    sign, _, digits = match.groups()
    value = int(digits, 16)
    if value > _ULONG_MAX:
        value = _ULONG_MAX
    elif sign == "-":
        value = (-value) & _U64_MASK
    return value & _U32_MASK


def str_tolower(text: str) -> str:
    """Lower-case ASCII letters only, leaving every other character as it is."""
    return text.translate(_ASCII_LOWER)


def split_string_by_delimiter(text: str, delimiter: str) -> list[str]:
    """Split on a delimiter; a trailing delimiter yields no empty last item."""
    parts = text.split(delimiter)
    if parts[-1] == "":
        parts.pop()
    return parts


def split_string_by_newline(text: str) -> list[str]:
    """Split text into lines."""
    return split_string_by_delimiter(text, "\n")


def remove_comments(text: str) -> str:
    """Strip ``//`` line comments (with their newline) and ``/* */`` block comments."""
    return _COMMENT_RE.sub("", text)


def validate_field(message: Any, field_name: str, field_type: type | tuple[type, ...]) -> bool:
    """True if ``message`` is a mapping holding ``field_name`` of ``field_type``.

    Booleans never count as integers or floats unless ``bool`` is asked for.
    """
    if not isinstance(message, Mapping) or field_name not in message:
        return False
    value = message[field_name]
    types = field_type if isinstance(field_type, tuple) else (field_type,)
    if isinstance(value, bool):
        return bool in types
    if value is None:
        return type(None) in types
    return isinstance(value, types)


def get_linux_machine_id(path: str | Path = "/etc/machine-id") -> str:
    """Return the first line of the machine id file without its last character."""
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            line = handle.readline(255)
    except OSError:
        return ""
    return line[:-1] if line else ""


def convert_mac_address_to_string(mac: Iterable[int]) -> str:
    """Format MAC address bytes as colon-separated lower-case hex."""
    return ":".join(f"{octet & _U32_MASK:02x}" for octet in mac)


def save_binary_to_file(data: bytes, file_path: str | Path) -> None:
    """Write ``data`` to ``file_path``, replacing any existing content."""
    try:
        Path(file_path).write_bytes(data)
    except OSError:
        print(f"Failed to open the file: {file_path}")
        raise
    print(f"Binary content saved to file: {file_path}")
"""Raspberry Pi board detection and CPU status readings."""

from __future__ import annotations

import re
import subprocess
from pathlib import Path
from typing import Optional

NOT_RPI = -1
NO_SERIAL = "NORPI"

_CPUINFO_PATH = "/proc/cpuinfo"
_MODEL_PATH = "/sys/firmware/devicetree/base/model"
_TEMPERATURE_PATH = "/sys/class/thermal/thermal_zone0/temp"
_MAX_LINE = 49

# Revision code -> internal CPU code.
_REVISIONS = {
    "2": 1, "3": 1, "4": 1, "5": 1, "6": 1, "7": 1, "8": 1, "9": 1,
    "10": 1, "11": 1, "12": 1, "13": 1, "14": 1, "15": 1,
    "a01040": 2, "a01041": 2, "a21041": 2, "a22042": 2,
    "900092": 0, "900093": 0, "920093": 0, "9000c1": 0,
    "a02082": 3, "a020a0": 3, "a22082": 3, "a32082": 3,
    "a020d3": 3, "9020e0": 3, "a02100": 3,
    "a03111": 4, "b03111": 4, "b03112": 4, "b03114": 4,
    "c03111": 4, "c03112": 4, "c03114": 4, "d03114": 4,
    "a03140": 4, "b03140": 4, "c03140": 4, "d03140": 4,
    "902120": 2,
}

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_LEADING_HEX = re.compile(r"\s*([+-]?)(?:0[xX])?([0-9a-fA-F]+)")


def model_from_revision(revision: str) -> int:
    """Map a ``/proc/cpuinfo`` revision code to the internal model, -1 if unknown."""
    return _REVISIONS.get(revision, NOT_RPI)


def model_from_device_tree(text: str) -> int:
    """Derive the internal model from a device-tree model string, -1 if unknown."""
    if text[:28] == "Raspberry Pi Compute Module ":
        return 4
    if text[:19] == "Raspberry Pi Zero 2":
        return 2
    match = _LEADING_INT.match(text[12:])
    if match is None:
        return NOT_RPI
    version = int(match.group(1))
    if version > 3:
        return 4
    if version > 2:
        return 2
    if version == 0:
        return 1
    return version


def _revision_from_cpuinfo(contents: str) -> Optional[str]:
    for line in contents.splitlines():
        if "Revision" in line:
            _, space, rest = line.partition(" ")
            if not space:
                return None
            return rest.strip("\r\n") or None
    return None


class RpiUtil:
    """Board model detection and CPU readings for a Raspberry Pi."""

    def __init__(
        self,
        cpuinfo_path: str | Path = _CPUINFO_PATH,
        model_path: str | Path = _MODEL_PATH,
        temperature_path: str | Path = _TEMPERATURE_PATH,
    ) -> None:
        self._cpuinfo_path = Path(cpuinfo_path)
        self._model_path = Path(model_path)
        self._temperature_path = Path(temperature_path)
        self._rpi_version = self._detect_by_revision()
        if self._rpi_version == NOT_RPI:
            self._rpi_version = self._detect_by_device_tree()

    def _detect_by_revision(self) -> int:
        try:
            contents = self._cpuinfo_path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            print(f"Can't open '{self._cpuinfo_path}'")
            return NOT_RPI
        revision = _revision_from_cpuinfo(contents)
        if revision is None or revision not in _REVISIONS:
            return NOT_RPI
        model = _REVISIONS[revision]
        print(f"Revision {revision} (intern: {model})")
        return model

    def _detect_by_device_tree(self) -> int:
        try:
            raw = self._model_path.read_bytes()
        except OSError:
            return NOT_RPI
        text = raw.decode("utf-8", errors="replace").split("\0", 1)[0]
        first_line = text.split("\n", 1)[0][:_MAX_LINE]
        if not first_line:
            return NOT_RPI
        model = model_from_device_tree(first_line)
        if model != NOT_RPI:
            print(f"{first_line}. (intern: {model})")
        return model

    @property
    def rpi_model(self) -> int:
        """Internal model number, -1 when the board is not a Raspberry Pi."""
        return self._rpi_version

    def get_cpu_serial(self) -> Optional[str]:
        """Return the CPU serial, ``NORPI`` if none is listed, None if unreadable."""
        try:
            contents = self._cpuinfo_path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return None
        serial = NO_SERIAL
        for line in contents.splitlines():
            if line.startswith("Serial") and ":" in line:
                serial = line[line.index(":") + 2:][:16]
        return serial

    def get_cpu_temperature(self) -> Optional[int]:
        """Return the CPU temperature in millidegrees, or None if unavailable."""
        try:
            with open(self._temperature_path, encoding="utf-8", errors="replace") as handle:
                line = handle.readline(9)
        except OSError:
            return None
        if not line:
            return None
        match = _LEADING_INT.match(line)
        if match is None:
            raise ValueError(f"invalid temperature reading: {line!r}")
        return int(match.group(1))

    def get_throttled(self) -> Optional[int]:
        """Return the throttled bit pattern reported by ``vcgencmd``, or None."""
        try:
            result = subprocess.run(
                ["vcgencmd", "get_throttled"],
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError:
            return None
        lines = result.stdout.splitlines()
        if not lines:
            return None
        last = lines[-1]
        value = last[last.find("=") + 1:]
        match = _LEADING_HEX.match(value)
        if match is None:
            raise ValueError(f"invalid throttled reading: {last!r}")
        sign, digits = match.groups()
        number = int(digits, 16)
        return -number if sign == "-" else number
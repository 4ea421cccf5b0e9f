"""Shared types for GPIO-driven notification devices."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Any, Iterable, Optional

LED_STATUS_OFF = 0
LED_STATUS_ON = 1
LED_STATUS_FLASHING = 2

GPIO_OFF = 0
GPIO_ON = 1


@dataclass
class PortStatus:
    """A named GPIO pin and its last known state."""

    name: str
    gpio_pin: int
    status: int = LED_STATUS_OFF


class ModuleErrorCode(IntEnum):
    """State of a notification device."""

    ERR_UNINITIALIZED = -1
    ERR_NON = 0
    ERR_NO_HW_AVAILABLE = 1
    ERR_INIT_FAILED = 2
    ERR_UNKNOWN = 999


@dataclass
class NotificationStatus:
    """Unit state read by notification devices and flags they report back."""

    is_online: bool = False
    is_fcb_module_connected: bool = False
    exit_me: bool = False
    is_light_connected: bool = False
    is_buzzer_connected: bool = False


class Notification(ABC):
    """Base for devices that drive a set of GPIO pins."""

    def __init__(self, gpio: Optional[Any] = None, status: Optional[NotificationStatus] = None) -> None:
        if gpio is None:
            from .rpi_gpio import RpiGpio

            gpio = RpiGpio()
        self._gpio = gpio
        self._status = status if status is not None else NotificationStatus()
        self._error = ModuleErrorCode.ERR_UNINITIALIZED
        self._port_pins: list[PortStatus] = []

    def _take_pins(self, pins: Iterable[PortStatus]) -> None:
        self._port_pins = [replace(pin) for pin in pins]

    @property
    def ports(self) -> list[PortStatus]:
        """A copy of the configured pins."""
        return [replace(pin) for pin in self._port_pins]

    @property
    def error(self) -> ModuleErrorCode:
        """The device state."""
        return self._error

    @abstractmethod
    def init(self, pins: list[PortStatus]) -> bool:
        """Configure the pins; return False when the device cannot be used."""

    @abstractmethod
    def update(self) -> None:
        """Advance the device by one scheduler tick."""

    def uninit(self) -> None:
        """Release the device."""
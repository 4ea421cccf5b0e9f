"""Status and user LEDs on GPIO pins."""

from __future__ import annotations

from typing import Any, Optional

from .helpers import (
    ERROR_CONSOLE_BOLD_TEXT,
    INFO_CONSOLE_TEXT,
    LOG_CONSOLE_TEXT,
    NORMAL_CONSOLE_TEXT,
    SUCCESS_CONSOLE_TEXT,
)
from .notification import (
    GPIO_OFF,
    GPIO_ON,
    LED_STATUS_FLASHING,
    LED_STATUS_OFF,
    LED_STATUS_ON,
    ModuleErrorCode,
    Notification,
    NotificationStatus,
    PortStatus,
)
from .rpi_gpio import PinMode


class Leds(Notification):
    """LED driver; the first pin is the status LED updated by the scheduler."""

    def __init__(self, gpio: Optional[Any] = None, status: Optional[NotificationStatus] = None) -> None:
        super().__init__(gpio, status)
        self._counter = 0

    def init(self, led_pins: list[PortStatus]) -> bool:
        """Configure the LED pins as outputs, all off."""
        if not led_pins:
            print(f"{LOG_CONSOLE_TEXT}LEDs {INFO_CONSOLE_TEXT}Disabled{NORMAL_CONSOLE_TEXT}")
            self._error = ModuleErrorCode.ERR_NO_HW_AVAILABLE
            return False
        self._take_pins(led_pins)
        if not self._gpio.init():
            print(f"{ERROR_CONSOLE_BOLD_TEXT}Error: Could not initialize LED GPIO pins.{NORMAL_CONSOLE_TEXT}")
            self._error = ModuleErrorCode.ERR_INIT_FAILED
            return False
        self._error = ModuleErrorCode.ERR_NON
        for port in self._port_pins:
            print(f"{SUCCESS_CONSOLE_TEXT}Initalize LED at GPIO {INFO_CONSOLE_TEXT}{port.gpio_pin}{NORMAL_CONSOLE_TEXT}")
            self._gpio.pin_mode(port.gpio_pin, PinMode.OUTPUT)
            self._gpio.write(port.gpio_pin, GPIO_OFF)
            port.status = LED_STATUS_OFF
        self._status.is_light_connected = True
        return True

    def uninit(self) -> None:
        """Turn every LED off and mark the driver uninitialised."""
        if self._error != ModuleErrorCode.ERR_NON:
            return
        for port in self._port_pins:
            print(f"{SUCCESS_CONSOLE_TEXT}reset LED at GPIO {port.gpio_pin}{NORMAL_CONSOLE_TEXT}")
            self._gpio.write(port.gpio_pin, GPIO_OFF)
            port.status = LED_STATUS_OFF
        self._error = ModuleErrorCode.ERR_UNINITIALIZED

    def switch_led(self, led_index: int, on_off: bool) -> None:
        """Turn an LED on or off; unknown indices are ignored."""
        if self._error != ModuleErrorCode.ERR_NON:
            return
        if not 0 <= led_index < len(self._port_pins):
            return
        port = self._port_pins[led_index]
        self._gpio.write(port.gpio_pin, GPIO_ON if on_off else GPIO_OFF)
        port.status = LED_STATUS_ON if on_off else LED_STATUS_OFF

    def update(self) -> None:
        """Drive the status LED: steady when online with a flight controller,
        flashing every tick when offline, and every third tick otherwise."""
        if self._error != ModuleErrorCode.ERR_NON:
            return
        if self._status.exit_me:
            return
        status_led = self._port_pins[0]
        if self._status.is_online and self._status.is_fcb_module_connected:
            self._gpio.write(status_led.gpio_pin, GPIO_ON)
            status_led.status = LED_STATUS_ON
        elif not self._status.is_online or self._counter % 3 == 0:
            self._gpio.toggle(status_led.gpio_pin)
            status_led.status = LED_STATUS_FLASHING
        self._counter = (self._counter + 1) & 0xFFFFFFFF
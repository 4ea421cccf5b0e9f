"""Buzzer driver that plays 32-step on/off tone patterns on GPIO pins."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .helpers import (
    ERROR_CONSOLE_BOLD_TEXT,
    INFO_CONSOLE_TEXT,
    LOG_CONSOLE_TEXT,
    NORMAL_CONSOLE_TEXT,
    SUCCESS_CONSOLE_TEXT,
    get_time_usec,
)
from .notification import (
    GPIO_OFF,
    GPIO_ON,
    LED_STATUS_OFF,
    LED_STATUS_ON,
    ModuleErrorCode,
    Notification,
    NotificationStatus,
    PortStatus,
)
from .rpi_gpio import PinMode

_U32 = 0xFFFFFFFF
_PATTERN_BITS = 32


@dataclass
class _BuzzerState:
    pattern_start_time: int = 0
    tone: int = 0
    repeats: int = 0
    counter: int = 0


class Buzzer(Notification):
    """Buzzer driver; each tick of :meth:`update` plays the next bit of a pattern."""

    # Patterns read left to right, one bit per scheduler tick.
    SINGLE_BUZZ = 0b10000000000000000000000000000000
    DOUBLE_BUZZ = 0b10100000000000000000000000000000
    ARMING_BUZZ = 0b11111111111111111111111111111100
    BARO_BUZZ = 0b10101010100000000000000000000000
    EKF_BAD = 0b11111000001111100000111110000000

    def __init__(self, gpio: Optional[Any] = None, status: Optional[NotificationStatus] = None) -> None:
        super().__init__(gpio, status)
        self._states: list[_BuzzerState] = []
        self._fcb_module_connected = False

    def init(self, buzzer_pins: list[PortStatus]) -> bool:
        """Configure the buzzer pins as outputs, all silent."""
        if not buzzer_pins:
            print(f"{LOG_CONSOLE_TEXT}Buzzer {INFO_CONSOLE_TEXT}Disabled{NORMAL_CONSOLE_TEXT}")
            self._error = ModuleErrorCode.ERR_NO_HW_AVAILABLE
            return False
        self._take_pins(buzzer_pins)
        if not self._gpio.init():
            print(f"{ERROR_CONSOLE_BOLD_TEXT}Error: Could not initialize Buzzer GPIO pins.{NORMAL_CONSOLE_TEXT}")
            self._error = ModuleErrorCode.ERR_INIT_FAILED
            return False
        self._error = ModuleErrorCode.ERR_NON
        for port in self._port_pins:
            print(f"{SUCCESS_CONSOLE_TEXT}Initalize Buzzer at GPIO {INFO_CONSOLE_TEXT}{port.gpio_pin}{NORMAL_CONSOLE_TEXT}")
            self._gpio.pin_mode(port.gpio_pin, PinMode.OUTPUT)
            self._gpio.write(port.gpio_pin, GPIO_OFF)
            self._states.append(_BuzzerState())
        self._status.is_buzzer_connected = True
        return True

    def uninit(self) -> None:
        """Silence every buzzer and mark the driver uninitialised."""
        if self._error != ModuleErrorCode.ERR_NON:
            return
        for port in self._port_pins:
            print(f"{SUCCESS_CONSOLE_TEXT}reset PORTS at GPIO {port.gpio_pin}{NORMAL_CONSOLE_TEXT}")
            self._gpio.write(port.gpio_pin, GPIO_OFF)
        self._error = ModuleErrorCode.ERR_UNINITIALIZED

    def update(self) -> None:
        """Advance every buzzer's pattern by one step."""
        for index in range(len(self._states)):
            self._update_playing_pattern(index)

    def _update_pattern_to_play(self) -> None:
        if self._fcb_module_connected != self._status.is_online:
            self._fcb_module_connected = self._status.is_online
            tone = self.ARMING_BUZZ if self._fcb_module_connected else self.SINGLE_BUZZ
            self.switch_buzzer(0, True, tone, 1)

    def _update_playing_pattern(self, buzzer_index: int) -> None:
        state = self._states[buzzer_index]
        if state.tone == 0:
            return
        if state.counter == _PATTERN_BITS:
            self.on(buzzer_index, False)
            state.counter = 0
            state.repeats = (state.repeats - 1) & _U32
            if state.repeats == 0:
                state.tone = 0
            else:
                self.switch_buzzer(buzzer_index, True, state.tone, state.repeats)
            return
        state.counter += 1
        shift = 31 - state.counter
        self.on(buzzer_index, shift >= 0 and bool(state.tone & (1 << shift)))

    def on(self, buzzer_index: int, turn_on: bool) -> None:
        """Drive a buzzer pin on or off directly."""
        port = self._port_pins[buzzer_index]
        self._gpio.write(port.gpio_pin, LED_STATUS_ON if turn_on else LED_STATUS_OFF)
        port.status = GPIO_ON if turn_on else GPIO_OFF

    def switch_buzzer(self, buzzer_index: int, on_off: bool, tone: int, repeats: int) -> None:
        """Start playing ``tone`` ``repeats`` times, or silence the buzzer."""
        if self._error != ModuleErrorCode.ERR_NON:
            return
        if buzzer_index >= len(self._port_pins):
            return
        state = self._states[buzzer_index]
        if not on_off:
            self.on(buzzer_index, False)
            state.tone = 0
            state.repeats = 0
            return
        state.tone = tone & _U32
        state.repeats = repeats & _U32
        state.pattern_start_time = get_time_usec() & _U32
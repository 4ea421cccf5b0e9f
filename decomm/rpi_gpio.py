"""Raspberry Pi GPIO access through the memory-mapped register block."""

from __future__ import annotations

import mmap
import os
from enum import IntEnum
from typing import MutableSequence, Optional

from .helpers import ERROR_CONSOLE_BOLD_TEXT, NORMAL_CONSOLE_TEXT

GPIO_MAX_PINS = 32
GPIO_PERIPHERAL_OFFSET = 0x200000
GPIO_REGISTERS_MEMORY_RANGE = 0xB4

_U32 = 0xFFFFFFFF
_PINS_PER_REGISTER = 10
_GPSET0 = 0x1C // 4
_GPCLR0 = 0x28 // 4
_GPLEV0 = 0x34 // 4


class PeripheralBase(IntEnum):
    """Peripheral base address per SoC."""

    BCM2708 = 0x20000000
    BCM2709 = 0x3F000000
    BCM2711 = 0xFE000000


class PinMode(IntEnum):
    """Direction of a GPIO pin."""

    INPUT = 0
    OUTPUT = 1


def peripheral_base_for_model(rpi_model: int) -> PeripheralBase:
    """Return the peripheral base address for an internal board model."""
    if rpi_model == -1:
        raise ValueError("board is not a Raspberry Pi")
    if rpi_model == 1:
        return PeripheralBase.BCM2708
    if rpi_model == 2:
        return PeripheralBase.BCM2709
    return PeripheralBase.BCM2711


class RpiGpio:
    """GPIO driver writing to the BCM register block.

    ``registers`` may be given as a mutable sequence of 32-bit words standing in
    for the mapped block; otherwise the memory device is mapped on :meth:`init`.
    """

    def __init__(
        self,
        rpi_model: Optional[int] = None,
        memory_device_path: str = "/dev/mem",
        simulate: bool = False,
        registers: Optional[MutableSequence[int]] = None,
    ) -> None:
        self._rpi_model = rpi_model
        self._memory_device_path = memory_device_path
        self._simulate = simulate
        self._supplied = registers
        self._gpio: Optional[MutableSequence[int]] = None
        self._mapping: Optional[mmap.mmap] = None
        self._output_status = 0
        self._initialized = False

    def _model(self) -> int:
        if self._rpi_model is None:
            from .rpi_util import RpiUtil

            self._rpi_model = RpiUtil().rpi_model
        return self._rpi_model

    def init(self) -> bool:
        """Map the GPIO registers. Return False if that is not possible."""
        if self._simulate or self._initialized:
            return True
        model = self._model()
        if model == -1:
            print(f"{ERROR_CONSOLE_BOLD_TEXT}Error: Cannot initialize GPIO because it is not RPI-Board{NORMAL_CONSOLE_TEXT}")
            return False
        address = peripheral_base_for_model(model) + GPIO_PERIPHERAL_OFFSET
        if self._supplied is not None:
            self._gpio = self._supplied
        else:
            try:
                fd = os.open(self._memory_device_path, os.O_RDWR | os.O_SYNC | os.O_CLOEXEC)
            except OSError:
                print(f"{ERROR_CONSOLE_BOLD_TEXT}Error: Failed to initialize memory device.{NORMAL_CONSOLE_TEXT}")
                return False
            try:
                self._mapping = mmap.mmap(
                    fd,
                    GPIO_REGISTERS_MEMORY_RANGE,
                    mmap.MAP_SHARED,
                    mmap.PROT_READ | mmap.PROT_WRITE,
                    offset=address,
                )
            except (OSError, ValueError):
                print(f"{ERROR_CONSOLE_BOLD_TEXT}Error: Failed to get GPIO memory map.{NORMAL_CONSOLE_TEXT}")
                return False
            finally:
                os.close(fd)
            self._gpio = memoryview(self._mapping).cast("I")
        self._initialized = True
        return True

    def _registers(self) -> MutableSequence[int]:
        if self._gpio is None:
            raise RuntimeError("GPIO has not been initialised")
        return self._gpio

    def _set_mode_in(self, pin: int) -> None:
        regs = self._registers()
        shift = (pin % _PINS_PER_REGISTER) * 3
        index = pin // _PINS_PER_REGISTER
        regs[index] = regs[index] & ~(0b111 << shift) & _U32

    def _set_mode_out(self, pin: int) -> None:
        regs = self._registers()
        shift = (pin % _PINS_PER_REGISTER) * 3
        index = pin // _PINS_PER_REGISTER
        value = regs[index] & ~(0b111 << shift) & _U32
        regs[index] = value | (0b001 << shift)

    def _set_high(self, pin: int) -> None:
        self._registers()[_GPSET0] = (1 << pin) & _U32

    def _set_low(self, pin: int) -> None:
        self._registers()[_GPCLR0] = (1 << pin) & _U32

    def pin_mode(self, pin: int, mode: PinMode | int) -> None:
        """Configure a pin as input or output."""
        if self._simulate:
            return
        self._set_mode_in(pin)
        if mode != PinMode.INPUT:
            self._set_mode_out(pin)

    def read(self, pin: int) -> int:
        """Return the logic level of a pin, 0 for pins out of range."""
        if self._simulate or pin >= GPIO_MAX_PINS:
            return 0
        return 1 if self._registers()[_GPLEV0] & (1 << pin) else 0

    def write(self, pin: int, value: int) -> None:
        """Drive a pin high for a non-zero value, low otherwise."""
        if self._simulate:
            return
        if value != 0:
            self._set_high(pin)
        else:
            self._set_low(pin)

    def toggle(self, pin: int) -> int:
        """Flip a pin's remembered output state, drive it, and return the new state.

        Pins out of range return 255.
        """
        if pin >= GPIO_MAX_PINS:
            return 0xFF
        flag = 1 << pin
        self._output_status ^= flag
        status = (self._output_status & flag) >> pin
        self.write(pin, status)
        return status
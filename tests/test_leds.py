import pytest

from decomm.leds import Leds
from decomm.notification import (
    GPIO_OFF,
    GPIO_ON,
    LED_STATUS_FLASHING,
    LED_STATUS_OFF,
    LED_STATUS_ON,
    ModuleErrorCode,
    NotificationStatus,
    PortStatus,
)
from decomm.rpi_gpio import PinMode, RpiGpio


class FakeGpio:
    def __init__(self, ok=True):
        self.ok = ok
        self.calls = []

    def init(self):
        return self.ok

    def pin_mode(self, pin, mode):
        self.calls.append(("mode", pin, mode))

    def write(self, pin, value):
        self.calls.append(("write", pin, value))

    def toggle(self, pin):
        self.calls.append(("toggle", pin))
        return 0


@pytest.fixture
def pins():
    return [PortStatus("status", 17), PortStatus("user", 27)]


def _ready(pins, **status):
    gpio = FakeGpio()
    state = NotificationStatus(**status)
    leds = Leds(gpio, state)
    assert leds.init(pins) is True
    gpio.calls.clear()
    return leds, gpio, state


def test_init_without_pins_disables():
    state = NotificationStatus()
    leds = Leds(FakeGpio(), state)
    assert leds.init([]) is False
    assert leds.error == ModuleErrorCode.ERR_NO_HW_AVAILABLE
    assert state.is_light_connected is False


def test_init_gpio_failure(pins):
    leds = Leds(FakeGpio(ok=False), NotificationStatus())
    assert leds.init(pins) is False
    assert leds.error == ModuleErrorCode.ERR_INIT_FAILED


def test_init_configures_outputs_off(pins):
    gpio = FakeGpio()
    state = NotificationStatus()
    leds = Leds(gpio, state)
    assert leds.init(pins) is True
    assert gpio.calls == [
        ("mode", 17, PinMode.OUTPUT),
        ("write", 17, GPIO_OFF),
        ("mode", 27, PinMode.OUTPUT),
        ("write", 27, GPIO_OFF),
    ]
    assert leds.error == ModuleErrorCode.ERR_NON
    assert state.is_light_connected is True
    assert [p.status for p in leds.ports] == [LED_STATUS_OFF, LED_STATUS_OFF]


def test_update_online_with_fcb_is_steady(pins):
    leds, gpio, _ = _ready(pins, is_online=True, is_fcb_module_connected=True)
    leds.update()
    assert gpio.calls == [("write", 17, GPIO_ON)]
    assert leds.ports[0].status == LED_STATUS_ON


def test_update_offline_toggles_every_tick(pins):
    leds, gpio, _ = _ready(pins)
    for _ in range(4):
        leds.update()
    assert gpio.calls == [("toggle", 17)] * 4
    assert leds.ports[0].status == LED_STATUS_FLASHING


def test_update_online_without_fcb_toggles_every_third_tick(pins):
    leds, gpio, _ = _ready(pins, is_online=True)
    for _ in range(6):
        leds.update()
    assert gpio.calls == [("toggle", 17)] * 2


def test_update_does_nothing_when_exiting(pins):
    leds, gpio, state = _ready(pins)
    state.exit_me = True
    leds.update()
    assert gpio.calls == []


def test_update_does_nothing_when_not_initialised():
    gpio = FakeGpio()
    leds = Leds(gpio, NotificationStatus())
    leds.update()
    assert gpio.calls == []
    assert leds.error == ModuleErrorCode.ERR_UNINITIALIZED


def test_uninit_turns_off_once(pins):
    leds, gpio, _ = _ready(pins, is_online=True, is_fcb_module_connected=True)
    leds.update()
    gpio.calls.clear()
    leds.uninit()
    assert gpio.calls == [("write", 17, GPIO_OFF), ("write", 27, GPIO_OFF)]
    assert leds.error == ModuleErrorCode.ERR_UNINITIALIZED
    assert leds.ports[0].status == LED_STATUS_OFF
    gpio.calls.clear()
    leds.uninit()
    assert gpio.calls == []


def test_switch_led(pins):
    leds, gpio, _ = _ready(pins)
    leds.switch_led(1, True)
    assert gpio.calls == [("write", 27, GPIO_ON)]
    assert leds.ports[1].status == LED_STATUS_ON
    leds.switch_led(1, False)
    assert leds.ports[1].status == LED_STATUS_OFF


def test_switch_led_out_of_range_ignored(pins):
    leds, gpio, _ = _ready(pins)
    leds.switch_led(len(pins), True)
    assert gpio.calls == []


def test_with_register_backed_gpio(pins):
    registers = [0] * 45
    gpio = RpiGpio(rpi_model=3, registers=registers)
    leds = Leds(gpio, NotificationStatus(is_online=True, is_fcb_module_connected=True))
    assert leds.init(pins) is True
    leds.update()
    assert registers[0x1C // 4] == 1 << pins[0].gpio_pin
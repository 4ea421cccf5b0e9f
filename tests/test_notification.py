import pytest

from decomm.notification import (
    LED_STATUS_OFF,
    ModuleErrorCode,
    Notification,
    NotificationStatus,
    PortStatus,
)


class _Gpio:
    pass


class _Device(Notification):
    def init(self, pins):
        self._take_pins(pins)
        self._error = ModuleErrorCode.ERR_NON
        return True

    def update(self):
        pass


def test_base_class_cannot_be_instantiated():
    with pytest.raises(TypeError):
        Notification(_Gpio(), NotificationStatus())


def test_error_starts_uninitialized():
    device = _Device(_Gpio(), NotificationStatus())
    assert device.error == ModuleErrorCode.ERR_UNINITIALIZED
    assert device.ports == []


def test_ports_are_copies():
    pins = [PortStatus("led", 17)]
    device = _Device(_Gpio(), NotificationStatus())
    assert device.init(pins) is True
    pins[0].status = 9
    exposed = device.ports
    exposed[0].status = 5
    assert device.ports == [PortStatus("led", 17, LED_STATUS_OFF)]
    assert device.error == ModuleErrorCode.ERR_NON


def test_default_uninit_keeps_state():
    device = _Device(_Gpio(), NotificationStatus())
    device.init([PortStatus("a", 1)])
    device.uninit()
    assert device.error == ModuleErrorCode.ERR_NON
    assert device.ports == [PortStatus("a", 1)]


def test_error_codes_match_source_values():
    assert ModuleErrorCode(-1) is ModuleErrorCode.ERR_UNINITIALIZED
    assert ModuleErrorCode(999) is ModuleErrorCode.ERR_UNKNOWN


def test_status_defaults_are_offline():
    status = NotificationStatus()
    assert (status.is_online, status.exit_me, status.is_light_connected) == (False, False, False)
# decomm

Building blocks for a communicator process on a drone's companion computer.
The package uses only the standard library and needs Python 3.10 or later.

| Module | What it gives you |
| --- | --- |
| `decomm.udp_communicator` | `split_into_chunks`, `ChunkAssembler` and `UdpCommunicator`: chunked UDP messages between onboard modules |
| `decomm.local_config` | `LocalConfigFile`: a JSON settings file that is created when missing |
| `decomm.options` | `GetOptLong` and `LongOption`: a `getopt_long`-style option scanner |
| `decomm.rpi_util` | `RpiUtil`, `model_from_revision`, `model_from_device_tree`: Raspberry Pi model detection and CPU readings |
| `decomm.rpi_gpio` | `RpiGpio`, `PinMode`, `PeripheralBase`, `peripheral_base_for_model`: GPIO register access |
| `decomm.notification` | `PortStatus`, `ModuleErrorCode`, `NotificationStatus`, `Notification`: shared types for notification devices |
| `decomm.leds` | `Leds`: status and user LEDs |
| `decomm.buzzer` | `Buzzer`: 32-step tone patterns |
| `decomm.helpers` | `TimeBox`, `get_time_usec`, string helpers, `validate_field`, console colour codes |

## Chunked intermodule messages

Each packet starts with a 2-byte little-endian chunk number. Numbers count
from 0 and wrap after 255. The last packet always carries `0xFFFF`.

```python
from decomm.udp_communicator import ChunkAssembler, split_into_chunks

packets = split_into_chunks(b'{"ty": "uv", "mt": 9100}', 8)

assembler = ChunkAssembler()
for packet in packets:
    message = assembler.feed(60000, packet)
# message == b'{"ty": "uv", "mt": 9100}'
```

`feed` returns `None` until the final chunk arrives, then returns the whole
message. Buffers are kept separately for each source key. A chunk numbered
0 discards anything still incomplete from that source.

`UdpCommunicator` does the same over a socket:

```python
from decomm.udp_communicator import UdpCommunicator

def on_receive(message: bytes, sender: tuple) -> None:
    print(sender, message)

with UdpCommunicator(on_receive) as comm:
    comm.init("127.0.0.1", 0, 8160)   # chunk size must be 1..65534
    comm.start()                      # receiving thread; a second call raises RuntimeError
    comm.send_msg(b"hello", comm.address)
```

Incoming packets are reassembled per sender port, and `on_receive` is then
called with the message. `send_msg` waits 10 ms between chunks.
`stop()`, which leaving the `with` block also calls, ends the thread and
closes the socket.

## Local configuration

```python
from decomm.local_config import LocalConfigFile

config = LocalConfigFile()
config.init_config_file("de_comm.local")   # creates "{}" if missing

if not config.get_string_field("party_id"):
    config.add_string_field("party_id", "123456")
    config.apply()
```

The file may contain `//` and `/* */` comments. `init_config_file` returns
`False` when the contents are not valid JSON. A missing string field reads as
`""` and a missing numeric field as `0xFFFFFFFF`. A field of the wrong type
raises `TypeError`. `add_numeric_field` accepts only unsigned 32-bit values.
`clear_file()` empties the object and writes it out.

## Command-line options

```python
from decomm.options import GetOptLong, LongOption

parser = GetOptLong(
    ["prog", "-c", "config.json", "--version"],
    "c:b:voh",
    [LongOption("config", True, "c"), LongOption("version", False, "v")],
)
for option, argument in parser:
    ...   # ("c", "config.json"), then ("v", None)
```

`getoption()` returns one option at a time. It returns `"?"` for an unknown
option or a missing argument, or `":"` when the option string starts with
`:`, and `None` at the end. Pass `opterr=True` to have errors printed.

## Raspberry Pi hardware

`RpiUtil()` reads `/proc/cpuinfo`, then the device-tree model, to set
`rpi_model`, which is -1 on other boards. `get_cpu_serial()`,
`get_cpu_temperature()` (in millidegrees) and `get_throttled()` return
`None` when they cannot read a value. `get_throttled()` runs
`vcgencmd get_throttled`.

`RpiGpio` maps `/dev/mem` on `init()`. You can run it with `simulate=True`,
or pass `registers=` with a list of 32-bit words to stand in for the register
block:

```python
from decomm.rpi_gpio import PinMode, RpiGpio

gpio = RpiGpio(rpi_model=3, registers=[0] * 45)
gpio.init()
gpio.pin_mode(17, PinMode.OUTPUT)
gpio.write(17, 1)
gpio.toggle(17)   # returns the new remembered state; 255 for pins >= 32
```

## LEDs and buzzer

`Leds` and `Buzzer` take a GPIO object and a `NotificationStatus`. They read
`is_online`, `is_fcb_module_connected` and `exit_me` from it. `init()` sets
`is_light_connected` or `is_buzzer_connected` on it.

```python
from decomm.buzzer import Buzzer
from decomm.leds import Leds
from decomm.notification import NotificationStatus, PortStatus
from decomm.rpi_gpio import RpiGpio

status = NotificationStatus(is_online=False)
gpio = RpiGpio(rpi_model=3, registers=[0] * 45)

leds = Leds(gpio, status)
leds.init([PortStatus("status", 17)])
leds.update()   # offline: the status LED toggles on every tick

buzzer = Buzzer(gpio, status)
buzzer.init([PortStatus("buzzer", 18)])
buzzer.switch_buzzer(0, True, Buzzer.DOUBLE_BUZZ, 2)
buzzer.update()   # one pattern step per call, 32 steps per repeat
```

The status LED stays on when the unit is online and a flight controller is
connected. It toggles on every tick when offline, and on every third tick
otherwise. `init()` returns `False` and sets `error` to `ERR_NO_HW_AVAILABLE`
when it is given no pins, or to `ERR_INIT_FAILED` when the GPIO cannot be
initialised.

## Helpers

```python
from decomm.helpers import TimeBox, hex_string_to_uint32, remove_comments

remove_comments('{"a": 1} // trailing note')   # '{"a": 1} '
hex_string_to_uint32("1f")                     # 31; invalid input raises ValueError

box = TimeBox()
box.register()
if box.passed_register(1_000_000):             # microseconds
    ...
```

## What this package does not do

There is no command-line program and no running communicator. Nothing here
connects to a communication server. Nothing here keeps a registry of onboard
modules or routes messages between those modules and a server. The package
provides the transport, configuration, option-parsing and hardware pieces
that such a program would be built from.

## Running the tests

Install the `test` extra. Then run `pytest` from the project root.
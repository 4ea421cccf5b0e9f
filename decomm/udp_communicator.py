"""Chunked UDP messaging between modules on the local data bus."""

from __future__ import annotations

import socket
import threading
import time
from collections import defaultdict
from typing import Callable, Hashable, Optional

from .helpers import (
    ERROR_CONSOLE_TEXT,
    INFO_CONSOLE_TEXT,
    LOG_CONSOLE_BOLD_TEXT,
    NORMAL_CONSOLE_TEXT,
)

MAX_UDP_DATABUS_PACKET_SIZE = 0xFFFF
DEFAULT_UDP_DATABUS_PACKET_SIZE = 8160
LAST_CHUNK_NUMBER = 0xFFFF

_HEADER_SIZE = 2
_RECEIVE_BUFFER = 0xFFFF
_RECEIVE_TIMEOUT = 1.0
_INTER_CHUNK_DELAY = 0.010

Address = tuple
OnReceive = Callable[[bytes, Address], None]


def split_into_chunks(message: bytes, chunk_size: int) -> list[bytes]:
    """Split a message into packets, each led by a 2-byte little-endian chunk number.

    Chunk numbers count from 0 and wrap after 255; the last packet always
    carries ``0xFFFF``. An empty message yields no packets.
    """
    if chunk_size < 1:
        raise ValueError("chunk size must be positive")
    data = bytes(message)
    starts = range(0, len(data), chunk_size)
    packets = []
    for number, start in enumerate(starts):
        payload = data[start:start + chunk_size]
        is_last = start + chunk_size >= len(data)
        header = LAST_CHUNK_NUMBER if is_last else number & 0xFF
        packets.append(header.to_bytes(_HEADER_SIZE, "little") + payload)
    return packets


class ChunkAssembler:
    """Reassemble chunked messages, keeping a separate buffer per source."""

    def __init__(self) -> None:
        self._chunks: defaultdict[Hashable, list[bytes]] = defaultdict(list)

    def feed(self, source: Hashable, packet: bytes) -> Optional[bytes]:
        """Add one packet; return the whole message once its last chunk arrives."""
        if len(packet) < _HEADER_SIZE:
            return None
        number = int.from_bytes(packet[:_HEADER_SIZE], "little")
        chunks = self._chunks[source]
        if number == 0:
            # A new message starts: drop anything left incomplete.
            chunks.clear()
        chunks.append(bytes(packet[_HEADER_SIZE:]))
        if number != LAST_CHUNK_NUMBER:
            return None
        message = b"".join(chunks)
        chunks.clear()
        return message


class UdpCommunicator:
    """A UDP listener that reassembles chunked messages and sends chunked replies."""

    def __init__(self, on_receive: Optional[OnReceive] = None) -> None:
        self._on_receive = on_receive
        self._socket: Optional[socket.socket] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._started = False
        self._stopped = False
        self._chunk_size = DEFAULT_UDP_DATABUS_PACKET_SIZE

    @property
    def address(self) -> Address:
        """The address the socket is bound to."""
        if self._socket is None:
            raise RuntimeError("communicator has not been initialised")
        return self._socket.getsockname()

    @property
    def chunk_size(self) -> int:
        """Maximum payload bytes per packet."""
        return self._chunk_size

    def init(self, host: str, port: int, chunk_size: int) -> None:
        """Create the socket and bind it to ``host:port``."""
        if not 0 < chunk_size < MAX_UDP_DATABUS_PACKET_SIZE:
            raise ValueError("invalid udp packet size.")
        self._chunk_size = chunk_size
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.bind((host, port))
        except OSError:
            sock.close()
            print(f"UDP Listener  {ERROR_CONSOLE_TEXT} BAD BIND: {host}:{port}{NORMAL_CONSOLE_TEXT}")
            raise
        self._socket = sock
        print(
            f"{LOG_CONSOLE_BOLD_TEXT}Comm Server is Listening at {INFO_CONSOLE_TEXT}"
            f"{host}:{port}{NORMAL_CONSOLE_TEXT}"
        )
        print(
            f"{LOG_CONSOLE_BOLD_TEXT}UDP Max Packet Size {INFO_CONSOLE_TEXT}"
            f"{chunk_size}{NORMAL_CONSOLE_TEXT}"
        )

    def start(self) -> None:
        """Start the receiving thread."""
        if self._started:
            raise RuntimeError("Started called twice")
        if self._socket is None:
            raise RuntimeError("communicator has not been initialised")
        self._thread = threading.Thread(target=self._receive_loop, daemon=True)
        self._thread.start()
        self._started = True

    def stop(self) -> None:
        """Stop receiving, wait for the thread and close the socket."""
        self._stopped = True
        if self._socket is not None:
            try:
                self._socket.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        if self._socket is not None:
            self._socket.close()
            self._socket = None

    def __enter__(self) -> "UdpCommunicator":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def _receive_loop(self) -> None:
        sock = self._socket
        if sock is None:
            return
        sock.settimeout(_RECEIVE_TIMEOUT)
        assembler = ChunkAssembler()
        while not self._stopped:
            try:
                packet, sender = sock.recvfrom(_RECEIVE_BUFFER)
            except socket.timeout:
                continue
            except OSError:
                if self._stopped:
                    break
                continue
            if not packet:
                continue
            # Buffers are keyed by the sender's port.
            message = assembler.feed(sender[1], packet)
            if message is not None and self._on_receive is not None:
                self._on_receive(message, sender)

    def send_msg(self, message: bytes, address: Address) -> None:
        """Send a message to ``address`` as a sequence of chunked packets."""
        if self._socket is None:
            raise RuntimeError("communicator has not been initialised")
        with self._lock:
            packets = split_into_chunks(message, self._chunk_size)
            for index, packet in enumerate(packets):
                self._socket.sendto(packet, address)
                if index != len(packets) - 1:
                    # Sending too fast loses packets.
                    time.sleep(_INTER_CHUNK_DELAY)
import socket
import time
import logging
from typing import Optional, Tuple, Protocol

from constants import TIMEOUT, RECONNECT_DELAY, INFO_BUFFER_SIZE

log = logging.getLogger(__name__)


class QueryTransport(Protocol):
    def send(self, data: bytes) -> None: ...

    def receive(self, bufsize: int, timeout: Optional[float] = None) -> bytes: ...

    def reconnect(self) -> None: ...


class UdpTransport:
    """Connected UDP socket with one outstanding request at a time.

    Socket errors are raised as-is (OSError / socket.timeout); the query
    protocol decides what they mean.
    """

    def __init__(self, address: Tuple[str, int], timeout: float = TIMEOUT,
                 reconnect_delay: float = RECONNECT_DELAY):
        self.address = address
        self.timeout = timeout
        self.reconnect_delay = reconnect_delay
        self._sock: Optional[socket.socket] = None

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def connect(self) -> None:
        if self._sock is not None:
            return
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.settimeout(self.timeout)
            sock.connect(self.address)
        except OSError:
            sock.close()
            raise
        self._sock = sock
        log.debug("UDP socket connected to %s:%d", *self.address)

    def close(self) -> None:
        if self._sock is None:
            return
        try:
            self._sock.close()
        finally:
            self._sock = None
            log.debug("UDP socket to %s:%d closed", *self.address)

    def reconnect(self) -> None:
        # any challenge token from before this point is void
        self.close()
        time.sleep(self.reconnect_delay)
        self.connect()

    def send(self, data: bytes) -> None:
        self.connect()
        self._sock.send(data)

    def receive(self, bufsize: int = INFO_BUFFER_SIZE, timeout: Optional[float] = None) -> bytes:
        self.connect()
        self._sock.settimeout(self.timeout if timeout is None else timeout)
        data, _ = self._sock.recvfrom(bufsize)
        return data

    def __enter__(self) -> "UdpTransport":
        self.connect()
        return self

    def __exit__(self, *exc) -> None:
        self.close()

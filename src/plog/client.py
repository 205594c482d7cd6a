from __future__ import annotations

import logging
from typing import Callable, List, Protocol, Tuple, Union

from .constants import DEFAULT_CHUNK_SIZE, DEFAULT_HOST, DEFAULT_PORT, MAX_CHUNK_SIZE, MAX_MESSAGE_ID
from .net import UdpEndpoint
from .packet import encode_multipart

log = logging.getLogger(__name__)


class Transport(Protocol):
    def sendto(self, data: bytes, addr: Tuple[str, int]) -> None: ...

    def close(self) -> None: ...


Encoder = Callable[[int, int, int, int, int, bytes], bytes]


def chunk(message: bytes, chunk_size: int) -> List[bytes]:
    """Split ``message`` into consecutive slices of at most ``chunk_size`` bytes.

    Always returns at least one slice, so an empty message still becomes one
    (empty) packet.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
    if not message:
        return [b""]
    return [message[i : i + chunk_size] for i in range(0, len(message), chunk_size)]


class Client:
    """Sends messages to one UDP destination, chunked into multipart packets.

    The socket is opened on the first send and kept for later ones. If sending
    a datagram fails the socket is closed and dropped, the error goes to the
    caller, and the next send opens a new one.

    Not thread-safe: callers sharing a client across threads must serialize
    calls to ``send`` and ``close`` themselves.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        *,
        transport_factory: Callable[[], Transport] = UdpEndpoint.sending,
        encoder: Encoder = encode_multipart,
        logger: logging.Logger | None = None,
    ):
        if not 1 <= chunk_size <= MAX_CHUNK_SIZE:
            raise ValueError(f"chunk_size must be between 1 and {MAX_CHUNK_SIZE}, got {chunk_size}")
        if not 0 <= port <= 0xFFFF:
            raise ValueError(f"port must be between 0 and 65535, got {port}")

        self._host = host
        self._port = port
        self._chunk_size = chunk_size
        self._transport_factory = transport_factory
        self._encoder = encoder
        self._log = logger or log
        self._next_message_id = 0
        self._udp: Transport | None = None

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def destination(self) -> Tuple[str, int]:
        return (self._host, self._port)

    @property
    def connected(self) -> bool:
        return self._udp is not None

    def send(self, message: Union[bytes, str]) -> int:
        """Send ``message`` and return the id it was sent under.

        The id is taken before anything is sent, so a send that fails still
        uses one up.
        """
        message_id = self._allocate_message_id()
        data = message.encode("utf-8") if isinstance(message, str) else bytes(message)
        chunks = chunk(data, self._chunk_size)
        count = len(chunks)

        self._log.debug("sending message id=%d length=%d chunks=%d", message_id, len(data), count)
        for index, part in enumerate(chunks):
            udp = self._socket()
            packet = self._encoder(message_id, len(data), self._chunk_size, count, index, part)
            try:
                udp.sendto(packet, self.destination)
            except Exception:
                self._log.warning(
                    "send failed; message id=%d chunk %d/%d to %s:%d, discarding socket",
                    message_id,
                    index,
                    count,
                    self._host,
                    self._port,
                )
                self._teardown()
                raise
        return message_id

    def close(self) -> None:
        self._teardown()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _allocate_message_id(self) -> int:
        message_id = self._next_message_id
        self._next_message_id = (message_id + 1) & MAX_MESSAGE_ID
        return message_id

    def _socket(self) -> Transport:
        if self._udp is None:
            self._udp = self._transport_factory()
            self._log.debug("opened socket for %s:%d", self._host, self._port)
        return self._udp

    def _teardown(self) -> None:
        udp, self._udp = self._udp, None
        if udp is None:
            return
        try:
            udp.close()
        except Exception:
            self._log.debug("error closing socket", exc_info=True)

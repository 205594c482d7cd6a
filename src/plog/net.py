from __future__ import annotations

import socket
from typing import Tuple


class UdpEndpoint:
    def __init__(self, sock: socket.socket):
        self.sock = sock

    @classmethod
    def listening(cls, host: str, port: int, timeout_ms: int = 0) -> "UdpEndpoint":
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock.bind((host, port))
        if timeout_ms > 0:
            sock.settimeout(timeout_ms / 1000.0)
        return cls(sock)

    @classmethod
    def sending(cls) -> "UdpEndpoint":
        return cls(socket.socket(socket.AF_INET, socket.SOCK_DGRAM))

    @property
    def address(self) -> Tuple[str, int]:
        return self.sock.getsockname()

    def sendto(self, data: bytes, addr: Tuple[str, int]) -> None:
        self.sock.sendto(data, addr)

    def recvfrom(self, bufsize: int = 65535) -> Tuple[bytes, Tuple[str, int]]:
        return self.sock.recvfrom(bufsize)

    def close(self) -> None:
        self.sock.close()

from __future__ import annotations

from typing import List, Tuple

import pytest


class FakeUdp:
    def __init__(self):
        self.sent: List[Tuple[bytes, Tuple[str, int]]] = []
        self.closed = 0
        self.fail_with: Exception | None = None

    def sendto(self, data: bytes, addr: Tuple[str, int]) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((data, addr))

    def close(self) -> None:
        self.closed += 1


class FakeFactory:
    """Stands in for ``UdpEndpoint.sending``; records every socket it hands out."""

    def __init__(self):
        self.created: List[FakeUdp] = []
        self.next_udp: FakeUdp | None = None

    def __call__(self) -> FakeUdp:
        udp = self.next_udp or FakeUdp()
        self.next_udp = None
        self.created.append(udp)
        return udp


@pytest.fixture
def factory() -> FakeFactory:
    return FakeFactory()

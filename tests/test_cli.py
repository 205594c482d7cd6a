from __future__ import annotations

import functools
import io
import json

import pytest

from plog import cli
from plog.client import Client
from plog.net import UdpEndpoint
from plog.packet import decode_multipart


@pytest.fixture
def receiver():
    ep = UdpEndpoint.listening("127.0.0.1", 0, timeout_ms=2000)
    yield ep
    ep.close()


def run(receiver, *extra):
    host, port = receiver.address
    return cli.main(["send", "--host", host, "--port", str(port), *extra])


def test_send_arguments(receiver, capsys):
    assert run(receiver, "--json", "--chunk-size", "4", "hello", "hi") == 0
    out = json.loads(capsys.readouterr().out)
    assert out["message_ids"] == [0, 1]

    packets = [decode_multipart(receiver.recvfrom()[0]) for _ in range(3)]
    assert [(p.message_id, p.chunk_index, p.payload) for p in packets] == [
        (0, 0, b"hell"),
        (0, 1, b"o"),
        (1, 0, b"hi"),
    ]


def test_send_file(receiver, tmp_path, capsys):
    path = tmp_path / "msg.bin"
    path.write_bytes(b"\x00\x01\x02")
    assert run(receiver, "--json", "--file", str(path)) == 0
    assert json.loads(capsys.readouterr().out)["message_ids"] == [0]
    assert decode_multipart(receiver.recvfrom()[0]).payload == b"\x00\x01\x02"


def test_send_stdin_lines(receiver, monkeypatch, capsys):
    stdin = io.TextIOWrapper(io.BytesIO(b"one\ntwo\r\n"))
    monkeypatch.setattr("sys.stdin", stdin)
    assert run(receiver, "--json") == 0
    assert json.loads(capsys.readouterr().out)["message_ids"] == [0, 1]
    payloads = [decode_multipart(receiver.recvfrom()[0]).payload for _ in range(2)]
    assert payloads == [b"one", b"two"]


def test_file_and_messages_conflict(receiver, tmp_path):
    with pytest.raises(SystemExit):
        run(receiver, "--file", str(tmp_path / "x"), "msg")


def test_send_failure_exit_code(monkeypatch, capsys):
    class BrokenUdp:
        def sendto(self, data, addr):
            raise OSError("network is unreachable")

        def close(self):
            pass

    monkeypatch.setattr(cli, "Client", functools.partial(Client, transport_factory=BrokenUdp))
    assert cli.main(["send", "x"]) == 1
    assert capsys.readouterr().out == ""


@pytest.mark.parametrize(
    "flags",
    [
        ["--chunk-size", "0"],
        ["--chunk-size", "65536"],
        ["--chunk-size", "many"],
        ["--port", "70000"],
        ["--port", "-1"],
    ],
)
def test_out_of_range_options_are_usage_errors(flags, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["send", *flags, "x"])
    assert exc.value.code == 2
    assert "argument" in capsys.readouterr().err

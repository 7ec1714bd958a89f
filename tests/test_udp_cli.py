import io
import sys

import pytest

import udp_cli
from udp_cli import main, parse_port


@pytest.fixture
def no_network(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("network operation should not run")

    monkeypatch.setattr(udp_cli, "send_packet", fail)
    monkeypatch.setattr(udp_cli, "listen", fail)


def test_parse_port_bounds():
    assert parse_port("0") == 0
    assert parse_port("65535") == 65535


def test_parse_port_accepts_one_leading_plus():
    assert parse_port("+80") == 80
    for text in ["+", "++80", "+-1", "+65536"]:
        with pytest.raises(ValueError):
            parse_port(text)


@pytest.mark.parametrize("text", ["65536", "-1", "abc", "", "1.5", "٣"])
def test_parse_port_rejects(text):
    with pytest.raises(ValueError):
        parse_port(text)


def test_no_subcommand_prints_help(capsys, no_network):
    assert main([]) == 0
    captured = capsys.readouterr()
    assert "usage: udp" in captured.out
    assert "send" in captured.out
    assert "listen" in captured.out


@pytest.mark.parametrize("port", ["65536", "-1", "abc"])
def test_send_with_bad_port_exits_1(capsys, no_network, port):
    assert main(["send", "127.0.0.1", port]) == 1
    assert "invalid port" in capsys.readouterr().err


@pytest.mark.parametrize("port", ["65536", "-1", "abc"])
def test_listen_with_bad_port_exits_1(capsys, no_network, port):
    assert main(["listen", port]) == 1
    assert "invalid port" in capsys.readouterr().err


def test_send_reads_stdin(monkeypatch):
    sent = []
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"\x00payload\xff")))
    monkeypatch.setattr(udp_cli, "send_packet", sent.append)

    assert main(["send", "example.org", "65535"]) == 0
    assert len(sent) == 1
    assert sent[0].host == "example.org"
    assert sent[0].port == 65535
    assert sent[0].payload == b"\x00payload\xff"


class BrokenStdin:
    class buffer:
        @staticmethod
        def read():
            raise OSError("EIO")


def test_stdin_read_failure_exits_1(monkeypatch, capsys, no_network):
    monkeypatch.setattr(sys, "stdin", BrokenStdin())

    assert main(["send", "127.0.0.1", "9"]) == 1
    assert "error: failed reading packet from stdin: EIO" in capsys.readouterr().err


def test_send_to_unresolvable_host_exits_1(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"x")))

    assert main(["send", "no-such-host.invalid", "9"]) == 1
    assert "failed to send the packet to no-such-host.invalid:9" in capsys.readouterr().err


def test_send_failure_exits_1(monkeypatch, capsys):
    def refuse(request):
        raise OSError("Message too long")

    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"x")))
    monkeypatch.setattr(udp_cli, "send_packet", refuse)

    assert main(["send", "127.0.0.1", "9"]) == 1
    err = capsys.readouterr().err
    assert "failed to send the packet to 127.0.0.1:9" in err
    assert "Message too long" in err


def test_listen_passes_options(monkeypatch):
    calls = []

    def fake_listen(port, **kwargs):
        calls.append((port, kwargs))

    monkeypatch.setattr(udp_cli, "listen", fake_listen)
    assert main(["listen", "5000", "--bind", "127.0.0.1", "--hex", "8", "--limit-packets", "3"]) == 0
    assert calls == [
        (5000, {"bind": "127.0.0.1", "rcvbuf": None, "limit_packets": 3, "hex_bytes": 8})
    ]


def test_listen_bind_failure_exits_1(monkeypatch, capsys):
    def busy(port, **kwargs):
        raise OSError("Address already in use")

    monkeypatch.setattr(udp_cli, "listen", busy)
    assert main(["listen", "5000"]) == 1
    assert "error: Address already in use" in capsys.readouterr().err


def test_version(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    assert udp_cli.VERSION in capsys.readouterr().out

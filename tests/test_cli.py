import io
import socket

import pytest

from snailnet.cli import _listen, _serve, client_main, server_main
from snailnet.comm_dev import CommDevice
from snailnet.packet import PKG_SIZE, Packet, PacketType, build_packet
from snailnet.snail import Snail


@pytest.fixture
def pair():
    left, right = socket.socketpair(socket.AF_UNIX, socket.SOCK_DGRAM)
    yield left, right
    left.close()
    right.close()


def test_server_main_unknown_interface(capsys):
    assert server_main(["snailnone0"]) == 1
    assert "cannot start communication device" in capsys.readouterr().err


def test_client_main_unknown_interface(capsys):
    assert client_main(["snailnone0"]) == 1
    assert "snail-client" in capsys.readouterr().err


def test_server_main_requires_interface():
    with pytest.raises(SystemExit) as info:
        server_main([])
    assert info.value.code == 2


def test_serve_sends_james(pair):
    left, right = pair
    snail = Snail("lo", device=CommDevice("lo", sock=left))
    _serve(snail, count=3)
    packets = [Packet.from_bytes(right.recv(PKG_SIZE)) for _ in range(3)]
    assert all(p.payload == b"james" for p in packets)
    assert all(p.pkg_type is PacketType.DATA for p in packets)
    numbers = [p.sequence_number for p in packets]
    assert numbers == list(range(numbers[0], numbers[0] + 3))


def test_listen_prints_packets(pair):
    left, right = pair
    for sequence in range(2):
        right.send(build_packet(PacketType.DATA, b"james", sequence).to_bytes())
    out = io.StringIO()
    _listen(Snail("lo", device=CommDevice("lo", sock=left)), count=2, out=out)
    lines = out.getvalue().splitlines()
    assert lines.count("data: james") == 2
    assert "sequence_number: 1" in lines


def test_listen_reports_errors_and_goes_on(capsys):
    device = CommDevice("lo")
    snail = Snail.__new__(Snail)
    snail.device = device
    snail.packet = None
    out = io.StringIO()
    _listen(snail, count=2, out=out)
    assert out.getvalue() == ""
    assert capsys.readouterr().err.count("cannot receive packet") == 2
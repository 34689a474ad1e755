import socket

import pytest

from snailnet.comm_dev import CommDevice, CommDeviceError
from snailnet.packet import PKG_SIZE, Packet, PacketType, build_packet
from snailnet.snail import INTERFACE_NAME_MAX, Snail


@pytest.fixture
def pair():
    left, right = socket.socketpair(socket.AF_UNIX, socket.SOCK_DGRAM)
    yield left, right
    left.close()
    right.close()


def _snail(sock, name="lo"):
    return Snail(name, device=CommDevice(name, sock=sock))


def test_send_text(pair):
    left, right = pair
    snail = _snail(left)
    sent = snail.send(PacketType.DATA, "james")
    received = Packet.from_bytes(right.recv(PKG_SIZE))
    assert received.payload == b"james"
    assert received == sent
    assert snail.packet == sent


def test_send_bytes(pair):
    left, right = pair
    _snail(left).send(PacketType.TEXT_ACK_NAME, b"notes.txt")
    received = Packet.from_bytes(right.recv(PKG_SIZE))
    assert received.pkg_type is PacketType.TEXT_ACK_NAME
    assert received.payload == b"notes.txt"


def test_recv_keeps_last_packet(pair):
    left, right = pair
    packet = build_packet(PacketType.NACK, b"again", 3)
    right.send(packet.to_bytes())
    snail = _snail(left)
    assert snail.recv() == packet
    assert snail.packet == packet


def test_interface_name_is_truncated(pair):
    left, _ = pair
    snail = _snail(left, name="x" * 100)
    assert snail.network_interface == "x" * INTERFACE_NAME_MAX


def test_unknown_interface_raises():
    with pytest.raises(CommDeviceError):
        Snail("snailnone0")


def test_context_manager_closes_device(pair):
    left, _ = pair
    with _snail(left) as snail:
        assert snail.device.is_open
    assert not snail.device.is_open
    with pytest.raises(CommDeviceError):
        snail.send(PacketType.DATA, "late")
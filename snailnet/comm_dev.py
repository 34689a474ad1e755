"""Raw link-layer devices that carry protocol packets."""

from __future__ import annotations

import enum
import os
import socket
import struct

from .packet import BPF_BUF_SIZE, PKG_SIZE, Packet, build_packet

BPF_DEV_NAME = "/dev/bpf0"

_ETH_P_ALL = 0x0003
_SOL_PACKET = 263
_PACKET_ADD_MEMBERSHIP = 1
_PACKET_MR_PROMISC = 1

_IOC_VOID = 0x20000000
_IOC_OUT = 0x40000000
_IOC_IN = 0x80000000
_IFNAMSIZ = 16
_IFREQ_SIZE = 32


def _bsd_ioc(direction: int, group: str, number: int, length: int) -> int:
    return direction | ((length & 0x1FFF) << 16) | (ord(group) << 8) | number


_BIOCSBLEN = _bsd_ioc(_IOC_IN | _IOC_OUT, "B", 102, 4)
_BIOCPROMISC = _bsd_ioc(_IOC_VOID, "B", 105, 0)
_BIOCSETIF = _bsd_ioc(_IOC_IN, "B", 108, _IFREQ_SIZE)
_BIOCIMMEDIATE = _bsd_ioc(_IOC_IN, "B", 112, 4)
_BIOCSHDRCMPLT = _bsd_ioc(_IOC_IN, "B", 117, 4)

# struct bpf_xhdr: timestamp (seconds, fraction), caplen, datalen, hdrlen
_BPF_XHDR = struct.Struct("=qQIIH")


class CommType(enum.Enum):
    """Kind of device used to reach the network."""

    SOCKET = 0
    BPF = 1


class CommDeviceError(OSError):
    """A communication device could not be set up or used."""


def open_raw_socket(network_interface: str) -> socket.socket:
    """Open a promiscuous raw packet socket bound to ``network_interface``."""
    af_packet = getattr(socket, "AF_PACKET", None)
    if af_packet is None:
        raise CommDeviceError("raw packet sockets are not available on this platform")
    try:
        sock = socket.socket(af_packet, socket.SOCK_RAW, socket.htons(_ETH_P_ALL))
    except OSError as exc:
        raise CommDeviceError(f"cannot create raw socket (are you root?): {exc}") from exc
    try:
        ifindex = socket.if_nametoindex(network_interface)
        sock.bind((network_interface, _ETH_P_ALL))
        membership = struct.pack("iHH8s", ifindex, _PACKET_MR_PROMISC, 0, b"")
        sock.setsockopt(_SOL_PACKET, _PACKET_ADD_MEMBERSHIP, membership)
    except OSError as exc:
        sock.close()
        raise CommDeviceError(
            f"cannot set up raw socket on {network_interface!r}: {exc}"
        ) from exc
    return sock


def open_bpf_device(network_interface: str, buf_len: int = BPF_BUF_SIZE) -> tuple[int, int]:
    """Open and configure the BPF device; return its descriptor and buffer length."""
    try:
        import fcntl
    except ImportError as exc:
        raise CommDeviceError("BPF devices are not available on this platform") from exc
    try:
        fd = os.open(BPF_DEV_NAME, os.O_RDWR)
    except OSError as exc:
        raise CommDeviceError(f"cannot open {BPF_DEV_NAME}: {exc}") from exc
    try:
        length = bytearray(struct.pack("I", buf_len))
        fcntl.ioctl(fd, _BIOCSBLEN, length, True)
        (buf_len,) = struct.unpack("I", length)
        name = network_interface.encode()[: _IFNAMSIZ - 1]
        ifreq = name.ljust(_IFREQ_SIZE, b"\0")
        fcntl.ioctl(fd, _BIOCSETIF, ifreq)
        fcntl.ioctl(fd, _BIOCSHDRCMPLT, struct.pack("I", 1))
        fcntl.ioctl(fd, _BIOCPROMISC, 0)
        fcntl.ioctl(fd, _BIOCIMMEDIATE, struct.pack("I", buf_len))
    except OSError as exc:
        os.close(fd)
        raise CommDeviceError(
            f"cannot configure {BPF_DEV_NAME} on {network_interface!r}: {exc}"
        ) from exc
    return fd, buf_len


class CommDevice:
    """A raw socket or BPF device that sends and receives packets.

    An already open socket (``sock``) or descriptor (``fd``) may be handed in;
    otherwise :meth:`open` creates one for ``network_interface``.
    """

    def __init__(
        self,
        network_interface: str,
        comm_type: CommType = CommType.SOCKET,
        *,
        sock: socket.socket | None = None,
        fd: int | None = None,
        buf_len: int = BPF_BUF_SIZE,
    ) -> None:
        self.network_interface = network_interface
        self.comm_type = CommType(comm_type)
        self.buf_len = buf_len
        self._sock = sock
        self._fd = fd
        self._sequence = 0

    @property
    def is_open(self) -> bool:
        if self.comm_type is CommType.SOCKET:
            return self._sock is not None
        return self._fd is not None

    def open(self) -> "CommDevice":
        """Create the underlying device unless one is already open."""
        if not self.is_open:
            if self.comm_type is CommType.SOCKET:
                self._sock = open_raw_socket(self.network_interface)
            else:
                self._fd, self.buf_len = open_bpf_device(self.network_interface, self.buf_len)
        return self

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None

    def __enter__(self) -> "CommDevice":
        return self.open()

    def __exit__(self, *args) -> None:
        self.close()

    def prepare(self, pkg_type, data) -> Packet:
        """Build the next outgoing packet, consuming one sequence number."""
        sequence = self._sequence
        self._sequence += 1
        return build_packet(pkg_type, data, sequence)

    def _require_open(self) -> None:
        if not self.is_open:
            raise CommDeviceError("communication device is not open")

    def send(self, pkg_type, data) -> Packet:
        """Send one packet and return it."""
        packet = self.prepare(pkg_type, data)
        self._require_open()
        wire = packet.to_bytes()
        try:
            if self.comm_type is CommType.SOCKET:
                self._sock.send(wire)
            else:
                os.write(self._fd, wire)
        except OSError as exc:
            raise CommDeviceError(f"cannot send packet: {exc}") from exc
        return packet

    def recv(self) -> Packet:
        """Receive one packet."""
        self._require_open()
        try:
            if self.comm_type is CommType.SOCKET:
                return Packet.from_bytes(self._sock.recv(PKG_SIZE))
            buffer = os.read(self._fd, self.buf_len)
        except OSError as exc:
            raise CommDeviceError(f"cannot receive packet: {exc}") from exc
        return Packet.from_bytes(_strip_bpf_header(buffer))


def _strip_bpf_header(buffer: bytes) -> bytes:
    if len(buffer) < _BPF_XHDR.size:
        raise CommDeviceError("BPF read too short to hold a capture header")
    header_length = _BPF_XHDR.unpack_from(buffer)[-1]
    if header_length > len(buffer):
        raise CommDeviceError("BPF capture header points past the data read")
    return buffer[header_length : header_length + PKG_SIZE]
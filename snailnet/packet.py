"""Wire format of protocol packets and their checksum."""

from __future__ import annotations

import enum
from dataclasses import dataclass

START_MARKER = 0b01111110
MAX_DATA = 127
HEADER_SIZE = 4
PKG_SIZE = HEADER_SIZE + MAX_DATA
BPF_BUF_SIZE = 256

_SIZE_BITS = 7
_SEQUENCE_BITS = 5
_TYPE_BITS = 4

_SIZE_SHIFT = 8
_SEQUENCE_SHIFT = _SIZE_SHIFT + _SIZE_BITS
_TYPE_SHIFT = _SEQUENCE_SHIFT + _SEQUENCE_BITS
_CHECKSUM_SHIFT = _TYPE_SHIFT + _TYPE_BITS

SIZE_MASK = (1 << _SIZE_BITS) - 1
SEQUENCE_MASK = (1 << _SEQUENCE_BITS) - 1
TYPE_MASK = (1 << _TYPE_BITS) - 1
BYTE_MASK = 0xFF


class PacketType(enum.IntEnum):
    """Kinds of packets used by the protocol."""

    ACK = 0
    NACK = 1
    OK_ACK = 2
    FREE = 3
    SIZE = 4
    DATA = 5
    TEXT_ACK_NAME = 6
    VIDEO_ACK_NAME = 7
    IMG_ACK_NAME = 8
    END_OF_FILE = 9
    SHIFT_RIGHT = 10
    SHIFT_UP = 11
    SHIFT_DOWN = 12
    SHIFT_LEFT = 13
    FREE2 = 14
    ERROR = 15


def _check_field(name: str, value: int, mask: int) -> int:
    value = int(value)
    if not 0 <= value <= mask:
        raise ValueError(f"{name} must be between 0 and {mask}, got {value}")
    return value


@dataclass
class Packet:
    """One protocol packet; ``data`` always holds the full zero-padded data area."""

    start_marker: int = START_MARKER
    size: int = 0
    sequence_number: int = 0
    pkg_type: PacketType = PacketType.ACK
    checksum: int = 0
    data: bytes = b""

    def __post_init__(self) -> None:
        self.start_marker = _check_field("start_marker", self.start_marker, BYTE_MASK)
        self.size = _check_field("size", self.size, SIZE_MASK)
        self.sequence_number = _check_field(
            "sequence_number", self.sequence_number, SEQUENCE_MASK
        )
        self.pkg_type = PacketType(self.pkg_type)
        self.checksum = _check_field("checksum", self.checksum, BYTE_MASK)
        data = bytes(self.data)
        if len(data) > MAX_DATA:
            raise ValueError(f"data holds at most {MAX_DATA} bytes, got {len(data)}")
        self.data = data.ljust(MAX_DATA, b"\0")

    @property
    def payload(self) -> bytes:
        """The first ``size`` bytes of the data area."""
        return self.data[: self.size]

    def to_bytes(self) -> bytes:
        """Encode the packet in its packed wire layout."""
        header = (
            self.start_marker
            | self.size << _SIZE_SHIFT
            | self.sequence_number << _SEQUENCE_SHIFT
            | int(self.pkg_type) << _TYPE_SHIFT
            | self.checksum << _CHECKSUM_SHIFT
        )
        return header.to_bytes(HEADER_SIZE, "little") + self.data

    @classmethod
    def from_bytes(cls, data) -> "Packet":
        """Decode a packet; short input is zero-filled, extra bytes are ignored."""
        raw = bytes(data[:PKG_SIZE]).ljust(PKG_SIZE, b"\0")
        header = int.from_bytes(raw[:HEADER_SIZE], "little")
        return cls(
            start_marker=header & BYTE_MASK,
            size=(header >> _SIZE_SHIFT) & SIZE_MASK,
            sequence_number=(header >> _SEQUENCE_SHIFT) & SEQUENCE_MASK,
            pkg_type=PacketType((header >> _TYPE_SHIFT) & TYPE_MASK),
            checksum=(header >> _CHECKSUM_SHIFT) & BYTE_MASK,
            data=raw[HEADER_SIZE:],
        )

    def format(self) -> str:
        """Human-readable dump of every field, data shown up to its first NUL."""
        text = self.data.split(b"\0", 1)[0].decode("latin-1")
        return "\n".join(
            [
                f"start_marker: {self.start_marker}",
                f"size: {self.size}",
                f"sequence_number: {self.sequence_number}",
                f"type: {int(self.pkg_type)}",
                f"checksum: {self.checksum}",
                f"data: {text}",
            ]
        )


def build_packet(pkg_type, data, sequence_number) -> Packet:
    """Build an outgoing packet; the checksum is left at zero as the protocol sends it."""
    payload = bytes(data)
    if len(payload) > MAX_DATA:
        raise ValueError(f"data holds at most {MAX_DATA} bytes, got {len(payload)}")
    return Packet(
        start_marker=START_MARKER,
        size=len(payload),
        sequence_number=int(sequence_number) & SEQUENCE_MASK,
        pkg_type=PacketType(pkg_type),
        checksum=0,
        data=payload,
    )


def calculate_checksum(packet: Packet) -> int:
    """Low byte of size + sequence number + type + the bytes of the payload."""
    total = packet.size + packet.sequence_number + int(packet.pkg_type)
    total += sum(packet.payload)
    return total & BYTE_MASK


def validate_checksum(packet: Packet) -> bool:
    """Whether the packet's checksum matches its contents."""
    return packet.checksum == calculate_checksum(packet)
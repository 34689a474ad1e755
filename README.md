# snailnet

snailnet is a small packet protocol that writes frames straight onto a
network interface, below IP. A frame is 131 bytes: a 4-byte header followed
by a 127-byte data area padded with zeros. The header holds, packed
little-endian, an 8-bit start marker (`0b01111110`), a 7-bit size, a 5-bit
sequence number, a 4-bit type and an 8-bit checksum.

On Linux frames go through a raw `AF_PACKET` socket bound to the interface
in promiscuous mode. On FreeBSD, macOS and the other BSDs the BPF device
`/dev/bpf0` is used instead. Both need root privileges.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Commands

Two commands are installed. Both take the name of the network interface and
an optional `-n`/`--count` to stop after that many packets; without it they
run until interrupted.

```
sudo snail-server eth0
```

sends a `DATA` packet holding `james` over and over. A failed send is
reported on standard error and the loop carries on.

```
sudo snail-client eth0
```

receives frames one after another and prints the fields of each
(`start_marker`, `size`, `sequence_number`, `type`, `checksum`, `data`). A
failed receive is reported on standard error and the loop carries on.

Both exit with status 1 if the device cannot be opened and 130 when stopped
with Ctrl-C.

## Library use

Packets can be built, checked and encoded without touching the network:

```python
from snailnet.packet import (
    Packet,
    PacketType,
    build_packet,
    calculate_checksum,
    validate_checksum,
)

pkt = build_packet(PacketType.DATA, b"hello", 0)
raw = pkt.to_bytes()          # 131 bytes

same = Packet.from_bytes(raw)
print(same.format())
print(same.payload)           # b"hello"
print(calculate_checksum(same), validate_checksum(same))
```

`Packet` checks that every field fits its bit width and raises `ValueError`
otherwise; `data` longer than 127 bytes is rejected. `Packet.from_bytes`
zero-fills short input and ignores bytes past the frame.

The checksum is the low byte of the sum of the size, the sequence number,
the type and every payload byte.

For sending and receiving, `snailnet.comm_dev.CommDevice` wraps the raw
socket or BPF device (`CommType.SOCKET` or `CommType.BPF`) and numbers
outgoing packets itself, the sequence number wrapping at 32.
`snailnet.snail.Snail` opens a device for an interface, choosing the kind by
platform, and offers `send` (taking bytes or text), `recv` and `close`; the
last packet sent or received is kept in `Snail.packet`. Both can be used as
context managers, so the device is closed when the block ends. Failures to
open, send or receive raise `CommDeviceError`, a subclass of `OSError`.

Packet types, in wire order: `ACK`, `NACK`, `OK_ACK`, `FREE`, `SIZE`,
`DATA`, `TEXT_ACK_NAME`, `VIDEO_ACK_NAME`, `IMG_ACK_NAME`, `END_OF_FILE`,
`SHIFT_RIGHT`, `SHIFT_UP`, `SHIFT_DOWN`, `SHIFT_LEFT`, `FREE2`, `ERROR`.

## What it does not do

- Outgoing packets carry a checksum of 0; nothing fills it in on sending or
  checks it on receipt. Use `calculate_checksum` and `validate_checksum`
  yourself if you need them.
- Frames are written without an Ethernet header, and received frames are not
  filtered: the client prints whatever arrives on the interface, including
  unrelated traffic.
- The packet types are defined, but there is no acknowledgement,
  retransmission, flow control or file transfer built on them.
"""High-level endpoint that sends and receives protocol packets."""

from __future__ import annotations

import sys

from .comm_dev import CommDevice, CommType
from .packet import Packet

INTERFACE_NAME_MAX = 64


def _default_comm_type() -> CommType:
    if sys.platform.startswith(("freebsd", "darwin", "openbsd", "netbsd")):
        return CommType.BPF
    return CommType.SOCKET


class Snail:
    """A protocol endpoint bound to one network interface."""

    def __init__(
        self,
        network_interface: str,
        comm_type: CommType | None = None,
        *,
        device: CommDevice | None = None,
    ) -> None:
        self.network_interface = network_interface[:INTERFACE_NAME_MAX]
        if device is None:
            if comm_type is None:
                comm_type = _default_comm_type()
            device = CommDevice(self.network_interface, comm_type)
        self.device = device.open()
        self.packet: Packet | None = None

    def send(self, pkg_type, data) -> Packet:
        """Send ``data`` (bytes or text) as one packet of ``pkg_type``."""
        payload = data.encode() if isinstance(data, str) else bytes(data)
        self.packet = self.device.send(pkg_type, payload)
        return self.packet

    def recv(self) -> Packet:
        """Receive the next packet."""
        self.packet = self.device.recv()
        return self.packet

    def close(self) -> None:
        self.device.close()

    def __enter__(self) -> "Snail":
        return self

    def __exit__(self, *args) -> None:
        self.close()
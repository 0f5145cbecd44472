"""UDP socket primitives for LPSS discovery traffic.

Every function here returns a plain :class:`socket.socket`; ownership passes
to the caller, which is expected to use it from a single thread.
"""

from __future__ import annotations

import socket
import struct
from typing import Optional

from .base import TransportPortError


def _udp_socket() -> socket.socket:
    try:
        return socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    except OSError as exc:
        raise TransportPortError(f"unable to create UDP socket: {exc}") from exc


def multicast_listener(group: str, port: int, interface: str = "0.0.0.0") -> socket.socket:
    """Bind to *port* on all addresses and join the multicast *group*.

    Address reuse is enabled so several LPSS processes on one host can
    share the well-known discovery port.
    """

    sock = _udp_socket()
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)
    except (AttributeError, OSError):
        # Not every platform offers SO_REUSEPORT; SO_REUSEADDR suffices there.
        pass

    try:
        sock.bind(("", int(port)))
    except OSError as exc:
        sock.close()
        raise TransportPortError(f"unable to bind discovery port {port}: {exc}") from exc

    membership = struct.pack("4s4s", socket.inet_aton(group), socket.inet_aton(interface))
    try:
        sock.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, membership)
    except OSError as exc:
        sock.close()
        raise TransportPortError(f"unable to join multicast group {group}: {exc}") from exc

    return sock


def unicast_listener(address: str = "", port: int = 0) -> socket.socket:
    """Bind a receiving socket; a *port* of zero requests an ephemeral port,
    which the caller recovers with :func:`bound_port`.
    """

    sock = _udp_socket()
    try:
        sock.bind((address, int(port)))
    except OSError as exc:
        sock.close()
        raise TransportPortError(f"unable to bind {address or '*'}:{port}: {exc}") from exc

    return sock


def bound_port(sock: socket.socket) -> int:
    return sock.getsockname()[1]


def sender(ttl: int = 1, interface: Optional[str] = None) -> socket.socket:
    """A socket for sending multicast datagrams. Loopback is left enabled so
    that other LPSS processes on this host see what we send.
    """

    sock = _udp_socket()
    try:
        sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, int(ttl))
        sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_LOOP, 1)
        if interface and interface != "0.0.0.0":
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_IF, socket.inet_aton(interface))
    except OSError as exc:
        sock.close()
        raise TransportPortError(f"unable to configure multicast sender: {exc}") from exc

    return sock

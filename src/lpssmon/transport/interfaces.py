"""Local network interface lookup."""

from __future__ import annotations

import ipaddress
import socket
from typing import Iterable, Optional

ANY = "0.0.0.0"

# Connecting a UDP socket sends nothing; it only asks the kernel which
# source address it would use for this destination.
_PROBE = ("192.0.2.1", 9)


def _usable(address: str) -> bool:
    try:
        parsed = ipaddress.IPv4Address(address)
    except ValueError:
        return False
    return not (parsed.is_loopback or parsed.is_unspecified or parsed.is_link_local)


def _first_usable(candidates: Iterable[str]) -> Optional[str]:
    for address in candidates:
        if _usable(address):
            return address
    return None


def _hostname_addresses() -> list:
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET, socket.SOCK_DGRAM)
    except OSError:
        return []
    return [info[4][0] for info in infos]


def _routed_address() -> Optional[str]:
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    except OSError:
        return None
    try:
        sock.connect(_PROBE)
        return sock.getsockname()[0]
    except OSError:
        return None
    finally:
        sock.close()


def local_ipv4() -> str:
    """Return one non-loopback IPv4 address of this host, or ``0.0.0.0``
    when none can be found.
    """

    address = _first_usable(_hostname_addresses())
    if address is None:
        address = _first_usable([_routed_address() or ""])
    return address or ANY

"""Transport layer: UDP sockets and local interface lookup."""

from .base import TransportError, TransportPortError
from . import interfaces
from . import udp

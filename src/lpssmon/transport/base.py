"""Transport-layer exceptions."""

from __future__ import annotations


class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportPortError(TransportError):
    """No suitable port could be bound, or a multicast group joined."""

""" Passive monitor for LPSS publish/subscribe networks. Listens for node
    and endpoint announcements, keeps a live topology of nodes and the
    topics they publish or subscribe to, and exposes it through a small
    interactive console and a GraphViz export.
"""

# Utility components.

from . import config
from . import protocol
from . import transport

# Core.

from . import topology
from . import discovery
from . import graph
from . import console

from .topology import Topology
from .monitor import Monitor, main

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

""" Encoding and decoding of the two LPSS discovery announcements. Node
    announcements (:mod:`.node`) identify participants; endpoint
    announcements (:mod:`.endpoint`) describe the topics they publish or
    subscribe to. Both share the fixed header defined in :mod:`.frame`.
"""

from . import frame
from . import guid
from . import node
from . import endpoint

from .frame import DecodeError, minimum_frame, tagged
from .guid import Guid, prefix
from .node import Locator, NodeMessage
from .endpoint import EndpointMessage, EndpointType

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

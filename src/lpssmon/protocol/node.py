""" Node announcements: the periodic broadcast by which an LPSS participant
    advertises its identity, display name, and the locators where it will
    accept endpoint announcements. After the common header (whose
    message-specific byte holds the locator count) and the name, each
    locator is six bytes: a port number followed by an IPv4 address.
"""

import socket
import struct

from . import frame
from .guid import Guid

tag = b'N'

_locator = struct.Struct('!H4s')


class Locator:
    """ A (*port*, *address*) pair at which a node can be reached. The
        address is kept as a dotted-quad string.
    """

    __slots__ = ('port', 'address')

    def __init__(self, port, address):
        self.port = int(port)
        self.address = str(address)


    def __eq__(self, other):
        if isinstance(other, Locator):
            return (self.port, self.address) == (other.port, other.address)
        return NotImplemented


    def __iter__(self):
        return iter((self.port, self.address))


    def __repr__(self):
        return 'Locator(%d, %r)' % (self.port, self.address)


# end of class Locator



class NodeMessage:
    """ A decoded, or to-be-encoded, node announcement.
    """

    def __init__(self, guid=None, name='', locators=None):

        if guid is None:
            guid = Guid()
        elif not isinstance(guid, Guid):
            guid = Guid(guid)

        self.guid = guid
        self.name = name
        self.locators = list()

        if locators:
            for locator in locators:
                if not isinstance(locator, Locator):
                    locator = Locator(*locator)
                self.locators.append(locator)


    def __repr__(self):
        return 'NodeMessage(%r, %r, %r)' % (self.guid, self.name, self.locators)


    def serialize(self):

        if len(self.locators) > 0xFF:
            raise ValueError('too many locators: %d' % (len(self.locators)))

        parts = [frame.pack(tag, len(self.locators), self.guid.full, self.name)]

        for locator in self.locators:
            address = socket.inet_aton(locator.address)
            parts.append(_locator.pack(locator.port, address))

        return b''.join(parts)


    @classmethod
    def deserialize(cls, data):
        count, guid, name, offset = frame.unpack(data, tag)

        end = offset + count * _locator.size
        if end > len(data):
            raise frame.DecodeError('truncated locator list')

        locators = list()
        for index in range(count):
            port, address = _locator.unpack_from(data, offset + index * _locator.size)
            locators.append(Locator(port, socket.inet_ntoa(address)))

        return cls(Guid(guid), name, locators)


# end of class NodeMessage


def serialize(message):
    return message.serialize()


def deserialize(data):
    return NodeMessage.deserialize(data)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

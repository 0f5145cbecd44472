""" Endpoint announcements: one message per publisher (writer) or
    subscriber (reader) a node exposes. After the common header, whose
    message-specific byte holds the endpoint type, come the topic name and
    a length-prefixed message type name.
"""

import enum

from . import frame
from .guid import Guid

tag = b'E'


class EndpointType(enum.IntEnum):
    WRITER = 0
    READER = 1



class EndpointMessage:
    """ A decoded, or to-be-encoded, endpoint announcement. The owning node
        is recovered from the 48-bit prefix of *endpoint_guid*.
    """

    Type = EndpointType

    def __init__(self, endpoint_guid=None, type=EndpointType.WRITER, topic='', msg_type=''):

        if endpoint_guid is None:
            endpoint_guid = Guid()
        elif not isinstance(endpoint_guid, Guid):
            endpoint_guid = Guid(endpoint_guid)

        self.endpoint_guid = endpoint_guid
        self.type = EndpointType(type)
        self.topic = topic
        self.msg_type = msg_type


    def __repr__(self):
        return 'EndpointMessage(%r, %s, %r, %r)' % (self.endpoint_guid, self.type.name, self.topic, self.msg_type)


    def serialize(self):
        head = frame.pack(tag, int(self.type), self.endpoint_guid.full, self.topic)
        return head + frame.pack_string(self.msg_type)


    @classmethod
    def deserialize(cls, data):
        data = bytes(data)
        type, guid, topic, offset = frame.unpack(data, tag)

        try:
            type = EndpointType(type)
        except ValueError:
            raise frame.DecodeError('unknown endpoint type: %d' % (type))

        msg_type, offset = frame.unpack_string(data, offset)

        return cls(Guid(guid), type, topic, msg_type)


# end of class EndpointMessage


def serialize(message):
    return message.serialize()


def deserialize(data):
    return EndpointMessage.deserialize(data)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

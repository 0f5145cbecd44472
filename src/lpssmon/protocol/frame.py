""" The fixed header shared by both LPSS discovery messages. On the wire
    every announcement starts with the same 14 bytes, all integers in
    network byte order::

        offset  size  field
        0       1     tag: b'N' (node) or b'E' (endpoint)
        1       1     protocol version
        2       1     message-specific byte
        3       1     reserved, zero
        4       8     GUID
        12      2     length of the first variable-size string

    The string follows immediately as UTF-8; anything after it is
    interpreted by the specific message type.
"""

import struct

version = 1

header = struct.Struct('!cBBxQH')
minimum_frame = header.size


class DecodeError(ValueError):
    """ The bytes provided do not form a valid announcement.
    """
    pass



def tagged(data, tag):
    """ Return True if *data* is long enough to hold a header and begins
        with the single-byte *tag*. This is the cheap check listeners apply
        before attempting a full decode.
    """

    return len(data) >= minimum_frame and data[:1] == tag



def pack(tag, extra, guid, text):

    text = text.encode('utf-8')
    if len(text) > 0xFFFF:
        raise ValueError('string too long for announcement: %d bytes' % (len(text)))

    return header.pack(tag, version, extra, guid, len(text)) + text



def unpack(data, tag):
    """ Returns (extra, guid, text, offset), where *offset* is the index of
        the first byte following *text*.
    """

    data = bytes(data)

    if len(data) < minimum_frame:
        raise DecodeError('frame too short: %d bytes' % (len(data)))

    found, found_version, extra, guid, length = header.unpack_from(data)

    if found != tag:
        raise DecodeError('unexpected tag: ' + repr(found))

    if found_version != version:
        raise DecodeError('unsupported protocol version: %d' % (found_version))

    offset = minimum_frame + length
    if offset > len(data):
        raise DecodeError('truncated string field')

    try:
        text = data[minimum_frame:offset].decode('utf-8')
    except UnicodeDecodeError as e:
        raise DecodeError('string field is not UTF-8') from e

    return extra, guid, text, offset



def pack_string(text):
    text = text.encode('utf-8')
    if len(text) > 0xFFFF:
        raise ValueError('string too long for announcement: %d bytes' % (len(text)))

    return struct.pack('!H', len(text)) + text



def unpack_string(data, offset):

    if offset + 2 > len(data):
        raise DecodeError('truncated string length')

    length, = struct.unpack_from('!H', data, offset)
    start = offset + 2
    end = start + length

    if end > len(data):
        raise DecodeError('truncated string field')

    try:
        text = data[start:end].decode('utf-8')
    except UnicodeDecodeError as e:
        raise DecodeError('string field is not UTF-8') from e

    return text, end


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

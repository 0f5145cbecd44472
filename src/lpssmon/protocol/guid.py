""" Identifiers for LPSS participants. A :class:`Guid` is a 64-bit value;
    nodes and the endpoints they own share the same low 48 bits, with the
    upper 16 bits distinguishing individual endpoints within a node.
"""

prefix_mask = 0xFFFFFFFFFFFF


class Guid:
    """ Immutable wrapper around the *full* 64-bit identifier.
    """

    __slots__ = ('full',)

    def __init__(self, full=0):
        full = int(full)
        if full < 0 or full > 0xFFFFFFFFFFFFFFFF:
            raise ValueError('GUID out of range: ' + repr(full))

        object.__setattr__(self, 'full', full)


    def __setattr__(self, name, value):
        raise AttributeError('Guid instances are immutable')


    def __eq__(self, other):
        if isinstance(other, Guid):
            return self.full == other.full
        return NotImplemented


    def __hash__(self):
        return hash(self.full)


    def __repr__(self):
        return 'Guid(0x%016x)' % (self.full)


    @property
    def prefix(self):
        return prefix(self)


    @property
    def entity(self):
        return self.full >> 48


    @classmethod
    def make(cls, prefix, entity=0):
        """ Build the GUID of an endpoint numbered *entity* belonging to the
            node whose 48-bit identifier is *prefix*.
        """

        return cls((int(entity) & 0xFFFF) << 48 | (int(prefix) & prefix_mask))


# end of class Guid



def prefix(guid):
    """ Return the 48-bit node identifier for *guid*, which may be a
        :class:`Guid` or a bare integer. The upper 16 bits are discarded:
        two distinct GUIDs sharing the low 48 bits map to the same node,
        and that collision is accepted rather than corrected here.
    """

    try:
        full = guid.full
    except AttributeError:
        full = int(guid)

    return full & prefix_mask


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

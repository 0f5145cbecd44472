import socket
import time

import pytest

import lpssmon


@pytest.fixture
def topology():
    return lpssmon.Topology()


@pytest.fixture
def receiver():
    """ A loopback UDP socket for catching what the code under test sends.
    """

    sock = lpssmon.transport.udp.unicast_listener('127.0.0.1')
    sock.settimeout(2)

    yield sock

    sock.close()


@pytest.fixture
def sender():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)

    yield sock

    sock.close()


def eventually(condition, timeout=2):
    """ Poll *condition* until it returns True or *timeout* seconds pass.
        Background threads need a moment to see loopback traffic.
    """

    expiration = time.time() + timeout
    while time.time() < expiration:
        if condition():
            return True
        time.sleep(0.01)

    return condition()

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

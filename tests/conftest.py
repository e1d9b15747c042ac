"""
Shared fixtures for the attack tests.
"""

import secrets

import pytest


class RecordingOracle(object):
    """Forwards to another oracle and remembers every input it was asked to encrypt."""

    def __init__(self, target):
        self.target = target
        self.inputs = []

    def encrypt(self, data):
        self.inputs.append(bytes(data))
        return self.target.encrypt(data)


@pytest.fixture
def rollin():
    """The first line of the classic byte-at-a-time secret."""
    return b"Rollin' in my 5.0\n"


@pytest.fixture
def random_bytes():
    """Factory for random byte strings of a given length."""
    return secrets.token_bytes


@pytest.fixture
def recording():
    """Factory wrapping an oracle into a `RecordingOracle`."""
    return RecordingOracle

"""Pytest configuration and shared fixtures."""

import copy
import pytest

from object_editor.events import MutationChannel


TUNNEL = {
    "_id": "65f1c0a2e4b0a1b2c3d4e5f6",
    "Tag": "office",
    "MTU": None,
    "EnableDefaultRoute": False,
    "DNSServers": ["9.9.9.9", "1.1.1.1"],
    "Networks": [
        {
            "Tag": "n1",
            "Nat": "",
            "Routes": [{"Address": "0.0.0.0/0", "Metric": "0"}]
        },
        {
            "Tag": "n2",
            "Nat": "10.0.0.0/24",
            "Routes": []
        }
    ],
    "DNS": {
        "Blocking": True,
        "Records": [{"Domain": "printer.lan", "IP": ["192.168.1.40"]}]
    }
}


@pytest.fixture
def tunnel():
    """A fresh copy of a nested tunnel configuration."""
    return copy.deepcopy(TUNNEL)


class RecordingChannel(MutationChannel):
    """MutationChannel that remembers every event it delivered."""

    def __init__(self):
        super().__init__()
        self.events = []
        self.subscribe(self.events.append)


@pytest.fixture
def channel():
    return RecordingChannel()


def _collect(view):
    found = {}
    for node in view.iter_views():
        found[node.identity] = node
    return found


@pytest.fixture
def find_view():
    """Look up a control, group or placeholder of an EditorView by identity."""
    def finder(view, identity):
        return _collect(view)[identity]
    return finder


@pytest.fixture
def identities():
    """All identities of an EditorView in render order."""
    def lister(view):
        return list(_collect(view))
    return lister

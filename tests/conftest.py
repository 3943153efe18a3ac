import copy
from concurrent.futures import Future

import pytest

from habitgrid.core.registry import HabitRegistry
from habitgrid.services.data_service import PersistenceError


class RecordingGateway:
    """In-memory gateway that keeps every committed document"""

    def __init__(self):
        self.documents = []

    def commit(self, document):
        self.documents.append(copy.deepcopy(document))
        future = Future()
        future.set_result(True)
        return future

    def load(self):
        return copy.deepcopy(self.documents[-1]) if self.documents else {}


class FailingGateway:
    """Gateway whose commits always fail"""

    def __init__(self):
        self.calls = 0

    def commit(self, document):
        self.calls += 1
        future = Future()
        future.set_exception(PersistenceError("disk full"))
        return future


@pytest.fixture
def gateway():
    return RecordingGateway()


@pytest.fixture
def registry(gateway):
    return HabitRegistry(gateway=gateway)

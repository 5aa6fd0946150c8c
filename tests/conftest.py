"""Shared test fixtures for scopelog tests."""

import io
import json

import pytest

from scopelog import Logger, Scope


class Collector:
    def __init__(self):
        self.items = []
        self.errors = []

    def on_next(self, value):
        self.items.append(value)

    def on_error(self, error):
        self.errors.append(error)

    def on_completed(self):
        pass


def read_records(sink: io.BytesIO) -> list[dict]:
    """Decode every JSON line written to ``sink``."""
    lines = sink.getvalue().decode("utf-8").splitlines()
    return [json.loads(line) for line in lines if line]


@pytest.fixture
def sink():
    return io.BytesIO()


@pytest.fixture
def log(sink):
    return Logger(sink)


@pytest.fixture
def scope():
    return Scope()


@pytest.fixture
def collector():
    return Collector()

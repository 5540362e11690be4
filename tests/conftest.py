import random

import pytest

import config


class ScriptedRandom(random.Random):
    """random() returns queued values in order, 0.5 once the queue is empty."""

    def __init__(self, values=()):
        super().__init__(0)
        self.values = list(values)

    def random(self):
        return self.values.pop(0) if self.values else 0.5


@pytest.fixture
def scripted():
    return ScriptedRandom


@pytest.fixture
def no_round_timer(monkeypatch):
    monkeypatch.setattr(config, "ROUND_SECONDS", 0)

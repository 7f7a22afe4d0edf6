import random

import pytest
from fastapi.testclient import TestClient

from verifier.app import app, get_config, get_sender, get_store
from verifier.config import EmailConfig
from verifier.errors import DeliveryError
from verifier.verify import VerificationStore


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeSender:
    def __init__(self):
        self.sent = []
        self.error = None

    def __call__(self, config, to_email, code, ttl_seconds):
        if self.error:
            raise DeliveryError(f"Failed to send verification email: {self.error}")
        self.sent.append((to_email, code))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return VerificationStore(clock=clock, rng=random.Random(1234))


@pytest.fixture
def config():
    return EmailConfig(
        smtp_server="smtp.mail.test",
        smtp_port=587,
        smtp_user="mailer",
        smtp_password="secret",
        smtp_from="noreply@mail.test",
        api_key="key",
    )


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def client(store, config, sender):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_config] = lambda: config
    app.dependency_overrides[get_sender] = lambda: sender
    yield TestClient(app)
    app.dependency_overrides.clear()

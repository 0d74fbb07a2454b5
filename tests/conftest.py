from datetime import datetime

import numpy as np
import pytest

from app import create_app
from background.config import floating_particles, hero_scene
from background.headless import HeadlessBackend, HeadlessSurface
from extensions import db
from utils.storage import MemoryContactStorage


VALID_PAYLOAD = {
    'name': 'Jo',
    'email': 'a@b.com',
    'subject': 'Hi',
    'message': '1234567890',
}


@pytest.fixture
def app():
    app = create_app('testing')
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def valid_payload():
    return dict(VALID_PAYLOAD)


@pytest.fixture
def memory_storage():
    return MemoryContactStorage()


@pytest.fixture
def submitted_at():
    return datetime(2024, 5, 1, 12, 30, 0)


@pytest.fixture
def backend():
    return HeadlessBackend()


@pytest.fixture
def surface():
    return HeadlessSurface(width=1280, height=720, device_pixel_ratio=3.0)


@pytest.fixture
def rng():
    return np.random.default_rng(7)


@pytest.fixture
def drift_config():
    return floating_particles(count=40)


@pytest.fixture
def wave_config():
    return hero_scene(count=60)

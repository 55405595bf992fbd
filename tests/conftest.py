import pytest
from fastapi.testclient import TestClient

from main import create_app
from soundstore.config import Settings


@pytest.fixture
def settings(tmp_path):
    return Settings(sounds_dir=tmp_path / "sounds")


@pytest.fixture
def uploads_dir(settings):
    return settings.uploads_dir


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as client:
        yield client


def stored_files(directory):
    return sorted(p.name for p in directory.iterdir())

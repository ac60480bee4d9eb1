import pytest

from clock.slots import PoemCache
from db.database import Database


class FakeGenerator:
    """Records every label it is asked for and answers with a predictable poem."""

    model = "test/model"

    def __init__(self):
        self.calls = []

    def generate(self, time_label):
        self.calls.append(time_label)
        return f"poem for {time_label}"


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


def run_now(fn, *args):
    fn(*args)


@pytest.fixture
def db(tmp_path):
    database = Database(tmp_path / "data" / "poems.db")
    yield database
    database.close()


@pytest.fixture
def cache():
    return PoemCache()


@pytest.fixture
def generator():
    return FakeGenerator()

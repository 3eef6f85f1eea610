import pytest


class FixedRandom:
    """Stand-in for random.Random with preset draws."""

    def __init__(self, p: float = 0.10, coin: float = 0.0):
        self.p = p
        self.coin = coin
        self.calls = 0

    def uniform(self, a, b):
        self.calls += 1
        return self.p

    def random(self):
        self.calls += 1
        return self.coin


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_reviews.db")
    return db_path


@pytest.fixture
def fixed_rng():
    return FixedRandom

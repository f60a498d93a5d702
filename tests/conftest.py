import pytest


@pytest.fixture(autouse=True)
def restore_node_env(monkeypatch):
    # run() writes NODE_ENV straight into os.environ; register it with
    # monkeypatch so the original value comes back after each test.
    monkeypatch.setenv("NODE_ENV", "development")

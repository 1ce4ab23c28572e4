import pytest

from securecm import SecureConfigStore


@pytest.fixture
def secret_key():
    return "0123456789abcdef0123456789abcdef"


@pytest.fixture
def other_key():
    return "fedcba9876543210fedcba9876543210"


@pytest.fixture
def config_dir(tmp_path):
    """Directory for configuration files (not created yet)."""
    return tmp_path / "config"


@pytest.fixture
def store(config_dir, secret_key):
    """Store for the 'test' environment."""
    return SecureConfigStore(env="test", config_dir=config_dir, secret_key=secret_key)

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from typedstore.core.config import Settings, get_settings
from typedstore.domain.entities.document import ValidationLevel


def test_settings_defaults():
    """Test that settings load with correct defaults."""
    get_settings.cache_clear()

    settings = Settings(_env_file=None)

    assert settings.log_level == "INFO"
    assert settings.log_format == "console"
    assert settings.log_operations is False
    assert settings.validation_level is ValidationLevel.OFF
    assert settings.init_wait_attempts == 3
    assert settings.init_wait_delay == 2.0


def test_settings_env_override():
    """Test that environment variables override defaults."""
    get_settings.cache_clear()

    with patch.dict(os.environ, {
        "TYPEDSTORE_LOG_OPERATIONS": "true",
        "TYPEDSTORE_LOG_FORMAT": "json",
        "TYPEDSTORE_DATA_DIR": "/tmp/typedstore-test",
        "TYPEDSTORE_INIT_WAIT_ATTEMPTS": "5",
    }):
        settings = Settings(_env_file=None)

        assert settings.log_operations is True
        assert settings.log_format == "json"
        assert settings.data_dir == "/tmp/typedstore-test"
        assert settings.init_wait_attempts == 5


def test_validation_level_accepts_names():
    """Test that validation levels can be given by name."""
    with patch.dict(os.environ, {"TYPEDSTORE_VALIDATION_LEVEL": "on_and_reject"}):
        settings = Settings(_env_file=None)
        assert settings.validation_level is ValidationLevel.ON_AND_REJECT


def test_validation_level_accepts_numbers():
    """Test that validation levels can be given by number."""
    with patch.dict(os.environ, {"TYPEDSTORE_VALIDATION_LEVEL": "2"}):
        settings = Settings(_env_file=None)
        assert settings.validation_level is ValidationLevel.ON_AND_LOG

    assert Settings(_env_file=None, validation_level=1).validation_level is ValidationLevel.ON


def test_validation_level_rejects_unknown_name():
    """Test that an unknown level name fails validation."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, validation_level="sometimes")


def test_init_wait_bounds():
    """Test that init wait settings are range checked."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, init_wait_attempts=0)

    with pytest.raises(ValidationError):
        Settings(_env_file=None, init_wait_delay=-1)


def test_get_settings_is_cached():
    """Test that get_settings returns the same instance."""
    get_settings.cache_clear()

    assert get_settings() is get_settings()

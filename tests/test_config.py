from datetime import timedelta

import pytest

from invitegate.config import Settings
from invitegate.exceptions import ConfigError

REQUIRED = {
    'PORT': '3001',
    'DATABASE_URL': 'sqlite:///test.sqlite',
    'JWT_SECRET': 'secret',
}


def test_defaults_apply_when_only_required_values_set():
    settings = Settings.from_env(environ=dict(REQUIRED))

    assert settings.port == 3001
    assert settings.database_url == 'sqlite:///test.sqlite'
    assert settings.jwt_secret == 'secret'
    assert settings.debug is False
    assert settings.access_token_expires == timedelta(hours=1)
    assert settings.refresh_token_expires == timedelta(days=7)
    assert settings.password_hash_method == 'scrypt'
    assert settings.cleanup_interval == timedelta(hours=1)


@pytest.mark.parametrize('missing', sorted(REQUIRED))
def test_missing_required_variable_is_fatal(missing):
    environ = {k: v for k, v in REQUIRED.items() if k != missing}

    with pytest.raises(ConfigError) as exc:
        Settings.from_env(environ=environ)
    assert missing in str(exc.value)


def test_empty_required_variable_counts_as_missing():
    with pytest.raises(ConfigError):
        Settings.from_env(environ={**REQUIRED, 'JWT_SECRET': ''})


def test_typed_values_are_parsed():
    settings = Settings.from_env(environ={
        **REQUIRED,
        'DEBUG_MODE': 'TRUE',
        'ACCESS_TOKEN_EXPIRES_MINUTES': '15',
        'REFRESH_TOKEN_EXPIRES_DAYS': '30',
        'LOG_LEVEL': 'debug',
    })

    assert settings.debug is True
    assert settings.access_token_expires == timedelta(minutes=15)
    assert settings.refresh_token_expires == timedelta(days=30)
    assert settings.log_level == 'DEBUG'


@pytest.mark.parametrize('key, value', [
    ('PORT', 'eighty'),
    ('DEBUG_MODE', 'yes'),
    ('ACCESS_TOKEN_EXPIRES_MINUTES', '1.5'),
])
def test_malformed_values_are_fatal(key, value):
    with pytest.raises(ConfigError):
        Settings.from_env(environ={**REQUIRED, key: value})

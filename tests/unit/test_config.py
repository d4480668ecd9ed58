import pytest

from subscription_api.core.config import validate_config


def test_defaults_validate(settings_factory):
    validate_config(settings_factory())


def test_whitelist_ids_split(settings_factory):
    settings = settings_factory(WHITELISTED_SUBSCRIBER_IDS=" 94770000001, ,94770000002 ")

    assert settings.whitelisted_subscriber_ids == ["94770000001", "94770000002"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"IDENTITY_PROVIDER": "stub"},
        {"JWT_SECRET": "dev-secret-change-me"},
        {"ENABLE_WHITELIST": True},
        {"DATABASE_URL": "sqlite:///./sessions.db"},
    ],
)
def test_prod_refuses_unsafe_settings(settings_factory, overrides):
    values = dict(
        ENV="prod",
        IDENTITY_PROVIDER="jwt",
        JWT_SECRET="a-real-secret",
        ENABLE_WHITELIST=False,
        DATABASE_URL="postgresql+psycopg://user:pass@db/subscriptions",
    )
    values.update(overrides)

    with pytest.raises(ValueError):
        validate_config(settings_factory(**values))


def test_prod_accepts_safe_settings(settings_factory):
    validate_config(settings_factory(
        ENV="prod",
        IDENTITY_PROVIDER="jwt",
        JWT_SECRET="a-real-secret",
        ENABLE_WHITELIST=False,
        DATABASE_URL="postgresql+psycopg://user:pass@db/subscriptions",
    ))


def test_retry_attempts_must_be_positive(settings_factory):
    with pytest.raises(ValueError):
        validate_config(settings_factory(IDENTITY_SAVE_MAX_ATTEMPTS=0))


def test_dialog_base_url_has_no_default(monkeypatch):
    import importlib

    from subscription_api.core import config as config_module

    monkeypatch.delenv("DIALOG_BASE_URL", raising=False)
    fields = importlib.reload(config_module).Settings.model_fields
    try:
        assert fields["DIALOG_BASE_URL"].default == ""
    finally:
        importlib.reload(config_module)


def test_unset_dialog_url_is_not_configured(settings_factory):
    from subscription_api.services.telco import Provider, build_provider_table

    providers = build_provider_table(settings_factory(DIALOG_BASE_URL=""))

    assert providers[Provider.DIALOG].is_configured is False
    assert providers[Provider.MOBITEL].is_configured is True

from cohort_efforts.core.observability import init_sentry
from cohort_efforts.settings import Settings


def test_init_sentry_skips_when_dsn_missing(monkeypatch) -> None:
    """Sentry initialization is skipped when DSN is absent."""

    calls: list[dict[str, object]] = []

    def fake_init(**kwargs):
        calls.append(kwargs)

    monkeypatch.setattr("cohort_efforts.core.observability.sentry_sdk.init", fake_init)

    settings = Settings(sentry_dsn=None)
    init_sentry(settings)

    assert calls == []


def test_init_sentry_initializes_sdk_with_settings(monkeypatch) -> None:
    """Sentry SDK is initialized with configured runtime settings."""

    calls: list[dict[str, object]] = []

    def fake_init(**kwargs):
        calls.append(kwargs)

    monkeypatch.setattr("cohort_efforts.core.observability.sentry_sdk.init", fake_init)

    settings = Settings(
        sentry_dsn="https://examplePublicKey@o0.ingest.sentry.io/0",
        environment="production",
        release="abc123",
        sentry_traces_sample_rate=0.2,
    )
    init_sentry(settings)

    assert len(calls) == 1
    assert calls[0] == {
        "dsn": "https://examplePublicKey@o0.ingest.sentry.io/0",
        "environment": "production",
        "release": "abc123",
        "traces_sample_rate": 0.2,
        "send_default_pii": False,
    }


def test_create_app_initializes_sentry_from_environment(monkeypatch) -> None:
    """The app factory hands environment-derived settings to Sentry."""

    from cohort_efforts import main

    captured: list[Settings] = []
    monkeypatch.setenv("SENTRY_DSN", "https://examplePublicKey@o0.ingest.sentry.io/0")
    monkeypatch.setenv("ENVIRONMENT", "staging")
    monkeypatch.setenv("RELEASE", "cohort-efforts@1.4.0")
    monkeypatch.setattr(main, "init_sentry", captured.append)

    app = main.create_app()

    assert len(captured) == 1
    assert captured[0].sentry_dsn == "https://examplePublicKey@o0.ingest.sentry.io/0"
    assert captured[0].environment == "staging"
    assert captured[0].release == "cohort-efforts@1.4.0"
    assert {route.path for route in app.routes} >= {"/efforts/weekly", "/health/live"}

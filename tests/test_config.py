"""Tests for configuration parsing."""

import pytest

from macro_money.config import Settings, parse_allowed_origins


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, []),
        ("", []),
        ("*", ["*"]),
        (
            "https://app.example.com/, http://localhost:5173",
            ["https://app.example.com", "http://localhost:5173"],
        ),
    ],
)
def test_parse_allowed_origins(raw: str | None, expected: list[str]) -> None:
    assert parse_allowed_origins(raw) == expected


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", "service-key")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    settings = Settings()

    assert settings.openai_api_key is None
    assert settings.default_timezone == "UTC"
    assert settings.estimation_timeout_seconds == 8.0
    assert settings.supabase_timeout_seconds == 10

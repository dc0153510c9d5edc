from __future__ import annotations

from coach_advisor.config.settings import Settings


def test_settings_fields_are_the_documented_set() -> None:
    assert set(Settings.model_fields) == {
        "db_url",
        "schema_pg_file",
        "openai_api_key",
        "openai_model",
        "use_ai_estimates",
        "use_memory_stores",
        "forecast_tolerance",
        "log_level",
        "api_key",
        "api_host",
        "api_port",
        "api_cors_origins",
    }


def test_schema_file_ships_inside_the_package(monkeypatch) -> None:
    monkeypatch.delenv("SCHEMA_PG_FILE", raising=False)
    schema = Settings().schema_pg_file
    assert schema.parts[-3:] == ("coach_advisor", "db", "schema_pg.sql")
    assert schema.is_file()

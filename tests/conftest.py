"""Root pytest configuration.

Test Structure:
    tests/
    └── unit/
        ├── domain/            # Value objects and pure domain services
        ├── application/       # Pipeline, rate cache, converter, commands
        ├── infrastructure/    # HTTP adapters (MockTransport) and SQLite persistence
        └── presentation/      # Typer CLI
"""

import pytest

from budgetbuddy_config import clear_settings_cache


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Point every test at a throwaway SQLite file."""
    monkeypatch.setenv(
        "DATABASE_URL",
        f"sqlite+aiosqlite:///{tmp_path / 'budgetbuddy.db'}",
    )
    clear_settings_cache()
    yield
    clear_settings_cache()

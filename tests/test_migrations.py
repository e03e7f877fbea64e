# mypy: ignore-errors
"""Tests for the Alembic migration chain and packaging metadata."""

import tomllib
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from colloquium.db.session import Base

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _alembic_config() -> Config:
    config = Config()
    config.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    return config


def test_upgrade_matches_models(tmp_path, monkeypatch) -> None:
    """Migrating an empty database yields every table the models declare."""
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.setenv("ALEMBIC_URL", url)
    config = _alembic_config()

    command.upgrade(config, "head")

    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        assert set(Base.metadata.tables) <= set(inspector.get_table_names())
        for table in Base.metadata.sorted_tables:
            migrated = {column["name"] for column in inspector.get_columns(table.name)}
            assert set(table.columns.keys()) == migrated, table.name

        command.downgrade(config, "base")
        assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
    finally:
        engine.dispose()


def test_package_readme_exists() -> None:
    with (PROJECT_ROOT / "pyproject.toml").open("rb") as handle:
        project = tomllib.load(handle)["project"]
    readme = PROJECT_ROOT / project["readme"]
    assert readme.name == "README.md"
    assert readme.is_file()

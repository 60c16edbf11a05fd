"""Unit tests for the `geotarget-api index` CLI commands."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest
from sqlalchemy import create_engine
from typer.testing import CliRunner

from geotarget_api.cli.app import app
from geotarget_api.models.base import Base

runner = CliRunner()

INDEX_CSV = (
    "zip_code,city,county,state,country_code,criteria_id\n"
    "30096,Duluth,Gwinnett,GA,US,9010945\n"
    "30097,Duluth,Gwinnett,GA,US,\n"
    "55802,Duluth,St. Louis,MN,US,9019590\n"
    "02108,Boston,Suffolk,MA,US,1018127\n"
    ",Nowhere,Nowhere,GA,US,\n"
)


@pytest.fixture
def database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the CLI at an empty index database file."""
    db_path = tmp_path / "index.db"
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)
    engine.dispose()

    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    monkeypatch.setenv("SESSION_SECRET_KEY", "test-session-secret-key-not-for-production")
    monkeypatch.delenv("LOG_DIR", raising=False)
    return db_path


@pytest.fixture
def index_file(tmp_path: Path) -> Path:
    path = tmp_path / "index.csv"
    path.write_text(INDEX_CSV)
    return path


@pytest.fixture
def loaded(database: Path, index_file: Path) -> Path:
    result = runner.invoke(app, ["index", "import", str(index_file)])
    assert result.exit_code == 0, result.output
    return database


class TestImportCommand:
    """Tests for `index import`."""

    def test_import_reports_counts(self, database: Path, index_file: Path) -> None:
        result = runner.invoke(app, ["index", "import", str(index_file), "--batch-size", "2"])

        assert result.exit_code == 0, result.output
        assert "Total rows:  5" in result.output
        assert "Inserted:    4" in result.output
        assert "Skipped:     1" in result.output

    def test_reimport_updates(self, loaded: Path, index_file: Path) -> None:
        result = runner.invoke(app, ["index", "import", str(index_file)])

        assert result.exit_code == 0, result.output
        assert "Inserted:    0" in result.output
        assert "Updated:     4" in result.output

    def test_missing_columns_exit_1(self, database: Path, tmp_path: Path) -> None:
        bad = tmp_path / "bad.csv"
        bad.write_text("zip,town\n30097,Duluth\n")

        result = runner.invoke(app, ["index", "import", str(bad)])

        assert result.exit_code == 1
        assert "Import failed" in result.output

    def test_missing_file(self, database: Path, tmp_path: Path) -> None:
        result = runner.invoke(app, ["index", "import", str(tmp_path / "absent.csv")])
        assert result.exit_code != 0


class TestStatsCommand:
    """Tests for `index stats`."""

    def test_empty_index(self, database: Path) -> None:
        result = runner.invoke(app, ["index", "stats"])

        assert result.exit_code == 0, result.output
        assert "Address index is empty" in result.output

    def test_counts_per_state(self, loaded: Path) -> None:
        result = runner.invoke(app, ["index", "stats"])

        assert result.exit_code == 0, result.output
        assert "GA: 2" in result.output
        assert "MA: 1" in result.output
        assert "Total: 4 mappings in 3 states" in result.output


class TestValidateCommand:
    """Tests for `index validate`."""

    @pytest.fixture
    def addresses(self, tmp_path: Path) -> Path:
        path = tmp_path / "addresses.csv"
        path.write_text("zip_code,city,county,name\n30097,,,Ada\n,Boston,,Grace\n,,,Linus\n")
        return path

    def test_summary(self, loaded: Path, addresses: Path) -> None:
        result = runner.invoke(app, ["index", "validate", str(addresses), "--state", "ga"])

        assert result.exit_code == 0, result.output
        assert "Validated 3 addresses against GA" in result.output
        assert "in_coverage: 1" in result.output
        assert "out_of_coverage: 1" in result.output
        assert "invalid_record: 1" in result.output

    def test_writes_output_csv(self, loaded: Path, addresses: Path, tmp_path: Path) -> None:
        output = tmp_path / "results.csv"

        result = runner.invoke(app, ["index", "validate", str(addresses), "-s", "GA", "-s", "MA", "-o", str(output)])

        assert result.exit_code == 0, result.output
        frame = pd.read_csv(output, dtype=str, keep_default_na=False)
        assert list(frame["classification"]) == ["in_coverage", "in_coverage", "invalid_record"]
        assert list(frame["state"]) == ["GA", "MA", ""]

    def test_invalid_state_exit_1(self, loaded: Path, addresses: Path) -> None:
        result = runner.invoke(app, ["index", "validate", str(addresses), "--state", "ZZ"])

        assert result.exit_code == 1
        assert "Invalid state codes: ZZ" in result.output

    def test_state_required(self, loaded: Path, addresses: Path) -> None:
        result = runner.invoke(app, ["index", "validate", str(addresses)])
        assert result.exit_code != 0

from datetime import date
from pathlib import Path
import pytest

from src.tabular.result_set import ResultSet

@pytest.fixture(scope="session")
def project_root() -> Path:
    return Path(__file__).resolve().parents[1]

@pytest.fixture(scope="session")
def cfg_path(project_root: Path) -> Path:
    return project_root / "config" / "config.toml"

@pytest.fixture(scope="session")
def cfg(cfg_path: Path):
    from src.config_model.model import load_config
    return load_config(str(cfg_path))

@pytest.fixture
def people() -> ResultSet:
    return ResultSet.from_rows(["id", "name"], [[1, "Alice"], [2, "Bob"]])

@pytest.fixture
def sales() -> ResultSet:
    # date, text label, two numeric series
    return ResultSet.from_rows(
        ["day", "region", "units", "revenue"],
        [
            [date(2024, 1, 1), "north", 10, 100.5],
            [date(2024, 1, 2), "south", 20, 210.0],
            [date(2024, 1, 3), "east", 5, 48.25],
        ],
    )

@pytest.fixture
def csv_file(tmp_path: Path) -> Path:
    p = tmp_path / "sales.csv"
    p.write_text(
        "region,units,revenue,day\n"
        "north,10,100.5,2024-01-01\n"
        "south,20,210.0,2024-01-02\n"
        "east,5,48.25,2024-01-03\n",
        encoding="utf-8",
    )
    return p

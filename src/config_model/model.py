from __future__ import annotations
from typing import Literal, Optional
from pathlib import Path
import os
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
)


# ---------- Leaf models ----------

class EnvCfg(BaseModel):
    project_name: str = "chartview"
    theme: str = "dark_blue"


class DuckDBCfg(BaseModel):
    database: str = ":memory:"
    row_limit: int = Field(1000, ge=1)
    table: str = "uploaded"


class ChartsCfg(BaseModel):
    title: str = "Numeric data visualization"
    legend_position: Literal["top", "bottom", "left", "right"] = "top"
    responsive: bool = True
    # series colors: hsla((index * hue_step) % 360, saturation%, lightness%, alpha)
    hue_step: int = 137
    saturation: float = Field(70.0, ge=0, le=100)
    lightness: float = Field(50.0, ge=0, le=100)
    fill_alpha: float = Field(0.6, ge=0, le=1)
    stroke_alpha: float = Field(1.0, ge=0, le=1)
    # PNG (Playwright) settings
    png_width: int = 1200
    png_height: int = 700
    png_scale: float = 2.0


class LoggingCfg(BaseModel):
    level: str = "INFO"
    structured_json: bool = True


# ---------- Root ----------

class RootCfg(BaseModel):
    model_config = ConfigDict(extra="ignore")

    env: EnvCfg = EnvCfg()
    duckdb: DuckDBCfg = DuckDBCfg()
    charts: ChartsCfg = ChartsCfg()
    logging: LoggingCfg = LoggingCfg()

    # Private attribute (not a field); used only to resolve relative paths
    _config_dir: Optional[Path] = PrivateAttr(default=None)

    def _normalize_paths(self) -> "RootCfg":
        if self._config_dir is not None and self.duckdb.database != ":memory:":
            # config/ folder -> resolve against the project root, else against the file's dir
            base_dir = self._config_dir.parent if self._config_dir.name.lower() == "config" else self._config_dir
            p = Path(self.duckdb.database)
            if not p.is_absolute():
                self.duckdb.database = str((base_dir / p).resolve())
        return self

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str]) -> "RootCfg":
        try:
            import tomllib  # py>=3.11
        except ImportError:
            import tomli as tomllib

        p = Path(path)
        # utf-8-sig strips a BOM left by some editors
        text = p.read_text(encoding="utf-8-sig")
        try:
            raw = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            snippet = text.strip()[:80].replace("\n", "\\n")
            raise RuntimeError(f"Failed to parse TOML at {p}. First chars: {snippet!r}") from e

        cfg = cls(
            env=EnvCfg(**raw.get("env", {})),
            duckdb=DuckDBCfg(**raw.get("duckdb", {})),
            charts=ChartsCfg(**raw.get("charts", {})),
            logging=LoggingCfg(**raw.get("logging", {})),
        )
        cfg._config_dir = p.parent.resolve()
        return cfg._normalize_paths()

    @classmethod
    def load(cls, path: str | None = None) -> "RootCfg":
        final = Path(path or os.environ.get("CHARTVIEW_CFG", "config/config.toml")).resolve()
        return cls.from_toml(final)


def load_config(path: str | None = None) -> RootCfg:
    return RootCfg.load(path)

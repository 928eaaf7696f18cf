from __future__ import annotations
import argparse
import sys
from pathlib import Path

from src.chart.render import export_html, export_png, table_figure, to_chartjs_json, to_figure
from src.config_model.model import load_config
from src.ingestion.engine import QueryEngine, QueryError, initial_result_set
from src.pipeline import visualize
from src.utils.log import logger_from_cfg


def _print_table(rs, max_rows: int) -> None:
    df = rs.to_dataframe()
    print(df.head(max_rows).to_string(index=False))
    if rs.row_count > max_rows:
        print(f"... ({rs.row_count - max_rows} more rows)")


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Load a CSV or run SQL in DuckDB, then chart the numeric columns")
    source = ap.add_mutually_exclusive_group()
    source.add_argument("--csv", type=Path, help="CSV file to load into the upload table")
    source.add_argument("--sql", help="SQL to run against the embedded database")
    ap.add_argument("--init-csv", type=Path, action="append", default=[],
                    help="CSV loaded before --sql runs (repeatable; table name = file stem)")
    ap.add_argument("-o", "--outdir", type=Path, default=None, help="Write chart.html/table.html/chart.json here")
    ap.add_argument("--config", default=None, help="Path to config.toml")
    ap.add_argument("--theme", default=None, help="Theme name (defaults to config.env.theme)")
    ap.add_argument("--png", action="store_true", help="Also export chart.png via Playwright")
    ap.add_argument("--max-rows", type=int, default=20, help="Rows printed in the table preview")
    args = ap.parse_args(argv)

    cfg = load_config(args.config)
    log = logger_from_cfg(cfg)
    theme_name = args.theme or cfg.env.theme

    with QueryEngine.from_config(cfg) as engine:
        try:
            for p in args.init_csv:
                engine.load_csv(p, table=p.stem)
            if args.csv:
                rs = engine.load_csv(args.csv)
            elif args.sql:
                rs = engine.query(args.sql)
            else:
                rs = initial_result_set()
        except (QueryError, ValueError) as e:
            log.error("could not load data", extra={"error": str(e)})
            print(f"[ERROR] {e}", file=sys.stderr)
            return 1

    vis = visualize(rs, cfg=cfg)
    _print_table(rs, args.max_rows)
    print("column types:", ", ".join(f"{c}={t.value}" for c, t in zip(rs.columns, vis.column_types)))

    if not vis.has_chart:
        print(vis.message)
        return 0

    if args.outdir:
        outdir = args.outdir
        outdir.mkdir(parents=True, exist_ok=True)
        fig = to_figure(vis.chart, theme_name=theme_name)
        export_html(fig, str(outdir / "chart.html"), title=vis.chart.display_options.title)
        export_html(table_figure(rs, theme_name=theme_name), str(outdir / "table.html"), title="Result set")
        (outdir / "chart.json").write_text(to_chartjs_json(vis.chart, indent=2), encoding="utf-8")
        if args.png:
            try:
                export_png(fig, str(outdir / "chart.png"), charts_cfg=cfg.charts, engine="playwright")
            except Exception as e:
                print(f"[WARN] PNG export failed: {e}")
        print(f"Wrote chart to: {outdir.resolve()}")
    else:
        print(to_chartjs_json(vis.chart, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

import psycopg2
from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..db.memory import MemoryFleetStore
from ..db.postgres import PostgresFleetStore
from ..db.store import FleetStore
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import log_summary, set_debug, setup_logging
from ..models.config_models import DatabaseConfig, ImportConfig
from ..models.processing_result import ImportResult, PreviewResult
from ..parsing.reader import SourceReadError, read_source_rows
from ..services.importer import bulk_import_trucks, preview_rows
from ..services.progress import RowProgressTracker
from ..services.summary import render_summary_line
from ..services.template import write_template

"""CLI entrypoint.

Flow:
- Load .env (override) and config
- Read the source file (.csv or .xlsx)
- Preview (row cap gate, mapping report)
- Commit against PostgreSQL, or the in-memory store in mock mode
- Flush the row error log and print the SUMMARY line
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _build_dsn(db_cfg: DatabaseConfig) -> str:
    """Resolve connection parameters.

    Precedence:
        1. variables loaded from `.env` (main() loads it with override)
        2. DATABASE_URL / PGDSN used verbatim as the DSN
        3. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE
        4. the config ``database`` section
    """
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn

    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


def _connect(db_cfg: DatabaseConfig):  # pragma: no cover (thin wrapper; patched in tests)
    conn = psycopg2.connect(_build_dsn(db_cfg))
    # every row's writes are their own unit
    conn.autocommit = True
    return conn


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv.

    override=True lets .env values win over variables already in the
    environment, so the .env connection settings always apply.
    """
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="fleet-import",
        description="Fleet truck CSV / spreadsheet bulk importer",
    )
    p.add_argument("source", nargs="?", help="Fleet export (.csv, .txt, .xlsx)")
    p.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help=f"Config YAML (default: {DEFAULT_CONFIG_PATH})",
    )
    p.add_argument("--preview", action="store_true", help="Show mapping and row issues, write nothing")
    p.add_argument(
        "--exclude",
        default="",
        help="Comma separated 0-based data row indices to leave out, e.g. 0,3,7",
    )
    p.add_argument("--template", type=Path, metavar="OUT", help="Write the CSV template and exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _parse_exclude(raw: str) -> set[int]:
    """'0, 3,7' -> {0, 3, 7}. Raises ValueError on anything else."""
    indices: set[int] = set()
    for token in raw.split(","):
        token = token.strip()
        if not token:
            continue
        value = int(token)
        if value < 0:
            raise ValueError(f"negative row index: {value}")
        indices.add(value)
    return indices


def _report_preview(preview: PreviewResult, logger) -> None:
    logger.info(f"rows={preview.total_rows} columns={len(preview.original_headers)}")
    for header, field_name in preview.header_to_field_map.items():
        logger.info(f"  {header} -> {field_name}")
    if preview.ignored_headers:
        logger.info(f"ignored columns: {', '.join(preview.ignored_headers)}")
    for w in preview.warnings:
        logger.warning(w)
    if not preview.is_valid:
        logger.error(f"missing required columns: {', '.join(preview.missing_fields)}")

    flagged = preview.flagged_rows
    for row in flagged:
        logger.info(f"row {row.row_number} {row.status.value}: {row.status_message}")
    logger.info(f"preview valid={len(preview.preview_rows) - len(flagged)} flagged={len(flagged)}")


def _run_import(
    raw_rows: list[list[str]],
    cfg: ImportConfig,
    store: FleetStore,
    source: Path,
    excluded: set[int],
    total_rows: int,
) -> ImportResult:
    error_log = ErrorLogBuffer()
    selected = sum(1 for i in range(total_rows) if i not in excluded)
    with RowProgressTracker(selected) as tracker:
        result = bulk_import_trucks(
            raw_rows,
            cfg.company_id,
            store,
            on_progress=tracker,
            excluded_indices=excluded,
            error_log=error_log,
            error_limit=cfg.error_display_limit,
            source_name=source.name,
        )
        summary = result.summary
        tracker.set_postfix(
            created=summary.created,
            updated=summary.updated,
            skipped=summary.skipped,
            failed=summary.failed,
        )
    log_path = error_log.flush()
    if log_path is not None:
        setup_logging().info(f"row errors written to {log_path}")
    return result


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # [] from tests must not fall through to sys.argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        set_debug()
        logger.debug("debug mode enabled")

    if args.template is not None:
        out = write_template(args.template)
        logger.info(f"template written: {out}")
        return EXIT_SUCCESS_ALL

    if not args.source:
        logger.error("source file is required (or use --template OUT)")
        return EXIT_FATAL

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        excluded = _parse_exclude(args.exclude)
    except ValueError as e:
        logger.error(f"invalid --exclude: {e}")
        return EXIT_FATAL

    source = Path(args.source)
    try:
        raw_rows = read_source_rows(source)
    except SourceReadError as e:
        logger.error(f"source: {e}")
        return EXIT_FATAL

    logger.info(f"Processing file: {source}")
    preview = preview_rows(raw_rows, max_rows=cfg.max_rows)
    if not preview.success:
        logger.error(f"preview: {preview.error}")
        return EXIT_FATAL
    if preview.parsing_note:
        logger.info(preview.parsing_note)

    if args.preview:
        _report_preview(preview, logger)
        return EXIT_SUCCESS_ALL

    out_of_range = sorted(i for i in excluded if i >= preview.total_rows)
    if out_of_range:
        logger.warning(f"--exclude indices beyond the last data row ignored: {out_of_range}")

    # DISABLE_DB_CONNECT=1 forces mock mode (tests, dry runs)
    conn = None
    db_mode = "mock"
    if os.getenv("DISABLE_DB_CONNECT") == "1":
        logger.debug("DB connect disabled via DISABLE_DB_CONNECT=1 -> mock mode")
    else:
        try:
            conn = _connect(cfg.database)
            db_mode = "live"
        except psycopg2.Error as db_e:
            if os.getenv("SUPPRESS_DB_WARNING") == "1":
                logger.debug(f"DB connection failed -> fallback to mock mode: {db_e}")
            else:
                logger.info(f"DB connection failed -> fallback to mock mode: {db_e}")

    try:
        if conn is not None:
            with conn.cursor() as cur:
                result = _run_import(
                    raw_rows, cfg, PostgresFleetStore(cur), source, excluded, preview.total_rows
                )
        else:
            result = _run_import(
                raw_rows, cfg, MemoryFleetStore(), source, excluded, preview.total_rows
            )
    finally:
        if conn is not None:
            conn.close()

    logger.info(f"mode={db_mode} company={cfg.company_id}")

    if not result.success:
        for w in result.warnings:
            logger.warning(w)
        logger.error(f"import: {result.error}")
        return EXIT_FATAL

    shown = result.errors
    for err in shown:
        logger.warning(f"row {err.row} {err.action}: {err.error}")
    hidden = result.summary.skipped + result.summary.failed - len(shown)
    if hidden > 0:
        logger.warning(f"... {hidden} more row errors in the error log")

    # log_summary adds the "SUMMARY " label itself
    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.has_row_failures:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL

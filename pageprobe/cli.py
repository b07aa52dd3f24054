# pageprobe/cli.py
from __future__ import annotations

"""Command-line interface
------------------------
Commands to list/validate/run check suites and view effective config.
Thin wrapper around the suite loader and runner for local runs.
"""

import json
import sys
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import click

from pageprobe.utils.config import get_settings
from pageprobe.utils.logger import configure_logging, get_logger, bind, unbind
from pageprobe.core.suite_loader import CheckSuite, find_suite_files, load_suites_file


# -------- helpers --------


def _echo_json(obj) -> None:
    click.echo(json.dumps(obj, indent=2, ensure_ascii=False))


def _collect_files(targets: List[str], suites_dir: Optional[str], recursive: bool) -> List[Path]:
    paths: List[Path] = []
    if targets:
        for p in (Path(t).resolve() for t in targets):
            if p.is_dir():
                paths.extend(find_suite_files(p, recursive=True))
            else:
                paths.append(p)
    elif suites_dir:
        paths.extend(find_suite_files(Path(suites_dir), recursive=recursive))
    return paths


# -------- CLI root --------


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Override LOG_LEVEL from settings",
)
@click.version_option(package_name="pageprobe")
def cli(log_level: Optional[str]):
    _ = get_settings()
    configure_logging(log_level.upper() if log_level else None)


# -------- commands --------


@cli.command("config")
def cmd_config():
    """Print effective configuration (after .env & env vars)."""
    _echo_json(get_settings().model_dump(mode="json"))


@cli.command("list")
@click.option(
    "--dir", "suites_dir",
    type=click.Path(file_okay=False, dir_okay=True, exists=True),
    default=lambda: str(get_settings().SUITES_DIR),
    show_default=True,
    help="Directory containing suite YAML files",
)
@click.option("--recursive/--no-recursive", default=True, show_default=True)
def cmd_list(suites_dir: str, recursive: bool):
    """List check suites available in a directory."""
    rows = []
    for fp in find_suite_files(Path(suites_dir), recursive=recursive):
        try:
            for suite in load_suites_file(fp):
                rows.append((fp, suite))
        except Exception:
            # invalid files are reported by `validate`
            continue

    if not rows:
        click.echo("No suites found.")
        return

    click.echo(f"Found {len(rows)} suite(s):\n")
    for fp, suite in rows:
        click.echo(f" - {suite.name}  ({len(suite.checks)} checks)  {suite.url}  <- {fp}")


@cli.command("validate")
@click.argument("targets", nargs=-1, required=False)
@click.option("--dir", "suites_dir", type=click.Path(file_okay=False, dir_okay=True, exists=True),
              help="Validate all suites under this directory")
@click.option("--recursive/--no-recursive", default=True, show_default=True)
def cmd_validate(targets: List[str], suites_dir: Optional[str], recursive: bool):
    """Validate suite files or a directory (supports multi-doc YAML)."""
    if not targets and not suites_dir:
        click.echo("Provide file(s) or --dir to validate.")
        sys.exit(2)

    ok = True
    for fp in _collect_files(targets, suites_dir, recursive):
        try:
            for suite in load_suites_file(fp):
                click.echo(f"OK  {fp}  ->  {suite.name} ({len(suite.checks)} checks)")
        except Exception as e:
            ok = False
            click.echo(f"ERR {fp}  ->  {e}")

    sys.exit(0 if ok else 1)


@cli.command("run")
@click.argument("targets", nargs=-1, required=False)
@click.option("--dir", "suites_dir", type=click.Path(file_okay=False, dir_okay=True, exists=True),
              help="Run all suites found under this directory")
@click.option("--recursive/--no-recursive", default=True, show_default=True)
@click.option("--parallel/--no-parallel", default=None, help="Override PARALLEL_EXECUTION from settings")
@click.option("--max-workers", type=int, default=None, help="Override MAX_WORKERS from settings")
@click.option("--timeout-ms", type=click.IntRange(min=0), default=None,
              help="Retry budget per check; overrides suite and RETRY_TIMEOUT_MS")
@click.option("--json-out", type=click.Path(dir_okay=False), default=None, help="Write a JSON summary to this file")
def cmd_run(
    targets: List[str],
    suites_dir: Optional[str],
    recursive: bool,
    parallel: Optional[bool],
    max_workers: Optional[int],
    timeout_ms: Optional[int],
    json_out: Optional[str],
):
    """
    Run one or more check suites.

    Examples:
      pageprobe run checks/fruit.yaml
      pageprobe run --dir checks --parallel
    """
    settings = get_settings()
    log = get_logger(__name__)

    if not targets and not suites_dir:
        click.echo("Nothing to run. Provide file(s) or --dir.")
        sys.exit(2)

    suites: List[CheckSuite] = []
    for fp in _collect_files(targets, suites_dir, recursive):
        try:
            suites.extend(load_suites_file(fp))
        except Exception as e:
            click.echo(f"ERR {fp} -> {e}")
            sys.exit(1)

    if not suites:
        click.echo("No suites matched.")
        sys.exit(1)

    run_parallel = settings.PARALLEL_EXECUTION if parallel is None else bool(parallel)
    workers = settings.MAX_WORKERS if max_workers is None else int(max_workers)

    bind(run_id=datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ"))
    click.echo(f"Running {len(suites)} suite(s){' in parallel' if run_parallel else ''}...")

    from pageprobe.core.runner import Runner  # local import keeps Playwright out of validate/list

    def _run_one(suite: CheckSuite) -> dict:
        # one Runner (and browser) per suite
        return Runner(settings=settings).run_suite(suite, timeout_ms=timeout_ms)

    if run_parallel and len(suites) > 1:
        with ThreadPoolExecutor(max_workers=max(1, workers)) as ex:
            results = list(ex.map(_run_one, suites))
    else:
        results = [_run_one(s) for s in suites]

    for res in results:
        name = res.get("suite", "?")
        if res.get("error"):
            click.echo(f"ERR  {name} -> {res.get('error_type', 'Error')}: {res['error']}")
        elif res.get("ok"):
            click.echo(f"OK   {name} ({res.get('passed', 0)} checks)")
        else:
            failed = [r.get("name") or f"{r['predicate']} {r['value']!r}" for r in res.get("results", []) if not r["ok"]]
            click.echo(f"FAIL {name} -> {', '.join(failed)}")

    ok_count = sum(1 for r in results if r.get("ok"))
    fail_count = len(results) - ok_count
    click.echo(f"Done. OK={ok_count}  FAIL={fail_count}")
    log.debug(f"run finished: ok={ok_count} fail={fail_count}")

    if json_out:
        outp = Path(json_out).resolve()
        outp.parent.mkdir(parents=True, exist_ok=True)
        outp.write_text(json.dumps({"results": results}, indent=2), encoding="utf-8")
        click.echo(f"Wrote summary: {outp}")

    unbind("run_id")
    sys.exit(0 if fail_count == 0 else 1)


def main() -> None:
    cli(prog_name="pageprobe")


if __name__ == "__main__":
    main()

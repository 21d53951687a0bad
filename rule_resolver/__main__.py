import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
from rich.console import Console

from rule_resolver.config import ConfigRepository, ConflictPolicy, ResolverConfig
from rule_resolver.engine import ResolutionEngine
from rule_resolver.errors import RuleResolverError
from rule_resolver.index import DocumentIndex
from rule_resolver.models import QueryContext
from rule_resolver.rules.repository import RulesRepository
from rule_resolver.tui import ResolverConsoleUI

_CLI_LOG_HANDLER: Optional[logging.Handler] = None


def _configure_logging(verbose: int) -> None:
    global _CLI_LOG_HANDLER

    package_logger = logging.getLogger("rule_resolver")
    if _CLI_LOG_HANDLER is not None:
        package_logger.removeHandler(_CLI_LOG_HANDLER)
        _CLI_LOG_HANDLER = None
    if not verbose:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose > 1 else logging.INFO)
    _CLI_LOG_HANDLER = handler


def _settings_from_obj(
    obj: Dict[str, Any], rules_dir: Optional[Path], **overrides: Any
) -> tuple[ResolverConfig, Path]:
    repository = ConfigRepository()
    config_path: Optional[Path] = obj.get("config_path")
    try:
        config = repository.load(config_path).with_overrides(**overrides)
        resolved_dir = rules_dir or repository.resolve_rules_dir(config_path)
    except RuleResolverError as exc:
        raise click.ClickException(str(exc))
    except ValueError as exc:
        raise click.ClickException(f"Invalid settings: {exc}")
    return config, resolved_dir


def _build_index(rules_dir: Path, config: ResolverConfig) -> DocumentIndex:
    try:
        documents = RulesRepository(rules_dir).list_rules()
        return DocumentIndex.build(documents, strict=config.strict, infer_topics=config.infer_topics)
    except RuleResolverError as exc:
        raise click.ClickException(f"Fatal: {exc}")
    except ValueError as exc:
        raise click.ClickException(f"Fatal: invalid rule ({exc})")


def _rules_dir_option():
    return click.option(
        "--rules-dir",
        "rules_dir",
        type=click.Path(path_type=Path, file_okay=False),
        default=None,
        help="Directory holding rule documents.",
    )


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Path to a JSON config file.",
)
@click.option("-v", "--verbose", count=True, help="Log to stderr (-vv for debug).")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: int) -> None:
    """Resolve which guidance rules apply to a file or problem."""
    _configure_logging(verbose)
    ctx.obj = {"config_path": config_path}


@cli.command(help="Resolve the rules that apply to a file path and/or free text.")
@click.option("--path", "file_path", default=None, help="File path under evaluation.")
@click.option("--text", "free_text", default=None, help="Free-text description of the task or problem.")
@click.option("--budget", type=click.IntRange(min=0), default=None, help="Maximum payload size.")
@click.option("--threshold", type=click.FloatRange(0.0, 1.0), default=None, help="Minimum relevance score.")
@click.option(
    "--policy",
    type=click.Choice([policy.value for policy in ConflictPolicy], case_sensitive=False),
    default=None,
    help="How to treat documents that lose part of their topics.",
)
@click.option("--strict/--no-strict", default=None, help="Fail on any load issue.")
@_rules_dir_option()
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
@click.option("--payload-only", is_flag=True, help="Print only the assembled payload.")
@click.pass_obj
def resolve(
    obj: Dict[str, Any],
    file_path: Optional[str],
    free_text: Optional[str],
    budget: Optional[int],
    threshold: Optional[float],
    policy: Optional[str],
    strict: Optional[bool],
    rules_dir: Optional[Path],
    as_json: bool,
    payload_only: bool,
) -> None:
    if as_json and payload_only:
        raise click.UsageError("--json and --payload-only are mutually exclusive.")

    config, resolved_dir = _settings_from_obj(
        obj,
        rules_dir,
        threshold=threshold,
        conflict_policy=policy.lower() if policy else None,
        strict=strict,
    )
    index = _build_index(resolved_dir, config)
    query = QueryContext(file_path=file_path, free_text=free_text, size_budget=budget)
    result = ResolutionEngine(index, config).resolve(query)

    if as_json:
        payload = result.as_dict()
        payload["load_warnings"] = [item.as_dict() for item in index.warnings]
        click.echo(json.dumps(payload, indent=2))
        return
    if payload_only:
        click.echo(result.payload)
        return

    ui = ResolverConsoleUI(Console())
    ui.render_resolution(query, result, load_warnings=index.warnings)


@cli.group(help="Inspect rule documents.")
def rules() -> None:
    pass


@rules.command("list", help="List rule documents and their activation metadata.")
@_rules_dir_option()
@click.pass_obj
def rules_list(obj: Dict[str, Any], rules_dir: Optional[Path]) -> None:
    ui = ResolverConsoleUI(Console())
    _, resolved_dir = _settings_from_obj(obj, rules_dir)
    try:
        documents = RulesRepository(resolved_dir).list_rules()
    except RuleResolverError as exc:
        raise click.ClickException(str(exc))
    ui.render_rules(documents, rules_dir=str(resolved_dir))


@rules.command("check", help="Build the index and report load issues.")
@click.option("--strict/--no-strict", default=None, help="Fail on the first load issue.")
@_rules_dir_option()
@click.pass_obj
def rules_check(obj: Dict[str, Any], strict: Optional[bool], rules_dir: Optional[Path]) -> None:
    ui = ResolverConsoleUI(Console())
    config, resolved_dir = _settings_from_obj(obj, rules_dir, strict=strict)
    index = _build_index(resolved_dir, config)
    issues = list(index.warnings)
    ui.render_check(len(index), issues, index.topic_heuristic_version)
    if issues:
        raise click.exceptions.Exit(1)


def main() -> int:
    try:
        cli(standalone_mode=False)
    except click.exceptions.Exit as exc:
        code = exc.exit_code
        return code if isinstance(code, int) else 1
    except click.ClickException as exc:
        exc.show()
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Main CLI entry point using Click."""

import functools
import logging
from pathlib import Path

import click
from dotenv import load_dotenv
from pydantic import ValidationError

from scour import __version__
from scour.config import Settings, load_settings
from scour.core.exceptions import ScourError
from scour.core.models import ColumnSpec, SearchEngine
from scour.infrastructure.storage import ProjectSession, ProjectStore
from scour.pipeline import ScourPipeline, Stage, StageResult, StageStep, create_project
from scour.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def _get_base_dir() -> Path:
    """Get base directory from current working directory or its parents."""
    cwd = Path.cwd()
    if (cwd / "config" / "config.yaml").exists():
        return cwd
    for parent in cwd.parents:
        if (parent / "config" / "config.yaml").exists():
            return parent
    return cwd


def handle_errors(func):
    """Report domain errors as click errors (exit code 1)."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ScourError as e:
            logger.debug("Command failed", exc_info=True)
            raise click.ClickException(str(e)) from e
        except ValidationError as e:
            raise click.ClickException(f"Invalid value:\n{e}") from e

    return wrapper


@click.group()
@click.option("--base-dir", type=click.Path(exists=True), default=None, help="Directory holding config/config.yaml")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__, prog_name="scour")
@click.pass_context
def cli(ctx: click.Context, base_dir: str | None, verbose: bool) -> None:
    """Scour - turn a research objective into a structured dataset."""
    ctx.ensure_object(dict)

    base = Path(base_dir) if base_dir else _get_base_dir()
    load_dotenv(base / ".env")
    setup_logging(verbose=verbose)

    ctx.obj["base_dir"] = base
    ctx.obj["verbose"] = verbose
    ctx.obj.setdefault("_settings", None)


def _get_settings(ctx: click.Context) -> Settings:
    """Get or load settings."""
    if ctx.obj.get("_settings") is None:
        ctx.obj["_settings"] = load_settings(ctx.obj["base_dir"])
    return ctx.obj["_settings"]


def _get_pipeline(ctx: click.Context, project_file: str) -> ScourPipeline:
    pipeline = ctx.obj.get("_pipeline")
    if pipeline is not None:
        return pipeline
    return ScourPipeline(ProjectStore(project_file), _get_settings(ctx))


def _echo_step(step: StageStep) -> None:
    label = step.item or step.message
    line = f"  [{step.outcome.value}] {label}"
    if step.item and step.message:
        line += f" ({step.message})"
    click.echo(line)


def _echo_result(result: StageResult) -> None:
    counts = ", ".join(f"{name}: {count}" for name, count in sorted(result.outcomes.items()))
    click.echo(f"{result.stage.value}: {result.steps} steps, {result.added} added" + (f" ({counts})" if counts else ""))


def _project_options(func):
    """Options shared by ``create`` and ``configure``."""
    options = [
        click.option("--objective", default=None, help="Research objective"),
        click.option("--engine", default=None, help=f"Search engine ({', '.join(e.value for e in SearchEngine)})"),
        click.option("--queries", "num_queries", type=click.IntRange(min=1), default=None, help="Number of queries"),
        click.option(
            "--results", "num_results", type=click.IntRange(min=1), default=None, help="Results per query"
        ),
        click.option("--model", default=None, help="Ollama model name"),
        click.option("--ollama-url", default=None, help="Ollama host URL"),
        click.option("--ollama-port", type=int, default=None, help="Ollama port"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _check_engine(engine: str | None) -> None:
    if engine is not None and SearchEngine.parse(engine) is None:
        click.echo(f"Warning: search engine '{engine}' is not supported; the search stage will fail.", err=True)


@cli.command()
@click.argument("project_file", type=click.Path(dir_okay=False))
@_project_options
@click.pass_context
@handle_errors
def create(
    ctx: click.Context,
    project_file: str,
    objective: str | None,
    engine: str | None,
    num_queries: int | None,
    num_results: int | None,
    model: str | None,
    ollama_url: str | None,
    ollama_port: int | None,
) -> None:
    """Create a new project file."""
    _check_engine(engine)
    project = create_project(
        ProjectStore(project_file),
        _get_settings(ctx),
        objective=objective,
        search_engine=engine,
        num_queries=num_queries,
        num_results_per_query=num_results,
        model=model,
        ollama_url=ollama_url,
        ollama_port=ollama_port,
    )
    click.echo(f"Created project {project_file} (engine: {project.search_engine}, model: {project.model})")


@cli.command()
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False))
@_project_options
@handle_errors
def configure(
    project_file: str,
    objective: str | None,
    engine: str | None,
    num_queries: int | None,
    num_results: int | None,
    model: str | None,
    ollama_url: str | None,
    ollama_port: int | None,
) -> None:
    """Update project settings."""
    _check_engine(engine)
    session = ProjectSession.open(ProjectStore(project_file))
    project = session.project

    updates = {
        "objective": objective,
        "search_engine": engine,
        "num_queries": num_queries,
        "num_results_per_query": num_results,
        "model": model,
        "ollama_url": ollama_url,
        "ollama_port": ollama_port,
    }
    changed = []
    for field_name, value in updates.items():
        if value is None:
            continue
        if field_name == "search_engine":
            parsed = SearchEngine.parse(value)
            value = parsed.value if parsed else value
        setattr(project, field_name, value)
        changed.append(field_name)

    if not changed:
        click.echo("Nothing to update")
        return
    session.save()
    click.echo(f"Updated {', '.join(changed)}")


@cli.group()
def column() -> None:
    """Manage extracted columns."""


@column.command("add")
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("key")
@click.option("--title", default="", help="Display title (defaults to the key)")
@click.option("--description", default=None, help="What the model should extract")
@click.option("--required", is_flag=True, help="Discard rows where this value is missing")
@handle_errors
def column_add(project_file: str, key: str, title: str, description: str | None, required: bool) -> None:
    """Add a column to the project."""
    session = ProjectSession.open(ProjectStore(project_file))
    spec = ColumnSpec(key=key, title=title, description=description, is_required=required)
    if session.project.get_column(spec.key):
        raise click.ClickException(f"Column '{spec.key}' already exists")
    session.project.columns.append(spec)
    session.save()
    click.echo(f"Added column {spec.key}" + (" (required)" if required else ""))


@column.command("remove")
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("key")
@handle_errors
def column_remove(project_file: str, key: str) -> None:
    """Remove a column from the project."""
    session = ProjectSession.open(ProjectStore(project_file))
    spec = session.project.get_column(key)
    if spec is None:
        raise click.ClickException(f"Column '{key}' not found")
    session.project.columns.remove(spec)
    session.save()
    click.echo(f"Removed column {key}")


@cli.command()
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
@handle_errors
def queries(ctx: click.Context, project_file: str) -> None:
    """Generate search queries for the objective."""
    click.echo("Generating search queries...")
    result = _get_pipeline(ctx, project_file).run_stage(Stage.QUERIES, on_step=_echo_step)
    _echo_result(result)


@cli.command()
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--restart", is_flag=True, help="Start again from the first query")
@click.pass_context
@handle_errors
def search(ctx: click.Context, project_file: str, restart: bool) -> None:
    """Retrieve search results for every query."""
    click.echo("Running searches...")
    result = _get_pipeline(ctx, project_file).run_stage(Stage.SEARCH, on_step=_echo_step, restart=restart)
    _echo_result(result)


@cli.command()
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
@handle_errors
def extract(ctx: click.Context, project_file: str) -> None:
    """Classify result pages and extract rows."""
    click.echo("Parsing pages...")
    result = _get_pipeline(ctx, project_file).run_stage(Stage.EXTRACT, on_step=_echo_step)
    _echo_result(result)


@cli.command()
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="CSV output path")
@click.pass_context
@handle_errors
def export(ctx: click.Context, project_file: str, output: str | None) -> None:
    """Export rows to CSV."""
    result = _get_pipeline(ctx, project_file).run_stage(Stage.EXPORT, on_step=_echo_step, output=output)
    click.echo(f"Exported {result.added} rows")


@cli.command()
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
@handle_errors
def run(ctx: click.Context, project_file: str) -> None:
    """Run query generation, search and extraction in order."""
    for result in _get_pipeline(ctx, project_file).run_all(on_step=_echo_step):
        _echo_result(result)


@cli.command()
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False))
@handle_errors
def status(project_file: str) -> None:
    """Show project progress."""
    project = ProjectStore(project_file).load()

    def _cursor(value: int | None, total: int) -> str:
        return f"{value if value is not None else '-'}/{total}"

    click.echo(f"Objective: {project.objective or '(not set)'}")
    click.echo(f"Engine: {project.search_engine}  Model: {project.model}")
    click.echo(f"Queries: {len(project.search_queries)}/{project.num_queries}")
    click.echo(f"Search cursor: {_cursor(project.current_search_query_index, len(project.search_queries))}")
    click.echo(f"Hits: {len(project.search_results)}")
    click.echo(f"Extraction cursor: {_cursor(project.current_search_result_index, len(project.search_results))}")
    click.echo(f"Columns: {', '.join(c.key + ('*' if c.is_required else '') for c in project.columns) or '(none)'}")
    click.echo(f"Rows: {len(project.rows)}")
    if project.status_message:
        click.echo(f"Last status: {project.status_message}")


if __name__ == "__main__":
    cli()

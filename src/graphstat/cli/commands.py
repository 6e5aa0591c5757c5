"""CLI commands for graphstat."""

import json
import logging
import math
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from graphstat import __version__
from graphstat.core.config import GraphStatConfig
from graphstat.core.constants import (
    EMPTY_GRAPH_POLICIES,
    EXIT_CONFIG_ERROR,
    EXIT_INTERNAL_ERROR,
    EXIT_SUCCESS,
    EXIT_USER_ERROR,
    FORMAT_JSON,
    OUTPUT_FORMATS,
    STAGE_ADJACENCY,
    STAGE_COMPONENTS,
    STAGE_DEGREE,
    STAGE_DISTANCES,
    STAGE_INGESTION,
)
from graphstat.core.exceptions import ConfigError, GraphStatError
from graphstat.core.types import Component, DegreeStats, EdgeList, PairDistance

if TYPE_CHECKING:
    from graphstat.core.analysis import StageHook

logger = logging.getLogger(__name__)
console = Console(soft_wrap=True, highlight=False)
error_console = Console(stderr=True, soft_wrap=True)


def format_pair_distance(result: PairDistance) -> str:
    """Format one sampled distance as a report line.

    Args:
        result: The pair and its distance.

    Returns:
        "Distance between A and B: D", with D shown as "unreachable" when
        no path exists.
    """
    shown = str(result.distance) if result.reachable else "unreachable"
    return f"Distance between {result.source} and {result.target}: {shown}"


def format_component(component: Component) -> str:
    """Format a component as a set literal with sorted members."""
    return "{" + ", ".join(str(v) for v in sorted(component)) + "}"


def display_components(
    components: Sequence[Component],
    sizes_only: bool = False,
    target_console: Console | None = None,
) -> None:
    """Display connected components.

    Args:
        components: Components in reporting order.
        sizes_only: Show a table of component sizes instead of members.
        target_console: Optional Rich console (defaults to module console).
    """
    output_console = target_console if target_console is not None else console

    output_console.print(f"[bold]Connected components ({len(components)}):[/bold]")
    if not sizes_only:
        for component in components:
            output_console.print(format_component(component), markup=False)
        return

    table = Table("#", "Size", "Smallest vertex")
    for i, component in enumerate(components, start=1):
        smallest = str(min(component)) if component else "-"
        table.add_row(str(i), str(len(component)), smallest)
    output_console.print(table)


def display_degree_stats(stats: DegreeStats, target_console: Console | None = None) -> None:
    """Display a degree summary table."""
    output_console = target_console if target_console is not None else console

    table = Table("Vertices", "Total degree", "Min", "Max", "Average", title="Degree statistics")
    table.add_row(
        str(stats.vertex_count),
        str(stats.total_degree),
        str(stats.min_degree),
        str(stats.max_degree),
        str(stats.average),
    )
    output_console.print(table)


def _emit_json(data: dict[str, Any]) -> None:
    # click.echo keeps JSON free of Rich wrapping and markup handling
    click.echo(json.dumps(data, indent=2))


def _report_error(error: GraphStatError) -> None:
    error_console.print(f"[red]Error ({escape(error.stage)}):[/red] {escape(str(error))}")


def _report_unexpected(error: Exception) -> None:
    stage = getattr(error, "stage", None)
    where = f" ({escape(stage)})" if isinstance(stage, str) else ""
    error_console.print(f"[red]Unexpected error{where}[/red]")


def _configure_logging(debug: bool) -> None:
    """Configure logging levels based on debug flag."""
    if debug:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


def _load_settings(ctx: click.Context, **overrides: Any) -> GraphStatConfig:
    """Load the config file and layer command-line overrides on top."""
    from graphstat.core.config import load_config, with_overrides

    config = load_config(ctx.obj.get("config_path"))
    return with_overrides(config, **overrides)


def _resolve_input(path: Path | None, input_path: str) -> Path:
    """Pick the input file from the argument or the configured default."""
    if path is not None:
        return path
    if input_path:
        return Path(input_path).expanduser()
    error_console.print("[red]Error:[/red] No input file given.")
    error_console.print(
        "[dim]Pass PATH or set a default: graphstat config input_path edges.csv[/dim]"
    )
    raise SystemExit(EXIT_USER_ERROR)


def _skip_malformed(strict: bool | None) -> bool | None:
    return None if strict is None else not strict


def _read_input(
    path: Path,
    skip_malformed: bool,
    include_isolated: bool,
    hook: "StageHook | None" = None,
) -> EdgeList:
    from graphstat.core.analysis import run_stage
    from graphstat.core.ingest import load_edge_list

    with run_stage(STAGE_INGESTION, hook):
        return load_edge_list(
            path,
            skip_malformed=skip_malformed,
            include_isolated=include_isolated,
        )


input_path_argument = click.argument(
    "path",
    required=False,
    type=click.Path(path_type=Path, dir_okay=False),
)
strict_option = click.option(
    "--strict/--lenient",
    default=None,
    help="Fail on malformed lines instead of skipping them (default: lenient).",
)
isolated_option = click.option(
    "--include-isolated/--exclude-isolated",
    default=None,
    help="Treat single-vertex lines as isolated vertices (default: exclude).",
)
format_option = click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(sorted(OUTPUT_FORMATS)),
    default=None,
    help="Output format (default: from config, text).",
)


@click.group()
@click.option("--debug", "-d", is_flag=True, help="Enable debug logging output")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file to use instead of ~/.config/graphstat/config.toml.",
)
@click.version_option(version=__version__, prog_name="graphstat")
@click.pass_context
def main(ctx: click.Context, debug: bool, config_path: Path | None) -> None:
    """graphstat - analyze undirected graphs given as edge lists.

    Reads comma-separated vertex pairs, one per line, and reports sampled
    shortest-path distances, connected components and average degree.

    Example: graphstat analyze edges.csv --pairs 100 --seed 7
    """
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = config_path
    _configure_logging(debug)


@main.command()
@input_path_argument
@click.option(
    "--pairs",
    "-n",
    "num_pairs",
    type=click.IntRange(min=0),
    default=None,
    help="Number of random vertex pairs to measure (default: from config, 1000).",
)
@click.option("--seed", type=int, default=None, help="Random seed for pair sampling.")
@click.option(
    "--workers",
    "-w",
    type=click.IntRange(min=1),
    default=None,
    help=(
        "Threads used for distance queries (default: 1). "
        "Only faster on free-threaded Python builds."
    ),
)
@strict_option
@isolated_option
@click.option(
    "--empty-graph",
    type=click.Choice(sorted(EMPTY_GRAPH_POLICIES)),
    default=None,
    help="Average degree of an empty graph: fail, NaN, or 0 (default: error).",
)
@format_option
@click.option("--sizes-only", is_flag=True, help="List component sizes instead of members.")
@click.option("--verbose", "-v", is_flag=True, help="Show stage timings on stderr.")
@click.pass_context
def analyze(
    ctx: click.Context,
    path: Path | None,
    num_pairs: int | None,
    seed: int | None,
    workers: int | None,
    strict: bool | None,
    include_isolated: bool | None,
    empty_graph: str | None,
    output_format: str | None,
    sizes_only: bool,
    verbose: bool,
) -> None:
    """Report sampled distances, components and average degree.

    PATH is a text file of comma-separated vertex pairs, one per line.
    Lines that are not two non-negative integers are skipped unless
    --strict is given. When PATH is omitted the configured input_path is used.

    Output lists one distance per sampled pair ("unreachable" when no path
    exists), then the connected components, then the average degree.

    \b
    Examples:
        graphstat analyze edges.csv                 # 1000 random pairs
        graphstat analyze edges.csv -n 10 --seed 7  # Reproducible sample
        graphstat analyze edges.csv -f json         # Machine-readable report
        graphstat analyze edges.csv --sizes-only    # Component size table
    """
    from graphstat.cli.verbose import get_verbose_logger
    from graphstat.core.analysis import analyze as run_analysis

    ctx.obj["verbose"] = verbose
    vlog = get_verbose_logger(ctx)

    try:
        config = _load_settings(
            ctx,
            num_pairs=num_pairs,
            seed=seed,
            workers=workers,
            skip_malformed=_skip_malformed(strict),
            include_isolated=include_isolated,
            empty_graph=empty_graph,
            default_format=output_format,
        )
        input_file = _resolve_input(path, config.input_path)

        edge_list = _read_input(
            input_file, config.skip_malformed, config.include_isolated, hook=vlog.stage
        )
        vlog.log(
            f"Read {len(edge_list.edges)} edges, "
            f"skipped {len(edge_list.skipped_lines)} malformed lines"
        )

        report = run_analysis(edge_list, config, stage=vlog.stage)
        vlog.summary()

        if config.default_format == FORMAT_JSON:
            _emit_json(report.to_dict())
            raise SystemExit(EXIT_SUCCESS)

        for result in report.distances:
            console.print(format_pair_distance(result), markup=False)

        console.print()
        display_components(report.components, sizes_only=sizes_only)

        console.print()
        console.print(f"Average degree: {report.degree.average}", markup=False)

        if report.skipped_lines:
            error_console.print(
                f"[dim]Skipped {report.skipped_lines} malformed lines "
                f"in {escape(str(input_file))}[/dim]"
            )

        raise SystemExit(EXIT_SUCCESS)

    except ConfigError as e:
        _report_error(e)
        raise SystemExit(EXIT_CONFIG_ERROR)
    except GraphStatError as e:
        logger.debug("Analysis failed in stage %s", e.stage, exc_info=True)
        _report_error(e)
        raise SystemExit(EXIT_USER_ERROR)
    except SystemExit:
        raise
    except Exception as e:
        logger.exception("Unhandled exception in analyze command")
        _report_unexpected(e)
        raise SystemExit(EXIT_INTERNAL_ERROR)


@main.command()
@click.argument("path", type=click.Path(path_type=Path, dir_okay=False))
@click.argument("source", type=click.IntRange(min=0))
@click.argument("target", type=click.IntRange(min=0))
@strict_option
@isolated_option
@click.pass_context
def distance(
    ctx: click.Context,
    path: Path,
    source: int,
    target: int,
    strict: bool | None,
    include_isolated: bool | None,
) -> None:
    """Show the shortest-path distance between two vertices.

    Prints "unreachable" when the vertices are in different components.

    \b
    Examples:
        graphstat distance edges.csv 1 6
    """
    from graphstat.core.analysis import adjacency_for, run_stage
    from graphstat.core.paths import distance_between

    try:
        config = _load_settings(
            ctx,
            skip_malformed=_skip_malformed(strict),
            include_isolated=include_isolated,
        )
        edge_list = _read_input(path, config.skip_malformed, config.include_isolated)
        with run_stage(STAGE_ADJACENCY):
            adjacency = adjacency_for(edge_list, config.include_isolated)

        for vertex in (source, target):
            if vertex not in adjacency:
                error_console.print(
                    f"[yellow]Warning:[/yellow] Vertex {vertex} does not appear in the graph."
                )

        with run_stage(STAGE_DISTANCES):
            hops = distance_between(adjacency, source, target)
        console.print(format_pair_distance(PairDistance(source, target, hops)), markup=False)
        raise SystemExit(EXIT_SUCCESS)

    except ConfigError as e:
        _report_error(e)
        raise SystemExit(EXIT_CONFIG_ERROR)
    except GraphStatError as e:
        _report_error(e)
        raise SystemExit(EXIT_USER_ERROR)
    except SystemExit:
        raise
    except Exception as e:
        logger.exception("Unhandled exception in distance command")
        _report_unexpected(e)
        raise SystemExit(EXIT_INTERNAL_ERROR)


@main.command()
@input_path_argument
@strict_option
@isolated_option
@format_option
@click.option("--sizes-only", is_flag=True, help="List component sizes instead of members.")
@click.pass_context
def components(
    ctx: click.Context,
    path: Path | None,
    strict: bool | None,
    include_isolated: bool | None,
    output_format: str | None,
    sizes_only: bool,
) -> None:
    """List the connected components of the graph.

    Components are ordered by their smallest vertex.

    \b
    Examples:
        graphstat components edges.csv
        graphstat components edges.csv --sizes-only
    """
    from graphstat.core.analysis import adjacency_for, run_stage
    from graphstat.core.components import connected_components, largest_component

    try:
        config = _load_settings(
            ctx,
            skip_malformed=_skip_malformed(strict),
            include_isolated=include_isolated,
            default_format=output_format,
        )
        input_file = _resolve_input(path, config.input_path)
        edge_list = _read_input(input_file, config.skip_malformed, config.include_isolated)
        with run_stage(STAGE_ADJACENCY):
            adjacency = adjacency_for(edge_list, config.include_isolated)
        with run_stage(STAGE_COMPONENTS):
            found = connected_components(adjacency)

        if config.default_format == FORMAT_JSON:
            _emit_json({"components": [sorted(c) for c in found]})
            raise SystemExit(EXIT_SUCCESS)

        display_components(found, sizes_only=sizes_only)
        if found:
            console.print(
                f"[dim]Largest component: {len(largest_component(found))} vertices[/dim]"
            )
        raise SystemExit(EXIT_SUCCESS)

    except ConfigError as e:
        _report_error(e)
        raise SystemExit(EXIT_CONFIG_ERROR)
    except GraphStatError as e:
        _report_error(e)
        raise SystemExit(EXIT_USER_ERROR)
    except SystemExit:
        raise
    except Exception as e:
        logger.exception("Unhandled exception in components command")
        _report_unexpected(e)
        raise SystemExit(EXIT_INTERNAL_ERROR)


@main.command()
@input_path_argument
@strict_option
@isolated_option
@click.option(
    "--empty-graph",
    type=click.Choice(sorted(EMPTY_GRAPH_POLICIES)),
    default=None,
    help="Average degree of an empty graph: fail, NaN, or 0 (default: error).",
)
@format_option
@click.pass_context
def degree(
    ctx: click.Context,
    path: Path | None,
    strict: bool | None,
    include_isolated: bool | None,
    empty_graph: str | None,
    output_format: str | None,
) -> None:
    """Show degree statistics of the graph.

    Only vertices that appear in some edge are counted, unless
    --include-isolated is given and the input declares isolated vertices.

    \b
    Examples:
        graphstat degree edges.csv
        graphstat degree edges.csv --include-isolated
    """
    from graphstat.core.analysis import adjacency_for, run_stage
    from graphstat.core.degree import degree_stats

    try:
        config = _load_settings(
            ctx,
            skip_malformed=_skip_malformed(strict),
            include_isolated=include_isolated,
            empty_graph=empty_graph,
            default_format=output_format,
        )
        input_file = _resolve_input(path, config.input_path)
        edge_list = _read_input(input_file, config.skip_malformed, config.include_isolated)
        with run_stage(STAGE_ADJACENCY):
            adjacency = adjacency_for(edge_list, config.include_isolated)
        with run_stage(STAGE_DEGREE):
            stats = degree_stats(adjacency, empty_policy=config.empty_graph)

        if config.default_format == FORMAT_JSON:
            average = None if math.isnan(stats.average) else stats.average
            _emit_json(
                {
                    "vertex_count": stats.vertex_count,
                    "total_degree": stats.total_degree,
                    "min_degree": stats.min_degree,
                    "max_degree": stats.max_degree,
                    "average": average,
                }
            )
            raise SystemExit(EXIT_SUCCESS)

        display_degree_stats(stats)
        raise SystemExit(EXIT_SUCCESS)

    except ConfigError as e:
        _report_error(e)
        raise SystemExit(EXIT_CONFIG_ERROR)
    except GraphStatError as e:
        _report_error(e)
        raise SystemExit(EXIT_USER_ERROR)
    except SystemExit:
        raise
    except Exception as e:
        logger.exception("Unhandled exception in degree command")
        _report_unexpected(e)
        raise SystemExit(EXIT_INTERNAL_ERROR)


@main.command(name="config")
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.option("--reset", is_flag=True, help="Restore the default configuration file.")
@click.option("--yes", "-y", is_flag=True, help="Skip the reset confirmation prompt.")
@click.pass_context
def config_cmd(
    ctx: click.Context,
    key: str | None,
    value: str | None,
    reset: bool,
    yes: bool,
) -> None:
    """Show or change configuration settings.

    With no arguments, shows all settings. With KEY, shows one setting.
    With KEY and VALUE, updates the setting in the config file.

    \b
    Keys:
        input_path, skip_malformed, include_isolated, num_pairs,
        seed, workers, empty_graph, default_format

    \b
    Examples:
        graphstat config                    # Show all settings
        graphstat config num_pairs          # Show one setting
        graphstat config num_pairs 200      # Update a setting
        graphstat config seed none          # Unset the sampling seed
        graphstat config --reset            # Restore defaults
    """
    from graphstat.core.config import (
        get_config_display,
        get_config_path,
        get_setting_value,
        load_config,
        reset_config,
        update_config,
    )

    config_path: Path | None = ctx.obj.get("config_path")
    shown_path = config_path if config_path is not None else get_config_path()

    try:
        if reset:
            if not yes and not click.confirm(f"Reset {shown_path} to defaults?"):
                console.print("[dim]Reset cancelled.[/dim]")
                raise SystemExit(EXIT_SUCCESS)
            reset_config(config_path)
            console.print(f"[green]✓[/green] Configuration reset: {escape(str(shown_path))}")
            raise SystemExit(EXIT_SUCCESS)

        if key is None:
            console.print(f"[dim]Config file: {escape(str(shown_path))}[/dim]")
            console.print(get_config_display(load_config(config_path)), markup=False)
            raise SystemExit(EXIT_SUCCESS)

        if value is None:
            console.print(get_setting_value(load_config(config_path), key), markup=False)
            raise SystemExit(EXIT_SUCCESS)

        update_config(key, value, config_path)
        new_value = get_setting_value(load_config(config_path), key)
        console.print(f"[green]✓[/green] {escape(key)} = {escape(new_value)}")
        raise SystemExit(EXIT_SUCCESS)

    except ConfigError as e:
        _report_error(e)
        raise SystemExit(EXIT_CONFIG_ERROR)
    except SystemExit:
        raise
    except Exception as e:
        logger.exception("Unhandled exception in config command")
        _report_unexpected(e)
        raise SystemExit(EXIT_INTERNAL_ERROR)


if __name__ == "__main__":
    main()

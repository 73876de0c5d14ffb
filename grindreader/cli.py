"""CLI entry point for grindreader."""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from grindreader.core.exceptions import GrindReaderError
from grindreader.core.models import CallRecord, CostFormat, FunctionRecord
from grindreader.core.reader import Reader

app = typer.Typer(
    name="grindreader",
    help="Inspect preprocessed call-graph profile data files.",
    no_args_is_help=True,
)
console = Console()

_SORT_KEYS = {
    "self": lambda f: f.summed_self_cost_raw,
    "inclusive": lambda f: f.summed_inclusive_cost_raw,
    "calls": lambda f: f.invocation_count,
}

DataFile = Annotated[Path, typer.Argument(help="Preprocessed profile data file")]
FormatOption = Annotated[
    CostFormat,
    typer.Option(
        "--format",
        "-f",
        help="Cost format: percent, msec or usec",
        envvar="GRINDREADER_COST_FORMAT",
        case_sensitive=False,
    ),
]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """Inspect preprocessed call-graph profile data files."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


@contextmanager
def open_data_file(path: Path, cost_format: CostFormat) -> Iterator[Reader]:
    """Open a reader, turning grindreader errors into a clean exit."""
    try:
        with Reader(path, cost_format) as reader:
            yield reader
    except GrindReaderError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e


def function_to_dict(nr: int, info: FunctionRecord) -> dict[str, object]:
    """Convert a FunctionRecord to a JSON-serializable dict."""
    return {
        "nr": nr,
        "function_name": info.function_name,
        "file": info.file,
        "line": info.line,
        "invocation_count": info.invocation_count,
        "summed_self_cost": info.summed_self_cost,
        "summed_inclusive_cost": info.summed_inclusive_cost,
        "summed_self_cost_raw": info.summed_self_cost_raw,
        "summed_inclusive_cost_raw": info.summed_inclusive_cost_raw,
        "called_from_count": info.called_from_count,
        "sub_call_count": info.sub_call_count,
    }


def call_to_dict(reader: Reader, call: CallRecord) -> dict[str, object]:
    """Convert a CallRecord to a dict, resolving the other function's name."""
    return {
        "function_nr": call.function_nr,
        "function_name": reader.get_function_info(call.function_nr).function_name,
        "line": call.line,
        "call_count": call.call_count,
        "summed_call_cost": call.summed_call_cost,
        "summed_call_cost_raw": call.summed_call_cost_raw,
    }


@app.command()
def info(
    path: DataFile,
    cost_format: FormatOption = CostFormat.USEC,
    output_json: JsonOption = False,
) -> None:
    """Show the file header and profile metadata."""
    with open_data_file(path, cost_format) as reader:
        result = {
            "version": reader.file_header.version,
            "functions": reader.get_function_count(),
            "runs": reader.get_header("runs"),
            "summary": reader.get_header("summary"),
            "cmd": reader.get_header("cmd"),
            "creator": reader.get_header("creator"),
            "events": reader.get_header("events"),
            "time_unit": reader.time_unit.value,
        }

        if output_json:
            print(json.dumps(result))
        else:
            for key, value in result.items():
                console.print(f"[cyan]{key}[/cyan]: {value}")


@app.command()
def functions(
    path: DataFile,
    top: Annotated[int, typer.Option("--top", "-n", help="Number of functions to show")] = 20,
    sort: Annotated[
        str, typer.Option("--sort", "-s", help="Sort by: self, inclusive or calls")
    ] = "self",
    cost_format: FormatOption = CostFormat.USEC,
    output_json: JsonOption = False,
) -> None:
    """List functions ordered by cost."""
    if sort not in _SORT_KEYS:
        console.print(f"[red]Unknown sort key '{sort}'[/red]")
        raise typer.Exit(code=1)

    with open_data_file(path, cost_format) as reader:
        numbered = list(enumerate(reader.iter_functions()))
        numbered.sort(key=lambda item: _SORT_KEYS[sort](item[1]), reverse=True)
        numbered = numbered[:top]

        if output_json:
            print(json.dumps([function_to_dict(nr, f) for nr, f in numbered]))
            return

        table = Table(title=f"Top {len(numbered)} functions by {sort} cost ({cost_format.value})")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Function", style="cyan")
        table.add_column("Calls", justify="right")
        table.add_column("Self", justify="right")
        table.add_column("Inclusive", justify="right")
        table.add_column("Location", style="dim")
        for nr, f in numbered:
            table.add_row(
                str(nr),
                f.function_name,
                str(f.invocation_count),
                str(f.summed_self_cost),
                str(f.summed_inclusive_cost),
                f"{f.file}:{f.line}",
            )
        console.print(table)


@app.command()
def show(
    path: DataFile,
    nr: Annotated[int, typer.Argument(help="Function number")],
    cost_format: FormatOption = CostFormat.USEC,
    output_json: JsonOption = False,
) -> None:
    """Show a function with its callers and callees."""
    with open_data_file(path, cost_format) as reader:
        function = reader.get_function_info(nr)
        callers = [call_to_dict(reader, c) for c in reader.iter_called_from(nr)]
        callees = [call_to_dict(reader, c) for c in reader.iter_sub_calls(nr)]

        if output_json:
            result = function_to_dict(nr, function)
            result["called_from"] = callers
            result["sub_calls"] = callees
            print(json.dumps(result))
            return

        console.print(f"\n[bold cyan]{function.function_name}[/] [dim]#{nr}[/]")
        console.print(f"  [dim]{function.file}:{function.line}[/]")
        console.print(
            f"  Calls: {function.invocation_count}  "
            f"Self: {function.summed_self_cost}  "
            f"Inclusive: {function.summed_inclusive_cost}"
        )

        if not callers:
            console.print("  [dim]No callers recorded[/]")
        else:
            console.print("  [green]Called from:[/]")
            for caller in callers:
                console.print(
                    f"    [cyan]{caller['function_name']}[/] [dim](line {caller['line']})[/] "
                    f"x{caller['call_count']} {caller['summed_call_cost']}"
                )

        if not callees:
            console.print("  [dim]No calls recorded[/]")
        else:
            console.print("  [green]Calls:[/]")
            for callee in callees:
                console.print(
                    f"    [cyan]{callee['function_name']}[/] [dim](line {callee['line']})[/] "
                    f"x{callee['call_count']} {callee['summed_call_cost']}"
                )


@app.command()
def header(
    path: DataFile,
    key: Annotated[str, typer.Argument(help="Header key, e.g. cmd, events, summary")],
) -> None:
    """Print a single header value."""
    with open_data_file(path, CostFormat.USEC) as reader:
        print(reader.get_header(key))


if __name__ == "__main__":
    app()

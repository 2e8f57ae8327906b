"""CLI output formatting using rich."""

from rich.console import Console
from rich.markup import escape

from unixhttp.response import Response

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


STATUS_COLORS = {
    2: "green",
    3: "cyan",
    4: "yellow",
    5: "red",
}


def print_error(message: str) -> None:
    err_console.print(f"[red]error:[/red] {escape(message)}")


def print_head(response: Response) -> None:
    """Print the status line and headers of a response."""
    color = STATUS_COLORS.get(response.status // 100, "white")
    console.print(
        f"[bold]{escape(response.version)}[/bold] "
        f"[{color}]{response.status} {escape(response.reason_phrase)}[/{color}]"
    )
    for name, value in response.headers.multi_items():
        console.print(f"[bold]{escape(name)}[/bold]: {escape(value)}", soft_wrap=True)
    console.print()


def print_body(text: str) -> None:
    console.out(text, end="" if text.endswith("\n") else "\n")

import random
from contextlib import contextmanager
from typing import Iterator, Optional

from rich.console import Console


SPINNERS = (
    "dots",
    "dots2",
    "earth",
    "hearts",
    "clock",
    "moon",
    "runner",
    "pong",
    "bouncingBar",
    "bouncingBall",
    "arc",
    "point",
    "monkey",
    "christmas",
    "boxBounce",
    "triangle",
)


@contextmanager
def spinner(
    message: str,
    *,
    enabled: bool = True,
    done_message: Optional[str] = None,
    console: Optional[Console] = None,
) -> Iterator[None]:
    """Show a randomly styled status spinner while the block runs."""

    if not enabled:
        yield
        return

    console = console or Console(stderr=True)
    with console.status(f"[bold cyan]{message}[/]", spinner=random.choice(SPINNERS)):
        yield

    if done_message:
        console.print(f"[bold green]{done_message}[/]")

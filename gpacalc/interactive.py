from __future__ import annotations

from typing import Callable, Optional

from rich.markup import escape

from gpacalc.commands import CommandSurface
from gpacalc.display import Display


def run_interactive(surface: CommandSurface, prompt: Optional[Callable[[str], str]] = None) -> None:
    """
    Interactive screen loop.

    The screen numbers every action. Picking a button or checkbox runs its
    command; picking an input asks for the new value and stores it without
    redrawing the screen (only dependent fields are echoed). A blank line
    redraws the whole screen, 0 exits.
    """
    display = surface.display
    if display is None:
        display = Display()
        surface.display = display
    ask = prompt if prompt is not None else display.console.input

    surface.refresh()

    while True:
        choice = ask("\nSelect (number, blank = redraw, 0 = exit): ").strip()

        if choice == "0":
            display.message("Bye.")
            return
        if not choice:
            surface.refresh()
            continue
        if not choice.isdigit():
            display.message("Not a number.")
            continue

        node = display.action(int(choice))
        if node is None:
            display.message("Out of range.")
            continue

        if node.kind == "input":
            if node.readonly:
                display.message("This field is locked.")
                continue
            current = f" ({node.value})" if node.value else ""
            value = ask(escape(f"{node.text}{current}: "))
            surface.dispatch(*node.action, value.strip())
        else:
            surface.dispatch(*node.action)

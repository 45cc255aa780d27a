"""
Terminal display built on rich.

The display keeps the last committed tree. It has two update paths:

- commit(tree)      -> replace the tree and print the whole screen
- patch(patches)    -> change single inputs in the kept tree and print only
                       those fields, so a text entry flow is not interrupted

Actionable nodes are numbered in document order. While a modal is open only
the modal's actions are numbered (the page behind it is not clickable).
"""

from __future__ import annotations

import os
from typing import Iterable, Optional

from rich import box
from rich.console import Console, Group
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text

from gpacalc.controller import FieldPatch
from gpacalc.render import Node, apply_patch, find_node, iter_nodes


PALETTES = {
    "light": {"primary": "blue", "success": "green", "danger": "red", "debt": "dark_orange", "muted": "grey50"},
    "dark": {
        "primary": "bright_cyan",
        "success": "bright_green",
        "danger": "bright_red",
        "debt": "yellow",
        "muted": "grey62",
    },
}

ACTION_KINDS = ("button", "input", "checkbox")


def terminal_prefers_dark() -> bool:
    """
    Guess the terminal background from COLORFGBG ("fg;bg").
    Background colours 0-6 and 8 are dark.
    """
    raw = os.getenv("COLORFGBG", "")
    bg = raw.split(";")[-1] if raw else ""
    if not bg.isdigit():
        return False
    return int(bg) in (0, 1, 2, 3, 4, 5, 6, 8)


class Display:
    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()
        self.tree: Optional[Node] = None
        self.actions: dict[int, Node] = {}
        self._numbers: dict[int, int] = {}

    # -- public API -----------------------------------------------------------

    def commit(self, tree: Node) -> None:
        self.tree = tree
        self._number_actions(tree)
        self.console.clear()
        self.console.print(self._screen(tree))

    def patch(self, patches: Iterable[FieldPatch]) -> None:
        if self.tree is None:
            return
        for p in patches:
            self.tree = apply_patch(self.tree, p.key, p.value, p.readonly)
            node = find_node(self.tree, p.key)
            if node is None:
                continue
            # inputs keep their number: the tree shape did not change
            self._number_actions(self.tree)
            line = Text("  -> ")
            line.append(f"{node.text}: ", style="bold")
            line.append(node.value or "-")
            if node.readonly:
                line.append(" (locked)", style=self._style("muted"))
            self.console.print(line)

    def set_value(self, key: str, value: str) -> None:
        """Record an edited input in the kept tree without printing anything."""
        if self.tree is None:
            return
        node = next((n for n in iter_nodes(self.tree) if n.kind == "input" and n.key == key), None)
        if node is None:
            return
        self.tree = apply_patch(self.tree, key, value, node.readonly)
        self._number_actions(self.tree)

    def alert(self, title: str, message: str) -> None:
        self.console.print(Panel(Text(message), title=title, border_style=self._style("danger"), box=box.HEAVY))

    def message(self, text: str) -> None:
        self.console.print(Text(text))

    def action(self, number: int) -> Optional[Node]:
        return self.actions.get(number)

    # -- internals ------------------------------------------------------------

    def _palette(self) -> dict[str, str]:
        scheme = self.tree.attr("scheme", "light") if self.tree is not None else "light"
        return PALETTES.get(scheme, PALETTES["light"])

    def _style(self, tone: str) -> str:
        return self._palette().get(tone, "")

    def _number_actions(self, tree: Node) -> None:
        modal = next((c for c in tree.children if c.kind == "modal"), None)
        root = modal if modal is not None else tree
        self.actions = {}
        self._numbers = {}
        n = 0
        for node in iter_nodes(root):
            if node.kind in ACTION_KINDS and node.action:
                n += 1
                self.actions[n] = node
                self._numbers[id(node)] = n

    def _label(self, node: Node) -> Text:
        n = self._numbers.get(id(node))
        return Text(f"[{n}] " if n is not None else "    ", style=self._style("primary"))

    def _screen(self, tree: Node) -> Group:
        parts = []
        for child in tree.children:
            if child.kind == "modal":
                parts.append(
                    Panel(
                        Group(*self._lines(child)),
                        title=child.text,
                        border_style=self._style("primary"),
                        box=box.ROUNDED,
                    )
                )
            else:
                parts.append(Rule(style=self._style("muted")))
                parts.extend(self._lines(child))
        return Group(*parts)

    def _lines(self, node: Node) -> list[Text]:
        kind = node.kind
        if kind == "heading":
            return [Text(node.text, style="bold")]
        if kind == "text":
            return [Text(node.text, style=self._style(node.tone))]
        if kind == "button":
            return [self._button(node)]
        if kind == "input":
            return [self._input(node)]
        if kind == "checkbox":
            return [self._checkbox(node)]
        if kind == "stat":
            line = Text(f"{node.text}: ")
            line.append(node.value, style=f"bold {self._style(node.tone)}".strip())
            return [line]
        if kind == "badge":
            return [Text(f" {node.text} ", style=f"reverse {self._style(node.tone)}".strip())]
        if kind == "row":
            line = Text(node.text, style="bold")
            line.append(f"  {node.value}", style=self._style("muted"))
            for child in node.children:
                line.append("  ")
                line.append_text(self._button(child))
            return [line]
        if kind == "group":
            line = Text()
            for i, child in enumerate(node.children):
                if i:
                    line.append("  ")
                line.append_text(self._lines(child)[0])
            return [line]

        lines: list[Text] = []
        if kind == "section" and node.text:
            lines.append(Text(""))
            lines.append(Text(node.text, style="bold underline"))
        for child in node.children:
            lines.extend(self._lines(child))
        return lines

    def _button(self, node: Node) -> Text:
        line = self._label(node)
        if node.selected:
            line.append("* ", style=self._style("primary"))
        line.append(node.text, style=self._style(node.tone) or None)
        if node.value:
            line.append(f" - {node.value}", style=self._style("muted"))
        return line

    def _input(self, node: Node) -> Text:
        line = self._label(node)
        line.append(f"{node.text}: ")
        line.append(node.value or "-", style="bold" if node.value else self._style("muted"))
        if node.readonly:
            line.append(" (locked)", style=self._style("muted"))
        return line

    def _checkbox(self, node: Node) -> Text:
        line = self._label(node)
        line.append("[x] " if node.checked else "[ ] ")
        line.append(node.text)
        return line

"""
CLI (Command Line Interface).

This module provides quick terminal commands for power users and for testing, e.g.:

    gpacalc modules
    gpacalc add "Analysis" --coeff 4 --credits 6 --td 12 --exam 14
    gpacalc remove <module_id>
    gpacalc semester
    gpacalc annual 11.5 30 8.75 18
    gpacalc methods
    gpacalc set-method complex-25-25-50 --yes
    gpacalc settings --lang en --credits 45
    gpacalc interactive

Note:
- The interactive UI lives in gpacalc/interactive.py
- Every command goes through the same command surface as the interactive
  UI, so validation and persistence behave identically
- This CLI prints plain text (no rich formatting)
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from gpacalc import config
from gpacalc.commands import CommandSurface
from gpacalc.controller import Controller, Outcome, Session
from gpacalc.display import Display, terminal_prefers_dark
from gpacalc.logging_config import setup_logging
from gpacalc.model import AnnualResult, ConfirmModal, ModuleModal, ResultModal, SemesterResult
from gpacalc.storage import JsonFileStore

logger = logging.getLogger(__name__)


def _open_surface(args: argparse.Namespace) -> CommandSurface:
    """
    Load the persisted session and wrap it in a (display-less) command surface.
    """
    path = Path(args.data_dir) / "store.json" if args.data_dir else None
    store = JsonFileStore(path)
    controller = Controller(Session.start(store), store, prefers_dark=terminal_prefers_dark)
    return CommandSurface(controller)


def _alerted(surface: CommandSurface, outcome: Outcome) -> bool:
    """
    Print the alert of an outcome, if any. Returns True when there was one.
    """
    if outcome.alert:
        print(surface.t(outcome.alert))
        return True
    return False


def _fmt(x: float) -> str:
    return format(x, "g")


def _cmd_modules(surface: CommandSurface) -> int:
    """
    List the modules of the current semester.
    """
    modules = surface.controller.state.modules
    if not modules:
        print(surface.t("no_modules_yet"))
        return 0

    for m in modules:
        print(f"{m.id} | {m.name} | {m.grade:.2f} | coeff {_fmt(m.coeff)} | credits {_fmt(m.credits)}")
    return 0


def _cmd_add(args: argparse.Namespace, surface: CommandSurface) -> int:
    """
    Add a module: component grades are weighted with the current method.
    """
    surface.open_module_modal()
    modal = surface.controller.session.modal
    assert isinstance(modal, ModuleModal)

    surface.update_module_form("name", args.name or "")
    surface.update_module_form("coeff", args.coeff or "")
    surface.update_module_form("credits", args.credits or "")

    # only the components given on the command line are enabled
    for comp in ("td", "tp", "exam"):
        given = getattr(args, comp)
        if getattr(modal.form, f"{comp}_enabled") != (given is not None):
            surface.toggle_grade(comp)
        if given is not None:
            surface.update_module_form(f"{comp}Grade", given)

    before = {m.id for m in surface.controller.state.modules}
    if _alerted(surface, surface.save_module()):
        return 1

    added = [m for m in surface.controller.state.modules if m.id not in before]
    for m in added:
        print(f"Added: {m.name} ({m.grade:.2f}) id={m.id}")
    return 0


def _cmd_remove(args: argparse.Namespace, surface: CommandSurface) -> int:
    """
    Remove a module by id.
    """
    module_id = (args.module_id or "").strip()
    if surface.controller.state.find_module(module_id) is None:
        print(f"Not found: {module_id}")
        return 1

    surface.delete_module(module_id)
    print(f"Removed: {module_id} (modules: {len(surface.controller.state.modules)})")
    return 0


def _print_result(surface: CommandSurface, result: SemesterResult | AnnualResult) -> None:
    t = surface.t
    print(f"{t('result_label')}: {result.average:.2f}")
    print(f"{t('credits_label_result')}: {_fmt(result.credits)} / {result.total_possible_credits}")
    if isinstance(result, SemesterResult):
        print(f"{t('remark_label')}: {t('remark_' + result.remark_key)}")
    else:
        print(t("status_" + result.status_key))


def _cmd_semester(surface: CommandSurface) -> int:
    """
    Show the semester average of the stored modules.
    """
    if _alerted(surface, surface.calculate_semester()):
        return 1
    modal = surface.controller.session.modal
    assert isinstance(modal, ResultModal)
    _print_result(surface, modal.result)
    return 0


def _cmd_annual(args: argparse.Namespace, surface: CommandSurface) -> int:
    """
    Compute the annual average from both semesters.

    The values are stored like in the interactive annual page.
    """
    if args.required is not None:
        surface.set_credits(args.required)

    surface.handle_annual_input("s1AvgText", args.s1_avg)
    surface.handle_annual_input("s1CreditsText", args.s1_credits)
    surface.handle_annual_input("s2AvgText", args.s2_avg)
    surface.handle_annual_input("s2CreditsText", args.s2_credits)

    if _alerted(surface, surface.calculate_annual()):
        return 1
    modal = surface.controller.session.modal
    assert isinstance(modal, ResultModal)
    _print_result(surface, modal.result)
    return 0


def _cmd_methods(surface: CommandSurface) -> int:
    """
    List the weighting methods; the active one is marked with '*'.
    """
    current = surface.controller.method.id
    for m in surface.controller.available_methods():
        marker = "*" if m.id == current else " "
        print(f"{marker} {m.id} | {m.label}")
    return 0


def _confirm_or_abort(surface: CommandSurface, yes: bool) -> int:
    """
    Resolve a pending confirmation: run it with --yes, otherwise cancel.
    """
    modal = surface.controller.session.modal
    if not isinstance(modal, ConfirmModal):
        return 0
    if yes:
        surface.confirm_action()
        return 0
    print(surface.t(modal.message_key))
    print("Re-run with --yes to confirm.")
    surface.close_modal()
    return 1


def _cmd_set_method(args: argparse.Namespace, surface: CommandSurface) -> int:
    """
    Switch the weighting method (deletes modules, needs --yes if there are any).
    """
    method_id = (args.method_id or "").strip()
    if method_id not in {m.id for m in surface.controller.available_methods()}:
        print(f"Unknown method: {method_id}")
        return 1

    surface.set_method(method_id)
    rc = _confirm_or_abort(surface, args.yes)
    if rc == 0:
        print(f"Method: {surface.controller.method.id}")
    return rc


def _cmd_add_method(args: argparse.Namespace, surface: CommandSurface) -> int:
    """
    Add a custom weighting from percentages (TD / TP / exam).
    """
    surface.open_custom_method_modal()
    for comp in ("td", "tp"):
        value = getattr(args, comp)
        if value is not None:
            surface.toggle_custom_component(comp)
            surface.update_custom_method_form(comp, value)
    surface.update_custom_method_form("exam", args.exam)

    before = {m.id for m in surface.controller.available_methods()}
    if _alerted(surface, surface.save_custom_method()):
        return 1

    new_ids = [m.id for m in surface.controller.available_methods() if m.id not in before]
    print(f"Added method: {new_ids[0]}" if new_ids else "Method already exists.")
    return 0


def _cmd_settings(args: argparse.Namespace, surface: CommandSurface) -> int:
    """
    Update and print settings.
    """
    if args.lang:
        surface.set_lang(args.lang)
    if args.theme:
        surface.set_theme(args.theme)
    if args.credits is not None:
        surface.set_credits(args.credits)
    if args.save is not None and args.save != surface.controller.state.save_settings_enabled:
        surface.toggle_save_settings()

    s = surface.controller.state
    print(f"language: {s.language}")
    print(f"theme: {s.theme}")
    print(f"method: {surface.controller.method.id}")
    print(f"required credits: {s.required_credits_for_debt}")
    print(f"save data: {'on' if s.save_settings_enabled else 'off'}")
    return 0


def _cmd_reset(args: argparse.Namespace, surface: CommandSurface) -> int:
    """
    Delete every stored module, setting and value.
    """
    surface.open_data_modal()
    rc = _confirm_or_abort(surface, args.yes)
    if rc == 0:
        print("All data cleared.")
    return rc


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="gpacalc", description="GPA calculator")
    parser.add_argument("--data-dir", type=str, default=None, help="Directory of the data store")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", type=str, default=None, help="Also write logs to this file")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("interactive", help="Interactive screen mode")
    sub.add_parser("modules", help="List modules")

    p_add = sub.add_parser("add", help="Add a module")
    p_add.add_argument("name", type=str, help="Module name")
    p_add.add_argument("--coeff", type=str, default="", help="Coefficient (default 1)")
    p_add.add_argument("--credits", type=str, default="", help="Credits (default 1)")
    p_add.add_argument("--td", type=str, default=None, help="TD grade")
    p_add.add_argument("--tp", type=str, default=None, help="TP grade")
    p_add.add_argument("--exam", type=str, default=None, help="Exam grade")

    p_remove = sub.add_parser("remove", help="Remove a module by id")
    p_remove.add_argument("module_id", type=str, help="Module id (see 'modules')")

    sub.add_parser("semester", help="Show the semester result")

    p_annual = sub.add_parser("annual", help="Show the annual result")
    p_annual.add_argument("s1_avg", type=str, help="First semester average")
    p_annual.add_argument("s1_credits", type=str, help="First semester credits")
    p_annual.add_argument("s2_avg", type=str, help="Second semester average")
    p_annual.add_argument("s2_credits", type=str, help="Second semester credits")
    p_annual.add_argument("--required", type=int, choices=config.CREDIT_OPTIONS, default=None)

    sub.add_parser("methods", help="List weighting methods")

    p_method = sub.add_parser("set-method", help="Switch weighting method")
    p_method.add_argument("method_id", type=str, help="Method id (see 'methods')")
    p_method.add_argument("--yes", action="store_true", help="Confirm deleting existing modules")

    p_add_method = sub.add_parser("add-method", help="Add a custom weighting (percent)")
    p_add_method.add_argument("--td", type=str, default=None)
    p_add_method.add_argument("--tp", type=str, default=None)
    p_add_method.add_argument("--exam", type=str, default="100")

    p_settings = sub.add_parser("settings", help="Show or change settings")
    p_settings.add_argument("--lang", type=str, choices=config.LANGUAGES, default=None)
    p_settings.add_argument("--theme", type=str, choices=config.THEMES, default=None)
    p_settings.add_argument("--credits", type=int, choices=config.CREDIT_OPTIONS, default=None)
    p_settings.add_argument("--save", dest="save", action="store_true", default=None, help="Remember data")
    p_settings.add_argument("--no-save", dest="save", action="store_false", help="Forget data")

    p_reset = sub.add_parser("reset", help="Delete all stored data")
    p_reset.add_argument("--yes", action="store_true", help="Confirm")

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)

    surface = _open_surface(args)

    if args.command == "modules":
        raise SystemExit(_cmd_modules(surface))
    if args.command == "add":
        raise SystemExit(_cmd_add(args, surface))
    if args.command == "remove":
        raise SystemExit(_cmd_remove(args, surface))
    if args.command == "semester":
        raise SystemExit(_cmd_semester(surface))
    if args.command == "annual":
        raise SystemExit(_cmd_annual(args, surface))
    if args.command == "methods":
        raise SystemExit(_cmd_methods(surface))
    if args.command == "set-method":
        raise SystemExit(_cmd_set_method(args, surface))
    if args.command == "add-method":
        raise SystemExit(_cmd_add_method(args, surface))
    if args.command == "settings":
        raise SystemExit(_cmd_settings(args, surface))
    if args.command == "reset":
        raise SystemExit(_cmd_reset(args, surface))

    if args.command == "interactive":
        from gpacalc.interactive import run_interactive

        surface.display = Display()
        run_interactive(surface)
        raise SystemExit(0)

    raise SystemExit(2)

"""
Command surface.

One method per user action. Each one forwards to the Controller and applies
the returned Outcome to the display:

- alert   -> blocking message (translated)
- patches -> field-level update, no full render
- render  -> whole screen is rebuilt from the session

The surface also works without a display (CLI one-shot commands): outcomes
are then only returned to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from gpacalc.controller import ANNUAL_FIELDS, Controller, Outcome
from gpacalc.display import Display
from gpacalc.i18n import Translator, translate as default_translate
from gpacalc.render import Node, render

logger = logging.getLogger(__name__)


COMMANDS = frozenset(
    {
        "navigate",
        "set_theme",
        "set_lang",
        "set_method",
        "set_credits",
        "toggle_save_settings",
        "open_module_modal",
        "update_module_form",
        "toggle_grade",
        "save_module",
        "delete_module",
        "delete_all_modules",
        "calculate_semester",
        "handle_annual_input",
        "calculate_annual",
        "clear_annual",
        "open_info_modal",
        "open_privacy_modal",
        "open_data_modal",
        "open_custom_method_modal",
        "update_custom_method_form",
        "toggle_custom_component",
        "save_custom_method",
        "close_modal",
        "confirm_action",
    }
)


class CommandSurface:
    def __init__(
        self,
        controller: Controller,
        display: Optional[Display] = None,
        translate: Translator = default_translate,
    ) -> None:
        self.controller = controller
        self.display = display
        self.translate = translate

    def t(self, key: str) -> str:
        return self.translate(self.controller.state.language, key)

    def screen(self) -> Node:
        session = self.controller.session
        return render(
            session.state,
            session.page,
            session.modal,
            translate=self.translate,
            dark=self.controller.is_dark(),
        )

    def refresh(self) -> None:
        if self.display is not None:
            self.display.commit(self.screen())

    def dispatch(self, name: str, *args: Any) -> Outcome:
        if name not in COMMANDS:
            raise ValueError(f"Unknown command: {name!r}")
        logger.debug("command %s%r", name, args)
        return getattr(self, name)(*args)

    def _echo(self, key: str, value: str) -> None:
        if self.display is not None:
            self.display.set_value(key, value)

    def _apply(self, outcome: Outcome) -> Outcome:
        if self.display is None:
            return outcome
        if outcome.alert:
            self.display.alert(self.t("alert_title"), self.t(outcome.alert))
        if outcome.patches:
            self.display.patch(outcome.patches)
        if outcome.render:
            self.refresh()
        return outcome

    # -- navigation & settings ----------------------------------------------

    def navigate(self, page: str) -> Outcome:
        return self._apply(self.controller.navigate(page))

    def set_theme(self, theme: str) -> Outcome:
        return self._apply(self.controller.set_theme(theme))

    def set_lang(self, language: str) -> Outcome:
        return self._apply(self.controller.set_lang(language))

    def set_method(self, method_id: str) -> Outcome:
        return self._apply(self.controller.set_method(method_id))

    def set_credits(self, credits: int) -> Outcome:
        return self._apply(self.controller.set_credits(int(credits)))

    def toggle_save_settings(self) -> Outcome:
        return self._apply(self.controller.toggle_save_settings())

    # -- modules ------------------------------------------------------------

    def open_module_modal(self, module_id: Optional[str] = None) -> Outcome:
        return self._apply(self.controller.open_module_modal(module_id))

    def update_module_form(self, field_key: str, value: str) -> Outcome:
        outcome = self.controller.update_module_form(field_key, value)
        self._echo(field_key, value)
        return self._apply(outcome)

    def toggle_grade(self, component: str) -> Outcome:
        return self._apply(self.controller.toggle_grade(component))

    def save_module(self) -> Outcome:
        return self._apply(self.controller.save_module())

    def delete_module(self, module_id: str) -> Outcome:
        return self._apply(self.controller.delete_module(module_id))

    def delete_all_modules(self) -> Outcome:
        return self._apply(self.controller.delete_all_modules())

    def calculate_semester(self) -> Outcome:
        return self._apply(self.controller.calculate_semester())

    # -- annual -------------------------------------------------------------

    def handle_annual_input(self, field_key: str, value: str) -> Outcome:
        outcome = self.controller.handle_annual_input(field_key, value)
        # locked fields keep their stored value
        self._echo(field_key, getattr(self.controller.state, ANNUAL_FIELDS[field_key]))
        return self._apply(outcome)

    def calculate_annual(self) -> Outcome:
        return self._apply(self.controller.calculate_annual())

    def clear_annual(self) -> Outcome:
        return self._apply(self.controller.clear_annual())

    # -- custom weighting ---------------------------------------------------

    def open_custom_method_modal(self) -> Outcome:
        return self._apply(self.controller.open_custom_method_modal())

    def update_custom_method_form(self, field_key: str, value: str) -> Outcome:
        outcome = self.controller.update_custom_method_form(field_key, value)
        self._echo(f"weight-{field_key}", value)
        return self._apply(outcome)

    def toggle_custom_component(self, component: str) -> Outcome:
        return self._apply(self.controller.toggle_custom_component(component))

    def save_custom_method(self) -> Outcome:
        return self._apply(self.controller.save_custom_method())

    # -- modals -------------------------------------------------------------

    def open_info_modal(self) -> Outcome:
        return self._apply(self.controller.open_info_modal())

    def open_privacy_modal(self) -> Outcome:
        return self._apply(self.controller.open_privacy_modal())

    def open_data_modal(self) -> Outcome:
        return self._apply(self.controller.open_data_modal())

    def close_modal(self) -> Outcome:
        return self._apply(self.controller.close_modal())

    def confirm_action(self) -> Outcome:
        return self._apply(self.controller.confirm_action())

"""
Application state and the navigation / modal controller.

The Session is the one explicitly owned state object:

    state  -> AppState (persisted)
    page   -> current page (transient)
    modal  -> current modal, including any form draft (transient)

Every command is a Controller method. It mutates the session and returns an
Outcome telling the caller what to do with the screen:

- render=True          -> rebuild the whole screen
- patches=(...)        -> update only those fields (text input keeps focus)
- alert="<key>"        -> show a blocking message, nothing was changed
- nothing set          -> leave the screen as it is

Page and modal are independent: navigation never closes a modal and closing
a modal never changes the page.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable, Optional

from gpacalc import config
from gpacalc.calculators import (
    build_custom_method,
    compute_annual_result,
    compute_module_grade,
    compute_semester_result,
    is_passing_average,
    parse_number,
    resolve_method,
)
from gpacalc.errors import InputError
from gpacalc.model import (
    AppState,
    ClearAllData,
    ClearAllModules,
    ComplexMethod,
    ConfirmAction,
    ConfirmModal,
    CustomMethodForm,
    CustomMethodModal,
    InfoModal,
    Modal,
    Module,
    ModuleForm,
    ModuleModal,
    PREDEFINED_METHODS,
    PrivacyModal,
    ResultModal,
    SwitchMethod,
    WeightingMethod,
)
from gpacalc.storage import KeyValueStore, clear_all, load_preference, load_state, save_state

logger = logging.getLogger(__name__)


# Annual input key -> AppState attribute
ANNUAL_FIELDS = {
    "s1AvgText": "s1_avg_text",
    "s1CreditsText": "s1_credits_text",
    "s2AvgText": "s2_avg_text",
    "s2CreditsText": "s2_credits_text",
}
# Average field -> the credits field it locks
PAIRED_CREDITS = {"s1AvgText": "s1CreditsText", "s2AvgText": "s2CreditsText"}

MODULE_FORM_FIELDS = {
    "name": "name",
    "coeff": "coeff",
    "credits": "credits",
    "tdGrade": "td_grade",
    "tpGrade": "tp_grade",
    "examGrade": "exam_grade",
}
GRADE_COMPONENTS = ("td", "tp", "exam")

CUSTOM_METHOD_FIELDS = ("td", "tp", "exam")


@dataclass(frozen=True)
class FieldPatch:
    """A targeted update of one input, applied without a full render."""

    key: str
    value: str
    readonly: bool = False


@dataclass(frozen=True)
class Outcome:
    render: bool = False
    patches: tuple[FieldPatch, ...] = ()
    alert: Optional[str] = None


FULL_RENDER = Outcome(render=True)
NO_RENDER = Outcome()


def _alert(message_key: str) -> Outcome:
    return Outcome(alert=message_key)


def _fmt(x: Optional[float]) -> str:
    return "" if x is None else format(x, "g")


def _new_module_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Session:
    state: AppState = field(default_factory=AppState)
    page: str = "main"
    modal: Optional[Modal] = None

    @classmethod
    def start(cls, store: KeyValueStore) -> "Session":
        """Load the persisted state; page and modal start from scratch."""
        return cls(state=load_state(store, load_preference(store)))


class Controller:
    def __init__(
        self,
        session: Session,
        store: KeyValueStore,
        prefers_dark: Optional[Callable[[], bool]] = None,
    ) -> None:
        self.session = session
        self.store = store
        self.prefers_dark = prefers_dark

    # -- helpers ------------------------------------------------------------

    @property
    def state(self) -> AppState:
        return self.session.state

    @property
    def method(self) -> WeightingMethod:
        return resolve_method(self.state.calculation_method_id, self.state.custom_calculation_methods)

    def available_methods(self) -> list[WeightingMethod]:
        return list(PREDEFINED_METHODS) + list(self.state.custom_calculation_methods)

    def is_dark(self) -> bool:
        if self.state.theme == "dark":
            return True
        if self.state.theme == "automatic" and self.prefers_dark is not None:
            return bool(self.prefers_dark())
        return False

    def _save(self) -> None:
        save_state(self.store, self.state)

    # -- navigation & settings ------------------------------------------------

    def navigate(self, page: str) -> Outcome:
        if page not in config.PAGES:
            raise ValueError(f"Unknown page: {page!r}")
        self.session.page = page
        return FULL_RENDER

    def set_theme(self, theme: str) -> Outcome:
        if theme not in config.THEMES:
            raise ValueError(f"Unknown theme: {theme!r}")
        self.state.theme = theme
        self._save()
        return FULL_RENDER

    def set_lang(self, language: str) -> Outcome:
        self.state.language = language
        self._save()
        return FULL_RENDER

    def set_method(self, method_id: str) -> Outcome:
        """
        Switch the weighting method.

        Stored module grades are already weighted, so with modules present
        the switch discards them and must be confirmed first.
        """
        if self.state.modules and method_id != self.state.calculation_method_id:
            self.session.modal = ConfirmModal("confirm_change_calc_method", SwitchMethod(method_id))
            return FULL_RENDER
        self.state.calculation_method_id = method_id
        self._save()
        return FULL_RENDER

    def set_credits(self, credits: int) -> Outcome:
        if credits not in config.CREDIT_OPTIONS:
            raise ValueError(f"Required credits must be one of {config.CREDIT_OPTIONS}")
        self.state.required_credits_for_debt = credits
        self._save()
        return FULL_RENDER

    def toggle_save_settings(self) -> Outcome:
        self.state.save_settings_enabled = not self.state.save_settings_enabled
        self._save()
        return FULL_RENDER

    # -- modules --------------------------------------------------------------

    def open_module_modal(self, module_id: Optional[str] = None) -> Outcome:
        existing = self.state.find_module(module_id) if module_id else None
        is_complex = isinstance(self.method, ComplexMethod)

        if existing is None:
            form = ModuleForm(td_enabled=is_complex, tp_enabled=is_complex)
        elif existing.has_components:
            form = ModuleForm(
                module_id=existing.id,
                name=existing.name,
                coeff=_fmt(existing.coeff),
                credits=_fmt(existing.credits),
                td_grade=_fmt(existing.td_grade),
                tp_grade=_fmt(existing.tp_grade),
                exam_grade=_fmt(existing.exam_grade),
                td_enabled=existing.td_grade is not None,
                tp_enabled=existing.tp_grade is not None,
                exam_enabled=existing.exam_grade is not None,
            )
        else:
            # Module saved without its breakdown: only the final grade is known
            form = ModuleForm(
                module_id=existing.id,
                name=existing.name,
                coeff=_fmt(existing.coeff),
                credits=_fmt(existing.credits),
                exam_grade=_fmt(existing.grade),
                td_enabled=is_complex,
                tp_enabled=is_complex,
            )

        self.session.modal = ModuleModal(form)
        return FULL_RENDER

    def update_module_form(self, field_key: str, value: str) -> Outcome:
        modal = self.session.modal
        if not isinstance(modal, ModuleModal):
            return NO_RENDER
        attr = MODULE_FORM_FIELDS.get(field_key)
        if attr is None:
            raise ValueError(f"Unknown module form field: {field_key!r}")
        setattr(modal.form, attr, value)
        return NO_RENDER

    def toggle_grade(self, component: str) -> Outcome:
        modal = self.session.modal
        if not isinstance(modal, ModuleModal):
            return NO_RENDER
        if component not in GRADE_COMPONENTS:
            raise ValueError(f"Unknown grade component: {component!r}")
        attr = f"{component}_enabled"
        setattr(modal.form, attr, not getattr(modal.form, attr))
        return FULL_RENDER

    def save_module(self) -> Outcome:
        modal = self.session.modal
        if not isinstance(modal, ModuleModal):
            return NO_RENDER
        form = modal.form

        name = form.name.strip()
        if not name:
            return _alert("error_module_name_required")

        coeff = parse_number(form.coeff)
        if coeff is None or coeff <= 0:
            coeff = 1.0
        credits = parse_number(form.credits)
        if credits is None or credits < 0:
            credits = 1.0

        module = Module(
            id=form.module_id or _new_module_id(),
            name=name,
            coeff=coeff,
            credits=credits,
            grade=compute_module_grade(form, self.method),
            td_grade=(parse_number(form.td_grade) or 0.0) if form.td_enabled else None,
            tp_grade=(parse_number(form.tp_grade) or 0.0) if form.tp_enabled else None,
            exam_grade=(parse_number(form.exam_grade) or 0.0) if form.exam_enabled else None,
        )

        if form.module_id and self.state.find_module(form.module_id) is not None:
            self.state.modules = [module if m.id == form.module_id else m for m in self.state.modules]
        else:
            self.state.modules.append(module)
        logger.debug("Saved module %s (grade %.2f)", module.id, module.grade)

        self._save()
        self.session.modal = None
        return FULL_RENDER

    def delete_module(self, module_id: str) -> Outcome:
        self.state.modules = [m for m in self.state.modules if m.id != module_id]
        self._save()
        return FULL_RENDER

    def delete_all_modules(self) -> Outcome:
        if not self.state.modules:
            return NO_RENDER
        self.session.modal = ConfirmModal("confirm_delete_all_modules", ClearAllModules())
        return FULL_RENDER

    def calculate_semester(self) -> Outcome:
        if not self.state.modules:
            return _alert("error_no_modules")
        self.session.modal = ResultModal(compute_semester_result(self.state.modules))
        return FULL_RENDER

    # -- annual calculator ----------------------------------------------------

    def credits_locked(self, credits_key: str) -> bool:
        for avg_key, paired in PAIRED_CREDITS.items():
            if paired == credits_key:
                return is_passing_average(getattr(self.state, ANNUAL_FIELDS[avg_key]))
        return False

    def handle_annual_input(self, field_key: str, value: str) -> Outcome:
        """
        Store one annual text field without re-rendering.

        A passing semester average grants all 30 credits: the paired credits
        field is set to "30" and locked through a field patch.
        """
        attr = ANNUAL_FIELDS.get(field_key)
        if attr is None:
            raise ValueError(f"Unknown annual field: {field_key!r}")
        if self.credits_locked(field_key):
            return NO_RENDER

        setattr(self.state, attr, value)

        patches: list[FieldPatch] = []
        credits_key = PAIRED_CREDITS.get(field_key)
        if credits_key is not None and is_passing_average(value):
            credits_value = str(config.SEMESTER_CREDITS)
            setattr(self.state, ANNUAL_FIELDS[credits_key], credits_value)
            patches.append(FieldPatch(credits_key, credits_value, readonly=True))

        self._save()
        return Outcome(patches=tuple(patches))

    def calculate_annual(self) -> Outcome:
        s = self.state
        try:
            result = compute_annual_result(
                s.s1_avg_text, s.s1_credits_text, s.s2_avg_text, s.s2_credits_text, s.required_credits_for_debt
            )
        except InputError as e:
            return _alert(e.message_key)
        self.session.modal = ResultModal(result)
        return FULL_RENDER

    def clear_annual(self) -> Outcome:
        for attr in ANNUAL_FIELDS.values():
            setattr(self.state, attr, "")
        self._save()
        return FULL_RENDER

    # -- custom weighting methods ---------------------------------------------

    def open_custom_method_modal(self) -> Outcome:
        self.session.modal = CustomMethodModal(CustomMethodForm())
        return FULL_RENDER

    def update_custom_method_form(self, field_key: str, value: str) -> Outcome:
        modal = self.session.modal
        if not isinstance(modal, CustomMethodModal):
            return NO_RENDER
        if field_key not in CUSTOM_METHOD_FIELDS:
            raise ValueError(f"Unknown weighting field: {field_key!r}")
        setattr(modal.form, field_key, value)
        return NO_RENDER

    def toggle_custom_component(self, component: str) -> Outcome:
        modal = self.session.modal
        if not isinstance(modal, CustomMethodModal):
            return NO_RENDER
        if component not in ("td", "tp"):
            raise ValueError(f"Unknown weighting component: {component!r}")
        attr = f"{component}_enabled"
        setattr(modal.form, attr, not getattr(modal.form, attr))
        return FULL_RENDER

    def save_custom_method(self) -> Outcome:
        modal = self.session.modal
        if not isinstance(modal, CustomMethodModal):
            return NO_RENDER
        f = modal.form
        try:
            method = build_custom_method(f.td, f.tp, f.exam, f.td_enabled, f.tp_enabled)
        except InputError as e:
            return _alert(e.message_key)

        if all(m.id != method.id for m in self.available_methods()):
            self.state.custom_calculation_methods.append(method)
            self._save()
        self.session.modal = None
        return FULL_RENDER

    # -- plain modals ---------------------------------------------------------

    def open_info_modal(self) -> Outcome:
        self.session.modal = InfoModal()
        return FULL_RENDER

    def open_privacy_modal(self) -> Outcome:
        self.session.modal = PrivacyModal()
        return FULL_RENDER

    def open_data_modal(self) -> Outcome:
        self.session.modal = ConfirmModal("confirm_clear_all_data", ClearAllData())
        return FULL_RENDER

    def close_modal(self) -> Outcome:
        if self.session.modal is None:
            return NO_RENDER
        self.session.modal = None
        return FULL_RENDER

    def confirm_action(self) -> Outcome:
        """Run the pending confirmation (if any), then close the modal."""
        modal = self.session.modal
        if modal is None:
            return NO_RENDER
        if isinstance(modal, ConfirmModal):
            self._run_confirmed(modal.action)
        self.session.modal = None
        return FULL_RENDER

    def _run_confirmed(self, action: ConfirmAction) -> None:
        if isinstance(action, ClearAllModules):
            self.state.modules = []
            self._save()
        elif isinstance(action, SwitchMethod):
            self.state.calculation_method_id = action.method_id
            self.state.modules = []
            self._save()
        elif isinstance(action, ClearAllData):
            clear_all(self.store)
            # same as a fresh start
            self.session.state = load_state(self.store, load_preference(self.store))
            self.session.page = "main"
        logger.info("Confirmed %s", type(action).__name__)

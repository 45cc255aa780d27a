"""
Render engine.

render() turns (AppState, page, modal) into an immutable tree of Node objects.
It is a pure function: the same inputs always give an equal tree, and no
state lives outside those inputs. The display commits the tree as a whole.

Actionable nodes (buttons, checkboxes, inputs) carry an `action` tuple
(command name, *args). For inputs the typed value is appended as the last
argument when the command is dispatched.

apply_patch() is the second, narrower channel: it replaces a single input
in an existing tree without rebuilding anything else.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator, Optional

from gpacalc import config
from gpacalc.calculators import is_passing_average, resolve_method
from gpacalc.i18n import Translator, translate as default_translate
from gpacalc.model import (
    AnnualResult,
    AppState,
    ConfirmModal,
    CustomMethodModal,
    InfoModal,
    Modal,
    ModuleModal,
    PREDEFINED_METHODS,
    PrivacyModal,
    ResultModal,
)


LANGUAGE_NAMES = {"ar": "العربية", "fr": "Français", "en": "English"}

STATUS_TONES = {"pass": "success", "debt": "debt", "fail": "danger"}


@dataclass(frozen=True)
class Node:
    kind: str
    key: str = ""
    text: str = ""
    value: str = ""
    readonly: bool = False
    checked: bool = False
    selected: bool = False
    tone: str = ""
    action: tuple = ()
    children: tuple["Node", ...] = ()
    attrs: tuple[tuple[str, str], ...] = ()

    def attr(self, name: str, default: str = "") -> str:
        for k, v in self.attrs:
            if k == name:
                return v
        return default


def iter_nodes(tree: Node) -> Iterator[Node]:
    """Depth-first, document order."""
    yield tree
    for child in tree.children:
        yield from iter_nodes(child)


def find_node(tree: Node, key: str) -> Optional[Node]:
    for node in iter_nodes(tree):
        if node.key == key:
            return node
    return None


def apply_patch(tree: Node, key: str, value: str, readonly: bool) -> Node:
    """Return a copy of tree where only the input `key` is changed."""
    if tree.kind == "input" and tree.key == key:
        return replace(tree, value=value, readonly=readonly)
    if not tree.children:
        return tree
    children = tuple(apply_patch(c, key, value, readonly) for c in tree.children)
    if all(a is b for a, b in zip(children, tree.children)):
        return tree
    return replace(tree, children=children)


def _fmt(x: float) -> str:
    return format(x, "g")


class _Renderer:
    def __init__(self, state: AppState, t: Translator) -> None:
        self.state = state
        self.lang = state.language
        self._t = t

    def t(self, key: str) -> str:
        return self._t(self.lang, key)

    def button(self, key: str, text: str, *action, value: str = "", selected: bool = False, tone: str = "") -> Node:
        return Node("button", key=key, text=text, value=value, selected=selected, tone=tone, action=tuple(action))

    def header(self, title_key: str, *extra: Node) -> Node:
        return Node(
            "header",
            key="header",
            children=(Node("heading", text=self.t(title_key)),) + extra
            + (self.button("back", self.t("back"), "navigate", "main"),),
        )

    # -- pages --------------------------------------------------------------

    def page(self, page: str) -> Node:
        if page == "semester-calculator":
            return self.semester_page()
        if page == "annual-calculator":
            return self.annual_page()
        if page == "settings":
            return self.settings_page()
        return self.main_page()

    def main_page(self) -> Node:
        return Node(
            "page",
            key="main",
            children=(
                Node("heading", text=self.t("app_title")),
                self.button(
                    "semester-card",
                    self.t("semester_gpa_card_title"),
                    "navigate",
                    "semester-calculator",
                    value=self.t("semester_gpa_card_desc"),
                ),
                self.button(
                    "annual-card",
                    self.t("annual_gpa_card_title"),
                    "navigate",
                    "annual-calculator",
                    value=self.t("annual_gpa_card_desc"),
                ),
                self.button("settings-card", self.t("settings"), "navigate", "settings"),
            ),
        )

    def semester_page(self) -> Node:
        rows: list[Node] = []
        for m in self.state.modules:
            summary = (
                f"{self.t('grade_th')}: {m.grade:.2f} | "
                f"{self.t('coeff_th')}: {_fmt(m.coeff)} | "
                f"{self.t('credits_th')}: {_fmt(m.credits)}"
            )
            rows.append(
                Node(
                    "row",
                    key=f"module-{m.id}",
                    text=m.name,
                    value=summary,
                    children=(
                        self.button(f"edit-{m.id}", self.t("edit"), "open_module_modal", m.id),
                        self.button(f"delete-{m.id}", self.t("delete"), "delete_module", m.id, tone="danger"),
                    ),
                )
            )
        if not rows:
            rows.append(Node("text", key="empty", text=self.t("no_modules_yet"), tone="muted"))

        return Node(
            "page",
            key="semester-calculator",
            children=(
                self.header("semester_gpa_title"),
                Node("section", key="modules", children=tuple(rows)),
                Node(
                    "footer",
                    children=(
                        self.button("add-module", self.t("add_new_module"), "open_module_modal", tone="success"),
                        self.button(
                            "delete-all", self.t("delete_all_modules"), "delete_all_modules", tone="danger"
                        ),
                        self.button("semester-result", self.t("show_result"), "calculate_semester"),
                    ),
                ),
            ),
        )

    def _semester_inputs(self, n: int) -> Node:
        avg_key = f"s{n}AvgText"
        credits_key = f"s{n}CreditsText"
        avg = getattr(self.state, f"s{n}_avg_text")
        credits = getattr(self.state, f"s{n}_credits_text")
        return Node(
            "section",
            key=f"s{n}",
            text=self.t(f"s{n}_title"),
            children=(
                Node(
                    "input",
                    key=avg_key,
                    text=self.t("gpa_placeholder"),
                    value=avg,
                    action=("handle_annual_input", avg_key),
                ),
                Node(
                    "input",
                    key=credits_key,
                    text=self.t("credits_placeholder"),
                    value=credits,
                    readonly=is_passing_average(avg),
                    action=("handle_annual_input", credits_key),
                ),
            ),
        )

    def annual_page(self) -> Node:
        return Node(
            "page",
            key="annual-calculator",
            children=(
                self.header("annual_gpa_title", self.button("info", self.t("annual_info"), "open_info_modal")),
                self._semester_inputs(1),
                self._semester_inputs(2),
                self.button("credits-prompt", self.t("set_credits_prompt"), "navigate", "settings", tone="muted"),
                Node(
                    "footer",
                    children=(
                        self.button("annual-result", self.t("show_result"), "calculate_annual"),
                        self.button("clear-annual", self.t("clear"), "clear_annual", tone="danger"),
                    ),
                ),
            ),
        )

    def settings_page(self) -> Node:
        s = self.state
        current = resolve_method(s.calculation_method_id, s.custom_calculation_methods)
        methods = tuple(
            self.button(f"method-{m.id}", m.label, "set_method", m.id, selected=m.id == current.id)
            for m in list(PREDEFINED_METHODS) + list(s.custom_calculation_methods)
        )
        credit_options = tuple(
            self.button(
                f"credits-{n}",
                self.t(f"set_credits_option_{n}"),
                "set_credits",
                n,
                selected=s.required_credits_for_debt == n,
            )
            for n in config.CREDIT_OPTIONS
        )
        theme_labels = {"light": "light_theme", "dark": "dark_theme", "automatic": "theme_auto"}
        themes = tuple(
            self.button(f"theme-{th}", self.t(theme_labels[th]), "set_theme", th, selected=s.theme == th)
            for th in config.THEMES
        )
        languages = tuple(
            self.button(f"lang-{tag}", LANGUAGE_NAMES[tag], "set_lang", tag, selected=s.language == tag)
            for tag in config.LANGUAGES
        )

        return Node(
            "page",
            key="settings",
            children=(
                self.header("settings"),
                Node(
                    "section",
                    key="method",
                    text=self.t("calculation_method"),
                    children=methods
                    + (self.button("add-weighting", self.t("add_new_weighting"), "open_custom_method_modal"),),
                ),
                Node("section", key="credits", text=self.t("set_credits"), children=credit_options),
                Node("section", key="theme", text=self.t("theme"), children=themes),
                Node("section", key="language", text=self.t("language"), children=languages),
                Node(
                    "section",
                    key="data",
                    children=(
                        Node(
                            "checkbox",
                            key="save-settings",
                            text=self.t("save_settings"),
                            checked=s.save_settings_enabled,
                            action=("toggle_save_settings",),
                        ),
                        self.button(
                            "clear-data",
                            self.t("save_changes"),
                            "open_data_modal",
                            value=self.t("save_changes_subtitle"),
                            tone="danger",
                        ),
                        self.button("privacy", self.t("privacy_policy"), "open_privacy_modal"),
                    ),
                ),
            ),
        )

    # -- modals -------------------------------------------------------------

    def modal(self, modal: Modal) -> Node:
        if isinstance(modal, ModuleModal):
            return self.module_modal(modal)
        if isinstance(modal, ResultModal):
            return self.result_modal(modal)
        if isinstance(modal, InfoModal):
            return self._modal(
                modal.kind,
                "annual_info_modal_title",
                (Node("text", text=self.t("annual_info_modal_p1")),),
                (self.button("ok", self.t("ok"), "close_modal"),),
            )
        if isinstance(modal, PrivacyModal):
            return self._modal(
                modal.kind,
                "privacy_policy_title",
                (
                    Node("text", text=self.t("privacy_policy_intro")),
                    Node("heading", text=self.t("privacy_policy_h1")),
                    Node("text", text=self.t("privacy_policy_p1")),
                ),
                (self.button("ok", self.t("ok"), "close_modal"),),
            )
        if isinstance(modal, ConfirmModal):
            return self._modal(
                modal.kind,
                "alert_title",
                (Node("text", text=self.t(modal.message_key)),),
                (
                    self.button("confirm", self.t("confirm"), "confirm_action", tone="danger"),
                    self.button("cancel", self.t("cancel"), "close_modal"),
                ),
            )
        if isinstance(modal, CustomMethodModal):
            return self.custom_method_modal(modal)
        raise TypeError(f"Unknown modal: {modal!r}")

    def _modal(self, kind: str, title_key: str, content: tuple[Node, ...], actions: tuple[Node, ...]) -> Node:
        return Node(
            "modal",
            key=kind,
            text=self.t(title_key),
            children=content + (Node("actions", children=actions),),
        )

    def module_modal(self, modal: ModuleModal) -> Node:
        form = modal.form

        def text_input(key: str, label_key: str, value: str) -> Node:
            return Node("input", key=key, text=self.t(label_key), value=value, action=("update_module_form", key))

        components = []
        for comp in ("td", "tp", "exam"):
            enabled = getattr(form, f"{comp}_enabled")
            components.append(
                Node(
                    "group",
                    key=f"{comp}-group",
                    children=(
                        Node(
                            "checkbox",
                            key=f"{comp}Enabled",
                            text=self.t(f"grade_{comp}_label"),
                            checked=enabled,
                            action=("toggle_grade", comp),
                        ),
                        Node(
                            "input",
                            key=f"{comp}Grade",
                            text="0-20",
                            value=getattr(form, f"{comp}_grade"),
                            readonly=not enabled,
                            action=("update_module_form", f"{comp}Grade"),
                        ),
                    ),
                )
            )

        return self._modal(
            modal.kind,
            "edit_module_title" if form.module_id else "add_module_title",
            (
                text_input("name", "module_name_label", form.name),
                text_input("coeff", "coeff_label", form.coeff),
                text_input("credits", "credits_label", form.credits),
                Node("section", key="grades", text=self.t("calc_module_gpa"), children=tuple(components)),
            ),
            (
                self.button("save", self.t("save"), "save_module"),
                self.button("cancel", self.t("cancel"), "close_modal"),
            ),
        )

    def result_modal(self, modal: ResultModal) -> Node:
        r = modal.result
        avg_tone = "success" if r.average >= config.PASS_MARK else "danger"
        credits_text = f"{_fmt(r.credits)} / {r.total_possible_credits}"

        if isinstance(r, AnnualResult):
            content = (
                Node("stat", key="average", text=self.t("annual_gpa_card_title"), value=f"{r.average:.2f}", tone=avg_tone),
                Node("stat", key="credits", text=self.t("credits_label_result"), value=credits_text),
                Node("badge", key="status", text=self.t(f"status_{r.status_key}"), tone=STATUS_TONES[r.status_key]),
            )
            title_key = "annual_result_title"
        else:
            content = (
                Node("stat", key="average", text=self.t("result_label"), value=f"{r.average:.2f}", tone=avg_tone),
                Node("stat", key="credits", text=self.t("credits_label_result"), value=credits_text),
                Node("stat", key="remark", text=self.t("remark_label"), value=self.t(f"remark_{r.remark_key}")),
            )
            title_key = "semester_result_title"

        return self._modal(modal.kind, title_key, content, (self.button("ok", self.t("ok"), "close_modal"),))

    def custom_method_modal(self, modal: CustomMethodModal) -> Node:
        form = modal.form
        rows = []
        for comp in ("td", "tp"):
            enabled = getattr(form, f"{comp}_enabled")
            rows.append(
                Node(
                    "group",
                    key=f"weight-{comp}-group",
                    children=(
                        Node(
                            "checkbox",
                            key=f"weight-{comp}-enabled",
                            text=self.t(f"grade_{comp}_label"),
                            checked=enabled,
                            action=("toggle_custom_component", comp),
                        ),
                        Node(
                            "input",
                            key=f"weight-{comp}",
                            text=self.t(f"weight_{comp}_label"),
                            value=getattr(form, comp),
                            readonly=not enabled,
                            action=("update_custom_method_form", comp),
                        ),
                    ),
                )
            )
        rows.append(
            Node(
                "input",
                key="weight-exam",
                text=self.t("weight_exam_label"),
                value=form.exam,
                action=("update_custom_method_form", "exam"),
            )
        )
        return self._modal(
            modal.kind,
            "custom_method_title",
            tuple(rows),
            (
                self.button("save", self.t("save"), "save_custom_method"),
                self.button("cancel", self.t("cancel"), "close_modal"),
            ),
        )


def render(
    state: AppState,
    page: str,
    modal: Optional[Modal] = None,
    translate: Translator = default_translate,
    dark: bool = False,
) -> Node:
    """
    Build the whole screen for the given state, page and modal.

    `dark` is the resolved colour scheme (theme "dark", or "automatic" on a
    dark system); it only affects the screen attributes.
    """
    r = _Renderer(state, translate)
    children: tuple[Node, ...] = (r.page(page),)
    if modal is not None:
        children += (r.modal(modal),)
    return Node(
        "screen",
        key=page,
        children=children,
        attrs=(
            ("scheme", "dark" if dark else "light"),
            ("lang", state.language),
            ("dir", "rtl" if state.language == "ar" else "ltr"),
        ),
    )

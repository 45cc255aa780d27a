"""
Tests for the navigation / modal controller.

Covered behaviour:
- page and modal are independent
- destructive actions go through a confirm modal, run exactly once
- silent commands (form / annual text input) never touch page or modal
- passing semester averages lock their credits field via a field patch
- validation errors produce an alert and leave the state untouched
"""

import unittest
from typing import Optional

from gpacalc import config
from gpacalc.controller import FULL_RENDER, NO_RENDER, Controller, FieldPatch, Session
from gpacalc.model import (
    AnnualResult,
    ClearAllData,
    ClearAllModules,
    ConfirmModal,
    CustomMethodModal,
    InfoModal,
    ModuleModal,
    ResultModal,
    SemesterResult,
    SwitchMethod,
)
from gpacalc.storage import MemoryStore, load_preference, load_state


def _controller(store: Optional[MemoryStore] = None) -> Controller:
    store = store if store is not None else MemoryStore()
    return Controller(Session.start(store), store)


def _add_module(c: Controller, name: str, exam: str, td: Optional[str] = None, coeff: str = "1", credits: str = "5"):
    c.open_module_modal()
    c.update_module_form("name", name)
    c.update_module_form("coeff", coeff)
    c.update_module_form("credits", credits)
    c.update_module_form("examGrade", exam)
    if td is not None:
        c.toggle_grade("td")
        c.update_module_form("tdGrade", td)
    return c.save_module()


class TestNavigation(unittest.TestCase):
    def test_navigate_changes_page_and_renders(self) -> None:
        c = _controller()
        self.assertEqual(c.navigate("settings"), FULL_RENDER)
        self.assertEqual(c.session.page, "settings")

    def test_navigate_keeps_modal(self) -> None:
        c = _controller()
        c.open_info_modal()
        c.navigate("annual-calculator")
        self.assertIsInstance(c.session.modal, InfoModal)

    def test_close_modal_keeps_page(self) -> None:
        c = _controller()
        c.navigate("annual-calculator")
        c.open_info_modal()
        c.close_modal()
        self.assertIsNone(c.session.modal)
        self.assertEqual(c.session.page, "annual-calculator")

    def test_close_modal_without_modal_is_noop(self) -> None:
        c = _controller()
        self.assertEqual(c.close_modal(), NO_RENDER)
        self.assertIsNone(c.session.modal)
        self.assertEqual(c.session.page, "main")

    def test_unknown_page_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            _controller().navigate("nowhere")


class TestSettings(unittest.TestCase):
    def test_settings_are_persisted(self) -> None:
        store = MemoryStore()
        c = _controller(store)
        c.set_theme("dark")
        c.set_lang("en")
        c.set_credits(45)

        reloaded = load_state(store, load_preference(store))
        self.assertEqual(reloaded.theme, "dark")
        self.assertEqual(reloaded.language, "en")
        self.assertEqual(reloaded.required_credits_for_debt, 45)

    def test_invalid_settings_are_rejected(self) -> None:
        c = _controller()
        with self.assertRaises(ValueError):
            c.set_theme("sepia")
        with self.assertRaises(ValueError):
            c.set_credits(40)

    def test_toggle_save_settings_forgets_data(self) -> None:
        store = MemoryStore()
        c = _controller(store)
        c.set_lang("en")
        c.toggle_save_settings()

        self.assertIsNone(store.get(config.STATE_KEY))
        self.assertFalse(load_preference(store))
        self.assertEqual(Session.start(store).state.language, "ar")

    def test_is_dark(self) -> None:
        c = Controller(Session(), MemoryStore(), prefers_dark=lambda: True)
        self.assertTrue(c.is_dark())
        c.set_theme("light")
        self.assertFalse(c.is_dark())
        c.set_theme("dark")
        self.assertTrue(c.is_dark())

    def test_set_method_without_modules_applies_directly(self) -> None:
        c = _controller()
        c.set_method("complex-25-25-50")
        self.assertEqual(c.state.calculation_method_id, "complex-25-25-50")
        self.assertIsNone(c.session.modal)


class TestModules(unittest.TestCase):
    def test_add_module_computes_grade(self) -> None:
        c = _controller()
        self.assertEqual(_add_module(c, "Analysis", exam="16", td="12", coeff="2"), FULL_RENDER)

        self.assertIsNone(c.session.modal)
        m = c.state.modules[0]
        self.assertEqual(m.name, "Analysis")
        self.assertEqual(m.grade, 14.4)
        self.assertEqual(m.coeff, 2)
        self.assertEqual((m.td_grade, m.tp_grade, m.exam_grade), (12.0, None, 16.0))

    def test_empty_name_alerts_and_keeps_modal(self) -> None:
        c = _controller()
        outcome = _add_module(c, "   ", exam="12")
        self.assertEqual(outcome.alert, "error_module_name_required")
        self.assertFalse(outcome.render)
        self.assertIsInstance(c.session.modal, ModuleModal)
        self.assertEqual(c.state.modules, [])

    def test_missing_coeff_and_credits_default_to_one(self) -> None:
        c = _controller()
        _add_module(c, "Stats", exam="10", coeff="", credits="x")
        self.assertEqual((c.state.modules[0].coeff, c.state.modules[0].credits), (1.0, 1.0))

    def test_overflowing_grade_is_saved_as_zero(self) -> None:
        c = _controller()
        self.assertEqual(_add_module(c, "A", exam="1e999"), FULL_RENDER)
        m = c.state.modules[0]
        self.assertEqual((m.grade, m.exam_grade), (0.0, 0.0))

    def test_edit_restores_components_and_replaces_module(self) -> None:
        c = _controller()
        _add_module(c, "Analysis", exam="16", td="12")
        module_id = c.state.modules[0].id

        c.open_module_modal(module_id)
        form = c.session.modal.form
        self.assertEqual((form.exam_grade, form.td_grade), ("16", "12"))
        self.assertTrue(form.td_enabled)
        self.assertFalse(form.tp_enabled)

        c.update_module_form("examGrade", "20")
        c.save_module()
        self.assertEqual(len(c.state.modules), 1)
        self.assertEqual(c.state.modules[0].id, module_id)
        self.assertEqual(c.state.modules[0].grade, 16.8)

    def test_edit_legacy_module_prefills_exam_with_grade(self) -> None:
        store = MemoryStore(
            {
                config.STATE_KEY: (
                    '{"modules": [{"id": "old", "name": "Old", "coeff": 1, "credits": 2, "grade": 13.5}]}'
                )
            }
        )
        c = _controller(store)
        c.open_module_modal("old")
        self.assertEqual(c.session.modal.form.exam_grade, "13.5")
        self.assertEqual(c.session.modal.form.td_grade, "")

    def test_new_form_follows_method_type(self) -> None:
        c = _controller()
        c.set_method("complex-25-25-50")
        c.open_module_modal()
        form = c.session.modal.form
        self.assertTrue(form.td_enabled and form.tp_enabled and form.exam_enabled)

    def test_toggle_grade_renders(self) -> None:
        c = _controller()
        c.open_module_modal()
        self.assertEqual(c.toggle_grade("tp"), FULL_RENDER)
        self.assertTrue(c.session.modal.form.tp_enabled)

    def test_delete_module(self) -> None:
        c = _controller()
        _add_module(c, "A", exam="10")
        _add_module(c, "B", exam="12")
        c.delete_module(c.state.modules[0].id)
        self.assertEqual([m.name for m in c.state.modules], ["B"])

    def test_delete_all_requires_confirmation(self) -> None:
        c = _controller()
        _add_module(c, "A", exam="10")
        c.delete_all_modules()
        self.assertEqual(c.session.modal, ConfirmModal("confirm_delete_all_modules", ClearAllModules()))
        self.assertEqual(len(c.state.modules), 1)

        c.confirm_action()
        self.assertEqual(c.state.modules, [])
        self.assertIsNone(c.session.modal)

    def test_cancel_keeps_modules(self) -> None:
        c = _controller()
        _add_module(c, "A", exam="10")
        c.delete_all_modules()
        c.close_modal()
        self.assertEqual(len(c.state.modules), 1)

    def test_switch_method_with_modules_requires_confirmation(self) -> None:
        c = _controller()
        _add_module(c, "A", exam="10")
        c.set_method("simple-0.5")

        self.assertEqual(c.state.calculation_method_id, "simple-0.6")
        self.assertEqual(c.session.modal.action, SwitchMethod("simple-0.5"))

        c.confirm_action()
        self.assertEqual(c.state.calculation_method_id, "simple-0.5")
        self.assertEqual(c.state.modules, [])
        self.assertIsNone(c.session.modal)

    def test_confirm_runs_only_once(self) -> None:
        c = _controller()
        _add_module(c, "A", exam="10")
        c.delete_all_modules()
        c.confirm_action()
        _add_module(c, "B", exam="10")
        c.confirm_action()
        self.assertEqual(len(c.state.modules), 1)

    def test_semester_result(self) -> None:
        c = _controller()
        _add_module(c, "A", exam="14", coeff="2")
        self.assertEqual(c.calculate_semester(), FULL_RENDER)
        self.assertIsInstance(c.session.modal, ResultModal)
        self.assertIsInstance(c.session.modal.result, SemesterResult)

    def test_semester_without_modules_alerts(self) -> None:
        c = _controller()
        self.assertEqual(c.calculate_semester().alert, "error_no_modules")
        self.assertIsNone(c.session.modal)


class TestSilentCommands(unittest.TestCase):
    def test_update_module_form_is_silent(self) -> None:
        c = _controller()
        c.navigate("semester-calculator")
        c.open_module_modal()
        modal = c.session.modal

        self.assertEqual(c.update_module_form("name", "Physics"), NO_RENDER)
        self.assertIs(c.session.modal, modal)
        self.assertEqual(c.session.page, "semester-calculator")
        self.assertEqual(modal.form.name, "Physics")

    def test_annual_input_is_silent_and_persisted(self) -> None:
        store = MemoryStore()
        c = _controller(store)
        c.navigate("annual-calculator")

        outcome = c.handle_annual_input("s1AvgText", "9.5")
        self.assertEqual(outcome, NO_RENDER)
        self.assertEqual(c.session.page, "annual-calculator")
        self.assertIsNone(c.session.modal)
        self.assertEqual(load_state(store, True).s1_avg_text, "9.5")

    def test_passing_average_locks_credits_with_patch(self) -> None:
        c = _controller()
        c.handle_annual_input("s2CreditsText", "12")
        outcome = c.handle_annual_input("s2AvgText", "10.25")

        self.assertFalse(outcome.render)
        self.assertEqual(outcome.patches, (FieldPatch("s2CreditsText", "30", readonly=True),))
        self.assertEqual(c.state.s2_credits_text, "30")

    def test_locked_credits_ignore_edits(self) -> None:
        c = _controller()
        c.handle_annual_input("s1AvgText", "12")
        c.handle_annual_input("s1CreditsText", "5")
        self.assertEqual(c.state.s1_credits_text, "30")

    def test_unknown_annual_field(self) -> None:
        with self.assertRaises(ValueError):
            _controller().handle_annual_input("s3AvgText", "1")


class TestAnnual(unittest.TestCase):
    def test_calculate_annual(self) -> None:
        c = _controller()
        for key, value in (("s1AvgText", "8"), ("s1CreditsText", "20"), ("s2AvgText", "6"), ("s2CreditsText", "10")):
            c.handle_annual_input(key, value)
        c.calculate_annual()

        result = c.session.modal.result
        self.assertIsInstance(result, AnnualResult)
        self.assertEqual(result.status_key, "debt")

    def test_invalid_annual_values_alert(self) -> None:
        c = _controller()
        c.handle_annual_input("s1AvgText", "abc")
        outcome = c.calculate_annual()
        self.assertEqual(outcome.alert, "error_invalid_annual_values")
        self.assertIsNone(c.session.modal)

    def test_clear_annual(self) -> None:
        c = _controller()
        c.handle_annual_input("s1AvgText", "12")
        c.clear_annual()
        self.assertEqual(
            (c.state.s1_avg_text, c.state.s1_credits_text, c.state.s2_avg_text, c.state.s2_credits_text),
            ("", "", "", ""),
        )


class TestCustomMethods(unittest.TestCase):
    def test_add_custom_method(self) -> None:
        c = _controller()
        c.open_custom_method_modal()
        self.assertIsInstance(c.session.modal, CustomMethodModal)
        c.toggle_custom_component("td")
        c.update_custom_method_form("td", "30")
        c.update_custom_method_form("exam", "70")
        self.assertEqual(c.save_custom_method(), FULL_RENDER)

        self.assertIsNone(c.session.modal)
        self.assertEqual([m.id for m in c.state.custom_calculation_methods], ["custom-30-0-70"])

    def test_invalid_weights_alert(self) -> None:
        c = _controller()
        c.open_custom_method_modal()
        c.update_custom_method_form("exam", "90")
        self.assertEqual(c.save_custom_method().alert, "error_weights_sum")
        self.assertEqual(c.state.custom_calculation_methods, [])


class TestClearAllData(unittest.TestCase):
    def test_clear_all_data_resets_store_and_page(self) -> None:
        store = MemoryStore()
        c = _controller(store)
        c.set_lang("en")
        _add_module(c, "A", exam="12")
        c.navigate("settings")

        c.open_data_modal()
        self.assertEqual(c.session.modal.action, ClearAllData())
        c.confirm_action()

        self.assertEqual(store.data, {})
        self.assertEqual(c.state.language, "ar")
        self.assertEqual(c.state.modules, [])
        self.assertEqual(c.session.page, "main")
        self.assertIsNone(c.session.modal)


if __name__ == "__main__":
    unittest.main()

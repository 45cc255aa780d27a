import unittest

from gpacalc.model import (
    AnnualResult,
    AppState,
    ConfirmModal,
    ClearAllModules,
    Module,
    ModuleForm,
    ModuleModal,
    ResultModal,
)
from gpacalc.render import apply_patch, find_node, iter_nodes, render


def _state(**kwargs) -> AppState:
    s = AppState(language="en")
    for k, v in kwargs.items():
        setattr(s, k, v)
    return s


class TestRender(unittest.TestCase):
    def test_render_is_pure(self) -> None:
        state = _state(modules=[Module(id="m1", name="Algebra", coeff=2, credits=4, grade=12.5)])
        a = render(state, "semester-calculator", ModuleModal(ModuleForm(name="x")))
        b = render(state, "semester-calculator", ModuleModal(ModuleForm(name="x")))
        self.assertEqual(a, b)

    def test_screen_attributes(self) -> None:
        tree = render(_state(language="ar"), "main", dark=True)
        self.assertEqual(tree.attr("scheme"), "dark")
        self.assertEqual(tree.attr("dir"), "rtl")
        self.assertEqual(tree.attr("lang"), "ar")

        tree = render(_state(), "main")
        self.assertEqual((tree.attr("scheme"), tree.attr("dir")), ("light", "ltr"))

    def test_main_page_cards_navigate(self) -> None:
        tree = render(_state(), "main")
        self.assertEqual(find_node(tree, "semester-card").action, ("navigate", "semester-calculator"))
        self.assertEqual(find_node(tree, "annual-card").action, ("navigate", "annual-calculator"))
        self.assertEqual(find_node(tree, "settings-card").action, ("navigate", "settings"))

    def test_semester_rows(self) -> None:
        state = _state(modules=[Module(id="m1", name="Algebra", coeff=2, credits=4, grade=12.5)])
        tree = render(state, "semester-calculator")

        row = find_node(tree, "module-m1")
        self.assertEqual(row.text, "Algebra")
        self.assertIn("12.50", row.value)
        self.assertEqual(find_node(tree, "edit-m1").action, ("open_module_modal", "m1"))
        self.assertEqual(find_node(tree, "delete-m1").action, ("delete_module", "m1"))
        self.assertIsNone(find_node(tree, "empty"))

    def test_empty_semester(self) -> None:
        tree = render(_state(), "semester-calculator")
        self.assertIsNotNone(find_node(tree, "empty"))

    def test_passing_average_locks_credits(self) -> None:
        tree = render(_state(s1_avg_text="11", s1_credits_text="30", s2_avg_text="8"), "annual-calculator")
        self.assertTrue(find_node(tree, "s1CreditsText").readonly)
        self.assertFalse(find_node(tree, "s2CreditsText").readonly)
        self.assertEqual(find_node(tree, "s2AvgText").value, "8")

    def test_settings_selection(self) -> None:
        tree = render(_state(theme="dark", required_credits_for_debt=45), "settings")
        self.assertTrue(find_node(tree, "theme-dark").selected)
        self.assertFalse(find_node(tree, "theme-light").selected)
        self.assertTrue(find_node(tree, "credits-45").selected)
        self.assertTrue(find_node(tree, "method-simple-0.6").selected)
        self.assertTrue(find_node(tree, "lang-en").selected)
        self.assertTrue(find_node(tree, "save-settings").checked)

    def test_modal_is_last_child(self) -> None:
        tree = render(_state(), "settings", ConfirmModal("confirm_delete_all_modules", ClearAllModules()))
        self.assertEqual([c.kind for c in tree.children], ["page", "modal"])
        self.assertEqual(find_node(tree, "confirm").action, ("confirm_action",))
        self.assertEqual(find_node(tree, "cancel").action, ("close_modal",))

    def test_module_modal_disabled_components_are_readonly(self) -> None:
        tree = render(_state(), "semester-calculator", ModuleModal(ModuleForm(td_enabled=True)))
        self.assertFalse(find_node(tree, "tdGrade").readonly)
        self.assertTrue(find_node(tree, "tpGrade").readonly)
        self.assertTrue(find_node(tree, "tdEnabled").checked)
        self.assertEqual(find_node(tree, "tpEnabled").action, ("toggle_grade", "tp"))

    def test_annual_result_badge(self) -> None:
        result = AnnualResult(average=9.0, credits=45, status_key="debt")
        tree = render(_state(), "annual-calculator", ResultModal(result))
        self.assertEqual(find_node(tree, "average").value, "9.00")
        self.assertEqual(find_node(tree, "credits").value, "45 / 60")
        self.assertEqual(find_node(tree, "status").tone, "debt")


class TestApplyPatch(unittest.TestCase):
    def test_only_target_changes(self) -> None:
        tree = render(_state(s1_avg_text="12"), "annual-calculator")
        patched = apply_patch(tree, "s2CreditsText", "30", True)

        node = find_node(patched, "s2CreditsText")
        self.assertEqual((node.value, node.readonly), ("30", True))
        self.assertEqual(find_node(patched, "s1AvgText"), find_node(tree, "s1AvgText"))
        self.assertEqual(len(list(iter_nodes(patched))), len(list(iter_nodes(tree))))

    def test_unknown_key_returns_same_tree(self) -> None:
        tree = render(_state(), "annual-calculator")
        self.assertIs(apply_patch(tree, "nope", "1", False), tree)


if __name__ == "__main__":
    unittest.main()

"""
Central data model definitions used across the project.

This module defines the canonical structure of the application state so that:
- the controller, the calculators and the renderer share the same field names
- the persisted snapshot keeps one stable (camelCase) layout
- transient UI state (page, modal, form drafts) is clearly separated
  from the state that is saved
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from gpacalc import config


# ---------------------------------------------------------------------------
# Weighting methods
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SimpleMethod:
    """
    Exam + one continuous-assessment component (TD or TP).
    exam_weight + continuous_weight == 1.
    """

    id: str
    label: str
    exam_weight: float
    continuous_weight: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": "simple",
            "label": self.label,
            "weights": {"exam": self.exam_weight, "continuous": self.continuous_weight},
        }


@dataclass(frozen=True)
class ComplexMethod:
    """
    TD, TP and exam, each with its own weight (summing to 1).
    """

    id: str
    label: str
    td_weight: float
    tp_weight: float
    exam_weight: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": "complex",
            "label": self.label,
            "weights": {"td": self.td_weight, "tp": self.tp_weight, "exam": self.exam_weight},
        }


WeightingMethod = Union[SimpleMethod, ComplexMethod]


def method_from_dict(data: dict[str, Any]) -> WeightingMethod:
    weights = data["weights"]
    if data.get("type") == "complex":
        return ComplexMethod(
            id=str(data["id"]),
            label=str(data.get("label", data["id"])),
            td_weight=float(weights["td"]),
            tp_weight=float(weights["tp"]),
            exam_weight=float(weights["exam"]),
        )
    return SimpleMethod(
        id=str(data["id"]),
        label=str(data.get("label", data["id"])),
        exam_weight=float(weights["exam"]),
        continuous_weight=float(weights["continuous"]),
    )


PREDEFINED_METHODS: tuple[WeightingMethod, ...] = tuple(method_from_dict(m) for m in config.PREDEFINED_METHODS)


# ---------------------------------------------------------------------------
# Persisted state
# ---------------------------------------------------------------------------


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


@dataclass
class Module:
    """
    One graded module of the semester.

    grade is the final weighted grade. td_grade / tp_grade / exam_grade keep
    the component grades it was computed from (None = component not used),
    so editing a module can restore its breakdown.
    """

    id: str
    name: str
    coeff: float
    credits: float
    grade: float
    td_grade: Optional[float] = None
    tp_grade: Optional[float] = None
    exam_grade: Optional[float] = None

    @property
    def has_components(self) -> bool:
        return any(g is not None for g in (self.td_grade, self.tp_grade, self.exam_grade))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "coeff": self.coeff,
            "credits": self.credits,
            "grade": self.grade,
            "tdGrade": self.td_grade,
            "tpGrade": self.tp_grade,
            "examGrade": self.exam_grade,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Module":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            coeff=float(data["coeff"]),
            credits=float(data["credits"]),
            grade=float(data["grade"]),
            # older snapshots only carry the final grade
            td_grade=_optional_float(data.get("tdGrade")),
            tp_grade=_optional_float(data.get("tpGrade")),
            exam_grade=_optional_float(data.get("examGrade")),
        )


@dataclass
class AppState:
    """
    The single persisted state tree.

    Field names are snake_case in Python and camelCase in the snapshot
    (see to_dict / from_dict).
    """

    language: str = config.DEFAULT_STATE["language"]
    theme: str = config.DEFAULT_STATE["theme"]
    calculation_method_id: str = config.DEFAULT_STATE["calculationMethodId"]
    custom_calculation_methods: list[WeightingMethod] = field(default_factory=list)
    required_credits_for_debt: int = config.DEFAULT_STATE["requiredCreditsForDebt"]
    save_settings_enabled: bool = config.DEFAULT_STATE["saveSettingsEnabled"]
    modules: list[Module] = field(default_factory=list)
    s1_avg_text: str = ""
    s1_credits_text: str = ""
    s2_avg_text: str = ""
    s2_credits_text: str = ""

    def find_module(self, module_id: str) -> Optional[Module]:
        for m in self.modules:
            if m.id == module_id:
                return m
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "language": self.language,
            "theme": self.theme,
            "calculationMethodId": self.calculation_method_id,
            "customCalculationMethods": [m.to_dict() for m in self.custom_calculation_methods],
            "requiredCreditsForDebt": self.required_credits_for_debt,
            "saveSettingsEnabled": self.save_settings_enabled,
            "modules": [m.to_dict() for m in self.modules],
            "s1AvgText": self.s1_avg_text,
            "s1CreditsText": self.s1_credits_text,
            "s2AvgText": self.s2_avg_text,
            "s2CreditsText": self.s2_credits_text,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppState":
        """
        Build a state from a complete snapshot dict.

        Raises KeyError / TypeError / ValueError on malformed data;
        the storage layer turns that into a fallback to defaults.
        """
        modules = data["modules"]
        customs = data["customCalculationMethods"]
        if not isinstance(modules, list) or not isinstance(customs, list):
            raise TypeError("modules and customCalculationMethods must be lists")

        return cls(
            language=str(data["language"]),
            theme=str(data["theme"]),
            calculation_method_id=str(data["calculationMethodId"]),
            custom_calculation_methods=[method_from_dict(m) for m in customs],
            required_credits_for_debt=int(data["requiredCreditsForDebt"]),
            save_settings_enabled=bool(data["saveSettingsEnabled"]),
            modules=[Module.from_dict(m) for m in modules],
            s1_avg_text=str(data["s1AvgText"]),
            s1_credits_text=str(data["s1CreditsText"]),
            s2_avg_text=str(data["s2AvgText"]),
            s2_credits_text=str(data["s2CreditsText"]),
        )


# ---------------------------------------------------------------------------
# Transient UI state (never persisted)
# ---------------------------------------------------------------------------


@dataclass
class ModuleForm:
    """Draft of the module being added or edited; all inputs are raw text."""

    module_id: Optional[str] = None
    name: str = ""
    coeff: str = ""
    credits: str = ""
    td_grade: str = ""
    tp_grade: str = ""
    exam_grade: str = ""
    td_enabled: bool = False
    tp_enabled: bool = False
    exam_enabled: bool = True


@dataclass
class CustomMethodForm:
    """Draft of a user-defined weighting, in percent."""

    td: str = ""
    tp: str = ""
    exam: str = "100"
    td_enabled: bool = False
    tp_enabled: bool = False


@dataclass(frozen=True)
class SemesterResult:
    average: float
    earned_credits: float
    credits: float
    remark_key: str
    total_possible_credits: int = config.SEMESTER_CREDITS


@dataclass(frozen=True)
class AnnualResult:
    average: float
    credits: float
    status_key: str
    total_possible_credits: int = config.ANNUAL_CREDITS


# Confirmation actions: plain data, executed by the controller.


@dataclass(frozen=True)
class ClearAllModules:
    pass


@dataclass(frozen=True)
class SwitchMethod:
    method_id: str


@dataclass(frozen=True)
class ClearAllData:
    pass


ConfirmAction = Union[ClearAllModules, SwitchMethod, ClearAllData]


@dataclass
class ModuleModal:
    form: ModuleForm
    kind: str = "module"


@dataclass
class ResultModal:
    result: Union[SemesterResult, AnnualResult]
    kind: str = "result"


@dataclass
class InfoModal:
    kind: str = "info"


@dataclass
class PrivacyModal:
    kind: str = "privacy"


@dataclass
class ConfirmModal:
    message_key: str
    action: ConfirmAction
    kind: str = "confirm"


@dataclass
class CustomMethodModal:
    form: CustomMethodForm
    kind: str = "custom-method"


Modal = Union[ModuleModal, ResultModal, InfoModal, PrivacyModal, ConfirmModal, CustomMethodModal]

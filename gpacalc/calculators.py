"""
GPA computations.

All functions here are pure: they take model objects / raw input text and
return numbers or result objects. Nothing in this module touches the
application state or the store.

Policies:
- raw text is parsed leniently: the longest numeric prefix wins
  ("12.5abc" -> 12.5), anything else counts as "no value"
- grades are rounded half-up to 2 decimals on their decimal representation
- a passing average (>= 10) grants all credits of the period
"""

from __future__ import annotations

import math
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence

from gpacalc import config
from gpacalc.errors import InputError
from gpacalc.model import (
    AnnualResult,
    ComplexMethod,
    Module,
    ModuleForm,
    PREDEFINED_METHODS,
    SemesterResult,
    SimpleMethod,
    WeightingMethod,
)


_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_number(text: Optional[str]) -> Optional[float]:
    """
    Parse the leading number of a text field.

    Returns None when the text does not start with a finite number.
    """
    if text is None:
        return None
    m = _NUMBER_PREFIX.match(str(text).strip())
    if not m:
        return None
    value = float(m.group(0))
    return value if math.isfinite(value) else None


def round2(x: float) -> float:
    return float(Decimal(str(x)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def is_passing_average(text: str) -> bool:
    """True when a semester average text parses to a passing grade."""
    value = parse_number(text)
    return value is not None and value >= config.PASS_MARK


def resolve_method(method_id: str, custom_methods: Iterable[WeightingMethod] = ()) -> WeightingMethod:
    """
    Look up a weighting method by id: predefined first, then custom.

    Unknown ids fall back to the first predefined method, so this never fails.
    """
    for m in PREDEFINED_METHODS:
        if m.id == method_id:
            return m
    for m in custom_methods:
        if m.id == method_id:
            return m
    return PREDEFINED_METHODS[0]


def _component(text: str, enabled: bool) -> float:
    if not enabled:
        return 0.0
    value = parse_number(text)
    return value if value is not None else 0.0


def compute_module_grade(form: ModuleForm, method: WeightingMethod) -> float:
    """
    Final module grade from the form's component grades.

    Simple methods: exam * exam_weight + continuous * continuous_weight, where
    the continuous grade is the enabled one of TD / TP (TD if both are on).
    Complex methods: weighted sum of TD, TP and exam.
    Disabled or unparsable components contribute 0.
    """
    exam = _component(form.exam_grade, form.exam_enabled)

    if isinstance(method, ComplexMethod):
        td = _component(form.td_grade, form.td_enabled)
        tp = _component(form.tp_grade, form.tp_enabled)
        total = td * method.td_weight + tp * method.tp_weight + exam * method.exam_weight
        return round2(total)

    if form.td_enabled:
        continuous = _component(form.td_grade, True)
    elif form.tp_enabled:
        continuous = _component(form.tp_grade, True)
    else:
        continuous = 0.0
    return round2(exam * method.exam_weight + continuous * method.continuous_weight)


def _remark_key(average: float) -> str:
    if average >= config.EXCELLENT_MARK:
        return "excellent"
    if average >= config.PASS_MARK:
        return "pass"
    return "poor"


def compute_semester_result(modules: Sequence[Module]) -> SemesterResult:
    total_points = 0.0
    total_coeffs = 0.0
    earned_credits = 0.0

    for m in modules:
        total_points += m.grade * m.coeff
        total_coeffs += m.coeff
        if m.grade >= config.PASS_MARK:
            earned_credits += m.credits

    average = total_points / total_coeffs if total_coeffs > 0 else 0.0
    credits = config.SEMESTER_CREDITS if average >= config.PASS_MARK else earned_credits

    return SemesterResult(
        average=average,
        earned_credits=earned_credits,
        credits=credits,
        remark_key=_remark_key(average),
    )


def compute_annual_result(
    s1_avg: str,
    s1_credits: str,
    s2_avg: str,
    s2_credits: str,
    required_credits_for_debt: float,
) -> AnnualResult:
    """
    Annual average and status from the two semester text fields.

    Raises InputError if either average is not a number. Credit fields that
    do not parse count as 0.
    """
    s1 = parse_number(s1_avg)
    s2 = parse_number(s2_avg)
    if s1 is None or s2 is None:
        raise InputError("error_invalid_annual_values")

    average = (s1 + s2) / 2
    credits = (parse_number(s1_credits) or 0.0) + (parse_number(s2_credits) or 0.0)

    if average >= config.PASS_MARK:
        return AnnualResult(average=average, credits=config.ANNUAL_CREDITS, status_key="pass")
    if credits >= required_credits_for_debt:
        return AnnualResult(average=average, credits=credits, status_key="debt")
    return AnnualResult(average=average, credits=credits, status_key="fail")


def build_custom_method(td: str, tp: str, exam: str, td_enabled: bool, tp_enabled: bool) -> WeightingMethod:
    """
    Turn percentage inputs into a weighting method.

    Only enabled components count; together with the exam they must add up
    to 100, otherwise InputError("error_weights_sum") is raised.
    """
    td_pct = (parse_number(td) or 0.0) if td_enabled else 0.0
    tp_pct = (parse_number(tp) or 0.0) if tp_enabled else 0.0
    exam_pct = parse_number(exam) or 0.0

    if min(td_pct, tp_pct, exam_pct) < 0 or abs(td_pct + tp_pct + exam_pct - 100) > 1e-9:
        raise InputError("error_weights_sum")

    method_id = f"custom-{td_pct:g}-{tp_pct:g}-{exam_pct:g}"

    if td_enabled and tp_enabled:
        return ComplexMethod(
            id=method_id,
            label=f"{td_pct:g}%|{tp_pct:g}% / {exam_pct:g}%",
            td_weight=td_pct / 100,
            tp_weight=tp_pct / 100,
            exam_weight=exam_pct / 100,
        )

    continuous_pct = td_pct if td_enabled else tp_pct
    return SimpleMethod(
        id=method_id,
        label=f"{exam_pct:g}% / {continuous_pct:g}%",
        exam_weight=exam_pct / 100,
        continuous_weight=continuous_pct / 100,
    )

"""
BaseIntakeAdapter：所有处方来源 Adapter 的抽象基类。

每个新来源只需：
1. 继承 BaseIntakeAdapter
2. 实现 parse() 和 transform()
3. 在 factory.py 的注册表加一行

业务代码无需任何改动。
"""

import json
import re
from abc import ABC, abstractmethod
from datetime import date
from typing import Any

from ..exceptions import ValidationError
from .types import MAX_ADVICE_SLOTS, InternalPrescription

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class BaseIntakeAdapter(ABC):
    """
    三步流水线：parse → transform → validate

    子类必须实现 parse() 和 transform()；
    validate() 提供所有来源共用的校验，子类可 super() 后追加检查。
    """

    # 子类声明自己对应的 source 标识符（与 factory 注册键一致）
    source: str = ""

    def __init__(self, raw_body: bytes | str | dict):
        self._raw_body = raw_body

    # ── 必须实现 ───────────────────────────────────────────────────────────

    @abstractmethod
    def parse(self) -> Any:
        """
        Raw data (bytes / str / dict) → intermediate structure.
        Store the result on self._parsed for transform().
        """

    @abstractmethod
    def transform(self) -> InternalPrescription:
        """
        self._parsed → InternalPrescription.
        Must keep the original data in InternalPrescription.raw_payload.
        """

    # ── 默认实现（子类可覆盖） ────────────────────────────────────────────

    def validate(self, prescription: InternalPrescription) -> None:
        errors = []

        if not str(prescription.patient.patient_id or "").strip():
            errors.append({"field": "patient.patient_id", "message": "Patient id is required."})

        if prescription.date:
            if not DATE_RE.match(prescription.date) or not _is_calendar_date(prescription.date):
                errors.append({"field": "date", "message": "Date must be YYYY-MM-DD."})

        if len(prescription.advice) > MAX_ADVICE_SLOTS:
            errors.append({
                "field": "advice",
                "message": f"At most {MAX_ADVICE_SLOTS} advice lines are allowed.",
            })

        for i, line in enumerate(prescription.advice):
            if line is not None and not isinstance(line, str):
                errors.append({"field": f"advice[{i}]", "message": "Advice lines must be text."})

        if errors:
            raise_validation_errors(errors)

    def _load_json(self) -> dict:
        if isinstance(self._raw_body, dict):
            return self._raw_body
        try:
            raw = json.loads(self._raw_body)
        except (TypeError, ValueError):
            raise ValidationError(
                message="Prescription body is not valid JSON.",
                code="INVALID_JSON",
            )
        if not isinstance(raw, dict):
            raise ValidationError(
                message="Prescription body must be a JSON object.",
                code="INVALID_JSON",
            )
        return raw

    # ── 公开入口 ─────────────────────────────────────────────────

    def process(self) -> InternalPrescription:
        """parse → transform → validate; returns a validated InternalPrescription."""
        self.parse()
        prescription = self.transform()
        self.validate(prescription)
        return prescription


def raise_validation_errors(errors: list[dict]) -> None:
    raise ValidationError(
        message="Prescription validation failed.",
        code="VALIDATION_ERROR",
        detail={"errors": errors},
    )


def _is_calendar_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True

from datetime import date
from typing import Annotated, Any, Callable, Optional, Type

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from exitwindow.models.types import (
    DependentsCoverage,
    HealthcareContinuity,
    HousingStatus,
    IncomeStability,
    LegalBlocker,
    RunwayStatus,
    Ternary,
)


def _or_unknown(enum_cls: Type[Any]) -> Callable[[Any], Any]:
    # Values the user never set (or that we don't recognize) stay unknown.
    def coerce(v: Any) -> Any:
        if isinstance(v, enum_cls):
            return v
        try:
            return enum_cls(v)
        except (ValueError, TypeError):
            return enum_cls.UNKNOWN

    return coerce


def _ternary(v: Any) -> Any:
    # PyYAML reads bare yes/no as booleans
    if isinstance(v, bool):
        return Ternary.YES if v else Ternary.NO
    return _or_unknown(Ternary)(v)


TernaryField = Annotated[Ternary, BeforeValidator(_ternary)]


class _Section(BaseModel):
    # edits after construction get the same coercion and bounds
    model_config = ConfigDict(validate_assignment=True)

    note: str = ""

    @field_validator("note", mode="before")
    @classmethod
    def _note_text(cls, v: Any) -> str:
        return "" if v is None else str(v)


class HousingConstraint(_Section):
    status: Annotated[HousingStatus, BeforeValidator(_or_unknown(HousingStatus))] = HousingStatus.UNKNOWN
    lease_end_date: Optional[str] = None  # ISO calendar date
    notice_days: Optional[int] = Field(default=None, ge=0)
    move_out_notice_sent: TernaryField = Ternary.UNKNOWN
    new_place_secured: TernaryField = Ternary.UNKNOWN
    utilities_transfer_planned: TernaryField = Ternary.UNKNOWN

    @field_validator("lease_end_date", mode="before")
    @classmethod
    def _iso_date(cls, v: Any) -> Optional[str]:
        # yaml.safe_load turns unquoted 2025-06-30 into a date
        if isinstance(v, date):
            return v.isoformat()
        if v is None:
            return None
        s = str(v).strip()
        return s or None


class IncomeConstraint(_Section):
    stability: Annotated[IncomeStability, BeforeValidator(_or_unknown(IncomeStability))] = IncomeStability.UNKNOWN
    employer_notified: TernaryField = Ternary.UNKNOWN
    final_pay_known: TernaryField = Ternary.UNKNOWN
    benefits_adjusted: TernaryField = Ternary.UNKNOWN
    backup_income_ready: TernaryField = Ternary.UNKNOWN


class CashRunwayConstraint(_Section):
    status: Annotated[RunwayStatus, BeforeValidator(_or_unknown(RunwayStatus))] = RunwayStatus.UNKNOWN
    months: Optional[float] = Field(default=None, ge=0)  # absent is not the same as zero
    move_costs_covered: TernaryField = Ternary.UNKNOWN
    emergency_buffer_ready: TernaryField = Ternary.UNKNOWN


class DependentsConstraint(_Section):
    coverage: Annotated[DependentsCoverage, BeforeValidator(_or_unknown(DependentsCoverage))] = DependentsCoverage.UNKNOWN
    care_arranged: TernaryField = Ternary.UNKNOWN
    records_transferred: TernaryField = Ternary.UNKNOWN
    backup_care_ready: TernaryField = Ternary.UNKNOWN


class HealthcareConstraint(_Section):
    continuity: Annotated[HealthcareContinuity, BeforeValidator(_or_unknown(HealthcareContinuity))] = HealthcareContinuity.UNKNOWN
    coverage_active: TernaryField = Ternary.UNKNOWN
    meds_stocked: TernaryField = Ternary.UNKNOWN
    records_ready: TernaryField = Ternary.UNKNOWN


class LegalConstraint(_Section):
    blocker: Annotated[LegalBlocker, BeforeValidator(_or_unknown(LegalBlocker))] = LegalBlocker.UNKNOWN
    ids_valid: TernaryField = Ternary.UNKNOWN
    mail_forwarding_set: TernaryField = Ternary.UNKNOWN
    insurance_proof_ready: TernaryField = Ternary.UNKNOWN


class Constraints(BaseModel):
    """Everything the user has declared about leaving. Defaults are all unknown."""

    model_config = ConfigDict(validate_assignment=True)

    housing: HousingConstraint = Field(default_factory=HousingConstraint)
    income: IncomeConstraint = Field(default_factory=IncomeConstraint)
    cash_runway: CashRunwayConstraint = Field(default_factory=CashRunwayConstraint)
    dependents: DependentsConstraint = Field(default_factory=DependentsConstraint)
    healthcare: HealthcareConstraint = Field(default_factory=HealthcareConstraint)
    legal: LegalConstraint = Field(default_factory=LegalConstraint)

    @field_validator("housing", "income", "cash_runway", "dependents", "healthcare", "legal", mode="before")
    @classmethod
    def _empty_section(cls, v: Any) -> Any:
        # an empty yaml mapping (`housing:`) loads as None
        return {} if v is None else v


SECTIONS = ("housing", "income", "cash_runway", "dependents", "healthcare", "legal")

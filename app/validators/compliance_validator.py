"""
app/validators/compliance_validator.py

Validation and typing of raw compliance report requests.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.domain.compliance import (
    EntryDayInput,
    EntryReportRequest,
    FieldViolation,
    HistoryDay,
    PrecomputedReportRequest,
    ReportInputs,
)
from app.errors import InputValidationError
from app.schemas.compliance import (
    DayModel,
    EntryReportRequestModel,
    MetaModel,
    MetricsModel,
    PrecomputedReportRequestModel,
    TotalsModel,
    WeekToDateModel,
)
from compliance.types import (
    ComplianceBand,
    ComplianceMetrics,
    DayOperationalInput,
    Totals,
    WeekToDateAverage,
)
from narration.payload import ReportMeta

_ModelT = TypeVar("_ModelT", bound=BaseModel)


class ComplianceInputValidator:
    """
    Validates untyped request payloads and converts them into frozen
    domain structures.

    Input mappings are never modified. On failure every field-level
    violation is collected into one ``InputValidationError``.
    """

    def validate_precomputed_request(self, raw: Any) -> PrecomputedReportRequest:
        """
        Validate a request that carries caller-computed metrics.
        """

        model = self._parse(PrecomputedReportRequestModel, raw)

        inputs: ReportInputs | None = None
        if model.inputs is not None:
            inputs = ReportInputs(
                totals=_to_totals(model.inputs.totals),
                day=_to_day(model.inputs.day),
                week_to_date=_to_week(model.inputs.week_to_date),
            )

        return PrecomputedReportRequest(
            meta=_to_meta(model.meta),
            date=model.date,
            metrics=_to_metrics(model.metrics),
            inputs=inputs,
        )

    def validate_entry_request(self, raw: Any) -> EntryReportRequest:
        """
        Validate a request whose dry waste figures come from an entry.
        """

        model = self._parse(EntryReportRequestModel, raw)

        day = model.day
        entry_data: Mapping[str, float] | None = None
        if model.entry_data is not None:
            entry_data = MappingProxyType(dict(model.entry_data))

        return EntryReportRequest(
            meta=_to_meta(model.meta),
            date=model.date,
            totals=_to_totals(model.totals),
            day=EntryDayInput(
                households=day.households,
                commercial_shops=day.commercial_shops,
                wet_waste_collected=float(day.wet_waste_collected),
                wet_waste_managed=float(day.wet_waste_managed),
                sanitary_waste_collected=float(day.sanitary_waste_collected),
                sanitary_waste_scientifically_disposed=float(
                    day.sanitary_waste_scientifically_disposed
                ),
                dry_waste_stored=(
                    None if day.dry_waste_stored is None else float(day.dry_waste_stored)
                ),
            ),
            entry_id=model.entry_id,
            entry_data=entry_data,
            week_to_date=_to_week(model.week_to_date),
            history=tuple(
                HistoryDay(
                    date=item.date,
                    totals=_to_totals(item.totals),
                    day=_to_day(item.day),
                )
                for item in model.history
            ),
        )

    def _parse(self, model_cls: type[_ModelT], raw: Any) -> _ModelT:
        if not isinstance(raw, Mapping):
            raise InputValidationError(
                [FieldViolation(field="<root>", message="request body must be an object")]
            )
        try:
            return model_cls.model_validate(raw)
        except PydanticValidationError as exc:
            raise InputValidationError(_to_violations(exc)) from exc


def _to_violations(exc: PydanticValidationError) -> list[FieldViolation]:
    violations: list[FieldViolation] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        value = error.get("input")
        violations.append(
            FieldViolation(
                field=location,
                message=error["msg"],
                value=value if isinstance(value, (str, int, float, bool)) else None,
            )
        )
    return violations


def _to_meta(model: MetaModel) -> ReportMeta:
    return ReportMeta(
        taluk=model.taluk,
        panchayat=model.panchayat,
        vehicle_reg_no=model.vehicle_reg_no,
    )


def _to_totals(model: TotalsModel) -> Totals:
    return Totals(total_households=model.total_households, total_shops=model.total_shops)


def _to_day(model: DayModel) -> DayOperationalInput:
    return DayOperationalInput(
        households=model.households,
        commercial_shops=model.commercial_shops,
        wet_waste_collected=float(model.wet_waste_collected),
        wet_waste_managed=float(model.wet_waste_managed),
        sanitary_waste_collected=float(model.sanitary_waste_collected),
        sanitary_waste_scientifically_disposed=float(model.sanitary_waste_scientifically_disposed),
        dry_waste_collected=float(model.dry_waste_collected),
        dry_waste_stored=float(model.dry_waste_stored),
    )


def _to_metrics(model: MetricsModel) -> ComplianceMetrics:
    return ComplianceMetrics(
        segregation_households_rate=float(model.segregation_households_rate),
        segregation_shops_rate=float(model.segregation_shops_rate),
        wet_mgmt_efficiency=float(model.wet_mgmt_efficiency),
        sanitary_disposal_efficiency=float(model.sanitary_disposal_efficiency),
        dry_storage_ratio=float(model.dry_storage_ratio),
        per_household_waste_kg=float(model.per_household_waste_kg),
        score=model.score,
        band=ComplianceBand(model.band),
    )


def _to_week(model: WeekToDateModel | None) -> WeekToDateAverage | None:
    if model is None:
        return None
    return WeekToDateAverage(
        week_start_date=model.week_start_date,
        days_count=model.days_count,
        avg_segregation_households_rate=float(model.avg_segregation_households_rate),
        avg_segregation_shops_rate=float(model.avg_segregation_shops_rate),
        avg_wet_mgmt_efficiency=float(model.avg_wet_mgmt_efficiency),
        avg_sanitary_disposal_efficiency=float(model.avg_sanitary_disposal_efficiency),
        avg_dry_storage_ratio=float(model.avg_dry_storage_ratio),
        avg_per_household_waste_kg=float(model.avg_per_household_waste_kg),
        avg_score=float(model.avg_score),
        avg_households=float(model.avg_households),
        avg_commercial_shops=float(model.avg_commercial_shops),
        avg_wet_waste_collected=float(model.avg_wet_waste_collected),
        avg_wet_waste_managed=float(model.avg_wet_waste_managed),
        avg_sanitary_waste_collected=float(model.avg_sanitary_waste_collected),
        avg_sanitary_waste_scientifically_disposed=float(
            model.avg_sanitary_waste_scientifically_disposed
        ),
        avg_dry_waste_collected=float(model.avg_dry_waste_collected),
        avg_dry_waste_stored=float(model.avg_dry_waste_stored),
    )

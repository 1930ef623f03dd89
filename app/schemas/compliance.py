"""
app/schemas/compliance.py

Request and response schemas for compliance report generation.

Request models are the raw-input contract: camelCase keys, unknown keys
rejected, numbers checked for type, sign and range. Response models are
the envelope handed back to callers.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from compliance.scoring import classify_band
from compliance.types import ComplianceMetrics, DayOperationalInput, Totals
from narration.schema import NarrativeReport

DATE_KEY_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

# Upper bounds for a single day at one panchayat; larger values are data errors.
MAX_COUNT = 1_000_000_000
MAX_MASS_KG = 1_000_000_000.0


def _check_calendar_date(value: str) -> str:
    datetime.strptime(value, "%Y-%m-%d")
    return value


DateKey = Annotated[str, Field(pattern=DATE_KEY_PATTERN), AfterValidator(_check_calendar_date)]
Count = Annotated[int, Field(strict=True, ge=0, le=MAX_COUNT)]
Mass = Annotated[float, Field(strict=True, ge=0, le=MAX_MASS_KG, allow_inf_nan=False)]
Ratio = Annotated[float, Field(strict=True, ge=0, le=1, allow_inf_nan=False)]
NonEmptyStr = Annotated[str, Field(strict=True, min_length=1)]
BandName = Literal["Excellent", "Good", "Fair", "Needs Improvement", "Poor"]


class _RequestModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
        str_strip_whitespace=True,
    )


class _ResponseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class MetaModel(_RequestModel):
    taluk: NonEmptyStr
    panchayat: NonEmptyStr
    vehicle_reg_no: NonEmptyStr


class TotalsModel(_RequestModel):
    total_households: Count
    total_shops: Count


class DayModel(_RequestModel):
    households: Count
    commercial_shops: Count
    wet_waste_collected: Mass
    wet_waste_managed: Mass
    sanitary_waste_collected: Mass
    sanitary_waste_scientifically_disposed: Mass
    dry_waste_collected: Mass
    dry_waste_stored: Mass


class EntryDayModel(_RequestModel):
    """Day counts without dry waste collected, which comes from the entry."""

    households: Count
    commercial_shops: Count
    wet_waste_collected: Mass
    wet_waste_managed: Mass
    sanitary_waste_collected: Mass
    sanitary_waste_scientifically_disposed: Mass
    dry_waste_stored: Mass | None = None


class MetricsModel(_RequestModel):
    segregation_households_rate: Ratio
    segregation_shops_rate: Ratio
    wet_mgmt_efficiency: Ratio
    sanitary_disposal_efficiency: Ratio
    dry_storage_ratio: Ratio
    per_household_waste_kg: Mass
    score: int = Field(strict=True, ge=0, le=100)
    band: BandName

    @field_validator("band")
    @classmethod
    def _band_matches_score(cls, band: str, info: ValidationInfo) -> str:
        score = info.data.get("score")
        if score is None:
            return band
        expected = classify_band(score).value
        if band != expected:
            raise ValueError(f"band '{band}' does not match score {score} (expected '{expected}')")
        return band


class WeekToDateModel(_RequestModel):
    week_start_date: DateKey
    days_count: int = Field(strict=True, ge=1)
    avg_segregation_households_rate: Ratio
    avg_segregation_shops_rate: Ratio
    avg_wet_mgmt_efficiency: Ratio
    avg_sanitary_disposal_efficiency: Ratio
    avg_dry_storage_ratio: Ratio
    avg_per_household_waste_kg: Mass
    avg_score: float = Field(strict=True, ge=0, le=100, allow_inf_nan=False)
    avg_households: Mass
    avg_commercial_shops: Mass
    avg_wet_waste_collected: Mass
    avg_wet_waste_managed: Mass
    avg_sanitary_waste_collected: Mass
    avg_sanitary_waste_scientifically_disposed: Mass
    avg_dry_waste_collected: Mass
    avg_dry_waste_stored: Mass


class InputsModel(_RequestModel):
    totals: TotalsModel
    day: DayModel
    week_to_date: WeekToDateModel | None = None


class HistoryDayModel(_RequestModel):
    date: DateKey
    totals: TotalsModel
    day: DayModel


class PrecomputedReportRequestModel(_RequestModel):
    """Request carrying metrics the caller already computed."""

    meta: MetaModel
    date: DateKey
    metrics: MetricsModel
    inputs: InputsModel | None = None


class EntryReportRequestModel(_RequestModel):
    """Request whose dry waste figures come from a material-weight entry."""

    meta: MetaModel
    date: DateKey
    entry_id: NonEmptyStr | None = None
    entry_data: dict[str, Mass] | None = None
    totals: TotalsModel
    day: EntryDayModel
    week_to_date: WeekToDateModel | None = None
    history: list[HistoryDayModel] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class ReportMetaResponse(_ResponseModel):
    taluk: str
    panchayat: str
    vehicle_reg_no: str
    date: str


class ComplianceMetricsResponse(_ResponseModel):
    segregation_households_rate: float
    segregation_shops_rate: float
    wet_mgmt_efficiency: float
    sanitary_disposal_efficiency: float
    dry_storage_ratio: float
    per_household_waste_kg: float
    score: int
    band: str

    @classmethod
    def from_metrics(cls, metrics: ComplianceMetrics) -> "ComplianceMetricsResponse":
        return cls(
            segregation_households_rate=metrics.segregation_households_rate,
            segregation_shops_rate=metrics.segregation_shops_rate,
            wet_mgmt_efficiency=metrics.wet_mgmt_efficiency,
            sanitary_disposal_efficiency=metrics.sanitary_disposal_efficiency,
            dry_storage_ratio=metrics.dry_storage_ratio,
            per_household_waste_kg=metrics.per_household_waste_kg,
            score=metrics.score,
            band=metrics.band.value,
        )


class ResolvedInputsResponse(_ResponseModel):
    total_households: int
    total_shops: int
    households: int
    commercial_shops: int
    wet_waste_collected: float
    wet_waste_managed: float
    sanitary_waste_collected: float
    sanitary_waste_scientifically_disposed: float
    dry_waste_collected: float
    dry_waste_stored: float

    @classmethod
    def from_inputs(cls, totals: Totals, day: DayOperationalInput) -> "ResolvedInputsResponse":
        return cls(
            total_households=totals.total_households,
            total_shops=totals.total_shops,
            households=day.households,
            commercial_shops=day.commercial_shops,
            wet_waste_collected=day.wet_waste_collected,
            wet_waste_managed=day.wet_waste_managed,
            sanitary_waste_collected=day.sanitary_waste_collected,
            sanitary_waste_scientifically_disposed=day.sanitary_waste_scientifically_disposed,
            dry_waste_collected=day.dry_waste_collected,
            dry_waste_stored=day.dry_waste_stored,
        )


class EntryDataSummary(_ResponseModel):
    dry_waste_collected: float
    dry_waste_stored: float
    material_count: int
    total_materials_weight: float


class ComplianceReportResponse(_ResponseModel):
    """Envelope returned by both report paths.

    ``calculated_metrics``, ``resolved_inputs`` and ``entry_data`` are only
    populated on the entry path.
    """

    success: bool = True
    report: NarrativeReport
    meta: ReportMetaResponse
    calculated_metrics: ComplianceMetricsResponse | None = None
    resolved_inputs: ResolvedInputsResponse | None = None
    entry_data: EntryDataSummary | None = None

    def to_payload(self) -> dict:
        """Serialize with camelCase keys, omitting absent sections."""
        return self.model_dump(by_alias=True, exclude_none=True)

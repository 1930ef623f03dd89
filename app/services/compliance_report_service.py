"""
app/services/compliance_report_service.py

Compliance report orchestration.

Composes input validation, metric computation, week-to-date aggregation,
prompt assembly and one narrator call into a response envelope. Contains
no scoring or formatting logic of its own.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping

from app.config import NarratorSettings, get_narrator_settings
from app.domain.compliance import EntryReportRequest, FieldViolation, PrecomputedReportRequest
from app.errors import EntryNotFoundError, EntryStoreNotConfiguredError, InputValidationError
from app.logging_utils import log_event
from app.repositories.entry_repository import EntryRepository
from app.schemas.compliance import (
    MAX_MASS_KG,
    ComplianceMetricsResponse,
    ComplianceReportResponse,
    EntryDataSummary,
    ReportMetaResponse,
    ResolvedInputsResponse,
)
from app.validators.compliance_validator import ComplianceInputValidator
from compliance.aggregation import WeekAggregator
from compliance.metrics import MetricsCalculator
from compliance.types import DailyRecord, DayOperationalInput, WeekToDateAverage
from narration.adapter import BaseNarratorAdapter, MockNarratorAdapter, OpenAINarratorAdapter
from narration.errors import NarratorError, NarratorResponseError
from narration.payload import (
    CompliancePromptPayload,
    FirstOfWeek,
    ReferenceData,
    ReportMeta,
    WeekContext,
    WithHistory,
)
from narration.prompt_builder import CompliancePromptBuilder
from narration.schema import NarrativeReport

logger = logging.getLogger(__name__)

# Share of collected dry waste assumed still in storage when not reported.
DEFAULT_DRY_STORED_SHARE = 0.1


def build_narrator_adapter(settings: NarratorSettings | None = None) -> BaseNarratorAdapter:
    """
    Build the narrator adapter selected by *settings* (environment when omitted).

    Raises NarratorConfigurationError when the real narrator has no API key.
    """

    settings = settings or get_narrator_settings()
    if settings.use_mock:
        return MockNarratorAdapter()
    return OpenAINarratorAdapter(
        api_key=settings.api_key,
        model=settings.model,
        base_url=settings.base_url,
        temperature=settings.temperature,
        top_p=settings.top_p,
        max_tokens=settings.max_output_tokens,
        timeout_seconds=settings.timeout_seconds,
    )


def sum_material_weights(material_weights: Mapping[str, Any]) -> float:
    """
    Sum the nonnegative numeric weights of an entry.
    """

    total = 0.0
    for weight in material_weights.values():
        if isinstance(weight, bool) or not isinstance(weight, (int, float)):
            continue
        if weight > 0:
            total += float(weight)
    return total


class ComplianceReportService:
    """
    Stateless coordinator for compliance report generation.

    Collaborators are injected so the deterministic core can be exercised
    with a scripted narrator and an in-memory entry store. Each call makes
    exactly one narrator request; nothing is cached or retried.
    """

    def __init__(
        self,
        narrator: BaseNarratorAdapter,
        entry_repository: EntryRepository | None = None,
        validator: ComplianceInputValidator | None = None,
        calculator: MetricsCalculator | None = None,
        aggregator: WeekAggregator | None = None,
        prompt_builder: CompliancePromptBuilder | None = None,
    ) -> None:
        self._narrator = narrator
        self._entry_repository = entry_repository
        self._validator = validator or ComplianceInputValidator()
        self._calculator = calculator or MetricsCalculator()
        self._aggregator = aggregator or WeekAggregator()
        self._prompt_builder = prompt_builder or CompliancePromptBuilder()

    # ------------------------------------------------------------------
    # Precomputed path
    # ------------------------------------------------------------------

    def generate_report(self, raw: Any) -> ComplianceReportResponse:
        """
        Narrate a report from caller-computed metrics.

        Raises:
            InputValidationError: The request is malformed.
            NarratorError: The narrator call or its response failed.
        """

        request: PrecomputedReportRequest = self._validator.validate_precomputed_request(raw)

        reference: ReferenceData | None = None
        if request.inputs is not None:
            reference = ReferenceData(
                totals=request.inputs.totals,
                day=request.inputs.day,
                week=_week_context(request.inputs.week_to_date),
            )

        payload = CompliancePromptPayload(
            meta=request.meta,
            date=request.date,
            metrics=request.metrics,
            reference=reference,
        )
        report = self._narrate(payload)

        return ComplianceReportResponse(
            report=report,
            meta=_meta_response(request.meta, request.date),
        )

    # ------------------------------------------------------------------
    # Entry path
    # ------------------------------------------------------------------

    def generate_report_from_entry(self, raw: Any) -> ComplianceReportResponse:
        """
        Compute metrics from an entry's material weights and narrate a report.

        Material weights come from ``entryData`` when given, otherwise from
        the entry store when ``entryId`` is given, otherwise none.

        Raises:
            InputValidationError: The request is malformed, or the entry's
                material weights sum above ``MAX_MASS_KG``.
            EntryNotFoundError: ``entryId`` does not match a stored entry.
            EntryStoreNotConfiguredError: ``entryId`` given without an entry store.
            NarratorError: The narrator call or its response failed.
        """

        request: EntryReportRequest = self._validator.validate_entry_request(raw)

        material_weights = self._resolve_material_weights(request)
        dry_waste_collected = sum_material_weights(material_weights)
        if dry_waste_collected > MAX_MASS_KG:
            source = "entryData" if request.entry_data is not None else "entryId"
            raise InputValidationError(
                [
                    FieldViolation(
                        field=source,
                        message=f"total material weight must be at most {MAX_MASS_KG:g} kg",
                        value=dry_waste_collected,
                    )
                ]
            )
        dry_waste_stored = (
            request.day.dry_waste_stored
            if request.day.dry_waste_stored is not None
            else dry_waste_collected * DEFAULT_DRY_STORED_SHARE
        )

        day = DayOperationalInput(
            households=request.day.households,
            commercial_shops=request.day.commercial_shops,
            wet_waste_collected=request.day.wet_waste_collected,
            wet_waste_managed=request.day.wet_waste_managed,
            sanitary_waste_collected=request.day.sanitary_waste_collected,
            sanitary_waste_scientifically_disposed=request.day.sanitary_waste_scientifically_disposed,
            dry_waste_collected=dry_waste_collected,
            dry_waste_stored=dry_waste_stored,
        )

        metrics = self._calculator.calculate(request.totals, day)
        log_event(
            logger,
            logging.INFO,
            "compliance_metrics_computed",
            panchayat=request.meta.panchayat,
            date=request.date,
            score=metrics.score,
            band=metrics.band.value,
        )

        week_to_date = request.week_to_date or self._aggregate_history(request)

        payload = CompliancePromptPayload(
            meta=request.meta,
            date=request.date,
            metrics=metrics,
            reference=ReferenceData(
                totals=request.totals,
                day=day,
                week=_week_context(week_to_date),
            ),
        )
        report = self._narrate(payload)

        return ComplianceReportResponse(
            report=report,
            meta=_meta_response(request.meta, request.date),
            calculated_metrics=ComplianceMetricsResponse.from_metrics(metrics),
            resolved_inputs=ResolvedInputsResponse.from_inputs(request.totals, day),
            entry_data=EntryDataSummary(
                dry_waste_collected=dry_waste_collected,
                dry_waste_stored=dry_waste_stored,
                material_count=len(material_weights),
                total_materials_weight=dry_waste_collected,
            ),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve_material_weights(self, request: EntryReportRequest) -> Mapping[str, Any]:
        if request.entry_data is not None:
            return request.entry_data
        if request.entry_id is None:
            return {}
        if self._entry_repository is None:
            raise EntryStoreNotConfiguredError(
                "Entry lookup requested but no entry repository is configured."
            )

        weights = self._entry_repository.get_material_weights(request.entry_id)
        if weights is None:
            log_event(logger, logging.WARNING, "entry_not_found", entry_id=request.entry_id)
            raise EntryNotFoundError(request.entry_id)
        return weights

    def _aggregate_history(self, request: EntryReportRequest) -> WeekToDateAverage | None:
        records = [
            DailyRecord(
                date=item.date,
                day=item.day,
                metrics=self._calculator.calculate(item.totals, item.day),
            )
            for item in sorted(request.history, key=lambda item: item.date)
        ]
        return self._aggregator.aggregate(records)

    def _narrate(self, payload: CompliancePromptPayload) -> NarrativeReport:
        prompt = self._prompt_builder.build_prompt(payload)
        with_history = isinstance(payload.week, WithHistory)

        log_event(
            logger,
            logging.INFO,
            "narrator_request_started",
            panchayat=payload.meta.panchayat,
            date=payload.date,
            prompt_chars=len(prompt),
            with_history=with_history,
        )
        started = time.monotonic()
        try:
            report = self._narrator.render(prompt)
        except NarratorResponseError as exc:
            log_event(
                logger,
                logging.ERROR,
                "narrator_request_failed",
                error_type=type(exc).__name__,
                stage=exc.stage,
                errors=exc.errors,
            )
            raise
        except NarratorError as exc:
            log_event(
                logger,
                logging.ERROR,
                "narrator_request_failed",
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise

        log_event(
            logger,
            logging.INFO,
            "narrator_request_completed",
            panchayat=payload.meta.panchayat,
            date=payload.date,
            elapsed_ms=round((time.monotonic() - started) * 1000),
            irregularities=len(report.data_irregularities),
        )
        return report


def _week_context(average: WeekToDateAverage | None) -> WeekContext:
    if average is None:
        return FirstOfWeek()
    return WithHistory(average=average)


def _meta_response(meta: ReportMeta, date: str) -> ReportMetaResponse:
    return ReportMetaResponse(
        taluk=meta.taluk,
        panchayat=meta.panchayat,
        vehicle_reg_no=meta.vehicle_reg_no,
        date=date,
    )


def get_compliance_report_service(
    entry_repository: EntryRepository | None = None,
) -> ComplianceReportService:
    """
    Build a service wired to the configured narrator.
    """

    return ComplianceReportService(
        narrator=build_narrator_adapter(),
        entry_repository=entry_repository,
    )

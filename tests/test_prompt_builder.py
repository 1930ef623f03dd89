"""
tests/test_prompt_builder.py

Pytest unit tests for CompliancePromptBuilder.

The prompt text is the narrator wire contract, so these tests pin
formatting precision, section order and the instruction variants.
"""

from __future__ import annotations

import pytest

from compliance.types import (
    ComplianceBand,
    ComplianceMetrics,
    DayOperationalInput,
    Totals,
    WeekToDateAverage,
)
from narration.payload import (
    CompliancePromptPayload,
    FirstOfWeek,
    ReferenceData,
    ReportMeta,
    WithHistory,
)
from narration.prompt_builder import CompliancePromptBuilder, to_fixed

_META = ReportMeta(taluk="Udupi", panchayat="Kaup", vehicle_reg_no="KA20AB1234")

_METRICS = ComplianceMetrics(
    segregation_households_rate=0.95,
    segregation_shops_rate=0.9,
    wet_mgmt_efficiency=0.98,
    sanitary_disposal_efficiency=0.9,
    dry_storage_ratio=20.0 / 300.0,
    per_household_waste_kg=850.0 / 950.0,
    score=90,
    band=ComplianceBand.EXCELLENT,
)

_TOTALS = Totals(total_households=1000, total_shops=200)

_DAY = DayOperationalInput(
    households=950,
    commercial_shops=180,
    wet_waste_collected=500.0,
    wet_waste_managed=490.0,
    sanitary_waste_collected=50.0,
    sanitary_waste_scientifically_disposed=45.0,
    dry_waste_collected=300.0,
    dry_waste_stored=20.0,
)

_WEEK = WeekToDateAverage(
    week_start_date="2026-10-12",
    days_count=2,
    avg_segregation_households_rate=0.925,
    avg_segregation_shops_rate=0.85,
    avg_wet_mgmt_efficiency=0.97,
    avg_sanitary_disposal_efficiency=0.88,
    avg_dry_storage_ratio=0.08,
    avg_per_household_waste_kg=0.91,
    avg_score=87.5,
    avg_households=925.0,
    avg_commercial_shops=170.0,
    avg_wet_waste_collected=480.0,
    avg_wet_waste_managed=465.5,
    avg_sanitary_waste_collected=48.0,
    avg_sanitary_waste_scientifically_disposed=42.25,
    avg_dry_waste_collected=290.0,
    avg_dry_waste_stored=23.2,
)


@pytest.fixture()
def builder() -> CompliancePromptBuilder:
    return CompliancePromptBuilder()


def _payload(reference: ReferenceData | None = None) -> CompliancePromptPayload:
    return CompliancePromptPayload(
        meta=_META,
        date="2026-10-14",
        metrics=_METRICS,
        reference=reference,
    )


def _with_history() -> CompliancePromptPayload:
    return _payload(ReferenceData(totals=_TOTALS, day=_DAY, week=WithHistory(average=_WEEK)))


# ---------------------------------------------------------------------------
# Number formatting
# ---------------------------------------------------------------------------


class TestToFixed:
    @pytest.mark.parametrize(
        "value, digits, expected",
        [
            (0.95, 2, "0.95"),
            (0.0, 2, "0.00"),
            (1.0, 2, "1.00"),
            (0.125, 2, "0.13"),
            (1.005, 2, "1.00"),
            (2.5, 0, "3"),
            (925.0, 0, "925"),
            (87.5, 1, "87.5"),
            (87.25, 1, "87.3"),
            (1234.5, 2, "1234.50"),
        ],
    )
    def test_to_fixed(self, value: float, digits: int, expected: str) -> None:
        assert to_fixed(value, digits) == expected


# ---------------------------------------------------------------------------
# Today's block
# ---------------------------------------------------------------------------


class TestTodaySection:
    def test_context_lines(self, builder: CompliancePromptBuilder) -> None:
        prompt = builder.build_prompt(_payload())

        assert "- Taluk: Udupi\n" in prompt
        assert "- Panchayat: Kaup\n" in prompt
        assert "- Vehicle Registration No: KA20AB1234\n" in prompt
        assert "- Report Date: 2026-10-14\n" in prompt

    def test_ratios_two_decimals(self, builder: CompliancePromptBuilder) -> None:
        prompt = builder.build_prompt(_payload())

        assert "- Household Segregation Rate: 0.95 (0–1 scale)\n" in prompt
        assert "- Commercial Segregation Rate: 0.90\n" in prompt
        assert "- Wet Waste Management Efficiency: 0.98\n" in prompt
        assert "- Sanitary Disposal Efficiency: 0.90\n" in prompt
        assert "- Dry Waste Storage Ratio: 0.07\n" in prompt
        assert "- Per-Household Waste Generation (kg): 0.89\n" in prompt

    def test_score_integer_with_band(self, builder: CompliancePromptBuilder) -> None:
        prompt = builder.build_prompt(_payload())
        assert "- Compliance Score: 90 (Band: Excellent)" in prompt

    def test_preamble_forbids_recalculation(self, builder: CompliancePromptBuilder) -> None:
        prompt = builder.build_prompt(_payload())

        assert prompt.startswith(
            "You are an SWM (Solid Waste Management) Compliance Narrator. \n\n"
        )
        assert "Do not perform or repeat any mathematical calculations" in prompt


# ---------------------------------------------------------------------------
# Week context variants
# ---------------------------------------------------------------------------


class TestFirstOfWeek:
    def test_no_comparison_block(self, builder: CompliancePromptBuilder) -> None:
        prompt = builder.build_prompt(_payload())

        assert "Week-to-Date Performance" not in prompt
        assert "IMPORTANT: Compare today's performance" not in prompt

    def test_first_report_instructions(self, builder: CompliancePromptBuilder) -> None:
        prompt = builder.build_prompt(_payload())

        assert (
            "   - Note: This appears to be the first report for this week, so historical "
            "comparison data is not available" in prompt
        )
        assert "Since this is the first report of the week, focus on today's performance." in prompt
        assert "Base recommendations on today's performance." in prompt
        assert "Focus on immediate risks based on today's performance." in prompt
        assert "resource needs.\n" in prompt
        assert "When comparing with week-to-date" not in prompt

    def test_reference_without_history_is_first_of_week(
        self, builder: CompliancePromptBuilder
    ) -> None:
        payload = _payload(ReferenceData(totals=_TOTALS, day=_DAY, week=FirstOfWeek()))
        prompt = builder.build_prompt(payload)

        assert "Week-to-Date Performance" not in prompt
        assert "first report for this week" in prompt


class TestWithHistory:
    def test_comparison_header(self, builder: CompliancePromptBuilder) -> None:
        prompt = builder.build_prompt(_with_history())
        assert "Week-to-Date Performance (from 2026-10-12 to 2026-10-14, 2 days):\n" in prompt

    def test_comparison_lines(self, builder: CompliancePromptBuilder) -> None:
        prompt = builder.build_prompt(_with_history())

        assert "- Average Household Segregation Rate: 0.93 (Today: 0.95)\n" in prompt
        assert "- Average Dry Storage Ratio: 0.08 (Today: 0.07)\n" in prompt
        assert "- Average Per-Household Waste Generation: 0.91 kg (Today: 0.89 kg)\n" in prompt
        assert "- Average Compliance Score: 87.5 (Today: 90)\n" in prompt
        assert "- Average Daily Households Segregated: 925 (Today: 950)\n" in prompt
        assert "- Average Daily Shops Segregated: 170 (Today: 180)\n" in prompt
        assert "- Average Daily Wet Waste Managed: 465.50 kg (Today: 490.00 kg)\n" in prompt
        assert (
            "- Average Daily Sanitary Waste Disposed: 42.25 kg (Today: 45.00 kg)\n" in prompt
        )
        assert "- Average Daily Dry Waste Stored: 23.20 kg (Today: 20.00 kg)\n" in prompt

    def test_trend_instructions(self, builder: CompliancePromptBuilder) -> None:
        prompt = builder.build_prompt(_with_history())

        assert "IMPORTANT: Compare today's performance against week-to-date averages." in prompt
        assert "   - Compare today's metrics against week-to-date averages and identify trends" in prompt
        assert "Compare today's performance with week-to-date averages if available." in prompt
        assert "resource needs, and overall week-to-date trends." in prompt
        assert (
            "- When comparing with week-to-date, highlight significant differences "
            "(>10% change) and trends." in prompt
        )
        assert "first report for this week" not in prompt

    def test_comparison_block_follows_score_line(self, builder: CompliancePromptBuilder) -> None:
        prompt = builder.build_prompt(_with_history())
        assert "- Compliance Score: 90 (Band: Excellent)\nWeek-to-Date Performance" in prompt


# ---------------------------------------------------------------------------
# Contract sections
# ---------------------------------------------------------------------------


class TestContractSections:
    def test_taxonomy_with_common_names(self, builder: CompliancePromptBuilder) -> None:
        prompt = builder.build_prompt(_payload())

        for line in (
            '- "Completeness Errors" (common name: "Missing Data")',
            '- "Consistency Errors" (common name: "Conflicting/Contradictory Data")',
            '- "Accuracy Errors" (common name: "Incorrect Values")',
            '- "Validity Errors" (common name: "Format/Domain Constraint Violations")',
            '- "Duplication Errors" (common name: "Redundant Records")',
            '- "Timeliness Errors" (common name: "Stale/Outdated Data")',
        ):
            assert line in prompt

    def test_hedged_warning_rule(self, builder: CompliancePromptBuilder) -> None:
        prompt = builder.build_prompt(_payload())
        assert (
            "- Present data irregularities as warnings, not accusations. Use phrases like "
            '"may indicate", "suggests possible", "warrants verification".' in prompt
        )

    def test_seven_tasks(self, builder: CompliancePromptBuilder) -> None:
        prompt = builder.build_prompt(_payload())

        for task in (
            "1. *gpAccountHolderSummary*",
            "2. *supervisorySummary*",
            "3. *zpMrfSummary*",
            "4. *recommendations*",
            "5. *risks*",
            "6. *notes*",
            "7. *dataIrregularities*",
        ):
            assert task in prompt
        assert (
            "(Completeness, Consistency, Accuracy, Validity, Uniqueness, or Timeliness)" in prompt
        )

    def test_output_schema(self, builder: CompliancePromptBuilder) -> None:
        prompt = builder.build_prompt(_payload())

        assert '  "gpAccountHolderSummary": "string",\n' in prompt
        assert '  "notes": "string (optional)",\n' in prompt
        assert (
            '      "errorType": "Completeness Errors" | "Consistency Errors" | '
            '"Accuracy Errors" | "Validity Errors" | "Duplication Errors" | '
            '"Timeliness Errors",\n' in prompt
        )
        assert (
            '      "dataQualityMetricAffected": "Completeness" | "Consistency" | '
            '"Accuracy" | "Validity" | "Uniqueness" | "Timeliness"\n' in prompt
        )
        assert "}\n\nGenerate only this JSON and nothing else." in prompt

    def test_prompt_without_reference_ends_with_closing(
        self, builder: CompliancePromptBuilder
    ) -> None:
        prompt = builder.build_prompt(_payload())

        assert prompt.endswith("Generate only this JSON and nothing else.")
        assert "Reference Data" not in prompt

    def test_reference_block_appended(self, builder: CompliancePromptBuilder) -> None:
        prompt = builder.build_prompt(_with_history())

        assert (
            "Generate only this JSON and nothing else.\n"
            "Reference Data (for context only - do not recalculate):\n"
            "- Total Households: 1000\n"
            "- Total Shops: 200\n"
            "- Segregated Households Today: 950\n" in prompt
        )
        assert prompt.endswith("- Dry Waste Stored: 20.00 kg")

    def test_section_order(self, builder: CompliancePromptBuilder) -> None:
        prompt = builder.build_prompt(_with_history())

        markers = [
            "Context:",
            "Today's Metrics (already computed):",
            "Week-to-Date Performance",
            "DATA VALIDITY CHECK:",
            "Tasks:",
            "Rules:",
            '"gpAccountHolderSummary": "string"',
            "Reference Data",
        ]
        positions = [prompt.index(marker) for marker in markers]
        assert positions == sorted(positions)


# ---------------------------------------------------------------------------
# Determinism
# ---------------------------------------------------------------------------


def test_identical_payloads_render_identical_prompts(builder: CompliancePromptBuilder) -> None:
    assert builder.build_prompt(_with_history()) == CompliancePromptBuilder().build_prompt(
        _with_history()
    )

"""Deterministic prompt builder for compliance narration.

The rendered text is the narrator's only input. Its instructional phrases
are part of the narrator wire contract: the narrator is prompted, not
programmed, so wording changes alter output and must be deliberate.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import get_args

from compliance.types import ComplianceMetrics, DayOperationalInput, WeekToDateAverage
from narration.payload import CompliancePromptPayload, ReferenceData, WithHistory
from narration.schema import IRREGULARITY_TAXONOMY, DataQualityMetric

_PREAMBLE = (
    "You are an SWM (Solid Waste Management) Compliance Narrator. \n"
    "\n"
    "You are generating a comprehensive daily compliance report for a Gram Panchayat "
    "based on pre-computed data.\n"
    "\n"
    "Do not perform or repeat any mathematical calculations — assume all percentages "
    "and scores provided are correct."
)

_DATA_VALIDITY_CHECK = """\
DATA VALIDITY CHECK:
Before generating the report, carefully analyze the data for potential irregularities. Check for:

1. *Completeness Errors (Missing Data)*: Are there unexpected zeros, nulls, or missing values? For example:
   - Total households/shops is 0 when operations are expected
   - Waste collected is 0 when households are reported as segregating
   - Managed waste is 0 when collected waste exists

2. *Consistency Errors (Conflicting Data)*: Are there logical contradictions? For example:
   - Segregated households exceed total households
   - Managed waste exceeds collected waste (should be ≤ collected)
   - Disposed sanitary waste exceeds collected sanitary waste
   - Stored dry waste exceeds collected dry waste

3. *Accuracy Errors (Incorrect Values)*: Are values realistic for SWM operations? For example:
   - Per-household waste generation is abnormally high (>10 kg) or low (<0.5 kg) without context
   - Segregation rates are exactly 0% or 100% when partial compliance is expected
   - Waste quantities show sudden extreme spikes or drops without explanation

4. *Validity Errors (Format/Domain Violations)*: Do values violate expected constraints? For example:
   - Negative values for waste quantities
   - Segregation rates outside 0-1 range
   - Non-integer values for household/shop counts

5. *Duplication Errors*: Are there signs of duplicate entries? (This is harder to detect from single-day data, but note if patterns suggest it)

6. *Timeliness Errors*: Is the data current and relevant? (Usually not applicable for daily reports, but note if data seems stale)

If you detect any data irregularities, include them in the "dataIrregularities" field as warnings (not accusations). Use the following error types:
{taxonomy}

For each irregularity, describe it in the context of SWM operations and specify which data quality metric is affected."""

_TASKS = """\
Tasks:
1. *gpAccountHolderSummary*: Write 2–3 sentences describing the day's operational performance.
   Focus on segregation compliance, efficiency, and any immediate action needed.
   {gp_account_holder}
   Example tone: "Wet waste management efficiency remained above 95%. Recommend scheduling pickup for stored dry waste exceeding 10%."

2. *supervisorySummary*: Write a comprehensive paragraph (max 150 words) summarizing performance from a supervisory viewpoint.{supervisory}
   - Mention if any key indicator (segregation < 75%, efficiency < 90%) needs intervention

3. *zpMrfSummary*: Write a brief 2–3 sentence summary for district or MRF monitoring.
   Emphasize collection-to-dispatch alignment, backlog risks, resource needs{zp_mrf}.

4. *recommendations*: Provide 3–5 concise bullet points with actionable operational or process improvements.
   {recommendations}

5. *risks*: List up to 3 potential issues if performance continues at the current level.
   {risks}
   Return an empty array if all metrics are stable.

6. *notes*: Optional short note with contextual or situational information (weather, festival, etc.) if relevant.

7. *dataIrregularities*: List any data quality issues detected. Each irregularity should include:
   - errorType: One of the error types listed above
   - commonName: The common name for that error type
   - description: A warning description in SWM context (e.g., "Warning: Collected wet waste is 0 kg while 450 households are reported as segregating, which may indicate missing data entry")
   - dataQualityMetricAffected: The affected metric ({metric_names})
   Return an empty array if no irregularities are detected."""

_RULES = """\
Rules:
- Do not restate raw data or repeat numbers unnecessarily.
- Keep text clear, factual, and professional.
- Do not include percentages or values unless it improves clarity.
- Avoid unnecessary adjectives or filler language.
{comparison_rule}
- Present data irregularities as warnings, not accusations. Use phrases like "may indicate", "suggests possible", "warrants verification".
- Always return valid JSON following this schema:"""

_CLOSING = "Generate only this JSON and nothing else."


@dataclass(frozen=True)
class _WeekInstructions:
    """Instruction fragments that differ between the two week contexts."""

    supervisory: str
    gp_account_holder: str
    zp_mrf: str
    recommendations: str
    risks: str
    comparison_rule: str


_WITH_HISTORY = _WeekInstructions(
    supervisory=(
        "\n   - Compare today's metrics against week-to-date averages and identify trends"
        "\n   - Highlight improvements or declines in key indicators"
        "\n   - Identify patterns: Is performance improving, declining, or stable?"
        "\n   - Discuss important trends that can be noticed across the week-to-date period"
    ),
    gp_account_holder="Compare today's performance with week-to-date averages if available.",
    zp_mrf=", and overall week-to-date trends",
    recommendations="Base recommendations on both today's performance and week-to-date trends.",
    risks="Consider both immediate risks and risks based on week-to-date trends.",
    comparison_rule=(
        "- When comparing with week-to-date, highlight significant differences "
        "(>10% change) and trends."
    ),
)

_FIRST_OF_WEEK = _WeekInstructions(
    supervisory=(
        "\n   - Note: This appears to be the first report for this week, so historical "
        "comparison data is not available"
        "\n   - Focus on today's performance metrics and identify any immediate concerns "
        "or strengths"
    ),
    gp_account_holder="Since this is the first report of the week, focus on today's performance.",
    zp_mrf="",
    recommendations="Base recommendations on today's performance.",
    risks="Focus on immediate risks based on today's performance.",
    comparison_rule="",
)


def to_fixed(value: float, digits: int) -> str:
    """Render *value* with exactly *digits* decimals, ties rounded up.

    Rounds the exact binary value of the float, so output is stable
    across platforms.
    """
    quantum = Decimal(1).scaleb(-digits)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def _ratio(value: float) -> str:
    return to_fixed(value, 2)


def _kg(value: float) -> str:
    return to_fixed(value, 2)


class CompliancePromptBuilder:
    """Builds the narrator instruction text for one compliance report.

    Stateless and deterministic: identical payloads always yield
    byte-identical prompts. Section order is preamble, context, today's
    metrics, optional week-to-date comparison, data validity checklist,
    narration tasks, rules with the output schema, and the optional
    reference data block.
    """

    def build_prompt(self, payload: CompliancePromptPayload) -> str:
        """Render the full prompt from *payload*.

        Args:
            payload: Metadata, today's metrics and optional reference data.

        Returns:
            A fully formatted prompt string ready for the narrator.
        """
        week = payload.week
        if isinstance(week, WithHistory):
            instructions = _WITH_HISTORY
        else:
            instructions = _FIRST_OF_WEEK

        metrics_section = self._format_metrics_section(payload)
        if isinstance(week, WithHistory) and payload.reference is not None:
            metrics_section += "\n" + self._format_week_section(
                average=week.average,
                date=payload.date,
                metrics=payload.metrics,
                day=payload.reference.day,
            )

        prompt = "\n\n".join(
            (
                _PREAMBLE,
                self._format_context_section(payload),
                metrics_section,
                _DATA_VALIDITY_CHECK.format(taxonomy=self._format_taxonomy()),
                _TASKS.format(
                    gp_account_holder=instructions.gp_account_holder,
                    supervisory=instructions.supervisory,
                    zp_mrf=instructions.zp_mrf,
                    recommendations=instructions.recommendations,
                    risks=instructions.risks,
                    metric_names=self._format_metric_names(),
                ),
                _RULES.format(comparison_rule=instructions.comparison_rule),
                self._format_output_schema(),
                _CLOSING,
            )
        )

        if payload.reference is not None:
            prompt += self._format_reference_section(payload.reference)
        return prompt

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _format_context_section(self, payload: CompliancePromptPayload) -> str:
        meta = payload.meta
        return "\n".join(
            (
                "Context:",
                f"- Taluk: {meta.taluk}",
                f"- Panchayat: {meta.panchayat}",
                f"- Vehicle Registration No: {meta.vehicle_reg_no}",
                f"- Report Date: {payload.date}",
            )
        )

    def _format_metrics_section(self, payload: CompliancePromptPayload) -> str:
        m = payload.metrics
        return "\n".join(
            (
                "Today's Metrics (already computed):",
                f"- Household Segregation Rate: {_ratio(m.segregation_households_rate)} (0–1 scale)",
                f"- Commercial Segregation Rate: {_ratio(m.segregation_shops_rate)}",
                f"- Wet Waste Management Efficiency: {_ratio(m.wet_mgmt_efficiency)}",
                f"- Sanitary Disposal Efficiency: {_ratio(m.sanitary_disposal_efficiency)}",
                f"- Dry Waste Storage Ratio: {_ratio(m.dry_storage_ratio)}",
                f"- Per-Household Waste Generation (kg): {_kg(m.per_household_waste_kg)}",
                f"- Compliance Score: {m.score} (Band: {m.band.value})",
            )
        )

    def _format_week_section(
        self,
        average: WeekToDateAverage,
        date: str,
        metrics: ComplianceMetrics,
        day: DayOperationalInput,
    ) -> str:
        """Render the week-to-date averages alongside today's values."""
        a = average
        m = metrics
        lines = (
            f"Week-to-Date Performance (from {a.week_start_date} to {date}, {a.days_count} days):",
            f"- Average Household Segregation Rate: {_ratio(a.avg_segregation_households_rate)} "
            f"(Today: {_ratio(m.segregation_households_rate)})",
            f"- Average Commercial Segregation Rate: {_ratio(a.avg_segregation_shops_rate)} "
            f"(Today: {_ratio(m.segregation_shops_rate)})",
            f"- Average Wet Waste Management Efficiency: {_ratio(a.avg_wet_mgmt_efficiency)} "
            f"(Today: {_ratio(m.wet_mgmt_efficiency)})",
            f"- Average Sanitary Disposal Efficiency: {_ratio(a.avg_sanitary_disposal_efficiency)} "
            f"(Today: {_ratio(m.sanitary_disposal_efficiency)})",
            f"- Average Dry Storage Ratio: {_ratio(a.avg_dry_storage_ratio)} "
            f"(Today: {_ratio(m.dry_storage_ratio)})",
            f"- Average Per-Household Waste Generation: {_kg(a.avg_per_household_waste_kg)} kg "
            f"(Today: {_kg(m.per_household_waste_kg)} kg)",
            f"- Average Compliance Score: {to_fixed(a.avg_score, 1)} (Today: {m.score})",
            f"- Average Daily Households Segregated: {to_fixed(a.avg_households, 0)} "
            f"(Today: {day.households})",
            f"- Average Daily Shops Segregated: {to_fixed(a.avg_commercial_shops, 0)} "
            f"(Today: {day.commercial_shops})",
            f"- Average Daily Wet Waste Collected: {_kg(a.avg_wet_waste_collected)} kg "
            f"(Today: {_kg(day.wet_waste_collected)} kg)",
            f"- Average Daily Wet Waste Managed: {_kg(a.avg_wet_waste_managed)} kg "
            f"(Today: {_kg(day.wet_waste_managed)} kg)",
            f"- Average Daily Sanitary Waste Collected: {_kg(a.avg_sanitary_waste_collected)} kg "
            f"(Today: {_kg(day.sanitary_waste_collected)} kg)",
            f"- Average Daily Sanitary Waste Disposed: "
            f"{_kg(a.avg_sanitary_waste_scientifically_disposed)} kg "
            f"(Today: {_kg(day.sanitary_waste_scientifically_disposed)} kg)",
            f"- Average Daily Dry Waste Collected: {_kg(a.avg_dry_waste_collected)} kg "
            f"(Today: {_kg(day.dry_waste_collected)} kg)",
            f"- Average Daily Dry Waste Stored: {_kg(a.avg_dry_waste_stored)} kg "
            f"(Today: {_kg(day.dry_waste_stored)} kg)",
        )
        return (
            "\n".join(lines)
            + "\n\nIMPORTANT: Compare today's performance against week-to-date averages. "
            "Identify trends, improvements, or declines."
        )

    def _format_reference_section(self, reference: ReferenceData) -> str:
        totals = reference.totals
        day = reference.day
        return "\n" + "\n".join(
            (
                "Reference Data (for context only - do not recalculate):",
                f"- Total Households: {totals.total_households}",
                f"- Total Shops: {totals.total_shops}",
                f"- Segregated Households Today: {day.households}",
                f"- Segregated Shops Today: {day.commercial_shops}",
                f"- Wet Waste Collected: {_kg(day.wet_waste_collected)} kg",
                f"- Wet Waste Managed: {_kg(day.wet_waste_managed)} kg",
                f"- Sanitary Waste Collected: {_kg(day.sanitary_waste_collected)} kg",
                f"- Sanitary Waste Disposed: {_kg(day.sanitary_waste_scientifically_disposed)} kg",
                f"- Dry Waste Collected: {_kg(day.dry_waste_collected)} kg",
                f"- Dry Waste Stored: {_kg(day.dry_waste_stored)} kg",
            )
        )

    # ------------------------------------------------------------------
    # Contract fragments derived from the response schema
    # ------------------------------------------------------------------

    def _format_taxonomy(self) -> str:
        return "\n".join(
            f'- "{error_type}" (common name: "{common_name}")'
            for error_type, common_name in IRREGULARITY_TAXONOMY
        )

    def _format_metric_names(self) -> str:
        names = get_args(DataQualityMetric)
        return ", ".join(names[:-1]) + f", or {names[-1]}"

    def _format_output_schema(self) -> str:
        error_types = " | ".join(f'"{error_type}"' for error_type, _ in IRREGULARITY_TAXONOMY)
        metrics = " | ".join(f'"{name}"' for name in get_args(DataQualityMetric))
        return "\n".join(
            (
                "{",
                '  "gpAccountHolderSummary": "string",',
                '  "supervisorySummary": "string",',
                '  "zpMrfSummary": "string",',
                '  "recommendations": ["string"],',
                '  "risks": ["string"],',
                '  "notes": "string (optional)",',
                '  "dataIrregularities": [',
                "    {",
                f'      "errorType": {error_types},',
                '      "commonName": "string",',
                '      "description": "string",',
                f'      "dataQualityMetricAffected": {metrics}',
                "    }",
                "  ]",
                "}",
            )
        )

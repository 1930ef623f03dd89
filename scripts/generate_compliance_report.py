"""
Generate one compliance report from a JSON request file.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from contextlib import ExitStack
from pathlib import Path

from app.config import get_narrator_settings
from app.errors import ComplianceReportError, EntryNotFoundError, InputValidationError
from app.logging_utils import configure_logging
from app.repositories.entry_repository import SQLAlchemyEntryRepository
from app.services.compliance_report_service import (
    ComplianceReportService,
    build_narrator_adapter,
)
from narration.adapter import MockNarratorAdapter
from narration.errors import NarratorError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate a compliance report.")
    parser.add_argument(
        "--input",
        dest="input_path",
        required=True,
        help="Path to the JSON request body.",
    )
    parser.add_argument(
        "--from-entry",
        dest="from_entry",
        action="store_true",
        help="Compute metrics from material weights instead of using supplied metrics.",
    )
    parser.add_argument(
        "--mock",
        dest="mock",
        action="store_true",
        help="Use the deterministic mock narrator.",
    )
    args = parser.parse_args(argv)

    configure_logging(os.getenv("LOG_LEVEL", "INFO"))
    raw = json.loads(Path(args.input_path).read_text(encoding="utf-8"))

    with ExitStack() as stack:
        try:
            narrator = MockNarratorAdapter() if args.mock else build_narrator_adapter(
                get_narrator_settings()
            )
            repository = None
            if args.from_entry and isinstance(raw, dict) and raw.get("entryId") and "entryData" not in raw:
                from db.session import SessionLocal

                repository = SQLAlchemyEntryRepository(stack.enter_context(SessionLocal()))

            service = ComplianceReportService(narrator=narrator, entry_repository=repository)
            if args.from_entry:
                response = service.generate_report_from_entry(raw)
            else:
                response = service.generate_report(raw)
        except (InputValidationError, EntryNotFoundError) as exc:
            print(json.dumps({"success": False, "message": str(exc)}, indent=2), file=sys.stderr)
            return 2
        except (ComplianceReportError, NarratorError) as exc:
            print(json.dumps({"success": False, "message": str(exc)}, indent=2), file=sys.stderr)
            return 1

    print(json.dumps(response.to_payload(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

#!/usr/bin/env python3
"""
Classify a saved wizard protocol from the command line.

Reads the wizard's formData JSON from a file (or stdin) and prints the
review determination as JSON.

Usage:
    python -m irbscreen.scripts.screen_protocol protocol.json
    cat protocol.json | python -m irbscreen.scripts.screen_protocol --checks
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from irbscreen.checks import IssueSeverity, check_consistency, issue_count
from irbscreen.schemas import ProtocolSnapshot
from irbscreen.screening import classify_review

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

EXIT_INVALID_INPUT = 2


def load_form_data(path: Optional[Path]) -> Any:
    if path is None:
        return json.load(sys.stdin)
    with path.open(encoding="utf-8") as fh:
        return json.load(fh)


def screen(form_data: Any, with_checks: bool = False) -> dict[str, Any]:
    """
    Classify one protocol.

    Args:
        form_data: Parsed wizard formData
        with_checks: Also run the consistency checks

    Returns:
        The serialised determination, plus a consistency block if requested

    Raises:
        ValidationError: If the data does not have the formData shape
    """
    snapshot = ProtocolSnapshot.from_form_data(form_data)
    output = classify_review(snapshot).to_dict()

    if with_checks:
        issues = check_consistency(snapshot)
        output["consistency"] = {
            "issues": [issue.to_dict() for issue in issues],
            "errorCount": issue_count(issues, IssueSeverity.ERROR),
            "warningCount": issue_count(issues, IssueSeverity.WARNING),
        }
    return output


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Pre-screen a protocol for IRB review level (45 CFR 46)",
    )
    parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        help="Wizard formData JSON file (reads stdin if omitted)",
    )
    parser.add_argument(
        "--checks",
        action="store_true",
        help="Include cross-field consistency issues",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        form_data = load_form_data(args.path)
        output = screen(form_data, with_checks=args.checks)
    except (OSError, json.JSONDecodeError) as e:
        print(f"ERROR: Could not read protocol JSON: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except ValidationError as e:
        print(f"ERROR: Invalid protocol data:\n{e}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    print(json.dumps(output, indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
convert.py

Command-line entry point.

Goal:
- Load a conversation record JSON file. Either:
    - one record as returned by /backend-api/conversation/<id>, or
    - a list of records (e.g. an export's conversations.json)
- Extract shadow queries + citations per record
- Write the report(s) as JSON and print a short summary

A single record that cannot be read (no mapping) stops the run.
In a list, such records are logged and left out.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Tuple

from .config import ExtractorConfig
from .conversation import conversation_id_from_url, extract_report
from .debug import format_debug_text
from .errors import MESSAGES, ErrorKind, ExtractionFailed
from .model import Report

logger = logging.getLogger(__name__)


def read_records(input_path: Path) -> Tuple[List[Any], bool]:
    """
    Loads the input file.

    Returns (records, single) where single is True when the file held one
    conversation object rather than a list.
    """
    raw_data = json.loads(input_path.read_text(encoding="utf-8"))

    if isinstance(raw_data, dict):
        return [raw_data], True

    if not isinstance(raw_data, list):
        raise SystemExit("Expected the top-level JSON to be a conversation object or a list of them.")

    return raw_data, False


def convert_records(
    records: List[Any],
    single: bool,
    conversation_id: Optional[str] = None,
    config: Optional[ExtractorConfig] = None,
) -> List[Report]:
    """
    Extracts one Report per conversation record.

    conversation_id only applies to single-record input; list records use
    their own conversation_id / id.
    """
    cfg = config or ExtractorConfig()

    if single:
        return [extract_report(records[0], conversation_id, cfg)]

    reports: List[Report] = []
    for i, raw_convo in enumerate(records, start=1):
        try:
            reports.append(extract_report(raw_convo, None, cfg))
        except ExtractionFailed as exc:
            logger.error("Skipping record %d: %s", i, exc.cause)
    return reports


def convert_file(
    input_path: Path,
    conversation_id: Optional[str] = None,
    config: Optional[ExtractorConfig] = None,
) -> List[Report]:
    records, single = read_records(input_path)
    return convert_records(records, single, conversation_id, config)


def _print_summary(input_path: Path, out_path: Path, reports: List[Report]) -> None:
    print()
    print("=" * 72)
    print("Shadow query extraction complete")
    print("=" * 72)
    print(f"Input:  {input_path}")
    print(f"Output: {out_path}")
    print(f"Conversations: {len(reports)}")
    print()

    for report in reports:
        print("-" * 72)
        print(f"Conversation: {report.conversation_id or '(no id)'}")
        print(f"    Prompts with searches: {len(report.results)}")
        print(f"    Shadow queries: {report.total_shadow_queries}")
        print(f"    Citations: {report.total_citations}")

        for group in report.results:
            print(f"    > {group.user_prompt}  [{group.model}]")
            for q in group.shadow_queries:
                tag = "hidden " if q.hidden else "visible"
                print(f"        ({tag}) {q.text}")

        if not report.results:
            print(f"    {MESSAGES[ErrorKind.NO_SEARCH_QUERIES]}")
            if report.debug is not None:
                for line in format_debug_text(report.debug).splitlines():
                    print(f"    {line}")
        print()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        description=(
            "Extract shadow (hidden) search queries and citations from a ChatGPT "
            "conversation record."
        )
    )

    parser.add_argument("input", help="Path to a conversation JSON file (object or list)")

    parser.add_argument(
        "--out",
        default="shadow_queries.json",
        help="Output JSON file path (defaults to shadow_queries.json)",
    )

    parser.add_argument(
        "--conversation-id",
        default=None,
        help="Conversation id to report (single-record input only)",
    )

    parser.add_argument(
        "--url",
        default=None,
        help="ChatGPT page URL to take the conversation id from (/c/<id> or /g/<id>)",
    )

    parser.add_argument("-v", "--verbose", action="store_true", help="Log per-node details")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    input_path = Path(args.input)
    out_path = Path(args.out)

    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")

    conversation_id = args.conversation_id
    if conversation_id is None and args.url:
        conversation_id = conversation_id_from_url(args.url)
        if conversation_id is None:
            raise SystemExit(MESSAGES[ErrorKind.NO_CONVERSATION])

    records, single = read_records(input_path)

    try:
        reports = convert_records(records, single, conversation_id)
    except ExtractionFailed as exc:
        raise SystemExit(f"{MESSAGES[ErrorKind.EXTRACTION_FAILED]}: {exc.cause}")

    payload: Any
    if single:
        payload = reports[0].to_dict()
    else:
        payload = [r.to_dict() for r in reports]

    out_path.write_text(
        json.dumps(payload, indent=2, ensure_ascii=False),
        encoding="utf-8",
    )

    _print_summary(input_path, out_path, reports)


if __name__ == "__main__":
    main()

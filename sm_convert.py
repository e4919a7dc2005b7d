# -*- coding: utf-8 -*-
########################
# sm_convert.py
########################
# Purpose:
# - Read step charts out of StepMania .sm / .ssc text, run each one through a
#   Generator for the target Style, and render the generated charts back as text.
# - Remove previously generated charts.
#
# Design notes:
# - Parsing must be tolerant of comments and whitespace but never silently
#   accept invalid rows.
# - Only charts whose step type matches the source Style are converted.
#   Difficulty filtering uses the chart meter.
# - Holds and rolls are converted to their heads; tails, mines, fakes and lifts
#   are not steps.
# - Generated charts carry a description prefix so they can be found again.
# - The seed for each chart comes from params.seed when set, otherwise from a
#   digest of the source notes and both style names.
#
########################
# Interfaces:
# Public exceptions:
# - class SimfileError(Exception)
# - class SimfileParseError(SimfileError)
# - class SimfileValidationError(SimfileError)
#
# Public dataclasses:
# - StepChart(step_type, description, difficulty, meter, notes_text, span, extra_tags)
# - ConversionResult(text: str, generated: list[str], skipped: list[str])
#
# Public functions:
# - row_columns(row_text: str) -> list[int]
# - parse_charts(simfile_text: str, *, is_ssc: bool) -> list[StepChart]
# - seed_for_chart(notes_text: str, from_style: Style, to_style: Style) -> int
# - convert_notes(notes_text, *, from_style, to_style, params) -> str
# - generate(simfile_text, *, from_style, to_style, params, is_ssc, edits=False,
#            extra_description=None, description_prefix=DEFAULT_DESCRIPTION_PREFIX) -> ConversionResult
# - remove_existing_autogen(simfile_text, *, is_ssc, description_prefix=...) -> str
#
########################

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from generator import Generator
from generator_params import GeneratorParameters
from style import Style


DEFAULT_DESCRIPTION_PREFIX = "STEPSHIFT"

_STEP_SYMBOLS = {"1", "2", "4", "L"}
_NON_STEP_SYMBOLS = {"0", "3", "M", "F", "K"}
_MAX_COLUMNS_PER_ROW = 2
_SSC_SECTION_MARKER = "#NOTEDATA:"
_SSC_REWRITTEN_TAGS = {"STEPSTYPE", "DESCRIPTION", "DIFFICULTY", "METER", "RADARVALUES", "NOTES"}


class SimfileError(Exception):
    """Base error for simfile parsing and conversion."""


class SimfileParseError(SimfileError):
    """Raised when the text cannot be parsed into the expected chart structure."""


class SimfileValidationError(SimfileError):
    """Raised when the text parses but cannot be converted as requested."""


@dataclass(frozen=True)
class StepChart:
    step_type: str
    description: str
    difficulty: str
    meter: Optional[int]
    notes_text: str
    span: Tuple[int, int]
    extra_tags: Tuple[Tuple[str, str], ...] = ()


@dataclass
class ConversionResult:
    text: str
    generated: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


def _strip_comment(line_text: str) -> str:
    if "//" in line_text:
        line_text = line_text.split("//", 1)[0]
    return line_text.strip()


def _header_field(field_text: str) -> str:
    lines = (_strip_comment(line_text) for line_text in field_text.splitlines())
    return " ".join(line_text for line_text in lines if line_text)


def _parse_optional_int(raw_text: str) -> Optional[int]:
    text = str(raw_text or "").strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def row_columns(row_text: str) -> List[int]:
    """Columns stepped on in one row, at most two, left to right."""
    columns: List[int] = []
    for index, symbol in enumerate(row_text):
        if symbol in _STEP_SYMBOLS:
            columns.append(index)
        elif symbol not in _NON_STEP_SYMBOLS:
            raise SimfileParseError(f"Unsupported note symbol {symbol!r} in row {row_text!r}")
    return columns[:_MAX_COLUMNS_PER_ROW]


########################
# Parsing
########################


def _find_sm_note_spans(simfile_text: str) -> List[Tuple[int, int]]:
    spans: List[Tuple[int, int]] = []
    search_from = 0
    while True:
        notes_index = simfile_text.find("#NOTES:", search_from)
        if notes_index < 0:
            return spans
        semicolon_index = simfile_text.find(";", notes_index)
        if semicolon_index < 0:
            raise SimfileParseError("Couldn't find semicolon after #NOTES")
        spans.append((notes_index, semicolon_index + 1))
        search_from = semicolon_index + 1


def _parse_sm_chart(simfile_text: str, span: Tuple[int, int]) -> StepChart:
    start, end = span
    body = simfile_text[start + len("#NOTES:"):end - 1]
    parts = body.split(":", 5)
    if len(parts) != 6:
        raise SimfileParseError("Invalid #NOTES block structure: expected 6 colon-separated fields")

    step_type = _header_field(parts[0])
    if not step_type:
        raise SimfileParseError("Missing step type in #NOTES block")

    return StepChart(
        step_type=step_type,
        description=_header_field(parts[1]),
        difficulty=_header_field(parts[2]),
        meter=_parse_optional_int(_header_field(parts[3])),
        notes_text=parts[5],
        span=span,
    )


def _find_ssc_section_spans(simfile_text: str) -> List[Tuple[int, int]]:
    starts = [match.start() for match in re.finditer(re.escape(_SSC_SECTION_MARKER), simfile_text)]
    spans: List[Tuple[int, int]] = []
    for index, start in enumerate(starts):
        end = starts[index + 1] if index + 1 < len(starts) else len(simfile_text)
        spans.append((start, end))
    return spans


def _parse_ssc_tags(section_text: str) -> List[Tuple[str, str]]:
    tags: List[Tuple[str, str]] = []
    position = 0
    while True:
        tag_start = section_text.find("#", position)
        if tag_start < 0:
            return tags
        colon_index = section_text.find(":", tag_start)
        if colon_index < 0:
            raise SimfileParseError(f"Missing ':' after tag in .ssc section near {section_text[tag_start:tag_start + 20]!r}")
        semicolon_index = section_text.find(";", colon_index)
        if semicolon_index < 0:
            raise SimfileParseError(f"Missing ';' after tag {section_text[tag_start:colon_index]!r}")
        tag_name = section_text[tag_start + 1:colon_index].strip().upper()
        tag_value = section_text[colon_index + 1:semicolon_index]
        tags.append((tag_name, tag_value))
        position = semicolon_index + 1


def _parse_ssc_chart(simfile_text: str, span: Tuple[int, int]) -> StepChart:
    start, end = span
    section_text = simfile_text[start:end]
    tags = _parse_ssc_tags(section_text)
    tag_values: Dict[str, str] = {}
    for tag_name, tag_value in tags:
        tag_values.setdefault(tag_name, tag_value)

    if "NOTES" not in tag_values:
        raise SimfileParseError("Missing #NOTES in .ssc chart section")
    step_type = tag_values.get("STEPSTYPE", "").strip()
    if not step_type:
        raise SimfileParseError("Missing #STEPSTYPE in .ssc chart section")

    extra_tags = tuple(
        (tag_name, tag_value)
        for tag_name, tag_value in tags
        if tag_name != "NOTEDATA" and tag_name not in _SSC_REWRITTEN_TAGS
    )

    return StepChart(
        step_type=step_type,
        description=tag_values.get("DESCRIPTION", "").strip(),
        difficulty=tag_values.get("DIFFICULTY", "").strip(),
        meter=_parse_optional_int(tag_values.get("METER", "")),
        notes_text=tag_values["NOTES"],
        span=span,
        extra_tags=extra_tags,
    )


def parse_charts(simfile_text: str, *, is_ssc: bool) -> List[StepChart]:
    if is_ssc:
        return [_parse_ssc_chart(simfile_text, span) for span in _find_ssc_section_spans(simfile_text)]
    return [_parse_sm_chart(simfile_text, span) for span in _find_sm_note_spans(simfile_text)]


########################
# Conversion
########################


def seed_for_chart(notes_text: str, from_style: Style, to_style: Style) -> int:
    payload = f"{from_style.value}|{to_style.value}|{notes_text}".encode("utf-8")
    digest = hashlib.sha256(payload).digest()
    return int.from_bytes(digest[:8], byteorder="big", signed=False)


def _render_row(to_style: Style, out_columns: List[int]) -> str:
    lit_panels = set()
    for col in out_columns:
        lit_panels.update(to_style.panels(col))
    return "".join("1" if panel in lit_panels else "0" for panel in range(to_style.num_panels))


def convert_notes(
    notes_text: str,
    *,
    from_style: Style,
    to_style: Style,
    params: GeneratorParameters,
) -> str:
    """Convert one chart's note rows. Returns rows and measure separators, one per line."""
    if params.seed is None:
        params = params.with_seed(seed_for_chart(notes_text, from_style, to_style))
    generator = Generator(to_style, params)

    output_lines: List[str] = []
    for raw_line in notes_text.splitlines():
        line_text = _strip_comment(raw_line)
        if not line_text:
            continue

        ends_measure = line_text.endswith(",")
        row_text = line_text[:-1].strip() if ends_measure else line_text
        if row_text:
            if len(row_text) != from_style.num_panels:
                raise SimfileValidationError(
                    f"Invalid row width for {from_style.sm_string}. "
                    f"Expected {from_style.num_panels}, got {len(row_text)}: {row_text!r}"
                )
            columns = row_columns(row_text)
            if params.remove_jumps:
                columns = columns[:1]
            is_jump = len(columns) > 1
            out_columns = [generator.advance(col, is_jump) for col in columns]
            output_lines.append(_render_row(to_style, out_columns))
        if ends_measure:
            output_lines.append(",")

    return "\n".join(output_lines) + "\n"


def _generated_description(chart: StepChart, *, description_prefix: str, extra_description: Optional[str]) -> str:
    description = f"{description_prefix} - {chart.description}".rstrip()
    if extra_description:
        description = f"{description} {extra_description}"
    return description


def _render_sm_chart(
    chart: StepChart,
    *,
    to_style: Style,
    notes: str,
    description: str,
    difficulty: str,
) -> str:
    meter_text = "" if chart.meter is None else str(chart.meter)
    lines = [
        "#NOTES:",
        f"     {to_style.sm_string}:",
        f"     {description}:",
        f"     {difficulty}:",
        f"     {meter_text}:",
        "     :",
        notes.rstrip("\n"),
        ";",
    ]
    return "\n".join(lines) + "\n"


def _render_ssc_chart(
    chart: StepChart,
    *,
    to_style: Style,
    notes: str,
    description: str,
    difficulty: str,
) -> str:
    lines = ["#NOTEDATA:;"]
    for tag_name, tag_value in chart.extra_tags:
        lines.append(f"#{tag_name}:{tag_value};")
    lines.append(f"#STEPSTYPE:{to_style.sm_string};")
    lines.append(f"#DESCRIPTION:{description};")
    lines.append(f"#DIFFICULTY:{difficulty};")
    lines.append(f"#METER:{'' if chart.meter is None else chart.meter};")
    lines.append("#NOTES:")
    lines.append(notes.rstrip("\n"))
    lines.append(";")
    return "\n".join(lines) + "\n"


def _is_autogen(chart: StepChart, description_prefix: str) -> bool:
    return chart.description.startswith(f"{description_prefix} - ") or chart.description == description_prefix


def _within_difficulty(chart: StepChart, params: GeneratorParameters) -> bool:
    if chart.meter is None:
        return True
    if params.min_difficulty is not None and chart.meter < params.min_difficulty:
        return False
    if params.max_difficulty is not None and chart.meter > params.max_difficulty:
        return False
    return True


def generate(
    simfile_text: str,
    *,
    from_style: Style,
    to_style: Style,
    params: GeneratorParameters,
    is_ssc: bool,
    edits: bool = False,
    extra_description: Optional[str] = None,
    description_prefix: str = DEFAULT_DESCRIPTION_PREFIX,
) -> ConversionResult:
    """Generate to_style charts for every from_style chart in the simfile.

    Returns only the new chart text; the caller appends it to the file.
    """
    charts = parse_charts(simfile_text, is_ssc=is_ssc)

    source_type = from_style.sm_string
    target_type = to_style.sm_string
    for chart in charts:
        if chart.step_type.lower() != target_type:
            continue
        if target_type != source_type or _is_autogen(chart, description_prefix):
            raise SimfileValidationError(f"Already contains {target_type} charts")

    result = ConversionResult(text="")
    rendered: List[str] = []
    for chart in charts:
        label = f"{chart.step_type} {chart.difficulty} {'' if chart.meter is None else chart.meter}".strip()
        if chart.step_type.lower() != source_type:
            result.skipped.append(f"{label}: not a {source_type} chart")
            continue
        if not _within_difficulty(chart, params):
            result.skipped.append(f"{label}: outside difficulty range")
            continue

        notes = convert_notes(chart.notes_text, from_style=from_style, to_style=to_style, params=params)
        description = _generated_description(
            chart,
            description_prefix=description_prefix,
            extra_description=extra_description,
        )
        difficulty = "Edit" if edits else chart.difficulty
        render = _render_ssc_chart if is_ssc else _render_sm_chart
        rendered.append(
            render(chart, to_style=to_style, notes=notes, description=description, difficulty=difficulty)
        )
        result.generated.append(label)

    result.text = "".join(rendered)
    return result


def remove_existing_autogen(
    simfile_text: str,
    *,
    is_ssc: bool,
    description_prefix: str = DEFAULT_DESCRIPTION_PREFIX,
) -> str:
    charts = parse_charts(simfile_text, is_ssc=is_ssc)
    kept_parts: List[str] = []
    position = 0
    for chart in charts:
        if not _is_autogen(chart, description_prefix):
            continue
        start, end = chart.span
        kept_parts.append(simfile_text[position:start])
        position = end
    kept_parts.append(simfile_text[position:])
    return "".join(kept_parts)

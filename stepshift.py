"""
stepshift.py

Command line entrypoint: generate charts for other pad layouts and append them to simfiles.

Integration
- Loads config (file values are defaults for omitted options)
- Finds .sm / .ssc files with simfile_index
- Builds GeneratorParameters with presets, converts with sm_convert
- Writes each file once, after all target styles are generated

A chart that cannot be converted is reported as skipped; the rest of the file
and the other files still run.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from config import AppConfig, get_config
from generator import GeneratorError
from presets import create_params
from simfile_index import SimfileCandidate, list_simfiles
from sm_convert import SimfileError, generate, remove_existing_autogen
from style import Style


@dataclass(frozen=True)
class _RunOptions:
    from_style: Style
    to_styles: List[Style]
    seed: Optional[int]
    crossovers: int
    more_easy_crossovers: bool
    vroom: bool
    preserve_input_repetitions: bool
    allow_footswitch: bool
    min_difficulty: Optional[int]
    max_difficulty: Optional[int]
    edits: bool
    extra_description: Optional[str]
    remove_existing: bool
    dry_run: bool
    description_prefix: str


def _style_argument(value: str) -> Style:
    try:
        return Style.from_name(value)
    except ValueError as exception:
        raise argparse.ArgumentTypeError(str(exception)) from exception


def _style_list_argument(value: str) -> List[Style]:
    names = [name.strip() for name in value.split(",") if name.strip()]
    if not names:
        raise argparse.ArgumentTypeError("expected a comma separated list of styles")
    return [_style_argument(name) for name in names]


def _pick(flag_value: Optional[bool], config_value: bool) -> bool:
    return bool(config_value if flag_value is None else flag_value)


def _build_argument_parser() -> argparse.ArgumentParser:
    argument_parser = argparse.ArgumentParser(
        prog="stepshift",
        description="Generate charts for other dance pad layouts from existing simfile charts.",
    )
    argument_parser.add_argument("inputs", nargs="+", type=Path, help="Simfiles or directories to search.")
    argument_parser.add_argument("--seed", type=int, default=None, help="Fixed RNG seed for every chart.")
    argument_parser.add_argument("-i", "--from", dest="from_style", type=_style_argument, default=None,
                                 help="Style of the charts to read.")
    argument_parser.add_argument("-o", "--to", dest="to_styles", type=_style_list_argument, action="extend",
                                 default=None,
                                 help="Comma separated styles to generate. May be repeated.")
    argument_parser.add_argument("-r", "--remove-existing", action=argparse.BooleanOptionalAction, default=None,
                                 help="Remove previously generated charts first.")
    argument_parser.add_argument("-p", "--preserve-input-repetitions", action=argparse.BooleanOptionalAction,
                                 default=None,
                                 help="Repeat an output column whenever the input repeats a column.")
    argument_parser.add_argument("-c", "--crossovers", action="count", default=None,
                                 help="Allow crossovers. Repeat for harder ones.")
    argument_parser.add_argument("--no-crossovers", dest="crossovers", action="store_const", const=0,
                                 help="Disable crossovers even if the config enables them.")
    argument_parser.add_argument("--more-easy-crossovers", action=argparse.BooleanOptionalAction, default=None,
                                 help="Favor short crossovers.")
    argument_parser.add_argument("--vroom", action=argparse.BooleanOptionalAction, default=None,
                                 help="Travel across wide pads more.")
    argument_parser.add_argument("-f", "--allow-footswitch", action=argparse.BooleanOptionalAction, default=None,
                                 help="Allow a foot to step where the other foot is.")
    argument_parser.add_argument("--min", dest="min_difficulty", type=int, default=None,
                                 help="Only convert charts with at least this meter.")
    argument_parser.add_argument("--max", dest="max_difficulty", type=int, default=None,
                                 help="Only convert charts with at most this meter.")
    argument_parser.add_argument("-e", "--edits", action=argparse.BooleanOptionalAction, default=None,
                                 help="Mark generated charts as Edit.")
    argument_parser.add_argument("-x", "--extra-description", default=None,
                                 help="Text appended to generated chart descriptions.")
    argument_parser.add_argument("-d", "--dry-run", action="store_true", help="Convert but do not write files.")
    return argument_parser


def _resolve_options(parsed_args: argparse.Namespace, app_config: AppConfig) -> _RunOptions:
    conversion = app_config.conversion
    output = app_config.output

    from_style = parsed_args.from_style or Style.from_name(conversion.from_style)
    to_styles = parsed_args.to_styles or [Style.from_name(name) for name in conversion.to_styles]
    crossovers = parsed_args.crossovers if parsed_args.crossovers is not None else conversion.crossovers

    return _RunOptions(
        from_style=from_style,
        to_styles=list(to_styles),
        seed=parsed_args.seed,
        crossovers=int(crossovers),
        more_easy_crossovers=_pick(parsed_args.more_easy_crossovers, conversion.more_easy_crossovers),
        vroom=_pick(parsed_args.vroom, conversion.vroom),
        preserve_input_repetitions=_pick(
            parsed_args.preserve_input_repetitions, conversion.preserve_input_repetitions
        ),
        allow_footswitch=_pick(parsed_args.allow_footswitch, conversion.allow_footswitch),
        min_difficulty=parsed_args.min_difficulty,
        max_difficulty=parsed_args.max_difficulty,
        edits=_pick(parsed_args.edits, output.edits),
        extra_description=parsed_args.extra_description,
        remove_existing=_pick(parsed_args.remove_existing, output.remove_existing_autogen),
        dry_run=bool(parsed_args.dry_run),
        description_prefix=output.description_prefix,
    )


def _convert_file(candidate: SimfileCandidate, options: _RunOptions) -> bool:
    """Convert one simfile. Returns False when the file was left untouched because of an error."""
    simfile_path = candidate.simfile_path
    print(f"generating for {simfile_path}")

    try:
        original_text = simfile_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exception:
        print(f"  skipped: cannot read file ({exception})")
        return False

    source_text = original_text
    if options.remove_existing:
        try:
            source_text = remove_existing_autogen(
                source_text,
                is_ssc=candidate.is_ssc,
                description_prefix=options.description_prefix,
            )
        except SimfileError as exception:
            print(f"  skipped: {exception}")
            return False

    generated_parts: List[str] = []
    for to_style in options.to_styles:
        print(f"  {options.from_style.value} -> {to_style.value}")
        params = create_params(
            to_style=to_style,
            crossovers=options.crossovers,
            more_easy_crossovers=options.more_easy_crossovers,
            vroom=options.vroom,
            preserve_input_repetitions=options.preserve_input_repetitions,
            disallow_footswitch=not options.allow_footswitch,
            seed=options.seed,
            min_difficulty=options.min_difficulty,
            max_difficulty=options.max_difficulty,
        )
        try:
            result = generate(
                source_text,
                from_style=options.from_style,
                to_style=to_style,
                params=params,
                is_ssc=candidate.is_ssc,
                edits=options.edits,
                extra_description=options.extra_description,
                description_prefix=options.description_prefix,
            )
        except (SimfileError, GeneratorError) as exception:
            print(f"  skipped: {exception}")
            continue

        for label in result.generated:
            print(f"    generated {label}")
        for reason in result.skipped:
            print(f"    skipped {reason}")
        if result.text:
            generated_parts.append(result.text)

    if not generated_parts and source_text == original_text:
        print("  done (nothing to write)")
        return True

    output_text = source_text
    if generated_parts:
        if output_text and not output_text.endswith("\n"):
            output_text += "\n"
        output_text += "\n" + "\n".join(generated_parts)

    if options.dry_run:
        print("  done (dry run)")
        return True

    try:
        simfile_path.write_text(output_text, encoding="utf-8")
    except OSError as exception:
        print(f"  skipped: cannot write file ({exception})")
        return False

    print("  done")
    return True


def main(argv: Optional[Sequence[str]] = None) -> int:
    argument_parser = _build_argument_parser()
    parsed_args = argument_parser.parse_args(argv)

    if parsed_args.seed is not None and parsed_args.seed < 0:
        argument_parser.error("--seed must be >= 0")
    if (
        parsed_args.min_difficulty is not None
        and parsed_args.max_difficulty is not None
        and parsed_args.min_difficulty > parsed_args.max_difficulty
    ):
        argument_parser.error("--min must not exceed --max")

    try:
        app_config, _config_path = get_config()
    except (OSError, ValueError) as exception:
        print(f"config error: {exception}")
        return 2

    options = _resolve_options(parsed_args, app_config)

    candidates = list_simfiles(parsed_args.inputs)
    if not candidates:
        print("no .sm or .ssc files found")
        return 1

    failures = 0
    for candidate in candidates:
        if not _convert_file(candidate, options):
            failures += 1

    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())

# -*- coding: utf-8 -*-
########################
# simfile_index.py
########################
# Purpose:
# - Locate .sm / .ssc simfiles under the paths given on the command line.
#
# Design notes:
# - Keep the order deterministic: inputs in the order given, files under a
#   directory sorted by path.
# - A file given directly is accepted only with a simfile suffix.
# - File system paths only. Reading the files is the caller's job.
#
########################
# Interfaces:
# Public dataclasses:
# - SimfileCandidate(simfile_path: pathlib.Path, is_ssc: bool)
#
# Public functions:
# - is_simfile(path: pathlib.Path) -> bool
# - list_simfiles(input_paths: Iterable[pathlib.Path]) -> list[SimfileCandidate]
#
########################

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Set

SIMFILE_SUFFIXES = (".sm", ".ssc")


@dataclass(frozen=True)
class SimfileCandidate:
    simfile_path: Path
    is_ssc: bool


def is_simfile(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in SIMFILE_SUFFIXES


def _list_directory(directory_path: Path) -> List[Path]:
    if not directory_path.is_dir():
        return []
    return sorted(path for path in directory_path.rglob("*") if is_simfile(path))


def list_simfiles(input_paths: Iterable[Path]) -> List[SimfileCandidate]:
    """Expand files and directories into simfile candidates, skipping duplicates."""
    seen: Set[Path] = set()
    candidates: List[SimfileCandidate] = []
    for input_path in input_paths:
        input_path = Path(input_path)
        if input_path.is_dir():
            found = _list_directory(input_path)
        elif is_simfile(input_path):
            found = [input_path]
        else:
            found = []

        for simfile_path in found:
            key = simfile_path.resolve()
            if key in seen:
                continue
            seen.add(key)
            candidates.append(SimfileCandidate(simfile_path=simfile_path, is_ssc=simfile_path.suffix.lower() == ".ssc"))
    return candidates

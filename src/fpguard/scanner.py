"""File discovery for fpguard using glob patterns."""
from __future__ import annotations

import logging
from fnmatch import fnmatch
from pathlib import Path

from fpguard.constants import JS_SUFFIXES
from fpguard.types import FpGuardConfig

logger: logging.Logger = logging.getLogger(__name__)


def _matches_pattern(*, path: Path, patterns: tuple[str, ...], base: Path) -> bool:
    """Check if path matches any of the glob patterns."""
    try:
        rel_path: Path = path.relative_to(base)
    except ValueError:
        rel_path = path

    rel_str: str = rel_path.as_posix()

    return any(_glob_match(path=rel_str, pattern=pattern) for pattern in patterns)


def _glob_match(*, path: str, pattern: str) -> bool:
    """Match a path against a glob pattern with ** support."""
    if "**" in pattern:
        return _match_doublestar(path=path, pattern=pattern)
    return fnmatch(path, pattern)


def _match_doublestar(*, path: str, pattern: str) -> bool:
    """Match path against pattern containing **."""
    parts: list[str] = path.split("/")

    # "**/name/**": name is one of the directory components
    if pattern.startswith("**/") and pattern.endswith("/**"):
        middle: str = pattern[3:-3]
        return any(fnmatch(part, middle) for part in parts[:-1])

    # "**/name": some trailing run of components matches
    if pattern.startswith("**/"):
        suffix: str = pattern[3:]
        return any(
            fnmatch("/".join(parts[i:]), suffix) for i in range(len(parts))
        )

    # "prefix/**/tail": prefix must match, then tail at any depth
    if "/**/" in pattern:
        prefix: str
        tail: str
        prefix, tail = pattern.split("/**/", 1)
        if not path.startswith(prefix + "/"):
            return False
        remainder_parts: list[str] = path[len(prefix) + 1:].split("/")
        return any(
            fnmatch("/".join(remainder_parts[i:]), tail)
            for i in range(len(remainder_parts))
        )

    # "prefix/**": anything under prefix
    if pattern.endswith("/**"):
        prefix = pattern[:-3]
        return path.startswith(prefix + "/") or path == prefix

    return fnmatch(path, pattern)


def _collect_js_files(*, path: Path) -> list[Path]:
    """Collect all JavaScript files under a path."""
    if path.is_file():
        return [path] if path.suffix in JS_SUFFIXES else []
    if not path.is_dir():
        return []

    files: list[Path] = []
    pending: list[Path] = [path]
    while pending:
        directory: Path = pending.pop()
        for child in directory.iterdir():
            if child.is_dir():
                pending.append(child)
            elif child.suffix in JS_SUFFIXES:
                files.append(child)
    return files


def _base_for(*, file_path: Path, inputs: tuple[Path, ...]) -> Path:
    """Pick the input root a discovered file is matched relative to."""
    for resolved_input in inputs:
        if resolved_input.is_file():
            if file_path == resolved_input:
                return resolved_input.parent
        elif file_path.is_relative_to(resolved_input):
            return resolved_input
    return file_path.parent


def scan_files(*, paths: tuple[Path, ...], config: FpGuardConfig) -> list[Path]:
    """
    Find JavaScript files matching include/exclude patterns.

    Args:
        paths: Root paths to scan (files or directories).
        config: fpguard configuration with include/exclude patterns.

    Returns:
        Sorted list of files to lint.
    """
    inputs: tuple[Path, ...] = tuple(p.resolve() for p in paths)
    all_files: list[Path] = [
        file for resolved in inputs for file in _collect_js_files(path=resolved)
    ]

    filtered: set[Path] = set()
    for file_path in all_files:
        base: Path = _base_for(file_path=file_path, inputs=inputs)

        # Exclusions take priority
        if _matches_pattern(path=file_path, patterns=config.exclude, base=base):
            logger.debug("Excluded %s", file_path)
            continue

        if _matches_pattern(path=file_path, patterns=config.include, base=base):
            filtered.add(file_path)

    return sorted(filtered)

"""JavaScript parsing with syntax error detection for fpguard."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser, Tree

JS_LANGUAGE: Final[Language] = Language(tree_sitter_javascript.language())


@dataclass(frozen=True, slots=True)
class SyntaxErrorInfo:
    """Syntax error details. Line/column are 1-based."""

    line: int
    column: int
    message: str
    source_line: str | None


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Result of parsing a JavaScript file."""

    file: Path
    tree: Tree | None
    source: str
    source_lines: tuple[str, ...]
    syntax_error: SyntaxErrorInfo | None


def split_lines(source: str) -> tuple[str, ...]:
    """Split source into lines the way the parser counts rows."""
    if not source:
        return ()
    lines: list[str] = source.split("\n")
    if source.endswith("\n"):
        lines.pop()
    return tuple(line.rstrip("\r") for line in lines)


def char_column(*, source_lines: tuple[str, ...], row: int, byte_column: int) -> int:
    """Convert a 0-based byte column on a 0-based row to a 1-based character column."""
    if not 0 <= row < len(source_lines):
        return byte_column + 1
    prefix: bytes = source_lines[row].encode("utf-8")[:byte_column]
    return len(prefix.decode("utf-8", errors="ignore")) + 1


def find_syntax_error(node: Node) -> Node | None:
    """Return the first ERROR or MISSING node in document order."""
    if not node.has_error:
        return None
    stack: list[Node] = [node]
    while stack:
        current: Node = stack.pop()
        if current.is_error or current.is_missing:
            return current
        stack.extend(child for child in reversed(current.children) if child.has_error)
    return None


def _describe_error(node: Node) -> str:
    if node.is_missing:
        return f"Missing '{node.type}'"
    snippet: str = (node.text or b"").decode("utf-8", errors="replace").strip()
    first_line: str = snippet.splitlines()[0] if snippet else ""
    if not first_line:
        return "Unexpected syntax"
    if len(first_line) > 30:
        first_line = first_line[:27] + "..."
    return f"Unexpected syntax near '{first_line}'"


def syntax_error_info(
    *,
    tree: Tree,
    source_lines: tuple[str, ...],
) -> SyntaxErrorInfo | None:
    """Describe the first syntax error in a tree, or None if the tree is clean."""
    error_node: Node | None = find_syntax_error(tree.root_node)
    if error_node is None:
        return None

    row, byte_col = error_node.start_point
    source_line: str | None = None
    if 0 <= row < len(source_lines):
        source_line = source_lines[row]
    return SyntaxErrorInfo(
        line=row + 1,
        column=char_column(source_lines=source_lines, row=row, byte_column=byte_col),
        message=_describe_error(error_node),
        source_line=source_line,
    )


def parse_source(*, source: str, file: Path) -> ParseResult:
    """Parse JavaScript source text, returning the tree or a syntax error."""
    source_lines: tuple[str, ...] = split_lines(source)
    parser: Parser = Parser(JS_LANGUAGE)
    tree: Tree = parser.parse(source.encode("utf-8"))

    error: SyntaxErrorInfo | None = syntax_error_info(
        tree=tree, source_lines=source_lines,
    )
    return ParseResult(
        file=file,
        tree=tree if error is None else None,
        source=source,
        source_lines=source_lines,
        syntax_error=error,
    )


def parse_file(*, file: Path) -> ParseResult:
    """Parse a JavaScript file, returning the tree or a syntax error."""
    try:
        source: str = file.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        return ParseResult(
            file=file,
            tree=None,
            source="",
            source_lines=(),
            syntax_error=SyntaxErrorInfo(
                line=1,
                column=1,
                message=f"Encoding error: {e}",
                source_line=None,
            ),
        )
    except OSError as e:
        return ParseResult(
            file=file,
            tree=None,
            source="",
            source_lines=(),
            syntax_error=SyntaxErrorInfo(
                line=1,
                column=1,
                message=f"Cannot read file: {e}",
                source_line=None,
            ),
        )

    return parse_source(source=source, file=file)

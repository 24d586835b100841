"""Porcelain status parser.

Turns ``git status --porcelain`` lines into FileChange records. Each line
carries a two-character status pair (index, worktree), a space, and a path.
A single line yields zero, one or two records: a staged record for the index
column, an unstaged record for the worktree column, or a single untracked
record for ``??``.
"""

from __future__ import annotations

from typing import Callable, Generator, Iterable, List, Optional, Tuple, Union

from uncommitted.git.models import ChangeStatus, FileChange, ParsedStatus

IgnorePredicate = Callable[[str], bool]

_MIN_LINE_LENGTH = 4  # "XY p"
_UNTRACKED = "?"
_BLANK = " "
_RENAME_SEP = " -> "
_RENAME_CODES = ("R", "C")
_OCTAL_DIGITS = "01234567"

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
}


def _never_ignored(_path: str) -> bool:
    return False


def unquote_path(path: str) -> str:
    """Undo git's C-style quoting of paths with special characters."""
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path

    body = path[1:-1]
    out = bytearray()
    idx = 0
    while idx < len(body):
        ch = body[idx]
        if ch == "\\" and idx + 1 < len(body):
            octal = body[idx + 1:idx + 4]
            if len(octal) == 3 and all(c in _OCTAL_DIGITS for c in octal):
                out.append(int(octal, 8) & 0xFF)
                idx += 4
                continue
            escaped = _SIMPLE_ESCAPES.get(body[idx + 1])
            if escaped is not None:
                out.extend(escaped.encode("utf-8"))
                idx += 2
                continue
        out.extend(ch.encode("utf-8", "surrogateescape"))
        idx += 1
    return out.decode("utf-8", errors="surrogateescape")


def _closing_quote(raw: str) -> Optional[int]:
    idx = 1
    while idx < len(raw):
        if raw[idx] == "\\":
            idx += 2
            continue
        if raw[idx] == '"':
            return idx
        idx += 1
    return None


def split_path(raw: str, *, renamed: bool = False) -> Tuple[str, Optional[str]]:
    """Return (path, original path) for a porcelain path field.

    Rename and copy entries read ``old -> new``; everything else has no
    original path.
    """
    if not renamed:
        return unquote_path(raw), None

    if raw.startswith('"'):
        # A quoted old path may itself contain " -> "
        end = _closing_quote(raw)
        if end is not None and raw[end + 1:].startswith(_RENAME_SEP):
            old = raw[:end + 1]
            new = raw[end + 1 + len(_RENAME_SEP):]
            return unquote_path(new), unquote_path(old)
        return unquote_path(raw), None

    if _RENAME_SEP in raw:
        old, new = raw.split(_RENAME_SEP, 1)
        return unquote_path(new), old
    return raw, None


class StatusParser:
    """Parse porcelain status output and yield FileChange objects.

    Usage::

        parser = StatusParser(status_text, is_ignored=queries.is_ignored)
        for change in parser.parse():
            ...
    """

    def __init__(
        self,
        status: Union[str, Iterable[str]],
        is_ignored: Optional[IgnorePredicate] = None,
    ) -> None:
        if isinstance(status, str):
            self._lines: List[str] = [line for line in status.split("\n") if line]
        else:
            self._lines = list(status)
        self._is_ignored = is_ignored or _never_ignored

    def parse(self) -> Generator[FileChange, None, None]:
        for raw_line in self._lines:
            line = raw_line.rstrip("\r\n")
            if len(line) < _MIN_LINE_LENGTH:
                continue

            index_status = line[0]
            worktree_status = line[1]
            renamed = index_status in _RENAME_CODES or worktree_status in _RENAME_CODES
            path, orig_path = split_path(line[3:], renamed=renamed)
            if not path:
                continue

            if self._is_ignored(path):
                continue

            if index_status not in (_BLANK, _UNTRACKED):
                yield FileChange(
                    filename=path,
                    status=ChangeStatus.from_code(index_status),
                    staged=True,
                    orig_filename=orig_path,
                )

            if worktree_status not in (_BLANK, _UNTRACKED):
                yield FileChange(
                    filename=path,
                    status=ChangeStatus.from_code(worktree_status),
                    staged=False,
                    orig_filename=orig_path,
                )

            if index_status == _UNTRACKED and worktree_status == _UNTRACKED:
                yield FileChange(
                    filename=path,
                    status=ChangeStatus.UNTRACKED,
                    staged=False,
                )


def parse_status(
    status: Union[str, Iterable[str]],
    is_ignored: Optional[IgnorePredicate] = None,
) -> ParsedStatus:
    """Parse a full porcelain listing and count the three buckets."""
    changes = tuple(StatusParser(status, is_ignored).parse())
    counts = {"staged": 0, "unstaged": 0, "untracked": 0}
    for change in changes:
        counts[change.bucket] += 1
    return ParsedStatus(
        changes=changes,
        staged_count=counts["staged"],
        unstaged_count=counts["unstaged"],
        untracked_count=counts["untracked"],
    )

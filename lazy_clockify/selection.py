"""Pick one workspace or project out of a numbered list.

Validation here is pure; the prompt loop that repeats on a bad answer lives
in ``workflow.choose``.
"""
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from .errors import EmptyResultError, ResolutionError, RetryableSelectionError

RULE = "=" * 60


@dataclass(frozen=True)
class Selection:
    index: int
    item: Any


def ensure_candidates(candidates: Sequence[Any], kind: str) -> None:
    if not candidates:
        raise EmptyResultError(f"no {kind} available")


def validate_choice(raw: str, candidates: Sequence[Any]) -> Selection:
    """Parse one interactive answer; raise RetryableSelectionError when unusable."""
    count = len(candidates)
    text = (raw or "").strip()
    if not (text.isascii() and text.isdigit()):
        raise RetryableSelectionError(f"Invalid choice. Please enter a number between 1 and {count}.",
                                      field="selection")
    choice = int(text)
    if choice < 1 or choice > count:
        raise RetryableSelectionError(f"Invalid choice. Please enter a number between 1 and {count}.",
                                      field="selection")
    return Selection(choice, candidates[choice - 1])


def select_presupplied(candidates: Sequence[Any], index: int, kind: str, field: str = "project") -> Selection:
    """Take a 1-based index given up front (flag or config) without prompting."""
    ensure_candidates(candidates, kind)
    if index < 1 or index > len(candidates):
        raise ResolutionError(
            f"invalid {field} index {index}: must be between 1 and {len(candidates)}", field=field)
    return Selection(index, candidates[index - 1])


def select_by_id(candidates: Sequence[Any], item_id: str) -> Optional[Selection]:
    for i, c in enumerate(candidates, start=1):
        if c.id == item_id:
            return Selection(i, c)
    return None


def render_table(candidates: Sequence[Any], title: str) -> List[str]:
    lines = [f"\nAvailable {title}:", RULE]
    lines.extend(f"{i}. {c.name} (ID: {c.id})" for i, c in enumerate(candidates, start=1))
    lines.append(RULE)
    return lines

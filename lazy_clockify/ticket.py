"""Derive the entry description from the current git branch.

A branch such as ``feature/EL-1234-login`` with prefix ``EL`` yields
``EL-1234``. When nothing matches, the user is asked for a ticket, unless
prompts are skipped, in which case ``NO_TICKET`` is used.
"""
import re
import subprocess
from typing import Callable, Optional

from .errors import ResolutionError

NO_TICKET = "No ticket"


def git_branch() -> str:
    """Return the current branch name; raise OSError/CalledProcessError outside a repo."""
    out = subprocess.run(
        ["git", "branch", "--show-current"],
        check=True, capture_output=True, text=True,
    )
    return out.stdout.strip()


def extract_ticket(branch_name: str, prefix: str) -> str:
    """Return the first '<prefix>-<digits>' in branch_name, or '' if none."""
    if not branch_name:
        return ""
    m = re.search(rf"{re.escape(prefix)}-\d+", branch_name)
    return m.group(0) if m else ""


def read_branch(branch_reader: Callable[[], str]) -> Optional[str]:
    try:
        return branch_reader() or None
    except (OSError, subprocess.SubprocessError):
        return None


def resolve_ticket(prefix: str, skip_prompt: bool,
                   branch_reader: Callable[[], str] = git_branch,
                   prompt: Callable[[str], str] = input,
                   out: Callable[..., None] = print) -> str:
    branch = read_branch(branch_reader)
    if branch:
        ticket = extract_ticket(branch, prefix)
        if ticket:
            out(f"Found ticket number from branch: {ticket}")
            return ticket
        out(f"No ticket number found in branch: {branch}")
    else:
        out("Not in a git repository or no branch detected")

    if skip_prompt:
        out(f"Skipping prompt, using description: {NO_TICKET}")
        return NO_TICKET

    try:
        answer = prompt(f"Please enter ticket number (e.g. {prefix}-1234): ")
    except EOFError as e:
        raise ResolutionError("failed to read ticket number: end of input", field="ticket") from e
    answer = answer.strip()
    if not answer:
        raise ResolutionError("ticket number cannot be empty", field="ticket")
    return answer

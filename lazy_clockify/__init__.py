"""
lazy_clockify package

Log a single Clockify time entry from the terminal, using the git branch
for the description and prompting only for what cannot be inferred.
"""

__version__ = "0.1.0"


def main() -> None:
    """Package entrypoint. Delegates to core.main()."""
    from .core import main as _main
    _main()

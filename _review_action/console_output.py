"""
Styled console output and the per-stage warning counter.

Titles, successes, warnings and errors are printed as ANSI-colored lines in
the run log. Warnings are non-fatal: each call to show_warning() bumps the
WarningCounter that the stage passes around, and check_warnings() turns the
final count into a single annotation on the run summary.

These lines go straight to the run log through actions_toolkit.info(), so
they are never filtered by the configured log level.
"""

from dataclasses import dataclass

from . import actions_toolkit

# ANSI SGR codes
_RESET = "\u001b[0m"
_BOLD = "\u001b[1m"
_BLACK = "\u001b[30m"
_COLORS = {
    "red": "\u001b[31m",
    "green": "\u001b[32m",
    "yellow": "\u001b[33m",
    "cyan": "\u001b[36m",
}
_BACKGROUNDS = {
    "red": "\u001b[41m",
    "green": "\u001b[42m",
    "yellow": "\u001b[43m",
}


@dataclass
class WarningCounter:
    """Number of warnings shown during one stage."""

    count: int = 0

    def increment(self) -> int:
        self.count += 1
        return self.count


def _styled(color: str, label: str, text: str) -> str:
    return (
        f"{_BACKGROUNDS[color]}{_BLACK}{_BOLD}{label}:{_RESET} "
        f"{_COLORS[color]}{text}{_RESET}"
    )


def show_title(text: str) -> None:
    actions_toolkit.info(f"\n{_COLORS['cyan']}{_BOLD}{text}{_RESET}")


def show_error(text: str) -> None:
    actions_toolkit.info(_styled("red", "Error", text))


def show_success(text: str) -> None:
    actions_toolkit.info(_styled("green", "Success", text))


def show_warning(counter: WarningCounter, text: str) -> None:
    counter.increment()
    actions_toolkit.info(_styled("yellow", "Warning", text))


def check_warnings(counter: WarningCounter, phase: str) -> None:
    """Emit one summary annotation if the stage produced any warnings."""
    if counter.count > 1:
        actions_toolkit.warning(
            f"There were {counter.count} warnings in the {phase} phase. "
            "View the run log for details."
        )
    elif counter.count == 1:
        actions_toolkit.warning(
            f"There was 1 warning in the {phase} phase. View the run log for details."
        )

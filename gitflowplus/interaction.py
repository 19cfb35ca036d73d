"""User-interaction collaborator consumed by the workflow engine."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol

from rich.console import Console
from rich.prompt import Confirm, Prompt

from gitflowplus.exceptions import RecoveryAction

# Returns an error message for invalid input, or None when the value is acceptable
Validator = Callable[[str], str | None]


class Interaction(Protocol):
    """What the engine needs from a front end."""

    def prompt_input(
        self,
        placeholder: str,
        prompt: str,
        default: str | None = None,
        validate: Validator | None = None,
    ) -> str | None:
        """Ask for a value; None means the user cancelled."""
        ...

    def confirm(self, message: str, affirmative: str = "Yes") -> bool: ...

    def report_progress(self, message: str) -> None: ...

    def report_error(self, message: str, actions: Sequence[RecoveryAction]) -> RecoveryAction | None:
        """Show an error; return the recovery action the user picked, or None to dismiss."""
        ...


class RichInteraction:
    """Terminal implementation of Interaction built on rich prompts."""

    def __init__(self, console: Console | None = None, assume_yes: bool = False) -> None:
        self.console = console or Console()
        self.assume_yes = assume_yes

    def prompt_input(
        self,
        placeholder: str,
        prompt: str,
        default: str | None = None,
        validate: Validator | None = None,
    ) -> str | None:
        if self.assume_yes:
            return default or None

        label = f"{prompt} [dim]({placeholder})[/dim]" if placeholder else prompt
        while True:
            value = Prompt.ask(label, default=default or "", console=self.console, show_default=bool(default))
            value = value.strip()
            if not value:
                return None
            if validate is not None:
                problem = validate(value)
                if problem:
                    self.console.print(f"[red]{problem}[/red]")
                    continue
            return value

    def confirm(self, message: str, affirmative: str = "Yes") -> bool:
        if self.assume_yes:
            return True
        return Confirm.ask(f"[yellow]{message}[/yellow] ({affirmative}?)", console=self.console, default=False)

    def report_progress(self, message: str) -> None:
        self.console.print(f"[dim]{message}[/dim]")

    def report_error(self, message: str, actions: Sequence[RecoveryAction]) -> RecoveryAction | None:
        self.console.print(f"[red]Error:[/red] {message}")
        if not actions or self.assume_yes:
            return None

        for index, action in enumerate(actions, start=1):
            self.console.print(f"  [cyan]{index}[/cyan]) {action.label}")
        self.console.print("  [cyan]0[/cyan]) Dismiss")
        choices = [str(i) for i in range(len(actions) + 1)]
        picked = Prompt.ask("Choose an action", choices=choices, default="0", console=self.console)
        if picked == "0":
            return None
        return actions[int(picked) - 1]

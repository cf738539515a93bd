"""
Helmsman faults and rendering.

Scope
- CommandException: base type carrying a message, an optional exit code and
  free-form options (hint, token, command, ...). Knows how to render itself
  as a one-line, rich-styled "error: <message>" report.
- Declaration faults: NameCollisionError (programmer error, raised while the
  CLI is being declared).
- Command-line faults: BadCommandLineError and its kinds (unknown global
  option, unknown command argument, missing/needless option value), plus
  UnknownCommandError.
- Execution faults: CustomExit (deliberate abort with an exit code).
- Configuration faults: MalformedConfigError, ConfigExistsError.

Exit codes
- a fault whose exit_code is Unset maps to the generic code (GENERIC_EXIT_CODE)
  in the lifecycle runner; CustomExit always carries its own.

Styling
- the host application can provide a __styles__ mapping in __main__ to override
  the palette below (keys: "error-label", "error-message", "hint").
"""
from collections import defaultdict
from types import MappingProxyType

from rich.text import Text

from .utils import Unset

GENERIC_EXIT_CODE = -2


class CommandException(Exception):
    def __init__(self, message="", /, exit_code=Unset, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code
        self.options = MappingProxyType(options)

    @property
    def hint(self):
        """
        contextual hint appended to the message; may be empty.
        """
        return self.options.get("hint", "")

    def __str__(self):
        return self.message

    def __rich__(self):
        styles = defaultdict(str, {
            "error-label": "bold #FF4DA6",  # friendly pinky label
            "error-message": "#C8C8D0",  # soft light gray message
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(__import__("__main__"), "__styles__", {}))

        line = Text.assemble(("error", styles["error-label"]), ": ", (self.message, styles["error-message"]))
        if self.hint:
            line.append(". ").append(self.hint, styles["hint"])
        return line


class NameCollisionError(CommandException, ValueError): ...


class BadCommandLineError(CommandException): ...
class UnknownGlobalOptionError(BadCommandLineError): ...
class UnknownCommandArgumentError(BadCommandLineError): ...
class MissingOptionValueError(BadCommandLineError): ...
class NeedlessOptionValueError(BadCommandLineError): ...


class UnknownCommandError(CommandException): ...


class CustomExit(CommandException):
    def __init__(self, message="", /, exit_code=1, **options):
        if not isinstance(exit_code, int):
            raise TypeError("custom exit 'exit_code' must be an integer")
        super().__init__(message, exit_code, **options)


class MalformedConfigError(CommandException): ...
class ConfigExistsError(CommandException): ...


def exit_now(message, exit_code=1, /):
    """
    abort the current command with a message and a specific exit code.

    the lifecycle runner reports the message like any other fault and returns
    exit_code; the post hook does not run.
    """
    raise CustomExit(message, exit_code)


__all__ = (
    "GENERIC_EXIT_CODE",
    "CommandException",
    "NameCollisionError",
    "BadCommandLineError",
    "UnknownGlobalOptionError",
    "UnknownCommandArgumentError",
    "MissingOptionValueError",
    "NeedlessOptionValueError",
    "UnknownCommandError",
    "CustomExit",
    "MalformedConfigError",
    "ConfigExistsError",
    "exit_now",
)

"""
Helmsman application: the explicitly owned CLI definition and its lifecycle runner.

An Application holds everything one command-line program declares:
- global switches and flags (its TokenRegistry),
- commands (its CommandRegistry),
- pre / post / on_error hooks,
- program metadata (name, descr, version) and an optional config file,
- the output devices (rich consoles over stdout/stderr or any file object).

Several applications can live side by side in a process; tests simply build a
fresh one.

Lifecycle of run(argv)
    ConfigLoad → DefaultOverlay → Parse → AliasPropagate → PreHook → Execute → PostHook → Done
                                   (any step) ──────────────────────────────→ ErrorHandled → Done

- PreHook: skipped when the command skips_pre; a falsy return ends the run
  silently with exit code 0.
- Execute: action(global_options, options, arguments); an Exit outcome with a
  non-zero code is reported as a CustomExit and skips the post hook.
- PostHook: only after a successful execute, unless the command skips_post.
- ErrorHandled: the first exception is caught once; on_error may return False
  to suppress the "error: ..." report; the exit code is the exception's
  exit_code when it carries one, GENERIC_EXIT_CODE otherwise. With
  HELMSMAN_DEBUG=true in the environment the exception is re-raised afterwards.

Quick start
    from helmsman import Application

    app = Application("todo", descr="A tiny task list", version="1.0.0")
    app.flag("f", "file", descr="Task file", metavar="FILE", default="todo.txt")
    app.switch("v", "verbose", descr="Be chatty")

    @app.command("add", descr="Add a task", metavar="TASK")
    def add(global_options, options, arguments):
        ...

    add.flag("p", "priority", descr="Priority of the task")

    if __name__ == "__main__":
        app.main()
"""
import logging
import os
import os.path
import sys

from rich.console import Console

from .commands import Command, CommandRegistry, Exit
from .config import apply_config_defaults, initconfig, load_config, resolve_config_path
from .faults import *
from .help import DESCRIPTION, help_command
from .options import propagate_aliases
from .parsing import HELP, parse
from .tokens import TokenRegistry, TokenScope
from .utils import *

logger = logging.getLogger(__name__)

DEBUG = "HELMSMAN_DEBUG"
INITCONFIG = "initconfig"


class Application(TokenScope, metaclass=IntrospectableType):
    """
    Context object owning one CLI definition; see the module documentation.
    """

    __introspectable__ = (
        "name",
        "descr",
        "version",
        "config_path",
    )

    def __init__(self, name=Unset, /, *, descr=Unset, version=Unset, stdout=Unset, stderr=Unset):
        if not isinstance(name, str | Unset):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        self._name = coalesce(name, os.path.basename(sys.argv[0]))
        self._descr = coalesce(descr)
        self._version = coalesce(version)
        self._config_path = None

        self._pre = None
        self._post = None
        self._error = None

        self.tokens = TokenRegistry("in global options")
        self._commands = CommandRegistry()

        # file=None lets rich follow sys.stdout/sys.stderr
        self.stdout = Console(file=coalesce(stdout), soft_wrap=True, highlight=False)
        self.stderr = Console(file=coalesce(stderr), stderr=True, soft_wrap=True, highlight=False)

    @property
    def commands(self):
        return self._commands

    def command(self, *names, descr=Unset, metavar=Unset, long_descr=Unset, skips_pre=False, skips_post=False):
        """
        return a decorator turning an action into a registered Command.

        the decorated name is bound to the Command itself so its own switches
        and flags can be declared on it right away.
        """

        @rename("command")
        def wrapper(action, /):
            return self._commands.register(Command(
                action,
                *names,
                descr=descr,
                metavar=metavar,
                long_descr=long_descr,
                skips_pre=skips_pre,
                skips_post=skips_post,
            ))

        return wrapper

    def pre(self, hook, /):
        """
        hook(global_options, command, options, arguments) -> bool, run before the command.
        """
        if not callable(hook):
            raise TypeError("pre() argument must be callable")
        self._pre = hook
        return hook

    def post(self, hook, /):
        """
        hook(global_options, command, options, arguments), run after a successful command.
        """
        if not callable(hook):
            raise TypeError("post() argument must be callable")
        self._post = hook
        return hook

    def on_error(self, hook, /):
        """
        hook(exception) -> bool; returning False suppresses the built-in report.
        """
        if not callable(hook):
            raise TypeError("on_error() argument must be callable")
        self._error = hook
        return hook

    def config_file(self, filename, /):
        """
        declare the YAML config file (relative paths live in the home directory).
        """
        self._config_path = resolve_config_path(filename)
        return self._config_path

    def find_command(self, name, /):
        return self._commands.find(name)

    def apply_config_defaults(self, config, /):
        apply_config_defaults(config, self.tokens, self._commands)

    def parse(self, argv, /):
        """
        resolve argv into Invocation(global_options, command, options, arguments).
        """
        self._prepare()
        return parse(list(argv), self.tokens, self._commands)

    def _prepare(self):
        # built-in commands are registered lazily so consumers may declare their own
        if self.find_command(HELP) is None:
            self._commands.register(Command(
                help_command(self),
                HELP,
                descr=DESCRIPTION,
                metavar="[command]",
                long_descr="Gets help for the application or its commands.",
                skips_pre=True,
                skips_post=True,
            ))
        if self._config_path is not None and self.find_command(INITCONFIG) is None:
            command = self._commands.register(Command(
                initconfig(self._config_path, self.tokens),
                INITCONFIG,
                descr="Initialize the config file using current global options",
                long_descr=f"Initializes a configuration file where you can set default options "
                           f"for command line flags, both globally and on a per-command basis. "
                           f"These defaults override the built-in defaults and allow you to omit "
                           f"commonly-used command line flags when invoking this program. "
                           f"The file is written to {self._config_path}.",
                skips_pre=True,
            ))
            command.switch("force", descr="force overwrite of existing config file")

    def _proceed(self, global_options, command, options, arguments):
        if command.skips_pre or self._pre is None:
            return True
        return bool(self._pre(global_options, command, options, arguments))

    def _hint(self, exception):
        match exception:
            case UnknownCommandError():
                return "Use '%s help' for a list of commands" % self.name
            case UnknownCommandArgumentError():
                return "Use '%s help %s' for a list of command options" % (self.name, exception.options["command"].name)
            case UnknownGlobalOptionError():
                return "Use '%s help' for a list of global options" % self.name
        return ""

    def _report(self, exception):
        """
        run the error hook, print the report unless suppressed, and return the exit code.
        """
        if self._error is None or self._error(exception):
            if isinstance(exception, CommandException):
                fault = CommandException(exception.message, hint=self._hint(exception) or exception.hint)
            else:
                fault = CommandException(str(exception) or type(exception).__name__)
            self.stderr.print(fault)

        exit_code = getattr(exception, "exit_code", Unset)
        if isinstance(exit_code, int):
            return exit_code
        return GENERIC_EXIT_CODE

    def run(self, argv=None, /):
        """
        run the full lifecycle over argv (default: sys.argv[1:]) and return an exit code.
        """
        argv = sys.argv[1:] if argv is None else list(argv)
        try:
            self._prepare()
            logger.debug("loading configuration from %r", self._config_path)
            self.apply_config_defaults(load_config(self._config_path))

            global_options, command, options, arguments = parse(argv, self.tokens, self._commands)
            propagate_aliases(global_options, self.tokens)
            propagate_aliases(options, command.tokens)

            if not self._proceed(global_options, command, options, arguments):
                logger.debug("pre hook declined command %r", command.name)
                return 0

            outcome = command.execute(global_options, options, arguments)
            if isinstance(outcome, Exit) and outcome.exit_code != 0:
                logger.debug("command %r exited with %d", command.name, outcome.exit_code)
                return self._report(CustomExit(outcome.message, outcome.exit_code))

            if not command.skips_post and self._post is not None:
                self._post(global_options, command, options, arguments)
        except Exception as exception:
            logger.debug("run failed with %r", exception)
            exit_code = self._report(exception)
            if os.environ.get(DEBUG) == "true":
                raise
            return exit_code
        return 0

    def main(self, argv=None, /):
        """
        run and terminate the process with the resulting exit code.
        """
        sys.exit(self.run(argv))


__all__ = (
    "Application",
)

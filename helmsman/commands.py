"""
Helmsman command layer: declare, look up and execute commands.

What this module provides
- Command: a named, aliasable unit wrapping an action callable. It owns its
  own TokenRegistry (command-scoped switches and flags), descriptions, an
  argument placeholder for help, and two lifecycle toggles:
  • skips_pre: the application's pre hook is not consulted for this command.
  • skips_post: the application's post hook never runs after this command.
- Exit: the structured outcome an action may return to end the run with a
  specific exit code (and optional message) without raising.
- CommandRegistry: canonical-name → Command mapping with alias lookup and
  collision checks.

Actions
- called as action(global_options, options, arguments).
- may return None (success), or an Exit outcome.

Quick start
    app = Application("todo")

    @app.command("list", "ls", descr="List tasks")
    def list_tasks(global_options, options, arguments):
        ...

    list_tasks.switch("a", "all", descr="Include finished tasks")
"""
import logging
from typing import NamedTuple

from .faults import NameCollisionError
from .tokens import TokenRegistry, TokenScope
from .utils import *

logger = logging.getLogger(__name__)


class Exit(NamedTuple):
    """
    Outcome returned by an action (or hook) to end the run with exit_code.

    exit_code 0 is a success; any other code is reported like a CustomExit
    fault carrying message.
    """
    exit_code: int = 0
    message: str = ""


class Command(TokenScope, metaclass=IntrospectableType):
    """
    Named, aliasable command with its own switches and flags.
    """

    __introspectable__ = (
        "name",
        "aliases",
        "descr",
        "long_descr",
        "metavar",
        "skips_pre",
        "skips_post",
        "action",
    )

    __displayable__ = (
        "name",
        "aliases",
        "descr",
        "skips_pre",
        "skips_post",
    )

    def __init__(
            self,
            action,
            /,
            *names,
            descr=Unset,
            metavar=Unset,
            long_descr=Unset,
            skips_pre=False,
            skips_post=False,
    ):
        if not callable(action):
            raise TypeError(f"{type(self).__typename__} 'action' must be callable")
        if not names:
            raise TypeError(f"{type(self).__typename__} must specify at least one name")

        canonical, *aliases = (normalize(name, kind="command") for name in names)
        if len(set(aliases) | {canonical}) != len(names):
            raise NameCollisionError(f"{type(self).__typename__} names cannot contain duplicates")

        for field, value in (("descr", descr), ("metavar", metavar), ("long_descr", long_descr)):
            if not isinstance(value, str | Unset):
                raise TypeError(f"{type(self).__typename__} {field!r} must be a string")

        self._action = action
        self._name = canonical
        self._aliases = tuple(aliases)
        self._descr = coalesce(descr)
        self._metavar = coalesce(metavar)
        self._long_descr = coalesce(long_descr)
        self._skips_pre = bool(skips_pre)
        self._skips_post = bool(skips_post)
        self.tokens = TokenRegistry(f"for command {canonical}")

    @property
    def names(self):
        return (self.name, *self.aliases)

    def execute(self, global_options, options, arguments):
        """
        run the action with the resolved structures and return its outcome.
        """
        logger.debug("executing command %r with arguments %r", self.name, arguments)
        return self._action(global_options, options, arguments)

    def __call__(self, global_options, options, arguments):
        return self.execute(global_options, options, arguments)


class CommandRegistry:
    """
    Registry of every command declared on an application.
    """

    def __init__(self):
        self._commands = {}

    def register(self, command, /):
        """
        add command after checking its names against every registered name and alias.
        """
        for name in command.names:
            if (other := self.find(name)) is not None:
                if name == other.name:
                    message = "%s has already been specified as a command" % name
                else:
                    message = "%s has already been specified as an alias of command %s" % (name, other.name)
                raise NameCollisionError(message, name=name, command=other)
        self._commands[command.name] = command
        return command

    def find(self, name, /):
        """
        exact canonical match first, then a scan of every command's aliases.
        """
        try:
            return self._commands[name]
        except KeyError:
            pass
        for command in self._commands.values():
            if name in command.aliases:
                return command
        return None

    def __contains__(self, name):
        return self.find(name) is not None

    def __iter__(self):
        return iter(self._commands.values())

    def __len__(self):
        return len(self._commands)

    def __repr__(self):
        return f"command-registry({list(self._commands)!r})"


__all__ = (
    "Command",
    "CommandRegistry",
    "Exit",
)

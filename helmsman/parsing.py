r"""
Helmsman parsing engine: split argv into (global options, command, options, arguments).

phases
- global scan ("order" semantics)
  • consume recognized global switches/flags from the start of argv, in any order.
  • the first token that is not an option is the command name; scanning stops and
    every later token (option-shaped or not) is left for the command scan.
  • an unknown option-shaped token raises UnknownGlobalOptionError; command
    resolution is never reached in that case.
  • omitted global tokens receive their effective default, when one exists.
- command resolution
  • no command name → the reserved "help" name.
  • the name is looked up (canonical first, then aliases); unknown names raise
    UnknownCommandError.
- command scan ("permute" semantics)
  • recognize the command's own switches/flags anywhere among the remaining tokens;
    every other token is a positional argument, kept in original relative order.
  • an unknown option-shaped token raises UnknownCommandArgumentError carrying
    the resolved command.
  • omitted command tokens receive their effective default.

token shapes
- '--name' / '-x'          : switch presence, or flag followed by its value token.
- '--name=value'           : inline flag value ('=' on a switch is an error).
- '-xVALUE'                : attached value for a 1-character flag.
- '-abc'                   : cluster of 1-character switches; a flag inside the
                             cluster takes the rest of it (or the next token).
- '--'                     : ends option recognition.
- '-'                      : a plain positional token.

a flag always consumes the next token as its value, whatever it looks like.
"""
import logging
from collections import deque
from typing import NamedTuple

from .faults import (
    MissingOptionValueError,
    NeedlessOptionValueError,
    UnknownCommandArgumentError,
    UnknownCommandError,
    UnknownGlobalOptionError,
)
from .options import Options
from .tokens import Switch

logger = logging.getLogger(__name__)

HELP = "help"
TERMINATOR = "--"


class Invocation(NamedTuple):
    global_options: Options
    command: object
    options: Options
    arguments: list


def _optionlike(token):
    return token.startswith("-") and token != "-"


def _value(switch, tokens):
    try:
        return tokens.popleft()
    except IndexError:
        raise MissingOptionValueError(f"missing argument: {switch}", token=switch) from None


def _consume(token, tokens, registry, options, unknown):
    """
    resolve one option-shaped token, pulling its value from tokens when needed.

    unknown(switch, token) builds the fault raised for unrecognized spellings;
    token is the whole command-line word, switch the part that was not recognized.
    """
    if token.startswith("--"):
        switch, assigned, value = token.partition("=")
        if (target := registry.lookup(switch)) is None:
            raise unknown(switch, token)
        if isinstance(target, Switch):
            if assigned:
                raise NeedlessOptionValueError(f"needless argument: {token}", token=token)
            options[target.name] = True
        else:
            options[target.name] = value if assigned else _value(switch, tokens)
        return

    index = 1
    while index < len(token):
        switch = "-" + token[index]
        if (target := registry.lookup(switch)) is None:
            raise unknown(switch, token)
        if isinstance(target, Switch):
            options[target.name] = True
            index += 1
            continue
        # a short flag owns the rest of the cluster as its value
        options[target.name] = token[index + 1:] or _value(switch, tokens)
        return


def _fill_defaults(options, registry):
    for token in registry:
        if token.name not in options and (default := token.default_value) is not None:
            options[token.name] = default
    return options


def parse_global_options(argv, registry):
    """
    global scan: return (options, command name or None, remaining tokens).
    """
    tokens = deque(argv)
    options = Options()
    name = None

    def unknown(switch, token):
        return UnknownGlobalOptionError(f"Unknown option {switch}", token=token, switch=switch)

    while tokens:
        token = tokens.popleft()
        if token == TERMINATOR:
            name = tokens.popleft() if tokens else None
            break
        if not _optionlike(token):
            name = token
            break
        _consume(token, tokens, registry, options, unknown)

    return options, name, list(tokens)


def parse_command_options(command, argv):
    """
    command scan: return (options, positional arguments).
    """
    tokens = deque(argv)
    options = Options()
    arguments = []

    def unknown(switch, token):
        return UnknownCommandArgumentError(f"Unknown option {switch}", token=token, switch=switch, command=command)

    while tokens:
        token = tokens.popleft()
        if token == TERMINATOR:
            arguments.extend(tokens)
            break
        if not _optionlike(token):
            arguments.append(token)
            continue
        _consume(token, tokens, command.tokens, options, unknown)

    return options, arguments


def parse(argv, registry, commands):
    """
    run both scans and the command resolution in between.

    parameters
    - argv: sequence of raw command-line tokens (program name excluded).
    - registry: TokenRegistry of the global switches and flags.
    - commands: CommandRegistry used to resolve the command name.

    returns
    - Invocation(global_options, command, options, arguments)
    """
    global_options, name, rest = parse_global_options(argv, registry)
    _fill_defaults(global_options, registry)

    name = HELP if name is None else name
    if (command := commands.find(name)) is None:
        raise UnknownCommandError(f"Unknown command '{name}'", name=name)

    options, arguments = parse_command_options(command, rest)
    _fill_defaults(options, command.tokens)

    logger.debug("parsed %r into command %r, %r, %r, %r", argv, command.name, global_options, options, arguments)
    return Invocation(global_options, command, options, arguments)


__all__ = (
    "HELP",
    "Invocation",
    "parse_global_options",
    "parse_command_options",
    "parse",
)

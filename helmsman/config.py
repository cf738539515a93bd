"""
Persisted configuration: loading, default overlay, and the initconfig command.

file layout (YAML)
    file: b.txt                # global option defaults, by canonical name
    verbose: true
    commands:
      push:                    # command option defaults, by command name
        force: true

precedence established by the overlay
- explicit command-line value > configuration file > declared default > absent.
"""
import logging
import os.path
from collections.abc import Mapping

import yaml

from .faults import ConfigExistsError, MalformedConfigError

logger = logging.getLogger(__name__)

COMMANDS = "commands"


def resolve_config_path(filename, /):
    """
    absolute paths are kept; relative ones are taken from the user's home directory.
    """
    if not isinstance(filename, str | os.PathLike):
        raise TypeError("config file name must be a string or a path")
    filename = os.fspath(filename)
    if os.path.isabs(filename):
        return filename
    return os.path.join(os.path.expanduser("~"), filename)


def load_config(path, /):
    """
    read the configuration mapping stored at path.

    - no path declared or no file on disk → {} (not an error).
    - an empty document → {}.
    - a document that is not a mapping raises MalformedConfigError.
    """
    if path is None or not os.path.exists(path):
        logger.debug("no configuration file at %r", path)
        return {}
    with open(path, encoding="utf-8") as stream:
        try:
            config = yaml.safe_load(stream)
        except yaml.YAMLError as exception:
            raise MalformedConfigError(f"cannot read config file {path}: {exception}", path=path) from exception
    if config is None:
        return {}
    if not isinstance(config, Mapping):
        raise MalformedConfigError(f"config file {path} must hold a mapping", path=path)
    logger.debug("configuration loaded from %r", path)
    return config


def _override(tokens, config):
    for token in tokens:
        if token.name in config:
            token.override(config[token.name])
        else:
            token.reset()


def apply_config_defaults(config, tokens, commands):
    """
    overlay config onto the effective defaults of every global and command token.

    parameters
    - config: mapping as returned by load_config().
    - tokens: TokenRegistry of the global switches and flags.
    - commands: iterable of Command (each owning its own TokenRegistry).

    re-applying the same mapping yields the same effective defaults; declared
    defaults are never lost. tokens missing from config fall back to their
    declared default, so a later mapping replaces an earlier one entirely.
    """
    config = config or {}
    _override(tokens, config)

    sections = config.get(COMMANDS) or {}
    if not isinstance(sections, Mapping):
        raise MalformedConfigError(f"config entry {COMMANDS!r} must be a mapping")
    for command in commands:
        section = sections.get(command.name) or {}
        if not isinstance(section, Mapping):
            raise MalformedConfigError(f"config entry {COMMANDS!r}.{command.name!r} must be a mapping")
        _override(command.tokens, section)


def initconfig(path, tokens):
    """
    build the action of the initconfig command.

    the action writes the resolved global options (canonical names, present
    values only) and an empty commands section to path; an existing file is
    only replaced when the command's force switch is on.
    """

    def action(global_options, options, arguments):
        if os.path.exists(path) and not options.get("force"):
            raise ConfigExistsError(f"Not overwriting existing config file {path}, use --force to override", path=path)

        config = {token.name: global_options[token.name] for token in tokens if token.name in global_options}
        config[COMMANDS] = {}

        with open(path, "w", encoding="utf-8") as stream:
            yaml.safe_dump(config, stream, default_flow_style=False, sort_keys=False)
        logger.debug("configuration written to %r", path)

    return action


__all__ = (
    "COMMANDS",
    "resolve_config_path",
    "load_config",
    "apply_config_defaults",
    "initconfig",
)

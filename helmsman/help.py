"""
Built-in help command.

The core never formats text itself; this module consumes the registries of an
application and renders them with rich:
- `help`            → program header, usage, global options, commands.
- `help <command>`  → command usage, descriptions, command options.

Palette keys
- program-name, version, usage-label, usage-section, description-section
- section-label, option-name, metavar, default, command-name, argument-description

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
"""
from collections import defaultdict

from rich.table import Table
from rich.text import Text

from .faults import UnknownCommandError
from .tokens import Flag

DESCRIPTION = "Shows a list of commands or help for one command"


def _styles():
    return defaultdict(str, {
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "version": "#9CA3AF",
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "usage-section": "bold #36C5F0",
        "description-section": "italic #A3A3A3",
        "section-label": "bold #FFFFFF",
        "option-name": "bold #00E6FF",
        "metavar": "bold #FFD600",  # AMBER for parameters
        "default": "#737373",
        "command-name": "bold #36C5F0",
        "argument-description": "#9CA3AF",
    } | getattr(__import__("__main__"), "__styles__", {}))


def _names(token, styles):
    # shorts first, then longs; the flag metavar trails the last name
    switches = sorted(token.switches, key=len)
    text = Text(", ").join(Text(switch, styles["option-name"]) for switch in switches)
    if isinstance(token, Flag):
        text.append(" " if len(switches[-1]) == 2 else "=")
        text.append(token.metavar, styles["metavar"])
    return text


def _tokens(label, registry, styles):
    table = Table.grid(padding=(0, 2))
    table.add_column(no_wrap=True)
    table.add_column()
    for token in registry:
        descr = Text(token.descr or "", styles["argument-description"])
        if isinstance(token, Flag) and token.default_value is not None:
            descr.append(f" (default: {token.default_value})", styles["default"])
        table.add_row(Text("  ") + _names(token, styles), descr)
    return Text(label + ":", styles["section-label"]), table


def _usage(app, styles, *, command=None):
    usage = Text.assemble(("usage", styles["usage-label"]), ": ")
    parts = [app.name, "[global options]"]
    if command is None:
        parts += ["command", "[command options]", "[arguments...]"]
    else:
        parts += [command.name, "[command options]"]
        if command.metavar:
            parts.append(command.metavar)
    return usage.append(" ".join(parts), styles["usage-section"])


def render_program(app):
    styles = _styles()
    renders = []

    header = Text(app.name, styles["program-name"])
    if app.descr:
        header.append(" - ").append(app.descr, styles["description-section"])
    renders.append(header)
    if app.version:
        renders.append(Text(f"version: {app.version}", styles["version"]))
    renders.append(_usage(app, styles))

    if len(app.tokens):
        renders.extend(_tokens("global options", app.tokens, styles))

    table = Table.grid(padding=(0, 2))
    table.add_column(no_wrap=True)
    table.add_column()
    for command in sorted(app.commands, key=lambda x: x.name):
        table.add_row(
            Text("  ") + Text(", ").join(Text(name, styles["command-name"]) for name in command.names),
            Text(command.descr or "", styles["argument-description"]),
        )
    renders += [Text("commands:", styles["section-label"]), table]
    return renders


def render_command(app, command):
    styles = _styles()
    renders = [_usage(app, styles, command=command)]
    if command.descr:
        renders.append(Text(command.descr, styles["description-section"]))
    if command.long_descr:
        renders.append(Text(command.long_descr, styles["argument-description"]))
    if len(command.tokens):
        renders.extend(_tokens("command options", command.tokens, styles))
    return renders


def help_command(app):
    """
    build the action of the help command bound to app.
    """

    def action(global_options, options, arguments):
        if not arguments:
            renders = render_program(app)
        elif (command := app.find_command(arguments[0])) is None:
            raise UnknownCommandError(f"Unknown command '{arguments[0]}'", name=arguments[0])
        else:
            renders = render_command(app, command)
        for render in renders:
            app.stdout.print(render)

    return action


__all__ = (
    "DESCRIPTION",
    "render_program",
    "render_command",
    "help_command",
)

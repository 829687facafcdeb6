"""
Help rendering.

Builds rich renderables for a single command (get_command_usage) and for a
table of subcommands (render_command_list). Nothing is printed here: the
dispatcher and the router print what these functions return.

Layout of a command's help
    <name>

    <description>

    Usage:
      <name> --required=<required> [--optional=<optional>] <arg> [--] [<rest> ...]

    Arguments:
      (1) arg            description
      rest ...           description

    Flags:
      --required         description                        Prompts.
      --optional         description                        false

Palette
- title, description, usage-label, usage-line, column-header, flag-name,
  arg-name, default, prompts, command-name, command-description.
- Define a mapping named __styles__ in __main__ to override any entry.
"""
import sys
from collections import defaultdict

from rich.console import Group
from rich.table import Table
from rich.text import Text

from .utils import Unset, represent, settle

# Width of the left column of every table.
LEFT_WIDTH = 40

# Past this many optional flags, the usage line shows "[flags]" instead.
MAX_INLINE_OPTIONAL = 4


def _styles():
    return defaultdict(str, {
        "title": "bold #FF4D94",
        "description": "italic #A3A3A3",
        "usage-label": "bold #00E6FF",
        "usage-line": "bold #36C5F0",
        "column-header": "bold #FFFFFF",
        "flag-name": "bold #00E6FF",
        "arg-name": "bold #FFD600",
        "default": "#22C55E",
        "prompts": "italic #9CA3AF",
        "command-name": "bold #36C5F0",
        "command-description": "#9CA3AF",
    } | getattr(sys.modules["__main__"], "__styles__", {}))


def render_optional(name, /):
    return f"[{name}]"


def render_var(name, /):
    return f"<{name}>"


def _compact_table(*headers, styles):
    """
    a borderless two/three column table with a fixed-width first column.
    """
    table = Table(box=None, show_header=False, padding=(0, 3, 0, 2), pad_edge=False)
    table.add_column(headers[0], width=LEFT_WIDTH, overflow="fold")
    for header in headers[1:]:
        table.add_column(header, overflow="fold")
    table.add_row(*(Text(header, styles["column-header"]) for header in headers))
    return table


def usage_line(name, command, /):
    """
    The synthesized one-line usage for a command, as plain text.
    """
    usage = [name]
    flags = command.flags
    omitted = False
    for flag_name, flag in flags.items():
        display = f"--{flag_name}={render_var(flag_name)}"
        if not flag.optional:
            usage.append(display)
        elif len(flags) <= MAX_INLINE_OPTIONAL:
            usage.append(render_optional(display))
        else:
            omitted = True
    if omitted:
        usage.append(render_optional("flags"))

    if command.positional:
        for arg in command.args:
            if arg.prompt is not Unset:
                usage.append(render_optional(render_var(arg.name)))
            else:
                usage.append(render_var(arg.name))
        if command.rest is not Unset:
            usage.append(render_optional("--"))
            usage.append(render_optional(f"{render_var(command.rest.name)} ..."))

    return " ".join(usage)


async def get_command_usage(name, command, /):
    """
    Render the help of one command.

    Default producers are invoked (and awaited) to show the default values;
    flags without a default show "Prompts.".
    """
    styles = _styles()
    renders = [
        Text(name, styles["title"]),
        Text(""),
        Text(command.description.strip(), styles["description"]),
        Text(""),
        Text("Usage:", styles["usage-label"]),
        Text.assemble("  ", Text(usage_line(name, command), styles["usage-line"])),
    ]

    if command.positional:
        renders.extend((Text(""), Text("Arguments:", styles["usage-label"])))
        table = _compact_table("Arg", "Description", styles=styles)
        for index, arg in enumerate(command.args):
            table.add_row(Text(f"({index + 1}) {arg.name}", styles["arg-name"]), Text(arg.description))
        if command.rest is not Unset:
            table.add_row(Text(f"{command.rest.name} ...", styles["arg-name"]), Text(command.rest.description))
        renders.append(table)

    if command.flags:
        renders.extend((Text(""), Text("Flags:", styles["usage-label"])))
        table = _compact_table("Flag", "Description", "Default", styles=styles)
        for flag_name, flag in command.flags.items():
            if flag.default is not Unset:
                default = Text(represent(await settle(flag.default())), styles["default"])
            else:
                default = Text("Prompts.", styles["prompts"])
            table.add_row(Text(f"--{flag_name}", styles["flag-name"]), Text(flag.description), default)
        renders.append(table)

    return Group(*renders)


def render_command_list(name, commands, /):
    """
    Render the overview of a set of subcommands ({name: Command}).

    Each command is listed with the first line of its description.
    """
    styles = _styles()
    usage = _compact_table("Usage", "", styles=styles)
    usage.add_row(
        Text(f"{name} {render_var('command')} {render_optional('options')} {render_optional('args')}"),
        Text(f"Run {render_var('command')}"),
    )
    usage.add_row(
        Text(f"{name} help {render_var('command')}\n{name} {render_var('command')} --help"),
        Text(f"Show help for {render_var('command')}"),
    )

    table = _compact_table("Command", "Description", styles=styles)
    for command_name, command in commands.items():
        first = command.description.strip().split("\n")[0]
        table.add_row(Text(command_name, styles["command-name"]), Text(first, styles["command-description"]))

    return Group(
        Text(name, styles["title"]),
        Text(""),
        Text("Usage:", styles["usage-label"]),
        usage,
        Text(""),
        Text("Commands:", styles["usage-label"]),
        table,
    )


__all__ = (
    "render_optional",
    "render_var",
    "usage_line",
    "get_command_usage",
    "render_command_list",
)

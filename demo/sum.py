"""
Add numbers given as positional arguments.
"""
from flagship import Arg, create_default_false_flag, command, logger, to_number, validate


def number(raw):
    return to_number(raw) if isinstance(raw, str) else raw


@command(
    flags={
        "round": create_default_false_flag("Round the total to the nearest integer."),
    },
    args=[
        Arg("first", "The first number.", validate.number(), parse=number),
    ],
    rest=Arg("numbers", "More numbers to add.", validate.number(), parse=number),
)
async def total(flags, args, rest):
    """
    Add numbers together.

    At least one number is needed; it is prompted for when missing.
    """
    result = sum(rest, args[0])
    if flags["round"]:
        result = round(result)
    logger.print(result)
    return result

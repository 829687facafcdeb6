from flagship import Flag, create_cli_command, create_default_false_flag, logger, validate


def hello(flags):
    logger.print(f"Hello, {flags['name']}. Nice to see you today{'!' if flags['exuberant'] else '.'}")


command = create_cli_command(
    description="Say hello",
    flags={
        "name": Flag("What name should we greet?", validate.string()),
        "exuberant": create_default_false_flag("Are we excited to see this person?"),
    },
    run=hello,
)

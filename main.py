import os

from flagship import *

__prog__ = "flagship-demo"

loaders = create_command_loaders_from_directory(os.path.join(os.path.dirname(os.path.abspath(__file__)), "demo"))


async def main(name, argv):
    return await run_loaders(name, loaders, argv)


run_then_exit_if_main(__name__, main)

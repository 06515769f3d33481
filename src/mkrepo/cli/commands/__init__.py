from mkrepo.cli.commands.create import create_command

__all__ = ["create_command"]

"""Main CLI entry point with command groups"""

import click

from filestats.__version__ import __version__
from filestats.cli.scan import scan_command


class DefaultCommandGroup(click.Group):
    """Custom Click Group that allows a default command"""

    def parse_args(self, ctx, args):
        # During shell completion, don't redirect to default command
        if ctx.resilient_parsing:
            return super().parse_args(ctx, args)

        # If --help or --version is requested, show group help/version
        if args and args[0] in ('--help', '-h', '--version'):
            return super().parse_args(ctx, args)

        # Check if first arg is a known command
        if args and args[0] in self.commands:
            return super().parse_args(ctx, args)

        # Otherwise, treat as scan command (default)
        return super().parse_args(ctx, ['scan'] + args)


@click.group(cls=DefaultCommandGroup)
@click.version_option(version=__version__, prog_name='FileStats')
def cli():
    """
    FileStats - file size distribution of a directory tree.

    \b
    Commands:
      filestats [path]          Scan a directory (default command)
      filestats scan [path]     Same as above

    \b
    Examples:
      filestats /var/log
      filestats ~/projects --max-workers 16
      filestats /data --json --no-export
      filestats                 # prompts for the directory path
    """


cli.add_command(scan_command, name='scan')


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()

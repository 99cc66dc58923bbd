from __future__ import annotations

import click

from vdiff import __version__
from vdiff.commands._helpers import verbose_option
from vdiff.commands.batch import batch_cmd
from vdiff.commands.compare import compare_cmd


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="vdiff")
@verbose_option
def main() -> None:
    """vdiff: screenshot comparison with hotspot clustering."""


main.add_command(compare_cmd, name="compare")
main.add_command(batch_cmd, name="batch")


if __name__ == "__main__":
    main()

import sys

from rich.pretty import pprint

from argot import *

__prog__ = "pack"


parser = Parser(
    Schema(
        Option("verbose", "-v", "--verbose", descr="Print every archived file"),
        Option("level", "-l", "--level", metavar="LEVEL", nargs=1, default="fast", choices=("fast", "best"),
               descr="Compression level"),
        Option("split", "-s", "--split", metavar="SIZE", nargs=2, conflicts=("stdout",),
               descr="Split the archive into volumes of SIZE UNIT"),
        Option("stdout", "-c", "--stdout", descr="Write the archive on standard output"),
        Positional("source", "SOURCE", descr="Directory to archive"),
        Positional("target", "TARGET", descr="Archive path"),
    ),
    name="pack",
    descr="Pack a directory into a compressed archive.",
    version=(1, 0, 0),
    shell=True,
    colorful=True,
)


if __name__ == '__main__':
    try:
        pprint(parser())
    except HelpRequested:
        sys.exit(0)
    except ParseError:
        sys.exit(2)

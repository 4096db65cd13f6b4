# Copyright (c) 2013-2025, Andrea Zoppi
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# 1. Redistributions of source code must retain the above copyright notice,
#    this list of conditions and the following disclaimer.
#
# 2. Redistributions in binary form must reproduce the above copyright
#    notice, this list of conditions and the following disclaimer in the
#    documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

"""
Module that contains the command line app.

Why does this file exist, and why not put this in __main__?

  You might be tempted to import things from __main__ later, but that will cause
  problems: the code will get executed twice:

  - When you run `python -m ihexparse` python will execute
    ``__main__.py`` as a script. That means there won't be any
    ``ihexparse.__main__`` in ``sys.modules``.
  - When you import __main__ it will get executed again (as a module) because
    there's no ``ihexparse.__main__`` in ``sys.modules``.

  Also see (1) from https://click.palletsprojects.com/en/stable/setuptools/#setuptools-integration
"""

import logging
from typing import Optional

import click

from .__init__ import __version__
from .base import ParseError
from .base import colorize_tokens
from .file import IhexFile
from .utils import parse_int

LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


class ByteIntParamType(click.ParamType):
    name = 'byte'

    def convert(self, value, param, ctx):
        try:
            b = parse_int(value)
            if not 0 <= b <= 255:
                raise ValueError()
            return b
        except ValueError:
            self.fail(f'invalid byte: {value!r}', param, ctx)


BYTE_INT = ByteIntParamType()

FILE_PATH_IN = click.Path(dir_okay=False, allow_dash=True, readable=True, exists=True)
FILE_PATH_OUT = click.Path(dir_okay=False, allow_dash=True, writable=True)


# ----------------------------------------------------------------------------

def load_input(input_path: Optional[str]) -> IhexFile:

    if input_path == '-':
        input_path = None

    try:
        return IhexFile.load(input_path)
    except ParseError as exc:
        raise click.ClickException(str(exc)) from exc


def format_address(address: Optional[int]) -> str:

    return '-' if address is None else f'0x{address:08X}'


def print_version(ctx, _, value):

    if not value or ctx.resilient_parsing:
        return

    click.echo(str(__version__))
    ctx.exit()


# ============================================================================

@click.group()
@click.option('-v', '--verbose', count=True, help="""
    Increases logging verbosity; repeat for debug messages.
""")
@click.option('-V', '--version', is_flag=True, is_eager=True, expose_value=False,
              callback=print_version, help="""
    Prints the package version and exits.
""")
def main(verbose: int) -> None:
    """
    Command line utilities to inspect Intel HEX files.

    Being built with `Click <https://click.palletsprojects.com/en/stable/>`_, all the
    commands follow POSIX-like syntax rules, as well as reserving the virtual
    file path ``-`` for command chaining via standard output/input buffering.
    """

    level = LOG_LEVELS[min(verbose, len(LOG_LEVELS) - 1)]
    logging.basicConfig(level=level, format='%(levelname)s:%(name)s:%(message)s')


# ----------------------------------------------------------------------------

# noinspection PyShadowingBuiltins
@main.command()
@click.option('-f', '--fill', type=BYTE_INT, default=0xFF, show_default=True, help="""
    Byte value used to flood holes between blocks.
""")
@click.option('-c', '--consolidated', is_flag=True, help="""
    Concatenates block data, ignoring holes and addresses.
""")
@click.argument('infile', type=FILE_PATH_IN)
@click.argument('outfile', type=FILE_PATH_OUT)
def bin(
    fill: int,
    consolidated: bool,
    infile: str,
    outfile: str,
) -> None:
    r"""Extracts the binary memory image.

    ``INFILE`` is the path of the input file.
    Set to ``-`` to read from standard input.

    ``OUTFILE`` is the path of the output binary file.
    Set to ``-`` to write to standard output.
    """

    file = load_input(infile)

    if consolidated:
        data = file.consolidated_data or b''
    else:
        data = file.to_bytes(fill=fill)

    with click.open_file(outfile, 'wb') as stream:
        stream.write(data)


# ----------------------------------------------------------------------------

@main.command()
@click.argument('infile', type=FILE_PATH_IN)
def blocks(
    infile: str,
) -> None:
    r"""Lists the data blocks.

    Each line holds the start address, the exclusive end address, and the
    size of a block.

    ``INFILE`` is the path of the input file.
    Set to ``-`` to read from standard input.
    """

    file = load_input(infile)

    for block in file.blocks:
        click.echo(f'{format_address(block.start_address)} '
                   f'{format_address(block.endex)} {len(block)}')


# ----------------------------------------------------------------------------

@main.command()
@click.argument('infile', type=FILE_PATH_IN)
def info(
    infile: str,
) -> None:
    r"""Prints a summary of the file.

    ``INFILE`` is the path of the input file.
    Set to ``-`` to read from standard input.
    """

    file = load_input(infile)
    entry_tag = file.entry_tag

    click.echo(f'records: {len(file.records)}')
    click.echo(f'blocks: {len(file.blocks)}')
    click.echo(f'start address: {format_address(file.start_address)}')
    click.echo(f'entry point: {format_address(file.entry_point)}'
               + (f' ({entry_tag.name})' if entry_tag is not None else ''))
    click.echo(f'data size: {sum(len(block) for block in file.blocks)}')


# ----------------------------------------------------------------------------

@main.command()
@click.option('--color', is_flag=True, help="""
    Colorizes record fields with ANSI codes.
""")
@click.argument('infile', type=FILE_PATH_IN)
def records(
    color: bool,
    infile: str,
) -> None:
    r"""Lists the decoded records.

    Each line holds the record position, its type, and its fields.

    ``INFILE`` is the path of the input file.
    Set to ``-`` to read from standard input.
    """

    file = load_input(infile)

    for record in file.records:
        tokens = record.to_tokens()
        if color:
            tokens = colorize_tokens(tokens)
        fields = b''.join(tokens.values()).decode()
        click.echo(f'{record.row:>6} {record.tag.name:<24} {fields}')


# ----------------------------------------------------------------------------

@main.command()
@click.argument('infile', type=FILE_PATH_IN)
def validate(
    infile: str,
) -> None:
    r"""Validates an Intel HEX file.

    Nothing is printed if the file is valid.

    ``INFILE`` is the path of the input file.
    Set to ``-`` to read from standard input.
    """

    load_input(infile)

# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Command line interface for narytree files.

Usage:
    narytree play story.txt          # play a branching story
    narytree show tree.txt           # print the outline and linearized form
    narytree check story.txt --story # validate a file

Examples:
    # Play a story saved with StoryNode values
    narytree play varian_wrynn.txt

    # Inspect a tree of plain strings
    narytree show tree.txt --linear
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Sequence

from .config import Settings
from .exceptions import DeserializationError
from .storage import load_tree
from .story import StoryNode
from .tree import Tree

logger = logging.getLogger(__name__)

SEPARATOR = '-' * 43


def play(
    tree: Tree,
    settings: Settings | None = None,
    read: Callable[[str], str] | None = None,
    write: Callable[[str], None] = print,
) -> int:
    """Run the interactive story loop over a StoryNode tree.

    Shows the outcome of the current node, lists the actions of its children
    and moves to the chosen child until a leaf is reached or the player quits.

    Returns:
        Process exit status.
    """
    settings = settings or Settings()
    read = read or input
    current = tree.root_identity
    if current is None:
        write("The story is empty.")
        return 1

    while True:
        write(SEPARATOR)
        write("Story:")
        write(tree[current].outcome)
        write(SEPARATOR)

        children = tree.get_children(current)
        if not children:
            write("End of story reached. Thanks for playing!")
            return 0

        write("Choose your next action:")
        for idx, child in enumerate(children, start=1):
            write(f"{idx}. {tree[child].action}")

        try:
            answer = read(settings.prompt.format(count=len(children))).strip()
        except EOFError:
            write("")
            return 0
        if answer.lower() == 'q':
            write("Goodbye.")
            return 0

        choice = int(answer) if answer.isdecimal() else 0
        if not 1 <= choice <= len(children):
            write(f"Invalid choice. Please enter a number between 1 and {len(children)}.")
            continue
        logger.debug("Moving from node %d to node %d", current, children[choice - 1])
        current = children[choice - 1]


def _outline(tree: Tree) -> list[str]:
    encode = tree.codec.encode
    return [f"{'  ' * depth}[{identity}] {encode(value)}" for depth, identity, value in tree.walk()]


def _cmd_play(args: argparse.Namespace, settings: Settings) -> int:
    tree = load_tree(args.file, StoryNode, encoding=settings.encoding)
    return play(tree, settings)


def _cmd_show(args: argparse.Namespace, settings: Settings) -> int:
    tree = load_tree(args.file, _value_type(args), encoding=settings.encoding)
    if args.linear:
        print(tree.linearized())
    else:
        for line in _outline(tree):
            print(line)
    print(f"{len(tree)} nodes")
    return 0


def _cmd_check(args: argparse.Namespace, settings: Settings) -> int:
    tree = load_tree(args.file, _value_type(args), encoding=settings.encoding)
    print(f"{args.file}: OK ({len(tree)} nodes)")
    return 0


def _value_type(args: argparse.Namespace) -> type:
    return StoryNode if args.story else str


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the narytree command."""
    parser = argparse.ArgumentParser(
        prog='narytree',
        description='Inspect, validate and play serialized N-ary trees.',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='enable debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    play_parser = subparsers.add_parser('play', help='play a branching story file')
    play_parser.add_argument('file', help='story file with StoryNode values')
    play_parser.set_defaults(handler=_cmd_play)

    for name, handler, help_text in (
        ('show', _cmd_show, 'print the tree stored in a file'),
        ('check', _cmd_check, 'validate a serialized tree file'),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('file', help='serialized tree file')
        sub.add_argument('--story', action='store_true', help='values are StoryNode entries')
        sub.set_defaults(handler=handler)

    subparsers.choices['show'].add_argument(
        '--linear', action='store_true', help='print the linearized token sequence'
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the narytree command."""
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        return args.handler(args, settings)
    except FileNotFoundError:
        logger.debug("Missing file %s", args.file)
        print(f"{args.file}: no such file", file=sys.stderr)
        return 1
    except DeserializationError as exc:
        logger.debug("Rejected %s", args.file, exc_info=True)
        print(f"{args.file}: {exc}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())

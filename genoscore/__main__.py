#! /usr/bin/env python
# -*- coding: utf-8 -*-

# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

""" Main functionality of Genoscore

"""
import sys
import argparse

from genoscore import __version__
from .cli import count as cli_count
from .cli import profile as cli_profile
from .cli import score as cli_score


USAGE = ''' %(prog)s <command> [<args>]

The most commonly used commands are:
   count          Count alignments in an alignment file
   score          Summarise alignment scores over regions or features
   profile        Collect position-indexed scores over regions or features

'''


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) == 0:
        empty_parser = argparse.ArgumentParser(
            description='Score collection from genomic alignment files',
            usage=USAGE,
        )
        empty_parser.print_help(sys.stderr)
        sys.exit(1)

    parser = argparse.ArgumentParser(
        description='Score collection from genomic alignment files',
    )
    parser.add_argument('--version',
        action='version',
        version=__version__,
        default=__version__,
    )

    subparser = parser.add_subparsers(help='Sub-command help', dest='subcommand')

    ''' Parser for count '''
    count_parser = subparser.add_parser('count',
        description='''Count alignments in an alignment file''',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    cli_count.CountOptions.add_arguments(count_parser)
    count_parser.set_defaults(func=cli_count.run)

    ''' Parser for score '''
    score_parser = subparser.add_parser('score',
        description='''Summarise alignment scores over regions or features''',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    cli_score.ScoreOptions.add_arguments(score_parser)
    score_parser.set_defaults(func=cli_score.run)

    ''' Parser for profile '''
    profile_parser = subparser.add_parser('profile',
        description='''Collect position-indexed scores over regions or features''',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    cli_profile.ProfileOptions.add_arguments(profile_parser)
    profile_parser.set_defaults(func=cli_profile.run)

    args = parser.parse_args(argv)
    args.func(args)

if __name__ == '__main__':
    main()

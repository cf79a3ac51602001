# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

import argparse
import logging
import sys
from collections import OrderedDict

import yaml

from ..annotation import load_annotation
from ..core.interval import GenomicInterval
from ..errors import ConfigurationError

# Safe type lookup for YAML-defined CLI options
_SAFE_TYPES = {
    'int': int,
    'float': float,
    'str': str,
    'bool': bool,
    "argparse.FileType('w')": argparse.FileType('w'),
}


class SubcommandOptions:
    OPTS = """
    - Input Options:
        - infile:
            positional: True
            help: Input file.
    """

    def __init__(self, args):
        self.opt_names, self.opt_groups = self._parse_yaml_opts(self.OPTS)
        for k, v in vars(args).items():
            setattr(self, k, v)
        if getattr(self, 'logfile', None) is None:
            self.logfile = sys.stderr

    @classmethod
    def add_arguments(cls, parser):
        opt_names, opt_groups = cls._parse_yaml_opts(cls.OPTS)
        for group_name, args in opt_groups.items():
            argparse_grp = parser.add_argument_group(group_name, '')
            for arg_name, arg_d in args.items():
                _d = dict(arg_d)
                if _d.pop('hide', False):
                    continue
                if _d.pop('positional', False):
                    _arg_name = arg_name
                elif len(arg_name) == 1:
                    _arg_name = f'-{arg_name}'
                else:
                    _arg_name = f'--{arg_name}'

                if 'type' in _d:
                    _type_str = _d['type']
                    if _type_str not in _SAFE_TYPES:
                        raise ValueError(
                            f"Unsupported type '{_type_str}' in CLI option '{arg_name}'. "
                            f'Allowed: {list(_SAFE_TYPES.keys())}'
                        )
                    _d['type'] = _SAFE_TYPES[_type_str]

                argparse_grp.add_argument(_arg_name, **_d)

    @staticmethod
    def _parse_yaml_opts(opts_yaml):
        _opt_names = []
        _opt_groups = OrderedDict()
        for grp in yaml.load(opts_yaml, Loader=yaml.SafeLoader):
            grp_name, args = list(grp.items())[0]
            _opt_groups[grp_name] = OrderedDict()
            for arg in args:
                arg_name, d = list(arg.items())[0]
                _opt_groups[grp_name][arg_name] = d
                _opt_names.append(arg_name)
        return _opt_names, _opt_groups

    def __str__(self):
        ret = []
        if hasattr(self, 'version'):
            ret.append('{:34}{}'.format('Version:', self.version))
        for group_name, args in self.opt_groups.items():
            ret.append(f'{group_name}')
            for arg_name in args:
                v = getattr(self, arg_name, 'Not set')
                v = v.name if hasattr(v, 'name') else v
                ret.append('    {:30}{}'.format(arg_name + ':', v))
        return '\n'.join(ret)


# Options shared by subcommands that collect scores for regions or features
FEATURE_OPTS = """
    - Feature Options:
        - region:
            action: append
            help: Region to collect from, as chrom:start-stop[:strand]. May
                  be given more than once.
        - gtffile:
            help: Annotation file (GTF format) used to resolve --feature and
                  --avoid.
        - feature:
            action: append
            help: Transcript or gene id in --gtffile to collect from. May be
                  given more than once.
        - subfeature:
            choices:
                - exon
                - cds
                - 5p_utr
                - 3p_utr
            help: Collect over the sub-features of a transcript instead of
                  its whole span. Requires --feature.
"""

REPORTING_OPTS = """
    - Reporting Options:
        - quiet:
            action: store_true
            help: Silence (most) output.
        - verbose:
            action: store_true
            help: Show detailed progress.
        - debug:
            action: store_true
            help: Print debug messages.
        - logfile:
            type: argparse.FileType('w')
            help: Log output to this file.
"""


def configure_logging(opts):
    """Configure logging.

    Args:
        opts: SubcommandOptions object. Important attributes are "quiet",
              "verbose", "debug", and "logfile".
    """
    _quiet = getattr(opts, 'quiet', False)
    _verbose = getattr(opts, 'verbose', False)
    _debug = getattr(opts, 'debug', False)

    if _debug:
        loglev = logging.DEBUG
        logfmt = '%(asctime)s %(levelname)-8s %(message)-60s (%(funcName)s in %(filename)s:%(lineno)d)'
    elif _verbose:
        loglev = logging.INFO
        logfmt = '%(asctime)s %(levelname)-8s %(message)s'
    elif _quiet:
        loglev = logging.ERROR
        logfmt = '%(asctime)s %(levelname)-8s %(message)s'
    else:
        loglev = logging.WARNING
        logfmt = '%(asctime)s %(levelname)-8s %(message)s'

    logging.basicConfig(level=loglev, format=logfmt, datefmt='%Y-%m-%d %H:%M:%S', stream=opts.logfile)


def resolve_targets(opts):
    """Regions and sub-features requested on the command line.

    Returns:
        Tuple of the feature lookup (or None) and a list of
        ``(label, feature_id, interval, subfeatures)``.
    """
    lookup = load_annotation(opts.gtffile) if getattr(opts, 'gtffile', None) else None
    targets = []
    for text in opts.region or []:
        region = GenomicInterval.parse(text)
        targets.append((str(region), None, region, None))

    for feature_id in opts.feature or []:
        if lookup is None:
            raise ConfigurationError('--feature requires --gtffile')
        feat = lookup.get_feature(feature_id)
        if feat is None:
            raise ConfigurationError(f'Feature "{feature_id}" not found in {opts.gtffile}')
        subs = lookup.subfeatures(feature_id, opts.subfeature) if opts.subfeature else None
        if subs is not None and not subs:
            logging.warning(f'No {opts.subfeature} sub-features found for "{feature_id}", skipping')
            continue
        targets.append((feature_id, feature_id, lookup.interval(feature_id), subs))

    if not targets:
        raise ConfigurationError('At least one --region or --feature is required')
    return lookup, targets

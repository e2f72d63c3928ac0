#!/usr/bin/env python3
"""
NameKit CLI
===========
Command-line interface for name generation, validation and naming suites.

Usage:
    namekit generate --category saas -n 10 --keywords cloud sync
    namekit suite "project management for remote teams" --category projectManagement
    namekit validate "Trackr"
    namekit rank Cloudify DataSync Flowbase
    namekit domains "voltix" --tlds com io
    namekit patterns crm
    namekit styles
"""

import argparse
import json
import logging
import sys
from contextlib import nullcontext

from rich.console import Console

from namekit import __version__
from namekit.errors import InvalidOptions, NoCandidates

# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        # Spinners go to stderr so stdout stays machine-readable
        self.console = Console(stderr=True)

    def print(self, *args, **kwargs):
        if not self.quiet:
            print(*args, **kwargs)

    def error(self, msg: str):
        print(f"Error: {msg}", file=sys.stderr)

    def json(self, data):
        """JSON goes to stdout even in quiet mode."""
        print(json.dumps(data, indent=2))

    def status(self, message: str):
        """Spinner while a slow call (AI fan-out, DNS) runs."""
        if self.quiet:
            return nullcontext()
        return self.console.status(message)

    def table(self, headers: list, rows: list, col_widths: list = None):
        """Print a formatted table."""
        if self.quiet:
            return

        if not col_widths:
            col_widths = [max(len(str(h)), max((len(str(r[i])) for r in rows), default=0)) + 2
                         for i, h in enumerate(headers)]

        # Header
        header_line = ''.join(str(h).ljust(w) for h, w in zip(headers, col_widths))
        print(header_line)
        print('-' * len(header_line))

        # Rows
        for row in rows:
            print(''.join(str(c).ljust(w) for c, w in zip(row, col_widths)))


def availability_label(available) -> str:
    if available is None:
        return '?'
    return 'free' if available else 'taken'


def get_kit(args):
    from namekit import NameKit
    return NameKit(offline=args.offline)


def generation_kwargs(args) -> dict:
    """GenerationOptions fields set on the command line."""
    kwargs = {
        'category': args.category,
        'style': args.style,
        'count': args.count,
        'min_score': args.min_score,
        'keywords': args.keywords or (),
        'patterns': args.patterns,
        'concept': getattr(args, 'concept', None),
    }
    if args.no_validate:
        kwargs['validate'] = False
    return kwargs


# =============================================================================
# Commands
# =============================================================================

def cmd_generate(args, out: Output):
    """Generate ranked names."""
    kit = get_kit(args)
    kwargs = generation_kwargs(args)
    kwargs['creative_count'] = args.creative
    if args.domains:
        kwargs['include_domains'] = True
        kwargs['tlds'] = args.tlds

    with out.status("Generating names..."):
        names = kit.generate(**kwargs)

    if args.json:
        out.json([c.to_dict() for c in names])
        return 0

    if not names:
        out.print("No names reached the minimum score.")
        return 0

    rows = []
    for i, c in enumerate(names, 1):
        row = [i, c.name, f"{c.score:.2f}", c.pattern.value]
        if args.domains:
            row.append(' '.join(f"{d.tld}:{availability_label(d.available)}" for d in c.domains or ()))
        rows.append(row)

    headers = ['#', 'Name', 'Score', 'Pattern']
    widths = [4, 22, 8, 13]
    if args.domains:
        headers.append('Domains')
        widths.append(40)
    out.table(headers, rows, widths)

    if args.reasoning:
        out.print()
        for c in names:
            if c.reasoning:
                out.print(f"  {c.name}: {c.reasoning}")
    return 0


def cmd_suite(args, out: Output):
    """Build a naming suite for a concept."""
    kit = get_kit(args)
    kwargs = generation_kwargs(args)
    # build() copies the concept into the options
    kwargs.pop('concept', None)
    with out.status("Building naming suite..."):
        suite = kit.suite(args.concept, secondary=args.secondary,
                          secondary_count=args.secondary_count, **kwargs)

    if args.json:
        out.json(suite.to_dict())
        return 0

    out.print(f"Concept:  {suite.concept}")
    out.print(f"Primary:  {suite.primary.name} ({suite.primary.score:.2f})")
    out.print(f"Tagline:  {suite.tagline}")
    out.print(f"\n{suite.secondary_kind.capitalize()}:")
    rows = [[i, c.name, f"{c.score:.2f}"] for i, c in enumerate(suite.secondary, 1)]
    out.table(['#', 'Name', 'Score'], rows, [4, 30, 8])
    return 0


def cmd_validate(args, out: Output):
    """Validate a single name."""
    kit = get_kit(args)
    result = kit.validate(args.name, concept=args.concept, style=args.style)

    if args.json:
        out.json(result.to_dict())
        return 0

    out.print(f"Name:   {result.name}")
    out.print(f"Score:  {result.score:.2f}")
    out.print(f"Valid:  {'yes' if result.valid else 'no'}")
    if result.reasoning:
        out.print(f"Notes:  {result.reasoning}")
    if result.issues:
        out.print("Issues:")
        for issue in result.issues:
            out.print(f"  - {issue}")
    return 0


def cmd_rank(args, out: Output):
    """Rank a list of names."""
    kit = get_kit(args)
    with out.status(f"Ranking {len(args.names)} names..."):
        ranked = kit.rank(args.names, concept=args.concept, style=args.style)

    if args.json:
        out.json([c.to_dict() for c in ranked])
        return 0

    rows = [[i, c.name, f"{c.score:.2f}", c.reasoning or ''] for i, c in enumerate(ranked, 1)]
    out.table(['#', 'Name', 'Score', 'Notes'], rows, [4, 22, 8, 50])
    return 0


def cmd_domains(args, out: Output):
    """Check domain availability hints."""
    from namekit.adapters.domains import DnsDomainChecker, suggest_domains

    with out.status(f"Checking domains for {args.name}..."):
        results = DnsDomainChecker().check_availability(args.name, args.tlds)
    hints = suggest_domains(args.name)

    if args.json:
        out.json({'domains': [d.to_dict() for d in results], 'suggestions': hints})
        return 0

    rows = [[d.domain, availability_label(d.available), d.error or ''] for d in results]
    out.table(['Domain', 'Status', 'Note'], rows, [30, 8, 40])
    if hints:
        out.print(f"\nAlternatives: {', '.join(hints)}")
    return 0


def cmd_patterns(args, out: Output):
    """Show pattern bank tables."""
    from namekit.generators.patterns import load_pattern_bank

    bank = load_pattern_bank()
    if args.json:
        if args.category:
            out.json(list(bank.lookup(args.category, args.kind)))
        else:
            out.json(bank.to_dict())
        return 0

    if not args.category and args.kind == 'words':
        out.print("Categories:")
        for category in bank.categories():
            out.print(f"  {category:<20} {len(bank.words(category))} words")
        return 0

    words = bank.lookup(args.category, args.kind)
    out.print(', '.join(words))
    return 0


def cmd_styles(args, out: Output):
    """List styles and their weighting."""
    from namekit.generators.patterns import load_pattern_bank

    bank = load_pattern_bank()
    rows = []
    for name in bank.styles():
        profile = bank.style(name)
        rows.append([
            name,
            f"{profile.heuristic_weight:.2f}",
            ', '.join(profile.prefix_groups),
            ', '.join(profile.suffix_groups),
        ])
    out.table(['Style', 'Heuristic', 'Prefixes', 'Suffixes'], rows, [14, 11, 26, 26])
    return 0


# =============================================================================
# Main
# =============================================================================

def add_generation_args(p):
    p.add_argument('--category', '-c', help='Pattern bank category (default from app.yaml)')
    p.add_argument('--style', '-s', choices=['modern', 'professional', 'playful', 'technical'],
                   help='Naming style')
    p.add_argument('-n', '--count', type=int, help='Number of names')
    p.add_argument('--min-score', type=float, help='Minimum score 0-1')
    p.add_argument('--keywords', '-k', nargs='+', help='Extra seed words for this call')
    p.add_argument('--patterns', nargs='+',
                   help='Allowed patterns (prefix_word, word_suffix, compound, modified, '
                        'letter_word, invented)')
    p.add_argument('--no-validate', action='store_true', help='Skip AI validation')
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='namekit',
        description='NameKit - Startup & Product Name Generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate --category saas -n 10 --keywords cloud sync
  %(prog)s generate --category fintech --style playful --domains
  %(prog)s suite "project management for remote teams" --category projectManagement
  %(prog)s suite "team chat" --secondary tiers
  %(prog)s validate "Trackr"
  %(prog)s rank Cloudify DataSync Flowbase --concept "data sync"
  %(prog)s domains voltix --tlds com io ai
  %(prog)s patterns crm --kind words
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    parser.add_argument('--offline', action='store_true',
                        help='Use the local AI strategy even if ANTHROPIC_API_KEY is set')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- generate ---
    p = subparsers.add_parser('generate', aliases=['gen', 'g'], help='Generate ranked names')
    add_generation_args(p)
    p.add_argument('--concept', help='Free-text product idea for AI seed words')
    p.add_argument('--creative', type=int, help='AI-invented names to add')
    p.add_argument('--domains', action='store_true', help='Attach domain availability')
    p.add_argument('--tlds', nargs='+', help='TLDs for --domains (default from app.yaml)')
    p.add_argument('--reasoning', '-r', action='store_true', help='Show AI reasoning')

    # --- suite ---
    p = subparsers.add_parser('suite', aliases=['su'], help='Build a naming suite')
    p.add_argument('concept', help='Product concept')
    add_generation_args(p)
    p.add_argument('--secondary', choices=['features', 'tiers'], help='Secondary names')
    p.add_argument('--secondary-count', type=int, help='Number of secondary names')

    # --- validate ---
    p = subparsers.add_parser('validate', aliases=['val'], help='Validate a name')
    p.add_argument('name', help='Name to validate')
    p.add_argument('--concept', help='Product concept for context')
    p.add_argument('--style', '-s', choices=['modern', 'professional', 'playful', 'technical'])
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')

    # --- rank ---
    p = subparsers.add_parser('rank', aliases=['rk'], help='Rank a list of names')
    p.add_argument('names', nargs='+', help='Names to rank')
    p.add_argument('--concept', help='Product concept for context')
    p.add_argument('--style', '-s', choices=['modern', 'professional', 'playful', 'technical'])
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')

    # --- domains ---
    p = subparsers.add_parser('domains', aliases=['dom'], help='Check domain availability')
    p.add_argument('name', help='Name to check')
    p.add_argument('--tlds', nargs='+', help='TLDs (default from app.yaml)')
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')

    # --- patterns ---
    p = subparsers.add_parser('patterns', help='Show pattern bank tables')
    p.add_argument('category', nargs='?', help='Category, prefix/suffix group or tier step')
    p.add_argument('--kind', default='words',
                   help='words, prefixes, suffixes, positive, tiers, actions, adjectives, letters')
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')

    # --- styles ---
    subparsers.add_parser('styles', help='List naming styles')

    # Parse
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')

    # Handle aliases
    cmd_map = {
        'gen': 'generate', 'g': 'generate',
        'su': 'suite',
        'val': 'validate',
        'rk': 'rank',
        'dom': 'domains',
    }
    command = cmd_map.get(args.command, args.command)

    # Output handler
    out = Output(quiet=args.quiet)

    # Dispatch
    commands = {
        'generate': cmd_generate,
        'suite': cmd_suite,
        'validate': cmd_validate,
        'rank': cmd_rank,
        'domains': cmd_domains,
        'patterns': cmd_patterns,
        'styles': cmd_styles,
    }

    handler = commands.get(command)
    if handler:
        try:
            return handler(args, out)
        except KeyboardInterrupt:
            out.print("\nCancelled.")
            return 130
        except (InvalidOptions, NoCandidates) as e:
            out.error(str(e))
            return 1

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())

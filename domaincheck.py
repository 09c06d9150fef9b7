#!/usr/bin/env python3
"""
Domain Check - maintain working/inactive domain lists

Usage:
    python domaincheck.py update <candidates>                 Check new candidate domains
    python domaincheck.py retest [--recent FILE ...]          Re-check the working list
    python domaincheck.py chunk <chunk_index> <num_chunks>    Check one chunk of the working list
    python domaincheck.py prune <file>                        Remove inactive domains from a list
    python domaincheck.py check <domain> [<domain> ...]       Check individual domains
    python domaincheck.py config-template [path]              Write default config.json

Examples:
    python domaincheck.py update candidates.txt
    python domaincheck.py retest --recent working_domains_20250416.txt
    python domaincheck.py chunk 3 30
    python domaincheck.py --config config.json --base-dir lists/ retest
"""

import sys
import argparse

from termcolor import colored

from domainlists.core.config import ConfigManager, create_config_template
from domainlists.core.lists import DomainLists
from domainlists.core.validator import normalize_domain
from domainlists.resolution.dns_checker import DNSChecker


def load_context(args):
    """Load config and resolve list files (--base-dir overrides the config)"""
    config = ConfigManager(args.config)
    if args.base_dir:
        config.set('files', 'base_dir', args.base_dir)
    lists = DomainLists(config.get_files_config())
    return config, lists


def fail(result):
    print(colored(f"\n[FAIL] {result.get('error', 'Unknown error')}", "red"))
    sys.exit(1)


def cmd_update(args):
    """Check new candidate domains"""
    from domainlists.resolution.runner import run_update

    config, lists = load_context(args)
    result = run_update(lists, config, args.candidates)

    if not result['success']:
        fail(result)

    print(f"\n[OK] DNS check completed")
    print(f"    New active domains (this run): {result['new_active']}")
    print(f"    New inactive domains (this run): {result['new_inactive']}")
    print(f"    Total active domains: {result['active_count']}")
    print(f"    Total inactive domains: {result['inactive_count']}")
    print(f"    Time elapsed: {result['elapsed_seconds']:.1f}s")


def cmd_retest(args):
    """Re-check the working list"""
    from domainlists.resolution.runner import run_retest

    config, lists = load_context(args)
    result = run_retest(lists, config, args.recent or [])

    if not result['success']:
        fail(result)

    print(f"\n[OK] DNS retest complete: {result['total']} total domains")
    print(f"    Working: {result['active_count']}")
    print(f"    Inactive: {result['inactive_count']}")
    print(f"    Removed from working list: {result['removed']}")
    print(f"    Time elapsed: {result['elapsed_seconds']:.1f}s")


def cmd_chunk(args):
    """Check one chunk of the working list"""
    from domainlists.resolution.runner import run_chunk

    if args.num_chunks < 1:
        args.parser.error(f"num_chunks must be positive, got {args.num_chunks}")
    if not 1 <= args.chunk_index <= args.num_chunks:
        args.parser.error(f"chunk_index must be within 1..{args.num_chunks}, got {args.chunk_index}")

    config, lists = load_context(args)
    result = run_chunk(lists, config, args.chunk_index, args.num_chunks)

    if not result['success']:
        fail(result)

    print(f"\n[OK] Chunk {result['chunk_index']}/{result['num_chunks']} complete")
    print(f"    Active: {result['active_file']}")
    print(f"    Inactive: {result['inactive_file']}")


def cmd_prune(args):
    """Remove inactive domains from a list file"""
    from domainlists.resolution.runner import run_prune

    config, lists = load_context(args)
    result = run_prune(lists, args.file)

    if not result['success']:
        fail(result)

    print(f"\n[OK] Removed {result['removed']} inactive entries from {result['output_file']}")


def cmd_check(args):
    """Check individual domains"""
    config, _ = load_context(args)
    dns_config = dict(config.get_dns_config(), progress_every=0)
    checker = DNSChecker(dns_config)

    domains = [normalize_domain(d) for d in args.domains]
    active, inactive = checker.check(domains)

    for domain in dict.fromkeys(domains):
        if domain in active:
            print(colored(f"  ACTIVE    {domain}", "green"))
        else:
            print(colored(f"  INACTIVE  {domain}", "red"))

    if inactive:
        sys.exit(1)


def cmd_config_template(args):
    """Write the default configuration"""
    output = create_config_template(args.path)
    print(f"\n[OK] Edit {output} and pass it with --config")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Domain Check - maintain working/inactive domain lists',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('-c', '--config', default=None, help='Path to config.json (optional)')
    parser.add_argument('-d', '--base-dir', default=None, help='Directory holding the list files')

    subparsers = parser.add_subparsers(dest='command', help='Command')

    # update
    p = subparsers.add_parser('update', help='Check new candidate domains')
    p.add_argument('candidates', help='File with candidate domains (one per line)')
    p.set_defaults(func=cmd_update)

    # retest
    p = subparsers.add_parser('retest', help='Re-check the working list')
    p.add_argument('--recent', nargs='*', metavar='FILE', help='Dated working files to prune afterwards')
    p.set_defaults(func=cmd_retest)

    # chunk
    p = subparsers.add_parser('chunk', help='Check one chunk of the working list')
    p.add_argument('chunk_index', type=int, help='1-based chunk index')
    p.add_argument('num_chunks', type=int, help='Total number of chunks')
    p.set_defaults(func=cmd_chunk, parser=p)

    # prune
    p = subparsers.add_parser('prune', help='Remove inactive domains from a list file')
    p.add_argument('file', help='List file to prune in place')
    p.set_defaults(func=cmd_prune)

    # check
    p = subparsers.add_parser('check', help='Check individual domains')
    p.add_argument('domains', nargs='+', help='Domains to check')
    p.set_defaults(func=cmd_check)

    # config-template
    p = subparsers.add_parser('config-template', help='Write default config.json')
    p.add_argument('path', nargs='?', default='./config.json', help='Output path')
    p.set_defaults(func=cmd_config_template)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(2)

    try:
        args.func(args)
    except KeyboardInterrupt:
        print("\n\n[!] Interrupted")
        sys.exit(1)
    except Exception as e:
        print(colored(f"\n[FAIL] {str(e)}", "red"))
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()

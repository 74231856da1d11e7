#!/usr/bin/env python3
"""reposync CLI entrypoint."""

import sys
import argparse
from dataclasses import replace
from pathlib import Path

from reposync.lib.config import SyncConfig, find_config_file, load_sync_config
from reposync.lib.listing import find_ref, load_repository_refs
from reposync.lib.logs import setup_logging
from reposync.lib.types import RepositoryRef
from reposync.lib.validate import ValidationError
from reposync.commands import list as cmd_list_module
from reposync.commands import clone as cmd_clone_module
from reposync.commands import refresh as cmd_refresh_module
from reposync.commands import check as cmd_check_module
from reposync.commands import pull as cmd_pull_module
from reposync.commands import diff as cmd_diff_module
from reposync.commands import push as cmd_push_module


class ConfigError(Exception):
    """Configuration or listing could not be loaded."""
    pass


def get_config(args) -> SyncConfig:
    """Load config from --config, or ./reposync.env, or defaults."""
    config_path = Path(args.config) if args.config else find_config_file(Path.cwd())
    try:
        config = load_sync_config(config_path)
    except (FileNotFoundError, ValueError, ValidationError) as e:
        raise ConfigError(str(e)) from e
    if args.base_dir:
        config = replace(config, base_dir=Path(args.base_dir).expanduser())
    return config


def get_refs(args) -> list[RepositoryRef]:
    """Load the repository listing from --repos, if given."""
    if not args.repos:
        return []
    try:
        return load_repository_refs(Path(args.repos))
    except ValidationError as e:
        raise ConfigError(str(e)) from e


def resolve_ref(name: str, refs: list[RepositoryRef]) -> RepositoryRef:
    """Listing entry for name, or a bare ref for an already-cloned copy."""
    ref = find_ref(refs, name)
    if ref is not None:
        return ref
    return RepositoryRef(name=name, remote_url="")


def cmd_list(args, config, refs):
    return cmd_list_module.cmd_list(args, config, refs)


def cmd_clone(args, config, refs):
    selected = []
    for name in args.names:
        ref = find_ref(refs, name)
        if ref is None:
            print(f"ERROR: '{name}' not in repository listing (use --repos)")
            return 2
        selected.append(ref)
    return cmd_clone_module.cmd_clone(args, config, selected)


def cmd_refresh(args, config, refs):
    return cmd_refresh_module.cmd_refresh(args, config, resolve_ref(args.name, refs))


def cmd_check(args, config, refs):
    return cmd_check_module.cmd_check(args, config, resolve_ref(args.name, refs))


def cmd_check_all(args, config, refs):
    if not refs:
        refs = cmd_list_module.discover_local_refs(config)
    return cmd_check_module.cmd_check_all(args, config, refs)


def cmd_pull(args, config, refs):
    return cmd_pull_module.cmd_pull(args, config, resolve_ref(args.name, refs))


def cmd_diff(args, config, refs):
    return cmd_diff_module.cmd_diff(args, config, resolve_ref(args.name, refs))


def cmd_push(args, config, refs):
    return cmd_push_module.cmd_push(args, config, resolve_ref(args.name, refs))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='reposync', description='Keep local clones in sync with their remotes')
    parser.add_argument('--config', '-c', help='Path to reposync.env (default: ./reposync.env if present)')
    parser.add_argument('--repos', '-r', help='Repository listing file (JSON or YAML)')
    parser.add_argument('--base-dir', '-d', help='Override BASE_DIR')
    parser.add_argument('--verbose', '-v', action='store_true', help='Log every git command')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # reposync list
    p_list = subparsers.add_parser('list', help='List repositories and local state')
    p_list.set_defaults(func=cmd_list)

    # reposync clone
    p_clone = subparsers.add_parser('clone', help='Clone repositories from the listing')
    p_clone.add_argument('names', nargs='+', help='Repository names')
    p_clone.set_defaults(func=cmd_clone)

    # reposync refresh
    p_refresh = subparsers.add_parser('refresh', help='Show changed files')
    p_refresh.add_argument('name', help='Repository name')
    p_refresh.set_defaults(func=cmd_refresh)

    # reposync check
    p_check = subparsers.add_parser('check', help='Fetch and show ahead/behind counts')
    p_check.add_argument('name', help='Repository name')
    p_check.set_defaults(func=cmd_check)

    # reposync check-all
    p_check_all = subparsers.add_parser('check-all', help='Check every local repository')
    p_check_all.set_defaults(func=cmd_check_all)

    # reposync pull
    p_pull = subparsers.add_parser('pull', help='Pull latest changes')
    p_pull.add_argument('name', help='Repository name')
    p_pull.set_defaults(func=cmd_pull)

    # reposync diff
    p_diff = subparsers.add_parser('diff', help='Show diff for one file')
    p_diff.add_argument('name', help='Repository name')
    p_diff.add_argument('path', help='File path inside the repository')
    p_diff.set_defaults(func=cmd_diff)

    # reposync push
    p_push = subparsers.add_parser('push', help='Commit all changes and push')
    p_push.add_argument('name', help='Repository name')
    p_push.add_argument('--message', '-m', default='Update', help='Commit message (default: Update)')
    p_push.set_defaults(func=cmd_push)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = get_config(args)
        refs = get_refs(args)
    except ConfigError as e:
        print(f"ERROR: {e}")
        return 2

    return args.func(args, config, refs)


if __name__ == '__main__':
    sys.exit(main())

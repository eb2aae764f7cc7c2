#!/usr/bin/env python3
"""
ctxignore - inspect which files of a build context are sent to the daemon
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .ignore import BuildContext, CtxIgnoreError, IGNORE_FILE_EXTENSION, init_ignore_file
from .utils import configure_logging, get_logger

logger = get_logger(__name__)


class CtxIgnoreCLI:
    """Main ctxignore CLI implementation"""

    def parse_args(self, argv: Optional[List[str]] = None) -> argparse.Namespace:
        """Parse command line arguments"""
        parser = argparse.ArgumentParser(
            prog='ctxignore',
            description='Show which files of a build context are excluded by its ignore file',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self.get_usage_examples()
        )
        parser.add_argument('--version', action='version',
            version=f'%(prog)s {__version__}')
        parser.add_argument('-f', '--file', dest='dockerfile', default='Dockerfile',
            help='Dockerfile path relative to the context (default: Dockerfile)')
        parser.add_argument('--log-level',
            help='Log level (default: CTXIGNORE_LOG_LEVEL or WARNING)')
        parser.add_argument('--log-file',
            help='Also write logs to this file (rotated at 10MB)')
        parser.add_argument('--json', action='store_true',
            help='Output results as JSON')

        subparsers = parser.add_subparsers(dest='command', help='Commands')

        ls_parser = subparsers.add_parser('ls',
            help='List files sent to the daemon')
        ls_parser.add_argument('path', nargs='?', default='.',
            help='Build context directory (default: current directory)')
        ls_parser.add_argument('--excluded', action='store_true',
            help='List excluded files instead')

        check_parser = subparsers.add_parser('check',
            help='Show the verdict and deciding pattern for paths')
        check_parser.add_argument('path', help='Build context directory')
        check_parser.add_argument('files', nargs='+',
            help='Paths to check, relative to the context')
        check_parser.add_argument('-q', '--quiet', action='store_true',
            help='No output; exit status 1 if any path is excluded')

        patterns_parser = subparsers.add_parser('patterns',
            help='Show the effective ordered pattern list')
        patterns_parser.add_argument('path', nargs='?', default='.',
            help='Build context directory (default: current directory)')

        init_parser = subparsers.add_parser('init',
            help=f'Create {IGNORE_FILE_EXTENSION} with sensible defaults')
        init_parser.add_argument('path', nargs='?', default='.',
            help='Directory where to create the file (default: current directory)')
        init_parser.add_argument('--force', action='store_true',
            help='Overwrite an existing file')
        init_parser.add_argument('-m', '--minimal', action='store_true',
            help='Write essential patterns only')
        init_parser.add_argument('-a', '--add', action='append', dest='patterns',
            help='Add custom pattern (can be used multiple times)')

        args = parser.parse_args(argv)
        if not args.command:
            parser.print_help(sys.stderr)
            parser.exit(2)
        return args

    def get_usage_examples(self) -> str:
        """Get usage examples for help text"""
        return """
Examples:
  ctxignore ls .                      # Files that would be sent
  ctxignore ls --excluded .           # Files that would be left out
  ctxignore check . build/app.o       # Which pattern decides a path
  ctxignore -f docker/Dockerfile ls   # Use docker/Dockerfile.dockerignore if present
  ctxignore init --minimal            # Create a starter .dockerignore
"""

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run the CLI and return the exit status"""
        args = self.parse_args(argv)
        configure_logging(log_level=args.log_level, log_file=args.log_file)

        handlers = {
            'ls': self.cmd_ls,
            'check': self.cmd_check,
            'patterns': self.cmd_patterns,
            'init': self.cmd_init,
        }
        try:
            return handlers[args.command](args)
        except CtxIgnoreError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    def load_context(self, args: argparse.Namespace) -> BuildContext:
        context = BuildContext(args.path, dockerfile=args.dockerfile)
        context.check_ignore_file()
        return context

    def cmd_ls(self, args: argparse.Namespace) -> int:
        context = self.load_context(args)
        paths = list(context.iter_excluded() if args.excluded else context.iter_files())

        if args.json:
            print(json.dumps(paths, indent=2))
        else:
            for path in paths:
                print(path)
        return 0

    def cmd_check(self, args: argparse.Namespace) -> int:
        context = self.load_context(args)

        results = []
        for file in args.files:
            result = context.explain(file)
            results.append({
                'path': file,
                'verdict': result.verdict.value,
                'pattern': result.matched_pattern.raw if result.matched_pattern else None,
            })

        any_excluded = any(r['verdict'] == 'excluded' for r in results)
        if args.quiet:
            return 1 if any_excluded else 0

        if args.json:
            print(json.dumps(results, indent=2))
        else:
            for r in results:
                pattern = f"  ({r['pattern']})" if r['pattern'] else ""
                print(f"{r['verdict']:<9} {r['path']}{pattern}")
        return 0

    def cmd_patterns(self, args: argparse.Namespace) -> int:
        context = self.load_context(args)
        warnings = context.file_info.warnings if context.file_info else []

        if args.json:
            print(json.dumps({
                'ignore_file': str(context.ignore_file) if context.ignore_file else None,
                'patterns': context.patterns,
                'warnings': [
                    {'line': w.line, 'pattern': w.pattern, 'warning': w.message}
                    for w in warnings
                ],
            }, indent=2))
            return 0

        for pattern in context.patterns:
            print(pattern)
        for w in warnings:
            print(f"{context.ignore_file}:{w.line}: {w.message}", file=sys.stderr)
        return 0

    def cmd_init(self, args: argparse.Namespace) -> int:
        path = Path(args.path)
        if not path.is_dir():
            print(f"Error: {path} is not a directory", file=sys.stderr)
            return 1

        created = init_ignore_file(
            path=path,
            force=args.force,
            minimal=args.minimal,
            custom_patterns=args.patterns
        )

        ignore_path = path / IGNORE_FILE_EXTENSION
        if created:
            print(f"Created {ignore_path}")
            return 0

        print(f"{ignore_path} already exists (use --force to overwrite)", file=sys.stderr)
        return 1


def main():
    """Main entry point"""
    cli = CtxIgnoreCLI()
    sys.exit(cli.run())


if __name__ == '__main__':
    main()

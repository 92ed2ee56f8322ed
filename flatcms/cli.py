#!/usr/bin/env python
"""
Command-line interface for FlatCMS
"""

import argparse
import getpass
import sys

from flatcms.version_info import __version__, __build_timestamp__, __build_type__


def print_version():
    """Print version information."""
    print(f"FlatCMS v{__version__}")
    print(f"Build: {__build_timestamp__}")
    print(f"Build Type: {__build_type__}")


def config_overrides(args):
    overrides = {}
    if args.data_dir:
        overrides['DATA_DIR'] = args.data_dir
    if args.credentials:
        overrides['CREDENTIALS_FILE'] = args.credentials
    if args.debug:
        overrides['DEBUG'] = True
    return overrides


def start_server(args):
    """Start the Flask server."""
    from flatcms.app import create_app

    app = create_app(config_overrides(args), config_path=args.config)

    host = args.host
    port = args.port or 8000

    print(f"Starting FlatCMS v{__version__}")
    print(f"Server: http://{host}:{port}")
    print(f"Documents: {app.config['DATA_DIR']}")
    print("Press Ctrl+C to stop")
    print()

    app.run(host=host, port=port, debug=args.debug)


def add_user(args):
    """Create a user from the command line."""
    from flatcms.core.config import load_config
    from flatcms.core.credentials import CredentialStore
    from flatcms.core.errors import FlatCMSError

    config = load_config(config_overrides(args), config_path=args.config)
    store = CredentialStore(config['CREDENTIALS_FILE'])

    password = args.password or getpass.getpass(f"Password for {args.username}: ")
    try:
        store.create(args.username, password)
    except FlatCMSError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    print(f"User '{args.username}' added to {store.path}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        description=f'FlatCMS v{__version__}',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  flatcms --version                 Show version information
  flatcms start                     Start server on 0.0.0.0:8000
  flatcms start --port 8080         Start server on port 8080
  flatcms --data-dir ./docs start   Serve documents from ./docs
  flatcms add-user alice            Create a user (prompts for password)
        """
    )

    parser.add_argument('--version', '-v', action='store_true', help='Show version information')
    parser.add_argument('--host', type=str, default='0.0.0.0', help='Host to bind to (default: 0.0.0.0)')
    parser.add_argument('--port', '-p', type=int, default=8000, help='Port to bind to (default: 8000)')
    parser.add_argument('--debug', '-d', action='store_true', help='Run in debug mode')
    parser.add_argument('--config', '-c', type=str, default=None, help='Path to a JSON config file')
    parser.add_argument('--data-dir', type=str, default=None, help='Directory holding the documents')
    parser.add_argument('--credentials', type=str, default=None, help='Path to the users file')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')
    subparsers.add_parser('start', help='Start the web server')

    user_parser = subparsers.add_parser('add-user', help='Create a user account')
    user_parser.add_argument('username')
    user_parser.add_argument('--password', default=None, help='Password (prompted when omitted)')

    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.version:
        print_version()
        return 0

    if args.command == 'add-user':
        return add_user(args)

    # Default behavior: Start Server
    try:
        start_server(args)
        return 0
    except KeyboardInterrupt:
        print("\nServer stopped.")
        return 0
    except Exception as e:
        if args.debug:
            import traceback
            traceback.print_exc()
        print(f"Error starting server: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())

"""CLI for cronofy-client - authorization and quick API checks.

Usage:
    cronofy-client init                                # Create config directory, show setup
    cronofy-client status                              # Show configuration and token status
    cronofy-client auth-link --redirect-uri <uri>      # Print (and open) the authorization URL
    cronofy-client login --code <code> --redirect-uri <uri>  # Exchange a code for tokens
    cronofy-client refresh                             # Refresh the access token
    cronofy-client revoke                              # Revoke tokens and delete token file
    cronofy-client calendars                           # List calendars
    cronofy-client events [--from D] [--to D]          # List events
    cronofy-client channels                            # List notification channels
"""

from __future__ import annotations

import argparse
import sys
import webbrowser
from datetime import date
from itertools import islice

from cronofy_client.client import DEFAULT_OAUTH_SCOPE, Client
from cronofy_client.config import (
    CONFIG_DIR,
    ENV_FILE,
    TOKEN_FILE,
    ensure_config_dir,
    get_credential_status,
)
from cronofy_client.exceptions import CronofyError


def _client() -> Client:
    return Client(token_path=TOKEN_FILE)


def cmd_init() -> int:
    """Initialize the configuration directory."""
    print("=" * 60)
    print("CRONOFY-CLIENT SETUP")
    print("=" * 60)
    print()

    ensure_config_dir()
    print(f"Created: {CONFIG_DIR}/")
    print()

    status = get_credential_status()
    if status["env_file"]:
        print(".env exists")
    else:
        print("Create .env with your OAuth application credentials:")
        print()
        print(f"  cat > {ENV_FILE} << 'EOF'")
        print("  CRONOFY_CLIENT_ID=...")
        print("  CRONOFY_CLIENT_SECRET=...")
        print("  EOF")
        print()

    print("Next: Run 'cronofy-client auth-link --redirect-uri <uri>' to authorize")
    return 0


def cmd_status() -> int:
    """Show configuration and token status."""
    status = get_credential_status()

    print(f"Config dir    : {status['config_dir']}")
    print(f"API URL       : {status['api_url']}")
    print(f"Client ID     : {'[x]' if status['client_id'] else '[ ]'}")
    print(f"Client secret : {'[x]' if status['client_secret'] else '[ ]'}")

    info = _client().auth.get_token_info()
    if info["status"] == "no_token":
        print("Token         : [ ] - run 'cronofy-client login'")
        return 1

    print(f"Token         : {info['status']}")
    print(f"Scope         : {' '.join(info['scope'])}")
    print(f"Expires at    : {info['expires_at']}")
    print(f"Refresh token : {'[x]' if info['has_refresh_token'] else '[ ]'}")
    return 0


def cmd_auth_link(
    redirect_uri: str, scope: list[str], state: str | None, no_browser: bool = False
) -> int:
    """Print the authorization URL and optionally open it."""
    url = _client().user_auth_link(redirect_uri, scope, state)
    print(f"Authorization URL:\n{url}\n")

    if not no_browser:
        webbrowser.open(url)

    print("Next: Run 'cronofy-client login --code <code> --redirect-uri <uri>'")
    return 0


def cmd_login(code: str, redirect_uri: str) -> int:
    """Exchange an authorization code for tokens."""
    credentials = _client().get_token_from_code(code, redirect_uri)
    print("Token saved successfully!")
    print(f"  Scope: {credentials.scope}")
    return 0


def cmd_refresh() -> int:
    """Refresh the stored access token."""
    credentials = _client().refresh_access_token()
    print("Token refreshed successfully!")
    print(f"  Expires in: {credentials.expires_in}s")
    return 0


def cmd_revoke() -> int:
    """Revoke the stored tokens."""
    _client().revoke_authorization()
    print("Token revoked and local cache cleared")
    return 0


def cmd_calendars() -> int:
    with _client() as client:
        for calendar in client.list_calendars():
            name = f"{calendar.profile_name} / {calendar.calendar_name}"
            readonly = " (read-only)" if calendar.calendar_readonly else ""
            print(f"{calendar.calendar_id}  {name}{readonly}")
    return 0


def cmd_events(from_: str | None, to: str | None, tzid: str, limit: int) -> int:
    options = {"tzid": tzid}
    if from_:
        options["from_"] = date.fromisoformat(from_)
    if to:
        options["to"] = date.fromisoformat(to)

    with _client() as client:
        for event in islice(client.read_events(**options), limit):
            start = event.start.time.isoformat() if event.start else "?"
            print(f"{start}  {event.summary}")
    return 0


def cmd_channels() -> int:
    with _client() as client:
        for channel in client.list_channels():
            print(f"{channel.channel_id}  {channel.callback_url}")
    return 0


def parse_scope(scope_str: str | None) -> list[str]:
    """Parse comma-separated scopes."""
    if not scope_str:
        return list(DEFAULT_OAUTH_SCOPE)
    return [s.strip() for s in scope_str.split(",")]


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="cronofy-client",
        description="Cronofy calendar API authorization and quick checks",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    subparsers.add_parser("init", help="Create the configuration directory")
    subparsers.add_parser("status", help="Show configuration and token status")

    link_parser = subparsers.add_parser("auth-link", help="Print the authorization URL")
    link_parser.add_argument("--redirect-uri", required=True, help="OAuth redirect URI")
    link_parser.add_argument(
        "--scope",
        type=str,
        default=None,
        help=f"Comma-separated scopes (default: {','.join(DEFAULT_OAUTH_SCOPE)})",
    )
    link_parser.add_argument("--state", default=None, help="State value to round-trip")
    link_parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Don't open browser automatically",
    )

    login_parser = subparsers.add_parser("login", help="Exchange an authorization code")
    login_parser.add_argument("--code", required=True, help="Code from the redirect")
    login_parser.add_argument("--redirect-uri", required=True, help="OAuth redirect URI")

    subparsers.add_parser("refresh", help="Refresh the access token")
    subparsers.add_parser("revoke", help="Revoke tokens")
    subparsers.add_parser("calendars", help="List calendars")
    subparsers.add_parser("channels", help="List notification channels")

    events_parser = subparsers.add_parser("events", help="List events")
    events_parser.add_argument("--from", dest="from_", default=None, help="Start date (YYYY-MM-DD)")
    events_parser.add_argument("--to", default=None, help="End date (YYYY-MM-DD)")
    events_parser.add_argument("--tzid", default="Etc/UTC", help="Time zone (default: Etc/UTC)")
    events_parser.add_argument("--limit", type=int, default=50, help="Maximum events to show")

    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    if args.command is None:
        parser.print_help()
        return 0

    try:
        if args.command == "init":
            return cmd_init()
        if args.command == "status":
            return cmd_status()
        if args.command == "auth-link":
            return cmd_auth_link(
                args.redirect_uri, parse_scope(args.scope), args.state, args.no_browser
            )
        if args.command == "login":
            return cmd_login(args.code, args.redirect_uri)
        if args.command == "refresh":
            return cmd_refresh()
        if args.command == "revoke":
            return cmd_revoke()
        if args.command == "calendars":
            return cmd_calendars()
        if args.command == "events":
            return cmd_events(args.from_, args.to, args.tzid, args.limit)
        if args.command == "channels":
            return cmd_channels()
    except CronofyError as e:
        print(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())

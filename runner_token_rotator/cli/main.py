"""CLI entrypoint for runner-token-rotator."""
import os
import sys
import argparse
import logging

from .validators import validate_org_name

VERSION = "0.1.0"

# Configure logging to stderr
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s %(name)s: %(message)s",
    stream=sys.stderr
)
logger = logging.getLogger(__name__)


def _environ_with_project(project_id):
    env = dict(os.environ)
    if project_id:
        env["project_id"] = project_id
    return env


def cmd_version(args):
    """Show version information."""
    print(f"runner-token-rotator {VERSION}")


def cmd_config_show(args):
    """Show the resolved configuration."""
    from runner_token_rotator.rotation.domains.config_loader import (
        default_config_path,
        get_config_path,
        load_config,
    )

    env = _environ_with_project(args.project_id)
    config_path = get_config_path(env)
    config = load_config(env)

    if config_path:
        source = "RUNNER_ROTATOR_CONFIG" if env.get("RUNNER_ROTATOR_CONFIG") else "default"
        print(f"Config path: {config_path}")
        print(f"Source: {source}")
    else:
        print(f"Config path: {default_config_path()}")
        print("Source: default (file not found)")

    print(f"Project ID: {config.project_id}")
    print(f"GitHub API: {config.api_base_url}")
    print(f"Accept: {config.accept_header}")
    print(f"Request timeout: {config.request_timeout if config.request_timeout is not None else 'none'}")
    print(f"Require success status: {config.require_success_status}")


def cmd_rotate(args):
    """Rotate the registration token of one org."""
    from runner_token_rotator.rotation.domains.config_loader import load_config
    from runner_token_rotator.rotation.domains.errors import RotationError
    from runner_token_rotator.rotation.workflows.rotation import RotationHandler

    validate_org_name(args.org)

    try:
        config = load_config(_environ_with_project(args.project_id))
        result = RotationHandler(config).rotate(args.org)
    except RotationError as e:
        logger.critical(f"Registration token rotation failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Added secret version: {result.new_version}")
    if args.verbose:
        for name in result.destroyed_versions:
            print(f"Destroyed secret version: {name}")
    sys.exit(0)


def main(argv=None):
    """Main CLI entrypoint.

    Exit codes:
        0 - Success
        1 - Runtime errors (config, Secret Manager, GitHub API, etc.)
        2 - Usage errors (invalid arguments, invalid org name, etc.)
    """
    parser = argparse.ArgumentParser(
        prog="runner-rotator",
        description="Rotate GitHub self-hosted runner registration tokens stored in GCP Secret Manager",
        epilog="""
Exit codes:
  0 - Success
  1 - Runtime error (config, Secret Manager, GitHub API, etc.)
  2 - Usage error (invalid arguments, invalid org name, etc.)

Environment variables:
  project_id            - GCP project ID holding the secrets
  GCP_PROJECT           - GCP project ID, used when project_id is unset
  RUNNER_ROTATOR_CONFIG - Path to the optional YAML config file

Configuration:
  Default location: ~/.config/runner-token-rotator/config.yml
        """
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log progress to stderr and list destroyed versions"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # version command
    _version_parser = subparsers.add_parser(
        "version",
        help="Show version information",
        description="Display the current version of runner-token-rotator"
    )

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
        description="Inspect runner-token-rotator configuration"
    )
    config_subparsers = config_parser.add_subparsers(dest="config_command")

    # config show command
    config_show_parser = config_subparsers.add_parser(
        "show",
        help="Show resolved configuration",
        description="""
Display the configuration file path, its source and the resolved settings.

Sources:
  - RUNNER_ROTATOR_CONFIG: Path from the environment variable
  - default: Default XDG location (~/.config/runner-token-rotator/config.yml)
        """
    )
    config_show_parser.add_argument(
        "--project-id",
        help="GCP project ID (overrides the project_id environment variable)"
    )

    # rotate command
    rotate_parser = subparsers.add_parser(
        "rotate",
        help="Rotate an org's registration token",
        description="""
Rotate the runner registration token of a GitHub org.

Steps:
  1. Read <org>-admin-token (latest version) from Secret Manager
  2. Request a registration token from the GitHub API
  3. Destroy every non-destroyed version of <org>-registration-token
  4. Store the new token as a new version of <org>-registration-token

Nothing is rolled back if a step fails.
        """
    )
    rotate_parser.add_argument(
        "org",
        help="GitHub organization name (format: [a-zA-Z0-9_-]+)"
    )
    rotate_parser.add_argument(
        "--project-id",
        help="GCP project ID (overrides the project_id environment variable)"
    )
    # SUPPRESS keeps a top-level -v from being reset when omitted here
    rotate_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Log progress to stderr and list destroyed versions"
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    # If no command provided, show help and exit with usage error code
    if not args.command:
        parser.print_help()
        sys.exit(2)

    # Route to command handlers
    try:
        if args.command == "version":
            cmd_version(args)
        elif args.command == "config":
            if args.config_command == "show":
                cmd_config_show(args)
            else:
                config_parser.print_help()
                sys.exit(2)
        elif args.command == "rotate":
            cmd_rotate(args)
        else:
            parser.print_help()
            sys.exit(2)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

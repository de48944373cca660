"""Input validation for CLI arguments."""
import re
import sys

# Org name becomes part of a secret id, so it must fit GCP's [a-zA-Z0-9_-]
ORG_NAME_PATTERN = r'^[a-zA-Z0-9_-]+$'


def validate_org_name(name: str) -> None:
    """
    Validate an org name before any remote call is made.

    Args:
        name: GitHub organization name to validate

    Raises:
        SystemExit with code 2 if validation fails
    """
    if not name:
        print("Error: The name of the GH Org cannot be empty", file=sys.stderr)
        sys.exit(2)

    if not re.match(ORG_NAME_PATTERN, name):
        print(f"Error: Invalid org name '{name}'", file=sys.stderr)
        print("\nAllowed characters: letters, numbers, underscores (_), hyphens (-)", file=sys.stderr)
        print("The org name is used in secret ids like '<org>-admin-token'.", file=sys.stderr)
        sys.exit(2)

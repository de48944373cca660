"""Domain models and secret addresses for registration token rotation."""
from dataclasses import dataclass, field
from typing import List

ADMIN_TOKEN_SUFFIX = "admin-token"
REGISTRATION_TOKEN_SUFFIX = "registration-token"

DESTROYED = "DESTROYED"


def admin_token_version_name(project_id: str, org: str) -> str:
    """Resource name of the latest admin token version for an org."""
    return f"projects/{project_id}/secrets/{org}-{ADMIN_TOKEN_SUFFIX}/versions/latest"


def registration_token_secret_name(project_id: str, org: str) -> str:
    """Resource name of the registration token secret (parent of its versions)."""
    return f"projects/{project_id}/secrets/{org}-{REGISTRATION_TOKEN_SUFFIX}"


@dataclass
class SecretVersion:
    """A secret version as listed by Secret Manager."""
    name: str
    state: str  # "ENABLED", "DISABLED", "DESTROYED", ...

    @property
    def is_destroyed(self) -> bool:
        return self.state == DESTROYED


@dataclass
class RotationResult:
    """Outcome of a single rotation."""
    organization: str
    new_version: str
    destroyed_versions: List[str] = field(default_factory=list)

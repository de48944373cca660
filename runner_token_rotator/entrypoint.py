"""Pub/Sub triggered Cloud Function entry point.

Deploy with ``--entry-point handle_pubsub``. The message data is the GitHub
organization name, nothing else.
"""
import base64
import binascii
import logging
from typing import Any, Dict, Optional

from runner_token_rotator.rotation.domains.config_loader import RotatorConfig, load_config
from runner_token_rotator.rotation.domains.errors import InvalidOrganizationError, RotationError
from runner_token_rotator.rotation.domains.models import RotationResult
from runner_token_rotator.rotation.workflows.rotation import RotationHandler

logger = logging.getLogger(__name__)

# Loaded once per process, on the first invocation
_CONFIG: Optional[RotatorConfig] = None


def _get_config() -> RotatorConfig:
    global _CONFIG

    if _CONFIG is None:
        _CONFIG = load_config()
    return _CONFIG


def decode_org_name(event: Dict[str, Any]) -> str:
    """
    Extract the org name from a Pub/Sub event.

    Pub/Sub delivers ``data`` base64 encoded; its whole UTF-8 content is the
    org name.

    Raises:
        InvalidOrganizationError: If data is missing, not base64 or not UTF-8
    """
    data = event.get("data") or ""
    try:
        return base64.b64decode(data, validate=True).decode("UTF-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise InvalidOrganizationError(f"Could not decode org name from message: {e}") from e


def handle_pubsub(event: Dict[str, Any], context: Any = None) -> RotationResult:
    """
    Rotate the registration token of the org named in the message.

    Any failure, including ones from outside the rotation steps such as
    missing application default credentials, is logged at CRITICAL and
    re-raised so the invocation fails.
    """
    try:
        org = decode_org_name(event)
        handler = RotationHandler(_get_config())
        return handler.rotate(org)
    except RotationError as e:
        logger.critical(f"Registration token rotation failed: {e}")
        raise
    except Exception as e:
        logger.critical(f"Registration token rotation failed unexpectedly: {e!r}", exc_info=True)
        raise

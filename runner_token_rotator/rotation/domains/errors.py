"""Exceptions raised by the rotation steps.

Steps never terminate the process themselves. The entrypoint and the CLI
decide what a failure means for the invocation.
"""


class RotationError(Exception):
    """Base class for every rotation failure."""
    pass


class ConfigError(RotationError):
    """Configuration error exception."""
    pass


class InvalidOrganizationError(RotationError):
    """Organization name is empty or otherwise unusable."""
    pass


class SecretAccessError(RotationError):
    """Admin token could not be read from Secret Manager."""
    pass


class SecretListError(RotationError):
    """Registration token versions could not be listed."""
    pass


class SecretDestroyError(RotationError):
    """A registration token version could not be destroyed."""
    pass


class SecretWriteError(RotationError):
    """The new registration token could not be stored."""
    pass


class TokenExchangeError(RotationError):
    """GitHub did not hand out a registration token."""
    pass

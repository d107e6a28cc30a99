"""Exit codes for the publish CLI.

Each failure kind of a publish run maps onto one of these codes, so a CI host
can tell a broken build apart from a rejected credential without parsing logs.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes.

    These values are used as process exit codes and should remain stable:
    - 0: Success (the run reached Done)
    - 1: Reserved for unexpected crashes (uncaught exceptions)
    - 2: Environment error (missing variables, missing git/docker)
    - 3: Build error (image build or tag failed)
    - 4: Network error (source fetch or image push failed)
    - 5: Auth error (registry rejected the credential)
    """

    OK = 0
    ENV_ERROR = 2
    BUILD_ERROR = 3
    NETWORK_ERROR = 4
    AUTH_ERROR = 5

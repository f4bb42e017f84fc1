"""relaymap exception hierarchy.

Typed exceptions for the runtime failure categories, so that callers catch
specific errors instead of bare ``except Exception`` and
``CancelledError`` propagates untouched.

Exception hierarchy:

```text
RelayMapError (base -- never raised directly)
├── ConfigurationError     -- config validation, missing file, bad YAML
└── ConnectivityError      -- relay unreachable, handshake/network failures
    └── RelayTimeoutError  -- connection attempt timed out
```

Precondition violations (mismatched digest lengths, negative ``n``,
malformed records) are programmer errors and raise plain ``ValueError``
from the models and utils layers instead.

See Also:
    [AiohttpTransport][relaymap.utils.transport.AiohttpTransport]: Raises
        [ConnectivityError][relaymap.core.exceptions.ConnectivityError] on
        failed connections.
    [Discoverer][relaymap.services.discoverer.Discoverer]: Catches
        connectivity errors per bootstrap relay.
"""

from __future__ import annotations


class RelayMapError(Exception):
    """Base exception for all relaymap errors.

    Never raised directly -- always use a specific subclass.
    """


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigurationError(RelayMapError):
    """Invalid or missing configuration (YAML file, CLI flags).

    See Also:
        [RelayMapConfig.from_yaml()][relaymap.services.configs.RelayMapConfig.from_yaml]:
            Raises this on unreadable or invalid configuration files.
    """


# ---------------------------------------------------------------------------
# Connectivity
# ---------------------------------------------------------------------------


class ConnectivityError(RelayMapError):
    """Base for all relay/network connectivity errors.

    See Also:
        [RelayTimeoutError][relaymap.core.exceptions.RelayTimeoutError]:
            Connection attempt timed out.
    """


class RelayTimeoutError(ConnectivityError):
    """Connection attempt timed out."""

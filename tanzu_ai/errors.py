"""Error types surfaced by the Tanzu AI Services provider.

Only configuration and construction failures ever reach the caller;
catalog and binding parse problems are treated as absence, not errors.
"""

from __future__ import annotations


class TanzuError(Exception):
    """Base class for fatal provider initialization errors."""


class ConfigurationError(TanzuError):
    """No usable credentials from explicit configuration or VCAP_SERVICES."""


class ConstructionError(TanzuError):
    """The authenticated HTTP client could not be built (e.g. bad host)."""

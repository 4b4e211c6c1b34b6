"""Access to the ``[custom]`` section of the active domain's configuration."""

from protean.utils.globals import current_domain


def custom_setting(key: str, default=None):
    """Return ``[custom] <key>`` from the active domain config, or ``default``."""
    custom = current_domain.config.get("custom") or {}
    return custom.get(key, default)

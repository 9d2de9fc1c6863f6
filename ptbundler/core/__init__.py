"""Settings and logging shared by every bundler module."""

from ptbundler.core.config import Settings, get_settings
from ptbundler.core.logging import bind_bundle_id, configure_structlog

__all__ = ["Settings", "get_settings", "bind_bundle_id", "configure_structlog"]

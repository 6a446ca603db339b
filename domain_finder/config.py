"""
Configuration module with environment variable handling and validation.

Values are read once from the process environment (optionally seeded from a
.env file) and handed explicitly to the components that need them.
"""

import os
import logging
from typing import Dict, List, Any, Optional

from dotenv import load_dotenv

# Initialize logger
log = logging.getLogger(__name__)

# Default configuration values
DEFAULT_INPUT = "input.csv"
DEFAULT_OUTPUT = "output.csv"
DEFAULT_CONCURRENCY = 5
DEFAULT_DELAY_MS = 2000
DEFAULT_NAV_TIMEOUT_MS = 30_000


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""
    pass


class Config:
    """Run configuration resolved from the environment."""

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize configuration with default values and environment overrides.

        Args:
            env_file: Optional path to .env file to load
        """
        # Load environment variables from .env file
        if env_file:
            if not os.path.isfile(env_file):
                raise ConfigurationError(f"Config file not found: {env_file}")
            load_dotenv(env_file, override=True)
        else:
            load_dotenv()

        # File paths
        self.input_path = os.getenv("INPUT", DEFAULT_INPUT)
        self.output_path = os.getenv("OUTPUT", DEFAULT_OUTPUT)

        # Concurrency and throttling
        self.concurrency = self._parse_int("CONCURRENCY", DEFAULT_CONCURRENCY)
        self.delay_ms = self._parse_int("DELAY", DEFAULT_DELAY_MS)

        # Browser settings
        self.nav_timeout_ms = self._parse_int("NAV_TIMEOUT", DEFAULT_NAV_TIMEOUT_MS)
        self.headless = self._parse_bool("HEADLESS", True)
        self.user_agent = os.getenv("USER_AGENT", "").strip() or None

    def _parse_int(self, env_var: str, default: int) -> int:
        """
        Parse an integer environment variable.

        Range checks are left to validate() so that an out-of-range value is
        reported instead of silently replaced.

        Args:
            env_var: Environment variable name
            default: Default value if not set

        Returns:
            Parsed integer value
        """
        raw = os.getenv(env_var, "").strip()
        if not raw:
            return default
        try:
            return int(raw)
        except ValueError:
            log.warning("Invalid %s value %r, using default %d", env_var, raw, default)
            return default

    def _parse_bool(self, env_var: str, default: bool) -> bool:
        """
        Parse a boolean environment variable.

        Args:
            env_var: Environment variable name
            default: Default value if not set

        Returns:
            Parsed boolean value
        """
        value = os.getenv(env_var, "")
        if not value:
            return default
        return value.lower() in {"1", "true", "yes", "y", "on"}

    def as_dict(self) -> Dict[str, Any]:
        """
        Return configuration as a dictionary.

        Returns:
            Dictionary of configuration values
        """
        return {k: v for k, v in self.__dict__.items() if not k.startswith('_')}

    def validate(self) -> List[str]:
        """
        Validate configuration and return a list of error messages.

        Returns:
            List of error messages, empty if valid
        """
        errors = []

        if self.concurrency < 1:
            errors.append("CONCURRENCY must be at least 1")

        if self.delay_ms < 0:
            errors.append("DELAY must not be negative")

        if self.nav_timeout_ms <= 0:
            errors.append("NAV_TIMEOUT must be positive")

        if not self.input_path:
            errors.append("INPUT is missing")

        if not self.output_path:
            errors.append("OUTPUT is missing")

        return errors

    def validate_or_raise(self) -> None:
        """
        Validate configuration and raise an exception if invalid.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        errors = self.validate()
        if errors:
            error_msg = "Configuration errors: " + ", ".join(errors)
            log.error(error_msg)
            raise ConfigurationError(error_msg)

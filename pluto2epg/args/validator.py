"""
Argument validation module for pluto2epg

Handles validation of command-line arguments including guide hours and the
playlist country suffix.
"""

import re
from typing import Optional, Tuple


class ArgumentValidator:
    """Validates command-line arguments"""

    HOURS_PATTERN = re.compile(r"^[1-9]$|^1[0-9]$|^2[0-4]$")  # 1-24 hours
    COUNTRY_PATTERN = re.compile(r"^[a-z]{2}$")

    @classmethod
    def validate_hours(cls, hours: Optional[int]) -> Tuple[bool, Optional[str]]:
        """
        Validate hours parameter

        Args:
            hours: Length of the guide window in hours

        Returns:
            Tuple of (is_valid, error_message)
        """
        if hours is None:
            return True, None

        if not cls.HOURS_PATTERN.match(str(hours)):
            return False, f"Parameter [--hours] must be 1-24, got: {hours}"

        return True, None

    @classmethod
    def validate_country(cls, country: Optional[str]) -> Tuple[bool, Optional[str]]:
        """
        Validate country suffix (two lowercase letters, e.g. ca, us)

        Args:
            country: Country suffix appended to tvg-id values

        Returns:
            Tuple of (is_valid, error_message)
        """
        if country is None:
            return True, None

        if not cls.COUNTRY_PATTERN.match(country):
            return False, f"Parameter [--country] must be two lowercase letters, got: {country}"

        return True, None

    @staticmethod
    def validate_timeout(timeout: Optional[int]) -> Tuple[bool, Optional[str]]:
        if timeout is None or timeout > 0:
            return True, None
        return False, f"Parameter [--timeout] must be positive, got: {timeout}"

"""
Validation utilities for the Dealer Listings API.
Shared by the request schemas and the listing query builder.
"""

from typing import Any, Optional, Tuple

from dealer_listings.utils.exceptions import ValidationError


TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
FALSE_VALUES = frozenset({"false", "0", "no", "off"})

# Largest row offset a signed 64-bit database integer can hold
MAX_OFFSET = 2 ** 63 - 1


class ValidationUtils:
    """
    Utility class for common validation operations.
    Provides reusable validation methods for various data types.
    """

    @staticmethod
    def validate_flag(value: Any, field_name: str) -> int:
        """
        Parse a boolean-like value into 0 or 1.

        Accepts bools, the integers 0 and 1, and the strings
        true/false, 1/0, yes/no, on/off (case-insensitive).

        Raises:
            ValidationError: If the value is not boolean-like
        """
        if isinstance(value, bool):
            return int(value)

        if isinstance(value, int):
            if value in (0, 1):
                return value
            raise ValidationError(f"{field_name} must be a boolean (0 or 1)")

        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized in TRUE_VALUES:
                return 1
            if normalized in FALSE_VALUES:
                return 0

        raise ValidationError(f"{field_name} must be a boolean (true/false or 1/0)")

    @staticmethod
    def validate_integer(
        value: Any,
        field_name: str,
        min_value: Optional[int] = None,
        max_value: Optional[int] = None
    ) -> int:
        """
        Validate integer value.

        Args:
            value: Value to validate
            field_name: Name of the field for error messages
            min_value: Minimum allowed value
            max_value: Maximum allowed value

        Returns:
            Valid integer

        Raises:
            ValidationError: If integer is invalid
        """
        if value is None:
            raise ValidationError(f"{field_name} is required")

        if isinstance(value, bool):
            raise ValidationError(f"{field_name} must be a valid integer")

        try:
            int_value = int(value)
        except (ValueError, TypeError):
            raise ValidationError(f"{field_name} must be a valid integer")

        if min_value is not None and int_value < min_value:
            raise ValidationError(f"{field_name} must be at least {min_value}")

        if max_value is not None and int_value > max_value:
            raise ValidationError(f"{field_name} cannot exceed {max_value}")

        return int_value

    @staticmethod
    def validate_pagination(
        page: Any,
        limit: Any,
        max_limit: int = 100
    ) -> Tuple[int, int]:
        """
        Validate pagination parameters.

        page and limit must both be at least 1; a limit above max_limit is clamped.
        The resulting offset must fit in MAX_OFFSET.

        Returns:
            Tuple of validated page and limit

        Raises:
            ValidationError: If page or limit is below 1 or not an integer, or the page is out of range
        """
        validated_page = ValidationUtils.validate_integer(page, "page", min_value=1)
        validated_limit = ValidationUtils.validate_integer(limit, "limit", min_value=1)

        validated_limit = min(validated_limit, max_limit)

        if (validated_page - 1) * validated_limit > MAX_OFFSET:
            raise ValidationError(
                "page is out of range",
                field_errors=[{"field": "page", "message": "offset exceeds the supported range"}]
            )

        return validated_page, validated_limit

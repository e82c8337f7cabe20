"""
Validators for order data.
"""

import re
from typing import Optional, Tuple


class TextValidator:
    """Free-text fields (name, address): anything non-empty is accepted."""

    @classmethod
    def validate(cls, value: Optional[str]) -> Tuple[bool, Optional[str], Optional[str]]:
        """
        Returns:
            Tuple of (is_valid, cleaned_value, error_message)
        """
        value = (value or "").strip()
        if not value:
            return False, None, "This field cannot be empty"
        return True, value, None


class PhoneValidator:
    """Validate phone numbers typed as text."""

    # Digits with the usual separators, optional leading plus
    PHONE_PATTERN = re.compile(r'^\+?[\d\s\-\(\)]+$')

    MIN_DIGITS = 7
    MAX_DIGITS = 15

    @classmethod
    def validate(cls, phone: Optional[str]) -> Tuple[bool, Optional[str], Optional[str]]:
        """
        Validate a phone number and strip separators.

        Returns:
            Tuple of (is_valid, normalized_phone, error_message)
        """
        phone = (phone or "").strip()

        if not phone:
            return False, None, "Phone number cannot be empty"

        if not cls.PHONE_PATTERN.match(phone):
            return False, None, "Phone number may only contain digits, spaces and dashes"

        digits = re.sub(r"\D", "", phone)
        if not cls.MIN_DIGITS <= len(digits) <= cls.MAX_DIGITS:
            return False, None, "Phone number has a wrong length"

        normalized = f"+{digits}" if phone.startswith("+") else digits
        return True, normalized, None


# Country prefixes written in front of a local number that starts with 0
COUNTRY_PREFIXES = ("0098", "+98", "98")

# Subscriber digits after the country code (912 111 1111)
LOCAL_DIGITS = 10


def normalize_phone(phone: Optional[str]) -> str:
    """
    Canonical local form used to match a phone across sources.

    "+98 912 111 1111", "989121111111" and "09121111111" all become
    "09121111111".
    """
    phone = re.sub(r"[\s\-\(\)]", "", phone or "")
    for prefix in COUNTRY_PREFIXES:
        rest = phone[len(prefix):]
        if phone.startswith(prefix) and len(rest) == LOCAL_DIGITS and not rest.startswith("0"):
            return f"0{rest}"
    return phone

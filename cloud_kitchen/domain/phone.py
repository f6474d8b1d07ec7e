import re

from cloud_kitchen.core.errors import ValidationError

MIN_DIGITS = 7
MAX_DIGITS = 15
LOCAL_NUMBER_LENGTH = 10

_SEPARATORS = re.compile(r"[\s\-().]")


def normalize_phone(raw: str, default_country_code: str = "91") -> str:
    """Reduce a customer-entered phone number to an E.164-like "+<digits>" key.

    "+91 98765-43210", "0091 9876543210", "09876543210" and "9876543210" all
    map to "+919876543210" with the default country code "91".
    """
    value = _SEPARATORS.sub("", (raw or "").strip())
    if value.startswith("00"):
        value = "+" + value[2:]

    has_plus = value.startswith("+")
    digits = value[1:] if has_plus else value
    if not digits.isdigit():
        raise ValidationError("Phone number may only contain digits", field="customerPhone")

    if not has_plus:
        if len(digits) == LOCAL_NUMBER_LENGTH + 1 and digits.startswith("0"):
            digits = digits[1:]
        if len(digits) == LOCAL_NUMBER_LENGTH:
            digits = default_country_code + digits

    if not MIN_DIGITS <= len(digits) <= MAX_DIGITS:
        raise ValidationError("Phone number has an invalid length", field="customerPhone")
    return "+" + digits

from cloud_kitchen.core.errors import ValidationError
from cloud_kitchen.domain.schemas import PromoResponse

# code -> (discount, is_percentage); flat discounts are in rupees
VALID_PROMOS = {
    "SAVE50": (50, False),
    "SAVE100": (100, False),
    "WELCOME": (75, False),
    "FIRST20": (20, True),
}


def validate_promo(code: str) -> PromoResponse:
    normalized = code.strip().upper()
    if normalized not in VALID_PROMOS:
        raise ValidationError("Invalid promo code", field="code")
    discount, is_percentage = VALID_PROMOS[normalized]
    return PromoResponse(code=normalized, discount=discount, is_percentage=is_percentage)

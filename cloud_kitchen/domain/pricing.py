from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Tuple, Union

from cloud_kitchen.core.errors import ValidationError

Amount = Union[str, int, float, Decimal]


def to_decimal(value: Amount, field: str = "price") -> Decimal:
    try:
        # str() first so floats keep their printed value
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"'{value}' is not a valid amount", field=field)
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"'{value}' is not a valid amount", field=field)
    return amount


def format_amount(amount: Decimal) -> str:
    """Render money without float noise: 350 -> "350", 199.50 -> "199.5"."""
    if amount == amount.to_integral_value():
        return str(amount.quantize(Decimal(1)))
    return format(amount.normalize(), "f")


def unit_price(product, selected_size: Optional[str]) -> Decimal:
    """Price of one unit of ``product``, honouring a chosen size variant.

    Products that define sizes are only sold by size; their base price is
    never charged.
    """
    sizes = product.sizes or []
    if selected_size is None:
        if sizes:
            raise ValidationError(f"Choose a size for {product.name}", field="items")
        return to_decimal(product.price)
    for size in sizes:
        if size.get("label") == selected_size:
            return to_decimal(size.get("price"))
    raise ValidationError(
        f"Size '{selected_size}' is not offered for {product.name}", field="items"
    )


def order_total(lines: Iterable[Tuple[Decimal, int]]) -> Decimal:
    return sum((price * quantity for price, quantity in lines), Decimal(0))

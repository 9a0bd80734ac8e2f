# storefront/models/money.py

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from storefront.errors import InvalidPriceError

Money = Decimal

def D(x) -> Money:
    """Convertit str|int|float|Decimal en Decimal (via str pour éviter les artefacts binaires)."""
    if isinstance(x, Decimal):
        return x
    try:
        return Decimal(str(x if x is not None else "0"))
    except InvalidOperation:
        return Decimal("NaN")

def ensure_valid_price(price: Money) -> Money:
    """Refuse les prix négatifs ou non finis (NaN, Infinity)."""
    price = D(price)
    if not price.is_finite() or price < 0:
        raise InvalidPriceError(f"Prix invalide: {price}")
    return price

def to_minor_units(amount: Money) -> int:
    # centimes, arrondi commercial
    return int((D(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

def format_amount(amount: Money) -> str:
    """Affichage sans zéros superflus: 25.00 -> '25', 25.50 -> '25.5'."""
    normalized = D(amount).normalize()
    if normalized == 0:
        return "0"
    return format(normalized, "f")

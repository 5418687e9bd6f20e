"""Unit conversion to grams."""

# Volumes assume a water-like density. Good enough for estimates.
_GRAMS_PER_UNIT: dict[str, float] = {
    "g": 1.0,
    "kg": 1000.0,
    "oz": 28.35,
    "lb": 453.592,
    "ml": 1.0,
    "l": 1000.0,
    "cup": 240.0,
    "tbsp": 15.0,
    "tsp": 5.0,
    "fl oz": 30.0,
}

_UNIT_ALIASES: dict[str, str] = {
    "gram": "g",
    "grams": "g",
    "gr": "g",
    "kilogram": "kg",
    "kilograms": "kg",
    "kgs": "kg",
    "ounce": "oz",
    "ounces": "oz",
    "pound": "lb",
    "pounds": "lb",
    "lbs": "lb",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "liter": "l",
    "liters": "l",
    "litre": "l",
    "litres": "l",
    "cups": "cup",
    "c": "cup",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "tbs": "tbsp",
    "tbsp.": "tbsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "tsp.": "tsp",
    "fluid ounce": "fl oz",
    "fluid ounces": "fl oz",
    "fl. oz": "fl oz",
    "oz.": "oz",
    "lb.": "lb",
}


def canonical_unit(unit: str) -> str:
    """Map a unit spelling onto the canonical set; unknown units pass through."""
    normalized = unit.strip().lower()
    return _UNIT_ALIASES.get(normalized, normalized)


def grams_per_unit(unit: str) -> float:
    """Return the grams factor for a unit, 1.0 for unknown or empty units."""
    return _GRAMS_PER_UNIT.get(canonical_unit(unit), 1.0)


def to_grams(quantity: float, unit: str) -> float:
    """Convert a quantity in ``unit`` to grams."""
    return quantity * grams_per_unit(unit)

"""Built-in keyword patterns used to seed the fuzzy keyword matcher.

Keywords are lowercase literals compared against the cleaned (unstemmed)
words of a description. Callers may extend them at runtime with
:meth:`ExpenseClassifier.add_keywords`.
"""

from __future__ import annotations

from .models import Category

DEFAULT_KEYWORDS: dict[Category, tuple[str, ...]] = {
    Category.FOOD: (
        "restaurant", "dinner", "lunch", "breakfast", "cafe", "coffee",
        "pizza", "burger", "meal", "snack", "bakery", "takeout", "sushi",
        "food", "grocery", "mcdonalds", "starbucks", "brunch",
    ),
    Category.TRAVEL: (
        "flight", "airline", "airport", "hotel", "taxi", "uber", "lyft",
        "train", "bus", "fare", "travel", "trip", "fuel", "petrol",
        "parking", "metro", "subway", "toll",
    ),
    Category.SHOPPING: (
        "amazon", "walmart", "target", "mall", "clothes", "clothing",
        "shoes", "store", "shop", "shopping", "electronics", "purchase",
        "macys", "ikea", "order",
    ),
    Category.ENTERTAINMENT: (
        "movie", "cinema", "netflix", "spotify", "concert", "game",
        "theater", "theatre", "show", "music", "streaming", "bowling",
        "party", "festival",
    ),
    Category.UTILITIES: (
        "electricity", "electric", "water", "gas", "internet", "phone",
        "bill", "utility", "rent", "wifi", "cable", "mobile", "broadband",
        "trash",
    ),
    Category.HEALTHCARE: (
        "doctor", "hospital", "pharmacy", "medicine", "medical", "dental",
        "dentist", "clinic", "prescription", "health", "insurance",
        "vitamins", "therapy", "checkup",
    ),
}

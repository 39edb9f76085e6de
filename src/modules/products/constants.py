"""Product constants."""

NOT_SPECIFIED = "Not specified"

# Specification keys always present in API output.
DEFAULT_SPECIFICATIONS = ("material", "color")

MIN_RATING = 1
MAX_RATING = 5


class ProductSort:
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    NEWEST = "newest"

    ORDERING = {
        PRICE_ASC: ("price", "-created_at"),
        PRICE_DESC: ("-price", "-created_at"),
        NEWEST: ("-created_at",),
    }

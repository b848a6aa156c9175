# shipping is waived strictly above the threshold
FREE_SHIPPING_THRESHOLD = 500_000
SHIPPING_FEE = 5_000

# upper bound of the catalog price filter
PRICE_CEILING = 5_000_000

CATEGORY_ALL = "all"
CONFIGURATOR_CATEGORY = "Configurateur"

# navigation category id -> labels found in Product.category
CATEGORY_LABELS = {
    "gaming": ("Gaming",),
    "laptop": ("Laptops",),
    "components": ("Composants",),
    "peripherals": ("Périphériques",),
    "configurateur": (CONFIGURATOR_CATEGORY,),
}

# items not labelled with the category but described with one of these words
CATEGORY_KEYWORDS = {
    "gaming": ("gamer",),
}

# home page pills: description and name hints used instead of the label
HOME_PILL_HINTS = {
    "gaming": {"description": ("gamer",), "name": ("rtx",)},
}

PAYMENT_CHANNELS = {
    "momo": "Mobile Money (MTN)",
    "airtel": "Airtel Money",
}

CONFIGURATOR_STEPS = ("chassis", "cpu-mobile", "ram-mobile", "storage", "os")

TIME_SLOTS = ("09:00", "10:00", "11:00", "14:00", "15:00", "16:00", "17:30")
BOOKING_WINDOW_DAYS = 7

# persistence keys
CART_KEY = "cart"
USER_KEY = "user"

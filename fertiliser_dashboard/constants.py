APP_NAME = "Fertiliser Dashboard"
BUSINESS_TITLE = "LAKSHMI PRIYA FERTILISERS"
STYLE_FILE = "resources/styles.qss"

DATA_DIR = "data"
DB_FILE_NAME = "fertiliser.db"
IMAGES_DIR = "product_images"
REPORTS_DIR = "reports"
DATA_DIR_ENV = "FERTILISER_DASHBOARD_DATA_DIR"

TABLE_SCHEMA_VERSION = "schema_version"
SCHEMA_VERSION = "1.0.0"

CURRENCY_SYMBOL = "₹"

PRODUCT_CATEGORIES = (
    "Insecticide",
    "Herbicide",
    "Fungicide",
    "Growth Promoter",
)

QUANTITY_UNITS = (
    "8g",
    "100ml",
    "200ml",
    "250ml",
    "300ml",
    "500ml",
    "1L",
    "2kg",
    "2.5kg",
    "5kg",
    "100g",
    "500g",
    "1kg",
)

INVOICE_NUMBER_PREFIX = "INV"

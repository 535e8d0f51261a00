# Default pagination
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100

# Entity stored by the importer and exposed by the CRUD API
ENTITY_NAME = "Trasporto"

# Columns of the source workbook that are imported; anything else is ignored
ALLOWED_HEADERS = [
    "#",
    "CLIENTE",
    "DATA",
    "MODELLO",
    "TARGA",
    "REGIONE CARICO",
    "CARICO",
    "SCARICO",
    "NOTE",
    "PAGAMENTO",
    "AUTISTA CARICO",
    "AUTISTA SCARICO",
    "INDIRIZZO RITIRO",
    "n° FATTURA",
    "DEPOSITO",
]

# Driver names may be all digits in the sheet, they are always text
FORCE_TEXT_HEADERS = ["AUTISTA CARICO", "AUTISTA SCARICO"]

INFERENCE_THRESHOLD = 0.6
FALLBACK_FIELD_NAME = "field"
FIELD_PREFIX = "f_"

# Annotation fields every record accepts besides the imported columns
NOTE_FIELD = "note"
ROW_COLOR_FIELD = "row_color"

# Fields used by the CRUD filters
CLIENT_FIELD = "cliente"
PLATE_FIELD = "targa"
DRIVER_FIELDS = ["autista_carico", "autista_scarico"]
REGION_FIELD = "regione_carico"
DATE_FIELD = "data"
TEXT_SEARCH_FIELDS = ["cliente", "modello", "targa", "carico", "scarico", "note", "indirizzo_ritiro"]

RECENT_DAYS = 7

LOG_EXCLUDE_PATHS = [
    "/health",
    "/docs",
    "/openapi.json",
]

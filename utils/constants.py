APP_NAME = "Collector's Dream"
APP_WIDTH = 1200
APP_HEIGHT = 750
DB_FILE = "collection.db"
CATEGORIES_FILE = "categories.json"
SETTINGS_FILE = "settings.json"

FIELD_TYPES = ("text", "number", "boolean")

FIELD_TYPE_LABELS = {
    "text": "Text",
    "number": "Number",
    "boolean": "Boolean (Yes/No)",
}

FIELD_DEFAULTS = {
    "text": "",
    "number": 0,
    "boolean": False,
}

# Keys that belong to the record envelope, never to a category schema.
RESERVED_FIELD_NAMES = ("_id", "__v", "id", "owner_id", "userId", "category", "created_at", "updated_at")

NOT_SET = "Not set"

MIGRATION_MAX_WORKERS = 4

DEFAULT_SETTINGS = {
    "dark_mode": False,
    "theme": "default",
}

# settings.json theme name → customtkinter built-in color theme
THEMES = {
    "default": "blue",
    "green": "green",
    "dark-blue": "dark-blue",
}

SEVERITY_COLORS = {
    "error":   "#F44336",
    "warning": "#FF9800",
    "info":    "#2196F3",
    "success": "#4CAF50",
}

"""Fixed names and markers of the I18N translation file format."""

ROOT_TAG = "I18N"
ENTRY_TAG = "Entry"
KEY_TAG = "Key"
VALUE_TAG = "Value"
CONTEXT_TAG = "Context"
CONTEXT_ID_ATTR = "id"
LANG_ATTR = "lang"

FOUNDING_HEADING = " Found in:"
DEPRECATED_COMMENT = " DEPRECATED "

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'
OUTPUT_ENCODING = "utf-8"
INDENT = "  "

# Omitted-languages value on a Key element meaning "no translation needed".
ALL_LANGUAGES = "*"

DEFAULT_LOCALIZE_FUNCTIONS = ("localize", "localize_format")
CONTEXT_FUNCTION = "context"
CONTEXT_SEPARATOR = "."

DEFAULT_INPUT_PATTERN = "*.py"

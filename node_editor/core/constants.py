APP_NAME = "node-editor"
APP_VERSION = "0.4.0"

DIAG_LOG_MAX_BYTES = 512 * 1024
DIAG_LOG_KEEP_BYTES = 256 * 1024
DIAG_LOG_FILENAME = "node_editor_diagnostics.log"
DIAG_LOG_ENTRY_MAX_CHARS = 12000
RUNTIME_DIR_NAME = "NodeEditor"
SETTINGS_FILENAME = "node_editor_settings.json"

# Row key reserved for the graph's "details" link; never edited.
DETAILS_ROW_KEY = "details"
# Row type tags that mark nested containers rather than leaf fields.
CONTAINER_ROW_TYPES = ("array", "object")

ROOT_PATH_SYMBOL = "$"
EMPTY_NODE_DISPLAY = "{}"
DISPLAY_INDENT = 2

DEFAULT_DOCUMENT_INDENT = 2
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVEL_CHOICES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

REPLACE_WRITE_ATTEMPTS = 5
REPLACE_WRITE_BACKOFF = 0.08
REPLACE_TEMP_PREFIX = ".node_editor_tmp_"

STATUS_SAVED = "Saved"
STATUS_SAVE_FAILED = "Save failed"
STATUS_SAVE_BUSY = "Save already in progress"

"""PME - app identity and editor defaults.

Plain constants only. Settings, the editor core and the window title read them.
"""

APP_NAME = "PolyMapEditor"
APP_SHORT = "PME"

# Semantic version shown in the window title.
APP_VERSION = "0.1.0"
# Settings schema version written to settings.json.
SETTINGS_SCHEMA_VERSION = 1

# Defaults de interacción.
# NOTE: 16 ms ~ un frame a 60 Hz; 0 desactiva el throttle.
DEFAULT_THROTTLE_MS = 16.0
DEFAULT_LONG_PRESS_MS = 500
DEFAULT_HIT_RADIUS_PX = 12

# Vértices mínimos para cerrar / poder borrar en fase de edición.
MIN_POLYGON_POINTS = 3

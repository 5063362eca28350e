# Application Name
APP_NAME = "sticky-notes"
APP_DISPLAY_NAME = "Sticky Notes"

# Directory names (resolved against the XDG base dirs in utils.py)
NOTES_DIR_NAME = "notes_data"
NOTES_DIR_MODE = 0o755
SETTINGS_FILE_NAME = "settings.ini"
LOG_FILE_NAME = "sticky-notes.log"

# Record file suffixes: <id>_state and <id>_text
STATE_SUFFIX = "_state"
TEXT_SUFFIX = "_text"

# Note geometry
MIN_NOTE_WIDTH = 200
MIN_NOTE_HEIGHT = 75
DEFAULT_NOTE_WIDTH = 250
DEFAULT_NOTE_HEIGHT = 180

# Used when a stored font size is NaN
FALLBACK_FONT_SIZE = 10

# Font
DEFAULT_FONT_SIZE = 12
FONT_SIZE_STEP = 2
MIN_FONT_SIZE_EXCLUSIVE = 1 # A change is rejected if the result is <= this
FONT_FAMILY = "Cantarell, sans-serif"

# Colors ("r,g,b" strings in the state record)
DEFAULT_NOTE_COLOR = (245, 176, 65)
LIGHT_TEXT_THRESHOLD = 250 # r+g+b above this gets black text
DARK_TEXT_COLOR = "#000000"
LIGHT_TEXT_COLOR = "#ffffff"
NOTE_ALPHA = 0.8
NOTE_ALPHA_IDLE = 0.6

PRESET_COLORS = [
    ("Red", (240, 80, 80)),
    ("Green", (100, 200, 100)),
    ("Blue", (90, 90, 255)),
    ("Yellow", (255, 180, 60)),
    ("Purple", (200, 100, 200)),
    ("Gray", (150, 150, 150)),
    ("White", (255, 255, 255)),
]

FONT_SIZE_ACTIONS = [
    ("Decrease", -FONT_SIZE_STEP),
    ("Increase", FONT_SIZE_STEP),
]

# New note placement (rejection sampling)
PLACEMENT_ATTEMPTS = 15
PLACEMENT_TOLERANCE_X = 230
PLACEMENT_TOLERANCE_Y = 100
PLACEMENT_MARGIN_X = 300 # Candidates are drawn from [0, width - margin)
PLACEMENT_MARGIN_Y = 100

# Used when no screen is available (tests, headless runs)
FALLBACK_WORK_AREA = (1920, 1080)

# Delay between the visual hide-all and detaching notes from the desktop layer
HIDE_DETACH_DELAY_MS = 100

# State record keys
STATE_KEY_X = "x"
STATE_KEY_Y = "y"
STATE_KEY_COLOR = "color"
STATE_KEY_WIDTH = "width"
STATE_KEY_HEIGHT = "height"
STATE_KEY_FONT_SIZE = "fontSize"
STATE_KEY_ENTRY_VISIBLE = "entryVisible"
STATE_KEY_IS_BOLD = "isBold"

STATE_KEYS = (
    STATE_KEY_X, STATE_KEY_Y, STATE_KEY_COLOR, STATE_KEY_WIDTH,
    STATE_KEY_HEIGHT, STATE_KEY_FONT_SIZE, STATE_KEY_ENTRY_VISIBLE, STATE_KEY_IS_BOLD
)

# --- For settings.ini (QSettings) ---
SETTINGS_KEY_DATA_DIR = "General/dataDir"
SETTINGS_KEY_DEFAULT_COLOR = "General/defaultColor"
SETTINGS_KEY_DEFAULT_FONT_SIZE = "General/defaultFontSize"
SETTINGS_KEY_SHOW_ON_STARTUP = "General/showOnStartup"

# Note Widget chrome
HEADER_BUTTON_ICON_SIZE = 16
PLACEHOLDER_TEXT = "Type here..."

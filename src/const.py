"""Constants for loadcompare."""

# Default configuration values
DEFAULT_WORKERS = 1
DEFAULT_STRICT_PAIRING = False
ENV_PREFIX = "LOADCOMPARE_"
CONFIG_FILE = "loadcompare.json"

# Logging configuration
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
PROGRESS_LOGGER = "src.loadcompare.progress"

# Library log levels
LIBRARY_LOG_LEVELS = {
    "matplotlib": "WARNING",
    "PIL": "WARNING",
}

# HTTP status codes counted as successful (vegeta semantics)
HTTP_SUCCESS_MIN = 200
HTTP_SUCCESS_MAX = 400

# Duration units in nanoseconds
NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

# Test durations are shown rounded to this step, e.g. 1m58.99s -> 2m0s
TEST_DURATION_ROUNDING = 3 * SECOND

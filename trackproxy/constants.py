"""Constants module for TrackProxy configuration.

Contains the cache defaults, user-facing error messages and the
separator used in upstream error signals.
"""

from typing import Dict, FrozenSet

from .enums import ErrorCategory, MessageLocale

# Response cache defaults
DEFAULT_CACHE_TTL_SECONDS = 10 * 60
DEFAULT_CACHE_MAX_ENTRIES = 10000
DEFAULT_CACHE_CLEANUP_INTERVAL_SECONDS = 60
DEFAULT_CACHE_PATH_PREFIX = "/api"

# Only these statuses can be reproduced from a stored body on a cache hit
CACHEABLE_STATUS_CODES: FrozenSet[int] = frozenset({200, 400})

CACHE_STATUS_HEADER = "X-Cache"

# Upstream client
DEFAULT_UPSTREAM_TIMEOUT_SECONDS = 15.0

# Upstream error signals look like "BUSY - connection timed out"
ERROR_SIGNAL_SEPARATOR = " - "

CLASSIFIED_ERROR_STATUS_CODE = 400

ERROR_MESSAGES: Dict[MessageLocale, Dict[ErrorCategory, str]] = {
    MessageLocale.English: {
        ErrorCategory.Busy: "Server overloaded, retry shortly.",
        ErrorCategory.Unavailable: "Server unavailable, try later.",
        ErrorCategory.Down: "Service degraded, try later.",
        ErrorCategory.Empty: "Service degraded, try later.",
        ErrorCategory.Parser: "Difficulty accessing upstream data, try later.",
        ErrorCategory.NoData: "No data available yet for this ID.",
    },
    MessageLocale.Portuguese: {
        ErrorCategory.Busy: "O servidor está sobrecarregado, tente novamente daqui a uns segundos.",
        ErrorCategory.Unavailable: "O servidor não está disponível de momento. Tente mais tarde.",
        ErrorCategory.Down: "De momento este serviço está com problemas. Tente mais tarde.",
        ErrorCategory.Empty: "De momento este serviço está com problemas. Tente mais tarde.",
        ErrorCategory.Parser: "De momento estamos com dificuldade em aceder à informação deste servidor. Tente mais tarde.",
        ErrorCategory.NoData: "Ainda não existe informação disponível para este ID.",
    },
}

# Validation messages for missing query parameters
MISSING_ID_MESSAGE = "ID must be passed in the query string!"
MISSING_POSTAL_CODE_MESSAGE = "Postalcode must be passed in the query string!"

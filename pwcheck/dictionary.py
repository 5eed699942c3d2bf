import csv
import logging
import threading

logger = logging.getLogger(__name__)

MIN_ENTRY_LENGTH = 3
MAX_ENTRY_LENGTH = 50
PROGRESS_EVERY = 100000

FALLBACK_SOURCE = "fallback seed list"

# Used when the corpus file cannot be read
FALLBACK_PASSWORDS = (
    "password", "password123", "123456", "123456789", "qwerty",
    "abc123", "password1", "admin", "letmein", "welcome",
    "monkey", "1234567890", "dragon", "sunshine", "princess",
)


def normalize_entry(value):
    """Lower-case and strip a raw corpus value; None if it is out of bounds."""
    value = value.strip().strip("\"'")
    if not MIN_ENTRY_LENGTH <= len(value) <= MAX_ENTRY_LENGTH:
        return None
    return value.lower()


class DictionaryStore:
    """Read-only snapshot of known common passwords.

    Membership goes through a frozenset; ``sample`` walks a tuple kept in load
    order, so iteration order is stable for the life of the store.
    """

    def __init__(self, entries, source, degraded=False):
        ordered = tuple(dict.fromkeys(entries))
        self._ordered = ordered
        self._members = frozenset(ordered)
        self.source = source
        self.degraded = degraded

    @classmethod
    def from_entries(cls, values, source="in-memory", degraded=False):
        normalized = (normalize_entry(v) for v in values)
        return cls((v for v in normalized if v is not None), source, degraded)

    @classmethod
    def fallback(cls):
        return cls.from_entries(FALLBACK_PASSWORDS, FALLBACK_SOURCE, degraded=True)

    def contains(self, candidate):
        return candidate in self._members

    __contains__ = contains

    def size(self):
        return len(self._ordered)

    __len__ = size

    def sample(self, limit=None):
        if limit is None or limit >= len(self._ordered):
            return self._ordered
        return self._ordered[:max(limit, 0)]

    def __iter__(self):
        return iter(self._ordered)

    def __repr__(self):
        return f"<DictionaryStore source={self.source!r} size={self.size()} degraded={self.degraded}>"


def _password_column(line):
    try:
        row = next(csv.reader([line]))
    except (csv.Error, StopIteration):
        return None
    if len(row) < 2 or not row[1]:
        return None
    return row[1]


def load_dictionary(path):
    """Build a store from a CSV file whose second column holds passwords.

    Blank, malformed and out-of-range rows are skipped. Raises ``OSError`` if
    the file cannot be read.
    """
    logger.info("Loading password dictionary from %s", path)
    entries = []
    processed = 0
    with open(path, "r", encoding="utf-8", errors="ignore", newline="") as fh:
        for line in fh:
            processed += 1
            if processed % PROGRESS_EVERY == 0:
                logger.debug("Processed %d lines", processed)
            if not line.strip():
                continue
            value = _password_column(line)
            if value is None:
                continue
            entry = normalize_entry(value)
            if entry is not None:
                entries.append(entry)

    store = DictionaryStore(entries, source=str(path))
    logger.info(
        "Dictionary loaded: %d lines processed, %d entries kept, %d unique",
        processed, len(entries), store.size(),
    )
    return store


class DictionaryLoader:
    """Process-wide handle that builds the dictionary exactly once.

    Concurrent callers of ``ensure_loaded`` block until the single build (or
    the fallback) finishes and all receive the same store.
    """

    def __init__(self, path):
        self.path = path
        self._store = None
        self._lock = threading.Lock()

    @property
    def loaded(self):
        return self._store is not None

    @property
    def store(self):
        return self._store

    def ensure_loaded(self):
        store = self._store
        if store is not None:
            return store
        with self._lock:
            if self._store is None:
                self._store = self._build()
            return self._store

    def _build(self):
        try:
            store = load_dictionary(self.path)
        except OSError as exc:
            logger.warning(
                "Dictionary source %s unavailable (%s); running in degraded mode with %d seed passwords",
                self.path, exc.__class__.__name__, len(FALLBACK_PASSWORDS),
            )
            return DictionaryStore.fallback()
        if store.size() == 0:
            logger.warning(
                "Dictionary source %s held no usable entries; running in degraded mode", self.path,
            )
            return DictionaryStore.fallback()
        return store

"""File-based storage implementation."""

import json
import os

from core.interfaces import WordSource

WORDS_FILE = 'words.json'
PATTERNS_FILE = 'patterns.json'


def default_data_dir() -> str:
    """Data directory from JARGON_DATA_DIR, or <project>/data."""
    # Project root is one level up from server/
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.environ.get('JARGON_DATA_DIR', os.path.join(project_root, 'data'))


class FileStorage(WordSource):
    """Reads the word list and pattern vocabulary from JSON files.

    words.json holds a list of words; patterns.json maps each pattern to a
    record with at least a "length" field.
    """

    def __init__(self, data_dir: str = None):
        self.data_dir = data_dir or default_data_dir()

    def _read_json(self, filename: str):
        path = os.path.join(self.data_dir, filename)
        if not os.path.exists(path):
            raise FileNotFoundError(f"Data file not found at {path}")
        with open(path, 'r', encoding='utf-8-sig') as f:
            return json.load(f)

    def load_words(self) -> list[str]:
        return self._read_json(WORDS_FILE)

    def load_vocabulary(self) -> dict:
        return self._read_json(PATTERNS_FILE)

    def save_words(self, words: list[str]) -> None:
        """Write the word list (used by tests and tools)."""
        os.makedirs(self.data_dir, exist_ok=True)
        with open(os.path.join(self.data_dir, WORDS_FILE), 'w', encoding='utf-8') as f:
            json.dump(words, f, indent=2)

    def save_vocabulary(self, vocabulary: dict) -> None:
        """Write the pattern vocabulary (used by tests and tools)."""
        os.makedirs(self.data_dir, exist_ok=True)
        with open(os.path.join(self.data_dir, PATTERNS_FILE), 'w', encoding='utf-8') as f:
            json.dump(vocabulary, f, indent=2)

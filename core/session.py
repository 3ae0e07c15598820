"""Learning session state machine for the find-words and repeat-after-me drills."""

import logging

from .config import (
    SIDE_ALL, MODE_FIND, MODE_REPEAT, MODES, REPEATS_BEFORE_HIDE
)
from .drills import DrillablePattern, build_drill_set, parse_pattern_key
from .errors import EmptySelection
from .utils import fold

logger = logging.getLogger(__name__)

STATE_IDLE = 'idle'
STATE_ACTIVE = 'active'

# Outcomes of a submission
IGNORED = 'ignored'        # blank input, no challenge, or nothing to answer
DUPLICATE = 'duplicate'    # same candidate word already tried for this challenge
CORRECT = 'correct'        # new word found / hidden word recalled
INCORRECT = 'incorrect'
REPEATED = 'repeated'      # visible word typed correctly, more repetitions needed
HIDDEN = 'hidden'          # visible word typed for the last time, now hidden


class FindProgress:
    """Per-challenge state of the find-words drill."""

    def __init__(self):
        self.found_words = set()
        self.attempted_words = set()
        self.revealed = False

    def to_dict(self, challenge: DrillablePattern | None) -> dict:
        words = challenge.words if challenge else ()
        data = {
            'found_words': [w.lower() for w in words if w.lower() in self.found_words],
            'found_count': len(self.found_words),
            'attempted_count': len(self.attempted_words),
            'total_words': len(words),
            'revealed': self.revealed,
            'words': None
        }
        if self.revealed:
            data['words'] = [{'word': w, 'found': w.lower() in self.found_words} for w in words]
        return data


class RepeatProgress:
    """Per-challenge state of the repeat-after-me drill."""

    def __init__(self):
        self.word_index = 0
        self.repeat_count = 0
        self.hide_word = False

    def is_complete(self, challenge: DrillablePattern) -> bool:
        return self.word_index >= challenge.count

    def to_dict(self, challenge: DrillablePattern | None) -> dict:
        total = challenge.count if challenge else 0
        complete = challenge is not None and self.is_complete(challenge)
        current_word = None
        if challenge and not complete and not self.hide_word:
            current_word = challenge.words[self.word_index]
        return {
            'word_index': self.word_index,
            'repeat_count': self.repeat_count,
            'hide_word': self.hide_word,
            'current_word': current_word,
            'remaining_repeats': 0 if self.hide_word else REPEATS_BEFORE_HIDE - self.repeat_count,
            'total_words': total,
            'complete': complete
        }


def _new_progress(mode: str):
    return FindProgress() if mode == MODE_FIND else RepeatProgress()


class LearningSession:
    """Pattern selection plus one running drill.

    Idle while patterns are being selected; active once started. The active
    challenge is looked up by key in the current drill set on every call, so
    a drill set rebuilt under the session can leave it unresolved. Operations
    on an unresolved challenge do nothing.
    """

    def __init__(self, records, side: str = SIDE_ALL, affix_query: str = None):
        self._records = list(records)
        self.side = side
        self.affix_query = affix_query
        self._drill_set = []
        self._by_key = {}
        self._rebuild_drill_set()

        self.selected = []
        self.state = STATE_IDLE
        self.mode = None
        self.challenge_index = 0
        self.correct_answers = 0
        self.total_attempts = 0
        self.progress = None

    # Drill set and selection

    def _rebuild_drill_set(self) -> None:
        drill_set = build_drill_set(self._records, self.side, self.affix_query)
        self._drill_set = drill_set
        self._by_key = {p.key: p for p in drill_set}

    def set_drill_filters(self, side: str = SIDE_ALL, affix_query: str = None) -> list[DrillablePattern]:
        """Change the side and affix filters and rebuild the drill set."""
        if self.state != STATE_IDLE:
            logger.debug(f"Ignoring drill filter change to {side}/{affix_query} during an active session")
            return list(self._drill_set)
        drill_set = build_drill_set(self._records, side, affix_query)
        self.side = side
        self.affix_query = affix_query
        self._drill_set = drill_set
        self._by_key = {p.key: p for p in drill_set}
        return list(drill_set)

    def refresh(self, records) -> None:
        """Swap in rebuilt pattern records after a reload."""
        self._records = list(records)
        self._rebuild_drill_set()
        if self.state == STATE_ACTIVE and self.current_challenge() is None:
            logger.warning("Active challenge no longer resolves after refresh")

    def drill_set(self) -> list[DrillablePattern]:
        return list(self._drill_set)

    def toggle_selection(self, key: str) -> bool:
        """Select or unselect a pattern key. Returns True if it is now selected."""
        parse_pattern_key(key)
        if self.state != STATE_IDLE:
            logger.debug(f"Ignoring selection change for {key} during an active session")
            return key in self.selected
        if key in self.selected:
            self.selected = [k for k in self.selected if k != key]
            return False
        self.selected = self.selected + [key]
        return True

    def select_all(self) -> list[str]:
        """Select every pattern of the current drill set."""
        if self.state == STATE_IDLE:
            self.selected = [p.key for p in self._drill_set]
        return list(self.selected)

    def clear_selection(self) -> None:
        if self.state == STATE_IDLE:
            self.selected = []

    # Lifecycle

    def start(self, mode: str = MODE_FIND) -> DrillablePattern | None:
        """Start drilling the selected patterns.

        Raises EmptySelection without touching any state when nothing is
        selected.
        """
        if mode not in MODES:
            raise ValueError(f"Unknown drill mode: {mode}")
        if not self.selected:
            raise EmptySelection()
        self.mode = mode
        self.state = STATE_ACTIVE
        self.challenge_index = 0
        self.correct_answers = 0
        self.total_attempts = 0
        self.progress = _new_progress(mode)
        logger.info(f"Started {mode} session with {len(self.selected)} patterns")
        return self.current_challenge()

    def reset(self) -> None:
        """End the session and go back to selection with nothing selected."""
        if self.state == STATE_ACTIVE:
            logger.info(f"Reset {self.mode} session at {self.get_score_display()}")
        self.state = STATE_IDLE
        self.selected = []
        self.mode = None
        self.challenge_index = 0
        self.correct_answers = 0
        self.total_attempts = 0
        self.progress = None

    def advance(self) -> DrillablePattern | None:
        """Move on to the next selected pattern, keeping the score."""
        if self.state != STATE_ACTIVE:
            return None
        self.challenge_index += 1
        self.progress = _new_progress(self.mode)
        return self.current_challenge()

    @property
    def is_active(self) -> bool:
        return self.state == STATE_ACTIVE

    def current_challenge(self) -> DrillablePattern | None:
        if self.state != STATE_ACTIVE or not self.selected:
            return None
        key = self.selected[self.challenge_index % len(self.selected)]
        return self._by_key.get(key)

    def _active_challenge(self, mode: str) -> DrillablePattern | None:
        """Current challenge if the session runs `mode`, else None."""
        if self.state != STATE_ACTIVE or self.mode != mode:
            return None
        challenge = self.current_challenge()
        if challenge is None:
            key = self.selected[self.challenge_index % len(self.selected)]
            logger.warning(f"Challenge {key} does not resolve against the current drill set")
        return challenge

    # Find words

    def submit_guess(self, raw: str) -> str:
        """Complete a fragment with the pattern and check it against the word list."""
        if not raw or not raw.strip():
            return IGNORED
        challenge = self._active_challenge(MODE_FIND)
        if challenge is None or self.progress.revealed:
            return IGNORED

        candidate = challenge.build_word(fold(raw))
        progress = self.progress
        if candidate in progress.attempted_words:
            return DUPLICATE

        matched = any(word.lower() == candidate for word in challenge.words)
        newly_found = matched and candidate not in progress.found_words

        progress.attempted_words.add(candidate)
        if newly_found:
            progress.found_words.add(candidate)
            self.correct_answers += 1
        self.total_attempts += 1
        return CORRECT if newly_found else INCORRECT

    def reveal(self) -> bool:
        """Show all words of the challenge. Giving up with nothing found costs an attempt."""
        challenge = self._active_challenge(MODE_FIND)
        if challenge is None or self.progress.revealed:
            return False
        self.progress.revealed = True
        if not self.progress.found_words:
            self.total_attempts += 1
        return True

    # Repeat after me

    def submit_repeat(self, raw: str) -> str:
        """Type the current word: three times while shown, then once from memory."""
        if not raw or not raw.strip():
            return IGNORED
        challenge = self._active_challenge(MODE_REPEAT)
        if challenge is None or self.progress.is_complete(challenge):
            return IGNORED

        progress = self.progress
        word = challenge.words[progress.word_index]
        if fold(raw) != word.lower():
            self.total_attempts += 1
            return INCORRECT

        if progress.hide_word:
            progress.word_index += 1
            progress.repeat_count = 0
            progress.hide_word = False
            self.correct_answers += 1
            result = CORRECT
        elif progress.repeat_count + 1 >= REPEATS_BEFORE_HIDE:
            progress.repeat_count = 0
            progress.hide_word = True
            result = HIDDEN
        else:
            progress.repeat_count += 1
            result = REPEATED
        self.total_attempts += 1
        return result

    def skip(self) -> bool:
        """Move to the next word without scoring."""
        challenge = self._active_challenge(MODE_REPEAT)
        if challenge is None or self.progress.is_complete(challenge):
            return False
        self.progress.word_index += 1
        self.progress.repeat_count = 0
        self.progress.hide_word = False
        return True

    def is_complete(self) -> bool:
        """True once every word of a repeat challenge has been typed or skipped."""
        challenge = self._active_challenge(MODE_REPEAT)
        return challenge is not None and self.progress.is_complete(challenge)

    # Reporting

    def accuracy(self) -> int:
        if self.total_attempts == 0:
            return 0
        return round(self.correct_answers / self.total_attempts * 100)

    def get_score_display(self) -> str:
        return f"Score: {self.correct_answers}/{self.total_attempts} ({self.accuracy()}%)"

    def snapshot(self) -> dict:
        """Detached copy of the session state for display.

        The challenge's word list is left out; words reach the display only
        through the progress block (revealed words, or the word to repeat).
        """
        challenge = self.current_challenge()
        challenge_data = None
        if challenge:
            challenge_data = challenge.to_dict()
            del challenge_data['words']
        return {
            'state': self.state,
            'mode': self.mode,
            'side': self.side,
            'affix_query': self.affix_query,
            'selected': list(self.selected),
            'challenge_index': self.challenge_index,
            'correct_answers': self.correct_answers,
            'total_attempts': self.total_attempts,
            'accuracy': self.accuracy(),
            'score_display': self.get_score_display(),
            'challenge': challenge_data,
            'progress': self.progress.to_dict(challenge) if self.progress else None
        }

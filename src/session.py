#!/usr/bin/env python3
"""
session.py - A typing session: word queue, current word, counters, countdown
タイピングセッション: 問題キュー、現在の単語、カウンタ、残り時間

================================================================================
OVERVIEW / 概要
================================================================================

TypingSession threads every piece of mutable game state through one object.
Nothing is kept at module level.

TypingSession は全ての可変状態を1つのオブジェクトで保持する。
モジュールレベルの状態は持たない。

    IDLE ──start()──► ACTIVE ──finish() / time up──► FINISHED
                        │  ▲                             │
                        └──┘ handle_key()                └──start()──► ACTIVE

Per keystroke / キーストロークごと:

    key ─► normalize_key() ─► printable ASCII? ─► WordTypingState.apply_keystroke()
                                                   │
                        PARTIAL   → characters += 1
                        COMPLETE  → characters += 1, score += 1, next word
                        MISMATCH  → misses += 1

The rule table is shared read-only; a fresh WordTypingState is created for
every word.

ルールテーブルは読み取り専用で共有し、単語ごとに新しい WordTypingState を作る。
================================================================================
"""

import logging
import time

import util
from expander import DEFAULT_MAX_OPTIONS
from typing_matcher import OUTCOME_COMPLETE, OUTCOME_MISMATCH, OUTCOME_PARTIAL, start_word
from word_list import WordQueue

logger = logging.getLogger(__name__)

SESSION_IDLE = 'idle'
SESSION_ACTIVE = 'active'
SESSION_FINISHED = 'finished'

DEFAULT_TIME_LIMIT_SEC = 60


class TypingSession:
    """
    One play session over a word list.
    問題リストに対する1回のプレイセッション。

    Args:
        table: RuleTable (read-only)
        words: list of Word
        time_limit_sec: countdown length; 0 or None disables it
        max_options: forwarded to the expander for each word
        rng: random.Random used for shuffling (tests pass a seeded one)
        clock: zero-argument callable returning seconds
    """

    def __init__(self, table, words, time_limit_sec=DEFAULT_TIME_LIMIT_SEC,
                 max_options=DEFAULT_MAX_OPTIONS, rng=None, clock=time.perf_counter):
        self.table = table
        self.words = list(words or [])
        self.time_limit_sec = time_limit_sec
        self.max_options = max_options
        self._rng = rng
        self._clock = clock

        self.status = SESSION_IDLE
        self.queue = None
        self.current_word = None
        self.word_state = None
        self._reset_counters()

    def _reset_counters(self):
        self.score = 0
        self.misses = 0
        self.keystrokes = 0
        self.characters = 0
        self.started_at = None
        self.finished_at = None

    # ─── Lifecycle ────────────────────────────────────────────────────

    def is_active(self):
        return self.status == SESSION_ACTIVE

    def start(self):
        """
        Reset all counters and start the first word.

        Raises:
            ValueError: the word list is empty
        """
        if not self.words:
            raise ValueError('cannot start a session without words')
        self._reset_counters()
        self.queue = WordQueue(self.words, rng=self._rng)
        self.status = SESSION_ACTIVE
        self.started_at = self._clock()
        logger.info(f'Session started: {len(self.words)} word(s), time limit {self.time_limit_sec}s')
        self._next_word()

    def finish(self):
        if self.status != SESSION_ACTIVE:
            return
        self.status = SESSION_FINISHED
        self.finished_at = self._clock()
        self.word_state = None
        logger.info(f'Session finished: score {self.score}, misses {self.misses}, '
                    f'keystrokes {self.keystrokes}')

    def _next_word(self):
        self.current_word = self.queue.next_word()
        self.word_state = start_word(self.current_word.kana, self.table, max_options=self.max_options)
        logger.debug(f'Next word: {self.current_word.headword} ({self.current_word.kana}) '
                     f'-> {self.word_state.display_romaji}')

    # ─── Countdown ────────────────────────────────────────────────────

    def elapsed(self):
        if self.started_at is None:
            return 0.0
        end = self.finished_at if self.finished_at is not None else self._clock()
        return max(end - self.started_at, 0.0)

    def time_left(self):
        """Seconds left, or None when there is no time limit."""
        if not self.time_limit_sec:
            return None
        return max(self.time_limit_sec - self.elapsed(), 0.0)

    def check_time(self):
        """
        Finish the session when the countdown has run out.

        Returns:
            bool: True if the session is still active
        """
        if self.is_active() and self.time_limit_sec and self.time_left() <= 0:
            logger.info('Time is up')
            self.finish()
        return self.is_active()

    # ─── Input ────────────────────────────────────────────────────────

    def handle_key(self, key):
        """
        Feed one raw key to the current word.

        Returns:
            str or None: the match outcome, or None when the key was not
                         processed (session inactive, time up, or not a
                         single printable ASCII character)
        """
        if not self.check_time():
            return None
        char = util.normalize_key(key)
        if not util.is_printable_ascii_char(char):
            logger.debug(f'Ignoring key {key!r}')
            return None

        self.keystrokes += 1
        outcome = self.word_state.apply_keystroke(char)
        if outcome == OUTCOME_MISMATCH:
            self.misses += 1
        elif outcome == OUTCOME_PARTIAL:
            self.characters += 1
        elif outcome == OUTCOME_COMPLETE:
            self.characters += 1
            self.score += 1
            self._next_word()
        return outcome

    # ─── Statistics ───────────────────────────────────────────────────

    def accuracy(self):
        if self.keystrokes == 0:
            return 100.0
        return (self.keystrokes - self.misses) / self.keystrokes * 100

    def typing_speed(self):
        """Keystrokes per second since start."""
        elapsed = self.elapsed()
        if elapsed <= 0:
            return 0.0
        return self.keystrokes / elapsed

    def summary(self):
        return {
            'score': self.score,
            'misses': self.misses,
            'keystrokes': self.keystrokes,
            'characters': self.characters,
            'accuracy': round(self.accuracy(), 1),
            'typing_speed': round(self.typing_speed(), 2),
            'elapsed': round(self.elapsed(), 2),
        }

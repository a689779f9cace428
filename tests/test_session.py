#!/usr/bin/env python3
# tests/test_session.py - Unit tests for session.py

import pytest
import os
import random
import sys

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from romaji_rules import build_rule_table
from session import SESSION_ACTIVE, SESSION_FINISHED, SESSION_IDLE, TypingSession
from typing_matcher import OUTCOME_COMPLETE, OUTCOME_MISMATCH, OUTCOME_PARTIAL
from word_list import Word


class FakeClock:
    """Manually advanced clock"""

    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def table():
    return build_rule_table("a あ\ni い\nka か\nsi し\nshi し\n")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session(table, clock):
    words = [Word('愛', 'あい')]
    return TypingSession(table, words, time_limit_sec=60, rng=random.Random(0), clock=clock)


class TestLifecycle:
    """Test suite for start() / finish()"""

    def test_initial_state(self, session):
        assert session.status == SESSION_IDLE
        assert session.word_state is None
        assert not session.is_active()

    def test_start_sets_first_word(self, session):
        session.start()

        assert session.status == SESSION_ACTIVE
        assert session.current_word == Word('愛', 'あい')
        assert session.word_state.display_romaji == 'ai'

    def test_start_without_words_raises(self, table):
        session = TypingSession(table, [])
        with pytest.raises(ValueError):
            session.start()

    def test_finish(self, session):
        session.start()
        session.finish()

        assert session.status == SESSION_FINISHED
        assert session.word_state is None
        assert session.handle_key('a') is None

    def test_restart_resets_counters(self, session):
        session.start()
        session.handle_key('x')
        session.finish()
        session.start()

        assert session.misses == 0
        assert session.keystrokes == 0


class TestHandleKey:
    """Test suite for handle_key()"""

    def test_keys_ignored_before_start(self, session):
        assert session.handle_key('a') is None
        assert session.keystrokes == 0

    def test_counters(self, session):
        session.start()

        assert session.handle_key('a') == OUTCOME_PARTIAL
        assert session.handle_key('x') == OUTCOME_MISMATCH
        assert session.handle_key('i') == OUTCOME_COMPLETE

        assert session.keystrokes == 3
        assert session.characters == 2
        assert session.misses == 1
        assert session.score == 1

    def test_complete_advances_to_new_word_state(self, session):
        session.start()
        first_state = session.word_state
        session.handle_key('a')
        session.handle_key('i')

        assert session.word_state is not first_state
        assert session.word_state.typed_buffer == ''

    def test_full_width_and_uppercase_keys_are_normalized(self, session):
        session.start()

        assert session.handle_key('Ａ') == OUTCOME_PARTIAL
        assert session.handle_key('I') == OUTCOME_COMPLETE

    @pytest.mark.parametrize('key', ['Shift', 'Enter', '\n', 'あ', ''])
    def test_non_printable_keys_are_ignored(self, session, key):
        session.start()

        assert session.handle_key(key) is None
        assert session.keystrokes == 0

    def test_words_cycle(self, table, clock):
        words = [Word('愛', 'あい'), Word('蚊', 'か')]
        session = TypingSession(table, words, time_limit_sec=0, rng=random.Random(3), clock=clock)
        session.start()

        seen = []
        for _ in range(4):
            seen.append(session.current_word)
            for ch in session.word_state.display_romaji:
                session.handle_key(ch)

        assert session.score == 4
        assert set(seen) == set(words)


class TestCountdown:
    """Test suite for the time limit"""

    def test_time_left(self, session, clock):
        session.start()
        clock.advance(15)
        assert session.time_left() == 45

    def test_time_up_finishes_session(self, session, clock):
        session.start()
        clock.advance(60)

        assert session.handle_key('a') is None
        assert session.status == SESSION_FINISHED
        assert session.keystrokes == 0

    def test_no_time_limit(self, table, clock):
        session = TypingSession(table, [Word('愛', 'あい')], time_limit_sec=0, clock=clock)
        session.start()
        clock.advance(10000)

        assert session.time_left() is None
        assert session.check_time() is True


class TestStatistics:
    """Test suite for accuracy() / typing_speed() / summary()"""

    def test_accuracy_without_keystrokes(self, session):
        assert session.accuracy() == 100.0

    def test_accuracy(self, session):
        session.start()
        for key in 'axxi':
            session.handle_key(key)
        assert session.accuracy() == 50.0

    def test_typing_speed(self, session, clock):
        assert session.typing_speed() == 0.0
        session.start()
        session.handle_key('a')
        session.handle_key('i')
        clock.advance(4)
        assert session.typing_speed() == 0.5

    def test_summary(self, session, clock):
        session.start()
        session.handle_key('a')
        session.handle_key('i')
        clock.advance(2)
        session.finish()

        assert session.summary() == {
            'score': 1,
            'misses': 0,
            'keystrokes': 2,
            'characters': 2,
            'accuracy': 100.0,
            'typing_speed': 1.0,
            'elapsed': 2.0,
        }

#!/usr/bin/env python3
"""
typing_matcher.py - Per-word keystroke matching state machine
単語ごとのキーストローク判定ステートマシン

================================================================================
OVERVIEW / 概要
================================================================================

When a word starts, every romaji spelling of its kana is enumerated and only
the SHORTEST spellings are kept. Each keystroke is then checked against that
fixed set:

単語の開始時にかなのローマ字綴りを全て列挙し、最短の綴りだけを残す。
以後の各キーストロークはその固定集合に対して判定される:

    kana "し", shortest = {"si", "ci"}

        's' → "s"   prefix of "si"        → PARTIAL   / 途中
        'h' → "sh"  prefix of nothing     → MISMATCH  / ミス (buffer stays "s")
        'i' → "si"  equals "si"           → COMPLETE  / 完了

A player typing a longer but valid spelling ("shi") is never credited.
長いが有効な綴り（"shi"）は受け付けない。

================================================================================
STATE MACHINE / 状態マシン
================================================================================

    ┌──────────────┐   start_word()   ┌───────────────┐  full match  ┌────────────┐
    │ (no word)    │ ───────────────► │  IN_PROGRESS  │ ───────────► │  COMPLETE  │
    │ IDLE         │                  │  入力中        │              │  完了       │
    └──────────────┘                  └───────┬───────┘              └────────────┘
                                          ▲   │ partial / mismatch
                                          └───┘

The caller (session.py) moves on to the next word after COMPLETE by calling
start_word() again; a completed state accepts no further keys.

COMPLETE の後、呼び出し側（session.py）は start_word() を再度呼んで次の単語へ進む。

================================================================================
"""

import logging

import util
from expander import DEFAULT_MAX_OPTIONS, expand
from options import minimal_subset, pick_representative

logger = logging.getLogger(__name__)

# Word states
STATE_IN_PROGRESS = 'in_progress'
STATE_COMPLETE = 'complete'

# Keystroke outcomes
OUTCOME_PARTIAL = 'partial'
OUTCOME_MISMATCH = 'mismatch'
OUTCOME_COMPLETE = 'complete'

# Per-character rendering classes
CHAR_CORRECT = 'correct'
CHAR_INCORRECT = 'incorrect'
CHAR_CURSOR = 'cursor'
CHAR_PENDING = 'pending'


class WordTypingState:
    """
    Typing progress for one word.
    1単語分の入力状態。

    Attributes:
        kana: hiragana reading of the word
        full_options: every valid romaji spelling (ordered, distinct)
        shortest_options: the minimal-length subset; never recomputed mid-word
        typed_buffer: accepted keystrokes so far; always a prefix of (or equal
                      to) a member of shortest_options
        display_romaji: the spelling currently shown to the player
        status: STATE_IN_PROGRESS or STATE_COMPLETE
    """

    def __init__(self, kana, full_options, shortest_options):
        self.kana = kana
        self.full_options = tuple(full_options)
        self.shortest_options = tuple(shortest_options)
        self.typed_buffer = ''
        self.display_romaji = pick_representative(self.shortest_options)
        self.status = STATE_IN_PROGRESS

    def __repr__(self):
        return (f'WordTypingState(kana={self.kana!r}, typed={self.typed_buffer!r}, '
                f'display={self.display_romaji!r}, status={self.status!r})')

    def is_complete(self):
        return self.status == STATE_COMPLETE

    def target_length(self):
        return len(self.display_romaji)

    def apply_keystroke(self, char):
        """
        Process one normalized keystroke.
        正規化済みのキーストロークを1つ処理する。

        Args:
            char: single lowercase printable ASCII character

        Returns:
            str: OUTCOME_PARTIAL, OUTCOME_MISMATCH or OUTCOME_COMPLETE

        Raises:
            ValueError: char is not exactly one character
            RuntimeError: the word is already complete
        """
        if not isinstance(char, str) or len(char) != 1:
            raise ValueError(f'keystroke must be a single character, got {char!r}')
        if self.is_complete():
            raise RuntimeError(f'word "{self.kana}" is already complete')

        candidate = self.typed_buffer + char
        found_match = False
        for option in self.shortest_options:
            if option.startswith(candidate):
                found_match = True
                if option == candidate:
                    self.typed_buffer = candidate
                    self.display_romaji = option
                    self.status = STATE_COMPLETE
                    logger.debug(f'"{self.kana}": "{candidate}" complete')
                    return OUTCOME_COMPLETE

        if not found_match:
            # the rejected character is never appended
            logger.debug(f'"{self.kana}": "{char}" rejected after "{self.typed_buffer}"')
            return OUTCOME_MISMATCH

        self.typed_buffer = candidate
        self.display_romaji = pick_representative(self.shortest_options, candidate)
        logger.debug(f'"{self.kana}": "{candidate}" partial, showing "{self.display_romaji}"')
        return OUTCOME_PARTIAL

    def render(self):
        return render_progress(self.display_romaji, self.typed_buffer)


def start_word(kana, table, max_options=DEFAULT_MAX_OPTIONS):
    """
    Create the typing state for a new word.
    新しい単語の入力状態を作る。

    Args:
        kana: reading of the word (hiragana or katakana)
        table: RuleTable
        max_options: forwarded to expander.expand()

    Raises:
        ValueError: kana is empty
    """
    hira = util.to_hiragana(kana or '')
    if not hira:
        raise ValueError('cannot start a word with an empty kana reading')

    full_options = expand(hira, table, max_options=max_options)
    shortest_options = minimal_subset(full_options)
    logger.debug(f'start_word("{hira}"): {len(full_options)} option(s), '
                 f'{len(shortest_options)} shortest: {shortest_options}')
    return WordTypingState(hira, full_options, shortest_options)


def apply_keystroke(state, char):
    """
    Functional form of WordTypingState.apply_keystroke().

    The state object is updated in place and returned with the outcome.

    Returns:
        tuple: (state, outcome)
    """
    outcome = state.apply_keystroke(char)
    return state, outcome


def render_progress(target, typed):
    """
    Classify each character of target against what has been typed.
    ターゲットの各文字を入力済み文字列と照らして分類する。

        render_progress('shi', 's')
        -> [('s', 'correct'), ('h', 'cursor'), ('i', 'pending')]

    CHAR_INCORRECT cannot occur while mismatches are rejected, but a typed
    string that diverges from target is still classified.

    Returns:
        list: (char, class) tuples, one per character of target
    """
    result = []
    for index, char in enumerate(target):
        if index < len(typed):
            result.append((char, CHAR_CORRECT if typed[index] == char else CHAR_INCORRECT))
        elif index == len(typed):
            result.append((char, CHAR_CURSOR))
        else:
            result.append((char, CHAR_PENDING))
    return result

#!/usr/bin/env python3
# word_list.py - Word list parsing and the shuffled word queue

import logging
import random
import re

import util

logger = logging.getLogger(__name__)

# Paragraphs are separated by one or more blank (or whitespace-only) lines.
_PARAGRAPH_SEPARATOR = re.compile(r'\r?\n\s*\r?\n')


class Word:
    """
    A headword with its kana reading. Immutable.

        Word('寿司', 'すし')
    """

    __slots__ = ('headword', 'kana')

    def __init__(self, headword, kana):
        object.__setattr__(self, 'headword', headword)
        object.__setattr__(self, 'kana', kana)

    def __setattr__(self, name, value):
        raise AttributeError(f'Word is immutable (tried to set {name})')

    def __eq__(self, other):
        if not isinstance(other, Word):
            return NotImplemented
        return (self.headword, self.kana) == (other.headword, other.kana)

    def __hash__(self):
        return hash((self.headword, self.kana))

    def __repr__(self):
        return f'Word({self.headword!r}, {self.kana!r})'


def parse_words_content(content):
    """
    Parse a word list.
    問題ファイルを解析する。

    Format / 形式:

        寿司          <- headword / 見出し
        すし          <- kana reading / 読み

        回転寿司
        かいてんずし

    Paragraphs with fewer than two non-blank lines are dropped. Lines after
    the second one in a paragraph are ignored. Katakana readings are folded
    to hiragana.

    Returns:
        list: Word objects in file order
    """
    words = []
    dropped = 0
    for block in _PARAGRAPH_SEPARATOR.split(content or ''):
        lines = [line.strip() for line in block.strip().splitlines() if line.strip()]
        if len(lines) < 2:
            if lines:
                logger.warning(f'Dropping word paragraph without a reading: {lines[0]!r}')
                dropped += 1
            continue
        words.append(Word(lines[0], util.to_hiragana(lines[1])))
    logger.info(f'Parsed word list: {len(words)} word(s), {dropped} paragraph(s) dropped')
    return words


class WordQueue:
    """
    Hands out words in shuffled order and reshuffles once every word has
    been used.
    単語をシャッフル順に出し、全て使い切ったら再シャッフルする。

    Shuffling uses random.Random.shuffle (Fisher-Yates), so every order is
    equally likely.
    """

    def __init__(self, words, rng=None):
        if not words:
            raise ValueError('word list is empty')
        self._words = list(words)
        self._rng = rng if rng is not None else random.Random()
        self._index = 0
        self.shuffle()

    def __len__(self):
        return len(self._words)

    def shuffle(self):
        self._rng.shuffle(self._words)
        self._index = 0

    def words(self):
        return tuple(self._words)

    def next_word(self):
        if self._index >= len(self._words):
            logger.debug('All words used; reshuffling')
            self.shuffle()
        word = self._words[self._index]
        self._index += 1
        return word

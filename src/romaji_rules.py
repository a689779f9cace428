#!/usr/bin/env python3
"""
romaji_rules.py - Romaji rule table builder
ローマ字ルールテーブルの構築

================================================================================
OVERVIEW / 概要
================================================================================

The rule table tells the expander which romaji spellings are accepted for
which kana fragment. It is built ONCE from a plain text file and never
modified afterwards.

ルールテーブルは、どのかな断片に対してどのローマ字綴りを受け付けるかを
エキスパンダに教える。プレーンテキストから一度だけ構築され、以後は変更されない。

================================================================================
TEXT FORMAT / テキスト形式
================================================================================

One rule per line / 1行に1ルール:

    <romaji> <kana> [<next_trigger>]

    a    あ
    shi  し
    si   シ          # katakana is folded to hiragana / カタカナはひらがなに変換
    kk   っ   k      # "っ" typed as the first "k" of "kk", only before "k..."

Blank lines and lines starting with "#" or "//" are ignored. Lines with
fewer than two fields are skipped and recorded in the parse report.

空行と "#" / "//" で始まる行は無視される。フィールドが2つ未満の行は
スキップされ、パースレポートに記録される。

================================================================================
BLOCKED PREFIXES / ブロック接頭辞
================================================================================

When one romaji string is a strict prefix of another, the shorter rule is
ambiguous while typing:

あるローマ字が別のローマ字の真の接頭辞である場合、短い方のルールは曖昧になる:

    n   ん
    nn  ん
    na  な

    "n" + "a..." could be "ん" + "あ" or just "な".

For every such pair the remainder of the longer romaji ("n", "a") is
recorded on the shorter entry. The expander drops the shorter entry whenever
the text that follows starts with one of these remainders.

このような組ごとに、長い方の残り（"n", "a"）を短いエントリに記録する。
エキスパンダは後続テキストがその残りで始まる場合に短いエントリを捨てる。

================================================================================
"""

import logging

import util

logger = logging.getLogger(__name__)

COMMENT_PREFIXES = ('#', '//')

SKIP_REASON_TOO_FEW_FIELDS = 'too few fields'


class RuleEntry:
    """
    A single romaji spelling for a kana fragment.
    かな断片に対する1つのローマ字綴り。

    Attributes:
        romaji: lowercase romaji token / 小文字のローマ字
        kana: hiragana fragment / ひらがな断片
        next_trigger: required start of the following romaji, or None
                      後続ローマ字の必須の先頭、またはNone
        blocked_prefixes: tuple of remainders, sorted by (length, text)
                          残りのタプル（長さ、文字列順）
    """

    __slots__ = ('romaji', 'kana', 'next_trigger', 'blocked_prefixes')

    def __init__(self, romaji, kana, next_trigger=None, blocked_prefixes=()):
        object.__setattr__(self, 'romaji', romaji)
        object.__setattr__(self, 'kana', kana)
        object.__setattr__(self, 'next_trigger', next_trigger)
        object.__setattr__(self, 'blocked_prefixes', tuple(blocked_prefixes))

    def __setattr__(self, name, value):
        raise AttributeError(f'RuleEntry is immutable (tried to set {name})')

    def __eq__(self, other):
        if not isinstance(other, RuleEntry):
            return NotImplemented
        return (self.romaji, self.kana, self.next_trigger, self.blocked_prefixes) == \
               (other.romaji, other.kana, other.next_trigger, other.blocked_prefixes)

    def __hash__(self):
        return hash((self.romaji, self.kana, self.next_trigger, self.blocked_prefixes))

    def __repr__(self):
        return (f'RuleEntry(romaji={self.romaji!r}, kana={self.kana!r}, '
                f'next_trigger={self.next_trigger!r}, blocked_prefixes={self.blocked_prefixes!r})')

    def output_romaji(self):
        """
        Romaji contributed to the final string.

        With a next_trigger the trailing len(next_trigger) characters are
        typed as part of the following syllable, so they are trimmed here.
        """
        if not self.next_trigger:
            return self.romaji
        keep = max(len(self.romaji) - len(self.next_trigger), 0)
        return self.romaji[:keep]


class RuleTable:
    """
    Read-only mapping from kana fragment to its RuleEntry variants.
    かな断片からRuleEntryの候補への読み取り専用マッピング。

    Variants of one fragment keep table order: longer romaji first, then
    file order. fragment_lengths() is sorted longest first, which is the
    order the expander tries them in.
    """

    def __init__(self, rules=None):
        self._rules = {kana: tuple(variants) for kana, variants in (rules or {}).items()}
        self._fragment_lengths = tuple(sorted({len(kana) for kana in self._rules}, reverse=True))

    def __len__(self):
        return len(self._rules)

    def __contains__(self, kana):
        return kana in self._rules

    def __iter__(self):
        return iter(self._rules)

    def get(self, kana):
        return self._rules.get(kana, ())

    def items(self):
        return self._rules.items()

    def fragment_lengths(self):
        return self._fragment_lengths

    def is_empty(self):
        return not self._rules


class SkippedLine:
    """A rule line that could not be used, with its 1-based line number."""

    __slots__ = ('line_number', 'line', 'reason')

    def __init__(self, line_number, line, reason):
        self.line_number = line_number
        self.line = line
        self.reason = reason

    def __repr__(self):
        return f'SkippedLine({self.line_number}, {self.line!r}, {self.reason!r})'


class RuleParseReport:
    """
    Result of parse_rule_text(): accepted entries in file order plus the
    lines that were skipped and why.
    """

    def __init__(self):
        self.entries = []
        self.skipped = []

    def __repr__(self):
        return f'RuleParseReport(entries={len(self.entries)}, skipped={len(self.skipped)})'


def parse_rule_line(line):
    """
    Parse one line of rule text.

    Args:
        line: raw line (may include surrounding whitespace)

    Returns:
        tuple: (romaji, kana, next_trigger) for a rule line,
               None for blank and comment lines.

    Raises:
        ValueError: the line has fewer than two fields
    """
    trimmed = line.strip()
    if not trimmed or trimmed.startswith(COMMENT_PREFIXES):
        return None

    parts = trimmed.split()
    if len(parts) < 2:
        raise ValueError(SKIP_REASON_TOO_FEW_FIELDS)

    romaji = parts[0].lower()
    kana = util.to_hiragana(parts[1])
    next_trigger = parts[2].lower() if len(parts) > 2 else None
    return romaji, kana, next_trigger


def parse_rule_text(text):
    """
    Tokenize rule text into (romaji, kana, next_trigger) triples.
    ルールテキストを (romaji, kana, next_trigger) の組に分解する。

    Returns:
        RuleParseReport: entries are plain triples, blocked prefixes are
                         attached later by build_rule_table().
    """
    report = RuleParseReport()
    for line_number, line in enumerate((text or '').splitlines(), start=1):
        try:
            parsed = parse_rule_line(line)
        except ValueError as e:
            logger.warning(f'Skipping rule line {line_number} ({e}): {line.strip()!r}')
            report.skipped.append(SkippedLine(line_number, line, str(e)))
            continue
        if parsed is not None:
            report.entries.append(parsed)
    return report


def compute_blocked_prefixes(romaji_list):
    """
    For each romaji string, collect the remainders of every longer romaji
    that starts with it.
    各ローマ字について、それで始まるより長いローマ字の残りを集める。

        compute_blocked_prefixes(['n', 'nn', 'na'])
        -> {'n': ('a', 'n'), 'nn': (), 'na': ()}

    Returns:
        dict: romaji -> tuple of remainders sorted by (length, text)
    """
    # prefix -> every romaji starting with that prefix
    prefix_map = {}
    for romaji in romaji_list:
        for i in range(1, len(romaji) + 1):
            prefix_map.setdefault(romaji[:i], set()).add(romaji)

    blocked = {}
    for romaji in romaji_list:
        if romaji in blocked:
            continue
        remainders = {candidate[len(romaji):]
                      for candidate in prefix_map.get(romaji, ())
                      if len(candidate) > len(romaji)}
        blocked[romaji] = tuple(sorted(remainders, key=lambda r: (len(r), r)))
    return blocked


def build_rule_table_with_report(text):
    """
    Build a RuleTable and return it together with the parse report.

    Steps / 手順:
        1. tokenize lines                 行の分解
        2. attach blocked prefixes        ブロック接頭辞の付与
        3. sort by (kana len desc, romaji len desc)
                                          (かな長 降順, ローマ字長 降順) で整列
        4. group by kana, dedupe (romaji, next_trigger)
                                          かなごとにまとめ、重複を除去

    Returns:
        tuple: (RuleTable, RuleParseReport)
    """
    report = parse_rule_text(text)
    blocked = compute_blocked_prefixes([romaji for romaji, _, _ in report.entries])

    entries = [RuleEntry(romaji, kana, next_trigger, blocked[romaji])
               for romaji, kana, next_trigger in report.entries]
    # sorted() is stable, so equal keys keep file order
    entries = sorted(entries, key=lambda e: (-len(e.kana), -len(e.romaji)))

    rules = {}
    for entry in entries:
        variants = rules.setdefault(entry.kana, [])
        if any(v.romaji == entry.romaji and v.next_trigger == entry.next_trigger for v in variants):
            logger.debug(f'Duplicate rule ignored: {entry.romaji} {entry.kana} {entry.next_trigger or ""}')
            continue
        variants.append(entry)

    table = RuleTable(rules)
    if table.is_empty():
        logger.warning('Romaji rule table is empty; kana will be passed through as-is')
    else:
        logger.info(f'Romaji rules loaded: {len(report.entries)} entries, {len(table)} kana fragments, '
                    f'{len(report.skipped)} skipped line(s)')
    return table, report


def build_rule_table(text):
    """
    Build a RuleTable from rule text. An empty table is a valid result.
    ルールテキストからRuleTableを構築する。空のテーブルも有効な結果。
    """
    table, _ = build_rule_table_with_report(text)
    return table

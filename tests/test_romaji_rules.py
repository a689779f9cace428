#!/usr/bin/env python3
# tests/test_romaji_rules.py - Unit tests for romaji_rules.py

import pytest
import os
import sys

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from romaji_rules import (
    RuleEntry,
    RuleTable,
    SKIP_REASON_TOO_FEW_FIELDS,
    build_rule_table,
    build_rule_table_with_report,
    compute_blocked_prefixes,
    parse_rule_line,
    parse_rule_text,
)


class TestParseRuleLine:
    """Test suite for parse_rule_line()"""

    def test_two_fields(self):
        assert parse_rule_line('ka か') == ('ka', 'か', None)

    def test_three_fields(self):
        assert parse_rule_line('kk っ k') == ('kk', 'っ', 'k')

    def test_romaji_and_trigger_are_lowercased(self):
        assert parse_rule_line('KK っ K') == ('kk', 'っ', 'k')

    def test_katakana_is_folded(self):
        assert parse_rule_line('sha シャ') == ('sha', 'しゃ', None)

    def test_surrounding_whitespace_and_tabs(self):
        assert parse_rule_line('  tsu\tつ  ') == ('tsu', 'つ', None)

    def test_blank_and_comment_lines(self):
        assert parse_rule_line('') is None
        assert parse_rule_line('   ') is None
        assert parse_rule_line('# comment') is None
        assert parse_rule_line('// comment') is None

    def test_single_field_raises(self):
        with pytest.raises(ValueError):
            parse_rule_line('ka')


class TestParseRuleText:
    """Test suite for parse_rule_text()"""

    def test_report_lists_entries_and_skipped_lines(self):
        text = "a あ\n\n# vowels\nbroken\ni い\n"
        report = parse_rule_text(text)

        assert report.entries == [('a', 'あ', None), ('i', 'い', None)]
        assert len(report.skipped) == 1
        assert report.skipped[0].line_number == 4
        assert report.skipped[0].line == 'broken'
        assert report.skipped[0].reason == SKIP_REASON_TOO_FEW_FIELDS

    def test_windows_line_endings(self):
        report = parse_rule_text("a あ\r\ni い\r\n")
        assert report.entries == [('a', 'あ', None), ('i', 'い', None)]

    def test_empty_and_none_text(self):
        assert parse_rule_text('').entries == []
        assert parse_rule_text(None).entries == []


class TestComputeBlockedPrefixes:
    """Test suite for compute_blocked_prefixes()"""

    def test_shorter_entry_records_remainders(self):
        blocked = compute_blocked_prefixes(['n', 'nn', 'na', 'nya'])

        assert blocked['n'] == ('a', 'n', 'ya')
        assert blocked['nn'] == ()
        assert blocked['na'] == ()

    def test_remainders_sorted_by_length_then_text(self):
        blocked = compute_blocked_prefixes(['x', 'xtsu', 'xtu', 'xa'])
        assert blocked['x'] == ('a', 'tu', 'tsu')

    def test_no_collisions(self):
        blocked = compute_blocked_prefixes(['ka', 'ki', 'shi'])
        assert blocked == {'ka': (), 'ki': (), 'shi': ()}


class TestBuildRuleTable:
    """Test suite for build_rule_table()"""

    def test_empty_text_gives_empty_table(self):
        table = build_rule_table('')

        assert isinstance(table, RuleTable)
        assert table.is_empty()
        assert len(table) == 0
        assert table.fragment_lengths() == ()

    def test_only_comments_gives_empty_table(self):
        table, report = build_rule_table_with_report("# nothing\n// here\n\n")

        assert table.is_empty()
        assert report.skipped == []

    def test_grouping_by_kana(self):
        table = build_rule_table("si し\nshi し\nka か\n")

        assert 'し' in table
        assert [e.romaji for e in table.get('し')] == ['shi', 'si']
        assert [e.romaji for e in table.get('か')] == ['ka']

    def test_variants_ordered_by_romaji_length_then_file_order(self):
        table = build_rule_table("si し\nci し\nshi し\n")
        assert [e.romaji for e in table.get('し')] == ['shi', 'si', 'ci']

    def test_fragment_lengths_longest_first(self):
        table = build_rule_table("a あ\nkya きゃ\nxtu っ\n")
        assert table.fragment_lengths() == (2, 1)

    def test_duplicates_are_removed(self):
        table = build_rule_table("ka か\nka カ\nKA か\n")
        assert len(table.get('か')) == 1

    def test_same_romaji_with_different_trigger_is_kept(self):
        table = build_rule_table("kk っ k\nkk っ\n")
        assert [(e.romaji, e.next_trigger) for e in table.get('っ')] == [('kk', 'k'), ('kk', None)]

    def test_blocked_prefixes_attached_across_kana(self):
        table = build_rule_table("n ん\nnn ん\nna な\n")
        entries = {e.romaji: e for e in table.get('ん')}

        assert entries['n'].blocked_prefixes == ('a', 'n')
        assert entries['nn'].blocked_prefixes == ()
        assert table.get('な')[0].blocked_prefixes == ()

    def test_unknown_fragment_returns_empty_tuple(self):
        table = build_rule_table("a あ\n")
        assert table.get('い') == ()

    def test_malformed_lines_do_not_abort(self):
        table, report = build_rule_table_with_report("a あ\nbad\ni い\n")

        assert set(table) == {'あ', 'い'}
        assert len(report.skipped) == 1


class TestRuleEntry:
    """Test suite for RuleEntry"""

    def test_is_immutable(self):
        entry = RuleEntry('ka', 'か')
        with pytest.raises(AttributeError):
            entry.romaji = 'ca'

    def test_output_romaji_without_trigger(self):
        assert RuleEntry('ka', 'か').output_romaji() == 'ka'

    def test_output_romaji_trims_trigger(self):
        assert RuleEntry('kk', 'っ', 'k').output_romaji() == 'k'

    def test_output_romaji_never_negative(self):
        assert RuleEntry('k', 'っ', 'kk').output_romaji() == ''

    def test_equality(self):
        assert RuleEntry('ka', 'か', None, ()) == RuleEntry('ka', 'か')
        assert RuleEntry('ka', 'か') != RuleEntry('ca', 'か')

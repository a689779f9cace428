#!/usr/bin/env python3
"""
typing_cli.py - Command-line interface for the kana typing engine
かなタイピングエンジンのコマンドラインインターフェース

================================================================================
USAGE / 使用方法
================================================================================

    # List the shortest romaji spellings of a reading
    # 読みの最短ローマ字綴りを表示
    kana-typing expand しんぶん

    # List every spelling, using a custom rule table
    # カスタムルールで全ての綴りを表示
    kana-typing expand シャシン --all --rules my-romaji.txt

    # Check a rule file and show the skipped lines
    # ルールファイルを検査し、スキップされた行を表示
    kana-typing check-rules my-romaji.txt

    # Play in the terminal (each input line is typed key by key)
    # ターミナルでプレイ（入力行を1文字ずつ打鍵として扱う）
    kana-typing play --time 30 --seed 1

================================================================================
"""

import argparse
import logging
import os
import random
import sys

# Add src directory to path if needed
src_dir = os.path.dirname(os.path.abspath(__file__))
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

import util
from expander import DEFAULT_MAX_OPTIONS, expand
from options import minimal_subset, pick_representative
from romaji_rules import build_rule_table_with_report
from session import DEFAULT_TIME_LIMIT_SEC, TypingSession
from typing_matcher import CHAR_CORRECT, CHAR_CURSOR, CHAR_INCORRECT, OUTCOME_MISMATCH
from word_list import parse_words_content


logger = logging.getLogger(__name__)

NAME_TO_LOGGING_LEVEL = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL,
}

QUIT_COMMAND = ':q'

ANSI_RESET = '\033[0m'
CHAR_STYLES = {
    CHAR_CORRECT: '\033[32m',          # green
    CHAR_INCORRECT: '\033[31m',        # red
    CHAR_CURSOR: '\033[4;1m',          # underline + bold
}
PENDING_STYLE = '\033[2m'              # dim


def setup_logging(verbose=False, config=None):
    """Configure logging based on verbosity level and the config file."""
    level_name = (config or {}).get('logging_level', 'WARNING')
    level = logging.DEBUG if verbose else NAME_TO_LOGGING_LEVEL.get(level_name, logging.WARNING)
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)-8s %(message)s',
        datefmt='%H:%M:%S'
    )
    if level_name not in NAME_TO_LOGGING_LEVEL:
        logger.warning(f'Unknown logging_level {level_name!r}; using WARNING')


def load_config():
    config, warnings = util.get_config_data()
    if config is None:
        config = {}
    return config, warnings


def load_rule_table(path):
    """
    Returns:
        tuple: (RuleTable, RuleParseReport), or (None, None) if the file
               could not be read
    """
    content = util.read_text_file(path)
    if content is None:
        return None, None
    return build_rule_table_with_report(content)


def load_words(path):
    content = util.read_text_file(path)
    if content is None:
        return None
    return parse_words_content(content)


def format_progress(segments, color=True):
    """Turn render_progress() output into a printable line."""
    if not color:
        return ''.join(char for char, _ in segments)
    parts = []
    for char, char_class in segments:
        style = CHAR_STYLES.get(char_class, PENDING_STYLE)
        parts.append(f'{style}{char}{ANSI_RESET}')
    return ''.join(parts)


def cmd_expand(args, config):
    """
    Print the romaji spellings of a kana string.
    かな文字列のローマ字綴りを表示。
    """
    rules_path = args.rules or util.get_rules_path(config)
    table, _ = load_rule_table(rules_path)
    if table is None:
        print(f"ERROR: Could not read rule file: {rules_path}")
        return 1

    max_options = config.get('max_romaji_options', DEFAULT_MAX_OPTIONS)
    options = expand(args.kana, table, max_options=max_options)
    shown = options if args.all else minimal_subset(options)
    for option in shown:
        print(option)
    print(f"# display: {pick_representative(minimal_subset(options))}")
    print(f"# {len(shown)} of {len(options)} option(s) shown")
    return 0


def cmd_check_rules(args, config):
    """
    Show the parse report of a rule file.
    ルールファイルのパースレポートを表示。
    """
    rules_path = args.path or util.get_rules_path(config)
    table, report = load_rule_table(rules_path)
    if table is None:
        print(f"ERROR: Could not read rule file: {rules_path}")
        return 1

    print(f"File:             {rules_path}")
    print(f"Entries:          {len(report.entries):,}")
    print(f"Kana fragments:   {len(table):,}")
    print(f"Skipped lines:    {len(report.skipped):,}")
    for skipped in report.skipped:
        print(f"  line {skipped.line_number}: {skipped.reason}: {skipped.line.strip()!r}")

    if table.is_empty():
        print("ERROR: Rule table is empty")
        return 1
    return 0


def _print_summary(session):
    summary = session.summary()
    print()
    print("=" * 40)
    print(f"Score:          {summary['score']}")
    print(f"Misses:         {summary['misses']}")
    print(f"Keystrokes:     {summary['keystrokes']}")
    print(f"Characters:     {summary['characters']}")
    print(f"Accuracy:       {summary['accuracy']:.1f}%")
    print(f"Keys / second:  {summary['typing_speed']:.2f}")
    print("=" * 40)


def _print_current(session, color):
    word = session.current_word
    time_left = session.time_left()
    remaining = f" [{time_left:.0f}s]" if time_left is not None else ""
    print(f"{word.headword} ({word.kana}){remaining}")
    print(format_progress(session.word_state.render(), color=color))


def cmd_play(args, config):
    """
    Line-oriented typing game.
    行単位のタイピングゲーム。
    """
    rules_path = args.rules or util.get_rules_path(config)
    words_path = args.words or util.get_words_path(config)

    table, _ = load_rule_table(rules_path)
    if table is None:
        print(f"ERROR: Could not read rule file: {rules_path}")
        return 1
    words = load_words(words_path)
    if not words:
        print(f"ERROR: No words could be loaded from: {words_path}")
        return 1

    time_limit = args.time if args.time is not None else config.get('time_limit_sec', DEFAULT_TIME_LIMIT_SEC)
    rng = random.Random(args.seed) if args.seed is not None else None
    session = TypingSession(table, words, time_limit_sec=time_limit,
                            max_options=config.get('max_romaji_options', DEFAULT_MAX_OPTIONS),
                            rng=rng)
    color = not args.no_color and sys.stdout.isatty()

    print(f"Type the romaji and press Enter. Empty line or {QUIT_COMMAND} quits.")
    session.start()
    while session.is_active():
        _print_current(session, color)
        try:
            line = input('> ')
        except EOFError:
            break
        if not line or line.strip() == QUIT_COMMAND:
            break
        misses = 0
        for key in line:
            if session.handle_key(key) == OUTCOME_MISMATCH:
                misses += 1
            if not session.is_active():
                break
        if misses:
            print(f"  {misses} miss(es)")

    session.finish()
    _print_summary(session)
    return 0


def main(argv=None):
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        prog=util.get_package_name(),
        description="Kana to romaji expansion and typing practice",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  kana-typing expand しんぶん
  kana-typing expand シャシン --all
  kana-typing check-rules data/standard-romaji.txt
  kana-typing play --time 30
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose output')
    parser.add_argument('--version', action='version',
                        version=f'%(prog)s {util.get_version()}')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    expand_parser = subparsers.add_parser('expand', help='List romaji spellings of a kana string')
    expand_parser.add_argument('kana', help='Hiragana or katakana text')
    expand_parser.add_argument('-r', '--rules', help='Path to a romaji rule file (default: from config)')
    expand_parser.add_argument('-a', '--all', action='store_true',
                               help='Show every spelling, not only the shortest ones')

    check_parser = subparsers.add_parser('check-rules', help='Parse a rule file and report skipped lines')
    check_parser.add_argument('path', nargs='?', help='Path to a romaji rule file (default: from config)')

    play_parser = subparsers.add_parser('play', help='Play a typing session in the terminal')
    play_parser.add_argument('-r', '--rules', help='Path to a romaji rule file (default: from config)')
    play_parser.add_argument('-w', '--words', help='Path to a word list file (default: from config)')
    play_parser.add_argument('-t', '--time', type=int, default=None,
                             help='Time limit in seconds, 0 for none (default: from config)')
    play_parser.add_argument('-s', '--seed', type=int, default=None,
                             help='Random seed for the word order')
    play_parser.add_argument('--no-color', action='store_true', help='Disable ANSI colors')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config, _ = load_config()
    setup_logging(args.verbose, config)

    # Dispatch to command handler
    if args.command == 'expand':
        return cmd_expand(args, config)
    elif args.command == 'check-rules':
        return cmd_check_rules(args, config)
    elif args.command == 'play':
        return cmd_play(args, config)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())

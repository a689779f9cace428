#!/usr/bin/env python3
"""
expander.py - Enumerate every romaji spelling of a kana string
かな文字列のローマ字綴りを全て列挙する

================================================================================
HOW IT WORKS / 動作原理
================================================================================

The kana string is segmented into fragments found in the rule table. At each
position every fragment length present in the table is tried, longest first:

かな文字列をルールテーブルの断片に分割する。各位置でテーブルに存在する
全ての断片長を長い順に試す:

    "しゃしん"
     ├─ "しゃ" → sha / sya          + results("しん")
     └─ "し"   → shi / si / ci      + results("ゃしん")

A (variant, suffix) pair is kept only if:
(候補, 後続) の組は以下を満たす場合のみ残る:

    • variant.next_trigger is None, or the suffix starts with it
      next_trigger が無いか、後続がそれで始まる
    • the suffix starts with none of variant.blocked_prefixes
      後続がどの blocked_prefixes でも始まらない

If no fragment of any length matches at a position, the kana character is
passed through verbatim. A position where fragments matched but every
variant was rejected is a dead end and contributes nothing; other
segmentations that skip it survive.

どの長さの断片もマッチしない位置では、かな文字をそのまま通す。
断片がマッチしたが候補が全て却下された位置は行き止まりで、何も生成しない。
その位置を飛び越える別の分割は残る。

If every segmentation dead-ends, expand() returns the kana string itself.
全ての分割が行き止まりなら、expand() はかな文字列そのものを返す。

================================================================================
MEMOIZATION / メモ化
================================================================================

The set of completions for position i depends only on kana[i:], never on how
position i was reached, so results are cached per position. Positions are
filled from the end of the string backwards; every lookup therefore finds
its suffix already computed and no recursion is needed.

位置iの完成形の集合は kana[i:] のみに依存するため、位置ごとにキャッシュする。
文字列の末尾から逆順に埋めるので、再帰は不要。

The cache lives for one expand() call only.
キャッシュは1回の expand() 呼び出しの間だけ存在する。

================================================================================
"""

import logging

import util

logger = logging.getLogger(__name__)

# Upper bound of distinct options kept per position.
DEFAULT_MAX_OPTIONS = 10000


def _add_unique(results, text):
    # dict keeps insertion order, which is the display tie-break order
    results[text] = None


def _expand_position(kana, index, table, memo):
    """
    Compute the ordered completions for kana[index:], given that every
    position after index is already in memo.
    """
    results = {}
    matched = False

    for length in table.fragment_lengths():
        end = index + length
        if end > len(kana):
            continue
        variants = table.get(kana[index:end])
        if not variants:
            continue

        matched = True
        suffixes = memo[end]
        for variant in variants:
            for suffix in suffixes:
                if variant.next_trigger and not suffix.startswith(variant.next_trigger):
                    continue
                if any(suffix.startswith(prefix) for prefix in variant.blocked_prefixes):
                    continue
                _add_unique(results, variant.output_romaji() + suffix)

    if matched and not results:
        logger.debug(f'All variants rejected at {index} in "{kana}"')
    if not matched:
        char = kana[index]
        for suffix in memo[index + 1]:
            _add_unique(results, char + suffix)

    return list(results)


def _keep_shortest(results, limit):
    # sorted() is stable, and re-sorting the kept indices restores discovery order
    ranked = sorted(range(len(results)), key=lambda i: len(results[i]))[:limit]
    return [results[i] for i in sorted(ranked)]


def expand(kana, table, max_options=DEFAULT_MAX_OPTIONS):
    """
    Enumerate all valid romaji encodings of a kana string.
    かな文字列の有効なローマ字表記を全て列挙する。

    Args:
        kana: kana string; katakana is folded to hiragana first
        table: RuleTable built by romaji_rules.build_rule_table()
        max_options: cap on distinct options kept per position; when it is
                     exceeded the shortest candidates are kept in discovery
                     order. A capped position can drop a longer completion
                     that an earlier next_trigger or blocked prefix needed,
                     so capped results may miss the true shortest spelling.

    Returns:
        list: distinct romaji strings in discovery order. Never empty:
              expand('') == [''], and an empty table or a reading whose
              every segmentation dead-ends yields [kana].
    """
    hira = util.to_hiragana(kana or '')
    if table is None or table.is_empty():
        return [hira]

    memo = {len(hira): ['']}
    truncated = False
    for index in range(len(hira) - 1, -1, -1):
        results = _expand_position(hira, index, table, memo)
        if max_options and len(results) > max_options:
            results = _keep_shortest(results, max_options)
            truncated = True
        memo[index] = results

    if truncated:
        logger.warning(f'Romaji options for "{hira}" exceeded {max_options} per position; '
                       f'only the shortest ones were kept')
    options = memo[0]
    if not options:
        logger.warning(f'No romaji spelling found for "{hira}"; using the kana as-is')
        return [hira]
    logger.debug(f'expand("{hira}") -> {len(options)} option(s)')
    return options

#!/usr/bin/env python3
# options.py - Shortest-option selection for romaji candidates

import logging

logger = logging.getLogger(__name__)


def minimal_subset(options):
    """
    Return the options whose length equals the minimum length, in their
    original order.
    最短の長さを持つ候補のみを元の順序で返す。

        minimal_subset(['shi', 'si', 'ci']) -> ['si', 'ci']
    """
    options = list(options)
    if not options:
        return []
    min_length = min(len(option) for option in options)
    return [option for option in options if len(option) == min_length]


def pick_representative(options, prefix=''):
    """
    Pick the string to display for the current word.
    現在の単語に表示する文字列を選ぶ。

    Among the options starting with prefix, the shortest one is returned.
    If none starts with prefix, the shortest of all options is returned.
    Ties go to the option that comes first in the given order.

    Args:
        options: candidate romaji strings (ordered)
        prefix: what the player has typed so far

    Returns:
        str: the chosen option, or '' when options is empty
    """
    options = list(options)
    if not options:
        return ''
    filtered = [option for option in options if option.startswith(prefix)] if prefix else options
    if not filtered:
        logger.debug(f'No option starts with "{prefix}"; falling back to the shortest option')
        filtered = options
    # min() returns the first of equal elements
    return min(filtered, key=len)

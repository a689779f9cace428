import logging
import os

import orjson

logger = logging.getLogger(__name__)


# ─── Character Normalization ──────────────────────────────────────────

# Katakana ァ (U+30A1) .. ヺ (U+30FA) and ヽ ヾ (U+30FD, U+30FE) shift onto the
# hiragana block. ・ (U+30FB) and ー (U+30FC) are kept.
KATAKANA_RANGES = ((0x30A1, 0x30FA), (0x30FD, 0x30FE))
KATAKANA_TO_HIRAGANA_OFFSET = 0x60

FULLWIDTH_SPACE = 0x3000
FULLWIDTH_ASCII_START = 0xFF01
FULLWIDTH_ASCII_END = 0xFF5E
FULLWIDTH_TO_ASCII_OFFSET = 0xFEE0


def to_hiragana(text):
    '''
    Fold katakana to hiragana by shifting the code point.
    Characters outside the katakana block (ー, ・, kanji, ASCII) are kept.

        to_hiragana('カタカナー') -> 'かたかなー'
    '''
    if not text:
        return ''
    result = []
    for ch in text:
        code = ord(ch)
        if any(start <= code <= end for start, end in KATAKANA_RANGES):
            result.append(chr(code - KATAKANA_TO_HIRAGANA_OFFSET))
        else:
            result.append(ch)
    return ''.join(result)


def to_half_width_ascii(ch):
    '''
    Map a full-width ASCII character (as produced by an IME) to its
    half-width form. Other characters are returned unchanged.
    '''
    if not ch:
        return ch
    code = ord(ch[0])
    if code == FULLWIDTH_SPACE:
        return ' ' + ch[1:]
    if FULLWIDTH_ASCII_START <= code <= FULLWIDTH_ASCII_END:
        return chr(code - FULLWIDTH_TO_ASCII_OFFSET) + ch[1:]
    return ch


def normalize_key(key):
    '''
    Normalize a raw key for the matcher: half-width, then lowercase.
    '''
    return to_half_width_ascii(key or '').lower()


def is_printable_ascii_char(ch):
    '''
    True for exactly one character in the range ' ' .. '~'.
    '''
    return isinstance(ch, str) and len(ch) == 1 and ' ' <= ch <= '~'


# ─── Paths ────────────────────────────────────────────────────────────

def get_package_name():
    '''
    returns 'kana-typing'
    '''
    return 'kana-typing'


def get_version():
    return '0.1.0'


def get_datadir():
    '''
    Return the path to the data directory shipped with the source tree.
    It holds the default config.json, rule table and word list.
    '''
    return os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'data'))


def get_default_config_path():
    '''
    Return the path to the default config file.
    This is the config.json that gets copied to the user config dir on first run.
    '''
    return os.path.join(get_datadir(), 'config.json')


def get_homedir():
    '''
    Return the path to the $HOME directory.
    '''
    return os.path.expanduser('~')


def get_user_config_dir():
    '''
    Return the path to the config directory under $HOME.
    Typically, it would be $HOME/.config/kana-typing
    '''
    base = os.environ.get('XDG_CONFIG_HOME') or os.path.join(get_homedir(), '.config')
    return os.path.join(base, get_package_name())


# ─── Configuration ────────────────────────────────────────────────────

def _load_json(path):
    with open(path, 'rb') as f:
        return orjson.loads(f.read())


def _write_json(path, data):
    with open(path, 'wb') as f:
        f.write(orjson.dumps(data, option=orjson.OPT_INDENT_2))


def get_config_data():
    '''
    This function is to load the config JSON file from $HOME/.config/kana-typing
    When the file is not present (e.g., on first run), it will copy the
    default config.json from the data directory.

    Returns:
        tuple: (config_data, warnings_string) where warnings_string is empty if no warnings
    '''
    configfile_path = os.path.join(get_user_config_dir(), 'config.json')
    default_config_path = get_default_config_path()
    default_config = get_default_config_data()
    if default_config is None:
        return None, f'Default config.json not found or unreadable at {default_config_path}'
    warnings = ""

    if not os.path.exists(configfile_path):
        warning_msg = f'config.json is not found under {get_user_config_dir()} . Copying the default config.json from {default_config_path} ..'
        logger.warning(warning_msg)
        warnings = warning_msg
        try:
            os.makedirs(get_user_config_dir(), exist_ok=True)
            _write_json(configfile_path, default_config)
        except OSError as e:
            logger.error(f'Could not copy the default config.json to {configfile_path}: {e}')
        return default_config, warnings

    try:
        config_data = _load_json(configfile_path)
    except orjson.JSONDecodeError as e:
        logger.error(f'Error loading the config.json under {get_user_config_dir()}')
        logger.error(e)
        logger.error(f'Using (but not copying) the default config.json from {default_config_path} ..')
        return default_config, warnings

    if not isinstance(config_data, dict):
        logger.error(f'config.json under {get_user_config_dir()} is not a JSON object; using the default')
        return default_config, warnings

    for k in default_config:
        if k not in config_data:
            warning_msg = f'The key "{k}" was not found in the config.json under {get_user_config_dir()} . Copying the default key-value'
            logger.warning(warning_msg)
            warnings += ("\n" if warnings else "") + warning_msg
            config_data[k] = default_config[k]
        if type(config_data[k]) != type(default_config[k]):
            warning_msg = f'Type mismatch found for the key "{k}" between config.json under {get_user_config_dir()} and default config.json. Replacing the value of this key with the value in default config.json'
            logger.warning(warning_msg)
            warnings += ("\n" if warnings else "") + warning_msg
            config_data[k] = default_config[k]

    return config_data, warnings


def save_config_data(config_data):
    '''
    Save config data to the user config directory.

    Args:
        config_data: Dictionary containing configuration data to save

    Returns:
        bool: True if save was successful, False otherwise
    '''
    configfile_path = os.path.join(get_user_config_dir(), 'config.json')

    try:
        os.makedirs(get_user_config_dir(), exist_ok=True)
        _write_json(configfile_path, config_data)
        logger.info(f'Configuration saved successfully to {configfile_path}')
        return True
    except (OSError, TypeError) as e:
        logger.error(f'Error saving config.json to {configfile_path}')
        logger.error(e)
        return False


def get_default_config_data():
    default_config_path = get_default_config_path()
    if not os.path.exists(default_config_path):
        logger.error(f'config.json is not found under {get_default_config_path()}. Please check that installation was done without problem!')
        return None
    try:
        return _load_json(default_config_path)
    except orjson.JSONDecodeError as e:
        logger.error(f'Error loading the default config.json at {default_config_path}')
        logger.error(e)
        return None


# ─── Data Files ───────────────────────────────────────────────────────

DEFAULT_RULES_FILE = 'standard-romaji.txt'
DEFAULT_WORDS_FILE = 'question-words.txt'


def _find_data_file(file_name, default_file_name):
    '''
    Resolve a data file name: an existing path is used as-is, then the user
    config dir is searched, then the data dir. Falls back to the shipped default.
    '''
    if file_name:
        if os.path.exists(file_name):
            return file_name
        user_path = os.path.join(get_user_config_dir(), file_name)
        if os.path.exists(user_path):
            logger.debug(f'{file_name} found in {get_user_config_dir()}')
            return user_path
        data_path = os.path.join(get_datadir(), file_name)
        if os.path.exists(data_path):
            logger.debug(f'{file_name} found in {get_datadir()}')
            return data_path
        logger.warning(f'{file_name} not found; using the default {default_file_name}')
    return os.path.join(get_datadir(), default_file_name)


def get_rules_path(config=None):
    file_name = (config or {}).get('romaji_rules', DEFAULT_RULES_FILE)
    return _find_data_file(file_name, DEFAULT_RULES_FILE)


def get_words_path(config=None):
    file_name = (config or {}).get('words', DEFAULT_WORDS_FILE)
    return _find_data_file(file_name, DEFAULT_WORDS_FILE)


def read_text_file(path):
    """
    Read a text file, trying the encodings Japanese data files usually come in.

    Returns:
        str or None: file content, or None if the file is missing or no
                     encoding could decode it
    """
    if not os.path.exists(path):
        logger.error(f'File not found: {path}')
        return None

    # utf-8-sig also reads plain utf-8 and drops a leading BOM
    encodings = ['utf-8-sig', 'shift_jis', 'euc-jp']
    for encoding in encodings:
        try:
            with open(path, 'r', encoding=encoding) as f:
                content = f.read()
            logger.debug(f'Successfully read {path} with encoding {encoding}')
            return content
        except UnicodeDecodeError:
            continue
        except OSError as e:
            logger.error(f'Failed to read {path}: {e}')
            return None

    logger.error(f'Failed to read {path} with any supported encoding')
    return None

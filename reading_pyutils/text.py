import re
import unicodedata
from types import MappingProxyType
from typing import Final

DIGITS_PATTERN: Final[re.Pattern[str]] = re.compile(r"[0-9]+")
WHITESPACE_PATTERN: Final[re.Pattern[str]] = re.compile(r"\s+")
# $5, $1.50, $0.99
CURRENCY_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$([0-9]+)(?:\.([0-9]+))?")
CURRENCY_TRAILING_CHARS: Final[str] = ".,;:!?\"')"

DIGIT_TO_WORD: Final[MappingProxyType[str, str]] = MappingProxyType(
    {
        "0": "zero",
        "1": "one",
        "2": "two",
        "3": "three",
        "4": "four",
        "5": "five",
        "6": "six",
        "7": "seven",
        "8": "eight",
        "9": "nine",
        "10": "ten",
        "11": "eleven",
        "12": "twelve",
        "13": "thirteen",
        "14": "fourteen",
        "15": "fifteen",
        "16": "sixteen",
        "17": "seventeen",
        "18": "eighteen",
        "19": "nineteen",
        "20": "twenty",
        "30": "thirty",
        "40": "forty",
        "50": "fifty",
        "60": "sixty",
        "70": "seventy",
        "80": "eighty",
        "90": "ninety",
        "100": "hundred",
        "1000": "thousand",
    }
)
WORD_TO_DIGIT: Final[MappingProxyType[str, str]] = MappingProxyType(
    {word: digits for digits, word in DIGIT_TO_WORD.items()}
)


def _fold(text: str) -> str:
    folded = unicodedata.normalize("NFKC", text).lower()
    return "".join(ch for ch in folded if ch.isalnum())


def normalize_token(token: object) -> str:
    """Canonicalize a single word token for comparison.

    Lower-cases the token, strips every non-alphanumeric character and unifies
    numerals with their English word form, so that "10", "Ten." and "ten" all
    normalize to "ten". Digit strings without a word form pass through.

    Args:
        token: Token to normalize; anything that is not a string normalizes to ""

    Returns:
        Normalized token, possibly empty

    Side Effects:
        None - pure and idempotent
    """
    if not isinstance(token, str):
        return ""

    # Stripping can leave characters NFKC composes, so fold until stable.
    stripped = _fold(token)
    refolded = _fold(stripped)
    while refolded != stripped:
        stripped, refolded = refolded, _fold(refolded)
    if not stripped:
        return ""

    if DIGITS_PATTERN.fullmatch(stripped):
        return DIGIT_TO_WORD.get(stripped, stripped)

    if stripped in WORD_TO_DIGIT:
        return DIGIT_TO_WORD[WORD_TO_DIGIT[stripped]]

    return stripped


def is_punctuation_only(token: str) -> bool:
    """Check whether a token carries no alphanumeric content at all.

    Args:
        token: Raw token

    Returns:
        True if the token has no letters or digits
    """
    return not any(ch.isalnum() for ch in token)


def expand_currency(token: str) -> list[str]:
    """Expand a printed currency amount into the words a reader would say.

    ``$1.50`` becomes ``["1", "dollar", "50", "cents"]`` and ``$3.00`` becomes
    ``["3", "dollars"]``. Amounts are emitted as numbers, so ``$1.05``
    becomes ``["1", "dollar", "5", "cents"]`` and a single cents digit counts
    tenths. Tokens that are not currency amounts are returned unchanged as a
    single-element list.

    Args:
        token: Raw reference token

    Returns:
        List of tokens replacing the input token
    """
    match = CURRENCY_PATTERN.fullmatch(token.strip().rstrip(CURRENCY_TRAILING_CHARS))
    if match is None:
        return [token]

    dollar_digits, cent_digits = match.groups()
    dollars = int(dollar_digits)
    words = [str(dollars), "dollar" if dollars == 1 else "dollars"]
    if cent_digits is not None:
        # $2.5 is fifty cents
        cents = int(cent_digits.ljust(2, "0"))
        if cents != 0:
            words.extend([str(cents), "cent" if cents == 1 else "cents"])
    return words


def expand_currency_tokens(tokens: list[str]) -> list[str]:
    """Apply ``expand_currency`` over a token sequence, preserving order.

    Args:
        tokens: Reference tokens

    Returns:
        Flattened token list with currency amounts expanded
    """
    return [word for token in tokens for word in expand_currency(token)]


def tokenize_reference(text: str, *, drop_punctuation: bool = True) -> list[str]:
    """Split reference text into word tokens.

    Args:
        text: Reference passage
        drop_punctuation: Drop tokens consisting solely of punctuation

    Returns:
        List of raw reference tokens in reading order
    """
    tokens = [token for token in WHITESPACE_PATTERN.split(text.strip()) if token]
    if drop_punctuation:
        return [token for token in tokens if not is_punctuation_only(token)]
    return tokens

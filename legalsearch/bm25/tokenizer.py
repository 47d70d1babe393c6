"""
Tokenizer for BM25 text processing.

Tokenization pipeline:
1. Strip invisible characters (private-use glyphs left by PDF extraction,
   zero-width joiners and byte-order marks)
2. Lowercase conversion
3. Replace every run of non-letter/non-digit characters with a space
4. Split on whitespace
5. Drop single-character tokens

Works on any script: Hangul, Latin and digits are all kept as-is, so
"제58조" and "§58" both produce useful terms ("제58조", "58").
"""

import re
from typing import List

# Private-use block (PDF font glyphs that carry no text)
PRIVATE_USE_PATTERN = re.compile("[\ue000-\uf8ff]")

# Zero-width space/non-joiner/joiner and BOM
ZERO_WIDTH_PATTERN = re.compile("[\u200b\u200c\u200d\ufeff]")

# Anything that is not a letter or digit (underscore counts as separator)
NON_WORD_PATTERN = re.compile(r"[\W_]+")


def strip_invisible(text: str) -> str:
    """Remove private-use and zero-width characters, keeping case."""
    if not text:
        return ""
    text = PRIVATE_USE_PATTERN.sub("", text)
    return ZERO_WIDTH_PATTERN.sub("", text)


def clean_for_index(text: str) -> str:
    """
    Normalize text for matching: strip invisible characters and lowercase.

    Used by the tokenizer and by the heuristic booster so that indexed terms
    and substring checks always see the same characters.
    """
    return strip_invisible(text).lower()


def clean_text(text: str) -> str:
    """
    Clean text for display (previews, citations).

    Strips the same invisible characters as the index, removes trailing
    whitespace before line breaks and trims the result. Case is preserved.

    Examples:
        >>> clean_text("  공개장소\\u200b 연설  \\n대담 ")
        '공개장소 연설\\n대담'
    """
    text = strip_invisible(text)
    text = re.sub(r"\s+\n", "\n", text)
    return text.strip()


def tokenize(text: str) -> List[str]:
    """
    Tokenize text for BM25 scoring.

    Args:
        text: Input text to tokenize

    Returns:
        List of lowercase tokens (letters/digits only, length >= 2),
        in order of appearance, duplicates kept

    Examples:
        >>> tokenize("선거운동의 정의(법 §58)")
        ['선거운동의', '정의', '58']

        >>> tokenize("SNS, e-mail & 문자메시지!")
        ['sns', 'mail', '문자메시지']

        >>> tokenize("   ")
        []
    """
    if not text:
        return []

    normalized = NON_WORD_PATTERN.sub(" ", clean_for_index(text))

    return [token for token in normalized.split() if len(token) > 1]

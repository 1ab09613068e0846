"""Split a finished command line into argument words, honoring double-quoted spans."""

from typing import List

from .patterns import BLANK_LINE_PATTERN, QUOTE_CHAR, TOKEN_DELIMITERS


def is_blank(line: str) -> bool:
    """True when the line holds only whitespace (or nothing at all)."""
    return BLANK_LINE_PATTERN.match(line) is not None


def tokenize(line: str) -> List[str]:
    """Split line on delimiters; a quoted span is one token with its quotes removed.

    An unterminated quote runs to the end of the line. Trailing delimiters never
    yield an empty token, while an explicit "" does.
    """
    tokens: List[str] = []
    pos = 0
    length = len(line)

    while pos < length:
        while pos < length and line[pos] in TOKEN_DELIMITERS:
            pos += 1
        if pos >= length:
            break

        if line[pos] == QUOTE_CHAR:
            start = pos + 1
            end = line.find(QUOTE_CHAR, start)
            if end == -1:
                tokens.append(line[start:])
                break
            tokens.append(line[start:end])
            pos = end + 1
        else:
            start = pos
            while pos < length and line[pos] not in TOKEN_DELIMITERS and line[pos] != QUOTE_CHAR:
                pos += 1
            tokens.append(line[start:pos])

    return tokens

import re
from itertools import islice

# \s also matches the U+001C..U+001F separators, which are not Unicode
# White_Space; they stay inside a token.
_TOKEN = re.compile(r"[\x1c-\x1f\S]+")


def truncate_to_n_tokens(text: str, limit: int) -> str:
    """Keep the first *limit* whitespace-delimited tokens of *text*.

    Tokens are split on Unicode whitespace and re-joined with single spaces,
    so irregular spacing collapses even when nothing is dropped. A token is
    never cut in half.
    """

    if limit <= 0 or not text:
        return ""

    tokens = (match.group() for match in _TOKEN.finditer(text))
    return " ".join(islice(tokens, limit))

"""Text processing utilities."""

# Private Use Area glyphs (icon fonts) carry no readable text
PUA_START = 0xE000
PUA_END = 0xF8FF

# Non-breaking space family
NBSP_CHARS = frozenset({0x00A0, 0x202F, 0x2007, 0xFEFF})


def normalise_spaces(s: str) -> str:
    """
    Collapse runs of space, tab, LF and CR into a single space.

    Args:
        s: Input string

    Returns:
        String with normalized whitespace
    """
    if not s:
        return ""

    out = []
    in_ws = False

    for char in s:
        if char in (" ", "\t", "\n", "\r"):
            if not in_ws:
                out.append(" ")
                in_ws = True
        else:
            out.append(char)
            in_ws = False

    return "".join(out)


def clean_text(text: str) -> str:
    """
    Clean an accessible name for display.

    Private-use glyphs are dropped, each run of NBSP-family characters
    becomes one ordinary space, and the result is trimmed.

    Args:
        text: Raw text to clean

    Returns:
        Cleaned text
    """
    if not text:
        return ""

    out = []
    prev_was_space = False

    for char in text:
        code = ord(char)

        if PUA_START <= code <= PUA_END:
            continue

        if code in NBSP_CHARS:
            if not prev_was_space:
                out.append(" ")
                prev_was_space = True
            continue

        out.append(char)
        prev_was_space = char == " "

    return "".join(out).strip()

"""Syntax highlighting: language profiles and the per-row classifier.

The classifier is a pure function of a row's render string, the active
profile and whether a block comment is still open from the previous row.
Keeping the cross-row bookkeeping (the continuation cascade) in the
Document lets this module stay free of any row storage.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class Highlight(IntEnum):
    """Highlight class of one rendered character."""
    NORMAL = 0
    COMMENT = 1
    MLCOMMENT = 2
    KEYWORD1 = 3
    KEYWORD2 = 4
    STRING = 5
    NUMBER = 6
    MATCH = 7


HIGHLIGHT_NUMBERS = 1 << 0
HIGHLIGHT_STRINGS = 1 << 1

TYPE_KEYWORD_SUFFIX = "|"
SEPARATORS = ",.()+-/*=~%<>[];"
DIGITS = "0123456789"


@dataclass(frozen=True)
class LanguageProfile:
    """An immutable entry of the highlight database."""
    name: str
    filematch: tuple[str, ...]
    keywords: tuple[str, ...]
    singleline_comment_start: str = ""
    multiline_comment_start: str = ""
    multiline_comment_end: str = ""
    flags: int = 0

    def matches(self, filename: str) -> bool:
        """Extension patterns ('.c') must end the name; others may appear anywhere."""
        for pattern in self.filematch:
            if pattern.startswith("."):
                if filename.endswith(pattern):
                    return True
            elif pattern in filename:
                return True
        return False


C_KEYWORDS = (
    # C keywords
    "auto", "break", "case", "continue", "default", "do", "else", "enum",
    "extern", "for", "goto", "if", "register", "return", "sizeof", "static",
    "struct", "switch", "typedef", "union", "volatile", "while", "NULL",
    # C++ keywords
    "alignas", "alignof", "and", "and_eq", "asm", "bitand", "bitor", "class",
    "compl", "constexpr", "const_cast", "decltype", "delete", "dynamic_cast",
    "explicit", "export", "false", "friend", "inline", "mutable", "namespace",
    "new", "noexcept", "not", "not_eq", "nullptr", "operator", "or", "or_eq",
    "private", "protected", "public", "reinterpret_cast", "static_assert",
    "static_cast", "template", "this", "thread_local", "throw", "true", "try",
    "typeid", "typename", "virtual", "xor", "xor_eq",
    # Types
    "int|", "long|", "double|", "float|", "char|", "unsigned|", "signed|",
    "void|", "short|", "const|", "bool|",
)

PYTHON_KEYWORDS = (
    "and", "as", "assert", "async", "await", "break", "class", "continue",
    "def", "del", "elif", "else", "except", "finally", "for", "from",
    "global", "if", "import", "in", "is", "lambda", "nonlocal", "not", "or",
    "pass", "raise", "return", "try", "while", "with", "yield",
    "False|", "None|", "True|", "self|", "int|", "str|", "float|", "bool|",
    "bytes|", "list|", "dict|", "set|", "tuple|",
)

JAVASCRIPT_KEYWORDS = (
    "break", "case", "catch", "class", "const", "continue", "debugger",
    "default", "delete", "do", "else", "export", "extends", "finally", "for",
    "function", "if", "import", "in", "instanceof", "let", "new", "return",
    "super", "switch", "this", "throw", "try", "typeof", "var", "void",
    "while", "with", "yield", "async", "await", "of",
    "true|", "false|", "null|", "undefined|", "NaN|", "Infinity|",
)

HLDB: tuple[LanguageProfile, ...] = (
    LanguageProfile(
        name="c",
        filematch=(".c", ".h", ".cpp", ".hpp", ".cc"),
        keywords=C_KEYWORDS,
        singleline_comment_start="//",
        multiline_comment_start="/*",
        multiline_comment_end="*/",
        flags=HIGHLIGHT_NUMBERS | HIGHLIGHT_STRINGS,
    ),
    LanguageProfile(
        name="python",
        filematch=(".py", ".pyw"),
        keywords=PYTHON_KEYWORDS,
        singleline_comment_start="#",
        flags=HIGHLIGHT_NUMBERS | HIGHLIGHT_STRINGS,
    ),
    LanguageProfile(
        name="javascript",
        filematch=(".js", ".mjs", ".cjs", ".ts"),
        keywords=JAVASCRIPT_KEYWORDS,
        singleline_comment_start="//",
        multiline_comment_start="/*",
        multiline_comment_end="*/",
        flags=HIGHLIGHT_NUMBERS | HIGHLIGHT_STRINGS,
    ),
)


def select_profile(filename: Optional[str],
                   database: tuple[LanguageProfile, ...] = HLDB) -> Optional[LanguageProfile]:
    """Return the first profile whose patterns match filename, if any."""
    if not filename:
        return None
    for profile in database:
        if profile.matches(filename):
            return profile
    return None


def is_separator(c: str) -> bool:
    return c == "\0" or c.isspace() or c in SEPARATORS


def _match_keyword(render: str, i: int, keywords: tuple[str, ...]) -> tuple[int, Highlight]:
    """Longest keyword at render[i:] that ends at a separator or end of row.

    Returns (length, class); length is 0 when nothing matches.
    """
    best_len = 0
    best_class = Highlight.NORMAL
    for kw in keywords:
        is_type = kw.endswith(TYPE_KEYWORD_SUFFIX)
        word = kw[:-1] if is_type else kw
        klen = len(word)
        if klen <= best_len or not render.startswith(word, i):
            continue
        end = i + klen
        if end < len(render) and not is_separator(render[end]):
            continue
        best_len = klen
        best_class = Highlight.KEYWORD2 if is_type else Highlight.KEYWORD1
    return best_len, best_class


def highlight_row(render: str, profile: Optional[LanguageProfile],
                  open_comment: bool = False) -> tuple[list[Highlight], bool]:
    """Classify every character of render.

    Args:
        render: The row's tab-expanded text
        profile: Active language profile, or None to disable highlighting
        open_comment: Whether the previous row ended inside a block comment

    Returns:
        (highlight, continuation) where continuation tells whether a block
        comment is still open at the end of this row
    """
    hl = [Highlight.NORMAL] * len(render)
    if profile is None:
        return hl, False

    scs = profile.singleline_comment_start
    mcs = profile.multiline_comment_start
    mce = profile.multiline_comment_end
    strings = bool(profile.flags & HIGHLIGHT_STRINGS)
    numbers = bool(profile.flags & HIGHLIGHT_NUMBERS)

    prev_sep = True
    in_string = ""
    in_comment = open_comment and bool(mcs and mce)

    i = 0
    n = len(render)
    while i < n:
        c = render[i]
        prev_hl = hl[i - 1] if i > 0 else Highlight.NORMAL

        if scs and not in_string and not in_comment and render.startswith(scs, i):
            for j in range(i, n):
                hl[j] = Highlight.COMMENT
            break

        if mcs and mce and not in_string:
            if in_comment:
                hl[i] = Highlight.MLCOMMENT
                if render.startswith(mce, i):
                    for j in range(i, i + len(mce)):
                        hl[j] = Highlight.MLCOMMENT
                    i += len(mce)
                    in_comment = False
                    prev_sep = True
                else:
                    i += 1
                continue
            if render.startswith(mcs, i):
                for j in range(i, i + len(mcs)):
                    hl[j] = Highlight.MLCOMMENT
                i += len(mcs)
                in_comment = True
                continue

        if strings:
            if in_string:
                hl[i] = Highlight.STRING
                if c == "\\" and i + 1 < n:
                    hl[i + 1] = Highlight.STRING
                    i += 2
                    continue
                if c == in_string:
                    in_string = ""
                i += 1
                prev_sep = True
                continue
            if c in ('"', "'"):
                in_string = c
                hl[i] = Highlight.STRING
                i += 1
                continue

        if numbers:
            if (c in DIGITS and (prev_sep or prev_hl == Highlight.NUMBER)) or (
                c == "." and prev_hl == Highlight.NUMBER
            ):
                hl[i] = Highlight.NUMBER
                i += 1
                prev_sep = False
                continue

        if prev_sep:
            klen, kclass = _match_keyword(render, i, profile.keywords)
            if klen:
                for j in range(i, i + klen):
                    hl[j] = kclass
                i += klen
                prev_sep = False
                continue

        prev_sep = is_separator(c)
        i += 1

    return hl, in_comment

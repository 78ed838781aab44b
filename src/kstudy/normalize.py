import unicodedata


def normalize(text: str) -> str:
    """Fold ``text`` for matching: lowercase, decompose, drop combining marks.

    Hangul syllables stay decomposed into jamo, so prefix tests work at the
    jamo level for both the query and the headword.
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))

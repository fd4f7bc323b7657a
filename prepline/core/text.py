import re
from functools import lru_cache

SECTION_HEADERS = (
    "ingredients", "ingredient", "steps", "step", "instructions", "instruction",
    "directions", "direction", "method", "preparation", "what you need",
)

_HEADER_RE = re.compile(
    r"^\s*(?:" + "|".join(re.escape(h) for h in SECTION_HEADERS) + r")\s*:?\s*$",
    re.IGNORECASE,
)


def clean_md(text: str) -> str:
    """
    Sanitize markdown artifacts from text.
    Removes:
    - Leading headers (#, ##)
    - Bold markers (**, __)
    - Leading bullets (-, *, •)
    """
    if not text:
        return ""

    # Remove bolding (**text** -> text)
    text = re.sub(r"(\*\*|__)(.*?)\1", r"\2", text)

    # Remove leading headers (# Title -> Title)
    text = re.sub(r"^\s*#+\s+", "", text)

    # Remove leading bullets (- Item -> Item)
    text = re.sub(r"^\s*[-*•]\s+", "", text)

    return text.strip()


def clean_text(text: str) -> str:
    """Trim and collapse internal whitespace."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def is_section_header(line: str) -> bool:
    """True for lines like "Ingredients:" or "Instructions" with nothing else on them."""
    return bool(_HEADER_RE.match(clean_md(line or "")))


def capitalize_first(text: str) -> str:
    if not text:
        return ""
    return text[0].upper() + text[1:]


@lru_cache(maxsize=1024)
def word_pattern(phrase: str) -> re.Pattern:
    """Case-insensitive whole-word pattern for a literal phrase."""
    escaped = r"\s+".join(re.escape(part) for part in phrase.split())
    return re.compile(rf"(?<![\w-]){escaped}(?![\w-])", re.IGNORECASE)

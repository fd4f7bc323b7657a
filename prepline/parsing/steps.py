import re
from typing import Optional

from ..core.text import clean_md, clean_text, is_section_header

# "1. Mix", "2) Stir", "Step 3: Bake". "1.5 cups" is not a step marker.
NUMBERED_RE = re.compile(r"^\s*(?:step\s*\d+\s*[:.)\-]?|\d+\s*[.)](?!\d))\s*", re.IGNORECASE)
PARAGRAPH_RE = re.compile(r"\n\s*\n")
SENTENCE_RE = re.compile(r"(?<=[.!?])\s+")
MIN_SENTENCE_LENGTH = 10

SERVINGS_PATTERNS = [
    re.compile(r"\bserves\s*:?\s*(\d+)", re.IGNORECASE),
    re.compile(r"\b(\d+)\s*servings?\b", re.IGNORECASE),
    re.compile(r"\bmakes\s*:?\s*(\d+)", re.IGNORECASE),
    re.compile(r"\byields?\s*:?\s*(\d+)", re.IGNORECASE),
]


def strip_headers(text: str) -> str:
    """Drop section-header lines and markdown decoration, keeping blank lines."""
    lines = []
    for line in (text or "").replace("\r\n", "\n").split("\n"):
        if is_section_header(line):
            continue
        # Bullet cleanup must not eat a "1." marker, so only clean non-numbered lines
        lines.append(line.strip() if NUMBERED_RE.match(line) else clean_md(line))
    return "\n".join(lines).strip()


def _numbered_steps(lines: list[str]) -> list[str]:
    steps: list[str] = []
    current: Optional[str] = None
    for line in lines:
        m = NUMBERED_RE.match(line)
        if m:
            if current:
                steps.append(current)
            current = line[m.end():].strip()
        elif current is not None:
            current = f"{current} {line}".strip()
        else:
            # Text before the first numbered line stands on its own
            steps.append(line)
    if current:
        steps.append(current)
    return steps


def segment_steps(raw_text: str) -> list[str]:
    """
    Split raw instructions into step strings.

    Numbered lists win when present, then blank-line paragraphs, then
    sentences (fragments under ten characters are dropped).
    """
    text = strip_headers(raw_text)
    if not text:
        return []

    lines = [clean_text(line) for line in text.split("\n") if line.strip()]
    if any(NUMBERED_RE.match(line) for line in lines):
        return [s for s in _numbered_steps(lines) if s]

    paragraphs = [clean_text(p) for p in PARAGRAPH_RE.split(text) if p.strip()]
    if len(paragraphs) > 1:
        return paragraphs

    sentences = SENTENCE_RE.split(clean_text(text))
    return [s.strip() for s in sentences if len(s.strip()) >= MIN_SENTENCE_LENGTH]


def extract_servings(text: str) -> Optional[int]:
    """First "serves 4" / "4 servings" / "makes 12" / "yields 6" found."""
    if not text:
        return None
    for pattern in SERVINGS_PATTERNS:
        m = pattern.search(text)
        if m:
            value = int(m.group(1))
            if value > 0:
                return value
    return None

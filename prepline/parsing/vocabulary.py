"""
Closed word lists shared by the parser, the prep-step synthesizer and the
divided-ingredient distributor.
"""

import re

# Preparation action -> imperative verb used in a synthesized prep step.
# Base forms map to themselves so "peel and chop" reads the same as "peeled and chopped".
PREP_ACTIONS = {
    "chopped": "chop", "chop": "chop",
    "diced": "dice", "dice": "dice",
    "sliced": "slice", "slice": "slice",
    "minced": "mince", "mince": "mince",
    "grated": "grate", "grate": "grate",
    "shredded": "shred", "shred": "shred",
    "peeled": "peel", "peel": "peel",
    "crushed": "crush", "crush": "crush",
    "julienned": "julienne", "julienne": "julienne",
    "cubed": "cube", "cube": "cube",
    "halved": "halve", "halve": "halve",
    "quartered": "quarter", "quarter": "quarter",
    "trimmed": "trim", "trim": "trim",
    "cored": "core", "core": "core",
    "pitted": "pit", "pit": "pit",
    "seeded": "seed", "seed": "seed",
    "sifted": "sift", "sift": "sift",
    "drained": "drain", "drain": "drain",
    "rinsed": "rinse", "rinse": "rinse",
    "zested": "zest", "zest": "zest",
    "juiced": "juice", "juice": "juice",
    "mashed": "mash", "mash": "mash",
    "toasted": "toast", "toast": "toast",
}

# Words that describe the shape an ingredient arrives in. They look like
# actions ("halves" next to "halve") but never produce a prep step.
FORM_DESCRIPTORS = {
    "halves", "quarters", "pieces", "slices", "wedges", "cubes",
    "strips", "chunks", "rings", "florets",
}

# Adverbs that only ever qualify a preparation word
PREP_ADVERBS = {
    "finely", "roughly", "coarsely", "thinly", "thickly", "freshly",
    "lightly", "well", "very", "loosely", "firmly", "fully",
}

CONNECTORS = {"and", "or", "then", "&"}

TRAILING_NOTES = (
    "or to taste", "to taste", "for garnish", "for serving", "for dusting",
    "optional", "as needed", "if needed", "plus more",
)

DIVIDED_MARKERS = ("divided", "split")

# Words that signal a step uses only part of an ingredient
PARTIAL_WORDS = ("half", "remaining", "rest", "some", "part", "portion")

_TRAILING_NOTE_RE = re.compile(
    r"[\s,(]*\b(" + "|".join(re.escape(n) for n in TRAILING_NOTES) + r")\b\W*$",
    re.IGNORECASE,
)
_WORD_RE = re.compile(r"[a-z]+(?:-[a-z]+)*")


def words(text: str) -> list[str]:
    return _WORD_RE.findall((text or "").lower())


def action_verbs(text: str) -> list[str]:
    """Imperative verbs for every preparation action named in text, in order, without repeats."""
    verbs: list[str] = []
    for word in words(text):
        if word in FORM_DESCRIPTORS:
            continue
        verb = PREP_ACTIONS.get(word)
        if verb and verb not in verbs:
            verbs.append(verb)
    return verbs


def has_action(text: str) -> bool:
    return bool(action_verbs(text))


def split_trailing_note(text: str) -> tuple[str, str]:
    """Split "salt to taste" into ("salt", "to taste")."""
    m = _TRAILING_NOTE_RE.search(text or "")
    if not m or m.start() == 0:
        return (text or "").strip(), ""
    return text[: m.start()].strip(" ,"), m.group(1).lower()


def mentions_partial_use(text: str) -> bool:
    found = set(words(text))
    return any(w in found for w in PARTIAL_WORDS)

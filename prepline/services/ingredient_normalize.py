import re

DESCRIPTORS = [
    "fresh", "chopped", "minced", "diced", "sliced",
    "optional", "to taste", "for garnish",
    "dry", "dried", "ground", "whole",
    "fine", "coarse", "granulated",
    "large", "medium", "small",
    "organic", "raw", "unsalted", "salted",
]


def normalize_ingredient_key(name: str) -> str:
    """
    Canonical key for comparing user-typed ingredient names.

    "Fresh Roma Tomatoes (ripe)" and "roma tomato" share the key "roma tomato".
    """
    if not name:
        return ""

    s = name.lower()

    # Parentheticals are notes, not identity
    s = re.sub(r'\(.*?\)', '', s)

    # Replace punctuation with space to avoid merging words (all-purpose -> all purpose)
    s = re.sub(r'[^\w\s]', ' ', s)
    s = re.sub(r'\s+', ' ', s).strip()

    for desc in DESCRIPTORS:
        s = re.sub(rf'\b{desc}\b', '', s)
    s = re.sub(r'\s+', ' ', s).strip()

    # Very naive singularization: strip a trailing 's' (not 'ss') from longer words
    words = []
    for w in s.split():
        if len(w) > 3 and w.endswith('oes'):
            words.append(w[:-2])
        elif len(w) > 3 and w.endswith('s') and not w.endswith('ss'):
            words.append(w[:-1])
        else:
            words.append(w)
    return " ".join(words)

from __future__ import annotations

import re
from typing import List, Optional

# Tags that describe audience or language rather than what is in a photo
EXCLUDED_TAG_TERMS = ("years old", "Friendly", "English", "Spanish", "Bilingual", "All Ages")

STOP_WORDS = {"the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by"}

# First match wins.
CATEGORY_QUERIES = [
    (("storytime", "reading", "book"), "children reading books"),
    (("yoga", "tai chi", "exercise"), "kids yoga exercise"),
    (("steam", "maker", "engineering", "science"), "kids science hands-on activities"),
    (("sewing", "craft", "art"), "kids arts crafts"),
    (("music", "sing", "dance"), "kids music dance"),
    (("game", "play"), "kids playing games"),
    (("food", "cooking", "meal"), "kids healthy food"),
    (("library",), "kids library activities"),
]

GENERIC_QUERIES = ("kids activities", "children playing", "family events")

MAX_TITLE_KEYWORDS = 3


def detect_event_category(title: str, tags: Optional[str] = None) -> Optional[str]:
    text = f"{title} {tags or ''}".lower()
    for keywords, query in CATEGORY_QUERIES:
        if any(keyword in text for keyword in keywords):
            return query
    return None


def extract_title_keywords(title: str) -> str:
    words = re.sub(r"[^\w\s]", " ", title.lower()).split()
    keywords = [word for word in words if len(word) > 3 and word not in STOP_WORDS]
    return " ".join(keywords[:MAX_TITLE_KEYWORDS])


def _useful_tags(tags: Optional[str]) -> List[str]:
    if not tags:
        return []
    cleaned = [tag.strip() for tag in tags.split(",")]
    return [tag for tag in cleaned if tag and not any(term in tag for term in EXCLUDED_TAG_TERMS)]


def build_search_terms(title: str, tags: Optional[str] = None) -> List[str]:
    """Stock-photo queries for a listing, most specific first.

    All useful tags, then the first tag, then title keywords, then a
    category guessed from title and tags, then generic family queries.
    Duplicates are dropped keeping the first occurrence.
    """
    terms: List[str] = []
    useful = _useful_tags(tags)
    if useful:
        terms.append(" ".join(useful) + " kids")
    first_tag = tags.split(",")[0].strip() if tags else ""
    if first_tag and not any(term in first_tag for term in EXCLUDED_TAG_TERMS):
        terms.append(first_tag + " kids")
    keywords = extract_title_keywords(title or "")
    if keywords:
        terms.append(keywords + " kids")
    category = detect_event_category(title or "", tags)
    if category:
        terms.append(category)
    terms.extend(GENERIC_QUERIES)
    return list(dict.fromkeys(terms))

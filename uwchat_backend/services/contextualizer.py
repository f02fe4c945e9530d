import re

HOME_REGION = "Waterloo"

# queries that look for somewhere to go
PLACE_WORDS = frozenset({
    "place", "restaurant", "cafe", "eat", "food", "dining", "bar", "pub",
})

HOME_REGION_NAMES = frozenset({
    "waterloo", "kitchener", "cambridge", "ontario", "canada",
    "uwaterloo", "uw", "university",
})

OTHER_REGION_NAMES = frozenset({
    "nyc", "sf", "la", "los angeles", "san francisco", "new york",
    "toronto", "vancouver", "montreal", "boston", "chicago", "seattle",
    "austin", "portland", "ottawa", "calgary", "edmonton", "halifax",
    "london", "hamilton", "mississauga", "brampton", "markham",
    "richmond hill", "oakville", "burlington", "guelph", "kingston",
    "windsor", "victoria", "winnipeg", "saskatoon", "regina", "st. john's",
    "fredericton", "charlottetown", "whitehorse", "yellowknife",
})


def _word_pattern(words) -> re.Pattern:
    # longest first so "new york" is tried before shorter alternatives
    alternatives = "|".join(re.escape(w) for w in sorted(words, key=len, reverse=True))
    return re.compile(rf"\b(?:{alternatives})\b", re.IGNORECASE)


_place_re = _word_pattern(PLACE_WORDS)
_home_re = _word_pattern(HOME_REGION_NAMES)
_other_re = _word_pattern(OTHER_REGION_NAMES)


def is_place_query(query: str) -> bool:
    return bool(_place_re.search(query))


def mentions_home_region(query: str) -> bool:
    return bool(_home_re.search(query))


def mentions_other_region(query: str) -> bool:
    return bool(_other_re.search(query))


def contextualize_query(query: str, home_region: str = HOME_REGION) -> str:
    """
    Anchor an unqualified place-seeking query to the home region.

    Any mention of a region, home or otherwise, leaves the query untouched.
    """
    if is_place_query(query) and not mentions_home_region(query) and not mentions_other_region(query):
        return f"Places to {query} in {home_region}"
    return query

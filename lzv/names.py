"""Team name normalization and fuzzy equivalence."""

import logging
import re
import unicodedata

log = logging.getLogger(__name__)

# Club-type abbreviations that carry no discriminating signal in the league
GENERIC_TEAM_TOKENS: frozenset[str] = frozenset({
    'fc', 'cf', 'sc', 'ac', 'sv', 'vk', 'kv', 'vc', 'vv', 'kfc', 'ksk', 'rc',
})

# Minimum length of the shorter name for boundary containment
CORE_CONTAINMENT_MIN_LENGTH = 6
FULL_CONTAINMENT_MIN_LENGTH = 8

_UNICODE_SPACE_RE = re.compile('[\u00a0\u1680\u2000-\u200b\u202f\u205f\u3000]')
_COMBINING_MARK_RE = re.compile('[\u0300-\u036f]')
_APOSTROPHE_RE = re.compile('[\'`\u2019\u00b4]')
_NON_ALNUM_RE = re.compile(r'[^a-z0-9]+')
_WHITESPACE_RE = re.compile(r'\s+')


def _require_name(value: object) -> str:
    if not isinstance(value, str):
        raise TypeError(
            f"Teamname muss ein String sein, nicht {type(value).__name__}"
        )
    return value


def normalize_team_name(name: str) -> str:
    """Fold a free-text team name into a comparable token string.

    Unicode spaces become ASCII spaces, accents are stripped via NFKD
    decomposition, the result is lower-cased, apostrophes are removed and
    every other run of non-alphanumeric characters becomes one space.

    Args:
        name: Raw team name.

    Returns:
        Normalized name; empty string for blank input.

    Raises:
        TypeError: If name is not a string.
    """
    text = _UNICODE_SPACE_RE.sub(' ', _require_name(name))
    text = _COMBINING_MARK_RE.sub('', unicodedata.normalize('NFKD', text))
    text = _APOSTROPHE_RE.sub('', text.lower())
    text = _NON_ALNUM_RE.sub(' ', text)
    return _WHITESPACE_RE.sub(' ', text).strip()


def tokenize(name: str) -> list[str]:
    """Split a normalized team name into its words."""
    normalized = normalize_team_name(name)
    if not normalized:
        return []
    return [token for token in normalized.split(' ') if token]


def core_tokens(name: str) -> list[str]:
    """Return the words of a team name without generic club affixes."""
    return [token for token in tokenize(name) if token not in GENERIC_TEAM_TOKENS]


def has_phrase_boundary(haystack: str, phrase: str) -> bool:
    """Check whether phrase occurs in haystack as whole words."""
    if not haystack or not phrase:
        return False
    if haystack == phrase:
        return True
    return (
        haystack.startswith(f'{phrase} ')
        or haystack.endswith(f' {phrase}')
        or f' {phrase} ' in haystack
    )


def _longer_shorter(left: str, right: str) -> tuple[str, str]:
    if len(left) >= len(right):
        return left, right
    return right, left


def is_same_team(left: str, right: str) -> bool:
    """Decide whether two free-text names denote the same team.

    Checks, first hit wins:
    1. Identical normalized names
    2. Identical core tokens, in order or as a set
    3. Shorter core name (>= 6 chars) contained at a word boundary
    4. Shorter full name (>= 8 chars) contained at a word boundary

    The relation is reflexive and symmetric but not transitive.

    Args:
        left: First team name.
        right: Second team name.

    Returns:
        True if both names are considered the same team.

    Raises:
        TypeError: If either name is not a string.
    """
    left_normalized = normalize_team_name(left)
    right_normalized = normalize_team_name(right)

    if left_normalized == right_normalized:
        return True

    left_core = core_tokens(left)
    right_core = core_tokens(right)

    if left_core and right_core:
        left_joined = ' '.join(left_core)
        right_joined = ' '.join(right_core)

        if left_joined == right_joined:
            return True
        if set(left_core) == set(right_core):
            return True

        longer, shorter = _longer_shorter(left_joined, right_joined)
        if len(shorter) >= CORE_CONTAINMENT_MIN_LENGTH and has_phrase_boundary(longer, shorter):
            log.debug("Kern-Treffer: %r in %r", shorter, longer)
            return True

    longer, shorter = _longer_shorter(left_normalized, right_normalized)
    return len(shorter) >= FULL_CONTAINMENT_MIN_LENGTH and has_phrase_boundary(longer, shorter)


def token_overlap_score(left: str, right: str) -> float:
    """Symmetric share of core tokens two names have in common.

    Args:
        left: First team name.
        right: Second team name.

    Returns:
        |common| / max(|left|, |right|) over the core token sets, 0.0 if
        either set is empty.
    """
    left_set = set(core_tokens(left))
    right_set = set(core_tokens(right))
    if not left_set or not right_set:
        return 0.0
    return len(left_set & right_set) / max(len(left_set), len(right_set))


def cluster_team_names(names: list[str]) -> list[list[str]]:
    """Group team names into clusters of the same team.

    Because is_same_team is not transitive, clusters are the closure of all
    pairwise matches (union-find), so A~B and B~C put A and C together even
    if A and C do not match directly. The result does not depend on the
    input order apart from the order of the clusters and their members,
    which follow first appearance.

    Args:
        names: Team names, duplicates allowed.

    Returns:
        List of clusters, each a list of the original names.
    """
    parent = list(range(len(names)))

    def find(i: int) -> int:
        while parent[i] != i:
            parent[i] = parent[parent[i]]
            i = parent[i]
        return i

    for i in range(len(names)):
        for j in range(i + 1, len(names)):
            if is_same_team(names[i], names[j]):
                root_i, root_j = find(i), find(j)
                if root_i != root_j:
                    parent[max(root_i, root_j)] = min(root_i, root_j)

    clusters: dict[int, list[str]] = {}
    for i, name in enumerate(names):
        clusters.setdefault(find(i), []).append(name)

    log.info("%d Teamnamen zu %d Teams gruppiert", len(names), len(clusters))
    return list(clusters.values())

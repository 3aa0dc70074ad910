"""Character-limit policy for cheer messages.

Bigger cheers buy longer announcements:
    bits <= 100   -> 100 characters
    bits <= 1000  -> 250 characters
    otherwise     -> 500 characters
"""

ELLIPSIS = "..."

# (max bits, character limit), ascending
_TIERS: tuple[tuple[int, int], ...] = (
    (100, 100),
    (1000, 250),
)
_TOP_LIMIT = 500


def get_character_limit(bits: int) -> int:
    """Return the maximum message length allowed for a cheer of *bits*."""
    for max_bits, limit in _TIERS:
        if bits <= max_bits:
            return limit
    return _TOP_LIMIT


def truncate_message(message: str, limit: int) -> str:
    """Cut *message* to exactly *limit* characters, ending in an ellipsis."""
    if len(message) <= limit:
        return message
    return message[: limit - len(ELLIPSIS)] + ELLIPSIS

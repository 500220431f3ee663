"""Text and sequence helpers shared by the extractors and the aggregator"""

from typing import Callable, Iterable, List, Optional


def unique_in_order(items: Iterable[str], key: Optional[Callable[[str], str]] = None) -> List[str]:
    """Drop repeated items, keeping the first occurrence of each in its original position"""
    seen = set()
    unique = []
    for item in items:
        marker = key(item) if key else item
        if marker in seen:
            continue
        seen.add(marker)
        unique.append(item)
    return unique


def strip_trailing_punctuation(token: str) -> str:
    """Remove sentence punctuation glued to the end of a token (e.g. 'example.com/pay.')"""
    return token.rstrip(".,;:!?'\"")

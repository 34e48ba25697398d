from typing import Iterable


def unique_name(base_name: str, taken: Iterable[str]) -> str:
    """Return base_name, or base_name plus the smallest free suffix >= 2.

    "Alex" -> "Alex2" -> "Alex3" ...
    """
    taken = set(taken)
    candidate = base_name
    counter = 2
    while candidate in taken:
        candidate = f"{base_name}{counter}"
        counter += 1
    return candidate

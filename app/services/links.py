from typing import Iterable, List

# Hrefs that go nowhere
_DEAD_HREFS = {"#", ""}


def find_broken_links(links: Iterable[str], base_url: str) -> List[str]:
    """Return ``"{base_url} -> {link}"`` for every empty or ``#`` link.

    Links that have text but no href at all are reported by the crawler as
    markers in the link list, not here.
    """
    return [f"{base_url} -> {link}" for link in links if link in _DEAD_HREFS]

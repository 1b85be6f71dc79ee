# services/location_search.py
from typing import Callable, Iterable, List, TypeVar

T = TypeVar("T")

MAX_RECENT_LOCATIONS = 5

DEFAULT_LOCATIONS = [
    "Uppal",
    "Bod Uppal",
    "Narapally",
    "Ghatkesar",
    "Miyapur",
    "Hitech City",
    "Kukatpally",
    "Ameerpet",
    "Dilsukhnagar",
    "LB Nagar",
    "Mehdipatnam",
    "Begumpet",
    "Secunderabad",
    "Jubilee Hills",
    "Gachibowli",
    "Madhapur",
    "KPHB",
    "Paradise",
    "Malakpet",
    "Charminar",
    "Times Square",
    "Grand Central",
    "Central Park",
    "Brooklyn Bridge",
    "Piccadilly Circus",
    "Oxford Street",
    "Trafalgar Square",
    "Covent Garden",
    "Shibuya Crossing",
    "Shinjuku",
    "Akihabara",
    "Tokyo Tower",
]


def fuzzy_match(name: str, query: str) -> bool:
    """Substring match, or every query character appears in order (tolerates skipped letters)"""
    name = name.lower()
    query = query.lower()
    if query in name:
        return True

    position = 0
    for char in query:
        position = name.find(char, position)
        if position == -1:
            return False
        position += 1
    return True


def search_locations(items: Iterable[T], query: str, key: Callable[[T], str] = str) -> List[T]:
    """Items whose name (``key(item)``) fuzzily matches ``query``; nothing for a blank query"""
    query = query.strip()
    if not query:
        return []
    return [item for item in items if fuzzy_match(key(item), query)]


def push_recent(recent: List[str], location: str) -> List[str]:
    """Move ``location`` to the front, dropping duplicates and keeping the newest five"""
    filtered = [loc for loc in recent if loc != location]
    return [location] + filtered[:MAX_RECENT_LOCATIONS - 1]


def toggle_bookmark(bookmarks: List[str], location: str) -> List[str]:
    if location in bookmarks:
        return [loc for loc in bookmarks if loc != location]
    return bookmarks + [location]

"""Doctor discovery: free-text search, tag filtering, sorting and proximity.

Every function here is pure. Callers pass a read-only snapshot of doctors
and get a new list back; nothing is cached between calls.
"""
from typing import Iterable, List, Optional, Sequence, Union

from .geo import haversine_meters
from .models import Coordinate, Doctor, FilterState, NearbyDoctor, SortKey, TagMatchPolicy


def _contains(text: Optional[str], needle: str) -> bool:
    return needle in (text or "").casefold()


def matches_query(doctor: Doctor, query: str) -> bool:
    """Case-insensitive substring match on name, specialization or location."""
    if not query:
        return True
    needle = query.casefold()
    return (
        _contains(doctor.name, needle)
        or _contains(doctor.specialization, needle)
        or _contains(doctor.location, needle)
    )


def matches_tags(
    doctor: Doctor,
    selected_tags: Iterable[str],
    policy: TagMatchPolicy = TagMatchPolicy.ANY,
) -> bool:
    selected = list(selected_tags or [])
    if not selected:
        return True
    tags = set(doctor.tags or [])
    if TagMatchPolicy(policy) is TagMatchPolicy.ALL:
        return all(tag in tags for tag in selected)
    return any(tag in tags for tag in selected)


_SORTS = {
    SortKey.RATING: (lambda d: d.rating, True),
    SortKey.EXPERIENCE: (lambda d: d.experience, True),
    SortKey.NAME: (lambda d: d.name.casefold(), False),
}


def sort_doctors(doctors: Iterable[Doctor], sort_key: Union[SortKey, str]) -> List[Doctor]:
    # sorted() is stable with reverse=True too, so ties keep input order
    key, descending = _SORTS[SortKey(sort_key)]
    return sorted(doctors, key=key, reverse=descending)


def filter_and_sort(
    doctors: Sequence[Doctor],
    query: str = "",
    selected_tags: Iterable[str] = (),
    sort_key: Union[SortKey, str] = SortKey.RATING,
    tag_policy: TagMatchPolicy = TagMatchPolicy.ANY,
) -> List[Doctor]:
    selected = list(selected_tags or [])
    visible = [
        d for d in doctors
        if matches_query(d, query) and matches_tags(d, selected, tag_policy)
    ]
    return sort_doctors(visible, sort_key)


def apply_filter(doctors: Sequence[Doctor], state: FilterState) -> List[Doctor]:
    return filter_and_sort(
        doctors,
        query=state.query,
        selected_tags=state.selected_tags,
        sort_key=state.sort_key,
        tag_policy=state.tag_policy,
    )


def all_tags(doctors: Iterable[Doctor]) -> List[str]:
    """Every tag across the doctors, de-duplicated in first-seen order."""
    seen = {}
    for doctor in doctors:
        for tag in doctor.tags or []:
            seen.setdefault(tag, None)
    return list(seen)


def distance_to(origin: Optional[Coordinate], doctor: Doctor) -> Optional[float]:
    coordinate = doctor.coordinate
    if origin is None or coordinate is None:
        return None
    return haversine_meters(origin, coordinate)


def within(origin: Optional[Coordinate], doctor: Doctor, radius_m: float) -> bool:
    """True when the doctor is at most radius_m meters from origin (inclusive)."""
    distance = distance_to(origin, doctor)
    return distance is not None and distance <= radius_m


def nearby(
    origin: Optional[Coordinate],
    doctors: Iterable[Doctor],
    radius_m: float,
) -> List[NearbyDoctor]:
    """Doctors within radius_m of origin, closest first. No origin means no results."""
    if origin is None:
        return []
    found = []
    for doctor in doctors:
        distance = distance_to(origin, doctor)
        if distance is not None and distance <= radius_m:
            found.append(NearbyDoctor(doctor=doctor, distance_m=distance))
    found.sort(key=lambda n: n.distance_m)
    return found

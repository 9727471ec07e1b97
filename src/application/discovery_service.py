import logging
from typing import List, Optional, Sequence, Set

from pydantic import BaseModel

from src.application.ports import NotifierPort
from src.domain.discovery import all_tags, apply_filter, nearby
from src.domain.models import Coordinate, Doctor, FilterState, NearbyDoctor


logger = logging.getLogger(__name__)


class DiscoveryView(BaseModel):
    visible: List[Doctor] = []
    tags: List[str] = []
    nearby: List[NearbyDoctor] = []


class DiscoveryService:
    """Recomputes the listing and the nearby panel from one snapshot of doctors."""

    def __init__(self, nearby_radius_m: float):
        self.nearby_radius_m = nearby_radius_m

    def recompute(
        self,
        doctors: Sequence[Doctor],
        state: FilterState,
        origin: Optional[Coordinate] = None,
    ) -> DiscoveryView:
        return DiscoveryView(
            visible=apply_filter(doctors, state),
            tags=all_tags(doctors),
            nearby=nearby(origin, doctors, self.nearby_radius_m),
        )


def _describe_distance(distance_m: float) -> str:
    if distance_m < 1000:
        return f"{distance_m:.0f} m"
    return f"{distance_m / 1000:.1f} km"


class ProximityNotifier:
    """Raises one notification whenever doctors enter the nearby set.

    Holds the ids seen on the previous update; recomputing with an
    unchanged or shrinking set stays silent.
    """

    def __init__(self, notifier: NotifierPort):
        self.notifier = notifier
        self._previous: Set[str] = set()

    @property
    def previous_ids(self) -> Set[str]:
        return set(self._previous)

    def update(self, current: Sequence[NearbyDoctor]) -> List[NearbyDoctor]:
        """Diff against the previous set, notify about newcomers and return them."""
        newcomers = [n for n in current if n.doctor.id not in self._previous]
        self._previous = {n.doctor.id for n in current}
        if not newcomers:
            return []

        logger.info("%d doctor(s) entered the nearby set", len(newcomers))
        if len(newcomers) == 1:
            entry = newcomers[0]
            message = (
                f"{entry.doctor.name} ({entry.doctor.specialization}) is "
                f"{_describe_distance(entry.distance_m)} away."
            )
        else:
            names = ", ".join(n.doctor.name for n in newcomers)
            message = f"{len(newcomers)} doctors are close to you: {names}."
        self.notifier.notify("Doctors Nearby", message)
        return newcomers

    def reset(self) -> None:
        self._previous = set()

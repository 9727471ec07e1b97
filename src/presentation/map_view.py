from typing import Dict, List, Optional, Sequence, Tuple

import streamlit as st

from src.domain.models import Coordinate, Doctor


def build_markers(doctors: Sequence[Doctor]) -> List[Dict]:
    """One marker row per doctor with a coordinate, in the shape st.map expects."""
    return [
        {
            "id": d.id,
            "lat": d.lat,
            "lon": d.lng,
            "name": d.name,
            "specialization": d.specialization,
            "rating": d.rating,
        }
        for d in doctors
        if d.coordinate is not None
    ]


def render_map(
    doctors: Sequence[Doctor],
    center: Tuple[float, float],
    zoom: int = 10,
    user_location: Optional[Coordinate] = None,
    height: int = 450,
):
    markers = build_markers(doctors)
    rows = [{"lat": m["lat"], "lon": m["lon"], "color": "#2e7d32", "size": 120} for m in markers]
    if user_location is not None:
        rows.append({"lat": user_location.lat, "lon": user_location.lng, "color": "#1565c0", "size": 80})

    if not rows:
        # st.map centers on its data, so give it the requested center
        st.caption("No doctor locations to show yet.")
        rows = [{"lat": center[0], "lon": center[1], "color": "#00000000", "size": 1}]

    st.map(
        {
            "lat": [r["lat"] for r in rows],
            "lon": [r["lon"] for r in rows],
            "color": [r["color"] for r in rows],
            "size": [r["size"] for r in rows],
        },
        latitude="lat",
        longitude="lon",
        color="color",
        size="size",
        zoom=zoom,
        height=height,
    )
    return markers

"""Unit tests for the helpers and screen logic behind the Streamlit pages."""
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from src.application.discovery_service import DiscoveryService
from src.application.schemas import NewDoctorForm
from src.application.use_cases import UserData
from src.domain.models import Coordinate, DayAvailability, Doctor, UserProfile
from src.presentation.admin_screens import _add_doctor
from src.presentation.doctor_screens import (
    availability_rows,
    find_doctor,
    format_distance,
    format_doctor_card,
    show_home,
    validation_messages,
)
from src.presentation.map_view import build_markers, render_map


@pytest.fixture
def ayush():
    return Doctor(
        id="d1",
        name="Dr. Ayush Sharma",
        specialization="Panchakarma",
        location="Udupi",
        rating=4.8,
        experience=15,
        tags=["Detox", "Joint Pain"],
        lat=13.3409,
        lng=74.7421,
    )


class TestFormatting:
    @pytest.mark.parametrize("distance, expected", [
        (0, "0 m"),
        (420.4, "420 m"),
        (999, "999 m"),
        (1000, "1.0 km"),
        (5635, "5.6 km"),
    ])
    def test_format_distance(self, distance, expected):
        assert format_distance(distance) == expected

    def test_doctor_card(self, ayush):
        card = format_doctor_card(ayush)
        assert card.startswith("### Dr. Ayush Sharma")
        assert "*Panchakarma*" in card
        assert "📍 Udupi" in card
        assert "⭐ 4.8" in card
        assert "`Detox` `Joint Pain`" in card
        assert "away" not in card

    def test_doctor_card_with_distance(self, ayush):
        assert "🧭 420 m away" in format_doctor_card(ayush, 420.0)

    def test_sparse_doctor_card(self):
        card = format_doctor_card(Doctor(name="Dr. Meera Pai"))
        assert "📍" not in card
        assert "`" not in card


class TestAvailability:
    def test_rows_start_on_monday(self):
        doctor = Doctor(
            name="Dr. Deepa Nair",
            availability={
                "Sunday": {"isAvailable": False, "times": ""},
                "Monday": {"isAvailable": True, "times": "9 AM - 5 PM"},
                "Holidays": DayAvailability(is_available=False),
            },
        )
        assert availability_rows(doctor) == [
            ("Monday", "9 AM - 5 PM"),
            ("Sunday", "Not available"),
            ("Holidays", "Not available"),
        ]

    def test_missing_availability(self):
        assert availability_rows(Doctor(name="Dr. Ravi Kamath", availability=None)) == []


class TestLookups:
    def test_find_doctor(self, ayush):
        other = Doctor(id="d2", name="Dr. Ravi Kamath")
        assert find_doctor([ayush, other], "d2") is other
        assert find_doctor([ayush, other], "missing") is None
        assert find_doctor([ayush], None) is None

    def test_validation_messages(self):
        with pytest.raises(ValidationError) as excinfo:
            NewDoctorForm(name="Dr. X", specialization="Y", location="Z", rating=9, lat=0, lng=0)
        messages = validation_messages(excinfo.value)
        assert len(messages) == 1
        assert messages[0].startswith("Rating:")


class TestMapView:
    def test_markers_skip_doctors_without_coordinates(self, ayush):
        markers = build_markers([ayush, Doctor(id="d2", name="Dr. Ravi Kamath", lat=13.35)])
        assert markers == [{
            "id": "d1",
            "lat": 13.3409,
            "lon": 74.7421,
            "name": "Dr. Ayush Sharma",
            "specialization": "Panchakarma",
            "rating": 4.8,
        }]

    def test_render_map_adds_user_location(self, ayush):
        with patch("src.presentation.map_view.st") as mock_st:
            markers = render_map([ayush], center=(13.34, 74.74), user_location=Coordinate(lat=13.0, lng=74.0))

        assert len(markers) == 1
        data = mock_st.map.call_args.args[0]
        assert data["lat"] == [13.3409, 13.0]
        assert mock_st.map.call_args.kwargs["zoom"] == 10

    def test_render_map_without_markers_uses_center(self):
        with patch("src.presentation.map_view.st") as mock_st:
            assert render_map([], center=(13.34, 74.74), zoom=8) == []

        data = mock_st.map.call_args.args[0]
        assert data["lat"] == [13.34]
        assert data["lon"] == [74.74]
        mock_st.caption.assert_called_once()


class TestHomeScreen:
    def test_nearby_panel_lists_doctors_in_panel_radius(self, ayush):
        manipal = Doctor(id="d2", name="Dr. Ravi Kamath", lat=13.3525, lng=74.7928)
        ctx = MagicMock()
        ctx.discovery = MagicMock(wraps=DiscoveryService(nearby_radius_m=6000))
        ctx.discovery.nearby_radius_m = 6000
        ctx.settings.nearby_toast_radius_m = 1000
        ctx.settings.default_center = (13.34, 74.74)
        data = UserData(profile=UserProfile(id="u1"), appointments=[], doctors=[ayush, manipal])

        with patch("src.presentation.doctor_screens.st") as mock_st, \
                patch("src.presentation.doctor_screens.user_location", return_value=Coordinate(lat=13.3409, lng=74.7421)), \
                patch("src.presentation.doctor_screens.proximity_notifier") as proximity, \
                patch("src.presentation.doctor_screens.render_map"), \
                patch("src.presentation.doctor_screens._render_nearby_panel") as panel:
            mock_st.form_submit_button.return_value = False
            mock_st.button.return_value = False
            show_home(ctx, data)

        entries, radius = panel.call_args.args
        assert [n.doctor.id for n in entries] == ["d1", "d2"]
        assert radius == 6000
        toast_entries = proximity.return_value.update.call_args.args[0]
        assert [n.doctor.id for n in toast_entries] == ["d1"]
        ctx.discovery.recompute.assert_not_called()


class TestAdminScreen:
    def form(self):
        return NewDoctorForm(name="Dr. Deepa Nair", specialization="Nadi Pariksha", location="Kundapura",
                             rating=4.6, lat=13.6269, lng=74.69)

    def test_add_doctor_success(self):
        ctx = MagicMock()
        ctx.admin.add_doctor.return_value = Doctor(id="d9", name="Dr. Deepa Nair")
        with patch("src.presentation.admin_screens.st") as mock_st:
            assert _add_doctor(ctx, self.form()) is True
        mock_st.success.assert_called_once()
        mock_st.error.assert_not_called()

    def test_add_doctor_store_failure_shows_error(self):
        ctx = MagicMock()
        ctx.admin.add_doctor.side_effect = ConnectionError("store offline")
        with patch("src.presentation.admin_screens.st") as mock_st:
            assert _add_doctor(ctx, self.form()) is False
        mock_st.error.assert_called_once_with("❌ Failed to add doctor. Please try again.")
        mock_st.success.assert_not_called()

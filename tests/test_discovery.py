"""Unit tests for doctor search, tag filtering and sorting."""
import pytest

from src.domain.discovery import (
    all_tags,
    apply_filter,
    filter_and_sort,
    matches_query,
    matches_tags,
)
from src.domain.models import Doctor, FilterState, SortKey, TagMatchPolicy


def make_doctor(doctor_id, name, specialization="", location="", rating=0.0, experience=0, tags=None):
    return Doctor(
        id=doctor_id,
        name=name,
        specialization=specialization,
        location=location,
        rating=rating,
        experience=experience,
        tags=tags,
    )


@pytest.fixture
def doctors():
    return [
        make_doctor("1", "Ayush Sharma", "Panchakarma", "Udupi", 4.8, 15, ["Detox", "Joint Pain"]),
        make_doctor("2", "Deepa Nair", "Nadi Pariksha", "Kundapura", 4.6, 11, ["Diagnosis"]),
        make_doctor("3", "Ravi Kamath", "Kayachikitsa", "Manipal", 4.6, 22, ["Joint Pain", "Diabetes"]),
        make_doctor("4", "lakshmi Bhat", "Shalakya", "Mangaluru", 4.3, 8),
    ]


class TestSearch:
    def test_query_matches_specialization(self):
        doctors = [
            make_doctor("a", "Ayush Sharma", "Panchakarma", "Udupi"),
            make_doctor("b", "Deepa Nair", "Nadi Pariksha", "Kundapura"),
        ]
        result = filter_and_sort(doctors, "panch", set(), SortKey.RATING)
        assert [d.name for d in result] == ["Ayush Sharma"]

    def test_query_matches_name_and_location_case_insensitively(self, doctors):
        assert [d.id for d in filter_and_sort(doctors, "DEEPA")] == ["2"]
        assert [d.id for d in filter_and_sort(doctors, "manip")] == ["3"]

    def test_empty_query_matches_everyone(self, doctors):
        assert len(filter_and_sort(doctors, "")) == len(doctors)

    def test_no_match_returns_empty_list(self, doctors):
        assert filter_and_sort(doctors, "zzz-nonexistent") == []

    def test_empty_input(self):
        for key in SortKey:
            assert filter_and_sort([], "anything", {"Detox"}, key) == []

    def test_query_does_not_look_at_tags(self, doctors):
        assert filter_and_sort(doctors, "diabetes") == []

    def test_missing_fields_are_treated_as_empty(self):
        doctor = Doctor(id="x", name="Asha", specialization=None, location=None, tags=None)
        assert doctor.tags == []
        assert matches_query(doctor, "asha")
        assert not matches_query(doctor, "udupi")


class TestTags:
    def test_any_policy_is_default(self, doctors):
        result = filter_and_sort(doctors, "", {"Detox", "Diagnosis"})
        assert {d.id for d in result} == {"1", "2"}

    def test_all_policy_requires_every_tag(self, doctors):
        result = filter_and_sort(doctors, "", ["Joint Pain", "Diabetes"], tag_policy=TagMatchPolicy.ALL)
        assert [d.id for d in result] == ["3"]

    def test_tag_match_is_case_sensitive(self, doctors):
        assert filter_and_sort(doctors, "", {"detox"}) == []

    def test_doctor_without_tags_only_passes_empty_selection(self, doctors):
        untagged = doctors[3]
        assert matches_tags(untagged, [])
        assert not matches_tags(untagged, ["Detox"])
        assert not matches_tags(untagged, ["Detox"], TagMatchPolicy.ALL)

    def test_query_and_tags_combine(self, doctors):
        result = filter_and_sort(doctors, "udupi", {"Joint Pain"})
        assert [d.id for d in result] == ["1"]

    def test_all_tags_union(self):
        doctors = [
            make_doctor("1", "A", tags=["A", "B"]),
            make_doctor("2", "B", tags=["B", "C"]),
            make_doctor("3", "C"),
        ]
        assert set(all_tags(doctors)) == {"A", "B", "C"}
        assert all_tags(doctors) == ["A", "B", "C"]

    def test_all_tags_empty(self):
        assert all_tags([]) == []


class TestSort:
    def test_sort_by_name(self):
        doctors = [make_doctor(str(i), n) for i, n in enumerate(["Ravi", "Ayush", "Deepa"])]
        result = filter_and_sort(doctors, "", set(), SortKey.NAME)
        assert [d.name for d in result] == ["Ayush", "Deepa", "Ravi"]

    def test_sort_by_name_ignores_case(self, doctors):
        result = filter_and_sort(doctors, "", sort_key="name")
        names = [d.name.casefold() for d in result]
        assert names == sorted(names)
        assert result[2].name == "lakshmi Bhat"

    def test_sort_by_rating_descending_is_stable(self, doctors):
        result = filter_and_sort(doctors, "", sort_key=SortKey.RATING)
        assert [d.id for d in result] == ["1", "2", "3", "4"]
        for a, b in zip(result, result[1:]):
            assert a.rating >= b.rating

    def test_rating_ties_keep_input_order(self, doctors):
        reversed_input = list(reversed(doctors))
        result = filter_and_sort(reversed_input, "", sort_key=SortKey.RATING)
        assert [d.id for d in result] == ["1", "3", "2", "4"]

    def test_sort_by_experience_descending(self, doctors):
        result = filter_and_sort(doctors, "", sort_key=SortKey.EXPERIENCE)
        assert [d.experience for d in result] == [22, 15, 11, 8]

    def test_input_is_not_mutated(self, doctors):
        before = [d.id for d in doctors]
        filter_and_sort(doctors, "", sort_key=SortKey.NAME)
        assert [d.id for d in doctors] == before

    def test_unknown_sort_key_is_rejected(self, doctors):
        with pytest.raises(ValueError):
            filter_and_sort(doctors, "", sort_key="popularity")


class TestProperties:
    def test_idempotent(self, doctors):
        first = filter_and_sort(doctors, "a", {"Joint Pain"}, SortKey.EXPERIENCE)
        for _ in range(3):
            assert filter_and_sort(doctors, "a", {"Joint Pain"}, SortKey.EXPERIENCE) == first

    @pytest.mark.parametrize("query", ["", "a", "pa", "udupi", "zz"])
    @pytest.mark.parametrize("tags", [set(), {"Joint Pain"}, {"Detox", "Diagnosis"}])
    def test_filter_soundness(self, doctors, query, tags):
        result = filter_and_sort(doctors, query, tags)
        expected = {d.id for d in doctors if matches_query(d, query) and matches_tags(d, tags)}
        assert {d.id for d in result} == expected

    def test_apply_filter_uses_state(self, doctors):
        state = FilterState(query="a", selected_tags=["Joint Pain"], sort_key=SortKey.EXPERIENCE)
        assert apply_filter(doctors, state) == filter_and_sort(
            doctors, "a", ["Joint Pain"], SortKey.EXPERIENCE
        )

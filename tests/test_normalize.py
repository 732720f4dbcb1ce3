"""
Tests for response shape helpers
"""
from portal.services.normalize import flatten_profile, normalize_list, unique_values


class TestNormalizeList:
    """normalize_list identities"""

    def test_bare_list_is_returned_unchanged(self):
        body = [{"id": 1}, {"id": 2}]
        assert normalize_list(body) is body

    def test_data_envelope_is_unwrapped(self):
        records = [{"id": 1}]
        assert normalize_list({"data": records, "total": 1}) is records

    def test_other_shapes_yield_empty_list(self):
        assert normalize_list(None) == []
        assert normalize_list({"data": "nope"}) == []
        assert normalize_list({"items": [1]}) == []
        assert normalize_list("text") == []
        assert normalize_list(42) == []


class TestFlattenProfile:
    """Nested role profiles copied to the top level"""

    def test_profile_fields_are_lifted(self):
        user = {
            "id": "u1",
            "fullName": "Ada",
            "teacher": {"employeeId": "E1", "department": "Mathematics"},
        }
        flat = flatten_profile(user, "teacher", ("employeeId", "department", "designation"))
        assert flat["employeeId"] == "E1"
        assert flat["department"] == "Mathematics"
        assert flat["designation"] is None
        assert flat["teacher"] == user["teacher"]
        assert "employeeId" not in user

    def test_missing_profile_keeps_top_level_values(self):
        flat = flatten_profile({"id": "s1", "program": "BS Physics"}, "student", ("program",))
        assert flat["program"] == "BS Physics"

    def test_non_dict_record_is_returned_as_is(self):
        assert flatten_profile(None, "teacher", ("department",)) is None


def test_unique_values_sorted_and_truthy():
    """Distinct non-empty values in sorted order"""
    records = [{"section": "B"}, {"section": "A"}, {"section": "B"}, {"section": ""}, {}]
    assert unique_values(records, "section") == ["A", "B"]

"""
Tests for filter state and query building
"""
from portal.domain.filters import ALL, FilterState, build_query
from portal.services.resources import COURSES, ENROLLMENTS, STUDENTS, TEACHERS


class TestBuildQuery:
    """Outgoing query params"""

    def test_defaults_produce_no_filter_params(self):
        state = FilterState.defaults(COURSES.facets)
        assert build_query(state, COURSES.facets) == {}

    def test_search_and_semester_are_sent(self):
        state = FilterState.defaults(COURSES.facets)
        state.search_text = "CS"
        state.facets["semester"] = "Fall 2024"
        assert build_query(state, COURSES.facets) == {"search": "CS", "semester": "Fall 2024"}

    def test_search_text_is_sent_untrimmed(self):
        state = FilterState(search_text=" CS ")
        assert build_query(state, ())["search"] == " CS "

    def test_fixed_params_come_first(self):
        state = FilterState.defaults(TEACHERS.facets)
        state.facets["department"] = "Physics"
        params = build_query(state, TEACHERS.facets, TEACHERS.fixed_params)
        assert list(params) == ["role", "department"]
        assert params == {"role": "teacher", "department": "Physics"}

    def test_facet_param_name_can_differ(self):
        state = FilterState.defaults(STUDENTS.facets)
        state.facets["semester"] = "3"
        assert build_query(state, STUDENTS.facets) == {"currentSemester": "3"}


class TestEnrollmentStatusFacet:
    """Status starts at "active"; "all" is the sentinel"""

    def test_initial_state_filters_active(self):
        state = FilterState.defaults(ENROLLMENTS.facets)
        assert state.facets == {
            "course": ALL,
            "semester": ALL,
            "section": ALL,
            "status": "active",
        }
        assert build_query(state, ENROLLMENTS.facets) == {"isActive": "true"}

    def test_all_sentinels_are_omitted(self):
        state = FilterState.defaults(ENROLLMENTS.facets)
        state.facets["status"] = ALL
        assert build_query(state, ENROLLMENTS.facets) == {}
        assert state.is_unfiltered(ENROLLMENTS.facets)

    def test_inactive_and_course(self):
        state = FilterState.defaults(ENROLLMENTS.facets)
        state.facets.update(status="inactive", course="c1", section="A")
        assert build_query(state, ENROLLMENTS.facets) == {
            "courseId": "c1",
            "section": "A",
            "isActive": "false",
        }

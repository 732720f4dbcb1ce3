"""
Tests for dialog layouts and prefill
"""
import pytest

from portal.domain.forms import (
    ChangePasswordForm,
    ForumPostForm,
    ProfileForm,
    StudentCreateForm,
    StudentUpdateForm,
)
from portal.domain.models import MODAL_CREATE, MODAL_EDIT
from portal.services.filter_options import FilterOptions
from portal.ui.actions import form_layout, initial_values


def test_create_layout_asks_for_password():
    layout = form_layout("students", MODAL_CREATE, FilterOptions())
    assert layout.form is StudentCreateForm
    assert "password" in [f.name for f in layout.fields]


def test_edit_layout_has_no_password():
    layout = form_layout("students", MODAL_EDIT, FilterOptions())
    assert layout.form is StudentUpdateForm
    assert "password" not in [f.name for f in layout.fields]


def test_prefill_reads_camel_case_record():
    layout = form_layout("courses", MODAL_EDIT, FilterOptions(teachers=[("t1", "Grace")]))
    values = initial_values(
        layout.fields, {"code": "CS101", "creditHours": 4, "teacherId": "t1", "semester": "Fall 2024"}
    )
    assert values["code"] == "CS101"
    assert values["credit_hours"] == "4"
    assert values["teacher_id"] == "t1"
    assert values["description"] == ""


def test_create_defaults():
    layout = form_layout("teachers", MODAL_CREATE, FilterOptions())
    values = initial_values(layout.fields, None)
    assert values["department"] == "Computer Science"
    assert values["designation"] == "Assistant Professor"


def test_unknown_resource():
    with pytest.raises(KeyError):
        form_layout("library", MODAL_CREATE, FilterOptions())


def test_forum_layout_offers_courses():
    layout = form_layout("forum", MODAL_CREATE, FilterOptions(courses=[("c1", "CS101 - Intro")]))
    assert layout.form is ForumPostForm
    course = next(f for f in layout.fields if f.name == "course_id")
    assert course.options == [("c1", "CS101 - Intro")]


def test_profile_layout_prefills_from_profile():
    layout = form_layout("profile", MODAL_EDIT, FilterOptions())
    assert layout.form is ProfileForm
    values = initial_values(layout.fields, {"fullName": "Ada", "email": "ada@uni.edu", "dateOfBirth": "1990-12-10"})
    assert values["date_of_birth"] == "1990-12-10"
    assert values["phone"] == ""


def test_password_layout_fields_are_masked():
    layout = form_layout("password", MODAL_EDIT, FilterOptions())
    assert layout.form is ChangePasswordForm
    assert {f.kind for f in layout.fields} == {"password"}

import pytest

from eduhub.schemas import Grade, PlatformConfig, UserRole
from eduhub.services.platform_config import announcement_visible, view_for

from conftest import make_user


def _config(**overrides):
    data = {
        "announcement_text": "Exam on Sunday",
        "is_announcement_active": True,
        "announcement_target": "2SEC",
    }
    data.update(overrides)
    return PlatformConfig(**data)


@pytest.mark.parametrize("grade,role,visible", [
    (Grade.SECOND_SECONDARY, UserRole.STUDENT, True),
    (Grade.FIRST_SECONDARY, UserRole.STUDENT, False),
    (Grade.FIRST_SECONDARY, UserRole.TEAM, True),
])
def test_announcement_targets_one_cohort(grade, role, visible):
    assert announcement_visible(_config(), make_user("u1", grade=grade, role=role)) is visible


def test_announcement_for_everyone():
    user = make_user("u1", grade=Grade.THIRD_SECONDARY)
    assert announcement_visible(_config(announcement_target="ALL"), user)


def test_inactive_or_empty_announcement_is_hidden():
    user = make_user("u1", grade=Grade.SECOND_SECONDARY)
    assert not announcement_visible(_config(is_announcement_active=False), user)
    assert not announcement_visible(_config(announcement_text=""), user)


def test_view_resolves_cohort_fields():
    config = _config(
        teacher_name="Mr. Hassan",
        term_plans={Grade.SECOND_SECONDARY: "Units 1-6"},
        is_forum_locked={Grade.SECOND_SECONDARY: True},
    )
    view = view_for(config, make_user("u1", grade=Grade.SECOND_SECONDARY))
    assert view.teacher_name == "Mr. Hassan"
    assert view.announcement == "Exam on Sunday"
    assert view.term_plan == "Units 1-6"
    assert view.is_forum_locked is True

    other = view_for(config, make_user("u2", grade=Grade.FIRST_SECONDARY))
    assert other.announcement is None
    assert other.term_plan == ""
    assert other.is_forum_locked is False

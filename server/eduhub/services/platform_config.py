"""
Platform-wide settings edited by the admin: teacher profile, payment number,
announcement, per-cohort term plans and forum locks.
"""
from eduhub.config import settings
from eduhub.schemas import PlatformConfig, PlatformConfigView, User, UserRole


def announcement_visible(config: PlatformConfig, user: User) -> bool:
    """Active announcements reach their target cohort; staff always see them."""
    if not config.is_announcement_active or not config.announcement_text:
        return False
    return (
        config.announcement_target == "ALL"
        or config.announcement_target == user.grade
        or user.role in (UserRole.ADMIN, UserRole.TEAM)
    )


def view_for(config: PlatformConfig, user: User) -> PlatformConfigView:
    """The slice of the config a user sees, resolved for their cohort."""
    return PlatformConfigView(
        teacher_name=config.teacher_name or settings.teacher_name,
        teacher_bio=config.teacher_bio,
        payment_number=config.payment_number,
        announcement=config.announcement_text if announcement_visible(config, user) else None,
        term_plan=config.term_plans.get(user.grade, ""),
        is_forum_locked=config.is_forum_locked.get(user.grade, False),
    )

import logging

from sqlalchemy import select, update

from models import db, Profile

logger = logging.getLogger(__name__)

JOURNAL_POINTS = 5
EXERCISE_POINTS = 3
EXAM_POINTS = 2

DEFAULT_PROFILE_NAME = "User"


def get_profile(user_id):
    return db.session.execute(
        select(Profile).where(Profile.user_id == user_id)
    ).scalar_one_or_none()


def ensure_profile(user_id, name=None, email=None):
    """Return the user's profile, creating it with zero points if absent."""
    profile = get_profile(user_id)
    if profile is not None:
        return profile, False

    profile = Profile(
        user_id=user_id,
        name=name or email or DEFAULT_PROFILE_NAME,
        email=email,
        wellness_points=0,
    )
    db.session.add(profile)
    db.session.commit()
    logger.info("Created profile for user %s", user_id)
    return profile, True


def read_points(user_id):
    points = db.session.execute(
        select(Profile.wellness_points).where(Profile.user_id == user_id)
    ).scalar_one_or_none()
    return points or 0


def write_points(user_id, total):
    db.session.execute(
        update(Profile).where(Profile.user_id == user_id).values(wellness_points=total)
    )
    db.session.commit()
    return total


def apply_delta(user_id, delta):
    """
    Add `delta` to the user's wellness points and return the new total.

    This is a read followed by a separate write, so two requests racing for
    the same user can lose one of the updates. Use increment_points where
    that matters.
    """
    ensure_profile(user_id)
    return write_points(user_id, read_points(user_id) + delta)


def increment_points(user_id, delta):
    """Atomic variant of apply_delta: one UPDATE at the database."""
    ensure_profile(user_id)
    db.session.execute(
        update(Profile)
        .where(Profile.user_id == user_id)
        .values(wellness_points=Profile.wellness_points + delta)
    )
    db.session.commit()
    return read_points(user_id)


def award_points(user_id, delta, atomic=False):
    total = increment_points(user_id, delta) if atomic else apply_delta(user_id, delta)
    logger.info("User %s +%s wellness points (total %s)", user_id, delta, total)
    return total

"""Holistic profiles for stored students."""

import logging

from sqlalchemy.orm import Session

from school_records.schemas.profile import HolisticProfile
from school_records.services.aggregation import aggregate_profile, aggregate_profiles
from school_records.services.records import RecordStore

logger = logging.getLogger(__name__)


class ProfileService:
    """Loads record bundles from the store and aggregates them."""

    def __init__(self, db: Session):
        self.db = db
        self.store = RecordStore(db)

    def get_student_profile(self, student_id: int, session: str) -> HolisticProfile:
        placement = self.store.get_placement(student_id, session)
        return aggregate_profile(self.store.build_bundle(placement))

    def get_class_profiles(self, session: str, class_name: str) -> list[HolisticProfile]:
        """Profiles for a class in roll order.

        A student whose stored records are malformed gets a degraded
        profile instead of failing the whole class.
        """
        profiles = aggregate_profiles(self.store.build_class_bundles(session, class_name))
        degraded = sum(1 for profile in profiles if profile.degraded)
        if degraded:
            logger.warning(
                f"[AGGREGATION] {degraded} of {len(profiles)} profiles degraded - "
                f"session={session}, class={class_name}"
            )
        return profiles

import uuid
from typing import Any, Iterable

from multiflow.domain.grading import GradeProfile
from multiflow.domain.ports import GradeProfileRepository


class InMemoryGradeProfileRepository(GradeProfileRepository):
    def __init__(self) -> None:
        self._profiles: dict[str, dict[str, GradeProfile]] = {}
        self._defaults: dict[str, str | None] = {}

    @classmethod
    def from_records(cls, records: Iterable[dict[str, Any]], user_id: str) -> "InMemoryGradeProfileRepository":
        repo = cls()
        for rec in records:
            repo.add_profile(GradeProfile(**rec), user_id=user_id)
        return repo

    def fetch_profiles(self, user_id: str) -> list[GradeProfile]:
        return list(self._profiles.get(user_id, {}).values())

    def fetch_default_profile_id(self, user_id: str) -> str | None:
        return self._defaults.get(user_id)

    def add_profile(self, profile: GradeProfile, user_id: str) -> str:
        profile_id = profile.id or str(uuid.uuid4())
        stored = profile.model_copy(update={"id": profile_id, "user_id": user_id})
        self._profiles.setdefault(user_id, {})[profile_id] = stored
        # first profile becomes the default, as the store does on insert
        if self._defaults.get(user_id) is None:
            self._defaults[user_id] = profile_id
        return profile_id

    def update_profile(self, profile: GradeProfile, user_id: str) -> None:
        if profile.id is None or profile.id not in self._profiles.get(user_id, {}):
            raise KeyError(f"unknown grade profile: {profile.id}")
        self._profiles[user_id][profile.id] = profile.model_copy(update={"user_id": user_id})

    def delete_profile(self, profile_id: str, user_id: str) -> None:
        profiles = self._profiles.get(user_id, {})
        profiles.pop(profile_id, None)
        if self._defaults.get(user_id) == profile_id:
            self._defaults[user_id] = next(iter(profiles), None)

    def set_default_profile_id(self, profile_id: str | None, user_id: str) -> None:
        self._defaults[user_id] = profile_id

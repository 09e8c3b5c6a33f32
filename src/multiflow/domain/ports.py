# src/multiflow/domain/ports.py
from __future__ import annotations

from typing import Protocol

from multiflow.domain.grading import GradeProfile


# ----------------------------
# Grade profile storage
# ----------------------------

class GradeProfileRepository(Protocol):
    def fetch_profiles(self, user_id: str) -> list[GradeProfile]:
        ...

    def fetch_default_profile_id(self, user_id: str) -> str | None:
        ...

    def add_profile(self, profile: GradeProfile, user_id: str) -> str:
        ...

    def update_profile(self, profile: GradeProfile, user_id: str) -> None:
        ...

    def delete_profile(self, profile_id: str, user_id: str) -> None:
        ...

    def set_default_profile_id(self, profile_id: str | None, user_id: str) -> None:
        ...

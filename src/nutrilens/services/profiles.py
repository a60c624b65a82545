"""Food catalog and dietary profile store."""

import json
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from nutrilens.catalog import (
    DEFAULT_PROFILE_IDS,
    DEFAULT_PROFILES,
    FOOD_DATABASE,
    GUEST_PROFILE_ID,
)
from nutrilens.domain.errors import InputValidationError, ProtectedEntityError
from nutrilens.domain.foods import FoodItem
from nutrilens.domain.profiles import DietaryProfile

FOOD_DATA_KEY = "nutrilens-food-data"
PROFILES_KEY = "nutrilens-profiles"
_DEFAULT_TEXT = "None"

_logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)


class KeyValueStore(Protocol):
    """Durable string key-value storage."""

    def get(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""

    def set(self, key: str, value: str) -> None:
        """Store a value under a key, replacing any previous value."""


def _utc_timestamp_id() -> str:
    return datetime.now(tz=UTC).isoformat()


@dataclass
class ProfileService:
    """Mapping-backed CRUD over profiles with read-only catalog access."""

    store: KeyValueStore
    id_factory: Callable[[], str] = _utc_timestamp_id
    _foods: list[FoodItem] | None = field(default=None, init=False, repr=False)
    _profiles: list[DietaryProfile] | None = field(
        default=None, init=False, repr=False
    )

    def list_foods(self) -> list[FoodItem]:
        """Return a snapshot of the food catalog."""
        return list(self._load_foods())

    def get_food(self, food_id: str) -> FoodItem | None:
        """Return a catalog food by id, if present."""
        return next((food for food in self._load_foods() if food.id == food_id), None)

    def list_profiles(self) -> list[DietaryProfile]:
        """Return a snapshot of the dietary profiles."""
        return list(self._load_profiles())

    def get_profile(self, profile_id: str) -> DietaryProfile | None:
        """Return a profile by id, if present."""
        return next(
            (
                profile
                for profile in self._load_profiles()
                if profile.id == profile_id
            ),
            None,
        )

    def upsert_profile(self, payload: dict[str, object]) -> DietaryProfile:
        """Replace a profile with a matching id or create a new one."""
        name = str(payload.get("name") or "").strip()
        if not name:
            raise InputValidationError("Profile name is required.")
        profiles = self._load_profiles()
        raw_id = payload.get("id")
        existing_ids = {profile.id for profile in profiles}
        is_update = isinstance(raw_id, str) and raw_id in existing_ids
        profile = DietaryProfile(
            id=raw_id if is_update else self._new_profile_id(existing_ids),
            name=name,
            dietary_needs=_text_or_default(payload.get("dietary_needs")),
            allergies=_text_or_default(payload.get("allergies")),
            preferences=_optional_text(payload.get("preferences")),
        )
        if is_update:
            self._profiles = [
                profile if existing.id == profile.id else existing
                for existing in profiles
            ]
            _logger.info("Profile updated: id=%s", profile.id)
        else:
            self._profiles = [*profiles, profile]
            _logger.info("Profile created: id=%s", profile.id)
        self._persist_profiles()
        return profile

    def delete_profile(self, profile_id: str, selected_profile_id: str) -> str:
        """Delete a non-default profile and return the resulting selection."""
        if profile_id in DEFAULT_PROFILE_IDS:
            raise ProtectedEntityError("Cannot delete default profiles.")
        profiles = self._load_profiles()
        remaining = [profile for profile in profiles if profile.id != profile_id]
        if len(remaining) != len(profiles):
            self._profiles = remaining
            self._persist_profiles()
            _logger.info("Profile deleted: id=%s", profile_id)
        if selected_profile_id != profile_id:
            return selected_profile_id
        return remaining[0].id if remaining else GUEST_PROFILE_ID

    def _new_profile_id(self, existing_ids: set[str]) -> str:
        base = self.id_factory()
        candidate = base
        suffix = 1
        while candidate in existing_ids:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def _load_foods(self) -> list[FoodItem]:
        if self._foods is None:
            self._foods = _load_records(
                self.store, FOOD_DATA_KEY, FoodItem, FOOD_DATABASE
            )
        return self._foods

    def _load_profiles(self) -> list[DietaryProfile]:
        if self._profiles is None:
            self._profiles = _load_records(
                self.store, PROFILES_KEY, DietaryProfile, DEFAULT_PROFILES
            )
        return self._profiles

    def _persist_profiles(self) -> None:
        self.store.set(PROFILES_KEY, _dump_records(self._load_profiles()))


def _load_records(
    store: KeyValueStore,
    key: str,
    model: type[_ModelT],
    defaults: Iterable[_ModelT],
) -> list[_ModelT]:
    """Rehydrate records from the store, seeding defaults when absent or corrupt."""
    raw = store.get(key)
    if raw is None:
        records = list(defaults)
        store.set(key, _dump_records(records))
        return records
    try:
        return TypeAdapter(list[model]).validate_json(raw)
    except ValidationError:
        _logger.warning("Persisted value is corrupt, using defaults: key=%s", key)
        return list(defaults)


def _dump_records(records: Iterable[BaseModel]) -> str:
    return json.dumps(
        [record.model_dump(by_alias=True, exclude_none=True) for record in records]
    )


def _text_or_default(value: object) -> str:
    text = str(value).strip() if value is not None else ""
    return text or _DEFAULT_TEXT


def _optional_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None

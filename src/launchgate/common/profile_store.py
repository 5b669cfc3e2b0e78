from __future__ import annotations

import logging
from typing import Any

from launchgate.common.state import KeyValueStore


log = logging.getLogger(__name__)

KEY_USER_PROFILE = "profile.user_profile"
KEY_ONBOARDING_COMPLETED = "profile.onboarding_completed"
KEY_FAVORITE_RECIPES = "profile.favorite_recipe_ids"
KEY_FAVORITE_RESTAURANTS = "profile.favorite_restaurant_ids"


class ProfileStore:
    """Persistence for the native experience: profile blob, onboarding flag and favorites.

    The profile itself is an opaque JSON object owned by the native screens.
    Favorite id lists mirror the ``favoriteRecipeIds``/``favoriteRestaurantIds``
    fields of the profile when one is stored.
    """

    def __init__(self, storage: KeyValueStore):
        self.storage = storage

    def load_profile(self) -> dict[str, Any] | None:
        raw = self.storage.get(KEY_USER_PROFILE)
        if not isinstance(raw, dict):
            return None
        return dict(raw)

    def save_profile(self, profile: dict[str, Any]) -> None:
        self.storage.update({KEY_USER_PROFILE: dict(profile), KEY_ONBOARDING_COMPLETED: True})

    def is_onboarding_completed(self) -> bool:
        return bool(self.storage.get(KEY_ONBOARDING_COMPLETED, False))

    def favorite_recipe_ids(self) -> set[str]:
        return self._ids(KEY_FAVORITE_RECIPES)

    def favorite_restaurant_ids(self) -> set[str]:
        return self._ids(KEY_FAVORITE_RESTAURANTS)

    def set_recipe_favorite(self, recipe_id: str, favorite: bool) -> None:
        self._toggle(KEY_FAVORITE_RECIPES, "favoriteRecipeIds", recipe_id, favorite)

    def set_restaurant_favorite(self, restaurant_id: str, favorite: bool) -> None:
        self._toggle(KEY_FAVORITE_RESTAURANTS, "favoriteRestaurantIds", restaurant_id, favorite)

    def _ids(self, key: str) -> set[str]:
        raw = self.storage.get(key, [])
        if not isinstance(raw, list):
            return set()
        return {str(v) for v in raw}

    def _toggle(self, key: str, profile_field: str, item_id: str, favorite: bool) -> None:
        ids = self._ids(key)
        if favorite:
            ids.add(str(item_id))
        else:
            ids.discard(str(item_id))
        values: dict[str, Any] = {key: sorted(ids)}
        profile = self.load_profile()
        if profile is not None:
            profile[profile_field] = sorted(ids)
            values[KEY_USER_PROFILE] = profile
        self.storage.update(values)
        log.debug("Favorite %s %s in %s", item_id, "added" if favorite else "removed", key)

    def clear(self) -> None:
        self.storage.update(
            {},
            removed=(KEY_USER_PROFILE, KEY_ONBOARDING_COMPLETED, KEY_FAVORITE_RECIPES, KEY_FAVORITE_RESTAURANTS),
        )

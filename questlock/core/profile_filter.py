"""Profile selection — excluding system profiles and viewer-side visibility."""

from __future__ import annotations

from collections.abc import Iterable


def is_player_profile(profile_id: str, excluded_prefixes: Iterable[str]) -> bool:
    """False for system/bot profiles whose id starts with an excluded prefix."""
    return not any(profile_id.startswith(prefix) for prefix in excluded_prefixes)


class ProfileVisibility:
    """Which player names a viewer wants to see in a report.

    Syntax (comma separated, names case-insensitive):

    - ``*``               every profile
    - ``Alice,Bob``       only the named profiles
    - ``*,-Bob`` / ``-Bob``  every profile except Bob

    Named inclusions take precedence over the wildcard.
    """

    def __init__(
        self, included: Iterable[str] = (), excluded: Iterable[str] = ()
    ) -> None:
        self._included = {name.casefold() for name in included}
        self._excluded = {name.casefold() for name in excluded}

    @classmethod
    def parse(cls, text: str | None) -> ProfileVisibility:
        entries = [entry.strip() for entry in (text or "*").split(",")]
        included: list[str] = []
        excluded: list[str] = []
        for entry in entries:
            if not entry or entry == "*":
                continue
            if entry.startswith("-"):
                if entry[1:].strip():
                    excluded.append(entry[1:].strip())
            else:
                included.append(entry)
        return cls(included, excluded)

    @property
    def shows_all(self) -> bool:
        return not self._included and not self._excluded

    def is_visible(self, profile_name: str | None) -> bool:
        if not profile_name:
            return False
        key = profile_name.casefold()
        if key in self._excluded:
            return False
        if self._included:
            return key in self._included
        return True

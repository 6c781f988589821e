MAX_PLAYERS = 10  # 5 per team


class Roster:
    """
    Ordered list of unique player names for one chat.
    Rejected additions (empty, duplicate, roster full) are ignored.
    """

    def __init__(self, names=None, max_players=MAX_PLAYERS):
        self.max_players = max_players
        self._names = []
        for name in names or []:
            self.add(name)

    @classmethod
    def from_stored(cls, value, max_players=MAX_PLAYERS):
        """
        Build a roster from a persisted value.

        Anything that isn't a list of strings gives an empty roster; bad
        entries inside a list are skipped by the normal add rules.
        """
        if not isinstance(value, list):
            return cls(max_players=max_players)
        return cls(
            [name for name in value if isinstance(name, str)], max_players=max_players
        )

    @property
    def names(self) -> list[str]:
        return list(self._names)

    @property
    def slots_left(self) -> int:
        return self.max_players - len(self._names)

    @property
    def is_full(self) -> bool:
        return self.slots_left <= 0

    def add(self, name: str) -> bool:
        trimmed = name.strip() if isinstance(name, str) else ""
        if not trimmed or trimmed in self._names or self.is_full:
            return False
        self._names.append(trimmed)
        return True

    def add_bulk(self, text: str) -> list[str]:
        """Add one name per line, stopping once the roster is full"""
        candidates = []
        for line in (text or "").split("\n"):
            name = line.strip()
            if name and name not in self._names and name not in candidates:
                candidates.append(name)

        added = candidates[: max(self.slots_left, 0)]
        self._names.extend(added)
        return added

    def remove(self, name: str) -> bool:
        if name not in self._names:
            return False
        self._names.remove(name)
        return True

    def clear(self) -> None:
        self._names = []

    def __len__(self):
        return len(self._names)

    def __iter__(self):
        return iter(list(self._names))

    def __contains__(self, name):
        return name in self._names

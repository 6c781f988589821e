from models.roster import MAX_PLAYERS, Roster


def test_add_trims_and_rejects_empty_or_duplicates():
    roster = Roster()

    assert roster.add("  Alice ")
    assert not roster.add("Alice")
    assert not roster.add("   ")
    assert roster.add("alice")  # case sensitive
    assert roster.names == ["Alice", "alice"]


def test_add_stops_at_capacity():
    roster = Roster([f"P{i}" for i in range(MAX_PLAYERS)])

    assert roster.is_full
    assert not roster.add("Late")
    assert len(roster) == MAX_PLAYERS


def test_bulk_add_dedupes_and_caps_to_slots_left():
    roster = Roster([f"P{i}" for i in range(7)])

    added = roster.add_bulk("A\n\n  B  \nA\nP1\nC\nD\nE")

    assert added == ["A", "B", "C"]
    assert roster.is_full


def test_remove_and_clear():
    roster = Roster(["A", "B"])

    assert roster.remove("A")
    assert not roster.remove("A")
    roster.clear()
    assert roster.names == []


def test_from_stored_falls_back_on_malformed_values():
    assert Roster.from_stored(None).names == []
    assert Roster.from_stored("A,B").names == []
    assert Roster.from_stored({"players": ["A"]}).names == []
    assert Roster.from_stored(["A", 3, "", "A", " B "]).names == ["A", "B"]

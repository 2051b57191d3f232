"""
Smoke tests for the storage objects against a temporary SQLite database.
"""
from __future__ import annotations

import pytest

from crud_api.repositories import NotFoundError


def _ids(entities):
    return [entity.id for entity in entities]


def test_user_crud_flow(user_storage):
    user = user_storage.insert("marvin")
    assert user.id is not None
    assert user.username == "marvin"

    fetched = user_storage.get_one(str(user.id))
    assert fetched.username == "marvin"

    updated = user_storage.update(user.id, username="better marvin")
    assert updated.username == "better marvin"
    assert user_storage.get_one(user.id).username == "better marvin"

    user_storage.delete(user.id)
    with pytest.raises(NotFoundError):
        user_storage.get_one(user.id)


def test_get_all_is_ordered_and_windowed(user_storage):
    for name in ("a", "b", "c", "d", "e"):
        user_storage.insert(name)

    everyone = user_storage.get_all()
    assert [u.username for u in everyone] == ["a", "b", "c", "d", "e"]
    assert user_storage.count() == 5

    page = user_storage.get_all(offset=2, limit=2)
    assert [u.username for u in page] == ["c", "d"]
    assert user_storage.get_all(offset=4, limit=2)[0].username == "e"


def test_non_numeric_and_missing_ids_are_not_found(user_storage, chocolate_storage):
    with pytest.raises(NotFoundError):
        user_storage.get_one("abc")
    with pytest.raises(NotFoundError):
        chocolate_storage.get_one(42)
    with pytest.raises(NotFoundError):
        chocolate_storage.delete(42)
    with pytest.raises(NotFoundError):
        user_storage.update(42, username="nobody")


def test_chocolate_crud_flow(chocolate_storage):
    choc = chocolate_storage.insert("Ritter Sport", taste="Very Good")
    assert chocolate_storage.get_one(choc.id).taste == "Very Good"

    plain = chocolate_storage.insert("Plain")
    assert plain.taste == ""

    chocolate_storage.update(choc.id, taste="Excellent")
    assert chocolate_storage.get_one(choc.id).taste == "Excellent"
    assert chocolate_storage.get_one(choc.id).name == "Ritter Sport"
    assert chocolate_storage.count() == 2

    chocolate_storage.delete(plain.id)
    assert _ids(chocolate_storage.get_all()) == [choc.id]


def test_sweets_are_a_set(user_storage, chocolate_storage):
    first = chocolate_storage.insert("Milka", taste="sweet")
    second = chocolate_storage.insert("Lindt", taste="dark")
    user = user_storage.insert("marvin", sweet_ids=[str(first.id)])

    user_storage.add_sweets(user.id, [str(second.id), str(second.id), str(first.id)])
    assert _ids(user_storage.get_sweets(user.id)) == [first.id, second.id]

    user_storage.remove_sweets(user.id, [str(first.id), "9999"])
    assert _ids(user_storage.get_sweets(user.id)) == [second.id]

    user_storage.remove_sweets(user.id, [str(first.id)])
    assert _ids(user_storage.get_sweets(user.id)) == [second.id]


def test_replace_sweets_swaps_the_whole_set(user_storage, chocolate_storage):
    first = chocolate_storage.insert("Milka")
    second = chocolate_storage.insert("Lindt")
    user = user_storage.insert("marvin", sweet_ids=[first.id, second.id])

    replaced = user_storage.replace_sweets(user.id, [second.id, second.id])
    assert _ids(replaced.sweets) == [second.id]

    assert _ids(user_storage.replace_sweets(user.id, []).sweets) == []


def test_linking_unknown_chocolate_leaves_relationship_untouched(user_storage, chocolate_storage):
    choc = chocolate_storage.insert("Milka")
    user = user_storage.insert("marvin", sweet_ids=[choc.id])

    with pytest.raises(NotFoundError) as excinfo:
        user_storage.add_sweets(user.id, ["404"])
    assert excinfo.value.entity == "chocolate"

    with pytest.raises(NotFoundError):
        user_storage.replace_sweets(user.id, [choc.id, 404])
    assert _ids(user_storage.get_sweets(user.id)) == [choc.id]

    with pytest.raises(NotFoundError):
        user_storage.insert("ghost", sweet_ids=["404"])
    assert [u.username for u in user_storage.get_all()] == ["marvin"]


def test_deleting_a_chocolate_unlinks_it(user_storage, chocolate_storage):
    keep = chocolate_storage.insert("Milka")
    gone = chocolate_storage.insert("Lindt")
    user = user_storage.insert("marvin", sweet_ids=[keep.id, gone.id])

    chocolate_storage.delete(gone.id)
    assert _ids(user_storage.get_sweets(user.id)) == [keep.id]

    user_storage.delete(user.id)
    assert _ids(chocolate_storage.get_all()) == [keep.id]


def test_update_sets_name_and_sweets_in_one_commit(user_storage, chocolate_storage):
    first = chocolate_storage.insert("Milka")
    second = chocolate_storage.insert("Lindt")
    user = user_storage.insert("marvin", sweet_ids=[first.id])

    updated = user_storage.update(user.id, sweet_ids=[str(second.id)], username="changed")
    assert updated.username == "changed"
    assert _ids(updated.sweets) == [second.id]

    with pytest.raises(NotFoundError):
        user_storage.update(user.id, sweet_ids=["404"], username="lost")
    unchanged = user_storage.get_one(user.id)
    assert unchanged.username == "changed"
    assert _ids(unchanged.sweets) == [second.id]


def test_ids_outside_64_bit_range_are_not_found(user_storage, chocolate_storage):
    huge = 10**22
    with pytest.raises(NotFoundError):
        user_storage.get_one(huge)
    with pytest.raises(NotFoundError):
        chocolate_storage.get_one(str(-(2**63) - 1))
    user = user_storage.insert("marvin")
    with pytest.raises(NotFoundError):
        user_storage.add_sweets(user.id, [str(huge)])

import pytest

from errors import InvalidIdentifier, InvalidType
from registry import REGISTRY


def test_registry_tags_in_registration_order():
    assert REGISTRY.tags == ("volunteer", "opinion", "suggestion", "developmentIdea")
    assert len(REGISTRY) == 4


@pytest.mark.parametrize("tag", ["bogus", "Volunteer", "ideas"])
def test_resolve_unknown_type_names_accepted_set(tag):
    with pytest.raises(InvalidType) as info:
        REGISTRY.resolve(tag)
    assert info.value.status_code == 400
    assert info.value.message == (
        "Invalid type. Must be: volunteer, opinion, suggestion, or developmentIdea"
    )


def test_resolve_missing_type_is_required_error():
    with pytest.raises(InvalidType) as info:
        REGISTRY.resolve(None)
    assert info.value.message.startswith("Type is required.")


def test_only_opinion_lacks_viewed_flag():
    assert [kind.tag for kind in REGISTRY if not kind.supports_viewed] == ["opinion"]


def test_search_filter_empty_means_everything():
    kind = REGISTRY.resolve("opinion")
    assert kind.search_filter(None) == {}
    assert kind.search_filter("   ") == {}


def test_search_filter_spans_kind_fields_and_escapes_regex():
    kind = REGISTRY.resolve("suggestion")
    query = kind.search_filter(" a+b ")
    fields = [next(iter(clause)) for clause in query["$or"]]
    assert fields == ["fullname", "mobile", "area", "typeOfSuggest", "comment"]
    assert query["$or"][0]["fullname"] == {"$regex": r"a\+b", "$options": "i"}


def test_search_is_case_insensitive_substring(mongo_db, add_record):
    kind = REGISTRY.resolve("volunteer")
    add_record("volunteer", 1, education="Post GRADUATE")
    add_record("volunteer", 2, education="School")
    assert kind.count(mongo_db, kind.search_filter("graduate")) == 1


def test_find_orders_newest_first_with_skip_and_limit(mongo_db, add_record):
    kind = REGISTRY.resolve("developmentIdea")
    ids = [add_record("developmentIdea", minutes) for minutes in range(5)]
    docs = kind.find(mongo_db, {}, skip=1, limit=2)
    assert [str(doc["_id"]) for doc in docs] == [ids[3], ids[2]]


def test_invalid_identifier_is_rejected(mongo_db):
    kind = REGISTRY.resolve("volunteer")
    with pytest.raises(InvalidIdentifier):
        kind.find_by_id(mongo_db, "not-an-object-id")


def test_mark_viewed_without_flag_leaves_record_alone(mongo_db, add_record):
    kind = REGISTRY.resolve("opinion")
    record_id = add_record("opinion", 1)
    doc = kind.mark_viewed(mongo_db, record_id)
    assert str(doc["_id"]) == record_id
    assert "viewed" not in mongo_db[kind.collection].find_one({})

import pytest

from clustercache.resources import (
    MEMORY,
    VCORE,
    Resource,
    ResourceError,
    add,
    equals,
    fit_in,
    is_zero,
    resource_from_conf,
    sub,
)


def test_from_conf_parses_strings():
    res = resource_from_conf({"memory": "100", "vcores": "10"})
    assert res.resources == {"memory": 100, "vcores": 10}


def test_from_conf_accepts_ints():
    res = resource_from_conf({"memory": 50, "vcore": 1})
    assert res.resources == {"memory": 50, "vcore": 1}


def test_from_conf_empty():
    assert resource_from_conf(None).resources == {}
    assert resource_from_conf({}).resources == {}


@pytest.mark.parametrize("bad", ["abc", "1.5", "", True])
def test_from_conf_rejects_invalid(bad):
    with pytest.raises(ResourceError):
        resource_from_conf({"memory": bad})


def test_add_matches_source_values():
    first = Resource({MEMORY: 100, VCORE: 200})
    second = Resource({MEMORY: 20, VCORE: 200})
    assert add(first, second).resources == {MEMORY: 120, VCORE: 400}


def test_add_does_not_mutate_inputs():
    first = Resource({MEMORY: 100})
    second = Resource({MEMORY: 20})
    add(first, second)
    assert first.resources == {MEMORY: 100}
    assert second.resources == {MEMORY: 20}


def test_add_then_sub_round_trip():
    base = resource_from_conf({"memory": "100", "vcores": "10"})
    other = Resource({"memory": 7, "gpu": 2})
    assert equals(sub(add(base, other), other), base)


def test_sub_self_is_zero():
    res = resource_from_conf({"memory": "100", "vcores": "10"})
    assert is_zero(sub(res, res))


def test_sub_can_go_negative():
    result = sub(Resource(), Resource({MEMORY: 5}))
    assert result.resources[MEMORY] < 0
    assert not fit_in(Resource(), Resource({MEMORY: 5}))


def test_none_handling():
    res = Resource({MEMORY: 3})
    assert equals(add(None, res), res)
    assert equals(sub(res, None), res)
    assert is_zero(None)
    assert fit_in(None, None)


def test_fit_in():
    larger = Resource({MEMORY: 200, VCORE: 2})
    assert fit_in(larger, Resource({MEMORY: 200, VCORE: 2}))
    assert not fit_in(larger, Resource({MEMORY: 300, VCORE: 2}))
    assert not fit_in(larger, Resource({MEMORY: 100, VCORE: 5}))
    assert not fit_in(larger, Resource({"gpu": 1}))
    assert fit_in(larger, Resource())


def test_is_zero():
    assert is_zero(Resource())
    assert is_zero(Resource({MEMORY: 0}))
    assert not is_zero(Resource({MEMORY: 1}))


def test_equals_missing_is_zero():
    assert equals(Resource({MEMORY: 0}), Resource())
    assert not equals(Resource({MEMORY: 1}), Resource())
    assert not equals(Resource(), None)
    assert equals(None, None)
    assert Resource({MEMORY: 4}) == Resource({MEMORY: 4, VCORE: 0})


def test_copy_is_independent():
    res = Resource({MEMORY: 10})
    copied = res.copy()
    copied.add_to(Resource({MEMORY: 5}))
    assert res.resources == {MEMORY: 10}
    assert copied == add(res, Resource({MEMORY: 5}))


def test_add_to_in_place():
    total = Resource()
    total.add_to(Resource({MEMORY: 1}))
    total.add_to(Resource({MEMORY: 1}))
    total.add_to(None)
    assert total == add(Resource({MEMORY: 1}), Resource({MEMORY: 1}))


def test_str_format():
    assert str(Resource({VCORE: 1, MEMORY: 100})) == "map[memory:100 vcore:1]"
    assert str(Resource()) == "map[]"
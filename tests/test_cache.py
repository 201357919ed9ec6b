import fakeredis
import pytest
from redis.exceptions import ConnectionError

from teashop.services.cache import INVALIDATES, QueryCache, query_key


@pytest.fixture
def qc():
    return QueryCache(fakeredis.FakeRedis(decode_responses=True), ttl_seconds=30)


def test_query_keys():
    assert query_key("categories") == "query:categories"
    assert query_key("products", None, "chai") == "query:products:all:chai"
    assert query_key("product", 7) == "query:product:7"


def test_loader_runs_once(qc):
    calls = []

    def load():
        calls.append(1)
        return [{"id": 1}]
    assert qc.get_or_load("query:categories", load) == [{"id": 1}]
    assert qc.get_or_load("query:categories", load) == [{"id": 1}]
    assert len(calls) == 1
    assert 0 < qc.client.ttl("query:categories") <= 30


def test_invalidation_follows_the_declared_table(qc):
    for key in ("query:categories", "query:products:all", "query:products:3:all", "query:product:3"):
        qc.get_or_load(key, lambda: "x")

    qc.invalidate("update_product")
    assert sorted(qc.client.keys("*")) == ["query:categories"]

    qc.invalidate("create_category")
    assert qc.client.keys("*") == []


def test_every_mutation_names_known_families():
    families = {"categories", "products", "product"}
    for mutation, targets in INVALIDATES.items():
        assert set(targets) <= families, mutation


def test_unknown_mutation_is_a_programming_error(qc):
    with pytest.raises(KeyError):
        qc.invalidate("rename_everything")


def test_disabled_cache_is_pass_through():
    qc = QueryCache(None)
    assert qc.get_or_load("query:categories", lambda: [1]) == [1]
    assert qc.invalidate("delete_product") == 0


def test_redis_outage_falls_back_to_loader():
    class DownRedis:
        def get(self, key):
            raise ConnectionError("redis is down")

    assert QueryCache(DownRedis()).get_or_load("query:categories", lambda: ["fresh"]) == ["fresh"]

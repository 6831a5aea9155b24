import logging

import pytest

from seqtrie.app import SEED_WORDS, _log_level, create_app


@pytest.fixture
def client():
    app = create_app(seed=["cat", "car", "ca", "dog"])
    app.testing = True
    return app.test_client()


def test_index_lists_endpoints(client):
    body = client.get("/").get_json()
    assert body["service"] == "Sequence Trie Service"
    assert "POST /union" in body["endpoints"]


def test_health_and_stats(client):
    assert client.get("/health").get_json()["trie_size"] == 4
    stats = client.get("/stats").get_json()
    assert stats["total_sequences"] == 4
    assert stats["seed_sequences"] == 4


def test_default_seed():
    app = create_app()
    stats = app.test_client().get("/stats").get_json()
    assert stats["total_sequences"] == len(set(SEED_WORDS))


def test_contains(client):
    assert client.get("/contains?q=cat").get_json()["found"] is True
    assert client.get("/contains?q=CA").get_json()["found"] is True
    assert client.get("/contains?q=c").get_json()["found"] is False
    assert client.get("/contains").status_code == 400


def test_completions(client):
    body = client.get("/completions?q=ca").get_json()
    assert body["prefix"] == ["c", "a"]
    assert sorted(body["completions"]) == [[], ["r"], ["t"]]
    assert body["count"] == 3


def test_completions_limit_and_min_length(client):
    body = client.get("/completions?q=ca&min_length=1").get_json()
    assert sorted(body["completions"]) == [["r"], ["t"]]
    body = client.get("/completions?q=ca&limit=1").get_json()
    assert body["count"] == 1
    body = client.get("/completions?q=zz").get_json()
    assert body["completions"] == []


def test_completions_without_prefix_lists_everything(client):
    body = client.get("/completions?limit=100").get_json()
    assert body["count"] == 4


def test_contents(client):
    body = client.get("/contents").get_json()
    assert sorted("".join(s) for s in body["sequences"]) == ["ca", "car", "cat", "dog"]
    assert client.get("/contents?limit=2").get_json()["count"] == 2
    assert client.get("/contents?limit=oops").get_json()["count"] == 4


def test_insert_key_and_sequence(client):
    resp = client.post("/insert", json={"key": "cow"})
    assert resp.status_code == 201
    assert resp.get_json()["trie_size"] == 5

    resp = client.post("/insert", json={"sequence": [1, 2, 3]})
    assert resp.status_code == 201
    assert resp.get_json()["inserted"] == [1, 2, 3]

    resp = client.post("/insert", json={"key": "new york city", "sep": " "})
    assert resp.get_json()["inserted"] == ["new", "york", "city"]
    body = client.get("/completions?q=new%20york&sep=%20").get_json()
    assert body["completions"] == [["city"]]


def test_insert_rejects_bad_bodies(client):
    assert client.post("/insert", json={}).status_code == 400
    assert client.post("/insert", json={"key": "   "}).status_code == 400
    assert client.post("/insert", json={"sequence": "abc"}).status_code == 400
    assert client.post("/insert", json={"sequence": [[1]]}).status_code == 400
    assert client.post("/insert", json={"key": "ab", "sep": 3}).status_code == 400
    assert client.post("/insert", json={"key": "x" * 300}).status_code == 400


def test_insert_empty_sequence(client):
    assert client.post("/insert", json={"sequence": []}).status_code == 201
    body = client.get("/completions?limit=100").get_json()
    assert [] in body["completions"]


def test_remove(client):
    resp = client.delete("/remove?q=cat")
    assert resp.status_code == 200
    assert resp.get_json()["removed"] is True
    assert client.get("/contains?q=cat").get_json()["found"] is False

    resp = client.delete("/remove?q=cat")
    assert resp.status_code == 404
    assert client.delete("/remove").status_code == 400


def test_union(client):
    resp = client.post("/union", json={"keys": ["cow", "cat"]})
    assert resp.get_json() == {"operation": "union", "candidates": 2, "trie_size": 5}


def test_intersect(client):
    client.post("/intersect", json={"sequences": [["c", "a", "t"], ["d", "o"]]})
    body = client.get("/contents").get_json()
    assert body["sequences"] == [["c", "a", "t"]]


def test_exclusive_or_toggles(client):
    resp = client.post("/exclusive-or", json={"keys": ["cat", "cow"]})
    assert resp.get_json()["trie_size"] == 4
    assert client.get("/contains?q=cow").get_json()["found"] is True
    assert client.get("/contains?q=cat").get_json()["found"] is False


def test_subtract(client):
    resp = client.post("/subtract", json={"keys": ["cat", "cow"]})
    assert resp.get_json()["trie_size"] == 3
    assert client.get("/contains?q=cow").get_json()["found"] is False


def test_algebra_rejects_bad_bodies(client):
    assert client.post("/union", json={}).status_code == 400
    assert client.post("/union", json={"sequences": "cat"}).status_code == 400
    assert client.post("/union", json={"keys": ["cat", 3]}).status_code == 400
    assert client.post("/union", json={"sequences": [["a"] * 300]}).status_code == 400


def test_disjoint(client):
    assert client.post("/disjoint", json={"keys": ["cow", "c"]}).get_json()["disjoint"] is True
    assert client.post("/disjoint", json={"keys": ["cow", "dog"]}).get_json()["disjoint"] is False
    assert client.post("/disjoint", json={"nothing": []}).status_code == 400


def test_json_sequences_are_queried_and_removed_as_given(client):
    client.post("/insert", json={"sequence": ["C", "A", "T"]})
    client.post("/insert", json={"sequence": [1, 2, 3]})

    body = client.post("/contains", json={"sequence": ["C", "A", "T"]}).get_json()
    assert body == {"sequence": ["C", "A", "T"], "found": True}
    assert client.post("/contains", json={"sequence": [1, 2, 3]}).get_json()["found"] is True
    assert client.get("/contains?q=CAT").get_json()["found"] is True

    resp = client.delete("/remove", json={"sequence": ["C", "A", "T"]})
    assert resp.status_code == 200
    resp = client.delete("/remove", json={"sequence": [1, 2, 3]})
    assert resp.status_code == 200
    assert resp.get_json()["trie_size"] == 4
    assert client.post("/contains", json={"sequence": [1, 2, 3]}).get_json()["found"] is False
    assert client.post("/contains", json={"sequence": "abc"}).status_code == 400


def test_bools_ints_and_floats_stay_distinct():
    client = create_app(seed=[]).test_client()
    for sequence in ([True], [1], [1.0]):
        assert client.post("/insert", json={"sequence": sequence}).get_json()["inserted"] == sequence
    assert client.get("/stats").get_json()["total_sequences"] == 3

    members = client.get("/contents").get_json()["sequences"]
    assert sorted(repr(member) for member in members) == ["[1.0]", "[1]", "[True]"]

    client.delete("/remove", json={"sequence": [1]})
    assert client.post("/contains", json={"sequence": [True]}).get_json()["found"] is True
    assert client.post("/contains", json={"sequence": [1.0]}).get_json()["found"] is True
    assert client.post("/contains", json={"sequence": [1]}).get_json()["found"] is False


def test_unknown_log_level_falls_back_to_info():
    assert _log_level("bogus") == logging.INFO
    assert _log_level("debug") == logging.DEBUG
    assert _log_level(" WARNING ") == logging.WARNING

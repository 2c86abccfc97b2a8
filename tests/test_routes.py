import hashlib
from datetime import datetime
from urllib.parse import quote


def post(client, value):
    return client.post("/strings", json={"value": value})


def test_create_string(client):
    response = post(client, "A man, a plan, a canal: Panama")
    assert response.status_code == 201

    body = response.json()
    expected_hash = hashlib.sha256("A man, a plan, a canal: Panama".encode()).hexdigest()
    assert body["id"] == expected_hash
    assert body["value"] == "A man, a plan, a canal: Panama"
    assert body["properties"]["sha256_hash"] == expected_hash
    assert body["properties"]["length"] == 30
    assert body["properties"]["is_palindrome"] is True
    assert body["properties"]["word_count"] == 7
    assert body["properties"]["unique_characters"] == 6
    assert body["properties"]["character_frequency_map"]["a"] == 10
    assert datetime.fromisoformat(body["created_at"].replace("Z", "+00:00")).tzinfo is not None


def test_create_duplicate_is_conflict(client):
    assert post(client, "twice").status_code == 201

    response = post(client, "twice")
    assert response.status_code == 409
    assert response.json() == {"error": "String already exists in the system"}
    assert client.get("/strings").json()["count"] == 1


def test_create_missing_value(client):
    response = client.post("/strings", json={})
    assert response.status_code == 400
    assert "error" in response.json()


def test_create_empty_value(client):
    assert post(client, "").status_code == 400


def test_create_non_string_value(client):
    response = post(client, 12345)
    assert response.status_code == 422
    assert response.json() == {"error": 'Invalid data type for "value" (must be string)'}


def test_get_string(client):
    post(client, "hello world")

    response = client.get(f"/strings/{quote('hello world')}")
    assert response.status_code == 200
    assert response.json()["properties"]["word_count"] == 2


def test_get_missing_string(client):
    response = client.get("/strings/missing")
    assert response.status_code == 404
    assert response.json() == {"error": "String does not exist in the system"}


def test_list_with_filters(client):
    for value in ("level", "noon", "hello", "race car"):
        post(client, value)

    response = client.get("/strings", params={"is_palindrome": "true", "word_count": 1})
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert sorted(item["value"] for item in body["data"]) == ["level", "noon"]
    assert body["filters_applied"] == {"is_palindrome": True, "word_count": 1}

    body = client.get("/strings", params={"contains_character": "c"}).json()
    assert [item["value"] for item in body["data"]] == ["race car"]


def test_list_without_filters(client):
    post(client, "abc")
    body = client.get("/strings").json()
    assert body["count"] == 1
    assert body["filters_applied"] == {}


def test_list_rejects_bad_parameters(client):
    assert client.get("/strings", params={"min_length": "abc"}).status_code == 400
    assert client.get("/strings", params={"min_length": -1}).status_code == 400
    assert client.get("/strings", params={"is_palindrome": "maybe"}).status_code == 400
    assert client.get("/strings", params={"contains_character": "ab"}).status_code == 400


def test_natural_language_filter(client):
    for value in ("racecar", "level", "hello", "never odd or even", "a"):
        post(client, value)

    response = client.get(
        "/strings/filter-by-natural-language",
        params={"query": "single word palindromes longer than 5 characters"},
    )
    assert response.status_code == 200
    body = response.json()
    assert [item["value"] for item in body["data"]] == ["racecar"]
    assert body["count"] == 1
    assert body["interpreted_query"] == {
        "original": "single word palindromes longer than 5 characters",
        "parsed_filters": {"word_count": 1, "is_palindrome": True, "min_length": 6},
    }


def test_natural_language_first_vowel(client):
    post(client, "banana")
    post(client, "hello")

    body = client.get(
        "/strings/filter-by-natural-language",
        params={"query": "palindromic strings that contain the first vowel"},
    ).json()
    assert body["interpreted_query"]["parsed_filters"] == {"is_palindrome": True, "contains_character": "a"}
    assert body["count"] == 0


def test_natural_language_errors(client):
    response = client.get("/strings/filter-by-natural-language")
    assert response.status_code == 400
    assert response.json() == {"error": "Query parameter is required"}

    response = client.get("/strings/filter-by-natural-language", params={"query": "show me cats"})
    assert response.status_code == 400
    assert "no recognizable filters" in response.json()["error"]


def test_delete_string(client):
    post(client, "bye now")

    response = client.delete(f"/strings/{quote('bye now')}")
    assert response.status_code == 204
    assert response.content == b""
    assert client.get(f"/strings/{quote('bye now')}").status_code == 404
    assert client.delete(f"/strings/{quote('bye now')}").status_code == 404


def test_root_and_health(client):
    assert client.get("/").json()["message"] == "String Analyzer Service"
    assert client.get("/health").json()["status"] == "healthy"


def test_create_null_value_is_treated_as_missing(client):
    response = post(client, None)
    assert response.status_code == 400
    assert "error" in response.json()


def test_list_rejects_oversized_length(client):
    post(client, "abc")

    response = client.get("/strings", params={"min_length": "99999999999999999999"})
    assert response.status_code == 400
    assert client.get("/strings", params={"max_length": 2 ** 63}).status_code == 400
    assert client.get("/strings", params={"word_count": 2 ** 63}).status_code == 400

    # the largest accepted bound still runs against the database
    body = client.get("/strings", params={"max_length": 2 ** 63 - 1}).json()
    assert body["count"] == 1


def test_natural_language_oversized_length(client):
    post(client, "abc")

    response = client.get(
        "/strings/filter-by-natural-language",
        params={"query": "longer than 99999999999999999999 characters"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Query parsed but resulted in invalid filter values"}

from ledger_api.utils.ids import new_id

BOOKS = "/api/v1/books"
MEMBERS = "/api/v1/members"


def _create_book(client, copies=1, isbn="9780441013593", **extra):
    payload = {
        "title": "Dune",
        "author": "Frank Herbert",
        "isbn": isbn,
        "published_year": 1965,
        "genre": "Sci-Fi",
        "total_copies": copies,
    }
    payload.update(extra)
    response = client.post(BOOKS, json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def _create_member(client, email):
    response = client.post(
        MEMBERS,
        json={"first_name": "Ada", "last_name": "Lovelace", "email": email, "phone": "+15551234567"},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "running"
    assert client.get("/health").json() == {"status": "healthy"}


def test_create_book_envelope(client):
    response = client.post(
        BOOKS,
        json={
            "title": "Dune",
            "author": "Frank Herbert",
            "isbn": "9780441013593",
            "published_year": 1965,
            "total_copies": 3,
        },
    )
    body = response.json()

    assert response.status_code == 201
    assert body["success"] is True
    assert body["data"]["available_copies"] == 3
    assert body["data"]["borrowed_copies"] == 0
    assert body["data"]["status"] == "active"
    assert body["data"]["genre"] == "Other"


def test_invalid_book_payload_is_422(client):
    response = client.post(BOOKS, json={"title": "Dune", "author": "Frank Herbert", "isbn": "abc"})
    assert response.status_code == 422


def test_unknown_genre_is_422(client):
    response = client.post(
        BOOKS,
        json={
            "title": "Dune",
            "author": "Frank Herbert",
            "isbn": "9780441013593",
            "published_year": 1965,
            "genre": "Cookbooks",
        },
    )
    assert response.status_code == 422


def test_duplicate_isbn_is_409(client):
    _create_book(client)
    response = client.post(
        BOOKS,
        json={"title": "Again", "author": "Someone", "isbn": "9780441013593", "published_year": 1999},
    )
    assert response.status_code == 409
    assert response.json()["error"] == "duplicate"


def test_list_books_pagination(client):
    for i in range(3):
        _create_book(client, isbn=f"978044101359{i}", title=f"Volume {i}")

    body = client.get(BOOKS, params={"page": 2, "limit": 2}).json()

    assert body["success"] is True
    assert len(body["data"]) == 1
    assert body["pagination"] == {"current": 2, "pages": 2, "total": 3, "limit": 2}


def test_list_books_filters(client):
    _create_book(client, isbn="9780441013593", title="Dune")
    _create_book(client, isbn="9780553293357", title="Foundation", author="Isaac Asimov")

    body = client.get(BOOKS, params={"search": "found"}).json()
    assert [b["title"] for b in body["data"]] == ["Foundation"]

    body = client.get(BOOKS, params={"author": "herbert"}).json()
    assert [b["title"] for b in body["data"]] == ["Dune"]


def test_out_of_range_paging_is_400(client):
    for params in ({"page": 0}, {"limit": 0}, {"limit": 101}):
        response = client.get(BOOKS, params=params)
        assert response.status_code == 400, params
        assert response.json()["error"] == "validation_failed"


def test_malformed_and_unknown_ids(client):
    response = client.get(f"{BOOKS}/not-an-id")
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "Invalid Book ID format: 'not-an-id'",
        "error": "invalid_reference",
    }

    response = client.get(f"{BOOKS}/{new_id()}")
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_borrow_and_return_over_http(client):
    book = _create_book(client, copies=1)
    ada = _create_member(client, "ada@example.com")
    grace = _create_member(client, "grace@example.com")

    response = client.post(f"{MEMBERS}/{ada['id']}/borrow/{book['id']}")
    assert response.status_code == 200, response.text
    loan = response.json()["data"]
    assert loan["book"]["available_copies"] == 0
    assert loan["record"]["book_id"] == book["id"]
    assert loan["record"]["is_returned"] is False
    assert loan["record"]["is_overdue"] is False
    assert loan["member"]["current_borrowed_count"] == 1

    response = client.post(f"{MEMBERS}/{grace['id']}/borrow/{book['id']}")
    assert response.status_code == 409
    assert response.json()["error"] == "capacity_exhausted"

    response = client.post(f"{MEMBERS}/{ada['id']}/borrow/{book['id']}")
    assert response.status_code == 409
    assert response.json()["error"] == "capacity_exhausted"

    response = client.delete(f"{BOOKS}/{book['id']}")
    assert response.status_code == 409
    assert response.json()["error"] == "entity_in_use"

    response = client.delete(f"{MEMBERS}/{ada['id']}")
    assert response.status_code == 409
    assert response.json()["error"] == "entity_in_use"

    response = client.post(f"{MEMBERS}/{ada['id']}/return/{book['id']}")
    assert response.status_code == 200
    assert response.json()["data"]["book"]["available_copies"] == 1
    assert response.json()["data"]["record"]["is_returned"] is True

    response = client.post(f"{MEMBERS}/{ada['id']}/return/{book['id']}")
    assert response.status_code == 409
    assert response.json()["error"] == "no_active_borrow"

    response = client.post(f"{MEMBERS}/{grace['id']}/borrow/{book['id']}")
    assert response.status_code == 200


def test_overdue_loans_are_flagged(client, clock):
    book = _create_book(client)
    ada = _create_member(client, "ada@example.com")
    clock.advance(days=-30)
    client.post(f"{MEMBERS}/{ada['id']}/borrow/{book['id']}")

    member = client.get(f"{MEMBERS}/{ada['id']}").json()["data"]

    assert member["overdue_count"] == 1
    assert member["borrowed_books"][0]["is_overdue"] is True


def test_archived_book_is_hidden_and_not_lendable(client):
    book = _create_book(client)
    ada = _create_member(client, "ada@example.com")

    response = client.delete(f"{BOOKS}/{book['id']}")
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "archived"

    assert client.get(BOOKS).json()["pagination"]["total"] == 0
    assert client.get(BOOKS, params={"include_archived": True}).json()["pagination"]["total"] == 1

    response = client.post(f"{MEMBERS}/{ada['id']}/borrow/{book['id']}")
    assert response.status_code == 404


def test_update_book_stock(client):
    book = _create_book(client, copies=2)
    ada = _create_member(client, "ada@example.com")
    client.post(f"{MEMBERS}/{ada['id']}/borrow/{book['id']}")

    response = client.put(f"{BOOKS}/{book['id']}", json={"total_copies": 4})
    assert response.status_code == 200
    assert response.json()["data"]["available_copies"] == 3

    response = client.put(f"{BOOKS}/{book['id']}", json={"total_copies": 0})
    assert response.status_code == 422


def test_member_email_is_normalized(client):
    member = _create_member(client, "Ada@Example.com")
    assert member["email"] == "ada@example.com"
    assert member["full_name"] == "Ada Lovelace"
    assert member["membership_type"] == "Basic"


def test_member_update_and_delete(client):
    ada = _create_member(client, "ada@example.com")

    response = client.put(f"{MEMBERS}/{ada['id']}", json={"membership_type": "Premium"})
    assert response.status_code == 200
    assert response.json()["data"]["membership_type"] == "Premium"

    response = client.delete(f"{MEMBERS}/{ada['id']}")
    assert response.status_code == 200
    assert client.get(f"{MEMBERS}/{ada['id']}").status_code == 404

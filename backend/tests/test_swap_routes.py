from fastapi.testclient import TestClient


def propose(client: TestClient, requester, holder, book):
    return client.post(
        "/api/swap/requests",
        json={"requester_id": requester.id, "holder_id": holder.id, "holder_book_id": book.id},
    )


def test_hello_is_public(client: TestClient):
    response = client.get("/api/swap/hello", params={"text": "reader"})

    assert response.status_code == 200
    assert response.json() == {"greeting": "Hello reader"}


def test_protected_operations_require_session(client: TestClient, library):
    alice, bob, bob_book = library["alice"], library["bob"], library["bob_book"]

    responses = [
        client.get(
            "/api/swap/lookup",
            params={"requester_id": alice.id, "holder_id": bob.id, "holder_book_id": bob_book.id},
        ),
        propose(client, alice, bob, bob_book),
        client.get(f"/api/swap/users/{alice.id}/requests"),
        client.get("/api/swap/requests/anything"),
        client.post("/api/swap/requests/anything/confirm", json={"requester_book_id": bob_book.id}),
    ]

    assert [r.status_code for r in responses] == [401] * 5


def test_create_and_lookup_swap_request(auth_client: TestClient, library):
    alice, bob, bob_book = library["alice"], library["bob"], library["bob_book"]
    params = {"requester_id": alice.id, "holder_id": bob.id, "holder_book_id": bob_book.id}

    before = auth_client.get("/api/swap/lookup", params=params)
    assert before.status_code == 200
    assert before.json() is None

    response = propose(auth_client, alice, bob, bob_book)
    assert response.status_code == 201
    created = response.json()
    assert created["requester_id"] == alice.id
    assert created["holder_id"] == bob.id
    assert created["holder_book_id"] == bob_book.id
    assert created["requester_book_id"] is None
    assert created["status"] == "PROPOSED"

    after = auth_client.get("/api/swap/lookup", params=params)
    assert after.status_code == 200
    assert after.json()["id"] == created["id"]


def test_created_swap_is_found_with_the_same_padded_ids(auth_client: TestClient, make_user, make_book):
    requester = make_user("Padded", user_id=" padded-requester ")
    holder = make_user("Holder", user_id="padded-holder")
    book = make_book(holder, "Middlemarch", book_id="padded-book ")
    params = {"requester_id": requester.id, "holder_id": holder.id, "holder_book_id": book.id}

    response = propose(auth_client, requester, holder, book)
    assert response.status_code == 201
    assert response.json()["requester_id"] == " padded-requester "
    assert response.json()["holder_book_id"] == "padded-book "

    found = auth_client.get("/api/swap/lookup", params=params)
    assert found.status_code == 200
    assert found.json()["id"] == response.json()["id"]


def test_create_with_dangling_reference_returns_409(auth_client: TestClient, library):
    response = auth_client.post(
        "/api/swap/requests",
        json={"requester_id": library["alice"].id, "holder_id": library["bob"].id, "holder_book_id": "missing"},
    )

    assert response.status_code == 409


def test_create_rejects_empty_identifiers(auth_client: TestClient, library):
    response = auth_client.post(
        "/api/swap/requests",
        json={"requester_id": "  ", "holder_id": library["bob"].id, "holder_book_id": library["bob_book"].id},
    )

    assert response.status_code == 422


def test_lookup_requires_all_identifiers(auth_client: TestClient, library):
    response = auth_client.get(
        "/api/swap/lookup",
        params={"requester_id": library["alice"].id, "holder_id": library["bob"].id},
    )

    assert response.status_code == 422


def test_find_by_user_id_filters(auth_client: TestClient, library):
    alice, bob = library["alice"], library["bob"]
    sent = propose(auth_client, alice, bob, library["bob_book"]).json()
    received = propose(auth_client, bob, alice, library["alice_book"]).json()

    def listed(filter_value):
        response = auth_client.get(f"/api/swap/users/{alice.id}/requests", params={"filter": filter_value})
        assert response.status_code == 200
        return {swap["id"] for swap in response.json()}

    assert listed("SENT") == {sent["id"]}
    assert listed("RECEIVED") == {received["id"]}
    assert listed("ALL") == {sent["id"], received["id"]}


def test_find_by_user_id_expands_relations(auth_client: TestClient, library):
    propose(auth_client, library["alice"], library["bob"], library["bob_book"])

    response = auth_client.get(f"/api/swap/users/{library['bob'].id}/requests", params={"filter": "RECEIVED"})

    assert response.status_code == 200
    [swap] = response.json()
    assert swap["requester"]["name"] == "Alice"
    assert swap["holder"]["name"] == "Bob"
    assert swap["holder_book"]["title"] == "Ulysses"
    assert swap["requester_book"] is None


def test_find_by_user_id_rejects_unknown_filter(auth_client: TestClient, library):
    response = auth_client.get(f"/api/swap/users/{library['alice'].id}/requests", params={"filter": "PENDING"})

    assert response.status_code == 422


def test_find_by_id_missing_returns_null(auth_client: TestClient):
    response = auth_client.get("/api/swap/requests/does-not-exist")

    assert response.status_code == 200
    assert response.json() is None


def test_confirm_swap_request(auth_client: TestClient, library):
    created = propose(auth_client, library["alice"], library["bob"], library["bob_book"]).json()

    response = auth_client.post(
        f"/api/swap/requests/{created['id']}/confirm",
        json={"requester_book_id": library["alice_book"].id},
    )
    assert response.status_code == 204
    assert response.content == b""

    swap = auth_client.get(f"/api/swap/requests/{created['id']}").json()
    assert swap["requester_book_id"] == library["alice_book"].id
    assert swap["requester_book"]["title"] == "Dune"
    assert swap["status"] == "CONFIRMED"


def test_confirm_with_unknown_book_returns_404_and_keeps_swap(auth_client: TestClient, library):
    created = propose(auth_client, library["alice"], library["bob"], library["bob_book"]).json()

    response = auth_client.post(
        f"/api/swap/requests/{created['id']}/confirm",
        json={"requester_book_id": "no-such-book"},
    )
    assert response.status_code == 404
    assert "no-such-book" in response.json()["detail"]

    swap = auth_client.get(f"/api/swap/requests/{created['id']}").json()
    assert swap["requester_book_id"] is None
    assert swap["status"] == "PROPOSED"


def test_confirm_unknown_swap_returns_404(auth_client: TestClient, library):
    response = auth_client.post(
        "/api/swap/requests/no-such-swap/confirm",
        json={"requester_book_id": library["alice_book"].id},
    )

    assert response.status_code == 404

"""
API tests for the store owner dashboard and the user-facing store list.
"""
import time

import pytest

from app.errors import NotFound
from app.services import ratings
from app.services.stores import create_store
from conftest import ADDRESS, OWNER_NAME, PASSWORD, auth_header


def test_admin_creates_owner_and_store_then_owner_sees_empty_summary(client, make_user):
    admin_headers = auth_header(make_user(role="admin"))
    r = client.post(
        "/api/admin/users",
        json={"name": OWNER_NAME, "email": "jonathan@example.com", "address": ADDRESS, "password": PASSWORD, "role": "store_owner"},
        headers=admin_headers,
    )
    assert r.status_code == 201, r.text
    owner_id = r.json()["userId"]
    r = client.post(
        "/api/admin/stores",
        json={"name": "Smith Family General Store", "email": "smith.store@example.com", "address": ADDRESS, "ownerId": owner_id},
        headers=admin_headers,
    )
    assert r.status_code == 201, r.text
    store_id = r.json()["storeId"]

    login = client.post("/api/auth/login", json={"email": "jonathan@example.com", "password": PASSWORD})
    assert login.status_code == 200, login.text
    owner_headers = {"Authorization": f"Bearer {login.json()['token']}"}
    r = client.get("/api/store-owner/store", headers=owner_headers)
    assert r.status_code == 200, r.text
    assert r.json() == {
        "id": store_id,
        "name": "Smith Family General Store",
        "address": ADDRESS,
        "averageRating": 0.0,
        "totalRatings": 0,
    }


def test_owner_without_store_is_404(client, make_user):
    r = client.get("/api/store-owner/store", headers=auth_header(make_user(role="store_owner")))
    assert r.status_code == 404
    assert r.json() == {"message": "Store not found"}


def test_owner_summary_reflects_ratings(client, db, make_user):
    owner = make_user(role="store_owner")
    store = create_store(db, "Smith Family General Store", "smith@example.com", ADDRESS, owner.id)
    ratings.submit_rating(db, make_user().id, store.id, 5)
    ratings.submit_rating(db, make_user(email="b@example.com").id, store.id, 2)
    r = client.get("/api/store-owner/store", headers=auth_header(owner))
    assert r.json()["averageRating"] == 3.5
    assert r.json()["totalRatings"] == 2


def test_raters_newest_first(client, db, make_user):
    owner = make_user(role="store_owner")
    store = create_store(db, "Smith Family General Store", "smith@example.com", ADDRESS, owner.id)
    first = make_user(name="Earliest Rater Of This Store", email="first@example.com")
    second = make_user(name="Latest Rater Of This Store", email="second@example.com")
    ratings.submit_rating(db, first.id, store.id, 3)
    time.sleep(0.01)
    ratings.submit_rating(db, second.id, store.id, 5)
    r = client.get(f"/api/store-owner/ratings/{store.id}", headers=auth_header(owner))
    assert r.status_code == 200, r.text
    data = r.json()
    assert [d["email"] for d in data] == ["second@example.com", "first@example.com"]
    assert data[0]["rating"] == 5
    assert {"id", "name", "email", "rating", "ratedAt", "updatedAt"} <= set(data[0])


def test_raters_of_someone_elses_store_is_404(client, db, make_user):
    owner = make_user(role="store_owner")
    other = make_user(role="store_owner", email="other-owner@example.com")
    store = create_store(db, "Smith Family General Store", "smith@example.com", ADDRESS, owner.id)
    r = client.get(f"/api/store-owner/ratings/{store.id}", headers=auth_header(other))
    assert r.status_code == 404
    assert r.json() == {"message": "Store not found or not owned by you"}
    assert client.get("/api/store-owner/ratings/98765", headers=auth_header(owner)).status_code == 404


def test_raters_path_id_must_be_integer(client, make_user):
    r = client.get("/api/store-owner/ratings/abc", headers=auth_header(make_user(role="store_owner")))
    assert r.status_code == 400


@pytest.mark.parametrize("store_id", [2**70, 2**31, 0])
def test_raters_path_id_out_of_range_is_400(client, make_user, store_id):
    r = client.get(f"/api/store-owner/ratings/{store_id}", headers=auth_header(make_user(role="store_owner")))
    assert r.status_code == 400
    assert r.json()["message"].startswith("store_id:")


def test_raters_of_out_of_range_id_is_not_found(db, make_user):
    with pytest.raises(NotFound):
        ratings.raters_of(db, 2**70, make_user(role="store_owner").id)


def test_store_list_for_user_includes_own_rating_and_search(client, db, make_user):
    owner = make_user(role="store_owner")
    rated = create_store(db, "Bakery With Fresh Bread Daily", "bakery@example.com", "5 Baker Lane", owner.id)
    unrated = create_store(db, "Cobbler And Shoe Repair Shop", "cobbler@example.com", "9 Leather Row", owner.id)
    me = make_user()
    ratings.submit_rating(db, me.id, rated.id, 4)
    ratings.submit_rating(db, make_user(email="someone@example.com").id, rated.id, 2)

    r = client.get("/api/stores", headers=auth_header(me))
    assert r.status_code == 200, r.text
    assert r.json() == [
        {"id": rated.id, "name": "Bakery With Fresh Bread Daily", "address": "5 Baker Lane", "averageRating": 3.0, "userRating": 4},
        {"id": unrated.id, "name": "Cobbler And Shoe Repair Shop", "address": "9 Leather Row", "averageRating": 0.0, "userRating": None},
    ]
    r = client.get("/api/stores", params={"search": "leather"}, headers=auth_header(me))
    assert [s["id"] for s in r.json()] == [unrated.id]

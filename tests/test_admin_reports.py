"""Admin menu management, order reports and profile directory."""

from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from lunch_app.core.security import get_password_hash
from lunch_app.db import session as db_session
from lunch_app.db.base import Base
from lunch_app.main import app
from lunch_app.models import MenuItem, Order, Profile, User

NOW = datetime(2025, 10, 3, 18, 0, tzinfo=timezone.utc)
SERVE_DATE = date(2025, 10, 5)


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _setup(tmp_path: Path, monkeypatch, name: str) -> sessionmaker:
    engine = _build_test_engine(tmp_path / f"{name}.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    monkeypatch.setattr("lunch_app.utils.time.utc_now", lambda: NOW)
    return testing_session_local


def _user(email: str, first_name: str, last_name: str, shift_type: str | None) -> User:
    return User(
        email=email,
        password_hash=get_password_hash("secret123"),
        profile=Profile(first_name=first_name, last_name=last_name, shift_type=shift_type),
    )


def _seed_orders(testing_session_local: sessionmaker) -> None:
    with testing_session_local() as db:
        ann = _user("ann@example.com", "Ann", "Able", "morning")
        ben = _user("ben@example.com", "Ben", "Baker", "morning")
        cy = _user("cy@example.com", "Cy", "Cole", "afternoon")
        soup = MenuItem(title="Soup", price=Decimal("12.50"), serve_date=SERVE_DATE)
        salad = MenuItem(title="Salad", price=Decimal("9.00"), serve_date=SERVE_DATE)
        pasta = MenuItem(title="Pasta", price=Decimal("15.00"), serve_date=date(2025, 10, 6))
        cookie = MenuItem(title="Cookie", price=Decimal("2.00"))
        db.add_all([ann, ben, cy, soup, salad, pasta, cookie])
        db.flush()
        db.add_all(
            [
                Order(user_id=ann.id, menu_item_id=soup.id, quantity=2, unit_price=Decimal("12.50")),
                Order(user_id=ben.id, menu_item_id=soup.id, quantity=1, unit_price=Decimal("12.50")),
                Order(user_id=cy.id, menu_item_id=salad.id, quantity=1, unit_price=Decimal("9.00")),
                Order(user_id=cy.id, menu_item_id=soup.id, quantity=4, unit_price=Decimal("12.50")),
                Order(user_id=cy.id, menu_item_id=pasta.id, quantity=1, unit_price=Decimal("15.00")),
                Order(user_id=ann.id, menu_item_id=cookie.id, quantity=3, unit_price=Decimal("2.00")),
            ]
        )
        db.commit()


def _login(client: TestClient, email: str = "admin@example.com", password: str = "change-me") -> dict[str, str]:
    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def test_admin_routes_require_admin_flag(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _setup(tmp_path, monkeypatch, "test_admin_forbidden")
    _seed_orders(testing_session_local)

    with TestClient(app) as client:
        headers = _login(client, "ann@example.com", "secret123")
        responses = [
            client.get("/api/v1/admin/menu", headers=headers),
            client.get("/api/v1/admin/orders", headers=headers),
            client.get("/api/v1/admin/orders-by-shift", params={"date": "2025-10-05"}, headers=headers),
            client.get("/api/v1/admin/profiles", headers=headers),
        ]

    assert [response.status_code for response in responses] == [403, 403, 403, 403]


def test_admin_menu_crud(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _setup(tmp_path, monkeypatch, "test_admin_menu")

    with TestClient(app) as client:
        headers = _login(client)
        created = client.post(
            "/api/v1/admin/menu",
            json={
                "title": "  Lentil Soup ",
                "price": "11.25",
                "serve_date": "2025-10-05",
                "order_deadline": "2025-10-04T14:00:00",
            },
            headers=headers,
        )
        item_id = created.json()["id"]
        updated = client.put(
            f"/api/v1/admin/menu/{item_id}",
            json={"title": "Lentil Soup", "price": "12.00", "serve_date": "2025-10-05", "is_active": False},
            headers=headers,
        )
        listing = client.get("/api/v1/admin/menu", headers=headers)
        deleted = client.delete(f"/api/v1/admin/menu/{item_id}", headers=headers)
        missing = client.delete(f"/api/v1/admin/menu/{item_id}", headers=headers)

    assert created.status_code == 201
    assert created.json()["title"] == "Lentil Soup"
    # Naive input is local (Toronto, UTC-4 in October).
    assert created.json()["order_deadline"].startswith("2025-10-04T18:00:00")

    assert updated.status_code == 200
    assert updated.json()["is_active"] is False
    assert updated.json()["order_deadline"] is None
    assert Decimal(updated.json()["price"]) == Decimal("12.00")

    assert [item["id"] for item in listing.json()] == [item_id]
    assert deleted.status_code == 204
    assert missing.status_code == 404

    with testing_session_local() as db:
        assert db.get(MenuItem, item_id) is None


@pytest.mark.parametrize(
    "payload",
    [
        {"title": "A", "price": "5.00"},
        {"title": "   ", "price": "5.00"},
        {"title": "Soup", "price": "0"},
        {"title": "Soup", "price": "-3.00"},
        {"title": "Soup", "price": "1.234"},
        {"title": "Soup", "price": "5.00", "serve_date": "2025-10-05", "order_deadline": "2025-10-06T09:00:00"},
    ],
)
def test_admin_menu_validation(tmp_path: Path, monkeypatch, payload: dict) -> None:
    _setup(tmp_path, monkeypatch, "test_admin_menu_validation")

    with TestClient(app) as client:
        response = client.post("/api/v1/admin/menu", json=payload, headers=_login(client))

    assert response.status_code == 422


def test_deleting_menu_item_removes_its_orders(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _setup(tmp_path, monkeypatch, "test_admin_menu_cascade")
    _seed_orders(testing_session_local)

    with TestClient(app) as client:
        response = client.delete("/api/v1/admin/menu/1", headers=_login(client))

    assert response.status_code == 204
    with testing_session_local() as db:
        assert db.query(Order).filter(Order.menu_item_id == 1).count() == 0
        assert db.query(Order).count() == 3


def test_admin_orders_grouped_by_serve_date(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _setup(tmp_path, monkeypatch, "test_admin_orders")
    _seed_orders(testing_session_local)

    with TestClient(app) as client:
        response = client.get("/api/v1/admin/orders", headers=_login(client))

    assert response.status_code == 200
    days = response.json()
    assert [day["date_key"] for day in days] == ["2025-10-05", "2025-10-06", "unscheduled"]
    assert days[0]["order_count"] == 4
    assert days[0]["totals"] == {"subtotal": "96.50", "tax": "12.55", "total": "109.05"}
    assert {order["profile"]["first_name"] for order in days[0]["orders"]} == {"Ann", "Ben", "Cy"}
    assert days[2]["orders"][0]["item"]["title"] == "Cookie"


def test_admin_serve_dates(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _setup(tmp_path, monkeypatch, "test_admin_serve_dates")
    _seed_orders(testing_session_local)

    with TestClient(app) as client:
        response = client.get("/api/v1/admin/serve-dates", headers=_login(client))

    assert response.status_code == 200
    assert response.json() == ["2025-10-05", "2025-10-06"]


def test_orders_by_shift_report(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _setup(tmp_path, monkeypatch, "test_orders_by_shift")
    _seed_orders(testing_session_local)

    with TestClient(app) as client:
        response = client.get("/api/v1/admin/orders-by-shift", params={"date": "2025-10-05"}, headers=_login(client))

    assert response.status_code == 200
    report = response.json()
    assert [section["shift"] for section in report["sections"]] == ["morning", "afternoon", "night"]

    morning, afternoon, night = report["sections"]
    assert [user["name"] for user in morning["users"]] == ["Ann Able", "Ben Baker"]
    assert morning["item_summary"] == {"Soup": 3}
    assert morning["totals"] == {"subtotal": "37.50", "tax": "4.88", "total": "42.38"}

    assert afternoon["label"] == "Afternoon Shift"
    assert afternoon["item_summary"] == {"Salad": 1, "Soup": 4}
    assert [order["item"]["title"] for order in afternoon["users"][0]["orders"]] == ["Salad", "Soup"]

    assert night["users"] == []
    assert night["totals"]["total"] == "0.00"
    assert report["totals"]["subtotal"] == "96.50"


def test_orders_by_shift_requires_date(tmp_path: Path, monkeypatch) -> None:
    _setup(tmp_path, monkeypatch, "test_orders_by_shift_date")

    with TestClient(app) as client:
        headers = _login(client)
        missing = client.get("/api/v1/admin/orders-by-shift", headers=headers)
        malformed = client.get("/api/v1/admin/orders-by-shift", params={"date": "2025-13-01"}, headers=headers)

    assert missing.status_code == 422
    assert malformed.status_code == 422


def test_orders_by_shift_pdf(tmp_path: Path, monkeypatch) -> None:
    pytest.importorskip("reportlab")
    testing_session_local = _setup(tmp_path, monkeypatch, "test_orders_by_shift_pdf")
    _seed_orders(testing_session_local)

    with TestClient(app) as client:
        response = client.get(
            "/api/v1/admin/orders-by-shift/pdf",
            params={"date": "2025-10-05"},
            headers=_login(client),
        )

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "orders_by_shift_2025-10-05.pdf" in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_admin_profile_directory_and_update(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _setup(tmp_path, monkeypatch, "test_admin_profiles")
    _seed_orders(testing_session_local)
    with testing_session_local() as db:
        db.add(_user("dee@example.com", "Dee", "Drift", None))
        db.commit()

    with TestClient(app) as client:
        headers = _login(client)
        directory = client.get("/api/v1/admin/profiles", headers=headers)
        promoted = client.put(
            "/api/v1/admin/profiles/1",
            json={"first_name": "Ann", "last_name": "Able", "shift_type": "night", "company_name": "", "is_admin": True},
            headers=headers,
        )
        missing = client.put("/api/v1/admin/profiles/999", json={}, headers=headers)

    assert directory.status_code == 200
    body = directory.json()
    assert [p["first_name"] for p in body["by_shift"]["morning"]] == ["Ann", "Ben"]
    assert [p["first_name"] for p in body["by_shift"]["unassigned"]] == ["Dee"]
    assert [p["first_name"] for p in body["admins"]] == ["Admin"]

    assert promoted.status_code == 200
    assert promoted.json()["is_admin"] is True
    assert promoted.json()["shift_type"] == "night"
    assert promoted.json()["company_name"] == "compName01"
    assert missing.status_code == 404


def test_admin_profile_update_keeps_fields_missing_from_body(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _setup(tmp_path, monkeypatch, "test_admin_profile_partial")
    _seed_orders(testing_session_local)

    with TestClient(app) as client:
        headers = _login(client)
        admin_id = client.get("/api/v1/admin/profiles", headers=headers).json()["admins"][0]["id"]
        own_shift = client.put(f"/api/v1/admin/profiles/{admin_id}", json={"shift_type": "night"}, headers=headers)
        still_admin = client.get("/api/v1/admin/profiles", headers=headers)
        cleared_shift = client.put("/api/v1/admin/profiles/1", json={"shift_type": None}, headers=headers)

    assert own_shift.status_code == 200
    assert own_shift.json()["first_name"] == "Admin"
    assert own_shift.json()["shift_type"] == "night"
    assert own_shift.json()["is_admin"] is True
    assert own_shift.json()["company_name"] == "compName01"
    assert still_admin.status_code == 200

    assert cleared_shift.status_code == 200
    assert cleared_shift.json()["shift_type"] is None
    assert cleared_shift.json()["first_name"] == "Ann"
    assert cleared_shift.json()["last_name"] == "Able"
    assert cleared_shift.json()["is_admin"] is False


def test_admin_cannot_remove_own_admin_flag(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _setup(tmp_path, monkeypatch, "test_admin_self_demote")
    _seed_orders(testing_session_local)

    with TestClient(app) as client:
        headers = _login(client)
        admin_id = client.get("/api/v1/admin/profiles", headers=headers).json()["admins"][0]["id"]
        demoted = client.put(f"/api/v1/admin/profiles/{admin_id}", json={"is_admin": False}, headers=headers)
        demote_other = client.put("/api/v1/admin/profiles/2", json={"is_admin": False}, headers=headers)
        after = client.get("/api/v1/admin/profiles", headers=headers)

    assert demoted.status_code == 400
    assert demote_other.status_code == 200
    assert after.status_code == 200
    with testing_session_local() as db:
        assert db.get(Profile, admin_id).is_admin is True

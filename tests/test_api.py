from ticketpro.models.activity_log import ActivityLog
from ticketpro.models.ticket_batch import TicketBatch
from conftest import booking_body, login


def _create_batch(client, headers, batch_data):
    r = client.post("/api/ticket-batches", json=batch_data, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["data"]["batch"]


def _tickets(client, headers, **params):
    r = client.get("/api/tickets", params=params, headers=headers)
    assert r.status_code == 200, r.text
    return r.json()["data"]


def test_health_and_ping(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/api/ping").json()["success"] is True


def test_login_and_me(client, staff_headers):
    r = client.get("/api/auth/me", headers=staff_headers)
    body = r.json()
    assert body["success"] is True
    assert body["data"]["user"]["username"] == "staff"
    assert "password_hash" not in body["data"]["user"]
    assert body["data"]["permissions"] == ["create_bookings", "partial_payments", "view_tickets"]


def test_bad_credentials(client):
    r = client.post("/api/auth/login", json={"username": "admin", "password": "wrong"})
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "Invalid username or password"}


def test_token_required(client):
    r = client.get("/api/tickets")
    assert r.status_code == 401
    assert r.json()["success"] is False


def test_validation_errors_are_collected(client, admin_headers):
    r = client.post("/api/ticket-batches", json={"country": "KSA"}, headers=admin_headers)
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    fields = {e["field"] for e in body["errors"]}
    assert {"airline", "buyingPrice", "quantity", "agentName"} <= fields


def test_staff_cannot_create_batches(client, db, staff_headers, batch_data):
    r = client.post("/api/ticket-batches", json=batch_data, headers=staff_headers)
    assert r.status_code == 403
    assert r.json()["success"] is False
    assert db.query(TicketBatch).count() == 0


def test_batch_purchase_scenario(client, db, admin_headers, batch_data):
    r = client.post("/api/ticket-batches", json=batch_data, headers=admin_headers)
    assert r.status_code == 201
    assert r.json()["data"]["ticketsCreated"] == 3

    tickets = _tickets(client, admin_headers, country="KSA")
    assert tickets["total"] == 3
    for t in tickets["tickets"]:
        assert t["status"] == "available"
        assert t["selling_price"] >= 18000
        assert t["batch"]["buying_price"] == 15000
        assert t["country"]["code"] == "KSA"

    batches = client.get("/api/ticket-batches", headers=admin_headers).json()["data"]["batches"]
    assert len(batches) == 1
    assert batches[0]["sold"] == 0
    assert batches[0]["available"] == 3
    assert batches[0]["totalCost"] == 45000

    logged = db.query(ActivityLog).filter(ActivityLog.action == "create_ticket_batch").count()
    assert logged == 1


def test_buying_price_hidden_from_staff(client, admin_headers, staff_headers, batch_data):
    _create_batch(client, admin_headers, batch_data)
    for t in _tickets(client, staff_headers)["tickets"]:
        assert "buying_price" not in t["batch"]
    assert client.get("/api/ticket-batches", headers=staff_headers).status_code == 403


def test_sale_shows_up_on_dashboard(client, admin_headers, manager_headers, batch_data):
    _create_batch(client, admin_headers, batch_data)
    before = client.get("/api/tickets/dashboard/stats", headers=admin_headers).json()["data"]
    ticket = _tickets(client, admin_headers)["tickets"][0]

    r = client.post("/api/bookings", json=booking_body(ticket["id"], ticket["selling_price"]), headers=manager_headers)
    assert r.status_code == 201, r.text
    booking = r.json()["data"]["booking"]
    assert booking["status"] == "pending"
    assert booking["passengerInfo"]["passportNo"] == "BX0123456"

    r = client.patch(f"/api/tickets/{ticket['id']}/status", json={"status": "sold"}, headers=manager_headers)
    assert r.status_code == 200, r.text
    assert r.json()["data"]["ticket"]["status"] == "sold"

    after = client.get("/api/tickets/dashboard/stats", headers=admin_headers).json()["data"]
    assert after["soldTickets"] == before["soldTickets"] + 1
    assert after["estimatedProfit"] - before["estimatedProfit"] == ticket["selling_price"] - 15000
    assert after["totalBookings"] == before["totalBookings"] + 1

    # without view_profit the estimate is not exposed
    staff = login(client, "staff")
    assert "estimatedProfit" not in client.get("/api/tickets/dashboard/stats", headers=staff).json()["data"]


def test_double_booking_is_a_conflict(client, admin_headers, staff_headers, batch_data):
    _create_batch(client, admin_headers, batch_data)
    ticket = _tickets(client, admin_headers)["tickets"][0]
    body = booking_body(ticket["id"], ticket["selling_price"], "partial", partialAmount=5000)
    assert client.post("/api/bookings", json=body, headers=staff_headers).status_code == 201
    r = client.post("/api/bookings", json=body, headers=staff_headers)
    assert r.status_code == 409
    assert r.json()["success"] is False


def test_staff_cannot_mark_ticket_sold(client, admin_headers, staff_headers, batch_data):
    _create_batch(client, admin_headers, batch_data)
    ticket = _tickets(client, admin_headers)["tickets"][0]
    r = client.patch(f"/api/tickets/{ticket['id']}/status", json={"status": "sold"}, headers=staff_headers)
    assert r.status_code == 403


def test_invalid_ticket_status(client, admin_headers, batch_data):
    _create_batch(client, admin_headers, batch_data)
    ticket = _tickets(client, admin_headers)["tickets"][0]
    r = client.patch(f"/api/tickets/{ticket['id']}/status", json={"status": "lost"}, headers=admin_headers)
    assert r.status_code == 400


def test_booking_list_is_scoped_to_owner(client, admin_headers, staff_headers, manager_headers, batch_data):
    _create_batch(client, admin_headers, batch_data)
    ticket = _tickets(client, admin_headers)["tickets"][0]
    client.post("/api/bookings", json=booking_body(ticket["id"], ticket["selling_price"]), headers=manager_headers)

    assert client.get("/api/bookings", headers=staff_headers).json()["data"]["total"] == 0
    assert client.get("/api/bookings", headers=admin_headers).json()["data"]["total"] == 1


def test_cancel_booking_via_delete(client, admin_headers, staff_headers, batch_data):
    _create_batch(client, admin_headers, batch_data)
    ticket = _tickets(client, admin_headers)["tickets"][0]
    r = client.post("/api/bookings", json=booking_body(ticket["id"], ticket["selling_price"], "partial",
                                                         partialAmount=5000), headers=staff_headers)
    booking_id = r.json()["data"]["booking"]["id"]

    r = client.delete(f"/api/bookings/{booking_id}", headers=staff_headers)
    assert r.status_code == 200
    assert r.json()["data"]["booking"]["status"] == "cancelled"
    t = client.get(f"/api/tickets/{ticket['id']}", headers=admin_headers).json()["data"]["ticket"]
    assert t["status"] == "available"


def test_umrah_payment_scenario(client, admin_headers):
    r = client.post("/api/umrah/without-transport", json={
        "flight_departure_date": "2026-11-10",
        "return_date": "2026-11-24",
        "passenger_name": "Salma Begum",
        "passport_number": "EB7654321",
        "entry_recorded_by": "Front desk",
        "total_amount": 150000,
        "amount_paid": 50000,
    }, headers=admin_headers)
    assert r.status_code == 201, r.text
    record = r.json()["data"]
    assert record["remaining_amount"] == 100000

    r = client.post(f"/api/umrah/without-transport/{record['id']}/payment", json={"amount": 25000},
                    headers=admin_headers)
    assert r.status_code == 200, r.text
    assert r.json()["data"]["remaining_amount"] == 75000
    assert r.json()["data"]["amount_paid"] == 75000

    r = client.post(f"/api/umrah/without-transport/{record['id']}/payment", json={"amount": 80000},
                    headers=admin_headers)
    assert r.status_code == 400


def test_user_management(client, admin_headers, staff_headers):
    assert client.get("/api/users", headers=staff_headers).status_code == 403

    r = client.post("/api/users", json={
        "username": "rafi", "password": "secret1", "name": "Rafi", "role": "staff",
    }, headers=admin_headers)
    assert r.status_code == 201, r.text
    user_id = r.json()["data"]["user"]["id"]

    r = client.post("/api/users", json={
        "username": "rafi", "password": "secret1", "name": "Rafi", "role": "staff",
    }, headers=admin_headers)
    assert r.status_code == 409

    r = client.put(f"/api/users/{user_id}", json={"status": "inactive"}, headers=admin_headers)
    assert r.json()["data"]["user"]["status"] == "inactive"
    r = client.post("/api/auth/login", json={"username": "rafi", "password": "secret1"})
    assert r.status_code == 401

    assert client.delete(f"/api/users/{user_id}", headers=admin_headers).status_code == 200


def test_admin_cannot_demote_or_delete_self(client, admin_headers):
    me = client.get("/api/auth/me", headers=admin_headers).json()["data"]["user"]
    r = client.put(f"/api/users/{me['id']}", json={"role": "staff"}, headers=admin_headers)
    assert r.status_code == 400
    assert client.delete(f"/api/users/{me['id']}", headers=admin_headers).status_code == 400


def test_change_password(client, staff_headers):
    r = client.put("/api/users/profile/password",
                   json={"currentPassword": "nope", "newPassword": "newpass1"}, headers=staff_headers)
    assert r.status_code == 400
    r = client.put("/api/users/profile/password",
                   json={"currentPassword": "staff123", "newPassword": "newpass1"}, headers=staff_headers)
    assert r.status_code == 200
    r = client.post("/api/auth/login", json={"username": "staff", "password": "newpass1"})
    assert r.status_code == 200


def test_settings_round_trip(client, admin_headers, manager_headers):
    assert client.get("/api/settings", headers=manager_headers).status_code == 403

    settings = client.get("/api/settings", headers=admin_headers).json()["data"]
    assert settings["company_name"] == "BD TicketPro"

    r = client.put("/api/settings", json={"company_name": "Dhaka Air Desk", "sms_notifications": True},
                   headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["data"]["company_name"] == "Dhaka Air Desk"
    assert r.json()["data"]["sms_notifications"] == "true"

    for bad in ({"company_name": None}, {"company_email": {"primary": "a@b.com"}}, {"language": ["en"]}):
        r = client.put("/api/settings", json=bad, headers=admin_headers)
        assert r.status_code == 400
        assert r.json()["errors"][0]["field"] in bad
    assert client.get("/api/settings", headers=admin_headers).json()["data"]["company_email"] == "info@bdticketpro.com"

    logs = client.get("/api/settings/logs/activity", params={"limit": 5}, headers=admin_headers).json()
    assert logs["data"]["logs"][0]["action"] == "update_settings"


def test_export(client, admin_headers, batch_data):
    _create_batch(client, admin_headers, batch_data)
    r = client.get("/api/settings/export/data", params={"format": "csv"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    lines = r.text.strip().splitlines()
    assert lines[0].startswith("ticket_id,")
    assert len(lines) == 4

    data = client.get("/api/settings/export/data", headers=admin_headers).json()["data"]
    assert len(data["tickets"]) == 3
    assert data["ticketBatches"][0]["quantity"] == 3

    r = client.get("/api/settings/export/data", params={"format": "xml"}, headers=admin_headers)
    assert r.status_code == 400


def test_reference_data(client, staff_headers):
    countries = client.get("/api/countries", headers=staff_headers).json()["data"]
    assert {"code": "KSA", "name": "Saudi Arabia", "flag": "🇸🇦"} in countries
    airlines = client.get("/api/airlines", headers=staff_headers).json()["data"]
    assert any(a["code"] == "EK" for a in airlines)


def test_reports_need_view_profit(client, admin_headers, manager_headers):
    assert client.get("/api/reports/financial-summary", headers=manager_headers).status_code == 403
    body = client.get("/api/reports/financial-summary", headers=admin_headers).json()
    assert body["data"]["profitMargin"] == 0

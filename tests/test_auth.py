import pytest

from conftest import auth_headers, make_user
from streamhub.errors import ValidationError
from streamhub.models.user_model import UserRole
from streamhub.services import otp as otp_service
from streamhub.services import users as user_service


async def _request_otp(client, phone):
    res = await client.post("/auth/send-otp", json={"phone": phone})
    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "OTP sent successfully"
    return body["otp"]


def test_generate_otp_is_six_digits():
    for _ in range(50):
        otp = otp_service.generate_otp()
        assert len(otp) == 6 and otp.isdigit()


async def test_verify_otp_is_single_use(session):
    otp = await otp_service.issue_otp(session, "9000000001")

    await otp_service.verify_otp(session, "9000000001", otp)
    await session.commit()

    with pytest.raises(ValidationError):
        await otp_service.verify_otp(session, "9000000001", otp)


async def test_send_otp_validates_phone(client):
    res = await client.post("/auth/send-otp", json={"phone": "12345"})
    assert res.status_code == 400
    assert "error" in res.json()


async def test_phone_login_provisions_once(client):
    otp = await _request_otp(client, "9876543210")
    res = await client.post(
        "/auth/login",
        json={"identifier": "9876543210", "otp": otp, "loginType": "phone"},
    )
    assert res.status_code == 200, res.text
    first = res.json()
    assert first["message"] == "User created and logged in successfully"
    assert first["user"]["phone"] == "9876543210"
    assert first["user"]["role"] == "USER"
    assert [p["name"] for p in first["user"]["profiles"]] == ["User Profile"]
    assert first["accessToken"]

    otp = await _request_otp(client, "9876543210")
    res = await client.post(
        "/auth/login",
        json={"identifier": "9876543210", "otp": otp, "loginType": "phone"},
    )
    second = res.json()
    assert second["message"] == "Login successful"
    assert second["user"]["id"] == first["user"]["id"]
    assert len(second["user"]["profiles"]) == 1


async def test_phone_login_rejects_wrong_otp(client):
    otp = await _request_otp(client, "9123456780")
    wrong = "000000" if otp != "000000" else "111111"

    res = await client.post(
        "/auth/login",
        json={"identifier": "9123456780", "otp": wrong, "loginType": "phone"},
    )
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid OTP. Please check and try again."}

    res = await client.post(
        "/auth/login",
        json={"identifier": "9123456780", "loginType": "phone"},
    )
    assert res.status_code == 400


async def test_email_signup_and_login(client):
    res = await client.post(
        "/auth/signup",
        json={"email": "Meera@Example.com", "password": "s3cret-pass", "name": "Meera"},
    )
    assert res.status_code == 201, res.text
    assert res.json()["user"]["email"] == "meera@example.com"
    assert res.json()["user"]["profiles"][0]["name"] == "Meera"

    res = await client.post(
        "/auth/signup",
        json={"email": "meera@example.com", "password": "another-pass"},
    )
    assert res.status_code == 400
    assert res.json() == {"error": "Email already exists"}

    res = await client.post(
        "/auth/login",
        json={"identifier": "meera@example.com", "password": "s3cret-pass", "loginType": "email"},
    )
    assert res.status_code == 200
    assert res.json()["message"] == "Login successful"

    res = await client.post(
        "/auth/login",
        json={"identifier": "meera@example.com", "password": "wrong", "loginType": "email"},
    )
    assert res.status_code == 401


async def test_email_login_unknown_user(client):
    res = await client.post(
        "/auth/login",
        json={"identifier": "nobody@example.com", "password": "x", "loginType": "email"},
    )
    assert res.status_code == 404
    assert res.json() == {"error": "User not found"}


async def test_admin_can_suspend_user(client, session):
    admin = await make_user(session, role=UserRole.ADMIN, email="boss@example.com")
    target = await make_user(session, email="target@example.com")

    res = await client.put(
        f"/admin/users/{target.id}/status",
        json={"status": "suspended"},
        headers=auth_headers(admin),
    )
    assert res.status_code == 200
    assert res.json()["message"] == "User suspended successfully"
    assert res.json()["user"]["status"] == "suspended"

    res = await client.post(
        "/auth/login",
        json={"identifier": "target@example.com", "loginType": "email"},
    )
    assert res.status_code == 403

    res = await client.put(
        f"/admin/users/{target.id}/status",
        json={"status": "deleted"},
        headers=auth_headers(admin),
    )
    assert res.status_code == 400

    res = await client.put(
        "/admin/users/9999/status",
        json={"status": "banned"},
        headers=auth_headers(admin),
    )
    assert res.status_code == 404


async def test_phone_login_without_outstanding_otp(client, session):
    res = await client.post(
        "/auth/login", json={"identifier": "9876543210", "loginType": "phone"}
    )
    assert res.status_code == 200, res.text
    body = res.json()
    assert body["message"] == "User created and logged in successfully"
    assert [p["name"] for p in body["user"]["profiles"]] == ["User Profile"]

    res = await client.post(
        "/auth/login", json={"identifier": "9876543210", "loginType": "phone"}
    )
    assert res.json()["message"] == "Login successful"
    assert res.json()["user"]["id"] == body["user"]["id"]

    user, created = await user_service.login_with_phone(session, "9876543210", None)
    assert created is False
    assert user.is_verified is False


async def test_supplied_otp_is_checked_even_when_none_issued(client):
    res = await client.post(
        "/auth/login",
        json={"identifier": "9000000009", "otp": "123456", "loginType": "phone"},
    )
    assert res.status_code == 400
    assert res.json() == {"error": "No valid OTP found. Please request a new OTP."}


async def test_outstanding_otp_must_be_supplied(client):
    await _request_otp(client, "9000000010")

    res = await client.post(
        "/auth/login", json={"identifier": "9000000010", "loginType": "phone"}
    )
    assert res.status_code == 400
    assert res.json() == {"error": "OTP is required for phone login"}

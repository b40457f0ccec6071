import pytest

from kirana_admin.data import auth
from kirana_admin.data.auth import DASHBOARD, LOGIN, REGISTER, ROOT, resolve_route


class TestResolveRoute:

    @pytest.mark.parametrize("signed_in, registered, expected", [
        (False, False, LOGIN),
        (True, False, REGISTER),
        (True, True, DASHBOARD),
    ])
    def test_root(self, signed_in, registered, expected):
        assert resolve_route(ROOT, signed_in, registered) == expected

    def test_dashboard_pages_need_sign_in(self):
        assert resolve_route("orders", False, False) == LOGIN
        assert resolve_route("settings", False, True) == LOGIN

    def test_dashboard_pages_need_a_store(self):
        assert resolve_route("products", True, False) == REGISTER

    def test_registered_users_skip_auth_pages(self):
        assert resolve_route(LOGIN, True, True) == DASHBOARD
        assert resolve_route(REGISTER, True, True) == DASHBOARD

    def test_pages_shown_as_requested(self):
        assert resolve_route("analytics", True, True) == "analytics"
        assert resolve_route(LOGIN, False, False) == LOGIN
        assert resolve_route(REGISTER, True, False) == REGISTER


class TestSession:

    def test_send_otp_formats_number(self, anonymous_client):
        phone = auth.send_otp(anonymous_client, "98765 43210")

        assert phone == "+919876543210"
        assert anonymous_client.auth.otp_requests == [{"phone": "+919876543210"}]

    def test_verify_otp(self, anonymous_client):
        user = auth.verify_otp(anonymous_client, "+919876543210", "123456")
        assert user.id == "user-otp"
        assert auth.access_token(anonymous_client) == "access-token"

    def test_verify_otp_wrong_code(self, anonymous_client):
        with pytest.raises(ValueError):
            auth.verify_otp(anonymous_client, "+919876543210", "000000")
        assert auth.access_token(anonymous_client) is None

    def test_password_sign_in(self, anonymous_client):
        user = auth.sign_in_with_password(anonymous_client, "owner@example.com", "secret")
        assert user.email == "owner@example.com"

    def test_sign_out(self, client):
        auth.sign_out(client)
        assert client.auth.signed_out is True
        assert auth.access_token(client) is None

    def test_sign_out_errors_are_logged(self, client, monkeypatch):
        def broken():
            raise RuntimeError("network down")

        monkeypatch.setattr(client.auth, "sign_out", broken)
        auth.sign_out(client)

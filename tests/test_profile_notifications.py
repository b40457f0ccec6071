import pytest

from kirana_admin.data import notifications, profile


@pytest.fixture
def inbox(client):
    client.tables["notifications"] = [
        {"id": "n1", "user_id": "user-1", "title": "New order", "message": "KW1001",
         "type": "order", "is_read": False, "created_at": "2024-01-05T10:00:00"},
        {"id": "n2", "user_id": "user-1", "title": "Low stock", "message": "Milk",
         "type": "inventory", "is_read": True, "created_at": "2024-01-06T10:00:00"},
        {"id": "n3", "user_id": "user-1", "title": "New order", "message": "KW1002",
         "type": "order", "is_read": False, "created_at": "2024-01-07T10:00:00"},
        {"id": "n4", "user_id": "someone-else", "title": "Hi", "message": "",
         "is_read": False, "created_at": "2024-01-07T10:00:00"},
    ]
    return client


class TestNotifications:

    def test_newest_first_for_user(self, inbox):
        items = notifications.get_notifications(inbox, "user-1")
        assert [n.id for n in items] == ["n3", "n2", "n1"]

    def test_unread_count(self, inbox):
        assert notifications.get_unread_count(inbox, "user-1") == 2

    def test_mark_as_read(self, inbox):
        notifications.mark_as_read(inbox, "n1")
        assert notifications.get_unread_count(inbox, "user-1") == 1

    def test_mark_all_as_read(self, inbox):
        notifications.mark_all_as_read(inbox, "user-1")
        assert notifications.get_unread_count(inbox, "user-1") == 0
        assert notifications.get_unread_count(inbox, "someone-else") == 1

    def test_delete(self, inbox):
        notifications.delete_notification(inbox, "n2")
        assert [n.id for n in notifications.get_notifications(inbox, "user-1")] == ["n3", "n1"]


class TestProfile:

    def test_current_admin_with_store(self, client):
        admin = profile.get_current_admin(client)

        assert admin.full_name == "Ravi Sharma"
        assert admin.store.name == "Sharma Kirana"
        assert profile.store_display_name(admin) == "Sharma Kirana"

    def test_missing_admin_record(self, client):
        client.tables["store_admins"] = []
        with pytest.raises(LookupError):
            profile.get_current_admin(client)

    def test_admin_by_phone(self, client):
        assert profile.get_admin_by_phone(client, "+919876543210").id == "admin-1"
        assert profile.get_admin_by_phone(client, "+910000000000") is None

    def test_update_only_editable_columns(self, client):
        updated = profile.update_admin_profile(client, {
            "full_name": "Ravi K. Sharma",
            "role": "manager",
        })

        assert updated.full_name == "Ravi K. Sharma"
        assert updated.role == "owner"
        assert updated.updated_at is not None

    def test_store_display_name_default(self):
        assert profile.store_display_name(None) == "Store"

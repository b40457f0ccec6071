"""
Shared fixtures: an in-memory stand-in for the Supabase client.

``FakeSupabase`` implements the subset of the PostgREST query builder,
auth and storage APIs the data layer calls, over plain lists of dicts.
"""

import itertools
import re
from types import SimpleNamespace

import pytest


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """Chainable query over one table of the fake database."""

    def __init__(self, client, table):
        self._client = client
        self._table = table
        self._action = "select"
        self._payload = None
        self._filters = []
        self._order = []
        self._limit = None
        self._count = None
        self._head = False

    # Actions -----------------------------------------------------------------

    def select(self, columns="*", count=None, head=False):
        self._action = "select"
        self._count = count
        self._head = head
        return self

    def insert(self, values):
        self._action = "insert"
        self._payload = values
        return self

    def update(self, values):
        self._action = "update"
        self._payload = values
        return self

    def delete(self):
        self._action = "delete"
        return self

    # Filters -----------------------------------------------------------------

    def eq(self, column, value):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def gte(self, column, value):
        self._filters.append(lambda row: _compare(row.get(column), value, lambda a, b: a >= b))
        return self

    def lte(self, column, value):
        self._filters.append(lambda row: _compare(row.get(column), value, lambda a, b: a <= b))
        return self

    def lt(self, column, value):
        self._filters.append(lambda row: _compare(row.get(column), value, lambda a, b: a < b))
        return self

    def ilike(self, column, pattern):
        self._filters.append(lambda row: _ilike(row.get(column), pattern))
        return self

    def in_(self, column, values):
        values = list(values)
        self._filters.append(lambda row: row.get(column) in values)
        return self

    def or_(self, expression):
        terms = []
        for term in expression.split(","):
            column, op, value = term.split(".", 2)
            assert op == "ilike", f"unsupported or_ operator {op}"
            terms.append((column, value))
        self._filters.append(
            lambda row: any(_ilike(row.get(c), v) for c, v in terms)
        )
        return self

    def order(self, column, desc=False):
        self._order.append((column, desc))
        return self

    def limit(self, n):
        self._limit = n
        return self

    # Execution ---------------------------------------------------------------

    def _matches(self, row):
        return all(f(row) for f in self._filters)

    def execute(self):
        self._client.calls.append((self._table, self._action))
        error = self._client.failures.get(self._table)
        if error is not None:
            raise error

        rows = self._client.tables.setdefault(self._table, [])

        if self._action == "insert":
            payload = self._payload if isinstance(self._payload, list) else [self._payload]
            inserted = []
            for values in payload:
                row = dict(values)
                row.setdefault("id", self._client.next_id(self._table))
                rows.append(row)
                inserted.append(dict(row))
            return FakeResponse(inserted)

        if self._action == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self._payload)
                    updated.append(dict(row))
            return FakeResponse(updated)

        if self._action == "delete":
            deleted = [dict(r) for r in rows if self._matches(r)]
            rows[:] = [r for r in rows if not self._matches(r)]
            return FakeResponse(deleted)

        result = [dict(r) for r in rows if self._matches(r)]
        for column, desc in reversed(self._order):
            result.sort(key=lambda r: _sort_key(r.get(column)), reverse=desc)
        count = len(result) if self._count else None
        if self._limit is not None:
            result = result[:self._limit]
        if self._head:
            return FakeResponse([], count=count)
        return FakeResponse(result, count=count)


def _compare(left, right, op):
    if left is None:
        return False
    if isinstance(left, str) or isinstance(right, str):
        return op(str(left), str(right))
    return op(left, right)


def _ilike(value, pattern):
    if value is None:
        return False
    regex = ".*".join(re.escape(part) for part in pattern.split("%"))
    return re.fullmatch(regex, str(value), re.IGNORECASE | re.DOTALL) is not None


def _sort_key(value):
    return (value is None, value if value is not None else 0)


class FakeAuth:
    def __init__(self, user=None):
        self.user = user
        self.otp_requests = []
        self.signed_out = False

    def get_user(self):
        return SimpleNamespace(user=self.user) if self.user else None

    def sign_in_with_password(self, credentials):
        if credentials.get("password") != "secret":
            raise ValueError("Invalid login credentials")
        self.user = SimpleNamespace(id="user-email", email=credentials["email"], phone="")
        return SimpleNamespace(user=self.user)

    def sign_in_with_otp(self, credentials):
        self.otp_requests.append(credentials)

    def verify_otp(self, params):
        if params.get("token") != "123456":
            raise ValueError("Token has expired or is invalid")
        self.user = SimpleNamespace(id="user-otp", phone=params["phone"].lstrip("+"), email="")
        return SimpleNamespace(user=self.user)

    def sign_out(self):
        self.signed_out = True
        self.user = None

    def get_session(self):
        return SimpleNamespace(access_token="access-token") if self.user else None


class FakeBucket:
    def __init__(self, storage, bucket):
        self._storage = storage
        self._bucket = bucket

    def upload(self, path, data, file_options=None):
        if self._storage.fail_uploads:
            raise RuntimeError("The resource already exists")
        self._storage.objects[(self._bucket, path)] = (data, file_options)
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://fake.supabase.co/storage/v1/object/public/{self._bucket}/{path}"

    def remove(self, paths):
        for path in paths:
            self._storage.objects.pop((self._bucket, path), None)
        return []


class FakeStorage:
    def __init__(self):
        self.objects = {}
        self.fail_uploads = False

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeSupabase:
    """In-memory Supabase client."""

    def __init__(self, user=None, tables=None):
        self.tables = {name: [dict(r) for r in rows] for name, rows in (tables or {}).items()}
        self.auth = FakeAuth(user)
        self.storage = FakeStorage()
        self.failures = {}
        self.calls = []
        self._ids = itertools.count(1)

    def table(self, name):
        return FakeQuery(self, name)

    def next_id(self, table):
        return f"{table}-{next(self._ids)}"

    def fail(self, table, error=None):
        """Make every request to ``table`` raise."""
        self.failures[table] = error or RuntimeError(f"{table} unavailable")


USER = SimpleNamespace(id="user-1", phone="919876543210", email="owner@example.com")
STORE_ID = "store-1"


@pytest.fixture
def user():
    return USER


@pytest.fixture
def anonymous_client():
    return FakeSupabase()


@pytest.fixture
def client():
    """Signed-in owner of ``store-1`` with a small catalogue and order book."""
    return FakeSupabase(
        user=USER,
        tables={
            "stores": [
                {"id": STORE_ID, "name": "Sharma Kirana", "address": "12 MG Road",
                 "contact": "+919876543210", "is_open": True, "is_active": True},
            ],
            "store_admins": [
                {"id": "admin-1", "user_id": "user-1", "store_id": STORE_ID,
                 "full_name": "Ravi Sharma", "phone_number": "+919876543210",
                 "role": "owner", "is_active": True, "created_at": "2024-01-01T09:00:00"},
            ],
            "customers": [
                {"id": "cust-1", "full_name": "Priya Patel", "phone_number": "+919811111111",
                 "email": "priya@example.com", "created_at": "2023-12-01T10:00:00"},
                {"id": "cust-2", "full_name": "Amit Kumar", "phone_number": "+919822222222",
                 "email": None, "created_at": "2023-12-05T10:00:00"},
            ],
            "products": [
                {"id": "prod-rice", "name": "Basmati Rice", "category": "Grains",
                 "price": 120.0, "stock_quantity": 40, "is_available": True,
                 "store_id": STORE_ID, "created_at": "2023-12-01T00:00:00"},
                {"id": "prod-milk", "name": "Toned Milk", "category": "Dairy",
                 "price": 30.0, "stock_quantity": 5, "is_available": True,
                 "store_id": STORE_ID, "created_at": "2023-12-02T00:00:00"},
                {"id": "prod-ghee", "name": "Desi Ghee", "category": "Dairy",
                 "price": 550.0, "stock_quantity": 0, "is_available": False,
                 "store_id": STORE_ID, "created_at": "2023-12-03T00:00:00"},
                {"id": "prod-other", "name": "Other Store Soap", "category": "Personal Care",
                 "price": 25.0, "stock_quantity": 3, "is_available": True,
                 "store_id": "store-2", "created_at": "2023-12-04T00:00:00"},
            ],
            "orders": [
                {"id": "order-1", "order_number": "KW1001", "customer_id": "cust-1",
                 "store_id": STORE_ID, "status": "delivered", "total_amount": 300.0,
                 "delivery_address": "1 Park St", "created_at": "2024-01-05T10:00:00"},
                {"id": "order-2", "order_number": "KW1002", "customer_id": "cust-2",
                 "store_id": STORE_ID, "status": "pending", "total_amount": 150.0,
                 "delivery_address": "2 Lake Rd", "created_at": "2024-01-06T11:30:00"},
                {"id": "order-3", "order_number": "KW1003", "customer_id": "cust-1",
                 "store_id": STORE_ID, "status": "confirmed", "total_amount": 550.0,
                 "delivery_address": "1 Park St", "created_at": "2024-01-07T18:45:00"},
                {"id": "order-x", "order_number": "XX9999", "customer_id": "cust-2",
                 "store_id": "store-2", "status": "pending", "total_amount": 999.0,
                 "delivery_address": "Elsewhere", "created_at": "2024-01-06T12:00:00"},
            ],
            "order_items": [
                {"id": "item-1", "order_id": "order-1", "product_id": "prod-rice",
                 "quantity": 2, "price": 120.0},
                {"id": "item-2", "order_id": "order-1", "product_id": "prod-milk",
                 "quantity": 2, "price": 30.0},
                {"id": "item-3", "order_id": "order-2", "product_id": "prod-milk",
                 "quantity": 5, "price": 30.0},
                {"id": "item-4", "order_id": "order-3", "product_id": "prod-ghee",
                 "quantity": 1, "price": 550.0},
            ],
        },
    )

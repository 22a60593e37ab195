from __future__ import annotations
from typing import Optional, Protocol
from schemas import OrderRecord, Submission, User

SEED_USERS: list[dict] = [
    {"id": 1, "name": "John Doe", "email": "john@example.com"},
    {"id": 2, "name": "Jane Smith", "email": "jane@example.com"},
]

class Store(Protocol):
    async def create_order(self, submission: Submission) -> OrderRecord: ...
    async def get_orders(self) -> list[OrderRecord]: ...
    async def create_user(self, name: str, email: str) -> User: ...
    async def get_users(self) -> list[User]: ...
    async def get_user(self, user_id: int) -> Optional[User]: ...

class InMemoryStore:
    """Append-only lists of orders and users, kept for the process lifetime.

    Ids come from the current list length, so two appends racing on the same
    length would share an id. Nothing awaits between reading the length and
    appending, which keeps this safe on a single event loop.
    """

    def __init__(self, users: Optional[list[dict]] = None):
        seed = SEED_USERS if users is None else users
        self.users: list[User] = [User(**u) for u in seed]
        self.orders: list[OrderRecord] = []

    async def create_order(self, submission: Submission) -> OrderRecord:
        record = OrderRecord(
            id=len(self.orders) + 1,
            name=submission.name,
            customer_name=submission.name,
            email=submission.email,
            phone=submission.phone or "",
            address=submission.address,
            items=submission.details,
            notes=submission.notes,
            product_id=submission.product_id,
            product_name=submission.product_name,
            quantity=submission.quantity,
            order_date=submission.created_at,
        )
        self.orders.append(record)
        return record

    async def get_orders(self) -> list[OrderRecord]:
        return list(self.orders)

    async def create_user(self, name: str, email: str) -> User:
        user = User(id=len(self.users) + 1, name=name, email=email)
        self.users.append(user)
        return user

    async def get_users(self) -> list[User]:
        return list(self.users)

    async def get_user(self, user_id: int) -> Optional[User]:
        return next((u for u in self.users if u.id == user_id), None)

_store: Optional[InMemoryStore] = None

def get_store() -> Store:
    global _store
    if _store is None:
        _store = InMemoryStore()
    return _store

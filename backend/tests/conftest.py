"""
Pytest configuration and fixtures.

The services take their repos through the constructor, so the tests swap
the psycopg2 repos for in-memory ones sharing a single FakeDB.
"""
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from core.errors import ConflictError, DuplicateAssignmentError
from modules.inventory.assignments.service import AssignmentService
from modules.inventory.categories.service import CategoryService
from modules.inventory.items.repo import WRITABLE_FIELDS
from modules.inventory.items.service import InventoryService


class FakeDB:
    def __init__(self):
        self.categories = {}
        self.items = {}
        self.assignments = {}
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def now(self):
        self._clock += timedelta(seconds=1)
        return self._clock


class FakeCategoryRepo:
    def __init__(self, db: FakeDB):
        self.db = db
        self.reorder_calls = []

    def init_tables(self):
        pass

    def list_categories(self):
        rows = sorted(self.db.categories.values(), key=lambda c: (c["order_index"], c["id"]))
        return [dict(r) for r in rows]

    def get_category_by_name(self, name):
        for row in self.db.categories.values():
            if row["name"] == name:
                return dict(row)
        return None

    def create_category(self, name):
        if self.get_category_by_name(name):
            raise ConflictError(f"Category '{name}' already exists", {"name": name})
        indices = [c["order_index"] for c in self.db.categories.values()]
        row = {
            "id": str(uuid.uuid4()),
            "name": name,
            "order_index": max(indices) + 1 if indices else 0,
            "created_at": self.db.now(),
        }
        self.db.categories[row["id"]] = row
        return dict(row)

    def rename_category(self, category_id, name):
        row = self.db.categories.get(category_id)
        if not row:
            return None
        other = self.get_category_by_name(name)
        if other and other["id"] != category_id:
            raise ConflictError(f"Category '{name}' already exists", {"name": name})
        row["name"] = name
        return dict(row)

    def delete_category(self, category_id):
        row = self.db.categories.get(category_id)
        if not row:
            return {"found": False, "name": None, "blocking_items": []}
        blocking = sorted(
            ({"id": i["id"], "name": i["name"]} for i in self.db.items.values() if i["category"] == row["name"]),
            key=lambda i: i["name"],
        )
        if not blocking:
            del self.db.categories[category_id]
        return {"found": True, "name": row["name"], "blocking_items": blocking}

    def reorder_categories(self, ordered_ids):
        self.reorder_calls.append(list(ordered_ids))
        if set(self.db.categories) != set(ordered_ids):
            raise ConflictError("Categories changed while reordering; reload and try again")
        for idx, cid in enumerate(ordered_ids):
            self.db.categories[cid]["order_index"] = idx
        return self.list_categories()


class FakeInventoryRepo:
    def __init__(self, db: FakeDB):
        self.db = db

    def init_tables(self):
        pass

    def list_items(self):
        rows = sorted(self.db.items.values(), key=lambda i: i["id"])
        rows = sorted(rows, key=lambda i: i["created_at"], reverse=True)
        return [dict(r) for r in rows]

    def get_item(self, item_id):
        row = self.db.items.get(item_id)
        return dict(row) if row else None

    def list_items_in_category(self, category):
        return [r for r in self.list_items() if r["category"] == category]

    def create_item(self, fields):
        row = {k: None for k in WRITABLE_FIELDS}
        row.update(fields)
        row["id"] = str(uuid.uuid4())
        row["created_at"] = self.db.now()
        self.db.items[row["id"]] = row
        return dict(row)

    def update_item(self, item_id, fields):
        row = self.db.items.get(item_id)
        if not row:
            return None
        row.update(fields)
        return dict(row)

    def delete_item(self, item_id):
        if item_id not in self.db.items:
            return False
        del self.db.items[item_id]
        for aid in [a for a, row in self.db.assignments.items() if row["inventory_item_id"] == item_id]:
            del self.db.assignments[aid]
        return True


class FakeAssignmentRepo:
    def __init__(self, db: FakeDB):
        self.db = db
        self.before_write = None

    def init_tables(self):
        pass

    def list_for_project(self, project_id):
        rows = sorted(
            (a for a in self.db.assignments.values() if a["project_id"] == project_id),
            key=lambda a: (a["created_at"], a["id"]),
        )
        result = []
        for a in rows:
            item = self.db.items.get(a["inventory_item_id"])
            result.append({**a, "inventory_item": dict(item) if item else None})
        return result

    def find_assignment(self, project_id, inventory_item_id):
        for a in self.db.assignments.values():
            if a["project_id"] == project_id and a["inventory_item_id"] == inventory_item_id:
                return dict(a)
        return None

    def linked_item_ids(self, project_id):
        return {a["inventory_item_id"] for a in self.db.assignments.values() if a["project_id"] == project_id}

    def create_assignment(self, project_id, inventory_item_id, notes, quantity=1):
        if self.before_write:
            self.before_write()
        item = self.db.items.get(inventory_item_id)
        if not item:
            return {"found": False, "status": None, "assignment": None}
        if item["status"] != "available":
            return {"found": True, "status": item["status"], "assignment": None}
        if self.find_assignment(project_id, inventory_item_id):
            raise DuplicateAssignmentError("Item is already assigned to this project")
        row = {
            "id": str(uuid.uuid4()),
            "project_id": project_id,
            "inventory_item_id": inventory_item_id,
            "quantity": quantity,
            "notes": notes,
            "created_at": self.db.now(),
        }
        self.db.assignments[row["id"]] = row
        return {"found": True, "status": "available", "assignment": dict(row)}

    def delete_assignment(self, assignment_id):
        return self.db.assignments.pop(assignment_id, None) is not None


@pytest.fixture
def db():
    return FakeDB()


@pytest.fixture
def settings():
    return Settings(INIT_DB_ON_STARTUP=False)


@pytest.fixture
def category_repo(db):
    return FakeCategoryRepo(db)


@pytest.fixture
def inventory_repo(db):
    return FakeInventoryRepo(db)


@pytest.fixture
def assignment_repo(db):
    return FakeAssignmentRepo(db)


@pytest.fixture
def category_service(category_repo):
    return CategoryService(repo=category_repo)


@pytest.fixture
def inventory_service(inventory_repo):
    return InventoryService(repo=inventory_repo)


@pytest.fixture
def assignment_service(assignment_repo, inventory_service):
    return AssignmentService(repo=assignment_repo, items=inventory_service)


@pytest.fixture
def make_item(inventory_service):
    def _make(name, category="Cameras", **fields):
        return inventory_service.create({"name": name, "category": category, **fields})
    return _make


@pytest.fixture
def client(settings, category_service, inventory_service, assignment_service):
    """API client with services bound to the in-memory repos and auth stubbed out."""
    from app import app
    from common import deps
    from modules.inventory.assignments import api as assignments_api
    from modules.inventory.categories import api as categories_api
    from modules.inventory.items import api as items_api

    app.dependency_overrides[categories_api._svc] = lambda: category_service
    app.dependency_overrides[items_api._svc] = lambda: inventory_service
    app.dependency_overrides[assignments_api._svc] = lambda: assignment_service
    app.dependency_overrides[deps.get_app_settings] = lambda: settings
    app.dependency_overrides[deps.get_current_user] = lambda: {"username": "tester", "role": "user"}
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

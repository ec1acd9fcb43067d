import pytest

from core.errors import DuplicateAssignmentError, NotAvailableError, NotFoundError, ValidationError


def test_assign_and_list_for_project(make_item, assignment_service):
    fx3 = make_item("FX3", brand="Sony", model="ILME-FX3")
    link = assignment_service.assign("p1", fx3.id, notes="  A cam  ")
    assert link.notes == "A cam"

    [detail] = assignment_service.list_for_project("p1")
    assert detail.id == link.id
    assert detail.inventory_item.name == "FX3"
    assert assignment_service.list_for_project("p2") == []


def test_assign_leaves_item_status_alone(make_item, assignment_service, inventory_service):
    item = make_item("FX3")
    assignment_service.assign("p1", item.id)
    assert inventory_service.get(item.id).status.value == "available"


def test_item_can_be_linked_to_several_projects(make_item, assignment_service):
    item = make_item("FX3")
    assignment_service.assign("p1", item.id)
    assignment_service.assign("p2", item.id)
    assert len(assignment_service.list_for_project("p2")) == 1


@pytest.mark.parametrize("status", ["rented", "maintenance", "lost"])
def test_assign_rejects_unavailable_items(make_item, assignment_service, db, status):
    item = make_item("FX3", status=status)
    with pytest.raises(NotAvailableError) as exc:
        assignment_service.assign("p1", item.id)
    assert exc.value.context["status"] == status
    assert db.assignments == {}


def test_assign_rejects_duplicates(make_item, assignment_service, db):
    item = make_item("FX3")
    assignment_service.assign("p1", item.id)
    with pytest.raises(DuplicateAssignmentError):
        assignment_service.assign("p1", item.id)
    assert len(db.assignments) == 1


def test_assign_unknown_item(assignment_service):
    with pytest.raises(NotFoundError):
        assignment_service.assign("p1", "missing")


def test_assign_requires_project(make_item, assignment_service):
    item = make_item("FX3")
    with pytest.raises(ValidationError):
        assignment_service.assign("  ", item.id)


def test_status_change_between_read_and_write_is_caught(make_item, assignment_service, assignment_repo, db):
    item = make_item("FX3")

    def rent_it_elsewhere():
        db.items[item.id]["status"] = "rented"

    assignment_repo.before_write = rent_it_elsewhere
    with pytest.raises(NotAvailableError):
        assignment_service.assign("p1", item.id)
    assert db.assignments == {}


def test_unassign(make_item, assignment_service):
    item = make_item("FX3")
    link = assignment_service.assign("p1", item.id)
    assignment_service.unassign(link.id)
    assert assignment_service.list_for_project("p1") == []
    with pytest.raises(NotFoundError):
        assignment_service.unassign(link.id)


def test_candidates_are_available_and_unlinked(make_item, assignment_service):
    linked = make_item("FX3")
    free = make_item("A7S III")
    make_item("FX6", status="rented")
    make_item("Aputure 600d", category="Lights")
    assignment_service.assign("p1", linked.id)

    assert [i.id for i in assignment_service.available_candidates("Cameras", "p1")] == [free.id]
    assert {i.id for i in assignment_service.available_candidates("Cameras", "p2")} == {linked.id, free.id}


def test_candidates_for_empty_category(make_item, assignment_service):
    make_item("FX3")
    assert assignment_service.available_candidates("", "p1") == []
    assert assignment_service.available_candidates(None, "p1") == []


def test_export_rows_fill_missing_values(make_item, assignment_service):
    item = make_item("FX3", brand="Sony")
    assignment_service.assign("p1", item.id)
    assert assignment_service.export_rows("p1") == [{
        "Category": "Cameras",
        "Equipment": "FX3",
        "Brand": "Sony",
        "Model": "-",
        "Serial No": "-",
        "Notes": "-",
    }]


def test_quantity_defaults_to_one(make_item, assignment_service):
    item = make_item("Sandbag", category="Grip")
    assert assignment_service.assign("p1", item.id).quantity == 1
    other = make_item("C-stand", category="Grip")
    assert assignment_service.assign("p1", other.id, quantity=4).quantity == 4


@pytest.mark.parametrize("quantity", [0, -2, True, 1.5])
def test_quantity_must_be_a_positive_whole_number(make_item, assignment_service, db, quantity):
    item = make_item("Sandbag", category="Grip")
    with pytest.raises(ValidationError):
        assignment_service.assign("p1", item.id, quantity=quantity)
    assert db.assignments == {}

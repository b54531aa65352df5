from __future__ import annotations

from archivist.adapters.sqlalchemy import SqlAlchemyAttributeStore
from tests.helpers.fakes import Shop
from tests.helpers.models import Company, Employee, start_mappers


def test_natural_attributes_are_the_mapped_columns() -> None:
    start_mappers()
    store = SqlAlchemyAttributeStore()

    assert store.natural_attributes(Company(name="Acme")) == (
        "id",
        "name",
        "bank_details",
        "dormant",
    )
    assert "company" not in store.natural_attributes(Employee())


def test_unmapped_instances_fall_back_to_plain_object_rules() -> None:
    store = SqlAlchemyAttributeStore()

    assert store.natural_attributes(Shop(id=1)) == (
        "id",
        "name",
        "secret",
        "closed",
        "items",
        "manager",
    )


def test_get_and_set_go_through_mapped_attributes() -> None:
    start_mappers()
    store = SqlAlchemyAttributeStore()
    employee = Employee(first_name="Ada", last_name="Byron", salary=3)

    store.set(employee, "salary", 4)

    assert store.get(employee, "salary") == 4
    assert store.get(employee, "calculated_worth") == 40
    assert store.get(employee, "full_name") == "Ada Byron"

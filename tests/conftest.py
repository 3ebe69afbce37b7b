import pytest

from budgettracker.storage import JsonStorage
from budgettracker.store import RecordStore
from factories import make_cat


@pytest.fixture
def food():
    return make_cat("food", "Food", "cart.fill")


@pytest.fixture
def rent():
    return make_cat("rent", "Housing", "house.fill")


@pytest.fixture
def storage(tmp_path):
    return JsonStorage(tmp_path)


@pytest.fixture
def store(storage, food, rent):
    storage.save("categories", [food, rent])
    s = RecordStore(storage).open()
    yield s
    s.close()

import random

import pytest

from src.exceptions import SelectionError
from src.news.catalog import build_catalog
from src.news.services.country_selector import select_countries


class TestSelectCountries:
    @pytest.fixture(autouse=True)
    def setup_catalog(self):
        self.catalog = build_catalog({
            f"Country {i}": [(f"Site {i}", f"https://site{i}.example.com/")]
            for i in range(10)
        })

    def test_count_above_catalog_size_returns_everything(self, small_catalog):
        selected = select_countries(small_catalog, 5)

        assert set(selected) == {"Testland", "Mockovia", "Stubistan"}
        assert len(selected) == 3

    def test_count_equal_to_catalog_size_returns_everything(self):
        selected = select_countries(self.catalog, 10)

        assert set(selected) == set(self.catalog.keys())

    @pytest.mark.parametrize("count", [0, 1, 4, 9])
    def test_returns_exact_number_of_distinct_countries(self, count):
        for _ in range(50):
            selected = select_countries(self.catalog, count)

            assert len(selected) == count
            assert len(set(selected)) == count
            assert set(selected) <= set(self.catalog.keys())

    def test_every_country_can_be_selected(self):
        rng = random.Random(1234)
        seen = set()
        for _ in range(200):
            seen.update(select_countries(self.catalog, 2, rng=rng))

        assert seen == set(self.catalog.keys())

    def test_seeded_rng_is_reproducible(self):
        first = select_countries(self.catalog, 4, rng=random.Random(7))
        second = select_countries(self.catalog, 4, rng=random.Random(7))

        assert first == second

    def test_does_not_mutate_catalog(self):
        before = list(self.catalog.keys())
        select_countries(self.catalog, 3)

        assert list(self.catalog.keys()) == before

    def test_empty_catalog_is_a_selection_fault(self):
        with pytest.raises(SelectionError) as exc_info:
            select_countries({}, 3)

        assert "empty" in exc_info.value.message.lower()

    @pytest.mark.parametrize("count", [-1, 2.5, "3", None, True])
    def test_invalid_count_is_a_selection_fault(self, count):
        with pytest.raises(SelectionError):
            select_countries(self.catalog, count)

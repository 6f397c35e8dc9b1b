import pytest

from catalog import CatalogService, FilterCriteria, filter_products, product_brand, sort_products
from seed import default_products


@pytest.fixture
def products():
    return default_products()


def ids(products):
    return [p["id"] for p in products]


def test_sort_price_low_scenario():
    result = sort_products([{"price": 500}, {"price": 100}, {"price": 900}], "price-low")
    assert [p["price"] for p in result] == [100, 500, 900]


def test_sort_keys(products):
    assert [p["price"] for p in sort_products(products, "price-high")][:3] == [4999, 4999, 4999]
    assert ids(sort_products(products, "newest"))[:3] == [14, 13, 12]
    assert ids(sort_products(products, "unknown")) == ids(sort_products(products, "newest"))
    ratings = [p["rating"] for p in sort_products(products, "rating")]
    assert ratings == sorted(ratings, reverse=True)


def test_sort_by_name_ignores_case():
    result = sort_products([{"id": 1, "name": "boots"}, {"id": 2, "name": "Argentina"}, {"id": 3, "name": "cones"}], "name")
    assert [p["name"] for p in result] == ["Argentina", "boots", "cones"]


def test_default_criteria_keep_everything(products):
    assert ids(filter_products(products, FilterCriteria())) == ids(products)


def test_filter_by_category(products):
    assert ids(filter_products(products, FilterCriteria(category="boots"))) == [5, 6, 7]


def test_filter_by_inclusive_price_range(products):
    assert ids(filter_products(products, FilterCriteria(price_range=(0, 799)))) == [11, 13, 14]
    assert ids(filter_products(products, FilterCriteria(price_range=(4999, 4999)))) == [5, 6, 7]


def test_filter_by_size_overlap(products):
    assert ids(filter_products(products, FilterCriteria(sizes=["XXL"]))) == [1, 2, 4]
    assert ids(filter_products(products, FilterCriteria(sizes=["XXL", "11"]))) == [1, 2, 4, 5, 6]


def test_filter_by_brand(products):
    assert ids(filter_products(products, FilterCriteria(brands=["Nike"]))) == [5, 9]
    assert ids(filter_products(products, FilterCriteria(brands=["Puma", "Adidas"]))) == [6, 7, 8, 10]


def test_search_is_case_insensitive(products):
    assert ids(filter_products(products, FilterCriteria(search_query="JERSEY"))) == [1, 2, 3, 4]


def test_in_stock_only(products):
    result = filter_products(products, FilterCriteria(in_stock=True))
    assert 4 not in ids(result)
    assert len(result) == 13


def test_criteria_intersect(products):
    criteria = FilterCriteria(category="jerseys", in_stock=True, sizes=["XXL"])
    assert ids(filter_products(products, criteria)) == [1, 2]


def test_brand_is_guessed_from_name():
    assert product_brand("Adidas Predator Elite Boots") == "Adidas"
    assert product_brand("nike premier league ball") == "Nike"
    assert product_brand("Goalkeeper Gloves") == "Other"
    # first known brand wins
    assert product_brand("Adidas x Nike collab") == "Nike"


def test_catalog_service_over_api(api):
    catalog = CatalogService(api)
    assert len(catalog.list_products()) == 14
    assert len(catalog.list_products("all")) == 14
    assert ids(catalog.list_products("balls")) == [8, 9, 10]
    assert [c["name"] for c in catalog.load_categories()] == ["jerseys", "boots", "balls", "accessories"]

    browsed = catalog.browse(FilterCriteria(category="boots", sort_by="rating"))
    assert ids(browsed) == [6, 5, 7]

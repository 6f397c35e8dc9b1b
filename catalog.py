"""
Product browsing: filtering and sorting of the catalog listing.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from client import StorefrontClient

# Brand is not stored on products; it is guessed from the name and the first
# match wins, so a name mentioning two brands lands under the first listed.
KNOWN_BRANDS = ["Nike", "Adidas", "Puma", "New Balance", "Under Armour"]


class FilterCriteria(BaseModel):
    category: str = "all"
    price_range: Tuple[int, int] = (0, 10000)
    sizes: List[str] = Field(default_factory=list)
    brands: List[str] = Field(default_factory=list)
    sort_by: str = "newest"
    search_query: str = ""
    in_stock: bool = False


def product_brand(name: str) -> str:
    lowered = name.lower()
    for brand in KNOWN_BRANDS:
        if brand.lower() in lowered:
            return brand
    return "Other"


def _matches_search(product: Dict, query: str) -> bool:
    return any(query in (product.get(field) or "").lower() for field in ("name", "description", "category"))


def filter_products(products: Sequence[Dict], criteria: FilterCriteria) -> List[Dict]:
    low, high = criteria.price_range
    query = criteria.search_query.strip().lower()
    result = []
    for product in products:
        if criteria.category != "all" and product.get("category") != criteria.category:
            continue
        if not low <= product.get("price", 0) <= high:
            continue
        if criteria.sizes and not set(criteria.sizes) & set(product.get("sizes") or []):
            continue
        if criteria.brands and product_brand(product.get("name", "")) not in criteria.brands:
            continue
        if query and not _matches_search(product, query):
            continue
        if criteria.in_stock and product.get("stock", 0) <= 0:
            continue
        result.append(product)
    return result


def sort_products(products: Sequence[Dict], sort_by: str) -> List[Dict]:
    if sort_by == "price-low":
        return sorted(products, key=lambda p: p["price"])
    if sort_by == "price-high":
        return sorted(products, key=lambda p: p["price"], reverse=True)
    if sort_by == "name":
        return sorted(products, key=lambda p: p["name"].casefold())
    if sort_by == "rating":
        return sorted(products, key=lambda p: p.get("rating", 0), reverse=True)
    # newest: ids grow with insertion order
    return sorted(products, key=lambda p: p["id"], reverse=True)


class CatalogService:
    def __init__(self, client: StorefrontClient):
        self.client = client

    def list_products(self, category: Optional[str] = None) -> List[Dict]:
        if category == "all":
            category = None
        return self.client.list_products(category)

    def load_categories(self) -> List[Dict]:
        return [c for c in self.client.list_categories() if c.get("isActive")]

    def browse(self, criteria: Optional[FilterCriteria] = None) -> List[Dict]:
        criteria = criteria or FilterCriteria()
        products = self.list_products()
        return sort_products(filter_products(products, criteria), criteria.sort_by)

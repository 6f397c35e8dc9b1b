from cart import CartState, Wishlist, compute_totals
from local_storage import LocalStorage

JERSEY = {
    "id": 1, "name": "Manchester United Home Jersey 2024", "description": "Home jersey", "price": 1299,
    "category": "jerseys", "image": "", "sizes": ["S", "M", "L"], "hasSizes": True,
    "stock": 2, "rating": 4.8, "reviews": 127,
}
BALL = {
    "id": 8, "name": "Adidas Champions League Ball", "description": "Match ball", "price": 1999,
    "category": "balls", "image": "", "sizes": [], "hasSizes": False,
    "stock": 25, "rating": 4.7, "reviews": 203,
}
SOLD_OUT = {**JERSEY, "id": 4, "name": "Argentina National Jersey", "stock": 0}


def test_add_item_defaults_size_and_merges(storage, notify):
    cart = CartState(storage, notify)
    assert cart.add_item(JERSEY) is True
    assert cart.add_item(JERSEY) is True
    assert cart.add_item(BALL) is True

    rows = cart.items
    assert [(r["id"], r["selectedSize"], r["quantity"]) for r in rows] == [(1, "S", 2), (8, "Standard", 1)]
    assert rows[0]["price"] == 1299


def test_same_product_different_size_is_a_new_row(storage, notify):
    cart = CartState(storage, notify)
    cart.add_item(JERSEY, "M")
    cart.add_item(JERSEY, "L")
    assert [(r["selectedSize"], r["quantity"]) for r in cart.items] == [("M", 1), ("L", 1)]


def test_add_item_never_exceeds_stock(storage, notify, notes):
    cart = CartState(storage, notify)
    for _ in range(5):
        cart.add_item(JERSEY, "M")
    assert cart.items[0]["quantity"] == JERSEY["stock"]
    assert ("warning", "Only 2 items available in stock") in notes


def test_out_of_stock_product_is_not_added(storage, notify, notes):
    cart = CartState(storage, notify)
    assert cart.add_item(SOLD_OUT) is False
    assert cart.items == []
    assert notes == [("error", "This product is out of stock")]


def test_update_quantity_clamps_to_stock(storage, notify, notes):
    cart = CartState(storage, notify)
    cart.add_item(BALL)
    assert cart.update_quantity(8, "Standard", "3") == 3
    assert cart.update_quantity(8, "Standard", 0) == 1
    assert cart.update_quantity(8, "Standard", -4) == 1
    assert cart.update_quantity(8, "Standard", "lots") == 1
    assert cart.update_quantity(8, "Standard", None) == 1
    assert cart.update_quantity(8, "Standard", 99) == 25
    assert notes[-1][0] == "warning"
    assert cart.items[0]["quantity"] == 25


def test_update_quantity_always_within_bounds(storage, notify):
    cart = CartState(storage, notify)
    cart.add_item(JERSEY, "S")
    for requested in list(range(-3, 10)) + ["", "2.7", "nan", "inf"]:
        quantity = cart.update_quantity(1, "S", requested)
        assert 1 <= quantity <= JERSEY["stock"]
        assert cart.items[0]["quantity"] == quantity


def test_update_quantity_of_missing_row(storage, notify, notes):
    cart = CartState(storage, notify)
    assert cart.update_quantity(42, "M", 2) is None
    assert notes == [("warning", "Product not found in cart.")]


def test_remove_item(storage, notify):
    cart = CartState(storage, notify)
    cart.add_item(JERSEY, "S")
    cart.add_item(JERSEY, "M")
    cart.remove_item(1, "S")
    assert [r["selectedSize"] for r in cart.items] == ["M"]


def test_removing_missing_row_is_a_noop(storage, notify, notes):
    cart = CartState(storage, notify)
    cart.add_item(BALL)
    before = cart.items
    notes.clear()
    cart.remove_item(8, "XL")
    cart.remove_item(99, "Standard")
    assert cart.items == before
    assert notes == []


def test_badge_count_follows_every_change(storage, notify):
    counts = []
    cart = CartState(storage, notify, on_change=counts.append)
    cart.add_item(BALL)
    cart.add_item(BALL)
    cart.add_item(JERSEY)
    cart.update_quantity(8, "Standard", 5)
    cart.remove_item(1, "S")
    cart.clear()
    assert counts == [1, 2, 3, 6, 5, 0]
    assert cart.badge_count == 0


def test_cart_survives_reload(tmp_path, notify):
    path = tmp_path / "local.json"
    CartState(LocalStorage(path), notify).add_item(JERSEY, "L")
    reloaded = CartState(LocalStorage(path), notify)
    assert reloaded.items[0]["selectedSize"] == "L"
    assert reloaded.badge_count == 1


def test_totals_below_threshold():
    totals = compute_totals([{"id": 1, "price": 1299, "quantity": 1}])
    assert totals == {"subtotal": 1299, "shippingFee": 110, "total": 1409}


def test_totals_at_or_above_threshold():
    assert compute_totals([{"id": 1, "price": 1600, "quantity": 2}]) == {"subtotal": 3200, "shippingFee": 0, "total": 3200}
    assert compute_totals([{"id": 1, "price": 3000, "quantity": 1}])["shippingFee"] == 0


def test_totals_invariant(storage, notify):
    cart = CartState(storage, notify)
    for product, size in [(JERSEY, "S"), (JERSEY, "M"), (BALL, None), (BALL, None)]:
        cart.add_item(product, size)
        totals = cart.totals()
        assert totals["total"] == totals["subtotal"] + totals["shippingFee"]
        assert (totals["shippingFee"] == 0) == (totals["subtotal"] >= 3000)


def test_wishlist_toggle(storage, notify):
    wishlist = Wishlist(storage, notify)
    assert wishlist.toggle(JERSEY) is True
    assert wishlist.contains(1)
    assert wishlist.toggle(BALL) is True
    assert wishlist.toggle(JERSEY) is False
    assert [p["id"] for p in wishlist.items] == [8]
    assert storage.get_item("wishlist")[0]["name"] == BALL["name"]

"""Records written to a store file the first time it is opened."""

from datetime import datetime, timezone

from config import ADMIN_EMAILS, ADMIN_PASSWORD
from security import hash_password

APPAREL_SIZES = ["S", "M", "L", "XL", "XXL"]
BOOT_SIZES = ["6", "7", "8", "9", "10", "11"]


def default_categories():
    return [
        {"id": 1, "name": "jerseys", "displayName": "Jerseys", "isActive": True},
        {"id": 2, "name": "boots", "displayName": "Boots", "isActive": True},
        {"id": 3, "name": "balls", "displayName": "Balls", "isActive": True},
        {"id": 4, "name": "accessories", "displayName": "Accessories", "isActive": True},
    ]


def _product(id, name, description, price, category, image, sizes, stock, rating, reviews, details):
    return {
        "id": id,
        "name": name,
        "description": description,
        "price": price,
        "category": category,
        "image": f"/images/products/{image}",
        "sizes": list(sizes),
        "hasSizes": bool(sizes),
        "stock": stock,
        "rating": rating,
        "reviews": reviews,
        "details": details,
    }


def default_products():
    return [
        # Jerseys - 1299 Taka
        _product(1, "Manchester United Home Jersey 2024", "Official home jersey for the current season.",
                 1299, "jerseys", "manutd-jersey.jpg", APPAREL_SIZES, 15, 4.8, 127,
                 "100% Polyester. Authentic patch included."),
        _product(2, "Real Madrid Away Jersey 2024", "Limited edition away jersey featuring sleek design.",
                 1299, "jerseys", "realmadrid-jersey.jpg", APPAREL_SIZES, 8, 4.9, 89,
                 "Customizable with name and number. Climacool ventilation."),
        _product(3, "Barcelona Third Jersey 2024", "Special edition third jersey with unique design.",
                 1299, "jerseys", "barcelona-jersey.jpg", ["S", "M", "L", "XL"], 25, 4.7, 203,
                 "Regular fit. Premium edition. Official licensed product."),
        _product(4, "Argentina National Jersey", "Official Argentina national team jersey.",
                 1299, "jerseys", "argentina-jersey.jpg", APPAREL_SIZES, 0, 4.5, 67,
                 "Messi edition. Lightweight fabric. Moisture wicking."),
        # Boots - 4999 Taka
        _product(5, "Nike Phantom GX Elite Boots", "Premium football boots with innovative grip technology.",
                 4999, "boots", "nike-phantom-boots.jpg", BOOT_SIZES, 42, 4.6, 156,
                 "Textured finish for better ball control. Dynamic Fit collar."),
        _product(6, "Adidas Predator Elite Boots", "Professional grade boots with enhanced grip and control.",
                 4999, "boots", "adidas-predator-boots.jpg", BOOT_SIZES, 18, 4.8, 94,
                 "Hybridtouch upper for perfect fit. Controlskin technology."),
        _product(7, "Puma Future Ultimate Boots", "Advanced boots with adaptive fit technology.",
                 4999, "boots", "puma-future-boots.jpg", BOOT_SIZES[:-1], 12, 4.4, 58,
                 "FUZIONFIT+ compression band. Dynamic Motion System outsole."),
        # Balls - 1999 Taka
        _product(8, "Adidas Champions League Ball", "Official Champions League match ball.",
                 1999, "balls", "adidas-champions-ball.jpg", [], 25, 4.7, 203,
                 "Size 5. Butylene bladder for best air retention. All-weather use."),
        _product(9, "Nike Premier League Flight Ball", "Official Premier League match ball.",
                 1999, "balls", "nike-premier-ball.jpg", [], 20, 4.6, 112,
                 "Size 5. Aerow Trac grooves for accurate flight."),
        _product(10, "Puma Official Match Ball", "FIFA approved professional match ball.",
                 1999, "balls", "puma-match-ball.jpg", [], 14, 4.3, 41,
                 "Size 5. Low-absorption exterior. 32-panel design for reduced drag."),
        # Accessories - 499-1499 Taka
        _product(11, "Football Shin Guards", "Professional shin guards with ankle protection.",
                 599, "accessories", "shin-guards.jpg", [], 42, 4.6, 156,
                 "Lightweight polymer shell. Comfortable foam backing."),
        _product(12, "Goalkeeper Gloves", "Professional goalkeeper gloves with latex palm.",
                 1499, "accessories", "goalkeeper-gloves.jpg", ["S", "M", "L", "XL"], 18, 4.8, 94,
                 "Negative cut. Finger protection spines. All-weather grip."),
        _product(13, "Football Socks", "Professional football socks with cushioning.",
                 499, "accessories", "football-socks.jpg", [], 60, 4.2, 33,
                 "Moisture-wicking. Cushioned sole. Ankle support."),
        _product(14, "Training Cones (Set of 10)", "Bright orange training cones for practice.",
                 799, "accessories", "training-cones.jpg", [], 30, 4.1, 22,
                 "Durable plastic. Stackable design. Bright color for visibility."),
    ]


def default_admin():
    return {
        "id": "admin",
        "firstName": "IR7",
        "lastName": "Admin",
        "email": ADMIN_EMAILS[0] if ADMIN_EMAILS else "admin@ir7.com",
        "passwordHash": hash_password(ADMIN_PASSWORD),
        "phone": "",
        "role": "admin",
        "createdAt": datetime.now(timezone.utc).isoformat(),
        "lastLogin": None,
        "orders": [],
    }

import logging
import os
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from fastapi import BackgroundTasks, Depends, FastAPI, Header, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, EmailStr, Field
from pydantic import ValidationError as SchemaError

from config import DATA_DIR
from database import Database
from errors import (
    AuthError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    PersistenceError,
    StorefrontError,
    ValidationError,
)
from notifications import send_order_confirmation
from pricing import shipping_fee_for
from schemas import (
    Category as CategorySchema,
    Customer,
    Order as OrderSchema,
    OrderItem,
    OrderStatus,
    OrderSummary,
    PaymentMethod,
    Product as ProductSchema,
    ShippingAddress,
)
from security import create_access_token, decode_token, hash_password, role_for_email, safe_user, verify_password

logger = logging.getLogger(__name__)

app = FastAPI(title="IR7 Football Shop API")
app.state.db = Database(DATA_DIR)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Utilities

def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def get_db(request: Request) -> Database:
    return request.app.state.db


def validated(schema, data: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return schema(**data).model_dump(mode="json")
    except SchemaError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ()))
        raise ValidationError(f"Invalid {field}: {first.get('msg')}" if field else first.get("msg"))


# Auth models
class RegisterInput(BaseModel):
    firstName: str = Field(..., min_length=1)
    lastName: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)
    phone: str = Field(..., min_length=1)


class LoginInput(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: Dict[str, Any]


# Dependency to get current user

def get_current_user(authorization: Optional[str] = Header(default=None), db: Database = Depends(get_db)):
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthError("Not authenticated")
    token = authorization.split(" ", 1)[1]
    payload = decode_token(token)
    user_id = payload.get("sub")
    if not user_id:
        raise AuthError("Invalid token")
    user = db.users.get(user_id)
    if not user:
        raise AuthError("User not found")
    return user


def require_admin(current_user: dict = Depends(get_current_user)):
    if current_user.get("role") != "admin":
        raise ForbiddenError("Admins only")
    return current_user


# Routes
@app.get("/")
def read_root():
    return {"message": "IR7 Football Shop API"}


@app.get("/health")
def health(db: Database = Depends(get_db)):
    return {
        "backend": "running",
        "data_dir": str(db.data_dir),
        "collections": db.list_collection_names(),
    }


# Users
@app.post("/api/users/register", response_model=TokenResponse)
def register(payload: RegisterInput, db: Database = Depends(get_db)):
    email = payload.email.lower()
    with db.users.transaction() as users:
        if any(u.get("email", "").lower() == email for u in users):
            raise ConflictError("User already exists with this email")
        user = {
            "id": uuid4().hex,
            "firstName": payload.firstName.strip(),
            "lastName": payload.lastName.strip(),
            "email": email,
            "passwordHash": hash_password(payload.password),
            "phone": payload.phone.strip(),
            "role": role_for_email(email),
            "createdAt": now_iso(),
            "lastLogin": None,
            "orders": [],
        }
        users.append(user)
    logger.info("Registered user %s (role %s)", email, user["role"])
    token = create_access_token({"sub": user["id"]})
    return TokenResponse(access_token=token, user=safe_user(user))


@app.post("/api/users/login", response_model=TokenResponse)
def login(payload: LoginInput, db: Database = Depends(get_db)):
    email = payload.email.lower()
    user = db.users.find_one(lambda u: u.get("email", "").lower() == email)
    if not user or not verify_password(payload.password, user.get("passwordHash", "")):
        raise AuthError("Invalid email or password")
    user = db.users.update(user["id"], {"lastLogin": now_iso()})
    token = create_access_token({"sub": user["id"]})
    logger.info("User %s signed in", email)
    return TokenResponse(access_token=token, user=safe_user(user))


@app.get("/api/users/me")
def me(current_user: dict = Depends(get_current_user)):
    return safe_user(current_user)


@app.get("/api/admin/users")
def list_users(db: Database = Depends(get_db), admin: dict = Depends(require_admin)):
    return [safe_user(u) for u in db.users.list()]


@app.delete("/api/admin/users/{user_id}")
def delete_user(user_id: str, db: Database = Depends(get_db), admin: dict = Depends(require_admin)):
    user = db.users.get(user_id)
    if not user:
        raise NotFoundError("User not found")
    if user.get("role") == "admin":
        raise ConflictError("The admin account cannot be deleted", status_code=400)
    db.users.delete(user_id)
    logger.info("Admin %s deleted user %s", admin["email"], user["email"])
    return {"success": True}


# Products
class ProductIn(BaseModel):
    name: str
    description: str = ""
    price: int
    category: str
    image: str = ""
    sizes: List[str] = []
    stock: int = 0
    rating: float = 0
    reviews: int = 0
    details: Optional[str] = None


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[int] = None
    category: Optional[str] = None
    image: Optional[str] = None
    sizes: Optional[List[str]] = None
    stock: Optional[int] = None
    rating: Optional[float] = None
    reviews: Optional[int] = None
    details: Optional[str] = None


def ensure_category(db: Database, slug: str) -> None:
    if not db.categories.find_one(lambda c: c["name"] == slug):
        raise ValidationError(f"Unknown category '{slug}'")


@app.get("/api/products")
def list_products(category: Optional[str] = None, db: Database = Depends(get_db)):
    if category and category != "all":
        products = db.products.list(category=category)
    else:
        products = db.products.list()
    logger.info("Found %d products in %s", len(products), category or "all")
    return products


@app.get("/api/products/{product_id}")
def get_product(product_id: str, db: Database = Depends(get_db)):
    # Non-numeric ids simply miss, like any other unknown id
    product = db.products.get(product_id)
    if not product:
        raise NotFoundError("Product not found")
    return product


# Product and category writes that look at the other store nest the
# categories lock inside the products lock, always in that order.

@app.post("/api/admin/products", status_code=201)
def create_product(data: ProductIn, db: Database = Depends(get_db), admin: dict = Depends(require_admin)):
    with db.products.transaction() as products:
        ensure_category(db, data.category)
        product = validated(ProductSchema, {**data.model_dump(), "id": db.products.next_int_id()})
        products.append(product)
    logger.info("Created product %s (%s)", product["id"], product["name"])
    return product


@app.put("/api/admin/products/{product_id}")
def update_product(product_id: int, data: ProductUpdate, db: Database = Depends(get_db), admin: dict = Depends(require_admin)):
    update_dict = data.model_dump(exclude_unset=True)
    if not update_dict:
        raise ValidationError("No fields to update")
    with db.products.transaction() as products:
        if "category" in update_dict:
            ensure_category(db, update_dict["category"])
        for i, existing in enumerate(products):
            if existing["id"] == product_id:
                products[i] = validated(ProductSchema, {**existing, **update_dict, "id": product_id})
                return products[i]
    raise NotFoundError("Product not found")


@app.delete("/api/admin/products/{product_id}")
def delete_product(product_id: int, db: Database = Depends(get_db), admin: dict = Depends(require_admin)):
    if not db.products.delete(product_id):
        raise NotFoundError("Product not found")
    logger.info("Deleted product %s", product_id)
    return {"success": True}


# Categories
class CategoryIn(BaseModel):
    name: str
    displayName: Optional[str] = None
    isActive: bool = True


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    displayName: Optional[str] = None
    isActive: Optional[bool] = None


def category_in_use(products: List[Dict[str, Any]], slug: str) -> bool:
    return any(p.get("category") == slug for p in products)


@app.get("/api/categories")
def list_categories(db: Database = Depends(get_db)):
    return db.categories.list()


@app.post("/api/admin/categories", status_code=201)
def create_category(data: CategoryIn, db: Database = Depends(get_db), admin: dict = Depends(require_admin)):
    slug = data.name.strip().lower()
    with db.categories.transaction() as categories:
        if any(c["name"] == slug for c in categories):
            raise ConflictError(f"Category '{slug}' already exists")
        category = validated(CategorySchema, {
            "id": db.categories.next_int_id(),
            "name": slug,
            "displayName": data.displayName or slug.title(),
            "isActive": data.isActive,
        })
        categories.append(category)
    return category


@app.put("/api/admin/categories/{category_id}")
def update_category(category_id: int, data: CategoryUpdate, db: Database = Depends(get_db), admin: dict = Depends(require_admin)):
    update_dict = data.model_dump(exclude_unset=True)
    if "name" in update_dict:
        update_dict["name"] = update_dict["name"].strip().lower()
    with db.products.transaction() as products, db.categories.transaction() as categories:
        category = next((c for c in categories if c["id"] == category_id), None)
        if category is None:
            raise NotFoundError("Category not found")
        new_name = update_dict.get("name", category["name"])
        if new_name != category["name"]:
            if any(c["name"] == new_name for c in categories):
                raise ConflictError(f"Category '{new_name}' already exists")
            if category_in_use(products, category["name"]):
                raise ConflictError("Cannot rename a category that still has products", status_code=400)
        category.update(validated(CategorySchema, {**category, **update_dict}))
    return category


@app.delete("/api/admin/categories/{category_id}")
def delete_category(category_id: int, db: Database = Depends(get_db), admin: dict = Depends(require_admin)):
    with db.products.transaction() as products:
        category = db.categories.get(category_id)
        if not category:
            raise NotFoundError("Category not found")
        if category_in_use(products, category["name"]):
            raise ConflictError("Cannot delete a category that still has products", status_code=400)
        db.categories.delete(category_id)
    logger.info("Deleted category %s", category["name"])
    return {"success": True}


# Orders
class OrderIn(BaseModel):
    customer: Optional[Customer] = None
    shippingAddress: ShippingAddress = ShippingAddress()
    shippingPhone: Optional[str] = None
    items: List[OrderItem] = []
    paymentMethod: PaymentMethod = PaymentMethod.COD
    subtotal: Optional[int] = None
    shippingFee: Optional[int] = None
    totalAmount: Optional[int] = None


class StatusUpdate(BaseModel):
    status: str


def now_millis() -> int:
    return int(time.time() * 1000)


def same_email(user: Dict[str, Any], email: str) -> bool:
    return user.get("email", "").lower() == email.lower()


# Order writes hold the users lock around the orders lock. Users are read
# before the order is written, and an order whose history entry cannot be
# saved is taken back out.

@app.post("/api/orders")
def create_order(payload: OrderIn, background_tasks: BackgroundTasks, db: Database = Depends(get_db)):
    if not payload.items:
        raise ValidationError("Order must contain at least one item")
    email = (payload.customer.email or "").strip() if payload.customer else ""
    if not email:
        raise ValidationError("Customer email is required")

    subtotal = sum(item.price * item.quantity for item in payload.items)
    if payload.subtotal is not None and payload.subtotal != subtotal:
        raise ValidationError("Subtotal does not match the order items")
    shipping_fee = shipping_fee_for(subtotal)
    if payload.shippingFee is not None and payload.shippingFee != shipping_fee:
        raise ValidationError("Shipping fee does not match the shipping policy")
    total = subtotal + shipping_fee
    if payload.totalAmount is not None and payload.totalAmount != total:
        raise ValidationError("Total must equal subtotal plus shipping fee")

    saved = False
    try:
        with db.users.transaction() as users:
            with db.orders.transaction() as orders:
                taken = {o["id"] for o in orders}
                stamp = now_millis()
                while f"IR7{stamp}" in taken:
                    stamp += 1
                timestamp = now_iso()
                order = validated(OrderSchema, {
                    "id": f"IR7{stamp}",
                    "customer": payload.customer.model_dump(),
                    "shippingAddress": payload.shippingAddress.model_dump(),
                    "shippingPhone": payload.shippingPhone or payload.shippingAddress.phone or None,
                    "items": [i.model_dump() for i in payload.items],
                    "paymentMethod": payload.paymentMethod,
                    "subtotal": subtotal,
                    "shippingFee": shipping_fee,
                    "totalAmount": total,
                    "status": OrderStatus.PENDING,
                    "orderDate": timestamp,
                    "updatedAt": timestamp,
                })
                orders.append(order)
            saved = True
            summary = OrderSummary(orderId=order["id"], date=order["orderDate"], total=total).model_dump(mode="json")
            user = next((u for u in users if same_email(u, email)), None)
            if user:
                user.setdefault("orders", []).append(summary)
    except PersistenceError:
        if saved:
            logger.error("Rolling back order %s: user history could not be saved", order["id"])
            db.orders.delete(order["id"])
        raise
    logger.info("Order %s placed by %s: %d items, total %s", order["id"], email, len(order["items"]), total)

    background_tasks.add_task(send_order_confirmation, order)
    return {"success": True, "orderId": order["id"], "message": "Order placed successfully!", "order": order}


@app.get("/api/orders/{order_id}")
def get_order(order_id: str, db: Database = Depends(get_db)):
    order = db.orders.get(order_id)
    if not order:
        raise NotFoundError("Order not found")
    return order


@app.get("/api/admin/orders")
def list_orders(db: Database = Depends(get_db), admin: dict = Depends(require_admin)):
    return db.orders.list()


@app.put("/api/admin/orders/{order_id}")
@app.put("/api/admin/orders/{order_id}/status")
def update_order_status(order_id: str, data: StatusUpdate, db: Database = Depends(get_db), admin: dict = Depends(require_admin)):
    try:
        status = OrderStatus(data.status).value
    except ValueError:
        raise ValidationError(f"Unknown order status '{data.status}'")

    previous = None
    try:
        with db.users.transaction() as users:
            with db.orders.transaction() as orders:
                order = next((o for o in orders if o["id"] == order_id), None)
                if order is None:
                    raise NotFoundError("Order not found")
                previous = {"status": order["status"], "updatedAt": order["updatedAt"]}
                order.update({"status": status, "updatedAt": now_iso()})
            email = (order.get("customer") or {}).get("email") or ""
            for user in users:
                if same_email(user, email):
                    for summary in user.get("orders", []):
                        if summary["orderId"] == order_id:
                            summary["status"] = status
    except PersistenceError:
        if previous is not None:
            logger.error("Restoring order %s to %s: user history could not be saved", order_id, previous["status"])
            db.orders.update(order_id, previous)
        raise
    logger.info("Order %s is now %s", order_id, status)
    return order


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)

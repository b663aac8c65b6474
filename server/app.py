"""FastAPI web server for the inventory system."""
from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, Field
from dotenv import load_dotenv

load_dotenv()

from inventory import __version__
from inventory.db.bootstrap import seed_admin
from inventory.db.database import Database, get_db, reset_db
from inventory.db.expense_repo import ExpenseRepository
from inventory.db.product_repo import ProductRepository
from inventory.db.sale_repo import InsufficientStockError, SaleRepository
from inventory.db.user_repo import UserRepository
from inventory.models import Expense, PaymentMode, Product, Sale, User, UserRole

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open and bootstrap the database on startup, close it on shutdown."""
    db = get_db()
    await db.get_client()
    logger.info("Server started - DB: %s", db.target)
    yield
    await reset_db()
    logger.info("Server shut down")


app = FastAPI(
    title="Inventory API",
    description="Products, sales, expenses and users",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _db() -> Database:
    return get_db()


def _conflict(exc: sqlite3.IntegrityError) -> HTTPException:
    return HTTPException(status_code=409, detail=f"Conflicts with existing data: {exc}")


# Request Models
class ProductCreate(BaseModel):
    name: str
    sku: str
    quantity: int = Field(ge=0)
    reorder_level: int = Field(default=0, ge=0)
    price: float = Field(ge=0)
    cost: float = Field(ge=0)
    category: str


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    sku: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    reorder_level: Optional[int] = Field(default=None, ge=0)
    price: Optional[float] = Field(default=None, ge=0)
    cost: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = None


class SaleCreate(BaseModel):
    product_id: str
    quantity: int = Field(gt=0)
    sales_person_id: str
    payment_mode: PaymentMode = PaymentMode.CASH
    price: Optional[float] = Field(default=None, ge=0)


class ExpenseCreate(BaseModel):
    description: str
    amount: float = Field(gt=0)
    category: str
    created_by: str


class UserCreate(BaseModel):
    email: str
    name: str
    password: str = Field(min_length=6)
    role: UserRole = UserRole.SALESGIRL


class LoginRequest(BaseModel):
    email: str
    password: str


# API Routes
@app.get("/", response_class=HTMLResponse)
async def root():
    return HTMLResponse("<h1>Inventory Server</h1><p>Visit /docs for API documentation</p>")


@app.get("/api/status")
async def get_status():
    db = _db()
    return {
        "status": "ok",
        "timestamp": datetime.now().isoformat(),
        "database": {
            "target": "memory" if db.in_memory else db.target,
            "initialized": db.initialized,
        },
    }


@app.get("/api/seed")
async def seed():
    """Re-run the administrator seed (no-op when the account already exists)."""
    try:
        await seed_admin(_db())
    except Exception:
        logger.exception("Seeding error")
        return JSONResponse({"error": "Failed to seed database"}, status_code=500)
    return {"message": "Database seeded successfully"}


# -- products --------------------------------------------------------------------

@app.get("/api/products")
async def list_products(category: Optional[str] = None):
    products = await ProductRepository(_db()).list_all(category=category)
    return {"count": len(products), "products": [p.to_dict() for p in products]}


@app.get("/api/products/low-stock")
async def list_low_stock():
    products = await ProductRepository(_db()).list_low_stock()
    return {"count": len(products), "products": [p.to_dict() for p in products]}


@app.get("/api/products/{product_id}")
async def get_product(product_id: str):
    product = await ProductRepository(_db()).get_by_id(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product.to_dict()


@app.post("/api/products", status_code=201)
async def create_product(body: ProductCreate):
    product = Product(**body.model_dump())
    try:
        await ProductRepository(_db()).create(product)
    except sqlite3.IntegrityError as e:
        raise _conflict(e)
    return product.to_dict()


@app.patch("/api/products/{product_id}")
async def update_product(product_id: str, body: ProductUpdate):
    fields = body.model_dump(exclude_none=True)
    try:
        product = await ProductRepository(_db()).update(product_id, **fields)
    except sqlite3.IntegrityError as e:
        raise _conflict(e)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product.to_dict()


@app.delete("/api/products/{product_id}")
async def delete_product(product_id: str):
    try:
        deleted = await ProductRepository(_db()).delete(product_id)
    except sqlite3.IntegrityError as e:
        raise _conflict(e)
    if not deleted:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"status": "deleted", "id": product_id}


# -- sales -----------------------------------------------------------------------

@app.get("/api/sales")
async def list_sales(sales_person_id: Optional[str] = None):
    repo = SaleRepository(_db())
    if sales_person_id:
        sales = await repo.list_by_salesperson(sales_person_id)
    else:
        sales = await repo.list_all()
    return {
        "count": len(sales),
        "revenue": round(sum(s.total for s in sales), 2),
        "sales": [s.to_dict() for s in sales],
    }


@app.post("/api/sales", status_code=201)
async def create_sale(body: SaleCreate):
    db = _db()
    price = body.price
    if price is None:
        product = await ProductRepository(db).get_by_id(body.product_id)
        if product is None:
            raise HTTPException(status_code=404, detail="Product not found")
        price = product.price

    sale = Sale(
        product_id=body.product_id,
        quantity=body.quantity,
        price=price,
        sales_person_id=body.sales_person_id,
        payment_mode=body.payment_mode,
    )
    try:
        await SaleRepository(db).record(sale)
    except LookupError:
        raise HTTPException(status_code=404, detail="Product not found")
    except InsufficientStockError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except sqlite3.IntegrityError as e:
        raise _conflict(e)
    return sale.to_dict()


# -- expenses --------------------------------------------------------------------

@app.get("/api/expenses")
async def list_expenses(category: Optional[str] = None):
    repo = ExpenseRepository(_db())
    if category:
        expenses = await repo.list_by_category(category)
    else:
        expenses = await repo.list_all()
    return {
        "count": len(expenses),
        "total": round(sum(e.amount for e in expenses), 2),
        "expenses": [e.to_dict() for e in expenses],
    }


@app.post("/api/expenses", status_code=201)
async def create_expense(body: ExpenseCreate):
    expense = Expense(**body.model_dump())
    try:
        await ExpenseRepository(_db()).create(expense)
    except sqlite3.IntegrityError as e:
        raise _conflict(e)
    return expense.to_dict()


# -- users -----------------------------------------------------------------------

@app.get("/api/users")
async def list_users(role: Optional[UserRole] = None):
    users = await UserRepository(_db()).list_all(role=role)
    return {"count": len(users), "users": [u.to_dict() for u in users]}


@app.post("/api/users", status_code=201)
async def create_user(body: UserCreate):
    user = User(email=body.email, name=body.name, role=body.role)
    try:
        await UserRepository(_db()).create(user, body.password)
    except sqlite3.IntegrityError as e:
        raise _conflict(e)
    return user.to_dict()


@app.post("/api/login")
async def login(body: LoginRequest):
    user = await UserRepository(_db()).authenticate(body.email, body.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return user.to_dict()


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run("app:app", host="0.0.0.0", port=port, reload=True)

# app/main.py
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from .core import (
    ProductValidationError, list_products_logic, get_product_logic,
    create_product_logic, update_product_logic, delete_product_logic,
    search_products_logic, products_by_category_logic, low_stock_logic,
    reset_all_logic,
)
from .database import PRODUCTS
from .models import ProductIn

app = FastAPI(title="inventory-api (in-memory reference server)")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _ok(message: str, data=None, status_code: int = 200):
    body = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    return JSONResponse(status_code=status_code, content=body)


# ---------------------------
# Error envelopes
# ---------------------------
@app.exception_handler(HTTPException)
async def http_error(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.detail})


@app.exception_handler(ProductValidationError)
async def product_validation_error(request: Request, exc: ProductValidationError):
    return JSONResponse(status_code=400, content={
        "success": False, "message": "Validation failed", "errors": exc.errors,
    })


@app.exception_handler(RequestValidationError)
async def request_validation_error(request: Request, exc: RequestValidationError):
    errors = {}
    for err in exc.errors():
        field = str(err["loc"][-1]) if err.get("loc") else "body"
        errors.setdefault(field, err.get("msg", "invalid value"))
    return JSONResponse(status_code=400, content={
        "success": False, "message": "Validation failed", "errors": errors,
    })


# ---------------------------
# Product endpoints
# ---------------------------
@app.get("/api/products")
async def list_products():
    return _ok("Products retrieved successfully", list_products_logic())


# declared before /{product_id} so the literal paths win
@app.get("/api/products/search")
async def search_products(q: Optional[str] = None):
    return _ok("Search completed successfully", search_products_logic(q))


@app.get("/api/products/low-stock")
async def low_stock_products(threshold: int = Query(10)):
    return _ok("Low stock products retrieved successfully", low_stock_logic(threshold))


@app.get("/api/products/category/{category}")
async def products_by_category(category: str):
    return _ok("Products retrieved successfully", products_by_category_logic(category))


@app.get("/api/products/{product_id}")
async def get_product(product_id: int):
    return _ok("Product retrieved successfully", get_product_logic(product_id))


@app.post("/api/products")
async def create_product(payload: ProductIn):
    return _ok("Product created successfully", create_product_logic(payload), status_code=201)


@app.put("/api/products/{product_id}")
async def update_product(product_id: int, payload: ProductIn):
    return _ok("Product updated successfully", update_product_logic(product_id, payload))


@app.delete("/api/products/{product_id}")
async def delete_product(product_id: int):
    delete_product_logic(product_id)
    return _ok("Product deleted successfully")


# Utility: reset (for tests/demo)
@app.post("/api/reset")
async def reset_all():
    return reset_all_logic()


@app.get("/api/health")
async def health():
    return {"status": "ok", "products": len(PRODUCTS)}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)

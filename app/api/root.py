from fastapi import APIRouter

router = APIRouter()

@router.get("/")
def root():
    return {
        "name": "Catalog API",
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "resources": ["/products", "/clients", "/users"],
    }

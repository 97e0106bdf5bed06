from datetime import date

from sqlalchemy.orm import Session

from app.models.product import Product
from app.models.rbac import ADMIN, CLIENT, Role, UserRole
from app.models.user import User

def ensure_role(db, name: str) -> Role:
    r = db.query(Role).filter(Role.name == name).one_or_none()
    if r:
        return r
    r = Role(name=name)
    db.add(r)
    db.commit()
    db.refresh(r)
    return r

def create_user(db, username: str, email: str | None = None, client: User | None = None, is_active=True) -> User:
    u = User(
        username=username,
        email=email or f"{username}@test.com",
        is_active=is_active,
        client_id=(client.id if client else None),
    )
    db.add(u)
    db.commit()
    db.refresh(u)
    return u

def grant_role(db, user: User, role_name: str):
    role = ensure_role(db, role_name)
    exists = db.query(UserRole).filter(UserRole.user_id == user.id, UserRole.role_id == role.id).one_or_none()
    if not exists:
        db.add(UserRole(user_id=user.id, role_id=role.id))
        db.commit()

def create_admin(db, username: str = "admin") -> User:
    u = create_user(db, username)
    grant_role(db, u, ADMIN)
    return u

def create_client(db, username: str = "acme") -> User:
    u = create_user(db, username)
    grant_role(db, u, CLIENT)
    return u

def create_product(
    db: Session,
    name: str = "Phone",
    brand: str = "Brand",
    details: str | None = None,
    release_date: date | None = None,
) -> Product:
    p = Product(name=name, brand=brand, details=details, release_date=release_date)
    db.add(p)
    db.commit()
    db.refresh(p)
    return p

def create_products(db: Session, count: int, brand: str = "Brand") -> list[Product]:
    products = [Product(name=f"Phone {i:03d}", brand=brand) for i in range(1, count + 1)]
    db.add_all(products)
    db.commit()
    return products

def auth(user: User) -> dict[str, str]:
    return {"X-User-Email": user.email}

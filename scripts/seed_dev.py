# seed_dev.py
from datetime import date

from sqlalchemy.orm import Session

from app.db.session import SessionLocal
from app.models.product import Product
from app.models.rbac import ADMIN, CLIENT, Role, UserRole
from app.models.user import User


# ---------- helpers: RBAC ----------

def get_or_create_role(db: Session, name: str) -> Role:
    r = db.query(Role).filter(Role.name == name).one_or_none()
    if r:
        return r
    r = Role(name=name)
    db.add(r)
    db.commit()
    db.refresh(r)
    return r


def get_or_create_user(db: Session, username: str, email: str, client: User | None = None) -> User:
    u = db.query(User).filter(User.email == email).one_or_none()
    if u:
        # keep these up to date in dev
        if not u.is_active:
            u.is_active = True
            db.commit()
            db.refresh(u)
        return u

    u = User(username=username, email=email, is_active=True, client_id=(client.id if client else None))
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def ensure_user_role(db: Session, user_id, role_id):
    ur = (
        db.query(UserRole)
        .filter(UserRole.user_id == user_id, UserRole.role_id == role_id)
        .one_or_none()
    )
    if ur:
        return ur
    ur = UserRole(user_id=user_id, role_id=role_id)
    db.add(ur)
    db.commit()
    return ur


# ---------- helpers: catalog ----------

PHONES = [
    ("Galaxy S24", "Samsung", date(2024, 1, 31)),
    ("Galaxy A55", "Samsung", date(2024, 3, 11)),
    ("iPhone 15", "Apple", date(2023, 9, 22)),
    ("iPhone 15 Pro", "Apple", date(2023, 9, 22)),
    ("Pixel 8", "Google", date(2023, 10, 12)),
    ("Pixel 8a", "Google", date(2024, 5, 14)),
    ("Xperia 1 V", "Sony", date(2023, 7, 28)),
    ("Nord 4", "OnePlus", date(2024, 7, 16)),
    ("Redmi Note 13", "Xiaomi", date(2024, 1, 15)),
    ("Fairphone 5", "Fairphone", date(2023, 9, 14)),
]


def get_or_create_product(db: Session, name: str, brand: str, release_date: date) -> Product:
    p = db.query(Product).filter(Product.name == name, Product.brand == brand).one_or_none()
    if p:
        return p
    p = Product(
        name=name,
        brand=brand,
        details=f"{brand} {name} smartphone",
        release_date=release_date,
    )
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


def main():
    db = SessionLocal()
    try:
        admin_role = get_or_create_role(db, ADMIN)
        client_role = get_or_create_role(db, CLIENT)

        admin = get_or_create_user(db, "admin", "admin@local.test")
        ensure_user_role(db, admin.id, admin_role.id)

        for n in (1, 2):
            client = get_or_create_user(db, f"client{n}", f"client{n}@local.test")
            ensure_user_role(db, client.id, client_role.id)
            for i in range(1, 21):
                get_or_create_user(db, f"c{n}_user{i:02d}", f"c{n}.user{i:02d}@local.test", client=client)

        for name, brand, released in PHONES:
            get_or_create_product(db, name, brand, released)

        print("Seeded: admin@local.test, client1@local.test, client2@local.test")
        print(f"Products: {db.query(Product).count()}, users: {db.query(User).count()}")
    finally:
        db.close()


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Seed a fresh Prelovin database with demo data.

1. Insert the storefront categories when the table is empty
2. Create or refresh the demo seller account
3. Insert sample listings when there are no products yet

Run with ``python -m prelovin.seed``; DATABASE_URL picks the target.
"""

from decimal import Decimal
from sqlalchemy.orm import Session

from .categories.models import Category
from .categories.service import CategoryService
from .database.core import Base, engine, session_scope
from .database import models  # noqa: F401
from .logging import logger
from .products.models import Product, ProductCondition
from .schemas.category import CategoryCreate
from .schemas.user import UpsertUser
from .users.service import UserService

DEMO_SELLER_ID = "demo-seller-001"

CATEGORIES = [
    {"name": "Elektronik", "slug": "elektronik", "icon": "Smartphone", "description": "Gadget, laptop, dan perangkat elektronik lainnya"},
    {"name": "Fashion", "slug": "fashion", "icon": "Shirt", "description": "Pakaian, sepatu, dan aksesoris"},
    {"name": "Furniture", "slug": "furniture", "icon": "Sofa", "description": "Perabotan rumah tangga"},
    {"name": "Hobi & Koleksi", "slug": "hobi-koleksi", "icon": "Gamepad2", "description": "Barang koleksi dan hobi"},
    {"name": "Buku", "slug": "buku", "icon": "BookOpen", "description": "Buku, majalah, dan komik"},
    {"name": "Otomotif", "slug": "otomotif", "icon": "Car", "description": "Aksesoris dan suku cadang kendaraan"},
    {"name": "Perlengkapan Bayi", "slug": "perlengkapan-bayi", "icon": "Baby", "description": "Perlengkapan dan mainan bayi"},
    {"name": "Olahraga", "slug": "olahraga", "icon": "Dumbbell", "description": "Peralatan dan pakaian olahraga"},
    {"name": "Kecantikan", "slug": "kecantikan", "icon": "Sparkles", "description": "Skincare, makeup, dan parfum"},
]

DEMO_SELLER = UpsertUser(
    id=DEMO_SELLER_ID,
    email="demo@prelovin.id",
    first_name="Toko",
    last_name="Demo",
    profile_image_url="https://api.dicebear.com/7.x/initials/svg?seed=TD",
    city="Jakarta",
)

_UNSPLASH = "https://images.unsplash.com/{}?w=500&h=500&fit=crop"

# (category slug, name, description, price, original price, condition, image, location)
SAMPLE_PRODUCTS = [
    ("elektronik", "iPhone 13 Pro 256GB - Mulus Seperti Baru",
     "iPhone 13 Pro warna Graphite, kondisi 98%. Battery health 92%. Fullset box, charger, dan case. "
     "Garansi inter, sudah off. No minus, layar mulus tanpa gores. Bisa COD area Jakarta.",
     "11500000", "15999000", ProductCondition.SEPERTI_BARU, "photo-1632661674596-df8be070a5c5", "Jakarta Selatan"),
    ("elektronik", "MacBook Pro M1 2020 8GB/256GB",
     "MacBook Pro M1 chip, 8GB RAM, 256GB SSD. Cycle count rendah, battery health 95%. "
     "Fullset dengan dus dan charger original. Perfect untuk coding atau design.",
     "13500000", "18499000", ProductCondition.SEPERTI_BARU, "photo-1517336714731-489689fd1ca8", "Jakarta Pusat"),
    ("fashion", "Jaket Kulit Vintage - Genuine Leather",
     "Jaket kulit asli vintage style. Size L (fit M-L). Warna coklat tua. Kondisi sangat bagus, "
     "tidak ada sobek atau cacat. Bahan tebal dan berkualitas.",
     "850000", "1500000", ProductCondition.BAGUS, "photo-1551028719-00167b16eac5", "Bandung"),
    ("fashion", "Sneakers Nike Air Max 90 Original",
     "Nike Air Max 90 authentic, size 42. Warna white/black. Pemakaian 3 bulan, kondisi 90%. "
     "Midsole masih putih. Lengkap dengan box.",
     "950000", "1899000", ProductCondition.BAGUS, "photo-1542291026-7eec264c27ff", "Surabaya"),
    ("furniture", "Meja Kerja Minimalis Kayu Jati",
     "Meja kerja kayu jati solid 120x60cm. Tinggi 75cm. Desain minimalis modern. Ada laci penyimpanan. "
     "Cocok untuk WFH atau ruang belajar.",
     "1200000", "2000000", ProductCondition.BAGUS, "photo-1518455027359-f3f8164ba6bd", "Yogyakarta"),
    ("furniture", "Kursi Gaming RGB - Ergonomic Chair",
     "Kursi gaming dengan sandaran kepala dan lumbar. Bahan PU leather. Armrest adjustable. "
     "Reclining hingga 180 derajat. Sudah pakai 6 bulan, kondisi 85%.",
     "1500000", "2800000", ProductCondition.BAGUS, "photo-1612372606404-0ab33e7187ee", "Bekasi"),
    ("hobi-koleksi", "Kamera Canon EOS 80D + Lensa 18-135mm",
     "Canon 80D body dengan lensa kit 18-135mm IS USM. Shutter count 15rb. Layar touchscreen vari-angle. "
     "Kondisi mulus terawat. Fullset dengan tas dan memory 32GB.",
     "9500000", "16000000", ProductCondition.BAGUS, "photo-1516035069371-29a1b244cc32", "Tangerang"),
    ("buku", "Koleksi Buku Harry Potter Lengkap 1-7 (Hardcover)",
     "Set lengkap Harry Potter edisi hardcover bahasa Indonesia. Kondisi 95%, jarang dibaca. "
     "Sampul tidak ada sobek, halaman bersih tanpa coretan.",
     "750000", "1400000", ProductCondition.SEPERTI_BARU, "photo-1512820790803-83ca734da794", "Depok"),
    ("olahraga", "Sepeda Lipat Pacific Noris 20 inch",
     "Sepeda lipat Pacific Noris ukuran 20 inch. 7 speed Shimano. Frame alloy ringan. Rem disc brake. "
     "Pemakaian setahun, servis rutin. Ban baru diganti.",
     "2200000", "3500000", ProductCondition.BAGUS, "photo-1532298229144-0ec0c57515c7", "Jakarta Barat"),
    ("perlengkapan-bayi", "Stroller Bayi Joie Chrome DLX",
     "Stroller Joie Chrome DLX, bisa rebahan 180 derajat. Roda besar empuk. Ada kanopi UV protection. "
     "Pemakaian 8 bulan, kondisi 90%. Lengkap dengan rain cover.",
     "2800000", "5500000", ProductCondition.BAGUS, "photo-1591088398332-8a7791972843", "Bogor"),
]


def seed_categories(db: Session) -> int:
    if db.query(Category).count():
        logger.info("Categories already exist, skipping")
        return 0
    for data in CATEGORIES:
        CategoryService.create_category(db, CategoryCreate(**data))
    logger.info(f"Inserted {len(CATEGORIES)} categories")
    return len(CATEGORIES)


def seed_products(db: Session) -> int:
    if db.query(Product).count():
        logger.info("Products already exist, skipping")
        return 0

    category_ids = {slug: id_ for id_, slug in db.query(Category.id, Category.slug)}
    for slug, name, description, price, original_price, condition, image, location in SAMPLE_PRODUCTS:
        db.add(Product(
            seller_id=DEMO_SELLER_ID,
            category_id=category_ids.get(slug),
            name=name,
            description=description,
            price=Decimal(price),
            original_price=Decimal(original_price),
            condition=condition,
            images=[_UNSPLASH.format(image)],
            stock=1,
            location=location,
            is_active=True,
            views=0,
            sold_count=0,
        ))
    db.flush()
    logger.info(f"Inserted {len(SAMPLE_PRODUCTS)} sample products")
    return len(SAMPLE_PRODUCTS)


def seed(db: Session) -> None:
    """Idempotent: rerunning only refreshes the demo seller."""
    seed_categories(db)
    UserService.upsert_user(db, DEMO_SELLER)
    seed_products(db)


def main():
    Base.metadata.create_all(bind=engine)
    logger.info("Seeding database...")
    with session_scope() as db:
        seed(db)
    logger.info("Seeding completed")


if __name__ == "__main__":
    main()

from __future__ import annotations

import random
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from modules.accounts.constants import UserRole
from modules.accounts.models import Address, User
from modules.core.authentication import Caller
from modules.core.exceptions import InsufficientStock
from modules.orders.constants import OrderStatus, PaymentMethod
from modules.orders.dtos import CreateOrderDTO, UpdateOrderStatusDTO
from modules.orders.views import build_order_service
from modules.products.models import Product
from modules.slides.models import Slide

SEED_PASSWORD = "Password123"

CUSTOMERS = [
    ("Ananya Iyer", "ananya@example.com", "9876543210", "Chennai", "Tamil Nadu", "600001"),
    ("Rahul Verma", "rahul@example.com", "9123456780", "Lucknow", "Uttar Pradesh", "226001"),
    ("Meera Nair", "meera@example.com", "9988776655", "Kochi", "Kerala", "682001"),
    ("Arjun Rao", "arjun@example.com", "9012345678", "Hyderabad", "Telangana", "500001"),
    ("Priya Shah", "priya@example.com", "9090909090", "Ahmedabad", "Gujarat", "380001"),
]

CATALOG = [
    ("Kanjivaram Silk Saree", "sarees", Decimal("4999.00"), "Silk", "Maroon"),
    ("Banarasi Silk Saree", "sarees", Decimal("3899.00"), "Silk", "Gold"),
    ("Chanderi Cotton Saree", "sarees", Decimal("1299.00"), "Cotton silk", "Peach"),
    ("Mysore Crepe Saree", "sarees", Decimal("2499.00"), "Crepe silk", "Green"),
    ("Tussar Silk Dupatta", "dupattas", Decimal("799.00"), "Tussar silk", "Beige"),
    ("Bandhani Dupatta", "dupattas", Decimal("499.00"), "Georgette", "Red"),
    ("Silk Blouse Piece", "blouses", Decimal("349.00"), "Silk", ""),
    ("Zari Border Blouse", "blouses", Decimal("599.00"), "Silk", "Navy"),
    ("Pochampally Ikat Fabric", "fabrics", Decimal("899.00"), "Cotton", "Indigo"),
    ("Kota Doria Fabric", "fabrics", Decimal("649.00"), "Cotton", ""),
]

SLIDES = [
    ("Festive Collection", "Handwoven silks for the season", 0),
    ("Free Delivery", "On orders of 1000 and above", 1),
    ("New Arrivals", "Fresh weaves every week", 2),
]


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        admin = self._seed_admin()
        customers = self._seed_customers()
        products = self._seed_products()
        slides_created = self._seed_slides(admin)
        orders_created = self._seed_orders(admin, customers, products)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"customers={len(customers)}, "
                f"products={len(products)}, "
                f"slides={slides_created}, "
                f"orders={orders_created}"
            )
        )

    def _seed_admin(self) -> User:
        admin = User.objects.filter(email="admin@example.com").first()
        if admin is None:
            admin = User.objects.create_superuser(
                email="admin@example.com", password=SEED_PASSWORD, name="Shop Admin"
            )
        return admin

    def _seed_customers(self) -> list[User]:
        self.stdout.write("Creating customers...")
        customers: list[User] = []
        for name, email, phone, city, state, pincode in CUSTOMERS:
            user = User.objects.filter(email=email).first()
            if user is None:
                user = User.objects.create_user(
                    email=email,
                    password=SEED_PASSWORD,
                    name=name,
                    phone=phone,
                    role=UserRole.USER,
                )
                Address.objects.create(
                    user=user,
                    full_name=name,
                    address_line1="12 Temple Street",
                    city=city,
                    state=state,
                    pincode=pincode,
                    phone=phone,
                    is_default=True,
                )
            customers.append(user)
        self.stdout.write(self.style.SUCCESS("Creating customers... Done!"))
        return customers

    def _seed_products(self) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        for name, category, price, material, color in CATALOG:
            product, _ = Product.objects.get_or_create(
                name=name,
                defaults={
                    "description": f"{name} from our {category} collection.",
                    "category": category,
                    "price": price,
                    "stock": random.randint(5, 40),
                    "delivery_charges": Decimal(random.choice(["0", "50", "80"])),
                    "specifications": {"material": material, "color": color},
                    "images": [f"products/{name.lower().replace(' ', '-')}.jpg"],
                },
            )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_slides(self, admin: User) -> int:
        created = 0
        for title, description, order in SLIDES:
            _, was_created = Slide.objects.get_or_create(
                title=title,
                defaults={
                    "description": description,
                    "image": f"slides/{title.lower().replace(' ', '-')}.jpg",
                    "link": "/products",
                    "display_order": order,
                    "created_by": admin,
                },
            )
            created += int(was_created)
        return created

    def _seed_orders(
        self, admin: User, customers: list[User], products: list[Product]
    ) -> int:
        """Place orders through ``OrderService`` so stock stays consistent."""
        self.stdout.write("Creating orders...")
        service = build_order_service()
        admin_caller = Caller(user_id=admin.id, role=admin.role, email=admin.email)
        statuses = [
            OrderStatus.PENDING,
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
        ]

        created = 0
        for customer in customers:
            if customer.orders.exists():
                continue
            address = customer.addresses.first()
            caller = Caller(user_id=customer.id, role=customer.role, email=customer.email)
            for _ in range(random.randint(1, 3)):
                chosen = random.sample(products, k=random.randint(1, 3))
                dto = CreateOrderDTO(
                    items=[
                        {
                            "product": str(product.id),
                            "quantity": random.randint(1, 2),
                            "price": product.price,
                        }
                        for product in chosen
                    ],
                    shipping_address={
                        "full_name": address.full_name,
                        "address_line1": address.address_line1,
                        "city": address.city,
                        "state": address.state,
                        "postal_code": address.pincode,
                        "phone": address.phone,
                    },
                    payment_method=random.choice(list(PaymentMethod)),
                )
                try:
                    with transaction.atomic():
                        order = service.create_order(caller, dto)
                        status = random.choice(statuses)
                        if status != OrderStatus.PENDING:
                            service.update_status(
                                admin_caller,
                                str(order.id),
                                UpdateOrderStatusDTO(status=status),
                            )
                except InsufficientStock as exc:
                    self.stdout.write(self.style.WARNING(f"Skipped order: {exc.message}"))
                    continue
                created += 1

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return created

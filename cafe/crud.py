import json
import logging

from sqlalchemy.orm import Session

from . import auth, config, models
from .statuses import OrderStatus, PaymentStatus, UserRole

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: int):
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_phone(db: Session, phone: str):
    return db.query(models.User).filter(models.User.phone == phone).first()


def create_user(
    db: Session,
    name: str,
    phone: str,
    password: str = None,
    email: str = None,
    role: str = UserRole.CUSTOMER.value,
):
    user = models.User(
        name=name,
        phone=phone,
        email=email,
        password_hash=auth.get_password_hash(password) if password else None,
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_or_create_user(db: Session, name: str, phone: str, email: str = None):
    existing = get_user_by_phone(db, phone)
    if existing:
        return existing
    return create_user(db, name, phone, email=email)


def ensure_kitchen_user(db: Session):
    credentials = config.get_kitchen_credentials()
    if not credentials:
        return None
    phone, password = credentials
    existing = get_user_by_phone(db, phone)
    if existing:
        return existing
    logger.info("Creating bootstrap kitchen account for %s", phone)
    return create_user(
        db, "Kitchen", phone, password=password, role=UserRole.KITCHEN_STAFF.value
    )


def authenticate_user(db: Session, phone: str, password: str):
    user = get_user_by_phone(db, phone)
    if not user:
        return None
    if not auth.verify_password(password, user.password_hash):
        return None
    return user


def list_menu(db: Session):
    return db.query(models.MenuItem).order_by(models.MenuItem.id).all()


def get_menu_item(db: Session, item_id: int):
    return db.query(models.MenuItem).filter(models.MenuItem.id == item_id).first()


def create_menu_item(db: Session, item_data):
    item = models.MenuItem(
        name=item_data["name"],
        description=item_data["description"],
        price=item_data["price"],
        category=item_data["category"],
        image_url=item_data["image_url"],
        available=item_data.get("available", True),
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def set_menu_item_availability(db: Session, item_id: int, available: bool):
    item = get_menu_item(db, item_id)
    if not item:
        return None
    item.available = available
    db.commit()
    db.refresh(item)
    return item


def order_lines(order: models.Order):
    return json.loads(order.items_json)


def create_order(
    db: Session,
    items,
    total: int,
    pickup_time: str,
    user_id: int = None,
    special_instructions: str = None,
):
    order = models.Order(
        user_id=user_id,
        status=OrderStatus.PENDING.value,
        items_json=json.dumps(items),
        total=total,
        pickup_time=pickup_time,
        special_instructions=special_instructions,
        payment_status=PaymentStatus.PENDING.value,
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    return order


def get_order(db: Session, order_id: int):
    return db.query(models.Order).filter(models.Order.id == order_id).first()


def list_orders(db: Session):
    return (
        db.query(models.Order)
        .order_by(models.Order.created_at.desc(), models.Order.id.desc())
        .all()
    )


def update_order_status(db: Session, order: models.Order, status: str):
    order.status = status
    db.commit()
    db.refresh(order)
    return order


def record_payment(
    db: Session,
    order: models.Order,
    amount: int,
    payment_type: str,
    payment_method: str,
    payment_status: str,
):
    # Every payment moves the order back into preparation, whatever its status.
    order.status = OrderStatus.PREPARING.value
    order.payment_status = payment_status
    payment = models.Payment(
        order_id=order.id,
        amount=amount,
        payment_type=payment_type,
        payment_method=payment_method,
    )
    db.add(payment)
    db.commit()
    db.refresh(order)
    return payment


def list_payments(db: Session, order_id: int):
    return (
        db.query(models.Payment)
        .filter(models.Payment.order_id == order_id)
        .order_by(models.Payment.id)
        .all()
    )


def popular_items(db: Session):
    """Quantity and revenue per menu item, priced at today's menu price."""
    totals = {}
    menu = {item.id: item for item in list_menu(db)}
    for order in db.query(models.Order).order_by(models.Order.id).all():
        for line in order_lines(order):
            menu_item = menu.get(line["menu_item_id"])
            if not menu_item:
                continue
            entry = totals.setdefault(
                menu_item.id,
                {"id": menu_item.id, "name": menu_item.name, "quantity": 0, "total_amount": 0},
            )
            entry["quantity"] += line["quantity"]
            entry["total_amount"] += menu_item.price * line["quantity"]
    return list(totals.values())


def orders_by_time_slot(db: Session):
    counts = {}
    for (pickup_time,) in db.query(models.Order.pickup_time).all():
        counts[pickup_time] = counts.get(pickup_time, 0) + 1
    return [
        {"time_slot": slot, "order_count": count}
        for slot, count in sorted(counts.items())
    ]


def list_user_notifications(db: Session, user_id: int):
    return (
        db.query(models.Notification)
        .filter(models.Notification.user_id == user_id)
        .order_by(models.Notification.created_at.desc(), models.Notification.id.desc())
        .all()
    )


def mark_notification_read(db: Session, notification_id: int):
    notification = (
        db.query(models.Notification)
        .filter(models.Notification.id == notification_id)
        .first()
    )
    if notification:
        notification.status = "read"
        db.commit()
    return notification


def seed_menu(db: Session):
    if db.query(models.MenuItem).count() > 0:
        return
    samples = [
        {
            "name": "Classic Croissant",
            "description": "Flaky butter pastry made to a French recipe.",
            "price": 250,
            "category": "Pastry",
            "image_url": "https://images.unsplash.com/photo-1485963631004-f2f00b1d6606",
        },
        {
            "name": "Avocado Toast",
            "description": "Sourdough bread with smashed ripe avocado.",
            "price": 290,
            "category": "Breakfast",
            "image_url": "https://images.unsplash.com/photo-1494390248081-4e521a5940db",
        },
        {
            "name": "Cappuccino",
            "description": "Espresso with a soft milk foam.",
            "price": 220,
            "category": "Drinks",
            "image_url": "https://images.unsplash.com/photo-1447078806655-40579c2520d6",
        },
        {
            "name": "Greek Salad",
            "description": "Fresh vegetables, olives and feta with olive oil.",
            "price": 280,
            "category": "Salads",
            "image_url": "https://images.unsplash.com/photo-1540189549336-e6e99c3679fe",
        },
        {
            "name": "Mushroom Cream Soup",
            "description": "Smooth champignon soup finished with cream.",
            "price": 260,
            "category": "Soups",
            "image_url": "https://images.unsplash.com/photo-1547592166-23ac45744acd",
        },
        {
            "name": "Chicken Caesar",
            "description": "Classic salad with chicken fillet and Caesar dressing.",
            "price": 310,
            "category": "Salads",
            "image_url": "https://images.unsplash.com/photo-1550304943-4f24f54ddde9",
        },
        {
            "name": "Borscht",
            "description": "Traditional beet soup with sour cream and herbs.",
            "price": 270,
            "category": "Soups",
            "image_url": "https://images.unsplash.com/photo-1594756202469-9ff9799b2e4e",
        },
        {
            "name": "Americano",
            "description": "Classic black coffee.",
            "price": 180,
            "category": "Drinks",
            "image_url": "https://images.unsplash.com/photo-1514432324607-a09d9b4aefdd",
        },
        {
            "name": "Pancakes",
            "description": "Fluffy pancakes with maple syrup and berries.",
            "price": 240,
            "category": "Breakfast",
            "image_url": "https://images.unsplash.com/photo-1528207776546-365bb710ee93",
        },
        {
            "name": "Cheesecake",
            "description": "Cream cheese dessert with berry sauce.",
            "price": 230,
            "category": "Desserts",
            "image_url": "https://images.unsplash.com/photo-1524351199678-941a58a3df50",
        },
    ]
    for item in samples:
        create_menu_item(db, item)
    logger.info("Seeded %d menu items", len(samples))

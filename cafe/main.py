import logging

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from . import auth, config, crud, models, schemas
from .db import Base, SessionLocal, engine, get_db
from .statuses import (
    PaymentType,
    UserRole,
    is_finished,
    next_status,
    payment_amount,
    payment_status_after,
)

logging.basicConfig(
    level=getattr(logging, config.get_log_level(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Cafe")


@app.on_event("startup")
def on_startup():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if config.seed_menu_enabled():
            crud.seed_menu(db)
        crud.ensure_kitchen_user(db)
    finally:
        db.close()
    logger.info("Cafe service started")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(
        "Rejected %s %s: %d validation error(s)",
        request.method,
        request.url.path,
        len(exc.errors()),
    )
    return JSONResponse(status_code=400, content={"detail": "Invalid request data"})


@app.get("/health")
def health():
    return {"status": "healthy"}


@app.get("/user", response_model=schemas.UserOut)
def get_me(current_user: models.User = Depends(auth.get_current_user)):
    return current_user


@app.post("/register", response_model=schemas.UserOut)
def register(
    user_in: schemas.UserCreate, response: Response, db: Session = Depends(get_db)
):
    if crud.get_user_by_phone(db, user_in.phone):
        raise HTTPException(status_code=409, detail="User already exists")
    user = crud.create_user(
        db,
        user_in.name,
        user_in.phone,
        password=user_in.password,
        email=user_in.email,
        role=user_in.role.value,
    )
    auth.start_session(response, user)
    logger.info("Registered user %s as %s", user.id, user.role)
    return user


@app.post("/login", response_model=schemas.UserOut)
def login(login_in: schemas.LoginIn, response: Response, db: Session = Depends(get_db)):
    user = crud.authenticate_user(db, login_in.phone, login_in.password)
    if not user:
        logger.info("Failed login attempt")
        raise HTTPException(status_code=401, detail="Invalid credentials")
    auth.start_session(response, user)
    logger.info("User %s logged in", user.id)
    return user


@app.post("/logout")
def logout(request: Request, response: Response):
    auth.end_session(request, response)
    return {"success": True}


@app.post("/users", response_model=schemas.UserOut)
def find_or_create_user(user_in: schemas.GuestUserIn, db: Session = Depends(get_db)):
    return crud.get_or_create_user(db, user_in.name, user_in.phone, email=user_in.email)


@app.get("/menu", response_model=list[schemas.MenuItemOut])
def get_menu(db: Session = Depends(get_db)):
    return crud.list_menu(db)


@app.get("/menu/{item_id}", response_model=schemas.MenuItemOut)
def get_menu_item(item_id: int, db: Session = Depends(get_db)):
    item = crud.get_menu_item(db, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")
    return item


def order_to_out(order: models.Order) -> schemas.OrderOut:
    return schemas.OrderOut(
        id=order.id,
        user_id=order.user_id,
        status=order.status,
        items=crud.order_lines(order),
        total=order.total,
        pickup_time=order.pickup_time,
        special_instructions=order.special_instructions,
        payment_status=order.payment_status,
        created_at=order.created_at,
    )


def compute_order_items(db: Session, items_in: list[schemas.OrderItemIn]):
    items = []
    total = 0
    for item_in in items_in:
        menu_item = crud.get_menu_item(db, item_in.menu_item_id)
        if not menu_item or not menu_item.available:
            logger.info("Menu item %s not available", item_in.menu_item_id)
            raise HTTPException(
                status_code=400,
                detail=f"Menu item {item_in.menu_item_id} not available",
            )
        total += menu_item.price * item_in.quantity
        items.append(
            {
                "menu_item_id": menu_item.id,
                "quantity": item_in.quantity,
                "notes": item_in.notes.strip(),
            }
        )
    return items, total


def get_order_or_404(db: Session, order_id: int) -> models.Order:
    order = crud.get_order(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


def get_visible_order(
    db: Session, order_id: int, user: models.User
) -> models.Order:
    """Kitchen staff see every order, customers only their own."""
    order = get_order_or_404(db, order_id)
    if user.role != UserRole.KITCHEN_STAFF.value and order.user_id != user.id:
        raise HTTPException(status_code=403, detail="Forbidden")
    return order


@app.post("/orders", response_model=schemas.OrderOut)
def create_order(
    order_in: schemas.OrderCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.get_optional_user),
):
    if not order_in.items:
        raise HTTPException(status_code=400, detail="Order is empty")
    user_id = order_in.user_id
    if user_id is None and current_user is not None:
        user_id = current_user.id
    if user_id is not None and not crud.get_user(db, user_id):
        raise HTTPException(status_code=400, detail="User not found")
    items, total = compute_order_items(db, order_in.items)
    order = crud.create_order(
        db,
        items,
        total,
        order_in.pickup_time,
        user_id=user_id,
        special_instructions=order_in.special_instructions,
    )
    logger.info(
        "Order %s created: total=%s pickup=%s", order.id, order.total, order.pickup_time
    )
    return order_to_out(order)


@app.get("/orders", response_model=list[schemas.OrderOut])
def list_orders(
    db: Session = Depends(get_db),
    _: models.User = Depends(auth.require_kitchen_staff),
):
    return [order_to_out(order) for order in crud.list_orders(db)]


@app.get("/orders/{order_id}", response_model=schemas.OrderOut)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.get_current_user),
):
    order = get_visible_order(db, order_id, current_user)
    return order_to_out(order)


@app.get("/orders/{order_id}/payments", response_model=list[schemas.PaymentRecordOut])
def list_order_payments(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.get_current_user),
):
    order = get_visible_order(db, order_id, current_user)
    return crud.list_payments(db, order.id)


@app.patch("/orders/{order_id}/status")
def update_order_status(
    order_id: int,
    status_in: schemas.StatusUpdate,
    db: Session = Depends(get_db),
    _: models.User = Depends(auth.require_kitchen_staff),
):
    order = get_order_or_404(db, order_id)
    previous = order.status
    crud.update_order_status(db, order, status_in.status)
    logger.info("Order %s status %s -> %s", order_id, previous, status_in.status)
    return {"success": True}


@app.post("/orders/{order_id}/advance", response_model=schemas.OrderOut)
def advance_order(
    order_id: int,
    db: Session = Depends(get_db),
    _: models.User = Depends(auth.require_kitchen_staff),
):
    order = get_order_or_404(db, order_id)
    target = next_status(order.status)
    if target is None:
        raise HTTPException(
            status_code=409,
            detail=f"Order {order_id} cannot advance from {order.status}",
        )
    previous = order.status
    crud.update_order_status(db, order, target)
    logger.info("Order %s status %s -> %s", order_id, previous, target)
    return order_to_out(order)


@app.get("/kitchen/orders", response_model=schemas.KitchenBoard)
def kitchen_board(
    db: Session = Depends(get_db),
    _: models.User = Depends(auth.require_kitchen_staff),
):
    active = []
    completed = []
    for order in crud.list_orders(db):
        if is_finished(order.status):
            completed.append(order_to_out(order))
        else:
            active.append(
                schemas.KitchenOrderOut(
                    **order_to_out(order).model_dump(),
                    next_status=next_status(order.status),
                )
            )
    return schemas.KitchenBoard(active=active, completed=completed[:5])


@app.post("/orders/{order_id}/payment", response_model=schemas.PaymentOut)
def pay_order(
    order_id: int,
    payment_in: schemas.PaymentIn,
    payment_type: PaymentType = Query(PaymentType.PREPAYMENT, alias="type"),
    db: Session = Depends(get_db),
):
    order = get_order_or_404(db, order_id)
    amount = payment_amount(order.total, payment_type)
    payment_status = payment_status_after(payment_type)
    crud.record_payment(
        db,
        order,
        amount,
        payment_type.value,
        payment_in.payment_method,
        payment_status,
    )
    logger.info(
        "Order %s paid %s (%s), payment status %s",
        order_id,
        amount,
        payment_type.value,
        payment_status,
    )
    return schemas.PaymentOut(
        success=True,
        order_id=order.id,
        amount=amount,
        payment_type=payment_type,
        payment_status=payment_status,
    )


@app.get("/analytics/popular-items", response_model=list[schemas.PopularItemOut])
def popular_items(db: Session = Depends(get_db)):
    return crud.popular_items(db)


@app.get("/analytics/time-slots", response_model=list[schemas.TimeSlotOut])
def time_slots(db: Session = Depends(get_db)):
    return crud.orders_by_time_slot(db)


@app.get("/notifications/{user_id}", response_model=list[schemas.NotificationOut])
def list_notifications(user_id: int, db: Session = Depends(get_db)):
    return crud.list_user_notifications(db, user_id)


@app.patch("/notifications/{notification_id}/read")
def read_notification(notification_id: int, db: Session = Depends(get_db)):
    crud.mark_notification_read(db, notification_id)
    return {"success": True}


def run():
    import uvicorn

    uvicorn.run("cafe.main:app", host=config.get_host(), port=config.get_port())

# ---------------------------- MODELS.PY ----------------------------
from .extensions import db
from datetime import datetime
from sqlalchemy import CheckConstraint
from werkzeug.security import generate_password_hash, check_password_hash
import enum, uuid


def now_utc():
    return datetime.utcnow()


def new_id():
    return str(uuid.uuid4())


# ---------------------------- MIXINS ----------------------------
class TimestampMixin:
    created_at = db.Column(db.DateTime, default=now_utc, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=now_utc,
                           onupdate=now_utc, nullable=False)


# ---------------------------- ENUMS ----------------------------
# Stored as plain strings; the enums name the values the dashboard knows about.
class UserType(enum.Enum):
    CUSTOMER = "customer"
    MERCHANT = "merchant"


class OrderStatus(enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def values(cls):
        return {member.value for member in cls}


class PaymentStatus(enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"

    @classmethod
    def values(cls):
        return {member.value for member in cls}


# ---------------------------- ADMIN ----------------------------
class Admin(db.Model, TimestampMixin):
    __tablename__ = "admins"

    admin_id = db.Column(db.String(36), primary_key=True, default=new_id)
    username = db.Column(db.String(150), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(150))

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)


# ---------------------------- USER ----------------------------
class User(db.Model, TimestampMixin):
    __tablename__ = "users"

    user_id = db.Column(db.String(36), primary_key=True, default=new_id)
    username = db.Column(db.String(150), unique=True, nullable=False, index=True)
    full_name = db.Column(db.String(150))
    email = db.Column(db.String(255), index=True)
    phone = db.Column(db.String(30))
    user_type = db.Column(db.String(20), default=UserType.CUSTOMER.value, nullable=False)

    # Relationships
    stores = db.relationship("Store", back_populates="merchant", lazy="select",
                             cascade="all, delete")
    orders = db.relationship("Order", back_populates="customer", lazy="select",
                             cascade="all, delete")

    @property
    def is_merchant(self):
        return self.user_type == UserType.MERCHANT.value


# ---------------------------- STORE ----------------------------
class Store(db.Model, TimestampMixin):
    __tablename__ = "stores"

    store_id = db.Column(db.String(36), primary_key=True, default=new_id)
    merchant_id = db.Column(db.String(36), db.ForeignKey("users.user_id", ondelete="CASCADE"),
                            nullable=False, index=True)
    store_name = db.Column(db.String(200), nullable=False, index=True)
    description = db.Column(db.Text)
    address = db.Column(db.String(255))
    city = db.Column(db.String(100))
    phone = db.Column(db.String(30))
    latitude = db.Column(db.Float)
    longitude = db.Column(db.Float)
    category = db.Column(db.String(100))
    opening_time = db.Column(db.String(10))  # "HH:MM"
    closing_time = db.Column(db.String(10))
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Relationships
    merchant = db.relationship("User", back_populates="stores")
    menus = db.relationship("Menu", back_populates="store", lazy="select",
                            cascade="all, delete")
    orders = db.relationship("Order", back_populates="store", lazy="select",
                             cascade="all, delete")


# ---------------------------- MENU ----------------------------
class Menu(db.Model, TimestampMixin):
    __tablename__ = "menus"

    menu_id = db.Column(db.String(36), primary_key=True, default=new_id)
    store_id = db.Column(db.String(36), db.ForeignKey("stores.store_id", ondelete="CASCADE"),
                         nullable=False, index=True)
    menu_name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    price = db.Column(db.Numeric(12, 2), nullable=False)
    category = db.Column(db.String(100))
    is_available = db.Column(db.Boolean, default=True, nullable=False)
    image_url = db.Column(db.String(500))

    store = db.relationship("Store", back_populates="menus")

    __table_args__ = (
        CheckConstraint("price >= 0", name="menu_price_check"),
    )


# ---------------------------- ORDER ----------------------------
class Order(db.Model, TimestampMixin):
    __tablename__ = "orders"

    order_id = db.Column(db.String(36), primary_key=True, default=new_id)
    customer_id = db.Column(db.String(36), db.ForeignKey("users.user_id", ondelete="CASCADE"),
                            nullable=False, index=True)
    store_id = db.Column(db.String(36), db.ForeignKey("stores.store_id", ondelete="CASCADE"),
                         nullable=False, index=True)
    total_price = db.Column(db.Numeric(12, 2), default=0, nullable=False)
    order_status = db.Column(db.String(50), default=OrderStatus.PENDING.value, nullable=False, index=True)
    payment_status = db.Column(db.String(50), default=PaymentStatus.PENDING.value, nullable=False)

    customer = db.relationship("User", back_populates="orders")
    store = db.relationship("Store", back_populates="orders")
    order_items = db.relationship("OrderItem", back_populates="order", cascade="all, delete-orphan",
                                  order_by="OrderItem.created_at")

    __table_args__ = (
        CheckConstraint("total_price >= 0", name="order_total_price_check"),
    )


# ---------------------------- ORDER ITEM ----------------------------
class OrderItem(db.Model, TimestampMixin):
    __tablename__ = "order_items"

    order_item_id = db.Column(db.String(36), primary_key=True, default=new_id)
    order_id = db.Column(db.String(36), db.ForeignKey("orders.order_id", ondelete="CASCADE"),
                         nullable=False, index=True)
    menu_id = db.Column(db.String(36), db.ForeignKey("menus.menu_id", ondelete="SET NULL"))
    quantity = db.Column(db.Integer, default=1, nullable=False)
    price = db.Column(db.Numeric(12, 2), nullable=False)
    notes = db.Column(db.Text)

    order = db.relationship("Order", back_populates="order_items")
    menu = db.relationship("Menu")

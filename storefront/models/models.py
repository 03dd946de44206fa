from datetime import datetime
from sqlalchemy import Integer, String, DateTime, Boolean, ForeignKey, Numeric, Text, UniqueConstraint, JSON
from sqlalchemy.orm import relationship, Mapped, mapped_column

from storefront.db.base import Base

# helpers
now = datetime.utcnow


class Coupon(Base):
    __tablename__ = "coupons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    type: Mapped[str] = mapped_column(String(16), nullable=False, default="percentage")  # percentage|fixed|free_delivery
    value: Mapped[float] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    uses: Mapped[list["CouponUse"]] = relationship("CouponUse", back_populates="coupon", cascade="all, delete-orphan")

    # digits-only phones that already checked out with this coupon
    @property
    def used_by(self) -> list[str]:
        return [u.phone for u in self.uses]


class CouponUse(Base):
    __tablename__ = "coupon_uses"
    __table_args__ = (
        UniqueConstraint("coupon_id", "phone", name="uq_coupon_uses_coupon_phone"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    coupon_id: Mapped[int] = mapped_column(ForeignKey("coupons.id", ondelete="CASCADE"))
    phone: Mapped[str] = mapped_column(String(32))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)

    coupon: Mapped[Coupon] = relationship("Coupon", back_populates="uses")


class Reward(Base):
    __tablename__ = "rewards"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    points_required: Mapped[int] = mapped_column(Integer)
    reward_type: Mapped[str] = mapped_column(String(32), default="custom")  # free_delivery|free_item|discount_10|discount_20|discount_50|custom
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    redemptions: Mapped[list["RewardRedemption"]] = relationship("RewardRedemption", back_populates="reward")


class LoyaltyPoint(Base):
    __tablename__ = "loyalty_points"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_id: Mapped[str] = mapped_column(String(64), index=True)
    order_id: Mapped[int | None] = mapped_column(ForeignKey("customer_orders.id", ondelete="SET NULL"), nullable=True)
    points: Mapped[int] = mapped_column(Integer)  # signed: + awarded, - redeemed
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)


class RewardRedemption(Base):
    __tablename__ = "reward_redemptions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_id: Mapped[str] = mapped_column(String(64), index=True)
    reward_id: Mapped[int | None] = mapped_column(ForeignKey("rewards.id", ondelete="SET NULL"), nullable=True)
    points_spent: Mapped[int] = mapped_column(Integer)
    status: Mapped[str] = mapped_column(String(16), default="pending")  # pending|used
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    reward: Mapped[Reward | None] = relationship("Reward", back_populates="redemptions")


class Order(Base):
    __tablename__ = "customer_orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    number: Mapped[str] = mapped_column(String(16))
    customer_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)  # null for guests
    customer_name: Mapped[str] = mapped_column(String(255))
    customer_phone: Mapped[str] = mapped_column(String(32))
    delivery_type: Mapped[str] = mapped_column(String(16))  # delivery|pickup
    address: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    neighborhood: Mapped[str | None] = mapped_column(String(128), nullable=True)
    reference_point: Mapped[str | None] = mapped_column(String(255), nullable=True)
    delivery_fee: Mapped[float] = mapped_column(Numeric(10, 2), default=0)
    subtotal: Mapped[float] = mapped_column(Numeric(10, 2))
    discount: Mapped[float] = mapped_column(Numeric(10, 2), default=0)
    coupon_code: Mapped[str | None] = mapped_column(String(64), nullable=True)
    redemption_id: Mapped[int | None] = mapped_column(ForeignKey("reward_redemptions.id", ondelete="SET NULL"), nullable=True)
    total: Mapped[float] = mapped_column(Numeric(10, 2))
    payment_method: Mapped[str] = mapped_column(String(16))  # cartao|dinheiro|pix
    observation: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="sent")  # sent|preparing|delivering|delivered|completed|cancelled
    item_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now, onupdate=now)

    items: Mapped[list["OrderItem"]] = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")


class OrderItem(Base):
    __tablename__ = "customer_order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("customer_orders.id", ondelete="CASCADE"))
    product_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    product_name: Mapped[str] = mapped_column(String(255))
    quantity: Mapped[int] = mapped_column(Integer)
    unit_price: Mapped[float] = mapped_column(Numeric(10, 2))  # product price before addons
    extras: Mapped[str | None] = mapped_column(String(512), nullable=True)  # "Batata Frita, Refrigerante Lata"
    addons: Mapped[list | None] = mapped_column(JSON, nullable=True)  # [{"addon_id", "name", "unit_price", "quantity", "is_side"}]
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now)

    order: Mapped[Order] = relationship("Order", back_populates="items")

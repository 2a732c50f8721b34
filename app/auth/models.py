from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from app.core.enums import AccountType, check_values
from app.db.session import Base


class User(Base):
    """Staff account that signs in to the system (Administrator or Accountant)."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            f"account_type IN ({check_values(AccountType)})",
            name="chk_user_account_type",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    school_name = Column(String(255), nullable=False)
    account_type = Column(String(50), nullable=False)
    is_verified = Column(Boolean, nullable=False, default=False)
    # Cleared once the signup link has been used
    verification_token = Column(String(255), nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # No cascade: payments outlive the user that recorded them
    recorded_payments = relationship("FeePayment", back_populates="recorder")

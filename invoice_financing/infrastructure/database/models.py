"""SQLAlchemy ORM models for issuers, obligors, financiers and invoices"""

from sqlalchemy import (
    BigInteger,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

from invoice_financing.domain.models import InvoiceStatus

Base = declarative_base()


class IssuerRecord(Base):
    """Creditor issuing invoices"""

    __tablename__ = "issuer"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    max_rate_bps = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ObligorRecord(Base):
    """Debtor paying invoices at maturity"""

    __tablename__ = "obligor"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class FinancierRecord(Base):
    """Purchaser financing invoices"""

    __tablename__ = "financier"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    minimum_term_days = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    rate_configurations = relationship(
        "RateConfigurationRecord",
        back_populates="financier",
        cascade="all, delete-orphan",
    )


class RateConfigurationRecord(Base):
    """Annual rate a financier charges one issuer"""

    __tablename__ = "rate_configuration"
    __table_args__ = (UniqueConstraint("financier_id", "issuer_id", name="uq_rate_configuration_financier_issuer"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    financier_id = Column(Integer, ForeignKey("financier.id", ondelete="CASCADE"), nullable=False)
    issuer_id = Column(Integer, ForeignKey("issuer.id"), nullable=False)
    annual_rate_bps = Column(Integer, nullable=False)

    financier = relationship("FinancierRecord", back_populates="rate_configurations")
    issuer = relationship("IssuerRecord")


class InvoiceRecord(Base):
    """Invoice with its financing state"""

    __tablename__ = "invoice"
    __table_args__ = (Index("ix_invoice_status_id", "status", "id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    issuer_id = Column(Integer, ForeignKey("issuer.id"), nullable=False)
    obligor_id = Column(Integer, ForeignKey("obligor.id"), nullable=True)
    value_cents = Column(BigInteger, nullable=False)
    maturity_date = Column(Date, nullable=False)
    status = Column(
        Enum(InvoiceStatus, name="invoice_status", native_enum=False),
        nullable=False,
        default=InvoiceStatus.NON_FINANCED,
    )

    # Financing result
    financier_id = Column(Integer, ForeignKey("financier.id"), nullable=True)
    financing_date = Column(Date, nullable=True)
    financing_term_days = Column(Integer, nullable=True)
    financing_rate_bps = Column(Integer, nullable=True)
    early_payment_value_cents = Column(BigInteger, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    issuer = relationship("IssuerRecord")
    obligor = relationship("ObligorRecord")
    financier = relationship("FinancierRecord")

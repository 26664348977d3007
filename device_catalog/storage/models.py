from sqlalchemy import Column, Integer, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Device(Base):
    __tablename__ = "devices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    retail_branding = Column(Text, nullable=False)  # lowercased
    marketing_name = Column(Text, nullable=False)   # as published
    model = Column(Text, nullable=False)            # lowercased

    __table_args__ = (
        UniqueConstraint("retail_branding", "model", name="uq_devices_branding_model"),
    )

from sqlalchemy import Column, Integer, String, Float, DateTime, JSON
from datetime import datetime
from .database import Base


class SavedQuote(Base):
    """A QuoteData tree stored verbatim; loading adopts it unchanged."""
    __tablename__ = "saved_quotes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    product = Column(String, nullable=False)
    # Denormalized for listing without unpacking quote_json
    total_sum = Column(Float, default=0.0)
    quote_json = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

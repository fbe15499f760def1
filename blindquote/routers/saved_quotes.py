from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from .. import models, schemas
from ..database import get_db
from ..dependencies import get_quote_service
from ..quote_service import QuoteService

router = APIRouter(prefix="/saved-quotes", tags=["saved-quotes"])


def _get_saved_quote(db: Session, quote_id: int) -> models.SavedQuote:
    saved = db.query(models.SavedQuote).filter(models.SavedQuote.id == quote_id).first()
    if not saved:
        raise HTTPException(status_code=404, detail="Saved quote not found")
    return saved


@router.post("/", response_model=schemas.SavedQuote)
def save_quote(request: schemas.SavedQuoteCreate, db: Session = Depends(get_db),
               service: QuoteService = Depends(get_quote_service)):
    quote_data = service.export_quote_data()
    product = quote_data["current_product"]
    saved = models.SavedQuote(
        name=request.name,
        product=product,
        total_sum=quote_data["products"][product]["summary"].get("total_sum") or 0,
        quote_json=quote_data,
    )
    db.add(saved)
    db.commit()
    db.refresh(saved)
    return saved


@router.get("/", response_model=List[schemas.SavedQuoteSummary])
def list_saved_quotes(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return (
        db.query(models.SavedQuote)
        .order_by(models.SavedQuote.created_at.desc())
        .offset(skip).limit(limit).all()
    )


@router.get("/{quote_id}", response_model=schemas.SavedQuote)
def get_saved_quote(quote_id: int, db: Session = Depends(get_db)):
    return _get_saved_quote(db, quote_id)


@router.post("/{quote_id}/load")
def load_saved_quote(quote_id: int, db: Session = Depends(get_db),
                     service: QuoteService = Depends(get_quote_service)):
    saved = _get_saved_quote(db, quote_id)
    error = service.load_quote_data(saved.quote_json)
    if error:
        raise HTTPException(status_code=422, detail=error)
    return service.state


@router.delete("/{quote_id}")
def delete_saved_quote(quote_id: int, db: Session = Depends(get_db)):
    saved = _get_saved_quote(db, quote_id)
    db.delete(saved)
    db.commit()
    return {"deleted": quote_id}

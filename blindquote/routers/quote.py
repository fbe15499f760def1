"""
Quote session API: every mutating endpoint goes through QuoteService and
returns the new state snapshot. Validation errors become 422 with the error
dict as detail; nothing is committed in that case.
"""

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from .. import schemas
from ..dependencies import get_quote_service
from ..quote_service import QuoteService
from ..state import actions as a

router = APIRouter(prefix="/quote", tags=["quote"])


def _raise_on_error(error: Optional[dict]):
    if error:
        raise HTTPException(status_code=422, detail=error)


def _check_row(service: QuoteService, row_index: int):
    if not 0 <= row_index < len(service.items):
        raise HTTPException(status_code=404, detail="Row not found")


# --- Whole quote ---

@router.get("/")
def get_state(service: QuoteService = Depends(get_quote_service)):
    return service.state


@router.post("/reset")
def reset_quote(service: QuoteService = Depends(get_quote_service)):
    service.reset()
    return service.state


@router.get("/export")
def export_quote(service: QuoteService = Depends(get_quote_service)):
    return service.export_quote_data()


@router.post("/load")
def load_quote(quote_data: dict = Body(...), service: QuoteService = Depends(get_quote_service)):
    _raise_on_error(service.load_quote_data(quote_data))
    return service.state


@router.post("/calculate")
def calculate(service: QuoteService = Depends(get_quote_service)):
    error = service.calculate_and_sum()
    return {"state": service.state, "error": error}


# --- Rows ---

@router.patch("/rows/{row_index}")
def update_item_value(row_index: int, update: schemas.ItemValueUpdate,
                      service: QuoteService = Depends(get_quote_service)):
    _check_row(service, row_index)
    _raise_on_error(service.commit_item_value(row_index, update.column, update.value))
    return service.state


@router.put("/rows/{row_index}/property")
def update_item_property(row_index: int, update: schemas.ItemPropertyUpdate,
                         service: QuoteService = Depends(get_quote_service)):
    _check_row(service, row_index)
    _raise_on_error(service.update_item_property(row_index, update.prop, update.value))
    return service.state


@router.post("/rows/{row_index}/insert")
def insert_row(row_index: int, service: QuoteService = Depends(get_quote_service)):
    _check_row(service, row_index)
    service.dispatch(a.InsertRow(row_index))
    return service.state


@router.delete("/rows/{row_index}")
def delete_row(row_index: int, service: QuoteService = Depends(get_quote_service)):
    _check_row(service, row_index)
    service.dispatch(a.DeleteRow(row_index))
    return service.state


@router.post("/rows/delete")
def delete_rows(selection: schemas.RowSelection, service: QuoteService = Depends(get_quote_service)):
    service.dispatch(a.DeleteMultipleRows(tuple(selection.row_indexes)))
    return service.state


@router.post("/rows/{row_index}/clear")
def clear_row(row_index: int, service: QuoteService = Depends(get_quote_service)):
    _check_row(service, row_index)
    service.dispatch(a.ClearRow(row_index))
    return service.state


@router.post("/rows/{row_index}/cycle-type")
def cycle_item_type(row_index: int, service: QuoteService = Depends(get_quote_service)):
    _check_row(service, row_index)
    service.dispatch(a.CycleItemType(row_index))
    return service.state


@router.put("/rows/{row_index}/type")
def set_item_type(row_index: int, update: schemas.ItemTypeUpdate,
                  service: QuoteService = Depends(get_quote_service)):
    _check_row(service, row_index)
    service.dispatch(a.SetItemType(row_index, update.fabric_type))
    return service.state


@router.post("/rows/{row_index}/k3/{column}")
def cycle_k3(row_index: int, column: str, service: QuoteService = Depends(get_quote_service)):
    _check_row(service, row_index)
    service.dispatch(a.CycleK3Property(row_index, column))
    return service.state


@router.put("/type")
def batch_update_type(update: schemas.ItemTypeUpdate, row_indexes: Optional[List[int]] = Query(None),
                      service: QuoteService = Depends(get_quote_service)):
    if row_indexes:
        service.dispatch(a.BatchUpdateFabricTypeForSelection(tuple(row_indexes), update.fabric_type))
    else:
        service.dispatch(a.BatchUpdateFabricType(update.fabric_type))
    return service.state


# --- Dual / chain ---

@router.put("/dual/mode")
def set_dual_chain_mode(request: schemas.ModeRequest, service: QuoteService = Depends(get_quote_service)):
    _raise_on_error(service.set_dual_chain_mode(request.mode))
    return service.state


@router.post("/dual/{row_index}")
def toggle_dual(row_index: int, service: QuoteService = Depends(get_quote_service)):
    _check_row(service, row_index)
    _raise_on_error(service.toggle_dual(row_index))
    return service.state


@router.put("/chain/{row_index}")
def set_chain(row_index: int, update: schemas.ChainUpdate,
              service: QuoteService = Depends(get_quote_service)):
    _check_row(service, row_index)
    _raise_on_error(service.set_chain(row_index, update.value))
    return service.state


# --- Drive accessories ---

@router.put("/drive/mode")
def set_drive_mode(request: schemas.ModeRequest, service: QuoteService = Depends(get_quote_service)):
    _raise_on_error(service.set_drive_accessory_mode(request.mode))
    return service.state


@router.post("/drive/winder/{row_index}")
def toggle_winder(row_index: int, request: Optional[schemas.ConfirmRequest] = None,
                  service: QuoteService = Depends(get_quote_service)):
    _check_row(service, row_index)
    _raise_on_error(service.toggle_winder(row_index, confirm=bool(request and request.confirm)))
    return service.state


@router.post("/drive/motor/{row_index}")
def toggle_motor(row_index: int, request: Optional[schemas.ConfirmRequest] = None,
                 service: QuoteService = Depends(get_quote_service)):
    _check_row(service, row_index)
    _raise_on_error(service.toggle_motor(row_index, confirm=bool(request and request.confirm)))
    return service.state


@router.put("/drive/{accessory}/count")
def set_drive_count(accessory: str, update: schemas.DriveCountUpdate,
                    service: QuoteService = Depends(get_quote_service)):
    _raise_on_error(service.set_drive_accessory_count(accessory, update.count, confirm=update.confirm))
    return service.state


@router.get("/drive")
def drive_summary(service: QuoteService = Depends(get_quote_service)):
    return service.recalculate_drive_accessories()


# --- F1 / F2 ---

@router.get("/f1")
def f1_summary(service: QuoteService = Depends(get_quote_service)):
    return service.get_f1_summary()


@router.put("/f1/remote-distribution")
def set_remote_distribution(update: schemas.RemoteDistribution,
                            service: QuoteService = Depends(get_quote_service)):
    _raise_on_error(service.set_remote_distribution(update.qty_1ch, update.qty_16ch))
    return service.get_f1_summary()


@router.put("/f1/dual-distribution")
def set_dual_distribution(update: schemas.DualDistribution,
                          service: QuoteService = Depends(get_quote_service)):
    _raise_on_error(service.set_dual_distribution(update.combo_qty, update.slim_qty))
    return service.get_f1_summary()


@router.put("/f1/discount")
def set_f1_discount(update: schemas.DiscountUpdate, service: QuoteService = Depends(get_quote_service)):
    _raise_on_error(service.set_f1_discount(update.percentage))
    return service.get_f1_summary()


@router.get("/f2")
def f2_summary(service: QuoteService = Depends(get_quote_service)):
    return service.get_f2_summary()


@router.put("/f2")
def set_f2_value(update: schemas.F2ValueUpdate, service: QuoteService = Depends(get_quote_service)):
    _raise_on_error(service.set_f2_value(update.key, update.value))
    return service.get_f2_summary()


@router.post("/f2/fees/{fee_type}/toggle")
def toggle_fee(fee_type: str, service: QuoteService = Depends(get_quote_service)):
    _raise_on_error(service.toggle_f2_fee_exclusion(fee_type))
    return service.get_f2_summary()

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import TokenPayload
from ...api.deps import get_staff_token
from ...services.queue_service import QueueService
from ...schemas.queue import QueueCreate, QueueUpdate, QueueEntryResponse, QueueItem

router = APIRouter(prefix="/queue", tags=["Queue"])


@router.get("", response_model=List[QueueItem])
async def list_queue(
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_staff_token)
):
    return QueueService(db).list()


@router.get("/doctor/{doctor_id}", response_model=List[QueueItem])
async def list_doctor_queue(
    doctor_id: int,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_staff_token)
):
    return QueueService(db).list(doctor_id)


@router.get("/appointment/{appointment_id}", response_model=QueueItem)
async def get_queue_for_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_staff_token)
):
    return QueueService.item(QueueService(db).get_by_appointment(appointment_id))


@router.post("", response_model=QueueEntryResponse, status_code=status.HTTP_201_CREATED)
async def enqueue_appointment(
    queue_data: QueueCreate,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_staff_token)
):
    """Approve a pending appointment and put it in the doctor's queue."""
    return QueueService(db).enqueue(queue_data)


@router.put("/{queue_id}", response_model=QueueEntryResponse)
async def update_queue_entry(
    queue_id: int,
    queue_data: QueueUpdate,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_staff_token)
):
    return QueueService(db).update(queue_id, queue_data)


@router.put("/{queue_id}/mark-done", response_model=QueueEntryResponse)
async def mark_queue_entry_done(
    queue_id: int,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_staff_token)
):
    return QueueService(db).mark_done(queue_id)


@router.delete("/{queue_id}")
async def remove_queue_entry(
    queue_id: int,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_staff_token)
):
    QueueService(db).remove(queue_id)
    return {"message": "Queue entry removed successfully"}

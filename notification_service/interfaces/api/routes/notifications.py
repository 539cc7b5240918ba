"""Endpoints for creating, querying and dispatching notifications."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from notification_service.application.use_cases.notifications import (
    create_notification as create_notification_uc,
    delete_notification as delete_notification_uc,
    get_notification as get_notification_uc,
    list_notifications as list_notifications_uc,
    send_email as send_email_uc,
    send_in_app as send_in_app_uc,
    send_text as send_text_uc,
    update_notification as update_notification_uc,
)
from notification_service.domain.entities import NotificationView, SendAcknowledgement
from notification_service.domain.exceptions import (
    EmailDeliveryError,
    EmailError,
    IdentityLookupError,
    NotificationNotFoundError,
    NotificationServiceError,
    StoreError,
)
from notification_service.infrastructure.database import get_db
from notification_service.infrastructure.email import EmailSender
from notification_service.infrastructure.identity import IdentityClient
from notification_service.interfaces.api.dependencies import (
    get_caller_id,
    get_email_sender,
    get_identity_client,
)
from notification_service.interfaces.api.schemas import (
    NotificationCreate,
    NotificationPageRead,
    NotificationRead,
    NotificationUpdate,
    RecipientRead,
    SendAcknowledgementRead,
    SendEmailRequest,
    SendEmailResponse,
    SendInAppRequest,
    SendTextRequest,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _to_read_model(view: NotificationView) -> NotificationRead:
    notification = view.notification
    return NotificationRead(
        id=notification.id,
        title=notification.title,
        body=notification.body,
        type=notification.type,
        subject=notification.subject,
        sender_id=notification.sender_id,
        action_payload=notification.action_payload or {},
        is_deleted=notification.is_deleted,
        deleted_at=notification.deleted_at,
        created_at=notification.created_at,
        updated_at=notification.updated_at,
        recipients=[
            RecipientRead(
                id=item.recipient.id,
                notification_id=item.recipient.notification_id,
                recipient_id=item.recipient.recipient_id,
                seen_by_user=item.recipient.seen_by_user,
                created_at=item.recipient.created_at,
                user=item.user,
            )
            for item in view.recipients
        ],
        sender=view.sender,
    )


def _to_acknowledgement(ack: SendAcknowledgement) -> SendAcknowledgementRead:
    return SendAcknowledgementRead(
        acknowledged=ack.acknowledged,
        status=ack.status,
        transaction_id=ack.transaction_id,
    )


def _to_http_exception(exc: NotificationServiceError) -> HTTPException:
    if isinstance(exc, NotificationNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, IdentityLookupError):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"error": "identity_lookup_failed", "user_id": exc.user_id, "reason": exc.reason},
        )
    if isinstance(exc, EmailError):
        code = (
            status.HTTP_502_BAD_GATEWAY
            if isinstance(exc, EmailDeliveryError)
            else status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        return HTTPException(
            status_code=code,
            detail={
                "error": "email_delivery_failed"
                if isinstance(exc, EmailDeliveryError)
                else "email_template_failed",
                "message": str(exc),
                "notification_id": exc.notification_id,
            },
        )
    if isinstance(exc, StoreError):
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "store_failure", "message": str(exc)},
        )
    logger.error("Unhandled service error: %s", exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Error interno del servidor",
    )


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
async def create_notification(
    notification_in: NotificationCreate,
    db: Session = Depends(get_db),
    identity: IdentityClient = Depends(get_identity_client),
    caller_id: str | None = Depends(get_caller_id),
):
    """Crea una notificación y un registro de entrega por destinatario."""

    try:
        view = await create_notification_uc(
            db,
            identity,
            title=notification_in.title,
            body=notification_in.body,
            type=notification_in.type,
            subject=notification_in.subject,
            recipient_ids=notification_in.recipient_ids,
            sender_id=caller_id,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except NotificationServiceError as exc:
        raise _to_http_exception(exc) from exc
    return _to_read_model(view)


@router.get("/", response_model=NotificationPageRead)
async def list_notifications(
    skip: int = Query(0, ge=0),
    take: int = Query(10, ge=0, le=100),
    search_term: str | None = Query(
        None,
        description="Devuelve las notificaciones cuyo título o cuerpo coincide exactamente",
    ),
    db: Session = Depends(get_db),
    identity: IdentityClient = Depends(get_identity_client),
    caller_id: str | None = Depends(get_caller_id),
):
    """Devuelve una página de notificaciones dirigidas al usuario que consulta."""

    try:
        page = await list_notifications_uc(
            db,
            identity,
            skip=skip,
            take=take,
            search_term=search_term,
            user_id=caller_id,
        )
    except NotificationServiceError as exc:
        raise _to_http_exception(exc) from exc
    return NotificationPageRead(
        count=page.count, data=[_to_read_model(view) for view in page.data]
    )


@router.post("/email", response_model=SendEmailResponse)
async def send_email(
    request_in: SendEmailRequest,
    db: Session = Depends(get_db),
    identity: IdentityClient = Depends(get_identity_client),
    email_sender: EmailSender = Depends(get_email_sender),
):
    """Registra el evento de la subasta y envía el correo correspondiente."""

    try:
        result = await send_email_uc(
            db,
            identity,
            email_sender,
            email=request_in.email,
            type=request_in.type,
            body=request_in.body,
            recipient_ids=request_in.recipient_ids,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except NotificationServiceError as exc:
        raise _to_http_exception(exc) from exc
    return SendEmailResponse(sent=result.sent, notification_id=result.notification_id)


@router.post("/text", response_model=SendAcknowledgementRead)
def send_text(request_in: SendTextRequest):
    """Acepta un mensaje de texto sin entregarlo."""

    return _to_acknowledgement(send_text_uc(request_in.model_dump()))


@router.post("/in-app", response_model=SendAcknowledgementRead)
def send_in_app(request_in: SendInAppRequest):
    """Acepta una notificación en la aplicación sin entregarla."""

    return _to_acknowledgement(send_in_app_uc(request_in.model_dump()))


@router.get("/{notification_id}", response_model=NotificationRead)
async def read_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    identity: IdentityClient = Depends(get_identity_client),
):
    """Obtiene la notificación identificada por ``notification_id``."""

    try:
        view = await get_notification_uc(db, identity, notification_id)
    except NotificationServiceError as exc:
        raise _to_http_exception(exc) from exc
    return _to_read_model(view)


@router.patch("/{notification_id}", response_model=NotificationRead)
async def update_notification(
    notification_id: str,
    notification_in: NotificationUpdate,
    db: Session = Depends(get_db),
    identity: IdentityClient = Depends(get_identity_client),
):
    """Actualiza el título y/o el cuerpo de una notificación existente."""

    update_data = notification_in.model_dump(exclude_unset=True)
    try:
        view = await update_notification_uc(
            db,
            identity,
            notification_id,
            title=update_data.get("title"),
            body=update_data.get("body"),
        )
    except NotificationServiceError as exc:
        raise _to_http_exception(exc) from exc
    return _to_read_model(view)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(notification_id: str, db: Session = Depends(get_db)) -> Response:
    """Marca la notificación como eliminada sin borrar el registro."""

    try:
        delete_notification_uc(db, notification_id)
    except NotificationServiceError as exc:
        raise _to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)

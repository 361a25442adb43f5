import uuid

from celery.utils.log import get_task_logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from localconnect.db import SessionLocal
from localconnect.models import Event, EventAttendee, NotificationLog
from localconnect.models.notification_log import NotificationKind
from localconnect.worker.celery_app import celery_app

logger = get_task_logger(__name__)


@celery_app.task(name="send_registration_confirmation")
def send_registration_confirmation(attendee_id: str) -> dict:
    db: Session = SessionLocal()
    try:
        attendee = db.get(EventAttendee, uuid.UUID(attendee_id))
        if attendee is None:
            logger.warning("send_registration_confirmation attendee missing attendee_id=%s", attendee_id)
            return {"sent": 0}

        db.add(
            NotificationLog(
                event_id=attendee.event_id,
                attendee_id=attendee.id,
                recipient_email=attendee.email,
                kind=NotificationKind.REGISTRATION,
            )
        )
        db.commit()

        # Delivery is simulated; the log row is the record of it.
        logger.info(
            "registration confirmation sent to %s for event_id=%s",
            attendee.email,
            attendee.event_id,
        )
        return {"sent": 1}
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@celery_app.task(name="send_event_notification")
def send_event_notification(event_id: str, kind: str) -> dict:
    db: Session = SessionLocal()
    try:
        notification_kind = NotificationKind(kind)
        event = db.get(Event, uuid.UUID(event_id))
        if event is None:
            logger.warning("send_event_notification event missing event_id=%s", event_id)
            return {"sent": 0}

        attendees = db.scalars(
            select(EventAttendee).where(EventAttendee.event_id == event.id)
        ).all()
        for attendee in attendees:
            db.add(
                NotificationLog(
                    event_id=event.id,
                    attendee_id=attendee.id,
                    recipient_email=attendee.email,
                    kind=notification_kind,
                )
            )
        db.commit()

        logger.info(
            "sent %s notification for event %r to %d attendees",
            notification_kind.value,
            event.title,
            len(attendees),
        )
        return {"sent": len(attendees)}
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

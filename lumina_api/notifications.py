import logging

logger = logging.getLogger(__name__)


def send_booking_confirmation(reservation, table_ids) -> None:
    # Placeholder until an email/SMS provider is wired in.
    logger.info("[Notification] Email sent to %s for reservation #%s", reservation.customer_email, reservation.id)
    logger.info("[Assignment] Tables assigned: %s", ", ".join(str(t) for t in table_ids))


def send_status_change(reservation) -> None:
    logger.info(
        "[Notification] Email sent to %s: reservation #%s is now %s",
        reservation.customer_email, reservation.id, reservation.status,
    )

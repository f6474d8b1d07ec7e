import logging

from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from cloud_kitchen.core.config import settings

logger = logging.getLogger(__name__)


def _whatsapp(number: str) -> str:
    # Twilio requires the "whatsapp:" prefix
    return number if number.startswith("whatsapp:") else f"whatsapp:{number}"


class NotificationService:
    def __init__(self, account_sid=None, auth_token=None, from_number=None, admin_number=None):
        self.client = None
        self.enabled = False
        self.from_number = from_number
        self.admin_number = admin_number

        # Only initialize if credentials exist in .env
        if account_sid and auth_token and from_number and admin_number:
            try:
                self.client = Client(account_sid, auth_token)
                self.enabled = True
                logger.info("NotificationService: Twilio client initialized")
            except TwilioException as e:
                logger.error("Failed to initialize Twilio client: %s", e)
        else:
            logger.info("NotificationService: credentials missing, notifications disabled.")

    @classmethod
    def from_settings(cls) -> "NotificationService":
        return cls(
            account_sid=settings.TWILIO_ACCOUNT_SID,
            auth_token=settings.TWILIO_AUTH_TOKEN,
            from_number=settings.TWILIO_FROM_NUMBER,
            admin_number=settings.ADMIN_PHONE_NUMBER,
        )

    @staticmethod
    def format_new_order(order) -> str:
        lines = "\n".join(f"- {item.quantity}x {item.product_name}" for item in order.items)
        return (
            f"New order #{order.id}\n\n"
            f"Customer: {order.customer_name} ({order.customer_phone})\n"
            f"Address: {order.customer_address}\n"
            f"Items:\n{lines}\n\n"
            f"Total: {order.total_amount}"
        )

    def notify_admin_new_order(self, order) -> bool:
        """Sends a WhatsApp message to the kitchen admin. Never raises."""
        if not self.enabled:
            logger.debug("NotificationService disabled; skipping order %s", order.id)
            return False

        try:
            self.client.messages.create(
                from_=_whatsapp(self.from_number),
                body=self.format_new_order(order),
                to=_whatsapp(self.admin_number),
            )
            logger.info("Admin notified of order %s", order.id)
            return True
        except (TwilioException, OSError) as e:
            logger.error("Failed to send admin notification for order %s: %s", order.id, e)
            return False

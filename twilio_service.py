import logging

from twilio.rest import Client

from errors import SendError

logger = logging.getLogger(__name__)


def create_messaging_client(account_sid: str, auth_token: str) -> "WhatsAppMessenger":
    """Builds a WhatsAppMessenger backed by a real Twilio REST client."""
    return WhatsAppMessenger(Client(account_sid, auth_token))


class WhatsAppMessenger:
    """Sends WhatsApp messages through Twilio's Messages API."""

    def __init__(self, client: Client):
        self.client = client

    def send(self, body: str, from_: str, to: str) -> str:
        """
        Sends one message.

        Args:
            body (str): The message text.
            from_ (str): Sender address, e.g. 'whatsapp:+14155238886'.
            to (str): Recipient address, e.g. 'whatsapp:+15551234567'.

        Returns:
            str: The Twilio message SID.

        Raises:
            SendError: If Twilio rejects the request or the call fails.
        """
        try:
            message = self.client.messages.create(body=body, from_=from_, to=to)
        except Exception as e:
            # TwilioRestException keeps the readable message on .msg
            raise SendError(getattr(e, "msg", None) or str(e)) from e
        return message.sid

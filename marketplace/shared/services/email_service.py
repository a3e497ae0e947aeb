# marketplace/shared/services/email_service.py
import httpx
import logging
from jinja2 import Environment, TemplateError, select_autoescape
from typing import Optional

from marketplace.config.settings import settings
from marketplace.core.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)

ROLE_LABELS = {
    "customer": "customer",
    "vendor": "vendor",
    "delivery": "delivery partner",
}


# Autoescaping on: names and links are account data
jinja_env = Environment(
    autoescape=select_autoescape(["html", "xml"], default_for_string=True),
    trim_blocks=True,
    lstrip_blocks=True
)

PASSWORD_RESET_HTML = jinja_env.from_string("""<!DOCTYPE html>
<html>
<head>
  <style>
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background-color: #4CAF50; color: white; padding: 20px; text-align: center; }
    .button { display: inline-block; padding: 12px 24px; background-color: #4CAF50; color: white; text-decoration: none; border-radius: 5px; }
    .footer { text-align: center; margin-top: 20px; color: #666; font-size: 12px; }
  </style>
</head>
<body>
  <div class="container">
    <div class="header"><h1>Password Reset Request</h1></div>
    {% if user_name %}
    <p>Hello {{ user_name }},</p>
    {% else %}
    <p>Hello,</p>
    {% endif %}
    <p>You are receiving this email because a password reset was requested for your {{ account_label }} account.</p>
    <p>This link is valid for {{ expire_minutes }} minutes.</p>
    <p style="text-align: center;"><a href="{{ reset_url }}" class="button">Reset Password</a></p>
    <p>If you did not request this password reset, ignore this email and your password will remain unchanged.</p>
    <div class="footer">Local Marketplace</div>
  </div>
</body>
</html>""")


def render_password_reset_template(reset_url: str, user_name: Optional[str], role: str, expire_minutes: int) -> str:
    try:
        return PASSWORD_RESET_HTML.render(
            reset_url=reset_url,
            user_name=user_name,
            account_label=ROLE_LABELS.get(role, role),
            expire_minutes=expire_minutes
        )
    except TemplateError as e:
        logger.error(f"Password reset template failed to render: {str(e)}")
        raise UpstreamServiceError("Email could not be sent")


class EmailService:
    """Outbound mail through the SendGrid v3 HTTP API"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        sender: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        self.api_key = api_key if api_key is not None else settings.sendgrid_api_key
        self.base_url = base_url or settings.sendgrid_base_url
        self.sender = sender or settings.mail_from
        self.timeout = timeout or settings.http_timeout_seconds

    async def send(self, to_email: str, subject: str, text: str, html: str) -> None:
        if not self.api_key:
            logger.error("Mail provider is not configured")
            raise UpstreamServiceError("Email could not be sent")

        payload = {
            "personalizations": [{"to": [{"email": to_email}]}],
            "from": {"email": self.sender},
            "subject": subject,
            "content": [
                {"type": "text/plain", "value": text},
                {"type": "text/html", "value": html}
            ]
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(f"{self.base_url}/v3/mail/send", json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Mail transport error: {str(e)}")
            raise UpstreamServiceError("Email could not be sent")

        if response.status_code not in (200, 202):
            logger.error(f"Mail provider error: {response.status_code} - {response.text}")
            raise UpstreamServiceError("Email could not be sent")

        logger.info(f"Email '{subject}' accepted by provider")

    async def send_password_reset(self, to_email: str, user_name: Optional[str], reset_url: str, role: str) -> None:
        expire_minutes = settings.reset_token_expire_minutes
        text = (
            "You are receiving this email because you requested to reset your password. "
            f"Please open the following link to reset your password: {reset_url}"
        )
        html = render_password_reset_template(reset_url, user_name, role, expire_minutes)
        await self.send(to_email, "Password Reset Request", text, html)


def get_email_service() -> EmailService:
    """Dependency for FastAPI"""
    return EmailService()

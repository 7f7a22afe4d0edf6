import logging
import smtplib
from email.message import EmailMessage

from .config import EmailConfig
from .errors import DeliveryError

logger = logging.getLogger(__name__)

SUBJECT = "Your Verification Code"


def _minutes(ttl_seconds: float) -> int:
    return max(1, round(ttl_seconds / 60))


def compose_verification_email(
    config: EmailConfig, to_email: str, code: str, ttl_seconds: float
) -> EmailMessage:
    minutes = _minutes(ttl_seconds)
    text = f"Your verification code is: {code}. This code will expire in {minutes} minutes."
    html = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; border: 1px solid #e0e0e0; border-radius: 5px;">
      <h2 style="color: #333;">Email Verification</h2>
      <p style="color: #666; font-size: 16px;">Your verification code is:</p>
      <div style="background-color: #f5f5f5; padding: 10px; border-radius: 4px; text-align: center; font-size: 24px; font-weight: bold; letter-spacing: 5px; margin: 20px 0;">
        {code}
      </div>
      <p style="color: #666; font-size: 14px;">This code will expire in {minutes} minutes.</p>
      <p style="color: #888; font-size: 12px; margin-top: 30px;">If you didn't request this verification, please ignore this email.</p>
    </div>
    """
    msg = EmailMessage()
    msg["From"] = config.smtp_from
    msg["To"] = to_email
    msg["Subject"] = SUBJECT
    msg.set_content(text)
    msg.add_alternative(html, subtype="html")
    return msg


def _open(config: EmailConfig) -> smtplib.SMTP:
    if config.use_ssl:
        return smtplib.SMTP_SSL(
            config.smtp_server, config.smtp_port, timeout=config.smtp_timeout
        )
    return smtplib.SMTP(config.smtp_server, config.smtp_port, timeout=config.smtp_timeout)


def send_verification_email(
    config: EmailConfig, to_email: str, code: str, ttl_seconds: float
):
    msg = compose_verification_email(config, to_email, code, ttl_seconds)
    international = not (to_email.isascii() and config.smtp_from.isascii())
    mail_options = ["SMTPUTF8"] if international else []
    policy = msg.policy.clone(linesep="\r\n", utf8=international)
    try:
        with _open(config) as server:
            if not config.use_ssl:
                server.starttls()
            server.login(config.smtp_user, config.smtp_password)
            server.sendmail(
                config.smtp_from,
                [to_email],
                msg.as_bytes(policy=policy),
                mail_options,
            )
    except (smtplib.SMTPException, OSError, UnicodeError) as e:
        logger.error("Email sending error for %s: %s", to_email, e)
        raise DeliveryError(f"Failed to send verification email: {e}") from e
    logger.info("Verification email sent to %s", to_email)

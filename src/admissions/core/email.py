"""
Outgoing mail through Resend.

The admissions API only sends one kind of message: the password reset code.
Without RESEND_API_KEY the message is written to the log instead, which is
what local development and the test suite rely on.
"""

import asyncio
import logging
import os

import resend

logger = logging.getLogger(__name__)

resend.api_key = os.getenv("RESEND_API_KEY")

EMAIL_FROM = os.getenv("EMAIL_FROM", "Admissions Office <noreply@admissions.dev>")

_OTP_TEMPLATE = """\
<div style="font-family: Arial, sans-serif; max-width: 480px; margin: 0 auto; color: #222;">
  <h2 style="color: #1a365d;">Password reset</h2>
  <p>Use this code to reset your admissions portal password:</p>
  <p style="font-size: 28px; font-weight: bold; letter-spacing: 6px;">{otp}</p>
  <p>The code expires in {minutes} minutes.</p>
  <p style="color: #777; font-size: 13px;">If you did not ask for a reset, ignore this message.</p>
</div>
"""


async def send_email(to_email: str, subject: str, html: str, text: str | None = None) -> bool:
    """
    Deliver one message.

    Returns:
        False if Resend rejected the message or could not be reached
    """
    if not resend.api_key:
        logger.warning(f"RESEND_API_KEY not set, mail to {to_email} not sent ({subject})")
        return True

    payload: resend.Emails.SendParams = {
        "from": EMAIL_FROM,
        "to": [to_email],
        "subject": subject,
        "html": html,
    }
    if text:
        payload["text"] = text

    try:
        # The Resend SDK blocks
        sent = await asyncio.to_thread(resend.Emails.send, payload)
    except Exception as e:
        logger.error(f"Resend delivery to {to_email} failed: {e}")
        return False

    logger.info(f"Mail '{subject}' delivered to {to_email} (id {sent['id']})")
    return True


async def send_password_reset_otp(to_email: str, otp: str, expires_minutes: int) -> bool:
    return await send_email(
        to_email,
        "Password Reset OTP",
        _OTP_TEMPLATE.format(otp=otp, minutes=expires_minutes),
        text=f"Your OTP is {otp}. It expires in {expires_minutes} minutes.",
    )

"""
Email Service using Resend

Delivers one-time codes for email verification and password reset. Delivery
is fire-and-forget: failures are logged and reported as False, never raised.
"""

import asyncio
import logging

import resend

from classhub.core.config import settings

logger = logging.getLogger(__name__)

# Initialize Resend with API key
resend.api_key = settings.resend_api_key

EMAIL_FROM = settings.email_from

_CODE_EMAIL_TEMPLATE = """
    <!DOCTYPE html>
    <html>
    <head>
        <style>
            body {{ font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }}
            .container {{ max-width: 600px; margin: 0 auto; padding: 40px 20px; }}
            .header {{ color: #1a365d; margin-bottom: 24px; }}
            .code {{ display: inline-block; font-size: 32px; letter-spacing: 8px; font-weight: bold; background-color: #f3f4f6; padding: 16px 24px; border-radius: 8px; margin: 24px 0; }}
            .footer {{ margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }}
        </style>
    </head>
    <body>
        <div class="container">
            <h1 class="header">{title}</h1>

            <p>{intro}</p>

            <div class="code">{code}</div>

            <p><strong>This code expires in {expires_minutes} minutes.</strong></p>

            <div class="footer">
                <p>{ignore_notice}</p>
                <p>ClassHub</p>
            </div>
        </div>
    </body>
    </html>
    """


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
) -> bool:
    """
    Send an email using Resend.

    Args:
        to_email: Recipient email address
        subject: Email subject line
        html_content: HTML content of the email

    Returns:
        True if email was sent successfully
    """
    if not resend.api_key:
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True

    try:
        params: resend.Emails.SendParams = {
            "from": EMAIL_FROM,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }

        # Run sync Resend call in thread pool to avoid blocking event loop
        email = await asyncio.to_thread(resend.Emails.send, params)
        logger.info(f"Email sent successfully to {to_email}, id: {email['id']}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


async def send_verification_code(to_email: str, code: str, expires_minutes: int) -> bool:
    """Send the email verification code to a newly registered user."""
    html_content = _CODE_EMAIL_TEMPLATE.format(
        title="Verify Your Email",
        intro="Welcome to ClassHub! Use the code below to verify your email address:",
        code=code,
        expires_minutes=expires_minutes,
        ignore_notice="If you didn't create a ClassHub account, you can safely ignore this email.",
    )
    return await send_email(
        to_email=to_email,
        subject="Your ClassHub verification code",
        html_content=html_content,
    )


async def send_password_reset_code(to_email: str, code: str, expires_minutes: int) -> bool:
    """Send the password reset code."""
    html_content = _CODE_EMAIL_TEMPLATE.format(
        title="Reset Your Password",
        intro="We received a request to reset your ClassHub password. Use this code:",
        code=code,
        expires_minutes=expires_minutes,
        ignore_notice="If you didn't request a password reset, your password is unchanged.",
    )
    return await send_email(
        to_email=to_email,
        subject="Your ClassHub password reset code",
        html_content=html_content,
    )

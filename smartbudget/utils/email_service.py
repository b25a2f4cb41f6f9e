"""
Email Service
Renders budget alert and bill reminder emails and sends them over SMTP.
"""
import logging
import smtplib
from datetime import date
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Tuple

from smartbudget.core.config import settings
from smartbudget.utils.analyzer import BudgetAlert

logger = logging.getLogger(__name__)


def send_email(
    to_email: str,
    subject: str,
    body_html: str,
    body_text: Optional[str] = None,
    from_email: Optional[str] = None,
) -> bool:
    """
    Send an email using the configured SMTP server.

    Args:
        to_email: Recipient email address
        subject: Email subject
        body_html: HTML email body
        body_text: Plain text email body (optional)
        from_email: Sender address (defaults to settings.EMAIL_FROM)

    Returns:
        bool: True if email sent successfully, False otherwise
    """
    if not settings.SMTP_HOST:
        logger.error("Cannot send email: SMTP_HOST is not configured")
        return False

    try:
        sender = from_email or settings.EMAIL_FROM

        msg = MIMEMultipart('alternative')
        msg['From'] = sender
        msg['To'] = to_email
        msg['Subject'] = subject

        if body_text:
            msg.attach(MIMEText(body_text, 'plain'))
        msg.attach(MIMEText(body_html, 'html'))

        logger.info(f"Attempting to send email from {sender} to {to_email} with subject: {subject!r}")
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
            if settings.SMTP_STARTTLS:
                server.starttls()
            if settings.SMTP_USERNAME and settings.SMTP_PASSWORD:
                server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
            server.send_message(msg)

        logger.info(f"Email sent successfully to {to_email}")
        return True

    except smtplib.SMTPAuthenticationError as e:
        logger.error(f"SMTP authentication failed: {str(e)}")
        return False
    except smtplib.SMTPException as e:
        logger.error(f"SMTP error: {str(e)}")
        return False
    except Exception as e:
        logger.error(f"Error sending email: {str(e)}")
        return False


def render_budget_alert_email(alert: BudgetAlert, user_name: Optional[str] = None) -> Tuple[str, str, str]:
    """Return (subject, html, text) for a budget alert."""
    salutation = f"Hello {user_name}," if user_name else "Hello,"

    if alert.is_exceeded:
        subject = f"Budget Alert: {alert.category_name} budget exceeded"
        headline = (
            f"Your budget of ${alert.amount:,.2f} for {alert.category_name} has been exceeded. "
            f"You have spent ${alert.spent:,.2f}."
        )
        color = "#d32f2f"
    else:
        subject = f"Budget Alert: {alert.category_name} budget at {alert.percent_spent}%"
        headline = (
            f"You have spent ${alert.spent:,.2f} of your ${alert.amount:,.2f} budget for "
            f"{alert.category_name}. This is {alert.percent_spent}% of your budget."
        )
        color = "#ff9800"

    html_body = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; border: 1px solid #e0e0e0; border-radius: 8px;">
        <h2 style="color: #333;">{subject}</h2>
        <p>{salutation}</p>
        <p style="color: {color}; font-weight: bold;">{headline}</p>
        <div style="background-color: #f5f5f5; padding: 15px; border-radius: 5px; margin: 20px 0;">
            <p style="margin: 5px 0;"><strong>Budget Amount:</strong> ${alert.amount:,.2f}</p>
            <p style="margin: 5px 0;"><strong>Amount Spent:</strong> ${alert.spent:,.2f}</p>
            <p style="margin: 5px 0;"><strong>Percentage Used:</strong> {alert.percent_spent}%</p>
        </div>
        <p>Please review your spending in the {settings.PROJECT_NAME} application.</p>
        <p style="color: #64748b; font-size: 12px;">This is an automated email from {settings.PROJECT_NAME}.</p>
    </div>
    """

    text_body = f"""{subject}

{salutation}

{headline}

Budget Amount: ${alert.amount:,.2f}
Amount Spent: ${alert.spent:,.2f}
Percentage Used: {alert.percent_spent}%

Please review your spending in the {settings.PROJECT_NAME} application.
"""
    return subject, html_body, text_body


def send_budget_alert_email(to_email: str, alert: BudgetAlert, user_name: Optional[str] = None) -> bool:
    subject, html_body, text_body = render_budget_alert_email(alert, user_name)
    return send_email(to_email=to_email, subject=subject, body_html=html_body, body_text=text_body)


def _reminder_wording(days_to_due: int) -> Tuple[str, str]:
    """(subject prefix, timeframe) for a bill due in days_to_due days."""
    if days_to_due <= 1:
        prefix = "URGENT: "
    elif days_to_due <= 3:
        prefix = "Reminder: "
    else:
        prefix = ""

    if days_to_due == 0:
        timeframe = "today"
    elif days_to_due == 1:
        timeframe = "tomorrow"
    else:
        timeframe = f"in {days_to_due} days"
    return prefix, timeframe


def render_bill_reminder_email(
    bill_name: str,
    bill_amount: float,
    due_date: date,
    days_to_due: int,
    user_name: Optional[str] = None,
) -> Tuple[str, str, str]:
    """Return (subject, html, text) for a bill payment reminder."""
    prefix, timeframe = _reminder_wording(days_to_due)
    salutation = f"Hi {user_name}," if user_name else "Hi,"
    due_display = due_date.strftime("%B %d, %Y")
    plural = "" if days_to_due == 1 else "s"

    subject = f"{prefix}Bill Payment Reminder: {bill_name} due in {days_to_due} day{plural}"

    html_body = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; border: 1px solid #e0e0e0; border-radius: 5px;">
        <h1 style="color: #4338ca; text-align: center;">Bill Payment Reminder</h1>
        <p>{salutation}</p>
        <p>This is a friendly reminder that your bill <strong>{bill_name}</strong> is due {timeframe} on <strong>{due_display}</strong>.</p>
        <table style="width: 100%; border-collapse: collapse; background-color: #f8fafc;">
            <tr><td style="padding: 8px;">Name:</td><td style="padding: 8px; font-weight: bold;">{bill_name}</td></tr>
            <tr><td style="padding: 8px;">Amount:</td><td style="padding: 8px; font-weight: bold;">${bill_amount:,.2f}</td></tr>
            <tr><td style="padding: 8px;">Due Date:</td><td style="padding: 8px; font-weight: bold;">{due_display}</td></tr>
        </table>
        <div style="text-align: center; margin: 20px 0;">
            <a href="{settings.APP_URL}/bills" style="display: inline-block; background-color: #4338ca; color: white; padding: 12px 24px; text-decoration: none; border-radius: 5px;">View My Bills</a>
        </div>
        <p style="color: #64748b; font-size: 14px; text-align: center;">This email was sent automatically from {settings.PROJECT_NAME}. Please do not reply to this email.</p>
    </div>
    """

    text_body = f"""Bill Payment Reminder

{salutation}

This is a friendly reminder that your bill {bill_name} is due {timeframe} on {due_display}.

Bill Details:
Name: {bill_name}
Amount: ${bill_amount:,.2f}
Due Date: {due_display}

Please log in to your account to view more details or make a payment.
"""
    return subject, html_body, text_body


def send_bill_reminder_email(
    to_email: str,
    bill_name: str,
    bill_amount: float,
    due_date: date,
    days_to_due: int,
    user_name: Optional[str] = None,
) -> bool:
    subject, html_body, text_body = render_bill_reminder_email(
        bill_name, bill_amount, due_date, days_to_due, user_name
    )
    return send_email(to_email=to_email, subject=subject, body_html=html_body, body_text=text_body)

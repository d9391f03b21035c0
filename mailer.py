import smtplib

from flask import current_app, render_template
from flask_mail import Message
from extensions import mail


def send_email(subject, recipients, template, **context):
    """Gửi email HTML qua Flask-Mail; lỗi SMTP chỉ ghi log, trả về False."""
    msg = Message(
        subject=subject,
        recipients=recipients,
        html=render_template(template, **context),
    )
    try:
        mail.send(msg)
    except (smtplib.SMTPException, OSError):
        current_app.logger.exception("Failed to send email %r to %s", subject, ", ".join(recipients))
        return False

    current_app.logger.info("Sent email %r to %s", subject, ", ".join(recipients))
    return True

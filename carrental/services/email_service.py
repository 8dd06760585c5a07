import smtplib
from email.message import EmailMessage

from flask import current_app


class EmailService:
    @staticmethod
    def send_booking_confirmation(to, booking_details):
        subject = f"Booking Confirmation - #{booking_details['booking_number']}"
        body = f"""
        <html>
        <body>
            <h2>Booking Confirmation</h2>
            <p>Dear Customer,</p>
            <p>Your booking has been confirmed!</p>
            <h3>Booking Details:</h3>
            <ul>
                <li><strong>Booking Number:</strong> {booking_details['booking_number']}</li>
                <li><strong>Car:</strong> {booking_details.get('car_name', '')}</li>
                <li><strong>Pickup Date:</strong> {booking_details['start_date']}</li>
                <li><strong>Return Date:</strong> {booking_details['end_date']}</li>
                <li><strong>Pickup Location:</strong> {booking_details.get('pickup_location_name', '')}</li>
                <li><strong>Return Location:</strong> {booking_details.get('return_location_name', '')}</li>
                <li><strong>Total Amount:</strong> ${booking_details['total_amount']}</li>
            </ul>
            <p>Thank you for choosing us!</p>
        </body>
        </html>
        """
        return EmailService.send(to, subject, body)

    @staticmethod
    def send(to, subject, html_body):
        """Best-effort delivery. Failures are logged and reported as ``False``."""
        backend = current_app.config.get("MAIL_BACKEND", "log")
        if backend != "smtp":
            current_app.logger.info("Email to %s queued via %s backend: %s", to, backend, subject)
            return True

        message = EmailMessage()
        message["From"] = current_app.config["MAIL_SENDER"]
        message["To"] = to
        message["Subject"] = subject
        message.set_content(html_body, subtype="html")
        try:
            with smtplib.SMTP(current_app.config["MAIL_SMTP_HOST"], current_app.config["MAIL_SMTP_PORT"]) as smtp:
                smtp.starttls()
                if current_app.config.get("MAIL_USERNAME"):
                    smtp.login(current_app.config["MAIL_USERNAME"], current_app.config.get("MAIL_PASSWORD") or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            current_app.logger.warning("Email send failed for %s: %s", to, exc)
            return False
        return True

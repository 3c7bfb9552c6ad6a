"""Email bodies for every notice the backend sends."""

from datetime import datetime
from html import escape
from typing import Optional

from notifier.mailer import EmailMessage

SUPPORT_EMAIL = "support@worksphere.com"


def _wrap(title: str, paragraphs: list) -> str:
    body = "".join(f"<p>{p}</p>" for p in paragraphs)
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        f'<h1 style="color: #1a73e8;">WorkSphere</h1><h2>{escape(title)}</h2>{body}'
        '<p>Best regards,<br/>The WorkSphere Team</p></div>'
    )


def display_name(account: dict, name: Optional[str] = None) -> str:
    """Name to greet an account with, falling back to the email's local part."""
    return name or (account.get('email') or '').split('@')[0] or 'there'


def format_interview_date(value: datetime) -> str:
    """``dd mm yyyy`` in UTC."""
    return value.strftime("%d %m %Y")


def format_interview_time(value: datetime) -> str:
    """``hh:MM AM/PM`` in UTC."""
    return value.strftime("%I:%M %p")


def verification_email(to_email: str, link: str) -> EmailMessage:
    return EmailMessage(
        to_email=to_email,
        subject="Verify Your Email",
        text_content=f"Click the link to verify your email: {link}\nThe link expires in 1 hour.",
        html_content=_wrap("Verify Your Email", [
            f'Click <a href="{escape(link)}">here</a> to verify your email.',
            "The link expires in 1 hour.",
        ]),
    )


def password_reset_email(to_email: str, link: str) -> EmailMessage:
    return EmailMessage(
        to_email=to_email,
        subject="Reset Your Password",
        text_content=f"Reset your password using this link: {link}\nThe link expires in 1 hour.",
        html_content=_wrap("Reset Your Password", [
            f'Click <a href="{escape(link)}">here</a> to reset your password.',
            "The link expires in 1 hour. If you did not request a reset, ignore this email.",
        ]),
    )


def deactivated_login_email(to_email: str, name: str) -> EmailMessage:
    text = (f"Dear {name}, your account is currently deactivated. "
            f"Please contact {SUPPORT_EMAIL} to reactivate it.")
    return EmailMessage(
        to_email=to_email,
        subject="Account Deactivated",
        text_content=text,
        html_content=_wrap("Account Deactivated", [escape(text)]),
    )


def account_status_email(to_email: str, name: str, active: bool, company: bool = False) -> EmailMessage:
    state = "activated" if active else "deactivated"
    noun = "company account" if company else "account"
    subject = f"{'Company Account' if company else 'Account'} {state.capitalize()}"
    text = f"Dear {name}, your {noun} has been {state} by the admin."
    return EmailMessage(to_email=to_email, subject=subject, text_content=text,
                        html_content=_wrap(subject, [escape(text)]))


def account_deleted_email(to_email: str, name: str, company: bool = False) -> EmailMessage:
    subject = "Company Account Deletion Notification" if company else "Account Deletion Notification"
    noun = "company account" if company else "account"
    text = f"Dear {name}, your {noun} has been deleted by the admin."
    return EmailMessage(to_email=to_email, subject=subject, text_content=text,
                        html_content=_wrap(subject, [escape(text)]))


def job_deleted_email(to_email: str, name: str, job_title: str) -> EmailMessage:
    text = f'Dear {name}, your job posting titled "{job_title}" has been deleted by the admin.'
    return EmailMessage(to_email=to_email, subject="Job Deletion Notification", text_content=text,
                        html_content=_wrap("Job Deletion Notification", [escape(text)]))


def interview_email(to_email: str, candidate_name: str, job_title: str, company_name: str,
                    when: datetime, meeting_link: str, notes: str, reschedule: bool) -> EmailMessage:
    """Schedule or reschedule notice carrying the meeting details."""
    subject = "Interview Rescheduled - WorkSphere" if reschedule else "Interview Scheduled - WorkSphere"
    if reschedule:
        greeting = (f"We have rescheduled your interview for the position of {job_title} "
                    f"at {company_name}. Please find the updated details below.")
        closing = ("Please join the interview at the updated time using the link above. "
                   "Note: The old interview link will not work.")
    else:
        greeting = (f"We are pleased to schedule an interview for the position of {job_title} "
                    f"at {company_name}. Please find the details below.")
        closing = "Please join the interview at the scheduled time using the link above."
    details = [
        f"Position: {job_title}",
        f"Company: {company_name}",
        f"Date & Time: {format_interview_date(when)} at {format_interview_time(when)}",
        "Location: Virtual (via Jitsi Meet)",
        f"Join Link: {meeting_link}",
        f"Notes: {notes or 'None'}",
    ]
    text = "\n".join([f"Dear {candidate_name},", "", greeting, ""] + details + ["", closing])
    html = _wrap(subject.split(" - ")[0], [
        f"Dear {escape(candidate_name)},",
        escape(greeting),
        "<br/>".join(escape(line) for line in details[:4])
        + f'<br/>Join Link: <a href="{escape(meeting_link)}">Join Interview</a>'
        + f"<br/>{escape(details[5])}",
        escape(closing) + f' For any questions, contact us at {SUPPORT_EMAIL}.',
    ])
    return EmailMessage(to_email=to_email, subject=subject, text_content=text, html_content=html)


def interview_cancelled_email(to_email: str, candidate_name: str, job_title: str,
                              company_name: str, when: datetime) -> EmailMessage:
    text = (f"Dear {candidate_name}, your interview for the position of {job_title} at {company_name} "
            f"on {format_interview_date(when)} at {format_interview_time(when)} has been cancelled.")
    return EmailMessage(
        to_email=to_email,
        subject="Interview Cancelled - WorkSphere",
        text_content=text,
        html_content=_wrap("Interview Cancelled", [
            escape(text), f"If you have any questions, please contact us at {SUPPORT_EMAIL}.",
        ]),
    )

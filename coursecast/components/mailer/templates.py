"""
Email templates.

All HTML email markup lives here so it can be tested without touching
the code that sends it. Every user-supplied string is HTML-escaped.
"""

from __future__ import annotations

import html
from dataclasses import dataclass
from datetime import datetime

DEFAULT_SITE_NAME = "Coursecast"


def esc(s: str) -> str:
    """HTML-escape user-supplied text for email clients."""
    return html.escape(s, quote=False)


def format_due_date(due: datetime | None) -> str:
    """Human-readable due date; assignments may have none."""
    if due is None:
        return "No due date"
    return due.strftime("%a, %b %d, %Y %H:%M UTC")


# --- Layout ---


def branded_layout(body_content: str, site_name: str = DEFAULT_SITE_NAME) -> str:
    """Centered 600px card with a coloured header banner."""
    name = esc(site_name)
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
</head>
<body style="margin: 0; padding: 0; background-color: #f9fafb; font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;">
  <table width="100%" cellpadding="0" cellspacing="0" style="background-color: #f9fafb; padding: 40px 20px;">
    <tr>
      <td align="center">
        <table width="600" cellpadding="0" cellspacing="0" style="background-color: #ffffff; border-radius: 12px; overflow: hidden;">
          <tr>
            <td style="background-color: #4f46e5; padding: 24px 32px;">
              <h1 style="margin: 0; color: #ffffff; font-size: 20px; font-weight: 700;">{name} Notification</h1>
            </td>
          </tr>
          <tr>
            <td style="padding: 32px;">
              {body_content}
            </td>
          </tr>
          <tr>
            <td style="background-color: #f9fafb; padding: 20px 32px; border-top: 1px solid #e5e7eb;">
              <p style="margin: 0; color: #9ca3af; font-size: 12px; text-align: center;">This is an automated message from {name}. Please do not reply to this email.</p>
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>"""


def _message_body(greeting_name: str, message_html: str, sender_name: str, site_name: str) -> str:
    return f"""
              <p style="margin: 0 0 16px; color: #111827; font-size: 16px;">Dear {esc(greeting_name)},</p>
              <div style="background-color: #eef2ff; border-left: 4px solid #4f46e5; border-radius: 8px; padding: 20px; margin: 24px 0;">
                <p style="margin: 0; color: #1e1b4b; font-size: 14px; line-height: 1.6; white-space: pre-wrap;">{message_html}</p>
              </div>
              <p style="margin: 0; color: #6b7280; font-size: 14px;">&mdash; {esc(sender_name)}, {esc(site_name)} Staff</p>"""


# --- Template: notification / bulk email ---


def notification_email(
    user_name: str,
    message: str,
    sender_name: str,
    site_name: str = DEFAULT_SITE_NAME,
) -> str:
    """Generic staff-to-user email (bulk and scheduled emails)."""
    return branded_layout(
        _message_body(user_name, esc(message), sender_name, site_name),
        site_name,
    )


# --- Template: assignment published ---


@dataclass(frozen=True)
class AssignmentEmailParams:
    """Assignment fields shown in the publish announcement."""

    title: str
    description: str | None
    due_date_str: str
    total_points: float


def assignment_published_email(
    student_name: str,
    assignment: AssignmentEmailParams,
    sender_name: str,
    site_name: str = DEFAULT_SITE_NAME,
) -> str:
    """Announcement sent to the audience when an assignment goes live."""
    lines = [
        f"A new assignment has been posted on {esc(site_name)}.",
        "",
        f"Title: {esc(assignment.title)}",
    ]
    if assignment.description:
        lines.append(f"Description: {esc(assignment.description)}")
    lines.append(f"Due: {esc(assignment.due_date_str)}")
    lines.append(f"Points: {assignment.total_points:g}")

    return branded_layout(
        _message_body(student_name, "\n".join(lines), sender_name, site_name),
        site_name,
    )

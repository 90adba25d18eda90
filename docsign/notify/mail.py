"""Email message composition for signing workflows.

Delivery belongs to whichever provider the deployment configures; this
module only produces the message content.
"""

from __future__ import annotations

from dataclasses import dataclass
from html import escape

from docsign.core.config import settings

_LAYOUT = """<!DOCTYPE html>
<html>
<head>
  <style>
    body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
    .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
    .header {{ background: {accent}; color: white; padding: 20px; text-align: center; }}
    .content {{ background: #f9fafb; padding: 30px; }}
    .button {{ display: inline-block; background: {accent}; color: white; padding: 12px 30px;
               text-decoration: none; border-radius: 6px; margin: 20px 0; }}
    .footer {{ text-align: center; padding: 20px; color: #666; font-size: 12px; }}
  </style>
</head>
<body>
  <div class="container">
    <div class="header"><h1>{heading}</h1></div>
    <div class="content">
{content}
    </div>
    <div class="footer"><p>Powered by {app_name}</p></div>
  </div>
</body>
</html>
"""


@dataclass(frozen=True, slots=True)
class EmailMessage:
    to: str
    subject: str
    html: str
    text: str


def _render(heading: str, content: str, accent: str) -> str:
    return _LAYOUT.format(
        heading=escape(heading),
        content=content,
        accent=accent,
        app_name=escape(settings.APP_NAME),
    )


def signature_request_email(
    recipient_email: str,
    recipient_name: str,
    document_title: str,
    submission_link: str,
    sender_name: str | None = None,
) -> EmailMessage:
    sender = sender_name or "Someone"
    link = escape(submission_link, quote=True)
    content = (
        f"      <h2>Hi {escape(recipient_name)},</h2>\n"
        f"      <p>{escape(sender)} has requested your signature on the following document:</p>\n"
        f"      <h3>{escape(document_title)}</h3>\n"
        f'      <a href="{link}" class="button">Sign Document</a>\n'
        f'      <p>Or copy this link: <a href="{link}">{link}</a></p>'
    )
    text = (
        f"Hi {recipient_name},\n\n"
        f"{sender} has requested your signature on: {document_title}\n\n"
        f"Please sign the document here: {submission_link}\n"
    )
    return EmailMessage(
        to=recipient_email,
        subject=f"Signature Request: {document_title}",
        html=_render("Document Signature Request", content, "#4F46E5"),
        text=text,
    )


def completion_email(recipient_email: str, document_title: str, download_link: str) -> EmailMessage:
    link = escape(download_link, quote=True)
    content = (
        "      <h2>Document Completed!</h2>\n"
        f"      <p>The document \"{escape(document_title)}\" has been signed and completed.</p>\n"
        f'      <a href="{link}" class="button">Download Signed Document</a>'
    )
    return EmailMessage(
        to=recipient_email,
        subject=f"Document Signed: {document_title}",
        html=_render("Document Signed Successfully", content, "#10B981"),
        text=f'Document "{document_title}" has been signed. Download: {download_link}\n',
    )

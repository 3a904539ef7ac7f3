"""Notification emails sent through the Resend HTTP API."""
from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple
from urllib.parse import urljoin, urlsplit

import httpx
from loguru import logger

from akita_connect.core.events import DEFAULT_URL, NotificationEvent
from akita_connect.utils.exceptions import EmailDeliveryError


class EmailSender(Protocol):
    async def send(self, *, to: str, subject: str, html: str) -> Optional[str]:  # pragma: no cover - interface definition
        """Send one email and return the provider's message id."""


@dataclass
class ResendEmailSender:
    """Deliver transactional email using Resend."""

    api_key: str
    sender: str
    base_url: str = "https://api.resend.com"
    request_timeout: float = 10.0
    transport: Optional[httpx.AsyncBaseTransport] = None

    def _build_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def send(self, *, to: str, subject: str, html: str) -> Optional[str]:
        payload = {
            "from": self.sender,
            "to": [to],
            "subject": subject,
            "html": html,
        }

        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.request_timeout, transport=self.transport
        ) as client:
            response = await client.post("/emails", json=payload, headers=self._build_headers())

        if response.status_code >= 400:
            logger.error("Resend returned error", status=response.status_code, body=response.text)
            raise EmailDeliveryError(f"Resend error {response.status_code}: {response.text}")

        return response.json().get("id")


SAFE_LINK_SCHEMES = ("http", "https")


def absolute_link(app_base_url: str, url: str) -> str:
    """Resolve ``url`` against the site root.

    Only http(s) URLs and site-relative paths are kept; anything else links
    to the site root instead.
    """

    parts = urlsplit(url.strip())
    if parts.scheme not in SAFE_LINK_SCHEMES and (parts.scheme or parts.netloc):
        logger.warning("Dropping unsafe notification link", scheme=parts.scheme)
        url = DEFAULT_URL
    return urljoin(app_base_url.rstrip("/") + "/", url.strip())


def render_notification_email(
    event: NotificationEvent, app_base_url: str, app_name: str = "Akita Connect"
) -> Tuple[str, str]:
    """Return ``(subject, html)`` for an event.

    Relative links are resolved against the public site URL so they work from
    a mail client.
    """

    link = absolute_link(app_base_url, event.url)
    title = html.escape(event.title)
    body = html.escape(event.body).replace("\n", "<br>")
    href = html.escape(link, quote=True)
    name = html.escape(app_name)

    content = f"""
    <!DOCTYPE html>
    <html lang="en">
    <head><meta charset="UTF-8" /><title>{title}</title></head>
    <body style="margin: 0; padding: 0; background-color: #f3f4f6;
                 font-family: -apple-system, 'Segoe UI', Roboto, Helvetica, Arial, sans-serif;
                 color: #111827;">
      <table width="100%" cellpadding="0" cellspacing="0" role="presentation">
        <tr>
          <td align="center" style="padding: 32px 16px;">
            <table width="100%" cellpadding="0" cellspacing="0"
                   style="max-width: 600px; background-color: #ffffff; border-radius: 12px;">
              <tr>
                <td style="background-color: #0d9488; padding: 24px; text-align: center;">
                  <h1 style="margin: 0; font-size: 20px; color: #ffffff;">{name}</h1>
                </td>
              </tr>
              <tr>
                <td style="padding: 28px;">
                  <h2 style="margin-top: 0; font-size: 18px;">{title}</h2>
                  <p style="font-size: 15px; color: #374151; line-height: 1.6;">{body}</p>
                  <p style="margin: 28px 0; text-align: center;">
                    <a href="{href}" style="background-color: #0d9488; color: #ffffff;
                       padding: 12px 22px; border-radius: 8px; text-decoration: none;">View on {name}</a>
                  </p>
                </td>
              </tr>
              <tr>
                <td style="padding: 16px; text-align: center; background-color: #f9fafb;
                           font-size: 12px; color: #9ca3af;">
                  You can change which emails you receive in your notification settings.
                </td>
              </tr>
            </table>
          </td>
        </tr>
      </table>
    </body>
    </html>
    """
    return event.title, content

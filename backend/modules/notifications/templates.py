"""
HTML bodies for account emails.

Each builder returns (subject, html). Links point at the frontend, which
posts the token back to the API.
"""

from html import escape
from urllib.parse import quote

BRAND = "Resume Builder"

_LAYOUT = """<div style="max-width: 600px; margin: auto; padding: 20px; font-family: Arial;">
  <h1 style="text-align: center; color: #2563eb;">{heading}</h1>
  <div style="background: #f8fafc; padding: 30px; border-radius: 8px;">
{body}
  </div>
{footer}
</div>"""

_BUTTON = (
    '<div style="text-align: center; margin: 20px 0;">'
    '<a href="{url}" style="background: {color}; color: white; padding: 12px 24px; '
    'border-radius: 6px; text-decoration: none;">{label}</a></div>'
)


def _link(frontend_url: str, path: str, token: str) -> str:
    return f"{frontend_url.rstrip('/')}/{path}?token={quote(token, safe='')}"


def _footer(text: str) -> str:
    return f'  <p style="text-align: center; font-size: 12px; color: #64748b;">{text}</p>'


def verification_email(frontend_url: str, token: str) -> tuple[str, str]:
    url = _link(frontend_url, "verify-email", token)
    body = "\n".join([
        "    <h2>Verify Your Email</h2>",
        "    <p>Click the button below to verify your email address:</p>",
        "    " + _BUTTON.format(url=url, color="#2563eb", label="Verify Email"),
        "    <p>If the button doesn't work, copy and paste this link into your browser:</p>",
        f'    <a href="{url}">{url}</a>',
    ])
    html = _LAYOUT.format(heading=BRAND, body=body, footer=_footer("This link expires in 24 hours."))
    return "Verify Your Email Address", html


def password_reset_email(frontend_url: str, token: str) -> tuple[str, str]:
    url = _link(frontend_url, "reset-password", token)
    body = "\n".join([
        "    <h2>Reset Your Password</h2>",
        "    <p>Click the button below to reset your password:</p>",
        "    " + _BUTTON.format(url=url, color="#dc2626", label="Reset Password"),
        "    <p>If the button doesn't work, copy and paste this link into your browser:</p>",
        f'    <a href="{url}">{url}</a>',
    ])
    html = _LAYOUT.format(heading=BRAND, body=body, footer=_footer("This link expires in 1 hour."))
    return "Reset Your Password", html


def welcome_email(frontend_url: str, first_name: str) -> tuple[str, str]:
    dashboard = f"{frontend_url.rstrip('/')}/dashboard"
    body = "\n".join([
        f"    <p>Thanks for joining {BRAND}. We're excited to help you craft the perfect resume!</p>",
        '    <ul style="padding-left: 20px;">',
        "      <li>Build resumes using modern templates</li>",
        "      <li>Get AI-powered content suggestions</li>",
        "      <li>Export PDF resumes anytime</li>",
        "    </ul>",
        "    " + _BUTTON.format(url=dashboard, color="#2563eb", label="Go to Dashboard"),
    ])
    html = _LAYOUT.format(heading=f"Welcome, {escape(first_name)}", body=body, footer="")
    return f"Welcome to {BRAND}!", html

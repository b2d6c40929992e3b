"""HTML rendering for the portal and the service information page."""

import json
from html import escape
from typing import Any, Iterable, List, Optional
from urllib.parse import quote

from ..routing.engine import RoutingDecision
from ..routing.overrides import VALID_REDIRECT_STATUSES
from .health import STATUS_OFFLINE, STATUS_ONLINE, PortalResource

BASE_STYLE = """
    body { font-family: Arial, sans-serif; margin: 20px; }
    table { width: 100%; border-collapse: collapse; margin-top: 20px; }
    th, td { border: 1px solid #ccc; padding: 8px 12px; }
    th { background: #f9f9f9; }
    .offline { color: red; }
    .online { color: green; }
    .warning { margin: 10px 0; padding: 10px; background: #ffefc0; border: 1px solid #ffdd80; }
    .error { color: red; }
    .info { margin: 10px 0; }
    .debug { font-size: 12px; color: #555; background: #f9f9f9; border: 1px solid #ccc; padding: 10px; }
"""


def _json(value: Any) -> str:
    return escape(json.dumps(value, indent=2, default=str, ensure_ascii=False))


def _page(title: str, body: str) -> str:
    return f"""<html>
<head>
  <meta charset="utf-8">
  <title>{escape(title)}</title>
  <style>{BASE_STYLE}</style>
</head>
<body>
  <h1>{escape(title)}</h1>
{body}
</body>
</html>"""


def render_login_page(error: Optional[str] = None) -> str:
    """Password form shown when the portal password is missing or wrong."""
    error_html = f'<p class="error">{escape(error)}</p>' if error else ""
    body = f"""  {error_html}
  <form method="get" action="/">
    <label>Password: <input type="password" name="pwd" autofocus></label>
    <button type="submit">Open portal</button>
  </form>"""
    return _page("Resource Portal", body)


def _status_form(resource: PortalResource, password: str) -> str:
    options = "".join(
        f'<option value="{code}"{" selected" if code == resource.redirect_status else ""}>{code}</option>'
        for code in VALID_REDIRECT_STATUSES
    )
    return f"""<form method="post" action="/redirect-status">
            <input type="hidden" name="hostname" value="{escape(resource.domain)}">
            <input type="hidden" name="pwd" value="{escape(password)}">
            <select name="status">{options}</select>
            <button type="submit">Set</button>
          </form>"""


def _access_cell(resource: PortalResource) -> str:
    if resource.accessible_url:
        url = escape(resource.accessible_url)
        return f'<a href="{url}" target="_blank">{url}</a>'
    if resource.is_web:
        return "Currently offline"
    return f"Protocol: {escape(resource.protocol)} / Address: {escape(resource.target)}:{resource.port}"


def render_portal_page(
    resources: Iterable[PortalResource],
    password: str,
    warnings: Iterable[str] = (),
    debug_sections: Optional[List[tuple]] = None,
) -> str:
    """Render the resource listing.

    Args:
        resources: Rows to list
        password: Portal password, echoed into the redirect status forms
        warnings: Configuration warnings shown above the table
        debug_sections: ``(title, value)`` pairs dumped as JSON in debug mode
    """
    parts = []

    if debug_sections:
        parts.append('  <div class="debug">')
        for title, value in debug_sections:
            parts.append(f"    <h2>{escape(title)}</h2>\n    <pre>{_json(value)}</pre>")
        parts.append("  </div>")

    for warning in warnings:
        parts.append(f'  <div class="warning">{escape(warning)}</div>')

    parts.append("""  <p>All <code>SRV</code> records matching <strong>DOMAINS</strong> (wildcards included).</p>
  <table>
    <thead>
      <tr>
        <th>Domain</th>
        <th>Service</th>
        <th>Protocol</th>
        <th>Target</th>
        <th>Port</th>
        <th>Status</th>
        <th>Access</th>
        <th>Redirect</th>
      </tr>
    </thead>
    <tbody>""")

    for r in resources:
        status_class = {STATUS_ONLINE: "online", STATUS_OFFLINE: "offline"}.get(r.status, "")
        redirect_cell = _status_form(r, password) if r.is_web else ""
        parts.append(f"""      <tr>
        <td>{escape(r.domain)}</td>
        <td>{escape(r.service)}</td>
        <td>{escape(r.protocol)}</td>
        <td>{escape(r.target)}</td>
        <td>{r.port}</td>
        <td class="{status_class}">{escape(r.status)}</td>
        <td>{_access_cell(r)}</td>
        <td>{redirect_cell}</td>
      </tr>""")
        if r.raw is not None:
            parts.append(f"""      <tr class="debug">
        <td colspan="8">Raw record: <pre>{_json(r.raw)}</pre></td>
      </tr>""")

    parts.append("""    </tbody>
  </table>""")
    return _page("Resource Portal", "\n".join(parts))


def render_service_info_page(decision: RoutingDecision, debug_mode: bool = False) -> str:
    """Connection details for a non-web SRV service."""
    if decision.local_link:
        link = escape(decision.local_link)
        local_link_html = f'<a href="{link}" target="_blank">{link}</a>'
    else:
        local_link_html = "No local link available"

    debug_info = ""
    if debug_mode and decision.record is not None and decision.record.raw:
        debug_info = f"""
  <div class="debug">
    <h3>Raw record</h3>
    <pre>{_json(decision.record.raw)}</pre>
  </div>"""

    body = f"""  <div class="info">
    <p><strong>Domain:</strong> {escape(decision.hostname)}</p>
    <p><strong>Service:</strong> {escape(decision.service or "")}</p>
    <p><strong>Protocol:</strong> {escape(decision.protocol or "")}</p>
    <p><strong>Target:</strong> {escape(decision.target or "")}</p>
    <p><strong>Port:</strong> {decision.port}</p>
    <p><strong>Local link:</strong> {local_link_html}</p>
  </div>{debug_info}"""
    return _page("Service Information", body)


def portal_url(password: str) -> str:
    """Portal listing URL carrying the password."""
    return f"/?pwd={quote(password, safe='')}"

"""
Inline HTML pages for the paste viewer.
"""
from html import escape

from app.paste import format_timestamp
from app.store import ConsumedPaste

_STYLE = """
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body {
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Arial, sans-serif;
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            min-height: 100vh;
            display: flex;
            align-items: center;
            justify-content: center;
            padding: 20px;
        }
        .container {
            background: white;
            border-radius: 10px;
            box-shadow: 0 10px 40px rgba(0, 0, 0, 0.3);
            max-width: 900px;
            width: 100%;
            padding: 40px;
        }
        h1 { color: #333; margin-bottom: 10px; font-size: 24px; }
        .meta { color: #666; font-size: 12px; margin-bottom: 30px; font-family: monospace; }
        .content {
            background: #f5f5f5;
            border: 1px solid #ddd;
            border-radius: 5px;
            padding: 20px;
            font-family: "Courier New", monospace;
            font-size: 14px;
            line-height: 1.6;
            white-space: pre-wrap;
            word-wrap: break-word;
            color: #333;
        }
        .message { text-align: center; color: #666; font-size: 16px; line-height: 1.6; }
"""


def _page(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title} - Pastebin Lite</title>
    <style>{_STYLE}</style>
</head>
<body>
    <div class="container">
{body}
    </div>
</body>
</html>"""


def render_paste_page(paste: ConsumedPaste) -> str:
    """Render a served paste. Content is HTML-escaped."""
    meta = [f"<p>ID: {escape(paste.id)}</p>"]
    if paste.remaining_views is not None:
        meta.append(f"<p>Views remaining: {paste.remaining_views}</p>")
    if paste.expires_at is not None:
        meta.append(f"<p>Expires: {format_timestamp(paste.expires_at)}</p>")

    body = f"""        <h1>Pastebin Lite</h1>
        <div class="meta">{''.join(meta)}</div>
        <div class="content">{escape(paste.content)}</div>"""
    return _page("Paste", body)


def render_not_found_page() -> str:
    """Same page for missing, expired and exhausted pastes."""
    body = """        <h1>404</h1>
        <p class="message">This paste was not found, has expired, or its view limit has been reached.</p>"""
    return _page("Not Found", body)


def render_error_page() -> str:
    body = """        <h1>500</h1>
        <p class="message">Something went wrong. Please try again later.</p>"""
    return _page("Error", body)

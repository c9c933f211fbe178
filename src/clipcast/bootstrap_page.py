"""Bootstrap HTML page served to browsers.

The page is a static template with one placeholder for the WebSocket port.
Its script opens the WebSocket back to us and displays each clipboard value.
"""

from __future__ import annotations

from pathlib import Path

CLIENT_PATH: Path = Path(__file__).parent / "static" / "client.html"

PORT_PLACEHOLDER: str = "{{PLACEHOLDER:WS_PORT}}"


def render_client_page(port: int, template_path: Path = CLIENT_PATH) -> str:
    """Return the client page with the WebSocket port filled in.

    Args:
        port: Port the WebSocket channel listens on.
        template_path: HTML template containing PORT_PLACEHOLDER.

    Returns:
        The rendered HTML document.
    """
    template = template_path.read_text(encoding="utf-8")
    return template.replace(PORT_PLACEHOLDER, str(port))

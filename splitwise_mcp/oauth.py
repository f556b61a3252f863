"""One-time OAuth 2.0 helper that obtains a Splitwise access token.

Starts a local callback listener, sends the user to the Splitwise
authorization page, exchanges the returned code for tokens, and prints the
``.env`` line to use.

Usage:
    splitwise-mcp-token

Consumer credentials come from SPLITWISE_CONSUMER_KEY and
SPLITWISE_CONSUMER_SECRET, or are prompted for.
"""

from __future__ import annotations

import asyncio
import html
import json
import logging
import os
import webbrowser
from collections.abc import Callable
from typing import Any
from urllib.parse import urlencode

import httpx
from aiohttp import web
from dotenv import load_dotenv
from rich.console import Console
from rich.prompt import Prompt

from splitwise_mcp.core.errors import SplitwiseMCPError

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://secure.splitwise.com/oauth/authorize"
TOKEN_URL = "https://secure.splitwise.com/oauth/token"
CALLBACK_PORT = 8080
REDIRECT_URI = f"http://localhost:{CALLBACK_PORT}/callback"

# Pause before shutting the listener down so the browser gets its page
_SHUTDOWN_GRACE = 1.0


class OAuthError(SplitwiseMCPError):
    """Raised when the authorization code cannot be exchanged for a token.

    Attributes:
        detail: Response body from the token endpoint, or the error text.
    """

    def __init__(self, message: str, detail: Any = None) -> None:
        self.detail = detail
        super().__init__(message)


def build_authorize_url(client_id: str, redirect_uri: str = REDIRECT_URI) -> str:
    query = urlencode({
        "client_id": client_id,
        "response_type": "code",
        "redirect_uri": redirect_uri,
    })
    return f"{AUTHORIZE_URL}?{query}"


async def exchange_code(
    code: str,
    client_id: str,
    client_secret: str,
    redirect_uri: str = REDIRECT_URI,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """Exchange an authorization code for tokens.

    Args:
        code: Authorization code from the callback.
        client_id: Consumer key.
        client_secret: Consumer secret.
        redirect_uri: Must match the URI used for authorization.
        transport: Optional httpx transport (used by tests).

    Returns:
        The token response (``access_token``, optionally ``refresh_token``).

    Raises:
        OAuthError: If the token endpoint rejects the request or is unreachable.
    """
    payload = {
        "grant_type": "authorization_code",
        "code": code,
        "client_id": client_id,
        "client_secret": client_secret,
        "redirect_uri": redirect_uri,
    }
    async with httpx.AsyncClient(timeout=30.0, transport=transport) as client:
        try:
            response = await client.post(TOKEN_URL, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            try:
                detail: Any = e.response.json()
            except ValueError:
                detail = e.response.text
            raise OAuthError("Failed to exchange code for token", detail) from e
        except httpx.HTTPError as e:
            raise OAuthError("Failed to exchange code for token", str(e)) from e

    tokens = response.json()
    if not isinstance(tokens, dict) or "access_token" not in tokens:
        raise OAuthError("Token response did not include an access token", tokens)
    return tokens


_PAGE_STYLE = """
  body { font-family: Arial, sans-serif; max-width: 800px; margin: 50px auto;
         padding: 20px; background: #f5f5f5; }
  .container { background: white; padding: 30px; border-radius: 10px;
               box-shadow: 0 2px 10px rgba(0,0,0,0.1); }
  h1 { color: #5bc5a7; }
  pre { background: #f5f5f5; padding: 15px; border-radius: 5px;
        overflow-x: auto; word-wrap: break-word; }
  .info { color: #666; margin-top: 20px; }
"""


def render_success_page(tokens: dict[str, Any]) -> str:
    access = html.escape(str(tokens["access_token"]))
    refresh = html.escape(str(tokens.get("refresh_token") or "N/A"))
    return f"""<!DOCTYPE html>
<html>
  <head><title>Splitwise OAuth Success</title><style>{_PAGE_STYLE}</style></head>
  <body>
    <div class="container">
      <h1>Success!</h1>
      <p>Your Splitwise access token has been generated.</p>
      <h3>Access Token:</h3>
      <pre>{access}</pre>
      <h3>Refresh Token:</h3>
      <pre>{refresh}</pre>
      <div class="info">
        <h3>Next Steps:</h3>
        <ol>
          <li>Copy the access token above</li>
          <li>Add it to your <code>.env</code> file as:<br>
              <code>SPLITWISE_ACCESS_TOKEN=&lt;your_token&gt;</code></li>
          <li>You can close this window now</li>
        </ol>
        <p><strong>Note:</strong> Save the refresh token if you need to renew
        your access token in the future.</p>
      </div>
    </div>
  </body>
</html>
"""


def render_error_page(
    detail: Any, summary: str = "Failed to exchange authorization code for token."
) -> str:
    text = detail if isinstance(detail, str) else json.dumps(detail, indent=2)
    return f"""<!DOCTYPE html>
<html>
  <head><title>Error</title></head>
  <body>
    <h1>Error</h1>
    <p>{html.escape(summary)}</p>
    <pre>{html.escape(text)}</pre>
  </body>
</html>
"""


def create_callback_app(
    client_id: str,
    client_secret: str,
    result: asyncio.Future[dict[str, Any]],
    *,
    redirect_uri: str = REDIRECT_URI,
    transport: httpx.AsyncBaseTransport | None = None,
) -> web.Application:
    """Build the callback listener; ``result`` resolves with the tokens or the error."""

    async def handle_callback(request: web.Request) -> web.Response:
        denied = request.query.get("error")
        if denied:
            detail = {
                "error": denied,
                "error_description": request.query.get("error_description", ""),
            }
            if not result.done():
                result.set_exception(
                    OAuthError(f"Authorization was not granted: {denied}", detail)
                )
            return web.Response(
                status=400,
                text=render_error_page(detail, "Authorization was not granted."),
                content_type="text/html",
            )

        code = request.query.get("code")
        if not code:
            return web.Response(status=400, text="No authorization code provided")

        try:
            tokens = await exchange_code(
                code, client_id, client_secret, redirect_uri, transport=transport
            )
        except OAuthError as e:
            if not result.done():
                result.set_exception(e)
            return web.Response(
                status=500,
                text=render_error_page(e.detail),
                content_type="text/html",
            )

        if not result.done():
            result.set_result(tokens)
        return web.Response(text=render_success_page(tokens), content_type="text/html")

    app = web.Application()
    app.router.add_get("/callback", handle_callback)
    return app


async def run_oauth_flow(
    client_id: str,
    client_secret: str,
    console: Console,
    *,
    port: int = CALLBACK_PORT,
    open_browser: Callable[[str], bool] = webbrowser.open,
) -> int:
    """Run the browser flow end to end.

    Returns:
        Process exit status: 0 on success, 1 on failure or if the callback
        port is already in use.
    """
    redirect_uri = f"http://localhost:{port}/callback"
    result: asyncio.Future[dict[str, Any]] = asyncio.get_running_loop().create_future()
    app = create_callback_app(client_id, client_secret, result, redirect_uri=redirect_uri)

    runner = web.AppRunner(app)
    await runner.setup()
    try:
        site = web.TCPSite(runner, "localhost", port)
        try:
            await site.start()
        except OSError:
            console.print(f"\n[red]Error: Port {port} is already in use.[/red]")
            console.print("Please close any application using this port and try again.\n")
            return 1

        console.print(f"\nStarting local server on port {port}...\n")
        auth_url = build_authorize_url(client_id, redirect_uri)
        console.print("Authorization URL:")
        console.print(auth_url, soft_wrap=True, markup=False)
        console.print("\n[bold]=== IMPORTANT ===[/bold]")
        console.print("1. Your browser should open automatically")
        console.print("2. Log in to Splitwise and authorize the application")
        console.print("3. You will be redirected back to localhost")
        console.print("4. The token will be displayed here and in your browser\n")
        if not open_browser(auth_url):
            console.print(
                "Could not open browser automatically. Please copy and paste "
                "the URL above into your browser.\n"
            )

        try:
            tokens = await result
        except OAuthError as e:
            console.print("\n[red]=== ERROR ===[/red]")
            console.print(e.message, markup=False)
            console.print(e.detail, markup=False)
            await asyncio.sleep(_SHUTDOWN_GRACE)
            return 1

        console.print("\n\n[green]=== SUCCESS ===[/green]")
        console.print(f"\nAccess Token: {tokens['access_token']}", markup=False)
        if tokens.get("refresh_token"):
            console.print(f"Refresh Token: {tokens['refresh_token']}", markup=False)
        console.print("\n[bold]=== Add this to your .env file ===[/bold]")
        console.print(f"SPLITWISE_ACCESS_TOKEN={tokens['access_token']}", markup=False)
        console.print("\nYou can close the browser window now.")
        await asyncio.sleep(_SHUTDOWN_GRACE)
        return 0
    finally:
        await runner.cleanup()


def _credential(console: Console, env_name: str, label: str, *, secret: bool) -> str:
    value = os.environ.get(env_name, "")
    if value:
        console.print(f"Using {label} from environment: {value[:10]}...", markup=False)
        return value
    return Prompt.ask(f"Enter your {label}", console=console, password=secret).strip()


def main() -> None:
    """Entry point for ``splitwise-mcp-token``."""
    console = Console()
    load_dotenv()
    console.print("[bold]=== Splitwise OAuth Token Generator ===[/bold]\n")

    try:
        client_id = _credential(
            console, "SPLITWISE_CONSUMER_KEY", "Consumer Key (Client ID)", secret=False
        )
        client_secret = _credential(
            console, "SPLITWISE_CONSUMER_SECRET", "Consumer Secret", secret=True
        )
        if not client_id or not client_secret:
            console.print("[red]Error: consumer key and secret are required.[/red]")
            raise SystemExit(1)
        exit_code = asyncio.run(run_oauth_flow(client_id, client_secret, console))
    except (KeyboardInterrupt, EOFError):
        console.print("\nCancelled.")
        exit_code = 1
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()

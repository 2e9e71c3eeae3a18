"""
Dashboard page entry point

Only the page-style guard lives here; the dashboard itself is rendered by the
frontend from the JSON endpoints.
"""

import html

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from social_analytics.auth import AuthenticatedUser, get_page_user

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(current_user: AuthenticatedUser = Depends(get_page_user)):
    name = html.escape(current_user.email or current_user.id)
    return HTMLResponse(
        content=f"""
        <html>
            <head><title>Dashboard</title></head>
            <body>
                <p>Signed in as {name}</p>
                <div id="dashboard-root"></div>
            </body>
        </html>
        """
    )

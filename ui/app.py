from __future__ import annotations

import os
import secrets
from typing import Any

from fastapi import FastAPI, Depends, HTTPException, Query, status
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from periodic_para import ParaApp, ViewName, build_app


# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


# ── Auth ──────────────────────────────────────────────────────

app = FastAPI(title="Periodic PARA", version="0.1.0")

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("PARA_USERNAME", "")
    expected_password = os.environ.get("PARA_PASSWORD", "")

    if credentials is None:
        if not expected_username or not expected_password:
            return "guest"
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    if not expected_username or not expected_password:
        return "guest"

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


def get_para() -> ParaApp:
    # settings are re-read per request so edits to settings.yaml apply without restart
    return build_app()


# ── Endpoints ─────────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/api/views")
def api_views(username: str = Depends(get_current_user)) -> dict[str, Any]:
    return {"views": [v.value for v in ViewName]}


@app.get("/api/settings")
def api_settings(para: ParaApp = Depends(get_para), username: str = Depends(get_current_user)) -> dict[str, Any]:
    return para.settings.to_dict()


async def _render(para: ParaApp, path: str, view: str | None) -> str:
    if not view:
        return await para.render_note(path)
    return await para.render_view(path, view)


@app.get("/api/render")
async def api_render(
    path: str = Query(...),
    view: str | None = Query(default=None),
    para: ParaApp = Depends(get_para),
    username: str = Depends(get_current_user),
) -> dict[str, Any]:
    markdown = await _render(para, path, view)
    return {"path": path, "view": view, "markdown": markdown}


@app.get("/raw/render")
async def raw_render(
    path: str = Query(...),
    view: str | None = Query(default=None),
    para: ParaApp = Depends(get_para),
    username: str = Depends(get_current_user),
) -> PlainTextResponse:
    return PlainTextResponse(await _render(para, path, view))


@app.get("/", response_class=HTMLResponse)
async def index(
    path: str = Query(default=""),
    view: str | None = Query(default=None),
    para: ParaApp = Depends(get_para),
    username: str = Depends(get_current_user),
) -> HTMLResponse:
    options = "".join(
        f'<option value="{v.value}"{" selected" if v.value == view else ""}>{v.value}</option>'
        for v in ViewName
    )
    body = ""
    if path:
        body = f'<pre class="mono">{_escape(await _render(para, path, view))}</pre>'
    html = f"""<!doctype html>
<html>
<head><meta charset="utf-8"><title>Periodic PARA</title></head>
<body>
  <form method="get" action="/">
    <input name="path" value="{_escape(path)}" placeholder="PeriodicNotes/2024/2024-01-01.md" size="48">
    <select name="view"><option value="">(all blocks in note)</option>{options}</select>
    <button type="submit">Render</button>
  </form>
  {body}
</body>
</html>"""
    return HTMLResponse(html)

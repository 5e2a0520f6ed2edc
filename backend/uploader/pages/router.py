"""Page routes.

    GET /                 - Redirect to the upload page
    GET <login_path>      - Password form
    GET <protected_path>  - Upload form (behind the route guard)

Page paths come from the session settings, so the scripts navigate to
whatever ``protected_path`` / ``login_path`` are configured.
"""
import json

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, RedirectResponse

from ..config import SessionSettings

LOGIN_HTML = """<!DOCTYPE html>
<html>
<head><title>Login</title></head>
<body>
  <h1>Login</h1>
  <form id="login">
    <input type="password" name="password" placeholder="Password" required>
    <button type="submit">Login</button>
  </form>
  <p id="error"></p>
  <script>
    const UPLOAD_PATH = __UPLOAD_PATH__;
    document.getElementById('login').addEventListener('submit', async (e) => {
      e.preventDefault();
      const res = await fetch('/api/auth', {
        method: 'POST',
        headers: { 'Content-Type': 'application/json' },
        body: JSON.stringify({ password: e.target.password.value }),
      });
      if (res.ok) {
        window.location.href = UPLOAD_PATH;
      } else {
        document.getElementById('error').textContent = 'Invalid password';
      }
    });
  </script>
</body>
</html>
"""

# Slugs are computed server-side through /api/slug for both preview and submit.
UPLOAD_HTML = """<!DOCTYPE html>
<html>
<head><title>Upload</title></head>
<body>
  <h1>Upload</h1>
  <form id="upload">
    <label>Tenant <input type="text" name="tenant" required></label>
    <code id="tenant-slug"></code><br>
    <label>Directory <input type="text" name="directory" required></label>
    <code id="directory-slug"></code><br>
    <input type="file" name="file" required><br>
    <button type="submit">Upload</button>
  </form>
  <p id="result"></p>
  <form id="logout">
    <button type="submit">Logout</button>
  </form>
  <script>
    const LOGIN_PATH = __LOGIN_PATH__;
    const slugify = async (text) => {
      const res = await fetch('/api/slug?text=' + encodeURIComponent(text));
      return (await res.json()).slug;
    };
    const form = document.getElementById('upload');
    for (const name of ['tenant', 'directory']) {
      form[name].addEventListener('input', async () => {
        document.getElementById(name + '-slug').textContent = await slugify(form[name].value);
      });
    }
    form.addEventListener('submit', async (e) => {
      e.preventDefault();
      const result = document.getElementById('result');
      const data = new FormData();
      data.append('file', form.file.files[0]);
      data.append('tenant', await slugify(form.tenant.value));
      data.append('directory', await slugify(form.directory.value));
      result.textContent = 'Uploading...';
      const res = await fetch('/api/upload', { method: 'POST', body: data });
      const body = await res.json();
      if (res.ok) {
        result.innerHTML = '';
        const link = document.createElement('a');
        link.href = body.url;
        link.textContent = body.url;
        result.appendChild(link);
      } else {
        result.textContent = body.error || 'Upload failed';
      }
    });
    document.getElementById('logout').addEventListener('submit', async (e) => {
      e.preventDefault();
      await fetch('/api/logout', { method: 'POST' });
      window.location.href = LOGIN_PATH;
    });
  </script>
</body>
</html>
"""


def _render(template: str, session: SessionSettings) -> str:
    # json.dumps gives a quoted JS string literal; "</" is escaped so a path
    # can never close the script tag.
    return (
        template
        .replace("__UPLOAD_PATH__", json.dumps(session.protected_path).replace("</", "<\\/"))
        .replace("__LOGIN_PATH__", json.dumps(session.login_path).replace("</", "<\\/"))
    )


def build_router(session: SessionSettings) -> APIRouter:
    """Mount the pages at the configured login and protected paths."""
    router = APIRouter(tags=["pages"])

    @router.get("/", include_in_schema=False)
    async def index() -> RedirectResponse:
        return RedirectResponse(url=session.protected_path)

    @router.get(session.login_path, response_class=HTMLResponse)
    async def login_page() -> str:
        return _render(LOGIN_HTML, session)

    @router.get(session.protected_path, response_class=HTMLResponse)
    async def upload_page() -> str:
        return _render(UPLOAD_HTML, session)

    return router

# 브라우저용 업로드 클라이언트 페이지 (수동 테스트용)

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["client"])

CLIENT_HTML = """<!doctype html>
<html>
<head><meta charset="utf-8"><title>Profile photo</title></head>
<body>
  <h1>Profile photo</h1>
  <form id="upload">
    <label>User id <input id="user" type="number" value="1" min="0" required></label>
    <input id="file" type="file" accept="image/*" required>
    <button type="submit">Upload</button>
  </form>
  <p id="status"></p>
  <img id="preview" alt="" style="max-width: 320px">
  <script>
    const form = document.getElementById("upload");
    const status = document.getElementById("status");
    const preview = document.getElementById("preview");
    form.addEventListener("submit", async (ev) => {
      ev.preventDefault();
      const user = document.getElementById("user").value;
      const body = new FormData();
      body.append("file", document.getElementById("file").files[0]);
      const res = await fetch(`/users/${user}/photo`, { method: "POST", body });
      status.textContent = `${res.status} ${res.headers.get("Location") || ""}`;
      if (res.status === 201) {
        preview.src = `${res.headers.get("Location")}?t=${Date.now()}`;
      }
    });
  </script>
</body>
</html>
"""


@router.get("/client", response_class=HTMLResponse)
async def client():
    return HTMLResponse(CLIENT_HTML)

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles

from natureid.services import api
from natureid.web.presenter import render_page

root = Path(__file__).resolve().parent


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # mounted sub-apps do not get lifespan events, release the camera here
    yield
    api.shutdown()


app = FastAPI(title="natureid web", lifespan=lifespan)

# "/" must be registered BEFORE the catch-all mount("") or it gets intercepted
@app.get("/", response_class=HTMLResponse)
def index():
    st = api.runtime.status
    # toasts are read-and-clear: shown on this render only
    return render_page(st.session_state(), drag_active=st.drag_active,
                       notifications=st.drain_notifications())

# serve static files
app.mount("/static", StaticFiles(directory=str(root / "static")), name="static")

# mount API sub-app last: catch-all prefix "" would shadow routes above it
app.mount("", api.app)

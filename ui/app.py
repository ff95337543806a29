"""Memo App: Streamlit interface.

Run with:
    streamlit run ui/app.py
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Ensure the project root is on sys.path so `ui.*` and `memo_app.*` imports
# resolve regardless of the working directory Streamlit uses.
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import streamlit as st  # noqa: E402
from prometheus_client import start_http_server  # noqa: E402

from memo_app.config import settings  # noqa: E402

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)

st.set_page_config(
    page_title="Memo App",
    page_icon="📝",
    layout="wide",
    initial_sidebar_state="expanded",
)

from ui.components import (  # noqa: E402
    auth,
    create_memo,
    header,
    memo_detail,
    memo_list,
)
from ui.state import register_pages  # noqa: E402


@st.cache_resource
def _start_metrics_server(port: int) -> bool:
    """Expose Prometheus metrics once per process."""
    if port:
        start_http_server(port)
        logging.getLogger(__name__).info("Metrics served on port %d", port)
    return bool(port)


_start_metrics_server(settings.metrics_port)

# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------

pages = {
    "list": st.Page(
        memo_list.render, title="Memos", icon="📝", default=True, url_path="memos"
    ),
    "create": st.Page(
        create_memo.render, title="New memo", icon="✏️", url_path="create"
    ),
    "detail": st.Page(memo_detail.render, title="Memo", icon="📄", url_path="memo"),
    "login": st.Page(auth.render_login, title="Log in", icon="🔑", url_path="login"),
    "register": st.Page(
        auth.render_register, title="Sign up", icon="🙋", url_path="register"
    ),
}
register_pages(pages)

page = st.navigation(list(pages.values()), position="hidden")

# Sidebar is shared across all pages
header.render()

# Render the selected page
page.run()

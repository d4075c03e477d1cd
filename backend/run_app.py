import logging
import os
import sys
import webbrowser
import multiprocessing
from threading import Timer

import uvicorn

HOST = os.environ.get("REPORTS_STUDIO_HOST", "127.0.0.1")
PORT = int(os.environ.get("REPORTS_STUDIO_PORT", "8000"))


def open_browser():
    """Open the health page once the server had a moment to start."""
    webbrowser.open(f"http://localhost:{PORT}/health")


if __name__ == "__main__":
    # PyInstaller needs this for multiprocessing
    multiprocessing.freeze_support()

    # Load .env from the PyInstaller bundle directory when frozen
    if getattr(sys, 'frozen', False):
        bundle_dir = getattr(sys, '_MEIPASS', os.path.dirname(os.path.abspath(__file__)))
        env_path = os.path.join(bundle_dir, '.env')
        if os.path.exists(env_path):
            from dotenv import load_dotenv
            load_dotenv(env_path)

    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO"),
        format='%(asctime)s %(levelname)s:%(name)s:%(message)s',
    )
    logging.getLogger(__name__).info("Starting Reports Studio...")

    if os.environ.get("REPORTS_STUDIO_OPEN_BROWSER") == "1":
        Timer(2, open_browser).start()

    uvicorn.run("reports_studio.main:app", host=HOST, port=PORT, log_level="info", reload=False)

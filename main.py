import logging
import sys

# Logging configuration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
# Request lines are logged by the portal client itself
logging.getLogger("httpx").setLevel(logging.WARNING)

if __name__ == "__main__":
    import flet as ft
    from portal.app_main import main

    try:
        ft.app(target=main)
    except Exception:
        logging.exception("Unhandled exception running Flet app")
        # exit with non-zero so local runs notice failure
        sys.exit(1)

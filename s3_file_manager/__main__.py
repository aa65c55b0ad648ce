"""Module entry point for the S3 file manager application."""
import logging
import tkinter as tk

from .controller import S3FileManagerController
from .presenter import S3FileManagerPresenter
from .services import S3StorageGateway
from .settings import SettingsStorage
from .tk_view import S3FileManagerApp


def main() -> None:
    settings = SettingsStorage().load()
    logging.basicConfig(
        level=settings.logging_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    root = tk.Tk()
    controller = S3FileManagerController(
        gateway=S3StorageGateway(endpoint_url=settings.endpoint_url),
        url_expires_in=settings.url_expires_in,
    )
    presenter = S3FileManagerPresenter(
        controller=controller,
        dispatch=lambda func: root.after(0, func),
    )
    S3FileManagerApp(root, presenter)
    root.mainloop()


if __name__ == "__main__":
    main()

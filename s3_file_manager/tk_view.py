from __future__ import annotations
"""Tkinter front end for browsing a single S3 bucket."""

import logging
import tkinter as tk
from tkinter import filedialog, messagebox, simpledialog, ttk

from .models import Entry, Notification, ViewMode
from .presenter import S3FileManagerPresenter
from .ui_utils import format_last_modified, format_size, status_text

LOGGER = logging.getLogger(__name__)

GRID_COLUMNS = 4
DELETE_WARNING = (
    "This action cannot be undone. This will permanently delete the file from your S3 bucket."
)


class S3FileManagerApp:
    """Tkinter view that delegates all behaviour to :class:`S3FileManagerPresenter`."""

    def __init__(self, root: tk.Tk, presenter: S3FileManagerPresenter | None = None):
        self.root = root
        self.root.title("S3 File Manager")
        self.root.geometry("900x640")
        self.root.minsize(600, 420)

        self.presenter = presenter or S3FileManagerPresenter(
            dispatch=lambda func: self.root.after(0, func),
        )
        self.presenter.on_state_changed = self._render
        self.presenter.on_notification = self._show_notification

        self._preview_window: tk.Toplevel | None = None
        self._preview_url: str | None = None
        self._about_window: tk.Toplevel | None = None
        self._file_menu_entry: Entry | None = None

        self._create_menu()
        self._create_widgets()
        self._create_context_menu()
        self._render()
        self.presenter.start()

    def _create_menu(self) -> None:
        menubar = tk.Menu(self.root)
        file_menu = tk.Menu(menubar, tearoff=0)
        file_menu.add_command(label="Load Credentials...", command=self.load_credentials)
        file_menu.add_command(label="Reset Credentials", command=self.presenter.reset_credentials)
        file_menu.add_separator()
        file_menu.add_command(label="Quit", command=self.root.destroy)
        menubar.add_cascade(label="File", menu=file_menu)

        help_menu = tk.Menu(menubar, tearoff=0)
        help_menu.add_command(label="About", command=self.show_about_dialog)
        menubar.add_cascade(label="Help", menu=help_menu)
        self.root.config(menu=menubar)

    def _create_widgets(self) -> None:
        main_frame = ttk.Frame(self.root, padding="10")
        main_frame.grid(row=0, column=0, sticky=(tk.W, tk.E, tk.N, tk.S))
        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(0, weight=1)
        main_frame.columnconfigure(0, weight=1)
        main_frame.rowconfigure(2, weight=1)

        toolbar = ttk.Frame(main_frame)
        toolbar.grid(row=0, column=0, sticky=(tk.W, tk.E))
        self.back_button = ttk.Button(toolbar, text="Back", command=self.presenter.navigate_back)
        self.back_button.pack(side=tk.LEFT)
        ttk.Button(toolbar, text="Refresh", command=self.presenter.refresh).pack(side=tk.LEFT, padx=(5, 0))
        self.upload_button = ttk.Button(toolbar, text="Upload File", command=self.upload_file)
        self.upload_button.pack(side=tk.LEFT, padx=(5, 0))
        ttk.Button(toolbar, text="New Folder", command=self.create_folder).pack(side=tk.LEFT, padx=(5, 0))
        self.view_button = ttk.Button(toolbar, command=self.presenter.toggle_view)
        self.view_button.pack(side=tk.RIGHT)

        self.breadcrumb_frame = ttk.Frame(main_frame)
        self.breadcrumb_frame.grid(row=1, column=0, sticky=(tk.W, tk.E), pady=(10, 5))

        self.content_frame = ttk.Frame(main_frame)
        self.content_frame.grid(row=2, column=0, sticky=(tk.W, tk.E, tk.N, tk.S))
        self.content_frame.columnconfigure(0, weight=1)
        self.content_frame.rowconfigure(0, weight=1)

        self.list_tree = ttk.Treeview(
            self.content_frame,
            columns=("size", "modified"),
            selectmode="browse",
        )
        self.list_tree.heading("#0", text="Name")
        self.list_tree.heading("size", text="Size")
        self.list_tree.heading("modified", text="Last Modified")
        self.list_tree.column("size", width=100, anchor=tk.E)
        self.list_tree.column("modified", width=200)
        self.list_tree.bind("<Double-1>", self._handle_tree_double_click)
        self.list_tree.bind("<Button-3>", self._handle_tree_right_click)
        self.list_tree.bind("<Button-2>", self._handle_tree_right_click)

        self.grid_canvas = tk.Canvas(self.content_frame, highlightthickness=0)
        self.grid_scroll = ttk.Scrollbar(self.content_frame, orient="vertical", command=self.grid_canvas.yview)
        self.grid_canvas.configure(yscrollcommand=self.grid_scroll.set)
        self.grid_inner = ttk.Frame(self.grid_canvas)
        self.grid_canvas.create_window((0, 0), window=self.grid_inner, anchor=tk.NW)
        self.grid_inner.bind(
            "<Configure>",
            lambda _: self.grid_canvas.configure(scrollregion=self.grid_canvas.bbox("all")),
        )

        self.progress = ttk.Progressbar(main_frame, mode="determinate", maximum=100)
        self.progress.grid(row=3, column=0, sticky=(tk.W, tk.E), pady=5)

        self.status_var = tk.StringVar(value="Ready")
        ttk.Label(main_frame, textvariable=self.status_var, anchor=tk.W).grid(
            row=4, column=0, sticky=(tk.W, tk.E)
        )

    def _create_context_menu(self) -> None:
        self._file_menu = tk.Menu(self.root, tearoff=0)
        self._file_menu.add_command(label="Preview", command=lambda: self._on_file_action("preview"))
        self._file_menu.add_command(label="Download", command=lambda: self._on_file_action("download"))
        self._file_menu.add_separator()
        self._file_menu.add_command(label="Delete", command=lambda: self._on_file_action("delete"))

    def load_credentials(self) -> None:
        path = filedialog.askopenfilename(
            parent=self.root,
            title="Choose Credentials File",
            filetypes=[("JSON files", "*.json"), ("All files", "*")],
        )
        if not path:
            self.presenter.reset_credentials()
            return
        try:
            with open(path, encoding="utf-8") as handle:
                text = handle.read()
        except OSError as exc:
            LOGGER.warning("Unable to read credentials file %s: %s", path, exc)
            messagebox.showerror("Error", f"Unable to read file: {exc}", parent=self.root)
            return
        self.presenter.load_credentials(text)

    def upload_file(self) -> None:
        path = filedialog.askopenfilename(parent=self.root, title="Choose File to Upload")
        if not path:
            messagebox.showerror("No File Selected", "Please select a file to upload.", parent=self.root)
            return
        self.presenter.upload_file(path)

    def create_folder(self) -> None:
        name = simpledialog.askstring("New Folder", "Folder name:", parent=self.root)
        if name is None:
            return
        self.presenter.create_folder(name)

    def confirm_delete(self, entry: Entry) -> None:
        if messagebox.askyesno(
            "Are you absolutely sure?",
            f"{entry.name}\n\n{DELETE_WARNING}",
            icon=messagebox.WARNING,
            parent=self.root,
        ):
            self.presenter.delete_file(entry.key)

    def show_about_dialog(self) -> None:
        if self._about_window and self._about_window.winfo_exists():
            self._about_window.lift()
            return
        info = self.presenter.package_info
        window = tk.Toplevel(self.root)
        window.title("About")
        window.transient(self.root)
        frame = ttk.Frame(window, padding=12)
        frame.pack(fill=tk.BOTH, expand=True)
        title = f"{info.name} {info.version}".strip()
        ttk.Label(frame, text=title, font=("TkDefaultFont", 12, "bold")).pack(anchor=tk.W)
        ttk.Label(frame, text=info.summary, wraplength=320).pack(anchor=tk.W, pady=(6, 0))
        if info.homepage:
            ttk.Label(frame, text=info.homepage).pack(anchor=tk.W, pady=(6, 0))
        ttk.Button(frame, text="Close", command=window.destroy).pack(anchor=tk.E, pady=(12, 0))
        self._about_window = window

    def _render(self) -> None:
        presenter = self.presenter
        self.view_button.configure(
            text="List View" if presenter.view_mode is ViewMode.GRID else "Grid View"
        )
        self.back_button.configure(state="normal" if len(presenter.history) > 1 else "disabled")
        self._render_breadcrumbs()
        if presenter.view_mode is ViewMode.GRID:
            self._render_grid(presenter.entries)
        else:
            self._render_list(presenter.entries)

        transfer = presenter.transfer
        self.progress["value"] = transfer.progress
        self.upload_button.configure(state="disabled" if transfer.in_progress else "normal")
        self.status_var.set(
            status_text(
                uploading=transfer.in_progress,
                progress=transfer.progress,
                listing=presenter.is_listing,
                entry_count=len(presenter.entries),
            )
        )
        self._render_preview()

    def _render_breadcrumbs(self) -> None:
        for child in self.breadcrumb_frame.winfo_children():
            child.destroy()
        crumbs = self.presenter.breadcrumbs()
        for label, index in crumbs:
            if index:
                ttk.Label(self.breadcrumb_frame, text="/").pack(side=tk.LEFT, padx=2)
            ttk.Button(
                self.breadcrumb_frame,
                text=label,
                command=lambda idx=index: self.presenter.navigate_to_breadcrumb(idx),
                state="disabled" if index == len(crumbs) - 1 else "normal",
            ).pack(side=tk.LEFT)

    def _render_list(self, entries: list[Entry]) -> None:
        self.grid_canvas.grid_remove()
        self.grid_scroll.grid_remove()
        self.list_tree.grid(row=0, column=0, sticky=(tk.W, tk.E, tk.N, tk.S))
        self.list_tree.delete(*self.list_tree.get_children())
        for entry in entries:
            if entry.is_folder:
                values = ("", "")
                text = f"[{entry.name}]"
            else:
                values = (format_size(entry.size), format_last_modified(entry.last_modified))
                text = entry.name
            self.list_tree.insert("", tk.END, iid=entry.key, text=text, values=values)

    def _render_grid(self, entries: list[Entry]) -> None:
        self.list_tree.grid_remove()
        self.grid_canvas.grid(row=0, column=0, sticky=(tk.W, tk.E, tk.N, tk.S))
        self.grid_scroll.grid(row=0, column=1, sticky=(tk.N, tk.S))
        for child in self.grid_inner.winfo_children():
            child.destroy()
        for position, entry in enumerate(entries):
            if entry.is_folder:
                text = f"[{entry.name}]"
                command = lambda key=entry.key: self.presenter.select_folder(key)
            else:
                text = f"{entry.name}\n{format_size(entry.size)}"
                command = lambda item=entry: self._open_file_menu(item)
            ttk.Button(self.grid_inner, text=text, width=22, command=command).grid(
                row=position // GRID_COLUMNS,
                column=position % GRID_COLUMNS,
                padx=4,
                pady=4,
                sticky=(tk.W, tk.E),
            )

    def _render_preview(self) -> None:
        preview = self.presenter.preview
        if not preview.is_open:
            if self._preview_window and self._preview_window.winfo_exists():
                self._preview_window.destroy()
            self._preview_window = None
            self._preview_url = None
            return
        if self._preview_window and self._preview_window.winfo_exists():
            if self._preview_url == preview.url:
                return
            self._preview_window.destroy()
        window = tk.Toplevel(self.root)
        window.title(preview.entry.name if preview.entry else "Preview")
        window.transient(self.root)
        window.protocol("WM_DELETE_WINDOW", self.presenter.close_preview)
        frame = ttk.Frame(window, padding=12)
        frame.pack(fill=tk.BOTH, expand=True)
        ttk.Label(frame, text="Signed URL (valid for a limited time):").pack(anchor=tk.W)
        url_var = tk.StringVar(master=window, value=preview.url or "")
        window.url_var = url_var
        ttk.Entry(frame, textvariable=url_var, width=80, state="readonly").pack(fill=tk.X, pady=(4, 8))
        buttons = ttk.Frame(frame)
        buttons.pack(fill=tk.X)
        ttk.Button(buttons, text="Close", command=self.presenter.close_preview).pack(side=tk.RIGHT)
        ttk.Button(
            buttons,
            text="Copy URL",
            command=lambda: self._copy_to_clipboard(url_var.get()),
        ).pack(side=tk.RIGHT, padx=(0, 5))
        if preview.entry:
            key = preview.entry.key
            ttk.Button(
                buttons,
                text="Download",
                command=lambda: self.presenter.download_file(key),
            ).pack(side=tk.RIGHT, padx=(0, 5))
        self._preview_window = window
        self._preview_url = preview.url

    def _copy_to_clipboard(self, value: str) -> None:
        self.root.clipboard_clear()
        self.root.clipboard_append(value)
        self.status_var.set("URL copied to clipboard")

    def _show_notification(self, notification: Notification) -> None:
        if notification.is_error:
            messagebox.showerror(notification.title, notification.message, parent=self.root)
            self.status_var.set(notification.title)
        else:
            self.status_var.set(f"{notification.title}: {notification.message}")

    def _entry_for_key(self, key: str) -> Entry | None:
        for entry in self.presenter.entries:
            if entry.key == key:
                return entry
        return None

    def _handle_tree_double_click(self, event) -> None:
        entry = self._entry_for_key(self.list_tree.identify_row(event.y))
        if entry is None:
            return
        if entry.is_folder:
            self.presenter.select_folder(entry.key)
        else:
            self.presenter.preview_file(entry)

    def _handle_tree_right_click(self, event) -> str | None:
        row = self.list_tree.identify_row(event.y)
        entry = self._entry_for_key(row)
        if entry is None or entry.is_folder:
            return None
        self.list_tree.selection_set(row)
        self._open_file_menu(entry, event.x_root, event.y_root)
        return "break"

    def _open_file_menu(self, entry: Entry, x: int | None = None, y: int | None = None) -> None:
        self._file_menu_entry = entry
        if x is None or y is None:
            x, y = self.root.winfo_pointerx(), self.root.winfo_pointery()
        try:
            self._file_menu.tk_popup(x, y)
        finally:
            self._file_menu.grab_release()

    def _on_file_action(self, action: str) -> None:
        entry = self._file_menu_entry
        self._file_menu_entry = None
        if entry is None:
            return
        if action == "preview":
            self.presenter.preview_file(entry)
        elif action == "download":
            self.presenter.download_file(entry.key)
        elif action == "delete":
            self.confirm_delete(entry)

import customtkinter as ctk

from models.record import Record
from services.category_service import CategoryService
from services.record_service import RecordService
from ui.components.confirm_dialog import ConfirmDialog
from ui.components.record_form import RecordForm
from utils.constants import NOT_SET
from utils.date_helpers import format_display_timestamp
from utils.errors import CollectionError

_ALL = "All categories"
_MAX_RENDERED_ROWS = 200
_COLUMN_WIDTH = 130


class CollectionTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        record_service: RecordService,
        category_service: CategoryService,
        notify_refresh,     # callable(scope)
        show_banner,        # callable(message, severity)
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = record_service
        self._cat_svc = category_service
        self._notify_refresh = notify_refresh
        self._show_banner = show_banner
        self._key_by_name: dict[str, str] = {}

        self._category_var = ctk.StringVar(value=_ALL)

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_filter_bar()
        self._build_table()
        self.refresh()

    def refresh(self):
        self._reload_categories()
        self._load()

    # ── Filter bar ──────────────────────────────────────────────────────────
    def _build_filter_bar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        bar.grid_columnconfigure(2, weight=1)

        ctk.CTkLabel(bar, text="Category:").grid(row=0, column=0, padx=(12, 4), pady=8)
        self._category_combo = ctk.CTkComboBox(
            bar, values=[_ALL], variable=self._category_var,
            width=220, state="readonly",
            command=lambda _: self._load(),
        )
        self._category_combo.grid(row=0, column=1, padx=4)

        self._count_label = ctk.CTkLabel(bar, text="", text_color="gray60")
        self._count_label.grid(row=0, column=2, padx=8, sticky="w")

        self._add_btn = ctk.CTkButton(bar, text="+ Add Item", width=110, command=self._open_add)
        self._add_btn.grid(row=0, column=3, padx=(4, 12), pady=6)

    def _reload_categories(self):
        try:
            categories = self._cat_svc.get_all()
        except CollectionError as e:
            self._show_banner(str(e), "error")
            categories = []
        # imported data can still carry two categories with one display name
        self._key_by_name = {}
        for c in categories:
            label = c.name if c.name not in self._key_by_name else f"{c.name} ({c.key})"
            self._key_by_name[label] = c.key
        self._category_combo.configure(values=[_ALL] + list(self._key_by_name))
        if self._category_var.get() not in self._key_by_name:
            self._category_var.set(_ALL)

    def _selected_key(self) -> str | None:
        return self._key_by_name.get(self._category_var.get())

    # ── Table ────────────────────────────────────────────────────────────────
    def _build_table(self):
        self._scroll = ctk.CTkScrollableFrame(self, orientation="vertical")
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        key = self._selected_key()
        self._add_btn.configure(state="normal" if key else "disabled")

        try:
            records = self._svc.get_all(key)
        except CollectionError as e:
            self._show_banner(str(e), "error")
            return

        total = len(records)
        self._count_label.configure(text=f"{total} item{'s' if total != 1 else ''}")

        if not records:
            ctk.CTkLabel(
                self._scroll, text="No records found.", text_color="gray60",
            ).grid(row=0, column=0, pady=20)
            return

        columns = self._svc.table_columns(records, key)
        show_category = key is None

        hdr = ctk.CTkFrame(self._scroll, fg_color=("gray82", "gray22"), corner_radius=0)
        hdr.grid(row=0, column=0, sticky="ew", pady=(0, 2))
        headers = (["Category"] if show_category else []) + [
            self._svc.column_label(c, key) for c in columns
        ] + ["Added", "Actions"]
        for i, text in enumerate(headers):
            ctk.CTkLabel(
                hdr, text=text, width=_COLUMN_WIDTH, anchor="w",
                font=ctk.CTkFont(weight="bold"),
            ).grid(row=0, column=i, padx=4, pady=4, sticky="w")

        names = {c.key: c.name for c in self._cat_svc.get_all()} if show_category else {}
        for idx, record in enumerate(records[:_MAX_RENDERED_ROWS]):
            cells = self._svc.display_row(record, columns)
            if show_category:
                cells.insert(0, names.get(record.category, record.category))
            cells.append(format_display_timestamp(record.created_at))
            self._add_row(idx + 1, record, cells)

        if total > _MAX_RENDERED_ROWS:
            ctk.CTkLabel(
                self._scroll,
                text=f"Showing {_MAX_RENDERED_ROWS} of {total} items. Pick a category to narrow results.",
                text_color="gray60",
                font=ctk.CTkFont(size=11),
            ).grid(row=_MAX_RENDERED_ROWS + 1, column=0, pady=8)

    def _add_row(self, idx: int, record: Record, cells: list[str]):
        row = ctk.CTkFrame(self._scroll, fg_color=("gray90", "gray20"), corner_radius=6)
        row.grid(row=idx, column=0, sticky="ew", pady=1)

        for i, text in enumerate(cells):
            ctk.CTkLabel(
                row, text=text, width=_COLUMN_WIDTH, anchor="w",
                text_color="gray60" if text == NOT_SET else ("gray10", "gray90"),
            ).grid(row=0, column=i, padx=4, pady=4, sticky="w")

        btn_frame = ctk.CTkFrame(row, fg_color="transparent")
        btn_frame.grid(row=0, column=len(cells), padx=4, pady=2)
        ctk.CTkButton(
            btn_frame, text="Edit", width=54, height=24,
            command=lambda r=record: self._open_edit(r),
        ).pack(side="left", padx=(0, 4))
        ctk.CTkButton(
            btn_frame, text="Delete", width=60, height=24,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda r=record: self._on_delete(r),
        ).pack(side="left")

    # ── Actions ──────────────────────────────────────────────────────────────
    def _open_add(self):
        key = self._selected_key()
        category = self._cat_svc.get(key) if key else None
        if category is None:
            return
        form = RecordForm(self.winfo_toplevel(), self._svc, category=category)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("record")

    def _open_edit(self, record: Record):
        form = RecordForm(
            self.winfo_toplevel(), self._svc,
            category=self._cat_svc.get(record.category), record=record,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("record")

    def _on_delete(self, record: Record):
        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            title="Delete Item",
            message="Delete this item? This cannot be undone.",
            confirm_text="Delete",
        )
        if not dlg.result:
            return
        try:
            self._svc.delete(record.id)
        except CollectionError as e:
            self._show_banner(f"Could not delete item: {e}", "error")
        self._notify_refresh("record")

import customtkinter as ctk

from models.category import Category
from services.category_service import CategoryService
from ui.components.category_form import CategoryForm
from ui.components.confirm_dialog import DeleteCategoryDialog
from utils.constants import FIELD_TYPE_LABELS
from utils.errors import CollectionError


class CategoriesTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        category_service: CategoryService,
        notify_refresh,     # callable(scope)
        show_banner,        # callable(message, severity)
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = category_service
        self._notify_refresh = notify_refresh
        self._show_banner = show_banner

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_toolbar()
        self._build_list()
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkLabel(
            bar, text="Categories",
            font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(side="left", padx=(12, 16), pady=8)

        ctk.CTkButton(
            bar, text="+ New Category", command=self._open_add,
        ).pack(side="left", padx=4, pady=6)

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        try:
            categories = self._svc.get_all()
            counts = self._svc.item_counts()
        except CollectionError as e:
            self._show_banner(str(e), "error")
            return

        if not categories:
            ctk.CTkLabel(
                self._scroll,
                text="No categories yet. Create one to start your collection.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            ctk.CTkButton(
                self._scroll, text="+ New Category", width=180, height=40,
                command=self._open_add,
            ).grid(row=1, column=0)
            return

        for idx, cat in enumerate(categories):
            self._add_card(idx, cat, counts.get(cat.key, 0))

    def _add_card(self, idx: int, cat: Category, item_count: int):
        card = ctk.CTkFrame(
            self._scroll, fg_color=("gray90", "gray20"), corner_radius=8
        )
        card.grid(row=idx, column=0, sticky="ew", padx=4, pady=3)
        card.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            card, text=cat.name,
            font=ctk.CTkFont(size=13, weight="bold"), anchor="w",
        ).grid(row=0, column=0, padx=12, pady=(8, 0), sticky="w")

        fields_text = ", ".join(
            f"{f.label} ({FIELD_TYPE_LABELS.get(f.type, f.type)})" for f in cat.fields
        )
        n_fields = len(cat.fields)
        ctk.CTkLabel(
            card,
            text=f"{n_fields} field{'s' if n_fields != 1 else ''} · "
                 f"{item_count} item{'s' if item_count != 1 else ''}   {fields_text}",
            text_color="gray60", font=ctk.CTkFont(size=11), anchor="w",
            wraplength=700, justify="left",
        ).grid(row=1, column=0, padx=12, pady=(0, 8), sticky="w")

        btn_frame = ctk.CTkFrame(card, fg_color="transparent")
        btn_frame.grid(row=0, column=1, rowspan=2, padx=(4, 10), pady=6)

        ctk.CTkButton(
            btn_frame, text="Edit", width=60, height=26,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda c=cat: self._open_edit(c),
        ).pack(side="left", padx=(0, 4))

        ctk.CTkButton(
            btn_frame, text="Delete", width=65, height=26,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda c=cat, n=item_count: self._on_delete(c, n),
        ).pack(side="left")

    def _open_add(self):
        form = CategoryForm(self.winfo_toplevel(), self._svc)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("category")

    def _open_edit(self, cat: Category):
        form = CategoryForm(self.winfo_toplevel(), self._svc, category=cat)
        self.wait_window(form)
        if not form.saved:
            return
        result = form.migration
        if result is not None and not result.succeeded:
            self._show_banner(
                f"'{cat.name}' was saved, but {result.failed} of {result.matched} items "
                f"could not be updated. Save the category again to retry.",
                "warning",
            )
        elif result is not None and result.updated:
            self._show_banner(f"Updated {result.updated} item(s) in '{cat.name}'.", "success")
        self._notify_refresh("category")

    def _on_delete(self, cat: Category, item_count: int):
        dlg = DeleteCategoryDialog(self.winfo_toplevel(), cat.name, item_count)
        if dlg.result is None:
            return
        try:
            deleted = self._svc.delete(cat.key, cascade_delete_records=dlg.result)
        except CollectionError as e:
            self._show_banner(f"Could not delete '{cat.name}': {e}", "error")
            self._load()
            return
        if dlg.result:
            self._show_banner(f"Deleted '{cat.name}' and {deleted} item(s).", "info")
        else:
            self._show_banner(f"Deleted '{cat.name}'. Its items were kept.", "info")
        self._notify_refresh("category")

import customtkinter as ctk

from models.category import Category
from services.category_service import CategoryService
from services.migration_service import MigrationResult
from utils.constants import FIELD_TYPE_LABELS
from utils.errors import CollectionError

_TYPE_BY_LABEL = {label: type_ for type_, label in FIELD_TYPE_LABELS.items()}


class CategoryForm(ctk.CTkToplevel):
    """Add or edit a category and its field list."""

    def __init__(
        self,
        master,
        category_service: CategoryService,
        category: Category | None = None,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = category_service
        self._category = category
        self._field_rows: list[tuple[ctk.CTkFrame, ctk.StringVar, ctk.StringVar]] = []
        self.saved = False
        self.migration: MigrationResult | None = None

        self.title("Edit Category" if category else "New Category")
        self.resizable(False, True)
        self.grid_columnconfigure(1, weight=1)

        r = 0

        # Name
        ctk.CTkLabel(self, text="Name:").grid(
            row=r, column=0, padx=(16, 8), pady=(16, 4), sticky="e"
        )
        self._name_var = ctk.StringVar(value=category.name if category else "")
        ctk.CTkEntry(self, textvariable=self._name_var, width=260).grid(
            row=r, column=1, padx=(0, 16), pady=(16, 4), sticky="ew"
        )
        r += 1

        if category:
            ctk.CTkLabel(
                self, text=f"Key: {category.key} (fixed)",
                text_color="gray60", font=ctk.CTkFont(size=11), anchor="w",
            ).grid(row=r, column=1, padx=(0, 16), pady=(0, 4), sticky="w")
            r += 1

        # Fields
        ctk.CTkLabel(self, text="Fields:").grid(
            row=r, column=0, padx=(16, 8), pady=4, sticky="ne"
        )
        self._fields_frame = ctk.CTkScrollableFrame(self, width=360, height=200)
        self._fields_frame.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="nsew")
        self._fields_frame.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(r, weight=1)
        r += 1

        ctk.CTkButton(
            self, text="+ Add Field", width=110,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._add_field_row,
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        if category:
            for f in category.fields:
                self._add_field_row(f.label, f.type)
        else:
            self._add_field_row()

        # Migration switch (edits only)
        self._migrate_var = ctk.BooleanVar(value=True)
        if category:
            ctk.CTkSwitch(
                self, text="Update existing items to match the new fields",
                variable=self._migrate_var,
            ).grid(row=r, column=0, columnspan=2, padx=16, pady=(8, 4), sticky="w")
            r += 1

        # Error
        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=360, anchor="w",
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        # Buttons
        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        self._center()

    def _add_field_row(self, label: str = "", type_: str = "text"):
        row = ctk.CTkFrame(self._fields_frame, fg_color="transparent")
        row.grid(row=len(self._field_rows), column=0, sticky="ew", pady=2)
        row.grid_columnconfigure(0, weight=1)

        label_var = ctk.StringVar(value=label)
        ctk.CTkEntry(
            row, textvariable=label_var, width=170,
        ).grid(row=0, column=0, padx=(0, 4), sticky="ew")

        type_var = ctk.StringVar(value=FIELD_TYPE_LABELS.get(type_, FIELD_TYPE_LABELS["text"]))
        ctk.CTkComboBox(
            row, values=list(FIELD_TYPE_LABELS.values()), variable=type_var,
            width=140, state="readonly",
        ).grid(row=0, column=1, padx=4)

        entry = (row, label_var, type_var)
        ctk.CTkButton(
            row, text="Remove", width=64,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda e=entry: self._remove_field_row(e),
        ).grid(row=0, column=2, padx=(4, 0))

        self._field_rows.append(entry)

    def _remove_field_row(self, entry):
        self._field_rows.remove(entry)
        entry[0].destroy()
        for idx, (frame, _, _) in enumerate(self._field_rows):
            frame.grid_configure(row=idx)

    def _on_save(self):
        name = self._name_var.get().strip()
        rows = [
            (label_var.get(), _TYPE_BY_LABEL.get(type_var.get(), "text"))
            for _, label_var, type_var in self._field_rows
        ]
        try:
            fields = self._svc.build_fields(rows)
            if self._category:
                _, self.migration = self._svc.update(
                    self._category.key, name, fields, migrate=self._migrate_var.get()
                )
            else:
                self._svc.create(name, fields)
            self.saved = True
            self.destroy()
        except (ValueError, CollectionError) as e:
            self._error_var.set(str(e))

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")

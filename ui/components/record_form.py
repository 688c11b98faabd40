import customtkinter as ctk

from models.category import Category
from models.record import Record
from services.record_service import FormField, RecordService
from utils.coercion import edit_text, read_value
from utils.errors import CollectionError


class RecordForm(ctk.CTkToplevel):
    """Add an item to a category, or edit an existing item.

    Inputs are generated from the category's fields: a checkbox for boolean
    fields, an entry for text and number fields.
    """

    def __init__(
        self,
        master,
        record_service: RecordService,
        category: Category | None = None,
        record: Record | None = None,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = record_service
        self._category = category
        self._record = record
        self._vars: dict[str, ctk.Variable] = {}
        self.saved = False

        category_name = category.name if category else "Item"
        self.title(f"Edit {category_name}" if record else f"New {category_name}")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        if record:
            specs = self._svc.form_fields(record)
        else:
            specs = [FormField(f.name, f.label, f.type) for f in category.fields]

        r = 0
        for spec in specs:
            self._add_input(r, spec)
            r += 1

        # Error
        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=320, anchor="w",
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
        ctk.CTkButton(
            btn_frame, text="Save Changes" if record else "Save", width=110,
            command=self._on_save,
        ).pack(side="right")

        self.transient(master)
        self.grab_set()
        self._center()

    def _add_input(self, r: int, spec: FormField):
        label = spec.label if spec.in_schema else f"{spec.label} (not in category)"
        top_pad = 16 if r == 0 else 4
        if spec.type == "boolean":
            current = read_value("boolean", spec.value)
            var = ctk.BooleanVar(value=bool(current and current.value))
            ctk.CTkCheckBox(self, text=label, variable=var).grid(
                row=r, column=1, padx=(0, 16), pady=(top_pad, 4), sticky="w"
            )
        else:
            ctk.CTkLabel(self, text=f"{label}:").grid(
                row=r, column=0, padx=(16, 8), pady=(top_pad, 4), sticky="e"
            )
            var = ctk.StringVar(value=edit_text(spec.type, spec.value))
            ctk.CTkEntry(
                self, textvariable=var, width=240,
            ).grid(row=r, column=1, padx=(0, 16), pady=(top_pad, 4), sticky="ew")
        self._vars[spec.name] = var

    def _on_save(self):
        values = {name: var.get() for name, var in self._vars.items()}
        try:
            if self._record:
                self._svc.update(self._record.id, values)
            else:
                self._svc.create(self._category.key, values)
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

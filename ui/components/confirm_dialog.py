import customtkinter as ctk


class ConfirmDialog(ctk.CTkToplevel):
    """Yes/no confirmation dialog. Returns result via .result attribute."""

    def __init__(self, master, title: str, message: str, confirm_text: str = "Confirm", **kwargs):
        super().__init__(master, **kwargs)
        self.title(title)
        self.result = False
        self.resizable(False, False)

        self.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            self, text=message, wraplength=360, justify="left", padx=20, pady=16
        ).grid(row=0, column=0, sticky="ew")

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=1, column=0, pady=(0, 16), padx=20, sticky="e")

        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._on_cancel,
        ).pack(side="left", padx=(0, 8))

        ctk.CTkButton(
            btn_frame, text=confirm_text, width=90,
            fg_color="#F44336", hover_color="#D32F2F",
            command=self._on_confirm,
        ).pack(side="left")

        self.transient(master)
        self.grab_set()
        _center(self)
        self.wait_window()

    def _on_confirm(self):
        self.result = True
        self.destroy()

    def _on_cancel(self):
        self.result = False
        self.destroy()


class DeleteCategoryDialog(ctk.CTkToplevel):
    """Asks whether a category's items go with it.

    .result is None (cancelled), True (delete items too) or False (keep items).
    """

    def __init__(self, master, category_name: str, item_count: int, **kwargs):
        super().__init__(master, **kwargs)
        self.title("Delete Category")
        self.result: bool | None = None
        self.resizable(False, False)
        self.grid_columnconfigure(0, weight=1)

        noun = "item" if item_count == 1 else "items"
        ctk.CTkLabel(
            self,
            text=(
                f"Delete category \"{category_name}\"?\n\n"
                f"It currently has {item_count} {noun}. Delete them too, or keep them?"
            ),
            wraplength=360, justify="left", padx=20, pady=16,
        ).grid(row=0, column=0, sticky="ew")

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=1, column=0, pady=(0, 16), padx=20, sticky="e")

        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left", padx=(0, 8))

        ctk.CTkButton(
            btn_frame, text="Keep items", width=100,
            command=lambda: self._choose(False),
        ).pack(side="left", padx=(0, 8))

        ctk.CTkButton(
            btn_frame, text="Delete items too", width=120,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda: self._choose(True),
        ).pack(side="left")

        self.transient(master)
        self.grab_set()
        _center(self)
        self.wait_window()

    def _choose(self, delete_items: bool):
        self.result = delete_items
        self.destroy()


class ImportModeDialog(ctk.CTkToplevel):
    """Asks how an import treats the current collection.

    .result is None (cancelled), "merge" or "replace".
    """

    _CHOICES = (
        ("merge", "Merge: keep what is here, add what is new", {}),
        ("replace", "Replace: wipe this profile, then restore",
         {"fg_color": "#F44336", "hover_color": "#D32F2F"}),
    )

    def __init__(self, master, **kwargs):
        super().__init__(master, **kwargs)
        self.title("Import Collection")
        self.result: str | None = None
        self.resizable(False, False)
        self.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            self, text="How should the imported file be applied?",
            wraplength=320, padx=20, pady=16,
        ).grid(row=0, column=0, sticky="ew")

        for row, (mode, text, style) in enumerate(self._CHOICES, start=1):
            ctk.CTkButton(
                self, text=text, command=lambda m=mode: self._choose(m), **style,
            ).grid(row=row, column=0, padx=20, pady=4, sticky="ew")

        ctk.CTkButton(
            self, text="Cancel",
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).grid(row=len(self._CHOICES) + 1, column=0, padx=20, pady=(4, 16), sticky="ew")

        self.transient(master)
        self.grab_set()
        _center(self)
        self.wait_window()

    def _choose(self, mode: str):
        self.result = mode
        self.destroy()


def _center(window):
    window.update_idletasks()
    mw = window.master.winfo_x() + window.master.winfo_width() // 2
    mh = window.master.winfo_y() + window.master.winfo_height() // 2
    w, h = window.winfo_width(), window.winfo_height()
    window.geometry(f"+{mw - w//2}+{mh - h//2}")

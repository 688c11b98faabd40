import json
import customtkinter as ctk
from tkinter import filedialog, messagebox

from services.data_service import DataService, summarize_import
from services.settings_service import SettingsService
from ui.components.confirm_dialog import ImportModeDialog
from utils.app_config import get_data_folder, set_data_folder
from utils.constants import THEMES
from utils.errors import CollectionError

_HINT = {"text_color": "gray60", "anchor": "w"}
_OUTLINE = {"fg_color": "transparent", "border_width": 1, "text_color": ("gray10", "gray90")}
_JSON_TYPES = [("JSON files", "*.json"), ("All files", "*.*")]


class SettingsTab(ctk.CTkFrame):
    """Per-profile preferences plus backup and restore of the whole collection."""

    def __init__(
        self,
        master,
        settings_service: SettingsService,
        data_service: DataService,
        notify_refresh,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._settings = settings_service
        self._data_svc = data_service
        self._notify_refresh = notify_refresh

        self._folder_var = ctk.StringVar(value=get_data_folder())
        self._dark_var = ctk.BooleanVar()
        self._theme_var = ctk.StringVar()
        self._status_var = ctk.StringVar()

        self.grid_columnconfigure(0, weight=1)
        self._build_storage_card().grid(row=0, column=0, sticky="ew", padx=12, pady=(12, 6))
        self._build_backup_card().grid(row=1, column=0, sticky="ew", padx=12, pady=6)
        self._build_appearance_card().grid(row=2, column=0, sticky="ew", padx=12, pady=6)
        self._status = ctk.CTkLabel(self, textvariable=self._status_var, **_HINT)
        self._status.grid(row=3, column=0, sticky="w", padx=16, pady=(2, 12))

        self.refresh()

    def refresh(self):
        self._dark_var.set(bool(self._settings.get("dark_mode")))
        self._theme_var.set(self._settings.get("theme") or "default")
        ctk.set_appearance_mode(self._settings.appearance_mode())

    def _say(self, message: str, ok: bool = True):
        self._status.configure(text_color="#4CAF50" if ok else "#FF9800")
        self._status_var.set(message)

    # ── Cards ────────────────────────────────────────────────────────────────
    def _card(self, title: str, hint: str) -> ctk.CTkFrame:
        card = ctk.CTkFrame(self, corner_radius=8)
        card.grid_columnconfigure(0, weight=1)
        ctk.CTkLabel(card, text=title, anchor="w", font=ctk.CTkFont(size=14, weight="bold")) \
            .grid(row=0, column=0, columnspan=4, sticky="w", padx=12, pady=(10, 0))
        ctk.CTkLabel(card, text=hint, font=ctk.CTkFont(size=11), **_HINT) \
            .grid(row=1, column=0, columnspan=4, sticky="w", padx=12, pady=(0, 6))
        return card

    def _build_storage_card(self):
        card = self._card("Storage", "The database and each profile's files live in this folder.")
        ctk.CTkEntry(card, textvariable=self._folder_var, state="readonly") \
            .grid(row=2, column=0, sticky="ew", padx=(12, 4), pady=(0, 12))
        ctk.CTkButton(card, text="Browse…", width=90, command=self._browse_folder) \
            .grid(row=2, column=1, padx=4, pady=(0, 12))
        ctk.CTkButton(card, text="Use Default", width=100, command=lambda: self._move_folder(None),
                      **_OUTLINE).grid(row=2, column=2, padx=(4, 12), pady=(0, 12))
        return card

    def _build_backup_card(self):
        card = self._card("Backup", "Export everything in this profile, or restore from an export.")
        actions = (
            ("Export JSON", self._export_json, {}),
            ("Export CSV ZIP", self._export_csv, {}),
            ("Import JSON…", self._import_json, _OUTLINE),
        )
        row = ctk.CTkFrame(card, fg_color="transparent")
        row.grid(row=2, column=0, sticky="w", padx=8, pady=(0, 12))
        for text, command, style in actions:
            ctk.CTkButton(row, text=text, width=130, command=command, **style) \
                .pack(side="left", padx=4)
        return card

    def _build_appearance_card(self):
        card = self._card("Appearance", "Color theme changes apply after a restart.")
        ctk.CTkSwitch(card, text="Dark mode", variable=self._dark_var,
                      command=lambda: self._save_setting(dark_mode=self._dark_var.get())) \
            .grid(row=2, column=0, sticky="w", padx=12, pady=(0, 12))
        ctk.CTkComboBox(card, values=list(THEMES), variable=self._theme_var,
                        state="readonly", width=160,
                        command=lambda value: self._save_setting(theme=value)) \
            .grid(row=2, column=1, sticky="e", padx=12, pady=(0, 12))
        return card

    # ── Actions ──────────────────────────────────────────────────────────────
    def _browse_folder(self):
        path = filedialog.askdirectory(title="Choose data folder")
        if path:
            self._move_folder(path)

    def _move_folder(self, path: str | None):
        set_data_folder(path)
        self._folder_var.set(get_data_folder())
        self._say("Restart the app to use the new folder.", ok=False)

    def _save_setting(self, **changes):
        try:
            self._settings.update(**changes)
        except CollectionError as e:
            self._say(str(e), ok=False)
            return
        ctk.set_appearance_mode(self._settings.appearance_mode())
        self._say("Settings saved.")

    def _export_json(self):
        path = filedialog.asksaveasfilename(
            title="Export JSON", defaultextension=".json", filetypes=_JSON_TYPES,
        )
        if path:
            self._run_export(path, lambda: self._write_json(path))

    def _export_csv(self):
        path = filedialog.asksaveasfilename(
            title="Export CSV ZIP", defaultextension=".zip",
            filetypes=[("ZIP files", "*.zip"), ("All files", "*.*")],
        )
        if path:
            self._run_export(path, lambda: self._data_svc.export_csv_zip(path))

    def _write_json(self, path: str):
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self._data_svc.export_json(), f, indent=2, default=str)

    def _run_export(self, path: str, write):
        try:
            write()
        except (OSError, CollectionError) as e:
            messagebox.showerror("Export Failed", str(e))
            return
        self._say(f"Exported to {path}")

    def _import_json(self):
        path = filedialog.askopenfilename(title="Import JSON", filetypes=_JSON_TYPES)
        if not path:
            return
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            messagebox.showerror("Import Failed", f"Could not read file:\n{e}")
            return

        mode = ImportModeDialog(self.winfo_toplevel()).result
        if not mode:
            return
        try:
            stats = self._data_svc.import_json(data, mode)
        except CollectionError as e:
            messagebox.showerror("Import Failed", str(e))
            return
        self._notify_refresh("full")
        self._say(summarize_import(stats))

import customtkinter as ctk
from services.category_service import CategoryService
from services.data_service import DataService
from services.record_service import RecordService
from services.settings_service import SettingsService
from ui.components.alert_banner import AlertBanner
from ui.tabs.categories_tab import CategoriesTab
from ui.tabs.collection_tab import CollectionTab
from ui.tabs.settings_tab import SettingsTab
from utils.constants import APP_NAME, APP_WIDTH, APP_HEIGHT
from utils.errors import CollectionError


_REFRESH_SCOPES: dict[str, set[str]] = {
    "record":   {"collection", "categories"},
    "category": {"collection", "categories"},
    "settings": {"settings"},
    "full":     {"collection", "categories", "settings"},
}

_MAX_BANNERS = 3


class AppWindow(ctk.CTk):
    def __init__(
        self,
        record_service: RecordService,
        category_service: CategoryService,
        settings_service: SettingsService,
        data_service: DataService,
        profile: str = "",
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._record_svc = record_service
        self._cat_svc = category_service
        self._settings_svc = settings_service
        self._data_svc = data_service

        self.title(f"{APP_NAME} ({profile})" if profile else APP_NAME)
        self.minsize(APP_WIDTH, APP_HEIGHT)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_banner_area()
        self._build_tabs()

        try:
            first_run = not self._cat_svc.get_all()
        except CollectionError:
            first_run = False
        if first_run:
            self.after(200, lambda: self.show_banner(
                "Welcome! Create a category to start cataloging your collection.",
                "info",
                action_text="Categories",
                action_cmd=lambda: self._tabview.set("Categories"),
            ))

    def _build_banner_area(self):
        self._banner_frame = ctk.CTkFrame(self, fg_color="transparent", height=0)
        self._banner_frame.grid(row=0, column=0, sticky="ew", padx=8)

    def _build_tabs(self):
        self._tabview = ctk.CTkTabview(self)
        self._tabview.grid(row=1, column=0, sticky="nsew", padx=8, pady=(0, 8))

        for tab_name in ("Collection", "Categories", "Settings"):
            self._tabview.add(tab_name)
            self._tabview.tab(tab_name).grid_columnconfigure(0, weight=1)
            self._tabview.tab(tab_name).grid_rowconfigure(0, weight=1)

        self._collection_tab = CollectionTab(
            self._tabview.tab("Collection"),
            record_service=self._record_svc,
            category_service=self._cat_svc,
            notify_refresh=self.notify_tabs_refresh,
            show_banner=self.show_banner,
        )
        self._collection_tab.grid(row=0, column=0, sticky="nsew")

        self._categories_tab = CategoriesTab(
            self._tabview.tab("Categories"),
            category_service=self._cat_svc,
            notify_refresh=self.notify_tabs_refresh,
            show_banner=self.show_banner,
        )
        self._categories_tab.grid(row=0, column=0, sticky="nsew")

        self._settings_tab = SettingsTab(
            self._tabview.tab("Settings"),
            settings_service=self._settings_svc,
            data_service=self._data_svc,
            notify_refresh=self.notify_tabs_refresh,
        )
        self._settings_tab.grid(row=0, column=0, sticky="nsew")

    # ── Refresh ──────────────────────────────────────────────────────────────
    def notify_tabs_refresh(self, scope: str = "full"):
        tabs = _REFRESH_SCOPES.get(scope, _REFRESH_SCOPES["full"])
        if "collection" in tabs: self._collection_tab.refresh()
        if "categories" in tabs: self._categories_tab.refresh()
        if "settings"   in tabs: self._settings_tab.refresh()

    # ── Banners ──────────────────────────────────────────────────────────────
    def show_banner(self, message: str, severity: str = "info",
                    action_text: str | None = None, action_cmd=None):
        existing = self._banner_frame.winfo_children()
        for w in existing[: max(0, len(existing) - _MAX_BANNERS + 1)]:
            w.destroy()
        banner = AlertBanner(
            self._banner_frame,
            message=message,
            severity=severity,
            action_text=action_text,
            action_cmd=action_cmd,
        )
        banner.pack(fill="x", pady=2)

import tkinter as tk
from tkinter import ttk, filedialog, messagebox
import logging
import sys

from controllers.table_controller import TableController
from models.layout_config import ROW_LIMIT_OPTIONS
from services.host_interfaces import NullComponentResolver, NullVariableSource
from services.preset_service import PresetService
from ui.column_select_view import ColumnSelectView
from ui.dropdown_view import DropdownView
from ui.table_view import TableView
from ui.tk_measurement import TkMeasurementOracle

logger = logging.getLogger(__name__)

CUSTOM_SOURCE = "__custom__"
CUSTOM_SOURCE_LABEL = "📂 Cargar CSV propio..."


class MainWindow:
    def __init__(self):
        self.controller = TableController()
        self.presets = PresetService.list_presets()

        self.window = tk.Tk()
        self.window.title("CSV Table Composer")
        self.window.geometry("1200x760")
        self.window.protocol("WM_DELETE_WINDOW", self.on_closing)

        self.oracle = TkMeasurementOracle(self.window)
        self.resolver = NullComponentResolver()
        self.variables = NullVariableSource()

        body = ttk.Frame(self.window)
        body.pack(fill="both", expand=True, padx=10, pady=(10, 0))

        self.sidebar = ttk.Frame(body, width=340)
        self.sidebar.pack(side="left", fill="y")
        ttk.Separator(body, orient="vertical").pack(side="left", fill="y", padx=10)
        self.preview = TableView(body)
        self.preview.pack(side="left", fill="both", expand=True)

        self.status_frame = ttk.Frame(self.window, relief=tk.SUNKEN, padding=(5, 2))
        self.status_frame.pack(side="bottom", fill="x")
        self.lbl_status = ttk.Label(self.status_frame, text="Listo", anchor="w")
        self.lbl_status.pack(side="left", fill="x")
        self.progress = ttk.Progressbar(self.status_frame, mode='indeterminate', length=200)

        self._setup_sidebar()
        if self.presets:
            self.dd_source.select_value(self.presets[0].id)
            self.run_task("Cargando preset", lambda: self._load_preset(self.presets[0].id))

    def run_task(self, description, func):
        self.window.config(cursor="watch")
        self.lbl_status.config(text=f"⏳ {description}...")
        self.progress.pack(side="right", padx=10)
        self.progress.start(10)
        self.window.update()
        try:
            func()
            self.lbl_status.config(text="✅ Listo")
        except Exception as e:
            # Único aviso visible al usuario por tarea fallida
            logger.error("Tarea '%s' falló: %s", description, e)
            self.lbl_status.config(text="❌ Error")
            messagebox.showerror("Error", str(e))
        finally:
            self.progress.stop()
            self.progress.pack_forget()
            self.window.config(cursor="")

    def _setup_sidebar(self):
        parent = self.sidebar
        self.dd_source = DropdownView(parent, label="Origen CSV", on_select=self._on_source_select,
                                      placeholder="Seleccione un origen")
        self.dd_source.pack(fill="x", pady=(0, 5))
        self.dd_source.set_choices([(p.id, p.label) for p in self.presets] + [(CUSTOM_SOURCE, CUSTOM_SOURCE_LABEL)])

        self.columns_view = ColumnSelectView(parent, self.controller)
        self.columns_view.pack(fill="both", expand=True, pady=5)

        self.dd_rows = DropdownView(parent, label="Filas", width=6, on_select=self._on_row_limit_select)
        self.dd_rows.pack(fill="x", pady=5)
        self.dd_rows.set_choices(ROW_LIMIT_OPTIONS, selected=self.controller.get_options().row_limit)

        options = ttk.LabelFrame(parent, text="Opciones")
        options.pack(fill="x", pady=5)
        current = self.controller.get_options()
        self.var_checkboxes = tk.BooleanVar(value=current.include_checkboxes)
        self.var_card = tk.BooleanVar(value=current.place_within_card)
        self.var_page = tk.BooleanVar(value=current.place_within_page)
        ttk.Checkbutton(options, text="Incluir checkboxes", variable=self.var_checkboxes).pack(anchor="w", padx=5)
        ttk.Checkbutton(options, text="Dentro de tarjeta", variable=self.var_card).pack(anchor="w", padx=5)
        ttk.Checkbutton(options, text="Dentro de página", variable=self.var_page).pack(anchor="w", padx=5)

        ttk.Button(parent, text="▶ Generar tabla",
                   command=lambda: self.run_task("Generando tabla", self.generate)).pack(fill="x", pady=10)

    def _on_source_select(self, source):
        if source is None: return
        if source == CUSTOM_SOURCE:
            path = filedialog.askopenfilename(filetypes=[("CSV", "*.csv")])
            if not path: return
            self.run_task("Cargando archivo", lambda: self._after_load(self.controller.load_csv(path)))
            return
        self.run_task("Cargando preset", lambda: self._load_preset(source))

    def _load_preset(self, preset_id):
        self._after_load(self.controller.load_preset(preset_id))

    def _after_load(self, data):
        self.columns_view.refresh()
        self.preview.clear()
        if data.is_empty():
            messagebox.showwarning("Aviso", "El CSV no tiene encabezados.")

    def _on_row_limit_select(self, row_limit):
        if row_limit is not None:
            self.controller.set_row_limit(row_limit)

    def generate(self):
        if not self.controller.get_selected_headers():
            messagebox.showwarning("Aviso", "Seleccione al menos una columna.")
            return
        self.controller.set_options(
            include_checkboxes=self.var_checkboxes.get(),
            place_within_card=self.var_card.get(),
            place_within_page=self.var_page.get(),
        )
        result = self.controller.generate(self.oracle, self.resolver, self.variables)
        self.preview.show_result(result)

    def run(self):
        self.window.mainloop()

    def on_closing(self):
        if messagebox.askokcancel("Salir", "¿Seguro que quieres salir?"):
            self.window.destroy()
            sys.exit(0)

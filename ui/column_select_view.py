from tkinter import ttk

from models.table_model import SortDirection
from services.header_service import display_label

CHECK_ON = "☑"
CHECK_OFF = "☐"
SORT_ICONS = {SortDirection.ASCENDING: "↑", SortDirection.DESCENDING: "↓"}


class ColumnSelectView(ttk.Frame):
    """
    Lista de columnas con casilla de selección y flecha de orden.
    Clic en la casilla: incluir/excluir. Clic en la flecha: asc -> desc -> sin orden.
    """

    def __init__(self, parent, controller, on_change=None, *args, **kwargs):
        super().__init__(parent, *args, **kwargs)
        self.controller = controller
        self.on_change = on_change

        top = ttk.Frame(self)
        top.pack(fill="x")
        ttk.Label(top, text="Columnas", foreground="#7C7C7C").pack(side="left")
        ttk.Button(top, text="Todas", width=8, command=self._toggle_all).pack(side="right")

        self._tree = ttk.Treeview(self, columns=("sel", "label", "sort"), show="", height=8, selectmode="none")
        self._tree.column("sel", width=30, anchor="center", stretch=False)
        self._tree.column("label", width=220, anchor="w")
        self._tree.column("sort", width=30, anchor="center", stretch=False)
        self._tree.pack(fill="both", expand=True, pady=(4, 0))
        self._tree.bind("<Button-1>", self._on_click)

    def refresh(self):
        for r in self._tree.get_children(): self._tree.delete(r)
        selected = set(self.controller.get_selected_headers())
        sort = self.controller.get_sort_state()
        for header in self.controller.get_headers():
            mark = CHECK_ON if header in selected else CHECK_OFF
            arrow = SORT_ICONS.get(sort.direction, "") if sort.is_sorted_by(header) else ""
            self._tree.insert("", "end", iid=header, values=(mark, display_label(header), arrow))

    def _on_click(self, event):
        header = self._tree.identify_row(event.y)
        if not header: return
        column = self._tree.identify_column(event.x)
        if column == "#3":
            self.controller.cycle_sort(header)
        else:
            self.controller.toggle_header(header)
        self.refresh()
        if self.on_change: self.on_change()

    def _toggle_all(self):
        headers = self.controller.get_headers()
        all_selected = len(self.controller.get_selected_headers()) == len(headers)
        self.controller.set_selected_headers([] if all_selected else headers)
        self.refresh()
        if self.on_change: self.on_change()

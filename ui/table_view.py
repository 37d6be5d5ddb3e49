from tkinter import ttk

from models.composition_model import CompositionNode, NodeKind
from models.table_model import Alignment, GenerationResult, SortDirection

ANCHORS = {Alignment.LEFT: "w", Alignment.CENTER: "center", Alignment.RIGHT: "e"}
SORT_GLYPHS = {SortDirection.ASCENDING: " ↑", SortDirection.DESCENDING: " ↓"}
CHECKBOX_COLUMN = "__select__"


def node_text(node: CompositionNode) -> str:
    """Texto plano equivalente a una celda del árbol de composición."""
    if node.kind == NodeKind.TEXT:
        return str(node.props.get("text", ""))
    if node.kind == NodeKind.BADGE:
        value = str(node.props.get("value", ""))
        if node.name == "Boolean":
            return "✓" if value == "true" else "✗"
        return value
    if node.kind == NodeKind.TAG_GROUP:
        return " · ".join(str(tag.props.get("label", "")) for tag in node.children)
    if node.kind == NodeKind.ICON:
        return " / ".join(str(v) for v in (node.props.get("properties") or {}).values())
    return " ".join(node_text(c) for c in node.children)


class TableView(ttk.Frame):
    def __init__(self, parent, *args, **kwargs):
        super().__init__(parent, *args, **kwargs)
        control_frame = ttk.Frame(self)
        control_frame.pack(fill="x", pady=(0, 5))
        self.title_label = ttk.Label(control_frame, text="", font=("Arial", 11, "bold"))
        self.title_label.pack(side="left")
        self.status_label = ttk.Label(control_frame, text="")
        self.status_label.pack(side="right")
        tree_frame = ttk.Frame(self)
        tree_frame.pack(fill="both", expand=True)
        self._tree = ttk.Treeview(tree_frame, show="headings")
        self._tree.pack(side="left", fill="both", expand=True)
        self._scroll_y = ttk.Scrollbar(tree_frame, orient="vertical", command=self._tree.yview)
        self._scroll_y.pack(side="right", fill="y")
        self._tree.configure(yscrollcommand=self._scroll_y.set)
        self._scroll_x = ttk.Scrollbar(self, orient="horizontal", command=self._tree.xview)
        self._scroll_x.pack(side="bottom", fill="x")
        self._tree.configure(xscrollcommand=self._scroll_x.set)

    def clear(self):
        for r in self._tree.get_children(): self._tree.delete(r)
        self._tree["columns"] = ()
        self.status_label.config(text="")
        self.title_label.config(text="")

    def show_result(self, result: GenerationResult):
        self.clear()
        root = result.root
        table = root.find(NodeKind.TABLE)
        if table is None: return

        title = root.find(NodeKind.TITLE) or root.find(NodeKind.CARD_HEADER)
        if title is not None: self.title_label.config(text=node_text(title))

        with_checkboxes = root.find(NodeKind.FIXED_COLUMN) is not None
        ids = [f"c{i}" for i in range(len(result.columns))]
        if with_checkboxes: ids = [CHECKBOX_COLUMN] + ids
        self._tree["columns"] = tuple(ids)

        if with_checkboxes:
            self._tree.heading(CHECKBOX_COLUMN, text="☐")
            self._tree.column(CHECKBOX_COLUMN, anchor="center", width=40, stretch=False)

        header, *body = table.children_of_kind(NodeKind.ROW)
        for i, (column, cell) in enumerate(zip(result.columns, header.children)):
            label = column.display_label
            if result.sort_state.is_sorted_by(column.raw_header):
                label += SORT_GLYPHS.get(result.sort_state.direction, "")
            self._tree.heading(f"c{i}", text=label, anchor=ANCHORS[column.alignment])
            self._tree.column(f"c{i}", anchor=ANCHORS[column.alignment], width=cell.width or 80, stretch=False)

        for row in body:
            values = [node_text(cell) for cell in row.children]
            if with_checkboxes: values = ["☐"] + values
            self._tree.insert("", "end", values=tuple(values))

        self.status_label.config(
            text=f"{len(body)} filas · ancho {result.sizing.table_width}px · {sum(1 for _ in root.walk())} nodos"
        )

import tkinter as tk
import tkinter.font as tkfont
from typing import Dict, Optional

from models.table_model import SemanticKind
from services.host_interfaces import TextStyle


class TkMeasurementOracle:
    """
    Oráculo de medición con fuentes de Tk. Usa Inter si está instalada;
    si no, la fuente por defecto del sistema con los mismos tamaños.
    """

    STYLES = {
        TextStyle.HEADER: (14, "bold"),
        TextStyle.BODY: (12, "normal"),
        TextStyle.CHIP: (11, "normal"),
    }

    def __init__(self, root: tk.Misc, family: str = "Inter"):
        self.root = root
        if family not in tkfont.families(root):
            family = tkfont.nametofont("TkDefaultFont", root=root).actual("family")
        self.family = family
        self._fonts: Dict[TextStyle, tkfont.Font] = {}

    def font(self, style: TextStyle) -> tkfont.Font:
        if style not in self._fonts:
            size, weight = self.STYLES[style]
            self._fonts[style] = tkfont.Font(root=self.root, family=self.family, size=-size, weight=weight)
        return self._fonts[style]

    def measure_text(self, value: str, style: TextStyle) -> float:
        return float(self.font(style).measure(value or ""))

    def measure_representative(self, kind: SemanticKind, canonical_value: Optional[str]) -> Optional[float]:
        # Tk no tiene componentes del sistema de diseño
        return None

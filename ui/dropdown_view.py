from tkinter import ttk


class DropdownView(ttk.Frame):
    """
    Combobox readonly con etiqueta a la izquierda.
    Las opciones son pares (valor, texto); on_select recibe el valor, no el texto.
    """

    def __init__(self, parent, label=None, on_select=None, placeholder="Seleccione...", width=None, *args, **kwargs):
        super().__init__(parent, *args, **kwargs)
        self.on_select = on_select
        self.placeholder = placeholder
        self._values = {}

        if label:
            ttk.Label(self, text=label, foreground="#7C7C7C").pack(side="left", padx=(6, 0))
        self._combobox = ttk.Combobox(self, state="readonly", font=("Arial", 11), width=width)
        self._combobox.pack(fill="x", padx=6, pady=6)
        self._combobox.bind("<<ComboboxSelected>>", self._on_combobox_selected)
        self._combobox.set(placeholder)

    def set_choices(self, choices, selected=None):
        # choices: [(valor, texto)] o valores sueltos (texto = str(valor))
        pairs = [c if isinstance(c, tuple) else (c, str(c)) for c in choices or []]
        self._values = {text: value for value, text in pairs}
        self._combobox["values"] = [text for _, text in pairs]
        if not pairs:
            self._combobox.set("Sin opciones")
        elif selected is not None:
            self.select_value(selected)
        else:
            self._combobox.set(self.placeholder)

    def select_value(self, value):
        text = next((t for t, v in self._values.items() if v == value), None)
        self._combobox.set(text if text is not None else self.placeholder)

    def current_value(self):
        return self._values.get(self._combobox.get())

    def _on_combobox_selected(self, _event):
        if self.on_select:
            self.on_select(self.current_value())

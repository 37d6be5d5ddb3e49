class CSVData:
    """
    Representa el CSV en memoria:
      - columns: lista de encabezados crudos (con anotaciones [..])
      - rows: lista de dicts encabezado -> celda (orden = orden del CSV)
      - file_name: nombre de origen, usado para el título de página
    """
    def __init__(self, columns=None, rows=None, file_name=None):
        self.columns = columns or []
        self.rows = rows or []
        self.file_name = file_name

    def is_empty(self) -> bool:
        return not self.columns

import csv
import io
import logging
import os
import re
from typing import List

from models.csv_model import CSVData

logger = logging.getLogger(__name__)

_BRACKET_GROUP = re.compile(r"\[[^\]]*\]")
_QUOTED = re.compile(r'"(?:[^"]|"")*"')
_PIPE_PLACEHOLDER = "\ue000"


class CSVServiceError(Exception):
    pass


class CSVService:
    """
    Lector de CSV para el generador de tablas.
    - Soporta múltiples codificaciones (UTF-8, Latin-1).
    - Separador coma (por defecto) o barra vertical.
    - Comillas dobles con "" para comillas literales.
    - Nunca falla con texto vacío: devuelve un CSVData vacío.
    """

    ENCODINGS = ['utf-8-sig', 'utf-8', 'latin-1', 'cp1252']

    @staticmethod
    def read_csv(path: str) -> CSVData:
        # 1. Intentar leer con diferentes codificaciones
        text = None
        for enc in CSVService.ENCODINGS:
            try:
                with open(path, "r", encoding=enc, newline="") as f:
                    text = f.read()
                break  # Si lee bien, salimos del bucle
            except UnicodeDecodeError:
                continue
            except OSError as e:
                raise CSVServiceError(f"Error de lectura: {e}") from e

        if text is None:
            raise CSVServiceError("No se pudo decodificar el archivo (revise codificación).")

        data = CSVService.parse_text(text)
        data.file_name = os.path.basename(path)
        return data

    @staticmethod
    def parse_text(text: str) -> CSVData:
        lines = [line for line in text.replace("\r", "").split("\n") if line.strip()]
        if not lines:
            logger.debug("CSV vacío, se devuelve tabla sin columnas")
            return CSVData()

        # 1. Detectar delimitador basado en el encabezado
        delimiter = CSVService.detect_delimiter(lines[0])

        # 2. Parsear encabezado
        columns = CSVService._split_header(lines[0], delimiter)
        expected_cols = len(columns)

        # 3. Procesar filas
        rows = []
        for line in lines[1:]:
            cells = CSVService._split_line(line, delimiter)

            # CASO A: Faltan columnas (rellenar)
            if len(cells) < expected_cols:
                cells = cells + [""] * (expected_cols - len(cells))
            # CASO B: Sobran columnas (se descartan)
            elif len(cells) > expected_cols:
                logger.debug("Fila con %d celdas para %d columnas, se ignoran las sobrantes", len(cells), expected_cols)

            row = {}
            for i, header in enumerate(columns):
                row[header] = cells[i]
            rows.append(row)

        return CSVData(columns=columns, rows=rows)

    @staticmethod
    def detect_delimiter(header_line: str) -> str:
        # Los grupos [..] pueden llevar '|' (ej: [chips|r]); no cuentan
        bare = _BRACKET_GROUP.sub("", _QUOTED.sub("", header_line))
        if bare.count("|") > bare.count(","):
            return "|"
        return ","

    @staticmethod
    def _split_line(line: str, delimiter: str) -> List[str]:
        reader = csv.reader(io.StringIO(line), delimiter=delimiter, quotechar='"',
                            doublequote=True, skipinitialspace=True)
        try:
            cells = next(reader)
        except StopIteration:
            return []
        return [cell.strip() for cell in cells]

    @staticmethod
    def _split_header(line: str, delimiter: str) -> List[str]:
        if delimiter != "|":
            return CSVService._split_line(line, delimiter)
        # Proteger los '|' dentro de [..] antes de separar
        shielded = _BRACKET_GROUP.sub(lambda m: m.group(0).replace("|", _PIPE_PLACEHOLDER), line)
        return [cell.replace(_PIPE_PLACEHOLDER, "|") for cell in CSVService._split_line(shielded, delimiter)]

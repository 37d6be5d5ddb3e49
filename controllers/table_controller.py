import logging
from dataclasses import replace
from typing import List, Optional

from models.csv_model import CSVData
from models.layout_config import DEFAULT_KEYS, DEFAULT_LAYOUT, DEFAULT_ROW_LIMIT, DesignSystemKeys, LayoutConfig
from models.table_model import GenerationOptions, GenerationRequest, GenerationResult, SortState
from services.composition_service import TableCompositionBuilder
from services.csv_service import CSVService, CSVServiceError
from services.header_service import parse_headers
from services.host_interfaces import (
    ComponentResolver,
    MeasurementOracle,
    ResourceCatalog,
    VariableSource,
)
from services.preset_service import PresetService
from services.sizing_service import ColumnSizingEngine
from services.sort_service import sort_rows

logger = logging.getLogger(__name__)


class TableGenerationError(Exception):
    pass


class TableContext:
    def __init__(self):
        self.data: CSVData = CSVData()
        self.selected_headers: List[str] = []
        self.sort_state: SortState = SortState.none()
        self.options: GenerationOptions = GenerationOptions(row_limit=DEFAULT_ROW_LIMIT)


class TableController:
    """
    Orquesta el pipeline CSV -> encabezados -> orden -> anchos -> composición.
    El estado de la sesión vive aquí; cada generación arma una solicitud nueva.
    """

    def __init__(self, config: LayoutConfig = DEFAULT_LAYOUT, keys: DesignSystemKeys = DEFAULT_KEYS):
        self.context = TableContext()
        self.config = config
        self.keys = keys

    # --- LECTURA ---
    def load_csv(self, path: str) -> CSVData:
        try:
            data = CSVService.read_csv(path)
        except CSVServiceError:
            raise
        except Exception as e:
            raise CSVServiceError(f"Error inesperado al leer CSV: {e}") from e
        return self._set_data(data)

    def load_text(self, text: str, file_name: Optional[str] = None) -> CSVData:
        data = CSVService.parse_text(text)
        data.file_name = file_name
        return self._set_data(data)

    def load_preset(self, preset_id: str) -> CSVData:
        return self._set_data(PresetService.load_preset(preset_id))

    def _set_data(self, data: CSVData) -> CSVData:
        ctx = self.context
        ctx.data = data
        ctx.selected_headers = list(data.columns)
        ctx.sort_state = SortState.none()
        ctx.options = replace(ctx.options, file_name=data.file_name or "Table")
        logger.info("CSV cargado: %d columnas, %d filas", len(data.columns), len(data.rows))
        return data

    # --- SELECCIÓN Y OPCIONES ---
    def get_headers(self) -> List[str]:
        return list(self.context.data.columns)

    def get_selected_headers(self) -> List[str]:
        return list(self.context.selected_headers)

    def set_selected_headers(self, headers: List[str]):
        wanted = set(headers)
        # Se conserva el orden del CSV
        self.context.selected_headers = [h for h in self.context.data.columns if h in wanted]

    def toggle_header(self, header: str):
        selected = set(self.context.selected_headers)
        if header in selected:
            selected.remove(header)
        else:
            selected.add(header)
        self.set_selected_headers(list(selected))

    def get_sort_state(self) -> SortState:
        return self.context.sort_state

    def set_sort_state(self, sort_state: SortState):
        self.context.sort_state = sort_state

    def cycle_sort(self, header: str) -> SortState:
        self.context.sort_state = self.context.sort_state.cycle(header)
        return self.context.sort_state

    def get_options(self) -> GenerationOptions:
        return self.context.options

    def set_options(self, **changes) -> GenerationOptions:
        self.context.options = replace(self.context.options, **changes)
        return self.context.options

    def set_row_limit(self, row_limit: int) -> GenerationOptions:
        return self.set_options(row_limit=max(0, int(row_limit)))

    # --- GENERACIÓN ---
    def build_request(self) -> GenerationRequest:
        ctx = self.context
        headers = list(ctx.selected_headers)
        limit = ctx.options.row_limit
        # Copia filtrada: solo columnas seleccionadas y primeras N filas
        rows = [{h: row.get(h, "") for h in headers} for row in ctx.data.rows[:limit]]
        return GenerationRequest(columns=headers, rows=rows, sort_state=ctx.sort_state, options=ctx.options)

    def generate(self, oracle: MeasurementOracle, resolver: Optional[ComponentResolver] = None,
                 variables: Optional[VariableSource] = None,
                 request: Optional[GenerationRequest] = None) -> GenerationResult:
        request = request or self.build_request()
        try:
            return run_pipeline(request, oracle, resolver, variables, self.config, self.keys)
        except TableGenerationError:
            raise
        except Exception as e:
            logger.exception("Falló la generación de la tabla")
            raise TableGenerationError(f"No se pudo crear la tabla: {e}") from e


def run_pipeline(request: GenerationRequest, oracle: MeasurementOracle,
                 resolver: Optional[ComponentResolver] = None, variables: Optional[VariableSource] = None,
                 config: LayoutConfig = DEFAULT_LAYOUT, keys: DesignSystemKeys = DEFAULT_KEYS) -> GenerationResult:
    columns = parse_headers(request.columns)

    sort_state = request.sort_state
    if not sort_state.is_active or sort_state.by not in request.columns:
        sort_state = SortState.none()

    rows = sort_rows(columns, request.rows, sort_state)
    resources = ResourceCatalog.load(resolver, variables, keys)

    # La misma lista de columnas alimenta anchos y composición
    sizing = ColumnSizingEngine(oracle, config).compute(columns, rows, sort_state, resources)
    root = TableCompositionBuilder(config).compose(columns, rows, sizing, sort_state, request.options, resources)

    logger.info("Tabla generada: %d columnas, %d filas, ancho %d", len(columns), len(rows), sizing.table_width)
    return GenerationResult(root=root, sort_state=sort_state, columns=columns, rows=rows, sizing=sizing)

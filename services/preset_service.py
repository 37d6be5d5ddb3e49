import logging
import os
from dataclasses import dataclass
from typing import List, Optional

from models.csv_model import CSVData
from services.composition_service import humanize_file_name
from services.csv_service import CSVService, CSVServiceError

logger = logging.getLogger(__name__)

DEFAULT_PRESETS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "presets")


@dataclass(frozen=True)
class CsvPreset:
    id: str
    label: str
    path: str


class PresetService:
    """CSVs de ejemplo incluidos con la aplicación."""

    @staticmethod
    def list_presets(directory: Optional[str] = None) -> List[CsvPreset]:
        directory = directory or DEFAULT_PRESETS_DIR
        if not os.path.isdir(directory):
            logger.debug("No existe el directorio de presets %s", directory)
            return []
        presets = []
        for name in sorted(os.listdir(directory)):
            if not name.lower().endswith(".csv"):
                continue
            preset_id = os.path.splitext(name)[0]
            presets.append(CsvPreset(id=preset_id, label=humanize_file_name(name), path=os.path.join(directory, name)))
        return presets

    @staticmethod
    def load_preset(preset_id: str, directory: Optional[str] = None) -> CSVData:
        for preset in PresetService.list_presets(directory):
            if preset.id == preset_id:
                return CSVService.read_csv(preset.path)
        raise CSVServiceError(f"Preset '{preset_id}' no encontrado.")

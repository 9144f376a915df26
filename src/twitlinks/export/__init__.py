from .base import Exporter
from .xlsx import XLSXExporter
from .csv_export import CSVExporter

EXPORTERS = {
    'xlsx': XLSXExporter,
    'csv': CSVExporter,
}

__all__ = ['Exporter', 'XLSXExporter', 'CSVExporter', 'EXPORTERS']

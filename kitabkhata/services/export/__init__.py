"""Export collaborator."""

from kitabkhata.services.export.csv_export import (
    CSV_HEADER,
    backup_filename,
    export_csv,
    write_csv,
)

__all__ = ["CSV_HEADER", "backup_filename", "export_csv", "write_csv"]

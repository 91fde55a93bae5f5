from .encounter_files import (
    EXPORT_COLUMNS, encounter_export_rows, write_encounter_file,
    write_all_encounter_files, write_descriptives,
)

__all__ = ['EXPORT_COLUMNS', 'encounter_export_rows', 'write_encounter_file',
           'write_all_encounter_files', 'write_descriptives']

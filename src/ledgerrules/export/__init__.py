"""Rule set renderers."""

from ledgerrules.export.csv_export import export_rules_csv
from ledgerrules.export.json_export import export_result_json

__all__ = ["export_rules_csv", "export_result_json"]

# Export module
# Outputs recognized plans:
# - Text records (walls, rooms)
# - JSON recognition result
# - Scene description for mesh builders
# - Planning project payload

from .exporter import ExportFormat, OutputFormatter, ParsedWall, PlanExporter, project_payload

__all__ = ["ExportFormat", "OutputFormatter", "ParsedWall", "PlanExporter", "project_payload"]

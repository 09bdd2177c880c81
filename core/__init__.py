"""
Core package — The dump pipeline modules.

  orchestrator.py        Run coordination (target resolution, results)
  wbem_client.py         Intrinsic CIM operations over pywbem
  cim_objects.py         Instance paths, instances and qualifier records
  namespace_exporter.py  Qualifier types and classes of one namespace
  class_exporter.py      One class definition, then its instances
  instance_exporter.py   Deduplicated instance fetches of one class
"""

from .orchestrator import DumpOrchestrator
from .wbem_client import WBEMClient
from .cim_objects import CimInstance, InstancePath, QualifierDeclaration
from .namespace_exporter import NamespaceExporter, NamespaceResult
from .class_exporter import ClassExporter, ClassExportResult
from .instance_exporter import InstanceExporter, InstanceExportResult

"""
Class Exporter — Dumps one class definition, then its instances.

The definition (with qualifiers, class origin and inherited members) is written
verbatim to {ns}/{ClassName}.xml. A failed definition fetch does not stop the
instance export for the same class; the two are independent best-effort steps.
"""

from dataclasses import dataclass, field
from typing import Optional

from wbem_dump_shared import DumpError, InstanceCache, OutputManager, describe, is_fatal, is_ignorable

from .instance_exporter import InstanceExporter, InstanceExportResult
from .wbem_client import WBEMClient


@dataclass
class ClassExportResult:
    class_name: str
    definition_written: bool = False
    definition_error: Optional[str] = None
    instances: Optional[InstanceExportResult] = field(default=None)


class ClassExporter:
    """Exports a class definition and delegates to InstanceExporter."""

    def __init__(
        self,
        client: WBEMClient,
        output: OutputManager,
        instance_exporter: Optional[InstanceExporter] = None,
        timeout: float = 30,
        debug: bool = False,
    ):
        self.client = client
        self.output = output
        self.timeout = timeout
        self.debug = debug
        self.instance_exporter = instance_exporter or InstanceExporter(client, output, timeout, debug)

    def export(self, namespace: str, class_name: str, cache: InstanceCache) -> ClassExportResult:
        result = ClassExportResult(class_name=class_name)

        try:
            class_xml = self.client.get_class(
                namespace,
                class_name,
                local_only=False,
                include_qualifiers=True,
                include_class_origin=True,
                timeout=self.timeout,
            )
        except DumpError as e:
            if is_fatal(e):
                raise
            result.definition_error = str(e)
            if not is_ignorable(e) or self.debug:
                print(f"  Warning: failed to get class {class_name}: {describe(e)}")
        else:
            self.output.write_class_definition(namespace, class_name, class_xml)
            result.definition_written = True

        result.instances = self.instance_exporter.export(namespace, class_name, cache)
        return result

"""
Namespace Exporter — Dumps everything one namespace exposes.

Steps, each isolated from the failures of the previous one:

  1. Qualifier types -> {ns}/qa.xml (only when at least one exists)
  2. Class names (deep). None, or NOT_SUPPORTED / EMPTY_RESULT, ends the
     namespace quietly; other errors are printed first.
  3. A fresh InstanceCache for this namespace.
  4. ClassExporter for each class name, in enumeration order.
  5. Every failed instance fetch recorded in the cache is printed.

In class-names-only mode the names are printed after step 2 and nothing is
written.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from wbem_dump_shared import DumpError, InstanceCache, OutputManager, describe, is_fatal, is_ignorable

from .class_exporter import ClassExporter, ClassExportResult
from .wbem_client import WBEMClient


@dataclass
class NamespaceResult:
    namespace: str
    qualifiers: int = 0
    class_names: List[str] = field(default_factory=list)
    classes: List[ClassExportResult] = field(default_factory=list)
    failed_instances: int = 0
    error: Optional[str] = None

    def to_summary(self) -> dict:
        return {
            "namespace": self.namespace,
            "qualifiers": self.qualifiers,
            "classes": len(self.class_names),
            "definitions_written": sum(1 for c in self.classes if c.definition_written),
            "instances_written": sum(c.instances.written for c in self.classes if c.instances),
            "failed_instances": self.failed_instances,
            "class_enumeration_errors": sum(
                1 for c in self.classes if c.instances and c.instances.enumeration_error
            ),
            "error": self.error,
        }


class NamespaceExporter:
    """Exports qualifier types, classes and instances of one namespace."""

    def __init__(
        self,
        client: WBEMClient,
        output: OutputManager,
        class_exporter: Optional[ClassExporter] = None,
        only_class_names: bool = False,
        timeout: float = 30,
        debug: bool = False,
    ):
        self.client = client
        self.output = output
        self.only_class_names = only_class_names
        self.timeout = timeout
        self.debug = debug
        self.class_exporter = class_exporter or ClassExporter(client, output, timeout=timeout, debug=debug)

    def export(self, namespace: str) -> NamespaceResult:
        result = NamespaceResult(namespace=namespace)

        if not self.only_class_names:
            self._export_qualifiers(namespace, result)

        try:
            class_names = self.client.enumerate_class_names(namespace, deep=True, timeout=self.timeout)
        except DumpError as e:
            if is_fatal(e):
                raise
            if not is_ignorable(e):
                print(f"  Warning: failed to enumerate class names: {describe(e)}")
                result.error = str(e)
            return result

        if not class_names:
            print("  No class definitions")
            return result
        result.class_names = class_names

        if self.only_class_names:
            print(f"  Classes in {namespace}:")
            for class_name in class_names:
                print(f"    {class_name}")
            return result

        print(f"  {len(class_names)} classes in {namespace}")
        cache = InstanceCache()
        for class_name in class_names:
            result.classes.append(self.class_exporter.export(namespace, class_name, cache))

        for key, error in cache.failures():
            print(f"  {key} get failed: {error}")
        result.failed_instances = cache.failure_count
        return result

    def _export_qualifiers(self, namespace: str, result: NamespaceResult):
        try:
            qualifiers = self.client.enumerate_qualifier_types(namespace, timeout=self.timeout)
        except DumpError as e:
            if is_fatal(e):
                raise
            print(f"  Warning: enumerating qualifier types failed: {describe(e)}")
            return

        result.qualifiers = len(qualifiers)
        if qualifiers:
            path = self.output.write_qualifiers(namespace, [q.xml for q in qualifiers])
            if self.debug:
                print(f"  Saved {len(qualifiers)} qualifier types: {path}")
